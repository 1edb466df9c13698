# sitemark/markdown/postprocessors/heading_ids.py
"""
Postprocessor that gives every heading an id.

Pandoc already assigns ids to markdown headings, but raw HTML headings and
headings with auto_identifiers disabled come through without one. The anchor
injector can only link headings that have an id, so this runs first.

- Existing ids are never changed
- New ids are slugs of the heading text
- Duplicate slugs get -1, -2, ... suffixes
"""

import logging
import re
import unicodedata

from bs4 import BeautifulSoup

from .autolink_headings import HEADING_TAGS
from .utils import get_shared_soup, soup_to_html

logger = logging.getLogger(__name__)


def slugify(text: str) -> str:
    """
    Slug for heading ids.

    Keeps unicode word characters so non-latin headings still get a
    readable id.
    """
    text = unicodedata.normalize("NFKC", str(text)).strip().lower()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"\s+", "-", text)
    return text.strip("-")


def assign_heading_ids(soup: BeautifulSoup) -> BeautifulSoup:
    """Assign ids to headings of ``soup`` that lack one, in place."""
    used = {tag["id"] for tag in soup.find_all(id=True)}
    assigned = 0

    for heading in soup.find_all(HEADING_TAGS):
        if heading.get("id"):
            continue

        base = slugify(heading.get_text()) or "section"
        slug = base
        counter = 0
        while slug in used:
            counter += 1
            slug = f"{base}-{counter}"

        heading["id"] = slug
        used.add(slug)
        assigned += 1

    logger.debug(f"Assigned {assigned} heading ids")
    return soup


def heading_ids(html: str, context: dict) -> str:
    soup = get_shared_soup(html, context)
    assign_heading_ids(soup)
    return soup_to_html(context, soup)
