# sitemark/markdown/postprocessors/autolink_headings.py
"""
Postprocessor that adds self-links to headings.

This postprocessor:
- Adds an <a href="#id"> anchor to every heading (h1-h6) that has an id
- Places the anchor inside the heading (append/prepend), next to it
  (before/after) or around its content (wrap)
- Skips headings without an id, they cannot be linked
- Never adds a second anchor to a heading that already has one

Expected structure (behavior="append", class_name=["anchor"], content="#"):
    <h2 id="intro">Intro</h2>

    Output:
        <h2 id="intro">Intro<a class="anchor" href="#intro">#</a></h2>
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Mapping, Tuple, Union

from bs4 import BeautifulSoup, NavigableString, Tag

from ...exceptions import ConfigurationError
from .utils import get_shared_soup, soup_to_html

logger = logging.getLogger(__name__)

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
BEHAVIORS = ("append", "prepend", "before", "after", "wrap")


@dataclass(frozen=True)
class AnchorOptions:
    behavior: str = "append"
    class_name: Tuple[str, ...] = ("anchor",)
    content: Union[str, Mapping, Tag] = "#"
    properties: Mapping[str, str] = field(default_factory=dict)


def validate_anchor_options(
    behavior="append",
    class_name=("anchor",),
    content="#",
    properties=None,
) -> AnchorOptions:
    """
    Check anchor options and return them as an immutable AnchorOptions.

    The class names double as the sentinel that marks a heading as already
    processed, so at least one is required.

    Raises:
        ConfigurationError: if any option value is malformed
    """
    if behavior not in BEHAVIORS:
        raise ConfigurationError(
            f"Unknown anchor behavior {behavior!r}, expected one of {', '.join(BEHAVIORS)}"
        )

    if isinstance(class_name, str):
        class_name = class_name.split()
    elif isinstance(class_name, (set, frozenset)):
        class_name = sorted(class_name)
    if not isinstance(class_name, (list, tuple, set, frozenset)):
        raise ConfigurationError("class_name must be a string or a list of strings")
    class_name = tuple(class_name)
    if not class_name or not all(isinstance(c, str) and c.strip() for c in class_name):
        raise ConfigurationError("class_name must contain at least one non-empty string")

    if isinstance(content, Mapping):
        if content.get("type") not in ("text", "html") or not isinstance(
            content.get("value"), str
        ):
            raise ConfigurationError(
                'content mapping must look like {"type": "text" | "html", "value": str}'
            )
        content = dict(content)
    elif not isinstance(content, (str, Tag)):
        raise ConfigurationError("content must be a string, a mapping or a Tag")

    properties = dict(properties or {})
    for key, value in properties.items():
        if key in ("href", "class") or not isinstance(value, str):
            raise ConfigurationError(f"Invalid anchor property {key!r}")

    return AnchorOptions(
        behavior=behavior,
        class_name=class_name,
        content=content,
        properties=properties,
    )


def _content_nodes(content) -> list:
    """Build fresh content nodes, one copy per heading."""
    if isinstance(content, str):
        return [NavigableString(content)]
    if isinstance(content, Tag):
        return [copy.copy(content)]
    if content["type"] == "text":
        return [NavigableString(content["value"])]
    fragment = BeautifulSoup(content["value"], "html.parser")
    return list(fragment.contents)


def _is_anchor(node, href: str, options: AnchorOptions) -> bool:
    if not isinstance(node, Tag) or node.name != "a":
        return False
    classes = node.get("class", [])
    if isinstance(classes, str):
        classes = classes.split()
    return node.get("href") == href and all(c in classes for c in options.class_name)


def _next_tag(node, reverse=False):
    """Return the nearest sibling skipping whitespace-only text."""
    sibling = node.previous_sibling if reverse else node.next_sibling
    while isinstance(sibling, NavigableString) and not str(sibling).strip():
        sibling = sibling.previous_sibling if reverse else sibling.next_sibling
    return sibling


def _has_anchor(heading: Tag, href: str, options: AnchorOptions) -> bool:
    behavior = options.behavior
    if behavior == "before":
        return _is_anchor(_next_tag(heading, reverse=True), href, options)
    if behavior == "after":
        return _is_anchor(_next_tag(heading), href, options)
    if behavior == "wrap":
        children = [c for c in heading.contents if not (
            isinstance(c, NavigableString) and not str(c).strip()
        )]
        return len(children) == 1 and _is_anchor(children[0], href, options)
    return any(_is_anchor(child, href, options) for child in heading.children)


def _build_anchor(soup: BeautifulSoup, href: str, options: AnchorOptions) -> Tag:
    anchor = soup.new_tag("a")
    anchor["class"] = list(options.class_name)
    anchor["href"] = href
    for key, value in options.properties.items():
        anchor[key] = value
    return anchor


def inject_heading_anchors(soup: BeautifulSoup, options: AnchorOptions) -> BeautifulSoup:
    """
    Add an anchor link to every heading of ``soup`` that has an id.

    The tree is modified in place and returned. ``options`` is never
    mutated, so a single instance can serve many documents.
    """
    injected = 0
    for heading in soup.find_all(HEADING_TAGS):
        heading_id = heading.get("id")
        if not heading_id:
            continue

        href = f"#{heading_id}"
        if _has_anchor(heading, href, options):
            continue

        anchor = _build_anchor(soup, href, options)

        if options.behavior == "wrap":
            for child in list(heading.contents):
                anchor.append(child.extract())
            heading.append(anchor)
        else:
            for node in _content_nodes(options.content):
                anchor.append(node)
            if options.behavior == "append":
                heading.append(anchor)
            elif options.behavior == "prepend":
                heading.insert(0, anchor)
            elif options.behavior == "before":
                heading.insert_before(anchor)
            else:
                heading.insert_after(anchor)
        injected += 1

    logger.debug(f"Injected {injected} heading anchors")
    return soup


def autolink_headings(**options):
    """
    Build the heading anchor postprocessor.

    Options are validated here, before any document is processed.
    """
    anchor_options = validate_anchor_options(**options)

    def autolink_headings_postprocessor(html: str, context: dict) -> str:
        soup = get_shared_soup(html, context)
        inject_heading_anchors(soup, anchor_options)
        return soup_to_html(context, soup)

    return autolink_headings_postprocessor
