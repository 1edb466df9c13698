"""Shared BeautifulSoup tree for the postprocessors of one render."""

from __future__ import annotations

from bs4 import BeautifulSoup

_SHARED_SOUP_KEY = "__shared_soup"
_SHARED_SOURCE_KEY = "__shared_soup_source"


def get_shared_soup(html: str, context: dict) -> BeautifulSoup:
    """Return the parsed tree for ``html``, reusing the one in ``context``.

    Postprocessors run back to back on the same document, so the tree left
    behind by the previous one is reused as long as the HTML it serialised
    to is what we are given now. Anything else forces a fresh parse.
    """
    soup = context.get(_SHARED_SOUP_KEY)
    source = context.get(_SHARED_SOURCE_KEY)
    if soup is None or source != html:
        soup = BeautifulSoup(html, "html.parser")
        context[_SHARED_SOUP_KEY] = soup
        context[_SHARED_SOURCE_KEY] = html
    return soup


def soup_to_html(context: dict, soup: BeautifulSoup | None = None) -> str:
    """Serialise the shared soup and remember the result as its source."""
    if soup is None:
        soup = context.get(_SHARED_SOUP_KEY)
    html = str(soup) if soup is not None else ""
    context[_SHARED_SOURCE_KEY] = html
    context[_SHARED_SOUP_KEY] = soup
    return html


def clear_shared_soup(context: dict) -> None:
    """Drop the cached tree so the context can be reused for another page."""
    context.pop(_SHARED_SOUP_KEY, None)
    context.pop(_SHARED_SOURCE_KEY, None)
