# sitemark/markdown/postprocessors/code_highlighter.py
"""
Postprocessor that highlights fenced code blocks.

This postprocessor:
- Finds every <pre><code> block in the rendered HTML
- Reads its language and fence meta string
- Runs the configured transformer pipeline over it
- Replaces the block with the rendered <figure class="code-block">

Pandoc output it understands:
    <pre class="python" data-meta="title%3D%22a.py%22"><code>...</code></pre>

    <div class="sourceCode" data-meta="..."><pre class="sourceCode python">
        <code class="sourceCode python">...</code></pre></div>

    <pre><code class="language-python">...</code></pre>

A block that fails to transform is logged and left as it was.
"""

import logging
import urllib.parse

from bs4 import BeautifulSoup, Tag

from ..highlight import CodeBlock, apply_transformers, build_pipeline, render_code_block
from ..highlight.themes import validate_themes
from .utils import get_shared_soup, soup_to_html

logger = logging.getLogger(__name__)

_IGNORED_CLASSES = {"sourceCode", "numberSource", "numberLines", "code"}


def _classes(node) -> list:
    if node is None:
        return []
    classes = node.get("class", [])
    if isinstance(classes, str):
        classes = classes.split()
    return classes


def _container(pre: Tag) -> Tag:
    """Outermost element belonging to the block (Pandoc's sourceCode div)."""
    parent = pre.parent
    if isinstance(parent, Tag) and parent.name == "div" and "sourceCode" in _classes(parent):
        return parent
    return pre


def _language(pre: Tag, code: Tag, container: Tag):
    for node in (code, pre, container):
        lang = node.get("data-lang")
        if lang:
            return urllib.parse.unquote(lang)

    for node in (code, pre):
        for cls in _classes(node):
            if cls.startswith("language-"):
                return cls[len("language-"):] or None

    for node in (code, pre):
        for cls in _classes(node):
            if cls not in _IGNORED_CLASSES:
                return cls
    return None


def _meta(pre: Tag, code: Tag, container: Tag) -> str:
    for node in (code, pre, container):
        meta = node.get("data-meta")
        if meta:
            return urllib.parse.unquote(meta)
    return ""


def _is_rendered(pre: Tag) -> bool:
    parent = pre.parent
    return (
        isinstance(parent, Tag)
        and parent.name == "figure"
        and "code-block" in _classes(parent)
    )


def highlight_code_blocks(soup: BeautifulSoup, pipeline: list, themes: dict) -> BeautifulSoup:
    """Transform and render every code block of ``soup`` in place."""
    rendered = 0
    for pre in soup.find_all("pre"):
        code = pre.find("code")
        if code is None or _is_rendered(pre):
            continue

        container = _container(pre)
        language = _language(pre, code, container)
        source = code.get_text()
        if source.endswith("\n"):
            source = source[:-1]

        try:
            block = CodeBlock.from_source(
                source,
                language=language,
                meta=_meta(pre, code, container),
                themes=themes,
            )
            block = apply_transformers(block, pipeline)
            figure = render_code_block(block)
        except Exception as e:
            logger.warning(
                f"Code block ({language or 'text'}) left unhighlighted: {e}",
                exc_info=True,
            )
            continue

        container.replace_with(figure)
        rendered += 1

    logger.debug(f"Highlighted {rendered} code blocks")
    return soup


def code_highlighter(transformers=(), themes=None):
    """
    Build the code highlighting postprocessor.

    The transformer pipeline and themes are validated here, before any
    document is processed.
    """
    themes = validate_themes(themes)
    pipeline = build_pipeline(transformers, themes)

    def code_highlighter_postprocessor(html: str, context: dict) -> str:
        soup = get_shared_soup(html, context)
        highlight_code_blocks(soup, pipeline, themes)
        return soup_to_html(context, soup)

    return code_highlighter_postprocessor
