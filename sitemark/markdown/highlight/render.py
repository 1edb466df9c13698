# sitemark/markdown/highlight/render.py
"""
Turn a transformed CodeBlock into HTML.

Output structure:
    <figure class="code-block has-title" data-language="python">
        <div class="code-title">example.py</div>          (header decorations)
        <pre class="code" style="..."><code>
            <span class="line added"><span style="...">import</span> os</span>
            <span class="line">...</span>
        </code></pre>
        <span class="code-language">python</span>          (footer decorations)
        <button class="copy" ...>...</button>
    </figure>
"""

import logging

from bs4 import NavigableString, Tag
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from .block import CodeBlock
from .themes import format_style, lookup

logger = logging.getLogger(__name__)


def get_lexer(language):
    """Pygments lexer for ``language``, plain text when unknown."""
    options = {"stripnl": False, "ensurenl": False}
    if language:
        try:
            return get_lexer_by_name(language, **options)
        except ClassNotFound:
            logger.debug(f"No lexer for language {language!r}, using plain text")
    return TextLexer(**options)


def tokenize_lines(block: CodeBlock) -> list:
    """
    Split the block source into per-line ``(token type, text)`` lists.

    Falls back to one plain token per line if the lexer does not give the
    source back unchanged.
    """
    source = block.source
    tokens = list(get_lexer(block.language).get_tokens(source))

    if "".join(value for _, value in tokens) != source:
        logger.debug("Lexer altered the source, rendering without highlighting")
        return [[(None, line.text)] for line in block.lines]

    lines = [[]]
    for ttype, value in tokens:
        parts = value.split("\n")
        for index, part in enumerate(parts):
            if index:
                lines.append([])
            if part:
                lines[-1].append((ttype, part))
    return lines


def render_code_block(block: CodeBlock) -> Tag:
    figure_classes = ["code-block"] + block.classes
    figure = block.new_tag(
        "figure",
        {"class": figure_classes, "data-language": block.language or "text"},
    )

    for node in block.decorations_at("header"):
        figure.append(node)

    pre_attrs = {"class": ["code"]}
    if block.pre_style:
        pre_attrs["style"] = format_style(block.pre_style)
    pre = block.new_tag("pre", pre_attrs)
    code = block.new_tag("code")

    token_lines = tokenize_lines(block)
    for index, (line, tokens) in enumerate(zip(block.lines, token_lines)):
        if index:
            code.append(NavigableString("\n"))
        span = block.new_tag("span", {"class": ["line"] + line.classes})
        for ttype, value in tokens:
            declarations = lookup(block.palette, ttype) if ttype is not None else {}
            if declarations:
                span.append(block.new_tag("span", {"style": format_style(declarations)}, value))
            else:
                span.append(NavigableString(value))
        code.append(span)

    pre.append(code)
    figure.append(pre)

    for node in block.decorations_at("footer"):
        figure.append(node)

    return figure
