# sitemark/markdown/highlight/transformers.py
"""
Code block transformers.

Each public factory here returns a transformer: a callable taking a CodeBlock
and returning it. A pipeline is an ordered list of transformers applied one
after the other; the order is the configured one and is never rearranged,
so the copy button should come last to see the final text.

Available transformers (config name -> factory):
- notation_diff: transformer_notation_diff
- notation_highlight: transformer_notation_highlight
- update_style: update_style
- add_title: add_title
- add_language: add_language
- add_copy_button: add_copy_button
"""

import inspect
import logging
import re
from typing import Callable, Dict, List

from bs4 import BeautifulSoup

from ...exceptions import ConfigurationError
from .block import CodeBlock, parse_line_ranges
from .themes import validate_themes

logger = logging.getLogger(__name__)

Transformer = Callable[[CodeBlock], CodeBlock]

# Trailing "[!code ++]" style comment, with an optional ":N" line count
_NOTATION = re.compile(
    r"\s*(?:(?://|#|--|;|%|/\*|<!--)\s*)?"
    r"\[!code\s+([\w+-]+)(?::(\d+))?\]"
    r"\s*(?:\*/|-->)?\s*$"
)

_DIFF_MARKERS = {"+": "added", "-": "removed", " ": None}

COPY_ICON = '<svg class="copy-icon" xmlns="http://www.w3.org/2000/svg" viewBox="0 0 448 512"><path d="M433.941 65.941l-51.882-51.882A48 48 0 0 0 348.118 0H176c-26.51 0-48 21.49-48 48v48H48c-26.51 0-48 21.49-48 48v320c0 26.51 21.49 48 48 48h224c26.51 0 48-21.49 48-48v-48h80c26.51 0 48-21.49 48-48V99.882a48 48 0 0 0-14.059-33.941zM266 464H54a6 6 0 0 1-6-6V150a6 6 0 0 1 6-6h74v224c0 26.51 21.49 48 48 48h96v42a6 6 0 0 1-6 6zm128-96H182a6 6 0 0 1-6-6V54a6 6 0 0 1 6-6h106v88c0 13.255 10.745 24 24 24h88v202a6 6 0 0 1-6 6zm6-256h-64V48h9.632c1.591 0 3.117.632 4.243 1.757l48.368 48.368a6 6 0 0 1 1.757 4.243V112z"></path></svg>'
CHECK_ICON = '<svg class="check-icon" xmlns="http://www.w3.org/2000/svg" viewBox="0 0 448 512"><path d="M438.6 105.4c12.5 12.5 12.5 32.8 0 45.3l-256 256c-12.5 12.5-32.8 12.5-45.3 0l-128-128c-12.5-12.5-12.5-32.8 0-45.3s32.8-12.5 45.3 0L160 338.7 393.4 105.4c12.5-12.5 32.8-12.5 45.3 0z"></path></svg>'


def _apply_notation(block: CodeBlock, classes: Dict[str, str]) -> int:
    """Strip matching notation comments and mark the lines they cover."""
    marked = 0
    for index, line in enumerate(block.lines):
        match = _NOTATION.search(line.text)
        if not match or match.group(1) not in classes:
            continue
        line.text = line.text[: match.start()]
        count = int(match.group(2) or 1)
        for target in block.lines[index : index + count]:
            target.add_class(classes[match.group(1)])
        marked += 1
    return marked


def _is_diff_block(block: CodeBlock) -> bool:
    """
    Whether the lines carry a leading diff column.

    Only for an explicit ``diff`` meta flag, or when some line starts with
    ``+`` and every non-blank line starts with ``+``, ``-`` or a space.
    Real ``diff`` sources are left alone, their markers are syntax, and so
    are markdown sources, where ``+`` and ``-`` start list items.
    """
    if block.attributes.get("diff") is True:
        return True
    if (block.language or "").lower() in ("diff", "patch", "markdown", "md"):
        return False
    texts = [line.text for line in block.lines if line.text.strip()]
    return any(t.startswith("+") for t in texts) and all(t[0] in _DIFF_MARKERS for t in texts)


def transformer_notation_diff() -> Transformer:
    """Mark added and removed lines, from leading markers or notation comments."""

    def notation_diff(block: CodeBlock) -> CodeBlock:
        changed = 0
        if _is_diff_block(block):
            for line in block.lines:
                marker = line.text[:1]
                if marker not in _DIFF_MARKERS:
                    continue
                line.text = line.text[1:]
                if _DIFF_MARKERS[marker]:
                    line.add_class(_DIFF_MARKERS[marker])
                    changed += 1
        changed += _apply_notation(block, {"++": "added", "--": "removed"})
        if changed:
            block.add_class("has-diff")
        return block

    return notation_diff


def transformer_notation_highlight() -> Transformer:
    """Mark highlighted lines from ``{1,3-4}`` in the meta or notation comments."""

    def notation_highlight(block: CodeBlock) -> CodeBlock:
        changed = 0
        ranges = block.attributes.get("highlight")
        if isinstance(ranges, str):
            for number in sorted(parse_line_ranges(ranges)):
                if 1 <= number <= len(block.lines):
                    block.lines[number - 1].add_class("highlighted")
                    changed += 1
        changed += _apply_notation(block, {"highlight": "highlighted", "hl": "highlighted"})
        if changed:
            block.add_class("has-highlighted")
        return block

    return notation_highlight


def update_style(themes=None) -> Transformer:
    """
    Rewrite raw theme colors into ``--code-<theme>`` custom properties.

    The first theme's plain ``color``/``background-color`` and every
    ``--shiki-<theme>`` property are renamed so that the stylesheet picks the
    active theme with ``var(--code-light)`` / ``var(--code-dark)``.
    """
    themes = validate_themes(themes)
    keys = list(themes)
    renames = {
        "color": f"--code-{keys[0]}",
        "background-color": f"--code-{keys[0]}-bg",
    }
    for key in keys[1:]:
        renames[f"--shiki-{key}"] = f"--code-{key}"
        renames[f"--shiki-{key}-bg"] = f"--code-{key}-bg"

    def rename(declarations: dict) -> dict:
        return {renames.get(prop, prop): value for prop, value in declarations.items()}

    def update_style_transformer(block: CodeBlock) -> CodeBlock:
        if not block.palette and not block.pre_style:
            return block
        block.palette = {ttype: rename(d) for ttype, d in block.palette.items()}
        block.pre_style = rename(block.pre_style)
        block.add_class("themed")
        return block

    return update_style_transformer


def add_title() -> Transformer:
    """Header bar with the ``title`` from the meta string."""

    def add_title_transformer(block: CodeBlock) -> CodeBlock:
        title = block.attributes.get("title")
        if not isinstance(title, str) or not title:
            return block
        block.add_decoration(
            "header", block.new_tag("div", {"class": ["code-title"]}, title)
        )
        block.add_class("has-title")
        return block

    return add_title_transformer


def add_language(fallback: str = "text") -> Transformer:
    """Language badge; blocks without a language show ``fallback``."""
    if not isinstance(fallback, str) or not fallback.strip():
        raise ConfigurationError("add_language fallback must be a non-empty string")

    def add_language_transformer(block: CodeBlock) -> CodeBlock:
        block.add_decoration(
            "footer",
            block.new_tag("span", {"class": ["code-language"]}, block.language or fallback),
        )
        return block

    return add_language_transformer


def add_copy_button(timeout: int = 3000) -> Transformer:
    """
    Copy-to-clipboard button.

    The button copies the block text as it is when this transformer runs and
    shows its "copied" state for ``timeout`` milliseconds.

    Raises:
        ConfigurationError: if ``timeout`` is not a positive integer
    """
    if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
        raise ConfigurationError(
            f"Copy button timeout must be a positive integer (ms), got {timeout!r}"
        )

    onclick = (
        "navigator.clipboard.writeText(this.dataset.code);"
        "this.classList.add('copied');"
        f"setTimeout(() => this.classList.remove('copied'), {timeout})"
    )

    def add_copy_button_transformer(block: CodeBlock) -> CodeBlock:
        button = block.new_tag(
            "button",
            {
                "type": "button",
                "class": ["copy"],
                "title": "Copy code to clipboard",
                "data-code": block.source,
                "data-timeout": str(timeout),
                "onclick": onclick,
            },
        )
        ready = block.new_tag("span", {"class": ["ready"]})
        ready.append(BeautifulSoup(COPY_ICON, "html.parser"))
        success = block.new_tag("span", {"class": ["success"]})
        success.append(BeautifulSoup(CHECK_ICON, "html.parser"))
        button.append(ready)
        button.append(success)
        block.add_decoration("footer", button)
        return block

    return add_copy_button_transformer


TRANSFORMERS: Dict[str, Callable[..., Transformer]] = {
    "notation_diff": transformer_notation_diff,
    "notation_highlight": transformer_notation_highlight,
    "update_style": update_style,
    "add_title": add_title,
    "add_language": add_language,
    "add_copy_button": add_copy_button,
}


def build_pipeline(entries, themes=None) -> List[Transformer]:
    """
    Build a transformer pipeline from config entries.

    An entry is a transformer name, a ``[name, {options}]`` pair, or an
    already built transformer. Factories that take ``themes`` receive the
    configured themes unless the entry sets its own.

    Raises:
        ConfigurationError: on an unknown name or invalid options
    """
    themes = validate_themes(themes)
    pipeline: List[Transformer] = []

    for entry in entries or []:
        if isinstance(entry, str):
            name, options = entry, {}
        elif (
            isinstance(entry, (list, tuple))
            and len(entry) == 2
            and isinstance(entry[0], str)
            and isinstance(entry[1], dict)
        ):
            name, options = entry[0], dict(entry[1])
        elif callable(entry):
            pipeline.append(entry)
            continue
        else:
            raise ConfigurationError(f"Invalid transformer entry {entry!r}")

        try:
            factory = TRANSFORMERS[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown transformer {name!r}, expected one of {sorted(TRANSFORMERS)}"
            ) from None

        signature = inspect.signature(factory)
        if "themes" in signature.parameters:
            options.setdefault("themes", themes)
        try:
            signature.bind(**options)
        except TypeError as e:
            raise ConfigurationError(f"Invalid options for transformer {name!r}: {e}") from e

        pipeline.append(factory(**options))

    logger.debug(f"Built code transformer pipeline with {len(pipeline)} steps")
    return pipeline


def apply_transformers(block: CodeBlock, pipeline: List[Transformer]) -> CodeBlock:
    """Fold ``pipeline`` over ``block`` left to right."""
    for transformer in pipeline:
        block = transformer(block)
    return block

