"""
Preprocessor that carries fence meta strings through Pandoc.

Pandoc only keeps the first word of a fence info string. Everything after it
(title="...", {1,3}, diff, ...) is needed by the code transformers, so the
opening fence is rewritten into Pandoc attribute syntax:

    ```python title="example.py" {2}
    → ```{.python data-meta="title%3D%22example.py%22%20%7B2%7D"}

    ```c++ title="main.cpp"
    → ```{data-lang="c%2B%2B" data-meta="title%3D%22main.cpp%22"}

Values are percent-encoded so no quoting rules of Pandoc attributes apply.
The fence may sit in a list item or a blockquote; its container prefix is
kept as is:

    > 1. ```python title="q.py"
    → > 1. ```{.python data-meta="title%3D%22q.py%22"}

Fences without meta and fences already using {...} attributes are left alone.
"""

import re
import urllib.parse

# Indentation, blockquote ">" and list markers of the containers a fence sits in
_PREFIX = r"((?:[ \t]*(?:>|[-+*][ \t]|\d{1,9}[.)][ \t]))*[ \t]*)"
_OPENING_FENCE = re.compile(_PREFIX + r"(`{3,}|~{3,})[ \t]*(.*?)[ \t]*$")
_CLOSING_FENCE = re.compile(_PREFIX + r"(`{3,}|~{3,})[ \t]*$")
_CLASS_NAME = re.compile(r"[A-Za-z][\w-]*")


def _quote(value: str) -> str:
    return urllib.parse.quote(value, safe="")


def _rewrite_info(info: str):
    """Pandoc attribute block for an info string, or None to keep it."""
    if not info or info.startswith("{"):
        return None

    parts = info.split(None, 1)
    language, meta = parts[0], (parts[1] if len(parts) > 1 else "")
    if "=" in language or language.startswith("{"):
        language, meta = "", info

    if not meta and _CLASS_NAME.fullmatch(language):
        return None

    attributes = []
    if language:
        if _CLASS_NAME.fullmatch(language):
            attributes.append(f".{language}")
        else:
            attributes.append(f'data-lang="{_quote(language)}"')
    if meta:
        attributes.append(f'data-meta="{_quote(meta)}"')
    return "{" + " ".join(attributes) + "}"


def fence_meta(text: str, context: dict) -> str:
    """
    Rewrite fenced code opening lines that carry a meta string.

    Args:
        text: Markdown source
        context: Context dictionary (unused but required for preprocessor signature)

    Returns:
        Markdown with rewritten opening fences
    """
    lines = text.split("\n")
    open_fence = None

    for index, line in enumerate(lines):
        if open_fence:
            match = _CLOSING_FENCE.match(line)
            if match and match.group(2)[0] == open_fence[0] and len(match.group(2)) >= len(open_fence):
                open_fence = None
            continue

        match = _OPENING_FENCE.match(line)
        if not match:
            continue
        prefix, fence, info = match.groups()
        if fence[0] == "`" and "`" in info:
            continue

        open_fence = fence
        attributes = _rewrite_info(info)
        if attributes:
            lines[index] = f"{prefix}{fence}{attributes}"

    return "\n".join(lines)
