# sitemark/markdown/highlight/block.py
"""
Per code block state shared by the transformers.

A CodeBlock is built once per fenced block from the raw source, then every
transformer in the pipeline receives it in turn. Transformers may rewrite the
text of a line (to strip a marker), add classes and styles, and add
decorations. They never add, drop or reorder lines.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from bs4 import BeautifulSoup, Tag

from .themes import DEFAULT_THEMES, build_palette, build_pre_style

DECORATION_POSITIONS = ("header", "footer")

_META_ATTR = re.compile(
    r"""([\w-]+)=("(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'|\S+)"""
    r"""|\{([^}]*)\}"""
    r"""|(\S+)"""
)


def parse_meta(meta: str) -> Dict[str, object]:
    """
    Parse a fence meta string into attributes.

    ``title="a b" {1,3-4} diff`` becomes
    ``{"title": "a b", "highlight": "1,3-4", "diff": True}``.
    Anything unparseable is kept as a bare flag.
    """
    attributes: Dict[str, object] = {}
    for match in _META_ATTR.finditer(meta or ""):
        key, value, ranges, flag = match.groups()
        if key:
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = re.sub(r"\\(.)", r"\1", value[1:-1])
            attributes[key] = value
        elif ranges is not None:
            attributes["highlight"] = ranges
        else:
            attributes[flag] = True
    return attributes


def parse_line_ranges(ranges: str) -> Set[int]:
    """
    Parse ``1,3-5`` into ``{1, 3, 4, 5}``.

    Malformed parts are ignored.
    """
    numbers: Set[int] = set()
    for part in (ranges or "").split(","):
        part = part.strip()
        match = re.fullmatch(r"(\d+)(?:\s*-\s*(\d+))?", part)
        if not match:
            continue
        start = int(match.group(1))
        end = int(match.group(2) or start)
        if start > end:
            start, end = end, start
        numbers.update(range(start, end + 1))
    return numbers


@dataclass
class Line:
    text: str
    classes: List[str] = field(default_factory=list)

    def add_class(self, name: str) -> None:
        if name not in self.classes:
            self.classes.append(name)


@dataclass
class Decoration:
    position: str
    node: Tag


@dataclass
class CodeBlock:
    lines: List[Line]
    language: Optional[str] = None
    meta: str = ""
    palette: Dict = field(default_factory=dict)
    pre_style: Dict[str, str] = field(default_factory=dict)
    classes: List[str] = field(default_factory=list)
    decorations: List[Decoration] = field(default_factory=list)
    soup: BeautifulSoup = field(
        default_factory=lambda: BeautifulSoup("", "html.parser"), repr=False
    )

    @classmethod
    def from_source(cls, source: str, language=None, meta="", themes=None) -> "CodeBlock":
        """Build a block from raw source, one Line per source line."""
        themes = themes or DEFAULT_THEMES
        source = source.replace("\r\n", "\n")
        return cls(
            lines=[Line(text) for text in source.split("\n")],
            language=language or None,
            meta=meta or "",
            palette=copy.deepcopy(build_palette(tuple(themes.items()))),
            pre_style=dict(build_pre_style(tuple(themes.items()))),
        )

    @property
    def source(self) -> str:
        """Current text of the block, lines joined with newlines."""
        return "\n".join(line.text for line in self.lines)

    @property
    def attributes(self) -> Dict[str, object]:
        return parse_meta(self.meta)

    def add_class(self, name: str) -> None:
        if name not in self.classes:
            self.classes.append(name)

    def new_tag(self, name: str, attrs=None, string=None) -> Tag:
        tag = self.soup.new_tag(name, attrs=attrs or {})
        if string is not None:
            tag.string = string
        return tag

    def add_decoration(self, position: str, node: Tag) -> None:
        if position not in DECORATION_POSITIONS:
            raise ValueError(f"Unknown decoration position {position!r}")
        self.decorations.append(Decoration(position, node))

    def decorations_at(self, position: str) -> List[Tag]:
        return [d.node for d in self.decorations if d.position == position]
