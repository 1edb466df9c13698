# sitemark/markdown/highlight/__init__.py

from .block import CodeBlock, Line, parse_line_ranges, parse_meta
from .render import render_code_block
from .themes import DEFAULT_THEMES, validate_themes
from .transformers import (
    TRANSFORMERS,
    add_copy_button,
    add_language,
    add_title,
    apply_transformers,
    build_pipeline,
    transformer_notation_diff,
    transformer_notation_highlight,
    update_style,
)

__all__ = [
    "DEFAULT_THEMES",
    "TRANSFORMERS",
    "CodeBlock",
    "Line",
    "add_copy_button",
    "add_language",
    "add_title",
    "apply_transformers",
    "build_pipeline",
    "parse_line_ranges",
    "parse_meta",
    "render_code_block",
    "transformer_notation_diff",
    "transformer_notation_highlight",
    "update_style",
    "validate_themes",
]
