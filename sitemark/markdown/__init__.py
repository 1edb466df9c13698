# sitemark/markdown/__init__.py

from .config import get_markdown_config, load_site_config
from .renderer import MarkdownRenderer, render_markdown

__all__ = (
    "MarkdownRenderer",
    "get_markdown_config",
    "load_site_config",
    "render_markdown",
)
