# sitemark/markdown/renderer.py

import pypandoc

from .config import get_markdown_config, get_pandoc_config, validate_markdown_config
from .postprocessors import apply_postprocessors, build_postprocessors
from .postprocessors.utils import clear_shared_soup
from .preprocessors import apply_preprocessors


class MarkdownRenderer:
    """
    Render pipeline built once from a markdown config.

    Building validates the whole config, so a bad option fails here and not
    on the first page. A renderer holds no per-page state and can be shared.
    """

    def __init__(self, config=None):
        if config is None:
            config = get_markdown_config()
        self.config = validate_markdown_config(config)
        self.pandoc_config = get_pandoc_config(self.config.get("math", "katex"))
        self.postprocessors = build_postprocessors(self.config)

    def render(self, text, context=None):
        """
        Main rendering function with pre/post processing pipeline using pypandoc

        Args:
            text: Raw markdown text
            context: Optional dict for processors that need additional data
        """
        context = context if context is not None else {}

        # Pre-processing: Before markdown conversion
        text = apply_preprocessors(text, context)

        # Markdown conversion using pypandoc
        html = pypandoc.convert_text(
            text,
            to="html5",
            format="markdown",
            extra_args=self.pandoc_config["extra_args"],
            filters=self.pandoc_config.get("filters", []),
        )

        # Post-processing: After markdown conversion
        html = apply_postprocessors(html, context, self.postprocessors)
        clear_shared_soup(context)

        return html


def render_markdown(text, context=None, config=None):
    """Render ``text`` with a renderer built from ``config`` (default config if None)."""
    return MarkdownRenderer(config).render(text, context)
