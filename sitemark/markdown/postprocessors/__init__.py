# sitemark/markdown/postprocessors/__init__.py

from .autolink_headings import autolink_headings
from .code_highlighter import code_highlighter
from .heading_ids import heading_ids
from .math_assets import math_assets


def build_postprocessors(config):
    """
    Build the postprocessor list for a validated markdown config.

    Order matters - they run sequentially:
    - heading_ids: give every heading an id
    - autolink_headings: needs the ids to link to
    - code_highlighter: transformer pipeline over fenced code
    - math_assets: renderer assets for pages with math
    """
    postprocessors = []
    if config.get("heading_ids", True):
        postprocessors.append(heading_ids)
    if config.get("autolink_headings") is not None:
        postprocessors.append(autolink_headings(**config["autolink_headings"]))
    code = config.get("code")
    if code is not None:
        postprocessors.append(
            code_highlighter(code.get("transformers", []), code.get("themes"))
        )
    if config.get("math_assets", True):
        postprocessors.append(math_assets(config.get("math", "katex")))
    return postprocessors


def apply_postprocessors(html, context, postprocessors):
    """Apply all postprocessors in order"""
    for processor in postprocessors:
        html = processor(html, context)
    return html
