# sitemark/markdown/config.py

import copy
import logging
from pathlib import Path

import yaml

from ..exceptions import ConfigurationError
from .highlight import build_pipeline
from .postprocessors.autolink_headings import validate_anchor_options

logger = logging.getLogger(__name__)

MATH_ENGINES = {
    "katex": "--katex",
    "mathjax": "--mathjax",
}

DEFAULT_MARKDOWN_CONFIG = {
    "math": "katex",
    "math_assets": True,
    "heading_ids": True,
    "autolink_headings": {
        "behavior": "append",
        "class_name": ["anchor"],
        "content": {"type": "text", "value": "#"},
    },
    "code": {
        "themes": {"light": "default", "dark": "github-dark"},
        "transformers": [
            "notation_diff",
            "notation_highlight",
            "update_style",
            "add_title",
            "add_language",
            ["add_copy_button", {"timeout": 2000}],
        ],
    },
}


def get_pandoc_config(math="katex"):
    """
    Configuration for pypandoc/Pandoc markdown rendering.

    Fenced code attributes must stay enabled: the fence meta preprocessor
    rewrites every opening fence into Pandoc attribute syntax and the code
    highlighter reads the language and meta back from the HTML.
    """
    try:
        math_flag = MATH_ENGINES[math]
    except KeyError:
        raise ConfigurationError(
            f"Unknown math engine {math!r}, expected one of {sorted(MATH_ENGINES)}"
        ) from None

    return {
        "extra_args": [
            "--from=markdown+autolink_bare_uris+strikeout+superscript+subscript+task_lists+smart+pipe_tables+definition_lists+footnotes+fenced_code_blocks+fenced_code_attributes+raw_html+header_attributes+auto_identifiers+tex_math_dollars",
            # Math rendering
            math_flag,
        ],
        "filters": [],
    }


def _merge(base: dict, overrides: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def validate_markdown_config(config: dict) -> dict:
    """
    Validate a complete markdown config eagerly.

    Every option is checked before any document is rendered so that a bad
    value stops the build up front.
    """
    if not isinstance(config, dict):
        raise ConfigurationError("markdown config must be a mapping")

    get_pandoc_config(config.get("math", "katex"))
    if not isinstance(config.get("math_assets", True), bool):
        raise ConfigurationError("math_assets must be true or false")

    anchors = config.get("autolink_headings")
    if anchors is not None:
        if not isinstance(anchors, dict):
            raise ConfigurationError("autolink_headings must be a mapping or null")
        unknown = set(anchors) - {"behavior", "class_name", "content", "properties"}
        if unknown:
            raise ConfigurationError(f"Unknown autolink_headings options: {sorted(unknown)}")
        validate_anchor_options(**anchors)

    code = config.get("code")
    if code is not None:
        if not isinstance(code, dict):
            raise ConfigurationError("code must be a mapping or null")
        if not isinstance(code.get("transformers", []), (list, tuple)):
            raise ConfigurationError("code.transformers must be a list")
        build_pipeline(code.get("transformers", []), code.get("themes"))

    return config


def get_markdown_config(overrides=None):
    """Return the default markdown config deep-merged with ``overrides``."""
    config = _merge(DEFAULT_MARKDOWN_CONFIG, overrides or {})
    return validate_markdown_config(config)


def load_site_config(path):
    """
    Load a YAML site config file.

    Only the ``markdown`` section is interpreted; the remaining keys (site
    URL, trailing slash policy, ...) are returned as-is for the build.
    """
    path = Path(path)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Cannot read site config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in site config {path}: {e}") from e

    raw = raw or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Site config {path} must contain a mapping")

    site_config = dict(raw)
    site_config["markdown"] = get_markdown_config(raw.get("markdown"))
    logger.debug(f"Loaded site config from {path}")
    return site_config
