# sitemark/markdown/highlight/themes.py
"""
Light/dark token colors taken from Pygments styles.

The first theme is the default one and is emitted as plain ``color`` and
``background-color``; every other theme ``name`` is carried alongside as a
``--shiki-<name>`` custom property, the same shape dual-theme Shiki output
uses, so the page CSS can switch themes without highlighting again.
"""

import re
from functools import lru_cache

from pygments.styles import get_style_by_name
from pygments.token import STANDARD_TYPES, Token
from pygments.util import ClassNotFound

from ...exceptions import ConfigurationError

DEFAULT_THEMES = {"light": "default", "dark": "github-dark"}

_THEME_KEY = re.compile(r"[a-z][a-z0-9]*")


def validate_themes(themes=None) -> dict:
    """
    Check a ``{key: pygments style name}`` mapping.

    Raises:
        ConfigurationError: on an empty mapping, a key that cannot be used in
            a CSS custom property name, or an unknown Pygments style
    """
    if themes is None:
        return dict(DEFAULT_THEMES)
    if not isinstance(themes, dict) or not themes:
        raise ConfigurationError("themes must be a non-empty mapping of name to style")

    for key, style_name in themes.items():
        if not isinstance(key, str) or not _THEME_KEY.fullmatch(key):
            raise ConfigurationError(
                f"Invalid theme key {key!r}, use lowercase letters and digits"
            )
        try:
            get_style_by_name(style_name)
        except ClassNotFound:
            raise ConfigurationError(f"Unknown Pygments style {style_name!r}") from None
    return dict(themes)


def _property(index: int, key: str, suffix: str = "") -> str:
    if index == 0:
        return "background-color" if suffix == "-bg" else "color"
    return f"--shiki-{key}{suffix}"


@lru_cache(maxsize=16)
def build_palette(themes: tuple) -> dict:
    """
    Map every standard token type to its CSS declarations.

    ``themes`` is a tuple of ``(key, style name)`` pairs so it can be cached.
    Callers that mutate the result must copy it first.
    """
    styles = [(key, get_style_by_name(name)) for key, name in themes]
    palette = {}
    for ttype in STANDARD_TYPES:
        declarations = {}
        for index, (key, style) in enumerate(styles):
            color = style.style_for_token(ttype)["color"]
            if color:
                declarations[_property(index, key)] = f"#{color}"
        default = styles[0][1].style_for_token(ttype)
        if default["italic"]:
            declarations["font-style"] = "italic"
        if default["bold"]:
            declarations["font-weight"] = "bold"
        palette[ttype] = declarations
    return palette


@lru_cache(maxsize=16)
def build_pre_style(themes: tuple) -> dict:
    """Background and foreground declarations for the whole block."""
    declarations = {}
    for index, (key, name) in enumerate(themes):
        style = get_style_by_name(name)
        if style.background_color:
            declarations[_property(index, key, "-bg")] = style.background_color
        color = style.style_for_token(Token.Text)["color"]
        if color:
            declarations[_property(index, key)] = f"#{color}"
    return declarations


def lookup(palette: dict, ttype) -> dict:
    """Declarations for ``ttype``, falling back to its closest parent type."""
    while ttype not in palette and ttype.parent is not None:
        ttype = ttype.parent
    return palette.get(ttype, {})


def format_style(declarations: dict) -> str:
    return ";".join(f"{prop}:{value}" for prop, value in declarations.items())
