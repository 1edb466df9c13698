# sitemark/markdown/postprocessors/math_assets.py
"""
Postprocessor that adds the math renderer assets to a page.

Pandoc is run without --standalone, so ``--katex`` / ``--mathjax`` only
leave ``<span class="math inline|display">`` elements with the raw TeX
behind. This postprocessor:
- Adds the KaTeX stylesheet, script and a small render call, or the
  MathJax configuration and loader, depending on the math engine
- Only does so when the page contains math
- Marks the injected script with an id so a second pass adds nothing
"""

import logging

from bs4 import BeautifulSoup

from ...exceptions import ConfigurationError
from .utils import get_shared_soup, soup_to_html

logger = logging.getLogger(__name__)

KATEX_URL = "https://cdn.jsdelivr.net/npm/katex@0.16.11/dist"
MATHJAX_URL = "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-chtml.js"

KATEX_RENDER = """
document.addEventListener("DOMContentLoaded", function () {
  document.querySelectorAll("span.math").forEach(function (el) {
    katex.render(el.textContent, el, {
      displayMode: el.classList.contains("display"),
      throwOnError: false
    });
  });
});
"""

MATHJAX_CONFIG = """
window.MathJax = {
  tex: {
    inlineMath: [['\\\\(', '\\\\)']],
    displayMath: [['\\\\[', '\\\\]']]
  }
};
"""


def _script(soup: BeautifulSoup, src=None, string=None, **attrs):
    script = soup.new_tag("script", attrs=attrs)
    if src:
        script["src"] = src
        script["defer"] = ""
    if string:
        script.string = string
    return script


def _katex_assets(soup: BeautifulSoup):
    stylesheet = soup.new_tag("link", attrs={"rel": "stylesheet", "href": f"{KATEX_URL}/katex.min.css"})
    return [
        stylesheet,
        _script(soup, src=f"{KATEX_URL}/katex.min.js"),
        _script(soup, string=KATEX_RENDER, id="sitemark-math-katex"),
    ]


def _mathjax_assets(soup: BeautifulSoup):
    return [
        _script(soup, string=MATHJAX_CONFIG, id="sitemark-math-mathjax"),
        _script(soup, src=MATHJAX_URL, id="MathJax-script"),
    ]


ENGINE_ASSETS = {
    "katex": _katex_assets,
    "mathjax": _mathjax_assets,
}


def inject_math_assets(soup: BeautifulSoup, engine: str = "katex") -> bool:
    """
    Prepend the assets of ``engine`` to ``soup`` when it contains math.

    Returns True when anything was added.
    """
    if soup.find("span", class_="math") is None:
        return False
    if soup.find("script", id=f"sitemark-math-{engine}") is not None:
        return False

    # The tree root takes the assets first, in order
    for position, tag in enumerate(ENGINE_ASSETS[engine](soup)):
        soup.insert(position, tag)
    logger.debug(f"Added {engine} assets")
    return True


def math_assets(engine="katex"):
    """Build the postprocessor for the configured math engine."""
    if engine not in ENGINE_ASSETS:
        raise ConfigurationError(
            f"Unknown math engine {engine!r}, expected one of {sorted(ENGINE_ASSETS)}"
        )

    def math_assets_postprocessor(html: str, context: dict) -> str:
        soup = get_shared_soup(html, context)
        inject_math_assets(soup, engine)
        return soup_to_html(context, soup)

    return math_assets_postprocessor
