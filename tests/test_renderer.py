"""End to end tests for render_markdown (need a pandoc binary)."""

import shutil

import pytest
from bs4 import BeautifulSoup

from sitemark.exceptions import ConfigurationError
from sitemark.markdown import MarkdownRenderer, get_markdown_config, render_markdown


def _pandoc_available() -> bool:
    try:
        import pypandoc

        pypandoc.get_pandoc_version()
    except (ImportError, OSError):
        return shutil.which("pandoc") is not None
    return True


requires_pandoc = pytest.mark.skipif(
    not _pandoc_available(), reason="pandoc binary not available"
)


def _render(text, **overrides):
    return BeautifulSoup(render_markdown(text, config=get_markdown_config(overrides)), "html.parser")


@requires_pandoc
class TestRenderMarkdown:
    """Tests for the full markdown pipeline."""

    def test_heading_with_explicit_id(self):
        soup = _render("## Intro {#intro}")

        heading = soup.find("h2", id="intro")
        assert heading.contents[0] == "Intro"
        anchor = heading.find("a", class_="anchor")
        assert anchor["href"] == "#intro"
        assert anchor.get_text() == "#"

    def test_every_heading_linked_once(self):
        soup = _render("# One\n\n## Two\n\n## Two\n")

        headings = soup.find_all(["h1", "h2"])
        assert len({h["id"] for h in headings}) == 3
        for heading in headings:
            assert len(heading.find_all("a", class_="anchor")) == 1

    def test_raw_html_heading_gets_id(self):
        soup = _render("<h3>Raw heading</h3>\n")

        heading = soup.find("h3")
        assert heading["id"] == "raw-heading"
        assert heading.find("a")["href"] == "#raw-heading"

    def test_code_block_example(self):
        text = '```python title="example.py"\n+import os\n os.getcwd()\n```\n'

        soup = _render(text)

        figure = soup.find("figure", class_="code-block")
        assert figure is not None
        assert figure.find("div", class_="code-title").get_text() == "example.py"
        lines = figure.find_all("span", class_="line")
        assert [line.get_text() for line in lines] == ["import os", "os.getcwd()"]
        assert "added" in lines[0]["class"]
        assert lines[1]["class"] == ["line"]
        assert figure.find("span", class_="code-language").get_text() == "python"
        button = figure.find("button", class_="copy")
        assert button["data-code"] == "import os\nos.getcwd()"
        assert button["data-timeout"] == "2000"

    def test_highlight_ranges_survive_pandoc(self):
        soup = _render("```js {2}\na()\nb()\n```\n")

        lines = soup.find_all("span", class_="line")
        assert "highlighted" in lines[1]["class"]

    def test_code_block_in_list_item(self):
        text = '1. Step one\n\n    ```python title="step.py"\n    +x = 1\n    ```\n'

        soup = _render(text)

        figure = soup.find("li").find("figure", class_="code-block")
        assert figure is not None
        assert figure.find("div", class_="code-title").get_text() == "step.py"
        assert figure.find("button", class_="copy")["data-code"] == "x = 1"

    def test_code_block_in_blockquote(self):
        text = '> ```python title="q.py"\n> x = 1\n> ```\n'

        soup = _render(text)

        figure = soup.find("blockquote").find("figure", class_="code-block")
        assert figure is not None
        assert figure.find("div", class_="code-title").get_text() == "q.py"
        assert figure["data-language"] == "python"

    def test_math(self):
        soup = _render("$$E = mc^2$$\n")

        assert soup.find("span", class_="math") is not None
        assert soup.find("script", id="sitemark-math-katex") is not None
        assert soup.find("link", href=lambda h: h and h.endswith("katex.min.css")) is not None

    def test_mathjax_loader(self):
        soup = _render("$x$\n", math="mathjax")

        assert soup.find("script", id="sitemark-math-mathjax") is not None

    def test_no_loader_without_math(self):
        soup = _render("Plain text.\n")

        assert soup.find("script") is None

    def test_code_disabled(self):
        soup = _render("```python\nx = 1\n```\n", code=None)

        assert soup.find("figure") is None
        assert soup.find("pre") is not None

    def test_context_cache_cleared(self):
        context = {}

        render_markdown("# Title\n", context=context)

        assert context == {}


class TestMarkdownRenderer:
    """Tests that need no pandoc."""

    def test_invalid_config_fails_before_rendering(self):
        config = get_markdown_config()
        config["code"]["transformers"] = [["add_copy_button", {"timeout": 0}]]

        with pytest.raises(ConfigurationError):
            MarkdownRenderer(config)
