"""Tests for the code highlighting postprocessor."""

import logging

import pytest
from bs4 import BeautifulSoup

from sitemark.exceptions import ConfigurationError
from sitemark.markdown.highlight import DEFAULT_THEMES
from sitemark.markdown.postprocessors.code_highlighter import (
    code_highlighter,
    highlight_code_blocks,
)

DEFAULT_TRANSFORMERS = [
    "notation_diff",
    "notation_highlight",
    "update_style",
    "add_title",
    "add_language",
    ["add_copy_button", {"timeout": 2000}],
]


@pytest.fixture
def postprocessor():
    return code_highlighter(DEFAULT_TRANSFORMERS, DEFAULT_THEMES)


class TestCodeHighlighter:
    """Tests for code_highlighter."""

    def test_plain_pandoc_block(self, postprocessor, parse):
        html = (
            '<pre class="python" data-meta="title%3D%22example.py%22">'
            "<code>+import os\n os.getcwd()</code></pre>"
        )

        soup = parse(postprocessor(html, {}))

        figure = soup.find("figure", class_="code-block")
        assert figure["data-language"] == "python"
        assert figure.find("div", class_="code-title").get_text() == "example.py"
        assert figure.find("button", class_="copy")["data-code"] == "import os\nos.getcwd()"
        assert soup.find("pre", class_="python") is None

    def test_pandoc_source_code_div(self, postprocessor, parse):
        html = (
            '<div class="sourceCode" id="cb1" data-meta="title%3D%22a.py%22">'
            '<pre class="sourceCode python"><code class="sourceCode python">'
            '<span id="cb1-1"><a href="#cb1-1" aria-hidden="true" tabindex="-1"></a>x = 1</span>'
            "</code></pre></div>"
        )

        soup = parse(postprocessor(html, {}))

        assert soup.find("div", class_="sourceCode") is None
        figure = soup.find("figure")
        assert figure["data-language"] == "python"
        assert figure.find("div", class_="code-title").get_text() == "a.py"
        assert figure.find("span", class_="line").get_text() == "x = 1"

    def test_language_class_and_trailing_newline(self, postprocessor, parse):
        html = '<pre><code class="language-rust">fn main() {}\n</code></pre>'

        soup = parse(postprocessor(html, {}))

        figure = soup.find("figure")
        assert figure["data-language"] == "rust"
        assert len(figure.find_all("span", class_="line")) == 1

    def test_block_without_language(self, postprocessor, parse):
        soup = parse(postprocessor("<pre><code>just text</code></pre>", {}))

        figure = soup.find("figure")
        assert figure["data-language"] == "text"
        assert figure.find("span", class_="code-language").get_text() == "text"

    def test_unknown_language_falls_back_to_plain_text(self, postprocessor, parse):
        soup = parse(postprocessor('<pre class="klingon"><code>qapla</code></pre>', {}))

        figure = soup.find("figure")
        assert figure["data-language"] == "klingon"
        assert figure.find("span", class_="line").get_text() == "qapla"

    def test_pre_without_code_untouched(self, postprocessor):
        html = "<pre>ascii art</pre>"

        assert postprocessor(html, {}) == html

    def test_already_rendered_blocks_skipped(self, postprocessor, parse):
        once = postprocessor('<pre class="python"><code>x = 1</code></pre>', {})
        twice = postprocessor(once, {})

        assert twice == once
        assert len(parse(twice).find_all("figure")) == 1

    def test_escaped_source_is_copied_verbatim(self, postprocessor, parse):
        html = '<pre class="html"><code>&lt;a href="#"&gt;x&lt;/a&gt;</code></pre>'

        soup = parse(postprocessor(html, {}))

        assert soup.find("button", class_="copy")["data-code"] == '<a href="#">x</a>'

    def test_failing_block_left_untouched(self, parse, caplog):
        """Test that one failing block does not stop the others."""

        def explode(block):
            if block.language == "python":
                raise RuntimeError("boom")
            return block

        postprocessor = code_highlighter([explode, "add_language"])
        html = (
            '<pre class="python"><code>x = 1</code></pre>'
            '<pre class="ruby"><code>puts 1</code></pre>'
        )

        with caplog.at_level(logging.WARNING):
            soup = parse(postprocessor(html, {}))

        assert soup.find("pre", class_="python") is not None
        assert soup.find("figure")["data-language"] == "ruby"
        assert "left unhighlighted" in caplog.text

    def test_invalid_config_fails_early(self):
        with pytest.raises(ConfigurationError):
            code_highlighter([["add_copy_button", {"timeout": -5}]])

    def test_tree_level_api(self):
        from sitemark.markdown.highlight import build_pipeline

        soup = BeautifulSoup('<pre class="go"><code>package main</code></pre>', "html.parser")

        highlight_code_blocks(soup, build_pipeline(["add_language"]), DEFAULT_THEMES)

        assert soup.find("span", class_="code-language").get_text() == "go"
