"""Tests for markdown configuration."""

import pytest

from sitemark.exceptions import ConfigurationError
from sitemark.markdown.config import (
    DEFAULT_MARKDOWN_CONFIG,
    get_markdown_config,
    get_pandoc_config,
    load_site_config,
)
from sitemark.markdown.postprocessors import build_postprocessors


class TestGetMarkdownConfig:
    """Tests for get_markdown_config."""

    def test_defaults(self):
        config = get_markdown_config()

        assert config == DEFAULT_MARKDOWN_CONFIG
        assert config is not DEFAULT_MARKDOWN_CONFIG

    def test_overrides_are_merged(self):
        config = get_markdown_config({"code": {"themes": {"light": "friendly", "dark": "monokai"}}})

        assert config["code"]["themes"] == {"light": "friendly", "dark": "monokai"}
        assert config["code"]["transformers"] == DEFAULT_MARKDOWN_CONFIG["code"]["transformers"]

    def test_defaults_not_mutated(self):
        get_markdown_config({"autolink_headings": {"behavior": "prepend"}})

        assert DEFAULT_MARKDOWN_CONFIG["autolink_headings"]["behavior"] == "append"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"math": "latex"},
            {"math_assets": "yes"},
            {"autolink_headings": {"behavior": "sideways"}},
            {"autolink_headings": {"colour": "red"}},
            {"autolink_headings": "yes"},
            {"code": {"transformers": [["add_copy_button", {"timeout": 0}]]}},
            {"code": {"transformers": ["shiny"]}},
            {"code": {"transformers": "add_title"}},
            {"code": {"themes": {"light": "not-a-style"}}},
        ],
    )
    def test_invalid_overrides(self, overrides):
        with pytest.raises(ConfigurationError):
            get_markdown_config(overrides)


class TestGetPandocConfig:
    """Tests for get_pandoc_config."""

    def test_math_engines(self):
        assert "--katex" in get_pandoc_config("katex")["extra_args"]
        assert "--mathjax" in get_pandoc_config("mathjax")["extra_args"]

    def test_fenced_code_attributes_enabled(self):
        from_arg = get_pandoc_config()["extra_args"][0]

        assert "+fenced_code_attributes" in from_arg
        assert "+header_attributes" in from_arg


class TestLoadSiteConfig:
    """Tests for load_site_config."""

    def test_load(self, tmp_path):
        path = tmp_path / "site.yaml"
        path.write_text(
            "site: https://example.org\n"
            "trailing_slash: never\n"
            "markdown:\n"
            "  math: mathjax\n"
            "  code:\n"
            "    transformers:\n"
            "      - add_title\n"
            "      - [add_copy_button, {timeout: 1500}]\n",
            encoding="utf-8",
        )

        config = load_site_config(path)

        assert config["site"] == "https://example.org"
        assert config["trailing_slash"] == "never"
        assert config["markdown"]["math"] == "mathjax"
        assert config["markdown"]["code"]["transformers"][1] == ["add_copy_button", {"timeout": 1500}]
        assert config["markdown"]["autolink_headings"]["class_name"] == ["anchor"]

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "site.yaml"
        path.write_text("", encoding="utf-8")

        assert load_site_config(path)["markdown"] == DEFAULT_MARKDOWN_CONFIG

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_site_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "site.yaml"
        path.write_text("markdown: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_site_config(path)

    def test_invalid_timeout_in_file(self, tmp_path):
        path = tmp_path / "site.yaml"
        path.write_text(
            "markdown:\n  code:\n    transformers:\n      - [add_copy_button, {timeout: -1}]\n",
            encoding="utf-8",
        )

        with pytest.raises(ConfigurationError):
            load_site_config(path)


class TestBuildPostprocessors:
    """Tests for build_postprocessors."""

    def test_default_order(self):
        names = [p.__name__ for p in build_postprocessors(get_markdown_config())]

        assert names == [
            "heading_ids",
            "autolink_headings_postprocessor",
            "code_highlighter_postprocessor",
            "math_assets_postprocessor",
        ]

    def test_disabled_passes(self):
        config = get_markdown_config(
            {"heading_ids": False, "autolink_headings": None, "code": None, "math_assets": False}
        )

        assert build_postprocessors(config) == []
