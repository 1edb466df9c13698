"""Pytest fixtures for sitemark tests."""

import pytest
from bs4 import BeautifulSoup

from sitemark.markdown.highlight import CodeBlock


@pytest.fixture
def parse():
    """Parse an HTML fragment."""

    def _parse(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    return _parse


@pytest.fixture
def example_block() -> CodeBlock:
    """The python block with a title and one added line."""
    return CodeBlock.from_source(
        "+import os\n os.getcwd()",
        language="python",
        meta='title="example.py"',
    )
