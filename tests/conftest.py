"""Shared test fixtures for the asciidocify test suite."""

from __future__ import annotations

import pytest

from asciidocify.config import AsciidocifyConfig
from asciidocify.converter.asciidoc import AsciiDocConverter
from asciidocify.converter.ast_normalizer import ASTNormalizer
from asciidocify.converter.md_to_asciidoc import MarkdownToAsciiDocConverter


@pytest.fixture
def config() -> AsciidocifyConfig:
    """Default pipeline configuration."""
    return AsciidocifyConfig()


@pytest.fixture
def converter() -> AsciiDocConverter:
    """Tree-to-AsciiDoc converter."""
    return AsciiDocConverter()


@pytest.fixture
def normalizer(config: AsciidocifyConfig) -> ASTNormalizer:
    """Markdown-to-tree normalizer using the default parser options."""
    return ASTNormalizer(config.parser_options)


@pytest.fixture
def pipeline(config: AsciidocifyConfig) -> MarkdownToAsciiDocConverter:
    """Markdown-to-AsciiDoc pipeline using the default test config."""
    return MarkdownToAsciiDocConverter(config)
