"""Markdown → AsciiDoc conversion pipeline.

Public API:

- :class:`AsciiDocConverter`: document tree → AsciiDoc text.
- :func:`convert`: render a whole document tree.
- :class:`ASTNormalizer`: parse Markdown into a document tree.
- :class:`MarkdownToAsciiDocConverter`: Markdown text → AsciiDoc text.
- :func:`markdown_to_asciidoc`: one-call convenience wrapper.
"""

from asciidocify.converter.asciidoc import AsciiDocConverter, convert
from asciidocify.converter.ast_normalizer import ASTNormalizer
from asciidocify.converter.md_to_asciidoc import (
    MarkdownToAsciiDocConverter,
    markdown_to_asciidoc,
)

__all__ = [
    "ASTNormalizer",
    "AsciiDocConverter",
    "MarkdownToAsciiDocConverter",
    "convert",
    "markdown_to_asciidoc",
]
