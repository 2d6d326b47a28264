"""asciidocify: render Markdown document trees as AsciiDoc.

Public re-exports
-----------------

* **Conversion:** :func:`convert`, :class:`AsciiDocConverter`,
  :class:`MarkdownToAsciiDocConverter`, :func:`markdown_to_asciidoc`
* **Configuration:** :class:`ParserOptions`, :data:`DEFAULT_PARSER_OPTS`,
  :class:`AsciidocifyConfig`
* **Errors:** Every :class:`AsciidocifyError` subclass and :class:`ErrorCode`
* **Models:** :class:`Node`, :class:`NodeKind`, :class:`ConversionContext`,
  :class:`ConversionResult`

Usage::

    from asciidocify import markdown_to_asciidoc

    markdown_to_asciidoc("**Note:** Remember the milk!")
    # 'NOTE: Remember the milk!\\n'
"""

from __future__ import annotations

# ── Configuration ───────────────────────────────────────────────────────
from asciidocify.config import DEFAULT_PARSER_OPTS, AsciidocifyConfig, ParserOptions

# ── Conversion ──────────────────────────────────────────────────────────
from asciidocify.converter import (
    AsciiDocConverter,
    ASTNormalizer,
    MarkdownToAsciiDocConverter,
    convert,
    markdown_to_asciidoc,
)

# ── Errors ──────────────────────────────────────────────────────────────
from asciidocify.errors import (
    AsciidocifyConversionError,
    AsciidocifyError,
    ErrorCode,
    InvalidNodeAttributeError,
    UnsupportedNodeKindError,
)

# ── Models ──────────────────────────────────────────────────────────────
from asciidocify.models import ConversionContext, ConversionResult, Node, NodeKind

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Conversion
    "convert",
    "AsciiDocConverter",
    "ASTNormalizer",
    "MarkdownToAsciiDocConverter",
    "markdown_to_asciidoc",
    # Configuration
    "ParserOptions",
    "DEFAULT_PARSER_OPTS",
    "AsciidocifyConfig",
    # Errors
    "AsciidocifyError",
    "ErrorCode",
    "AsciidocifyConversionError",
    "UnsupportedNodeKindError",
    "InvalidNodeAttributeError",
    # Models
    "Node",
    "NodeKind",
    "ConversionContext",
    "ConversionResult",
]
