"""Errors raised while turning Markdown or a document tree into AsciiDoc.

Conversion either returns the full document or raises; there is no
partial output.  Every error derives from :class:`AsciidocifyError` and
exposes ``code`` (an :class:`ErrorCode`), ``message``, a ``context``
dict naming the offending node kind and attribute, and the chained
``cause`` when one exists.  The pipeline tags its error counter with
``code`` and the JSON logger prints ``context`` verbatim.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error categories; compare with plain strings or serialise to JSON."""

    CONVERSION_ERROR = "CONVERSION_ERROR"
    UNSUPPORTED_NODE_KIND = "UNSUPPORTED_NODE_KIND"
    INVALID_NODE_ATTRIBUTE = "INVALID_NODE_ATTRIBUTE"


class AsciidocifyError(Exception):
    """Root of the asciidocify error tree.

    Parameters
    ----------
    code:
        :class:`ErrorCode` member (plain strings are accepted too).
    message:
        Text shown by ``str(err)``.
    context:
        Diagnostic fields; keys are listed on each subclass.
    cause:
        Lower-level exception, also set as ``__cause__``.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


class AsciidocifyConversionError(AsciidocifyError):
    """A tree (or parser token stream) could not be rendered."""

    def __init__(
        self,
        code: str = ErrorCode.CONVERSION_ERROR,
        message: str = "Conversion error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(code, message, context, cause)


def _kind_value(node_kind: object) -> object:
    return getattr(node_kind, "value", node_kind)


class UnsupportedNodeKindError(AsciidocifyConversionError):
    """No renderer exists for a node kind or mistune token type.

    Raised by the converter's dispatcher for unmodeled ``Node`` kinds and
    by the normalizer for tokens produced by extra mistune plugins
    (``strikethrough``, ``table``...).

    Context keys: ``node_kind``.
    """

    def __init__(
        self,
        node_kind: object,
        message: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        kind = _kind_value(node_kind)
        self.node_kind = kind
        super().__init__(
            ErrorCode.UNSUPPORTED_NODE_KIND,
            message or f"No AsciiDoc renderer for node kind: {kind!r}",
            {"node_kind": kind},
            cause,
        )


class InvalidNodeAttributeError(AsciidocifyConversionError):
    """A node is missing an attribute its renderer needs, or holds a bad one.

    Examples: an image without ``source``, a heading ``level`` outside
    1-6, an unknown raw-markup ``tag_name``, a list child that is not a
    list item (attribute ``children``), or a renderer handed the wrong
    kind of node (attribute ``kind``).

    Context keys: ``node_kind``, ``attribute``, ``value``.
    """

    def __init__(
        self,
        node_kind: object,
        attribute: str,
        value: Any = None,
        message: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        kind = _kind_value(node_kind)
        self.node_kind = kind
        self.attribute = attribute
        super().__init__(
            ErrorCode.INVALID_NODE_ATTRIBUTE,
            message or f"Invalid attribute {attribute!r} on {kind} node: {value!r}",
            {"node_kind": kind, "attribute": attribute, "value": value},
            cause,
        )
