"""Data models for asciidocify.

This module contains the document tree consumed by the converter, the
per-call context threaded through recursion, and the pipeline result
type.  All types are frozen dataclasses: the converter never mutates
its input, and contexts are derived rather than updated.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any

from asciidocify.config import DEFAULT_PARSER_OPTS, ParserOptions


# ---------------------------------------------------------------------------
# Node kinds
# ---------------------------------------------------------------------------

class NodeKind(str, Enum):
    """Closed set of document tree node kinds."""

    DOCUMENT = "document"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BLOCK_QUOTE = "block_quote"
    UNORDERED_LIST = "unordered_list"
    ORDERED_LIST = "ordered_list"
    LIST_ITEM = "list_item"
    IMAGE = "image"
    CODE_BLOCK = "code_block"
    THEMATIC_BREAK = "thematic_break"
    RAW_MARKUP = "raw_markup"
    """Embedded foreign markup (e.g. an HTML ``<b>`` span)."""

    TEXT = "text"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    CODE_SPAN = "code_span"
    LINK = "link"
    LINE_BREAK = "line_break"
    SOFT_BREAK = "soft_break"


LIST_KINDS: frozenset[NodeKind] = frozenset({
    NodeKind.UNORDERED_LIST,
    NodeKind.ORDERED_LIST,
})

INLINE_KINDS: frozenset[NodeKind] = frozenset({
    NodeKind.TEXT,
    NodeKind.EMPHASIS,
    NodeKind.STRONG,
    NodeKind.CODE_SPAN,
    NodeKind.LINK,
    NodeKind.IMAGE,
    NodeKind.RAW_MARKUP,
    NodeKind.LINE_BREAK,
    NodeKind.SOFT_BREAK,
})


# ---------------------------------------------------------------------------
# Tree node
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Node:
    """A single node of the document tree.

    Attributes
    ----------
    kind:
        The node's :class:`NodeKind` tag.
    children:
        Ordered child nodes; empty for leaves.
    attrs:
        Read-only kind-specific attributes (``source``, ``language``,
        ``tag_name``...).  Use the typed properties below to read them.
    """

    kind: NodeKind
    children: tuple[Node, ...] = ()
    attrs: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        if not isinstance(self.kind, NodeKind):
            try:
                object.__setattr__(self, "kind", NodeKind(self.kind))
            except ValueError:
                # Unmodeled kinds are kept and rejected by the converter.
                pass
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))
        if not isinstance(self.attrs, MappingProxyType):
            object.__setattr__(self, "attrs", MappingProxyType(dict(self.attrs)))

    # -- typed accessors ---------------------------------------------------

    @property
    def value(self) -> str:
        return self.attrs.get("value", "")

    @property
    def source(self) -> str:
        return self.attrs.get("source", "")

    @property
    def alt_text(self) -> str:
        return self.attrs.get("alt_text", "")

    @property
    def title(self) -> str | None:
        return self.attrs.get("title")

    @property
    def language(self) -> str | None:
        return self.attrs.get("language") or None

    @property
    def raw_text(self) -> str:
        return self.attrs.get("raw_text", "")

    @property
    def tag_name(self) -> str:
        return self.attrs.get("tag_name", "")

    @property
    def level(self) -> int:
        return self.attrs.get("level", 1)

    @property
    def url(self) -> str:
        return self.attrs.get("url", "")


# ---------------------------------------------------------------------------
# Node constructors
# ---------------------------------------------------------------------------

def _node(kind: NodeKind, children: Iterable[Node] = (), **attrs: Any) -> Node:
    return Node(kind, tuple(children), {k: v for k, v in attrs.items() if v is not None})


def document(*children: Node) -> Node:
    return _node(NodeKind.DOCUMENT, children)


def paragraph(*children: Node) -> Node:
    return _node(NodeKind.PARAGRAPH, children)


def heading(level: int, *children: Node) -> Node:
    return _node(NodeKind.HEADING, children, level=level)


def block_quote(*children: Node) -> Node:
    return _node(NodeKind.BLOCK_QUOTE, children)


def unordered_list(*items: Node) -> Node:
    return _node(NodeKind.UNORDERED_LIST, items)


def ordered_list(*items: Node) -> Node:
    return _node(NodeKind.ORDERED_LIST, items)


def list_item(*children: Node) -> Node:
    return _node(NodeKind.LIST_ITEM, children)


def image(source: str, alt_text: str = "", title: str | None = None) -> Node:
    return _node(NodeKind.IMAGE, source=source, alt_text=alt_text, title=title)


def code_block(raw_text: str, language: str | None = None) -> Node:
    return _node(NodeKind.CODE_BLOCK, raw_text=raw_text, language=language)


def thematic_break() -> Node:
    return _node(NodeKind.THEMATIC_BREAK)


def raw_markup(tag_name: str, *children: Node) -> Node:
    return _node(NodeKind.RAW_MARKUP, children, tag_name=tag_name)


def text(value: str) -> Node:
    return _node(NodeKind.TEXT, value=value)


def emphasis(*children: Node) -> Node:
    return _node(NodeKind.EMPHASIS, children)


def strong(*children: Node) -> Node:
    return _node(NodeKind.STRONG, children)


def code_span(value: str) -> Node:
    return _node(NodeKind.CODE_SPAN, value=value)


def link(url: str, *children: Node, title: str | None = None) -> Node:
    return _node(NodeKind.LINK, children, url=url, title=title)


def line_break() -> Node:
    return _node(NodeKind.LINE_BREAK)


def soft_break() -> Node:
    return _node(NodeKind.SOFT_BREAK)


def count_nodes(node: Node) -> int:
    """Return the number of nodes in the tree rooted at *node*."""
    return 1 + sum(count_nodes(child) for child in node.children)


# ---------------------------------------------------------------------------
# Conversion context
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConversionContext:
    """Per-call state threaded through the converter's recursion.

    Attributes
    ----------
    parent:
        The immediate parent of the node being converted, or ``None`` at
        the root (or when a renderer is invoked directly).
    list_depth:
        Nesting depth of the enclosing list, ``1`` for the outermost list.
        ``None`` outside any list.
    options:
        Parser options the tree was built with.  Carried through
        unopened; they never influence rendering.
    """

    parent: Node | None = None
    list_depth: int | None = None
    options: ParserOptions = DEFAULT_PARSER_OPTS

    def descend(self, parent: Node, **changes: Any) -> ConversionContext:
        """Return a child context whose parent is *parent*."""
        return replace(self, parent=parent, **changes)


# ---------------------------------------------------------------------------
# Pipeline result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConversionResult:
    """Output of the Markdown-to-AsciiDoc pipeline.

    Attributes
    ----------
    text:
        The rendered AsciiDoc document.
    document:
        The normalized tree the text was rendered from.
    """

    text: str
    document: Node
