"""Document tree to AsciiDoc renderer.

:class:`AsciiDocConverter` walks an immutable :class:`~asciidocify.models.Node`
tree depth-first and returns AsciiDoc text.  Rendering is a pure function
of the tree: the converter keeps no state between (or during) calls, so
one instance can be shared freely across threads.

Block spacing rules:

* paragraphs, headings, code blocks, quotes and thematic breaks end with
  a blank line (``"\\n\\n"``);
* the outermost list ends with a single ``"\\n"``, nested lists with none;
* inline renderers never add spacing of their own.

Usage::

    from asciidocify.converter.asciidoc import convert
    from asciidocify.models import document, paragraph, text

    convert(document(paragraph(text("Note: Remember the milk!"))))
    # 'NOTE: Remember the milk!\\n'
"""

from __future__ import annotations

from collections.abc import Callable as _Callable
from collections.abc import Iterable

from asciidocify.config import DEFAULT_PARSER_OPTS, ParserOptions
from asciidocify.errors import InvalidNodeAttributeError, UnsupportedNodeKindError
from asciidocify.models import INLINE_KINDS, LIST_KINDS, ConversionContext, Node, NodeKind

from .inline_renderer import (
    CODE_MARK,
    EMPHASIS_MARK,
    RAW_MARKUP_MARKERS,
    STRONG_MARK,
    image_macro,
    link_macro,
    list_marker,
    promote_admonition,
    wrap,
)

BLOCK_TERMINATOR = "\n\n"
LISTING_DELIMITER = "----"
QUOTE_DELIMITER = "____"
THEMATIC_BREAK = "'''"


class AsciiDocConverter:
    """Stateless converter from document trees to AsciiDoc text.

    Every ``convert_*`` method takes a node of the matching kind plus an
    optional :class:`ConversionContext` and returns the node's rendered
    fragment.  :meth:`convert` dispatches on ``node.kind``.
    """

    __slots__ = ()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def convert(self, node: Node, context: ConversionContext | None = None) -> str:
        """Render *node* with the renderer registered for its kind.

        Raises
        ------
        UnsupportedNodeKindError
            If ``node.kind`` has no renderer.
        """
        ctx = context if context is not None else ConversionContext()
        renderer = _RENDERERS.get(node.kind)
        if renderer is None:
            raise UnsupportedNodeKindError(node.kind)
        return renderer(self, node, ctx)

    def _convert_inline(self, children: Iterable[Node], ctx: ConversionContext) -> str:
        return "".join(self.convert(child, ctx) for child in children)

    def _convert_blocks(self, children: Iterable[Node], ctx: ConversionContext) -> str:
        out = ""
        for child in children:
            # A list ends with a single newline; keep the next block apart.
            if out.endswith("\n") and not out.endswith(BLOCK_TERMINATOR):
                out += "\n"
            out += self.convert(child, ctx)
        return out

    # ------------------------------------------------------------------
    # Block renderers
    # ------------------------------------------------------------------

    def convert_document(self, node: Node, context: ConversionContext | None = None) -> str:
        """Render the root node; the result ends with exactly one newline."""
        ctx = _checked(node, NodeKind.DOCUMENT, context)
        body = self._convert_blocks(node.children, ctx.descend(node)).rstrip("\n")
        return f"{body}\n" if body else ""

    def convert_paragraph(self, node: Node, context: ConversionContext | None = None) -> str:
        """Render inline children as one run, promoting admonition labels."""
        ctx = _checked(node, NodeKind.PARAGRAPH, context)
        flattened = self._convert_inline(node.children, ctx.descend(node)).rstrip("\n")
        promoted = promote_admonition(flattened)
        if promoted is not None:
            flattened = promoted
        return flattened + BLOCK_TERMINATOR

    def convert_heading(self, node: Node, context: ConversionContext | None = None) -> str:
        ctx = _checked(node, NodeKind.HEADING, context)
        level = node.level
        if not isinstance(level, int) or not 1 <= level <= 6:
            raise InvalidNodeAttributeError(node.kind, "level", level)
        title = self._convert_inline(node.children, ctx.descend(node)).strip()
        return f"{'=' * level} {title}{BLOCK_TERMINATOR}"

    def convert_block_quote(self, node: Node, context: ConversionContext | None = None) -> str:
        ctx = _checked(node, NodeKind.BLOCK_QUOTE, context)
        inner = self._convert_blocks(node.children, ctx.descend(node)).rstrip("\n")
        return f"{QUOTE_DELIMITER}\n{inner}\n{QUOTE_DELIMITER}{BLOCK_TERMINATOR}"

    def convert_unordered_list(self, node: Node, context: ConversionContext | None = None) -> str:
        """Render a bulleted list, one item per line."""
        ctx = _checked(node, NodeKind.UNORDERED_LIST, context)
        return self._convert_list(node, ctx)

    def convert_ordered_list(self, node: Node, context: ConversionContext | None = None) -> str:
        """Render a numbered list using AsciiDoc's implicit ``.`` markers."""
        ctx = _checked(node, NodeKind.ORDERED_LIST, context)
        return self._convert_list(node, ctx)

    def _convert_list(self, node: Node, ctx: ConversionContext) -> str:
        depth = 1 if ctx.list_depth is None else ctx.list_depth + 1
        for item in node.children:
            if item.kind is not NodeKind.LIST_ITEM:
                raise InvalidNodeAttributeError(
                    node.kind, "children", getattr(item.kind, "value", item.kind),
                )
        item_ctx = ctx.descend(node, list_depth=depth)
        body = "\n".join(self.convert_list_item(item, item_ctx) for item in node.children)
        if depth == 1:
            return body + "\n"
        return body

    def convert_list_item(self, node: Node, context: ConversionContext | None = None) -> str:
        """Render one item: marker, item text, then nested lists/blocks.

        The marker comes from the enclosing list (``context.parent``) and
        the nesting depth in ``context.list_depth``.  An item without
        leading text gets a bare marker before a nested list and
        ``{empty}`` otherwise.
        """
        ctx = _checked(node, NodeKind.LIST_ITEM, context)
        depth = ctx.list_depth or 1
        ordered = ctx.parent is not None and ctx.parent.kind is NodeKind.ORDERED_LIST
        child_ctx = ctx.descend(node)

        # (separator, fragment, is_text) following the marker line.
        chunks: list[tuple[str, str, bool]] = []
        inline_run: list[str] = []

        def flush() -> None:
            if inline_run:
                chunks.append(("\n+\n", "".join(inline_run).strip("\n"), True))
                inline_run.clear()

        for child in node.children:
            if child.kind is NodeKind.PARAGRAPH:
                flush()
                inline_run.append(self._convert_inline(child.children, child_ctx.descend(child)))
                flush()
            elif child.kind in LIST_KINDS:
                flush()
                chunks.append(("\n", self.convert(child, child_ctx), False))
            elif child.kind in INLINE_KINDS:
                inline_run.append(self.convert(child, child_ctx))
            else:
                flush()
                chunks.append(("\n+\n", self.convert(child, child_ctx).rstrip("\n"), False))
        flush()

        marker = list_marker(depth, ordered)
        if not chunks:
            return marker + "{empty}"
        if chunks[0][2]:
            out = marker + chunks.pop(0)[1]
        elif chunks[0][0] == "\n":
            out = marker.rstrip()
        else:
            out = marker + "{empty}"
        for separator, fragment, _ in chunks:
            out += separator + fragment
        return out

    def convert_code_block(self, node: Node, context: ConversionContext | None = None) -> str:
        """Render a listing block, tagged ``[source,<language>]`` when known.

        The content is copied verbatim; no escaping or re-indentation.
        """
        _checked(node, NodeKind.CODE_BLOCK, context)
        raw = node.raw_text
        if not isinstance(raw, str):
            raise InvalidNodeAttributeError(node.kind, "raw_text", raw)
        body = raw if not raw or raw.endswith("\n") else raw + "\n"
        header = f"[source,{node.language}]\n" if node.language else ""
        return f"{header}{LISTING_DELIMITER}\n{body}{LISTING_DELIMITER}{BLOCK_TERMINATOR}"

    def convert_thematic_break(self, node: Node, context: ConversionContext | None = None) -> str:
        _checked(node, NodeKind.THEMATIC_BREAK, context)
        return THEMATIC_BREAK + BLOCK_TERMINATOR

    # ------------------------------------------------------------------
    # Inline renderers
    # ------------------------------------------------------------------

    def convert_image(self, node: Node, context: ConversionContext | None = None) -> str:
        """Render a block image when alone in its paragraph, else inline.

        Images anywhere inside a list stay inline so the item is not split.
        """
        ctx = _checked(node, NodeKind.IMAGE, context)
        source = node.source
        if not isinstance(source, str) or not source:
            raise InvalidNodeAttributeError(node.kind, "source", source)
        parent = ctx.parent
        block = (
            parent is not None
            and parent.kind is NodeKind.PARAGRAPH
            and len(parent.children) == 1
            and ctx.list_depth is None
        )
        return image_macro(source, node.alt_text, node.title, block=block)

    def convert_raw_markup(self, node: Node, context: ConversionContext | None = None) -> str:
        """Translate an embedded bold/italic/monospace span."""
        ctx = _checked(node, NodeKind.RAW_MARKUP, context)
        mark = RAW_MARKUP_MARKERS.get(node.tag_name)
        if mark is None:
            raise InvalidNodeAttributeError(node.kind, "tag_name", node.tag_name)
        return wrap(self._convert_inline(node.children, ctx.descend(node)), mark)

    def convert_text(self, node: Node, context: ConversionContext | None = None) -> str:
        _checked(node, NodeKind.TEXT, context)
        return node.value

    def convert_emphasis(self, node: Node, context: ConversionContext | None = None) -> str:
        ctx = _checked(node, NodeKind.EMPHASIS, context)
        return wrap(self._convert_inline(node.children, ctx.descend(node)), EMPHASIS_MARK)

    def convert_strong(self, node: Node, context: ConversionContext | None = None) -> str:
        ctx = _checked(node, NodeKind.STRONG, context)
        return wrap(self._convert_inline(node.children, ctx.descend(node)), STRONG_MARK)

    def convert_code_span(self, node: Node, context: ConversionContext | None = None) -> str:
        _checked(node, NodeKind.CODE_SPAN, context)
        return wrap(node.value, CODE_MARK)

    def convert_link(self, node: Node, context: ConversionContext | None = None) -> str:
        ctx = _checked(node, NodeKind.LINK, context)
        url = node.url
        if not isinstance(url, str) or not url:
            raise InvalidNodeAttributeError(node.kind, "url", url)
        return link_macro(url, self._convert_inline(node.children, ctx.descend(node)))

    def convert_line_break(self, node: Node, context: ConversionContext | None = None) -> str:
        _checked(node, NodeKind.LINE_BREAK, context)
        return " +\n"

    def convert_soft_break(self, node: Node, context: ConversionContext | None = None) -> str:
        _checked(node, NodeKind.SOFT_BREAK, context)
        return "\n"


# ------------------------------------------------------------------
# Renderer dispatch table
# ------------------------------------------------------------------

_Renderer = _Callable[[AsciiDocConverter, Node, ConversionContext], str]

_RENDERERS: dict[NodeKind, _Renderer] = {
    NodeKind.DOCUMENT: AsciiDocConverter.convert_document,
    NodeKind.PARAGRAPH: AsciiDocConverter.convert_paragraph,
    NodeKind.HEADING: AsciiDocConverter.convert_heading,
    NodeKind.BLOCK_QUOTE: AsciiDocConverter.convert_block_quote,
    NodeKind.UNORDERED_LIST: AsciiDocConverter.convert_unordered_list,
    NodeKind.ORDERED_LIST: AsciiDocConverter.convert_ordered_list,
    NodeKind.LIST_ITEM: AsciiDocConverter.convert_list_item,
    NodeKind.IMAGE: AsciiDocConverter.convert_image,
    NodeKind.CODE_BLOCK: AsciiDocConverter.convert_code_block,
    NodeKind.THEMATIC_BREAK: AsciiDocConverter.convert_thematic_break,
    NodeKind.RAW_MARKUP: AsciiDocConverter.convert_raw_markup,
    NodeKind.TEXT: AsciiDocConverter.convert_text,
    NodeKind.EMPHASIS: AsciiDocConverter.convert_emphasis,
    NodeKind.STRONG: AsciiDocConverter.convert_strong,
    NodeKind.CODE_SPAN: AsciiDocConverter.convert_code_span,
    NodeKind.LINK: AsciiDocConverter.convert_link,
    NodeKind.LINE_BREAK: AsciiDocConverter.convert_line_break,
    NodeKind.SOFT_BREAK: AsciiDocConverter.convert_soft_break,
}

# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _checked(
    node: Node, kind: NodeKind, context: ConversionContext | None,
) -> ConversionContext:
    """Verify *node* is of *kind* and return a usable context."""
    if node.kind is not kind:
        raise InvalidNodeAttributeError(
            getattr(node.kind, "value", node.kind),
            "kind",
            getattr(node.kind, "value", node.kind),
            message=f"Expected a {kind.value} node, got {getattr(node.kind, 'value', node.kind)!r}",
        )
    return context if context is not None else ConversionContext()


_DEFAULT_CONVERTER = AsciiDocConverter()


def convert(root: Node, options: ParserOptions | None = None) -> str:
    """Render a whole document tree to AsciiDoc.

    Parameters
    ----------
    root:
        The document node produced by the parser.
    options:
        The parser options the tree was built with.  Passed through to
        the context unopened; defaults to :data:`DEFAULT_PARSER_OPTS`.

    Returns
    -------
    str
        The AsciiDoc text.
    """
    ctx = ConversionContext(options=options if options is not None else DEFAULT_PARSER_OPTS)
    return _DEFAULT_CONVERTER.convert(root, ctx)
