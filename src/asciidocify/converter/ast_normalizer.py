"""Parse Markdown and normalize the token stream into a document tree.

This module wraps mistune v3's AST renderer and maps its raw token
stream onto the closed :class:`~asciidocify.models.NodeKind` set consumed
by :class:`~asciidocify.converter.asciidoc.AsciiDocConverter`.

Block tokens:
    paragraph, block_text, heading, block_quote, list, list_item,
    block_code, thematic_break, block_html

Inline tokens:
    text, emphasis, strong, codespan, link, image, linebreak, softbreak,
    inline_html

Embedded HTML is translated to native nodes with BeautifulSoup when
:attr:`ParserOptions.html_to_native` is set (``<b>`` becomes a ``bold``
raw-markup node, ``<p>`` a paragraph...).  Otherwise it is kept verbatim
as text.  Any other token type raises :class:`UnsupportedNodeKindError`.
"""

from __future__ import annotations

from collections.abc import Callable as _Callable

import mistune
from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment, Doctype, ProcessingInstruction

from asciidocify.config import DEFAULT_PARSER_OPTS, ParserOptions
from asciidocify.errors import UnsupportedNodeKindError
from asciidocify.models import (
    Node,
    NodeKind,
    block_quote,
    code_block,
    code_span,
    emphasis,
    heading,
    image,
    line_break,
    link,
    list_item,
    ordered_list,
    paragraph,
    raw_markup,
    soft_break,
    strong,
    text,
    thematic_break,
    unordered_list,
)

# Types that are silently skipped during normalization
_SKIP_TYPES: frozenset[str] = frozenset({
    "blank_line",
})

# ---------------------------------------------------------------------------
# HTML-to-native mapping
# ---------------------------------------------------------------------------

_HTML_RAW_MARKUP_TAGS: dict[str, str] = {
    "b": "bold",
    "strong": "bold",
    "i": "italic",
    "em": "italic",
    "code": "monospace",
    "tt": "monospace",
    "kbd": "monospace",
    "samp": "monospace",
}

_HTML_HEADING_TAGS: dict[str, int] = {f"h{level}": level for level in range(1, 7)}

_HTML_SKIP_STRINGS = (Comment, Doctype, ProcessingInstruction)

# Stand-in element for already-normalized Markdown tokens interleaved
# with inline HTML; replaced by the node at ``data-index`` after parsing.
_PLACEHOLDER_TAG = "asciidocify-node"


class ASTNormalizer:
    """Parse Markdown and normalize it to a DOCUMENT :class:`Node`.

    Parameters
    ----------
    options:
        Parser toggles.  ``hard_wrap`` and ``plugins`` are handed to
        mistune; ``html_to_native`` controls embedded HTML translation.
    """

    def __init__(self, options: ParserOptions = DEFAULT_PARSER_OPTS) -> None:
        self._options = options
        self._parser = mistune.create_markdown(
            renderer="ast",
            hard_wrap=options.hard_wrap,
            plugins=list(options.plugins),
        )

    @property
    def options(self) -> ParserOptions:
        return self._options

    def parse(self, markdown: str) -> Node:
        """Parse *markdown* and return the normalized document tree."""
        raw_tokens = self._parser(markdown)
        if isinstance(raw_tokens, str):
            return Node(NodeKind.DOCUMENT)
        return Node(NodeKind.DOCUMENT, tuple(self._normalize_blocks(raw_tokens)))

    # ------------------------------------------------------------------
    # Block tokens
    # ------------------------------------------------------------------

    def _normalize_blocks(self, tokens: list[dict]) -> list[Node]:
        nodes: list[Node] = []
        for token in tokens:
            raw_type = token.get("type", "")
            if raw_type in _SKIP_TYPES:
                continue
            handler = _BLOCK_HANDLERS.get(raw_type)
            if handler is None:
                raise UnsupportedNodeKindError(
                    raw_type,
                    message=f"Parser token {raw_type!r} has no AsciiDoc equivalent",
                )
            nodes.extend(handler(self, token))
        return nodes

    def _paragraph(self, token: dict) -> list[Node]:
        return [paragraph(*self._normalize_inline(token.get("children", [])))]

    def _heading(self, token: dict) -> list[Node]:
        level = token.get("attrs", {}).get("level", 1)
        return [heading(level, *self._normalize_inline(token.get("children", [])))]

    def _block_quote(self, token: dict) -> list[Node]:
        return [block_quote(*self._normalize_blocks(token.get("children", [])))]

    def _list(self, token: dict) -> list[Node]:
        ordered = token.get("attrs", {}).get("ordered", False)
        items = self._normalize_blocks(token.get("children", []))
        factory = ordered_list if ordered else unordered_list
        return [factory(*items)]

    def _list_item(self, token: dict) -> list[Node]:
        return [list_item(*self._normalize_blocks(token.get("children", [])))]

    def _block_code(self, token: dict) -> list[Node]:
        raw_code = token.get("raw", "")
        # Strip trailing newline added by mistune
        if raw_code.endswith("\n"):
            raw_code = raw_code[:-1]
        info = (token.get("attrs") or {}).get("info") or ""
        words = info.split()
        language = words[0] if words else None
        return [code_block(raw_code, language)]

    def _thematic_break(self, token: dict) -> list[Node]:
        return [thematic_break()]

    def _block_html(self, token: dict) -> list[Node]:
        raw = token.get("raw", "")
        if not self._options.html_to_native:
            stripped = raw.strip("\n")
            return [paragraph(text(stripped))] if stripped else []
        soup = BeautifulSoup(raw, "html.parser")
        return _html_blocks(soup.contents)

    # ------------------------------------------------------------------
    # Inline tokens
    # ------------------------------------------------------------------

    def _normalize_inline(self, tokens: list[dict]) -> list[Node]:
        if self._options.html_to_native and any(
            t.get("type") == "inline_html" for t in tokens
        ):
            return self._fold_inline_html(tokens)
        nodes: list[Node] = []
        for token in tokens:
            nodes.extend(self._normalize_inline_token(token))
        return nodes

    def _normalize_inline_token(self, token: dict) -> list[Node]:
        raw_type = token.get("type", "")
        if raw_type == "text":
            raw = token.get("raw", "")
            return [text(raw)] if raw else []
        if raw_type == "emphasis":
            return [emphasis(*self._normalize_inline(token.get("children", [])))]
        if raw_type == "strong":
            return [strong(*self._normalize_inline(token.get("children", [])))]
        if raw_type == "codespan":
            return [code_span(token.get("raw", ""))]
        if raw_type == "link":
            attrs = token.get("attrs", {})
            return [link(
                attrs.get("url", ""),
                *self._normalize_inline(token.get("children", [])),
                title=attrs.get("title"),
            )]
        if raw_type == "image":
            attrs = token.get("attrs", {})
            return [image(
                attrs.get("url", ""),
                _plain_text(token.get("children", [])),
                attrs.get("title"),
            )]
        if raw_type == "linebreak":
            return [line_break()]
        if raw_type == "softbreak":
            return [soft_break()]
        if raw_type == "inline_html":
            # Only reached with html_to_native disabled.
            return [text(token.get("raw", ""))]
        raise UnsupportedNodeKindError(
            raw_type,
            message=f"Parser token {raw_type!r} has no AsciiDoc equivalent",
        )

    def _fold_inline_html(self, tokens: list[dict]) -> list[Node]:
        """Rebuild nesting across mistune's flat ``inline_html`` tokens.

        Mistune emits ``<b>``, ``bold``, ``</b>`` as three siblings.  The
        run is serialised back to one HTML fragment, with every non-HTML
        token swapped for a placeholder element, parsed once and mapped
        back to nodes.
        """
        placeholders: list[list[Node]] = []
        fragment: list[str] = []
        for token in tokens:
            if token.get("type") == "inline_html":
                fragment.append(token.get("raw", ""))
            else:
                fragment.append(
                    f'<{_PLACEHOLDER_TAG} data-index="{len(placeholders)}"></{_PLACEHOLDER_TAG}>'
                )
                placeholders.append(self._normalize_inline_token(token))
        soup = BeautifulSoup("".join(fragment), "html.parser")
        return _html_inline(soup.contents, placeholders)


# ---------------------------------------------------------------------------
# Block handler dispatch table
# ---------------------------------------------------------------------------

_BlockHandler = _Callable[[ASTNormalizer, dict], list[Node]]

_BLOCK_HANDLERS: dict[str, _BlockHandler] = {
    "paragraph": ASTNormalizer._paragraph,
    # Internal mistune type for tight list items
    "block_text": ASTNormalizer._paragraph,
    "heading": ASTNormalizer._heading,
    "block_quote": ASTNormalizer._block_quote,
    "list": ASTNormalizer._list,
    "list_item": ASTNormalizer._list_item,
    "block_code": ASTNormalizer._block_code,
    "thematic_break": ASTNormalizer._thematic_break,
    "block_html": ASTNormalizer._block_html,
}


# ---------------------------------------------------------------------------
# HTML helpers
# ---------------------------------------------------------------------------

def _plain_text(tokens: list[dict]) -> str:
    """Flatten inline tokens to their text content (used for alt text)."""
    parts: list[str] = []
    for token in tokens:
        if "raw" in token:
            parts.append(token["raw"])
        elif token.get("children"):
            parts.append(_plain_text(token["children"]))
    return "".join(parts)


def _html_blocks(elements: list) -> list[Node]:
    """Convert top-level HTML elements to block nodes.

    Runs of inline content between block elements are gathered into
    paragraphs; whitespace-only runs are dropped.
    """
    blocks: list[Node] = []
    pending: list[Node] = []

    def flush() -> None:
        if any(n.kind is not NodeKind.TEXT or n.value.strip() for n in pending):
            blocks.append(paragraph(*_trim_text_edges(pending)))
        pending.clear()

    for element in elements:
        if isinstance(element, Tag):
            name = element.name.lower()
            if name == "p":
                flush()
                blocks.append(paragraph(*_trim_text_edges(_html_inline(element.contents))))
                continue
            if name in _HTML_HEADING_TAGS:
                flush()
                blocks.append(heading(
                    _HTML_HEADING_TAGS[name], *_trim_text_edges(_html_inline(element.contents)),
                ))
                continue
            if name == "hr":
                flush()
                blocks.append(thematic_break())
                continue
            if name == "pre":
                flush()
                blocks.append(code_block(element.get_text().strip("\n")))
                continue
            if name == "blockquote":
                flush()
                blocks.append(block_quote(*_html_blocks(element.contents)))
                continue
            if name in ("ul", "ol"):
                flush()
                blocks.append(_html_list(element))
                continue
            if name in ("div", "section", "article"):
                flush()
                blocks.extend(_html_blocks(element.contents))
                continue
        pending.extend(_html_inline([element]))
    flush()
    return blocks


def _html_list(element: Tag) -> Node:
    items: list[Node] = []
    for child in element.find_all("li", recursive=False):
        inline: list = []
        nested: list[Node] = []
        for part in child.contents:
            if isinstance(part, Tag) and part.name.lower() in ("ul", "ol"):
                nested.append(_html_list(part))
            else:
                inline.append(part)
        content = _trim_text_edges(_html_inline(inline))
        items.append(list_item(*([paragraph(*content)] if content else []), *nested))
    factory = ordered_list if element.name.lower() == "ol" else unordered_list
    return factory(*items)


def _html_inline(
    elements: list,
    placeholders: list[list[Node]] | None = None,
) -> list[Node]:
    """Convert HTML elements to inline nodes, unwrapping unknown tags."""
    nodes: list[Node] = []
    for element in elements:
        if isinstance(element, _HTML_SKIP_STRINGS):
            continue
        if isinstance(element, NavigableString):
            value = str(element)
            if value:
                nodes.append(text(value))
            continue
        if not isinstance(element, Tag):
            continue
        name = element.name.lower()
        if name == _PLACEHOLDER_TAG and placeholders is not None:
            nodes.extend(placeholders[int(element.get("data-index", 0))])
            # html.parser nests following content inside unclosed tags.
            nodes.extend(_html_inline(element.contents, placeholders))
            continue
        children = _html_inline(element.contents, placeholders)
        if name in _HTML_RAW_MARKUP_TAGS:
            nodes.append(raw_markup(_HTML_RAW_MARKUP_TAGS[name], *children))
        elif name == "br":
            nodes.append(line_break())
        elif name == "img":
            src = element.get("src", "")
            nodes.append(image(src, element.get("alt", ""), element.get("title")))
        elif name == "a" and element.get("href"):
            nodes.append(link(element["href"], *children, title=element.get("title")))
        else:
            nodes.extend(children)
    return nodes


def _trim_text_edges(nodes: list[Node]) -> list[Node]:
    """Strip leading/trailing whitespace from the outer text nodes."""
    trimmed = list(nodes)
    if trimmed and trimmed[0].kind is NodeKind.TEXT:
        value = trimmed[0].value.lstrip()
        trimmed[0:1] = [text(value)] if value else []
    if trimmed and trimmed[-1].kind is NodeKind.TEXT:
        value = trimmed[-1].value.rstrip()
        trimmed[-1:] = [text(value)] if value else []
    return trimmed
