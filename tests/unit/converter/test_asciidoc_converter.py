"""Tests for AsciiDocConverter on hand-built document trees.

Each renderer is invoked directly with a node of its kind, the same way
the dispatcher invokes it, plus whole-document checks through convert().
"""

from __future__ import annotations

import dataclasses
from concurrent.futures import ThreadPoolExecutor

import pytest

from asciidocify.config import DEFAULT_PARSER_OPTS, ParserOptions
from asciidocify.converter.asciidoc import _RENDERERS, AsciiDocConverter, convert
from asciidocify.errors import (
    ErrorCode,
    InvalidNodeAttributeError,
    UnsupportedNodeKindError,
)
from asciidocify.models import (
    ConversionContext,
    Node,
    NodeKind,
    block_quote,
    code_block,
    code_span,
    document,
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


def _item(label: str, *nested: Node) -> Node:
    return list_item(paragraph(text(label)), *nested)


def _bullets(*labels: str) -> Node:
    return unordered_list(*(_item(label) for label in labels))


# =========================================================================
# Dispatcher
# =========================================================================

class TestDispatcher:
    def test_every_kind_has_a_renderer(self):
        assert set(_RENDERERS) == set(NodeKind)

    def test_dispatches_on_kind(self, converter):
        assert converter.convert(thematic_break()) == "'''\n\n"
        assert converter.convert(text("plain")) == "plain"

    def test_unmodeled_kind_raises(self, converter):
        with pytest.raises(UnsupportedNodeKindError) as exc_info:
            converter.convert(Node("footnote"))
        err = exc_info.value
        assert err.code == ErrorCode.UNSUPPORTED_NODE_KIND
        assert err.node_kind == "footnote"
        assert err.context == {"node_kind": "footnote"}

    def test_unmodeled_kind_nested_in_document_raises(self, converter):
        tree = document(paragraph(text("ok")), Node("table"))
        with pytest.raises(UnsupportedNodeKindError):
            converter.convert(tree)

    def test_string_kind_is_coerced(self, converter):
        node = Node("paragraph", (text("hi"),))
        assert node.kind is NodeKind.PARAGRAPH
        assert converter.convert(node) == "hi\n\n"

    def test_renderer_rejects_wrong_kind(self, converter):
        with pytest.raises(InvalidNodeAttributeError) as exc_info:
            converter.convert_paragraph(text("not a paragraph"))
        assert exc_info.value.attribute == "kind"


# =========================================================================
# Paragraphs and admonitions
# =========================================================================

class TestParagraph:
    def test_normal_paragraph(self, converter):
        node = paragraph(text("A normal paragraph."))
        assert converter.convert_paragraph(node) == "A normal paragraph.\n\n"

    def test_inline_children_are_concatenated(self, converter):
        node = paragraph(text("a "), strong(text("b")), text(" "), emphasis(text("c")))
        assert converter.convert_paragraph(node) == "a *b* _c_\n\n"

    def test_trailing_newlines_collapse_to_terminator(self, converter):
        node = paragraph(text("ends with a break"), soft_break())
        assert converter.convert_paragraph(node) == "ends with a break\n\n"

    def test_empty_paragraph(self, converter):
        assert converter.convert_paragraph(paragraph()) == "\n\n"


class TestAdmonitionLabel:
    EXPECTED = "NOTE: Remember the milk!\n\n"

    def test_plain_label(self, converter):
        node = paragraph(text("Note: Remember the milk!"))
        assert converter.convert_paragraph(node) == self.EXPECTED

    def test_emphasized_label(self, converter):
        node = paragraph(emphasis(text("Note:")), text(" Remember the milk!"))
        assert converter.convert_paragraph(node) == self.EXPECTED

    def test_strong_label(self, converter):
        node = paragraph(strong(text("Note:")), text(" Remember the milk!"))
        assert converter.convert_paragraph(node) == self.EXPECTED

    def test_colon_outside_emphasis(self, converter):
        node = paragraph(emphasis(text("Note")), text(": Remember the milk!"))
        assert converter.convert_paragraph(node) == self.EXPECTED

    def test_colon_outside_strong(self, converter):
        node = paragraph(strong(text("Note")), text(": Remember the milk!"))
        assert converter.convert_paragraph(node) == self.EXPECTED

    @pytest.mark.parametrize("label", ["Note", "Tip", "Important", "Caution", "Warning"])
    def test_every_label(self, converter, label):
        node = paragraph(text(f"{label}: x"))
        assert converter.convert_paragraph(node) == f"{label.upper()}: x\n\n"

    def test_label_followed_by_line_break(self, converter):
        node = paragraph(text("Note:"), soft_break(), text("Remember the milk!"))
        assert converter.convert_paragraph(node) == self.EXPECTED

    def test_emphasized_label_followed_by_line_break(self, converter):
        node = paragraph(strong(text("Note:")), soft_break(), text("Remember the milk!"))
        assert converter.convert_paragraph(node) == self.EXPECTED

    def test_case_insensitive(self, converter):
        node = paragraph(text("warning: hot surface"))
        assert converter.convert_paragraph(node) == "WARNING: hot surface\n\n"

    def test_rest_keeps_formatting(self, converter):
        node = paragraph(text("Caution: "), strong(text("hot")))
        assert converter.convert_paragraph(node) == "CAUTION: *hot*\n\n"

    @pytest.mark.parametrize("value", [
        "Notebook: x",
        "Note x",
        "A Note: x",
        "Notes: x",
        "Note:: x",
        "Note:x",
    ])
    def test_non_labels_unchanged(self, converter, value):
        node = paragraph(text(value))
        assert converter.convert_paragraph(node) == f"{value}\n\n"

    def test_mismatched_wrapper_unchanged(self, converter):
        node = paragraph(text("*Note:_ x"))
        assert converter.convert_paragraph(node) == "*Note:_ x\n\n"

    def test_colon_inside_and_outside_unchanged(self, converter):
        node = paragraph(emphasis(text("Note:")), text(": x"))
        assert converter.convert_paragraph(node) == "_Note:_: x\n\n"


# =========================================================================
# Lists
# =========================================================================

class TestUnorderedList:
    def test_flat_list(self, converter):
        node = _bullets("bread", "milk", "eggs")
        assert converter.convert_unordered_list(node) == "* bread\n* milk\n* eggs\n"

    def test_nested_list(self, converter):
        node = unordered_list(
            _item("bread", _bullets("white", "sourdough", "rye")),
            _item("milk", _bullets("2%", "whole", "soy")),
            _item("eggs", _bullets("white", "brown")),
        )
        expected = (
            "* bread\n"
            " ** white\n"
            " ** sourdough\n"
            " ** rye\n"
            "* milk\n"
            " ** 2%\n"
            " ** whole\n"
            " ** soy\n"
            "* eggs\n"
            " ** white\n"
            " ** brown\n"
        )
        assert converter.convert_unordered_list(node) == expected

    def test_third_level(self, converter):
        node = unordered_list(_item("a", unordered_list(_item("b", _bullets("c")))))
        assert converter.convert_unordered_list(node) == "* a\n ** b\n  *** c\n"

    def test_outermost_list_ends_with_single_newline(self, converter):
        out = converter.convert_unordered_list(_bullets("x", "y"))
        assert out.endswith("\n")
        assert not out.endswith("\n\n")

    def test_nested_list_adds_no_trailing_newline(self, converter):
        nested = _bullets("inner")
        ctx = ConversionContext(list_depth=1)
        assert converter.convert_unordered_list(nested, ctx) == " ** inner"

    def test_rejects_non_item_children(self, converter):
        node = unordered_list(paragraph(text("stray")))
        with pytest.raises(InvalidNodeAttributeError) as exc_info:
            converter.convert_unordered_list(node)
        assert exc_info.value.attribute == "children"
        assert exc_info.value.node_kind == "unordered_list"

    def test_empty_list(self, converter):
        assert converter.convert_unordered_list(unordered_list()) == "\n"


class TestOrderedList:
    def test_flat_list(self, converter):
        node = ordered_list(_item("one"), _item("two"))
        assert converter.convert_ordered_list(node) == ". one\n. two\n"

    def test_nested_ordered_in_unordered(self, converter):
        node = unordered_list(_item("a", ordered_list(_item("b"))))
        assert converter.convert_unordered_list(node) == "* a\n .. b\n"


class TestListItem:
    def test_direct_call_defaults_to_depth_one(self, converter):
        assert converter.convert_list_item(_item("solo")) == "* solo"

    def test_inline_children_without_paragraph(self, converter):
        node = unordered_list(list_item(text("plain "), code_span("code")))
        assert converter.convert_unordered_list(node) == "* plain `code`\n"

    def test_second_paragraph_uses_continuation(self, converter):
        node = unordered_list(list_item(paragraph(text("first")), paragraph(text("second"))))
        assert converter.convert_unordered_list(node) == "* first\n+\nsecond\n"

    def test_code_block_attached_with_continuation(self, converter):
        node = unordered_list(list_item(paragraph(text("run")), code_block("make", "sh")))
        expected = "* run\n+\n[source,sh]\n----\nmake\n----\n"
        assert converter.convert_unordered_list(node) == expected

    def test_image_in_item_stays_inline(self, converter):
        node = unordered_list(list_item(paragraph(image("a.png", "A"))))
        assert converter.convert_unordered_list(node) == "* image:a.png[A]\n"

    def test_item_without_text_before_nested_list(self, converter):
        node = unordered_list(list_item(_bullets("x")))
        assert converter.convert_unordered_list(node) == "*\n ** x\n"

    def test_item_without_text_before_block(self, converter):
        node = unordered_list(list_item(code_block("make")))
        assert converter.convert_unordered_list(node) == "* {empty}\n+\n----\nmake\n----\n"

    def test_empty_item(self, converter):
        assert converter.convert_unordered_list(unordered_list(list_item())) == "* {empty}\n"

    def test_paragraph_is_parent_of_item_inlines(self, converter):
        seen = []

        class Recording(AsciiDocConverter):
            __slots__ = ()

            def convert(self, node, context=None):
                if node.kind is NodeKind.TEXT:
                    seen.append(context.parent.kind)
                return super().convert(node, context)

        Recording().convert_unordered_list(unordered_list(_item("a")))
        assert seen == [NodeKind.PARAGRAPH]


# =========================================================================
# Images
# =========================================================================

class TestImage:
    def test_inline_image(self, converter):
        p = paragraph(text("See the "), image("rate-of-growth.png", "Rate of Growth"))
        ctx = ConversionContext(parent=p)
        assert converter.convert_image(p.children[-1], ctx) == "image:rate-of-growth.png[Rate of Growth]"

    def test_inline_image_adjacent_to_text(self, converter):
        p = paragraph(text("See the "), image("rate-of-growth.png", "Rate of Growth"))
        assert converter.convert_paragraph(p) == "See the image:rate-of-growth.png[Rate of Growth]\n\n"

    def test_block_image(self, converter):
        p = paragraph(image("rate-of-growth.png", "Rate of Growth"))
        assert converter.convert_paragraph(p) == "image::rate-of-growth.png[Rate of Growth]\n\n"

    def test_sole_image_inside_list_is_inline(self, converter):
        p = paragraph(image("a.png", "A"))
        ctx = ConversionContext(parent=p, list_depth=1)
        assert converter.convert_image(p.children[0], ctx) == "image:a.png[A]"

    def test_image_without_parent_is_inline(self, converter):
        assert converter.convert_image(image("x.png", "X")) == "image:x.png[X]"

    def test_empty_alt_text(self, converter):
        p = paragraph(image("x.png"))
        assert converter.convert_paragraph(p) == "image::x.png[]\n\n"

    def test_title(self, converter):
        node = image("a.png", "A", title='Fig "1"')
        assert converter.convert_image(node) == 'image:a.png[A,title="Fig \\"1\\""]'

    def test_empty_source_raises(self, converter):
        with pytest.raises(InvalidNodeAttributeError) as exc_info:
            converter.convert_image(image(""))
        err = exc_info.value
        assert err.code == ErrorCode.INVALID_NODE_ATTRIBUTE
        assert err.node_kind == "image"
        assert err.attribute == "source"


# =========================================================================
# Code blocks and thematic breaks
# =========================================================================

class TestCodeBlock:
    def test_without_language(self, converter):
        node = code_block("All your code.\n\nBelong to us.")
        expected = "----\nAll your code.\n\nBelong to us.\n----\n\n"
        assert converter.convert_code_block(node) == expected

    def test_with_language(self, converter):
        source = (
            "public class AllYourCode {\n"
            "  public String getBelongsTo() {\n"
            '    return "Us.";\n'
            "  }\n"
            "}"
        )
        expected = f"[source,java]\n----\n{source}\n----\n\n"
        assert converter.convert_code_block(code_block(source, "java")) == expected

    def test_content_is_not_escaped(self, converter):
        node = code_block("*not bold* <b>x</b> ----")
        assert converter.convert_code_block(node) == "----\n*not bold* <b>x</b> ----\n----\n\n"

    def test_existing_trailing_newline_not_doubled(self, converter):
        assert converter.convert_code_block(code_block("x\n")) == "----\nx\n----\n\n"

    def test_empty_content(self, converter):
        assert converter.convert_code_block(code_block("")) == "----\n----\n\n"


class TestThematicBreak:
    def test_renders_three_quotes(self, converter):
        assert converter.convert_thematic_break(thematic_break()) == "'''\n\n"


# =========================================================================
# Raw markup and inline spans
# =========================================================================

class TestRawMarkup:
    @pytest.mark.parametrize(("tag", "expected"), [
        ("bold", "*x*"),
        ("italic", "_x_"),
        ("monospace", "`x`"),
    ])
    def test_markers(self, converter, tag, expected):
        assert converter.convert_raw_markup(raw_markup(tag, text("x"))) == expected

    def test_spacing_preserved(self, converter):
        node = paragraph(
            raw_markup("bold", text("bold")),
            text(" "),
            raw_markup("italic", text("italic")),
            text(" "),
            raw_markup("monospace", text("mono")),
        )
        assert converter.convert_paragraph(node) == "*bold* _italic_ `mono`\n\n"

    def test_nested_markup(self, converter):
        node = raw_markup("bold", text("a "), raw_markup("italic", text("b")))
        assert converter.convert_raw_markup(node) == "*a _b_*"

    def test_unknown_tag_raises(self, converter):
        with pytest.raises(InvalidNodeAttributeError) as exc_info:
            converter.convert_raw_markup(raw_markup("blink", text("x")))
        assert exc_info.value.attribute == "tag_name"


class TestInlineSpans:
    def test_text_is_verbatim(self, converter):
        assert converter.convert_text(text("a *b* _c_")) == "a *b* _c_"

    def test_code_span(self, converter):
        assert converter.convert_code_span(code_span("x = 1")) == "`x = 1`"

    def test_link_with_label(self, converter):
        node = link("https://asciidoc.org", text("AsciiDoc"))
        assert converter.convert_link(node) == "https://asciidoc.org[AsciiDoc]"

    def test_autolink(self, converter):
        node = link("https://asciidoc.org", text("https://asciidoc.org"))
        assert converter.convert_link(node) == "https://asciidoc.org"

    def test_link_without_url_raises(self, converter):
        with pytest.raises(InvalidNodeAttributeError) as exc_info:
            converter.convert_link(link("", text("x")))
        assert exc_info.value.attribute == "url"

    def test_line_break(self, converter):
        node = paragraph(text("a"), line_break(), text("b"))
        assert converter.convert_paragraph(node) == "a +\nb\n\n"

    def test_soft_break(self, converter):
        node = paragraph(text("a"), soft_break(), text("b"))
        assert converter.convert_paragraph(node) == "a\nb\n\n"


# =========================================================================
# Headings, quotes, documents
# =========================================================================

class TestHeadingAndQuote:
    @pytest.mark.parametrize("level", [1, 2, 3, 6])
    def test_heading_levels(self, converter, level):
        node = heading(level, text("Title"))
        assert converter.convert_heading(node) == f"{'=' * level} Title\n\n"

    def test_heading_level_out_of_range(self, converter):
        with pytest.raises(InvalidNodeAttributeError) as exc_info:
            converter.convert_heading(heading(7, text("Too deep")))
        assert exc_info.value.attribute == "level"

    def test_block_quote(self, converter):
        node = block_quote(paragraph(text("one")), paragraph(text("two")))
        assert converter.convert_block_quote(node) == "____\none\n\ntwo\n____\n\n"


class TestDocument:
    def test_blocks_are_separated(self):
        tree = document(
            heading(1, text("Groceries")),
            _bullets("bread", "milk"),
            paragraph(text("Done.")),
            thematic_break(),
        )
        expected = "= Groceries\n\n* bread\n* milk\n\nDone.\n\n'''\n"
        assert convert(tree) == expected

    def test_empty_document(self):
        assert convert(document()) == ""

    def test_error_propagates_from_deep_node(self):
        tree = document(_bullets("ok"), unordered_list(list_item(paragraph(image("")))))
        with pytest.raises(InvalidNodeAttributeError):
            convert(tree)

    def test_options_do_not_change_output(self):
        tree = document(paragraph(text("Note: x")), _bullets("a"))
        custom = ParserOptions(html_to_native=False, hard_wrap=True)
        assert convert(tree, custom) == convert(tree, DEFAULT_PARSER_OPTS)

    def test_conversion_is_deterministic(self):
        tree = document(paragraph(strong(text("Tip:")), text(" x")), code_block("y", "py"))
        assert convert(tree) == convert(tree)

    def test_tree_is_read_only(self):
        node = image("a.png", "A")
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.kind = NodeKind.TEXT  # type: ignore[misc]
        with pytest.raises(TypeError):
            node.attrs["source"] = "b.png"  # type: ignore[index]

    def test_shared_converter_across_threads(self):
        shared = AsciiDocConverter()
        tree = document(
            paragraph(emphasis(text("Note")), text(": threads")),
            unordered_list(_item("a", _bullets("b"))),
        )
        expected = shared.convert(tree)
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: shared.convert(tree), range(64)))
        assert all(r == expected for r in results)
