"""Full Markdown-to-AsciiDoc conversion pipeline.

:class:`MarkdownToAsciiDocConverter` orchestrates the two-stage pipeline:

1. **Parse & normalize**: mistune parses raw Markdown and
   :class:`ASTNormalizer` maps the tokens onto the document tree.
2. **Convert**: :class:`AsciiDocConverter` renders the tree to AsciiDoc.

The result is a :class:`ConversionResult` holding the text and the tree
it was rendered from.
"""

from __future__ import annotations

import json
import sys
import time

from asciidocify.config import AsciidocifyConfig
from asciidocify.converter.asciidoc import AsciiDocConverter
from asciidocify.converter.ast_normalizer import ASTNormalizer
from asciidocify.errors import AsciidocifyError
from asciidocify.models import ConversionContext, ConversionResult, Node, count_nodes
from asciidocify.observability import NoopMetricsHook, get_logger
from asciidocify.observability.metrics import (
    CONVERSION_DURATION_MS,
    CONVERSION_ERRORS_TOTAL,
    CONVERSIONS_TOTAL,
    NODES_CONVERTED,
)


class MarkdownToAsciiDocConverter:
    """Convert Markdown text to AsciiDoc.

    Parameters
    ----------
    config:
        Pipeline configuration: parser options, log level, metrics hook
        and debug switches.

    Examples
    --------
    >>> converter = MarkdownToAsciiDocConverter(AsciidocifyConfig())
    >>> converter.convert("---").text
    "'''\\n"
    """

    def __init__(self, config: AsciidocifyConfig | None = None) -> None:
        self._config = config or AsciidocifyConfig()
        self._normalizer = ASTNormalizer(self._config.parser_options)
        self._converter = AsciiDocConverter()
        self._metrics = self._config.metrics or NoopMetricsHook()
        self._log = get_logger("asciidocify.converter", level=self._config.log_level)

    @property
    def config(self) -> AsciidocifyConfig:
        return self._config

    def convert(self, markdown: str) -> ConversionResult:
        """Full pipeline: parse -> normalize -> render.

        Raises
        ------
        AsciidocifyError
            Propagated unchanged from the normalizer or converter after
            being counted and logged.
        """
        start = time.perf_counter()
        try:
            document = self._normalizer.parse(markdown)

            if self._config.debug_dump_ast:
                print(
                    "[asciidocify] Normalized AST:",
                    json.dumps(_node_to_dict(document), indent=2, ensure_ascii=False),
                    file=sys.stderr,
                )

            context = ConversionContext(options=self._config.parser_options)
            text = self._converter.convert(document, context)
        except AsciidocifyError as exc:
            code = getattr(exc.code, "value", exc.code)
            self._metrics.increment(
                CONVERSION_ERRORS_TOTAL, tags={"code": code},
            )
            self._log.warning(
                "conversion failed",
                exc_info=exc,
                extra={"extra_fields": {"input_chars": len(markdown)}},
            )
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000
        nodes = count_nodes(document)
        self._metrics.increment(CONVERSIONS_TOTAL)
        self._metrics.timing(CONVERSION_DURATION_MS, elapsed_ms)
        self._metrics.gauge(NODES_CONVERTED, nodes)
        self._log.debug(
            "conversion complete",
            extra={"extra_fields": {
                "nodes": nodes,
                "input_chars": len(markdown),
                "output_chars": len(text),
                "duration_ms": round(elapsed_ms, 3),
            }},
        )
        return ConversionResult(text=text, document=document)


def markdown_to_asciidoc(markdown: str, config: AsciidocifyConfig | None = None) -> str:
    """Convert *markdown* to AsciiDoc text in one call."""
    return MarkdownToAsciiDocConverter(config).convert(markdown).text


def _node_to_dict(node: Node) -> dict:
    """JSON-friendly view of a node tree for debug dumps."""
    data: dict = {"kind": getattr(node.kind, "value", node.kind)}
    if node.attrs:
        data["attrs"] = dict(node.attrs)
    if node.children:
        data["children"] = [_node_to_dict(child) for child in node.children]
    return data

