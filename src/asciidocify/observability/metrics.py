"""Metrics emitted by the Markdown-to-AsciiDoc pipeline.

Each :meth:`MarkdownToAsciiDocConverter.convert` call reports exactly one
outcome.  A successful run bumps :data:`CONVERSIONS_TOTAL`, times itself
under :data:`CONVERSION_DURATION_MS` and sets :data:`NODES_CONVERTED` to
the size of the rendered tree.  A run that raises bumps
:data:`CONVERSION_ERRORS_TOTAL`, tagged with the error's ``code``, and
records nothing else.

Pass any object with ``increment``/``timing``/``gauge`` as
``AsciidocifyConfig.metrics`` to forward these to StatsD, Prometheus and
the like; otherwise :class:`NoopMetricsHook` drops them.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

CONVERSIONS_TOTAL = "asciidocify.conversions_total"
CONVERSION_ERRORS_TOTAL = "asciidocify.conversion_errors_total"
CONVERSION_DURATION_MS = "asciidocify.conversion_duration_ms"
NODES_CONVERTED = "asciidocify.nodes_converted"


@runtime_checkable
class MetricsHook(Protocol):
    """Sink for pipeline metrics.

    *tags* is ``None`` except on :data:`CONVERSION_ERRORS_TOTAL`, which
    carries ``{"code": <ErrorCode value>}``.
    """

    def increment(self, name: str, value: int = 1, tags: dict[str, str] | None = None) -> None:
        """Count one finished conversion (or one failed conversion)."""
        ...

    def timing(self, name: str, ms: float, tags: dict[str, str] | None = None) -> None:
        """Record parse-plus-render wall time of a successful conversion."""
        ...

    def gauge(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        """Report the node count of the tree just rendered."""
        ...


class NoopMetricsHook:
    """Default hook; every call is a no-op."""

    __slots__ = ()

    def increment(self, name: str, value: int = 1, tags: dict[str, str] | None = None) -> None:
        return None

    def timing(self, name: str, ms: float, tags: dict[str, str] | None = None) -> None:
        return None

    def gauge(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        return None
