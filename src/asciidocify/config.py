"""Configuration for asciidocify.

Two dataclasses capture every tuneable knob:

* :class:`ParserOptions` -- feature toggles handed to the Markdown parser
  that builds the document tree.  The converter carries them through
  unopened; they only change the *shape of the tree*, never how a given
  tree is rendered.
* :class:`AsciidocifyConfig` -- pipeline configuration (parser options,
  logging, metrics, debug output).

Both are frozen so a single instance can be shared by concurrent
conversions.  :data:`DEFAULT_PARSER_OPTS` is the default parser toggle set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Parser options
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParserOptions:
    """Feature toggles for the Markdown parser.

    Parameters
    ----------
    html_to_native:
        Translate embedded HTML (``<b>``, ``<em>``, ``<code>``, ``<p>``...)
        into native tree nodes.  When ``False`` raw HTML is kept as plain
        text.
    hard_wrap:
        Treat every source newline inside a paragraph as a hard line break.
    plugins:
        Names of additional mistune plugins to enable.  Plugins that
        introduce token types without an AsciiDoc renderer make parsing
        fail with :class:`UnsupportedNodeKindError`.
    """

    html_to_native: bool = True

    hard_wrap: bool = False

    plugins: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.plugins, tuple):
            object.__setattr__(self, "plugins", tuple(self.plugins))
        for plugin in self.plugins:
            if not isinstance(plugin, str) or not plugin:
                raise ValueError(f"plugin names must be non-empty strings, got {plugin!r}")


DEFAULT_PARSER_OPTS = ParserOptions()
"""Parser toggles used when the caller supplies none."""


# ---------------------------------------------------------------------------
# Pipeline configuration
# ---------------------------------------------------------------------------

_LOG_LEVELS: frozenset[str] = frozenset({
    "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL",
})


@dataclass(frozen=True)
class AsciidocifyConfig:
    """Complete configuration for a Markdown-to-AsciiDoc pipeline.

    Parameters
    ----------
    parser_options:
        Toggles passed to the Markdown parser.
    log_level:
        Level of the ``asciidocify`` structured logger.
    metrics:
        Optional :class:`~asciidocify.observability.MetricsHook`
        implementation.  Defaults to a no-op hook.
    debug_dump_ast:
        Write the normalized document tree to *stderr* on each conversion.
    """

    parser_options: ParserOptions = field(default_factory=ParserOptions)

    log_level: str = "WARNING"

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_ast: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not isinstance(self.parser_options, ParserOptions):
            raise ValueError(
                f"parser_options must be a ParserOptions instance, got {type(self.parser_options).__name__}"
            )
        level = self.log_level.upper() if isinstance(self.log_level, str) else None
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got {self.log_level!r}")
        object.__setattr__(self, "log_level", level)
