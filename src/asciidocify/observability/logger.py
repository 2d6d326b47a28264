"""Structured JSON logging for asciidocify.

Package loggers live under the ``asciidocify`` namespace.  The first
:func:`get_logger` call for a namespace attaches a single JSON handler to
its root logger; child loggers such as ``asciidocify.converter`` carry no
handler of their own and propagate to it, so each may set its own level.

Typical structured output::

    {"ts": "2026-10-19T12:00:00.123456+00:00", "level": "WARNING",
     "logger": "asciidocify.converter", "message": "conversion failed",
     "input_chars": 42, "error_code": "UNSUPPORTED_NODE_KIND",
     "error_context": {"node_kind": "table"},
     "exception": "Traceback (most recent call last): ..."}

Usage::

    from asciidocify.observability import get_logger

    log = get_logger("asciidocify.converter", level="DEBUG")
    log.debug("converted", extra={"extra_fields": {"nodes": 12}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from asciidocify.errors import AsciidocifyError


def _plain(value: Any) -> Any:
    """JSON fallback: enums by value, anything else via ``str``."""
    if isinstance(value, Enum):
        return value.value
    return str(value)


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Keys ``ts`` (record time, ISO-8601 UTC), ``level``, ``logger`` and
    ``message`` are always present.  ``extra={"extra_fields": {...}}`` is
    merged into the top level.  When the record carries an
    :class:`AsciidocifyError`, its ``error_code`` and ``error_context`` are
    added next to the formatted ``exception``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "extra_fields", None) or {})

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            if isinstance(exc, AsciidocifyError):
                entry["error_code"] = _plain(exc.code)
                entry["error_context"] = exc.context
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=_plain)


# Namespace roots that already carry a JSON handler.
_configured_roots: set[str] = set()


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def get_logger(
    name: str = "asciidocify",
    *,
    level: int | str | None = None,
    stream: Any | None = None,
) -> logging.Logger:
    """Return the logger *name*, attaching the JSON handler on first use.

    Parameters
    ----------
    name:
        Dotted logger name.  The handler goes on its first component
        (``"asciidocify"`` for ``"asciidocify.converter"``).
    level:
        Level for this logger, as an ``int`` or case-insensitive name.
        ``None`` leaves it unchanged.  A namespace root defaults to
        ``WARNING`` when first configured.
    stream:
        Handler output stream, used only when the namespace is first
        configured.  Defaults to ``sys.stderr``.
    """
    root_name = name.split(".", 1)[0]
    if root_name not in _configured_roots:
        root = logging.getLogger(root_name)
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)
        root.setLevel(logging.WARNING)
        root.propagate = False
        _configured_roots.add(root_name)

    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(_resolve_level(level))
    return logger
