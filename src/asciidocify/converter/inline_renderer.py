"""Inline AsciiDoc helpers: formatting markers, admonition labels, list markers.

These are pure string functions used by :class:`AsciiDocConverter`.
No escaping is performed anywhere: text is reproduced exactly as it
appears in the tree.
"""

from __future__ import annotations

import re

# AsciiDoc constrained formatting marks keyed by raw-markup tag name.
RAW_MARKUP_MARKERS: dict[str, str] = {
    "bold": "*",
    "italic": "_",
    "monospace": "`",
}

EMPHASIS_MARK = "_"
STRONG_MARK = "*"
CODE_MARK = "`"

ADMONITION_LABELS: tuple[str, ...] = ("NOTE", "TIP", "IMPORTANT", "CAUTION", "WARNING")

# The paragraph text has already been rendered to AsciiDoc, so Markdown
# ``*Note:*`` arrives as ``_Note:_`` and ``**Note:**`` as ``*Note:*``.
# Exactly one colon is allowed, either inside the closing mark or
# directly after it.  The label may end its line.
_ADMONITION_RE = re.compile(
    r"^(?P<open>\*\*|__|\*|_|)"
    r"(?P<label>" + "|".join(ADMONITION_LABELS) + r")"
    r"(?P<inner>:?)"
    r"(?P=open)"
    r"(?P<outer>:?)"
    r"(?:\s+|$)",
    re.IGNORECASE,
)


def wrap(text: str, mark: str) -> str:
    """Surround *text* with a constrained formatting *mark*."""
    return f"{mark}{text}{mark}"


def promote_admonition(text: str) -> str | None:
    """Return *text* rewritten as an admonition paragraph, or ``None``.

    >>> promote_admonition("_Note:_ Remember the milk!")
    'NOTE: Remember the milk!'
    >>> promote_admonition("Notebook: nope") is None
    True
    """
    match = _ADMONITION_RE.match(text)
    if match is None:
        return None
    if len(match.group("inner")) + len(match.group("outer")) != 1:
        return None
    label = match.group("label").upper()
    rest = text[match.end():]
    if not rest:
        return f"{label}:"
    return f"{label}: {rest}"


def list_marker(depth: int, ordered: bool = False) -> str:
    """Return the item marker for a list nested *depth* levels deep.

    ``depth - 1`` spaces of indentation, ``depth`` marker characters and a
    trailing space: ``* ``, `` ** ``, ``  *** `` (or ``.`` for ordered
    lists).
    """
    if depth < 1:
        raise ValueError(f"list depth must be >= 1, got {depth}")
    char = "." if ordered else "*"
    return " " * (depth - 1) + char * depth + " "


def image_macro(source: str, alt_text: str, title: str | None, block: bool) -> str:
    """Build an ``image:`` (inline) or ``image::`` (block) macro."""
    attrs = alt_text
    if title:
        escaped = title.replace('"', '\\"')
        attrs = f'{alt_text},title="{escaped}"'
    colons = "::" if block else ":"
    return f"image{colons}{source}[{attrs}]"


def link_macro(url: str, label: str) -> str:
    """Render a link; bare URL when the label is empty or repeats it."""
    if not label or label == url:
        return url
    return f"{url}[{label}]"
