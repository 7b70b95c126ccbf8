"""
Tolerant extractor for icon descriptions.

The generator writes icon files as prose, e.g.::

    PNG icon, 48x48, style gradient, background #4F46E5 #9333EA, foreground #FFFFFF, text "EX" centered.

Every field is searched for independently and falls back to a default, so any string
(including an empty one) yields a complete IconSpec. The clause locators are shared
with the mutator, which must edit exactly the span the parser read.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from .models import DEFAULT_BACKGROUND, DEFAULT_FOREGROUND, DEFAULT_ICON_SIZE, HEX_TOKEN, IconSpec

# Digits inside a hex color ("#111 x 2") are not a size.
_SIZE_RE = re.compile(r"(?<![#\w])(\d+)\s*x\s*(\d+)", re.IGNORECASE)
_BACKGROUND_RE = re.compile(rf"\b(?P<kw>background)(?P<body>(?:\s+{HEX_TOKEN})+)", re.IGNORECASE)
_SOLID_HEX_RE = re.compile(rf"\bsolid\s+(?P<color>{HEX_TOKEN})\s+background\b", re.IGNORECASE)
_SOLID_NAME_RE = re.compile(r"\bsolid\s+(?P<color>[a-zA-Z]+)\s+background\b", re.IGNORECASE)
_FOREGROUND_RE = re.compile(rf"\b(?P<kw>foreground)\s+(?P<color>{HEX_TOKEN})", re.IGNORECASE)
_STYLE_RE = re.compile(r"\bstyle\s+(?P<style>flat|gradient)\b", re.IGNORECASE)
_DOUBLE_QUOTED_RE = re.compile(r'"([^"]+)"')
_SINGLE_QUOTED_RE = re.compile(r"'([^']+)'")


@dataclass(frozen=True)
class BackgroundClause:
    # "list": background #A #B ...   "solid": legacy "solid <color> background"
    form: Literal["list", "solid"]
    keyword: str
    colors: list[str]
    start: int
    end: int


@dataclass(frozen=True)
class ForegroundClause:
    keyword: str
    color: str
    start: int
    end: int


def find_background_clause(description: str) -> BackgroundClause | None:
    """
    Locate the clause that determines the background colors.

    For the list form the span covers the keyword and every color token; for the legacy
    solid form it covers the single color token only.
    """
    text = description or ""
    m = _BACKGROUND_RE.search(text)
    if m:
        return BackgroundClause(
            form="list",
            keyword=m.group("kw"),
            colors=m.group("body").split(),
            start=m.start(),
            end=m.end(),
        )
    for legacy in (_SOLID_HEX_RE, _SOLID_NAME_RE):
        m = legacy.search(text)
        if m:
            return BackgroundClause(
                form="solid",
                keyword="",
                colors=[m.group("color")],
                start=m.start("color"),
                end=m.end("color"),
            )
    return None


def find_foreground_clause(description: str) -> ForegroundClause | None:
    m = _FOREGROUND_RE.search(description or "")
    if not m:
        return None
    return ForegroundClause(keyword=m.group("kw"), color=m.group("color"), start=m.start(), end=m.end())


def _parse_size(text: str) -> tuple[int, int]:
    for m in _SIZE_RE.finditer(text):
        width, height = int(m.group(1)), int(m.group(2))
        if width > 0 and height > 0:
            return width, height
    return DEFAULT_ICON_SIZE, DEFAULT_ICON_SIZE


def _parse_label(text: str) -> str | None:
    m = _DOUBLE_QUOTED_RE.search(text) or _SINGLE_QUOTED_RE.search(text)
    return m.group(1) if m else None


def parse_icon_spec(description: str) -> IconSpec:
    text = description or ""
    width, height = _parse_size(text)

    background = find_background_clause(text)
    background_colors = background.colors if background else [DEFAULT_BACKGROUND]

    foreground = find_foreground_clause(text)

    style_match = _STYLE_RE.search(text)
    if style_match:
        style = style_match.group("style").lower()
    else:
        style = "gradient" if len(background_colors) > 1 else "flat"

    return IconSpec(
        width=width,
        height=height,
        style=style,
        background_colors=background_colors,
        foreground_color=foreground.color if foreground else DEFAULT_FOREGROUND,
        label=_parse_label(text),
    )

