"""
Structural edits on icon description strings.

The description text stays canonical: an edit rewrites the span of exactly one clause
and leaves every other character alone. A clause that is not present is never
synthesized, so editing a description without one returns it unchanged.
"""

from __future__ import annotations

import logging

from .grammar import BackgroundClause, find_background_clause, find_foreground_clause
from .models import AddBackgroundStop, IconEdit, RemoveBackgroundAt, SetBackgroundAt, SetForeground

logger = logging.getLogger(__name__)


def _splice(description: str, start: int, end: int, replacement: str) -> str:
    return description[:start] + replacement + description[end:]


def _rewrite_background(description: str, clause: BackgroundClause, colors: list[str]) -> str:
    if clause.form == "solid":
        # Legacy phrasing holds exactly one color token.
        return _splice(description, clause.start, clause.end, colors[0])
    return _splice(description, clause.start, clause.end, f"{clause.keyword} {' '.join(colors)}")


def _edit_background(description: str, edit: IconEdit) -> str:
    clause = find_background_clause(description)
    if clause is None:
        logger.debug("No background clause; %s is a no-op", edit.op)
        return description

    colors = list(clause.colors)
    if isinstance(edit, SetBackgroundAt):
        if edit.index >= len(colors):
            return description
        colors[edit.index] = edit.color
    elif isinstance(edit, AddBackgroundStop):
        if clause.form != "list":
            return description
        colors.append(edit.color)
    elif isinstance(edit, RemoveBackgroundAt):
        # At least one background color must always remain.
        if clause.form != "list" or len(colors) <= 1 or edit.index >= len(colors):
            return description
        del colors[edit.index]

    return _rewrite_background(description, clause, colors)


def _edit_foreground(description: str, edit: SetForeground) -> str:
    clause = find_foreground_clause(description)
    if clause is None:
        logger.debug("No foreground clause; set_foreground is a no-op")
        return description
    return _splice(description, clause.start, clause.end, f"{clause.keyword} {edit.color}")


def apply_icon_edit(description: str, edit: IconEdit) -> str:
    """Return ``description`` with ``edit`` applied, or unchanged when the edit does not apply."""
    description = description or ""
    if isinstance(edit, SetForeground):
        return _edit_foreground(description, edit)
    return _edit_background(description, edit)


def apply_icon_edits(description: str, edits: list[IconEdit]) -> str:
    for edit in edits:
        description = apply_icon_edit(description, edit)
    return description
