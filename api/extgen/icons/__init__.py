"""Icon description language: tolerant parser, structural mutator, deterministic rasterizer."""

from .grammar import find_background_clause, find_foreground_clause, parse_icon_spec
from .models import (
    AddBackgroundStop,
    IconEdit,
    IconSpec,
    RemoveBackgroundAt,
    SetBackgroundAt,
    SetForeground,
)
from .mutate import apply_icon_edit, apply_icon_edits
from .raster import RenderUnavailable, render_description_png, render_icon, render_icon_png

__all__ = [
    "AddBackgroundStop",
    "IconEdit",
    "IconSpec",
    "RemoveBackgroundAt",
    "RenderUnavailable",
    "SetBackgroundAt",
    "SetForeground",
    "apply_icon_edit",
    "apply_icon_edits",
    "find_background_clause",
    "find_foreground_clause",
    "parse_icon_spec",
    "render_description_png",
    "render_icon",
    "render_icon_png",
]
