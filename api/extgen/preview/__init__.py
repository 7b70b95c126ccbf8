"""Sandboxed live previews composed from bundle files."""

from .composer import NO_MARKUP_PLACEHOLDER, PreviewComposition, compose_preview, compose_preview_report
from .sandbox import PREVIEW_CSP, preview_headers, sandboxed_iframe

__all__ = [
    "NO_MARKUP_PLACEHOLDER",
    "PREVIEW_CSP",
    "PreviewComposition",
    "compose_preview",
    "compose_preview_report",
    "preview_headers",
    "sandboxed_iframe",
]
