"""Isolation envelope for composed previews.

Preview documents are unreviewed machine-generated markup. They are served with a CSP
that allows only inline styles and data: images, and embedded through an iframe with an
empty ``sandbox`` attribute (no scripts, no same-origin storage).
"""

from __future__ import annotations

import html

PREVIEW_CSP = "default-src 'none'; style-src 'unsafe-inline'; img-src data:; sandbox"


def preview_headers() -> dict[str, str]:
    return {
        "Content-Security-Policy": PREVIEW_CSP,
        "X-Content-Type-Options": "nosniff",
        "Referrer-Policy": "no-referrer",
        "Cache-Control": "no-store",
    }


def sandboxed_iframe(document: str, *, title: str = "Preview") -> str:
    return (
        f'<iframe title="{html.escape(title, quote=True)}" sandbox="" referrerpolicy="no-referrer" '
        f'srcdoc="{html.escape(document, quote=True)}"></iframe>'
    )
