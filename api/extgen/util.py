from __future__ import annotations


def slugify(s: str, *, fallback: str = "chrome-extension", max_len: int = 64) -> str:
    out: list[str] = []
    last_dash = False
    for ch in (s or "").strip().lower():
        if ch.isalnum() and ch.isascii():
            out.append(ch)
            last_dash = False
        else:
            if not last_dash and out:
                out.append("-")
                last_dash = True
    return ("".join(out).strip("-") or fallback)[:max_len].strip("-") or fallback


def final_segment(path: str) -> str:
    """Last component of a slash path (``"icons/icon16.png"`` -> ``"icon16.png"``)."""
    return (path or "").rstrip("/").rsplit("/", 1)[-1]
