"""
Live preview documents for generated extension views.

A preview is built from the file being edited plus the rest of the bundle. Local
stylesheet links are inlined as ``<style>`` blocks so the document renders in a sandbox
with no network access; links that cannot be matched to a bundle file are left as they
are and simply do not load.
"""

from __future__ import annotations

import logging
import posixpath
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser

from ..bundle.models import SourceFile
from ..util import final_segment

logger = logging.getLogger(__name__)

PREFERRED_MARKUP_NAME = "popup.html"

NO_MARKUP_PLACEHOLDER = (
    "<html><body><p style='padding: 20px; font-family: sans-serif;'>"
    "No HTML file found to preview this CSS."
    "</p></body></html>"
)

_LINK_TAG_RE = re.compile(r"<link\b[^>]*>", re.IGNORECASE)
_EXTERNAL_HREF_RE = re.compile(r"^(?:[a-z][a-z0-9+.-]*:|//)", re.IGNORECASE)
_STYLE_CLOSE_RE = re.compile(r"</(style)", re.IGNORECASE)


@dataclass
class PreviewComposition:
    document: str
    markup_path: str = ""
    inlined: list[str] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)


class _TagAttrsParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.attrs: dict[str, str] = {}

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:  # noqa: ARG002
        self.attrs = {k.lower(): (v or "") for k, v in attrs}

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.handle_starttag(tag, attrs)


def _tag_attrs(tag: str) -> dict[str, str]:
    parser = _TagAttrsParser()
    parser.feed(tag)
    parser.close()
    return parser.attrs


def _href_path(href: str) -> str:
    return re.split(r"[?#]", href.strip(), maxsplit=1)[0]


def _suffix_len(a: str, b: str) -> int:
    """Number of trailing path segments ``a`` and ``b`` share."""
    n = 0
    for x, y in zip(reversed(a.split("/")), reversed(b.split("/"))):
        if x != y:
            break
        n += 1
    return n


def _find_stylesheet(href_path: str, markup_path: str, siblings: list[SourceFile]) -> SourceFile | None:
    name = final_segment(href_path)
    candidates = [f for f in siblings if f.kind == "text" and f.name == name]
    if not candidates:
        return None

    resolved = posixpath.normpath(posixpath.join(posixpath.dirname(markup_path), href_path)).lstrip("/")
    for f in candidates:
        if f.path == resolved:
            return f
    if len(candidates) == 1:
        return candidates[0]

    # Several bundle files share this file name: take the one sharing the longest path
    # suffix with the href. A tie stays unresolved rather than guessing.
    scored = sorted(((_suffix_len(f.path, href_path), f) for f in candidates), key=lambda t: t[0], reverse=True)
    if scored[0][0] > scored[1][0]:
        return scored[0][1]
    logger.warning("Stylesheet %r is ambiguous across %s", href_path, [f.path for f in candidates])
    return None


def _style_block(css: str) -> str:
    # A literal "</style" in the CSS would end the element early.
    css = _STYLE_CLOSE_RE.sub(r"<\\/\1", css)
    return f"<style>{css}</style>"


def _choose_markup(siblings: list[SourceFile]) -> SourceFile | None:
    for f in siblings:
        if f.is_markup and f.name == PREFERRED_MARKUP_NAME:
            return f
    for f in siblings:
        if f.is_markup:
            return f
    return None


def _inline_stylesheets(
    markup: str,
    *,
    markup_path: str,
    selected: SourceFile,
    edited_content: str,
    siblings: list[SourceFile],
    result: PreviewComposition,
) -> str:
    others = [f for f in siblings if f.path != selected.path]

    def replace(m: re.Match[str]) -> str:
        tag = m.group(0)
        attrs = _tag_attrs(tag)
        if "stylesheet" not in attrs.get("rel", "").lower().split():
            return tag
        href = attrs.get("href", "").strip()
        href_path = _href_path(href)
        if not href_path or _EXTERNAL_HREF_RE.match(href_path):
            return tag

        name = final_segment(href_path)
        if selected.is_stylesheet and selected.name == name:
            result.inlined.append(href)
            return _style_block(edited_content)

        linked = _find_stylesheet(href_path, markup_path, others)
        if linked is not None:
            result.inlined.append(href)
            return _style_block(linked.content)

        logger.debug("Unresolved stylesheet reference %r in %s", href, markup_path)
        result.unresolved.append(href)
        return tag

    return _LINK_TAG_RE.sub(replace, markup)


def compose_preview_report(
    selected: SourceFile | None,
    edited_content: str | None,
    siblings: list[SourceFile],
) -> PreviewComposition:
    if selected is None:
        return PreviewComposition(document="")
    content = selected.content if edited_content is None else edited_content

    if selected.is_markup:
        markup_path, markup = selected.path, content
    elif selected.is_stylesheet:
        host = _choose_markup(siblings)
        if host is None:
            return PreviewComposition(document=NO_MARKUP_PLACEHOLDER)
        markup_path, markup = host.path, host.content
    else:
        return PreviewComposition(document="")

    result = PreviewComposition(document="", markup_path=markup_path)
    result.document = _inline_stylesheets(
        markup,
        markup_path=markup_path,
        selected=selected,
        edited_content=content,
        siblings=siblings,
        result=result,
    )
    return result


def compose_preview(selected: SourceFile | None, edited_content: str | None, siblings: list[SourceFile]) -> str:
    """
    Renderable HTML for the selected file, with its unsaved ``edited_content`` applied.

    Markup previews itself; a stylesheet previews through ``popup.html`` (or the first
    markup file in the bundle). Other files have no preview and give an empty string.
    """
    return compose_preview_report(selected, edited_content, siblings).document
