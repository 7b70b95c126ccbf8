from __future__ import annotations

import json

import pytest

from extgen.bundle.models import Bundle, SourceFile

GRADIENT_ICON = 'PNG icon, 48x48, style gradient, background #4F46E5 #9333EA, foreground #FFFFFF, text "EX" centered.'
FLAT_ICON = 'PNG icon, 16x16, style flat, background #3C78DC, foreground #FFFFFF, text "E" centered.'

POPUP_HTML = """<!doctype html>
<html>
  <head>
    <link rel="stylesheet" href="style.css">
  </head>
  <body><h1>Tab info</h1><script src="popup.js"></script></body>
</html>"""


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("EXTGEN_ICON_MAX_DIMENSION", "EXTGEN_ICON_FONT_PATH", "AUTH_DISABLED", "AUTH_MODE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_files() -> list[SourceFile]:
    return [
        SourceFile(
            path="manifest.json",
            type="text",
            content=json.dumps({"manifest_version": 3, "name": "Tab Peek", "version": "1.0"}),
        ),
        SourceFile(path="popup.html", type="text", content=POPUP_HTML),
        SourceFile(path="style.css", type="text", content="body{color:blue}"),
        SourceFile(path="popup.js", type="text", content="document.title;"),
        SourceFile(path="icons/icon16.png", type="binary-description", content=FLAT_ICON),
        SourceFile(path="icons/icon48.png", type="binary-description", content=GRADIENT_ICON),
    ]


@pytest.fixture
def sample_bundle(sample_files: list[SourceFile]) -> Bundle:
    return Bundle(
        files=sample_files,
        testing_guide="# Testing\n\nLoad unpacked.",
        security_review="# Security\n\nNo host permissions.",
    )
