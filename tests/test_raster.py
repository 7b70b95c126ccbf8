"""Rasterizer: fills, gradients, labels, determinism, surface limits."""
from __future__ import annotations

from io import BytesIO

import pytest
from PIL import Image

from extgen.icons.models import IconSpec
from extgen.icons.raster import RenderUnavailable, render_description_png, render_icon_png, resolve_color

from .conftest import GRADIENT_ICON


def _decode(png: bytes) -> Image.Image:
    img = Image.open(BytesIO(png))
    img.load()
    return img


def test_two_stop_gradient_corners_are_exact() -> None:
    spec = IconSpec(width=2, height=1, background_colors=["#000000", "#FFFFFF"])
    img = _decode(render_icon_png(spec))
    assert img.mode == "RGBA"
    assert img.getpixel((0, 0)) == (0, 0, 0, 255)
    assert img.getpixel((1, 0)) == (255, 255, 255, 255)


def test_three_stop_gradient_runs_along_the_diagonal() -> None:
    spec = IconSpec(width=3, height=3, background_colors=["#000000", "#FFFFFF", "#000000"])
    img = _decode(render_icon_png(spec))
    assert img.getpixel((0, 0)) == (0, 0, 0, 255)
    assert img.getpixel((1, 1)) == (255, 255, 255, 255)
    assert img.getpixel((2, 2)) == (0, 0, 0, 255)
    # Anti-diagonal pixels sit at the same offset as the center.
    assert img.getpixel((2, 0)) == img.getpixel((0, 2)) == (255, 255, 255, 255)


def test_single_pixel_gradient_uses_first_stop() -> None:
    spec = IconSpec(width=1, height=1, background_colors=["#102030", "#FFFFFF"])
    assert _decode(render_icon_png(spec)).getpixel((0, 0)) == (16, 32, 48, 255)


def test_flat_fill_is_uniform_and_opaque() -> None:
    img = _decode(render_icon_png(IconSpec(width=16, height=16, background_colors=["#3C78DC"])))
    assert img.size == (16, 16)
    assert img.getcolors() == [(256, (60, 120, 220, 255))]


def test_declared_style_does_not_override_color_count() -> None:
    spec = IconSpec(width=4, height=4, style="gradient", background_colors=["#00FF00"])
    assert _decode(render_icon_png(spec)).getcolors() == [(16, (0, 255, 0, 255))]


def test_label_is_drawn_in_foreground_color() -> None:
    spec = IconSpec(width=48, height=48, background_colors=["#000000"], foreground_color="#FFFFFF", label="W")
    img = _decode(render_icon_png(spec)).convert("L")
    bright = [p for p in img.getdata() if p > 128]
    assert bright
    assert img.getpixel((0, 0)) == 0
    assert img.getpixel((47, 47)) == 0

    left, top, right, bottom = img.point(lambda p: 255 if p > 128 else 0).getbbox()
    assert abs((left + right) / 2 - 24) <= 3
    assert abs((top + bottom) / 2 - 24) <= 3


def test_render_is_byte_identical_for_identical_specs() -> None:
    assert render_description_png(GRADIENT_ICON) == render_description_png(GRADIENT_ICON)


def test_empty_description_renders_default_icon() -> None:
    img = _decode(render_description_png(""))
    assert img.size == (48, 48)
    assert img.getpixel((10, 10)) == (60, 120, 220, 255)


@pytest.mark.parametrize(
    "token, expected",
    [
        ("#fff", (255, 255, 255)),
        ("#3C78DC", (60, 120, 220)),
        ("3C78DC", (60, 120, 220)),
        ("abc", (170, 187, 204)),
        ("red", (255, 0, 0)),
        ("transparent", (0, 0, 0)),
        ("not-a-color", (0, 0, 0)),
    ],
)
def test_resolve_color(token: str, expected: tuple[int, int, int]) -> None:
    assert resolve_color(token) == expected


def test_oversize_icon_is_render_unavailable() -> None:
    with pytest.raises(RenderUnavailable):
        render_icon_png(IconSpec(width=5000, height=16))


def test_surface_limit_comes_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXTGEN_ICON_MAX_DIMENSION", "8")
    with pytest.raises(RenderUnavailable):
        render_description_png("16x16")
    assert _decode(render_description_png("8x8")).size == (8, 8)
