from __future__ import annotations

import logging
import os
from functools import lru_cache
from io import BytesIO
from pathlib import Path

import numpy as np
from PIL import Image, ImageColor, ImageDraw, ImageFont

from ..config import get_settings
from .grammar import parse_icon_spec
from .models import IconSpec

logger = logging.getLogger(__name__)

# Canvas default fill; used when a color token cannot be resolved.
FALLBACK_RGB = (0, 0, 0)


class RenderUnavailable(RuntimeError):
    """No drawing surface could be acquired for an icon. Recoverable per asset."""


def resolve_color(token: str) -> tuple[int, int, int]:
    """
    Map a description color token to RGB.

    Accepts ``#rgb``, ``#rrggbb``, bare hex digits, and CSS color names. Alpha is dropped:
    icons are always opaque.
    """
    value = (token or "").strip()
    if value and not value.startswith("#") and all(c in "0123456789abcdefABCDEF" for c in value):
        if len(value) in (3, 6):
            value = "#" + value
    try:
        rgb = ImageColor.getrgb(value)
    except ValueError:
        logger.warning("Unrecognised color %r; painting black", token)
        return FALLBACK_RGB
    return rgb[0], rgb[1], rgb[2]


@lru_cache(maxsize=1)
def _bundled_bold_font_path() -> str:
    # Avoid hard-depending on local fonts: DejaVu Sans Bold ships with matplotlib.
    os.environ.setdefault("MPLCONFIGDIR", "/tmp/matplotlib")
    import matplotlib

    path = Path(matplotlib.get_data_path()) / "fonts" / "ttf" / "DejaVuSans-Bold.ttf"
    return str(path) if path.is_file() else ""


def _label_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    size = max(1, size)
    override = get_settings().icon_font_path
    for path in (override, _bundled_bold_font_path()):
        if not path:
            continue
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            logger.warning("Could not load label font %s", path)
    return ImageFont.load_default(size=size)


def _gradient_pixels(width: int, height: int, stops: list[tuple[int, int, int]]) -> np.ndarray:
    """
    Diagonal linear gradient, top-left pixel to bottom-right pixel.

    Stops sit at i/(n-1). Positions are projected onto the diagonal between the two corner
    pixel centers, so the corner pixels carry the first and last stop exactly.
    """
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    dx, dy = float(width - 1), float(height - 1)
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        t = np.zeros((height, width), dtype=np.float64)
    else:
        t = np.clip((xs * dx + ys * dy) / length_sq, 0.0, 1.0)

    offsets = np.linspace(0.0, 1.0, num=len(stops))
    colors = np.asarray(stops, dtype=np.float64)
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    for channel in range(3):
        rgba[..., channel] = np.rint(np.interp(t, offsets, colors[:, channel])).astype(np.uint8)
    rgba[..., 3] = 255
    return rgba


def _acquire_surface(spec: IconSpec) -> Image.Image:
    max_dim = get_settings().icon_max_dimension
    if spec.width > max_dim or spec.height > max_dim:
        raise RenderUnavailable(f"Icon {spec.width}x{spec.height} exceeds the {max_dim}px surface limit")

    stops = [resolve_color(c) for c in spec.background_colors]
    try:
        if spec.fill_mode == "gradient":
            return Image.fromarray(_gradient_pixels(spec.width, spec.height, stops))
        return Image.new("RGBA", (spec.width, spec.height), stops[0] + (255,))
    except (MemoryError, ValueError) as e:
        raise RenderUnavailable(f"Could not allocate a {spec.width}x{spec.height} surface: {e}") from e


def _draw_label(img: Image.Image, spec: IconSpec) -> None:
    draw = ImageDraw.Draw(img)
    font = _label_font(spec.width // 2)
    left, top, right, bottom = draw.textbbox((0, 0), spec.label, font=font)
    x = (spec.width - (right - left)) / 2 - left
    y = (spec.height - (bottom - top)) / 2 - top
    draw.text((x, y), spec.label, font=font, fill=resolve_color(spec.foreground_color) + (255,))


def render_icon(spec: IconSpec) -> Image.Image:
    img = _acquire_surface(spec)
    if spec.label:
        _draw_label(img, spec)
    return img


def render_icon_png(spec: IconSpec) -> bytes:
    """Rasterize ``spec`` to PNG bytes. Identical specs give byte-identical output."""
    img = render_icon(spec)
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def render_description_png(description: str) -> bytes:
    return render_icon_png(parse_icon_spec(description))
