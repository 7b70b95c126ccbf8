"""Icon description parsing: field extraction and defaults."""
from __future__ import annotations

import pytest

from extgen.icons.grammar import find_background_clause, find_foreground_clause, parse_icon_spec

from .conftest import GRADIENT_ICON


def test_empty_description_gives_all_defaults() -> None:
    spec = parse_icon_spec("")
    assert (spec.width, spec.height) == (48, 48)
    assert spec.background_colors == ["#3C78DC"]
    assert spec.foreground_color == "#FFFFFF"
    assert spec.label is None
    assert spec.style == "flat"


def test_generator_example_is_fully_extracted() -> None:
    spec = parse_icon_spec(GRADIENT_ICON)
    assert (spec.width, spec.height) == (48, 48)
    assert spec.style == "gradient"
    assert spec.background_colors == ["#4F46E5", "#9333EA"]
    assert spec.foreground_color == "#FFFFFF"
    assert spec.label == "EX"
    assert spec.fill_mode == "gradient"


@pytest.mark.parametrize(
    "description, expected",
    [
        ("icon 16x16", (16, 16)),
        ("icon sized 128 X 64 please", (128, 64)),
        ("trailing:32x 24", (32, 24)),
        ("0x0 first, then 20x10", (20, 10)),
        ("no size at all", (48, 48)),
        ("background #111 x 2 tone", (48, 48)),
        ("id4x4 then 24x24", (24, 24)),
    ],
)
def test_size_token_anywhere(description: str, expected: tuple[int, int]) -> None:
    spec = parse_icon_spec(description)
    assert (spec.width, spec.height) == expected


def test_background_colors_keep_order_case_and_duplicates() -> None:
    spec = parse_icon_spec("foreground #000, background #abc #DEF #abc, 32x32")
    assert spec.background_colors == ["#abc", "#DEF", "#abc"]


def test_background_accepts_bare_hex() -> None:
    assert parse_icon_spec("background 3C78DC ff0000").background_colors == ["3C78DC", "ff0000"]


def test_four_digit_hex_is_not_a_color_token() -> None:
    assert parse_icon_spec("background #ABCD").background_colors == ["#3C78DC"]


def test_legacy_solid_hex_background() -> None:
    assert parse_icon_spec("PNG icon, solid #112233 background, white E").background_colors == ["#112233"]


def test_legacy_solid_named_background() -> None:
    assert parse_icon_spec("PNG icon, solid red background").background_colors == ["red"]


def test_list_clause_wins_over_legacy_phrasing() -> None:
    spec = parse_icon_spec("solid red background, background #010203")
    assert spec.background_colors == ["#010203"]


def test_foreground_takes_exactly_one_token() -> None:
    assert parse_icon_spec("foreground #000 #fff").foreground_color == "#000"


def test_label_prefers_double_quotes() -> None:
    assert parse_icon_spec("text 'ab' or \"CD\"").label == "CD"
    assert parse_icon_spec("text 'AB' centered").label == "AB"
    assert parse_icon_spec('text "" centered').label is None


def test_declared_style_is_informational() -> None:
    spec = parse_icon_spec("style flat, background #000 #fff")
    assert spec.style == "flat"
    assert spec.fill_mode == "gradient"


def test_style_inferred_from_color_count() -> None:
    assert parse_icon_spec("background #000 #fff").style == "gradient"
    assert parse_icon_spec("background #000").style == "flat"


@pytest.mark.parametrize(
    "junk",
    ["x", "background", "foreground", "\x00\x01", "'", '"', "99999999999999999999x1", "background #" * 50, "é" * 300],
)
def test_parse_never_raises(junk: str) -> None:
    spec = parse_icon_spec(junk)
    assert spec.background_colors
    assert spec.width > 0 and spec.height > 0


def test_clause_spans_cover_the_parsed_text() -> None:
    text = "PNG icon, background #111 #222, foreground #333."
    bg = find_background_clause(text)
    fg = find_foreground_clause(text)
    assert bg is not None and text[bg.start : bg.end] == "background #111 #222"
    assert fg is not None and text[fg.start : fg.end] == "foreground #333"


def test_legacy_clause_span_is_the_color_token() -> None:
    text = "solid navy background"
    clause = find_background_clause(text)
    assert clause is not None
    assert clause.form == "solid"
    assert text[clause.start : clause.end] == "navy"
