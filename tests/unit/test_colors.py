"""Tests for color arithmetic."""

import pytest

from fizzterm.colors import (
    darken,
    hex_to_rgb,
    is_hex_color,
    is_light,
    lighten,
    luminance,
    mix,
    normalize_hex,
    rgb_to_hex,
)


class TestHexConversion:
    """Tests for hex_to_rgb and rgb_to_hex."""

    def test_hex_to_rgb(self) -> None:
        assert hex_to_rgb("#5f87ff") == (95, 135, 255)

    def test_hex_to_rgb_without_hash(self) -> None:
        assert hex_to_rgb("a3be8c") == (163, 190, 140)

    def test_hex_to_rgb_is_case_insensitive(self) -> None:
        assert hex_to_rgb("#A3BE8C") == hex_to_rgb("#a3be8c")

    @pytest.mark.parametrize("value", ["", "#fff", "#12345", "#gggggg", "red", "#1234567", "rgb:ff/ff/ff"])
    def test_malformed_hex_is_black(self, value: str) -> None:
        assert hex_to_rgb(value) == (0, 0, 0)

    def test_rgb_to_hex(self) -> None:
        assert rgb_to_hex(95, 135, 255) == "#5f87ff"

    def test_rgb_to_hex_rounds_half_up(self) -> None:
        assert rgb_to_hex(127.5, 0.4, 254.6) == "#8000ff"

    def test_rgb_to_hex_clamps(self) -> None:
        assert rgb_to_hex(-3, 300, 128) == "#00ff80"

    @pytest.mark.parametrize("value", ["#000000", "#ffffff", "#1c1c1c", "#5fd7d7", "#c9a000"])
    def test_round_trip(self, value: str) -> None:
        assert rgb_to_hex(*hex_to_rgb(value)) == value

    def test_round_trip_lowercases(self) -> None:
        assert rgb_to_hex(*hex_to_rgb("#ABCDEF")) == "#abcdef"

    def test_is_hex_color(self) -> None:
        assert is_hex_color("#abcdef")
        assert not is_hex_color("#abc")
        assert not is_hex_color("transparent")


class TestBlending:
    """Tests for lighten, darken and mix."""

    def test_lighten(self) -> None:
        assert lighten("#000000", 50) == "#808080"

    def test_lighten_zero_is_identity(self) -> None:
        assert lighten("#336699", 0) == "#336699"

    def test_lighten_full_is_white(self) -> None:
        assert lighten("#336699", 100) == "#ffffff"

    def test_darken(self) -> None:
        assert darken("#ffffff", 50) == "#808080"

    def test_darken_full_is_black(self) -> None:
        assert darken("#336699", 100) == "#000000"

    def test_mix_endpoints(self) -> None:
        assert mix("#102030", "#a0b0c0", 0) == "#102030"
        assert mix("#102030", "#a0b0c0", 100) == "#a0b0c0"

    def test_mix_midpoint(self) -> None:
        assert mix("#000000", "#ffffff", 50) == "#808080"

    def test_mix_forty_percent(self) -> None:
        assert mix("#ffffff", "#000000", 40) == "#999999"

    def test_malformed_input_blends_from_black(self) -> None:
        assert lighten("nope", 50) == "#808080"


class TestLuminance:
    """Tests for luminance and is_light."""

    def test_black_and_white(self) -> None:
        assert luminance("#000000") == 0
        assert luminance("#ffffff") == pytest.approx(1.0)

    def test_weights(self) -> None:
        assert luminance("#ff0000") == pytest.approx(0.299)
        assert luminance("#00ff00") == pytest.approx(0.587)
        assert luminance("#0000ff") == pytest.approx(0.114)

    def test_is_light(self) -> None:
        assert is_light("#ffffff")
        assert is_light("#fdf6e3")
        assert not is_light("#000000")
        assert not is_light("#2e3440")

    def test_mid_gray_boundary(self) -> None:
        # 0x80 / 255 is just above 0.5, 0x7f just below
        assert is_light("#808080")
        assert not is_light("#7f7f7f")


class TestNormalizeHex:
    """Tests for normalize_hex."""

    def test_xterm_sixteen_bit(self) -> None:
        assert normalize_hex("rgb:ffff/5f5f/0000") == "#ff5f00"

    def test_xterm_eight_bit(self) -> None:
        assert normalize_hex("rgb:1c/1c/1c") == "#1c1c1c"

    def test_xterm_single_digit(self) -> None:
        assert normalize_hex("rgb:f/0/8") == "#ff0088"

    def test_rgba(self) -> None:
        assert normalize_hex("rgba:ffff/ffff/ffff/ffff") == "#ffffff"

    def test_short_hex(self) -> None:
        assert normalize_hex("#fa0") == "#ffaa00"

    def test_long_hex(self) -> None:
        assert normalize_hex("#ABCDEF") == "#abcdef"

    @pytest.mark.parametrize("value", [None, "", "?", "rgb:zz/00/00", "abcdef", "transparent"])
    def test_invalid(self, value: str | None) -> None:
        assert normalize_hex(value) is None
