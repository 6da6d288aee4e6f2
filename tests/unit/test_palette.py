"""Tests for palette state."""

import threading

from fizzterm.palette import (
    FALLBACK_BACKGROUND,
    FALLBACK_COLORS,
    FALLBACK_FOREGROUND,
    PALETTE,
    PALETTE_SIZE,
    Ansi,
    Palette,
    PaletteCell,
)


class TestPalette:
    """Tests for the Palette value."""

    def test_defaults_are_fallback(self) -> None:
        palette = Palette()
        assert palette.colors == FALLBACK_COLORS
        assert palette.foreground == FALLBACK_FOREGROUND == "#ffffff"
        assert palette.background == FALLBACK_BACKGROUND == "#000000"

    def test_fallback_has_sixteen_slots(self) -> None:
        assert len(FALLBACK_COLORS) == PALETTE_SIZE == 16

    def test_color_by_ansi_slot(self) -> None:
        assert Palette().color(Ansi.BLUE) == "#5f87ff"
        assert Palette().color(Ansi.BRIGHT_WHITE) == "#ffffff"

    def test_color_out_of_range_is_white(self) -> None:
        assert Palette().color(99) == "#ffffff"

    def test_short_palette_falls_back_per_slot(self) -> None:
        palette = Palette(colors=("#010101",))
        assert palette.color(0) == "#010101"
        assert palette.color(Ansi.RED) == FALLBACK_COLORS[Ansi.RED]

    def test_from_response_full(self) -> None:
        slots = {index: f"rgb:{index:02x}/{index:02x}/{index:02x}" for index in range(16)}
        palette = Palette.from_response(slots, "rgb:eeee/eeee/eeee", "rgb:1111/1111/1111")
        assert palette.color(10) == "#0a0a0a"
        assert palette.foreground == "#eeeeee"
        assert palette.background == "#111111"

    def test_from_response_partial_keeps_fallback_slots(self) -> None:
        palette = Palette.from_response({Ansi.MAGENTA: "#aa00aa"})
        assert palette.color(Ansi.MAGENTA) == "#aa00aa"
        assert palette.color(Ansi.CYAN) == FALLBACK_COLORS[Ansi.CYAN]
        assert palette.foreground == FALLBACK_FOREGROUND
        assert palette.background == FALLBACK_BACKGROUND

    def test_from_response_ignores_garbage(self) -> None:
        palette = Palette.from_response({Ansi.RED: "not a color"}, background="???")
        assert palette.color(Ansi.RED) == FALLBACK_COLORS[Ansi.RED]
        assert palette.background == FALLBACK_BACKGROUND


class TestPaletteCell:
    """Tests for the single-writer palette cell."""

    def test_global_cell_starts_with_fallback(self) -> None:
        assert PALETTE.value.colors == FALLBACK_COLORS

    def test_settle_installs_palette(self) -> None:
        cell = PaletteCell()
        detected = Palette(background="#fdf6e3")
        assert cell.settle(detected) is True
        assert cell.value is detected
        assert cell.settled
        assert cell.detected

    def test_settle_none_keeps_fallback(self) -> None:
        cell = PaletteCell()
        assert cell.settle(None) is False
        assert cell.settled
        assert not cell.detected
        assert cell.value == Palette()

    def test_second_write_is_refused(self) -> None:
        cell = PaletteCell()
        first = Palette(background="#111111")
        cell.settle(first)
        assert cell.settle(Palette(background="#222222")) is False
        assert cell.value is first

    def test_write_after_failed_attempt_is_refused(self) -> None:
        cell = PaletteCell()
        cell.settle(None)
        assert cell.settle(Palette(background="#222222")) is False
        assert cell.value == Palette()

    def test_concurrent_writers_single_winner(self) -> None:
        cell = PaletteCell()
        results: list[bool] = []
        barrier = threading.Barrier(8)

        def writer(index: int) -> None:
            barrier.wait()
            results.append(cell.settle(Palette(background=f"#0000{index:02x}")))

        threads = [threading.Thread(target=writer, args=(index,)) for index in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(True) == 1
