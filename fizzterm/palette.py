"""Process-wide terminal palette state.

The palette starts as a built-in fallback at import time and can be replaced
at most once, by the first completed detection round-trip. Everything that
derives colors reads :data:`PALETTE` on every access, so a detected palette
shows up immediately without any cache to invalidate.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from threading import Lock

from fizzterm.colors import BLACK, WHITE, normalize_hex
from fizzterm.logger import get_logger

logger = get_logger(__name__)

PALETTE_SIZE = 16


class Ansi(IntEnum):
    """Standard ANSI palette slots."""

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7
    BRIGHT_BLACK = 8
    BRIGHT_RED = 9
    BRIGHT_GREEN = 10
    BRIGHT_YELLOW = 11
    BRIGHT_BLUE = 12
    BRIGHT_MAGENTA = 13
    BRIGHT_CYAN = 14
    BRIGHT_WHITE = 15


# Used when detection fails or a slot is left unanswered
FALLBACK_COLORS: tuple[str, ...] = (
    "#1c1c1c",  # black
    "#ff5f5f",  # red
    "#5fd787",  # green
    "#ffff87",  # yellow
    "#5f87ff",  # blue
    "#ff5faf",  # magenta
    "#5fd7d7",  # cyan
    "#d0d0d0",  # white
    "#6c6c6c",  # bright black
    "#ff8787",  # bright red
    "#87ffaf",  # bright green
    "#ffffaf",  # bright yellow
    "#87afff",  # bright blue
    "#ff87d7",  # bright magenta
    "#87ffff",  # bright cyan
    "#ffffff",  # bright white
)
FALLBACK_FOREGROUND = WHITE
FALLBACK_BACKGROUND = BLACK


@dataclass(frozen=True)
class Palette:
    """The terminal's 16 indexed colors plus its default foreground/background."""

    colors: tuple[str, ...] = FALLBACK_COLORS
    foreground: str = FALLBACK_FOREGROUND
    background: str = FALLBACK_BACKGROUND

    def color(self, index: int) -> str:
        """Get an indexed palette color.

        Args:
            index: ANSI slot, 0-15.

        Returns:
            Hex color for the slot, falling back to the built-in palette.
        """
        if 0 <= index < len(self.colors) and self.colors[index]:
            return self.colors[index]
        if 0 <= index < PALETTE_SIZE:
            return FALLBACK_COLORS[index]
        return WHITE

    @classmethod
    def from_response(
        cls,
        slots: Mapping[int, str | None],
        foreground: str | None = None,
        background: str | None = None,
    ) -> Palette:
        """Build a palette from a (possibly partial) terminal response.

        Slots missing from the response, or answered with something that is
        not a color, keep their built-in default.

        Args:
            slots: Mapping of ANSI slot index to reported color.
            foreground: Reported default foreground color.
            background: Reported default background color.

        Returns:
            A complete Palette.
        """
        colors = tuple(normalize_hex(slots.get(index)) or FALLBACK_COLORS[index] for index in range(PALETTE_SIZE))
        return cls(
            colors=colors,
            foreground=normalize_hex(foreground) or FALLBACK_FOREGROUND,
            background=normalize_hex(background) or FALLBACK_BACKGROUND,
        )


@dataclass
class PaletteCell:
    """Single-writer holder for the current palette.

    The cell is settled by the first completion of a detection attempt,
    whether that produced a palette or not. Later writes are refused.
    """

    _value: Palette = field(default_factory=Palette)
    _settled: bool = False
    _detected: bool = False
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    @property
    def value(self) -> Palette:
        """The current palette."""
        return self._value

    @property
    def settled(self) -> bool:
        """Whether a detection attempt has already completed."""
        return self._settled

    @property
    def detected(self) -> bool:
        """Whether the current palette came from the terminal."""
        return self._detected

    def settle(self, palette: Palette | None) -> bool:
        """Complete the one allowed detection write.

        Args:
            palette: Detected palette, or None to keep the fallback.

        Returns:
            True if the palette was installed, False if the cell was already
            settled or no palette was given.
        """
        with self._lock:
            if self._settled:
                logger.debug("Palette already settled, discarding late result")
                return False
            self._settled = True
            if palette is None:
                return False
            self._value = palette
            self._detected = True
            return True


PALETTE = PaletteCell()
