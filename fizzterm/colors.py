"""Color arithmetic on hex color strings.

All functions are pure and work on ``#rrggbb`` strings. Malformed input is
treated as black rather than raising, so a bad value from the terminal or the
content service degrades the display instead of breaking it.

Usage:
    from fizzterm.colors import mix, lighten

    muted = mix(foreground, background, 40)
    subtle = lighten(background, 5)
"""

from __future__ import annotations

import math
import re

RGB = tuple[int, int, int]

BLACK = "#000000"
WHITE = "#ffffff"

_HEX6_PATTERN = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)
_HEX3_PATTERN = re.compile(r"^#([0-9a-f])([0-9a-f])([0-9a-f])$", re.IGNORECASE)
# X11 color spec as answered by terminals to OSC 4/10/11: rgb:RRRR/GGGG/BBBB
_XPARSE_PATTERN = re.compile(
    r"^rgba?:([0-9a-f]{1,4})/([0-9a-f]{1,4})/([0-9a-f]{1,4})(?:/[0-9a-f]{1,4})?$",
    re.IGNORECASE,
)


def is_hex_color(value: str) -> bool:
    """Check if a string is a well-formed 6-digit hex color.

    Args:
        value: Value to check.

    Returns:
        True if value looks like ``#rrggbb`` or ``rrggbb``.
    """
    return _HEX6_PATTERN.match(value) is not None


def hex_to_rgb(hex_color: str) -> RGB:
    """Parse a hex color into its RGB components.

    Args:
        hex_color: Color like ``#a3be8c`` (the leading ``#`` is optional).

    Returns:
        Tuple of (red, green, blue) in 0..255, or black for malformed input.
    """
    match = _HEX6_PATTERN.match(hex_color)
    if match is None:
        return (0, 0, 0)
    red, green, blue = (int(part, 16) for part in match.groups())
    return (red, green, blue)


def _round_channel(value: float) -> int:
    # Half rounds up, clamped to a byte
    return max(0, min(255, math.floor(value + 0.5)))


def rgb_to_hex(red: float, green: float, blue: float) -> str:
    """Format RGB components as a lowercase hex color.

    Args:
        red: Red channel, rounded to the nearest integer.
        green: Green channel, rounded to the nearest integer.
        blue: Blue channel, rounded to the nearest integer.

    Returns:
        Hex color string like ``#a3be8c``.
    """
    return "#" + "".join(f"{_round_channel(channel):02x}" for channel in (red, green, blue))


def lighten(hex_color: str, percent: float) -> str:
    """Blend a color toward white.

    Args:
        hex_color: Base color.
        percent: Amount of white, 0-100.

    Returns:
        The lightened color.
    """
    amount = percent / 100
    red, green, blue = hex_to_rgb(hex_color)
    return rgb_to_hex(
        min(255, red + (255 - red) * amount),
        min(255, green + (255 - green) * amount),
        min(255, blue + (255 - blue) * amount),
    )


def darken(hex_color: str, percent: float) -> str:
    """Blend a color toward black.

    Args:
        hex_color: Base color.
        percent: Amount of black, 0-100.

    Returns:
        The darkened color.
    """
    amount = 1 - percent / 100
    red, green, blue = hex_to_rgb(hex_color)
    return rgb_to_hex(red * amount, green * amount, blue * amount)


def mix(first: str, second: str, percent: float) -> str:
    """Linearly interpolate between two colors.

    Args:
        first: Color returned at 0%.
        second: Color returned at 100%.
        percent: Position between the two colors, 0-100.

    Returns:
        The mixed color.
    """
    amount = percent / 100
    r1, g1, b1 = hex_to_rgb(first)
    r2, g2, b2 = hex_to_rgb(second)
    return rgb_to_hex(
        r1 + (r2 - r1) * amount,
        g1 + (g2 - g1) * amount,
        b1 + (b2 - b1) * amount,
    )


def luminance(hex_color: str) -> float:
    """Perceived brightness of a color.

    Args:
        hex_color: Color to measure.

    Returns:
        ``0.299 R + 0.587 G + 0.114 B`` normalized to 0..1.
    """
    red, green, blue = hex_to_rgb(hex_color)
    return (0.299 * red + 0.587 * green + 0.114 * blue) / 255


def is_light(hex_color: str) -> bool:
    """Check whether a color reads as a light background."""
    return luminance(hex_color) > 0.5


def _scale_component(component: str) -> int:
    # 1-4 hex digits scaled to 8 bits (e.g. "ffff" -> 255, "8" -> 136)
    maximum = (16 ** len(component)) - 1
    return round(int(component, 16) * 255 / maximum)


def normalize_hex(value: str | None) -> str | None:
    """Convert a color reported by a terminal into ``#rrggbb``.

    Accepts ``rgb:RRRR/GGGG/BBBB`` (1-4 digits per channel), ``#rgb`` and
    ``#rrggbb``.

    Args:
        value: Raw color value.

    Returns:
        Normalized lowercase hex color, or None if the value is not a color.
    """
    if not value:
        return None
    value = value.strip()

    match = _XPARSE_PATTERN.match(value)
    if match is not None:
        red, green, blue = (_scale_component(part) for part in match.groups())
        return rgb_to_hex(red, green, blue)

    match = _HEX3_PATTERN.match(value)
    if match is not None:
        red, green, blue = (int(part * 2, 16) for part in match.groups())
        return rgb_to_hex(red, green, blue)

    if value.startswith("#") and is_hex_color(value):
        return value.lower()
    return None
