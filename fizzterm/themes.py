"""Semantic colors derived from the terminal palette.

Every color is computed from the current palette on each access, so nothing
here needs refreshing once detection has replaced the fallback palette.

Usage:
    from fizzterm.themes import THEME, card_color

    border = card_color(card.column_color) if selected else card_color_dimmed(card.column_color)
    subtle = THEME.background_subtle
"""

from __future__ import annotations

from enum import Enum

from textual.theme import Theme as TextualTheme

from fizzterm.colors import darken, is_light, lighten, mix
from fizzterm.palette import PALETTE, Ansi, PaletteCell

TRANSPARENT = "transparent"
CODE_COLOR = "#98c379"

DEFAULT_TEXTUAL_THEME_NAME = "fizzterm"


class Theme:
    """Always-current semantic color catalog.

    All colors are hex strings like ``#5f87ff``.
    """

    transparent = TRANSPARENT
    code = CODE_COLOR

    def __init__(self, cell: PaletteCell = PALETTE) -> None:
        self._cell = cell

    def _shift(self, color: str, percent: float) -> str:
        """Move a color away from the background: darker on light themes, lighter on dark ones."""
        return darken(color, percent) if self.is_light else lighten(color, percent)

    def color(self, index: int) -> str:
        """Get a raw palette color by ANSI index."""
        return self._cell.value.color(index)

    @property
    def palette(self) -> tuple[str, ...]:
        return self._cell.value.colors

    @property
    def is_light(self) -> bool:
        return is_light(self._cell.value.background)

    # Background colors
    @property
    def background(self) -> str:
        return self._cell.value.background

    @property
    def background_subtle(self) -> str:
        return self._shift(self.background, 5)

    @property
    def background_muted(self) -> str:
        return self._shift(self.background, 12)

    # Foreground colors
    @property
    def text(self) -> str:
        return self._cell.value.foreground

    @property
    def text_bright(self) -> str:
        return self._shift(self.text, 10)

    @property
    def muted(self) -> str:
        return mix(self.text, self.background, 40)

    # Accents
    @property
    def primary(self) -> str:
        return self.color(Ansi.MAGENTA)

    @property
    def primary_bright(self) -> str:
        return self.color(Ansi.BRIGHT_MAGENTA)

    @property
    def secondary(self) -> str:
        return self.color(Ansi.BLUE)

    @property
    def secondary_bright(self) -> str:
        return self.color(Ansi.BRIGHT_BLUE)

    @property
    def accent(self) -> str:
        return self.color(Ansi.CYAN)

    @property
    def accent_bright(self) -> str:
        return self.color(Ansi.BRIGHT_CYAN)

    # Status
    @property
    def success(self) -> str:
        return self.color(Ansi.GREEN)

    @property
    def warning(self) -> str:
        return self.color(Ansi.YELLOW)

    @property
    def error(self) -> str:
        return self.color(Ansi.RED)

    # UI
    @property
    def selected(self) -> str:
        return self._shift(self.background, 15)

    @property
    def selected_text(self) -> str:
        return self.text

    @property
    def border(self) -> str:
        return mix(self.text, self.background, 60)

    @property
    def border_focused(self) -> str:
        return self.color(Ansi.MAGENTA)


THEME = Theme()


class CardColor(Enum):
    """Column colors used by the content service, keyed by their CSS variable.

    Unknown or missing identifiers resolve to :attr:`DEFAULT`.
    """

    CARD_1 = "var(--color-card-1)"
    CARD_2 = "var(--color-card-2)"
    CARD_3 = "var(--color-card-3)"
    CARD_4 = "var(--color-card-4)"
    CARD_5 = "var(--color-card-5)"
    CARD_6 = "var(--color-card-6)"
    CARD_7 = "var(--color-card-7)"
    CARD_8 = "var(--color-card-8)"
    DEFAULT = "var(--color-card-default)"
    COMPLETE = "var(--color-card-complete)"

    @classmethod
    def _missing_(cls, value: object) -> CardColor:
        return cls.DEFAULT

    @classmethod
    def from_value(cls, value: CardColor | str | None) -> CardColor:
        """Resolve a raw identifier to a member.

        Args:
            value: Member, CSS variable string, or None.

        Returns:
            The matching member, or DEFAULT.
        """
        if value is None:
            return cls.DEFAULT
        return cls(value)


# Hex approximations of the service's OKLCH card colors
CARD_COLORS_LIGHT: dict[CardColor, str] = {
    CardColor.CARD_1: "#9a9a9f",  # ink
    CardColor.CARD_2: "#b59a6e",  # uncolor
    CardColor.CARD_3: "#c9a000",  # yellow
    CardColor.CARD_4: "#7db000",  # lime
    CardColor.CARD_5: "#009eb3",  # aqua
    CardColor.CARD_6: "#8a6ed9",  # violet
    CardColor.CARD_7: "#b94dc9",  # purple
    CardColor.CARD_8: "#e45b9e",  # pink
    CardColor.DEFAULT: "#2b7dde",  # blue
    CardColor.COMPLETE: "#5c5c66",
}

CARD_COLORS_DARK: dict[CardColor, str] = {
    CardColor.CARD_1: "#8f8f97",
    CardColor.CARD_2: "#a08f6e",
    CardColor.CARD_3: "#a88900",
    CardColor.CARD_4: "#6d9600",
    CardColor.CARD_5: "#008fa0",
    CardColor.CARD_6: "#7a5fd0",
    CardColor.CARD_7: "#a446b0",
    CardColor.CARD_8: "#c5508a",
    CardColor.DEFAULT: "#5a9eed",
    CardColor.COMPLETE: "#d6d6db",
}


def card_color(key: CardColor | str | None, theme: Theme = THEME) -> str:
    """Get the hex color for a card/column color identifier.

    Args:
        key: Color identifier such as ``"var(--color-card-3)"``.
        theme: Theme deciding between the light and dark tables.

    Returns:
        Hex color string.
    """
    table = CARD_COLORS_LIGHT if theme.is_light else CARD_COLORS_DARK
    return table[CardColor.from_value(key)]


def card_color_dimmed(key: CardColor | str | None, theme: Theme = THEME) -> str:
    """Get a card color blended halfway toward the background, for unselected tiles."""
    return mix(card_color(key, theme), theme.background, 50)


def textual_theme(name: str = DEFAULT_TEXTUAL_THEME_NAME, theme: Theme = THEME) -> TextualTheme:
    """Build a Textual Theme matching the terminal palette.

    Args:
        name: Name to register the theme under.
        theme: Color catalog to read from.

    Returns:
        A Textual Theme instance.
    """
    return TextualTheme(
        name=name,
        primary=theme.primary,
        secondary=theme.secondary,
        accent=theme.accent,
        warning=theme.warning,
        error=theme.error,
        success=theme.success,
        foreground=theme.text,
        background=theme.background,
        surface=theme.background_subtle,
        panel=theme.background_muted,
        dark=not theme.is_light,
        variables={
            "border": theme.border,
            "text-muted": theme.muted,
            "block-cursor-background": theme.selected,
            "block-cursor-foreground": theme.selected_text,
        },
    )
