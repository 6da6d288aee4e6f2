"""Conversion of parser output into Rich renderables."""

from collections.abc import Iterable

from rich.style import Style
from rich.text import Text

from fizzterm.markup.attachments import MediaDescriptor, MediaKind
from fizzterm.markup.parser import StyledRun
from fizzterm.themes import THEME, Theme

MEDIA_ICONS: dict[MediaKind, str] = {
    MediaKind.IMAGE: "\uf03e",  # nf-fa-image
    MediaKind.VIDEO: "\uf03d",  # nf-fa-video
    MediaKind.OTHER: "\uf0c6",  # nf-fa-paperclip
}


def run_style(run: StyledRun) -> Style:
    """Get the Rich style for a run."""
    return Style(
        color=run.foreground,
        bold=run.bold or None,
        italic=run.italic or None,
        strike=run.strikethrough or None,
    )


def runs_to_text(runs: Iterable[StyledRun]) -> Text:
    """Join runs into a single Rich Text, keeping their order and styles.

    Args:
        runs: Runs produced by the markup parser.

    Returns:
        Styled Rich Text.
    """
    text = Text()
    for run in runs:
        text.append(run.text, style=run_style(run))
    return text


def media_to_text(media: Iterable[MediaDescriptor], theme: Theme = THEME) -> Text:
    """Render media references as one line each: icon, alt text, size and URL.

    Args:
        media: Descriptors from the attachment extractor.
        theme: Color catalog.

    Returns:
        Styled Rich Text, empty if there is no media.
    """
    text = Text()
    for index, descriptor in enumerate(media):
        if index:
            text.append("\n")
        text.append(f"{MEDIA_ICONS[descriptor.kind]} ", style=theme.accent)
        text.append(descriptor.alt, style=theme.secondary)
        if descriptor.width is not None and descriptor.height is not None:
            text.append(f" {descriptor.width}×{descriptor.height}", style=theme.muted)
        text.append(f" ({descriptor.url})", style=theme.muted)
    return text
