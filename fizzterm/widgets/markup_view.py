"""Widgets showing a card description and its media."""

from typing import ClassVar

from rich.text import Text
from textual.widgets import Static

from fizzterm.markup.attachments import MediaDescriptor, MediaKind, extract_attachments, extract_media
from fizzterm.markup.parser import DEFAULT_MAX_DEPTH, StyledRun, parse_markup
from fizzterm.render import media_to_text, runs_to_text


class MarkupView(Static):
    """Static text rendered from card markup."""

    DEFAULT_CSS: ClassVar[str] = """
    MarkupView {
        height: auto;
        width: 100%;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        markup: str = "",
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        """Initialize the MarkupView widget.

        Args:
            markup: Initial card markup.
            max_depth: Nesting depth past which markup is flattened.
            name: The name of the widget.
            id: The ID of the widget in the DOM.
            classes: The CSS classes for the widget.
        """
        super().__init__("", name=name, id=id, classes=classes)
        self.max_depth = max_depth
        self.card_markup = markup
        self.runs: list[StyledRun] = parse_markup(markup, max_depth=max_depth)

    def on_mount(self) -> None:
        self.update(self.styled_text())

    def styled_text(self) -> Text:
        """Rich Text for the current runs."""
        return runs_to_text(self.runs)

    def set_markup(self, markup: str) -> None:
        """Replace the displayed markup.

        Args:
            markup: New card markup.
        """
        self.card_markup = markup
        self.runs = parse_markup(markup, max_depth=self.max_depth)
        self.update(self.styled_text())


class MediaList(Static):
    """One line per image and attachment referenced by the markup."""

    DEFAULT_CSS: ClassVar[str] = """
    MediaList {
        height: auto;
        width: 100%;
        padding: 0 1;
        color: $text-muted;
    }
    """

    def __init__(
        self,
        markup: str = "",
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        """Initialize the MediaList widget.

        Args:
            markup: Card markup to collect media from.
            name: The name of the widget.
            id: The ID of the widget in the DOM.
            classes: The CSS classes for the widget.
        """
        super().__init__("", name=name, id=id, classes=classes)
        self.media: list[MediaDescriptor] = collect_media(markup)

    def on_mount(self) -> None:
        self.update(media_to_text(self.media))

    def set_markup(self, markup: str) -> None:
        self.media = collect_media(markup)
        self.update(media_to_text(self.media))


def collect_media(markup: str) -> list[MediaDescriptor]:
    """Images first, then attachments that are not images.

    Args:
        markup: Card markup.

    Returns:
        Media descriptors to list under the description.
    """
    images = extract_media(markup)
    others = [descriptor for descriptor in extract_attachments(markup) if descriptor.kind is not MediaKind.IMAGE]
    return images + others
