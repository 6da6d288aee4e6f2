"""Textual preview application for card markup."""

import sys
from pathlib import Path
from typing import ClassVar

from rich.console import Console
from textual.app import App, ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Footer, Header, Static

from fizzterm.logger import configure_file_sink, enable_stderr, get_logger
from fizzterm.markup.parser import parse_markup
from fizzterm.render import media_to_text, runs_to_text
from fizzterm.settings import Settings, load_settings
from fizzterm.terminal import attempt_detect, detection_disabled
from fizzterm.themes import DEFAULT_TEXTUAL_THEME_NAME, textual_theme
from fizzterm.widgets.markup_view import MarkupView, MediaList, collect_media

logger = get_logger(__name__)

STDIN_SOURCE = "-"


class PreviewApp(App[None]):
    """Show a card description the way the board UI renders it."""

    ENABLE_COMMAND_PALETTE = False
    BINDINGS: ClassVar[tuple[tuple[str, str, str], ...]] = (
        ("q", "quit", "Quit"),
        ("r", "reload", "Reload"),
    )

    def __init__(self, markup: str, *, source: Path | None = None, settings: Settings | None = None) -> None:
        """Initialize the preview app.

        Args:
            markup: Card markup to show.
            source: File the markup came from, re-read on reload.
            settings: Settings to use (defaults when None).
        """
        super().__init__()
        self.card_markup = markup
        self.source_path = source
        self._settings = settings or Settings()

    def compose(self) -> ComposeResult:
        """Create the UI layout.

        Yields:
            The widgets that make up the application UI.
        """
        yield Header()
        with VerticalScroll(id="card-body"):
            yield MarkupView(self.card_markup, max_depth=self._settings.max_depth, id="description")
            yield Static("[bold]Media[/bold]", id="media-title")
            yield MediaList(self.card_markup, id="media")
        yield Footer()

    def on_mount(self) -> None:
        """Apply the palette-derived theme."""
        self.register_theme(textual_theme())
        self.theme = DEFAULT_TEXTUAL_THEME_NAME
        self.title = "fizzterm"
        self.sub_title = str(self.source_path) if self.source_path is not None else "stdin"
        self.query_one("#media-title", Static).display = bool(collect_media(self.card_markup))

    def action_reload(self) -> None:
        """Re-read the source file and re-render."""
        if self.source_path is None:
            self.notify("Nothing to reload", severity="warning")
            return
        try:
            self.card_markup = self.source_path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning(f"Failed to reload {self.source_path}: {exc}")
            self.notify(f"Failed to reload: {exc}", severity="error")
            return
        self.query_one("#description", MarkupView).set_markup(self.card_markup)
        self.query_one("#media", MediaList).set_markup(self.card_markup)
        self.query_one("#media-title", Static).display = bool(collect_media(self.card_markup))
        logger.info(f"Reloaded {self.source_path}")


def read_markup(source: str) -> str:
    """Read markup from a file path, or from stdin for ``-``."""
    if source == STDIN_SOURCE:
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def dump(markup: str, settings: Settings, console: Console | None = None) -> None:
    """Print the rendered markup and its media, without starting the TUI.

    Args:
        markup: Card markup.
        settings: Settings to use.
        console: Console to print to (a new one when None).
    """
    console = console or Console()
    console.print(runs_to_text(parse_markup(markup, max_depth=settings.max_depth)))
    media = collect_media(markup)
    if media:
        console.print(media_to_text(media))


def main(source: str, *, dump_only: bool = False, detect: bool = True, timeout_ms: int | None = None) -> None:
    """Run the preview.

    Args:
        source: Markup file path, or ``-`` for stdin.
        dump_only: Print styled output instead of opening the TUI.
        detect: Whether to query the terminal palette.
        timeout_ms: Detection timeout override.
    """
    settings = load_settings()
    configure_file_sink(settings.log_level)
    if dump_only or source == STDIN_SOURCE:
        enable_stderr()

    logger.info("Starting fizzterm")
    markup = read_markup(source)

    if detect and settings.detect_palette and not detection_disabled():
        attempt_detect(timeout_ms if timeout_ms is not None else settings.detect_timeout_ms)

    if dump_only or source == STDIN_SOURCE:
        dump(markup, settings)
    else:
        PreviewApp(markup, source=Path(source), settings=settings).run()
    logger.info("fizzterm exited")
