"""TUI widgets for fizzterm."""

from fizzterm.widgets.markup_view import MarkupView, MediaList

__all__ = [
    "MarkupView",
    "MediaList",
]
