"""Card markup parsing and media extraction."""

from fizzterm.markup.attachments import MediaDescriptor, MediaKind, extract_attachments, extract_media
from fizzterm.markup.parser import Attribute, MarkupParser, StyledRun, StyleState, parse_markup
from fizzterm.markup.tags import CONTENT_ORIGIN, absolutize_url, decode_entities

__all__ = [
    "CONTENT_ORIGIN",
    "Attribute",
    "MarkupParser",
    "MediaDescriptor",
    "MediaKind",
    "StyleState",
    "StyledRun",
    "absolutize_url",
    "decode_entities",
    "extract_attachments",
    "extract_media",
    "parse_markup",
]
