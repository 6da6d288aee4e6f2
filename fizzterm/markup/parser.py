"""Convert card markup into styled text runs.

The parser walks the markup left to right. Text between tags becomes runs in
the ambient style; each opening tag is paired with its matching close and
its body is parsed recursively with an updated style. Tags that never close
are dropped and parsing carries on with the text after them, so every step
consumes input and malformed markup cannot stall the loop.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum

from fizzterm.logger import get_logger
from fizzterm.markup.attachments import Attachment, MediaKind
from fizzterm.markup.tags import (
    ATTACHMENT_TAG,
    TAG_PATTERN,
    TagIndex,
    absolutize_url,
    decode_entities,
    get_attribute,
    is_self_closing,
    strip_tags,
)
from fizzterm.themes import THEME, Theme

logger = get_logger(__name__)

DEFAULT_MAX_DEPTH = 200

NEWLINE = "\n"
HORIZONTAL_RULE = "\n───\n"
BULLET = "• "
QUOTE_BAR = "│ "
VIDEO_ICON = "\uf03d "  # nf-fa-video
FILE_ICON = "\uf0c6 "  # nf-fa-paperclip

_WHITESPACE_PATTERN = re.compile(r"\s+")


class Attribute(Enum):
    """Text attributes a run can carry."""

    BOLD = "bold"
    ITALIC = "italic"
    STRIKETHROUGH = "strikethrough"


@dataclass(frozen=True)
class StyledRun:
    """A span of text sharing one foreground color and attribute set."""

    text: str
    foreground: str
    attributes: frozenset[Attribute] = frozenset()

    @property
    def bold(self) -> bool:
        return Attribute.BOLD in self.attributes

    @property
    def italic(self) -> bool:
        return Attribute.ITALIC in self.attributes

    @property
    def strikethrough(self) -> bool:
        return Attribute.STRIKETHROUGH in self.attributes


@dataclass(frozen=True)
class StyleState:
    """Inline style in effect at a point of the document."""

    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    code: bool = False

    @property
    def attributes(self) -> frozenset[Attribute]:
        attributes = set()
        if self.bold:
            attributes.add(Attribute.BOLD)
        if self.italic:
            attributes.add(Attribute.ITALIC)
        if self.strikethrough:
            attributes.add(Attribute.STRIKETHROUGH)
        return frozenset(attributes)


class ListKind(Enum):
    """Kind of the nearest enclosing list."""

    NONE = "none"
    UNORDERED = "ul"
    ORDERED = "ol"


@dataclass
class ListContext:
    """Numbering state of one list scope, shared by that list's items only."""

    kind: ListKind = ListKind.NONE
    counter: int = 0

    def next_marker(self) -> str:
        """Marker for the next item: its number for ordered lists, else a bullet."""
        if self.kind is ListKind.ORDERED:
            self.counter += 1
            return f"{self.counter}. "
        return BULLET


# Tags that only toggle an inline style flag
STYLE_TAGS: dict[str, str] = {
    "b": "bold",
    "strong": "bold",
    "i": "italic",
    "em": "italic",
    "s": "strikethrough",
    "strike": "strikethrough",
    "del": "strikethrough",
    "code": "code",
}

# Heading level -> Theme attribute used for its text
HEADING_COLORS: dict[str, str] = {
    "h1": "primary",
    "h2": "secondary",
    "h3": "accent",
}

LIST_TAGS: dict[str, ListKind] = {
    "ul": ListKind.UNORDERED,
    "ol": ListKind.ORDERED,
}

# Tags without content; they never get a close tag
VOID_TAGS = frozenset({"img", "source", "wbr", "input", "meta", "link", "col", "area", "embed", "track"})


@dataclass(frozen=True)
class _Document:
    """Markup being parsed, with its open/close tag pairs."""

    markup: str
    tags: TagIndex


class MarkupParser:
    """Recursive-descent converter from markup to styled runs.

    Colors are read from the theme while parsing, so runs reflect the
    palette that is current at parse time.
    """

    def __init__(self, theme: Theme = THEME, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.theme = theme
        self.max_depth = max_depth

    def parse(self, markup: str) -> list[StyledRun]:
        """Parse a whole document.

        Args:
            markup: Card markup.

        Returns:
            Runs in document order.
        """
        document = _Document(markup, TagIndex(markup))
        return self._parse(document, 0, len(markup), StyleState(), self.theme.text, ListContext(), 0)

    def _text_color(self, state: StyleState, foreground: str) -> str:
        return self.theme.code if state.code else foreground

    def _emit_text(self, runs: list[StyledRun], raw: str, state: StyleState, foreground: str) -> None:
        """Emit text found before a tag, skipping indentation/newline padding."""
        if not raw:
            return
        text = decode_entities(raw)
        if not text.strip() and "\n" in text:
            return
        if not state.code:
            text = _WHITESPACE_PATTERN.sub(" ", text)
        runs.append(StyledRun(text, self._text_color(state, foreground), state.attributes))

    def _parse(
        self,
        document: _Document,
        start: int,
        end: int,
        state: StyleState,
        foreground: str,
        lists: ListContext,
        depth: int,
    ) -> list[StyledRun]:
        markup = document.markup
        runs: list[StyledRun] = []
        position = start

        while position < end:
            match = TAG_PATTERN.search(markup, position, end)
            if match is None:
                text = decode_entities(markup[position:end])
                runs.append(StyledRun(text, self._text_color(state, foreground), state.attributes))
                break

            self._emit_text(runs, markup[position : match.start()], state, foreground)
            position = match.end()

            closing = match.group(1) == "/"
            name = match.group(2).lower()
            attrs = match.group(3)

            if name == "br":
                runs.append(StyledRun(NEWLINE, foreground))
                continue
            if name == "hr":
                runs.append(StyledRun(HORIZONTAL_RULE, self.theme.muted))
                continue
            # Closes reaching this loop have no open tag: drop them
            if closing or name in VOID_TAGS:
                continue

            if name == ATTACHMENT_TAG:
                if not is_self_closing(attrs):
                    close = document.tags.matching_close(match.start(), end)
                    if close is not None:
                        position = close[1]
                runs.extend(self._render_attachment(attrs, foreground))
                continue

            if is_self_closing(attrs):
                continue

            close = document.tags.matching_close(match.start(), end)
            if close is None:
                logger.debug(f"Dropping unclosed <{name}>")
                continue

            body_start, body_end = position, close[0]
            position = close[1]

            if depth >= self.max_depth:
                logger.warning(f"Markup nested deeper than {self.max_depth} levels, flattening <{name}>")
                flat = decode_entities(strip_tags(markup[body_start:body_end]))
                if flat:
                    runs.append(StyledRun(flat, self._text_color(state, foreground), state.attributes))
                continue

            runs.extend(
                self._render_element(
                    name, attrs, document, body_start, body_end, state, foreground, lists, depth + 1
                )
            )

        return runs

    def _render_element(
        self,
        name: str,
        attrs: str,
        document: _Document,
        body_start: int,
        body_end: int,
        state: StyleState,
        foreground: str,
        lists: ListContext,
        depth: int,
    ) -> list[StyledRun]:
        """Render one element whose body spans ``body_start:body_end``."""
        theme = self.theme

        def body(body_state: StyleState, body_foreground: str, body_lists: ListContext) -> list[StyledRun]:
            return self._parse(document, body_start, body_end, body_state, body_foreground, body_lists, depth)

        if name in STYLE_TAGS:
            return body(replace(state, **{STYLE_TAGS[name]: True}), foreground, lists)

        if name in HEADING_COLORS:
            color = getattr(theme, HEADING_COLORS[name])
            return [
                StyledRun(NEWLINE, foreground),
                *body(replace(state, bold=True), color, lists),
                StyledRun(NEWLINE, foreground),
            ]

        if name == "p":
            return [*body(state, foreground, lists), StyledRun(NEWLINE, foreground)]

        if name in LIST_TAGS:
            return body(state, foreground, ListContext(LIST_TAGS[name]))

        if name == "li":
            return [
                StyledRun(lists.next_marker(), theme.accent),
                # Item bodies start outside any list: nested lists open their own scope
                *body(state, foreground, ListContext()),
                StyledRun(NEWLINE, foreground),
            ]

        if name == "blockquote":
            muted = theme.muted
            return [
                StyledRun(QUOTE_BAR, muted),
                *body(replace(state, italic=True), muted, lists),
                StyledRun(NEWLINE, foreground),
            ]

        if name == "a":
            muted = theme.muted
            runs = [
                StyledRun("[", muted),
                *body(state, theme.secondary, lists),
                StyledRun("]", muted),
            ]
            href = get_attribute(attrs, "href")
            if href is not None:
                runs.append(StyledRun(f"({absolutize_url(href)})", muted))
            return runs

        if name == "pre":
            return [
                StyledRun(NEWLINE, foreground),
                *body(replace(state, code=True), theme.code, lists),
                StyledRun(NEWLINE, foreground),
            ]

        # div, span, figure, figcaption and anything unknown are transparent
        return body(state, foreground, lists)

    def _render_attachment(self, attrs: str, foreground: str) -> list[StyledRun]:
        """Render a non-image attachment as an icon and its label."""
        attachment = Attachment.from_attrs(attrs)
        if attachment.url is None or attachment.kind is MediaKind.IMAGE:
            return []

        icon = VIDEO_ICON if attachment.kind is MediaKind.VIDEO else FILE_ICON
        return [
            StyledRun(NEWLINE, foreground),
            StyledRun(icon, self.theme.accent),
            StyledRun(f"[{attachment.label}]", self.theme.secondary),
            StyledRun(NEWLINE, foreground),
        ]


def parse_markup(markup: str, *, theme: Theme = THEME, max_depth: int = DEFAULT_MAX_DEPTH) -> list[StyledRun]:
    """Convert card markup into styled runs.

    Args:
        markup: Card markup.
        theme: Color catalog used for foregrounds.
        max_depth: Nesting depth past which element bodies are flattened to text.

    Returns:
        Runs in document order.
    """
    return MarkupParser(theme, max_depth).parse(markup)
