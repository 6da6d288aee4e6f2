"""Low-level helpers for scanning Action Text markup."""

import re

# Fizzy serves attachments with paths relative to its own host
CONTENT_ORIGIN = "https://app.fizzy.do"

ATTACHMENT_TAG = "action-text-attachment"

TAG_PATTERN = re.compile(r"<(/?)([A-Za-z][\w-]*)([^>]*)>")

ENTITIES: dict[str, str] = {
    "&lt;": "<",
    "&gt;": ">",
    "&amp;": "&",
    "&quot;": '"',
    "&#39;": "'",
    "&nbsp;": " ",
}
_ENTITY_PATTERN = re.compile("|".join(re.escape(entity) for entity in ENTITIES))
_DIGITS_PATTERN = re.compile(r"\d+")


def decode_entities(text: str) -> str:
    """Decode the entity escapes the content service emits.

    Decoding is a single pass, so ``&amp;lt;`` becomes ``&lt;`` and not ``<``.

    Args:
        text: Text possibly containing escapes.

    Returns:
        Text with escapes replaced by their literal characters.
    """
    if "&" not in text:
        return text
    return _ENTITY_PATTERN.sub(lambda match: ENTITIES[match.group(0)], text)


def strip_tags(markup: str) -> str:
    """Remove every tag, keeping only text (still entity-encoded)."""
    return TAG_PATTERN.sub("", markup)


def is_self_closing(attrs: str) -> bool:
    """Check whether a tag's attribute text ends with ``/`` (``<br/>``)."""
    return attrs.rstrip().endswith("/")


def find_matching_close(markup: str, tag_name: str, start: int = 0) -> tuple[int, int] | None:
    """Find the close tag matching an already-consumed open tag.

    Nested opens of the same name raise the depth, closes lower it; the
    match is the close that brings the depth back to zero. Names compare
    case-insensitively.

    Args:
        markup: Markup to scan.
        tag_name: Lowercase name of the open tag.
        start: Index just past the open tag.

    Returns:
        ``(start, end)`` of the matching close tag, or None if unmatched.
    """
    close_pattern = re.compile(rf"</{re.escape(tag_name)}(?![\w-])", re.IGNORECASE)
    if close_pattern.search(markup, start) is None:
        return None

    depth = 1
    for match in TAG_PATTERN.finditer(markup, start):
        if match.group(2).lower() != tag_name:
            continue
        if match.group(1):
            depth -= 1
            if depth == 0:
                return match.start(), match.end()
        elif not is_self_closing(match.group(3)):
            depth += 1
    return None


class TagIndex:
    """Matching close tags for every open tag of a document, found in one pass.

    Pairs agree with :func:`find_matching_close`: a close pairs with the
    nearest earlier unpaired open of the same name. Lookups are constant time,
    so documents full of unclosed tags parse in linear time.
    """

    def __init__(self, markup: str) -> None:
        self._closes: dict[int, tuple[int, int]] = {}
        open_starts: dict[str, list[int]] = {}
        for match in TAG_PATTERN.finditer(markup):
            name = match.group(2).lower()
            if match.group(1):
                pending = open_starts.get(name)
                if pending:
                    self._closes[pending.pop()] = (match.start(), match.end())
            elif not is_self_closing(match.group(3)):
                open_starts.setdefault(name, []).append(match.start())

    def matching_close(self, open_start: int, end: int | None = None) -> tuple[int, int] | None:
        """Get the close tag paired with the open tag starting at ``open_start``.

        Args:
            open_start: Index of the ``<`` of the open tag.
            end: Closes ending past this index count as unmatched.

        Returns:
            ``(start, end)`` of the close tag, or None if unmatched.
        """
        close = self._closes.get(open_start)
        if close is None or (end is not None and close[1] > end):
            return None
        return close


def _attribute_pattern(name: str) -> re.Pattern[str]:
    return re.compile(rf"""(?<![\w-]){re.escape(name)}\s*=\s*(?:"([^"]*)"|'([^']*)')""", re.IGNORECASE)


_ATTRIBUTE_PATTERNS: dict[str, re.Pattern[str]] = {}


def get_attribute(attrs: str, name: str) -> str | None:
    """Read a quoted attribute value from a tag's attribute text.

    Args:
        attrs: Attribute text of the tag (everything after the name).
        name: Attribute name.

    Returns:
        The decoded value, or None if absent or empty.
    """
    pattern = _ATTRIBUTE_PATTERNS.get(name)
    if pattern is None:
        pattern = _ATTRIBUTE_PATTERNS[name] = _attribute_pattern(name)
    match = pattern.search(attrs)
    if match is None:
        return None
    value = match.group(1) if match.group(1) is not None else match.group(2)
    if not value:
        return None
    return decode_entities(value)


def get_int_attribute(attrs: str, name: str) -> int | None:
    """Read an attribute that must consist of digits only (width, height)."""
    value = get_attribute(attrs, name)
    if value is None or not _DIGITS_PATTERN.fullmatch(value):
        return None
    return int(value)


def absolutize_url(url: str, origin: str = CONTENT_ORIGIN) -> str:
    """Make a host-relative URL absolute.

    Args:
        url: URL as found in the markup.
        origin: Origin to prefix relative URLs with.

    Returns:
        ``origin + url`` when url starts with ``/``, otherwise url unchanged.
    """
    if url.startswith("/"):
        return f"{origin}{url}"
    return url
