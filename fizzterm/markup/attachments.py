"""Media references embedded in card markup.

Images are drawn outside the text flow, so they are collected in a separate
pass over the raw markup instead of by the markup parser.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from fizzterm.markup.tags import (
    ATTACHMENT_TAG,
    absolutize_url,
    get_attribute,
    get_int_attribute,
)

DEFAULT_IMAGE_ALT = "image"
DEFAULT_ATTACHMENT_LABEL = "attachment"

_ATTACHMENT_OPEN_PATTERN = re.compile(rf"<{ATTACHMENT_TAG}(?=[\s/>])([^>]*)>", re.IGNORECASE)
_IMG_PATTERN = re.compile(r"<img(?=[\s/>])([^>]*)>", re.IGNORECASE)


class MediaKind(Enum):
    """Media categories, decided by content type."""

    IMAGE = "image"
    VIDEO = "video"
    OTHER = "other"

    @classmethod
    def from_content_type(cls, content_type: str | None) -> MediaKind:
        """Classify a MIME type. Missing or unrecognized types are OTHER."""
        if content_type is None:
            return cls.OTHER
        content_type = content_type.strip().lower()
        if content_type.startswith("image/"):
            return cls.IMAGE
        if content_type.startswith("video/"):
            return cls.VIDEO
        return cls.OTHER


@dataclass(frozen=True)
class MediaDescriptor:
    """A media reference found in the markup."""

    url: str
    alt: str
    width: int | None = None
    height: int | None = None
    kind: MediaKind = MediaKind.IMAGE


@dataclass(frozen=True)
class Attachment:
    """Attributes of an ``action-text-attachment`` pseudo-tag."""

    url: str | None
    filename: str | None
    caption: str | None
    content_type: str | None
    width: int | None
    height: int | None

    @classmethod
    def from_attrs(cls, attrs: str) -> Attachment:
        """Read an attachment from its tag's attribute text.

        Relative URLs are made absolute.
        """
        url = get_attribute(attrs, "url")
        return cls(
            url=absolutize_url(url) if url is not None else None,
            filename=get_attribute(attrs, "filename"),
            caption=get_attribute(attrs, "caption"),
            content_type=get_attribute(attrs, "content-type"),
            width=get_int_attribute(attrs, "width"),
            height=get_int_attribute(attrs, "height"),
        )

    @property
    def kind(self) -> MediaKind:
        return MediaKind.from_content_type(self.content_type)

    @property
    def label(self) -> str:
        """Text shown for the attachment: caption, then filename."""
        return self.caption or self.filename or DEFAULT_ATTACHMENT_LABEL

    def to_descriptor(self) -> MediaDescriptor | None:
        if self.url is None:
            return None
        if self.kind is MediaKind.IMAGE:
            alt = self.filename or DEFAULT_IMAGE_ALT
        else:
            alt = self.label
        return MediaDescriptor(url=self.url, alt=alt, width=self.width, height=self.height, kind=self.kind)


def extract_attachments(markup: str) -> list[MediaDescriptor]:
    """Collect every attachment with a URL, whatever its content type.

    Args:
        markup: Raw card markup.

    Returns:
        Descriptors in document order.
    """
    descriptors: list[MediaDescriptor] = []
    for match in _ATTACHMENT_OPEN_PATTERN.finditer(markup):
        descriptor = Attachment.from_attrs(match.group(1)).to_descriptor()
        if descriptor is not None:
            descriptors.append(descriptor)
    return descriptors


def extract_media(markup: str) -> list[MediaDescriptor]:
    """Collect the images referenced by the markup.

    Image attachments come first, then plain ``<img>`` tags, each group in
    document order. A plain image whose relative ``src`` is already covered
    by an attachment URL is skipped, since attachments usually wrap an
    ``<img>`` pointing at the same blob.

    Args:
        markup: Raw card markup.

    Returns:
        Image descriptors with absolute URLs.
    """
    images = [
        descriptor for descriptor in extract_attachments(markup) if descriptor.kind is MediaKind.IMAGE
    ]

    for match in _IMG_PATTERN.finditer(markup):
        attrs = match.group(1)
        src = get_attribute(attrs, "src")
        if src is None:
            continue
        if src.startswith("/") and any(src[1:] in image.url for image in images):
            continue
        images.append(
            MediaDescriptor(
                url=absolutize_url(src),
                alt=get_attribute(attrs, "alt") or DEFAULT_IMAGE_ALT,
                width=get_int_attribute(attrs, "width"),
                height=get_int_attribute(attrs, "height"),
                kind=MediaKind.IMAGE,
            )
        )
    return images
