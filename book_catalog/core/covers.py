"""Cover image representation and resolution.

A stored ``cover`` is one text field with three possible shapes:

* empty or absent,
* an inline-encoded image (``data:image/png;base64,...``) carrying the bytes,
* a reference: an absolute URL or a path below the service's static root.

``decode_cover`` turns the text into one of the :data:`Cover` variants and
``encode_cover`` turns it back. ``resolve_cover_url`` maps the stored text to
something a client can display directly.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

from book_catalog.core.errors import ValidationError

INLINE_IMAGE_PREFIX = "data:image"

# Raster formats only; SVG can carry script.
INLINE_IMAGE_TYPES = frozenset({"image/png", "image/jpeg", "image/gif", "image/webp"})

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")
_DATA_URI_RE = re.compile(
    r"^data:(?P<mime>image/[A-Za-z0-9.+\-]+)(?P<params>(?:;[^;,]*)*?);base64,(?P<payload>.*)$",
    re.DOTALL,
)


@dataclass(frozen=True)
class EmptyCover:
    """No cover; clients render a placeholder."""


@dataclass(frozen=True)
class InlineImage:
    """An image embedded in the cover field itself."""

    mime_type: str
    data: bytes

    def to_data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


@dataclass(frozen=True)
class CoverReference:
    """A cover stored elsewhere: an absolute URL or a static-root relative path."""

    location: str

    @property
    def is_absolute(self) -> bool:
        return bool(_SCHEME_RE.match(self.location))


Cover = EmptyCover | InlineImage | CoverReference


def is_inline_image(value: str) -> bool:
    return value.startswith(INLINE_IMAGE_PREFIX)


def is_absolute_url(value: str) -> bool:
    return bool(_SCHEME_RE.match(value))


def decode_cover(value: str | None) -> Cover:
    """Parse the text form of a cover.

    Raises:
        ValidationError: the value claims to be an inline image but is not a
            well-formed base64 ``data:image/...`` URI.
    """
    if value is None:
        return EmptyCover()
    text = value.strip()
    if not text:
        return EmptyCover()

    if is_inline_image(text):
        match = _DATA_URI_RE.match(text)
        if match is None:
            raise ValidationError("cover is not a valid inline image")
        mime_type = match.group("mime").lower()
        if mime_type not in INLINE_IMAGE_TYPES:
            raise ValidationError(f"cover image type {mime_type} is not supported")
        payload = re.sub(r"\s+", "", match.group("payload"))
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationError("cover is not a valid inline image") from e
        if not data:
            raise ValidationError("cover is not a valid inline image")
        return InlineImage(mime_type=mime_type, data=data)

    return CoverReference(location=text)


def encode_cover(cover: Cover) -> str | None:
    """Return the canonical text form of a cover, ``None`` for no cover."""
    if isinstance(cover, InlineImage):
        return cover.to_data_uri()
    if isinstance(cover, CoverReference):
        return cover.location
    return None


def resolve_cover_url(cover: str | None, base_url: str) -> str:
    """Turn a stored cover into a URL a client can fetch or display.

    The inline-image check must come before the path checks: base64 content
    can itself look like a path.
    """
    if not cover:
        return ""
    if is_inline_image(cover):
        return cover
    if is_absolute_url(cover):
        return cover

    base = base_url.rstrip("/")
    if cover.startswith("/"):
        return f"{base}{cover}"
    return f"{base}/{cover}"
