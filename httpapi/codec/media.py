"""Media codecs: content-shape codecs chained onto the transport envelope.

The transport only understands text or base64 text. ``MediaContainer`` is
that envelope, and every media type maps to one codec that ends in it:

- ``text/plain``, ``text/html``: UTF-8 text, sent verbatim
- ``application/octet-stream``: raw bytes, sent as base64
- ``application/json``: JSON text, sent verbatim
- ``application/x-www-form-urlencoded``: form pairs, sent verbatim

The container codecs accept either text or bytes on encode, and normalize on
decode (text codecs always return ``str``, the binary codec always returns
``bytes``), so a body that crossed the wire base64-encoded still decodes to
the shape its media type promises.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from httpapi.codec.base import Codec, CodecChain
from httpapi.codec.base64 import Base64Codec
from httpapi.codec.form import FormDataCodec
from httpapi.codec.json import JsonCodec
from httpapi.core.constants import (
    APPLICATION_FORM_URLENCODED,
    APPLICATION_JSON,
    APPLICATION_OCTET_STREAM,
    DEFAULT_MEDIA_TYPE,
    TEXT_HTML,
    TEXT_PLAIN,
)
from httpapi.core.types import HttpEvent

_BASE64 = Base64Codec()


@dataclass(frozen=True, slots=True)
class MediaContainer:
    """Transport envelope: a text body, or base64 text when the payload is binary."""

    body: str
    is_base64_encoded: bool = False

    def to_bytes(self) -> bytes:
        """Raw payload bytes, as sent on an HTTP connection."""
        if self.is_base64_encoded:
            return _BASE64.decode(self.body)
        return self.body.encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> MediaContainer:
        """Wrap raw payload bytes; always base64 so no byte is lost."""
        return cls(body=_BASE64.encode(data), is_base64_encoded=True)

    @classmethod
    def from_event(cls, event: HttpEvent) -> MediaContainer:
        """Extract the envelope of an API gateway event (absent body is empty)."""
        return cls(
            body=event.get("body") or "",
            is_base64_encoded=bool(event.get("isBase64Encoded")),
        )


class TextContainerCodec(Codec[str, MediaContainer]):
    def encode(self, value: str) -> MediaContainer:
        return MediaContainer(body=value, is_base64_encoded=False)

    def decode(self, value: MediaContainer) -> str:
        return value.body


class Base64ContainerCodec(Codec[bytes, MediaContainer]):
    def encode(self, value: bytes) -> MediaContainer:
        return MediaContainer(body=_BASE64.encode(value), is_base64_encoded=True)

    def decode(self, value: MediaContainer) -> bytes:
        return _BASE64.decode(value.body)


class MediaContainerCodec(Codec[str | bytes, MediaContainer]):
    """Dispatch on the payload type: text stays text, bytes become base64."""

    text = TextContainerCodec()
    binary = Base64ContainerCodec()

    def encode(self, value: str | bytes) -> MediaContainer:
        if isinstance(value, str):
            return self.text.encode(value)
        return self.binary.encode(bytes(value))

    def decode(self, value: MediaContainer) -> str | bytes:
        if value.is_base64_encoded:
            return self.binary.decode(value)
        return self.text.decode(value)


class Utf8MediaContainerCodec(Codec[str, MediaContainer]):
    """Text media; a base64 envelope is decoded as UTF-8."""

    container = MediaContainerCodec()

    def encode(self, value: str | bytes) -> MediaContainer:
        return self.container.encode(value)

    def decode(self, value: MediaContainer) -> str:
        payload = self.container.decode(value)
        return payload if isinstance(payload, str) else payload.decode("utf-8")


class BinaryMediaContainerCodec(Codec[bytes, MediaContainer]):
    """Binary media; a text envelope is encoded back to UTF-8 bytes."""

    container = MediaContainerCodec()

    def encode(self, value: bytes | str) -> MediaContainer:
        return self.container.encode(value)

    def decode(self, value: MediaContainer) -> bytes:
        payload = self.container.decode(value)
        return payload.encode("utf-8") if isinstance(payload, str) else payload


class JsonMediaContainerCodec(CodecChain[Any, str, MediaContainer]):
    def __init__(self) -> None:
        super().__init__(JsonCodec(), Utf8MediaContainerCodec())


class FormMediaContainerCodec(CodecChain[Any, str, MediaContainer]):
    def __init__(self) -> None:
        super().__init__(FormDataCodec(), Utf8MediaContainerCodec())


MEDIA_CODECS: MappingProxyType[str, Codec[Any, MediaContainer]] = MappingProxyType(
    {
        TEXT_PLAIN: Utf8MediaContainerCodec(),
        TEXT_HTML: Utf8MediaContainerCodec(),
        APPLICATION_OCTET_STREAM: BinaryMediaContainerCodec(),
        APPLICATION_JSON: JsonMediaContainerCodec(),
        APPLICATION_FORM_URLENCODED: FormMediaContainerCodec(),
    }
)


def codec_for(media_type: str | None) -> Codec[Any, MediaContainer]:
    """Codec for ``media_type``, falling back to the default binary codec."""
    if media_type is not None and media_type in MEDIA_CODECS:
        return MEDIA_CODECS[media_type]
    return MEDIA_CODECS[DEFAULT_MEDIA_TYPE]
