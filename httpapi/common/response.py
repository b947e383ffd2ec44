"""Typed response values.

A response is a status code, a content (media type plus body) and optional
headers. Each concrete response class is one variant of ``ResponseKind``
with a fixed media type; encoding and decoding look the codec up by kind in
``RESPONSE_CODECS``, so every instance of a kind goes through the same
shared codec.

Handlers build responses directly::

    return JsonResponse({"id": item_id}, 200, {"cache-control": "no-store"})

and the client rebuilds them from the wire by content-type, see
``httpapi.codec.event``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar

from httpapi.codec.base import Codec
from httpapi.codec.media import (
    BinaryMediaContainerCodec,
    FormMediaContainerCodec,
    JsonMediaContainerCodec,
    MediaContainer,
    Utf8MediaContainerCodec,
)
from httpapi.core.constants import (
    APPLICATION_FORM_URLENCODED,
    APPLICATION_JSON,
    APPLICATION_OCTET_STREAM,
    DEFAULT_MEDIA_TYPE,
    TEXT_HTML,
    TEXT_PLAIN,
)
from httpapi.core.exceptions import HttpError

type ResponseHeaders = Mapping[str, str | None]


class ResponseKind(Enum):
    """Response variants, each owning one media type."""

    EMPTY = None
    TEXT = TEXT_PLAIN
    HTML = TEXT_HTML
    JSON = APPLICATION_JSON
    BINARY = APPLICATION_OCTET_STREAM
    FORM = APPLICATION_FORM_URLENCODED

    @property
    def media_type(self) -> str | None:
        return self.value


RESPONSE_CODECS: MappingProxyType[ResponseKind, Codec[Any, MediaContainer]] = (
    MappingProxyType(
        {
            ResponseKind.TEXT: Utf8MediaContainerCodec(),
            ResponseKind.HTML: Utf8MediaContainerCodec(),
            ResponseKind.JSON: JsonMediaContainerCodec(),
            ResponseKind.BINARY: BinaryMediaContainerCodec(),
            ResponseKind.FORM: FormMediaContainerCodec(),
        }
    )
)


@dataclass(slots=True)
class Content:
    """Body of a response together with its media type."""

    body: Any
    media_type: str | None = None


class ApiResponse:
    """Base of the response hierarchy; use one of the concrete kinds."""

    kind: ClassVar[ResponseKind]

    def __init__(
        self,
        body: Any,  # noqa: ANN401 - shape depends on the kind
        status_code: int,
        headers: ResponseHeaders | None = None,
    ) -> None:
        self.status_code = status_code
        self.content = Content(body=body, media_type=self.kind.media_type)
        self.headers = dict(headers) if headers else None

    @property
    def body(self) -> Any:  # noqa: ANN401 - shape depends on the kind
        return self.content.body

    @property
    def media_type(self) -> str | None:
        return self.content.media_type

    def encode_body(self) -> MediaContainer | None:
        """Wire envelope of the body, or None for a response without content."""
        if self.kind is ResponseKind.EMPTY:
            return None
        return RESPONSE_CODECS[self.kind].encode(self.content.body)

    def decode_body(self, container: MediaContainer) -> Any:  # noqa: ANN401 - shape depends on the kind
        """Decode ``container`` into this response's body and return it."""
        if self.kind is ResponseKind.EMPTY:
            self.content.body = None
        else:
            self.content.body = RESPONSE_CODECS[self.kind].decode(container)
        return self.content.body

    @staticmethod
    def from_error(error: HttpError) -> JsonResponse:
        """JSON error response for a structured error."""
        return JsonResponse(error.to_json(), error.status_code)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiResponse):
            return NotImplemented
        return (
            self.kind is other.kind
            and self.status_code == other.status_code
            and self.content == other.content
            and self.headers == other.headers
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status_code={self.status_code}, "
            f"body={self.body!r}, headers={self.headers!r})"
        )


class EmptyResponse(ApiResponse):
    kind = ResponseKind.EMPTY

    def __init__(self, status_code: int, headers: ResponseHeaders | None = None) -> None:
        super().__init__(None, status_code, headers)


class TextResponse(ApiResponse):
    kind = ResponseKind.TEXT

    def __init__(
        self, body: str, status_code: int, headers: ResponseHeaders | None = None
    ) -> None:
        super().__init__(body, status_code, headers)


class HtmlResponse(TextResponse):
    kind = ResponseKind.HTML


class JsonResponse(ApiResponse):
    kind = ResponseKind.JSON


class BinaryResponse(ApiResponse):
    kind = ResponseKind.BINARY

    def __init__(
        self, body: bytes, status_code: int, headers: ResponseHeaders | None = None
    ) -> None:
        super().__init__(body, status_code, headers)


class FormResponse(ApiResponse):
    kind = ResponseKind.FORM

    def __init__(
        self,
        body: Mapping[str, str | None],
        status_code: int,
        headers: ResponseHeaders | None = None,
    ) -> None:
        super().__init__(body, status_code, headers)


RESPONSE_TYPES: MappingProxyType[str, type[ApiResponse]] = MappingProxyType(
    {
        TEXT_PLAIN: TextResponse,
        TEXT_HTML: HtmlResponse,
        APPLICATION_OCTET_STREAM: BinaryResponse,
        APPLICATION_JSON: JsonResponse,
        APPLICATION_FORM_URLENCODED: FormResponse,
    }
)


def response_type_for(media_type: str | None) -> type[ApiResponse]:
    """Response class for ``media_type``, falling back to the default kind."""
    if media_type is not None and media_type in RESPONSE_TYPES:
        return RESPONSE_TYPES[media_type]
    return RESPONSE_TYPES[DEFAULT_MEDIA_TYPE]
