"""Conversion between typed responses and the structured wire result.

``encode`` is used by the server to turn a handler's response into the
gateway result. ``decode`` is used by the client to rebuild a typed response
from status, headers and payload, dispatching on the content-type.
"""

from collections.abc import Mapping
from typing import Any

from httpapi.codec.headers import HeaderEncoder, parse_media_type
from httpapi.codec.media import MediaContainer
from httpapi.common.response import ApiResponse, EmptyResponse, response_type_for
from httpapi.core.constants import CONTENT_LENGTH_HEADER, CONTENT_TYPE_HEADER
from httpapi.core.types import HttpResult


def _content_length(headers: Mapping[str, str]) -> int:
    try:
        return int(headers.get(CONTENT_LENGTH_HEADER) or 0)
    except ValueError:
        return 0


class HttpEventCodec:
    """Encode responses to wire results and decode wire payloads to responses."""

    header_encoder = HeaderEncoder()

    def encode(self, response: ApiResponse) -> HttpResult:
        container = response.encode_body() or MediaContainer(body="")

        headers = self.header_encoder.encode(response.headers or {})
        headers.pop(CONTENT_TYPE_HEADER, None)
        if response.media_type is not None:
            headers[CONTENT_TYPE_HEADER] = response.media_type

        return {
            "statusCode": response.status_code,
            "headers": headers,
            "body": container.body,
            "isBase64Encoded": container.is_base64_encoded,
        }

    def decode(
        self,
        status_code: int,
        headers: Mapping[str, Any],
        container: MediaContainer,
    ) -> ApiResponse:
        normalized = self.header_encoder.encode(headers)
        media_type = parse_media_type(normalized.get(CONTENT_TYPE_HEADER))

        if media_type is None and _content_length(normalized) <= 0:
            return EmptyResponse(status_code, normalized)

        response = response_type_for(media_type)(None, status_code, normalized)
        response.decode_body(container)
        return response
