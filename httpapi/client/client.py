"""Client side of the request/response pipeline.

``HttpApiClient.request`` turns a typed call into a wire request, signs it,
sends it with httpx and classifies the response:

1. media type: explicit ``media_type``, else the operation's single declared
   request media type, else the default binary media type
2. body: encoded through the media codec of that type (no body when absent)
3. headers, cookies, path and query are normalized with the shared encoders
4. the authorizer (if any) signs the request; its failures propagate as-is
5. the response is decoded into a typed ``ApiResponse`` by content-type
6. a status outside the operation's declared success codes is raised as the
   ``HttpError`` parsed from its JSON body, or as ``UnexpectedResponseError``
   carrying the response when the body is not a structured error

Transport failures (``httpx.HTTPError``) are never caught here. There are no
retries at this layer.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any, Self

import httpx
from loguru import logger

from httpapi.client.authorizer import HttpApiClientAuthorizer
from httpapi.codec.event import HttpEventCodec
from httpapi.codec.headers import (
    HeaderEncoder,
    format_cookies,
    stringify_parameters,
    substitute_path,
)
from httpapi.codec.media import MediaContainer, codec_for
from httpapi.common.operation import Operation
from httpapi.common.response import ApiResponse, BinaryResponse
from httpapi.core.config import Settings, get_settings
from httpapi.core.constants import APPLICATION_JSON, CONTENT_TYPE_HEADER, COOKIE_HEADER, DEFAULT_MEDIA_TYPE
from httpapi.core.error_context import sanitize_headers
from httpapi.core.exceptions import HttpError, UnexpectedResponseError
from httpapi.core.types import ParameterValue


@dataclass(slots=True)
class ClientRequest:
    """Typed call payload; every part is optional.

    ``body=None`` means "no body"; use ``JsonCodec``-compatible values,
    form maps, text or bytes depending on the media type.
    """

    path: Mapping[str, ParameterValue] = field(default_factory=dict)
    query: Mapping[str, ParameterValue] = field(default_factory=dict)
    header: Mapping[str, ParameterValue] = field(default_factory=dict)
    cookie: Mapping[str, ParameterValue] = field(default_factory=dict)
    media_type: str | None = None
    body: Any = None


class HttpApiClient:
    """Issue operation calls against a deployed API.

    Args:
        base_url: Base URL the operation paths are appended to; defaults to
            ``client_config.base_url``
        authorizer: Optional request signer
        http_client: httpx client to use (the caller keeps ownership)
        settings: Settings override, mostly for tests
    """

    codec = HttpEventCodec()
    header_encoder = HeaderEncoder()

    def __init__(
        self,
        base_url: str | None = None,
        authorizer: HttpApiClientAuthorizer | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        base_url = base_url or settings.client_config.base_url
        if not base_url:
            raise ValueError("base_url is required (argument or CLIENT_CONFIG__BASE_URL)")

        self.base_url = base_url.rstrip("/")
        self.authorizer = authorizer
        self.follow_redirects = settings.client_config.follow_redirects

        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=settings.client_config.timeout
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    @staticmethod
    def resolve_media_type(operation: Operation, request: ClientRequest) -> str:
        """Effective request media type (see module docstring, step 1)."""
        if request.media_type:
            return request.media_type
        declared = operation.request_media_types
        if len(declared) == 1:
            return declared[0]
        return DEFAULT_MEDIA_TYPE

    def build_request(
        self, operation: Operation, request: ClientRequest | None = None
    ) -> httpx.Request:
        """Build the unsigned wire request for ``operation``.

        Raises:
            PathParameterError: If a path placeholder has no value
        """
        request = request or ClientRequest()
        media_type = self.resolve_media_type(operation, request)

        content: bytes | None = None
        if request.body is not None:
            content = codec_for(media_type).encode(request.body).to_bytes()

        headers = self.header_encoder.encode(
            {CONTENT_TYPE_HEADER: media_type, **request.header}
        )
        if cookie := format_cookies(request.cookie):
            headers[COOKIE_HEADER] = cookie

        url = self.base_url + substitute_path(operation.path.pattern, request.path)
        params = stringify_parameters(request.query)

        return httpx.Request(
            operation.method,
            url,
            params=params or None,
            headers=headers,
            content=content,
        )

    async def request(
        self, operation: Operation, request: ClientRequest | None = None
    ) -> ApiResponse:
        """Send ``request`` for ``operation`` and return the decoded response.

        Raises:
            HttpError: Undeclared status with a structured JSON error body
            UnexpectedResponseError: Undeclared status with any other body
            PathParameterError: If a path placeholder has no value
            httpx.HTTPError: Transport failures, unchanged
        """
        http_request = self.build_request(operation, request)

        if self.authorizer is not None:
            http_request = await self.authorizer.sign(http_request)

        logger.debug(
            "Sending {} {}",
            http_request.method,
            http_request.url,
            operation_id=operation.display_name,
            headers=sanitize_headers(dict(http_request.headers)),
        )

        http_response = await self._http.send(
            http_request, follow_redirects=self.follow_redirects
        )

        success = _is_success(operation, http_response.status_code)
        response = self._create_response(http_response, success=success)

        logger.debug(
            "Received {} for {}",
            response.status_code,
            operation.display_name,
            status_code=response.status_code,
        )

        if not success:
            raise self._create_error(response)

        return response

    def _create_response(
        self, http_response: httpx.Response, *, success: bool
    ) -> ApiResponse:
        container = MediaContainer.from_bytes(http_response.content)
        try:
            return self.codec.decode(
                http_response.status_code, http_response.headers, container
            )
        except ValueError as e:
            if success:
                raise
            # An error body that does not match its content-type is surfaced raw
            raw = BinaryResponse(
                http_response.content,
                http_response.status_code,
                self.header_encoder.encode(http_response.headers),
            )
            raise UnexpectedResponseError(raw) from e

    @staticmethod
    def _create_error(response: ApiResponse) -> Exception:
        if response.media_type == APPLICATION_JSON:
            try:
                return HttpError.from_json(response.body, response.status_code)
            except ValueError:
                pass

        logger.warning(
            "Unexpected response status {}",
            response.status_code,
            status_code=response.status_code,
            media_type=response.media_type,
        )
        return UnexpectedResponseError(response)


def _is_success(operation: Operation, status_code: int) -> bool:
    """Without declared success codes every response is a success."""
    return operation.success_codes is None or status_code in operation.success_codes
