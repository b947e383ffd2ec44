"""Server side of the request/response pipeline.

One ``HttpApiServer`` serves one operation. ``handle`` takes an API gateway
(v2 payload format) event and always returns a structurally valid wire
result; the stages run strictly in this order::

    raw_request -> validate -> request -> handler -> response -> encode -> raw_response

A failure anywhere up to the handler skips straight to the response stage
with an error response:

- ``HttpError`` becomes its JSON error body with the class status
- anything else is logged with its traceback and masked behind a generic
  ``INTERNAL_SERVER_ERROR``; its detail never reaches the caller

A handler reports success by returning an ``ApiResponse`` (or ``Handled``),
and can fail with a response of its choosing by returning ``Errored``.

Failures after that point (response middleware, encoding, raw response
middleware) are contained as well: they are logged and the result is replaced
by the encoded internal error.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from loguru import logger

from httpapi.codec.event import HttpEventCodec
from httpapi.codec.headers import HeaderEncoder, parse_cookies, parse_media_type
from httpapi.codec.media import MediaContainer, codec_for
from httpapi.common.operation import Operation
from httpapi.common.response import ApiResponse
from httpapi.core.config import Settings, get_settings
from httpapi.core.constants import CONTENT_TYPE_HEADER
from httpapi.core.context import RequestContext, generate_correlation_id
from httpapi.core.error_context import sanitize_error_context, sanitize_headers
from httpapi.core.exceptions import (
    ErrorCode,
    HttpError,
    InternalServerError,
    RequestValidationError,
    UnprocessableContent,
    UnsupportedMediaType,
)
from httpapi.core.logging import setup_logging
from httpapi.core.types import HttpEvent, HttpResult
from httpapi.server.middleware import Middleware
from httpapi.server.outcome import Errored, Handled, Outcome
from httpapi.server.request import ServerRequest
from httpapi.server.validators import Validators, validate

type HandlerResult = ApiResponse | Handled | Errored
type Handler = Callable[[ServerRequest], Awaitable[HandlerResult]]
type LambdaHandler = Callable[[HttpEvent, Any], HttpResult]


def internal_error(message: str = "internal server error") -> InternalServerError:
    """Generic error substituted for failures that must not be exposed."""
    return InternalServerError(ErrorCode.INTERNAL_SERVER_ERROR, message)


class HttpApiServer:
    """Run the pipeline of one operation.

    Args:
        operation: Descriptor of the served operation
        handler: Async business logic; receives the validated request
        validators: Per-field validators, all optional
        middleware: Optional stage hooks
        settings: Settings override, mostly for tests
    """

    codec = HttpEventCodec()
    header_encoder = HeaderEncoder()

    def __init__(
        self,
        operation: Operation,
        handler: Handler,
        validators: Validators | None = None,
        middleware: Middleware | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        self.operation = operation
        self.handler = handler
        self.validators = validators or Validators()
        self.middleware = middleware or Middleware()
        self.settings = settings or get_settings()

    async def handle(self, event: HttpEvent) -> HttpResult:
        """Process one inbound event and return the wire result.

        Never raises, except for cancellation of the surrounding task.
        """
        correlation_id = self._correlation_id(event)
        RequestContext.set_correlation_id(correlation_id)

        with logger.contextualize(
            correlation_id=correlation_id,
            operation_id=self.operation.display_name,
        ):
            start_time = time.perf_counter()

            outcome = await self._invoke(event)
            result = await self._complete(outcome)

            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(
                "Request completed",
                status_code=result.get("statusCode"),
                duration_ms=round(duration_ms, 2),
            )
            return result

    def create_lambda_handler(self) -> LambdaHandler:
        """Synchronous ``(event, context)`` entry point for the Lambda runtime."""
        setup_logging(self.settings)

        def lambda_handler(event: HttpEvent, context: Any = None) -> HttpResult:  # noqa: ARG001, ANN401 - runtime context is unused
            return asyncio.run(self.handle(event))

        return lambda_handler

    def _correlation_id(self, event: HttpEvent) -> str:
        headers = self.header_encoder.encode(event.get("headers") or {})
        header_name = self.settings.server_config.correlation_id_header
        request_context = event.get("requestContext") or {}
        return (
            headers.get(header_name)
            or request_context.get("requestId")
            or generate_correlation_id()
        )

    async def _invoke(self, event: HttpEvent) -> Outcome:
        """Run every stage up to the handler and classify its result."""
        try:
            if self.middleware.raw_request is not None:
                event = await self.middleware.raw_request(event, self.operation)

            request = self.create_request(event)

            if self.middleware.request is not None:
                request = await self.middleware.request(request, self.operation)

            result = await self.handler(request)
        except Exception as e:
            return self._classify(e)

        if isinstance(result, Handled | Errored):
            return result
        if not isinstance(result, ApiResponse):
            return self._classify(internal_error("handler must return an ApiResponse"))
        return Handled(result)

    def create_request(self, event: HttpEvent) -> ServerRequest:
        """Extract, normalize and validate the request parts of ``event``.

        Raises:
            RequestValidationError: If a field fails its validator or the body
                cannot be decoded
            UnprocessableContent: If a required body comes without content-type
            UnsupportedMediaType: If the content-type is not declared
        """
        validators = self.validators

        request = ServerRequest(event=event)
        request.path = dict(event.get("pathParameters") or {})
        validate("PATH", request.path, validators.path)
        request.query = dict(event.get("queryStringParameters") or {})
        validate("QUERY_STRING", request.query, validators.query)
        request.cookie = parse_cookies(event.get("cookies") or [])
        validate("COOKIE", request.cookie, validators.cookie)
        request.header = self.header_encoder.encode(event.get("headers") or {})
        validate("HEADER", request.header, validators.header)

        request.authorizer = (event.get("requestContext") or {}).get("authorizer")
        if validators.authorizer is not None:
            validate("AUTHORIZER", request.authorizer, validators.authorizer)

        if self.settings.server_config.log_request_headers:
            logger.debug("Request headers", headers=sanitize_headers(request.header))

        request_body = self.operation.request_body
        if request_body is None:
            return request

        media_type = parse_media_type(request.header.get(CONTENT_TYPE_HEADER))
        if media_type is None:
            if request_body.required:
                raise UnprocessableContent(
                    ErrorCode.UNPROCESSABLE_CONTENT,
                    "content-type header is required to process the request body",
                )
            return request
        if media_type not in request_body.content:
            raise UnsupportedMediaType(
                ErrorCode.UNSUPPORTED_MEDIA_TYPE,
                f"unsupported media type '{media_type}'",
            )

        try:
            body = codec_for(media_type).decode(MediaContainer.from_event(event))
        except ValueError as e:
            raise RequestValidationError(
                "BODY", message="request body could not be decoded"
            ) from e

        validate("BODY", {"media_type": media_type, "body": body}, validators.body)

        request.media_type = media_type
        request.body = body
        return request

    def _classify(self, error: Exception) -> Errored:
        if isinstance(error, HttpError):
            log = logger.warning if error.is_expected else logger.error
            log(
                "Request failed with {}: {}",
                type(error).__name__,
                error.message,
                status_code=error.status_code,
                error_code=error.code,
            )
            try:
                return Errored(ApiResponse.from_error(error), error)
            except Exception as e:
                # Details that cannot be serialized must not escape handle()
                logger.opt(exception=e).error(
                    "Error response could not be built: {}",
                    type(e).__name__,
                    **sanitize_error_context(e),
                )
                return Errored(ApiResponse.from_error(internal_error()), error)

        logger.opt(exception=error).error(
            "Unhandled exception: {}",
            type(error).__name__,
            **sanitize_error_context(error),
        )
        return Errored(ApiResponse.from_error(internal_error()), error)

    async def _complete(self, outcome: Outcome) -> HttpResult:
        """Run the response stages; a failure here yields the internal error."""
        response = outcome.response
        error = outcome.error if isinstance(outcome, Errored) else None

        try:
            if self.middleware.response is not None:
                response = await self.middleware.response(
                    response, self.operation, error
                )

            result = self.codec.encode(response)

            if self.middleware.raw_response is not None:
                result = await self.middleware.raw_response(result, self.operation)
                if not isinstance(result, Mapping) or "statusCode" not in result:
                    raise TypeError(
                        f"raw response hook returned {type(result).__name__}, "
                        "expected a result with statusCode"
                    )
        except Exception as e:
            logger.opt(exception=e).error(
                "Response stage failed: {}",
                type(e).__name__,
                **sanitize_error_context(e),
            )
            return self.codec.encode(ApiResponse.from_error(internal_error()))

        return result
