"""Local HTTP front end for operation servers.

``create_app`` mounts each ``HttpApiServer`` on its operation's method and
path, playing the part of the API gateway: the starlette request is
translated into a v2 payload format event, run through the server pipeline,
and the wire result is turned back into a starlette response. An optional
authorizer runs first, with the gateway's simple-response semantics.

This is what the integration tests (and local development) run the client
against; it is not meant to replace a real gateway in production.
"""

from collections.abc import Awaitable, Callable, Iterable
from typing import Any

import orjson
from fastapi import FastAPI, Request
from fastapi.responses import Response
from loguru import logger

from httpapi.codec.base64 import Base64Codec
from httpapi.codec.media import MediaContainer
from httpapi.core.config import Settings, get_settings
from httpapi.core.constants import APPLICATION_JSON, COOKIE_HEADER
from httpapi.core.context import generate_correlation_id
from httpapi.core.error_context import sanitize_error_context
from httpapi.core.logging import setup_logging
from httpapi.core.types import HttpEvent, HttpResult
from httpapi.server.authorizer import HttpApiAuthorizerServer
from httpapi.server.pipeline import HttpApiServer

_BASE64 = Base64Codec()

# Gateway responses when the authorizer denies or fails
_FORBIDDEN = (403, {"message": "Forbidden"})
_AUTHORIZER_FAILED = (500, {"message": "Internal Server Error"})


def _join_multi(items: Iterable[tuple[str, str]]) -> dict[str, str]:
    """Collapse repeated keys into one comma-separated value, as the gateway does."""
    joined: dict[str, str] = {}
    for key, value in items:
        joined[key] = f"{joined[key]},{value}" if key in joined else value
    return joined


async def build_event(request: Request, route_key: str) -> HttpEvent:
    """Translate a starlette request into an API gateway v2 event.

    Args:
        request: Incoming request, already matched to a route
        route_key: ``METHOD /pattern`` of the matched operation

    Returns:
        HttpEvent: The event; the body is always base64-encoded
    """
    body = await request.body()

    headers = _join_multi(
        (key, value) for key, value in request.headers.items() if key != COOKIE_HEADER
    )
    cookies = [
        cookie.strip()
        for cookie in request.headers.get(COOKIE_HEADER, "").split(";")
        if cookie.strip()
    ]

    return {
        "version": "2.0",
        "routeKey": route_key,
        "rawPath": request.url.path,
        "rawQueryString": request.url.query,
        "cookies": cookies,
        "headers": headers,
        "queryStringParameters": _join_multi(request.query_params.multi_items()) or None,
        "pathParameters": dict(request.path_params) or None,
        "requestContext": {
            "requestId": generate_correlation_id(),
            "routeKey": route_key,
            "http": {"method": request.method, "path": request.url.path},
        },
        "body": _BASE64.encode(body) if body else None,
        "isBase64Encoded": bool(body),
    }


def build_response(result: HttpResult) -> Response:
    """Turn a wire result into a starlette response."""
    container = MediaContainer(
        body=result.get("body") or "",
        is_base64_encoded=bool(result.get("isBase64Encoded")),
    )
    return Response(
        content=container.to_bytes(),
        status_code=result["statusCode"],
        headers=result.get("headers") or {},
    )


def _gateway_response(status_code: int, body: dict[str, Any]) -> Response:
    return Response(
        content=orjson.dumps(body),
        status_code=status_code,
        media_type=APPLICATION_JSON,
    )


async def _authorize(
    authorizer: HttpApiAuthorizerServer, event: HttpEvent
) -> Response | None:
    """Run the authorizer; a response means the request stops at the gateway."""
    try:
        decision = await authorizer.authorize({**event, "type": "REQUEST"})
    except Exception as e:
        logger.opt(exception=e).error(
            "Authorizer failed: {}", type(e).__name__, **sanitize_error_context(e)
        )
        return _gateway_response(*_AUTHORIZER_FAILED)

    if not decision.get("isAuthorized"):
        return _gateway_response(*_FORBIDDEN)

    event["requestContext"]["authorizer"] = {"lambda": decision.get("context") or {}}
    return None


def _endpoint(
    server: HttpApiServer, authorizer: HttpApiAuthorizerServer | None
) -> Callable[[Request], Awaitable[Response]]:
    operation = server.operation
    route_key = f"{operation.method} {operation.path.pattern}"

    async def endpoint(request: Request) -> Response:
        event = await build_event(request, route_key)

        if authorizer is not None:
            denied = await _authorize(authorizer, event)
            if denied is not None:
                return denied

        return build_response(await server.handle(event))

    endpoint.__name__ = operation.operation_id or route_key
    return endpoint


def create_app(
    servers: Iterable[HttpApiServer],
    settings: Settings | None = None,
    *,
    authorizer: HttpApiAuthorizerServer | None = None,
) -> FastAPI:
    """Create a FastAPI application serving ``servers``.

    Args:
        servers: One server per operation; method and path come from the operation
        settings: Optional settings instance. If not provided, will use get_settings().
        authorizer: Optional authorizer run before every operation

    Returns:
        FastAPI: Configured application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    for server in servers:
        operation = server.operation
        application.add_api_route(
            operation.path.pattern,
            _endpoint(server, authorizer),
            methods=[operation.method],
            include_in_schema=False,
        )
        logger.debug(
            "Mounted {} {}",
            operation.method,
            operation.path.pattern,
            operation_id=operation.display_name,
        )

    return application
