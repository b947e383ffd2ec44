"""Entry point for gateway authorizer functions (simple response format)."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger

from httpapi.core.config import Settings, get_settings
from httpapi.core.exceptions import Unauthorized
from httpapi.core.logging import setup_logging
from httpapi.core.types import AuthorizerResult, HttpEvent

type AuthorizerHandler = Callable[[HttpEvent], Awaitable[AuthorizerResult]]


class HttpApiAuthorizerServer:
    """Wrap an authorizer so a denial is a decision, not a failure.

    ``Unauthorized`` raised by the handler becomes
    ``{"isAuthorized": False, "context": {}}``. Any other exception propagates
    unchanged and the gateway reports it as an internal error.
    """

    def __init__(
        self, handler: AuthorizerHandler, *, settings: Settings | None = None
    ) -> None:
        self.handler = handler
        self.settings = settings or get_settings()

    async def authorize(self, event: HttpEvent) -> AuthorizerResult:
        try:
            return await self.handler(event)
        except Unauthorized as e:
            logger.info("Request denied: {}", e.message, error_code=e.code)
            return {"isAuthorized": False, "context": {}}

    def create_lambda_handler(self) -> Callable[[HttpEvent, Any], AuthorizerResult]:
        """Synchronous ``(event, context)`` entry point for the Lambda runtime."""
        setup_logging(self.settings)

        def lambda_handler(event: HttpEvent, context: Any = None) -> AuthorizerResult:  # noqa: ARG001, ANN401 - runtime context is unused
            return asyncio.run(self.authorize(event))

        return lambda_handler
