"""Server pipeline: gateway events in, wire results out.

- **pipeline**: ``HttpApiServer``, one per operation
- **authorizer**: ``HttpApiAuthorizerServer`` for gateway authorizers
- **validators**: Per-field validator contract and a pydantic-backed validator
- **middleware**: Optional hooks around the handler
- **outcome**: Explicit ``Handled`` / ``Errored`` results
- **request**: The validated request handed to handlers
"""

from httpapi.server.authorizer import HttpApiAuthorizerServer
from httpapi.server.middleware import Middleware
from httpapi.server.outcome import Errored, Handled
from httpapi.server.pipeline import HttpApiServer
from httpapi.server.request import ServerRequest
from httpapi.server.validators import TypeAdapterValidator, Validator, Validators

__all__ = [
    "Errored",
    "Handled",
    "HttpApiAuthorizerServer",
    "HttpApiServer",
    "Middleware",
    "ServerRequest",
    "TypeAdapterValidator",
    "Validator",
    "Validators",
]
