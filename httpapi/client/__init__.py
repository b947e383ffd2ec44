"""Client pipeline: typed operation calls over httpx.

- **client**: ``HttpApiClient`` and the ``ClientRequest`` payload
- **authorizer**: Request signing capability and a bearer token signer
"""

from httpapi.client.authorizer import HttpApiClientAuthorizer, TokenAuthorizer
from httpapi.client.client import ClientRequest, HttpApiClient

__all__ = [
    "ClientRequest",
    "HttpApiClient",
    "HttpApiClientAuthorizer",
    "TokenAuthorizer",
]
