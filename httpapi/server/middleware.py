"""Optional pipeline hooks.

Hooks run in a fixed order around the handler::

    raw_request -> (validation) -> request -> handler -> response -> (encode) -> raw_response

Each hook receives the value of its stage plus the operation and returns the
value handed to the next stage.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from httpapi.common.operation import Operation
from httpapi.common.response import ApiResponse
from httpapi.core.types import HttpEvent, HttpResult
from httpapi.server.request import ServerRequest

type RawRequestHook = Callable[[HttpEvent, Operation], Awaitable[HttpEvent]]
type RequestHook = Callable[[ServerRequest, Operation], Awaitable[ServerRequest]]
# The third argument is the failure of the pipeline, None when it succeeded
type ResponseHook = Callable[
    [ApiResponse, Operation, BaseException | None], Awaitable[ApiResponse]
]
type RawResponseHook = Callable[[HttpResult, Operation], Awaitable[HttpResult]]


@dataclass(frozen=True, slots=True)
class Middleware:
    raw_request: RawRequestHook | None = None
    request: RequestHook | None = None
    response: ResponseHook | None = None
    raw_response: RawResponseHook | None = None
