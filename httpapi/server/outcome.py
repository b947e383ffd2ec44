"""Explicit result of running a handler.

``Handled`` carries the response of a successful run. ``Errored`` carries the
final response of a failed run together with the failure that produced it.
A handler that wants to fail with a specific response returns ``Errored``
directly instead of raising.
"""

from dataclasses import dataclass

from httpapi.common.response import ApiResponse


@dataclass(frozen=True, slots=True)
class Handled:
    response: ApiResponse


@dataclass(frozen=True, slots=True)
class Errored:
    response: ApiResponse
    error: BaseException | None = None


type Outcome = Handled | Errored
