"""Structured exception hierarchy for the request/response runtime.

Key components:
- **ErrorCode enum**: stable error kinds raised by the runtime itself
- **Severity enum**: error classification for logging and alerting
- **HttpError**: base exception carrying a kind, a message and details,
  serializable to (and parseable from) a JSON error body
- **Status classes**: one ``HttpError`` subclass per 4xx/5xx status, registered
  by class name and by status code so a client can rebuild the error from a
  response
- **Non-HTTP failures**: caller mistakes and unexpected responses that are
  never converted to a wire response

The status code of an ``HttpError`` is a class attribute: the class *is* the
status. Handlers can define their own subclasses (for example a domain
``PaymentRequired`` with custom details) and they are classified exactly
like the built-in ones. A subclass whose constructor differs from
``HttpError`` overrides ``from_body`` so it can be rebuilt from a response.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import ValidationError as SchemaError

from httpapi.schemas.errors import ErrorBody

if TYPE_CHECKING:
    from httpapi.common.response import ApiResponse


class ErrorCode(Enum):
    """Stable error kinds produced by the runtime."""

    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    """An unexpected failure, or a handler that broke its contract."""

    UNPROCESSABLE_CONTENT = "UNPROCESSABLE_CONTENT"
    """A required request body was sent without a content-type."""

    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    """The request content-type is not declared by the operation."""

    VALIDATION_ERROR_PATH = "VALIDATION_ERROR_PATH"
    VALIDATION_ERROR_QUERY_STRING = "VALIDATION_ERROR_QUERY_STRING"
    VALIDATION_ERROR_COOKIE = "VALIDATION_ERROR_COOKIE"
    VALIDATION_ERROR_HEADER = "VALIDATION_ERROR_HEADER"
    VALIDATION_ERROR_AUTHORIZER = "VALIDATION_ERROR_AUTHORIZER"
    VALIDATION_ERROR_BODY = "VALIDATION_ERROR_BODY"

    UNAUTHORIZED = "UNAUTHORIZED"
    """The authorizer denied the request."""


class Severity(Enum):
    """Severity levels used to pick the log level of a handled error."""

    LOW = "LOW"
    """Client mistakes: expected during normal operation."""

    HIGH = "HIGH"
    """Server-side failures that need attention."""


class HttpError(Exception):
    """Base class for errors that map to an HTTP error response.

    Args:
        code: Stable error kind (string or ErrorCode enum)
        message: Human-readable error message
        details: JSON-serializable details sent to the caller
        cause: The original exception that caused this error
    """

    status_code: ClassVar[int] = 500

    classes: ClassVar[dict[str, type[HttpError]]] = {}
    classes_by_status: ClassVar[dict[int, type[HttpError]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        HttpError.classes[cls.__name__] = cls
        # The first class declared for a status owns it
        HttpError.classes_by_status.setdefault(cls.status_code, cls)

    def __init__(
        self,
        code: str | ErrorCode,
        message: str,
        details: Any = None,
        cause: Exception | None = None,
    ) -> None:
        self.code = code.value if isinstance(code, ErrorCode) else code
        self.message = message
        self.details = details
        self.cause = cause

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    @property
    def severity(self) -> Severity:
        """Server-side statuses are HIGH, everything else is LOW."""
        return Severity.HIGH if self.status_code >= 500 else Severity.LOW

    @property
    def is_expected(self) -> bool:
        """Expected errors are logged below ERROR level."""
        return self.severity is Severity.LOW

    def to_json(self) -> dict[str, Any]:
        """Serialize to the JSON error body (the status travels separately)."""
        body = ErrorBody(
            kind=self.code,
            message=self.message,
            details=self.details,
            error_class=type(self).__name__,
        )
        data = body.model_dump(mode="json", by_alias=True)
        if self.details is None:
            del data["details"]
        return data

    @classmethod
    def from_body(cls, body: ErrorBody) -> HttpError:
        """Instantiate this class from a parsed error body."""
        return cls(body.kind, body.message, body.details)

    @classmethod
    def from_json(cls, data: object, status_code: int) -> HttpError:
        """Rebuild an error from its JSON body and the response status.

        The class named by the body is used when it is registered here and
        owns the same status; otherwise the class registered for the status.

        Args:
            data: Decoded JSON body of the response
            status_code: Transport status of the response

        Returns:
            HttpError: Instance of the resolved error class

        Raises:
            ValueError: If the body is not an error body or no class is
                registered for the status
        """
        try:
            body = ErrorBody.model_validate(data)
        except SchemaError as e:
            raise ValueError(f"malformed error data: {data!r}") from e

        error_class = HttpError.classes.get(body.error_class or "")
        if error_class is None or error_class.status_code != status_code:
            error_class = HttpError.classes_by_status.get(status_code)
        if error_class is None:
            raise ValueError(f"no error class registered for status {status_code}")

        return error_class.from_body(body)

    def __str__(self) -> str:
        return f"[{self.code}]: {self.message}"

    def __repr__(self) -> str:
        details_str = f", details={self.details!r}" if self.details is not None else ""
        return (
            f"{type(self).__name__}(code='{self.code}', "
            f"message='{self.message}'{details_str})"
        )


# 4xx
class BadRequest(HttpError):
    status_code = 400


class Unauthorized(HttpError):
    status_code = 401


class PaymentRequired(HttpError):
    status_code = 402


class Forbidden(HttpError):
    status_code = 403


class NotFound(HttpError):
    status_code = 404


class MethodNotAllowed(HttpError):
    status_code = 405


class NotAcceptable(HttpError):
    status_code = 406


class ProxyAuthenticationRequired(HttpError):
    status_code = 407


class RequestTimeout(HttpError):
    status_code = 408


class Conflict(HttpError):
    status_code = 409


class Gone(HttpError):
    status_code = 410


class LengthRequired(HttpError):
    status_code = 411


class PreconditionFailed(HttpError):
    status_code = 412


class PayloadTooLarge(HttpError):
    status_code = 413


class URITooLong(HttpError):
    status_code = 414


class UnsupportedMediaType(HttpError):
    status_code = 415


class RangeNotSatisfiable(HttpError):
    status_code = 416


class ExpectationFailed(HttpError):
    status_code = 417


class ImATeapot(HttpError):
    status_code = 418


class UnprocessableContent(HttpError):
    status_code = 422


class PreconditionRequired(HttpError):
    status_code = 428


class TooManyRequests(HttpError):
    status_code = 429


class RequestHeaderFieldsTooLarge(HttpError):
    status_code = 431


class UnavailableForLegalReasons(HttpError):
    status_code = 451


# 5xx
class InternalServerError(HttpError):
    status_code = 500


class NotImplementedServerError(HttpError):
    status_code = 501


class BadGateway(HttpError):
    status_code = 502


class ServiceUnavailable(HttpError):
    status_code = 503


class GatewayTimeout(HttpError):
    status_code = 504


class RequestValidationError(BadRequest):
    """A request field failed its validator.

    The error kind is derived from the field tag, e.g. ``QUERY_STRING`` gives
    ``VALIDATION_ERROR_QUERY_STRING``; ``details`` carries the validator's
    error payload.

    Args:
        field: Field tag (PATH, QUERY_STRING, COOKIE, HEADER, AUTHORIZER, BODY)
        details: The validator's error detail
        message: Human-readable error message
    """

    def __init__(
        self,
        field: str,
        details: Any = None,
        message: str = "request validation failed",
    ) -> None:
        self.field = field
        super().__init__(f"VALIDATION_ERROR_{field}", message, details)

    @classmethod
    def from_body(cls, body: ErrorBody) -> RequestValidationError:
        field = body.kind.removeprefix("VALIDATION_ERROR_")
        error = cls(field, body.details, body.message)
        error.code = body.kind
        return error


class PathParameterError(LookupError):
    """A path placeholder has no value in the supplied parameter map.

    This is a caller mistake detected while building a request, never a
    transport or server error.
    """

    def __init__(self, name: str, pattern: str) -> None:
        self.name = name
        self.pattern = pattern
        super().__init__(
            f"Parameter '{name}' of path '{pattern}' not found "
            "in the provided parameters map"
        )


class UnexpectedResponseError(Exception):
    """A response outside the declared success codes that is not an HttpError.

    Args:
        response: The decoded response, surfaced as-is
    """

    def __init__(self, response: ApiResponse) -> None:
        self.response = response
        super().__init__(f"unexpected response status {response.status_code}")
