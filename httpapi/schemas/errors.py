"""Wire schema of structured error bodies.

Every error the server pipeline converts into a response is serialized with
this model, and the client parses undeclared responses back through it. The
HTTP status is not part of the body: it travels as the transport status. The
``class`` field names the error class so the receiving side can rebuild the
same error; the status selects the class when the name is unknown there.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorBody(BaseModel):
    """JSON body of an error response."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "kind": "VALIDATION_ERROR_QUERY_STRING",
                    "message": "request validation failed",
                    "class": "RequestValidationError",
                    "details": [{"loc": ["limit"], "msg": "Input should be a valid integer"}],
                },
                {
                    "kind": "UNSUPPORTED_MEDIA_TYPE",
                    "message": "unsupported media type 'application/xml'",
                    "class": "UnsupportedMediaType",
                },
                {
                    "kind": "INTERNAL_SERVER_ERROR",
                    "message": "internal server error",
                    "class": "InternalServerError",
                },
            ]
        },
    )

    kind: str = Field(
        ...,
        description="Stable error code identifying the error type",
        examples=["VALIDATION_ERROR_BODY", "UNSUPPORTED_MEDIA_TYPE"],
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["request validation failed"],
    )

    details: Any = Field(
        default=None,
        description="Additional error details (e.g. validator errors)",
    )

    error_class: str | None = Field(
        default=None,
        alias="class",
        description="Name of the error class on the sending side",
        examples=["NotFound", "RequestValidationError"],
    )
