"""Static operation descriptor shared by the client and the server.

An operation is built once at startup (usually from an OpenAPI document) and
is read-only afterwards, so one instance is safely shared by every request.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

HTTP_METHODS = frozenset(
    {"GET", "PUT", "POST", "DELETE", "OPTIONS", "HEAD", "PATCH", "TRACE"}
)

# Status codes below this value count as success when none are declared
_ERROR_STATUS_THRESHOLD = 400


class PathPattern(BaseModel):
    """Path template with ``{name}`` placeholders."""

    model_config = ConfigDict(frozen=True)

    pattern: str = Field(
        ...,
        description="Path template",
        examples=["/items/{itemId}"],
    )

    @field_validator("pattern", mode="after")
    @classmethod
    def must_be_absolute(cls, v: str) -> str:
        """Path patterns are absolute."""
        if not v.startswith("/"):
            raise ValueError(f"path pattern must start with '/': {v!r}")
        return v


class RequestBody(BaseModel):
    """Declared request body: accepted media types and whether it is required."""

    model_config = ConfigDict(frozen=True)

    required: bool = Field(default=False, description="Whether a body is required")
    content: dict[str, Any] = Field(
        default_factory=dict,
        description="Schema (or None) by accepted media type",
    )


class Operation(BaseModel):
    """One API action: method, path, accepted request media and success codes."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(..., description="HTTP method", examples=["GET", "POST"])
    path: PathPattern
    operation_id: str | None = Field(default=None, description="Operation identifier")
    request_body: RequestBody | None = Field(
        default=None, description="Declared request body, None when there is none"
    )
    success_codes: frozenset[int] | None = Field(
        default=None,
        description="Statuses the client treats as success; None accepts all",
    )

    @field_validator("method", mode="after")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        """Methods are compared upper-case."""
        method = v.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"unsupported HTTP method {v!r}")
        return method

    @property
    def request_media_types(self) -> list[str]:
        """Media types accepted for the request body, in declaration order."""
        if self.request_body is None:
            return []
        return list(self.request_body.content)

    @property
    def display_name(self) -> str:
        """Operation id, or ``METHOD /pattern`` for anonymous operations."""
        return self.operation_id or f"{self.method} {self.path.pattern}"

    @classmethod
    def from_openapi(
        cls, document: Mapping[str, Any], pattern: str, method: str
    ) -> Operation:
        """Build the descriptor of ``method pattern`` from an OpenAPI 3 document.

        Success codes come from the ``x-sdf-success-codes`` extension, limited
        to the declared responses; without it every declared status below 400
        is a success code.

        Args:
            document: Dereferenced OpenAPI document
            pattern: Path pattern as it appears under ``paths``
            method: HTTP method (any case)

        Returns:
            Operation: The descriptor

        Raises:
            ValueError: If the operation is missing, declares non-numeric or no
                responses, or ends up without any success code
        """
        method_key = method.lower()
        operation_spec = document.get("paths", {}).get(pattern, {}).get(method_key)
        if not isinstance(operation_spec, Mapping):
            raise ValueError(f"operation {method.upper()} {pattern} not found")

        responses: dict[int, Any] = {}
        for status_code in operation_spec.get("responses") or {}:
            if not str(status_code).isdigit():
                raise ValueError(
                    f"invalid status code {status_code!r} at "
                    f"{method.upper()} {pattern}: only specific codes are supported"
                )
            responses[int(status_code)] = operation_spec["responses"][status_code]
        if not responses:
            raise ValueError(f"operation {method.upper()} {pattern} has no responses")

        declared = operation_spec.get("x-sdf-success-codes") or []
        if declared:
            success_codes = {code for code in declared if code in responses}
        else:
            success_codes = {
                code for code in responses if code < _ERROR_STATUS_THRESHOLD
            }
        if not success_codes:
            raise ValueError(
                f"operation {method.upper()} {pattern} has no success code"
            )

        request_body = None
        if body_spec := operation_spec.get("requestBody"):
            request_body = RequestBody(
                required=bool(body_spec.get("required", False)),
                content={
                    media_type: (media or {}).get("schema")
                    for media_type, media in (body_spec.get("content") or {}).items()
                },
            )

        return cls(
            method=method,
            path=PathPattern(pattern=pattern),
            operation_id=operation_spec.get("operationId")
            or _default_operation_id(pattern, method_key),
            request_body=request_body,
            success_codes=frozenset(success_codes),
        )


def _default_operation_id(pattern: str, method: str) -> str:
    """camelCase id from pattern and method, e.g. ``itemsItemIdGet``."""
    words = [w for w in re.split(r"[^a-zA-Z0-9]+", f"{pattern}-{method}") if w]
    if not words:
        return method
    head, *tail = words
    return head[0].lower() + head[1:] + "".join(w[0].upper() + w[1:] for w in tail)
