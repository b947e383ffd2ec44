"""Per-field request validators.

A validator is a predicate produced by code generation from an API document
(or written by hand). The runtime only calls it and, on failure, forwards its
``errors`` as the details of the validation error; it never evaluates schema
rules itself.
"""

from dataclasses import dataclass
from typing import Any, Protocol

from pydantic import TypeAdapter, ValidationError

from httpapi.core.exceptions import RequestValidationError


class Validator(Protocol):
    """Predicate over a request field that keeps the detail of its last failure."""

    errors: Any

    def __call__(self, data: Any) -> bool: ...  # noqa: ANN401 - any field shape


@dataclass(frozen=True, slots=True)
class Validators:
    """Validators by request field; a missing one skips that field."""

    path: Validator | None = None
    query: Validator | None = None
    header: Validator | None = None
    cookie: Validator | None = None
    authorizer: Validator | None = None
    body: Validator | None = None


class TypeAdapterValidator[T]:
    """Validator backed by a pydantic ``TypeAdapter``.

    Usually built from a ``TypedDict`` or a model describing the field::

        class ItemQuery(TypedDict):
            limit: NotRequired[Annotated[str, StringConstraints(pattern=r"^\\d+$")]]

        Validators(query=TypeAdapterValidator(ItemQuery))

    ``errors`` holds pydantic's error list after a failed call, None otherwise.
    The offending input is left out, so the list is always JSON-serializable
    and never echoes request data back to the caller.

    One instance serves every request of an operation, so ``errors`` is only
    meaningful when read right after the call, before any await.
    """

    def __init__(self, type_: type[T]) -> None:
        self.adapter: TypeAdapter[T] = TypeAdapter(type_)
        self.errors: list[dict[str, Any]] | None = None

    def __call__(self, data: Any) -> bool:  # noqa: ANN401 - any field shape
        try:
            self.adapter.validate_python(data)
        except ValidationError as e:
            self.errors = e.errors(
                include_url=False, include_context=False, include_input=False
            )
            return False
        self.errors = None
        return True


def validate(field: str, data: Any, validator: Validator | None) -> None:  # noqa: ANN401 - any field shape
    """Run ``validator`` on ``data``; a failure raises the field's validation error.

    Raises:
        RequestValidationError: Tagged with ``field``, carrying ``validator.errors``
    """
    if validator is None:
        return
    if not validator(data):
        raise RequestValidationError(field, validator.errors)

