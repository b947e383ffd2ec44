"""JSON content-shape codec backed by orjson."""

from typing import Any

import orjson
from pydantic import BaseModel

from httpapi.codec.base import Codec


class JsonCodec(Codec[Any, str]):
    """Serialize values to JSON text.

    ``None`` stands for an absent body: it encodes to the empty string and the
    empty string decodes back to ``None``. Pydantic models are dumped in JSON
    mode first, so handlers can return them directly.
    """

    def encode(self, value: Any) -> str:  # noqa: ANN401 - any JSON-serializable value
        if value is None:
            return ""
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json")
        return orjson.dumps(value).decode("utf-8")

    def decode(self, value: str) -> Any:  # noqa: ANN401 - any JSON value
        if value == "":
            return None
        return orjson.loads(value)
