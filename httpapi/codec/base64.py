"""Base64 codec for raw byte buffers."""

import base64
import binascii

from httpapi.codec.base import Codec


class Base64Codec(Codec[bytes, str]):
    """Standard (padded) base64 between bytes and ASCII text."""

    def encode(self, value: bytes) -> str:
        return base64.b64encode(value).decode("ascii")

    def decode(self, value: str) -> bytes:
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as e:
            raise ValueError(f"invalid base64 payload: {e}") from e
