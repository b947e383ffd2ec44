"""URL-encoded form content-shape codec."""

from collections.abc import Mapping
from urllib.parse import parse_qsl, urlencode

from httpapi.codec.base import Codec

type FormData = Mapping[str, str | None]


class FormDataCodec(Codec[FormData, str]):
    """Encode string maps as ``key=value&...``.

    Only string values are serialized; anything else (including ``None``) is
    dropped. Decoding keeps blank values and the last occurrence of a
    repeated key wins.
    """

    def encode(self, value: FormData) -> str:
        return urlencode([(k, v) for k, v in value.items() if isinstance(v, str)])

    def decode(self, value: str) -> dict[str, str]:
        return dict(parse_qsl(value, keep_blank_values=True))
