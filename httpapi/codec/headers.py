"""Normalization of header, query, path and cookie parameter maps.

Parameter maps arrive with heterogeneous values (strings, numbers, booleans,
``None`` for absent). The wire only carries strings, so:

- absent values are dropped, never sent as an empty value
- booleans become ``"true"``/``"false"`` and integral floats lose their
  fractional part, matching how JSON-first gateways render them
- header names are lower-cased, which makes lookups case-insensitive

The client and the server share these helpers, so outgoing and inbound maps
are normalized identically.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any, Final
from urllib.parse import quote

from httpapi.core.exceptions import PathParameterError
from httpapi.core.types import ParameterValue

PATH_PARAMETER_PATTERN: Final[re.Pattern[str]] = re.compile(r"\{([\w.:-]+)\}")

# Characters encodeURIComponent leaves untouched on top of the unreserved set
_PATH_SAFE: Final[str] = "!'()*"


def stringify(value: ParameterValue) -> str:
    """Render a scalar parameter the way it appears on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def stringify_parameters(params: Mapping[str, Any]) -> dict[str, str]:
    """Drop absent entries and stringify the rest; keys are kept as given."""
    return {key: stringify(value) for key, value in params.items() if value is not None}


class HeaderEncoder:
    """Encode a header map to canonical form: lower-case names, string values."""

    def encode(self, headers: Mapping[str, Any]) -> dict[str, str]:
        return {
            key.lower(): stringify(value)
            for key, value in headers.items()
            if value is not None
        }


def substitute_path(pattern: str, params: Mapping[str, Any]) -> str:
    """Replace every ``{name}`` placeholder with its percent-encoded value.

    Args:
        pattern: Path pattern, e.g. ``/items/{itemId}``
        params: Parameter values by placeholder name

    Returns:
        str: The concrete path

    Raises:
        PathParameterError: If a placeholder has no (non-absent) value
    """

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        value = params.get(name)
        if value is None:
            raise PathParameterError(name, pattern)
        return quote(stringify(value), safe=_PATH_SAFE)

    return PATH_PARAMETER_PATTERN.sub(replace, pattern)


def parse_media_type(content_type: str | None) -> str | None:
    """Media type of a content-type value, without parameters.

    Examples:
        >>> parse_media_type("application/json; charset=utf-8")
        'application/json'
        >>> parse_media_type("") is None
        True
    """
    if not content_type:
        return None
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type or None


def parse_cookies(cookies: Iterable[str]) -> dict[str, str]:
    """Parse ``name=value`` cookie strings, splitting on the first ``=`` only."""
    parsed: dict[str, str] = {}
    for cookie in cookies:
        name, _, value = cookie.partition("=")
        parsed[name.strip()] = value.strip()
    return parsed


def format_cookies(cookies: Mapping[str, Any]) -> str | None:
    """Render a cookie map as a ``cookie`` header value (None when empty)."""
    pairs = [f"{name}={value}" for name, value in stringify_parameters(cookies).items()]
    return "; ".join(pairs) or None
