"""Type aliases for the loosely typed data flowing through the runtime.

Wire events and results are plain dictionaries (the shape API gateways hand
to a function), so their keys cannot be typed statically. The aliases below
give those dictionaries a name and document what is expected of them.
"""

from typing import Any

# Scalar accepted in header, query, path and cookie maps; None means "absent"
type ParameterValue = str | int | float | bool | None

# Inbound API gateway (v2 payload format) event
type HttpEvent = dict[str, Any]

# Outbound structured result: statusCode, headers, body, isBase64Encoded
type HttpResult = dict[str, Any]

# Simple authorizer decision: isAuthorized plus an arbitrary context
type AuthorizerResult = dict[str, Any]
