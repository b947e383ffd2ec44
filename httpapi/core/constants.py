"""Core runtime constants."""

# Media types
TEXT_PLAIN = "text/plain"
TEXT_HTML = "text/html"
APPLICATION_OCTET_STREAM = "application/octet-stream"
APPLICATION_JSON = "application/json"
APPLICATION_FORM_URLENCODED = "application/x-www-form-urlencoded"

# Bodies with an unknown or missing media type are treated as raw bytes
DEFAULT_MEDIA_TYPE = APPLICATION_OCTET_STREAM

# HTTP headers (wire names are always lower-case)
CONTENT_TYPE_HEADER = "content-type"
CONTENT_LENGTH_HEADER = "content-length"
AUTHORIZATION_HEADER = "authorization"
COOKIE_HEADER = "cookie"
CORRELATION_ID_HEADER = "x-correlation-id"

# Security and redaction
REDACTED = "[REDACTED]"
