"""Core package for cross-cutting runtime functionality.

- **config**: Settings loaded from the environment with pydantic-settings
- **context**: Correlation ID of the event being processed
- **exceptions**: Structured HTTP error hierarchy with stable error kinds
- **error_context**: Sensitive data sanitization for safe logging
- **logging**: Loguru setup with console, JSON and AWS formatters
- **constants** / **types**: Shared constants and type aliases
"""
