"""httpapi - typed request/response runtime for HTTP APIs behind an API gateway.

The same operation descriptors drive both sides of an API:

- **Client**: turns typed calls into signed HTTP requests and classifies
  the responses against the operation's declared success codes
- **Server**: turns gateway events into validated requests, runs the
  handler and middleware, and always answers with a valid wire result
- **Codecs**: media codecs (JSON, form, text, binary) chained onto a
  transport envelope, shared by both sides

Architecture Overview:
- **core**: configuration, logging, exceptions and request context
- **codec**: codec contract, media codecs, header and event codecs
- **common**: operation descriptor and typed response values
- **client** / **server**: the two pipelines
- **api**: local FastAPI front end used for development and testing
"""
