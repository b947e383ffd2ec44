"""Codecs between typed values and their wire representations.

- **base**: The ``Codec`` contract and codec chaining
- **json** / **form** / **base64**: Content-shape codecs
- **media**: ``MediaContainer`` envelope and the codec of each media type
- **headers**: Header, query, path and cookie normalization
- **event**: Typed responses to and from the wire result
"""
