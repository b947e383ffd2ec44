"""Generic bidirectional codecs and their composition.

A codec is a pure, stateless pair of transforms: ``encode`` maps an input
value to its output representation and ``decode`` maps it back. Codecs hold
no per-request state, so a single instance is created at import time and
shared by every request.

Chaining composes two codecs into one: ``a.chain(b)`` encodes through ``a``
then ``b`` and decodes through ``b`` then ``a``. Any failure raised by a
stage propagates untouched; no partial output is ever returned.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class Codec[I, O](ABC):
    """Stateless bidirectional transform between ``I`` and ``O``."""

    @abstractmethod
    def encode(self, value: I) -> O:
        """Map an input value to its output representation."""

    @abstractmethod
    def decode(self, value: O) -> I:
        """Map an output representation back to the input value."""

    def chain[N](self, codec: Codec[O, N]) -> CodecChain[I, O, N]:
        """Compose with ``codec``, which consumes this codec's output."""
        return CodecChain(self, codec)


class CodecChain[I, L, O](Codec[I, O]):
    """Composition of two codecs through the link type ``L``."""

    def __init__(self, first: Codec[I, L], second: Codec[L, O]) -> None:
        self.first = first
        self.second = second

    def encode(self, value: I) -> O:
        return self.second.encode(self.first.encode(value))

    def decode(self, value: O) -> I:
        return self.first.decode(self.second.decode(value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.first!r}, {self.second!r})"


class EchoCodec[T](Codec[T, T]):
    """Identity codec."""

    def encode(self, value: T) -> T:
        return value

    def decode(self, value: T) -> T:
        return value
