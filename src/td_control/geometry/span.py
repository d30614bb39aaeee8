"""Cardinality of dimensions and spaces."""

from dataclasses import dataclass
from enum import Enum


class SpanKind(Enum):
    NULL = "null"
    FINITE = "finite"
    INFINITE = "infinite"


@dataclass(frozen=True)
class Span:
    """Number of distinct values a dimension or space can take.

    ``Span.null()`` is the span of the empty space and acts as the identity
    under multiplication; it converts to 1. ``Span.infinite()`` absorbs
    every other span.

    Attributes:
        kind: Null, finite or infinite
        size: Cardinality for finite spans, 1 for null, 0 for infinite
    """

    kind: SpanKind
    size: int = 0

    @classmethod
    def null(cls) -> "Span":
        return cls(SpanKind.NULL, 1)

    @classmethod
    def finite(cls, size: int) -> "Span":
        if size < 1:
            raise ValueError(f"Finite span must be >= 1, got {size}")
        return cls(SpanKind.FINITE, int(size))

    @classmethod
    def infinite(cls) -> "Span":
        return cls(SpanKind.INFINITE)

    @property
    def is_finite(self) -> bool:
        """True for finite and null spans."""
        return self.kind is not SpanKind.INFINITE

    def __mul__(self, other: "Span") -> "Span":
        if not isinstance(other, Span):
            return NotImplemented
        if self.kind is SpanKind.NULL:
            return other
        if other.kind is SpanKind.NULL:
            return self
        if SpanKind.INFINITE in (self.kind, other.kind):
            return Span.infinite()
        return Span.finite(self.size * other.size)

    def __int__(self) -> int:
        if not self.is_finite:
            raise ValueError("Cannot convert an infinite span to an integer")
        return self.size
