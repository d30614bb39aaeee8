"""Composite spaces built from dimensions."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Any

import jax.random as jr
import numpy as np
from jax import Array

from td_control.geometry.dimensions import Continuous, Dimension, Discrete, Partitioned
from td_control.geometry.span import Span


class Space(ABC):
    """Base class for state and action spaces."""

    @abstractmethod
    def sample(self, key: Array) -> Any:
        """Draw a uniformly random element of the space."""
        ...

    @abstractmethod
    def dim(self) -> int:
        """Number of dimensions."""
        ...

    @abstractmethod
    def span(self) -> Span:
        """Cardinality of the space."""
        ...


class NullSpace(Space):
    """Space with no dimensions and a single (empty) element."""

    def sample(self, key: Array) -> tuple:
        del key
        return ()

    def dim(self) -> int:
        return 0

    def span(self) -> Span:
        return Span.null()

    def __repr__(self) -> str:
        return "NullSpace()"


class UnitarySpace(Space):
    """Space with exactly one dimension."""

    def __init__(self, d: Dimension):
        self.dimension = d

    def sample(self, key: Array) -> Any:
        return self.dimension.sample(key)

    def dim(self) -> int:
        return 1

    def span(self) -> Span:
        return self.dimension.span()

    def __repr__(self) -> str:
        return f"UnitarySpace({self.dimension!r})"


class PairSpace(Space):
    """Space of ordered pairs drawn from two dimensions."""

    def __init__(self, d1: Dimension, d2: Dimension):
        self.dimensions = (d1, d2)

    def sample(self, key: Array) -> tuple[Any, Any]:
        k1, k2 = jr.split(key)
        return (self.dimensions[0].sample(k1), self.dimensions[1].sample(k2))

    def dim(self) -> int:
        return 2

    def span(self) -> Span:
        return self.dimensions[0].span() * self.dimensions[1].span()

    def partitioned(self, density: int) -> "PairSpace":
        """Quantise both (continuous) dimensions into ``density`` cells."""
        d1, d2 = self.dimensions
        if not (isinstance(d1, Continuous) and isinstance(d2, Continuous)):
            raise TypeError("Only a pair of Continuous dimensions can be partitioned")
        return PairSpace(d1.partitioned(density), d2.partitioned(density))

    def __repr__(self) -> str:
        return f"PairSpace{self.dimensions!r}"


class RegularSpace(Space):
    """Ordered list of dimensions of arbitrary arity.

    ``push`` returns a new space so that spaces stay immutable once built::

        space = RegularSpace().push(Partitioned(0.0, 1.0, 10)).push(Partitioned(0.0, 1.0, 10))
    """

    def __init__(self, dimensions: Iterable[Dimension] = ()):
        self._dimensions: tuple[Dimension, ...] = tuple(dimensions)

        span = Span.null()
        for d in self._dimensions:
            span = span * d.span()
        self._span = span

    def push(self, d: Dimension) -> "RegularSpace":
        return RegularSpace((*self._dimensions, d))

    def __iter__(self) -> Iterator[Dimension]:
        return iter(self._dimensions)

    def __len__(self) -> int:
        return len(self._dimensions)

    def __getitem__(self, idx: int) -> Dimension:
        return self._dimensions[idx]

    def sample(self, key: Array) -> list[Any]:
        keys = jr.split(key, max(len(self._dimensions), 1))
        return [d.sample(k) for d, k in zip(self._dimensions, keys)]

    def dim(self) -> int:
        return len(self._dimensions)

    def span(self) -> Span:
        return self._span

    @property
    def is_partitioned(self) -> bool:
        """True if every dimension is ``Partitioned``."""
        return len(self._dimensions) > 0 and all(
            isinstance(d, Partitioned) for d in self._dimensions
        )

    def partitioned(self, density: int) -> "RegularSpace":
        """Quantise every continuous dimension into ``density`` cells."""
        if not all(isinstance(d, Continuous) for d in self._dimensions):
            raise TypeError("Only a space of Continuous dimensions can be partitioned")
        return RegularSpace(Partitioned.from_continuous(d, density) for d in self._dimensions)

    def centres(self) -> list[np.ndarray]:
        """Cell centres of every dimension (partitioned spaces only)."""
        if not self.is_partitioned:
            raise TypeError("centres() is only defined for fully partitioned spaces")
        return [d.centres() for d in self._dimensions]

    def __repr__(self) -> str:
        return f"RegularSpace({list(self._dimensions)!r})"


def action_space(n_actions: int) -> UnitarySpace:
    """Finite action space with ``n_actions`` discrete actions."""
    return UnitarySpace(Discrete(n_actions))
