"""Single axes of state and action spaces.

Three dimension types are provided:

- ``Discrete``: integers ``0..n-1``
- ``Continuous``: a real interval ``[lo, hi)``
- ``Partitioned``: a real interval quantised into ``density`` equal cells

Partitioned dimensions saturate: values below ``lo`` fall into the first cell
and values at or above ``hi`` into the last, so ``convert`` never produces an
out-of-range index.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import jax.numpy as jnp
import jax.random as jr
import numpy as np
from jax import Array

from td_control.geometry.span import Span


class Dimension(ABC):
    """Base class for a single axis."""

    @abstractmethod
    def sample(self, key: Array) -> Any:
        """Draw a uniformly random value from the dimension.

        Args:
            key: JAX random key

        Returns:
            A value of the dimension
        """
        ...

    @abstractmethod
    def span(self) -> Span:
        """Return the cardinality of the dimension."""
        ...


@dataclass(frozen=True)
class Discrete(Dimension):
    """Integer dimension with values ``0..n-1``.

    Attributes:
        n: Number of values
    """

    n: int

    def __post_init__(self) -> None:
        if self.n < 1:
            raise ValueError(f"Discrete dimension needs n >= 1, got {self.n}")

    def sample(self, key: Array) -> int:
        return int(jr.randint(key, (), 0, self.n))

    def span(self) -> Span:
        return Span.finite(self.n)


def _check_bounds(lo: float, hi: float) -> None:
    if not lo < hi:
        raise ValueError(f"Dimension bounds must satisfy lo < hi, got lo={lo}, hi={hi}")


@dataclass(frozen=True)
class Continuous(Dimension):
    """Real-valued dimension on ``[lo, hi)``.

    Attributes:
        lo: Lower bound
        hi: Upper bound
    """

    lo: float
    hi: float

    def __post_init__(self) -> None:
        _check_bounds(self.lo, self.hi)

    def sample(self, key: Array) -> float:
        return float(jr.uniform(key, minval=self.lo, maxval=self.hi))

    def span(self) -> Span:
        return Span.infinite()

    def partitioned(self, density: int) -> "Partitioned":
        """Quantise this interval into ``density`` cells."""
        return Partitioned.from_continuous(self, density)


@dataclass(frozen=True)
class Partitioned(Dimension):
    """Real interval quantised into ``density`` equal-width cells.

    Attributes:
        lo: Lower bound
        hi: Upper bound
        density: Number of cells
    """

    lo: float
    hi: float
    density: int

    def __post_init__(self) -> None:
        _check_bounds(self.lo, self.hi)
        if self.density < 1:
            raise ValueError(f"Partitioned dimension needs density >= 1, got {self.density}")

    @classmethod
    def from_continuous(cls, d: Continuous, density: int) -> "Partitioned":
        return cls(d.lo, d.hi, density)

    def partition_width(self) -> float:
        return (self.hi - self.lo) / self.density

    def centres(self) -> np.ndarray:
        """Midpoints of every cell, in increasing order."""
        w = self.partition_width()
        return self.lo + w * (np.arange(self.density, dtype=np.float64) + 0.5)

    def convert(self, value: Any) -> Array:
        """Map a value to the index of the cell containing it.

        Out-of-range values are clamped to the first or last cell.

        Args:
            value: Point on the axis (traceable)

        Returns:
            Integer cell index in ``[0, density)``
        """
        idx = jnp.floor((jnp.asarray(value, dtype=float) - self.lo) / self.partition_width())
        return jnp.clip(idx, 0, self.density - 1).astype(int)

    def sample(self, key: Array) -> float:
        return float(jr.uniform(key, minval=self.lo, maxval=self.hi))

    def span(self) -> Span:
        return Span.finite(self.density)
