"""One-hot projection onto a uniform grid over a partitioned space."""

from typing import Any

import jax.numpy as jnp
from jax import Array
from jaxtyping import Float, Int

from td_control.fa.projection.base import SparseProjection
from td_control.geometry.spaces import RegularSpace


class UniformGrid(SparseProjection):
    """Tabular projection: exactly one feature is active per state.

    The active feature is the mixed-radix encoding of the per-dimension cell
    indices, with the first dimension varying fastest::

        index = c_0 + n_0 * (c_1 + n_1 * (c_2 + ...))

    Inputs outside a dimension's bounds saturate to its first or last cell.
    """

    def __init__(self, input_space: RegularSpace):
        if not isinstance(input_space, RegularSpace) or not input_space.is_partitioned:
            raise ValueError("UniformGrid requires a RegularSpace of Partitioned dimensions")

        self._input_space = input_space
        self._n_features = int(input_space.span())

    @property
    def input_space(self) -> RegularSpace:
        return self._input_space

    def bucket(self, x: Any) -> Int[Array, ""]:
        """Flat index of the grid cell containing ``x``."""
        values = jnp.atleast_1d(jnp.asarray(x, dtype=float))
        if values.shape[0] != self.dim():
            raise ValueError(f"Expected input of dimension {self.dim()}, got {values.shape[0]}")

        dims = list(self._input_space)
        acc = dims[-1].convert(values[-1])
        for i in range(len(dims) - 2, -1, -1):
            acc = dims[i].convert(values[i]) + dims[i].density * acc
        return acc

    def project_sparse(self, x: Any) -> Int[Array, " 1"]:
        return jnp.atleast_1d(self.bucket(x))

    def project(self, x: Any) -> Float[Array, " n_features"]:
        return jnp.zeros(self._n_features).at[self.bucket(x)].set(1.0)

    def sparsity(self) -> int:
        return 1

    def size(self) -> int:
        return self._n_features

    def dim(self) -> int:
        return self._input_space.dim()

    def equivalent(self, other) -> bool:
        return (
            isinstance(other, UniformGrid)
            and self.dim() == other.dim()
            and self.size() == other.size()
        )
