"""Base classes for feature projections.

A projection maps a raw state into a fixed-size feature vector. Dense
projections return the full vector; sparse projections additionally expose
the indices of the (binary) active features so that approximators can
evaluate and update without touching the inactive weights.
"""

from abc import ABC, abstractmethod
from typing import Any

import jax.numpy as jnp
from jax import Array
from jaxtyping import Float, Int


class Projection(ABC):
    """Base class for feature projections."""

    @abstractmethod
    def project(self, x: Any) -> Float[Array, " n_features"]:
        """Compute the feature vector for a state.

        Args:
            x: Raw state representation

        Returns:
            Dense feature vector of length ``size()``
        """
        ...

    @abstractmethod
    def size(self) -> int:
        """Number of features produced."""
        ...

    @abstractmethod
    def dim(self) -> int:
        """Dimensionality of the input the projection accepts."""
        ...

    @abstractmethod
    def equivalent(self, other: "Projection") -> bool:
        """Whether ``other`` produces structurally compatible features."""
        ...


class SparseProjection(Projection):
    """Projection whose features are binary with a fixed number of active entries."""

    @abstractmethod
    def project_sparse(self, x: Any) -> Int[Array, " sparsity"]:
        """Indices of the active features for a state."""
        ...

    @abstractmethod
    def sparsity(self) -> int:
        """Number of active features per state."""
        ...

    def project(self, x: Any) -> Float[Array, " n_features"]:
        """Dense feature vector with ones at the active indices.

        Repeated indices (hash collisions) accumulate.
        """
        return jnp.zeros(self.size()).at[self.project_sparse(x)].add(1.0)
