"""Normalised radial basis function network."""

import itertools
from typing import Any

import jax
import jax.numpy as jnp
import numpy as np
from jax import Array
from jaxtyping import Float

from td_control.fa.linear import Approximator
from td_control.geometry.spaces import RegularSpace


class RBFNetwork(Approximator):
    """Linear approximator over normalised Gaussian radial basis features.

    One centre sits at every cell centre of a partitioned input space (the
    Cartesian product of the per-dimension centres), so there are as many
    features as grid cells. Each dimension's width parameter is
    ``gamma_d = -1 / width_d**2`` and the features are

        phi_i(x) = exp(sum_d gamma_d (x_d - mu_id)^2) / sum_j exp(...)

    i.e. a softmax over centres: the features always sum to one and the
    output is a weighted average of per-centre weights.

    Attributes:
        mu: Centre locations, shape (n_features, dim)
        gamma: Per-dimension width parameters, shape (dim,)
    """

    def __init__(self, input_space: RegularSpace, n_outputs: int = 1):
        super().__init__(n_outputs)
        if not isinstance(input_space, RegularSpace) or not input_space.is_partitioned:
            raise ValueError("RBFNetwork only supports partitioned input spaces")

        span = input_space.span()
        if not span.is_finite:
            raise ValueError("RBFNetwork requires an input space with a finite span")

        centres = input_space.centres()
        self.mu = jnp.asarray(np.array(list(itertools.product(*centres)), dtype=np.float64))
        self.gamma = jnp.asarray([-1.0 / d.partition_width() ** 2 for d in input_space])
        self._input_space = input_space
        self._n_features = int(span)

    @property
    def n_features(self) -> int:
        return self._n_features

    def phi(self, x: Any) -> Float[Array, " n_features"]:
        x = jnp.atleast_1d(jnp.asarray(x, dtype=float))
        if x.shape != (self.mu.shape[1],):
            raise ValueError(f"Expected input of shape ({self.mu.shape[1]},), got {x.shape}")
        d = self.mu - x[None, :]
        return jax.nn.softmax(jnp.sum(self.gamma * d * d, axis=1))

    def equivalent(self, other: Approximator) -> bool:
        return (
            isinstance(other, RBFNetwork)
            and self.n_outputs == other.n_outputs
            and self.mu.shape == other.mu.shape
            and bool(jnp.array_equal(self.mu, other.mu))
            and bool(jnp.array_equal(self.gamma, other.gamma))
        )
