"""Deterministic greedy and uniformly random policies."""

import jax
import jax.numpy as jnp
import jax.random as jr
from jax import Array
from jaxtyping import Float

from td_control.policies.base import Policy, _as_values


class Greedy(Policy):
    """Always pick the highest-valued action.

    Ties are broken in favour of the lowest action index, so the greedy action
    for a given value vector is fully deterministic.
    """

    def sample(self, key: Array, qs: Array) -> int:
        del key
        return int(jnp.argmax(_as_values(qs)))

    def probabilities(self, qs: Array) -> Float[Array, " n_actions"]:
        qs = _as_values(qs)
        return jax.nn.one_hot(jnp.argmax(qs), qs.shape[0])


class Random(Policy):
    """Pick every action with equal probability, ignoring the values."""

    def sample(self, key: Array, qs: Array) -> int:
        return int(jr.randint(key, (), 0, _as_values(qs).shape[0]))

    def probabilities(self, qs: Array) -> Float[Array, " n_actions"]:
        n = _as_values(qs).shape[0]
        return jnp.full(n, 1.0 / n)
