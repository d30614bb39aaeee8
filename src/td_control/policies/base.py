"""Base classes for action-selection policies.

A policy turns a vector of action values into an action (``sample``) or a
full distribution over actions (``probabilities``). Sampling always takes an
explicit JAX random key so that episodes are reproducible from a seed.
"""

from abc import ABC, abstractmethod

import jax.numpy as jnp
from jax import Array
from jaxtyping import Float


class Policy(ABC):
    """Base class for policies over a finite action set."""

    @abstractmethod
    def sample(self, key: Array, qs: Array) -> int:
        """Select an action.

        Args:
            key: JAX random key
            qs: Action values, one per action

        Returns:
            Index of the selected action
        """
        ...

    @abstractmethod
    def probabilities(self, qs: Array) -> Float[Array, " n_actions"]:
        """Distribution over actions; non-negative and sums to one."""
        ...

    def handle_terminal(self) -> None:
        """Episode-boundary hook, used to anneal internal parameters."""


class DifferentiablePolicy(Policy):
    """Policy whose log-probabilities are differentiable in the action values."""

    @abstractmethod
    def grad_log(self, qs: Array, action: int) -> Float[Array, " n_actions"]:
        """Gradient of ``log pi(action | qs)`` with respect to ``qs``."""
        ...


def _as_values(qs: Array) -> Array:
    qs = jnp.asarray(qs, dtype=float)
    if qs.ndim != 1 or qs.shape[0] < 1:
        raise ValueError(f"Action values must be a non-empty vector, got shape {qs.shape}")
    return qs
