"""Linear function approximators over feature projections.

A linear approximator owns nothing but its configuration; the weights live
in an immutable ``LinearState`` that every update returns anew. A single
weight matrix of shape (n_features, n_outputs) serves both roles:

- value function ``V(s) = w[:, 0] @ phi(s)`` (``value``, ``update_value``)
- action-value function ``Q(s, .) = w.T @ phi(s)`` (``action_values``,
  ``update_action_values``, ``action_value``, ``update_action``)

The ``*_phi`` variants operate on a precomputed feature vector and apply raw
gradient-style updates ``w += error * phi``; agents with eligibility traces
use them with the trace in place of ``phi``.
"""

import numbers
from abc import ABC, abstractmethod
from typing import Any

import jax.numpy as jnp
import numpy as np
from jax import Array
from jaxtyping import Float

from td_control.core.types import LinearState
from td_control.fa.projection.base import Projection, SparseProjection


class Approximator(ABC):
    """Base class for linear value and action-value function approximators.

    Attributes:
        n_outputs: Number of weight columns (1 for a value function, one per
            action for an action-value function)
    """

    def __init__(self, n_outputs: int = 1):
        if n_outputs < 1:
            raise ValueError(f"n_outputs must be >= 1, got {n_outputs}")
        self.n_outputs = n_outputs

    @property
    @abstractmethod
    def n_features(self) -> int:
        """Number of weight rows."""
        ...

    @abstractmethod
    def phi(self, x: Any) -> Float[Array, " n_features"]:
        """Feature vector for a raw state."""
        ...

    @abstractmethod
    def equivalent(self, other: "Approximator") -> bool:
        """Whether ``other`` has the same features and output shape."""
        ...

    def init(self) -> LinearState:
        """Initialize approximator state.

        Returns:
            State with an all-zero weight matrix
        """
        return LinearState(weights=jnp.zeros((self.n_features, self.n_outputs)))

    # -------------------------------------------------------------------------
    # Shape checks
    # -------------------------------------------------------------------------

    def _check_state(self, state: LinearState) -> None:
        expected = (self.n_features, self.n_outputs)
        if state.weights.shape != expected:
            raise ValueError(
                f"Weight matrix has shape {state.weights.shape}, expected {expected}"
            )

    def _check_phi(self, phi: Array) -> Array:
        phi = jnp.asarray(phi, dtype=float)
        if phi.shape != (self.n_features,):
            raise ValueError(
                f"Feature vector has shape {phi.shape}, expected ({self.n_features},)"
            )
        return phi

    def _check_errors(self, errors: Any) -> Array:
        errors = jnp.asarray(errors, dtype=float)
        if errors.shape != (self.n_outputs,):
            raise ValueError(
                f"Error vector has shape {errors.shape}, expected ({self.n_outputs},)"
            )
        return errors

    def _check_action(self, action: Any) -> None:
        # Traced actions cannot be checked here; agents check them on the host.
        if not isinstance(action, (numbers.Integral, np.integer)):
            return
        if not 0 <= action < self.n_outputs:
            raise ValueError(f"Action {action} out of range for {self.n_outputs} outputs")

    # -------------------------------------------------------------------------
    # Feature-vector interface
    # -------------------------------------------------------------------------

    def value_phi(self, state: LinearState, phi: Array) -> Float[Array, ""]:
        phi = self._check_phi(phi)
        return jnp.dot(state.weights[:, 0], phi)

    def action_values_phi(self, state: LinearState, phi: Array) -> Float[Array, " n_outputs"]:
        phi = self._check_phi(phi)
        return state.weights.T @ phi

    def action_value_phi(self, state: LinearState, phi: Array, action: Any) -> Float[Array, ""]:
        phi = self._check_phi(phi)
        self._check_action(action)
        return jnp.dot(state.weights[:, action], phi)

    def update_value_phi(self, state: LinearState, phi: Array, error: Any) -> LinearState:
        self._check_state(state)
        phi = self._check_phi(phi)
        return LinearState(weights=state.weights.at[:, 0].add(error * phi))

    def update_action_phi(
        self, state: LinearState, phi: Array, action: Any, error: Any
    ) -> LinearState:
        self._check_state(state)
        phi = self._check_phi(phi)
        self._check_action(action)
        return LinearState(weights=state.weights.at[:, action].add(error * phi))

    def update_phi(self, state: LinearState, phi: Array, errors: Any) -> LinearState:
        """Add ``outer(phi, errors)`` to the whole weight matrix in one pass.

        Equivalent to calling ``update_action_phi`` once per column.
        """
        self._check_state(state)
        phi = self._check_phi(phi)
        errors = self._check_errors(errors)
        return LinearState(weights=state.weights + jnp.outer(phi, errors))

    def update_eligibility(
        self, state: LinearState, eligibility: Array, error: Any
    ) -> LinearState:
        """Add ``error * eligibility`` to the weights.

        ``eligibility`` has the shape of the full weight matrix, as kept by
        control agents that trace state-action features.
        """
        self._check_state(state)
        eligibility = jnp.asarray(eligibility, dtype=float)
        if eligibility.shape != state.weights.shape:
            raise ValueError(
                f"Eligibility has shape {eligibility.shape}, expected {state.weights.shape}"
            )
        return LinearState(weights=state.weights + error * eligibility)

    # -------------------------------------------------------------------------
    # Raw-state interface
    # -------------------------------------------------------------------------

    def value(self, state: LinearState, x: Any) -> Float[Array, ""]:
        """Compute ``V(x)`` from the first weight column."""
        return self.value_phi(state, self.phi(x))

    def action_values(self, state: LinearState, x: Any) -> Float[Array, " n_outputs"]:
        """Compute ``Q(x, a)`` for every output ``a``."""
        return self.action_values_phi(state, self.phi(x))

    def action_value(self, state: LinearState, x: Any, action: Any) -> Float[Array, ""]:
        """Compute ``Q(x, action)``."""
        return self.action_value_phi(state, self.phi(x), action)

    def update_value(self, state: LinearState, x: Any, error: Any) -> LinearState:
        """Move ``V(x)`` in the direction of ``error``."""
        return self.update_value_phi(state, self.phi(x), error)

    def update_action_values(self, state: LinearState, x: Any, errors: Any) -> LinearState:
        """Move every ``Q(x, a)`` by its own error."""
        return self.update_phi(state, self.phi(x), errors)

    def update_action(
        self, state: LinearState, x: Any, action: Any, error: Any
    ) -> LinearState:
        """Move ``Q(x, action)`` in the direction of ``error``."""
        return self.update_action_phi(state, self.phi(x), action, error)


class DenseLinear(Approximator):
    """Linear approximator over a dense projection.

    Computes predictions as ``w.T @ phi(x)``.
    """

    def __init__(self, projection: Projection, n_outputs: int = 1):
        super().__init__(n_outputs)
        if projection.size() < 1:
            raise ValueError(f"Projection must produce >= 1 feature, got {projection.size()}")
        self.projection = projection

    @property
    def n_features(self) -> int:
        return self.projection.size()

    def phi(self, x: Any) -> Float[Array, " n_features"]:
        return self.projection.project(x)

    def equivalent(self, other: Approximator) -> bool:
        return (
            type(other) is type(self)
            and self.n_outputs == other.n_outputs
            and self.projection.equivalent(other.projection)
        )


class SparseLinear(DenseLinear):
    """Linear approximator over a sparse binary projection.

    Evaluation sums the weights of the active features. Updates spread the
    error evenly over the ``k = sparsity()`` active features, adding
    ``error / k`` to each, so the total change is ``error`` whatever ``k``.
    The ``*_phi`` and eligibility updates apply the same ``1 / k`` scaling,
    so a trace built from ``phi`` injects the same magnitude as a direct
    update.
    """

    def __init__(self, projection: SparseProjection, n_outputs: int = 1):
        if not isinstance(projection, SparseProjection):
            raise TypeError(
                f"SparseLinear requires a SparseProjection, got {type(projection).__name__}"
            )
        super().__init__(projection, n_outputs)

    def _active(self, x: Any) -> Array:
        return self.projection.project_sparse(x)

    def _spread(self, error: Any) -> Any:
        return error / self.projection.sparsity()

    def value(self, state: LinearState, x: Any) -> Float[Array, ""]:
        self._check_state(state)
        return jnp.sum(state.weights[self._active(x), 0])

    def action_values(self, state: LinearState, x: Any) -> Float[Array, " n_outputs"]:
        self._check_state(state)
        return jnp.sum(state.weights[self._active(x), :], axis=0)

    def action_value(self, state: LinearState, x: Any, action: Any) -> Float[Array, ""]:
        self._check_state(state)
        self._check_action(action)
        return jnp.sum(state.weights[self._active(x), action])

    def update_value_phi(self, state: LinearState, phi: Array, error: Any) -> LinearState:
        return super().update_value_phi(state, phi, self._spread(error))

    def update_action_phi(
        self, state: LinearState, phi: Array, action: Any, error: Any
    ) -> LinearState:
        return super().update_action_phi(state, phi, action, self._spread(error))

    def update_phi(self, state: LinearState, phi: Array, errors: Any) -> LinearState:
        return super().update_phi(state, phi, self._spread(self._check_errors(errors)))

    def update_eligibility(
        self, state: LinearState, eligibility: Array, error: Any
    ) -> LinearState:
        return super().update_eligibility(state, eligibility, self._spread(error))

    def update_value(self, state: LinearState, x: Any, error: Any) -> LinearState:
        self._check_state(state)
        scaled = self._spread(error)
        return LinearState(weights=state.weights.at[self._active(x), 0].add(scaled))

    def update_action_values(self, state: LinearState, x: Any, errors: Any) -> LinearState:
        self._check_state(state)
        scaled = self._spread(self._check_errors(errors))
        return LinearState(weights=state.weights.at[self._active(x), :].add(scaled[None, :]))

    def update_action(
        self, state: LinearState, x: Any, action: Any, error: Any
    ) -> LinearState:
        self._check_state(state)
        self._check_action(action)
        scaled = self._spread(error)
        return LinearState(weights=state.weights.at[self._active(x), action].add(scaled))
