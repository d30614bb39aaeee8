"""Tile-coded action-value function over a single shared memory."""

from typing import Any

import jax.numpy as jnp
from jax import Array
from jaxtyping import Float

from td_control.core.types import LinearState
from td_control.fa.linear import Approximator
from td_control.fa.projection.tile_coding import TileCoding, TileHasher


class SuttonTiles(Approximator):
    """Hashed tile coding where the output index is part of the hash.

    Unlike ``SparseLinear`` over a ``TileCoding`` projection, which keeps one
    weight column per output, every output shares one memory of
    ``memory_size`` weights: output ``a`` is passed to the hash as an integer
    selector, so its tiles land in (pseudo-random) distinct cells.

    The feature vector depends on the output as well as the state, so ``phi``,
    the ``*_phi`` methods and ``update_eligibility`` raise
    ``NotImplementedError``; ``phi_action`` returns the dense features for a
    given output instead.

    Attributes:
        tiles: The underlying tile-coding projection
    """

    def __init__(
        self,
        n_tilings: int,
        memory_size: int,
        n_outputs: int = 1,
        hasher: TileHasher | None = None,
    ):
        super().__init__(n_outputs)
        self.tiles = TileCoding(n_tilings, memory_size, hasher)

    @property
    def n_features(self) -> int:
        return self.tiles.memory_size

    def init(self) -> LinearState:
        return LinearState(weights=jnp.zeros((self.n_features, 1)))

    def _check_state(self, state: LinearState) -> None:
        if state.weights.shape != (self.n_features, 1):
            raise ValueError(
                f"Weight matrix has shape {state.weights.shape}, "
                f"expected ({self.n_features}, 1)"
            )

    def phi(self, x: Any) -> Float[Array, " n_features"]:
        raise NotImplementedError(
            "SuttonTiles features depend on the output index; use phi_action(x, action)."
        )

    def _phi_unavailable(self, *args: Any, **kwargs: Any) -> Any:
        raise NotImplementedError(
            "SuttonTiles keeps one shared weight column; the feature-vector interface "
            "is unavailable. Use the raw-state methods instead."
        )

    value_phi = _phi_unavailable
    action_values_phi = _phi_unavailable
    action_value_phi = _phi_unavailable
    update_value_phi = _phi_unavailable
    update_action_phi = _phi_unavailable
    update_phi = _phi_unavailable
    update_eligibility = _phi_unavailable

    def phi_action(self, x: Any, action: Any) -> Float[Array, " n_features"]:
        idx = self.tiles.project_sparse(x, action)
        return jnp.zeros(self.n_features).at[idx].add(1.0)

    def equivalent(self, other: Approximator) -> bool:
        return (
            isinstance(other, SuttonTiles)
            and self.n_outputs == other.n_outputs
            and self.tiles.equivalent(other.tiles)
        )

    def action_value(self, state: LinearState, x: Any, action: Any) -> Float[Array, ""]:
        self._check_action(action)
        return jnp.sum(state.weights[self.tiles.project_sparse(x, action), 0])

    def action_values(self, state: LinearState, x: Any) -> Float[Array, " n_outputs"]:
        return jnp.stack([self.action_value(state, x, a) for a in range(self.n_outputs)])

    def value(self, state: LinearState, x: Any) -> Float[Array, ""]:
        return self.action_value(state, x, 0)

    def update_action(
        self, state: LinearState, x: Any, action: Any, error: Any
    ) -> LinearState:
        self._check_state(state)
        self._check_action(action)
        idx = self.tiles.project_sparse(x, action)
        scaled = error / self.tiles.sparsity()
        return LinearState(weights=state.weights.at[idx, 0].add(scaled))

    def update_action_values(self, state: LinearState, x: Any, errors: Any) -> LinearState:
        errors = self._check_errors(errors)
        for a in range(self.n_outputs):
            state = self.update_action(state, x, a, errors[a])
        return state

    def update_value(self, state: LinearState, x: Any, error: Any) -> LinearState:
        return self.update_action(state, x, 0, error)
