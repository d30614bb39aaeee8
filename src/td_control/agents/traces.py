"""Eligibility traces for credit assignment.

A trace is a decaying memory of recently active features. At every step an
agent first decays the trace by ``rate * lambda`` (``rate`` is normally the
discount factor) and then adds the current features:

- accumulating: ``e <- e + phi``
- replacing: ``e <- min(e + phi, 1)``, so a repeatedly active feature never
  holds more than unit credit

The trace strategies are stateless; the eligibility lives in a
``TraceState`` owned by the agent, which resets it at every episode boundary.

References:
- Singh & Sutton 1996, "Reinforcement Learning with Replacing Eligibility Traces"
"""

from abc import ABC, abstractmethod

import jax.numpy as jnp
from jax import Array

from td_control.core.parameters import Parameter
from td_control.core.types import TraceState


class EligibilityTrace(ABC):
    """Base class for eligibility trace strategies."""

    def init(self, shape: int | tuple[int, ...], lambda_: float | Parameter) -> TraceState:
        """Create a zeroed trace.

        Args:
            shape: Number of features, or the full shape of the traced weights
            lambda_: Trace decay parameter for the coming episode

        Returns:
            Trace state with zero eligibility
        """
        lam = float(lambda_)
        if not 0.0 <= lam <= 1.0:
            raise ValueError(f"lambda must be in [0, 1], got {lam}")
        return TraceState(eligibility=jnp.zeros(shape), lambda_=jnp.asarray(lam))

    def decay(self, state: TraceState, rate: float | Array) -> TraceState:
        """Scale the eligibility by ``rate * lambda``."""
        return TraceState(
            eligibility=state.eligibility * (rate * state.lambda_),
            lambda_=state.lambda_,
        )

    @abstractmethod
    def update(self, state: TraceState, phi: Array) -> TraceState:
        """Add the current features to the trace."""
        ...

    def _check_shape(self, state: TraceState, phi: Array) -> Array:
        phi = jnp.asarray(phi, dtype=float)
        if phi.shape != state.eligibility.shape:
            raise ValueError(
                f"Features of shape {phi.shape} do not match trace of shape "
                f"{state.eligibility.shape}"
            )
        return phi


class AccumulatingTrace(EligibilityTrace):
    """Trace that adds features without bound."""

    def update(self, state: TraceState, phi: Array) -> TraceState:
        phi = self._check_shape(state, phi)
        return TraceState(eligibility=state.eligibility + phi, lambda_=state.lambda_)


class ReplacingTrace(EligibilityTrace):
    """Trace whose entries are clipped to at most one after every update."""

    def update(self, state: TraceState, phi: Array) -> TraceState:
        phi = self._check_shape(state, phi)
        return TraceState(
            eligibility=jnp.minimum(state.eligibility + phi, 1.0),
            lambda_=state.lambda_,
        )
