"""Type definitions for td_control.

This module defines the core data types used throughout the package:
chex dataclasses for the JAX-side state (weights, traces) and plain frozen
dataclasses for the host-side experience records (observations, transitions,
episodes).
"""

from dataclasses import dataclass
from typing import Any

import chex
from jax import Array
from jaxtyping import Float

# Type aliases for clarity
State = Any  # raw state representation emitted by a domain
Features = Array  # phi(s): dense feature vector
ActionValues = Array  # Q(s, .): one value per action
Reward = float  # r_t: scalar reward


@chex.dataclass(frozen=True)
class LinearState:
    """Weights of a linear function approximator.

    Column ``j`` holds the weights of output ``j``; value functions use a
    single column, action-value functions one column per action.

    Attributes:
        weights: Weight matrix of shape (n_features, n_outputs)
    """

    weights: Float[Array, "n_features n_outputs"]


@chex.dataclass(frozen=True)
class TraceState:
    """State for an eligibility trace.

    Attributes:
        eligibility: Per-feature eligibility e_t
        lambda_: Trace decay parameter lambda in effect for this episode
    """

    eligibility: Float[Array, " n_features"]
    lambda_: Float[Array, ""]


@dataclass(frozen=True)
class FullObservation:
    """Non-terminal observation emitted by a domain.

    Attributes:
        state: Raw state representation
        actions: Actions available in this state
    """

    state: State
    actions: tuple[int, ...]

    @property
    def is_terminal(self) -> bool:
        return False


@dataclass(frozen=True)
class TerminalObservation:
    """Observation of a terminal state; the episode ends here.

    Attributes:
        state: Raw state representation
    """

    state: State

    @property
    def is_terminal(self) -> bool:
        return True


Observation = FullObservation | TerminalObservation


@dataclass(frozen=True)
class Transition:
    """Single step of experience produced by ``Domain.step``.

    Attributes:
        observation: Observation before the action
        action: Index of the action taken
        reward: Reward received for the step
        next_observation: Observation after the action
    """

    observation: Observation
    action: int
    reward: Reward
    next_observation: Observation

    @property
    def terminal(self) -> bool:
        """Whether the step ended the episode."""
        return self.next_observation.is_terminal


@dataclass(frozen=True)
class Episode:
    """Statistics for one completed episode.

    Attributes:
        n_steps: Number of steps taken
        total_reward: Undiscounted sum of rewards
    """

    n_steps: int
    total_reward: float
