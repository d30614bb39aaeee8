"""Agent contracts.

Agents bridge the mutable, step-by-step interaction with a domain to the
immutable approximator states: each agent owns its states and its JAX random
key and replaces them as it learns.
"""

from __future__ import annotations

import operator
from abc import ABC, abstractmethod
from typing import Any

import jax.random as jr
from jax import Array

from td_control.core.types import Transition
from td_control.policies.base import Policy
from td_control.policies.greedy import Greedy


class PredictionAgent(ABC):
    """Estimates the state-value function of the policy generating its data."""

    @abstractmethod
    def evaluate(self, x: Any) -> float:
        """Current estimate of ``V(x)``."""
        ...

    @abstractmethod
    def update(self, x: Any, error: float) -> None:
        """Move ``V(x)`` by a (pre-scaled) error."""
        ...

    @abstractmethod
    def handle_transition(
        self, x: Any, next_x: Any, reward: float, terminal: bool = False
    ) -> float:
        """Learn from one step of experience.

        Args:
            x: State before the step
            next_x: State after the step
            reward: Reward for the step
            terminal: Whether ``next_x`` is terminal (its value is then zero)

        Returns:
            The TD error of the step
        """
        ...

    def handle_terminal(self) -> None:
        """Episode-boundary hook."""


class ControlAgent(ABC):
    """Learns to act in a domain with a finite action set.

    Attributes:
        policy: Behaviour policy used by ``pi``
    """

    def __init__(self, policy: Policy, seed: int = 0):
        self.policy = policy
        self._key = jr.key(seed)
        self._greedy = Greedy()

    def _next_key(self) -> Array:
        self._key, subkey = jr.split(self._key)
        return subkey

    def _check_action(self, action: Any, n_actions: int) -> int:
        """Validate an action index on the host, before any jitted update sees it.

        Raises:
            TypeError: If ``action`` is not an integer
            ValueError: If ``action`` is outside ``[0, n_actions)``
        """
        try:
            index = operator.index(action)
        except TypeError as err:
            raise TypeError(f"Action must be an integer index, got {action!r}") from err
        if not 0 <= index < n_actions:
            raise ValueError(f"Action {index} out of range for {n_actions} actions")
        return index

    @abstractmethod
    def action_values(self, x: Any) -> Array:
        """Current action-value (or preference) estimates for a state."""
        ...

    def pi(self, x: Any) -> int:
        """Sample an action from the behaviour policy."""
        return self.policy.sample(self._next_key(), self.action_values(x))

    def pi_target(self, x: Any) -> int:
        """Greedy action with respect to the current estimates."""
        return self._greedy.sample(self._next_key(), self.action_values(x))

    def evaluate_policy(self, policy: Policy, x: Any) -> int:
        """Sample an action from an arbitrary policy over the current estimates."""
        return policy.sample(self._next_key(), self.action_values(x))

    @abstractmethod
    def handle_transition(self, transition: Transition) -> None:
        """Learn online from one transition."""
        ...

    @abstractmethod
    def handle_terminal(self) -> None:
        """Episode-boundary update (annealing, trace resets)."""
        ...
