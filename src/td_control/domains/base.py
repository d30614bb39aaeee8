"""Base protocol for domains.

A domain is the environment an agent acts in. Domains are supplied by the
caller (usually through a factory building a fresh instance per episode);
this package only consumes them.
"""

from typing import Protocol

from td_control.core.types import Observation, Transition
from td_control.geometry.spaces import Space


class Domain(Protocol):
    """Protocol for episodic environments with a finite action set.

    ``step`` must not be called once ``emit`` has returned a
    ``TerminalObservation``; a new episode needs a new domain instance.
    """

    def emit(self) -> Observation:
        """Return the current observation."""
        ...

    def step(self, action: int) -> Transition:
        """Apply an action and return the resulting transition."""
        ...

    def reward(self, observation: Observation, next_observation: Observation) -> float:
        """Reward for moving between two observations."""
        ...

    def is_terminal(self) -> bool:
        """Whether the current state is terminal."""
        ...

    def state_space(self) -> Space:
        """Space of raw state representations."""
        ...

    def action_space(self) -> Space:
        """Space of actions (a single discrete dimension)."""
        ...
