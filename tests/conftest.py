"""Shared test fixtures for td_control."""

import jax.random as jr
import pytest

from td_control import (
    Discrete,
    FullObservation,
    Partitioned,
    RegularSpace,
    TerminalObservation,
    Transition,
    UniformGrid,
    action_space,
)

LEFT, RIGHT = 0, 1


class Corridor:
    """Deterministic corridor of ``length`` cells for testing.

    The agent starts in cell 0 and the episode ends on reaching the last
    cell. Action 0 moves left (walls are absorbing), action 1 moves right.
    Every step costs -1, so the optimal return is ``-(length - 1)``.
    """

    def __init__(self, length: int = 5):
        self.length = length
        self.position = 0

    def _observe(self, position: int):
        state = float(position)
        if position == self.length - 1:
            return TerminalObservation(state=state)
        return FullObservation(state=state, actions=(LEFT, RIGHT))

    def emit(self):
        return self._observe(self.position)

    def step(self, action: int) -> Transition:
        observation = self.emit()
        if action == RIGHT:
            self.position = min(self.position + 1, self.length - 1)
        else:
            self.position = max(self.position - 1, 0)
        next_observation = self.emit()

        return Transition(
            observation=observation,
            action=action,
            reward=self.reward(observation, next_observation),
            next_observation=next_observation,
        )

    def reward(self, observation, next_observation) -> float:
        return -1.0

    def is_terminal(self) -> bool:
        return self.position == self.length - 1

    def state_space(self):
        return RegularSpace([Partitioned(0.0, float(self.length), self.length)])

    def action_space(self):
        return action_space(2)


@pytest.fixture
def rng_key():
    """Random key for tests."""
    return jr.key(42)


@pytest.fixture
def corridor_factory():
    """Factory building a fresh five-cell corridor per episode."""
    return lambda: Corridor(length=5)


@pytest.fixture
def corridor_space():
    """Partitioned state space of the five-cell corridor (one cell per position)."""
    return RegularSpace([Partitioned(0.0, 5.0, 5)])


@pytest.fixture
def corridor_grid(corridor_space):
    """Tabular projection over the corridor."""
    return UniformGrid(corridor_space)


@pytest.fixture
def discrete_dimension():
    """Small discrete dimension."""
    return Discrete(3)
