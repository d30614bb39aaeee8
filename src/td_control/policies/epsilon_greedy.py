"""Epsilon-greedy exploration."""

import jax.numpy as jnp
import jax.random as jr
from jax import Array
from jaxtyping import Float

from td_control.core.parameters import Parameter, as_parameter
from td_control.policies.base import Policy, _as_values
from td_control.policies.greedy import Greedy


class EpsilonGreedy(Policy):
    """Greedy with probability ``1 - epsilon``, uniformly random otherwise.

    ``epsilon`` may be an annealing ``Parameter``; it advances one schedule
    step per episode via ``handle_terminal``.

    Attributes:
        epsilon: Exploration rate
    """

    def __init__(self, epsilon: float | Parameter = 0.1):
        self.epsilon = as_parameter(epsilon)
        if not 0.0 <= self.epsilon.value <= 1.0:
            raise ValueError(f"epsilon must be in [0, 1], got {self.epsilon.value}")
        self._greedy = Greedy()

    def sample(self, key: Array, qs: Array) -> int:
        qs = _as_values(qs)
        explore_key, action_key = jr.split(key)

        if float(jr.uniform(explore_key)) < self.epsilon.value:
            return int(jr.randint(action_key, (), 0, qs.shape[0]))
        return self._greedy.sample(action_key, qs)

    def probabilities(self, qs: Array) -> Float[Array, " n_actions"]:
        qs = _as_values(qs)
        eps = self.epsilon.value
        return eps / qs.shape[0] + (1.0 - eps) * self._greedy.probabilities(qs)

    def handle_terminal(self) -> None:
        self.epsilon = self.epsilon.step()
