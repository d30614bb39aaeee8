"""One-step Q(sigma) control.

Q(sigma) interpolates between sampling (Sarsa, ``sigma = 1``) and expectation
(Expected Sarsa, ``sigma = 0``) in the bootstrap target:

    target = r + gamma * (sigma * Q(s', a') + (1 - sigma) * sum_b pi(b|s') Q(s', b))

where ``a'`` is the behaviour action for ``s'``, sampled during the update and
then returned by the next call to ``pi``.

References:
- De Asis et al. 2018, "Multi-step Reinforcement Learning: A Unifying Algorithm"
"""

import logging
from typing import Any

import jax
import jax.numpy as jnp
from jax import Array

from td_control.agents.base import ControlAgent
from td_control.core.parameters import Parameter, as_parameter
from td_control.core.types import LinearState, Transition
from td_control.fa.linear import Approximator
from td_control.policies.base import Policy

logger = logging.getLogger(__name__)


class QSigma(ControlAgent):
    """On-policy one-step Q(sigma).

    At an episode boundary ``alpha``, ``gamma`` and ``sigma`` advance one
    schedule step in that order, then the policy's terminal hook runs.

    Attributes:
        q_func: Action-value approximator (one output per action)
        alpha: Step-size
        gamma: Discount factor
        sigma: Degree of sampling, in [0, 1]
    """

    def __init__(
        self,
        q_func: Approximator,
        policy: Policy,
        alpha: float | Parameter = 0.1,
        gamma: float | Parameter = 0.99,
        sigma: float | Parameter = 0.5,
        seed: int = 0,
    ):
        super().__init__(policy, seed)
        self.q_func = q_func
        self.alpha = as_parameter(alpha)
        self.gamma = as_parameter(gamma)
        self.sigma = as_parameter(sigma)
        if not 0.0 <= self.sigma.value <= 1.0:
            raise ValueError(f"sigma must be in [0, 1], got {self.sigma.value}")

        self._state: LinearState = q_func.init()
        self._next_action: int | None = None

        self._jit_action_values = jax.jit(q_func.action_values)
        self._jit_update_action = jax.jit(q_func.update_action)

    @property
    def state(self) -> LinearState:
        """Current approximator state (for testing/inspection)."""
        return self._state

    def action_values(self, x: Any) -> Array:
        return self._jit_action_values(self._state, x)

    def pi(self, x: Any) -> int:
        if self._next_action is not None:
            action, self._next_action = self._next_action, None
            return action
        return super().pi(x)

    def target(self, reward: float, next_qs: Array, next_action: int) -> float:
        """Q(sigma) bootstrap target for a non-terminal step."""
        sigma = self.sigma.value
        expected = jnp.dot(self.policy.probabilities(next_qs), next_qs)
        backup = sigma * next_qs[next_action] + (1.0 - sigma) * expected
        return reward + self.gamma.value * float(backup)

    def handle_transition(self, transition: Transition) -> None:
        s = transition.observation.state
        a = self._check_action(transition.action, self.q_func.n_outputs)

        q = float(self.action_values(s)[a])
        if transition.terminal:
            target = transition.reward
            self._next_action = None
        else:
            next_qs = self.action_values(transition.next_observation.state)
            self._next_action = self.policy.sample(self._next_key(), next_qs)
            target = self.target(transition.reward, next_qs, self._next_action)

        self._state = self._jit_update_action(self._state, s, a, self.alpha.value * (target - q))

    def handle_terminal(self) -> None:
        self.alpha = self.alpha.step()
        self.gamma = self.gamma.step()
        self.sigma = self.sigma.step()
        self.policy.handle_terminal()
        self._next_action = None
        logger.debug("QSigma parameters: alpha=%.4g sigma=%.4g", self.alpha.value, self.sigma.value)
