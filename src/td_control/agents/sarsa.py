"""Sarsa(lambda) control with eligibility traces over state-action features."""

import logging
from typing import Any

import jax
import jax.numpy as jnp
from jax import Array

from td_control.agents.base import ControlAgent
from td_control.agents.traces import AccumulatingTrace, EligibilityTrace
from td_control.core.parameters import Parameter, as_parameter
from td_control.core.types import LinearState, Transition
from td_control.fa.linear import Approximator
from td_control.policies.base import Policy

logger = logging.getLogger(__name__)


class SARSALambda(ControlAgent):
    """On-policy Sarsa(lambda).

    The trace has the shape of the weight matrix: the features of the taken
    action's column are traced. Per step the trace is decayed by
    ``gamma * lambda``, updated with ``outer(phi(s), onehot(a))`` and the
    weights move by ``alpha * delta * e``. The next action is sampled during
    the update and returned by the following call to ``pi``.

    At an episode boundary ``alpha``, ``gamma`` and ``lambda_`` advance one
    schedule step in that order, the trace is reset and the policy's terminal
    hook runs.

    Attributes:
        q_func: Action-value approximator (one output per action)
        trace: Trace strategy
        alpha: Step-size
        gamma: Discount factor
        lambda_: Trace decay parameter
    """

    def __init__(
        self,
        q_func: Approximator,
        policy: Policy,
        trace: EligibilityTrace | None = None,
        alpha: float | Parameter = 0.1,
        gamma: float | Parameter = 0.99,
        lambda_: float | Parameter = 0.9,
        seed: int = 0,
    ):
        super().__init__(policy, seed)
        self.q_func = q_func
        self.trace = trace or AccumulatingTrace()
        self.alpha = as_parameter(alpha)
        self.gamma = as_parameter(gamma)
        self.lambda_ = as_parameter(lambda_)

        self._state: LinearState = q_func.init()
        self._trace_state = self._fresh_trace()
        self._next_action: int | None = None

        self._jit_phi = jax.jit(q_func.phi)
        self._jit_action_values = jax.jit(q_func.action_values)
        self._jit_update_eligibility = jax.jit(q_func.update_eligibility)

    def _fresh_trace(self):
        return self.trace.init((self.q_func.n_features, self.q_func.n_outputs), self.lambda_)

    @property
    def state(self) -> LinearState:
        """Current approximator state (for testing/inspection)."""
        return self._state

    @property
    def eligibility(self) -> Array:
        """Current eligibility trace, shaped like the weights."""
        return self._trace_state.eligibility

    def action_values(self, x: Any) -> Array:
        return self._jit_action_values(self._state, x)

    def pi(self, x: Any) -> int:
        if self._next_action is not None:
            action, self._next_action = self._next_action, None
            return action
        return super().pi(x)

    def handle_transition(self, transition: Transition) -> None:
        s = transition.observation.state
        a = self._check_action(transition.action, self.q_func.n_outputs)

        phi = self._jit_phi(s)
        q = float(self.action_values(s)[a])

        if transition.terminal:
            target = transition.reward
            self._next_action = None
        else:
            next_qs = self.action_values(transition.next_observation.state)
            self._next_action = self.policy.sample(self._next_key(), next_qs)
            target = transition.reward + self.gamma.value * float(next_qs[self._next_action])

        phi_sa = jnp.outer(phi, jax.nn.one_hot(a, self.q_func.n_outputs))
        self._trace_state = self.trace.decay(self._trace_state, self.gamma.value)
        self._trace_state = self.trace.update(self._trace_state, phi_sa)

        self._state = self._jit_update_eligibility(
            self._state, self._trace_state.eligibility, self.alpha.value * (target - q)
        )

    def handle_terminal(self) -> None:
        self.alpha = self.alpha.step()
        self.gamma = self.gamma.step()
        self.lambda_ = self.lambda_.step()
        self._trace_state = self._fresh_trace()
        self._next_action = None
        self.policy.handle_terminal()
        logger.debug("SARSALambda trace reset with lambda=%.4g", self.lambda_.value)
