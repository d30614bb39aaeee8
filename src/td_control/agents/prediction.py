"""Temporal-difference prediction agents (critics).

References:
- Sutton 1988, "Learning to Predict by the Methods of Temporal Differences"
"""

import logging
from typing import Any

import jax

from td_control.agents.base import PredictionAgent
from td_control.agents.traces import AccumulatingTrace, EligibilityTrace
from td_control.core.parameters import Parameter, as_parameter
from td_control.core.types import LinearState
from td_control.fa.linear import Approximator

logger = logging.getLogger(__name__)


class TD(PredictionAgent):
    """TD(0) state-value prediction.

    Update rule: ``delta = r + gamma * V(s') - V(s)``, ``V(s) += alpha * delta``

    Attributes:
        alpha: Step-size
        gamma: Discount factor
    """

    def __init__(
        self,
        v_func: Approximator,
        alpha: float | Parameter = 0.1,
        gamma: float | Parameter = 0.99,
    ):
        self.v_func = v_func
        self.alpha = as_parameter(alpha)
        self.gamma = as_parameter(gamma)
        self._state: LinearState = v_func.init()

        self._jit_value = jax.jit(v_func.value)
        self._jit_update = jax.jit(v_func.update_value)

    @property
    def state(self) -> LinearState:
        """Current approximator state (for testing/inspection)."""
        return self._state

    def evaluate(self, x: Any) -> float:
        return float(self._jit_value(self._state, x))

    def update(self, x: Any, error: float) -> None:
        self._state = self._jit_update(self._state, x, error)

    def td_error(self, x: Any, next_x: Any, reward: float, terminal: bool = False) -> float:
        """TD error of a step under the current estimates."""
        next_v = 0.0 if terminal else self.evaluate(next_x)
        return reward + self.gamma.value * next_v - self.evaluate(x)

    def handle_transition(
        self, x: Any, next_x: Any, reward: float, terminal: bool = False
    ) -> float:
        delta = self.td_error(x, next_x, reward, terminal)
        self.update(x, self.alpha.value * delta)
        return delta

    def handle_terminal(self) -> None:
        self.alpha = self.alpha.step()
        self.gamma = self.gamma.step()


class TDLambda(TD):
    """TD(lambda) state-value prediction with an eligibility trace.

    Per step: ``e <- decay(e, gamma)``, ``e <- update(e, phi(s))`` and
    ``w += alpha * delta * e``. The trace is reset (and ``lambda`` annealed)
    at every episode boundary.

    Attributes:
        trace: Trace strategy (accumulating or replacing)
        lambda_: Trace decay parameter
    """

    def __init__(
        self,
        v_func: Approximator,
        trace: EligibilityTrace | None = None,
        alpha: float | Parameter = 0.1,
        gamma: float | Parameter = 0.99,
        lambda_: float | Parameter = 0.9,
    ):
        super().__init__(v_func, alpha, gamma)
        self.trace = trace or AccumulatingTrace()
        self.lambda_ = as_parameter(lambda_)
        self._trace_state = self.trace.init(v_func.n_features, self.lambda_)

        self._jit_phi = jax.jit(v_func.phi)
        self._jit_value_phi = jax.jit(v_func.value_phi)
        self._jit_update_phi = jax.jit(v_func.update_value_phi)

    @property
    def eligibility(self):
        """Current eligibility trace."""
        return self._trace_state.eligibility

    def handle_transition(
        self, x: Any, next_x: Any, reward: float, terminal: bool = False
    ) -> float:
        phi = self._jit_phi(x)
        next_v = 0.0 if terminal else self.evaluate(next_x)
        delta = reward + self.gamma.value * next_v - float(self._jit_value_phi(self._state, phi))

        self._trace_state = self.trace.decay(self._trace_state, self.gamma.value)
        self._trace_state = self.trace.update(self._trace_state, phi)

        self._state = self._jit_update_phi(
            self._state, self._trace_state.eligibility, self.alpha.value * delta
        )
        return delta

    def handle_terminal(self) -> None:
        super().handle_terminal()
        self.lambda_ = self.lambda_.step()
        self._trace_state = self.trace.init(self.v_func.n_features, self.lambda_)
        logger.debug("TDLambda trace reset with lambda=%.4g", self.lambda_.value)
