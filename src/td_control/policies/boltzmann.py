"""Boltzmann (softmax) exploration."""

import jax
import jax.random as jr
from jax import Array
from jaxtyping import Float

from td_control.core.parameters import Parameter, as_parameter
from td_control.policies.base import DifferentiablePolicy, _as_values


class Boltzmann(DifferentiablePolicy):
    """Softmax over action values at temperature ``tau``.

    ``pi(a) = exp(q_a / tau) / sum_b exp(q_b / tau)``

    The gradient of ``log pi(a)`` with respect to the values is
    ``(onehot(a) - pi) / tau``, computed here with ``jax.grad``.

    Attributes:
        tau: Temperature (annealable)
    """

    def __init__(self, tau: float | Parameter = 1.0):
        self.tau = as_parameter(tau)
        if self.tau.value <= 0.0:
            raise ValueError(f"tau must be > 0, got {self.tau.value}")

    def _log_probabilities(self, qs: Array) -> Array:
        return jax.nn.log_softmax(qs / self.tau.value)

    def sample(self, key: Array, qs: Array) -> int:
        return int(jr.categorical(key, self._log_probabilities(_as_values(qs))))

    def probabilities(self, qs: Array) -> Float[Array, " n_actions"]:
        return jax.nn.softmax(_as_values(qs) / self.tau.value)

    def grad_log(self, qs: Array, action: int) -> Float[Array, " n_actions"]:
        return jax.grad(lambda q: self._log_probabilities(q)[action])(_as_values(qs))

    def handle_terminal(self) -> None:
        self.tau = self.tau.step()
