"""Actor-critic control.

Both agents pair an actor (a linear action-value / preference function whose
values drive the behaviour policy) with a critic (a ``PredictionAgent``
estimating state values) that supplies the TD error the actor learns from.

References:
- Sutton & Barto 2018, "Reinforcement Learning: An Introduction", Section 13.5
- Degris, White & Sutton 2012, "Off-Policy Actor-Critic"
"""

import logging
from typing import Any

import jax
from jax import Array

from td_control.agents.base import ControlAgent, PredictionAgent
from td_control.core.parameters import Parameter, as_parameter
from td_control.core.types import LinearState, Transition
from td_control.fa.linear import Approximator
from td_control.policies.base import DifferentiablePolicy, Policy

logger = logging.getLogger(__name__)


class ActorCritic(ControlAgent):
    """On-policy actor-critic.

    On each transition the critic computes ``delta`` from ``(s, s', r)`` and
    the actor's weights for the taken action move by ``beta * delta``.

    At an episode boundary ``beta`` then ``gamma`` advance one schedule step,
    followed by the critic's and the policy's own terminal hooks.

    Attributes:
        actor: Action-value approximator (one output per action)
        critic: State-value prediction agent
        beta: Actor step-size
        gamma: Discount factor (the critic discounts with its own gamma)
    """

    def __init__(
        self,
        actor: Approximator,
        critic: PredictionAgent,
        policy: Policy,
        beta: float | Parameter = 0.1,
        gamma: float | Parameter = 0.99,
        seed: int = 0,
    ):
        super().__init__(policy, seed)
        self.actor = actor
        self.critic = critic
        self.beta = as_parameter(beta)
        self.gamma = as_parameter(gamma)
        self._actor_state: LinearState = actor.init()

        self._jit_action_values = jax.jit(actor.action_values)
        self._jit_update_action = jax.jit(actor.update_action)

    @property
    def actor_state(self) -> LinearState:
        """Current actor state (for testing/inspection)."""
        return self._actor_state

    def action_values(self, x: Any) -> Array:
        return self._jit_action_values(self._actor_state, x)

    def handle_transition(self, transition: Transition) -> None:
        s = transition.observation.state
        ns = transition.next_observation.state
        a = self._check_action(transition.action, self.actor.n_outputs)

        td_error = self.critic.handle_transition(s, ns, transition.reward, transition.terminal)

        self._actor_state = self._jit_update_action(
            self._actor_state, s, a, self.beta.value * td_error
        )

    def handle_terminal(self) -> None:
        self.beta = self.beta.step()
        self.gamma = self.gamma.step()
        self.critic.handle_terminal()
        self.policy.handle_terminal()


class OffPAC(ControlAgent):
    """Off-policy actor-critic.

    The behaviour policy ``policy`` (differentiable, applied to the actor's
    values) generates the data; the greedy policy over the same values is the
    target. Each transition computes

    - ``delta = r + gamma * V(s') - V(s)`` from the critic's estimates
    - ``rho = greedy(a | s) / policy(a | s)``, the importance-sampling ratio

    and applies ``rho`` to both updates:

    - critic: ``V(s) += alpha * rho * delta``
    - actor: ``w[:, b] += beta * rho * delta * d log policy(a | s) / d q_b * phi(s)``

    At an episode boundary ``alpha``, ``beta`` and ``gamma`` advance one
    schedule step in that order, followed by the critic's and the policy's own
    terminal hooks.

    Attributes:
        actor: Preference approximator (one output per action)
        critic: State-value prediction agent
        alpha: Critic step-size
        beta: Actor step-size
        gamma: Discount factor
    """

    def __init__(
        self,
        actor: Approximator,
        critic: PredictionAgent,
        policy: DifferentiablePolicy,
        alpha: float | Parameter = 0.1,
        beta: float | Parameter = 0.01,
        gamma: float | Parameter = 0.99,
        seed: int = 0,
    ):
        if not isinstance(policy, DifferentiablePolicy):
            raise TypeError(
                f"OffPAC requires a DifferentiablePolicy, got {type(policy).__name__}"
            )
        super().__init__(policy, seed)
        self.actor = actor
        self.critic = critic
        self.alpha = as_parameter(alpha)
        self.beta = as_parameter(beta)
        self.gamma = as_parameter(gamma)
        self._actor_state: LinearState = actor.init()

        self._jit_action_values = jax.jit(actor.action_values)
        self._jit_update_action_values = jax.jit(actor.update_action_values)

    @property
    def actor_state(self) -> LinearState:
        """Current actor state (for testing/inspection)."""
        return self._actor_state

    def action_values(self, x: Any) -> Array:
        return self._jit_action_values(self._actor_state, x)

    def importance_ratio(self, qs: Array, action: int) -> float:
        """Ratio of target (greedy) to behaviour probability of ``action``."""
        behaviour = float(self.policy.probabilities(qs)[action])
        if behaviour <= 0.0:
            raise ValueError(f"Behaviour policy gives action {action} zero probability")
        return float(self._greedy.probabilities(qs)[action]) / behaviour

    def handle_transition(self, transition: Transition) -> None:
        s = transition.observation.state
        ns = transition.next_observation.state
        a = self._check_action(transition.action, self.actor.n_outputs)

        qs = self.action_values(s)
        next_v = 0.0 if transition.terminal else self.critic.evaluate(ns)
        delta = transition.reward + self.gamma.value * next_v - self.critic.evaluate(s)
        rho = self.importance_ratio(qs, a)

        grad = self.policy.grad_log(qs, a)
        self._actor_state = self._jit_update_action_values(
            self._actor_state, s, self.beta.value * rho * delta * grad
        )
        self.critic.update(s, self.alpha.value * rho * delta)

    def handle_terminal(self) -> None:
        self.alpha = self.alpha.step()
        self.beta = self.beta.step()
        self.gamma = self.gamma.step()
        self.critic.handle_terminal()
        self.policy.handle_terminal()
        logger.debug(
            "OffPAC parameters: alpha=%.4g beta=%.4g gamma=%.4g",
            self.alpha.value,
            self.beta.value,
            self.gamma.value,
        )
