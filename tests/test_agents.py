"""Tests for prediction and control agents."""

import chex
import jax.numpy as jnp
import numpy as np
import pytest

from td_control import (
    TD,
    ActorCritic,
    Boltzmann,
    DenseLinear,
    EpsilonGreedy,
    FullObservation,
    Greedy,
    LinearSchedule,
    OffPAC,
    QSigma,
    ReplacingTrace,
    SARSALambda,
    SparseLinear,
    TDLambda,
    TerminalObservation,
    TileCoding,
    Transition,
)


def make_transition(s, a, r, ns, terminal=False):
    """Build a transition between two corridor states."""
    next_observation = (
        TerminalObservation(state=ns) if terminal else FullObservation(state=ns, actions=(0, 1))
    )
    return Transition(
        observation=FullObservation(state=s, actions=(0, 1)),
        action=a,
        reward=r,
        next_observation=next_observation,
    )


class TestTD:
    """Tests for TD(0) prediction."""

    def test_initial_estimate_is_zero(self, corridor_grid):
        """Zero weights give zero values."""
        agent = TD(DenseLinear(corridor_grid))
        assert agent.evaluate(2.0) == 0.0

    def test_td_error_and_update(self, corridor_grid):
        """delta = r + gamma V(s') - V(s) and V(s) += alpha * delta."""
        agent = TD(DenseLinear(corridor_grid), alpha=0.5, gamma=0.9)

        delta = agent.handle_transition(0.0, 1.0, 1.0)
        assert delta == pytest.approx(1.0)
        assert agent.evaluate(0.0) == pytest.approx(0.5)

        delta = agent.handle_transition(1.0, 0.0, 0.0)
        assert delta == pytest.approx(0.45)
        assert agent.evaluate(1.0) == pytest.approx(0.225)

    def test_terminal_ignores_next_value(self, corridor_grid):
        """Terminal steps bootstrap from zero."""
        agent = TD(DenseLinear(corridor_grid), alpha=1.0, gamma=1.0)
        agent.update(4.0, 10.0)

        delta = agent.handle_transition(3.0, 4.0, -1.0, terminal=True)

        assert delta == pytest.approx(-1.0)

    def test_sparse_approximator(self, corridor_grid):
        """TD works unchanged over a sparse approximator."""
        agent = TD(SparseLinear(corridor_grid), alpha=0.5, gamma=0.9)
        agent.handle_transition(0.0, 1.0, 1.0)
        assert agent.evaluate(0.0) == pytest.approx(0.5)

    def test_handle_terminal_anneals(self, corridor_grid):
        """alpha and gamma step once per episode."""
        agent = TD(DenseLinear(corridor_grid), alpha=LinearSchedule(1.0, 0.0, 4))
        agent.handle_terminal()
        assert agent.alpha.value == pytest.approx(0.75)


class TestTDLambda:
    """Tests for TD(lambda) prediction."""

    def test_trace_spreads_credit(self, corridor_grid):
        """Earlier states receive decayed credit for later errors."""
        agent = TDLambda(DenseLinear(corridor_grid), alpha=0.5, gamma=0.9, lambda_=0.8)

        agent.handle_transition(0.0, 1.0, 1.0)
        assert agent.evaluate(0.0) == pytest.approx(0.5)

        delta = agent.handle_transition(1.0, 2.0, 1.0)
        assert delta == pytest.approx(1.0)
        chex.assert_trees_all_close(agent.eligibility, jnp.array([0.72, 1.0, 0.0, 0.0, 0.0]))
        assert agent.evaluate(0.0) == pytest.approx(0.86)
        assert agent.evaluate(1.0) == pytest.approx(0.5)

    def test_replacing_trace(self, corridor_grid):
        """Replacing traces cap revisited features at one."""
        agent = TDLambda(
            DenseLinear(corridor_grid), trace=ReplacingTrace(), gamma=1.0, lambda_=1.0
        )

        agent.handle_transition(0.0, 0.0, 0.0)
        agent.handle_transition(0.0, 0.0, 0.0)

        assert float(agent.eligibility[0]) == pytest.approx(1.0)

    def test_handle_terminal_resets_trace(self, corridor_grid):
        """The trace is cleared at episode boundaries."""
        agent = TDLambda(DenseLinear(corridor_grid), lambda_=LinearSchedule(0.9, 0.0, 9))
        agent.handle_transition(0.0, 1.0, 1.0)

        agent.handle_terminal()

        chex.assert_trees_all_close(agent.eligibility, jnp.zeros(5))
        assert agent.lambda_.value == pytest.approx(0.8)

    def test_lambda_zero_matches_td_over_tile_coding(self):
        """With lambda = 0 the trace update equals TD(0), whatever the number of tilings."""
        td = TD(SparseLinear(TileCoding(8, memory_size=4096)), alpha=0.1, gamma=0.9)
        td_lambda = TDLambda(
            SparseLinear(TileCoding(8, memory_size=4096)), alpha=0.1, gamma=0.9, lambda_=0.0
        )

        td.handle_transition(0.4, 3.3, 1.0)
        td_lambda.handle_transition(0.4, 3.3, 1.0)

        assert td_lambda.evaluate(0.4) == pytest.approx(td.evaluate(0.4))
        assert td_lambda.evaluate(0.4) == pytest.approx(0.1)
        chex.assert_trees_all_close(td_lambda.state.weights, td.state.weights)


class TestActorCritic:
    """Tests for on-policy actor-critic."""

    def test_actor_follows_critic_error(self, corridor_grid):
        """The taken action's preference moves by beta * delta."""
        critic = TD(DenseLinear(corridor_grid), alpha=0.5, gamma=1.0)
        agent = ActorCritic(DenseLinear(corridor_grid, 2), critic, Greedy(), beta=0.1)

        agent.handle_transition(make_transition(0.0, 1, 1.0, 1.0))

        chex.assert_trees_all_close(agent.action_values(0.0), jnp.array([0.0, 0.1]))
        assert critic.evaluate(0.0) == pytest.approx(0.5)
        assert agent.pi(0.0) == 1

    def test_negative_error_discourages_action(self, corridor_grid):
        """A worse-than-expected outcome lowers the preference."""
        critic = TD(DenseLinear(corridor_grid), alpha=0.5, gamma=1.0)
        agent = ActorCritic(DenseLinear(corridor_grid, 2), critic, Greedy(), beta=0.1)

        agent.handle_transition(make_transition(2.0, 0, -1.0, 1.0))

        assert float(agent.action_values(2.0)[0]) < 0.0

    def test_handle_terminal_forwards(self, corridor_grid):
        """Agent, critic and policy all anneal at the episode boundary."""
        critic = TD(DenseLinear(corridor_grid), alpha=LinearSchedule(1.0, 0.0, 2))
        policy = EpsilonGreedy(LinearSchedule(0.5, 0.0, 5))
        agent = ActorCritic(
            DenseLinear(corridor_grid, 2), critic, policy, beta=LinearSchedule(1.0, 0.0, 4)
        )

        agent.handle_terminal()

        assert agent.beta.value == pytest.approx(0.75)
        assert critic.alpha.value == pytest.approx(0.5)
        assert policy.epsilon.value == pytest.approx(0.4)


class TestOffPAC:
    """Tests for off-policy actor-critic."""

    @pytest.fixture
    def agent(self, corridor_grid):
        """OffPAC with a Boltzmann behaviour policy over zero preferences."""
        critic = TD(DenseLinear(corridor_grid))
        return OffPAC(
            DenseLinear(corridor_grid, 2),
            critic,
            Boltzmann(1.0),
            alpha=0.1,
            beta=0.1,
            gamma=0.9,
        )

    def test_importance_ratio(self, agent):
        """rho = greedy(a) / behaviour(a); greedy picks action 0 on ties."""
        qs = jnp.zeros(2)
        assert agent.importance_ratio(qs, 0) == pytest.approx(2.0)
        assert agent.importance_ratio(qs, 1) == pytest.approx(0.0)

    def test_update_weighted_by_ratio(self, agent):
        """Critic and actor updates are both scaled by rho."""
        agent.handle_transition(make_transition(0.0, 0, 1.0, 1.0))

        assert agent.critic.evaluate(0.0) == pytest.approx(0.2)
        chex.assert_trees_all_close(agent.action_values(0.0), jnp.array([0.1, -0.1]))

    def test_off_target_action_is_ignored(self, agent):
        """Actions the target policy never takes produce no update."""
        agent.handle_transition(make_transition(0.0, 1, 1.0, 1.0))

        assert agent.critic.evaluate(0.0) == 0.0
        chex.assert_trees_all_close(agent.actor_state.weights, jnp.zeros((5, 2)))

    def test_requires_differentiable_policy(self, corridor_grid):
        """Non-differentiable behaviour policies are rejected."""
        with pytest.raises(TypeError, match="DifferentiablePolicy"):
            OffPAC(DenseLinear(corridor_grid, 2), TD(DenseLinear(corridor_grid)), Greedy())

    def test_handle_terminal_anneals(self, agent):
        """Parameters and the critic step at the episode boundary."""
        agent.alpha = LinearSchedule(1.0, 0.0, 2)

        agent.handle_terminal()

        assert agent.alpha.value == pytest.approx(0.5)


class TestQSigma:
    """Tests for Q(sigma) control."""

    @pytest.fixture
    def q_func(self, corridor_grid):
        """Tabular action-value function over the corridor."""
        return SparseLinear(corridor_grid, n_outputs=2)

    @pytest.mark.parametrize(
        "sigma, expected",
        [(1.0, 1.0 + 0.9 * 1.0), (0.0, 1.0 + 0.9 * 3.0), (0.5, 1.0 + 0.9 * 2.0)],
        ids=["sarsa", "expected_sarsa", "mixed"],
    )
    def test_target(self, q_func, sigma, expected):
        """sigma interpolates between sampled and expected backups."""
        agent = QSigma(q_func, Greedy(), gamma=0.9, sigma=sigma)
        assert agent.target(1.0, jnp.array([1.0, 3.0]), 0) == pytest.approx(expected)

    def test_terminal_update(self, q_func):
        """Terminal steps move Q(s, a) toward the reward alone."""
        agent = QSigma(q_func, Greedy(), alpha=0.5)

        agent.handle_transition(make_transition(3.0, 1, -1.0, 4.0, terminal=True))

        chex.assert_trees_all_close(agent.action_values(3.0), jnp.array([0.0, -0.5]))

    def test_bootstraps_from_next_state(self, q_func):
        """Non-terminal targets include the discounted next value."""
        agent = QSigma(q_func, Greedy(), alpha=1.0, gamma=0.5, sigma=1.0)
        agent.handle_transition(make_transition(3.0, 1, 4.0, 4.0, terminal=True))
        agent.handle_terminal()

        agent.handle_transition(make_transition(2.0, 1, -1.0, 3.0))

        # Greedy next action at s'=3 is 1 with Q = 4.
        assert float(agent.action_values(2.0)[1]) == pytest.approx(-1.0 + 0.5 * 4.0)

    def test_next_action_is_reused(self, q_func):
        """pi returns the action sampled during the last update."""
        agent = QSigma(q_func, Greedy(), alpha=1.0, gamma=1.0, sigma=1.0)

        # Walking into the wall: s' = s, and a' is sampled before Q(s, 0) drops to -1.
        agent.handle_transition(make_transition(0.0, 0, -1.0, 0.0))
        chex.assert_trees_all_close(agent.action_values(0.0), jnp.array([-1.0, 0.0]))

        assert agent.pi(0.0) == 0
        # The cached action is consumed; pi now samples afresh.
        assert agent.pi(0.0) == 1

    def test_rejects_invalid_sigma(self, q_func):
        """sigma must lie in [0, 1]."""
        with pytest.raises(ValueError, match="sigma"):
            QSigma(q_func, Greedy(), sigma=1.5)

    def test_handle_terminal_anneals(self, q_func):
        """alpha and sigma step, and the policy anneals."""
        policy = EpsilonGreedy(LinearSchedule(0.5, 0.0, 5))
        agent = QSigma(q_func, policy, sigma=LinearSchedule(1.0, 0.0, 2))

        agent.handle_terminal()

        assert agent.sigma.value == pytest.approx(0.5)
        assert policy.epsilon.value == pytest.approx(0.4)


class TestSARSALambda:
    """Tests for Sarsa(lambda) control."""

    @pytest.fixture
    def agent(self, corridor_grid):
        """Tabular Sarsa(lambda) over the corridor."""
        return SARSALambda(
            SparseLinear(corridor_grid, n_outputs=2),
            Greedy(),
            alpha=0.5,
            gamma=0.9,
            lambda_=0.8,
        )

    def test_trace_shape(self, agent):
        """The trace covers every (feature, action) weight."""
        chex.assert_shape(agent.eligibility, (5, 2))

    def test_single_update(self, agent):
        """The taken action's feature is traced and updated."""
        agent.handle_transition(make_transition(0.0, 1, 1.0, 1.0))

        assert float(agent.eligibility[0, 1]) == pytest.approx(1.0)
        assert float(jnp.sum(agent.eligibility)) == pytest.approx(1.0)
        chex.assert_trees_all_close(agent.action_values(0.0), jnp.array([0.0, 0.5]))

    def test_credit_flows_back(self, agent):
        """A later error updates earlier state-action pairs through the trace."""
        agent.handle_transition(make_transition(0.0, 1, 0.0, 1.0))
        agent.handle_transition(make_transition(1.0, 1, 1.0, 2.0, terminal=True))

        # e = [0.72 at (0, 1), 1.0 at (1, 1)] when the terminal error of 1 arrives.
        assert float(agent.action_values(0.0)[1]) == pytest.approx(0.5 * 0.72)
        assert float(agent.action_values(1.0)[1]) == pytest.approx(0.5)

    def test_handle_terminal_resets_trace(self, agent):
        """Traces do not carry across episodes."""
        agent.handle_transition(make_transition(0.0, 1, 1.0, 1.0))

        agent.handle_terminal()

        chex.assert_trees_all_close(agent.eligibility, jnp.zeros((5, 2)))

    def test_tile_coded_step_size(self):
        """Over k tilings one update still moves Q(s, a) by alpha * delta."""
        agent = SARSALambda(
            SparseLinear(TileCoding(8, memory_size=2**16), n_outputs=2),
            Greedy(),
            alpha=0.1,
            gamma=0.9,
            lambda_=0.8,
        )

        agent.handle_transition(make_transition(0.4, 1, 1.0, 3.3, terminal=True))

        assert float(agent.action_values(0.4)[1]) == pytest.approx(0.1)
        assert float(agent.action_values(0.4)[0]) == 0.0


def _q_sigma(grid):
    return QSigma(DenseLinear(grid, 2), Greedy(), alpha=0.5)


def _sarsa_lambda(grid):
    return SARSALambda(DenseLinear(grid, 2), Greedy(), alpha=0.5)


def _actor_critic(grid):
    return ActorCritic(DenseLinear(grid, 2), TD(DenseLinear(grid)), Greedy(), beta=0.5)


def _off_pac(grid):
    return OffPAC(DenseLinear(grid, 2), TD(DenseLinear(grid)), Boltzmann(1.0))


@pytest.mark.parametrize(
    "make_agent",
    [_q_sigma, _sarsa_lambda, _actor_critic, _off_pac],
    ids=["q_sigma", "sarsa_lambda", "actor_critic", "off_pac"],
)
class TestTransitionActionValidation:
    """Control agents check a transition's action before learning from it."""

    def test_out_of_range_action_raises(self, make_agent, corridor_grid):
        """An action beyond the number of outputs fails loudly."""
        agent = make_agent(corridor_grid)

        with pytest.raises(ValueError, match="out of range"):
            agent.handle_transition(make_transition(0.0, 7, 1.0, 1.0))

        chex.assert_trees_all_close(agent.action_values(0.0), jnp.zeros(2))

    def test_negative_action_raises(self, make_agent, corridor_grid):
        """Negative indices are not wrapped around."""
        with pytest.raises(ValueError, match="out of range"):
            make_agent(corridor_grid).handle_transition(make_transition(0.0, -1, 1.0, 1.0))

    def test_non_integer_action_raises(self, make_agent, corridor_grid):
        """Actions must be integer indices."""
        with pytest.raises(TypeError, match="integer"):
            make_agent(corridor_grid).handle_transition(make_transition(0.0, 0.5, 1.0, 1.0))

    def test_numpy_action_accepted(self, make_agent, corridor_grid):
        """NumPy integer actions are valid."""
        agent = make_agent(corridor_grid)

        agent.handle_transition(make_transition(0.0, np.int64(0), 1.0, 1.0))

        assert float(agent.action_values(0.0)[0]) > 0.0
