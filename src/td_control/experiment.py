"""Episodic training and evaluation drivers.

Drivers are lazy, unbounded iterators of ``Episode`` records: each ``next``
builds a fresh domain from the caller's factory and runs one episode with the
agent. A driver cannot be rewound; construct a new one to start over.

Examples
--------
```python
agent = QSigma(q_func, EpsilonGreedy(0.1), alpha=0.1, gamma=0.99, sigma=0.5)
training = run(SerialExperiment(agent, make_domain, step_limit=1000), n_episodes=500)
evaluation = next(Evaluation(agent, make_domain))
```
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Protocol

from td_control.agents.base import ControlAgent
from td_control.core.types import Episode
from td_control.domains.base import Domain
from td_control.policies.base import Policy
from td_control.policies.greedy import Greedy

logger = logging.getLogger(__name__)

DomainFactory = Callable[[], Domain]


@dataclass(frozen=True)
class ExperimentConfig:
    """Configuration for a train-then-evaluate experiment.

    Attributes:
        n_episodes: Number of training episodes
        step_limit: Maximum steps per training episode
        eval_step_limit: Maximum steps per evaluation episode
        seed: Seed passed to the agent factory by ``train_and_evaluate``
    """

    n_episodes: int = 100
    step_limit: int = 1000
    eval_step_limit: int = 10_000
    seed: int = 0

    def __post_init__(self) -> None:
        if self.n_episodes < 0:
            raise ValueError(f"n_episodes must be >= 0, got {self.n_episodes}")
        if self.step_limit < 1:
            raise ValueError(f"step_limit must be >= 1, got {self.step_limit}")
        if self.eval_step_limit < 1:
            raise ValueError(f"eval_step_limit must be >= 1, got {self.eval_step_limit}")


class EpisodeLogger(Protocol):
    """Receives per-episode statistics from ``run``."""

    def log_episode(self, index: int, episode: Episode) -> None:
        ...


class SerialExperiment:
    """Sequence of training episodes.

    Each episode runs until the domain emits a terminal observation or
    ``step_limit`` steps have been taken, whichever comes first. The agent
    sees every transition through ``handle_transition`` and the episode
    boundary through a single ``handle_terminal`` call, also when the
    episode is cut off by the step limit.

    Attributes:
        step_limit: Maximum steps per episode
    """

    def __init__(self, agent: ControlAgent, domain_factory: DomainFactory, step_limit: int):
        if step_limit < 1:
            raise ValueError(f"step_limit must be >= 1, got {step_limit}")
        self._agent = agent
        self._domain_factory = domain_factory
        self.step_limit = step_limit

    def __iter__(self) -> Iterator[Episode]:
        return self

    def __next__(self) -> Episode:
        domain = self._domain_factory()
        observation = domain.emit()

        n_steps = 0
        total_reward = 0.0

        if not observation.is_terminal:
            action = self._agent.pi(observation.state)

            while n_steps < self.step_limit:
                transition = domain.step(action)

                n_steps += 1
                total_reward += transition.reward

                self._agent.handle_transition(transition)

                if transition.terminal:
                    break
                action = self._agent.pi(transition.next_observation.state)

        self._agent.handle_terminal()

        return Episode(n_steps=n_steps, total_reward=total_reward)


class Evaluation:
    """Sequence of evaluation episodes under a fixed policy (greedy by default).

    The agent is not trained: neither ``handle_transition`` nor
    ``handle_terminal`` is called. Episodes that have not terminated after
    ``step_limit`` steps are cut off.

    Attributes:
        step_limit: Maximum steps per episode
    """

    def __init__(
        self,
        agent: ControlAgent,
        domain_factory: DomainFactory,
        step_limit: int = 10_000,
        policy: Policy | None = None,
    ):
        if step_limit < 1:
            raise ValueError(f"step_limit must be >= 1, got {step_limit}")
        self._agent = agent
        self._domain_factory = domain_factory
        self._policy = policy or Greedy()
        self.step_limit = step_limit

    def __iter__(self) -> Iterator[Episode]:
        return self

    def __next__(self) -> Episode:
        domain = self._domain_factory()
        observation = domain.emit()

        n_steps = 0
        total_reward = 0.0

        while not observation.is_terminal:
            if n_steps >= self.step_limit:
                logger.warning("Evaluation episode cut off after %d steps", n_steps)
                break

            action = self._agent.evaluate_policy(self._policy, observation.state)
            transition = domain.step(action)

            n_steps += 1
            total_reward += transition.reward
            observation = transition.next_observation

        return Episode(n_steps=n_steps, total_reward=total_reward)


def run(
    runner: Iterator[Episode],
    n_episodes: int,
    episode_logger: EpisodeLogger | None = None,
) -> list[Episode]:
    """Collect ``n_episodes`` episodes from a driver.

    Args:
        runner: A ``SerialExperiment`` or ``Evaluation`` (any episode iterator)
        n_episodes: Number of episodes to run
        episode_logger: Optional receiver of per-episode statistics

    Returns:
        The episodes, in order
    """
    episodes = []
    for i, episode in enumerate(itertools.islice(runner, n_episodes)):
        if episode_logger is not None:
            episode_logger.log_episode(i, episode)
        logger.debug(
            "Episode %d: n_steps=%d total_reward=%.4g", i, episode.n_steps, episode.total_reward
        )
        episodes.append(episode)

    logger.info("Completed %d episodes", len(episodes))
    return episodes


def train_and_evaluate(
    make_agent: Callable[[int], ControlAgent],
    domain_factory: DomainFactory,
    config: ExperimentConfig,
    episode_logger: EpisodeLogger | None = None,
) -> tuple[ControlAgent, list[Episode], Episode]:
    """Train a fresh agent and then evaluate it greedily.

    Args:
        make_agent: Builds the agent from ``config.seed``
        domain_factory: Builds a fresh domain per episode
        config: Episode counts and step limits
        episode_logger: Optional receiver of per-episode training statistics

    Returns:
        Tuple of (trained agent, training episodes, evaluation episode)
    """
    agent = make_agent(config.seed)
    training = run(
        SerialExperiment(agent, domain_factory, config.step_limit),
        config.n_episodes,
        episode_logger,
    )
    evaluation = next(Evaluation(agent, domain_factory, config.eval_step_limit))
    logger.info(
        "Evaluation after %d episodes: n_steps=%d total_reward=%.4g",
        len(training),
        evaluation.n_steps,
        evaluation.total_reward,
    )
    return agent, training, evaluation
