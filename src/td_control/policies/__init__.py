"""Action-selection policies."""

from td_control.policies.base import DifferentiablePolicy, Policy
from td_control.policies.boltzmann import Boltzmann
from td_control.policies.epsilon_greedy import EpsilonGreedy
from td_control.policies.greedy import Greedy, Random

__all__ = [
    "Boltzmann",
    "DifferentiablePolicy",
    "EpsilonGreedy",
    "Greedy",
    "Policy",
    "Random",
]
