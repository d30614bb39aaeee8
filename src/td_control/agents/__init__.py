"""Prediction and control agents, and eligibility traces."""

from td_control.agents.actor_critic import ActorCritic, OffPAC
from td_control.agents.base import ControlAgent, PredictionAgent
from td_control.agents.prediction import TD, TDLambda
from td_control.agents.q_sigma import QSigma
from td_control.agents.sarsa import SARSALambda
from td_control.agents.traces import AccumulatingTrace, EligibilityTrace, ReplacingTrace

__all__ = [
    # Contracts
    "ControlAgent",
    "PredictionAgent",
    # Prediction
    "TD",
    "TDLambda",
    # Control
    "ActorCritic",
    "OffPAC",
    "QSigma",
    "SARSALambda",
    # Traces
    "AccumulatingTrace",
    "EligibilityTrace",
    "ReplacingTrace",
]
