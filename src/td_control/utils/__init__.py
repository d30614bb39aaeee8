"""Utility functions for td_control."""

from td_control.utils.metrics import compute_running_mean, episodes_to_dicts, summarise_episodes

__all__ = [
    "compute_running_mean",
    "episodes_to_dicts",
    "summarise_episodes",
]
