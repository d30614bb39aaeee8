"""Summaries of episode records produced by the experiment drivers."""

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from td_control.core.types import Episode


def episodes_to_dicts(episodes: Sequence[Episode]) -> list[dict[str, float]]:
    """Convert episodes to a list of dicts (e.g. for CSV or DataFrame export).

    Args:
        episodes: Episodes returned by ``run``

    Returns:
        List of dicts with ``n_steps`` and ``total_reward`` keys
    """
    return [
        {"n_steps": float(ep.n_steps), "total_reward": float(ep.total_reward)}
        for ep in episodes
    ]


def compute_running_mean(values: Sequence[float] | NDArray, window: int) -> NDArray[np.float64]:
    """Trailing running mean.

    Entry ``i`` is the mean of ``values[max(0, i - window + 1) : i + 1]``, so
    the output has the same length as the input.

    Args:
        values: 1-D sequence of values
        window: Window size

    Returns:
        Array of running means
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"values must be 1-D, got shape {arr.shape}")
    if arr.size == 0:
        return arr

    cumsum = np.concatenate([[0.0], np.cumsum(arr)])
    idx = np.arange(1, arr.size + 1)
    lo = np.maximum(idx - window, 0)
    return (cumsum[idx] - cumsum[lo]) / (idx - lo)


def summarise_episodes(episodes: Sequence[Episode]) -> dict[str, float]:
    """Aggregate statistics over a list of episodes.

    Args:
        episodes: Episodes returned by ``run``

    Returns:
        Dict with the episode count and the mean, min and max of steps and returns
    """
    if not episodes:
        raise ValueError("Cannot summarise an empty list of episodes")

    steps = np.array([ep.n_steps for ep in episodes], dtype=np.float64)
    rewards = np.array([ep.total_reward for ep in episodes], dtype=np.float64)
    return {
        "n_episodes": float(len(episodes)),
        "mean_steps": float(steps.mean()),
        "min_steps": float(steps.min()),
        "max_steps": float(steps.max()),
        "mean_reward": float(rewards.mean()),
        "min_reward": float(rewards.min()),
        "max_reward": float(rewards.max()),
    }
