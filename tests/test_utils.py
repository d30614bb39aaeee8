"""Tests for episode summaries."""

import numpy as np
import pytest

from td_control import Episode, compute_running_mean, episodes_to_dicts, summarise_episodes

EPISODES = [
    Episode(n_steps=10, total_reward=-10.0),
    Episode(n_steps=6, total_reward=-6.0),
    Episode(n_steps=4, total_reward=-4.0),
]


class TestEpisodesToDicts:
    """Tests for dict conversion."""

    def test_converts_each_episode(self):
        """One dict per episode with steps and reward."""
        rows = episodes_to_dicts(EPISODES)

        assert len(rows) == 3
        assert rows[0] == {"n_steps": 10.0, "total_reward": -10.0}

    def test_empty(self):
        """No episodes, no rows."""
        assert episodes_to_dicts([]) == []


class TestComputeRunningMean:
    """Tests for the trailing running mean."""

    def test_window(self):
        """Each entry averages up to window trailing values."""
        result = compute_running_mean([1.0, 2.0, 3.0, 4.0], window=2)
        np.testing.assert_allclose(result, [1.0, 1.5, 2.5, 3.5])

    def test_window_larger_than_input(self):
        """A long window averages everything seen so far."""
        result = compute_running_mean(np.array([2.0, 4.0, 6.0]), window=10)
        np.testing.assert_allclose(result, [2.0, 3.0, 4.0])

    def test_window_of_one_is_identity(self):
        """Window one returns the input."""
        values = [3.0, -1.0, 7.0]
        np.testing.assert_allclose(compute_running_mean(values, window=1), values)

    def test_invalid_window(self):
        """Windows must be positive."""
        with pytest.raises(ValueError, match="window"):
            compute_running_mean([1.0], window=0)

    def test_rejects_2d_input(self):
        """Only 1-D sequences are accepted."""
        with pytest.raises(ValueError, match="1-D"):
            compute_running_mean(np.ones((2, 2)), window=1)


class TestSummariseEpisodes:
    """Tests for aggregate statistics."""

    def test_statistics(self):
        """Mean, min and max of steps and rewards."""
        summary = summarise_episodes(EPISODES)

        assert summary["n_episodes"] == 3.0
        assert summary["mean_steps"] == pytest.approx(20.0 / 3.0)
        assert summary["min_reward"] == -10.0
        assert summary["max_reward"] == -4.0
        assert summary["max_steps"] == 10.0

    def test_empty_raises(self):
        """There is nothing to summarise without episodes."""
        with pytest.raises(ValueError):
            summarise_episodes([])
