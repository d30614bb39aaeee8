"""Tests for annealable parameters."""

import pytest

from td_control import Constant, ExponentialSchedule, LinearSchedule, as_parameter


class TestConstant:
    """Tests for constant parameters."""

    def test_step_is_identity(self):
        """Stepping a constant changes nothing."""
        p = Constant(0.3)
        assert p.step() == p
        assert p.step().value == 0.3

    def test_arithmetic(self):
        """Parameters behave like their value in arithmetic."""
        p = Constant(2.0)
        assert p * 3 == 6.0
        assert 3 * p == 6.0
        assert p + 1 == 3.0
        assert 1 - Constant(0.25) == 0.75
        assert p / 4 == 0.5
        assert 1 / p == 0.5
        assert float(p) == 2.0


class TestLinearSchedule:
    """Tests for linear annealing."""

    def test_interpolates_then_holds(self):
        """Values move linearly to the end and stay there."""
        p = LinearSchedule(start=1.0, end=0.0, horizon=4)
        values = []
        for _ in range(6):
            values.append(p.value)
            p = p.step()

        assert values == pytest.approx([1.0, 0.75, 0.5, 0.25, 0.0, 0.0])

    def test_immutable(self):
        """step returns a new parameter."""
        p = LinearSchedule(1.0, 0.0, 10)
        p.step()
        assert p.t == 0

    def test_rejects_bad_horizon(self):
        """The horizon must be positive."""
        with pytest.raises(ValueError, match="horizon"):
            LinearSchedule(1.0, 0.0, 0)


class TestExponentialSchedule:
    """Tests for geometric annealing."""

    def test_geometric_interpolation(self):
        """Halfway through, the value is the geometric mean of the endpoints."""
        p = ExponentialSchedule(start=1.0, end=0.01, horizon=2)
        assert p.value == pytest.approx(1.0)
        assert p.step().value == pytest.approx(0.1)
        assert p.step().step().step().value == pytest.approx(0.01)

    def test_rejects_non_positive_endpoints(self):
        """Endpoints must be strictly positive."""
        with pytest.raises(ValueError, match="> 0"):
            ExponentialSchedule(1.0, 0.0, 10)


class TestAsParameter:
    """Tests for float coercion."""

    def test_wraps_float(self):
        """Floats become constants."""
        assert as_parameter(0.5) == Constant(0.5)

    def test_passes_parameter_through(self):
        """Existing parameters are returned unchanged."""
        p = LinearSchedule(1.0, 0.0, 3)
        assert as_parameter(p) is p
