"""Annealable scalar parameters.

Step-sizes, discount factors, exploration rates and trace decays are all
``Parameter`` objects rather than bare floats. A parameter is immutable;
``step()`` returns the parameter one schedule step later. Agents call
``step()`` on each of their parameters once per episode boundary.

Examples
--------
```python
alpha = ExponentialSchedule(start=0.5, end=0.01, horizon=1000)
alpha = alpha.step()
update = alpha * td_error
```
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace


class Parameter(ABC):
    """Base class for scalar parameters with an annealing schedule."""

    @property
    @abstractmethod
    def value(self) -> float:
        """Current value of the parameter."""
        ...

    @abstractmethod
    def step(self) -> "Parameter":
        """Return the parameter advanced by one schedule step."""
        ...

    def __float__(self) -> float:
        return float(self.value)

    def __mul__(self, other):
        return self.value * other

    __rmul__ = __mul__

    def __add__(self, other):
        return self.value + other

    __radd__ = __add__

    def __sub__(self, other):
        return self.value - other

    def __rsub__(self, other):
        return other - self.value

    def __truediv__(self, other):
        return self.value / other

    def __rtruediv__(self, other):
        return other / self.value


@dataclass(frozen=True)
class Constant(Parameter):
    """Parameter whose value never changes."""

    constant: float

    @property
    def value(self) -> float:
        return self.constant

    def step(self) -> "Constant":
        return self


def _check_horizon(horizon: int) -> None:
    if horizon < 1:
        raise ValueError(f"horizon must be >= 1, got {horizon}")


@dataclass(frozen=True)
class LinearSchedule(Parameter):
    """Linear interpolation from ``start`` to ``end`` over ``horizon`` steps.

    Attributes:
        start: Value at step 0
        end: Value from step ``horizon`` onwards
        horizon: Number of steps to reach ``end``
        t: Number of steps taken so far
    """

    start: float
    end: float
    horizon: int
    t: int = 0

    def __post_init__(self) -> None:
        _check_horizon(self.horizon)

    @property
    def value(self) -> float:
        frac = min(self.t, self.horizon) / self.horizon
        return self.start + (self.end - self.start) * frac

    def step(self) -> "LinearSchedule":
        return replace(self, t=self.t + 1)


@dataclass(frozen=True)
class ExponentialSchedule(Parameter):
    """Geometric interpolation from ``start`` to ``end`` over ``horizon`` steps.

    ``value = start * (end / start) ** (min(t, horizon) / horizon)``

    Both endpoints must be strictly positive.

    Attributes:
        start: Value at step 0
        end: Value from step ``horizon`` onwards
        horizon: Number of steps to reach ``end``
        t: Number of steps taken so far
    """

    start: float
    end: float
    horizon: int
    t: int = 0

    def __post_init__(self) -> None:
        _check_horizon(self.horizon)
        if self.start <= 0.0 or self.end <= 0.0:
            raise ValueError(
                f"ExponentialSchedule endpoints must be > 0, got start={self.start}, "
                f"end={self.end}"
            )

    @property
    def value(self) -> float:
        frac = min(self.t, self.horizon) / self.horizon
        return self.start * (self.end / self.start) ** frac

    def step(self) -> "ExponentialSchedule":
        return replace(self, t=self.t + 1)


def as_parameter(value: "float | Parameter") -> Parameter:
    """Coerce a float into a ``Constant`` parameter.

    Args:
        value: A float or an existing parameter

    Returns:
        The parameter itself, or a ``Constant`` wrapping the float
    """
    if isinstance(value, Parameter):
        return value
    return Constant(float(value))
