"""Core types and annealable parameters."""

from td_control.core.parameters import (
    Constant,
    ExponentialSchedule,
    LinearSchedule,
    Parameter,
    as_parameter,
)
from td_control.core.types import (
    Episode,
    FullObservation,
    LinearState,
    Observation,
    TerminalObservation,
    TraceState,
    Transition,
)

__all__ = [
    # Parameters
    "Constant",
    "ExponentialSchedule",
    "LinearSchedule",
    "Parameter",
    "as_parameter",
    # Types
    "Episode",
    "FullObservation",
    "LinearState",
    "Observation",
    "TerminalObservation",
    "TraceState",
    "Transition",
]
