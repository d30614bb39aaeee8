"""Dimensions, spaces and kernels."""

from td_control.geometry.dimensions import Continuous, Dimension, Discrete, Partitioned
from td_control.geometry.kernels import Exponential, Gaussian, Kernel
from td_control.geometry.span import Span, SpanKind
from td_control.geometry.spaces import (
    NullSpace,
    PairSpace,
    RegularSpace,
    Space,
    UnitarySpace,
    action_space,
)

__all__ = [
    # Dimensions
    "Continuous",
    "Dimension",
    "Discrete",
    "Partitioned",
    # Spaces
    "NullSpace",
    "PairSpace",
    "RegularSpace",
    "Space",
    "Span",
    "SpanKind",
    "UnitarySpace",
    "action_space",
    # Kernels
    "Exponential",
    "Gaussian",
    "Kernel",
]
