"""Function approximation: projections and linear approximators."""

from td_control.fa.linear import Approximator, DenseLinear, SparseLinear
from td_control.fa.projection import (
    BasisFunction,
    BasisNetwork,
    Projection,
    SparseProjection,
    TileCoding,
    TileHasher,
    UNHHasher,
    UniformGrid,
)
from td_control.fa.rbf_network import RBFNetwork
from td_control.fa.sutton_tiles import SuttonTiles

__all__ = [
    # Approximators
    "Approximator",
    "DenseLinear",
    "RBFNetwork",
    "SparseLinear",
    "SuttonTiles",
    # Projections
    "BasisFunction",
    "BasisNetwork",
    "Projection",
    "SparseProjection",
    "TileCoding",
    "TileHasher",
    "UNHHasher",
    "UniformGrid",
]
