"""Feature projections: basis networks, uniform grids and tile coding."""

from td_control.fa.projection.base import Projection, SparseProjection
from td_control.fa.projection.basis_network import BasisFunction, BasisNetwork
from td_control.fa.projection.tile_coding import TileCoding, TileHasher, UNHHasher
from td_control.fa.projection.uniform_grid import UniformGrid

__all__ = [
    "BasisFunction",
    "BasisNetwork",
    "Projection",
    "SparseProjection",
    "TileCoding",
    "TileHasher",
    "UNHHasher",
    "UniformGrid",
]
