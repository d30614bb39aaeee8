"""Hashed tile coding.

Native implementation of the tile-coding scheme from Sutton's ``tiles``
software. Each of ``n_tilings`` tilings partitions the input space into
unit-width tiles (after scaling the input by ``n_tilings``), with tiling
``j`` displaced by ``j * (1 + 2i)`` quantisation steps along dimension ``i``.
The coordinates of the active tile, together with the tiling index and any
integer selectors, are hashed into a memory of fixed size. Distinct tiles may
collide; tile coding here is approximate and generalising by design.

References:
- Sutton & Barto 2018, "Reinforcement Learning: An Introduction", Section 9.5.4
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

import jax.numpy as jnp
import numpy as np
from jax import Array
from jaxtyping import Int

from td_control.fa.projection.base import SparseProjection


class TileHasher(ABC):
    """Strategy mapping tile coordinates to memory indices."""

    @abstractmethod
    def __call__(
        self,
        coordinates: Int[Array, "n_tilings n_coordinates"],
        memory_size: int,
    ) -> Int[Array, " n_tilings"]:
        """Hash each row of integer coordinates into ``[0, memory_size)``.

        Args:
            coordinates: One coordinate vector per tiling
            memory_size: Size of the hash memory

        Returns:
            One memory index per tiling
        """
        ...


class UNHHasher(TileHasher):
    """Universal hashing over a fixed table of random integers.

    Each coordinate ``c_k`` (offset by ``increment * k``) selects an entry of
    the table; the selected entries are summed and reduced modulo the memory
    size.

    Attributes:
        seed: Seed for the random table
        table_size: Number of entries in the random table
        increment: Per-position offset separating coordinate positions
    """

    def __init__(self, seed: int = 0, table_size: int = 2048, increment: int = 449):
        rng = np.random.default_rng(seed)
        self.seed = seed
        self.increment = increment
        self._table = jnp.asarray(
            rng.integers(0, 2**32, size=table_size, dtype=np.int64), dtype=jnp.int64
        )

    def __call__(
        self,
        coordinates: Int[Array, "n_tilings n_coordinates"],
        memory_size: int,
    ) -> Int[Array, " n_tilings"]:
        offsets = self.increment * jnp.arange(coordinates.shape[-1])
        idx = jnp.mod(coordinates + offsets, self._table.shape[0])
        return jnp.mod(jnp.sum(self._table[idx], axis=-1), memory_size)


class TileCoding(SparseProjection):
    """Sparse projection onto ``n_tilings`` hashed tilings.

    Inputs are expected to be scaled so that a unit change spans one tile
    width. ``project_sparse`` returns one memory index per tiling.

    Attributes:
        n_tilings: Number of tilings (and active features)
        memory_size: Size of the hash memory
    """

    def __init__(
        self,
        n_tilings: int,
        memory_size: int,
        hasher: TileHasher | None = None,
    ):
        if n_tilings < 1:
            raise ValueError(f"n_tilings must be >= 1, got {n_tilings}")
        if memory_size <= 0:
            raise ValueError(f"memory_size must be > 0, got {memory_size}")

        self.n_tilings = n_tilings
        self.memory_size = memory_size
        self._hasher = hasher or UNHHasher()

    def coordinates(
        self, x: Any, selectors: Sequence[int] | Array = ()
    ) -> Int[Array, "n_tilings n_coordinates"]:
        """Integer coordinates of the active tile in every tiling.

        Each row is ``[tile coordinates..., tiling index, selectors...]``.
        """
        floats = jnp.atleast_1d(jnp.asarray(x, dtype=float))
        n = self.n_tilings

        q = jnp.floor(floats * n).astype(int)
        tiling = jnp.arange(n)[:, None]
        base = tiling * (1 + 2 * jnp.arange(floats.shape[0]))[None, :]
        coords = q[None, :] - jnp.mod(q[None, :] - base, n)

        ints = jnp.asarray(selectors, dtype=int).reshape(-1)
        return jnp.concatenate(
            [coords, tiling, jnp.broadcast_to(ints, (n, ints.shape[0]))], axis=1
        )

    def project_sparse(
        self, x: Any, selectors: Sequence[int] | Array = ()
    ) -> Int[Array, " n_tilings"]:
        return self._hasher(self.coordinates(x, selectors), self.memory_size)

    def sparsity(self) -> int:
        return self.n_tilings

    def size(self) -> int:
        return self.memory_size

    def dim(self) -> int:
        raise NotImplementedError(
            "TileCoding accepts inputs of any dimensionality; dim() is not defined."
        )

    def equivalent(self, other) -> bool:
        return (
            isinstance(other, TileCoding)
            and self.n_tilings == other.n_tilings
            and self.memory_size == other.memory_size
        )
