"""Fixed basis-function networks."""

from collections.abc import Sequence
from typing import Any

import jax.numpy as jnp
from jax import Array
from jaxtyping import Float

from td_control.fa.projection.base import Projection
from td_control.geometry.kernels import Kernel


class BasisFunction:
    """A kernel anchored at a fixed location.

    Attributes:
        loc: Centre of the basis function
        kernel: Kernel measuring similarity to the centre
    """

    def __init__(self, loc: Sequence[float], kernel: Kernel):
        self.loc = jnp.atleast_1d(jnp.asarray(loc, dtype=float))
        self.kernel = kernel

    def __call__(self, x: Any) -> Array:
        return self.kernel(self.loc, jnp.atleast_1d(jnp.asarray(x, dtype=float)))


class BasisNetwork(Projection):
    """Projection onto a fixed list of basis functions.

    Feature ``i`` is ``bases[i].kernel(bases[i].loc, x)``. The network has no
    learned parameters; every basis centre must share the same
    dimensionality, which becomes ``dim()``.
    """

    def __init__(self, bases: Sequence[BasisFunction]):
        if len(bases) == 0:
            raise ValueError("BasisNetwork needs at least one basis function")

        dims = {int(b.loc.shape[0]) for b in bases}
        if len(dims) != 1:
            raise ValueError(
                f"All basis centres must have the same dimensionality, got {sorted(dims)}"
            )

        self._bases = list(bases)
        self._dim = dims.pop()

    @property
    def bases(self) -> list[BasisFunction]:
        return self._bases

    def project(self, x: Any) -> Float[Array, " n_features"]:
        return jnp.stack([b(x) for b in self._bases])

    def size(self) -> int:
        return len(self._bases)

    def dim(self) -> int:
        return self._dim

    def equivalent(self, other: Projection) -> bool:
        if not isinstance(other, BasisNetwork):
            return False
        if self.dim() != other.dim() or self.size() != other.size():
            return False
        return all(
            bool(jnp.array_equal(a.loc, b.loc)) for a, b in zip(self._bases, other.bases)
        )
