"""Kernel functions used by basis-function projections."""

from abc import ABC, abstractmethod

import jax.numpy as jnp
from jax import Array


class Kernel(ABC):
    """Similarity between a basis centre and an input point."""

    @abstractmethod
    def __call__(self, x: Array, y: Array) -> Array:
        """Return the scalar kernel value k(x, y)."""
        ...


class Gaussian(Kernel):
    """Squared-exponential kernel.

    ``k(x, y) = amplitude * exp(-||x - y||^2 / (2 * length_scale^2))``
    """

    def __init__(self, length_scale: float = 1.0, amplitude: float = 1.0):
        if length_scale <= 0.0:
            raise ValueError(f"length_scale must be > 0, got {length_scale}")
        self.length_scale = length_scale
        self.amplitude = amplitude

    def __call__(self, x: Array, y: Array) -> Array:
        d = jnp.asarray(x, dtype=float) - jnp.asarray(y, dtype=float)
        return self.amplitude * jnp.exp(-jnp.sum(d * d) / (2.0 * self.length_scale**2))


class Exponential(Kernel):
    """Exponential (Laplacian) kernel.

    ``k(x, y) = amplitude * exp(-||x - y|| / length_scale)``
    """

    def __init__(self, length_scale: float = 1.0, amplitude: float = 1.0):
        if length_scale <= 0.0:
            raise ValueError(f"length_scale must be > 0, got {length_scale}")
        self.length_scale = length_scale
        self.amplitude = amplitude

    def __call__(self, x: Array, y: Array) -> Array:
        d = jnp.asarray(x, dtype=float) - jnp.asarray(y, dtype=float)
        return self.amplitude * jnp.exp(-jnp.linalg.norm(d) / self.length_scale)
