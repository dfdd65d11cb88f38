"""Immutable 3-component vector backed by a JAX array."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Union

import jax
import jax.numpy as jnp
from jax.tree_util import register_pytree_node_class

Array = jax.Array
Scalar = Union[float, Array]


def _component(value) -> Scalar:
    """Coerce a constructor argument to a float; non-numbers and NaN become 0.0."""
    if isinstance(value, jax.Array):
        # Tracers cannot be concretised under jit, so stay in jnp.
        if value.ndim != 0:
            return 0.0
        value = jnp.asarray(value, dtype=jnp.float64)
        return jnp.where(jnp.isnan(value), 0.0, value)
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(value) else value


@register_pytree_node_class  # lets Vector cross jit / vmap boundaries
@dataclass(frozen=True, init=False, eq=False)
class Vector:
    """
    A vector in 3-space.

    Every operation returns a new Vector; the underlying array is never
    modified. ``multiply`` (and ``*``) keeps its historical double
    meaning: cross product with another Vector, scaling with a scalar.
    """
    data: Array  # shape (3,)

    def __init__(self, x=0.0, y=0.0, z=0.0):
        data = jnp.stack([jnp.asarray(_component(c), dtype=jnp.float64) for c in (x, y, z)])
        object.__setattr__(self, "data", data)

    # Constructors
    @classmethod
    def from_array(cls, data: Array) -> "Vector":
        """Wrap a (3,) array as is, without component coercion."""
        data = jnp.asarray(data)
        if data.shape != (3,):
            raise ValueError(f"data must have shape (3,), got {data.shape}")
        vector = cls.__new__(cls)
        object.__setattr__(vector, "data", data)
        return vector

    @classmethod
    def zero(cls) -> "Vector":
        return cls.ZERO

    # PyTree boiler-plate
    def tree_flatten(self):
        return (self.data,), None

    @classmethod
    def tree_unflatten(cls, aux, children):
        (data,) = children
        vector = cls.__new__(cls)
        object.__setattr__(vector, "data", data)
        return vector

    # Components
    @property
    def x(self) -> float:
        return float(self.data[0])

    @property
    def y(self) -> float:
        return float(self.data[1])

    @property
    def z(self) -> float:
        return float(self.data[2])

    def to_array(self) -> Array:
        return self.data

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    # Arithmetic
    def negate(self) -> "Vector":
        return Vector.from_array(-self.data)

    def add(self, other: "Vector") -> "Vector":
        return Vector.from_array(self.data + other.data)

    def subtract(self, other: "Vector") -> "Vector":
        return Vector.from_array(self.data - other.data)

    def multiply(self, other: Union["Vector", Scalar]) -> "Vector":
        """Cross product when ``other`` is a Vector, scaling otherwise."""
        if isinstance(other, Vector):
            return self.cross(other)
        return self.scale(other)

    def scale(self, scalar: Scalar) -> "Vector":
        return Vector.from_array(self.data * scalar)

    def divide(self, scalar: Scalar) -> "Vector":
        """
        Scale by the reciprocal of ``scalar``.

        There is no zero check: dividing by 0 yields inf/NaN components.
        """
        inv = 1.0 / jnp.asarray(scalar, dtype=self.data.dtype)
        return self.scale(inv)

    def dot(self, other: "Vector") -> Array:
        """
        Scalar product, as a 0-d array so it stays traceable under jit.

        Use ``float(...)`` for a Python number. The same holds for
        ``length_squared`` and ``length``.
        """
        a, b = self.data, other.data
        return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]

    def cross(self, other: "Vector") -> "Vector":
        a, b = self.data, other.data
        return Vector.from_array(jnp.stack([
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ]))

    def length_squared(self) -> Array:
        return self.dot(self)

    def length(self) -> Array:
        """Euclidean length as a 0-d array."""
        return jnp.sqrt(self.length_squared())

    def normalize(self) -> "Vector":
        """
        Unit-length copy of this vector.

        The zero vector has no direction and is returned unchanged.
        """
        magnitude = self.length()
        safe = jnp.where(magnitude > 0.0, magnitude, 1.0)
        data = jnp.where(magnitude > 0.0, self.data * (1.0 / safe), self.data)
        return Vector.from_array(data)

    unit = normalize

    def is_normalized(self) -> bool:
        # Exact comparison, no tolerance.
        return bool(self.length() == 1.0)

    # Comparison
    def equals(self, other: "Vector") -> bool:
        return bool(jnp.array_equal(self.data, other.data))

    def not_equals(self, other: "Vector") -> bool:
        return not self.equals(other)

    def __eq__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        return self.equals(other)

    def __ne__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        return self.not_equals(other)

    def __hash__(self):
        return hash(tuple(self))

    # Operators
    def __neg__(self) -> "Vector":
        return self.negate()

    def __add__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other):
        return self.multiply(other)

    def __rmul__(self, scalar):
        return self.scale(scalar)

    def __truediv__(self, scalar):
        return self.divide(scalar)

    def __repr__(self) -> str:
        """Components print as Python floats, so whole numbers show as ``1.0``."""
        return f"Vector({self.x}, {self.y}, {self.z})"

    __str__ = __repr__


Vector.ZERO = Vector(0.0, 0.0, 0.0)
