"""Immutable 4x4 homogeneous transform matrix.

Convention: post-multiplication by a column vector, x' = M x. When a
matrix is built from basis vectors those vectors are its rows. When
composing ``A * B * C * D`` the transforms are applied to a vector in the
order D, C, B, A; read as changes of coordinate system, the order is
A, B, C, D.
"""

from __future__ import annotations

import logging
from typing import Sequence, Tuple, Union

import jax
import jax.numpy as jnp
import numpy as np
from flax import struct

from .. import scalar
from ..errors import MatrixDivisionByZeroError, SingularMatrixError
from ..vector import Vector
from . import affine, projection, rotation

logger = logging.getLogger(__name__)

Array = jax.Array
Scalar = Union[float, Array]


def _number_or(value, default: float) -> Scalar:
    if isinstance(value, jax.Array):
        if value.ndim != 0:
            return default
        value = jnp.asarray(value, dtype=jnp.float64)
        return jnp.where(jnp.isnan(value), default, value)
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    return default if np.isnan(value) else value


def _is_flat_sequence(value, size: int) -> bool:
    if isinstance(value, (str, bytes, Vector)) or not hasattr(value, "__len__"):
        return False
    try:
        return np.ndim(value) == 1 and len(value) == size
    except (TypeError, ValueError):
        return False


@struct.dataclass
class Matrix:
    """
    4x4 transform stored row-major in ``entries``.

    Entries are also exposed 1-based as ``m11`` ... ``m44``. Rows 1-3 /
    columns 1-3 hold the linear block, column 4 of rows 1-3 holds the
    translation. Every factory that builds a transform leaves row 4 as
    (0, 0, 0, 1).
    """
    entries: Array  # shape (4, 4)

    EPSILON = scalar.EPSILON
    EPSILON_SQUARED = scalar.EPSILON_SQUARED

    # Constructors
    @classmethod
    def create(cls, *args) -> "Matrix":
        """
        Build a matrix from whatever shape of arguments was given.

        * three Vectors: basis vectors, see ``from_basis_vectors``
        * nine values: 3x3 block, see ``from_block3x3``
        * sixteen values: all entries, see ``from_entries``
        * one flat sequence of sixteen values, see ``from_row_major``

        No arguments, or any other shape, gives the zero matrix.
        """
        count = len(args)
        if count == 3 and all(isinstance(arg, Vector) for arg in args):
            return cls.from_basis_vectors(*args)
        if count == 9:
            return cls.from_block3x3(*args)
        if count == 16:
            return cls.from_entries(*args)
        if count == 1 and _is_flat_sequence(args[0], 16):
            return cls.from_row_major(args[0])

        if count:
            logger.debug("No matrix constructor takes %d argument(s), using the zero matrix", count)
        return cls.zero()

    @classmethod
    def from_basis_vectors(cls, a: Vector, b: Vector, c: Vector) -> "Matrix":
        """Matrix whose linear block has rows ``a``, ``b`` and ``c``."""
        block = jnp.stack([a.data, b.data, c.data])
        return cls(affine.from_block_and_translation(block, jnp.zeros(3, dtype=block.dtype)))

    @classmethod
    def from_block3x3(cls, *values: Scalar) -> "Matrix":
        """Matrix from the nine entries of the linear block, row-major."""
        if len(values) != 9:
            raise ValueError(f"expected 9 values, got {len(values)}")
        block = jnp.asarray(values, dtype=jnp.float64).reshape(3, 3)
        return cls(affine.from_block_and_translation(block, jnp.zeros(3, dtype=block.dtype)))

    @classmethod
    def from_entries(cls, *values: Scalar) -> "Matrix":
        """Matrix from sixteen entries, row-major."""
        if len(values) != 16:
            raise ValueError(f"expected 16 values, got {len(values)}")
        return cls.from_row_major(values)

    @classmethod
    def from_row_major(cls, values: Sequence[Scalar]) -> "Matrix":
        """Matrix from a flat sequence of sixteen entries, row-major."""
        data = jnp.asarray(values, dtype=jnp.float64)
        if data.size != 16:
            raise ValueError(f"expected 16 values, got {data.size}")
        return cls(data.reshape(4, 4))

    @classmethod
    def zero(cls) -> "Matrix":
        return cls.ZERO

    @classmethod
    def identity(cls) -> "Matrix":
        return cls.IDENTITY

    # Transform factories
    @classmethod
    def translate(cls, *args) -> "Matrix":
        """
        Translation by ``(x, y, z)`` or by a Vector.

        1 0 0 x
        0 1 0 y
        0 0 1 z
        0 0 0 1

        Any other arguments give the identity.
        """
        if len(args) == 3:
            t = jnp.asarray(args, dtype=jnp.float64)
        elif len(args) == 1 and isinstance(args[0], Vector):
            t = args[0].data
        else:
            logger.debug("translate() takes (x, y, z) or a Vector, using the identity")
            return cls.identity()
        return cls(affine.from_block_and_translation(jnp.eye(3, dtype=t.dtype), t))

    @classmethod
    def scale(cls, s: Scalar) -> "Matrix":
        """Uniform scale by ``s``."""
        return cls.diagonal(s, s, s, 1.0)

    @classmethod
    def diagonal(cls, a: Scalar, b: Scalar, c: Scalar, d: Scalar = 1.0) -> "Matrix":
        """Diagonal matrix; ``d`` falls back to 1 when it is not a number."""
        d = _number_or(d, 1.0)
        return cls(jnp.diag(jnp.stack([jnp.asarray(v, dtype=jnp.float64) for v in (a, b, c, d)])))

    @classmethod
    def rotate(cls, angle: Scalar, axis: Vector) -> "Matrix":
        """
        Rotation of ``angle`` radians about ``axis``.

        An axis shorter than ``EPSILON`` has no usable direction; the
        identity is returned for it.
        """
        if axis.length_squared() < cls.EPSILON_SQUARED:
            logger.debug("Degenerate rotation axis %s, using the identity", axis)
            return cls.identity()

        block = rotation.axis_angle(angle, axis.normalize().data)
        return cls(affine.from_block_and_translation(block, jnp.zeros(3, dtype=block.dtype)))

    @classmethod
    def lookat(cls, eye: Vector, at: Vector, up: Vector, normalize_axes: bool = False) -> "Matrix":
        """
        Left-handed view matrix, see ``projection.look_at``.

        The camera axes keep their raw cross-product length unless
        ``normalize_axes`` is set.
        """
        return cls(projection.look_at(eye.data, at.data, up.data, normalize_axes=normalize_axes))

    @classmethod
    def orthographic(cls, l: Scalar, r: Scalar, b: Scalar, t: Scalar, n: Scalar, f: Scalar) -> "Matrix":
        return cls(projection.orthographic(l, r, b, t, n, f))

    @classmethod
    def perspective(cls, *args) -> "Matrix":
        """
        Perspective projection.

        Six arguments ``(l, r, t, b, n, f)`` select the frustum form, four
        arguments ``(fov, aspect, n, f)`` the field-of-view form. Any other
        count gives the zero matrix.
        """
        if len(args) == 6:
            return cls.perspective_frustum(*args)
        if len(args) == 4:
            return cls.perspective_fov(*args)

        logger.debug("perspective() takes 6 or 4 arguments, got %d; using the zero matrix", len(args))
        return cls.zero()

    @classmethod
    def perspective_frustum(cls, l: Scalar, r: Scalar, t: Scalar, b: Scalar, n: Scalar, f: Scalar) -> "Matrix":
        return cls(projection.perspective(l, r, t, b, n, f))

    @classmethod
    def perspective_fov(cls, fov: Scalar, aspect: Scalar, n: Scalar, f: Scalar) -> "Matrix":
        return cls(projection.perspective_fov(fov, aspect, n, f))

    # Accessors
    def block(self) -> Array:
        """(3, 3) linear block."""
        return affine.get_block(self.entries)

    def translation(self) -> Vector:
        return Vector.from_array(affine.get_translation(self.entries))

    def to_row_major(self) -> Tuple[float, ...]:
        """The sixteen entries as floats, row by row."""
        return tuple(float(v) for v in np.asarray(self.entries).reshape(16))

    # Algebra
    def determinant(self) -> Array:
        """Determinant of the 3x3 block (row and column 4 are ignored)."""
        return affine.determinant(self.entries)

    def is_invertible(self) -> bool:
        # Only the 3x3 block is considered, with no tolerance.
        return bool(self.determinant() != 0)

    def inverse(self) -> "Matrix":
        """
        Inverse of an affine transform.

        Row 4 is carried over unchanged, so the result is the true inverse
        only when row 4 is (0, 0, 0, 1).

        Raises:
            SingularMatrixError: the 3x3 determinant is 0
        """
        if self.determinant() == 0:
            logger.debug("Refusing to invert singular matrix %r", self)
            raise SingularMatrixError(
                "Cannot calculate the inverse of the matrix because its determinant is 0."
            )
        return Matrix(affine.inverse(self.entries))

    def transform(self, vector: Vector) -> Vector:
        """Apply block and translation to ``vector`` (x' = M x)."""
        return Vector.from_array(affine.apply(self.entries, vector.data))

    def transform3x3(self, vector: Vector) -> Vector:
        """Apply only the 3x3 block, ignoring translation."""
        return Vector.from_array(affine.apply_linear(self.entries, vector.data))

    def add(self, other: "Matrix") -> "Matrix":
        return Matrix(self.entries + other.entries)

    def subtract(self, other: "Matrix") -> "Matrix":
        return Matrix(self.entries - other.entries)

    def multiply(self, other: Union["Matrix", Scalar]) -> "Matrix":
        """Matrix product with another Matrix, entry-wise scaling otherwise."""
        if isinstance(other, Matrix):
            return self.compose(other)
        return self.scaled(other)

    def compose(self, other: "Matrix") -> "Matrix":
        """Self ∘ other (apply *other* first, then self)."""
        return Matrix(affine.multiply(self.entries, other.entries))

    def scaled(self, s: Scalar) -> "Matrix":
        return Matrix(self.entries * s)

    def divide(self, s: Scalar) -> "Matrix":
        """
        Scale by ``1 / s``.

        Raises:
            MatrixDivisionByZeroError: ``s`` is 0
        """
        if s == 0:
            logger.debug("Refusing to divide matrix by zero")
            raise MatrixDivisionByZeroError("You cannot divide a matrix by 0.")
        return self.scaled(1.0 / s)

    # Comparison
    def equals(self, other: "Matrix") -> bool:
        return bool(jnp.array_equal(self.entries, other.entries))

    def not_equals(self, other: "Matrix") -> bool:
        return not self.equals(other)

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.equals(other)

    def __ne__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.not_equals(other)

    def __hash__(self):
        return hash(self.to_row_major())

    # Operators
    def __add__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other):
        return self.multiply(other)

    def __rmul__(self, s):
        return self.scaled(s)

    def __truediv__(self, s):
        return self.divide(s)

    def __matmul__(self, other):
        if isinstance(other, Vector):
            return self.transform(other)
        if isinstance(other, Matrix):
            return self.compose(other)
        return NotImplemented

    # Rendering
    def to_string(self, single_line: bool = False) -> str:
        values = [str(v) for v in self.to_row_major()]
        rows = [", ".join(values[i:i + 4]) for i in range(0, 16, 4)]
        if single_line:
            return "Matrix(" + ", ".join(rows) + ")"
        return "Matrix: " + "\n        ".join(rows)

    def __repr__(self) -> str:
        return self.to_string(single_line=True)

    def __str__(self) -> str:
        return self.to_string()


def _entry(row: int, col: int) -> property:
    def getter(self: Matrix) -> float:
        return float(self.entries[row - 1, col - 1])

    getter.__doc__ = f"Entry at row {row}, column {col}."
    return property(getter)


for _row in range(1, 5):
    for _col in range(1, 5):
        setattr(Matrix, f"m{_row}{_col}", _entry(_row, _col))

Matrix.ZERO = Matrix(jnp.zeros((4, 4), dtype=jnp.float64))
Matrix.IDENTITY = Matrix(jnp.eye(4, dtype=jnp.float64))
