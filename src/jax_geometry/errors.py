"""Exceptions raised by jax_geometry value types.

Only conditions that cannot produce a meaningful value are raised. The
degenerate-but-defined cases (unknown constructor shape, zero rotation
axis, zero-length normalisation) return a fallback value instead.
"""


class GeometryError(Exception):
    """Base exception for jax_geometry errors"""
    pass


class SingularMatrixError(GeometryError, ValueError):
    """Inverse requested for a matrix whose 3x3 determinant is zero"""
    pass


class MatrixDivisionByZeroError(GeometryError, ZeroDivisionError):
    """Matrix divided by a zero scalar"""
    pass
