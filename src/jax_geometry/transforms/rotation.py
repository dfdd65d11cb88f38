"""Axis-angle rotation utilities in JAX.

Pure, JIT-able functions producing 3x3 rotation blocks. Degenerate-axis
handling is left to the caller (see ``Matrix.rotate``).
"""

import jax
import jax.numpy as jnp
from typing import Union

Array = jax.Array
Scalar = Union[float, Array]


def skew_symmetric(v: Array) -> Array:
    """
    Convert 3D vector to skew-symmetric (cross-product) matrix.

    ``skew_symmetric(a) @ b == cross(a, b)``.

    Args:
        v: (..., 3) vector

    Returns:
        (..., 3, 3) skew-symmetric matrix
    """
    zeros = jnp.zeros(v.shape[:-1], dtype=v.dtype)

    return jnp.stack([
        jnp.stack([zeros, -v[..., 2], v[..., 1]], axis=-1),
        jnp.stack([v[..., 2], zeros, -v[..., 0]], axis=-1),
        jnp.stack([-v[..., 1], v[..., 0], zeros], axis=-1)
    ], axis=-2)


def axis_angle(angle: Scalar, axis: Array) -> Array:
    """
    Rotation block for a rotation of ``angle`` radians about a unit ``axis``.

    Implements Rodrigues' formula in its outer-product form:
    R = cos(θ) I + sin(θ) K + (1 - cos(θ)) n nᵀ

    The rotation is right-handed: a positive angle turns x towards y
    about +z.

    Args:
        angle: rotation angle in radians
        axis: (3,) unit-length rotation axis

    Returns:
        (3, 3) rotation matrix
    """
    angle = jnp.asarray(angle, dtype=axis.dtype)
    cos_angle = jnp.cos(angle)
    sin_angle = jnp.sin(angle)

    K = skew_symmetric(axis)
    outer = jnp.outer(axis, axis)
    I = jnp.eye(3, dtype=axis.dtype)

    return cos_angle * I + sin_angle * K + (1.0 - cos_angle) * outer
