"""View and projection matrices in JAX.

Functions return (4, 4) row-major arrays following the same column-vector
convention as ``affine``.
"""

import jax
import jax.numpy as jnp
from typing import Union

from . import affine

Array = jax.Array
Scalar = Union[float, Array]


def look_at(eye: Array, at: Array, up: Array, normalize_axes: bool = False) -> Array:
    """
    Left-handed view matrix looking from ``eye`` towards ``at``.

    The rows of the linear block are the camera axes
    ``x = up × z``, ``y = z × x`` and ``z = at - eye``; the translation
    moves ``eye`` to the origin.

    By default the axes keep their raw cross-product length, which is
    the established behaviour of this matrix; the block is then only
    orthonormal for ``|at - eye| == 1`` and a unit ``up`` perpendicular
    to it. ``normalize_axes`` scales each axis to unit length instead.

    Args:
        eye: (3,) camera position
        at: (3,) target position
        up: (3,) up direction
        normalize_axes: scale the axes to unit length first

    Returns:
        (4, 4) view matrix
    """
    z_axis = at - eye
    x_axis = jnp.cross(up, z_axis)
    y_axis = jnp.cross(z_axis, x_axis)

    axes = jnp.stack([x_axis, y_axis, z_axis])
    if normalize_axes:
        norms = jnp.linalg.norm(axes, axis=-1, keepdims=True)
        axes = jnp.where(norms > 0.0, axes / jnp.where(norms > 0.0, norms, 1.0), axes)

    return affine.from_block_and_translation(axes, -(axes @ eye))


def orthographic(l: Scalar, r: Scalar, b: Scalar, t: Scalar, n: Scalar, f: Scalar) -> Array:
    """
    Orthographic projection mapping x in [l, r], y in [b, t] and
    z in [-n, -f] onto the normalised device cube [-1, 1]^3.

    Returns:
        (4, 4) projection matrix
    """
    sx = 1.0 / (r - l)
    sy = 1.0 / (t - b)
    sz = 1.0 / (f - n)

    return jnp.array([
        [2 * sx, 0.0, 0.0, -(r + l) * sx],
        [0.0, 2 * sy, 0.0, -(t + b) * sy],
        [0.0, 0.0, -2 * sz, -(n + f) * sz],
        [0.0, 0.0, 0.0, 1.0],
    ], dtype=jnp.float64)


def perspective(l: Scalar, r: Scalar, t: Scalar, b: Scalar, n: Scalar, f: Scalar) -> Array:
    """
    Perspective projection from explicit frustum planes.

    Note the plane order: top comes before bottom. Row 4 is (0, 0, 1, 0),
    so depth ends up in w.

    Returns:
        (4, 4) projection matrix
    """
    return jnp.array([
        [2 * n / (r - l), 0.0, 0.0, 0.0],
        [0.0, 2 * n / (t - b), 0.0, 0.0],
        [0.0, 0.0, f / (f - n), n * f / (n - f)],
        [0.0, 0.0, 1.0, 0.0],
    ], dtype=jnp.float64)


def perspective_fov(fov: Scalar, aspect: Scalar, n: Scalar, f: Scalar) -> Array:
    """
    Perspective projection from a vertical field of view and aspect ratio.

    Args:
        fov: vertical field of view in radians
        aspect: width / height
        n: near plane distance
        f: far plane distance

    Returns:
        (4, 4) projection matrix, see ``perspective``
    """
    t = jnp.tan(fov * 0.5) * n
    b = -t
    l = aspect * b
    r = aspect * t
    return perspective(l, r, t, b, n, f)
