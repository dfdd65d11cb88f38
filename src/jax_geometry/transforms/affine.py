"""Homogeneous 4x4 affine transform operations in JAX.

All functions are pure, JIT-able and operate on (..., 4, 4) arrays laid
out row-major: the upper-left 3x3 block is the linear part, column 4 of
rows 1-3 the translation. Transforms act on column vectors (x' = T x),
so ``multiply(A, B)`` applies B first.

Nothing here raises on singular input; callers that need to reject
singular matrices check ``determinant`` first.
"""

import jax
import jax.numpy as jnp

Array = jax.Array


def from_block_and_translation(B: Array, t: Array) -> Array:
    """
    Construct a homogeneous transform from a linear block and translation.

    Args:
        B: (..., 3, 3) linear block
        t: (..., 3) translation

    Returns:
        (..., 4, 4) matrix with bottom row (0, 0, 0, 1)
    """
    # Ensure consistent batch shapes
    batch_shape = jnp.broadcast_shapes(t.shape[:-1], B.shape[:-2])
    t = jnp.broadcast_to(t, batch_shape + (3,))
    B = jnp.broadcast_to(B, batch_shape + (3, 3))

    T = jnp.zeros(batch_shape + (4, 4), dtype=jnp.result_type(B, t))
    T = T.at[..., :3, :3].set(B)
    T = T.at[..., :3, 3].set(t)
    T = T.at[..., 3, 3].set(1.0)

    return T


def get_block(T: Array) -> Array:
    """(..., 3, 3) linear block of ``T``."""
    return T[..., :3, :3]


def get_translation(T: Array) -> Array:
    """(..., 3) translation column of ``T``."""
    return T[..., :3, 3]


def determinant(T: Array) -> Array:
    """
    Determinant of the 3x3 linear block by cofactor expansion.

    Row and column 4 are ignored.

    Args:
        T: (..., 4, 4) matrix

    Returns:
        (...,) determinant
    """
    m11, m12, m13 = T[..., 0, 0], T[..., 0, 1], T[..., 0, 2]
    m21, m22, m23 = T[..., 1, 0], T[..., 1, 1], T[..., 1, 2]
    m31, m32, m33 = T[..., 2, 0], T[..., 2, 1], T[..., 2, 2]

    return (-m13 * m22 * m31 + m12 * m23 * m31 + m13 * m21 * m32
            - m11 * m23 * m32 - m12 * m21 * m33 + m11 * m22 * m33)


def inverse(T: Array) -> Array:
    """
    Invert an affine transform through the adjugate of its linear block.

    T^-1 = [[B^-1, -B^-1 @ t], [row 4 of T]]

    Row 4 is copied unchanged, so the result is only a true inverse when
    that row is (0, 0, 0, 1). A zero determinant yields inf/NaN entries.

    Args:
        T: (..., 4, 4) matrix

    Returns:
        (..., 4, 4) inverse matrix
    """
    m11, m12, m13 = T[..., 0, 0], T[..., 0, 1], T[..., 0, 2]
    m21, m22, m23 = T[..., 1, 0], T[..., 1, 1], T[..., 1, 2]
    m31, m32, m33 = T[..., 2, 0], T[..., 2, 1], T[..., 2, 2]

    k = 1.0 / determinant(T)

    # Adjugate (transposed cofactors) scaled by 1 / det
    B_inv = jnp.stack([
        jnp.stack([m22 * m33 - m32 * m23, m32 * m13 - m12 * m33, m12 * m23 - m22 * m13], axis=-1),
        jnp.stack([m23 * m31 - m33 * m21, m33 * m11 - m13 * m31, m13 * m21 - m23 * m11], axis=-1),
        jnp.stack([m21 * m32 - m31 * m22, m31 * m12 - m11 * m32, m11 * m22 - m21 * m12], axis=-1),
    ], axis=-2) * k[..., None, None]

    t_inv = -jnp.einsum("...ij,...j->...i", B_inv, get_translation(T))

    T_inv = jnp.concatenate([B_inv, t_inv[..., None]], axis=-1)
    return jnp.concatenate([T_inv, T[..., 3:, :]], axis=-2)


def multiply(T1: Array, T2: Array) -> Array:
    """
    Multiply two homogeneous matrices.

    Args:
        T1: (..., 4, 4) first matrix
        T2: (..., 4, 4) second matrix

    Returns:
        (..., 4, 4) result of T1 @ T2 (T2 applied first)
    """
    return jnp.matmul(T1, T2)


def apply(T: Array, points: Array) -> Array:
    """
    Apply the full affine transform (block and translation) to points.

    Row 4 is not used, so no perspective divide takes place.

    Args:
        T: (..., 4, 4) matrix
        points: (..., 3) points

    Returns:
        (..., 3) transformed points
    """
    return apply_linear(T, points) + get_translation(T)


def apply_linear(T: Array, vectors: Array) -> Array:
    """
    Apply only the 3x3 block, ignoring translation.

    Args:
        T: (..., 4, 4) matrix
        vectors: (..., 3) vectors

    Returns:
        (..., 3) transformed vectors
    """
    return jnp.einsum("...ij,...j->...i", get_block(T), vectors)
