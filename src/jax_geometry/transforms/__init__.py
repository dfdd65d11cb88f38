"""
JAX-based homogeneous transforms.

This module provides:
- pure, JIT-compilable functions on 4x4 arrays (affine, rotation, projection)
- the immutable Matrix value type built on top of them

Conventions: row-major storage, column vectors, x' = M x.
"""

from . import affine
from . import projection
from . import rotation
from .matrix import Matrix

__all__ = [
    "affine",
    "projection",
    "rotation",
    "Matrix",
]
