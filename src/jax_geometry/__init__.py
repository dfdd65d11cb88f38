"""
JAX Geometry: a small immutable 3D linear-algebra kernel.

Provides a 3-component Vector and a 4x4 homogeneous transform Matrix with
factories for translation, scale, axis-angle rotation, look-at and
orthographic/perspective projection, plus determinant, inverse and
vector transform. Values wrap JAX arrays and are registered pytrees.
"""

import logging

import jax
jax.config.update("jax_enable_x64", True)

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Import core modules
from . import errors
from . import scalar
from . import transforms
from .errors import GeometryError, MatrixDivisionByZeroError, SingularMatrixError
from .transforms import Matrix
from .vector import Vector

__version__ = "0.1.0"
__all__ = [
    "errors",
    "scalar",
    "transforms",
    "GeometryError",
    "Matrix",
    "MatrixDivisionByZeroError",
    "SingularMatrixError",
    "Vector",
]
