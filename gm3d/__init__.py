"""
gm3d: мінімальна бібліотека 3D-математики (Py 3.9+).
Vector3 / Point3 / Matrix4, параметризовані типом скаляра (numpy float32 або float64).
"""

__version__ = "0.1.0"

from gm3d.scalar import (
    Scalar, SUPPORTED_SCALARS, DEFAULT_SCALAR,
    resolve_scalar, zero, literal, sqrt, epsilon,
)
from gm3d.errors import GeometryError, SingularMatrixError
from gm3d.geom import (
    Tuple3, Vector3, Point3, Vec3f, Vec3d, Point3f, Point3d,
    dot, cross, magnitude, distance_from_origin, normalize,
)
from gm3d.matrix import Matrix4, MatrixRow, Mat4f, Mat4d, multiply, mul_point, mul_vector

__all__ = [
    "Scalar", "SUPPORTED_SCALARS", "DEFAULT_SCALAR",
    "resolve_scalar", "zero", "literal", "sqrt", "epsilon",
    "GeometryError", "SingularMatrixError",
    "Tuple3", "Vector3", "Point3",
    "dot", "cross", "magnitude", "distance_from_origin", "normalize",
    "Matrix4", "MatrixRow", "multiply", "mul_point", "mul_vector",
    "Vec3f", "Vec3d", "Point3f", "Point3d", "Mat4f", "Mat4d",
    "__version__",
]
