# examples/demo_transform.py
import logging
import math

from gm3d import Matrix4, Point3, SingularMatrixError, Vector3, mul_point, mul_vector
from gm3d.logging_config import setup_logging

logger = logging.getLogger("gm3d.examples")


def rotation_z(rad: float) -> Matrix4:
    """Поворот навколо Z для конвенції рядка-вектора (p' = p * M)."""
    c, s = math.cos(rad), math.sin(rad)
    return Matrix4.new(
        c, s, 0, 0,
        -s, c, 0, 0,
        0, 0, 1, 0,
        0, 0, 0, 1,
    )


if __name__ == "__main__":
    setup_logging(logging.DEBUG)

    model = Matrix4.scaling(2, 2, 2) @ rotation_z(math.pi / 2) @ Matrix4.translation(0, 0, 5)
    cube = [Point3(x, y, z) for x in (0, 1) for y in (0, 1) for z in (0, 1)]

    moved = [mul_point(p, model) for p in cube]
    for src, dst in zip(cube, moved):
        logger.info("%s -> %s", src, dst)

    up = mul_vector(Vector3(1, 0, 0), model)
    logger.info("direction (1,0,0) -> %s (translation ignored)", up)

    inv = model.inversed()
    back = [mul_point(p, inv) for p in moved]
    worst = max((b - a).magnitude() for a, b in zip(cube, back))
    logger.info("round-trip error: %.3e", worst)

    flat = Matrix4.scaling(1, 1, 0)
    try:
        flat.inverse()
    except SingularMatrixError as e:
        logger.warning("cannot invert projection onto XY: %s", e)
