# examples/demo_vectors.py
import logging

import numpy as np

from gm3d import Point3, Vector3, cross, dot
from gm3d.logging_config import setup_logging

if __name__ == "__main__":
    setup_logging(logging.DEBUG)

    a = Vector3(3.1, 5.0, -2.0)
    b = Vector3(11.27, -9.0, 0.0)
    print("dot:  ", dot(a, b))          # ≈ -10.063
    print("cross:", cross(a, b))        # (-18.0, -22.54, -84.25)

    v = Vector3(1.0, 2.0, 3.0, dtype=np.float32)
    v.normalize()
    print("unit (f32):", v, "|v| =", v.magnitude())

    z = Vector3.zeros()
    z.normalize()                       # no-op, див. DEBUG у лозі
    print("zero stays:", z)

    p, q = Point3(1.0, 1.0, 1.0), Point3(4.0, 5.0, 1.0)
    print("q - p:", q - p, "distance:", (q - p).magnitude())
