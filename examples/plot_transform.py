# examples/plot_transform.py
from __future__ import annotations

import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d import Axes3D  # noqa: F401  # потрібен для 'projection="3d"'

from gm3d import Matrix4, Point3, mul_point

CUBE_EDGES = [(0, 1), (0, 2), (0, 4), (1, 3), (1, 5), (2, 3),
              (2, 6), (3, 7), (4, 5), (4, 6), (5, 7), (6, 7)]


def perspective(d: float) -> Matrix4:
    """Проста перспектива: w' = 1 + z / d."""
    return Matrix4.new(
        1, 0, 0, 0,
        0, 1, 0, 0,
        0, 0, 1, 1.0 / d,
        0, 0, 0, 1,
    )


def draw(ax, pts, title: str) -> None:
    for a, b in CUBE_EDGES:
        pa, pb = pts[a], pts[b]
        ax.plot([pa.x, pb.x], [pa.y, pb.y], [pa.z, pb.z], linewidth=0.8)
    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.set_zlabel("Z")
    ax.set_title(title)


if __name__ == "__main__":
    cube = [Point3(x, y, z) for x in (-1, 1) for y in (-1, 1) for z in (0, 2)]
    proj = Matrix4.translation(0, 0, 1) @ perspective(2.0)
    moved = [mul_point(p, proj) for p in cube]

    fig = plt.figure(figsize=(8, 4))
    draw(fig.add_subplot(121, projection="3d"), cube, "original")
    draw(fig.add_subplot(122, projection="3d"), moved, "perspective")
    plt.tight_layout()
    plt.show()
