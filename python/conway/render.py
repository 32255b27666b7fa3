import numpy as np

import taichi as ti

from conway.buffers import is_alive
from conway.exception import ConfigError

# Clip-space corners: bottom-left, bottom-right, top-right, top-left
FULL_SCREEN_QUAD = ((-1.0, -1.0), (1.0, -1.0), (1.0, 1.0), (-1.0, 1.0))

ALIVE_COLOR = (1.0, 1.0, 1.0, 1.0)
DEAD_COLOR = (0.0, 0.0, 0.0, 1.0)
CLEAR_COLOR = (0.0, 0.0, 0.0, 1.0)

# Barycentric slack so pixels on the shared diagonal are covered
COVERAGE_EPS = 1e-6


@ti.data_oriented
class Presenter:
    """Draws the current generation onto an RGBA colour target.

    A software version of a two-stage draw: the quad's corners go through a
    pass-through vertex stage, the quad is rasterised as two triangles and
    each covered pixel runs the fragment stage, which samples the grid cell
    under it. Only the colour target is written.

    Args:
        res (Tuple[int, int]): Size of the colour target in pixels.
        quad (Sequence): Four clip-space corners, see :func:`set_quad`.
    """

    def __init__(self, res, quad=FULL_SCREEN_QUAD):
        self.res = tuple(res)
        self.vertices = ti.Vector.field(2, dtype=ti.f32, shape=4)
        self.target = ti.Vector.field(4, dtype=ti.f32, shape=self.res)
        self.set_quad(quad)

    def set_quad(self, corners):
        """Sets the quad drawn by :func:`draw`.

        Args:
            corners (Sequence): Clip-space positions of the bottom-left,
                bottom-right, top-right and top-left corners.
        """
        corners = np.asarray(corners, dtype=np.float32)
        if corners.shape != (4, 2):
            raise ConfigError(f"A quad needs 4 two-dimensional corners, got shape {corners.shape}")
        edges = np.roll(corners, -1, axis=0) - corners
        area = 0.5 * np.sum(corners[:, 0] * np.roll(corners[:, 1], -1) - np.roll(corners[:, 0], -1) * corners[:, 1])
        if abs(area) < 1e-12 or np.any(np.all(edges == 0, axis=1)):
            raise ConfigError("Degenerate quad")
        self.vertices.from_numpy(corners)

    @staticmethod
    @ti.func
    def vertex_stage(position):
        return position

    @staticmethod
    @ti.func
    def point_in_triangle(P, A, B, C):
        alpha = -(P.x - B.x) * (C.y - B.y) + (P.y - B.y) * (C.x - B.x)
        alpha /= -(A.x - B.x) * (C.y - B.y) + (A.y - B.y) * (C.x - B.x)
        beta = -(P.x - C.x) * (A.y - C.y) + (P.y - C.y) * (A.x - C.x)
        beta /= -(B.x - C.x) * (A.y - C.y) + (B.y - C.y) * (A.x - C.x)
        gamma = 1.0 - alpha - beta
        result = alpha >= -COVERAGE_EPS and beta >= -COVERAGE_EPS and gamma >= -COVERAGE_EPS
        return result, alpha, beta, gamma

    @staticmethod
    @ti.func
    def fragment_stage(generation: ti.template(), uv):
        width = generation.shape[0]
        height = generation.shape[1]
        x = ti.min(ti.max(ti.cast(ti.floor(uv.x * width), ti.i32), 0), width - 1)
        y = ti.min(ti.max(ti.cast(ti.floor(uv.y * height), ti.i32), 0), height - 1)
        color = ti.Vector(DEAD_COLOR)
        if is_alive(generation, x, y):
            color = ti.Vector(ALIVE_COLOR)
        return color

    @ti.kernel
    def draw(self, generation: ti.template()):
        p0 = self.vertex_stage(self.vertices[0])
        p1 = self.vertex_stage(self.vertices[1])
        p2 = self.vertex_stage(self.vertices[2])
        p3 = self.vertex_stage(self.vertices[3])
        for i, j in self.target:
            P = ti.Vector([(i + 0.5) / self.res[0] * 2.0 - 1.0, (j + 0.5) / self.res[1] * 2.0 - 1.0])
            color = ti.Vector(CLEAR_COLOR)
            # Triangle (p0, p1, p2) carries uv (0, 0), (1, 0), (1, 1)
            lower, _, b1, c1 = self.point_in_triangle(P, p0, p1, p2)
            if lower:
                color = self.fragment_stage(generation, ti.Vector([b1 + c1, c1]))
            else:
                # Triangle (p0, p2, p3) carries uv (0, 0), (1, 1), (0, 1)
                upper, _, b2, c2 = self.point_in_triangle(P, p0, p2, p3)
                if upper:
                    color = self.fragment_stage(generation, ti.Vector([b2, b2 + c2]))
            self.target[i, j] = color

    def present(self, generation):
        """Draws ``generation`` and returns the colour target."""
        self.draw(generation)
        return self.target


__all__ = ["Presenter", "FULL_SCREEN_QUAD"]
