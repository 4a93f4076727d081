from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from typings.hit import Hit
from typings.ray import Ray
from utils.vector_operations import CUBE_EPSILON, frozen_vector, vector_dot

_SIDE_NORMALS = (
    (0, -1.0),
    (0, +1.0),
    (1, -1.0),
    (1, +1.0),
    (2, -1.0),
    (2, +1.0),
)


@dataclass(frozen=True, slots=True, eq=False)
class Cube:
    """Axis-aligned cube tested as six independent face planes."""
    center: np.ndarray
    edge: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", frozen_vector(self.center))
        object.__setattr__(self, "edge", float(self.edge))

    def _intersect_side(self, ray: Ray, axis: int, sign: float) -> float | None:
        half_edge = 0.5 * self.edge
        level = float(self.center[axis]) + sign * half_edge
        start = float(ray.origin[axis])
        direction = float(ray.direction[axis])
        if start > level and direction >= 0.0:
            return None
        if start < level and direction <= 0.0:
            return None
        if direction == 0.0:
            return None

        side_distance = (level - start) / direction
        side_point = ray.at(side_distance)
        offsets = np.abs(side_point - self.center)
        if np.any(offsets > half_edge + CUBE_EPSILON):
            return None
        return side_distance

    def intersect(self, ray: Ray) -> Hit | None:
        if self.edge <= 0.0:
            return None

        best_distance = float("inf")
        best_axis, best_sign = 0, 1.0
        for axis, sign in _SIDE_NORMALS:
            side_distance = self._intersect_side(ray, axis, sign)
            if side_distance is not None and side_distance < best_distance:
                best_distance = side_distance
                best_axis, best_sign = axis, sign

        if best_distance == float("inf"):
            return None

        hit_point = ray.at(best_distance)
        surface_normal = np.zeros(3, dtype=float)
        surface_normal[best_axis] = best_sign
        if best_axis == 1:
            u, v = float(hit_point[0]), float(hit_point[2])
        else:
            u, v = float(hit_point[0] + hit_point[2]), float(hit_point[1])

        if vector_dot(surface_normal, ray.direction) > 0.0:
            surface_normal = -surface_normal
        return Hit(distance=float(best_distance), position=hit_point, normal=surface_normal, u=u, v=v)
