from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from typings.hit import Hit
from typings.ray import Ray
from utils.vector_operations import frozen_vector, vector_dot


class PlaneOrientation(Enum):
    XY = 0
    XZ = 1
    YZ = 2


# axis the plane is perpendicular to, and the two in-plane axes used for bounds and u/v
_PLANE_AXES = {
    PlaneOrientation.XY: (2, 0, 1),
    PlaneOrientation.XZ: (1, 0, 2),
    PlaneOrientation.YZ: (0, 1, 2),
}


@dataclass(frozen=True, slots=True, eq=False)
class Plane:
    """Finite axis-aligned square: center, side length limit, orientation."""
    center: np.ndarray
    limit: float
    orientation: PlaneOrientation
    normal: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", frozen_vector(self.center))
        object.__setattr__(self, "limit", float(self.limit))
        object.__setattr__(self, "orientation", PlaneOrientation(self.orientation))
        normal = np.zeros(3, dtype=float)
        normal[_PLANE_AXES[self.orientation][0]] = 1.0
        object.__setattr__(self, "normal", frozen_vector(normal))

    def intersect(self, ray: Ray) -> Hit | None:
        axis, u_axis, v_axis = _PLANE_AXES[self.orientation]
        start = float(ray.origin[axis])
        direction = float(ray.direction[axis])
        plane = float(self.center[axis])

        # moving away from the plane (or parallel to it)
        if direction >= 0.0 and start > plane or direction <= 0.0 and start < plane:
            return None
        if direction == 0.0:
            return None

        hit_distance = (start - plane) / -direction
        hit_point = ray.at(hit_distance)

        half_limit = self.limit / 2.0
        if abs(self.center[u_axis] - hit_point[u_axis]) > half_limit:
            return None
        if abs(self.center[v_axis] - hit_point[v_axis]) > half_limit:
            return None

        surface_normal = self.normal
        if vector_dot(ray.direction, surface_normal) > 0.0:
            surface_normal = -surface_normal
        return Hit(
            distance=float(hit_distance),
            position=hit_point,
            normal=surface_normal,
            u=float(hit_point[u_axis]),
            v=float(hit_point[v_axis]),
        )
