from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from typings.hit import Hit
from typings.ray import Ray
from utils.vector_operations import frozen_vector, vector_dot


@dataclass(frozen=True, slots=True, eq=False)
class Sphere:
    center: np.ndarray
    radius: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", frozen_vector(self.center))
        object.__setattr__(self, "radius", float(self.radius))

    def intersect(self, ray: Ray) -> Hit | None:
        if self.radius <= 0.0:
            return None

        ray_origin = ray.origin
        ray_direction = ray.direction

        origin_to_center = ray_origin - self.center
        quadratic_a = vector_dot(ray_direction, ray_direction)
        if quadratic_a == 0.0:
            return None
        quadratic_b = 2.0 * vector_dot(origin_to_center, ray_direction)
        quadratic_c = vector_dot(origin_to_center, origin_to_center) - self.radius * self.radius

        discriminant = quadratic_b * quadratic_b - 4.0 * quadratic_a * quadratic_c
        if discriminant < 0.0:
            return None

        sqrt_discriminant = math.sqrt(discriminant)
        inverse_2a = 1.0 / (2.0 * quadratic_a)

        t_near = (-quadratic_b - sqrt_discriminant) * inverse_2a
        t_far = (-quadratic_b + sqrt_discriminant) * inverse_2a
        if t_near < 0.0 and t_far < 0.0:
            return None

        # smaller non-negative root
        hit_distance = t_near if t_near >= 0.0 else t_far

        hit_point = ray_origin + hit_distance * ray_direction
        relative_position = hit_point - self.center
        surface_normal = relative_position / self.radius
        surface_normal = surface_normal / np.linalg.norm(surface_normal)
        if vector_dot(surface_normal, ray_direction) > 0.0:
            surface_normal = -surface_normal

        # longitude / latitude
        latitude_ratio = min(1.0, max(-1.0, float(relative_position[1]) / self.radius))
        u = (math.atan2(relative_position[2], relative_position[0]) + math.pi) / (2.0 * math.pi)
        v = -(math.asin(latitude_ratio) + math.pi / 2.0) / math.pi
        return Hit(distance=float(hit_distance), position=hit_point, normal=surface_normal, u=u, v=v)
