from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Tuple

import numpy as np

from typings.hit import Hit
from typings.light import Light
from typings.ray import Ray
from utils.vector_operations import (
    EPSILON,
    face_forward,
    vector_dot,
    vector_length_squared,
)

if TYPE_CHECKING:
    from scene import Node, Scene

SHADOW_COLOR: np.ndarray = np.array([0.05, 0.05, 0.05]) # what an occluded light still lets through


def find_closest_hit(ray: Ray, nodes: Iterable[Node]) -> Tuple[Node, Hit] | None:
    """Tests every node against the ray and returns the nearest (node, hit) pair.
    Strict '<' keeps the first node on equal distances."""
    best: Tuple[Node, Hit] | None = None
    best_distance = float("inf")
    for node in nodes:
        hit = node.geometry.intersect(ray)
        if hit is None:
            continue
        if hit.distance < best_distance:
            best = (node, hit)
            best_distance = hit.distance
    return best


def visibility_check(start: np.ndarray, end: np.ndarray, scene: Scene) -> bool:
    """True when nothing in the scene sits between start and end.
    Hits beyond end do not count as occluders."""
    to_target = np.asarray(end, dtype=float) - np.asarray(start, dtype=float)
    target_distance = float(np.linalg.norm(to_target))
    if target_distance < EPSILON: # start is at the target, nothing can be in between
        return True
    shadow_ray = Ray(origin=np.asarray(start, dtype=float), direction=to_target / target_distance)
    for node in scene.nodes:
        hit = node.geometry.intersect(shadow_ray)
        if hit is not None and hit.distance < target_distance:
            return False
    return True


def light_contribution(ray: Ray, hit: Hit, light: Light) -> np.ndarray:
    """color * power / d^2 * cos(theta), theta measured against the face-forward normal."""
    vector_to_light = light.position - hit.position
    distance_to_light_sqr = vector_length_squared(vector_to_light)
    if distance_to_light_sqr < EPSILON * EPSILON:
        return np.zeros(3, dtype=float)
    vector_to_light = vector_to_light / np.sqrt(distance_to_light_sqr)
    cos_theta = vector_dot(vector_to_light, face_forward(ray.direction, hit.normal))
    return light.color * (light.power / distance_to_light_sqr * cos_theta)


def shadow_ray_origin(hit: Hit) -> np.ndarray:
    # offset along the normal to avoid shadow acne
    return hit.position + hit.normal * EPSILON
