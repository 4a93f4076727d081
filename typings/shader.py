from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

import numpy as np

from scene_settings import RenderSettings
from typings.hit import Hit
from typings.ray import Ray
from typings.texture import Texture
from utils.shadow_utils import SHADOW_COLOR, light_contribution, shadow_ray_origin, visibility_check
from utils.vector_operations import (
    EPSILON,
    frozen_vector,
    reflect_vector,
    vector_dot,
    vector_length_squared,
)

if TYPE_CHECKING:
    from scene import Scene

DEFAULT_SETTINGS = RenderSettings()


@dataclass(frozen=True, slots=True, eq=False)
class Lambert:
    """Diffuse shader with hard shadows.

    Each light either adds diffuse * contribution (visible) or diffuse * 0.05
    (occluded). Unless settings.lambert_accumulate_lights is set, every light
    replaces the previous light's value, so only the last light shows.
    """
    color: np.ndarray
    texture: Texture | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "color", frozen_vector(self.color))

    def base_color(self, hit: Hit) -> np.ndarray:
        if self.texture is not None:
            return self.texture.sample(hit)
        return self.color

    def shade(self, ray: Ray, hit: Hit, scene: Scene, settings: RenderSettings | None = None) -> np.ndarray:
        settings = settings or DEFAULT_SETTINGS
        diffuse = self.base_color(hit) * scene.ambient_light
        result = np.zeros(3, dtype=float)
        origin = shadow_ray_origin(hit)
        for light in scene.lights:
            if visibility_check(origin, light.position, scene):
                light_color = diffuse * light_contribution(ray, hit, light)
            else:
                light_color = diffuse * SHADOW_COLOR
            if settings.lambert_accumulate_lights:
                result = result + light_color
            else:
                result = light_color
        return result


@dataclass(frozen=True, slots=True, eq=False)
class Phong:
    """Diffuse plus Phong specular highlight, no shadow test.

    Diffuse starts from the base color and accumulates every light's
    ambient-weighted contribution; the specular term is taken from the last
    light. With settings.phong_double_ambient (default) the sum is multiplied
    by the ambient light once more at the end.
    """
    color: np.ndarray
    texture: Texture | None = None
    specular_multiplier: float = 1.0
    specular_exponent: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "color", frozen_vector(self.color))
        object.__setattr__(self, "specular_multiplier", float(self.specular_multiplier))
        object.__setattr__(self, "specular_exponent", float(self.specular_exponent))

    def base_color(self, hit: Hit) -> np.ndarray:
        if self.texture is not None:
            return self.texture.sample(hit)
        return self.color

    def shade(self, ray: Ray, hit: Hit, scene: Scene, settings: RenderSettings | None = None) -> np.ndarray:
        settings = settings or DEFAULT_SETTINGS
        diffuse = np.array(self.base_color(hit), dtype=float)
        result = np.zeros(3, dtype=float)
        to_camera = -ray.direction
        for light in scene.lights:
            incident = hit.position - light.position
            cos_gamma = 0.0
            if vector_length_squared(incident) > EPSILON * EPSILON:
                cos_gamma = vector_dot(to_camera, reflect_vector(incident, hit.normal))
            phong_coefficient = 0.0
            if cos_gamma > 0.0:
                phong_coefficient = cos_gamma ** self.specular_exponent

            contribution = scene.ambient_light * light_contribution(ray, hit, light)
            diffuse = diffuse + contribution
            specular = contribution * (phong_coefficient * self.specular_multiplier)
            result = diffuse + specular

        if settings.phong_double_ambient:
            result = result * scene.ambient_light
        return result


Shader = Union[Lambert, Phong]
