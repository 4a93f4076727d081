"""Pytest configuration for raytracer tests.

Shared fixtures for building rays, small scenes and the built-in demo scene.
"""

import numpy as np
import pytest

from scene_parser import default_scene_description
from typings.ray import Ray
from utils.vector_operations import normalize_vector


@pytest.fixture
def make_ray():
    """Factory for rays with a normalized direction."""

    def _make_ray(origin, direction):
        return Ray(origin=np.asarray(origin, dtype=float), direction=normalize_vector(direction))

    return _make_ray


@pytest.fixture
def default_description():
    """The built-in demo scene (blue floor, yellow sphere, one light)."""
    return default_scene_description()


@pytest.fixture
def small_default_description():
    """The demo scene scaled down to 64x48 so a full render stays fast."""
    description = default_scene_description()
    description.frame_width = 64
    description.frame_height = 48
    description.camera = description.camera.with_frame_size(64, 48)
    return description
