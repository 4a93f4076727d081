from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple, Union

import numpy as np

from surfaces.cube import Cube
from surfaces.plane import Plane
from surfaces.sphere import Sphere
from typings.light import Light
from typings.shader import Shader
from utils.vector_operations import frozen_vector

Geometry = Union[Plane, Sphere, Cube]

DEFAULT_AMBIENT_LIGHT = (0.5, 0.5, 0.5)


@dataclass(frozen=True, slots=True)
class Node:
    geometry: Geometry
    shader: Shader


@dataclass(frozen=True, eq=False)
class Scene:
    """Read-only snapshot handed to the renderer. Build one with SceneBuilder."""
    nodes: Tuple[Node, ...] = ()
    lights: Tuple[Light, ...] = ()
    ambient_light: np.ndarray = field(default_factory=lambda: frozen_vector(DEFAULT_AMBIENT_LIGHT))

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "lights", tuple(self.lights))
        object.__setattr__(self, "ambient_light", frozen_vector(self.ambient_light))


class SceneBuilder:
    """Mutable scene used during setup only."""

    def __init__(self) -> None:
        self.nodes: List[Node] = []
        self.lights: List[Light] = []
        self.ambient_light: np.ndarray = frozen_vector(DEFAULT_AMBIENT_LIGHT)

    def set_ambient_light(self, color: np.ndarray) -> SceneBuilder:
        self.ambient_light = frozen_vector(color)
        return self

    def add_light(self, light: Light) -> SceneBuilder:
        self.lights.append(light)
        return self

    def add_node(self, geometry: Geometry, shader: Shader) -> SceneBuilder:
        self.nodes.append(Node(geometry=geometry, shader=shader))
        return self

    def build(self) -> Scene:
        return Scene(nodes=tuple(self.nodes), lights=tuple(self.lights), ambient_light=self.ambient_light)
