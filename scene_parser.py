from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple

import numpy as np

from camera import Camera
from scene import Geometry, Node, Scene
from surfaces.cube import Cube
from surfaces.plane import Plane, PlaneOrientation
from surfaces.sphere import Sphere
from typings.light import Light
from typings.shader import Lambert, Phong, Shader
from typings.texture import Checker, SimpleColor, Texture
from utils.vector_operations import frozen_vector, new_color


class SceneParseError(ValueError):
    def __init__(self, message: str, position: int | None = None, token: str | None = None) -> None:
        if position is not None:
            message = f"{message} (token {position}: {token!r})" if token is not None else f"{message} (at end of input)"
        super().__init__(message)
        self.position = position
        self.token = token


@dataclass(eq=False)
class SceneDescription:
    frame_width: int
    frame_height: int
    camera: Camera
    ambient_light: np.ndarray
    lights: List[Light] = field(default_factory=list)
    nodes: List[Node] = field(default_factory=list)

    def build_scene(self) -> Scene:
        return Scene(nodes=tuple(self.nodes), lights=tuple(self.lights), ambient_light=self.ambient_light)


class _TokenStream:
    def __init__(self, tokens: List[str]) -> None:
        self.tokens = tokens
        self.position = 0

    def at_end(self) -> bool:
        return self.position >= len(self.tokens)

    def peek(self) -> str | None:
        if self.at_end():
            return None
        return self.tokens[self.position]

    def error(self, message: str) -> SceneParseError:
        return SceneParseError(message, self.position, self.peek())

    def next(self) -> str:
        if self.at_end():
            raise self.error("Unexpected end of scene description")
        token = self.tokens[self.position]
        self.position += 1
        return token

    def expect(self, expected: str) -> None:
        if self.peek() != expected:
            raise self.error(f"Expected {expected!r}")
        self.position += 1

    def read_int(self) -> int:
        if self.at_end():
            raise self.error("Expected an integer")
        try:
            value = int(self.tokens[self.position])
        except ValueError:
            raise self.error("Expected an integer") from None
        self.position += 1
        return value

    def read_float(self) -> float:
        if self.at_end():
            raise self.error("Expected a number")
        try:
            value = float(self.tokens[self.position])
        except ValueError:
            raise self.error("Expected a number") from None
        if not np.isfinite(value):
            raise self.error("Expected a finite number")
        self.position += 1
        return value

    def read_vector(self) -> np.ndarray:
        return frozen_vector([self.read_float(), self.read_float(), self.read_float()])

    def read_color(self) -> np.ndarray:
        channels = []
        for _ in range(3):
            channel = self.read_int()
            if not 0 <= channel <= 255:
                self.position -= 1
                raise self.error("Color channels must be in 0..255")
            channels.append(channel)
        return frozen_vector(new_color(*channels))

    def read_fields(self, readers: Dict[str, Callable[[], object]]) -> Dict[str, object]:
        """Reads `{ key value ... }` where every key in readers appears exactly once, in any order."""
        self.expect("{")
        values: Dict[str, object] = {}
        while len(values) < len(readers):
            name = self.peek()
            if name not in readers or name in values:
                raise self.error(f"Expected one of {sorted(set(readers) - set(values))}")
            self.position += 1
            values[name] = readers[name]()
        self.expect("}")
        return values


def tokenize(text: str) -> List[str]:
    return text.split()


def _read_frame_settings(stream: _TokenStream) -> Tuple[int, int]:
    stream.expect("FrameSettings")
    values = stream.read_fields({"frameWidth": stream.read_int, "frameHeight": stream.read_int})
    width, height = int(values["frameWidth"]), int(values["frameHeight"])
    if width <= 0 or height <= 0:
        raise SceneParseError(f"Frame size must be positive, got {width}x{height}")
    return width, height


def _read_camera(stream: _TokenStream, frame_width: int, frame_height: int) -> Camera:
    stream.expect("Camera")
    values = stream.read_fields(
        {
            "position": stream.read_vector,
            "yaw": stream.read_float,
            "pitch": stream.read_float,
            "roll": stream.read_float,
            "fov": stream.read_float,
            "aspectRatio": stream.read_float,
        }
    )
    return Camera(
        values["position"],
        values["yaw"],
        values["pitch"],
        values["roll"],
        values["fov"],
        values["aspectRatio"],
        frame_width,
        frame_height,
    )


def _read_light(stream: _TokenStream) -> Light:
    stream.expect("Light")
    values = stream.read_fields(
        {"position": stream.read_vector, "color": stream.read_color, "power": stream.read_float}
    )
    return Light(values["position"], values["color"], values["power"])


def _read_geometry(stream: _TokenStream) -> Geometry:
    name = stream.peek()
    if name == "Sphere":
        stream.next()
        stream.expect("{")
        stream.expect("center")
        center = stream.read_vector()
        stream.expect("radius")
        radius = stream.read_float()
        stream.expect("}")
        return Sphere(center, radius)
    if name == "Plane":
        stream.next()
        stream.expect("{")
        stream.expect("center")
        center = stream.read_vector()
        stream.expect("limit")
        limit = stream.read_float()
        stream.expect("orientation")
        orientation_name = stream.peek()
        if orientation_name not in PlaneOrientation.__members__:
            raise stream.error("Expected plane orientation XY, XZ or YZ")
        stream.next()
        stream.expect("}")
        return Plane(center, limit, PlaneOrientation[orientation_name])
    if name == "Cube":
        stream.next()
        stream.expect("{")
        stream.expect("center")
        center = stream.read_vector()
        stream.expect("edge")
        edge = stream.read_float()
        stream.expect("}")
        return Cube(center, edge)
    raise stream.error("Expected geometry Sphere, Plane or Cube")


def _read_texture(stream: _TokenStream) -> Texture:
    name = stream.peek()
    if name == "SimpleColor":
        stream.next()
        stream.expect("{")
        stream.expect("color")
        color = stream.read_color()
        stream.expect("}")
        return SimpleColor(color)
    if name == "Checker":
        stream.next()
        stream.expect("{")
        stream.expect("color1")
        color1 = stream.read_color()
        stream.expect("color2")
        color2 = stream.read_color()
        stream.expect("scale")
        scale = stream.read_float()
        stream.expect("}")
        return Checker(color1, color2, scale)
    raise stream.error("Expected texture SimpleColor or Checker")


def _read_shader(stream: _TokenStream) -> Shader:
    name = stream.peek()
    if name not in ("Lambert", "Phong"):
        raise stream.error("Expected shader Lambert or Phong")
    stream.next()
    stream.expect("{")
    stream.expect("color")
    color = stream.read_color()
    stream.expect("texture")
    texture = _read_texture(stream)
    if name == "Lambert":
        stream.expect("}")
        return Lambert(color, texture)

    stream.expect("specularMultiplier")
    specular_multiplier = stream.read_float()
    stream.expect("specularExponent")
    specular_exponent = stream.read_float()
    stream.expect("}")
    return Phong(color, texture, specular_multiplier, specular_exponent)


def _read_node(stream: _TokenStream) -> Node:
    stream.expect("Node")
    stream.expect("{")
    stream.expect("geometry")
    geometry = _read_geometry(stream)
    stream.expect("shader")
    shader = _read_shader(stream)
    stream.expect("}")
    return Node(geometry=geometry, shader=shader)


def parse_scene(text: str) -> SceneDescription:
    stream = _TokenStream(tokenize(text))
    frame_width, frame_height = _read_frame_settings(stream)
    camera = _read_camera(stream, frame_width, frame_height)
    stream.expect("AmbientLight")
    ambient_light = stream.read_color()

    lights: List[Light] = []
    while stream.peek() == "Light":
        lights.append(_read_light(stream))

    nodes: List[Node] = []
    while stream.peek() == "Node":
        nodes.append(_read_node(stream))

    if not stream.at_end():
        raise stream.error("Unexpected token after scene description")
    return SceneDescription(frame_width, frame_height, camera, ambient_light, lights, nodes)


def parse_scene_file(file_path: str) -> SceneDescription:
    with open(file_path, 'r', encoding='utf-8') as f:
        try:
            text = f.read()
        except UnicodeDecodeError as error:
            raise SceneParseError(
                f"Scene file {file_path!r} is not valid UTF-8: {error.reason} at byte {error.start}"
            ) from error
    return parse_scene(text)


def default_scene_description() -> SceneDescription:
    """Built-in demo: blue floor, yellow sphere above it, one white light."""
    frame_width, frame_height = 640, 480
    camera = Camera([60.0, 60.0, -100.0], 0.0, 30.0, 0.0, 90.0, frame_width / frame_height, frame_width, frame_height)
    floor = Node(
        geometry=Plane([0.0, 0.0, 0.0], 300.0, PlaneOrientation.XZ),
        shader=Lambert(new_color(0, 0, 0), SimpleColor(new_color(0, 0, 255))),
    )
    ball = Node(
        geometry=Sphere([0.0, 70.0, 0.0], 20.0),
        shader=Lambert(new_color(0, 255, 0), SimpleColor(new_color(255, 255, 0))),
    )
    light = Light([35.0, 180.0, -100.0], new_color(255, 255, 255), 25000.0)
    return SceneDescription(
        frame_width,
        frame_height,
        camera,
        frozen_vector(new_color(255, 255, 255)),
        [light],
        [floor, ball],
    )
