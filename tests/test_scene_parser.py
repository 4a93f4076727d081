"""Unit tests for the scene description reader.

Tests cover:
- A full scene with every geometry, shader and texture kind
- Key/value blocks in any order
- Malformed input raising SceneParseError
- The built-in default scene
"""

import numpy as np
import pytest

from scene_parser import (
    SceneDescription,
    SceneParseError,
    default_scene_description,
    parse_scene,
    parse_scene_file,
)
from surfaces.cube import Cube
from surfaces.plane import Plane, PlaneOrientation
from surfaces.sphere import Sphere
from typings.shader import Lambert, Phong
from typings.texture import Checker, SimpleColor

FULL_SCENE = """
FrameSettings { frameWidth 320 frameHeight 240 }
Camera { position 60 60 -100 yaw 0 pitch 30 roll 0 fov 90 aspectRatio 1.3333 }
AmbientLight 255 255 255
Light { position 35 180 -100 color 255 255 255 power 25000 }
Light { power 100 color 255 0 0 position 0 10 0 }
Node {
    geometry Plane { center 0 0 0 limit 300 orientation XZ }
    shader Lambert { color 0 0 0 texture SimpleColor { color 0 0 255 } }
}
Node {
    geometry Sphere { center 0 70 0 radius 20 }
    shader Phong { color 0 255 0 texture Checker { color1 255 0 0 color2 0 255 0 scale 50 }
                   specularMultiplier 5.3 specularExponent 20 }
}
Node {
    geometry Cube { center 10 10 10 edge 4 }
    shader Lambert { color 255 255 255 texture SimpleColor { color 255 255 0 } }
}
"""

MINIMAL_HEADER = """
FrameSettings { frameWidth 4 frameHeight 3 }
Camera { position 0 0 0 yaw 0 pitch 0 roll 0 fov 60 aspectRatio 1 }
AmbientLight 10 20 30
"""


class TestParseScene:
    """Tests for well-formed scene descriptions."""

    def test_full_scene(self):
        description = parse_scene(FULL_SCENE)
        assert isinstance(description, SceneDescription)
        assert (description.frame_width, description.frame_height) == (320, 240)
        assert np.allclose(description.camera.position, [60.0, 60.0, -100.0])
        assert description.camera.pitch == 30.0
        assert description.camera.frame_width == 320
        assert np.allclose(description.ambient_light, [1.0, 1.0, 1.0])
        assert len(description.lights) == 2
        assert len(description.nodes) == 3

    def test_lights_in_any_key_order(self):
        description = parse_scene(FULL_SCENE)
        light = description.lights[1]
        assert np.allclose(light.position, [0.0, 10.0, 0.0])
        assert np.allclose(light.color, [1.0, 0.0, 0.0])
        assert light.power == 100.0

    def test_geometry_and_shaders(self):
        plane_node, sphere_node, cube_node = parse_scene(FULL_SCENE).nodes

        assert isinstance(plane_node.geometry, Plane)
        assert plane_node.geometry.orientation is PlaneOrientation.XZ
        assert plane_node.geometry.limit == 300.0
        assert isinstance(plane_node.shader, Lambert)
        assert isinstance(plane_node.shader.texture, SimpleColor)
        assert np.allclose(plane_node.shader.texture.color, [0.0, 0.0, 1.0])

        assert isinstance(sphere_node.geometry, Sphere)
        assert sphere_node.geometry.radius == 20.0
        assert isinstance(sphere_node.shader, Phong)
        assert sphere_node.shader.specular_multiplier == 5.3
        assert sphere_node.shader.specular_exponent == 20.0
        assert isinstance(sphere_node.shader.texture, Checker)
        assert sphere_node.shader.texture.scale == 50.0

        assert isinstance(cube_node.geometry, Cube)
        assert cube_node.geometry.edge == 4.0
        assert np.allclose(cube_node.geometry.center, [10.0, 10.0, 10.0])

    def test_no_lights_or_nodes(self):
        description = parse_scene(MINIMAL_HEADER)
        assert description.lights == []
        assert description.nodes == []
        assert np.allclose(description.ambient_light, np.array([10, 20, 30]) / 255.0)

    def test_build_scene(self):
        scene = parse_scene(FULL_SCENE).build_scene()
        assert len(scene.nodes) == 3
        assert len(scene.lights) == 2

    def test_parse_scene_file(self, tmp_path):
        path = tmp_path / "scene.txt"
        path.write_text(FULL_SCENE)
        assert len(parse_scene_file(str(path)).nodes) == 3

    def test_missing_file_raises_os_error(self, tmp_path):
        with pytest.raises(OSError):
            parse_scene_file(str(tmp_path / "missing.txt"))

    def test_non_utf8_file_raises_parse_error(self, tmp_path):
        path = tmp_path / "binary.txt"
        path.write_bytes(b"FrameSettings { frameWidth \xff\xfe }")
        with pytest.raises(SceneParseError, match="not valid UTF-8"):
            parse_scene_file(str(path))


class TestMalformedScenes:
    """Every deviation from the grammar is a hard failure."""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "Camera { }",
            "FrameSettings { frameWidth 640 }",
            "FrameSettings { frameWidth 640 frameHeight abc }",
            "FrameSettings { frameWidth 640.5 frameHeight 480 }",
            "FrameSettings { frameWidth 0 frameHeight 480 }",
            "FrameSettings { frameWidth 640 frameWidth 640 }",
            MINIMAL_HEADER.replace("AmbientLight 10 20 30", "AmbientLight 10 20 300"),
            MINIMAL_HEADER.replace("AmbientLight 10 20 30", "AmbientLight 10 20"),
            MINIMAL_HEADER.replace("fov 60", "fov sixty"),
            MINIMAL_HEADER.replace("fov 60", "zoom 60"),
            MINIMAL_HEADER + "Light { position 0 0 0 color 1 1 1 }",
            MINIMAL_HEADER + "Node { geometry Torus { center 0 0 0 radius 1 } }",
            MINIMAL_HEADER + "Node { geometry Plane { center 0 0 0 limit 10 orientation XW }"
            " shader Lambert { color 0 0 0 texture SimpleColor { color 1 1 1 } } }",
            MINIMAL_HEADER + "Node { geometry Sphere { center 0 0 0 radius 1 }"
            " shader Blinn { color 0 0 0 texture SimpleColor { color 1 1 1 } } }",
            MINIMAL_HEADER + "Node { geometry Sphere { center 0 0 0 radius 1 }"
            " shader Lambert { color 0 0 0 texture Marble { color 1 1 1 } } }",
            MINIMAL_HEADER + "Node { geometry Sphere { center 0 0 0 radius 1 }"
            " shader Phong { color 0 0 0 texture SimpleColor { color 1 1 1 } specularMultiplier 1 } }",
            MINIMAL_HEADER + "Node { geometry Sphere { center 0 0 0 radius 1 }",
            MINIMAL_HEADER + "Extra tokens",
        ],
    )
    def test_rejected(self, text):
        with pytest.raises(SceneParseError):
            parse_scene(text)

    def test_error_reports_token(self):
        with pytest.raises(SceneParseError) as excinfo:
            parse_scene(MINIMAL_HEADER.replace("fov 60", "fov sixty"))
        assert excinfo.value.token == "sixty"
        assert "sixty" in str(excinfo.value)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_scene("nonsense")


class TestDefaultScene:
    """Tests for the built-in demo scene."""

    def test_contents(self):
        description = default_scene_description()
        assert (description.frame_width, description.frame_height) == (640, 480)
        assert len(description.lights) == 1
        assert description.lights[0].power == 25000.0
        plane_node, sphere_node = description.nodes
        assert isinstance(plane_node.geometry, Plane)
        assert isinstance(sphere_node.geometry, Sphere)
        assert np.allclose(sphere_node.geometry.center, [0.0, 70.0, 0.0])
