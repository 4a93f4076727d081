"""Tests for the command line entry point."""

from PIL import Image

from ray_tracer import main, parse_arguments, settings_from_arguments

SMALL_SCENE = """
FrameSettings { frameWidth 16 frameHeight 12 }
Camera { position 0 0 -10 yaw 0 pitch 0 roll 0 fov 60 aspectRatio 1.333 }
AmbientLight 255 255 255
Light { position 0 10 -10 color 255 255 255 power 500 }
Node {
    geometry Sphere { center 0 0 0 radius 2 }
    shader Phong { color 255 0 0 texture Checker { color1 255 255 255 color2 0 0 0 scale 2 } specularMultiplier 1 specularExponent 8 }
}
"""


class TestParseArguments:
    """Tests for flag handling."""

    def test_defaults(self):
        args = parse_arguments([])
        assert args.scene_file is None
        assert args.output_file is None
        assert args.display == "F"
        assert args.help is False

    def test_short_and_long_flags(self):
        args = parse_arguments(["-sceneFile", "a.scene", "-o", "b.png", "-display", "T"])
        assert (args.scene_file, args.output_file, args.display) == ("a.scene", "b.png", "T")

    def test_help_prints_usage(self, capsys):
        args = parse_arguments(["-help"])
        assert args.help is True
        assert "-sceneFile" in capsys.readouterr().out

    def test_unknown_flag_keeps_going(self, capsys):
        args = parse_arguments(["-s", "a.scene", "--bogus"])
        assert args.scene_file == "a.scene"
        out = capsys.readouterr().out
        assert "[error]" in out
        assert "usage:" in out

    def test_bad_display_value_falls_back(self, capsys):
        args = parse_arguments(["-d", "maybe"])
        assert args.display == "F"
        assert "[error]" in capsys.readouterr().out

    def test_bad_value_falls_back_to_defaults(self, capsys):
        args = parse_arguments(["--workers", "many"])
        assert args.workers is None
        assert "usage:" in capsys.readouterr().out

    def test_bad_value_keeps_other_flags(self, capsys):
        args = parse_arguments(["-s", "my.scene", "--workers", "many", "-o", "out.png", "--accumulate-lights"])
        assert args.scene_file == "my.scene"
        assert args.output_file == "out.png"
        assert args.accumulate_lights is True
        assert args.workers is None
        assert "invalid int value" in capsys.readouterr().out

    def test_missing_value_keeps_other_flags(self, capsys):
        args = parse_arguments(["--single-ambient", "-o", "out.png", "-s"])
        assert args.scene_file is None
        assert args.output_file == "out.png"
        assert args.single_ambient is True
        assert "expected one argument" in capsys.readouterr().out


class TestSettingsFromArguments:
    """Tests for mapping flags onto RenderSettings."""

    def test_defaults(self):
        settings = settings_from_arguments(parse_arguments([]))
        assert settings.lambert_accumulate_lights is False
        assert settings.phong_double_ambient is True
        assert settings.legacy_screen_mapping is False

    def test_flags(self):
        settings = settings_from_arguments(
            parse_arguments(["--workers", "3", "--accumulate-lights", "--single-ambient", "--legacy-screen"])
        )
        assert settings.worker_count == 3
        assert settings.lambert_accumulate_lights is True
        assert settings.phong_double_ambient is False
        assert settings.legacy_screen_mapping is True


class TestMain:
    """End-to-end runs on a small scene."""

    def test_renders_scene_to_png(self, tmp_path, capsys):
        scene_path = tmp_path / "small.scene"
        scene_path.write_text(SMALL_SCENE)
        output_path = tmp_path / "small.png"

        exit_code = main(["-s", str(scene_path), "-o", str(output_path), "--workers", "2"])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "[phase] parse_scene" in out
        assert "[stats] frame=16x12, pixels=192, state=finished" in out
        with Image.open(output_path) as image:
            assert image.size == (16, 12)
            # sky stays white
            assert image.getpixel((0, 0)) == (255, 255, 255)

    def test_missing_scene_file(self, tmp_path, capsys):
        exit_code = main(["-s", str(tmp_path / "missing.scene")])
        assert exit_code == 1
        assert "[error]" in capsys.readouterr().out

    def test_malformed_scene_file(self, tmp_path, capsys):
        scene_path = tmp_path / "broken.scene"
        scene_path.write_text("FrameSettings { frameWidth 16 }")
        output_path = tmp_path / "broken.png"

        exit_code = main(["-s", str(scene_path), "-o", str(output_path)])

        assert exit_code == 1
        assert "[error]" in capsys.readouterr().out
        assert not output_path.exists()

    def test_non_utf8_scene_file(self, tmp_path, capsys):
        scene_path = tmp_path / "binary.scene"
        scene_path.write_bytes(b"FrameSettings { frameWidth \xff\xfe }")

        exit_code = main(["-s", str(scene_path)])

        assert exit_code == 1
        assert "[error] could not read scene" in capsys.readouterr().out
