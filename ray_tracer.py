import argparse
import re
import sys
import time
from typing import List, Sequence

from image_saver import PNGSaver
from renderer import RenderManager, RenderState
from scene_parser import SceneDescription, SceneParseError, default_scene_description, parse_scene_file
from scene_settings import RenderSettings

USAGE = "ray_tracer.py [-s|-sceneFile <path>] [-o|-outputFile <path>] [-d|-display T|F] [-h|-help]"


class UsageError(Exception):
    pass


class _ArgumentParser(argparse.ArgumentParser):
    # argparse exits on bad input; we print the usage and keep going instead
    def error(self, message: str) -> None:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(description='Python Ray Tracer', usage=USAGE, add_help=False)
    parser.add_argument('-s', '-sceneFile', dest='scene_file', type=str, default=None, help='Path to the scene file')
    parser.add_argument('-o', '-outputFile', dest='output_file', type=str, default=None, help='Path of the PNG to write')
    parser.add_argument('-d', '-display', dest='display', type=str, default='F', help='Show a window while rendering (T or F)')
    parser.add_argument('-h', '-help', dest='help', action='store_true', help='Print this help')
    parser.add_argument('--workers', type=int, default=None, help='Number of render threads')
    parser.add_argument('--accumulate-lights', action='store_true', help='Sum all lights in Lambert shading')
    parser.add_argument('--single-ambient', action='store_true', help='Apply the ambient light once in Phong shading')
    parser.add_argument('--legacy-screen', action='store_true', help='Map screen rays against 640x480 whatever the frame size')
    return parser


def _drop_failed_option(argv: List[str], message: str) -> List[str]:
    """Removes the option argparse complained about, together with its values."""
    match = re.match(r"argument ([^:]+):", message)
    if match is None:
        return []
    failed_names = match.group(1).split('/')
    kept: List[str] = []
    dropping = False
    for token in argv:
        if token.startswith('-') and len(token) > 1 and not _is_number(token):
            option = token.split('=', 1)[0]
            dropping = any(name.startswith(option) for name in failed_names)
        if not dropping:
            kept.append(token)
    if len(kept) == len(argv):
        return []
    return kept


def _is_number(token: str) -> bool:
    try:
        float(token)
    except ValueError:
        return False
    return True


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parses the command line. Bad or unknown flags print the usage and are skipped."""
    parser = build_parser()
    remaining = list(sys.argv[1:] if argv is None else argv)
    while True:
        try:
            args, unknown = parser.parse_known_args(remaining)
            break
        except UsageError as error:
            print(f"[error] {error}")
            print(f"usage: {USAGE}")
            remaining = _drop_failed_option(remaining, str(error))
    if unknown:
        print(f"[error] unrecognized arguments: {' '.join(unknown)}")
        print(f"usage: {USAGE}")
    if args.display not in ('T', 'F'):
        print(f"[error] -display expects T or F, got {args.display!r}")
        print(f"usage: {USAGE}")
        args.display = 'F'
    if args.help:
        parser.print_help()
    return args


def settings_from_arguments(args: argparse.Namespace) -> RenderSettings:
    options = dict(
        lambert_accumulate_lights=args.accumulate_lights,
        phong_double_ambient=not args.single_ambient,
        legacy_screen_mapping=args.legacy_screen,
    )
    if args.workers is not None and args.workers > 0:
        options['worker_count'] = args.workers
    return RenderSettings(**options)


def log_phase(label: str, seconds: float) -> None:
    print(f"[phase] {label}: {seconds:.2f}s")


def main(argv: List[str] | None = None) -> int:
    args = parse_arguments(argv)

    parse_start = time.perf_counter()
    try:
        if args.scene_file:
            description: SceneDescription = parse_scene_file(args.scene_file)
        else:
            description = default_scene_description()
    except (SceneParseError, OSError) as error:
        print(f"[error] could not read scene: {error}")
        return 1
    log_phase("parse_scene", time.perf_counter() - parse_start)

    manager = RenderManager(settings_from_arguments(args))
    manager.setup(description)
    width, height = manager.frame_width, manager.frame_height

    display = None
    if args.display == 'T':
        # pygame is only needed when a window is requested
        from display import DisplayError, DisplayWindow
        try:
            display = DisplayWindow(width, height, "Python Ray Tracer")
        except DisplayError as error:
            print(f"[error] {error}")

    saver = None
    if args.output_file:
        saver = PNGSaver(width, height, args.output_file)
        try:
            saver.open()
        except OSError as error:
            print(f"[error] could not open output file: {error}")
            saver = None

    render_start = time.perf_counter()
    pixel_count = 0
    for pixel in manager.render():
        pixel_count += 1
        if saver is not None:
            saver.set_pixel(pixel.x, pixel.y, pixel.color)
        if display is not None:
            display.draw_pixel(pixel.x, pixel.y, pixel.color)
            if pixel_count % width == 0:
                display.present()
                if display.poll_quit():
                    manager.cancel()
    state = manager.wait()
    log_phase("render", time.perf_counter() - render_start)

    if state is RenderState.FAILED:
        print(f"[error] render failed: {manager.error!r}")
    print(f"[stats] frame={width}x{height}, pixels={pixel_count}, state={state.value}")

    if saver is not None:
        save_start = time.perf_counter()
        try:
            if state is RenderState.FINISHED:
                saver.save()
        except OSError as error:
            print(f"[error] could not save image: {error}")
        finally:
            saver.close()
        log_phase("save_image", time.perf_counter() - save_start)

    if display is not None:
        display.present()
        if state is RenderState.FINISHED:
            display.wait_exit()
        display.close()

    return 0 if state is RenderState.FINISHED else 1


if __name__ == '__main__':
    program_start = time.time()
    readable_start = time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(program_start))
    print(f"[timer] Program started at {readable_start}")
    try:
        exit_code = main()
    finally:
        program_end = time.time()
        readable_end = time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(program_end))
        elapsed = program_end - program_start
        print(f"[timer] Program ended at {readable_end} (elapsed {elapsed:.2f}s)")
    raise SystemExit(exit_code)
