from __future__ import annotations

import queue
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

import numpy as np

from camera import Camera
from scene import Scene
from scene_parser import SceneDescription, parse_scene_file
from scene_settings import RenderSettings
from typings.ray import Ray
from utils.shadow_utils import find_closest_hit
from utils.vector_operations import frozen_vector

STREAM_POLL_SECONDS: float = 0.05


class RenderState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (RenderState.FINISHED, RenderState.FAILED, RenderState.CANCELLED)


@dataclass(frozen=True, slots=True)
class Pixel:
    x: int
    y: int
    color: np.ndarray


class PixelStream:
    """Iterator over the pixels of one render. Ends when the render is over and every pixel was consumed."""

    def __init__(self, pixel_queue: queue.Queue, closed: threading.Event) -> None:
        self._queue = pixel_queue
        self._closed = closed

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def __iter__(self) -> Iterator[Pixel]:
        while True:
            try:
                pixel = self._queue.get(timeout=STREAM_POLL_SECONDS)
            except queue.Empty:
                if self._closed.is_set() and self._queue.empty():
                    return
                continue
            yield pixel


def raytrace(ray: Ray, scene: Scene, settings: RenderSettings) -> np.ndarray:
    closest = find_closest_hit(ray, scene.nodes)
    if closest is None:
        return np.array(settings.background_color, dtype=float)
    node, hit = closest
    return node.shader.shade(ray, hit, scene, settings)


class RenderManager:
    """Renders one frame. Each column is a thread-pool task that owns its frame-buffer cells."""

    def __init__(self, settings: RenderSettings | None = None) -> None:
        self.settings: RenderSettings = settings or RenderSettings()
        self._frame_width: int = 0
        self._frame_height: int = 0
        self._camera: Camera | None = None
        self._scene: Scene | None = None
        self._frame_buffer: np.ndarray | None = None
        self._state: RenderState = RenderState.NOT_STARTED
        self._state_lock = threading.Lock()
        self._cancel_event = threading.Event()
        self._driver: threading.Thread | None = None
        self._error: BaseException | None = None

    @property
    def frame_width(self) -> int:
        return self._frame_width

    @property
    def frame_height(self) -> int:
        return self._frame_height

    @property
    def camera(self) -> Camera | None:
        return self._camera

    @property
    def scene(self) -> Scene | None:
        return self._scene

    @property
    def error(self) -> BaseException | None:
        """Exception that failed the render, if any."""
        return self._error

    def setup(self, description: SceneDescription) -> None:
        if self._state is not RenderState.NOT_STARTED:
            raise RuntimeError(f"Cannot set up a renderer in state {self._state.value}")
        self._frame_width = int(description.frame_width)
        self._frame_height = int(description.frame_height)
        screen_width, screen_height = self.settings.screen_size(self._frame_width, self._frame_height)
        self._camera = description.camera.with_frame_size(screen_width, screen_height)
        self._scene = description.build_scene()
        self._frame_buffer = np.zeros((self._frame_height, self._frame_width, 3), dtype=float)

    def setup_from_file(self, file_path: str) -> None:
        self.setup(parse_scene_file(file_path))

    def render_state(self) -> RenderState:
        return self._state

    def get_frame_buffer(self) -> np.ndarray:
        if self._frame_buffer is None:
            raise RuntimeError("Renderer has not been set up")
        return self._frame_buffer

    def render(self) -> PixelStream:
        """Starts rendering in the background and returns the pixel stream right away."""
        if self._scene is None or self._camera is None:
            raise RuntimeError("setup() must be called before render()")
        with self._state_lock:
            if self._state is not RenderState.NOT_STARTED:
                raise RuntimeError(f"Cannot start a render in state {self._state.value}")
            self._state = RenderState.IN_PROGRESS

        pixel_queue: queue.Queue = queue.Queue(maxsize=self.settings.queue_size)
        closed = threading.Event()
        self._driver = threading.Thread(
            target=self._drive, args=(pixel_queue, closed), name="render-driver", daemon=True
        )
        self._driver.start()
        return PixelStream(pixel_queue, closed)

    def cancel(self) -> None:
        """Asks the workers to stop. The stream still closes and the state becomes CANCELLED."""
        self._cancel_event.set()

    def wait(self, timeout: float | None = None) -> RenderState:
        if self._driver is not None:
            self._driver.join(timeout)
        return self._state

    def _drive(self, pixel_queue: queue.Queue, closed: threading.Event) -> None:
        complete = True
        try:
            with ThreadPoolExecutor(
                max_workers=self.settings.worker_count, thread_name_prefix="render-column"
            ) as executor:
                futures = [
                    executor.submit(self._render_column, x, pixel_queue) for x in range(self._frame_width)
                ]
                for future in as_completed(futures):
                    error = future.exception()
                    if error is not None:
                        complete = False
                        if self._error is None:
                            self._error = error
                            self._cancel_event.set()
                    elif not future.result():
                        complete = False
        except Exception as error:
            complete = False
            if self._error is None:
                self._error = error
            self._cancel_event.set()
        finally:
            with self._state_lock:
                if self._error is not None:
                    self._state = RenderState.FAILED
                elif not complete:
                    self._state = RenderState.CANCELLED
                else:
                    self._state = RenderState.FINISHED
            closed.set()

    def _render_column(self, x: int, pixel_queue: queue.Queue) -> bool:
        """Renders every row of column x. Returns False if cancelled part way."""
        camera = self._camera
        scene = self._scene
        frame_buffer = self._frame_buffer
        for y in range(self._frame_height):
            if self._cancel_event.is_set():
                return False
            ray = camera.get_screen_ray(x, y)
            color = raytrace(ray, scene, self.settings)
            frame_buffer[y, x, :] = color
            if not self._publish(pixel_queue, Pixel(x, y, frozen_vector(color))):
                return False
        return True

    def _publish(self, pixel_queue: queue.Queue, pixel: Pixel) -> bool:
        # blocks while the queue is full, but gives up once the render is cancelled
        while True:
            try:
                pixel_queue.put(pixel, timeout=STREAM_POLL_SECONDS)
                return True
            except queue.Full:
                if self._cancel_event.is_set():
                    return False
