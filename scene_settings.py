from __future__ import annotations

import os
from dataclasses import dataclass, field

import numpy as np

from utils.vector_operations import frozen_vector

REFERENCE_FRAME_WIDTH: int = 640
REFERENCE_FRAME_HEIGHT: int = 480
DEFAULT_QUEUE_SIZE: int = 1024


def _default_worker_count() -> int:
    return os.cpu_count() or 4


@dataclass(frozen=True, eq=False)
class RenderSettings:
    """Render-wide options.

    lambert_accumulate_lights: sum every light in Lambert instead of keeping the last one.
    phong_double_ambient: multiply the Phong result by the ambient light a second time.
    legacy_screen_mapping: map screen fractions against 640x480 whatever the frame size.
    """
    background_color: np.ndarray = field(default_factory=lambda: frozen_vector([1.0, 1.0, 1.0]))
    worker_count: int = field(default_factory=_default_worker_count)
    queue_size: int = DEFAULT_QUEUE_SIZE
    lambert_accumulate_lights: bool = False
    phong_double_ambient: bool = True
    legacy_screen_mapping: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "background_color", frozen_vector(self.background_color))
        if int(self.worker_count) <= 0:
            raise ValueError(f"worker_count must be positive, got {self.worker_count}")
        if int(self.queue_size) <= 0:
            raise ValueError(f"queue_size must be positive, got {self.queue_size}")

    def screen_size(self, frame_width: int, frame_height: int) -> tuple[int, int]:
        """Frame size the camera divides pixel coordinates by."""
        if self.legacy_screen_mapping:
            return REFERENCE_FRAME_WIDTH, REFERENCE_FRAME_HEIGHT
        return frame_width, frame_height
