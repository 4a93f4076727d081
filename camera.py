import math

import numpy as np

from scene_settings import REFERENCE_FRAME_HEIGHT, REFERENCE_FRAME_WIDTH
from typings.ray import Ray
from utils.vector_operations import (
    frozen_vector,
    matrix_multiply,
    multiply_vector_matrix,
    normalize_vector,
    rotation_around_x,
    rotation_around_y,
    rotation_around_z,
    to_radians,
)

FRAMING_SCALE: float = 1.5  # screen rectangle is widened by this factor


class Camera:
    def __init__(
        self,
        position: np.ndarray,
        yaw: float,
        pitch: float,
        roll: float,
        fov: float,
        aspect_ratio: float,
        frame_width: int = REFERENCE_FRAME_WIDTH,
        frame_height: int = REFERENCE_FRAME_HEIGHT,
    ) -> None:
        self.position = frozen_vector(position)
        self.yaw = float(yaw)
        self.pitch = float(pitch)
        self.roll = float(roll)
        self.fov = float(fov)
        self.aspect_ratio = float(aspect_ratio)
        self.frame_width = int(frame_width)
        self.frame_height = int(frame_height)
        if self.frame_width <= 0 or self.frame_height <= 0:
            raise ValueError(f"Invalid frame size {self.frame_width}x{self.frame_height}")

        self._recompute_screen()

    def _recompute_screen(self) -> None:
        """Screen rectangle at depth 1 in camera space, rotated about the fixed world axes
        (roll around X, pitch around Y, yaw around Z) and moved to the camera position."""
        wanted_length = math.tan(to_radians(self.fov / 2.0))
        hypot_length = math.sqrt(self.aspect_ratio * self.aspect_ratio + 1.0)
        scale_factor = wanted_length / hypot_length

        x2d = self.aspect_ratio * scale_factor * FRAMING_SCALE
        y2d = scale_factor * FRAMING_SCALE

        rotation = matrix_multiply(
            matrix_multiply(rotation_around_x(to_radians(self.roll)), rotation_around_y(to_radians(self.pitch))),
            rotation_around_z(to_radians(self.yaw)),
        )

        self.top_left = frozen_vector(multiply_vector_matrix([-x2d, y2d, 1.0], rotation) + self.position)
        self.top_right = frozen_vector(multiply_vector_matrix([x2d, y2d, 1.0], rotation) + self.position)
        self.bottom_left = frozen_vector(multiply_vector_matrix([-x2d, -y2d, 1.0], rotation) + self.position)

    def with_frame_size(self, frame_width: int, frame_height: int) -> "Camera":
        return Camera(
            self.position, self.yaw, self.pitch, self.roll, self.fov, self.aspect_ratio, frame_width, frame_height
        )

    def get_screen_ray(self, x: float, y: float) -> Ray:
        width = self.top_right - self.top_left
        height = self.bottom_left - self.top_left
        screen_point = (
            self.top_left
            + width * (float(x) / self.frame_width)
            + height * (float(y) / self.frame_height)
        )
        direction = normalize_vector(screen_point - self.position)
        return Ray(origin=self.position, direction=direction)
