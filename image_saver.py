from __future__ import annotations

import numpy as np
from PIL import Image

from utils.vector_operations import color_to_rgb


class PNGSaver:
    """Collects pixels into an RGB image of exactly width x height and writes it as PNG."""

    def __init__(self, width: int, height: int, file_name: str) -> None:
        self.width = int(width)
        self.height = int(height)
        self.file_name = file_name
        self.image = Image.new("RGB", (self.width, self.height))
        self._file = None

    def open(self) -> None:
        """Creates (or truncates) the output file. Raises OSError on failure."""
        self._file = open(self.file_name, "wb")

    def set_pixel(self, x: int, y: int, color: np.ndarray) -> None:
        self.image.putpixel((int(x), int(y)), color_to_rgb(color))

    def save(self) -> None:
        if self._file is None:
            raise ValueError("PNGSaver.save() called before open()")
        self.image.save(self._file, format="PNG")
        self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> PNGSaver:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
