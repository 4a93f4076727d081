from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from utils.vector_operations import frozen_vector


@dataclass(frozen=True, slots=True, eq=False)
class Light:
    """Point light. color is in [0, 1] per channel, power scales it before the 1/d^2 falloff."""
    position: np.ndarray
    color: np.ndarray
    power: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", frozen_vector(self.position))
        object.__setattr__(self, "color", frozen_vector(self.color))
        object.__setattr__(self, "power", float(self.power))
