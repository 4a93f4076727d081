from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

import numpy as np

from typings.hit import Hit
from utils.vector_operations import frozen_vector

CHECKER_DETAIL: float = 5.0 # u/v units per checker cell at scale 1


@dataclass(frozen=True, slots=True, eq=False)
class SimpleColor:
    color: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "color", frozen_vector(self.color))

    def sample(self, hit: Hit) -> np.ndarray:
        return self.color


@dataclass(frozen=True, slots=True, eq=False)
class Checker:
    color1: np.ndarray
    color2: np.ndarray
    scale: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "color1", frozen_vector(self.color1))
        object.__setattr__(self, "color2", frozen_vector(self.color2))
        object.__setattr__(self, "scale", float(self.scale))

    def sample(self, hit: Hit) -> np.ndarray:
        cell_u = math.floor(hit.u * self.scale / CHECKER_DETAIL)
        cell_v = math.floor(hit.v * self.scale / CHECKER_DETAIL)
        if (cell_u + cell_v) % 2 == 0:
            return self.color1
        return self.color2


Texture = Union[SimpleColor, Checker]
