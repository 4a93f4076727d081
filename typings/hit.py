from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, slots=True)
class Hit:
    """Result of a ray-surface intersection.

    distance is the ray parameter t (>= 0), normal is unit length and faces
    against the incoming ray, u/v are surface coordinates for texture lookup.
    """
    distance: float
    position: np.ndarray
    normal: np.ndarray
    u: float = 0.0
    v: float = 0.0
