from __future__ import annotations

import math

import numpy as np

EPSILON: float = 1e-5 # small offset used for shadow-ray bias and near-zero checks
CUBE_EPSILON: float = 1e-6 # tolerance on cube face bounds (avoids flicker on edges)


def frozen_vector(v) -> np.ndarray:
    """Copies v into a float64 array that cannot be written to.
    Scene data is stored this way so render workers can share it without locks."""
    vector_array = np.array(v, dtype=float)
    vector_array.setflags(write=False)
    return vector_array


def vector_length(v: np.ndarray) -> float: #Euclidean length (magnitude) of a vector
    vector_array = np.asarray(v, dtype=float)
    return float(np.linalg.norm(vector_array))


def vector_length_squared(v: np.ndarray) -> float:
    vector_array = np.asarray(v, dtype=float)
    return float(np.dot(vector_array, vector_array))


def normalize_vector(v: np.ndarray) -> np.ndarray:
    vector_array = np.asarray(v, dtype=float)
    magnitude = np.linalg.norm(vector_array)
    if magnitude < EPSILON * EPSILON:
        raise ValueError("Cannot normalize near-zero vector")
    return vector_array / magnitude


def vector_add(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return np.asarray(a, dtype=float) + np.asarray(b, dtype=float)


def vector_subtract(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return np.asarray(a, dtype=float) - np.asarray(b, dtype=float)


def vector_scale(v: np.ndarray, multiplier: float) -> np.ndarray:
    return np.asarray(v, dtype=float) * float(multiplier)


def vector_dot(a: np.ndarray, b: np.ndarray) -> float:
    vector_a = np.asarray(a, dtype=float)
    vector_b = np.asarray(b, dtype=float)
    return float(np.dot(vector_a, vector_b))


def vector_cross(a: np.ndarray, b: np.ndarray) -> np.ndarray: #cross product of two vectors (3D)
    vector_a = np.asarray(a, dtype=float)
    vector_b = np.asarray(b, dtype=float)
    return np.cross(vector_a, vector_b)


def reflect_vector(I: np.ndarray, N: np.ndarray) -> np.ndarray:
    """Calculates the reflection vector R given the incident vector I and surface normal N.
       I is normalized first and R comes back normalized. Assumes I points toward the surface"""
    vector_I = normalize_vector(I)
    vector_N = np.asarray(N, dtype=float)
    return normalize_vector(vector_I - 2.0 * vector_dot(vector_I, vector_N) * vector_N)


def face_forward(direction: np.ndarray, normal: np.ndarray) -> np.ndarray:
    """Returns the normal flipped (if needed) so it points against direction."""
    vector_N = np.asarray(normal, dtype=float)
    if vector_dot(direction, vector_N) < 0.0:
        return vector_N
    return -vector_N


def to_radians(angle: float) -> float:
    return angle / 180.0 * math.pi


def to_degrees(angle: float) -> float:
    return angle * 180.0 / math.pi


def identity_matrix(diagonal_element: float = 1.0) -> np.ndarray:
    return np.eye(3, dtype=float) * float(diagonal_element)


def rotation_around_x(angle: float) -> np.ndarray:
    """Rotation about the world X axis by angle (radians), for row vectors (v' = v . M)."""
    sin = math.sin(angle)
    cos = math.cos(angle)
    return np.array([[1.0, 0.0, 0.0], [0.0, cos, -sin], [0.0, sin, cos]])


def rotation_around_y(angle: float) -> np.ndarray:
    sin = math.sin(angle)
    cos = math.cos(angle)
    return np.array([[cos, 0.0, sin], [0.0, 1.0, 0.0], [-sin, 0.0, cos]])


def rotation_around_z(angle: float) -> np.ndarray:
    sin = math.sin(angle)
    cos = math.cos(angle)
    return np.array([[cos, -sin, 0.0], [sin, cos, 0.0], [0.0, 0.0, 1.0]])


def matrix_multiply(lhs: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    return np.asarray(lhs, dtype=float) @ np.asarray(rhs, dtype=float)


def multiply_vector_matrix(v: np.ndarray, m: np.ndarray) -> np.ndarray:
    # row vector times matrix
    return np.asarray(v, dtype=float) @ np.asarray(m, dtype=float)


def matrix_determinant(m: np.ndarray) -> float:
    return float(np.linalg.det(np.asarray(m, dtype=float)))


def new_color(r: int, g: int, b: int) -> np.ndarray:
    """Builds a color from 8-bit channels, mapping 0..255 to 0.0..1.0."""
    return np.array([r, g, b], dtype=float) / 255.0


def clamp_color01(color_rgb: np.ndarray) -> np.ndarray:
    """Clamps an RGB color array to the range [0.0, 1.0]."""
    color_array = np.asarray(color_rgb, dtype=float)
    return np.clip(color_array, 0.0, 1.0)


def color_to_uint8(color_rgb: np.ndarray) -> np.ndarray:
    """Converts a floating-point RGB color array (clamped to [0, 1]) to 8-bit integer [0, 255]."""
    clamped_color = clamp_color01(color_rgb)
    return (clamped_color * 255.0 + 0.5).astype(np.uint8) # 0.5 before conversion ensures correct rounding


def color_to_rgb(color_rgb: np.ndarray) -> tuple[int, int, int]:
    r, g, b = color_to_uint8(color_rgb)
    return int(r), int(g), int(b)
