"""NumPy-backed helpers for vertex positions.

Positions are plain float64 numpy arrays of shape (3,).
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

Vec3 = NDArray[np.float64]


def as_vec3(v: ArrayLike) -> Vec3:
    """Coerce any 3-sequence to a float64 vector."""
    arr = np.asarray(v, dtype=np.float64).reshape(3)
    return arr.copy()


def mirror_position(position: ArrayLike, axis: int = 0) -> Vec3:
    """Reflect *position* through the plane where coordinate *axis* is zero."""
    p = as_vec3(position)
    p[axis] = -p[axis]
    return p


def squared_distance(a: ArrayLike, b: ArrayLike) -> float:
    d = as_vec3(a) - as_vec3(b)
    return float(np.dot(d, d))


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
