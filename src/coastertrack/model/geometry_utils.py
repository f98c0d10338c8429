from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from math import pi
import numpy as np

from coastertrack.config import LENGTH_EPSILON

if TYPE_CHECKING:
    from numpy import typing as npt


def deg2rad(degrees: float) -> float:
    return degrees * pi / 180


def as_vector3(value: Sequence[float] | npt.ArrayLike) -> npt.NDArray[np.float64]:
    """
    Convert any 3-element sequence into a fresh float64 array of shape (3,).

    Raises:
        ValueError: If the input does not hold exactly three components.
    """
    arr = np.array(value, dtype=np.float64).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3D vector, got shape {arr.shape}.")
    return arr


def is_finite_vector(vector: npt.NDArray[np.float64]) -> bool:
    return bool(np.all(np.isfinite(vector)))


def normalize(
    vector: npt.NDArray[np.float64],
    eps: float = LENGTH_EPSILON
) -> Optional[npt.NDArray[np.float64]]:
    """
    Return the unit vector in the direction of `vector`.

    Returns:
        A new array, or None if the vector is shorter than `eps` or not finite.
    """
    length = float(np.linalg.norm(vector))
    if not np.isfinite(length) or length <= eps:
        return None
    return vector / length


def regular_polygon(
    sides: int,
    radius: float,
) -> npt.NDArray[np.float64]:
    """
    Discretize a circle in the local XY plane into an (N, 2) ring.

    The ring is open (the last point is NOT repeated); edges wrap from the last
    point back to the first. Point k sits at angle 2*pi*k/N measured from the
    local +Y axis towards +X, so the first point is straight "up" in the frame.

    Args:
        sides: Number of ring points (and edges), at least 3.
        radius: Circumscribed radius of the polygon.

    Returns:
        An array of shape (sides, 2) containing the (x, y) ring points.
    """
    if sides < 3:
        raise ValueError(f"A ring needs at least 3 sides, got {sides}.")
    theta = np.arange(sides, dtype=np.float64) * (2.0 * np.pi / sides)
    return np.c_[radius * np.sin(theta), radius * np.cos(theta)]

