"""
Geometric Primitives for frame construction and extrusion.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

import numpy as np
from scipy.spatial.transform import Rotation

if TYPE_CHECKING:
    import numpy.typing as npt


def _frozen_array(value: npt.ArrayLike, shape: tuple[int, ...]) -> npt.NDArray[np.float64]:
    arr = np.array(value, dtype=np.float64)
    if arr.shape != shape:
        raise ValueError(f"Expected shape {shape}, got {arr.shape}.")
    arr.setflags(write=False)
    return arr


def rotate_about_axis(
    vectors: npt.ArrayLike,
    axis: npt.NDArray[np.float64],
    angle: float,
) -> npt.NDArray[np.float64]:
    """
    Rotate one vector (3,) or a stack of vectors (N, 3) about a unit `axis`
    by `angle` radians (right-hand rule).
    """
    rotation = Rotation.from_rotvec(np.asarray(axis, dtype=np.float64) * angle)
    return rotation.apply(np.asarray(vectors, dtype=np.float64))


def transform_by_basis(
    vector: npt.ArrayLike,
    basis: npt.NDArray[np.float64],
    origin: npt.NDArray[np.float64],
) -> npt.NDArray[np.float64]:
    """
    Express local coordinates in world space.

    Args:
        vector: Local coordinates, shape (3,) or (N, 3).
        basis: (3, 3) matrix whose columns are (binormal, normal, tangent).
        origin: World position of the frame, shape (3,).

    Returns:
        New array(s) `basis @ vector + origin`; inputs are not modified.
    """
    local = np.asarray(vector, dtype=np.float64)
    return local @ basis.T + origin


@dataclass(frozen=True, eq=False)
class Frame:
    """
    Orthonormal orientation sampled at parameter `t` along the curve.

    Convention: binormal = normal x tangent, so the columns
    (binormal, normal, tangent) form a proper rotation matrix. The local ring
    plane is spanned by binormal (local X) and normal (local Y).
    """
    t: float
    position: npt.NDArray[np.float64]
    tangent: npt.NDArray[np.float64]
    normal: npt.NDArray[np.float64]
    binormal: npt.NDArray[np.float64]

    def __post_init__(self):
        for name in ("position", "tangent", "normal", "binormal"):
            object.__setattr__(self, name, _frozen_array(getattr(self, name), (3,)))

    @property
    def basis(self) -> npt.NDArray[np.float64]:
        """(3, 3) matrix with columns (binormal, normal, tangent)."""
        return np.column_stack((self.binormal, self.normal, self.tangent))

    def to_world(self, local: npt.ArrayLike) -> npt.NDArray[np.float64]:
        return transform_by_basis(local, self.basis, self.position)

    def to_world_direction(self, local: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Rotate local direction(s) into world space without translating."""
        return transform_by_basis(local, self.basis, np.zeros(3))

    def rolled(self, angle: float) -> Frame:
        """Return a new frame rotated about its own tangent by `angle` radians."""
        if angle == 0.0:
            return self
        normal, binormal = rotate_about_axis(
            np.vstack((self.normal, self.binormal)), self.tangent, angle
        )
        return Frame(
            t=self.t,
            position=self.position,
            tangent=self.tangent,
            normal=normal,
            binormal=binormal,
        )


class PolygonRole(StrEnum):
    """Which part of the track a polygon represents; selects its color."""
    PRIMARY = "primary"        # running rails
    SECONDARY = "secondary"    # spine, guide rail, cross-ties


@dataclass(frozen=True, eq=False)
class Polygon:
    """
    A closed 2D ring extruded along the track.

    `ring` is an (N, 2) array in the local XY plane (edges wrap last -> first),
    `offset` moves the ring inside the frame (e.g. a spine below the rails).
    """
    ring: npt.NDArray[np.float64]
    offset: npt.NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    role: PolygonRole = PolygonRole.PRIMARY
    label: str = ""

    def __post_init__(self):
        ring = np.array(self.ring, dtype=np.float64)
        if ring.ndim != 2 or ring.shape[1] != 2 or ring.shape[0] < 3:
            raise ValueError(f"Expected ring of shape (N>=3, 2), got {ring.shape}.")
        ring.setflags(write=False)
        object.__setattr__(self, "ring", ring)
        object.__setattr__(self, "offset", _frozen_array(self.offset, (3,)))

    @property
    def sides(self) -> int:
        return int(self.ring.shape[0])

    @property
    def points3d(self) -> npt.NDArray[np.float64]:
        """Ring points lifted to the local Z=0 plane, shape (N, 3)."""
        return np.c_[self.ring, np.zeros(self.sides)]
