"""
Track Mesh (Output Data)
Flat vertex buffers of the built track, plus summary statistics.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass
class MeshStats:
    """Return object containing mesh metadata."""
    style: str
    divisions: int
    num_vertices: int
    num_triangles: int
    num_cross_ties: int
    bounds_min: Tuple[float, float, float]
    bounds_max: Tuple[float, float, float]


@dataclass(frozen=True, eq=False)
class TrackMesh:
    """
    Non-indexed triangle soup. `positions`, `normals` and `colors` are flat,
    read-only arrays of 3 floats per vertex; vertices 3k, 3k+1, 3k+2 form
    triangle k.
    """
    positions: npt.NDArray[np.float32]
    normals: npt.NDArray[np.float32]
    colors: npt.NDArray[np.float32]
    divisions: int
    style: str
    frame_strategy: str
    num_cross_ties: int = 0

    def __post_init__(self):
        sizes = {self.positions.size, self.normals.size, self.colors.size}
        if len(sizes) != 1 or self.positions.size % 9 != 0:
            raise ValueError(
                f"Buffers must share a length divisible by 9, got "
                f"{self.positions.size}/{self.normals.size}/{self.colors.size}."
            )
        for arr in (self.positions, self.normals, self.colors):
            arr.setflags(write=False)

    @property
    def vertex_count(self) -> int:
        return self.positions.size // 3

    @property
    def triangle_count(self) -> int:
        return self.vertex_count // 3

    def as_vertex_arrays(self) -> Tuple[npt.NDArray[np.float32], ...]:
        """(V, 3) views of positions, normals and colors."""
        return (
            self.positions.reshape(-1, 3),
            self.normals.reshape(-1, 3),
            self.colors.reshape(-1, 3),
        )

    def stats(self) -> MeshStats:
        points = self.positions.reshape(-1, 3)
        if len(points):
            lo = tuple(float(v) for v in points.min(axis=0))
            hi = tuple(float(v) for v in points.max(axis=0))
        else:
            lo = hi = (0.0, 0.0, 0.0)
        return MeshStats(
            style=self.style,
            divisions=self.divisions,
            num_vertices=self.vertex_count,
            num_triangles=self.triangle_count,
            num_cross_ties=self.num_cross_ties,
            bounds_min=lo,
            bounds_max=hi,
        )


