"""
Ribbon Extruder
Turns one cross-section polygon and two adjacent frames into triangles.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt
    from coastertrack.model.geometry_primitives import Frame, Polygon
    from coastertrack.model.profiles import CrossTie


@dataclass(frozen=True, eq=False)
class TriangleBatch:
    """
    Non-indexed triangles: every 3 consecutive rows form one triangle.
    All arrays have shape (V, 3) with V a multiple of 3.
    """
    positions: npt.NDArray[np.float64]
    normals: npt.NDArray[np.float64]
    colors: npt.NDArray[np.float64]

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def triangle_count(self) -> int:
        return self.vertex_count // 3


def _unit_rows(vectors: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    lengths = np.linalg.norm(vectors, axis=1, keepdims=True)
    # ring points at the local origin have no direction; leave them zero
    return np.divide(vectors, lengths, out=np.zeros_like(vectors), where=lengths > 0.0)


def extrude_polygon(
    polygon: Polygon,
    frame_prev: Frame,
    frame_curr: Frame,
    color: Sequence[float],
) -> TriangleBatch:
    """
    Emit two triangles per ring edge between two frames.

    For edge (p1, p2):
        v1 = p1 in the current frame, v2 = p2 in the current frame,
        v3 = p2 in the previous frame, v4 = p1 in the previous frame,
    triangles (v1, v2, v4) and (v2, v3, v4). Normals are the untranslated ring
    points rotated by the frame of their vertex, i.e. outward from the ring
    center.
    """
    local = polygon.points3d
    local_next = np.roll(local, -1, axis=0)
    offset = polygon.offset

    # positions per edge: (E, 3) each
    v1 = frame_curr.to_world(local + offset)
    v2 = frame_curr.to_world(local_next + offset)
    v3 = frame_prev.to_world(local_next + offset)
    v4 = frame_prev.to_world(local + offset)

    n1 = _unit_rows(frame_curr.to_world_direction(local))
    n2 = _unit_rows(frame_curr.to_world_direction(local_next))
    n3 = _unit_rows(frame_prev.to_world_direction(local_next))
    n4 = _unit_rows(frame_prev.to_world_direction(local))

    edges = polygon.sides
    # (E, 6, 3) -> edge-major, vertex order v1 v2 v4 | v2 v3 v4
    positions = np.stack((v1, v2, v4, v2, v3, v4), axis=1).reshape(edges * 6, 3)
    normals = np.stack((n1, n2, n4, n2, n3, n4), axis=1).reshape(edges * 6, 3)
    colors = np.tile(np.asarray(color, dtype=np.float64).reshape(1, 3), (edges * 6, 1))

    return TriangleBatch(positions=positions, normals=normals, colors=colors)


def cross_tie_batch(
    cross_tie: CrossTie,
    frame: Frame,
    color: Sequence[float],
) -> TriangleBatch:
    """Place the flat tie triangles in `frame`; every normal faces back along the track."""
    positions = frame.to_world(cross_tie.triangles)
    count = cross_tie.vertex_count
    normals = np.tile(-frame.tangent, (count, 1))
    colors = np.tile(np.asarray(color, dtype=np.float64).reshape(1, 3), (count, 1))
    return TriangleBatch(positions=positions, normals=normals, colors=colors)
