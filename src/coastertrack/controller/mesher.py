"""
Mesh Assembly Logic
===================
This module turns a curve, a division count and TrackOptions into the flat
position / normal / color buffers of a non-indexed triangle mesh.

Why is this file needed?
------------------------
1. Orchestration: It runs the frame builder, resolves the cross-section and
   bank profile once, and drives the extruder over every division.
2. Ordering: It fixes the write order of the output. Divisions ascend
   1..N; within a division the cross-tie (when enabled and due) comes first,
   then the polygons in catalog order, each polygon's edges in ring order.
   Every batch is written into a pre-sized, index-addressed region.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union, TYPE_CHECKING

import numpy as np

from coastertrack.config import BUFFER_DTYPE
from coastertrack.controller.extruder import TriangleBatch, cross_tie_batch, extrude_polygon
from coastertrack.controller.frames import FrameStrategy, build_frames, validate_divisions
from coastertrack.model.mesh import TrackMesh
from coastertrack.model.options import TrackOptions

if TYPE_CHECKING:
    from coastertrack.model.curves import Curve
    from coastertrack.model.geometry_primitives import Frame
    from coastertrack.model.profiles import CrossSection

logger = logging.getLogger(__name__)


class TrackMesher:
    """
    Builds TrackMesh objects. Holds no state between calls; every call gets
    fresh frames and fresh buffers.
    """

    def generate_mesh(
        self,
        curve: Curve,
        divisions: int,
        options: Optional[TrackOptions] = None,
    ) -> TrackMesh:
        """
        Build the track mesh.

        Raises:
            InvalidDivisionsError: divisions < 1 (nothing is built).
            DegenerateCurveError: the curve cannot be sampled.
        """
        divisions = validate_divisions(divisions)
        options = options or TrackOptions()

        section = options.cross_section()
        strategy = FrameStrategy(options.frame_strategy)
        logger.info(
            f"Generating track mesh: style='{section.style}', divisions={divisions}, "
            f"strategy={strategy}."
        )

        frames = build_frames(curve, divisions, bank=options.bank_profile(), strategy=strategy)

        tie_divisions = self._tie_divisions(section, divisions, options.cross_ties)
        vertex_total = divisions * section.vertices_per_division()
        if tie_divisions:
            vertex_total += len(tie_divisions) * section.cross_tie.vertex_count

        positions = np.empty((vertex_total, 3), dtype=BUFFER_DTYPE)
        normals = np.empty((vertex_total, 3), dtype=BUFFER_DTYPE)
        colors = np.empty((vertex_total, 3), dtype=BUFFER_DTYPE)

        cursor = 0
        for i in range(1, divisions + 1):
            for batch in self._division_batches(section, frames[i - 1], frames[i], i, tie_divisions, options):
                end = cursor + batch.vertex_count
                positions[cursor:end] = batch.positions
                normals[cursor:end] = batch.normals
                colors[cursor:end] = batch.colors
                cursor = end

        if cursor != vertex_total:
            raise RuntimeError(f"Mesh assembly wrote {cursor} vertices, expected {vertex_total}.")

        mesh = TrackMesh(
            positions=positions.reshape(-1),
            normals=normals.reshape(-1),
            colors=colors.reshape(-1),
            divisions=divisions,
            style=str(section.style),
            frame_strategy=str(strategy),
            num_cross_ties=len(tie_divisions),
        )
        logger.info(f"Track mesh ready: {mesh.vertex_count} vertices, {mesh.triangle_count} triangles.")
        return mesh

    @staticmethod
    def _tie_divisions(section: CrossSection, divisions: int, enabled: bool) -> frozenset[int]:
        if not enabled or section.cross_tie is None:
            return frozenset()
        return frozenset(i for i in range(1, divisions + 1) if section.cross_tie.is_due(i))

    @staticmethod
    def _division_batches(
        section: CrossSection,
        frame_prev: Frame,
        frame_curr: Frame,
        division: int,
        tie_divisions: frozenset[int],
        options: TrackOptions,
    ) -> list[TriangleBatch]:
        t = frame_curr.t
        batches: list[TriangleBatch] = []

        if division in tie_divisions:
            tie = section.cross_tie
            batches.append(cross_tie_batch(tie, frame_curr, options.color_at(t, tie.role)))

        for polygon in section.polygons:
            color = options.color_at(t, polygon.role)
            batches.append(extrude_polygon(polygon, frame_prev, frame_curr, color))

        return batches


def build_track_mesh(
    curve: Curve,
    divisions: int,
    options: Optional[Union[TrackOptions, Mapping[str, Any]]] = None,
    **overrides: Any,
) -> TrackMesh:
    """
    Build a roller-coaster track mesh along `curve`.

    Args:
        curve: Object exposing point_at(t) and tangent_at(t) for t in [0, 1].
        divisions: Number of segments along the curve, integer >= 1.
        options: TrackOptions, or a mapping accepted by TrackOptions.from_dict.
        **overrides: Individual TrackOptions fields (e.g. style="skeleton").

    Returns:
        A new TrackMesh.
    """
    if not isinstance(options, TrackOptions):
        options = TrackOptions.from_dict(options)
    if overrides:
        options = options.with_overrides(**overrides)
    return TrackMesher().generate_mesh(curve, divisions, options)
