"""Predefined Track Cross-Sections (Catalog)."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Dict, Optional, Tuple, Union, TYPE_CHECKING

import numpy as np

from coastertrack.config import DEFAULT_RAIL_RADIUS, DEFAULT_RAIL_SIDES, MIN_RAIL_SIDES
from coastertrack.model.geometry_primitives import Polygon, PolygonRole
from coastertrack.model.geometry_utils import regular_polygon

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Enums
# ------------------------------------------------------------------------------
class TrackStyle(StrEnum):
    """Closed set of catalog styles. Unknown names resolve to DEFAULT."""
    B_AND_M = "B&M"
    SKELETON = "skeleton"
    TUBE = "tube"
    DEFAULT = "default"

    @classmethod
    def parse(cls, value: Union[str, TrackStyle, None]) -> TrackStyle:
        """Map a style name onto the enum; unrecognized names give DEFAULT."""
        if isinstance(value, TrackStyle):
            return value
        try:
            return cls(value)
        except ValueError:
            logger.debug(f"Unknown track style {value!r}, using '{cls.DEFAULT}'.")
            return cls.DEFAULT


# ------------------------------------------------------------------------------
# Data Structures
# ------------------------------------------------------------------------------
@dataclass(frozen=True, eq=False)
class CrossTie:
    """
    Flat sleeper drawn across the rails.

    `triangles` holds local (x, y, z) points, every 3 consecutive points form
    one triangle. A tie is placed at every division index divisible by `every`.
    """
    triangles: npt.NDArray[np.float64]
    every: int = 2
    role: PolygonRole = PolygonRole.SECONDARY

    def __post_init__(self):
        tris = np.array(self.triangles, dtype=np.float64)
        if tris.ndim != 2 or tris.shape[1] != 3 or tris.shape[0] % 3 != 0:
            raise ValueError(f"Expected (3k, 3) triangle points, got {tris.shape}.")
        if self.every < 1:
            raise ValueError(f"Cross-tie interval must be >= 1, got {self.every}.")
        tris.setflags(write=False)
        object.__setattr__(self, "triangles", tris)

    @property
    def vertex_count(self) -> int:
        return int(self.triangles.shape[0])

    def is_due(self, division: int) -> bool:
        return division % self.every == 0


@dataclass(frozen=True, eq=False)
class CrossSection:
    """
    Defines ONE track style: the polygons extruded along the path, in the
    order they are written to the mesh, plus an optional cross-tie.
    """
    style: TrackStyle
    description: str
    polygons: Tuple[Polygon, ...]
    cross_tie: Optional[CrossTie] = None

    @property
    def edge_count(self) -> int:
        """Total number of ring edges (one quad each per division)."""
        return sum(p.sides for p in self.polygons)

    def vertices_per_division(self) -> int:
        """Vertices emitted per division, not counting cross-ties."""
        return self.edge_count * 6


# ------------------------------------------------------------------------------
# Shape definitions
# ------------------------------------------------------------------------------
# Sleeper outline: two triangles hanging from the side rails down to the spine
STEP_TRIANGLES = [
    (-0.225, 0.0, 0.0), (0.0, -0.050, 0.0), (0.0, -0.175, 0.0),
    (0.0, -0.050, 0.0), (0.225, 0.0, 0.0), (0.0, -0.175, 0.0),
]

SPINE_SIDES, SPINE_RADIUS, SPINE_DROP = 5, 0.06, -0.125
SIDE_RAIL_SIDES, SIDE_RAIL_RADIUS, SIDE_RAIL_GAUGE = 6, 0.025, 0.2
GUIDE_SIDES, GUIDE_RADIUS = 4, 0.03


def _spine_and_rails() -> Tuple[Polygon, ...]:
    return (
        Polygon(
            ring=regular_polygon(SPINE_SIDES, SPINE_RADIUS),
            offset=(0.0, SPINE_DROP, 0.0),
            role=PolygonRole.SECONDARY,
            label="spine",
        ),
        Polygon(
            ring=regular_polygon(SIDE_RAIL_SIDES, SIDE_RAIL_RADIUS),
            offset=(SIDE_RAIL_GAUGE, 0.0, 0.0),
            role=PolygonRole.PRIMARY,
            label="rail_right",
        ),
        Polygon(
            ring=regular_polygon(SIDE_RAIL_SIDES, SIDE_RAIL_RADIUS),
            offset=(-SIDE_RAIL_GAUGE, 0.0, 0.0),
            role=PolygonRole.PRIMARY,
            label="rail_left",
        ),
    )


# 1. Fixed styles (do not depend on rail parameters)
FIXED_SECTIONS: Dict[TrackStyle, CrossSection] = {
    TrackStyle.B_AND_M: CrossSection(
        style=TrackStyle.B_AND_M,
        description="Box spine below two tubular running rails, with sleepers",
        polygons=_spine_and_rails(),
        cross_tie=CrossTie(triangles=STEP_TRIANGLES, every=2),
    ),
    TrackStyle.SKELETON: CrossSection(
        style=TrackStyle.SKELETON,
        description="Single thin guide rail on the path centerline",
        polygons=(
            Polygon(
                ring=regular_polygon(GUIDE_SIDES, GUIDE_RADIUS),
                role=PolygonRole.SECONDARY,
                label="guide",
            ),
        ),
    ),
    TrackStyle.DEFAULT: CrossSection(
        style=TrackStyle.DEFAULT,
        description="Spine below two running rails",
        polygons=_spine_and_rails(),
    ),
}


def _rail_radius(value: Optional[float]) -> float:
    try:
        radius = float(value)
    except (TypeError, ValueError):
        radius = math.nan
    if not math.isfinite(radius) or radius <= 0.0:
        logger.debug(f"Unusable rail radius {value!r}, using {DEFAULT_RAIL_RADIUS}.")
        return DEFAULT_RAIL_RADIUS
    return radius


def _rail_sides(value: Optional[int]) -> int:
    try:
        sides = int(value)
    except (TypeError, ValueError, OverflowError):
        sides = 0
    if sides < MIN_RAIL_SIDES:
        logger.debug(f"Unusable rail side count {value!r}, using {DEFAULT_RAIL_SIDES}.")
        return DEFAULT_RAIL_SIDES
    return sides


def tube_section(
    rail_radius: Optional[float] = DEFAULT_RAIL_RADIUS,
    rail_sides: Optional[int] = DEFAULT_RAIL_SIDES,
) -> CrossSection:
    """
    Single centered rail whose ring is parameterised by radius and side count.

    Missing, non-finite or non-positive radii and side counts below 3 are
    replaced by the defaults (0.06 and 8).
    """
    rail_radius = _rail_radius(rail_radius)
    sides = _rail_sides(rail_sides)
    return CrossSection(
        style=TrackStyle.TUBE,
        description=f"Single rail, {sides} sides, r={rail_radius}",
        polygons=(
            Polygon(
                ring=regular_polygon(sides, rail_radius),
                role=PolygonRole.PRIMARY,
                label="rail",
            ),
        ),
    )


def resolve(
    style: Union[str, TrackStyle, None],
    rail_radius: Optional[float] = DEFAULT_RAIL_RADIUS,
    rail_sides: Optional[int] = DEFAULT_RAIL_SIDES,
) -> CrossSection:
    """
    Resolve a style name to its cross-section.

    Unknown names are not an error: they fall back to TrackStyle.DEFAULT
    (spine + two rails, no cross-tie).
    """
    match TrackStyle.parse(style):
        case TrackStyle.TUBE:
            return tube_section(rail_radius=rail_radius, rail_sides=rail_sides)
        case TrackStyle.B_AND_M:
            return FIXED_SECTIONS[TrackStyle.B_AND_M]
        case TrackStyle.SKELETON:
            return FIXED_SECTIONS[TrackStyle.SKELETON]
        case _:
            return FIXED_SECTIONS[TrackStyle.DEFAULT]


STYLE_NAMES: list[str] = [str(s) for s in TrackStyle]
