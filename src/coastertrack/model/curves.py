"""
Track centerlines.

Any object with `point_at(t)` and `tangent_at(t)` for t in [0, 1] can drive the
mesh builder; the classes here are ready-made centerlines for demos and tests.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol, Sequence, TYPE_CHECKING, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


@runtime_checkable
class Curve(Protocol):
    def point_at(self, t: float) -> Sequence[float]: ...
    def tangent_at(self, t: float) -> Sequence[float]: ...


@dataclass
class LineCurve:
    """Straight segment from `start` to `end`."""
    start: Sequence[float]
    end: Sequence[float]

    def point_at(self, t: float) -> npt.NDArray[np.float64]:
        a = np.asarray(self.start, dtype=np.float64)
        b = np.asarray(self.end, dtype=np.float64)
        return a + (b - a) * t

    def tangent_at(self, t: float) -> npt.NDArray[np.float64]:
        d = np.asarray(self.end, dtype=np.float64) - np.asarray(self.start, dtype=np.float64)
        length = np.linalg.norm(d)
        return d / length if length > 0.0 else d


@dataclass
class HelixCurve:
    """
    Helix around the world Y axis (a climbing spiral lift).

    Args:
        radius: Radius in the XZ plane.
        height: Total rise along +Y.
        turns: Number of full revolutions over t in [0, 1].
    """
    radius: float = 10.0
    height: float = 5.0
    turns: float = 1.0

    def point_at(self, t: float) -> npt.NDArray[np.float64]:
        phi = 2.0 * math.pi * self.turns * t
        return np.array([
            self.radius * math.cos(phi),
            self.height * t,
            self.radius * math.sin(phi),
        ])

    def tangent_at(self, t: float) -> npt.NDArray[np.float64]:
        w = 2.0 * math.pi * self.turns
        phi = w * t
        d = np.array([
            -self.radius * w * math.sin(phi),
            self.height,
            self.radius * w * math.cos(phi),
        ])
        return d / np.linalg.norm(d)


class CatmullRomCurve:
    """
    Uniform Catmull-Rom spline through control points.

    t is spread evenly over the spline segments (not arc length). Open curves
    duplicate their end points as phantom neighbours.
    """

    def __init__(self, points: Sequence[Sequence[float]], closed: bool = False):
        pts = np.array(points, dtype=np.float64)
        if pts.ndim != 2 or pts.shape[1] != 3 or pts.shape[0] < 2:
            raise ValueError(f"Expected at least two 3D points, got shape {pts.shape}.")
        pts.setflags(write=False)
        self.points = pts
        self.closed = closed

    @property
    def segment_count(self) -> int:
        n = len(self.points)
        return n if self.closed else n - 1

    def _segment(self, t: float) -> tuple[int, float]:
        t = min(max(t, 0.0), 1.0)
        scaled = t * self.segment_count
        idx = min(int(math.floor(scaled)), self.segment_count - 1)
        return idx, scaled - idx

    def _control(self, idx: int) -> tuple[npt.NDArray[np.float64], ...]:
        n = len(self.points)
        if self.closed:
            return tuple(self.points[(idx + k) % n] for k in (-1, 0, 1, 2))
        return tuple(self.points[min(max(idx + k, 0), n - 1)] for k in (-1, 0, 1, 2))

    def point_at(self, t: float) -> npt.NDArray[np.float64]:
        idx, u = self._segment(t)
        p0, p1, p2, p3 = self._control(idx)
        u2, u3 = u * u, u * u * u
        return 0.5 * (
            2.0 * p1
            + (p2 - p0) * u
            + (2.0 * p0 - 5.0 * p1 + 4.0 * p2 - p3) * u2
            + (-p0 + 3.0 * p1 - 3.0 * p2 + p3) * u3
        )

    def tangent_at(self, t: float) -> npt.NDArray[np.float64]:
        idx, u = self._segment(t)
        p0, p1, p2, p3 = self._control(idx)
        d = 0.5 * (
            (p2 - p0)
            + 2.0 * (2.0 * p0 - 5.0 * p1 + 4.0 * p2 - p3) * u
            + 3.0 * (-p0 + 3.0 * p1 - 3.0 * p2 + p3) * u * u
        )
        length = np.linalg.norm(d)
        # Returned unnormalized when zero so the frame builder can reject it
        return d / length if length > 0.0 else d
