"""
Error kinds raised while building a track mesh.

Only structural faults are raised: a non-positive division count and a curve
that cannot be evaluated. Styling problems (unknown style, bank query outside
the keyframe range, reference axis parallel to the tangent) are recovered by
documented fallbacks and never surface here.
"""
from typing import Optional


class CoasterTrackError(Exception):
    """Base class for all errors raised by the package."""


class InvalidDivisionsError(CoasterTrackError, ValueError):
    """Raised when the number of divisions is not an integer >= 1."""

    def __init__(self, divisions: object):
        self.divisions = divisions
        super().__init__(f"Divisions must be an integer >= 1, got {divisions!r}.")


class DegenerateCurveError(CoasterTrackError, ValueError):
    """Raised when the curve yields a zero-length or non-finite point/tangent."""

    def __init__(self, t: float, reason: str, value: Optional[object] = None):
        self.t = t
        self.reason = reason
        self.value = value
        message = f"Degenerate curve at t={t:.6f}: {reason}"
        if value is not None:
            message += f" (got {value!r})"
        super().__init__(message)
