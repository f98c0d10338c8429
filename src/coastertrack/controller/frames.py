"""
Frame Sequence Builder
======================
Samples the track curve at `divisions + 1` evenly spaced parameters and builds
one orthonormal Frame per sample, rolled by the bank angle.

Two strategies are available and a build uses exactly one of them:

PARALLEL_TRANSPORT (default)
    The first frame is derived from world +Y. Every following frame is the
    previous (unbanked) frame rotated by the minimal rotation taking the
    previous tangent onto the current one. Frames never flip between samples
    unless the curve itself reverses, at the cost of a sequential dependency
    (frame i needs frame i-1).

FIXED_UP
    Every sample is derived independently from world +Y. The frame spins
    abruptly where the tangent passes close to vertical.

Both strategies substitute world +X for world +Y when the tangent is within
~0.045 rad of it, and bank by rotating normal/binormal about the tangent.
"""
from __future__ import annotations

import logging
import math
import numbers
from enum import StrEnum
from typing import Optional, Tuple, Union, TYPE_CHECKING

import numpy as np

from coastertrack.config import PARALLEL_COS_LIMIT, ROTATION_EPSILON, WORLD_RIGHT, WORLD_UP
from coastertrack.exceptions import DegenerateCurveError, InvalidDivisionsError
from coastertrack.model.banking import BankProfile, as_bank_profile
from coastertrack.model.geometry_primitives import Frame, rotate_about_axis
from coastertrack.model.geometry_utils import as_vector3, is_finite_vector, normalize

if TYPE_CHECKING:
    import numpy.typing as npt
    from coastertrack.model.curves import Curve

logger = logging.getLogger(__name__)


class FrameStrategy(StrEnum):
    PARALLEL_TRANSPORT = "parallel_transport"
    FIXED_UP = "fixed_up"


def validate_divisions(divisions: object) -> int:
    """Return `divisions` as int, raising InvalidDivisionsError unless it is an integer >= 1."""
    if isinstance(divisions, bool) or not isinstance(divisions, numbers.Integral):
        raise InvalidDivisionsError(divisions)
    if divisions < 1:
        raise InvalidDivisionsError(divisions)
    return int(divisions)


def sample_curve(curve: Curve, t: float) -> Tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Evaluate position and unit tangent at `t`.

    Raises:
        DegenerateCurveError: Non-finite point, or zero-length / non-finite tangent.
    """
    try:
        point = as_vector3(curve.point_at(t))
        raw_tangent = as_vector3(curve.tangent_at(t))
    except ValueError as e:
        raise DegenerateCurveError(t, f"curve returned an invalid vector: {e}") from e

    if not is_finite_vector(point):
        raise DegenerateCurveError(t, "non-finite point", point)
    if not is_finite_vector(raw_tangent):
        raise DegenerateCurveError(t, "non-finite tangent", raw_tangent)

    tangent = normalize(raw_tangent)
    if tangent is None:
        raise DegenerateCurveError(t, "zero-length tangent", raw_tangent)
    return point, tangent


def reference_axis(tangent: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """World +Y, or world +X when the tangent is (nearly) parallel to +Y."""
    up = np.array(WORLD_UP)
    if abs(float(np.dot(tangent, up))) > PARALLEL_COS_LIMIT:
        logger.debug(f"Tangent {tangent} nearly parallel to {up}, using {WORLD_RIGHT} as reference.")
        return np.array(WORLD_RIGHT)
    return up


def frame_from_reference(
    t: float,
    point: npt.NDArray[np.float64],
    tangent: npt.NDArray[np.float64],
) -> Frame:
    """Unbanked frame whose normal is the reference axis projected off the tangent."""
    up = reference_axis(tangent)
    binormal = normalize(np.cross(up, tangent))
    normal = normalize(np.cross(tangent, binormal))
    return Frame(t=t, position=point, tangent=tangent, normal=normal, binormal=binormal)


def transport_frame(
    previous: Frame,
    t: float,
    point: npt.NDArray[np.float64],
    tangent: npt.NDArray[np.float64],
) -> Frame:
    """
    Carry an unbanked frame to the next sample by the minimal rotation that
    maps the previous tangent onto `tangent`.
    """
    axis = np.cross(previous.tangent, tangent)
    axis_length = float(np.linalg.norm(axis))
    normal = previous.normal

    if axis_length > ROTATION_EPSILON:
        # equals asin(|axis|) while the tangents agree, and grows towards pi
        # when the direction locally reverses; replaces a fixed pi for dot < 0
        angle = math.atan2(axis_length, float(np.dot(previous.tangent, tangent)))
        normal = rotate_about_axis(normal, axis / axis_length, angle)

    # Remove drift so the basis stays orthonormal to the sampled tangent
    normal = normalize(normal - np.dot(normal, tangent) * tangent)
    if normal is None:
        logger.debug(f"Transported normal collapsed at t={t:.6f}, re-deriving frame.")
        return frame_from_reference(t, point, tangent)

    binormal = np.cross(normal, tangent)
    return Frame(t=t, position=point, tangent=tangent, normal=normal, binormal=binormal)


def build_frames(
    curve: Curve,
    divisions: int,
    bank: Optional[Union[BankProfile, object]] = None,
    strategy: Union[str, FrameStrategy] = FrameStrategy.PARALLEL_TRANSPORT,
) -> Tuple[Frame, ...]:
    """
    Build `divisions + 1` frames at t_i = i / divisions.

    Args:
        curve: Object exposing point_at(t) and tangent_at(t).
        divisions: Number of segments, integer >= 1.
        bank: Anything accepted by `as_bank_profile` (None = no banking).
        strategy: FrameStrategy or its string value.

    Returns:
        Tuple of immutable frames, banked.

    Raises:
        InvalidDivisionsError: divisions < 1.
        DegenerateCurveError: the curve cannot be sampled at some t_i.
        ValueError: unknown strategy.
    """
    divisions = validate_divisions(divisions)
    strategy = FrameStrategy(strategy)
    bank_profile = as_bank_profile(bank)

    frames: list[Frame] = []
    carried: Optional[Frame] = None

    for i in range(divisions + 1):
        t = i / divisions
        point, tangent = sample_curve(curve, t)

        match strategy:
            case FrameStrategy.PARALLEL_TRANSPORT:
                if carried is None:
                    carried = frame_from_reference(t, point, tangent)
                else:
                    carried = transport_frame(carried, t, point, tangent)
                base = carried
            case FrameStrategy.FIXED_UP:
                base = frame_from_reference(t, point, tangent)

        frames.append(base.rolled(bank_profile.angle_at(t)))

    logger.debug(f"Built {len(frames)} frames using {strategy}.")
    return tuple(frames)
