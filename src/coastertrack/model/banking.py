from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Optional, Sequence, Union

import numpy as np
import matplotlib.pyplot as plt

from coastertrack.utils import parameter_to_percent, percent_to_parameter, wrap_angle

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import numpy.typing as npt


BankFunction = Callable[[float], float]


# ==========================================
# KEYFRAMES
# ==========================================
@dataclass(frozen=True)
class BankKeyframe:
    """Roll `angle` (radians) at curve parameter `t` in [0, 1]."""
    t: float
    angle: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BankKeyframe:
        """
        Accepts {"t": 0..1, "angle": rad} or {"percent": 0..100, "angle": rad}.
        """
        if "t" in data:
            t = float(data["t"])
        elif "percent" in data:
            t = percent_to_parameter(float(data["percent"]))
        else:
            raise ValueError(f"Keyframe needs 't' or 'percent': {dict(data)!r}")
        return cls(t=t, angle=float(data["angle"]))


# ==========================================
# ABSTRACT CLASS FOR BANK PROFILES
# ==========================================
class BankProfile(ABC):
    """
    Abstract base class for banking (roll about the tangent) along the track.
    """
    NAME: str = "Bank Profile"

    @abstractmethod
    def angle_at(self, t: float) -> float:
        """
        Get the bank angle at a curve parameter.

        Args:
            t: Curve parameter in [0, 1].

        Returns:
            Roll angle in radians.
        """
        pass

    def __call__(self, t: float) -> float:
        return self.angle_at(t)

    def sample(self, ts: Iterable[float]) -> npt.NDArray[np.float64]:
        """Evaluate the profile at several parameters."""
        return np.array([self.angle_at(float(t)) for t in ts], dtype=np.float64)

    def plot(self, samples: int = 500) -> None:
        """
        Plot the bank angle (degrees) against position along the track (%).
        """
        ts = np.linspace(0.0, 1.0, samples)
        angles = self.sample(ts)

        plt.rcParams["figure.constrained_layout.use"] = True
        plt.figure(figsize=(7, 5))

        plt.plot(parameter_to_percent(ts), np.degrees(angles), 'b', lw=2)

        plt.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
        plt.minorticks_on()
        plt.grid(visible=True, which='minor', axis='both', linestyle=':', color='gray', lw=0.5)

        plt.title(f"{self.NAME}")
        plt.xlabel("Position along track (%)")
        plt.ylabel("Bank angle (°)")

        plt.xlim(-2, 102)
        plt.show()


# ==========================================
# IMPLEMENTATIONS
# ==========================================
class FunctionBank(BankProfile):
    """
    Bank angle given by an arbitrary function of t. Values (even
    discontinuous ones) are passed through unchanged.
    """
    NAME = "Function"

    def __init__(self, func: BankFunction):
        self.func = func

    def angle_at(self, t: float) -> float:
        return float(self.func(t))


class KeyframeBank(BankProfile):
    """
    Linear interpolation between sorted keyframes, clamped to the first and
    last angle outside the keyed range.
    """
    NAME = "Keyframes"

    def __init__(self, keyframes: Iterable[Union[BankKeyframe, Mapping[str, Any], Sequence[float]]] = ()):
        keys = []
        for value in keyframes:
            try:
                keys.append(_as_keyframe(value))
            except (KeyError, TypeError, ValueError) as e:
                logger.debug(f"Skipping unusable bank keyframe {value!r}: {e}")
        # stable sort keeps input order for equal t
        self.keyframes: tuple[BankKeyframe, ...] = tuple(sorted(keys, key=lambda k: k.t))
        self.times = np.array([k.t for k in self.keyframes], dtype=np.float64)
        self.angles = np.array([k.angle for k in self.keyframes], dtype=np.float64)

    def angle_at(self, t: float) -> float:
        n = len(self.keyframes)
        if n == 0:
            return 0.0
        first, last = self.keyframes[0], self.keyframes[-1]
        if n == 1 or t <= first.t:
            return first.angle
        if t >= last.t:
            return last.angle

        # index of the first key strictly after t
        idx = int(np.searchsorted(self.times, t, side="right"))
        a, b = self.keyframes[idx - 1], self.keyframes[idx]
        return a.angle + (t - a.t) / (b.t - a.t) * (b.angle - a.angle)

    def sample(self, ts: Iterable[float]) -> npt.NDArray[np.float64]:
        t_array = np.asarray(list(ts), dtype=np.float64)
        n = len(self.keyframes)
        if n == 0:
            return np.zeros_like(t_array)
        if n == 1:
            return np.full_like(t_array, self.angles[0])

        # same bracketing as angle_at, so duplicate keys resolve identically
        idx = np.clip(np.searchsorted(self.times, t_array, side="right"), 1, n - 1)
        t0, t1 = self.times[idx - 1], self.times[idx]
        a0, a1 = self.angles[idx - 1], self.angles[idx]
        span = np.where(t1 > t0, t1 - t0, 1.0)
        values = a0 + (t_array - t0) / span * (a1 - a0)
        values = np.where(t_array >= self.times[-1], self.angles[-1], values)
        return np.where(t_array <= self.times[0], self.angles[0], values)


class ControlPointBank(BankProfile):
    """
    One roll angle per control point of the curve, the points assumed evenly
    spaced in t. Neighbouring angles are blended along the shorter way round,
    so 170° -> -170° passes through 180° rather than through 0°.
    """
    NAME = "Control Point Roll"

    def __init__(self, angles: Sequence[float]):
        self.angles = tuple(float(a) for a in angles)

    def angle_at(self, t: float) -> float:
        n = len(self.angles)
        if n == 0:
            return 0.0
        if n == 1:
            return self.angles[0]

        segments = n - 1
        t = min(max(t, 0.0), 1.0)
        idx = min(int(math.floor(t * segments)), segments - 1)
        local_t = t * segments - idx

        a, b = self.angles[idx], self.angles[idx + 1]
        return a + wrap_angle(b - a) * local_t


# ==========================================
# NORMALIZATION
# ==========================================
def _as_keyframe(value: Union[BankKeyframe, Mapping[str, Any], Sequence[float]]) -> BankKeyframe:
    if isinstance(value, BankKeyframe):
        return value
    if isinstance(value, Mapping):
        return BankKeyframe.from_dict(value)
    t, angle = value
    return BankKeyframe(t=float(t), angle=float(angle))


def as_bank_profile(value: Optional[Union[BankProfile, BankFunction, Iterable[Any]]]) -> BankProfile:
    """
    Normalize the supported bank specifications into a BankProfile.

    Accepts None (no banking), a BankProfile, a callable t -> radians, or an
    iterable of keyframes (BankKeyframe, (t, angle) pairs or dicts with
    't'/'percent' and 'angle').
    """
    if value is None:
        return KeyframeBank()
    if isinstance(value, BankProfile):
        return value
    if callable(value):
        return FunctionBank(value)
    return KeyframeBank(value)
