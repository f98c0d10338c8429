"""
Track Options (Configuration)
=============================
This module defines the per-build configuration passed to the mesh builder.

Why is this file needed?
------------------------
1. One place to normalize the loose inputs users pass (a bank function or a
   list of keyframes, a style name or enum) into the typed objects the
   controllers consume.
2. Compatibility: `from_dict` accepts both snake_case names and the camelCase
   names of the browser track generator (`bankKeyframes`, `coasterType`, ...).

Classes:
    TrackOptions: Frozen dataclass with styling and frame settings.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from coastertrack.config import DEFAULT_PALETTE, DEFAULT_RAIL_RADIUS, DEFAULT_RAIL_SIDES
from coastertrack.model.banking import BankProfile, ControlPointBank, as_bank_profile
from coastertrack.model.geometry_primitives import PolygonRole
from coastertrack.model.profiles import CrossSection, TrackStyle, resolve

logger = logging.getLogger(__name__)

ColorFunction = Callable[[float, PolygonRole], Sequence[float]]


def default_color_at(t: float, role: PolygonRole) -> tuple[float, float, float]:
    """Fixed palette: white running rails, yellow spine and ties."""
    return DEFAULT_PALETTE[str(role)]


# Keys accepted by TrackOptions.from_dict -> dataclass field
_OPTION_ALIASES: dict[str, str] = {
    "bank": "bank",
    "bank_angle_at": "bank",
    "bankAngleAt": "bank",
    "bank_keyframes": "bank",
    "bankKeyframes": "bank",
    "color_at": "color_at",
    "colorAt": "color_at",
    "colorFunc": "color_at",
    "style": "style",
    "coasterType": "style",
    "rail_radius": "rail_radius",
    "railRadius": "rail_radius",
    "rail_sides": "rail_sides",
    "railSides": "rail_sides",
    "frame_strategy": "frame_strategy",
    "frameStrategy": "frame_strategy",
    "cross_ties": "cross_ties",
    "crossTies": "cross_ties",
}


@dataclass(frozen=True)
class TrackOptions:
    """
    Styling and frame settings for one mesh build.

    Attributes:
        bank: None, a BankProfile, a callable t -> radians, or keyframes.
        color_at: Callable (t, role) -> (r, g, b) in [0, 1].
        style: Catalog style name; unknown names use the default style.
        rail_radius, rail_sides: Ring parameters of the 'tube' style.
        frame_strategy: "parallel_transport" (default) or "fixed_up".
        cross_ties: Emit the style's sleepers, if it has any.
    """
    bank: Any = None
    color_at: ColorFunction = default_color_at
    style: Union[str, TrackStyle] = TrackStyle.DEFAULT
    rail_radius: float = DEFAULT_RAIL_RADIUS
    rail_sides: int = DEFAULT_RAIL_SIDES
    frame_strategy: str = "parallel_transport"
    cross_ties: bool = False
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> TrackOptions:
        """
        Build options from a plain mapping. Unrecognized keys are kept in
        `extra` and reported at DEBUG level.
        """
        if not data:
            return cls()

        kwargs: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in data.items():
            if key == "zRotations" or key == "z_rotations":
                kwargs["bank"] = ControlPointBank(value)
            elif key in _OPTION_ALIASES:
                kwargs[_OPTION_ALIASES[key]] = value
            else:
                extra[key] = value

        if extra:
            logger.debug(f"Ignoring unknown track options: {sorted(extra)}")
        return cls(**kwargs, extra=extra)

    def with_overrides(self, **overrides: Any) -> TrackOptions:
        return replace(self, **overrides)

    def bank_profile(self) -> BankProfile:
        return as_bank_profile(self.bank)

    def cross_section(self) -> CrossSection:
        return resolve(self.style, rail_radius=self.rail_radius, rail_sides=self.rail_sides)
