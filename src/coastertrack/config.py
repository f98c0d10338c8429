"""
Global Constants
================
This module serves as the central registry for the numeric constants shared by
the frame builder, the cross-section catalog and the mesh assembler.

Why is this file needed?
------------------------
1. Consistency: Tolerances used by several modules (e.g. "is this tangent
   usable?") must agree, otherwise one stage accepts what the next rejects.
2. Immutability: Reference axes are exported as read-only arrays. Callers copy
   them into locals before use, so no call can alter another call's frames.

Exports:
    WORLD_UP (ndarray): Primary reference axis (+Y) for the initial frame.
    WORLD_RIGHT (ndarray): Fallback reference axis (+X).
    PARALLEL_COS_LIMIT (float): |cos| above which a tangent counts as parallel
        to the reference axis (~0.045 rad).
    DEFAULT_PALETTE (dict): Colors for primary / secondary polygon roles.
"""
import numpy as np


def _read_only(*values: float) -> np.ndarray:
    arr = np.array(values, dtype=np.float64)
    arr.setflags(write=False)
    return arr


# Reference axes
WORLD_UP: np.ndarray = _read_only(0.0, 1.0, 0.0)
WORLD_RIGHT: np.ndarray = _read_only(1.0, 0.0, 0.0)

# Tolerances
PARALLEL_COS_LIMIT: float = 0.999
ROTATION_EPSILON: float = 1e-9
LENGTH_EPSILON: float = 1e-12

# Rail parameters used by parameterised styles
DEFAULT_RAIL_RADIUS: float = 0.06
DEFAULT_RAIL_SIDES: int = 8
MIN_RAIL_SIDES: int = 3

# Output buffer precision (matches a GPU float vertex buffer)
BUFFER_DTYPE = np.float32

# Color palette, keyed by polygon role value ("primary" / "secondary")
DEFAULT_PALETTE: dict[str, tuple[float, float, float]] = {
    "primary": (1.0, 1.0, 1.0),
    "secondary": (1.0, 1.0, 0.0),
}
