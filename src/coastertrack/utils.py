import math

PERCENT_SCALE = 100.0


def percent_to_parameter(percent: float) -> float:
    """Convert a position along the track in percent (0-100) to t in [0, 1]."""
    return percent / PERCENT_SCALE


def parameter_to_percent(t: float) -> float:
    """Convert a curve parameter t in [0, 1] to percent."""
    return t * PERCENT_SCALE


def wrap_angle(angle: float) -> float:
    """Wrap an angle in radians into the interval (-pi, pi]."""
    wrapped = math.remainder(angle, 2.0 * math.pi)
    if wrapped == -math.pi:
        return math.pi
    return wrapped
