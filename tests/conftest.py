import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from coastertrack.model.curves import CatmullRomCurve, HelixCurve, LineCurve


@pytest.fixture
def z_line() -> LineCurve:
    return LineCurve(start=(0.0, 0.0, 0.0), end=(0.0, 0.0, 10.0))


@pytest.fixture
def vertical_line() -> LineCurve:
    return LineCurve(start=(0.0, 0.0, 0.0), end=(0.0, 10.0, 0.0))


@pytest.fixture
def helix() -> HelixCurve:
    return HelixCurve(radius=5.0, height=4.0, turns=1.25)


@pytest.fixture
def spline() -> CatmullRomCurve:
    return CatmullRomCurve([
        (0.0, 0.0, 0.0),
        (5.0, 1.0, 0.0),
        (10.0, 6.0, 2.0),
        (14.0, 3.0, 8.0),
        (10.0, 1.0, 14.0),
        (4.0, 2.0, 12.0),
    ])


def assert_orthonormal(frame, unit_tol: float = 1e-5, dot_tol: float = 1e-4) -> None:
    for v in (frame.tangent, frame.normal, frame.binormal):
        assert abs(np.linalg.norm(v) - 1.0) < unit_tol
    assert abs(np.dot(frame.tangent, frame.normal)) < dot_tol
    assert abs(np.dot(frame.tangent, frame.binormal)) < dot_tol
    assert abs(np.dot(frame.normal, frame.binormal)) < dot_tol
