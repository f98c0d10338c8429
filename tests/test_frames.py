import math

import numpy as np
import pytest

from conftest import assert_orthonormal
from coastertrack.controller.frames import (
    FrameStrategy,
    build_frames,
    frame_from_reference,
    reference_axis,
    sample_curve,
)
from coastertrack.exceptions import DegenerateCurveError, InvalidDivisionsError
from coastertrack.model.curves import LineCurve
from coastertrack.model.geometry_primitives import Frame, transform_by_basis


class _ZeroTangentCurve:
    def point_at(self, t):
        return (t, 0.0, 0.0)

    def tangent_at(self, t):
        return (0.0, 0.0, 0.0) if t > 0.5 else (1.0, 0.0, 0.0)


class _NaNPointCurve:
    def point_at(self, t):
        return (float("nan"), 0.0, 0.0)

    def tangent_at(self, t):
        return (1.0, 0.0, 0.0)


class _InfiniteTangentCurve:
    def point_at(self, t):
        return (t, 0.0, 0.0)

    def tangent_at(self, t):
        return (float("inf"), 0.0, 0.0)


class _ReversingCurve:
    """Runs along +X, turns around through +Z, comes back along -X."""

    def point_at(self, t):
        phi = math.pi * t
        return (math.sin(phi), 0.0, 1.0 - math.cos(phi))

    def tangent_at(self, t):
        phi = math.pi * t
        return (math.cos(phi), 0.0, math.sin(phi))


@pytest.mark.geometry
@pytest.mark.parametrize("strategy", list(FrameStrategy))
@pytest.mark.parametrize("curve_name", ["helix", "spline", "z_line", "vertical_line"])
def test_frames_are_orthonormal(request, strategy, curve_name) -> None:
    curve = request.getfixturevalue(curve_name)
    frames = build_frames(curve, 64, bank=lambda t: 2.0 * t, strategy=strategy)
    assert len(frames) == 65
    for frame in frames:
        assert_orthonormal(frame)


@pytest.mark.geometry
@pytest.mark.parametrize("strategy", list(FrameStrategy))
def test_frames_are_right_handed(helix, strategy) -> None:
    for frame in build_frames(helix, 16, strategy=strategy):
        np.testing.assert_allclose(np.cross(frame.binormal, frame.normal), frame.tangent, atol=1e-9)
        assert np.linalg.det(frame.basis) == pytest.approx(1.0)


@pytest.mark.geometry
def test_sample_parameters(helix) -> None:
    frames = build_frames(helix, 4)
    assert [f.t for f in frames] == [0.0, 0.25, 0.5, 0.75, 1.0]


@pytest.mark.geometry
@pytest.mark.parametrize("curve_name", ["helix", "spline"])
def test_parallel_transport_never_flips(request, curve_name) -> None:
    curve = request.getfixturevalue(curve_name)
    frames = build_frames(curve, 200, strategy=FrameStrategy.PARALLEL_TRANSPORT)
    for prev, curr in zip(frames[:-1], frames[1:]):
        assert np.dot(prev.binormal, curr.binormal) > 0.0


@pytest.mark.geometry
def test_parallel_transport_survives_vertical_passage() -> None:
    # half loop: tangent is vertical in the middle
    class _HalfLoop:
        def point_at(self, t):
            phi = math.pi * t
            return (math.sin(phi), 1.0 - math.cos(phi), 0.0)

        def tangent_at(self, t):
            phi = math.pi * t
            return (math.cos(phi), math.sin(phi), 0.0)

    transported = build_frames(_HalfLoop(), 101, strategy=FrameStrategy.PARALLEL_TRANSPORT)
    for prev, curr in zip(transported[:-1], transported[1:]):
        assert np.dot(prev.binormal, curr.binormal) > 0.99

    fixed = build_frames(_HalfLoop(), 101, strategy=FrameStrategy.FIXED_UP)
    dots = [np.dot(a.binormal, b.binormal) for a, b in zip(fixed[:-1], fixed[1:])]
    assert min(dots) < 0.0


@pytest.mark.geometry
def test_direction_reversal_keeps_frames_valid() -> None:
    frames = build_frames(_ReversingCurve(), 50)
    for frame in frames:
        assert_orthonormal(frame)
    np.testing.assert_allclose(frames[-1].tangent, [-1.0, 0.0, 0.0], atol=1e-9)


@pytest.mark.geometry
def test_straight_line_frames_match_between_strategies(z_line) -> None:
    transported = build_frames(z_line, 10, strategy="parallel_transport")
    fixed = build_frames(z_line, 10, strategy="fixed_up")
    for a, b in zip(transported, fixed):
        np.testing.assert_allclose(a.basis, b.basis, atol=1e-12)
        np.testing.assert_allclose(a.position, b.position)


@pytest.mark.geometry
def test_initial_frame_uses_world_up(z_line) -> None:
    frame = build_frames(z_line, 1)[0]
    np.testing.assert_allclose(frame.normal, [0.0, 1.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(frame.binormal, [1.0, 0.0, 0.0], atol=1e-12)


@pytest.mark.geometry
def test_reference_axis_fallback_near_vertical() -> None:
    tilted = np.array([0.0, math.cos(0.01), math.sin(0.01)])
    np.testing.assert_allclose(reference_axis(tilted), [1.0, 0.0, 0.0])
    np.testing.assert_allclose(reference_axis(np.array([0.0, 0.0, 1.0])), [0.0, 1.0, 0.0])
    frame = frame_from_reference(0.0, np.zeros(3), tilted)
    assert np.all(np.isfinite(frame.basis))


@pytest.mark.geometry
def test_bank_rolls_about_tangent(z_line) -> None:
    flat = build_frames(z_line, 4)
    banked = build_frames(z_line, 4, bank=lambda t: math.pi / 2)
    for a, b in zip(flat, banked):
        np.testing.assert_allclose(b.tangent, a.tangent)
        assert np.dot(a.normal, b.normal) == pytest.approx(0.0, abs=1e-12)
        np.testing.assert_allclose(np.cross(a.normal, b.normal), a.tangent, atol=1e-12)


@pytest.mark.geometry
def test_bank_does_not_accumulate(helix) -> None:
    flat = build_frames(helix, 40)
    banked = build_frames(helix, 40, bank=lambda t: 0.3)
    for a, b in zip(flat, banked):
        assert np.dot(a.normal, b.normal) == pytest.approx(math.cos(0.3), abs=1e-9)


@pytest.mark.parametrize("divisions", [0, -3])
def test_invalid_divisions(z_line, divisions) -> None:
    with pytest.raises(InvalidDivisionsError):
        build_frames(z_line, divisions)


@pytest.mark.parametrize("divisions", [2.5, True, "10"])
def test_non_integer_divisions(z_line, divisions) -> None:
    with pytest.raises(InvalidDivisionsError):
        build_frames(z_line, divisions)


def test_zero_tangent_is_fatal() -> None:
    with pytest.raises(DegenerateCurveError) as info:
        build_frames(_ZeroTangentCurve(), 4)
    assert info.value.t == pytest.approx(0.75)


def test_non_finite_point_is_fatal() -> None:
    with pytest.raises(DegenerateCurveError):
        sample_curve(_NaNPointCurve(), 0.0)


def test_non_finite_tangent_is_fatal() -> None:
    with pytest.raises(DegenerateCurveError) as info:
        build_frames(_InfiniteTangentCurve(), 2)
    assert info.value.reason == "non-finite tangent"
    assert info.value.t == 0.0


def test_zero_length_line_is_fatal() -> None:
    with pytest.raises(DegenerateCurveError):
        build_frames(LineCurve(start=(1.0, 1.0, 1.0), end=(1.0, 1.0, 1.0)), 3)


def test_unknown_strategy(z_line) -> None:
    with pytest.raises(ValueError):
        build_frames(z_line, 3, strategy="frenet")


def test_frames_are_immutable(z_line) -> None:
    frame = build_frames(z_line, 1)[0]
    with pytest.raises(ValueError):
        frame.normal[0] = 1.0


def test_transform_by_basis_is_pure() -> None:
    frame = Frame(
        t=0.0,
        position=(1.0, 2.0, 3.0),
        tangent=(0.0, 0.0, 1.0),
        normal=(0.0, 1.0, 0.0),
        binormal=(1.0, 0.0, 0.0),
    )
    local = np.array([0.5, -0.25, 2.0])
    world = transform_by_basis(local, frame.basis, frame.position)
    np.testing.assert_allclose(world, [1.5, 1.75, 5.0])
    np.testing.assert_allclose(local, [0.5, -0.25, 2.0])
