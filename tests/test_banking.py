import math

import numpy as np
import pytest

from coastertrack.model.banking import (
    BankKeyframe,
    ControlPointBank,
    FunctionBank,
    KeyframeBank,
    as_bank_profile,
)


def test_no_keyframes_is_flat() -> None:
    bank = KeyframeBank()
    assert all(bank.angle_at(t) == 0.0 for t in np.linspace(0.0, 1.0, 11))


def test_single_keyframe_at_zero_gives_zero_everywhere() -> None:
    bank = KeyframeBank([(0.0, 0.0)])
    assert all(bank.angle_at(t) == 0.0 for t in np.linspace(0.0, 1.0, 11))


def test_single_keyframe_holds_its_angle() -> None:
    bank = KeyframeBank([(0.7, 0.4)])
    assert bank.angle_at(0.0) == 0.4
    assert bank.angle_at(1.0) == 0.4


def test_linear_interpolation_between_keys() -> None:
    bank = KeyframeBank([(0.2, 0.0), (0.6, 1.0)])
    assert bank.angle_at(0.4) == pytest.approx(0.5)
    assert bank.angle_at(0.3) == pytest.approx(0.25)


def test_clamps_outside_keyed_range() -> None:
    bank = KeyframeBank([(0.25, -0.5), (0.75, 0.5)])
    assert bank.angle_at(0.0) == -0.5
    assert bank.angle_at(0.1) == -0.5
    assert bank.angle_at(0.9) == 0.5
    assert bank.angle_at(1.0) == 0.5


def test_unsorted_keyframes_are_sorted() -> None:
    bank = KeyframeBank([(1.0, 2.0), (0.0, 0.0), (0.5, 1.0)])
    assert [k.t for k in bank.keyframes] == [0.0, 0.5, 1.0]
    assert bank.angle_at(0.75) == pytest.approx(1.5)


def test_percent_keyframes_match_parameter_keyframes() -> None:
    by_percent = KeyframeBank([{"percent": 0, "angle": 0.0}, {"percent": 50, "angle": 1.2}])
    by_t = KeyframeBank([{"t": 0.0, "angle": 0.0}, {"t": 0.5, "angle": 1.2}])
    for t in np.linspace(0.0, 1.0, 21):
        assert by_percent.angle_at(t) == pytest.approx(by_t.angle_at(t))


def test_keyframe_dict_without_position_is_rejected() -> None:
    with pytest.raises(ValueError):
        BankKeyframe.from_dict({"angle": 1.0})


def test_unpositioned_keyframe_is_skipped() -> None:
    bank = KeyframeBank([{"angle": 1.0}, {"t": 0.5, "angle": 0.2}, {"percent": 10}])
    assert [k.t for k in bank.keyframes] == [0.5]
    assert bank.angle_at(0.0) == 0.2


def test_vectorised_sample_matches_scalar() -> None:
    bank = KeyframeBank([(0.1, 0.3), (0.4, -0.2), (0.9, 0.8)])
    ts = np.linspace(0.0, 1.0, 37)
    np.testing.assert_allclose(bank.sample(ts), [bank.angle_at(t) for t in ts], atol=1e-12)


@pytest.mark.parametrize(
    "keys",
    [
        [(0.0, 0.0), (0.5, 1.0), (0.5, 2.0), (1.0, 0.0)],
        [(0.2, 1.0), (0.2, 3.0), (0.8, 0.0), (0.8, -1.0)],
        [(0.4, 0.7), (0.4, -0.7)],
    ],
)
def test_sample_matches_scalar_with_duplicate_keys(keys) -> None:
    bank = KeyframeBank(keys)
    ts = np.concatenate([np.linspace(0.0, 1.0, 41), [0.2, 0.4, 0.5, 0.8]])
    np.testing.assert_allclose(bank.sample(ts), [bank.angle_at(t) for t in ts], atol=1e-12)


def test_duplicate_key_uses_later_angle_between_keys() -> None:
    bank = KeyframeBank([(0.0, 0.0), (0.5, 1.0), (0.5, 2.0), (1.0, 0.0)])
    assert bank.angle_at(0.5) == 2.0
    assert bank.angle_at(0.75) == pytest.approx(1.0)
    assert bank.angle_at(0.25) == pytest.approx(0.5)


def test_function_bank_passes_values_through() -> None:
    bank = FunctionBank(lambda t: 10.0 if t > 0.5 else -3.0)
    assert bank.angle_at(0.2) == -3.0
    assert bank.angle_at(0.8) == 10.0


def test_control_point_bank_takes_shortest_path() -> None:
    a, b = math.radians(170.0), math.radians(-170.0)
    bank = ControlPointBank([a, b])
    assert bank.angle_at(0.5) == pytest.approx(math.pi)
    assert bank.angle_at(1.0) == pytest.approx(a + math.radians(20.0))


def test_control_point_bank_hits_control_angles() -> None:
    bank = ControlPointBank([0.0, 0.5, -0.25])
    assert bank.angle_at(0.0) == pytest.approx(0.0)
    assert bank.angle_at(0.5) == pytest.approx(0.5)
    assert bank.angle_at(1.0) == pytest.approx(-0.25)


@pytest.mark.parametrize(
    "value, expected_type",
    [
        (None, KeyframeBank),
        (lambda t: t, FunctionBank),
        ([(0.0, 0.1), (1.0, 0.2)], KeyframeBank),
        ([{"percent": 10, "angle": 0.3}], KeyframeBank),
    ],
)
def test_as_bank_profile(value, expected_type) -> None:
    assert isinstance(as_bank_profile(value), expected_type)


def test_plot_runs_headless(monkeypatch) -> None:
    import matplotlib.pyplot as plt

    monkeypatch.setattr(plt, "show", lambda: None)
    KeyframeBank([(0.0, 0.0), (1.0, 1.0)]).plot(samples=10)
    plt.close("all")
