import math

import numpy as np
import pytest

from parameters.layout_parameters import LayoutParameters
from runtime.layout_state import LayoutState
from runtime.thermal import apply_thermal_update


def _state(temperature=100.0):
    state = LayoutState(
        node_ids=["a", "b"],
        positions=[[0.0, 0.0], [500.0, 0.0]],
        neighbors=[np.array([], dtype=np.intp)] * 2,
        max_temperature=256.0,
    )
    state.temperatures[:] = temperature
    return state


def test_first_move_has_length_temperature_and_keeps_sum_consistent():
    state = _state()
    params = LayoutParameters()

    temp = apply_thermal_update(state, 0, np.array([3.0, 4.0]), params)

    assert temp == 100.0
    np.testing.assert_allclose(state.positions[0], [60.0, 80.0])
    np.testing.assert_allclose(state.impulses[0], [60.0, 80.0])
    np.testing.assert_allclose(state.sum_pos, state.positions.sum(axis=0))
    assert state.global_temperature == 100.0
    assert state.skews[0] == 0.0


def test_same_direction_speeds_up():
    state = _state()
    params = LayoutParameters()

    apply_thermal_update(state, 0, np.array([1.0, 0.0]), params)
    temp = apply_thermal_update(state, 0, np.array([2.0, 0.0]), params)

    assert temp == pytest.approx(110.0)
    assert state.skews[0] == 0.0
    np.testing.assert_allclose(state.positions[0], [200.0, 0.0])


def test_speed_up_is_capped_at_max_temperature():
    state = _state(temperature=250.0)
    params = LayoutParameters()

    apply_thermal_update(state, 0, np.array([1.0, 0.0]), params)
    temp = apply_thermal_update(state, 0, np.array([1.0, 0.0]), params)

    assert temp == 256.0


def test_reversal_slows_down():
    state = _state()
    params = LayoutParameters({"rotation_opening_angle": math.pi / 3})

    apply_thermal_update(state, 0, np.array([1.0, 0.0]), params)
    temp = apply_thermal_update(state, 0, np.array([-1.0, 0.0]), params)

    assert temp == pytest.approx(100.0 / 1.1)
    np.testing.assert_allclose(state.positions[0], [0.0, 0.0], atol=1e-12)


def test_sideways_turn_grows_skew_and_damps():
    state = _state()
    params = LayoutParameters()

    apply_thermal_update(state, 0, np.array([1.0, 0.0]), params)
    temp = apply_thermal_update(state, 0, np.array([0.0, 1.0]), params)

    # rotation_sensitivity = 1 / (2 * 2); a right angle is outside the
    # oscillation cone, so only the skew damping applies.
    assert state.skews[0] == pytest.approx(0.25)
    assert temp == pytest.approx(75.0)


def test_zero_impulse_skips_angle_checks_but_damps():
    state = _state()
    state.impulses[0] = [1.0, 0.0]
    state.skews[0] = 0.5
    before = state.positions[0].copy()

    temp = apply_thermal_update(state, 0, np.zeros(2), LayoutParameters())

    assert temp == pytest.approx(50.0)
    assert math.isfinite(temp)
    np.testing.assert_array_equal(state.positions[0], before)
    np.testing.assert_array_equal(state.impulses[0], [0.0, 0.0])
    assert state.skews[0] == 0.5


def test_both_impulses_zero_leave_temperature_untouched():
    state = _state()
    temp = apply_thermal_update(state, 0, np.zeros(2), LayoutParameters())
    assert temp == 100.0
    assert np.all(np.isfinite(state.impulses))


def test_skew_is_clamped_so_temperature_never_goes_negative():
    # The unclamped update would reach skew 1.4 and a factor of -0.4 here.
    # Skew is clamped to [-1, 1], which drives the temperature to exactly 0.
    state = _state()
    state.rotation_sensitivity = 0.5
    state.skews[0] = 0.9
    params = LayoutParameters()

    apply_thermal_update(state, 0, np.array([1.0, 0.0]), params)
    temp = apply_thermal_update(state, 0, np.array([0.0, 1.0]), params)

    assert state.skews[0] == 1.0
    assert temp == 0.0

    temp = apply_thermal_update(state, 0, np.array([1.0, 1.0]), params)
    assert temp == 0.0
    assert np.all(np.isfinite(state.positions))


def test_global_temperature_accumulates_over_vertices():
    state = _state()
    state.temperatures[1] = 40.0
    params = LayoutParameters()

    t0 = apply_thermal_update(state, 0, np.array([1.0, 0.0]), params)
    t1 = apply_thermal_update(state, 1, np.array([0.0, 1.0]), params)

    assert state.global_temperature == pytest.approx(t0 + t1)
    np.testing.assert_allclose(state.sum_pos, state.positions.sum(axis=0))
