# runtime/thermal.py

import math

import numpy as np

from parameters.layout_parameters import LayoutParameters
from runtime.layout_state import LayoutState


def apply_thermal_update(
    state: LayoutState, row: int, impulse: np.ndarray, params: LayoutParameters
) -> float:
    """Move vertex ``row`` along ``impulse`` and adapt its temperature.

    The step length equals the vertex's current temperature. Comparing the
    new impulse with the previous one detects progress (same direction:
    heat up), oscillation (reversal: cool down) and rotation (sideways
    turns: grow the skew, which damps the temperature). The resulting
    temperature is added to ``state.global_temperature`` and returned.
    """
    temperature = float(state.temperatures[row])
    impulse = np.asarray(impulse, dtype=np.float64)

    length = math.hypot(impulse[0], impulse[1])
    if length != 0:
        impulse = impulse * (temperature / length)
        state.positions[row] += impulse
        state.sum_pos += impulse
        length = math.hypot(impulse[0], impulse[1])

    previous = state.impulses[row]
    previous_length = math.hypot(previous[0], previous[1])

    if previous_length != 0:
        skew = float(state.skews[row])
        # A zero current impulse leaves the angle undefined: no oscillation or
        # rotation check this round, damping still applies.
        if length != 0:
            cos_angle = float(np.dot(impulse, previous)) / (length * previous_length)
            angle = math.acos(min(1.0, max(-1.0, cos_angle)))
            sin_angle = math.sin(angle)
            cos_angle = math.cos(angle)

            rotation_limit = math.sin(math.pi / 2 + params.rotation_opening_angle / 2)
            if sin_angle >= rotation_limit:
                skew += state.rotation_sensitivity * float(np.sign(sin_angle))

            if abs(cos_angle) >= math.cos(params.oscillation_opening_angle / 2):
                if cos_angle > 0:
                    temperature *= params.oscillation_sensitivity
                elif cos_angle < 0:
                    temperature /= params.oscillation_sensitivity

        skew = min(1.0, max(-1.0, skew))
        temperature *= 1.0 - abs(skew)
        temperature = min(max(temperature, 0.0), float(params.max_temperature))
        state.skews[row] = skew
        state.temperatures[row] = temperature

    state.impulses[row] = impulse
    state.global_temperature += temperature
    return temperature
