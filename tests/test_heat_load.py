"""
tests/test_heat_load.py
Tests for domain/heat_load.py (validation, loss components, rounding).
"""
import dataclasses
import importlib

import pytest
import sys, pathlib
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

import config
from config import DEFAULT_CONSTANTS
from domain.errors import InvalidInputError
from domain.heat_load import (
    CalculationParams,
    Room,
    calculate_transmission_loss,
    calculate_ventilation_loss,
    compute_room_heat_loss,
    round_half_up,
    validate_inputs,
)

NAN = float("nan")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def living_room():
    return Room(
        area=20.0, volume=50.0, ceiling_height=2.5, exterior_walls=2,
        window_area=4.0, door_count=1, target_temp=20.0,
        id="room-1", name="Living Room",
    )


@pytest.fixture
def params():
    return CalculationParams(
        outdoor_temp=-3.0, indoor_temp=20.0,
        wall_u_value=0.3, window_u_value=1.4,
        floor_u_value=0.25, ceiling_u_value=0.16,
        air_change_rate=0.5,
    )


# ---------------------------------------------------------------------------
# compute_room_heat_loss
# ---------------------------------------------------------------------------
class TestComputeRoomHeatLoss:

    def test_living_room_scenario(self, living_room, params):
        result = compute_room_heat_loss(living_room, params)
        assert result.transmission_loss > 0
        assert result.ventilation_loss > 0
        assert result.total_heat_loss > 0
        assert result.design_heat_load > result.total_heat_loss
        assert result.safety_factor == 1.15
        assert result.method == "EN_12831"

    def test_living_room_values(self, living_room, params):
        result = compute_room_heat_loss(living_room, params)
        assert result.transmission_loss == pytest.approx(335.99, abs=0.01)
        assert result.ventilation_loss == pytest.approx(192.63, abs=0.01)
        assert result.total_heat_loss == pytest.approx(528.61, abs=0.01)
        assert result.design_heat_load == pytest.approx(607.91, abs=0.01)

    def test_total_is_sum_of_components(self, living_room, params):
        r = compute_room_heat_loss(living_room, params)
        assert r.total_heat_loss == pytest.approx(r.transmission_loss + r.ventilation_loss, abs=0.011)

    def test_design_load_applies_safety_factor(self, living_room, params):
        r = compute_room_heat_loss(living_room, params)
        assert r.design_heat_load == pytest.approx(r.total_heat_loss * 1.15, abs=0.02)

    def test_idempotent(self, living_room, params):
        a = compute_room_heat_loss(living_room, params)
        b = compute_room_heat_loss(living_room, params)
        assert dataclasses.replace(a, calculation_time_ms=0) == dataclasses.replace(b, calculation_time_ms=0)

    def test_calculation_time_reported(self, living_room, params):
        assert compute_room_heat_loss(living_room, params).calculation_time_ms >= 0

    def test_precision_respected(self, living_room, params):
        r = compute_room_heat_loss(living_room, params, precision=0)
        assert r.total_heat_loss == float(int(r.total_heat_loss))

    def test_result_is_immutable(self, living_room, params):
        r = compute_room_heat_loss(living_room, params)
        with pytest.raises(dataclasses.FrozenInstanceError):
            r.total_heat_loss = 0.0

    def test_to_dict_uses_api_keys(self, living_room, params):
        d = compute_room_heat_loss(living_room, params).to_dict()
        assert set(d) == {
            "transmissionLoss", "ventilationLoss", "totalHeatLoss", "designHeatLoad",
            "safetyFactor", "method", "calculationTimeMs",
        }

    def test_overridden_safety_factor(self, living_room, params):
        constants = dataclasses.replace(DEFAULT_CONSTANTS, safety_factor=1.2)
        r = compute_room_heat_loss(living_room, params, constants=constants)
        assert r.safety_factor == 1.2
        assert r.design_heat_load == pytest.approx(r.total_heat_loss * 1.2, abs=0.02)

    def test_target_temp_and_doors_not_used(self, living_room, params):
        other = dataclasses.replace(living_room, target_temp=5.0, door_count=7)
        assert (compute_room_heat_loss(other, params).total_heat_loss
                == compute_room_heat_loss(living_room, params).total_heat_loss)


# ---------------------------------------------------------------------------
# Monotonicity
# ---------------------------------------------------------------------------
class TestMonotonicity:

    @pytest.mark.parametrize("field", [
        "wall_u_value", "window_u_value", "floor_u_value", "ceiling_u_value",
    ])
    def test_higher_u_value_increases_transmission(self, living_room, params, field):
        worse = dataclasses.replace(params, **{field: getattr(params, field) + 0.5})
        assert (compute_room_heat_loss(living_room, worse).transmission_loss
                > compute_room_heat_loss(living_room, params).transmission_loss)

    def test_higher_ach_increases_ventilation(self, living_room, params):
        leaky = dataclasses.replace(params, air_change_rate=1.5)
        assert (compute_room_heat_loss(living_room, leaky).ventilation_loss
                > compute_room_heat_loss(living_room, params).ventilation_loss)

    def test_colder_outdoor_increases_both_losses(self, living_room, params):
        cold = dataclasses.replace(params, outdoor_temp=-10.0)
        base = compute_room_heat_loss(living_room, params)
        colder = compute_room_heat_loss(living_room, cold)
        assert colder.transmission_loss > base.transmission_loss
        assert colder.ventilation_loss > base.ventilation_loss

    def test_zero_ach_gives_zero_ventilation(self, living_room, params):
        sealed = dataclasses.replace(params, air_change_rate=0.0)
        assert compute_room_heat_loss(living_room, sealed).ventilation_loss == 0.0


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------
class TestValidation:

    @pytest.mark.parametrize("value", [0.0, -1.0, NAN])
    @pytest.mark.parametrize("field, message", [
        ("area", "Room area must be greater than 0"),
        ("volume", "Room volume must be greater than 0"),
        ("ceiling_height", "Ceiling height must be greater than 0"),
    ])
    def test_geometry_rejected(self, living_room, params, field, message, value):
        bad = dataclasses.replace(living_room, **{field: value})
        with pytest.raises(InvalidInputError, match=message):
            compute_room_heat_loss(bad, params)

    @pytest.mark.parametrize("changes, message", [
        ({"outdoor_temp": -21.0}, "Outdoor temperature too low"),
        ({"outdoor_temp": 16.0}, "Outdoor temperature too high"),
        ({"indoor_temp": 14.0}, "Indoor temperature too low"),
        ({"indoor_temp": -5.0}, "Indoor temperature too low"),
        ({"indoor_temp": 26.0}, "Indoor temperature too high"),
        ({"indoor_temp": 15.0, "outdoor_temp": 15.0},
         "Indoor temperature must be greater than outdoor temperature"),
        ({"wall_u_value": 0.0}, "Invalid wall U-value"),
        ({"window_u_value": 10.5}, "Invalid window U-value"),
        ({"floor_u_value": -1.0}, "Invalid floor U-value"),
        ({"ceiling_u_value": 11.0}, "Invalid ceiling U-value"),
        ({"air_change_rate": 11.0}, "Invalid air change rate"),
        ({"air_change_rate": -0.1}, "Invalid air change rate"),
        ({"outdoor_temp": NAN}, "Outdoor temperature too low"),
        ({"indoor_temp": NAN}, "Indoor temperature too low"),
        ({"wall_u_value": NAN}, "Invalid wall U-value"),
        ({"window_u_value": NAN}, "Invalid window U-value"),
        ({"floor_u_value": NAN}, "Invalid floor U-value"),
        ({"ceiling_u_value": NAN}, "Invalid ceiling U-value"),
        ({"air_change_rate": NAN}, "Invalid air change rate"),
    ])
    def test_params_rejected(self, living_room, params, changes, message):
        bad = dataclasses.replace(params, **changes)
        with pytest.raises(InvalidInputError, match=message):
            compute_room_heat_loss(living_room, bad)

    def test_boundaries_accepted(self, living_room):
        edge = CalculationParams(
            outdoor_temp=-20.0, indoor_temp=25.0,
            wall_u_value=10.0, window_u_value=10.0,
            floor_u_value=10.0, ceiling_u_value=10.0,
            air_change_rate=10.0,
        )
        validate_inputs(living_room, edge)

    def test_first_violation_reported(self, living_room, params):
        bad_room = dataclasses.replace(living_room, area=0.0)
        bad_params = dataclasses.replace(params, wall_u_value=0.0)
        with pytest.raises(InvalidInputError, match="Room area"):
            compute_room_heat_loss(bad_room, bad_params)

    def test_error_is_value_error_with_status(self, living_room, params):
        with pytest.raises(ValueError) as exc:
            compute_room_heat_loss(dataclasses.replace(living_room, volume=-1.0), params)
        assert exc.value.status_code == 400

    def test_non_finite_unvalidated_field_rejected(self, living_room, params):
        odd = dataclasses.replace(living_room, exterior_walls=NAN)
        with pytest.raises(InvalidInputError, match="not a finite number"):
            compute_room_heat_loss(odd, params)

    def test_huge_room_rejected_not_overflow(self, params):
        huge = Room(area=1e307, volume=50.0, ceiling_height=2.5)
        with pytest.raises(InvalidInputError, match="not a finite number"):
            compute_room_heat_loss(huge, params)


# ---------------------------------------------------------------------------
# Loss components and unclamped geometry
# ---------------------------------------------------------------------------
class TestComponents:

    def test_no_exterior_walls_leaves_floor_and_ceiling(self, living_room, params):
        interior = dataclasses.replace(living_room, exterior_walls=0)
        loss = calculate_transmission_loss(interior, params, 23.0)
        assert loss == pytest.approx(0.25 * 20 * 23 * 0.5 + 0.16 * 20 * 23)

    def test_exterior_walls_above_four_not_clamped(self, living_room, params):
        def wall_part(walls):
            room = dataclasses.replace(living_room, exterior_walls=walls)
            interior = dataclasses.replace(living_room, exterior_walls=0)
            return (calculate_transmission_loss(room, params, 23.0)
                    - calculate_transmission_loss(interior, params, 23.0))
        assert wall_part(8) == pytest.approx(2 * wall_part(4))

    def test_window_larger_than_wall_not_clamped(self, living_room, params):
        glazed = dataclasses.replace(living_room, window_area=100.0)
        # Wall term goes negative instead of being clamped at zero.
        expected_walls = 0.3 * (4 * 20 ** 0.5 * 2.5 - 100.0) * 0.5 * 23
        expected = expected_walls + 1.4 * 100.0 * 0.5 * 23 + 57.5 + 73.6
        assert calculate_transmission_loss(glazed, params, 23.0) == pytest.approx(expected)

    def test_ventilation_formula(self, living_room, params):
        expected = 50 * 0.5 / 3600 * 1.2 * 1005 * 23
        assert calculate_ventilation_loss(living_room, params, 23.0) == pytest.approx(expected)


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------
class TestRoundHalfUp:

    def test_half_rounds_up(self):
        assert round_half_up(0.125, 2) == 0.13

    def test_not_bankers_rounding(self):
        assert round_half_up(2.5, 0) == 3.0

    def test_negative_half_rounds_towards_positive(self):
        assert round_half_up(-2.5, 0) == -2.0

    def test_default_precision_two(self):
        assert round_half_up(1.23456) == 1.23

    @pytest.mark.parametrize("value", [NAN, float("inf"), float("-inf"), 1e307])
    def test_non_finite_scaled_value_rejected(self, value):
        with pytest.raises(InvalidInputError):
            round_half_up(value, 2)

    def test_default_precision_ignores_environment(self, monkeypatch, living_room, params):
        monkeypatch.setenv("CALC_PRECISION", "0")
        importlib.reload(config)
        assert config.CALC_PRECISION == 2
        assert compute_room_heat_loss(living_room, params).total_heat_loss == \
               pytest.approx(528.61, abs=0.01)
