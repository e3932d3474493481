"""
domain/heat_load.py
===================
Room-level steady-state heat loss: fabric transmission through U-values plus
sensible ventilation loss from the air-change rate, scaled by a safety factor
to give the design heat load.

All U-values in W/(m²·K), temperatures in °C, heat losses in W.
This module has zero dependencies on pandas, logging, or any service layer.
"""
from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Dict

import numpy as np

from config import CALC_PRECISION, CALCULATION_METHOD, DEFAULT_CONSTANTS, PhysicalConstants
from domain.errors import InvalidInputError

SECONDS_PER_HOUR: float = 3600.0


# ---------------------------------------------------------------------------
# Value records
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Room:
    """
    One enclosed space to be heated.

    Parameters
    ----------
    area           : Floor area                                [m²]
    volume         : Air volume                                [m³]
    ceiling_height : Floor-to-ceiling height                   [m]
    exterior_walls : Walls (of 4 notional) facing outdoors     [–]
    window_area    : Glazed area on exterior walls             [m²]
    door_count     : Informational only
    target_temp    : Informational; the calculation uses CalculationParams.indoor_temp
    id, name       : Caller-owned identifiers
    """

    area: float
    volume: float
    ceiling_height: float
    exterior_walls: float = 0.0
    window_area: float = 0.0
    door_count: int = 0
    target_temp: float = 20.0
    id: str = ""
    name: str = ""


@dataclass(frozen=True)
class CalculationParams:
    """Thermal inputs shared by every room in one building pass."""

    outdoor_temp: float
    indoor_temp: float
    wall_u_value: float
    window_u_value: float
    floor_u_value: float
    ceiling_u_value: float
    air_change_rate: float


@dataclass(frozen=True)
class CalculationResult:
    transmission_loss: float
    ventilation_loss: float
    total_heat_loss: float
    design_heat_load: float
    safety_factor: float
    method: str
    calculation_time_ms: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "transmissionLoss":  self.transmission_loss,
            "ventilationLoss":   self.ventilation_loss,
            "totalHeatLoss":     self.total_heat_loss,
            "designHeatLoad":    self.design_heat_load,
            "safetyFactor":      self.safety_factor,
            "method":            self.method,
            "calculationTimeMs": self.calculation_time_ms,
        }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def compute_room_heat_loss(
    room: Room,
    params: CalculationParams,
    precision: int = CALC_PRECISION,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> CalculationResult:
    """
    Transmission, ventilation, total loss and design load for one room [W].

    Raises InvalidInputError before any arithmetic when validation fails.
    """
    start = time.perf_counter()
    validate_inputs(room, params, constants)

    delta_t = params.indoor_temp - params.outdoor_temp
    transmission = calculate_transmission_loss(room, params, delta_t, constants)
    ventilation  = calculate_ventilation_loss(room, params, delta_t, constants)
    total  = transmission + ventilation
    design = total * constants.safety_factor

    elapsed_ms = (time.perf_counter() - start) * 1000.0
    return CalculationResult(
        transmission_loss   = round_half_up(transmission, precision),
        ventilation_loss    = round_half_up(ventilation, precision),
        total_heat_loss     = round_half_up(total, precision),
        design_heat_load    = round_half_up(design, precision),
        safety_factor       = constants.safety_factor,
        method              = CALCULATION_METHOD,
        calculation_time_ms = round(elapsed_ms, 3),
    )


def validate_inputs(
    room: Room,
    params: CalculationParams,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> None:
    """Raise InvalidInputError naming the first violated constraint."""
    c = constants
    if not room.area > 0:
        raise InvalidInputError("Room area must be greater than 0")
    if not room.volume > 0:
        raise InvalidInputError("Room volume must be greater than 0")
    if not room.ceiling_height > 0:
        raise InvalidInputError("Ceiling height must be greater than 0")

    if not params.outdoor_temp >= c.min_outdoor_temp:
        raise InvalidInputError(f"Outdoor temperature too low (min: {c.min_outdoor_temp:g}°C)")
    if not params.outdoor_temp <= c.max_outdoor_temp:
        raise InvalidInputError(f"Outdoor temperature too high (max: {c.max_outdoor_temp:g}°C)")
    if not params.indoor_temp >= c.min_indoor_temp:
        raise InvalidInputError(f"Indoor temperature too low (min: {c.min_indoor_temp:g}°C)")
    if not params.indoor_temp <= c.max_indoor_temp:
        raise InvalidInputError(f"Indoor temperature too high (max: {c.max_indoor_temp:g}°C)")
    if not params.indoor_temp > params.outdoor_temp:
        raise InvalidInputError("Indoor temperature must be greater than outdoor temperature")

    u_values = {
        "wall":    params.wall_u_value,
        "window":  params.window_u_value,
        "floor":   params.floor_u_value,
        "ceiling": params.ceiling_u_value,
    }
    for element, u in u_values.items():
        if not 0 < u <= c.max_u_value:
            raise InvalidInputError(
                f"Invalid {element} U-value (must be 0-{c.max_u_value:g} W/m²K)"
            )

    if not 0 <= params.air_change_rate <= c.max_air_change_rate:
        raise InvalidInputError(
            f"Invalid air change rate (must be 0-{c.max_air_change_rate:g} ACH)"
        )


# ---------------------------------------------------------------------------
# Loss components
# ---------------------------------------------------------------------------

def calculate_transmission_loss(
    room: Room,
    params: CalculationParams,
    delta_t: float,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float:
    """
    Fabric loss Q = U·A·ΔT summed over walls, windows, floor and ceiling.

    The room is modelled as a square footprint. Window area larger than the
    wall area and exterior_walls outside 0–4 are not clamped.
    """
    areas = _compute_element_areas(room, constants)

    walls   = params.wall_u_value   * areas["walls"]   * delta_t
    windows = params.window_u_value * areas["windows"] * delta_t
    floor   = params.floor_u_value  * areas["floor"]   * delta_t * constants.ground_loss_factor
    ceiling = params.ceiling_u_value * areas["ceiling"] * delta_t
    return float(walls + windows + floor + ceiling)


def calculate_ventilation_loss(
    room: Room,
    params: CalculationParams,
    delta_t: float,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float:
    """Sensible air-change loss Q = ṁ·c_p·ΔT."""
    volume_flow_m3_s = room.volume * params.air_change_rate / SECONDS_PER_HOUR
    mass_flow_kg_s   = volume_flow_m3_s * constants.air_density
    return mass_flow_kg_s * constants.specific_heat_air * delta_t


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

def _compute_element_areas(room: Room, constants: PhysicalConstants) -> Dict[str, float]:
    perimeter  = 4.0 * float(np.sqrt(room.area))
    wall_gross = perimeter * room.ceiling_height
    wall_net   = wall_gross - room.window_area
    exterior_fraction = room.exterior_walls / constants.notional_walls

    return {
        "walls":   wall_net * exterior_fraction,
        "windows": room.window_area * exterior_fraction,
        "floor":   room.area,
        "ceiling": room.area,
    }


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------

def round_half_up(value: float, precision: int = CALC_PRECISION) -> float:
    """
    Round half towards +∞ at `precision` decimals (not banker's rounding).

    Raises InvalidInputError when the scaled value is NaN or infinite, which
    only happens for non-finite or out-of-range inputs.
    """
    multiplier = 10 ** precision
    scaled = value * multiplier
    if not math.isfinite(scaled):
        raise InvalidInputError(
            f"Calculated value {value!r} is not a finite number; check inputs for "
            "non-finite or out-of-range values"
        )
    return math.floor(scaled + 0.5) / multiplier
