"""
domain/radiator.py
==================
Emitter (radiator) sizing from a design heat load and water temperatures.

Catalogue ratings are quoted at the 75/65/20 reference condition; outputs at
other conditions scale with (ΔT / ΔT_ref) ** n. Zero pandas / service-layer
dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from config import (
    AVAILABLE_RADIATOR_POWERS,
    CALC_PRECISION,
    DEFAULT_CONSTANTS,
    RADIATOR_SELECTION_MARGIN,
    PhysicalConstants,
)
from domain.errors import InvalidInputError
from domain.heat_load import round_half_up

CORRECTION_PRECISION: int = 3


@dataclass(frozen=True)
class EmitterSizing:
    """
    required_output : Rated output needed at 75/65/20   [W]
    mean_water_temp : (flow + return) / 2               [°C]
    correction      : Output ratio at operating vs rated conditions [–]
    """

    required_output: float
    mean_water_temp: float
    correction: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "requiredOutput": self.required_output,
            "meanWaterTemp":  self.mean_water_temp,
            "correction":     self.correction,
        }


@dataclass(frozen=True)
class RadiatorCheck:
    """Existing radiator against a design load at operating temperatures [W]."""

    available_output: float
    shortfall: float
    adequate: bool


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def compute_emitter_size(
    design_heat_load: float,
    flow_temp: float = 75.0,
    return_temp: float = 65.0,
    room_temp: float = 20.0,
    precision: int = CALC_PRECISION,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> EmitterSizing:
    """Rated radiator output required to deliver design_heat_load."""
    mean_water_temp = (flow_temp + return_temp) / 2.0
    correction = _correction_factor(mean_water_temp, room_temp, constants)
    return EmitterSizing(
        required_output = round_half_up(design_heat_load / correction, precision),
        mean_water_temp = round_half_up(mean_water_temp, precision),
        correction      = round_half_up(correction, CORRECTION_PRECISION),
    )


def check_existing_radiator(
    rated_output: float,
    design_heat_load: float,
    flow_temp: float = 75.0,
    return_temp: float = 65.0,
    room_temp: float = 20.0,
    precision: int = CALC_PRECISION,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> RadiatorCheck:
    """
    Derate a radiator's 75/65/20 rating to the operating temperatures and
    compare it with the design load. Used when lowering flow temperatures
    on an existing system.
    """
    if not rated_output >= 0:
        raise InvalidInputError("Radiator rated output must not be negative")
    mean_water_temp = (flow_temp + return_temp) / 2.0
    correction = _correction_factor(mean_water_temp, room_temp, constants)

    available = rated_output * correction
    shortfall = max(0.0, design_heat_load - available)
    return RadiatorCheck(
        available_output = round_half_up(available, precision),
        shortfall        = round_half_up(shortfall, precision),
        adequate         = shortfall == 0.0,
    )


def select_radiator_rating(
    required_output: float,
    available: List[int] = AVAILABLE_RADIATOR_POWERS,
    margin: float = RADIATOR_SELECTION_MARGIN,
) -> Optional[int]:
    """Smallest catalogue rating above required_output + margin, or None."""
    for power in sorted(available):
        if power > required_output + margin:
            return power
    return None


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _correction_factor(
    mean_water_temp: float,
    room_temp: float,
    constants: PhysicalConstants,
) -> float:
    delta_t = mean_water_temp - room_temp
    if not delta_t > 0:
        raise InvalidInputError(
            "Invalid temperature configuration: mean water temperature "
            f"({mean_water_temp:g}°C) must be above room temperature ({room_temp:g}°C)"
        )
    return (delta_t / constants.emitter_standard_delta_t) ** constants.emitter_exponent
