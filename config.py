"""
config.py
=========
Application-wide constants: physical constants, validation limits, UK design
presets and radiator catalogue. No business logic and no environment lookups
live here; callers pass `precision=` explicitly to change rounding.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------
CALC_PRECISION: int = 2                  # decimals in rounded results
CALCULATION_METHOD: str = "EN_12831"


# ---------------------------------------------------------------------------
# Physical constants and validation limits
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class PhysicalConstants:
    """
    Constants used by the heat-loss and emitter formulas.

    Override in tests with ``dataclasses.replace(DEFAULT_CONSTANTS, ...)``.
    """

    air_density: float = 1.2            # kg/m³ at 20 °C
    specific_heat_air: float = 1005.0   # J/(kg·K)
    safety_factor: float = 1.15         # 15 % design margin
    ground_loss_factor: float = 0.5     # floor loss reduction for ground contact

    min_outdoor_temp: float = -20.0     # °C
    max_outdoor_temp: float = 15.0      # °C
    min_indoor_temp: float = 15.0       # °C
    max_indoor_temp: float = 25.0       # °C
    max_u_value: float = 10.0           # W/(m²·K)
    max_air_change_rate: float = 10.0   # ACH

    notional_walls: int = 4             # square footprint
    emitter_standard_delta_t: float = 50.0   # (75 + 65) / 2 − 20  [K]
    emitter_exponent: float = 1.3


DEFAULT_CONSTANTS = PhysicalConstants()


# ---------------------------------------------------------------------------
# UK design presets
# ---------------------------------------------------------------------------
UK_DESIGN_TEMPS: Dict[str, float] = {
    "LONDON":     -3.0,
    "BIRMINGHAM": -4.0,
    "MANCHESTER": -4.0,
    "EDINBURGH":  -5.0,
    "GLASGOW":    -5.0,
    "CARDIFF":    -3.0,
    "BELFAST":    -4.0,
    "DEFAULT":    -3.0,
}

STANDARD_U_VALUES: Dict[str, Dict[str, float]] = {
    "wall": {
        "uninsulated":         2.1,
        "cavity fill":         0.55,
        "external insulation": 0.30,
        "new build":           0.18,
    },
    "window": {
        "single glazed": 5.0,
        "double glazed": 2.8,
        "double low-e":  1.8,
        "triple glazed": 0.8,
    },
    "floor": {
        "uninsulated": 0.70,
        "insulated":   0.25,
        "suspended":   0.45,
    },
    "ceiling": {
        "uninsulated":      2.0,
        "100mm insulation": 0.4,
        "270mm insulation": 0.16,
    },
}

DEFAULT_AIR_CHANGE_RATE: float = 0.5     # ACH, typical dwelling
DEFAULT_INDOOR_TEMP: float = 21.0        # °C

# ---------------------------------------------------------------------------
# Radiator catalogue  (rated output at 75/65/20, W)
# ---------------------------------------------------------------------------
AVAILABLE_RADIATOR_POWERS: List[int] = [500, 750, 1000, 1250, 1500, 2000, 2500, 3000, 3500, 4000]
RADIATOR_SELECTION_MARGIN: float = 100.0  # W headroom over required output
