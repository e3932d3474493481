"""
services/room_service.py
========================
Orchestrates room-level heat loss calculations for API callers.

Takes raw request payloads (dicts, camelCase as sent by the web client, or
snake_case as stored) → builds domain records → runs the calculation with
logging. The domain layer itself never logs.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Dict, Mapping, Optional, Sequence

from config import (
    CALC_PRECISION,
    DEFAULT_AIR_CHANGE_RATE,
    DEFAULT_INDOOR_TEMP,
    STANDARD_U_VALUES,
    UK_DESIGN_TEMPS,
)
from domain.errors import InvalidInputError
from domain.heat_load import CalculationParams, CalculationResult, Room, compute_room_heat_loss

logger = logging.getLogger(__name__)

_REQUIRED = object()


# ---------------------------------------------------------------------------
# Payload → domain
# ---------------------------------------------------------------------------

def room_from_payload(payload: Mapping[str, Any]) -> Room:
    """Build a Room from a request body or stored row."""
    return Room(
        area           = read_number(payload, ("area",)),
        volume         = read_number(payload, ("volume",)),
        ceiling_height = read_number(payload, ("ceilingHeight", "ceiling_height")),
        exterior_walls = read_number(payload, ("exteriorWalls", "exterior_walls"), 0.0),
        window_area    = read_number(payload, ("windowArea", "window_area"), 0.0),
        door_count     = int(read_number(payload, ("doorCount", "door_count"), 0)),
        target_temp    = read_number(payload, ("targetTemp", "target_temperature", "target_temp"), 20.0),
        id             = str(payload.get("id") or ""),
        name           = str(payload.get("name") or ""),
    )


def params_from_payload(payload: Mapping[str, Any]) -> CalculationParams:
    """Build CalculationParams from a request body; every field is required."""
    return CalculationParams(
        outdoor_temp    = read_number(payload, ("outdoorTemp", "outdoor_temp")),
        indoor_temp     = read_number(payload, ("indoorTemp", "indoor_temp")),
        wall_u_value    = read_number(payload, ("wallUValue", "wall_u_value")),
        window_u_value  = read_number(payload, ("windowUValue", "window_u_value")),
        floor_u_value   = read_number(payload, ("floorUValue", "floor_u_value")),
        ceiling_u_value = read_number(payload, ("ceilingUValue", "ceiling_u_value")),
        air_change_rate = read_number(payload, ("airChangeRate", "air_change_rate")),
    )


def params_from_presets(
    location: str = "DEFAULT",
    wall: str = "cavity fill",
    window: str = "double glazed",
    floor: str = "insulated",
    ceiling: str = "270mm insulation",
    indoor_temp: float = DEFAULT_INDOOR_TEMP,
    air_change_rate: float = DEFAULT_AIR_CHANGE_RATE,
) -> CalculationParams:
    """
    CalculationParams from a UK design location and named construction types
    (see config.UK_DESIGN_TEMPS and config.STANDARD_U_VALUES).
    """
    key = location.strip().upper()
    if key not in UK_DESIGN_TEMPS:
        raise InvalidInputError(f"Unknown design location: {location}")
    return CalculationParams(
        outdoor_temp    = UK_DESIGN_TEMPS[key],
        indoor_temp     = indoor_temp,
        wall_u_value    = _preset_u_value("wall", wall),
        window_u_value  = _preset_u_value("window", window),
        floor_u_value   = _preset_u_value("floor", floor),
        ceiling_u_value = _preset_u_value("ceiling", ceiling),
        air_change_rate = air_change_rate,
    )


# ---------------------------------------------------------------------------
# Calculation
# ---------------------------------------------------------------------------

def calculate_room(
    room: Room,
    params: CalculationParams,
    precision: int = CALC_PRECISION,
) -> CalculationResult:
    """compute_room_heat_loss with success/failure logging."""
    try:
        result = compute_room_heat_loss(room, params, precision=precision)
    except InvalidInputError as err:
        logger.error("Heat loss calculation failed for room %r: %s", room.id, err)
        raise

    logger.info(
        "Heat loss calculated for room %r (%s): transmission=%.2f W, "
        "ventilation=%.2f W, total=%.2f W, design=%.2f W in %.3f ms",
        room.id, room.name,
        result.transmission_loss, result.ventilation_loss,
        result.total_heat_loss, result.design_heat_load,
        result.calculation_time_ms,
    )
    return result


def calculate_room_payload(
    room_payload: Mapping[str, Any],
    params_payload: Mapping[str, Any],
) -> Dict[str, Any]:
    """Request body in, response body out: {"roomId", "result"}."""
    room = room_from_payload(room_payload)
    result = calculate_room(room, params_from_payload(params_payload))
    return {"roomId": room.id, "result": result.to_dict()}


# ---------------------------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------------------------

def read_number(payload: Mapping[str, Any], keys: Sequence[str], default: Any = _REQUIRED) -> float:
    """
    First present key of `keys` as a finite float. Falls back to `default`
    when none is present; raises InvalidInputError when required or invalid.
    """
    for key in keys:
        if key in payload and payload[key] is not None:
            raw = payload[key]
            break
    else:
        if default is _REQUIRED:
            raise InvalidInputError(f"Missing required field: {keys[0]}")
        return float(default)

    if isinstance(raw, bool):
        raise InvalidInputError(f"Field {key} must be a number")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Field {key} must be a number") from None
    if not math.isfinite(value):
        raise InvalidInputError(f"Field {key} must be finite")
    return value


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _preset_u_value(element: str, construction: Optional[str]) -> float:
    table = STANDARD_U_VALUES[element]
    name = (construction or "").strip().lower()
    if name not in table:
        raise InvalidInputError(
            f"Unknown {element} construction: {construction} "
            f"(expected one of: {', '.join(table)})"
        )
    return table[name]
