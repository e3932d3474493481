"""
services/radiator_service.py
============================
Orchestrates emitter sizing for API callers and builds the per-room radiator
schedule that reports consume.

Bridges request payloads and BuildingHeatLoss results to the domain helpers
in domain/radiator.py. Logs; the domain layer does not.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

import pandas as pd

from config import AVAILABLE_RADIATOR_POWERS, CALC_PRECISION
from domain.errors import InvalidInputError
from domain.radiator import EmitterSizing, compute_emitter_size, select_radiator_rating
from services.building_service import BuildingHeatLoss
from services.room_service import read_number

logger = logging.getLogger(__name__)

SCHEDULE_COLUMNS: List[str] = [
    "Room",
    "Design Heat Load (W)",
    "Mean Water Temp (°C)",
    "Correction",
    "Required Output 75/65/20 (W)",
    "Suggested Radiator (W)",
]


def size_emitter(
    design_heat_load: float,
    flow_temp: float = 75.0,
    return_temp: float = 65.0,
    room_temp: float = 20.0,
    precision: int = CALC_PRECISION,
) -> EmitterSizing:
    """compute_emitter_size with logging."""
    try:
        sizing = compute_emitter_size(
            design_heat_load, flow_temp, return_temp, room_temp, precision=precision,
        )
    except InvalidInputError as err:
        logger.error(
            "Emitter sizing failed (%.1f/%.1f/%.1f °C): %s",
            flow_temp, return_temp, room_temp, err,
        )
        raise
    logger.info(
        "Emitter sized: load=%.2f W at %.1f/%.1f/%.1f °C -> %.2f W rated (correction %.3f)",
        design_heat_load, flow_temp, return_temp, room_temp,
        sizing.required_output, sizing.correction,
    )
    return sizing


def size_emitter_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Request body {"designHeatLoad", "flowTemp"?, "returnTemp"?, "roomTemp"?}
    → EmitterSizing dict plus the suggested catalogue radiator.
    """
    sizing = size_emitter(
        design_heat_load = read_number(payload, ("designHeatLoad", "design_heat_load")),
        flow_temp        = read_number(payload, ("flowTemp", "flow_temp"), 75.0),
        return_temp      = read_number(payload, ("returnTemp", "return_temp"), 65.0),
        room_temp        = read_number(payload, ("roomTemp", "room_temp"), 20.0),
    )
    body: Dict[str, Any] = sizing.to_dict()
    body["suggestedRadiator"] = select_radiator_rating(sizing.required_output)
    return body


def radiator_schedule(
    building: BuildingHeatLoss,
    flow_temp: float = 75.0,
    return_temp: float = 65.0,
    room_temp: float = 20.0,
    available: List[int] = AVAILABLE_RADIATOR_POWERS,
) -> pd.DataFrame:
    """
    One row per room: rated output needed to cover its design heat load at
    the given water temperatures, and the smallest catalogue radiator that
    covers it (None when the catalogue is too small).
    """
    rows = []
    for room in building.rooms:
        sizing = compute_emitter_size(
            room.result.design_heat_load, flow_temp, return_temp, room_temp,
        )
        suggested = select_radiator_rating(sizing.required_output, available)
        if suggested is None:
            logger.warning(
                "Room %r needs %.0f W rated output; no catalogue radiator is large enough",
                room.room_id, sizing.required_output,
            )
        rows.append({
            "Room":                         room.room_id,
            "Design Heat Load (W)":         room.result.design_heat_load,
            "Mean Water Temp (°C)":         sizing.mean_water_temp,
            "Correction":                   sizing.correction,
            "Required Output 75/65/20 (W)": sizing.required_output,
            "Suggested Radiator (W)":       suggested,
        })
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)
