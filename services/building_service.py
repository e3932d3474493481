"""
services/building_service.py
============================
Building-level heat loss: every room evaluated with one shared parameter set,
then summed.

Rooms are independent, so the per-room work is fanned out on a thread pool.
The merge is fail-fast: one rejected room aborts the whole building, and no
partial total is ever returned.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from config import CALC_PRECISION
from domain.errors import InvalidInputError
from domain.heat_load import CalculationParams, CalculationResult, Room, round_half_up
from services.room_service import calculate_room, params_from_payload, room_from_payload

logger = logging.getLogger(__name__)

RESULT_COLUMNS: List[str] = [
    "Room",
    "Name",
    "Transmission Loss (W)",
    "Ventilation Loss (W)",
    "Total Heat Loss (W)",
    "Design Heat Load (W)",
]


@dataclass(frozen=True)
class RoomHeatLoss:
    room_id: str
    result: CalculationResult
    name: str = ""


@dataclass(frozen=True)
class BuildingHeatLoss:
    """Per-room results in input order plus building totals [W]."""

    rooms: Tuple[RoomHeatLoss, ...]
    total_heat_loss: float
    total_design_load: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rooms": [
                {"roomId": r.room_id, "result": r.result.to_dict()} for r in self.rooms
            ],
            "totalHeatLoss":   self.total_heat_loss,
            "totalDesignLoad": self.total_design_load,
        }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def compute_building_heat_loss(
    rooms: Iterable[Room],
    params: CalculationParams,
    precision: int = CALC_PRECISION,
    max_workers: Optional[int] = None,
) -> BuildingHeatLoss:
    """
    Heat loss for every room plus building totals.

    Parameters
    ----------
    rooms       : Rooms to evaluate; results keep this order
    params      : Shared thermal parameters
    precision   : Decimal places for all rounded outputs
    max_workers : Thread-pool size; 1 runs a plain sequential loop

    Raises InvalidInputError from the first rejected room (in input order).
    """
    rooms = list(rooms)
    logger.info("Starting building heat loss calculation: %d rooms", len(rooms))

    try:
        if max_workers == 1 or len(rooms) <= 1:
            results = [calculate_room(room, params, precision) for room in rooms]
        else:
            results = _calculate_parallel(rooms, params, precision, max_workers)
    except InvalidInputError as err:
        logger.error("Building heat loss calculation aborted: %s", err)
        raise

    total_heat_loss   = sum(r.total_heat_loss for r in results)
    total_design_load = sum(r.design_heat_load for r in results)

    building = BuildingHeatLoss(
        rooms = tuple(
            RoomHeatLoss(room_id=room.id, result=result, name=room.name)
            for room, result in zip(rooms, results)
        ),
        total_heat_loss   = round_half_up(float(total_heat_loss), precision),
        total_design_load = round_half_up(float(total_design_load), precision),
    )
    logger.info(
        "Building heat loss calculated: %d rooms, total=%.2f W, design=%.2f W",
        len(rooms), building.total_heat_loss, building.total_design_load,
    )
    return building


def calculate_building_payload(
    room_payloads: Sequence[Mapping[str, Any]],
    params_payload: Mapping[str, Any],
) -> Dict[str, Any]:
    """Request body in, response body out."""
    rooms = [room_from_payload(p) for p in room_payloads]
    return compute_building_heat_loss(rooms, params_from_payload(params_payload)).to_dict()


def building_results_frame(building: BuildingHeatLoss) -> pd.DataFrame:
    """One row per room for report and export callers."""
    rows = [
        {
            "Room":                  r.room_id,
            "Name":                  r.name,
            "Transmission Loss (W)": r.result.transmission_loss,
            "Ventilation Loss (W)":  r.result.ventilation_loss,
            "Total Heat Loss (W)":   r.result.total_heat_loss,
            "Design Heat Load (W)":  r.result.design_heat_load,
        }
        for r in building.rooms
    ]
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _calculate_parallel(
    rooms: List[Room],
    params: CalculationParams,
    precision: int,
    max_workers: Optional[int],
) -> List[CalculationResult]:
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(calculate_room, room, params, precision) for room in rooms]
        try:
            return [f.result() for f in futures]
        except InvalidInputError:
            for f in futures:
                f.cancel()
            raise
