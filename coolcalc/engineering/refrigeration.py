"""
Refrigeration Load Calculator

Implements DisciplineCalculator for room cooling loads. Wraps the
refrig_calc library calculators for freezers, cold rooms and blast
freezers, and composes calculations from saved form state.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from coolcalc.core import get_logger
from coolcalc.engineering.base import (
    CalculationResult,
    DisciplineCalculator,
    FormStage,
    LoadCalculator,
    RoomType,
)
from coolcalc.engineering.errors import MissingInputError
from coolcalc.engineering.refrig_calc import (
    BlastFreezerLoadCalculator,
    ColdRoomLoadCalculator,
    FreezerLoadCalculator,
)

logger = get_logger("coolcalc.engineering.refrigeration")


@dataclass
class RefrigerationResult(CalculationResult):
    """Extended calculation result with load-calculation output data."""

    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        # Flatten data into top-level for convenience
        d.update(d.pop("data"))
        return d


_CALCULATORS: Dict[RoomType, Callable[[], LoadCalculator]] = {
    RoomType.FREEZER: FreezerLoadCalculator,
    RoomType.COLD_ROOM: ColdRoomLoadCalculator,
    RoomType.BLAST_FREEZER: BlastFreezerLoadCalculator,
}


def get_calculator(room_type: Union[RoomType, str]) -> LoadCalculator:
    """Return the calculator for a room type ('freezer', 'coldroom', 'blastfreezer')."""
    return _CALCULATORS[RoomType(room_type)]()


def _merge(base: Optional[Mapping[str, Any]], extra: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Overlay an optional stage onto a required one; a missing base stays missing."""
    if base is None:
        return None
    merged = dict(base)
    if extra:
        merged.update(extra)
    return merged


def _stage_records(params: Mapping[str, Any]):
    """
    Split params into the (room, conditions, product) triple.

    Construction details are entered on their own screen but describe the
    room, and usage details describe the product load; both are merged.
    """
    room = _merge(params.get("room"), params.get("construction"))
    conditions = params.get("conditions")
    product = _merge(params.get("product"), params.get("usage"))
    return room, conditions, product


def _run(room_type: RoomType, params: Mapping[str, Any]) -> Dict[str, Any]:
    room, conditions, product = _stage_records(params)
    calculator = get_calculator(room_type)
    result = calculator.calculate(room, conditions, product)
    for warning in result.warnings:
        logger.warning(f"{room_type.value}: {warning}")
    return asdict(result)


# ---------------------------------------------------------------------------
# Module-level run_*() functions (used by CLI and report directly)
# ---------------------------------------------------------------------------

def run_freezer(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Run a storage freezer load calculation.

    Params:
        room: length, width, height, door_width, door_height, door_openings,
            insulation_type, insulation_thickness, internal_floor_thickness,
            number_of_floors
        conditions: external_temp, internal_temp, operating_hours,
            pull_down_time, room_humidity, steam_humidifier_load
        product: product_type, daily_load, incoming_temp, outgoing_temp,
            storage_type, number_of_people, working_hours, lighting_wattage,
            equipment_load, fan_motor_rating, number_of_fans,
            fan_operating_hours, fan_air_flow_rate, door_heaters_load,
            tray_heaters_load, peripheral_heaters_load, custom_cp_above,
            custom_cp_below, custom_latent_heat

    Returns:
        Dict with the freezer load breakdown (kW).
    """
    return _run(RoomType.FREEZER, params)


def run_cold_room(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Run a cold room load calculation.

    Params:
        room: length, width, height, door_width, door_height, door_openings,
            door_clear_opening, storage_density, air_flow_per_fan
        construction: insulation_type, insulation_thickness,
            internal_floor_thickness, number_of_heaters, number_of_doors
        conditions: external_temp, internal_temp, operating_hours,
            pull_down_time
        product: product_type, daily_load, incoming_temp, outgoing_temp,
            specific_heat_above, respiration_rate, storage_type,
            number_of_people, working_hours, steam_humidifier_load

    Returns:
        Dict with the cold room load breakdown (kW).
    """
    return _run(RoomType.COLD_ROOM, params)


def run_blast_freezer(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Run a blast freezer load calculation.

    Params:
        room: length, breadth, height, door_width, door_height,
            door_clear_opening
        construction: insulation_type, wall_thickness, ceiling_thickness,
            floor_thickness, internal_floor_thickness
        conditions: ambient_temp, room_temp, batch_hours, operating_hours
        product: product_type, capacity_required, incoming_temp,
            outgoing_temp, storage_capacity
        usage: number_of_people, working_hours, light_load,
            fan_motor_rating, {peripheral,door,tray,drain}_heaters_qty,
            {peripheral,door,tray,drain}_heaters_capacity, air_flow_per_fan

    Returns:
        Dict with the blast freezer load breakdown (TR with kW totals).
    """
    return _run(RoomType.BLAST_FREEZER, params)


_CALC_DISPATCH = {
    "freezer": run_freezer,
    "cold-room": run_cold_room,
    "blast-freezer": run_blast_freezer,
}

_RUN_BY_ROOM_TYPE = {
    RoomType.FREEZER: run_freezer,
    RoomType.COLD_ROOM: run_cold_room,
    RoomType.BLAST_FREEZER: run_blast_freezer,
}

CALCULATION_TYPES = {
    RoomType.FREEZER: "freezer",
    RoomType.COLD_ROOM: "cold-room",
    RoomType.BLAST_FREEZER: "blast-freezer",
}

REQUIRED_STAGES = (FormStage.ROOM, FormStage.CONDITIONS, FormStage.PRODUCT)


def calculate_from_store(room_type: Union[RoomType, str], store=None) -> Dict[str, Any]:
    """
    Run a calculation from the saved form state of a room type.

    Args:
        room_type: Room type to calculate.
        store: FormStateStore (defaults to the database-backed store).

    Raises:
        MissingInputError: A required stage (room, conditions, product)
            has not been saved.
    """
    room_type = RoomType(room_type)
    if store is None:
        from coolcalc.engineering.db import FormStateStore
        store = FormStateStore()

    stages = store.load(room_type)
    for stage in REQUIRED_STAGES:
        if stages.get(stage) is None:
            raise MissingInputError(stage.value, room_type.value)

    params = {stage.value: value for stage, value in stages.items()}
    return _RUN_BY_ROOM_TYPE[room_type](params)


class RefrigerationCalculator(DisciplineCalculator):
    """Discipline calculator for room cooling loads."""

    @property
    def discipline_name(self) -> str:
        return "refrigeration"

    def available_calculations(self) -> List[str]:
        return list(_CALC_DISPATCH.keys())

    def run_calculation(self, calculation_type: str, params: Dict[str, Any]) -> RefrigerationResult:
        func = _CALC_DISPATCH.get(calculation_type)
        if func is None:
            raise ValueError(f"Unknown calculation type: {calculation_type}")

        data = func(params)
        return RefrigerationResult(
            calculation_type=calculation_type,
            warnings=list(data.get("warnings", [])),
            data=data,
        )

    def run_saved(self, room_type: Union[RoomType, str], store=None) -> RefrigerationResult:
        """Run a calculation from the saved form state of a room type."""
        room_type = RoomType(room_type)
        data = calculate_from_store(room_type, store)
        return RefrigerationResult(
            calculation_type=CALCULATION_TYPES[room_type],
            warnings=list(data.get("warnings", [])),
            data=data,
        )
