"""
Database Operations

Saved form state for the data-entry stages and the audit trail of
finished calculations. Uses coolcalc.core for database connections.
"""

import json
from typing import Any, Dict, List, Mapping, Optional, Union

from coolcalc.core import get_db, get_logger
from coolcalc.engineering.base import FormStage, RoomType
from coolcalc.engineering.refrig_calc.thermal_data import KW_PER_TR


logger = get_logger('coolcalc.engineering.db')


# Storage key per {room type, stage}
FORM_KEYS: Dict[RoomType, Dict[FormStage, str]] = {
    RoomType.FREEZER: {
        FormStage.ROOM: "roomData",
        FormStage.CONDITIONS: "conditionsData",
        FormStage.PRODUCT: "productData",
    },
    RoomType.COLD_ROOM: {
        FormStage.ROOM: "coldRoomData",
        FormStage.CONDITIONS: "coldRoomConditionsData",
        FormStage.CONSTRUCTION: "coldRoomConstructionData",
        FormStage.PRODUCT: "coldRoomProductData",
    },
    RoomType.BLAST_FREEZER: {
        FormStage.ROOM: "blastFreezerRoomData",
        FormStage.CONDITIONS: "blastFreezerConditionsData",
        FormStage.CONSTRUCTION: "blastFreezerConstructionData",
        FormStage.PRODUCT: "blastFreezerProductData",
        FormStage.USAGE: "blastFreezerUsageData",
    },
}

_KEY_LOOKUP = {
    key: (room_type, stage)
    for room_type, stages in FORM_KEYS.items()
    for stage, key in stages.items()
}


def form_key(room_type: Union[RoomType, str], stage: Union[FormStage, str]) -> str:
    """
    Storage key for a room type and stage.

    Raises:
        ValueError: The room type has no such stage (e.g. freezer usage).
    """
    room_type = RoomType(room_type)
    stage = FormStage(stage)
    try:
        return FORM_KEYS[room_type][stage]
    except KeyError:
        raise ValueError(f"{room_type.label} has no '{stage.value}' stage")


def stages_for(room_type: Union[RoomType, str]) -> List[FormStage]:
    """Stages a room type collects, in entry order."""
    return list(FORM_KEYS[RoomType(room_type)].keys())


class FormStateStore:
    """
    Per-stage form values stored as JSON blobs.

    Writes replace the whole stage record (last write wins);
    update_field merges a single field into the existing record.

    Usage:
        store = FormStateStore()
        store.set(RoomType.FREEZER, FormStage.ROOM, {"length": "4"})
        room = store.get(RoomType.FREEZER, FormStage.ROOM)
    """

    def get(self, room_type: Union[RoomType, str], stage: Union[FormStage, str]) -> Optional[Dict[str, Any]]:
        return self.get_key(form_key(room_type, stage))

    def set(
        self,
        room_type: Union[RoomType, str],
        stage: Union[FormStage, str],
        value: Mapping[str, Any],
    ) -> None:
        self.set_key(form_key(room_type, stage), value)

    def update_field(
        self,
        room_type: Union[RoomType, str],
        stage: Union[FormStage, str],
        field: str,
        value: Any,
    ) -> Dict[str, Any]:
        """Set one field of a stage record, creating the record if needed."""
        record = self.get(room_type, stage) or {}
        record[field] = value
        self.set(room_type, stage, record)
        return record

    def load(self, room_type: Union[RoomType, str]) -> Dict[FormStage, Dict[str, Any]]:
        """All saved stages of a room type; unsaved stages are omitted."""
        room_type = RoomType(room_type)
        keys = FORM_KEYS[room_type]
        placeholders = ", ".join("?" for _ in keys)

        with get_db(readonly=True) as conn:
            rows = conn.execute(
                f"SELECT key, value_json FROM form_state WHERE key IN ({placeholders})",
                tuple(keys.values()),
            ).fetchall()

        by_key = {row["key"]: json.loads(row["value_json"]) for row in rows}
        return {stage: by_key[key] for stage, key in keys.items() if key in by_key}

    def clear(self, room_type: Union[RoomType, str]) -> int:
        """Delete all saved stages of a room type. Returns rows removed."""
        room_type = RoomType(room_type)
        keys = tuple(FORM_KEYS[room_type].values())
        placeholders = ", ".join("?" for _ in keys)

        with get_db() as conn:
            cursor = conn.execute(f"DELETE FROM form_state WHERE key IN ({placeholders})", keys)
            conn.commit()
            removed = cursor.rowcount

        logger.info(f"Cleared {removed} saved stage(s) for {room_type.value}")
        return removed

    # String-keyed access, for callers holding the raw storage keys

    def get_key(self, key: str) -> Optional[Dict[str, Any]]:
        _check_key(key)
        with get_db(readonly=True) as conn:
            row = conn.execute(
                "SELECT value_json FROM form_state WHERE key = ?", (key,)
            ).fetchone()

        if row is None:
            return None
        return json.loads(row["value_json"])

    def set_key(self, key: str, value: Mapping[str, Any]) -> None:
        room_type, stage = _check_key(key)
        with get_db() as conn:
            conn.execute("""
                INSERT OR REPLACE INTO form_state (key, room_type, stage, value_json, updated_at)
                VALUES (?, ?, ?, ?, datetime('now'))
            """, (key, room_type.value, stage.value, json.dumps(dict(value), default=str)))
            conn.commit()

        logger.debug(f"Saved form state {key}")


def _check_key(key: str):
    try:
        return _KEY_LOOKUP[key]
    except KeyError:
        raise ValueError(f"Unknown form state key: {key}")


# ---------------------------------------------------------------------------
# Calculation history
# ---------------------------------------------------------------------------

def _number(value: Any) -> float:
    """A load component as a number: plain value, or the total of a breakdown."""
    if isinstance(value, dict):
        for name in ("total", "load_kw", "load"):
            if name in value:
                return value[name]
        return 0.0
    return value or 0.0


def build_calculation_summary(result: Mapping[str, Any], room_type: Union[RoomType, str]) -> Dict[str, Any]:
    """
    Condense a result dict into the history record.

    Tolerates the per-room-type differences in result shape; blast-freezer
    component loads (TR) are converted to kW.
    """
    room_type = RoomType(room_type)
    geometry = result.get("geometry", {})
    conditions = result.get("conditions", {})
    construction = result.get("construction", {})
    product = result.get("product", {})
    storage = result.get("storage", {})
    summary = result.get("summary", {})

    tr = KW_PER_TR if room_type is RoomType.BLAST_FREEZER else 1.0
    transmission = result.get("transmission", {})

    loads = {
        "transmission": _number(transmission),
        "product": _number(result.get("product_load")) * tr,
        "air_change": (
            _number(result.get("air_change"))
            if room_type is not RoomType.BLAST_FREEZER
            else result.get("air_change", {}).get("load_kw", 0.0)
        ),
        "internal": _number(result.get("internal") or result.get("miscellaneous")) * tr,
        "door": _number(result.get("door_opening")),
        "heaters": _number(result.get("heaters")),
        "total": summary.get("total_before_safety_kw"),
        "total_with_safety": summary.get("final_load_kw"),
    }

    record = {
        "type": room_type.value,
        "dimensions": {
            "length": geometry.get("length"),
            "width": geometry.get("width"),
            "height": geometry.get("height"),
            "volume": geometry.get("volume"),
        },
        "door": {
            "width": geometry.get("door_width"),
            "height": geometry.get("door_height"),
            "area": geometry.get("areas", {}).get("door"),
            "openings": result.get("door_openings", 0),
        },
        "conditions": {
            "external_temp": conditions.get("external_temp"),
            "internal_temp": conditions.get("internal_temp"),
            "temperature_difference": conditions.get("temperature_difference"),
            "operating_hours": conditions.get("operating_hours"),
            "pull_down_time": conditions.get("pull_down_hours") or None,
            "batch_hours": conditions.get("batch_hours") or None,
        },
        "construction": {
            "insulation_type": construction.get("insulation_type"),
            "insulation_thickness": construction.get("wall_thickness"),
            "u_factor": construction.get("wall_u_factor"),
            "floor_thickness": construction.get("internal_floor_thickness"),
        },
        "product": {
            "type": product.get("product_type"),
            "daily_load": product.get("mass"),
            "incoming_temp": product.get("incoming_temp"),
            "outgoing_temp": product.get("outgoing_temp"),
            "storage_capacity": storage.get("maximum"),
            "storage_utilization": storage.get("utilization"),
        },
        "loads": loads,
        "results": {
            "total_kw": summary.get("final_load_kw"),
            "total_tr": summary.get("final_load_tr"),
            "total_btu": summary.get("final_load_btu_hr"),
            "daily_energy_consumption": summary.get("daily_energy_kwh"),
            "shr": summary.get("shr"),
        },
    }

    equipment = result.get("equipment")
    if equipment:
        record["equipment"] = {
            "fan_load": equipment.get("total_fan_load"),
            "heater_load": equipment.get("total_heater_load"),
            "lighting_load": equipment.get("total_lighting_load"),
            "total_air_flow": result.get("air_flow_per_fan", 0),
        }

    return record


_CALCULATION_TYPES = {
    RoomType.FREEZER: "freezer",
    RoomType.COLD_ROOM: "cold-room",
    RoomType.BLAST_FREEZER: "blast-freezer",
}


def save_calculation(
    room_type: Union[RoomType, str],
    inputs: Dict[str, Any],
    outputs: Dict[str, Any],
    title: Optional[str] = None,
    notes: Optional[str] = None,
) -> int:
    """
    Save a calculation to the audit trail.

    Args:
        room_type: Room type calculated
        inputs: Input stage records as dict
        outputs: Result dict
        title: Optional report title
        notes: Optional notes

    Returns:
        ID of inserted calculation record
    """
    room_type = RoomType(room_type)
    summary = build_calculation_summary(outputs, room_type)

    with get_db() as conn:
        cursor = conn.execute("""
            INSERT INTO eng_calculations (
                room_type, calculation_type, title, input_json, output_json,
                summary_json, final_load_kw, notes
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            room_type.value,
            _CALCULATION_TYPES[room_type],
            title,
            json.dumps(inputs, default=str),
            json.dumps(outputs, default=str),
            json.dumps(summary, default=str),
            summary["results"]["total_kw"],
            notes,
        ))
        conn.commit()

        calc_id = cursor.lastrowid
        logger.info(f"Saved calculation {calc_id}: {room_type.value}")
        return calc_id


def get_calculations(
    room_type: Optional[Union[RoomType, str]] = None,
    limit: int = 20,
) -> List[Dict]:
    """
    Get calculation history, newest first.

    Args:
        room_type: Optional filter by room type
        limit: Max records to return

    Returns:
        List of calculation records (without the full input/output JSON)
    """
    with get_db(readonly=True) as conn:
        query = """
            SELECT id, timestamp, room_type, calculation_type, title, final_load_kw, notes
            FROM eng_calculations WHERE 1=1
        """
        params: list = []

        if room_type:
            query += " AND room_type = ?"
            params.append(RoomType(room_type).value)

        query += " ORDER BY timestamp DESC, id DESC LIMIT ?"
        params.append(limit)

        cursor = conn.execute(query, params)
        return [dict(row) for row in cursor.fetchall()]


def get_calculation(calc_id: int) -> Optional[Dict[str, Any]]:
    """Get one calculation with its inputs, outputs and summary decoded."""
    with get_db(readonly=True) as conn:
        row = conn.execute(
            "SELECT * FROM eng_calculations WHERE id = ?", (calc_id,)
        ).fetchone()

    if row is None:
        return None

    record = dict(row)
    record["inputs"] = json.loads(record.pop("input_json"))
    record["outputs"] = json.loads(record.pop("output_json"))
    summary_json = record.pop("summary_json")
    record["summary"] = json.loads(summary_json) if summary_json else None
    return record


def delete_calculation(calc_id: int) -> bool:
    """Delete a calculation. Returns False if it did not exist."""
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM eng_calculations WHERE id = ?", (calc_id,))
        conn.commit()
        deleted = cursor.rowcount > 0

    if deleted:
        logger.info(f"Deleted calculation {calc_id}")
    return deleted
