"""
Output Formatters

Format calculation results for different output modes:
- Human-readable (default)
- JSON (for programmatic use)
- Markdown (for reports)
"""

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from coolcalc.engineering.base import RoomType


class OutputFormat(str, Enum):
    """Output format options."""
    HUMAN = "human"
    JSON = "json"
    MARKDOWN = "markdown"


def _as_data(result: Any) -> Any:
    if is_dataclass(result):
        return asdict(result)
    elif isinstance(result, dict):
        return result
    elif hasattr(result, '__dict__'):
        return result.__dict__
    return result


def format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.3f}" if abs(value) < 100 else f"{value:,.1f}"
    if value is None:
        return "-"
    return str(value)


def format_result(
    result: Any,
    format: OutputFormat = OutputFormat.HUMAN,
    title: Optional[str] = None,
) -> str:
    """
    Format a calculation result.

    Args:
        result: Result object (dataclass or dict)
        format: Output format
        title: Optional title for the output

    Returns:
        Formatted string
    """
    if format == OutputFormat.JSON:
        return format_json(result)
    elif format == OutputFormat.MARKDOWN:
        return format_markdown(result, title)
    else:
        return format_human(result, title)


def format_json(result: Any) -> str:
    """Format result as JSON."""
    return json.dumps(_as_data(result), indent=2, default=str)


def format_human(result: Any, title: Optional[str] = None) -> str:
    """Format result for human reading."""
    lines = []

    if title:
        lines.append(title)
        lines.append("=" * len(title))
        lines.append("")

    data = _as_data(result)
    if not isinstance(data, dict):
        return str(result)

    max_key_len = max(len(str(k)) for k in data.keys()) if data else 0

    for key, value in data.items():
        label = key.replace('_', ' ').title()

        if isinstance(value, list):
            if value:
                formatted = "\n" + "\n".join(f"  - {v}" for v in value)
            else:
                formatted = "(none)"
        elif isinstance(value, dict):
            formatted = json.dumps(value, indent=2, default=str)
        else:
            formatted = format_value(value)

        lines.append(f"{label:<{max_key_len + 2}}: {formatted}")

    return "\n".join(lines)


def format_markdown(result: Any, title: Optional[str] = None) -> str:
    """Format result as markdown."""
    lines = []

    if title:
        lines.append(f"# {title}")
        lines.append("")

    data = _as_data(result)
    if not isinstance(data, dict):
        return str(result)

    lines.append("| Parameter | Value |")
    lines.append("|-----------|-------|")

    for key, value in data.items():
        label = key.replace('_', ' ').title()

        if isinstance(value, list):
            formatted = ", ".join(str(v) for v in value) if value else "-"
        elif isinstance(value, dict):
            formatted = str(value)
        else:
            formatted = format_value(value)

        lines.append(f"| {label} | {formatted} |")

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Load breakdown tables
# ---------------------------------------------------------------------------

Row = Tuple[str, Optional[float], str]


def load_rows(result: Mapping[str, Any], room_type: Union[RoomType, str]) -> List[Row]:
    """
    Load breakdown of a result dict as (label, value, unit) rows.

    Freezer and cold-room components are in kW, blast-freezer
    components in TR.
    """
    room_type = RoomType(room_type)
    t = result["transmission"]

    if room_type is RoomType.FREEZER:
        p = result["product_load"]
        i = result["internal"]
        return [
            ("Transmission - walls", t["walls"], "kW"),
            ("Transmission - ceiling", t["ceiling"], "kW"),
            ("Transmission - floor", t["floor"], "kW"),
            ("Product - sensible above freezing", p["sensible_above"], "kW"),
            ("Product - latent (freezing)", p["latent"], "kW"),
            ("Product - sensible below freezing", p["sensible_below"], "kW"),
            ("Air change", result["air_change"]["load"], "kW"),
            ("Door opening", result["door_opening"]["total"], "kW"),
            ("Occupancy", i["occupancy"], "kW"),
            ("Lighting", i["lighting"], "kW"),
            ("Equipment", i["equipment"], "kW"),
            ("Fan motors", i["fan_motor"], "kW"),
            ("Door heaters", i["door_heaters"], "kW"),
            ("Tray heaters", i["tray_heaters"], "kW"),
            ("Peripheral heaters", i["peripheral_heaters"], "kW"),
            ("Steam humidifiers", i["steam_humidifiers"], "kW"),
        ]

    if room_type is RoomType.COLD_ROOM:
        m = result["miscellaneous"]
        h = result["heaters"]
        return [
            ("Transmission - walls", t["walls"], "kW"),
            ("Transmission - ceiling", t["ceiling"], "kW"),
            ("Transmission - floor", t["floor"], "kW"),
            ("Product", result["product_load"], "kW"),
            ("Respiration", result["respiration"], "kW"),
            ("Air change", result["air_change"], "kW"),
            ("Door opening", result["door_opening"], "kW"),
            ("Equipment", m["equipment"], "kW"),
            ("Occupancy", m["occupancy"], "kW"),
            ("Lighting", m["lighting"], "kW"),
            ("Peripheral heaters", h["peripheral"], "kW"),
            ("Door heaters", h["door"], "kW"),
            ("Steam humidifiers", h["steam"], "kW"),
        ]

    p = result["product_load"]
    i = result["internal"]
    return [
        ("Transmission - walls", t["walls_tr"], "TR"),
        ("Transmission - ceiling", t["ceiling_tr"], "TR"),
        ("Transmission - floor", t["floor_tr"], "TR"),
        ("Product - sensible above freezing", p["sensible_above"], "TR"),
        ("Product - latent (freezing)", p["latent"], "TR"),
        ("Product - sensible below freezing", p["sensible_below"], "TR"),
        ("Air change", result["air_change"]["load_tr"], "TR"),
        ("Occupancy", i["occupancy"], "TR"),
        ("Lighting", i["lighting"], "TR"),
        ("Fan motors", i["equipment"], "TR"),
        ("Peripheral heaters", i["peripheral_heaters"], "TR"),
        ("Door heaters", i["door_heaters"], "TR"),
        ("Tray heaters", i["tray_heaters"], "TR"),
        ("Drain heaters", i["drain_heaters"], "TR"),
    ]


def total_rows(result: Mapping[str, Any]) -> List[Row]:
    """Final totals as (label, value, unit) rows."""
    s = result["summary"]
    return [
        ("Total before safety factor", s["total_before_safety_kw"], "kW"),
        ("Safety factor", s["safety_factor"], "x"),
        ("Safety margin", s["safety_margin_kw"], "kW"),
        ("Final load", s["final_load_kw"], "kW"),
        ("Refrigeration capacity", s["final_load_tr"], "TR"),
        ("Heat removal", s["final_load_btu_hr"], "BTU/hr"),
        ("Daily energy", s["daily_energy_kwh"], "kWh/day"),
        ("Sensible heat ratio", s["shr"], ""),
    ]


def format_load_summary(
    result: Mapping[str, Any],
    room_type: Union[RoomType, str],
    format: OutputFormat = OutputFormat.HUMAN,
    title: Optional[str] = None,
) -> str:
    """Format the load breakdown and totals of a result dict."""
    if format == OutputFormat.JSON:
        return format_json(result)

    room_type = RoomType(room_type)
    title = title or f"{room_type.label} Load Calculation"
    breakdown = load_rows(result, room_type)
    totals = total_rows(result)
    warnings = result.get("warnings") or []

    lines = []
    if format == OutputFormat.MARKDOWN:
        lines.append(f"# {title}")
        lines.append("")
        lines.append("## Load Breakdown")
        lines.append("")
        lines.append("| Component | Value | Unit |")
        lines.append("|-----------|-------|------|")
        for label, value, unit in breakdown:
            lines.append(f"| {label} | {format_value(value)} | {unit} |")
        lines.append("")
        lines.append("## Final Results")
        lines.append("")
        lines.append("| Parameter | Value | Unit |")
        lines.append("|-----------|-------|------|")
        for label, value, unit in totals:
            lines.append(f"| {label} | {format_value(value)} | {unit} |")
        if warnings:
            lines.append("")
            lines.append("## Warnings")
            for w in warnings:
                lines.append(f"- {w}")
        return "\n".join(lines)

    width = max(len(label) for label, _, _ in breakdown + totals)
    lines.append(title)
    lines.append("=" * len(title))
    lines.append("")
    lines.append("LOAD BREAKDOWN:")
    for label, value, unit in breakdown:
        lines.append(f"  {label:<{width}}  {format_value(value):>12} {unit}")
    lines.append("")
    lines.append("FINAL RESULTS:")
    for label, value, unit in totals:
        lines.append(f"  {label:<{width}}  {format_value(value):>12} {unit}")
    if warnings:
        lines.append("")
        lines.append(f"WARNINGS ({len(warnings)}):")
        for w in warnings:
            lines.append(f"  {w}")
    return "\n".join(lines)
