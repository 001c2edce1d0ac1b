"""
Load Calculation Report

Renders a calculation result as a fixed-section HTML document and
optionally converts it to PDF with WeasyPrint. The HTML+CSS template
controls all visual output; this module only gathers the rows.

Usage (Python):
    from coolcalc.engineering.report import render_report_html, export_report_pdf
    html = render_report_html(result, "freezer", title="Freezer 1")
    export_report_pdf(html, "freezer-1.pdf")

Usage (CLI):
    coolcalc eng report freezer --output freezer-1.pdf
"""

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from jinja2 import Environment, FileSystemLoader

from coolcalc.core import get_logger
from coolcalc.core.config import COOLCALC_PATHS, get_branding
from coolcalc.engineering.base import RoomType
from coolcalc.engineering.output import format_value, load_rows, total_rows

logger = get_logger("coolcalc.engineering.report")

_TEMPLATE_DIR = COOLCALC_PATHS.templates

SECTION_TITLES = (
    "Room Specifications",
    "Operating Conditions",
    "Construction Details",
    "Product Information",
    "Load Breakdown",
    "Final Results",
)

_MISSING = object()


def _get_jinja_env() -> Environment:
    """Create a Jinja2 environment for report templates."""
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=True,
    )


def _lookup(data: Mapping[str, Any], path: str) -> Any:
    current: Any = data
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def pick(data: Mapping[str, Any], *paths: str) -> Any:
    """First present, non-None value among dotted ``paths``; None if none is."""
    for path in paths:
        value = _lookup(data, path)
        if value is not _MISSING and value is not None:
            return value
    return None


def _row(label: str, value: Any, unit: str = "") -> Tuple[str, str]:
    text = format_value(value)
    return (label, f"{text} {unit}".strip() if value is not None else text)


def _optional(rows: List[Tuple[str, str]], label: str, value: Any, unit: str = "", skip_zero: bool = False):
    if value is None or (skip_zero and not value):
        return
    rows.append(_row(label, value, unit))


def build_sections(result: Mapping[str, Any], room_type: Union[RoomType, str]) -> List[Dict[str, Any]]:
    """
    Report sections as {title, rows} with rows of (label, text).

    Accepts full result dicts and condensed history summaries; optional
    rows are left out when their value is absent.
    """
    room_type = RoomType(room_type)

    # Room Specifications
    room = [
        _row("Length", pick(result, "geometry.length", "dimensions.length"), "m"),
        _row("Width", pick(result, "geometry.width", "geometry.breadth",
                           "dimensions.width", "dimensions.breadth"), "m"),
        _row("Height", pick(result, "geometry.height", "dimensions.height"), "m"),
        _row("Volume", pick(result, "geometry.volume", "dimensions.volume", "volume"), "m³"),
    ]
    door_w = pick(result, "geometry.door_width", "door.width")
    door_h = pick(result, "geometry.door_height", "door.height")
    if door_w is not None and door_h is not None:
        room.append(("Door size", f"{format_value(door_w)} x {format_value(door_h)} m"))
    _optional(room, "Door area", pick(result, "geometry.areas.door", "door.area"), "m²")
    _optional(room, "Wall area", pick(result, "geometry.areas.wall"), "m²")
    _optional(room, "Ceiling / floor area", pick(result, "geometry.areas.ceiling"), "m²")
    _optional(room, "Door openings per day", pick(result, "door_openings", "door.openings"), skip_zero=True)

    # Operating Conditions
    conditions = [
        _row("External temperature", pick(result, "conditions.external_temp", "conditions.ambient_temp"), "°C"),
        _row("Internal temperature", pick(result, "conditions.internal_temp", "conditions.room_temp"), "°C"),
        _row("Temperature difference", pick(result, "conditions.temperature_difference",
                                            "temperature_difference"), "K"),
        _row("Operating hours", pick(result, "conditions.operating_hours"), "h/day"),
    ]
    _optional(conditions, "Pull-down time", pick(result, "conditions.pull_down_hours",
                                                 "conditions.pull_down_time"), "h", skip_zero=True)
    _optional(conditions, "Batch time", pick(result, "conditions.batch_hours"), "h", skip_zero=True)
    _optional(conditions, "Room humidity", pick(result, "conditions.room_humidity"), "%RH", skip_zero=True)

    # Construction Details
    construction = [
        _row("Insulation", pick(result, "construction.insulation_type", "construction.type")),
        _row("Panel thickness", pick(result, "construction.thickness", "construction.wall_thickness",
                                     "construction.insulation_thickness"), "mm"),
        _row("U-factor", pick(result, "construction.u_factor", "construction.wall_u_factor",
                              "construction.u_factors.walls"), "W/m²K"),
    ]
    if room_type is RoomType.BLAST_FREEZER:
        _optional(construction, "Ceiling thickness", pick(result, "construction.ceiling_thickness"), "mm")
        _optional(construction, "Floor thickness", pick(result, "construction.floor_thickness"), "mm")
        _optional(construction, "Ceiling U-factor", pick(result, "construction.ceiling_u_factor",
                                                        "construction.u_factors.ceiling"), "W/m²K")
        _optional(construction, "Floor U-factor", pick(result, "construction.floor_u_factor",
                                                      "construction.u_factors.floor"), "W/m²K")
        _optional(construction, "Insulation conductivity", pick(result, "insulation_conductivity"), "W/mK")
    _optional(construction, "Internal floor thickness", pick(result, "construction.internal_floor_thickness",
                                                             "construction.floor_thickness"), "mm")

    # Product Information
    mass_label = "Batch load" if room_type is RoomType.BLAST_FREEZER else "Daily load"
    product = [
        _row("Product", pick(result, "product.product_type", "product.type")),
        _row(mass_label, pick(result, "product.mass", "product.daily_load"), "kg"),
        _row("Incoming temperature", pick(result, "product.incoming_temp"), "°C"),
        _row("Outgoing temperature", pick(result, "product.outgoing_temp"), "°C"),
    ]
    _optional(product, "Specific heat above freezing", pick(result, "product.specific_heat_above"), "kJ/kg·K")
    if room_type is not RoomType.COLD_ROOM:
        _optional(product, "Specific heat below freezing", pick(result, "product.specific_heat_below"), "kJ/kg·K")
        _optional(product, "Latent heat", pick(result, "product.latent_heat"), "kJ/kg")
    _optional(product, "Freezing point", pick(result, "product.freezing_point"), "°C")
    if room_type is RoomType.COLD_ROOM:
        _optional(product, "Respiration rate", pick(result, "product.respiration_rate"), "W/tonne")
    _optional(product, "Storage capacity", pick(result, "storage.maximum", "product.storage_capacity"), "kg")
    _optional(product, "Storage utilization", pick(result, "storage.utilization",
                                                   "product.storage_utilization"), "%")

    # Load Breakdown
    try:
        breakdown = [_row(label, value, unit) for label, value, unit in load_rows(result, room_type)]
    except (KeyError, TypeError):
        loads = pick(result, "loads") or {}
        breakdown = [
            _row(key.replace("_", " ").capitalize(), value, "kW")
            for key, value in loads.items()
            if key not in ("total", "total_with_safety") and value
        ]

    # Final Results
    if pick(result, "summary") is not None:
        final = [_row(label, value, unit) for label, value, unit in total_rows(result)
                 if label not in ("Daily energy", "Sensible heat ratio")]
    else:
        final = [
            _row("Total before safety factor", pick(result, "loads.total"), "kW"),
            _row("Final load", pick(result, "results.total_kw", "loads.total_with_safety"), "kW"),
            _row("Refrigeration capacity", pick(result, "results.total_tr"), "TR"),
            _row("Heat removal", pick(result, "results.total_btu"), "BTU/hr"),
        ]
    _optional(final, "Connected heater load", pick(result, "equipment.total_heater_load",
                                                  "equipment.heater_load", "heaters.total"), "kW")
    _optional(final, "Daily energy", pick(result, "summary.daily_energy_kwh",
                                          "results.daily_energy_consumption"), "kWh/day")
    _optional(final, "Sensible heat ratio", pick(result, "summary.shr", "results.shr"))
    if room_type is RoomType.BLAST_FREEZER:
        _optional(final, "Load per batch", pick(result, "engineering.load_kj_per_batch"), "kJ")
        _optional(final, "Air quantity required", pick(result, "engineering.air_qty_required_cfm"), "CFM")
    if room_type is RoomType.COLD_ROOM:
        _optional(final, "Recommended air flow", pick(result, "air_flow.recommended_cfm"), "CFM")

    rows = [room, conditions, construction, product, breakdown, final]
    return [{"title": t, "rows": r} for t, r in zip(SECTION_TITLES, rows)]


def render_report_html(
    result: Any,
    room_type: Union[RoomType, str],
    title: Optional[str] = None,
    generated_on: Optional[Union[date, datetime, str]] = None,
) -> str:
    """
    Render a load calculation as a complete HTML document.

    Args:
        result: Result dict or result dataclass.
        room_type: Room type tag of the result.
        title: Report title (default: "<Room type> Load Calculation Report").
        generated_on: Date printed on the report (default: today).

    Returns:
        Complete HTML string ready for WeasyPrint or browser preview.
    """
    data = asdict(result) if is_dataclass(result) else result
    room_type = RoomType(room_type)

    if generated_on is None:
        generated_on = date.today()
    if isinstance(generated_on, (date, datetime)):
        generated_on = generated_on.strftime("%Y-%m-%d")

    sections = build_sections(data, room_type)

    env = _get_jinja_env()
    template = env.get_template("report.html")
    html = template.render(
        title=title or f"{room_type.label} Load Calculation Report",
        room_type=room_type.label,
        generated_on=generated_on,
        sections=sections,
        warnings=data.get("warnings") or [],
        branding=get_branding(),
    )

    logger.info(
        "Rendered %s report: %d sections, %d chars",
        room_type.value,
        len(sections),
        len(html),
    )
    return html


def _default_output_dir() -> Path:
    """Return (and create) the default report output directory."""
    out = COOLCALC_PATHS.reports
    out.mkdir(parents=True, exist_ok=True)
    return out


def default_report_path(room_type: Union[RoomType, str], suffix: str) -> Path:
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    return _default_output_dir() / f"{RoomType(room_type).value}-load-{stamp}.{suffix}"


def export_report_pdf(html: str, output_path: Union[str, Path]) -> Path:
    """
    Write a rendered report as PDF.

    Raises:
        ImportError: If WeasyPrint is not installed.
    """
    try:
        from weasyprint import HTML
    except ImportError:
        raise ImportError(
            "WeasyPrint is required for PDF export. "
            'Install it with: pip install -e ".[export]"'
        )

    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    HTML(string=html, base_url=str(_TEMPLATE_DIR)).write_pdf(str(out))

    logger.info("Exported PDF: %s (%.1f KB)", out, out.stat().st_size / 1024)
    return out


def export_report_html(html: str, output_path: Union[str, Path]) -> Path:
    """Write a rendered report as an HTML file."""
    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(html, encoding="utf-8")

    logger.info("Exported HTML: %s (%.1f KB)", out, out.stat().st_size / 1024)
    return out
