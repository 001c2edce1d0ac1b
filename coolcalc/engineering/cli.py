"""Engineering CLI sub-commands."""

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from coolcalc.engineering.output import OutputFormat

app = typer.Typer(no_args_is_help=True)

_SET_HELP = "Extra input as stage.field=value (repeatable), e.g. product.working_hours=6"


@contextmanager
def _database_errors():
    """Turn a missing or unmigrated database into a CLI error."""
    import sqlite3

    try:
        yield
    except sqlite3.OperationalError as e:
        typer.echo(f"Database error: {e}. Run `coolcalc migrate` first.", err=True)
        raise typer.Exit(1)


def _parse_assignments(assignments: List[str], stage: Optional[str] = None) -> Dict[str, Dict[str, str]]:
    """
    Parse ``stage.field=value`` strings into {stage: {field: value}}.

    With ``stage`` given, assignments are plain ``field=value``.
    """
    parsed: Dict[str, Dict[str, str]] = {}
    for item in assignments:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Expected field=value, got: {item}")
        name = name.strip()
        if stage is None:
            stage_name, dot, field = name.partition(".")
            if not dot or not field:
                raise typer.BadParameter(f"Expected stage.field=value, got: {item}")
        else:
            stage_name, field = stage, name
        parsed.setdefault(stage_name, {})[field] = value.strip()
    return parsed


def _build_params(stages: List[str], options: Dict[str, Dict[str, Any]], assignments: List[str]) -> Dict[str, Dict[str, Any]]:
    """Stage records from the named options plus any --set overrides."""
    params: Dict[str, Dict[str, Any]] = {stage: {} for stage in stages}
    for stage, fields in options.items():
        params[stage].update({k: v for k, v in fields.items() if v is not None})

    for stage, fields in _parse_assignments(assignments).items():
        if stage not in params:
            raise typer.BadParameter(f"Unknown stage '{stage}' (expected one of: {', '.join(stages)})")
        params[stage].update(fields)
    return params


def _run_and_show(room_type: str, params: Dict[str, Any], fmt: OutputFormat, save: bool, title: Optional[str]):
    from coolcalc.engineering import db, output
    from coolcalc.engineering.errors import LoadCalculationError
    from coolcalc.engineering.base import RoomType
    from coolcalc.engineering.refrigeration import CALCULATION_TYPES, RefrigerationCalculator

    try:
        calc = RefrigerationCalculator().run_calculation(CALCULATION_TYPES[RoomType(room_type)], params)
    except LoadCalculationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    result = calc.data
    if save:
        with _database_errors():
            calc_id = db.save_calculation(room_type, inputs=params, outputs=result, title=title)
        typer.echo(f"Saved calculation #{calc_id}", err=True)

    typer.echo(output.format_load_summary(result, room_type, fmt, title=title))


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

@app.command()
def history(
    room_type: Optional[str] = typer.Option(None, "--room-type", "-r", help="Filter: freezer, coldroom, blastfreezer"),
    limit: int = typer.Option(20, help="Number of records"),
):
    """Show recent calculation history."""
    from coolcalc.engineering import db

    try:
        with _database_errors():
            rows = db.get_calculations(room_type=room_type, limit=limit)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not rows:
        typer.echo("No calculations recorded.")
        return

    for r in rows:
        load = f"{r['final_load_kw']:.2f} kW" if r["final_load_kw"] is not None else "-"
        typer.echo(
            f"  #{r['id']:<4} {r['timestamp'][:16]}  {r['calculation_type']:<14} "
            f"{load:>12}  {r['title'] or ''}"
        )


@app.command()
def delete(calc_id: int = typer.Argument(..., help="Calculation ID")):
    """Delete a saved calculation."""
    from coolcalc.engineering import db

    with _database_errors():
        deleted = db.delete_calculation(calc_id)
    if not deleted:
        typer.echo(f"Calculation {calc_id} not found.")
        raise typer.Exit(1)
    typer.echo(f"Deleted calculation {calc_id}.")


# ---------------------------------------------------------------------------
# Calculation commands
# ---------------------------------------------------------------------------

@app.command("freezer")
def freezer(
    length: Optional[float] = typer.Option(None, help="Room length (m)"),
    width: Optional[float] = typer.Option(None, help="Room width (m)"),
    height: Optional[float] = typer.Option(None, help="Room height (m)"),
    external_temp: Optional[float] = typer.Option(None, help="External temperature (C)"),
    internal_temp: Optional[float] = typer.Option(None, help="Internal temperature (C)"),
    product: Optional[str] = typer.Option(None, help="Product type, e.g. Fish"),
    daily_load: Optional[float] = typer.Option(None, help="Daily product load (kg)"),
    set_values: List[str] = typer.Option([], "--set", "-s", help=_SET_HELP),
    format: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
    save: bool = typer.Option(True, "--save/--no-save", help="Record in calculation history"),
    title: Optional[str] = typer.Option(None, help="Title for output and history"),
):
    """Calculate the cooling load of a storage freezer (kW)."""
    params = _build_params(
        ["room", "conditions", "product"],
        {
            "room": {"length": length, "width": width, "height": height},
            "conditions": {"external_temp": external_temp, "internal_temp": internal_temp},
            "product": {"product_type": product, "daily_load": daily_load},
        },
        set_values,
    )
    _run_and_show("freezer", params, format, save, title)


@app.command("cold-room")
def cold_room(
    length: Optional[float] = typer.Option(None, help="Room length (m)"),
    width: Optional[float] = typer.Option(None, help="Room width (m)"),
    height: Optional[float] = typer.Option(None, help="Room height (m)"),
    external_temp: Optional[float] = typer.Option(None, help="External temperature (C)"),
    internal_temp: Optional[float] = typer.Option(None, help="Internal temperature (C)"),
    product: Optional[str] = typer.Option(None, help="Product type, e.g. BANANA"),
    daily_load: Optional[float] = typer.Option(None, help="Daily product load (kg)"),
    set_values: List[str] = typer.Option([], "--set", "-s", help=_SET_HELP),
    format: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
    save: bool = typer.Option(True, "--save/--no-save", help="Record in calculation history"),
    title: Optional[str] = typer.Option(None, help="Title for output and history"),
):
    """Calculate the cooling load of a chilled cold room (kW)."""
    params = _build_params(
        ["room", "construction", "conditions", "product"],
        {
            "room": {"length": length, "width": width, "height": height},
            "conditions": {"external_temp": external_temp, "internal_temp": internal_temp},
            "product": {"product_type": product, "daily_load": daily_load},
        },
        set_values,
    )
    _run_and_show("coldroom", params, format, save, title)


@app.command("blast-freezer")
def blast_freezer(
    length: Optional[float] = typer.Option(None, help="Room length (m)"),
    breadth: Optional[float] = typer.Option(None, help="Room breadth (m)"),
    height: Optional[float] = typer.Option(None, help="Room height (m)"),
    ambient_temp: Optional[float] = typer.Option(None, help="Ambient temperature (C)"),
    room_temp: Optional[float] = typer.Option(None, help="Room temperature (C)"),
    batch_hours: Optional[float] = typer.Option(None, help="Batch freezing time (h)"),
    product: Optional[str] = typer.Option(None, help="Product type, e.g. Chicken"),
    capacity: Optional[float] = typer.Option(None, help="Batch capacity (kg)"),
    set_values: List[str] = typer.Option([], "--set", "-s", help=_SET_HELP),
    format: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
    save: bool = typer.Option(True, "--save/--no-save", help="Record in calculation history"),
    title: Optional[str] = typer.Option(None, help="Title for output and history"),
):
    """Calculate the batch load of a blast freezer (TR, with kW totals)."""
    params = _build_params(
        ["room", "construction", "conditions", "product", "usage"],
        {
            "room": {"length": length, "breadth": breadth, "height": height},
            "conditions": {"ambient_temp": ambient_temp, "room_temp": room_temp, "batch_hours": batch_hours},
            "product": {"product_type": product, "capacity_required": capacity},
        },
        set_values,
    )
    _run_and_show("blastfreezer", params, format, save, title)


# ---------------------------------------------------------------------------
# Saved form state
# ---------------------------------------------------------------------------

def _room_type(value: str):
    from coolcalc.engineering.base import RoomType

    try:
        return RoomType(value)
    except ValueError:
        typer.echo(f"Unknown room type: {value} (expected freezer, coldroom or blastfreezer)")
        raise typer.Exit(1)


@app.command("form-set")
def form_set(
    room_type: str = typer.Argument(..., help="freezer, coldroom or blastfreezer"),
    stage: str = typer.Argument(..., help="room, conditions, construction, product or usage"),
    values: List[str] = typer.Argument(..., help="field=value pairs"),
):
    """Save fields of one data-entry stage."""
    from coolcalc.engineering.db import FormStateStore, form_key

    rt = _room_type(room_type)
    try:
        form_key(rt, stage)
    except ValueError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(1)

    store = FormStateStore()
    fields = _parse_assignments(values, stage=stage)[stage]
    with _database_errors():
        for field, value in fields.items():
            record = store.update_field(rt, stage, field, value)

    typer.echo(f"Saved {rt.label} {stage}: {len(record)} field(s)")


@app.command("form-show")
def form_show(room_type: str = typer.Argument(..., help="freezer, coldroom or blastfreezer")):
    """Show saved form state of a room type."""
    from coolcalc.engineering.db import FormStateStore, stages_for

    rt = _room_type(room_type)
    with _database_errors():
        saved = FormStateStore().load(rt)

    typer.echo(f"{rt.label} form state")
    for stage in stages_for(rt):
        record = saved.get(stage)
        if record is None:
            typer.echo(f"  {stage.value}: (not saved)")
            continue
        typer.echo(f"  {stage.value}:")
        for field, value in record.items():
            typer.echo(f"    {field:<28} {value}")


@app.command("form-clear")
def form_clear(room_type: str = typer.Argument(..., help="freezer, coldroom or blastfreezer")):
    """Delete saved form state of a room type."""
    from coolcalc.engineering.db import FormStateStore

    rt = _room_type(room_type)
    with _database_errors():
        removed = FormStateStore().clear(rt)
    typer.echo(f"Cleared {removed} stage(s) for {rt.label}.")


@app.command("calculate")
def calculate(
    room_type: str = typer.Argument(..., help="freezer, coldroom or blastfreezer"),
    format: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
    save: bool = typer.Option(True, "--save/--no-save", help="Record in calculation history"),
    title: Optional[str] = typer.Option(None, help="Title for output and history"),
):
    """Calculate from the saved form state of a room type."""
    from coolcalc.engineering import db, output
    from coolcalc.engineering.errors import LoadCalculationError
    from coolcalc.engineering.refrigeration import RefrigerationCalculator

    rt = _room_type(room_type)
    store = db.FormStateStore()
    try:
        with _database_errors():
            result = RefrigerationCalculator().run_saved(rt, store).data
    except LoadCalculationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if save:
        with _database_errors():
            inputs = {stage.value: record for stage, record in store.load(rt).items()}
            calc_id = db.save_calculation(rt, inputs=inputs, outputs=result, title=title)
        typer.echo(f"Saved calculation #{calc_id}", err=True)

    typer.echo(output.format_load_summary(result, rt, format, title=title))


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

@app.command("report")
def report(
    room_type: str = typer.Argument(..., help="freezer, coldroom or blastfreezer"),
    from_history: Optional[int] = typer.Option(None, "--from-history", help="Report a saved calculation by ID"),
    output_path: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file (default: reports dir)"),
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="html or pdf (default: reports.default_format)"),
    title: Optional[str] = typer.Option(None, help="Report title"),
):
    """Render a load calculation report as HTML or PDF."""
    from coolcalc.core.config import get_config_value
    from coolcalc.engineering import db
    from coolcalc.engineering.errors import LoadCalculationError
    from coolcalc.engineering.refrigeration import RefrigerationCalculator
    from coolcalc.engineering.report import (
        default_report_path,
        export_report_html,
        export_report_pdf,
        render_report_html,
    )

    rt = _room_type(room_type)
    fmt = (fmt or get_config_value("reports", "default_format", default="html")).lower()
    if fmt not in ("html", "pdf"):
        typer.echo(f"Unsupported report format: {fmt} (expected html or pdf)")
        raise typer.Exit(1)

    if from_history is not None:
        with _database_errors():
            record = db.get_calculation(from_history)
        if record is None:
            typer.echo(f"Calculation {from_history} not found.")
            raise typer.Exit(1)
        if record["room_type"] != rt.value:
            typer.echo(f"Calculation {from_history} is a {record['room_type']} calculation, not {rt.value}.")
            raise typer.Exit(1)
        result = record["outputs"]
        title = title or record.get("title")
    else:
        try:
            with _database_errors():
                result = RefrigerationCalculator().run_saved(rt).data
        except LoadCalculationError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

    html = render_report_html(result, rt, title=title)
    out = output_path or default_report_path(rt, fmt)

    if fmt == "pdf":
        try:
            written = export_report_pdf(html, out)
        except ImportError as e:
            typer.echo(str(e))
            raise typer.Exit(1)
    else:
        written = export_report_html(html, out)

    typer.echo(f"Report written: {written}")
