"""
Shared test fixtures for CoolCalc.

Provides an in-memory database with all schemas, a CLI runner, and
ready-made stage records for each room type.
"""

import sqlite3
import pytest
from pathlib import Path
from unittest.mock import patch
from contextlib import contextmanager

from coolcalc.core.db import SCHEMA_ORDER


@pytest.fixture
def memory_db():
    """Provide an in-memory SQLite database with ALL schemas applied."""
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys = ON")
    conn.row_factory = sqlite3.Row

    schema_dir = Path(__file__).parent.parent
    for module in SCHEMA_ORDER:
        schema_file = schema_dir / module / "schema.sql"
        if schema_file.exists():
            conn.executescript(schema_file.read_text(encoding="utf-8"))

    yield conn
    conn.close()


@pytest.fixture
def mock_db(memory_db):
    """Patch get_db everywhere to return the in-memory database."""

    @contextmanager
    def _get_db(readonly=False):
        yield memory_db

    with patch("coolcalc.core.db.get_db", _get_db), \
         patch("coolcalc.core.get_db", _get_db), \
         patch("coolcalc.engineering.db.get_db", _get_db):
        yield memory_db


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def freezer_params():
    """Freezer stage records as entered on the forms (text values)."""
    return {
        "room": {
            "length": "4", "width": "3", "height": "2.5",
            "door_width": "1", "door_height": "2",
            "insulation_type": "PUF", "insulation_thickness": "150",
        },
        "conditions": {
            "external_temp": "35", "internal_temp": "-18",
            "operating_hours": "24", "pull_down_time": "10",
        },
        "product": {
            "product_type": "General Food Items", "daily_load": "1000",
            "incoming_temp": "25", "outgoing_temp": "-18",
        },
    }


@pytest.fixture
def cold_room_params():
    return {
        "room": {"length": "3.05", "width": "4.5", "height": "3"},
        "construction": {"insulation_type": "PUF", "insulation_thickness": "100"},
        "conditions": {
            "external_temp": "45", "internal_temp": "2",
            "operating_hours": "20", "pull_down_time": "24",
        },
        "product": {
            "product_type": "BANANA", "daily_load": "4000",
            "incoming_temp": "30", "outgoing_temp": "2",
        },
    }


@pytest.fixture
def blast_freezer_params():
    return {
        "room": {"length": "5", "breadth": "5", "height": "3.5"},
        "construction": {"insulation_type": "PUF", "wall_thickness": "150"},
        "conditions": {"ambient_temp": "43", "room_temp": "-35", "batch_hours": "8"},
        "product": {
            "product_type": "Chicken", "capacity_required": "2000",
            "incoming_temp": "-5", "outgoing_temp": "-30",
        },
        "usage": {"number_of_people": "2", "working_hours": "4"},
    }
