"""Tests for database connections and migrations against a temporary file."""

import sqlite3
from unittest.mock import patch

import pytest

from coolcalc.core.db import execute_query, get_db, migrate_all


@pytest.fixture
def db_file(tmp_path):
    path = tmp_path / "data" / "coolcalc.db"
    with patch("coolcalc.core.db.get_db_path", return_value=path):
        yield path


def test_migrate_creates_tables(db_file):
    migrate_all()
    assert db_file.exists()
    names = {r["name"] for r in execute_query("SELECT name FROM sqlite_master WHERE type = 'table'")}
    assert {"eng_calculations", "form_state"} <= names


def test_migrate_is_idempotent(db_file):
    migrate_all()
    migrate_all()
    assert execute_query("SELECT COUNT(*) AS n FROM form_state")[0]["n"] == 0


def test_readonly_connection_rejects_writes(db_file):
    migrate_all()
    with get_db(readonly=True) as conn:
        with pytest.raises(sqlite3.OperationalError):
            conn.execute(
                "INSERT INTO form_state (key, room_type, stage, value_json) VALUES ('roomData', 'freezer', 'room', '{}')"
            )


def test_rows_by_name(db_file):
    migrate_all()
    with get_db() as conn:
        conn.execute(
            "INSERT INTO form_state (key, room_type, stage, value_json) VALUES ('roomData', 'freezer', 'room', '{}')"
        )
        conn.commit()
    row = execute_query("SELECT key, stage FROM form_state")[0]
    assert row["key"] == "roomData"
    assert row["stage"] == "room"
