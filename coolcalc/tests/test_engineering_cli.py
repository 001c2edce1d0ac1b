"""Tests for engineering CLI commands via Typer CliRunner."""

from unittest.mock import patch

import pytest

from coolcalc.engineering.cli import app as eng_app


def test_freezer_command(cli_runner, mock_db):
    result = cli_runner.invoke(eng_app, [
        "freezer", "--length", "4", "--width", "3", "--height", "2.5",
        "--external-temp", "35", "--internal-temp", "-18",
    ])
    assert result.exit_code == 0, result.output
    assert "Transmission - walls" in result.output
    assert "7.568" in result.output


def test_freezer_set_values(cli_runner, mock_db):
    result = cli_runner.invoke(eng_app, [
        "freezer", "--no-save", "--format", "json",
        "--set", "room.insulation_type=EPS", "--set", "room.insulation_thickness=100",
    ])
    assert result.exit_code == 0, result.output
    assert '"wall_u_factor": 0.35' in result.output


def test_freezer_saves_history(cli_runner, mock_db):
    result = cli_runner.invoke(eng_app, ["freezer", "--title", "Store 1"])
    assert result.exit_code == 0, result.output
    row = mock_db.execute("SELECT room_type, title FROM eng_calculations").fetchone()
    assert row["room_type"] == "freezer"
    assert row["title"] == "Store 1"


def test_no_save(cli_runner, mock_db):
    result = cli_runner.invoke(eng_app, ["cold-room", "--no-save"])
    assert result.exit_code == 0, result.output
    assert mock_db.execute("SELECT COUNT(*) FROM eng_calculations").fetchone()[0] == 0


def test_cold_room_command(cli_runner, mock_db):
    result = cli_runner.invoke(eng_app, ["cold-room", "--product", "BANANA", "--daily-load", "4000"])
    assert result.exit_code == 0, result.output
    assert "Respiration" in result.output


def test_freezer_product_name(cli_runner, mock_db):
    result = cli_runner.invoke(eng_app, ["freezer", "--product", "Fish", "--no-save", "--format", "json"])
    assert result.exit_code == 0, result.output
    assert '"product_type": "Fish"' in result.output
    assert "General Food Items" not in result.output


def test_blast_freezer_command(cli_runner, mock_db):
    result = cli_runner.invoke(eng_app, [
        "blast-freezer", "--breadth", "5", "--batch-hours", "8", "--format", "markdown",
    ])
    assert result.exit_code == 0, result.output
    assert "| Drain heaters |" in result.output


def test_degenerate_input_fails(cli_runner, mock_db):
    result = cli_runner.invoke(eng_app, ["freezer", "--set", "conditions.operating_hours=0"])
    assert result.exit_code == 1
    assert "operating_hours" in result.output


def test_malformed_set_value(cli_runner, mock_db):
    result = cli_runner.invoke(eng_app, ["freezer", "--set", "length=4"])
    assert result.exit_code != 0


def test_unknown_stage(cli_runner, mock_db):
    result = cli_runner.invoke(eng_app, ["freezer", "--set", "attic.length=4"])
    assert result.exit_code != 0


def test_history_empty(cli_runner, mock_db):
    result = cli_runner.invoke(eng_app, ["history"])
    assert result.exit_code == 0
    assert "No calculations" in result.output


def test_history_lists_saved(cli_runner, mock_db):
    cli_runner.invoke(eng_app, ["freezer", "--title", "Store 1"])
    cli_runner.invoke(eng_app, ["blast-freezer"])
    result = cli_runner.invoke(eng_app, ["history", "--room-type", "freezer"])
    assert result.exit_code == 0, result.output
    assert "Store 1" in result.output
    assert "blast-freezer" not in result.output


def test_history_bad_room_type(cli_runner, mock_db):
    result = cli_runner.invoke(eng_app, ["history", "--room-type", "igloo"])
    assert result.exit_code == 1


def test_delete(cli_runner, mock_db):
    cli_runner.invoke(eng_app, ["freezer"])
    calc_id = mock_db.execute("SELECT id FROM eng_calculations").fetchone()["id"]
    result = cli_runner.invoke(eng_app, ["delete", str(calc_id)])
    assert result.exit_code == 0, result.output
    result = cli_runner.invoke(eng_app, ["delete", str(calc_id)])
    assert result.exit_code == 1
    assert "not found" in result.output


class TestFormState:
    def _fill_freezer(self, cli_runner):
        for args in (
            ["room", "length=4", "width=3", "height=2.5"],
            ["conditions", "external_temp=35", "internal_temp=-18"],
            ["product", "product_type=General Food Items", "daily_load=1000"],
        ):
            result = cli_runner.invoke(eng_app, ["form-set", "freezer", *args])
            assert result.exit_code == 0, result.output

    def test_form_set_and_show(self, cli_runner, mock_db):
        result = cli_runner.invoke(eng_app, ["form-set", "coldroom", "room", "length=3.05", "width=4.5"])
        assert result.exit_code == 0, result.output
        assert "2 field(s)" in result.output

        result = cli_runner.invoke(eng_app, ["form-show", "coldroom"])
        assert result.exit_code == 0, result.output
        assert "3.05" in result.output
        assert "conditions: (not saved)" in result.output

    def test_form_set_unsupported_stage(self, cli_runner, mock_db):
        result = cli_runner.invoke(eng_app, ["form-set", "freezer", "usage", "number_of_people=2"])
        assert result.exit_code == 1

    def test_form_set_unknown_room_type(self, cli_runner, mock_db):
        result = cli_runner.invoke(eng_app, ["form-set", "igloo", "room", "length=2"])
        assert result.exit_code == 1
        assert "Unknown room type" in result.output

    def test_form_clear(self, cli_runner, mock_db):
        self._fill_freezer(cli_runner)
        result = cli_runner.invoke(eng_app, ["form-clear", "freezer"])
        assert result.exit_code == 0, result.output
        assert "Cleared 3" in result.output

    def test_calculate_without_state(self, cli_runner, mock_db):
        result = cli_runner.invoke(eng_app, ["calculate", "freezer"])
        assert result.exit_code == 1
        assert "Missing required input stage 'room'" in result.output

    def test_calculate_from_state(self, cli_runner, mock_db):
        self._fill_freezer(cli_runner)
        result = cli_runner.invoke(eng_app, ["calculate", "freezer"])
        assert result.exit_code == 0, result.output
        assert "7.568" in result.output
        saved = mock_db.execute("SELECT input_json FROM eng_calculations").fetchone()
        assert "General Food Items" in saved["input_json"]


class TestReport:
    def test_report_from_state(self, cli_runner, mock_db, tmp_path):
        for args in (
            ["room", "length=4"],
            ["conditions", "internal_temp=-20"],
            ["product", "daily_load=800"],
        ):
            cli_runner.invoke(eng_app, ["form-set", "freezer", *args])

        out = tmp_path / "freezer.html"
        result = cli_runner.invoke(eng_app, ["report", "freezer", "--output", str(out), "--format", "html"])
        assert result.exit_code == 0, result.output
        assert out.exists()
        assert "Load Breakdown" in out.read_text(encoding="utf-8")

    def test_report_from_history(self, cli_runner, mock_db, tmp_path):
        cli_runner.invoke(eng_app, ["blast-freezer", "--title", "Tunnel 2"])
        calc_id = mock_db.execute("SELECT id FROM eng_calculations").fetchone()["id"]

        out = tmp_path / "tunnel.html"
        result = cli_runner.invoke(eng_app, [
            "report", "blastfreezer", "--from-history", str(calc_id), "--output", str(out), "-f", "html",
        ])
        assert result.exit_code == 0, result.output
        assert "Tunnel 2" in out.read_text(encoding="utf-8")

    def test_report_history_wrong_room_type(self, cli_runner, mock_db, tmp_path):
        cli_runner.invoke(eng_app, ["freezer"])
        calc_id = mock_db.execute("SELECT id FROM eng_calculations").fetchone()["id"]
        result = cli_runner.invoke(eng_app, [
            "report", "coldroom", "--from-history", str(calc_id), "--output", str(tmp_path / "x.html"),
        ])
        assert result.exit_code == 1

    def test_report_missing_state(self, cli_runner, mock_db, tmp_path):
        result = cli_runner.invoke(eng_app, ["report", "coldroom", "--output", str(tmp_path / "c.html")])
        assert result.exit_code == 1

    def test_report_bad_format(self, cli_runner, mock_db, tmp_path):
        result = cli_runner.invoke(eng_app, ["report", "freezer", "--format", "docx"])
        assert result.exit_code == 1
        assert "Unsupported report format" in result.output


class TestUnmigratedDatabase:
    @pytest.fixture
    def missing_db(self, tmp_path):
        with patch("coolcalc.core.db.get_db_path", return_value=tmp_path / "coolcalc.db"):
            yield tmp_path / "coolcalc.db"

    @pytest.mark.parametrize("args", [
        ["calculate", "freezer", "--no-save"],
        ["form-show", "coldroom"],
        ["history"],
        ["report", "blastfreezer"],
    ])
    def test_read_commands_ask_for_migration(self, cli_runner, missing_db, args):
        result = cli_runner.invoke(eng_app, args)
        assert result.exit_code == 1
        assert "coolcalc migrate" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_save_asks_for_migration(self, cli_runner, missing_db):
        result = cli_runner.invoke(eng_app, ["freezer"])
        assert result.exit_code == 1
        assert "coolcalc migrate" in result.output

    def test_form_set_asks_for_migration(self, cli_runner, missing_db):
        result = cli_runner.invoke(eng_app, ["form-set", "freezer", "room", "length=4"])
        assert result.exit_code == 1
        assert "coolcalc migrate" in result.output
