"""Tests for free-text input normalization."""

import logging
import math

import pytest

from coolcalc.engineering.refrig_calc.normalizer import (
    normalize_choice,
    normalize_fields,
    optional_number,
    parse_number,
)


class TestParseNumber:
    @pytest.mark.parametrize("raw, expected", [
        ("4", 4.0),
        (" 2.5 ", 2.5),
        ("-18", -18.0),
        ("1e3", 1000.0),
        (7, 7.0),
        (0, 0.0),
        (3.25, 3.25),
    ])
    def test_numbers(self, raw, expected):
        assert parse_number(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "12abc", True, [], {}])
    def test_not_numbers(self, raw):
        assert parse_number(raw) is None

    @pytest.mark.parametrize("raw", ["nan", "inf", "-inf", math.nan, math.inf])
    def test_non_finite_rejected(self, raw):
        assert parse_number(raw) is None


class TestNormalizeFields:
    DEFAULTS = {"length": 4.0, "width": 3.0, "height": 2.5}

    def test_missing_fields_take_defaults(self):
        assert normalize_fields({}, self.DEFAULTS) == self.DEFAULTS

    def test_none_record_takes_defaults(self):
        assert normalize_fields(None, self.DEFAULTS) == self.DEFAULTS

    def test_text_values_parsed(self):
        result = normalize_fields({"length": "10", "width": " 6.5 "}, self.DEFAULTS)
        assert result == {"length": 10.0, "width": 6.5, "height": 2.5}

    def test_zero_is_kept(self):
        result = normalize_fields({"height": "0"}, self.DEFAULTS)
        assert result["height"] == 0.0

    def test_malformed_value_falls_back_and_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="coolcalc.engineering.normalizer"):
            result = normalize_fields({"length": "four"}, self.DEFAULTS, stage="freezer.room")
        assert result["length"] == 4.0
        assert "freezer.room.length" in caplog.text

    def test_extra_fields_ignored(self):
        result = normalize_fields({"colour": "blue"}, self.DEFAULTS)
        assert "colour" not in result


class TestNormalizeChoice:
    def test_missing_takes_default(self):
        assert normalize_choice({}, "product_type", "Chicken") == "Chicken"

    def test_blank_takes_default(self):
        assert normalize_choice({"product_type": "  "}, "product_type", "Chicken") == "Chicken"

    def test_value_stripped(self):
        assert normalize_choice({"product_type": " Beef "}, "product_type", "Chicken") == "Beef"

    def test_unknown_value_kept(self):
        value = normalize_choice({"product_type": "Kale"}, "product_type", "Chicken", choices=["Beef"])
        assert value == "Kale"


class TestOptionalNumber:
    def test_absent(self):
        assert optional_number({}, "custom_cp_above") is None

    def test_present(self):
        assert optional_number({"custom_cp_above": "3.1"}, "custom_cp_above") == 3.1

    def test_unparseable(self):
        assert optional_number({"custom_cp_above": "n/a"}, "custom_cp_above") is None
