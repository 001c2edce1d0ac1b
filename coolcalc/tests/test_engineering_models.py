"""Tests for input/result records, reference tables and unit helpers."""

import math

import pytest

from coolcalc.engineering.errors import DegenerateInputError, LoadCalculationError, MissingInputError
from coolcalc.engineering.refrig_calc.models import (
    HeaterBank,
    LoadSummary,
    ProductLoad,
    RoomGeometry,
    StorageCapacity,
    TransmissionLoad,
    UsageLoads,
)
from coolcalc.engineering.refrig_calc.thermal_data import (
    BLAST_FREEZER_PRODUCTS,
    FREEZER_PRODUCTS,
    get_product,
    lookup_u_factor,
)
from coolcalc.engineering.refrig_calc.utils import (
    ensure_finite,
    kw_to_btu_hr,
    kw_to_tr,
    require_hours,
    require_positive,
    tr_to_kw,
)


class TestRoomGeometry:
    def test_areas_and_volume(self):
        g = RoomGeometry(length=4, width=3, height=2.5, door_width=1, door_height=2)
        assert g.wall_area == pytest.approx(35.0)
        assert g.ceiling_area == pytest.approx(12.0)
        assert g.floor_area == pytest.approx(12.0)
        assert g.door_area == pytest.approx(2.0)
        assert g.volume == pytest.approx(30.0)

    def test_zero_dimensions_allowed(self):
        g = RoomGeometry(length=0, width=3, height=2.5)
        assert g.volume == 0

    def test_negative_dimension_rejected(self):
        with pytest.raises(DegenerateInputError) as exc:
            RoomGeometry(length=-1, width=3, height=2.5)
        assert exc.value.field == "length"

    def test_non_finite_dimension_rejected(self):
        with pytest.raises(DegenerateInputError):
            RoomGeometry(length=math.inf, width=3, height=2.5)


class TestLoadSummary:
    def test_safety_factor_applied(self):
        s = LoadSummary.build(10.0, 2.0, 1.10)
        assert s.total_before_safety_kw == pytest.approx(12.0)
        assert s.final_load_kw == pytest.approx(13.2)
        assert s.safety_margin_kw == pytest.approx(1.2)
        assert s.final_load_tr == pytest.approx(13.2 / 3.517)
        assert s.final_load_btu_hr == pytest.approx(13.2 * 3412)
        assert s.daily_energy_kwh == pytest.approx(13.2 * 24)
        assert s.daily_energy_kj == pytest.approx(13.2 * 86.4)

    def test_shr(self):
        s = LoadSummary.build(9.0, 1.0, 1.0)
        assert s.shr == pytest.approx(0.9)

    def test_shr_zero_load(self):
        assert LoadSummary.build(0.0, 0.0, 1.1).shr == 1.0

    def test_total_override(self):
        s = LoadSummary.build(8.0, 2.0, 1.05, total_before_safety_kw=11.0)
        assert s.total_before_safety_kw == 11.0
        assert s.final_load_kw == pytest.approx(11.55)
        assert s.shr == pytest.approx(0.8)


class TestSmallRecords:
    def test_transmission_total(self):
        t = TransmissionLoad.from_parts(1.0, 2.0, 3.0)
        assert t.total == 6.0

    def test_product_load_stages(self):
        p = ProductLoad.from_stages(1.0, 2.0, 0.5)
        assert p.total == 3.5
        assert p.sensible == 1.5

    def test_storage_utilization(self):
        s = StorageCapacity.build(2000.0, 500.0)
        assert s.utilization == pytest.approx(25.0)

    def test_storage_zero_capacity(self):
        assert StorageCapacity.build(0.0, 500.0).utilization is None

    def test_heater_totals(self):
        usage = UsageLoads(
            peripheral_heaters=HeaterBank(2, 1.5),
            door_heaters=HeaterBank(1, 0.27),
        )
        assert usage.total_heater_kw == pytest.approx(3.27)


class TestReferenceTables:
    def test_tabulated_u_factor(self):
        assert lookup_u_factor("PUF", 150, 0.25) == 0.17
        assert lookup_u_factor("EPS", 100.0, 0.25) == 0.35

    def test_untabulated_u_factor_falls_back(self):
        assert lookup_u_factor("PUF", 160, 0.25) == 0.25
        assert lookup_u_factor("Cork", 150, 0.25) == 0.25

    def test_product_lookup(self):
        assert get_product(FREEZER_PRODUCTS, "Beef", "General Food Items").latent_heat == 233

    def test_unknown_product_falls_back(self):
        fallback = get_product(BLAST_FREEZER_PRODUCTS, "Kale", "General Food Items")
        assert fallback == BLAST_FREEZER_PRODUCTS["General Food Items"]


class TestUnitHelpers:
    def test_conversions(self):
        assert kw_to_tr(3.517) == pytest.approx(1.0)
        assert tr_to_kw(2.0) == pytest.approx(7.034)
        assert kw_to_btu_hr(1.0) == 3412

    def test_require_positive(self):
        assert require_positive("batch_hours", 8) == 8
        with pytest.raises(DegenerateInputError):
            require_positive("batch_hours", 0)

    @pytest.mark.parametrize("value", [0, -1, 24.5])
    def test_operating_hours_bounds(self, value):
        with pytest.raises(DegenerateInputError):
            require_hours("operating_hours", value)

    def test_working_hours_may_be_zero(self):
        assert require_hours("working_hours", 0, allow_zero=True) == 0

    def test_ensure_finite(self):
        with pytest.raises(DegenerateInputError, match="result.loads.total"):
            ensure_finite({"loads": {"total": math.nan}})
        assert ensure_finite({"loads": [1.0, 2.0]}) == {"loads": [1.0, 2.0]}


class TestErrors:
    def test_missing_input_message(self):
        err = MissingInputError("room", "freezer")
        assert err.stage == "room"
        assert "Missing required input stage 'room' for freezer" in str(err)

    def test_errors_are_value_errors(self):
        assert issubclass(LoadCalculationError, ValueError)
        assert issubclass(DegenerateInputError, LoadCalculationError)
