"""Tests for the blast freezer load calculator."""

from dataclasses import asdict

import pytest

from coolcalc.engineering.errors import DegenerateInputError, MissingInputError
from coolcalc.engineering.refrig_calc import BlastFreezerLoadCalculator, calculate_u_factor

TR = 3517


@pytest.fixture
def calc():
    return BlastFreezerLoadCalculator()


def _calculate(calc, params, room=None, conditions=None, product=None):
    return calc.calculate(
        {**params["room"], **params["construction"], **(room or {})},
        {**params["conditions"], **(conditions or {})},
        {**params["product"], **params["usage"], **(product or {})},
    )


class TestUFactor:
    def test_puf_150(self):
        assert calculate_u_factor("PUF", 150) == pytest.approx(0.023 / 0.150)
        assert round(calculate_u_factor("PUF", 150), 4) == 0.1533

    def test_unknown_insulation(self):
        assert calculate_u_factor("Cork", 150) == 0.153

    def test_zero_thickness_rejected(self):
        with pytest.raises(DegenerateInputError):
            calculate_u_factor("PUF", 0)

    def test_per_surface_thickness(self, calc, blast_freezer_params):
        result = _calculate(calc, blast_freezer_params, room={"ceiling_thickness": "200"})
        assert result.construction.ceiling_u_factor == pytest.approx(0.023 / 0.2)
        assert result.construction.wall_u_factor == pytest.approx(0.023 / 0.15)

    def test_zero_surface_thickness_rejected(self, calc, blast_freezer_params):
        with pytest.raises(DegenerateInputError) as exc:
            _calculate(calc, blast_freezer_params, room={"floor_thickness": "0"})
        assert exc.value.field == "floor_thickness"


class TestLoads:
    def test_transmission_is_instantaneous(self, calc, blast_freezer_params):
        t = _calculate(calc, blast_freezer_params).transmission
        assert t.walls == pytest.approx(0.023 / 0.15 * 70 * 78 / 1000)
        assert t.walls_tr == pytest.approx(t.walls / 3.517)
        assert t.total == pytest.approx(t.walls + t.ceiling + t.floor)

    def test_frozen_product_only_sensible_below(self, calc, blast_freezer_params):
        p = _calculate(calc, blast_freezer_params).product_load
        assert p.sensible_above == 0
        assert p.latent == 0
        # Chicken below freezing: 2.14 kJ/kg·K, from the -1.7 °C freezing point to -30 °C
        assert p.sensible_below_kj == pytest.approx(2000 * 2.14 * 28.3)
        assert p.sensible_below == pytest.approx(2000 * 2.14 * 28.3 / TR)

    def test_warm_product_all_stages(self, calc, blast_freezer_params):
        p = _calculate(calc, blast_freezer_params, product={"incoming_temp": "10"}).product_load
        assert p.sensible_above_kj == pytest.approx(2000 * 3.49 * 11.7)
        assert p.latent_kj == pytest.approx(2000 * 233)
        assert p.sensible_below_kj == pytest.approx(2000 * 2.14 * 28.3)

    def test_default_inputs_cool_from_freezing_point(self, calc):
        p = calc.calculate({}, {}, {}).product_load
        assert p.sensible_above_kj == 0
        assert p.sensible_below_kj == pytest.approx(2000 * 2.14 * 28.3)

    def test_air_change_per_batch(self, calc, blast_freezer_params):
        a = _calculate(calc, blast_freezer_params).air_change
        assert a.total_kj == pytest.approx(4.2 * 87.5 * 0.14 * 8)
        assert a.load_tr == pytest.approx(a.total_kj / TR)

    def test_internal_loads(self, calc, blast_freezer_params):
        i = _calculate(calc, blast_freezer_params).internal
        assert i.occupancy == pytest.approx(2 * 1800 * 4 / (TR * 24))
        assert i.total_heaters == pytest.approx(
            i.peripheral_heaters + i.door_heaters + i.tray_heaters + i.drain_heaters
        )

    def test_width_accepted_for_breadth(self, calc, blast_freezer_params):
        params = dict(blast_freezer_params, room={"length": "5", "width": "6", "height": "3.5"})
        result = _calculate(calc, params)
        assert result.geometry.width == 6.0
        assert result.geometry.volume == pytest.approx(105.0)


class TestSummary:
    def test_total_in_tr_and_kw(self, calc, blast_freezer_params):
        result = _calculate(calc, blast_freezer_params)
        expected_tr = (
            result.transmission.total_tr + result.product_load.total
            + result.air_change.load_tr + result.internal.total
        )
        assert result.total_load_tr == pytest.approx(expected_tr)
        assert result.summary.total_before_safety_kw == pytest.approx(expected_tr * 3.517)
        assert result.summary.final_load_kw == pytest.approx(expected_tr * 3.517 * 1.05)
        assert result.final_load_tr == pytest.approx(expected_tr * 1.05)

    def test_shr_without_latent(self, calc, blast_freezer_params):
        assert _calculate(calc, blast_freezer_params).summary.shr == 1.0

    def test_shr_with_latent(self, calc, blast_freezer_params):
        s = _calculate(calc, blast_freezer_params, product={"incoming_temp": "10"}).summary
        assert 0 < s.shr < 1

    def test_engineering_outputs(self, calc, blast_freezer_params):
        result = _calculate(calc, blast_freezer_params)
        e = result.engineering
        assert e.load_kj_per_batch == pytest.approx(result.total_load_tr * TR * 8)
        assert e.air_qty_required_cfm == pytest.approx(
            result.total_load_tr * TR * 1000 / (1.2 * 1005 * 78)
        )

    def test_equipment_summary(self, calc, blast_freezer_params):
        eq = _calculate(calc, blast_freezer_params).equipment
        assert eq.total_heater_load == pytest.approx(1.5 + 0.27 + 2.2 + 0.04)

    def test_repeatable(self, calc, blast_freezer_params):
        assert asdict(_calculate(calc, blast_freezer_params)) == asdict(_calculate(calc, blast_freezer_params))


class TestDegenerateInputs:
    def test_zero_batch_hours(self, calc, blast_freezer_params):
        with pytest.raises(DegenerateInputError):
            _calculate(calc, blast_freezer_params, conditions={"batch_hours": "0"})

    def test_equal_temperatures(self, calc, blast_freezer_params):
        with pytest.raises(DegenerateInputError):
            _calculate(calc, blast_freezer_params, conditions={"ambient_temp": "-35"})

    def test_zero_operating_hours(self, calc, blast_freezer_params):
        with pytest.raises(DegenerateInputError):
            _calculate(calc, blast_freezer_params, conditions={"operating_hours": "0"})

    def test_missing_conditions(self, calc, blast_freezer_params):
        with pytest.raises(MissingInputError) as exc:
            calc.calculate(blast_freezer_params["room"], None, blast_freezer_params["product"])
        assert exc.value.stage == "conditions"
        assert exc.value.room_type == "blastfreezer"
