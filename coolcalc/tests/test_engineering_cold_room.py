"""Tests for the cold room load calculator."""

from dataclasses import asdict

import pytest

from coolcalc.engineering.errors import DegenerateInputError, MissingInputError
from coolcalc.engineering.refrig_calc import ColdRoomLoadCalculator, approximate_u_factor


@pytest.fixture
def calc():
    return ColdRoomLoadCalculator()


def _calculate(calc, params, room=None, conditions=None, product=None):
    merged_room = {**params["room"], **params["construction"], **(room or {})}
    return calc.calculate(
        merged_room,
        {**params["conditions"], **(conditions or {})},
        {**params["product"], **(product or {})},
    )


class TestLoads:
    def test_reference_product_load(self, calc, cold_room_params):
        result = _calculate(calc, cold_room_params)
        # 4000 kg x 4.1 kJ/kg·K x 28 K / 24 h / 1000
        assert result.product_load == pytest.approx(4000 * 4.1 * 28 / 24 / 1000)
        assert round(result.product_load, 2) == 19.13

    def test_fixed_u_factor_transmission(self, calc, cold_room_params):
        result = _calculate(calc, cold_room_params)
        assert result.construction.wall_u_factor == 0.295
        assert result.transmission.walls == pytest.approx(0.295 * 45.3 * 43 * 20 / 1000)

    def test_respiration(self, calc, cold_room_params):
        result = _calculate(calc, cold_room_params)
        # 4 tonnes x 50 W/tonne
        assert result.respiration == pytest.approx(0.2)

    def test_respiration_rate_follows_product(self, calc, cold_room_params):
        result = _calculate(calc, cold_room_params, product={"product_type": "Vegetables (Mixed)"})
        assert result.product.respiration_rate == 24
        assert result.product.specific_heat_above == 3.7

    def test_entered_cp_overrides_product(self, calc, cold_room_params):
        result = _calculate(calc, cold_room_params, product={"specific_heat_above": "3.5"})
        assert result.product_load == pytest.approx(4000 * 3.5 * 28 / 24 / 1000)

    def test_fixed_constant_loads(self, calc, cold_room_params):
        result = _calculate(calc, cold_room_params)
        duty = 20 / 24
        assert result.air_change == pytest.approx(3.4 * 0.10 * 20 / 1000)
        assert result.door_opening == pytest.approx(0.145 * duty)
        assert result.miscellaneous.equipment == pytest.approx(0.25 * duty)
        assert result.miscellaneous.occupancy == pytest.approx(1.0 * duty)
        assert result.miscellaneous.lighting == pytest.approx(0.07 * duty)
        assert result.heaters.peripheral == pytest.approx(0.145 * duty)
        assert result.heaters.door == pytest.approx(0.145 * duty)

    def test_steam_humidifier(self, calc, cold_room_params):
        result = _calculate(calc, cold_room_params, product={"steam_humidifier_load": "2.4"})
        assert result.heaters.steam == pytest.approx(2.4 * 20 / 24)


class TestSummary:
    def test_no_latent_load(self, calc, cold_room_params):
        s = _calculate(calc, cold_room_params).summary
        assert s.total_latent_kw == 0
        assert s.shr == 1.0

    def test_total_and_safety(self, calc, cold_room_params):
        result = _calculate(calc, cold_room_params)
        expected = (
            result.transmission.total + result.product_load + result.respiration
            + result.air_change + result.door_opening
            + result.miscellaneous.total + result.heaters.total
        )
        assert result.summary.total_before_safety_kw == pytest.approx(expected)
        assert result.summary.final_load_kw == pytest.approx(expected * 1.10)

    def test_daily_loads(self, calc, cold_room_params):
        result = _calculate(calc, cold_room_params)
        assert result.daily_loads.total_kj == pytest.approx(result.summary.final_load_kw * 86.4)

    def test_storage_from_density(self, calc, cold_room_params):
        result = _calculate(calc, cold_room_params)
        assert result.geometry.volume == pytest.approx(41.175)
        assert result.storage.maximum == pytest.approx(41.175 * 8)
        assert any("exceeds storage capacity" in w for w in result.warnings)

    def test_zero_storage_density(self, calc, cold_room_params):
        result = _calculate(calc, cold_room_params, room={"storage_density": "0"})
        assert result.storage.utilization is None

    def test_recommended_air_flow(self, calc, cold_room_params):
        result = _calculate(calc, cold_room_params)
        assert result.air_flow.recommended_cfm == 4163

    def test_repeatable(self, calc, cold_room_params):
        assert asdict(_calculate(calc, cold_room_params)) == asdict(_calculate(calc, cold_room_params))

    def test_freezing_outgoing_warns(self, calc, cold_room_params):
        result = _calculate(calc, cold_room_params, product={"outgoing_temp": "-5"})
        assert any("freezer" in w for w in result.warnings)


class TestDegenerateInputs:
    def test_zero_pull_down(self, calc, cold_room_params):
        with pytest.raises(DegenerateInputError):
            _calculate(calc, cold_room_params, conditions={"pull_down_time": "0"})

    def test_operating_hours_over_24(self, calc, cold_room_params):
        with pytest.raises(DegenerateInputError):
            _calculate(calc, cold_room_params, conditions={"operating_hours": "30"})

    def test_missing_product_stage(self, calc, cold_room_params):
        with pytest.raises(MissingInputError) as exc:
            calc.calculate(cold_room_params["room"], cold_room_params["conditions"], None)
        assert exc.value.stage == "product"


class TestApproximateUFactor:
    def test_tabulated(self):
        assert approximate_u_factor("PUF", 100) == 0.25
        assert approximate_u_factor("EPS", 150) == 0.23

    def test_fallback(self):
        assert approximate_u_factor("PUF", 110) == 0.25
        assert approximate_u_factor("Glass wool", 100) == 0.25
