"""
Cold Room Load Module
=====================

Daily cooling load of a chilled (above-freezing) cold room.

Differs from the freezer method:
- One U-factor (0.295 W/m²K) for every surface
- Single-stage sensible product load, plus respiration of perishables
- Fixed per-unit kW constants for door, equipment, occupancy, lighting
  and heaters, scaled by the operating-hours duty ratio
- No latent load, so SHR is 1.0
- Storage capacity is room volume × storage density
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from coolcalc.engineering.base import FormStage, LoadCalculator, RoomType
from coolcalc.engineering.refrig_calc.models import (
    ConditionsInfo,
    ConstructionSpec,
    GeometryInfo,
    LoadSummary,
    OperatingConditions,
    ProductSpec,
    RoomGeometry,
    StorageCapacity,
    TransmissionLoad,
)
from coolcalc.engineering.refrig_calc.normalizer import (
    normalize_choice,
    normalize_fields,
)
from coolcalc.engineering.refrig_calc.thermal_data import (
    COLD_ROOM_CONDITIONS_DEFAULTS,
    COLD_ROOM_CONSTANTS,
    COLD_ROOM_PRODUCT_DEFAULTS,
    COLD_ROOM_PRODUCTS,
    COLD_ROOM_ROOM_DEFAULTS,
    INSULATION_TYPES,
    M3_TO_FT3,
    STORAGE_FACTORS,
    get_product,
    lookup_u_factor,
)
from coolcalc.engineering.refrig_calc.utils import (
    ensure_finite,
    require_hours,
    require_non_negative,
    require_positive,
)


def approximate_u_factor(insulation_type: str, thickness_mm: float) -> float:
    """
    Panel U-factor shown alongside the construction inputs.

    Informational only; the cold-room calculation uses the fixed 0.295.
    """
    return lookup_u_factor(insulation_type, thickness_mm, COLD_ROOM_CONSTANTS["approx_u_factor_fallback"])


@dataclass
class ColdRoomMiscLoads:
    equipment: float
    occupancy: float
    lighting: float
    total: float = 0.0


@dataclass
class ColdRoomHeaterLoads:
    peripheral: float
    door: float
    steam: float
    total: float = 0.0


@dataclass
class AirFlowInfo:
    required_cfm: float
    recommended_cfm: float


@dataclass
class DailyLoads:
    sensible_heat_kj: float
    latent_heat_kj: float
    total_kj: float
    shr: float


@dataclass
class ColdRoomLoadResult:
    """Complete cold-room load breakdown (loads in kW)."""
    geometry: GeometryInfo
    conditions: ConditionsInfo
    construction: ConstructionSpec
    product: ProductSpec
    storage: StorageCapacity
    transmission: TransmissionLoad
    product_load: float
    respiration: float
    air_change: float
    door_opening: float
    miscellaneous: ColdRoomMiscLoads
    heaters: ColdRoomHeaterLoads
    summary: LoadSummary
    air_flow: AirFlowInfo
    daily_loads: DailyLoads
    door_openings: float
    door_clear_opening: float
    number_of_heaters: float
    number_of_doors: float
    working_hours: float
    room_type: str = RoomType.COLD_ROOM.value
    warnings: List[str] = field(default_factory=list)


class ColdRoomLoadCalculator(LoadCalculator):
    """
    Cold-room cooling-load calculator.

    Example:
        >>> calc = ColdRoomLoadCalculator()
        >>> result = calc.calculate({}, {}, {"daily_load": 4000})
        >>> round(result.product_load, 2)
        19.13
    """

    U_FACTOR = COLD_ROOM_CONSTANTS["u_factor"]
    AIR_FLOW_RATE = COLD_ROOM_CONSTANTS["air_flow_rate_ls"]
    AIR_ENTHALPY_DIFF = COLD_ROOM_CONSTANTS["air_enthalpy_diff"]
    EQUIPMENT_KW = COLD_ROOM_CONSTANTS["equipment_kw"]
    OCCUPANCY_KW = COLD_ROOM_CONSTANTS["occupancy_kw_per_person"]
    LIGHTING_KW = COLD_ROOM_CONSTANTS["lighting_kw"]
    HEATER_KW = COLD_ROOM_CONSTANTS["heater_capacity_kw"]

    safety_factor = COLD_ROOM_CONSTANTS["safety_factor"]

    @property
    def room_type(self) -> RoomType:
        return RoomType.COLD_ROOM

    def calculate(
        self,
        room: Optional[Mapping[str, Any]],
        conditions: Optional[Mapping[str, Any]],
        product: Optional[Mapping[str, Any]],
    ) -> ColdRoomLoadResult:
        room = self.require(FormStage.ROOM, room)
        conditions = self.require(FormStage.CONDITIONS, conditions)
        product = self.require(FormStage.PRODUCT, product)

        r = normalize_fields(room, COLD_ROOM_ROOM_DEFAULTS, stage="coldroom.room")
        c = normalize_fields(conditions, COLD_ROOM_CONDITIONS_DEFAULTS, stage="coldroom.conditions")

        product_type = normalize_choice(
            product, "product_type", COLD_ROOM_CONSTANTS["default_product"],
            COLD_ROOM_PRODUCTS, stage="coldroom.product",
        )
        properties = get_product(COLD_ROOM_PRODUCTS, product_type, COLD_ROOM_CONSTANTS["default_product"])

        # Specific heat and respiration default to the selected product's values
        product_defaults = dict(COLD_ROOM_PRODUCT_DEFAULTS)
        product_defaults["specific_heat_above"] = properties.specific_heat_above
        product_defaults["respiration_rate"] = properties.respiration_rate
        p = normalize_fields(product, product_defaults, stage="coldroom.product")

        geometry = RoomGeometry(
            length=r["length"],
            width=r["width"],
            height=r["height"],
            door_width=r["door_width"],
            door_height=r["door_height"],
        )
        operating = OperatingConditions(
            external_temp=c["external_temp"],
            internal_temp=c["internal_temp"],
            operating_hours=c["operating_hours"],
            pull_down_hours=c["pull_down_time"],
        )
        insulation = normalize_choice(room, "insulation_type", "PUF", INSULATION_TYPES, stage="coldroom.room")
        construction = ConstructionSpec(
            insulation_type=insulation,
            wall_thickness=r["insulation_thickness"],
            ceiling_thickness=r["insulation_thickness"],
            floor_thickness=r["insulation_thickness"],
            wall_u_factor=self.U_FACTOR,
            ceiling_u_factor=self.U_FACTOR,
            floor_u_factor=self.U_FACTOR,
            internal_floor_thickness=r["internal_floor_thickness"],
        )
        spec = ProductSpec.from_properties(
            product_type=product_type,
            mass=p["daily_load"],
            incoming_temp=p["incoming_temp"],
            outgoing_temp=p["outgoing_temp"],
            properties=properties,
            specific_heat_above=p["specific_heat_above"],
            respiration_rate=p["respiration_rate"],
        )
        storage_type = normalize_choice(
            product, "storage_type", COLD_ROOM_CONSTANTS["default_storage_type"],
            STORAGE_FACTORS, stage="coldroom.product",
        )

        require_hours("operating_hours", operating.operating_hours)
        require_positive("pull_down_time", operating.pull_down_hours)
        require_hours("working_hours", p["working_hours"], allow_zero=True)
        require_non_negative("daily_load", spec.mass)
        require_non_negative("storage_density", r["storage_density"])

        hours = operating.operating_hours
        duty = hours / 24

        transmission = self.transmission_load(geometry, operating)
        product_load = self.product_load(spec, operating.pull_down_hours)
        respiration = self.respiration_load(spec)
        air_change = self.AIR_FLOW_RATE * self.AIR_ENTHALPY_DIFF * hours / 1000
        door_opening = self.HEATER_KW * duty

        equipment = self.EQUIPMENT_KW * hours / 24
        occupancy = self.OCCUPANCY_KW * p["number_of_people"] * hours / 24
        lighting = self.LIGHTING_KW * hours / 24
        misc = ColdRoomMiscLoads(
            equipment=equipment,
            occupancy=occupancy,
            lighting=lighting,
            total=equipment + occupancy + lighting,
        )

        peripheral = self.HEATER_KW * r["number_of_heaters"] * hours / 24
        door_heaters = self.HEATER_KW * r["number_of_doors"] * hours / 24
        steam = p["steam_humidifier_load"] * hours / 24
        heaters = ColdRoomHeaterLoads(
            peripheral=peripheral,
            door=door_heaters,
            steam=steam,
            total=peripheral + door_heaters + steam,
        )

        total = (transmission.total + product_load + respiration + air_change
                 + door_opening + misc.total + heaters.total)
        summary = LoadSummary.build(total, 0.0, self.safety_factor)

        maximum = geometry.volume * r["storage_density"]
        storage = StorageCapacity.build(
            maximum,
            spec.mass,
            storage_factor=STORAGE_FACTORS.get(
                storage_type, STORAGE_FACTORS[COLD_ROOM_CONSTANTS["default_storage_type"]]
            ),
            storage_type=storage_type,
            density=r["storage_density"],
            available_capacity=maximum - spec.mass,
        )

        required_cfm = r["air_flow_per_fan"]
        recommended = geometry.volume * M3_TO_FT3 * COLD_ROOM_CONSTANTS["recommended_air_changes"]
        air_flow = AirFlowInfo(required_cfm=required_cfm, recommended_cfm=max(required_cfm, recommended))

        daily_kj = summary.daily_energy_kj
        daily_loads = DailyLoads(
            sensible_heat_kj=daily_kj,
            latent_heat_kj=0.0,
            total_kj=daily_kj,
            shr=summary.shr,
        )

        warnings = []
        if spec.outgoing_temp <= spec.freezing_point:
            warnings.append(
                f"Outgoing temperature {spec.outgoing_temp} C is at or below the freezing point "
                f"{spec.freezing_point} C; use the freezer calculation"
            )
        if storage.utilization is not None and storage.utilization > 100:
            warnings.append(
                f"Daily load {spec.mass:,.0f} kg exceeds storage capacity {maximum:,.0f} kg"
            )

        result = ColdRoomLoadResult(
            geometry=GeometryInfo.from_geometry(geometry),
            conditions=ConditionsInfo.from_conditions(operating),
            construction=construction,
            product=spec,
            storage=storage,
            transmission=transmission,
            product_load=product_load,
            respiration=respiration,
            air_change=air_change,
            door_opening=door_opening,
            miscellaneous=misc,
            heaters=heaters,
            summary=summary,
            air_flow=air_flow,
            daily_loads=daily_loads,
            door_openings=r["door_openings"],
            door_clear_opening=r["door_clear_opening"],
            number_of_heaters=r["number_of_heaters"],
            number_of_doors=r["number_of_doors"],
            working_hours=p["working_hours"],
            warnings=warnings,
        )
        return ensure_finite(result)

    def transmission_load(self, geometry: RoomGeometry, operating: OperatingConditions) -> TransmissionLoad:
        dt = operating.temperature_difference
        hours = operating.operating_hours
        return TransmissionLoad.from_parts(
            walls=self.U_FACTOR * geometry.wall_area * dt * hours / 1000,
            ceiling=self.U_FACTOR * geometry.ceiling_area * dt * hours / 1000,
            floor=self.U_FACTOR * geometry.floor_area * dt * hours / 1000,
        )

    def product_load(self, spec: ProductSpec, pull_down_hours: float) -> float:
        """m·Cp·(in − out)/pull-down/1000."""
        dt = spec.incoming_temp - spec.outgoing_temp
        return spec.mass * spec.specific_heat_above * dt / pull_down_hours / 1000

    def respiration_load(self, spec: ProductSpec) -> float:
        """Mass in tonnes × W/tonne, in kW."""
        return (spec.mass / 1000) * spec.respiration_rate / 1000
