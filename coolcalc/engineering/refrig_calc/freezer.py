"""
Freezer Load Module
===================

Daily cooling load of a storage freezer: transmission through insulated
panels, three-stage product freezing, air change, door opening and
internal loads (people, lighting, equipment, fans, heaters, steam).

The final load carries a fixed 10% safety factor.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from coolcalc.engineering.base import FormStage, LoadCalculator, RoomType
from coolcalc.engineering.refrig_calc.models import (
    ConditionsInfo,
    ConstructionSpec,
    GeometryInfo,
    HeaterBank,
    LoadSummary,
    OperatingConditions,
    ProductLoad,
    ProductSpec,
    RoomGeometry,
    StorageCapacity,
    TransmissionLoad,
    UsageLoads,
)
from coolcalc.engineering.refrig_calc.normalizer import (
    normalize_choice,
    normalize_fields,
    optional_number,
)
from coolcalc.engineering.refrig_calc.thermal_data import (
    FREEZER_CONDITIONS_DEFAULTS,
    FREEZER_CONSTANTS,
    FREEZER_PRODUCT_DEFAULTS,
    FREEZER_PRODUCTS,
    FREEZER_ROOM_DEFAULTS,
    INSULATION_TYPES,
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


@dataclass
class AirChangeLoad:
    air_flow_ls: float
    load: float


@dataclass
class DoorLoad:
    infiltration: float
    heater: float
    total: float


@dataclass
class FreezerInternalLoads:
    occupancy: float
    lighting: float
    equipment: float
    fan_motor: float
    door_heaters: float
    tray_heaters: float
    peripheral_heaters: float
    steam_humidifiers: float
    total: float = 0.0


@dataclass
class FreezerLoadResult:
    """Complete freezer load breakdown (loads in kW)."""
    geometry: GeometryInfo
    conditions: ConditionsInfo
    construction: ConstructionSpec
    product: ProductSpec
    storage: StorageCapacity
    transmission: TransmissionLoad
    product_load: ProductLoad
    air_change: AirChangeLoad
    door_opening: DoorLoad
    internal: FreezerInternalLoads
    summary: LoadSummary
    door_openings: float
    total_air_flow_cfm: float
    room_type: str = RoomType.FREEZER.value
    warnings: List[str] = field(default_factory=list)


class FreezerLoadCalculator(LoadCalculator):
    """
    Freezer cooling-load calculator.

    Example:
        >>> calc = FreezerLoadCalculator()
        >>> result = calc.calculate(
        ...     room={"length": "4", "width": "3", "height": "2.5"},
        ...     conditions={"external_temp": 35, "internal_temp": -18},
        ...     product={"product_type": "General Food Items"},
        ... )
        >>> round(result.transmission.walls, 2)
        7.57
    """

    AIR_CHANGE_RATE = FREEZER_CONSTANTS["air_change_rate"]
    AIR_ENTHALPY_DIFF = FREEZER_CONSTANTS["air_enthalpy_diff"]
    DOOR_INFILTRATION_FACTOR = FREEZER_CONSTANTS["door_infiltration_factor"]
    DOOR_HEATER_THRESHOLD = FREEZER_CONSTANTS["door_heater_threshold_m2"]
    DOOR_HEATER_KW = FREEZER_CONSTANTS["door_heater_kw"]
    PERSON_HEAT_KW = FREEZER_CONSTANTS["person_heat_kw"]
    U_FACTOR_FALLBACK = FREEZER_CONSTANTS["u_factor_fallback"]

    safety_factor = FREEZER_CONSTANTS["safety_factor"]

    @property
    def room_type(self) -> RoomType:
        return RoomType.FREEZER

    # =========================================================================
    # INPUT PREPARATION
    # =========================================================================

    def prepare_inputs(
        self,
        room: Mapping[str, Any],
        conditions: Mapping[str, Any],
        product: Mapping[str, Any],
    ):
        """Normalize the three stage records into typed input records."""
        r = normalize_fields(room, FREEZER_ROOM_DEFAULTS, stage="freezer.room")
        c = normalize_fields(conditions, FREEZER_CONDITIONS_DEFAULTS, stage="freezer.conditions")
        p = normalize_fields(product, FREEZER_PRODUCT_DEFAULTS, stage="freezer.product")

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
            room_humidity=c["room_humidity"],
        )

        insulation = normalize_choice(room, "insulation_type", "PUF", INSULATION_TYPES, stage="freezer.room")
        thickness = r["insulation_thickness"]
        u_factor = lookup_u_factor(insulation, thickness, self.U_FACTOR_FALLBACK)
        construction = ConstructionSpec(
            insulation_type=insulation,
            wall_thickness=thickness,
            ceiling_thickness=thickness,
            floor_thickness=thickness,
            wall_u_factor=u_factor,
            ceiling_u_factor=u_factor,
            floor_u_factor=u_factor,
            internal_floor_thickness=r["internal_floor_thickness"],
            number_of_floors=r["number_of_floors"],
        )

        product_type = normalize_choice(
            product, "product_type", FREEZER_CONSTANTS["default_product"],
            FREEZER_PRODUCTS, stage="freezer.product",
        )
        properties = get_product(FREEZER_PRODUCTS, product_type, FREEZER_CONSTANTS["default_product"])
        spec = ProductSpec.from_properties(
            product_type=product_type,
            mass=p["daily_load"],
            incoming_temp=p["incoming_temp"],
            outgoing_temp=p["outgoing_temp"],
            properties=properties,
            specific_heat_above=optional_number(product, "custom_cp_above"),
            specific_heat_below=optional_number(product, "custom_cp_below"),
            latent_heat=optional_number(product, "custom_latent_heat"),
        )

        usage = UsageLoads(
            number_of_people=p["number_of_people"],
            working_hours=p["working_hours"],
            lighting_kw=p["lighting_wattage"] / 1000,
            equipment_kw=p["equipment_load"] / 1000,
            fan_motor_kw=p["fan_motor_rating"],
            number_of_fans=p["number_of_fans"],
            fan_operating_hours=p["fan_operating_hours"],
            air_flow_per_fan=p["fan_air_flow_rate"],
            door_openings=r["door_openings"],
            peripheral_heaters=HeaterBank(1, p["peripheral_heaters_load"]),
            door_heaters=HeaterBank(1, p["door_heaters_load"]),
            tray_heaters=HeaterBank(1, p["tray_heaters_load"]),
            steam_humidifier_kw=c["steam_humidifier_load"],
        )

        storage_type = normalize_choice(
            product, "storage_type", FREEZER_CONSTANTS["default_storage_type"],
            STORAGE_FACTORS, stage="freezer.product",
        )
        return geometry, operating, construction, spec, usage, storage_type

    def validate(self, operating: OperatingConditions, spec: ProductSpec, usage: UsageLoads):
        require_hours("operating_hours", operating.operating_hours)
        require_positive("pull_down_time", operating.pull_down_hours)
        require_hours("working_hours", usage.working_hours, allow_zero=True)
        require_hours("fan_operating_hours", usage.fan_operating_hours, allow_zero=True)
        require_non_negative("daily_load", spec.mass)
        require_non_negative("door_openings", usage.door_openings)

    # =========================================================================
    # LOAD COMPONENTS
    # =========================================================================

    def transmission_load(
        self,
        geometry: RoomGeometry,
        construction: ConstructionSpec,
        operating: OperatingConditions,
    ) -> TransmissionLoad:
        """U·A·ΔT·hours/1000 per surface."""
        dt = operating.temperature_difference
        hours = operating.operating_hours
        return TransmissionLoad.from_parts(
            walls=construction.wall_u_factor * geometry.wall_area * dt * hours / 1000,
            ceiling=construction.ceiling_u_factor * geometry.ceiling_area * dt * hours / 1000,
            floor=construction.floor_u_factor * geometry.floor_area * dt * hours / 1000,
        )

    def product_load(self, spec: ProductSpec, pull_down_hours: float) -> ProductLoad:
        """Sensible-above, latent and sensible-below stages over the pull-down time."""
        divisor = pull_down_hours * 3.6
        fp = spec.freezing_point

        sensible_above = 0.0
        if spec.incoming_temp > fp:
            sensible_above = spec.mass * spec.specific_heat_above * (spec.incoming_temp - fp) / divisor

        latent = 0.0
        if spec.outgoing_temp < fp and spec.incoming_temp > fp:
            latent = spec.mass * spec.latent_heat / divisor

        sensible_below = 0.0
        if spec.outgoing_temp < fp:
            sensible_below = spec.mass * spec.specific_heat_below * abs(fp - spec.outgoing_temp) / divisor

        return ProductLoad.from_stages(sensible_above, latent, sensible_below)

    def air_change_load(self, geometry: RoomGeometry, operating: OperatingConditions) -> AirChangeLoad:
        air_flow = geometry.volume * 1000 * self.AIR_CHANGE_RATE / 3600
        load = air_flow * self.AIR_ENTHALPY_DIFF * operating.operating_hours / 1000
        return AirChangeLoad(air_flow_ls=air_flow, load=load)

    def door_load(
        self,
        geometry: RoomGeometry,
        usage: UsageLoads,
        operating: OperatingConditions,
    ) -> DoorLoad:
        door_area = geometry.door_area
        infiltration = (
            usage.door_openings * door_area * self.DOOR_INFILTRATION_FACTOR
            / (operating.operating_hours * 1000)
        )
        heater = self.DOOR_HEATER_KW if door_area > self.DOOR_HEATER_THRESHOLD else 0.0
        return DoorLoad(infiltration=infiltration, heater=heater, total=infiltration + heater)

    def internal_loads(self, usage: UsageLoads, operating: OperatingConditions) -> FreezerInternalLoads:
        duty = operating.operating_hours / 24

        occupancy = usage.number_of_people * self.PERSON_HEAT_KW * usage.working_hours / 24
        lighting = usage.lighting_kw * duty
        equipment = usage.equipment_kw * duty
        fan_motor = usage.fan_motor_kw * usage.number_of_fans * usage.fan_operating_hours / 24
        door_heaters = usage.door_heaters.total_kw * duty
        tray_heaters = usage.tray_heaters.total_kw * duty
        peripheral_heaters = usage.peripheral_heaters.total_kw * duty
        steam = usage.steam_humidifier_kw * duty

        return FreezerInternalLoads(
            occupancy=occupancy,
            lighting=lighting,
            equipment=equipment,
            fan_motor=fan_motor,
            door_heaters=door_heaters,
            tray_heaters=tray_heaters,
            peripheral_heaters=peripheral_heaters,
            steam_humidifiers=steam,
            total=(occupancy + lighting + equipment + fan_motor
                   + door_heaters + tray_heaters + peripheral_heaters + steam),
        )

    def storage_capacity(
        self,
        geometry: RoomGeometry,
        spec: ProductSpec,
        storage_type: str,
    ) -> StorageCapacity:
        """Volume × product density × storage efficiency × packing factor."""
        factor = STORAGE_FACTORS.get(storage_type, STORAGE_FACTORS[FREEZER_CONSTANTS["default_storage_type"]])
        maximum = geometry.volume * spec.density * spec.storage_efficiency * factor
        return StorageCapacity.build(
            maximum,
            spec.mass,
            storage_factor=factor,
            storage_type=storage_type,
            density=spec.density,
        )

    # =========================================================================
    # MAIN CALCULATION
    # =========================================================================

    def calculate(
        self,
        room: Optional[Mapping[str, Any]],
        conditions: Optional[Mapping[str, Any]],
        product: Optional[Mapping[str, Any]],
    ) -> FreezerLoadResult:
        room = self.require(FormStage.ROOM, room)
        conditions = self.require(FormStage.CONDITIONS, conditions)
        product = self.require(FormStage.PRODUCT, product)

        geometry, operating, construction, spec, usage, storage_type = self.prepare_inputs(
            room, conditions, product
        )
        self.validate(operating, spec, usage)

        transmission = self.transmission_load(geometry, construction, operating)
        product_load = self.product_load(spec, operating.pull_down_hours)
        air_change = self.air_change_load(geometry, operating)
        door = self.door_load(geometry, usage, operating)
        internal = self.internal_loads(usage, operating)

        # Door-opening load is reported but not part of the sensible sum
        sensible = (
            transmission.total
            + product_load.sensible
            + air_change.load
            + internal.occupancy
            + internal.lighting
            + internal.equipment
            + internal.fan_motor
            + internal.door_heaters
            + internal.tray_heaters
            + internal.peripheral_heaters
        )
        latent = product_load.latent + internal.steam_humidifiers
        summary = LoadSummary.build(sensible, latent, self.safety_factor)

        storage = self.storage_capacity(geometry, spec, storage_type)

        warnings = []
        if storage.utilization is not None and storage.utilization > 100:
            warnings.append(
                f"Daily load {spec.mass:,.0f} kg exceeds storage capacity "
                f"{storage.maximum:,.0f} kg ({storage.utilization:.0f}%)"
            )
        if spec.outgoing_temp >= spec.freezing_point:
            warnings.append(
                f"Outgoing temperature {spec.outgoing_temp} C is not below the "
                f"freezing point {spec.freezing_point} C; product is not frozen"
            )

        result = FreezerLoadResult(
            geometry=GeometryInfo.from_geometry(geometry),
            conditions=ConditionsInfo.from_conditions(operating),
            construction=construction,
            product=spec,
            storage=storage,
            transmission=transmission,
            product_load=product_load,
            air_change=air_change,
            door_opening=door,
            internal=internal,
            summary=summary,
            door_openings=usage.door_openings,
            total_air_flow_cfm=usage.air_flow_per_fan * usage.number_of_fans,
            warnings=warnings,
        )
        return ensure_finite(result)
