"""
Blast Freezer Load Module
=========================

Batch cooling load of a blast freezer.

Differs from the storage freezer method:
- U-factor = k / thickness, per surface (walls, ceiling, floor may differ)
- Transmission is instantaneous kW (no operating-hours multiplier)
- Product, air-change, internal and heater loads are worked in TR
  (kJ or W divided by 3517) and summed in TR before converting back to kW
- Air change accumulates over one batch rather than the operating day
- 5% safety factor

Also reports the engineering outputs used for evaporator selection: load
per batch, 24-hour sensible/latent heat, SHR and required air quantity.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from coolcalc.engineering.base import FormStage, LoadCalculator, RoomType
from coolcalc.engineering.errors import DegenerateInputError
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
    UsageLoads,
)
from coolcalc.engineering.refrig_calc.normalizer import (
    normalize_choice,
    normalize_fields,
)
from coolcalc.engineering.refrig_calc.thermal_data import (
    BLAST_FREEZER_CONDITIONS_DEFAULTS,
    BLAST_FREEZER_CONSTANTS,
    BLAST_FREEZER_PRODUCT_DEFAULTS,
    BLAST_FREEZER_PRODUCTS,
    BLAST_FREEZER_ROOM_DEFAULTS,
    INSULATION_CONDUCTIVITY,
    INSULATION_TYPES,
    W_PER_TR,
    get_product,
)
from coolcalc.engineering.refrig_calc.utils import (
    ensure_finite,
    kw_to_tr,
    require_hours,
    require_non_negative,
    require_positive,
    tr_to_kw,
)


def calculate_u_factor(insulation_type: str, thickness_mm: float) -> float:
    """
    U-factor (W/m²K) of an insulated panel from its conductivity.

    Args:
        insulation_type: PUF, EPS or Rockwool
        thickness_mm: Panel thickness in mm (> 0)

    Returns:
        k / thickness_m, or 0.153 for an unknown insulation type.

    Raises:
        DegenerateInputError: thickness is zero or negative.
    """
    require_positive("thickness", thickness_mm)
    k = INSULATION_CONDUCTIVITY.get(insulation_type)
    if k is None:
        return BLAST_FREEZER_CONSTANTS["u_factor_fallback"]
    return k / (thickness_mm / 1000)


@dataclass
class BlastTransmissionLoad:
    walls: float
    ceiling: float
    floor: float
    total: float
    walls_tr: float
    ceiling_tr: float
    floor_tr: float
    total_tr: float


@dataclass
class BlastProductLoad(ProductLoad):
    """Product stages in TR, with the stage heat in kJ."""
    sensible_above_kj: float = 0.0
    latent_kj: float = 0.0
    sensible_below_kj: float = 0.0


@dataclass
class BlastAirChangeLoad:
    load_tr: float
    load_kw: float
    air_change_rate: float
    enthalpy_diff: float
    total_kj: float


@dataclass
class BlastInternalLoads:
    """Internal loads in TR."""
    occupancy: float
    lighting: float
    equipment: float
    peripheral_heaters: float
    door_heaters: float
    tray_heaters: float
    drain_heaters: float
    total_heaters: float
    total: float


@dataclass
class EngineeringOutputs:
    load_kj_per_batch: float
    load_kw: float
    sensible_heat_kj_24hr: float
    latent_heat_kj_24hr: float
    shr: float
    air_qty_required_cfm: float


@dataclass
class EquipmentSummary:
    """Connected equipment, kW."""
    total_fan_load: float
    total_heater_load: float
    total_lighting_load: float
    total_people_load: float


@dataclass
class BlastFreezerLoadResult:
    """Complete blast-freezer load breakdown."""
    geometry: GeometryInfo
    conditions: ConditionsInfo
    construction: ConstructionSpec
    insulation_conductivity: Optional[float]
    product: ProductSpec
    storage: StorageCapacity
    transmission: BlastTransmissionLoad
    product_load: BlastProductLoad
    air_change: BlastAirChangeLoad
    internal: BlastInternalLoads
    summary: LoadSummary
    total_load_tr: float
    final_load_tr: float
    engineering: EngineeringOutputs
    equipment: EquipmentSummary
    door_clear_opening: float
    air_flow_per_fan: float
    room_type: str = RoomType.BLAST_FREEZER.value
    warnings: List[str] = field(default_factory=list)


class BlastFreezerLoadCalculator(LoadCalculator):
    """
    Blast-freezer cooling-load calculator.

    Example:
        >>> calc = BlastFreezerLoadCalculator()
        >>> result = calc.calculate({"insulation_type": "PUF", "wall_thickness": 150}, {}, {})
        >>> round(result.construction.wall_u_factor, 4)
        0.1533
    """

    AIR_CHANGE_RATE = BLAST_FREEZER_CONSTANTS["air_change_rate"]
    AIR_ENTHALPY_DIFF = BLAST_FREEZER_CONSTANTS["air_enthalpy_diff"]
    PERSON_HEAT_W = BLAST_FREEZER_CONSTANTS["person_heat_w"]

    safety_factor = BLAST_FREEZER_CONSTANTS["safety_factor"]

    @property
    def room_type(self) -> RoomType:
        return RoomType.BLAST_FREEZER

    def prepare_inputs(
        self,
        room: Mapping[str, Any],
        conditions: Mapping[str, Any],
        product: Mapping[str, Any],
    ):
        room = dict(room)
        if room.get("breadth") in (None, "") and room.get("width") not in (None, ""):
            room["breadth"] = room["width"]

        r = normalize_fields(room, BLAST_FREEZER_ROOM_DEFAULTS, stage="blastfreezer.room")
        c = normalize_fields(conditions, BLAST_FREEZER_CONDITIONS_DEFAULTS, stage="blastfreezer.conditions")
        p = normalize_fields(product, BLAST_FREEZER_PRODUCT_DEFAULTS, stage="blastfreezer.product")

        geometry = RoomGeometry(
            length=r["length"],
            width=r["breadth"],
            height=r["height"],
            door_width=r["door_width"],
            door_height=r["door_height"],
        )
        operating = OperatingConditions(
            external_temp=c["ambient_temp"],
            internal_temp=c["room_temp"],
            operating_hours=c["operating_hours"],
            batch_hours=c["batch_hours"],
        )

        insulation = normalize_choice(room, "insulation_type", "PUF", INSULATION_TYPES, stage="blastfreezer.room")
        construction = ConstructionSpec(
            insulation_type=insulation,
            wall_thickness=r["wall_thickness"],
            ceiling_thickness=r["ceiling_thickness"],
            floor_thickness=r["floor_thickness"],
            wall_u_factor=self._u_factor(insulation, "wall_thickness", r["wall_thickness"]),
            ceiling_u_factor=self._u_factor(insulation, "ceiling_thickness", r["ceiling_thickness"]),
            floor_u_factor=self._u_factor(insulation, "floor_thickness", r["floor_thickness"]),
            internal_floor_thickness=r["internal_floor_thickness"],
        )

        product_type = normalize_choice(
            product, "product_type", BLAST_FREEZER_CONSTANTS["default_product"],
            BLAST_FREEZER_PRODUCTS, stage="blastfreezer.product",
        )
        properties = get_product(
            BLAST_FREEZER_PRODUCTS, product_type, BLAST_FREEZER_CONSTANTS["fallback_product"]
        )
        spec = ProductSpec.from_properties(
            product_type=product_type,
            mass=p["capacity_required"],
            incoming_temp=p["incoming_temp"],
            outgoing_temp=p["outgoing_temp"],
            properties=properties,
        )

        usage = UsageLoads(
            number_of_people=p["number_of_people"],
            working_hours=p["working_hours"],
            lighting_kw=p["light_load"],
            fan_motor_kw=p["fan_motor_rating"],
            air_flow_per_fan=p["air_flow_per_fan"],
            peripheral_heaters=HeaterBank(p["peripheral_heaters_qty"], p["peripheral_heaters_capacity"]),
            door_heaters=HeaterBank(p["door_heaters_qty"], p["door_heaters_capacity"]),
            tray_heaters=HeaterBank(p["tray_heaters_qty"], p["tray_heaters_capacity"]),
            drain_heaters=HeaterBank(p["drain_heaters_qty"], p["drain_heaters_capacity"]),
        )
        return geometry, operating, construction, spec, usage, r, p

    @staticmethod
    def _u_factor(insulation: str, field_name: str, thickness: float) -> float:
        require_positive(field_name, thickness)
        return calculate_u_factor(insulation, thickness)

    def validate(self, operating: OperatingConditions, spec: ProductSpec, usage: UsageLoads):
        require_hours("operating_hours", operating.operating_hours)
        require_positive("batch_hours", operating.batch_hours)
        require_hours("working_hours", usage.working_hours, allow_zero=True)
        require_non_negative("capacity_required", spec.mass)
        if operating.temperature_difference == 0:
            raise DegenerateInputError(
                "room_temp", operating.internal_temp,
                "room and ambient temperature are equal; air quantity is undefined",
            )

    # =========================================================================
    # LOAD COMPONENTS
    # =========================================================================

    def transmission_load(
        self,
        geometry: RoomGeometry,
        construction: ConstructionSpec,
        operating: OperatingConditions,
    ) -> BlastTransmissionLoad:
        dt = operating.temperature_difference
        walls = construction.wall_u_factor * geometry.wall_area * dt / 1000
        ceiling = construction.ceiling_u_factor * geometry.ceiling_area * dt / 1000
        floor = construction.floor_u_factor * geometry.floor_area * dt / 1000
        total = walls + ceiling + floor
        return BlastTransmissionLoad(
            walls=walls,
            ceiling=ceiling,
            floor=floor,
            total=total,
            walls_tr=kw_to_tr(walls),
            ceiling_tr=kw_to_tr(ceiling),
            floor_tr=kw_to_tr(floor),
            total_tr=kw_to_tr(total),
        )

    def product_load(self, spec: ProductSpec) -> BlastProductLoad:
        """Three freezing stages for one batch, in TR."""
        m = spec.mass
        fp = spec.freezing_point

        sensible_above_kj = 0.0
        if spec.incoming_temp > fp:
            sensible_above_kj = m * spec.specific_heat_above * (spec.incoming_temp - fp)

        latent_kj = 0.0
        if spec.outgoing_temp < fp and spec.incoming_temp > fp:
            latent_kj = m * spec.latent_heat

        sensible_below_kj = 0.0
        if spec.outgoing_temp < fp:
            sensible_below_kj = m * spec.specific_heat_below * abs(fp - spec.outgoing_temp)

        above = sensible_above_kj / W_PER_TR
        latent = latent_kj / W_PER_TR
        below = sensible_below_kj / W_PER_TR
        return BlastProductLoad(
            sensible_above=above,
            latent=latent,
            sensible_below=below,
            total=above + latent + below,
            sensible_above_kj=sensible_above_kj,
            latent_kj=latent_kj,
            sensible_below_kj=sensible_below_kj,
        )

    def air_change_load(self, geometry: RoomGeometry, operating: OperatingConditions) -> BlastAirChangeLoad:
        heat_kj = self.AIR_CHANGE_RATE * geometry.volume * self.AIR_ENTHALPY_DIFF * operating.batch_hours
        load_tr = heat_kj / W_PER_TR
        return BlastAirChangeLoad(
            load_tr=load_tr,
            load_kw=tr_to_kw(load_tr),
            air_change_rate=self.AIR_CHANGE_RATE,
            enthalpy_diff=self.AIR_ENTHALPY_DIFF,
            total_kj=heat_kj,
        )

    def internal_loads(self, usage: UsageLoads, operating: OperatingConditions) -> BlastInternalLoads:
        hours = operating.operating_hours
        day = W_PER_TR * 24

        def running(kw: float) -> float:
            return kw * 1000 * hours / day

        occupancy = usage.number_of_people * self.PERSON_HEAT_W * usage.working_hours / day
        lighting = running(usage.lighting_kw)
        equipment = running(usage.fan_motor_kw)
        peripheral = running(usage.peripheral_heaters.total_kw)
        door = running(usage.door_heaters.total_kw)
        tray = running(usage.tray_heaters.total_kw)
        drain = running(usage.drain_heaters.total_kw)
        heaters = peripheral + door + tray + drain

        return BlastInternalLoads(
            occupancy=occupancy,
            lighting=lighting,
            equipment=equipment,
            peripheral_heaters=peripheral,
            door_heaters=door,
            tray_heaters=tray,
            drain_heaters=drain,
            total_heaters=heaters,
            total=occupancy + lighting + equipment + heaters,
        )

    # =========================================================================
    # MAIN CALCULATION
    # =========================================================================

    def calculate(
        self,
        room: Optional[Mapping[str, Any]],
        conditions: Optional[Mapping[str, Any]],
        product: Optional[Mapping[str, Any]],
    ) -> BlastFreezerLoadResult:
        room = self.require(FormStage.ROOM, room)
        conditions = self.require(FormStage.CONDITIONS, conditions)
        product = self.require(FormStage.PRODUCT, product)

        geometry, operating, construction, spec, usage, r, p = self.prepare_inputs(room, conditions, product)
        self.validate(operating, spec, usage)

        transmission = self.transmission_load(geometry, construction, operating)
        product_load = self.product_load(spec)
        air_change = self.air_change_load(geometry, operating)
        internal = self.internal_loads(usage, operating)

        total_tr = transmission.total_tr + product_load.total + air_change.load_tr + internal.total
        total_kw = tr_to_kw(total_tr)

        # Air change is part of the total but not split into the SHR
        sensible_tr = transmission.total_tr + product_load.sensible + internal.total
        latent_tr = product_load.latent
        summary = LoadSummary.build(
            tr_to_kw(sensible_tr),
            tr_to_kw(latent_tr),
            self.safety_factor,
            total_before_safety_kw=total_kw,
        )

        batch = operating.batch_hours
        engineering = EngineeringOutputs(
            load_kj_per_batch=total_tr * W_PER_TR * batch,
            load_kw=total_kw,
            sensible_heat_kj_24hr=product_load.sensible * W_PER_TR * (24 / batch),
            latent_heat_kj_24hr=product_load.latent * W_PER_TR * (24 / batch),
            shr=summary.shr,
            air_qty_required_cfm=self.air_quantity_cfm(total_tr, operating.temperature_difference),
        )

        equipment = EquipmentSummary(
            total_fan_load=usage.fan_motor_kw,
            total_heater_load=usage.total_heater_kw,
            total_lighting_load=usage.lighting_kw,
            total_people_load=usage.number_of_people * self.PERSON_HEAT_W * usage.working_hours / (1000 * 24),
        )

        maximum = geometry.volume * p["storage_capacity"] * spec.storage_efficiency
        storage = StorageCapacity.build(maximum, spec.mass, density=p["storage_capacity"])

        warnings = []
        if spec.outgoing_temp >= spec.incoming_temp:
            warnings.append("Outgoing product temperature is not below incoming temperature")
        if spec.outgoing_temp < operating.internal_temp:
            warnings.append(
                f"Outgoing temperature {spec.outgoing_temp} C is below room temperature "
                f"{operating.internal_temp} C"
            )

        result = BlastFreezerLoadResult(
            geometry=GeometryInfo.from_geometry(geometry),
            conditions=ConditionsInfo.from_conditions(operating),
            construction=construction,
            insulation_conductivity=INSULATION_CONDUCTIVITY.get(construction.insulation_type),
            product=spec,
            storage=storage,
            transmission=transmission,
            product_load=product_load,
            air_change=air_change,
            internal=internal,
            summary=summary,
            total_load_tr=total_tr,
            final_load_tr=summary.final_load_tr,
            engineering=engineering,
            equipment=equipment,
            door_clear_opening=r["door_clear_opening"],
            air_flow_per_fan=usage.air_flow_per_fan,
            warnings=warnings,
        )
        return ensure_finite(result)

    @staticmethod
    def air_quantity_cfm(total_tr: float, temperature_difference: float) -> float:
        """Air quantity to carry the load at the room/ambient temperature difference."""
        density = BLAST_FREEZER_CONSTANTS["air_density"]
        cp = BLAST_FREEZER_CONSTANTS["air_specific_heat"]
        return total_tr * W_PER_TR * 1000 / (density * cp * abs(temperature_difference))

