"""
Input and Result Records
========================

Immutable records shared by the freezer, cold-room and blast-freezer
calculators. Every record is built fresh for one calculation.

Units: m, m², m³, °C, hours, kg, kW unless noted.
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from coolcalc.engineering.errors import DegenerateInputError
from coolcalc.engineering.refrig_calc.thermal_data import (
    KJ_PER_DAY_PER_KW,
    ProductProperties,
)
from coolcalc.engineering.refrig_calc.utils import kw_to_btu_hr, kw_to_tr


# =============================================================================
# INPUT RECORDS
# =============================================================================

@dataclass(frozen=True)
class RoomGeometry:
    """Inside dimensions of the room and its door."""
    length: float
    width: float        # breadth for blast freezers
    height: float
    door_width: float = 0.0
    door_height: float = 0.0

    def __post_init__(self):
        for name in ("length", "width", "height", "door_width", "door_height"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise DegenerateInputError(name, value, "must be a finite length")
            if value < 0:
                raise DegenerateInputError(name, value, "lengths must not be negative")

    @property
    def wall_area(self) -> float:
        """Total wall area, 2·(L+W)·H."""
        return 2 * (self.length + self.width) * self.height

    @property
    def ceiling_area(self) -> float:
        return self.length * self.width

    @property
    def floor_area(self) -> float:
        return self.length * self.width

    @property
    def door_area(self) -> float:
        return self.door_width * self.door_height

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height


@dataclass(frozen=True)
class SurfaceAreas:
    wall: float
    ceiling: float
    floor: float
    door: float

    @classmethod
    def from_geometry(cls, geometry: RoomGeometry) -> "SurfaceAreas":
        return cls(
            wall=geometry.wall_area,
            ceiling=geometry.ceiling_area,
            floor=geometry.floor_area,
            door=geometry.door_area,
        )


@dataclass(frozen=True)
class OperatingConditions:
    external_temp: float    # ambient for blast freezers
    internal_temp: float    # room temperature
    operating_hours: float
    pull_down_hours: float = 0.0
    batch_hours: float = 0.0
    room_humidity: float = 0.0

    @property
    def temperature_difference(self) -> float:
        return self.external_temp - self.internal_temp


@dataclass(frozen=True)
class ConstructionSpec:
    insulation_type: str
    wall_thickness: float       # mm
    ceiling_thickness: float    # mm
    floor_thickness: float      # mm
    wall_u_factor: float        # W/m²K
    ceiling_u_factor: float
    floor_u_factor: float
    internal_floor_thickness: float = 0.0
    number_of_floors: float = 1.0


@dataclass(frozen=True)
class ProductSpec:
    product_type: str
    mass: float                 # kg per day or per batch
    incoming_temp: float
    outgoing_temp: float
    specific_heat_above: float
    specific_heat_below: float
    latent_heat: float
    freezing_point: float
    density: float
    storage_efficiency: float
    respiration_rate: float = 0.0

    @classmethod
    def from_properties(
        cls,
        product_type: str,
        mass: float,
        incoming_temp: float,
        outgoing_temp: float,
        properties: ProductProperties,
        specific_heat_above: Optional[float] = None,
        specific_heat_below: Optional[float] = None,
        latent_heat: Optional[float] = None,
        respiration_rate: Optional[float] = None,
    ) -> "ProductSpec":
        """Build from a table entry, applying any user overrides."""
        return cls(
            product_type=product_type,
            mass=mass,
            incoming_temp=incoming_temp,
            outgoing_temp=outgoing_temp,
            specific_heat_above=(
                properties.specific_heat_above if specific_heat_above is None else specific_heat_above
            ),
            specific_heat_below=(
                properties.specific_heat_below if specific_heat_below is None else specific_heat_below
            ),
            latent_heat=properties.latent_heat if latent_heat is None else latent_heat,
            freezing_point=properties.freezing_point,
            density=properties.density,
            storage_efficiency=properties.storage_efficiency,
            respiration_rate=(
                properties.respiration_rate if respiration_rate is None else respiration_rate
            ),
        )


@dataclass(frozen=True)
class HeaterBank:
    quantity: float
    capacity_kw: float

    @property
    def total_kw(self) -> float:
        return self.quantity * self.capacity_kw


@dataclass(frozen=True)
class UsageLoads:
    number_of_people: float = 0.0
    working_hours: float = 0.0
    lighting_kw: float = 0.0
    equipment_kw: float = 0.0
    fan_motor_kw: float = 0.0
    number_of_fans: float = 1.0
    fan_operating_hours: float = 0.0
    air_flow_per_fan: float = 0.0       # CFM
    door_openings: float = 0.0
    peripheral_heaters: HeaterBank = HeaterBank(0, 0)
    door_heaters: HeaterBank = HeaterBank(0, 0)
    tray_heaters: HeaterBank = HeaterBank(0, 0)
    drain_heaters: HeaterBank = HeaterBank(0, 0)
    steam_humidifier_kw: float = 0.0

    @property
    def total_heater_kw(self) -> float:
        return (
            self.peripheral_heaters.total_kw
            + self.door_heaters.total_kw
            + self.tray_heaters.total_kw
            + self.drain_heaters.total_kw
        )


# =============================================================================
# RESULT RECORDS
# =============================================================================

@dataclass
class TransmissionLoad:
    walls: float
    ceiling: float
    floor: float
    total: float = 0.0

    @classmethod
    def from_parts(cls, walls: float, ceiling: float, floor: float) -> "TransmissionLoad":
        return cls(walls=walls, ceiling=ceiling, floor=floor, total=walls + ceiling + floor)


@dataclass
class ProductLoad:
    sensible_above: float
    latent: float
    sensible_below: float
    total: float = 0.0

    @classmethod
    def from_stages(cls, sensible_above: float, latent: float, sensible_below: float) -> "ProductLoad":
        return cls(
            sensible_above=sensible_above,
            latent=latent,
            sensible_below=sensible_below,
            total=sensible_above + latent + sensible_below,
        )

    @property
    def sensible(self) -> float:
        return self.sensible_above + self.sensible_below


@dataclass
class StorageCapacity:
    """Storage capacity of the room. ``utilization`` is None for a zero-volume room."""
    maximum: float                          # kg
    current_load: float                     # kg
    utilization: Optional[float]            # %
    storage_factor: Optional[float] = None
    storage_type: Optional[str] = None
    density: Optional[float] = None         # kg/m³
    available_capacity: Optional[float] = None

    @classmethod
    def build(cls, maximum: float, current_load: float, **extra) -> "StorageCapacity":
        utilization = current_load / maximum * 100 if maximum > 0 else None
        return cls(maximum=maximum, current_load=current_load, utilization=utilization, **extra)


@dataclass
class LoadSummary:
    total_sensible_kw: float
    total_latent_kw: float
    shr: float
    total_before_safety_kw: float
    safety_factor: float
    safety_margin_kw: float
    final_load_kw: float
    final_load_tr: float
    final_load_btu_hr: float
    daily_energy_kwh: float
    daily_energy_kj: float

    @classmethod
    def build(
        cls,
        sensible_kw: float,
        latent_kw: float,
        safety_factor: float,
        total_before_safety_kw: Optional[float] = None,
    ) -> "LoadSummary":
        """
        Aggregate sensible and latent loads and apply the safety factor.

        ``total_before_safety_kw`` overrides sensible + latent where a
        category totals components that are not split into the SHR.
        """
        total = sensible_kw + latent_kw if total_before_safety_kw is None else total_before_safety_kw
        shr_base = sensible_kw + latent_kw
        shr = sensible_kw / shr_base if shr_base > 0 else 1.0
        final = total * safety_factor
        return cls(
            total_sensible_kw=sensible_kw,
            total_latent_kw=latent_kw,
            shr=shr,
            total_before_safety_kw=total,
            safety_factor=safety_factor,
            safety_margin_kw=final - total,
            final_load_kw=final,
            final_load_tr=kw_to_tr(final),
            final_load_btu_hr=kw_to_btu_hr(final),
            daily_energy_kwh=final * 24,
            daily_energy_kj=final * KJ_PER_DAY_PER_KW,
        )


@dataclass
class ConditionsInfo:
    external_temp: float
    internal_temp: float
    temperature_difference: float
    operating_hours: float
    pull_down_hours: float = 0.0
    batch_hours: float = 0.0
    room_humidity: float = 0.0

    @classmethod
    def from_conditions(cls, conditions: OperatingConditions) -> "ConditionsInfo":
        return cls(
            external_temp=conditions.external_temp,
            internal_temp=conditions.internal_temp,
            temperature_difference=conditions.temperature_difference,
            operating_hours=conditions.operating_hours,
            pull_down_hours=conditions.pull_down_hours,
            batch_hours=conditions.batch_hours,
            room_humidity=conditions.room_humidity,
        )


@dataclass
class GeometryInfo:
    length: float
    width: float
    height: float
    door_width: float
    door_height: float
    volume: float
    areas: SurfaceAreas = field(default_factory=lambda: SurfaceAreas(0, 0, 0, 0))

    @classmethod
    def from_geometry(cls, geometry: RoomGeometry) -> "GeometryInfo":
        return cls(
            length=geometry.length,
            width=geometry.width,
            height=geometry.height,
            door_width=geometry.door_width,
            door_height=geometry.door_height,
            volume=geometry.volume,
            areas=SurfaceAreas.from_geometry(geometry),
        )
