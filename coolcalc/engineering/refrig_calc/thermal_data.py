"""
Thermal Reference Data
======================

Static lookup tables for cooling-load calculations:
- U-factors by insulation type and panel thickness
- Insulation thermal conductivities
- Product thermal properties per room category
- Storage packing factors
- Per-category constants and input defaults

Units: W/m²K, W/mK, kJ/kg·K, kJ/kg, °C, kg/m³, kW.
"""

from dataclasses import dataclass
from typing import Dict, Optional


# =============================================================================
# PHYSICAL CONVERSIONS
# =============================================================================

KW_PER_TR = 3.517          # 1 ton of refrigeration in kW
BTU_HR_PER_KW = 3412       # kW -> BTU/hr
KJ_PER_DAY_PER_KW = 86.4   # kW -> kJ/day (24 h * 3.6)
W_PER_TR = 3517            # W (or kJ/s * 1000) per TR
M3_TO_FT3 = 35.31


# =============================================================================
# INSULATION
# =============================================================================

INSULATION_TYPES = ("PUF", "EPS", "Rockwool")

# Panel U-factors (W/m²K) by insulation type and thickness (mm)
U_FACTORS: Dict[str, Dict[int, float]] = {
    "PUF": {75: 0.32, 100: 0.25, 125: 0.20, 150: 0.17, 200: 0.13},
    "EPS": {75: 0.45, 100: 0.35, 125: 0.28, 150: 0.23, 200: 0.18},
    "Rockwool": {75: 0.50, 100: 0.38, 125: 0.30, 150: 0.25, 200: 0.20},
}

# Thermal conductivity k (W/mK)
INSULATION_CONDUCTIVITY: Dict[str, float] = {
    "PUF": 0.023,
    "EPS": 0.036,
    "Rockwool": 0.040,
}


def lookup_u_factor(insulation_type: str, thickness_mm: float, fallback: float) -> float:
    """Table U-factor for a standard panel, or ``fallback`` when not tabulated."""
    by_thickness = U_FACTORS.get(insulation_type)
    if not by_thickness:
        return fallback
    try:
        key = int(thickness_mm)
    except (TypeError, ValueError, OverflowError):
        return fallback
    if key != thickness_mm:
        return fallback
    return by_thickness.get(key, fallback)


# =============================================================================
# PRODUCTS
# =============================================================================

@dataclass(frozen=True)
class ProductProperties:
    """Thermal properties of a stored product."""
    specific_heat_above: float   # kJ/kg·K above freezing
    specific_heat_below: float   # kJ/kg·K below freezing
    latent_heat: float           # kJ/kg
    freezing_point: float        # °C
    density: float               # kg/m³
    storage_efficiency: float    # fraction of volume usable
    respiration_rate: float = 0.0  # W/tonne


def _p(cp_above, cp_below, latent, fp, density, efficiency, respiration=0.0):
    return ProductProperties(cp_above, cp_below, latent, fp, density, efficiency, respiration)


FREEZER_PRODUCTS: Dict[str, ProductProperties] = {
    "Beef": _p(3.2, 1.7, 233, -1.8, 1050, 0.65),
    "Chicken": _p(3.3, 1.8, 247, -2.8, 950, 0.60),
    "Pork": _p(2.9, 1.6, 214, -2.2, 1000, 0.65),
    "Fish": _p(3.6, 1.9, 235, -2.0, 800, 0.55),
    "Milk": _p(3.9, 2.1, 270, -0.54, 1030, 0.80),
    "Cheese": _p(2.8, 1.4, 120, -13.0, 1100, 0.70),
    "Ice Cream": _p(3.5, 2.0, 250, -5.6, 550, 0.60),
    "Apples": _p(3.8, 1.9, 281, -1.1, 700, 0.50),
    "Potatoes": _p(3.4, 1.8, 267, -0.6, 650, 0.55),
    "Carrots": _p(3.6, 1.9, 290, -1.4, 600, 0.50),
    "Tomatoes": _p(4.0, 2.0, 316, -0.5, 550, 0.45),
    "General Food Items": _p(3.0, 1.6, 200, -2.0, 800, 0.65),
    "Vegetables (Mixed)": _p(3.7, 1.9, 285, -1.0, 600, 0.55),
    "Fruits (Mixed)": _p(3.6, 1.9, 280, -1.2, 650, 0.50),
    "Beverages": _p(4.0, 2.0, 330, -2.0, 1000, 0.80),
    "Dairy Products": _p(3.4, 1.8, 250, -1.5, 1020, 0.75),
    "Pharmaceutical": _p(3.2, 1.7, 200, -2.0, 800, 0.70),
}

# Cold-room products stay above freezing: no latent stage
COLD_ROOM_PRODUCTS: Dict[str, ProductProperties] = {
    "BANANA": _p(4.1, 2.1, 0, -0.8, 600, 0.65, 50),
    "Vegetables (Mixed)": _p(3.7, 1.9, 0, -1.0, 600, 0.55, 24),
    "Fruits (Mixed)": _p(3.6, 1.9, 0, -1.2, 650, 0.50, 28),
    "Beverages": _p(4.0, 2.0, 0, -2.0, 1000, 0.80, 0),
    "Dairy Products": _p(3.4, 1.8, 0, -1.5, 1020, 0.75, 0),
    "Pharmaceutical": _p(3.2, 1.7, 0, -2.0, 800, 0.70, 0),
    "General Food Items": _p(3.0, 1.6, 0, -2.0, 800, 0.65, 0),
}

BLAST_FREEZER_PRODUCTS: Dict[str, ProductProperties] = {
    "Chicken": _p(3.49, 2.14, 233, -1.7, 950, 0.60),
    "Beef": _p(3.2, 1.7, 233, -1.8, 1050, 0.65),
    "Pork": _p(2.9, 1.6, 214, -2.2, 1000, 0.65),
    "Fish": _p(3.6, 1.9, 235, -2.0, 800, 0.55),
    "Ice Cream": _p(3.5, 2.0, 250, -5.6, 550, 0.60),
    "General Food Items": _p(3.0, 1.6, 200, -2.0, 800, 0.65),
}

# Fraction of usable volume by packing method
STORAGE_FACTORS: Dict[str, float] = {
    "Loose": 0.45,
    "Boxed": 0.65,
    "Palletized": 0.75,
    "Bulk": 0.50,
    "Racked": 0.70,
}


def get_product(
    table: Dict[str, ProductProperties],
    name: Optional[str],
    fallback: str,
) -> ProductProperties:
    """Look up a product, falling back to ``fallback`` for unknown names."""
    if name and name in table:
        return table[name]
    return table[fallback]


# =============================================================================
# FREEZER
# =============================================================================

FREEZER_CONSTANTS = {
    "u_factor_fallback": 0.17,
    "air_change_rate": 0.5,          # changes per hour
    "air_enthalpy_diff": 0.1203,     # kJ/L
    "door_infiltration_factor": 1800,
    "door_heater_threshold_m2": 1.8,
    "door_heater_kw": 0.24,
    "person_heat_kw": 0.407,
    "safety_factor": 1.10,
    "default_product": "General Food Items",
    "default_storage_type": "Boxed",
}

FREEZER_ROOM_DEFAULTS = {
    "length": 4.0,
    "width": 3.0,
    "height": 2.5,
    "door_width": 1.0,
    "door_height": 2.0,
    "door_openings": 15.0,
    "insulation_thickness": 150.0,
    "internal_floor_thickness": 150.0,
    "number_of_floors": 1.0,
}

FREEZER_CONDITIONS_DEFAULTS = {
    "external_temp": 35.0,
    "internal_temp": -18.0,
    "operating_hours": 24.0,
    "pull_down_time": 10.0,
    "room_humidity": 85.0,
    "steam_humidifier_load": 0.0,
}

FREEZER_PRODUCT_DEFAULTS = {
    "daily_load": 1000.0,
    "incoming_temp": 25.0,
    "outgoing_temp": -18.0,
    "number_of_people": 2.0,
    "working_hours": 4.0,
    "lighting_wattage": 150.0,
    "equipment_load": 300.0,
    "fan_motor_rating": 0.37,
    "number_of_fans": 6.0,
    "fan_operating_hours": 24.0,
    "fan_air_flow_rate": 2000.0,
    "door_heaters_load": 0.24,
    "tray_heaters_load": 2.0,
    "peripheral_heaters_load": 0.0,
}


# =============================================================================
# COLD ROOM
# =============================================================================

COLD_ROOM_CONSTANTS = {
    "u_factor": 0.295,               # all surfaces
    "approx_u_factor_fallback": 0.25,
    "air_flow_rate_ls": 3.4,
    "air_enthalpy_diff": 0.10,
    "equipment_kw": 0.25,
    "occupancy_kw_per_person": 1.0,
    "lighting_kw": 0.07,
    "heater_capacity_kw": 0.145,     # door and peripheral heaters
    "recommended_air_changes": 0.3,
    "safety_factor": 1.10,
    "default_product": "BANANA",
    "default_storage_type": "Palletized",
}

COLD_ROOM_ROOM_DEFAULTS = {
    "length": 3.05,
    "width": 4.5,
    "height": 3.0,
    "door_width": 1.2,
    "door_height": 2.1,
    "door_openings": 30.0,
    "door_clear_opening": 2000.0,
    "storage_density": 8.0,
    "air_flow_per_fan": 4163.0,
    "insulation_thickness": 100.0,
    "internal_floor_thickness": 100.0,
    "number_of_heaters": 1.0,
    "number_of_doors": 1.0,
}

COLD_ROOM_CONDITIONS_DEFAULTS = {
    "external_temp": 45.0,
    "internal_temp": 2.0,
    "operating_hours": 20.0,
    "pull_down_time": 24.0,
}

COLD_ROOM_PRODUCT_DEFAULTS = {
    "daily_load": 4000.0,
    "incoming_temp": 30.0,
    "outgoing_temp": 2.0,
    "specific_heat_above": 4.1,
    "respiration_rate": 50.0,
    "number_of_people": 1.0,
    "working_hours": 20.0,
    "steam_humidifier_load": 0.0,
}


# =============================================================================
# BLAST FREEZER
# =============================================================================

BLAST_FREEZER_CONSTANTS = {
    "u_factor_fallback": 0.153,
    "air_change_rate": 4.2,
    "air_enthalpy_diff": 0.14,
    "person_heat_w": 1800,
    "air_density": 1.2,              # kg/m³
    "air_specific_heat": 1005,       # J/kg·K
    "safety_factor": 1.05,
    "default_product": "Chicken",
    "fallback_product": "General Food Items",
}

BLAST_FREEZER_ROOM_DEFAULTS = {
    "length": 5.0,
    "breadth": 5.0,
    "height": 3.5,
    "door_width": 2.1,
    "door_height": 2.1,
    "door_clear_opening": 2100.0,
    "wall_thickness": 150.0,
    "ceiling_thickness": 150.0,
    "floor_thickness": 150.0,
    "internal_floor_thickness": 150.0,
}

BLAST_FREEZER_CONDITIONS_DEFAULTS = {
    "ambient_temp": 43.0,
    "room_temp": -35.0,
    "batch_hours": 8.0,
    "operating_hours": 24.0,
}

BLAST_FREEZER_PRODUCT_DEFAULTS = {
    "capacity_required": 2000.0,
    "incoming_temp": -5.0,
    "outgoing_temp": -30.0,
    "storage_capacity": 4.0,
    "number_of_people": 2.0,
    "working_hours": 4.0,
    "light_load": 0.1,
    "fan_motor_rating": 0.37,
    "peripheral_heaters_qty": 1.0,
    "peripheral_heaters_capacity": 1.5,
    "door_heaters_qty": 1.0,
    "door_heaters_capacity": 0.27,
    "tray_heaters_qty": 1.0,
    "tray_heaters_capacity": 2.2,
    "drain_heaters_qty": 1.0,
    "drain_heaters_capacity": 0.04,
    "air_flow_per_fan": 5847.0,
}
