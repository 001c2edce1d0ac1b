"""
Cooling-load calculation library.

Modules:
    thermal_data   - U-factors, conductivities, product tables, defaults
    normalizer     - Text/number input normalization with defaults
    models         - Input and result records
    freezer        - Storage freezer load
    cold_room      - Chilled cold room load
    blast_freezer  - Batch blast freezer load
"""

from coolcalc.engineering.refrig_calc.blast_freezer import (
    BlastFreezerLoadCalculator,
    BlastFreezerLoadResult,
    calculate_u_factor,
)
from coolcalc.engineering.refrig_calc.cold_room import (
    ColdRoomLoadCalculator,
    ColdRoomLoadResult,
    approximate_u_factor,
)
from coolcalc.engineering.refrig_calc.freezer import (
    FreezerLoadCalculator,
    FreezerLoadResult,
)
from coolcalc.engineering.refrig_calc.models import (
    ConstructionSpec,
    HeaterBank,
    LoadSummary,
    OperatingConditions,
    ProductLoad,
    ProductSpec,
    RoomGeometry,
    StorageCapacity,
    SurfaceAreas,
    TransmissionLoad,
    UsageLoads,
)
from coolcalc.engineering.refrig_calc.normalizer import (
    normalize_choice,
    normalize_fields,
    parse_number,
)

__all__ = [
    "BlastFreezerLoadCalculator",
    "BlastFreezerLoadResult",
    "calculate_u_factor",
    "ColdRoomLoadCalculator",
    "ColdRoomLoadResult",
    "approximate_u_factor",
    "FreezerLoadCalculator",
    "FreezerLoadResult",
    "ConstructionSpec",
    "HeaterBank",
    "LoadSummary",
    "OperatingConditions",
    "ProductLoad",
    "ProductSpec",
    "RoomGeometry",
    "StorageCapacity",
    "SurfaceAreas",
    "TransmissionLoad",
    "UsageLoads",
    "normalize_choice",
    "normalize_fields",
    "parse_number",
]
