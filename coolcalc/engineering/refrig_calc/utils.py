"""
Shared helpers for the load calculators: unit conversions and
degenerate-input guards.
"""

import math
from dataclasses import asdict, is_dataclass
from typing import Any

from coolcalc.engineering.errors import DegenerateInputError
from coolcalc.engineering.refrig_calc.thermal_data import BTU_HR_PER_KW, KW_PER_TR


def kw_to_tr(kw: float) -> float:
    return kw / KW_PER_TR


def tr_to_kw(tr: float) -> float:
    return tr * KW_PER_TR


def kw_to_btu_hr(kw: float) -> float:
    return kw * BTU_HR_PER_KW


def require_positive(field: str, value: float) -> float:
    """Reject zero or negative divisors."""
    if value <= 0:
        raise DegenerateInputError(field, value, "must be greater than zero")
    return value


def require_non_negative(field: str, value: float) -> float:
    if value < 0:
        raise DegenerateInputError(field, value, "must not be negative")
    return value


def require_hours(field: str, value: float, allow_zero: bool = False) -> float:
    """
    Check an hours-per-day value.

    Operating hours must lie in (0, 24]; working and fan hours may be zero.
    """
    low_ok = value >= 0 if allow_zero else value > 0
    if not low_ok or value > 24:
        bounds = "[0, 24]" if allow_zero else "(0, 24]"
        raise DegenerateInputError(field, value, f"hours per day must be in {bounds}")
    return value


def ensure_finite(result: Any, path: str = "result") -> Any:
    """Raise DegenerateInputError if any number in ``result`` is NaN or infinite."""
    data = asdict(result) if is_dataclass(result) else result
    _walk(data, path)
    return result


def _walk(value: Any, path: str) -> None:
    if isinstance(value, bool):
        return
    if isinstance(value, float):
        if not math.isfinite(value):
            raise DegenerateInputError(path, value, "calculation produced a non-finite value")
    elif isinstance(value, dict):
        for key, item in value.items():
            _walk(item, f"{path}.{key}")
    elif isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            _walk(item, f"{path}[{i}]")
