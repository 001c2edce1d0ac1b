"""
Input Normalizer

Turns free-text form values into numbers. Values that are missing, blank,
non-numeric or non-finite are replaced by the room category's default so a
calculation always runs; each substitution is logged.
"""

import math
from typing import Any, Dict, Iterable, Mapping, Optional

from coolcalc.core import get_logger

logger = get_logger("coolcalc.engineering.normalizer")

_MISSING = object()


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a decimal-text or native number.

    Returns None for None, booleans, blank or non-numeric text, and
    NaN/infinity. Surrounding whitespace is ignored.

    Examples:
        >>> parse_number(" 4.5 ")
        4.5
        >>> parse_number("abc") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return number


def normalize_fields(
    raw: Optional[Mapping[str, Any]],
    defaults: Mapping[str, float],
    stage: str = "input",
) -> Dict[str, float]:
    """
    Normalize every field named in ``defaults``.

    Args:
        raw: Field name -> raw value (text or number). May be None.
        defaults: Field name -> default for the room category.
        stage: Stage label used in log messages.

    Returns:
        Field name -> float. Explicit zero is kept as zero.
    """
    raw = raw or {}
    result: Dict[str, float] = {}

    for name, default in defaults.items():
        value = raw.get(name, _MISSING)
        if value is _MISSING or value is None:
            logger.debug(f"{stage}.{name} not provided, using default {default}")
            result[name] = float(default)
            continue

        number = parse_number(value)
        if number is None:
            logger.warning(
                f"{stage}.{name}: could not parse {value!r}, using default {default}"
            )
            result[name] = float(default)
        else:
            result[name] = number

    return result


def normalize_choice(
    raw: Optional[Mapping[str, Any]],
    field: str,
    default: str,
    choices: Optional[Iterable[str]] = None,
    stage: str = "input",
) -> str:
    """
    Normalize a selection field (product type, insulation type, storage type).

    Missing or blank values take the default. Values outside ``choices`` are
    kept as given; table lookups apply their own fallback.
    """
    value = (raw or {}).get(field)
    if value is None or not str(value).strip():
        return default

    text = str(value).strip()
    if choices is not None and text not in set(choices):
        logger.warning(f"{stage}.{field}: unknown option {text!r}, tables will use fallback values")
    return text


def optional_number(raw: Optional[Mapping[str, Any]], field: str) -> Optional[float]:
    """Parse an optional override; None when absent or unparseable."""
    value = (raw or {}).get(field)
    if value is None:
        return None
    number = parse_number(value)
    if number is None and str(value).strip():
        logger.warning(f"override {field}: could not parse {value!r}, ignoring")
    return number
