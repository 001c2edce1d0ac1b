"""
CoolCalc Core - Shared services for all modules.

Usage:
    from coolcalc.core import get_db, get_config, get_logger, COOLCALC_PATHS
"""

from coolcalc.core.config import get_config, get_config_value, get_branding, COOLCALC_PATHS
from coolcalc.core.db import get_db, execute_query, migrate_all
from coolcalc.core.logging import get_logger

__all__ = [
    "get_config",
    "get_config_value",
    "get_branding",
    "COOLCALC_PATHS",
    "get_db",
    "execute_query",
    "migrate_all",
    "get_logger",
]
