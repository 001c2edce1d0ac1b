"""
CoolCalc - Refrigeration Cooling-Load Calculator

Cooling-load calculations for cold-storage rooms.

Modules:
    core        - Shared services (db, config, logging, paths)
    engineering - Load calculators, form state, history and reports
    cli         - Typer command-line entry point
"""

__version__ = "0.1.0"
