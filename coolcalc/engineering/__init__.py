"""
Engineering module: cooling-load calculators, form state, history and reports.

Usage:
    from coolcalc.engineering.refrigeration import run_freezer
    result = run_freezer({"room": {...}, "conditions": {...}, "product": {...}})
"""
