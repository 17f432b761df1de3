"""
Unit-economics engine: turns six financial inputs into KPIs, health tiers
and advisory recommendations.

Modules
-------
kpi             : calculate_kpis() + safe_number() — pure arithmetic.
health          : classify_health() — three-tier good/medium/bad rules.
recommendations : generate_recommendations() + format_recovery_time().
engine          : calculate_financial_metrics() — runs the three in sequence.
projection      : calculate_projection() — month-by-month cash-flow table.

No I/O and no shared state. The KPI, health and recommendation functions
never raise on malformed numeric input; only ``calculated_at`` depends on
the clock.
"""

from leansim.financial.engine import calculate_financial_metrics
from leansim.financial.health import classify_health
from leansim.financial.kpi import calculate_kpis
from leansim.financial.recommendations import (
    format_recovery_time,
    generate_recommendations,
)

__all__ = [
    "calculate_financial_metrics",
    "calculate_kpis",
    "classify_health",
    "format_recovery_time",
    "generate_recommendations",
]
