"""
Shared pytest fixtures for the LeanSim test suite.

Provides:
  - ``base_inputs``: the reference scenario (price 100, cost 50, fixed 1000,
    CAC 25, 50 customers/month, 12-month lifetime).
  - ``fixed_clock`` / ``fixed_now``: a deterministic clock for
    ``calculate_financial_metrics``.
  - ``make_kpis``: factory for hand-built ``KPIResults``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

import pytest

from leansim.models.financial import FinancialInputs, KPIResults

FIXED_NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def base_inputs() -> FinancialInputs:
    """The reference healthy scenario."""
    return FinancialInputs(
        average_price=100,
        cost_per_unit=50,
        fixed_costs=1000,
        customer_acquisition_cost=25,
        monthly_new_customers=50,
        average_customer_lifetime=12,
    )


@pytest.fixture
def cac_exceeds_ltv_inputs() -> FinancialInputs:
    """Tiny margin, expensive acquisition: CAC 50 against an LTV of 12."""
    return FinancialInputs(
        average_price=7,
        cost_per_unit=5,
        fixed_costs=570,
        customer_acquisition_cost=50,
        monthly_new_customers=20,
        average_customer_lifetime=6,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def make_kpis() -> Callable[..., KPIResults]:
    """Build ``KPIResults`` from the healthy reference values plus overrides."""

    def _make(**overrides) -> KPIResults:
        values = dict(
            unit_margin=50.0,
            monthly_revenue=5000.0,
            monthly_profit=2000.0,
            ltv=600.0,
            cac=25.0,
            cac_ltv_ratio=25.0 / 600.0,
            break_even_units=20.0,
            break_even_months=0.4,
            break_even_reachable=True,
        )
        values.update(overrides)
        return KPIResults(**values)

    return _make
