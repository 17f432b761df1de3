"""
KPI calculator: six financial inputs → eight unit-economics metrics.

Formulas
--------
    unit_margin      = average_price - cost_per_unit          (may be negative)
    monthly_revenue  = average_price * monthly_new_customers
    monthly_profit   = (unit_margin - customer_acquisition_cost)
                       * monthly_new_customers - fixed_costs
    ltv              = unit_margin * average_customer_lifetime
    cac              = customer_acquisition_cost
    cac_ltv_ratio    = 0                  if cac == 0  (free acquisition)
                       inf                if ltv <= 0
                       cac / ltv          otherwise
    break_even_units = fixed_costs / unit_margin          (inf if margin <= 0)
    break_even_months= break_even_units / monthly_new_customers
                                                          (inf if customers <= 0)

Revenue, profit, LTV and both break-even figures are reported as 0 when
they overflow or are otherwise not finite. ``cac_ltv_ratio`` is the only
field allowed to stay ``inf``.

Inputs are normalized first: anything that is not a finite, non-negative
number becomes 0. This is sanity-checking only: a 0 customer lifetime is
accepted and simply yields ``ltv = 0``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

from leansim.models.financial import FinancialInputs, KPIResults

logger = logging.getLogger(__name__)


def safe_number(value: Any) -> float:
    """Return ``value`` as a float, or 0.0 if it is not finite and >= 0."""
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(num) or num < 0:
        return 0.0
    return num


def normalize_inputs(inputs: FinancialInputs | Mapping[str, Any]) -> FinancialInputs:
    """Return a copy of ``inputs`` with every field passed through ``safe_number``.

    Accepts a ``FinancialInputs`` or a plain mapping keyed by either the
    snake_case field names or their camelCase aliases.
    """
    if not isinstance(inputs, FinancialInputs):
        inputs = FinancialInputs.model_validate(dict(inputs))
    return FinancialInputs(
        average_price=safe_number(inputs.average_price),
        cost_per_unit=safe_number(inputs.cost_per_unit),
        fixed_costs=safe_number(inputs.fixed_costs),
        customer_acquisition_cost=safe_number(inputs.customer_acquisition_cost),
        monthly_new_customers=safe_number(inputs.monthly_new_customers),
        average_customer_lifetime=safe_number(inputs.average_customer_lifetime),
    )


def calculate_kpis(inputs: FinancialInputs | Mapping[str, Any]) -> KPIResults:
    """Compute all KPIs for one set of inputs. Never raises on numeric input.

    Args:
        inputs: ``FinancialInputs`` or a mapping with the same keys.

    Returns:
        ``KPIResults`` with finite values everywhere except possibly
        ``cac_ltv_ratio``.
    """
    clean = normalize_inputs(inputs)

    price = clean.average_price
    cost = clean.cost_per_unit
    fixed = clean.fixed_costs
    cac = clean.customer_acquisition_cost
    customers = clean.monthly_new_customers
    lifetime = clean.average_customer_lifetime

    # ── Core arithmetic ───────────────────────────────────────────────────────
    unit_margin = price - cost
    # Per-unit terms cancel before scaling by volume so huge but equal price
    # and cost cannot overflow into inf - inf.
    monthly_revenue = _finite_or_zero(price * customers)
    monthly_profit = _finite_or_zero((unit_margin - cac) * customers - fixed)

    ltv = _finite_or_zero(unit_margin * lifetime)

    # ── CAC / LTV ─────────────────────────────────────────────────────────────
    # Free acquisition wins over the sign of LTV.
    if cac == 0:
        cac_ltv_ratio = 0.0
    elif ltv <= 0:
        cac_ltv_ratio = math.inf
    else:
        cac_ltv_ratio = cac / ltv

    # ── Break-even ────────────────────────────────────────────────────────────
    break_even_units = fixed / unit_margin if unit_margin > 0 else math.inf
    if customers > 0 and math.isfinite(break_even_units):
        break_even_months = break_even_units / customers
    else:
        break_even_months = math.inf

    reachable = math.isfinite(break_even_units) and math.isfinite(break_even_months)

    kpis = KPIResults(
        unit_margin=unit_margin,
        monthly_revenue=monthly_revenue,
        monthly_profit=monthly_profit,
        ltv=ltv,
        cac=cac,
        cac_ltv_ratio=cac_ltv_ratio,
        break_even_units=_finite_or_zero(break_even_units),
        break_even_months=_finite_or_zero(break_even_months),
        break_even_reachable=reachable,
    )
    logger.debug(
        "KPIs: margin=%.2f revenue=%.2f profit=%.2f ltv=%.2f cac_ltv=%s",
        unit_margin, monthly_revenue, monthly_profit, ltv, cac_ltv_ratio,
    )
    return kpis


# ── Helper ────────────────────────────────────────────────────────────────────

def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0
