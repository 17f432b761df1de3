"""
Month-by-month cash-flow projection.

A simpler companion to the KPI engine: starting from an initial investment,
flat monthly expenses and an average monthly revenue that compounds at a
fixed monthly growth rate, tabulate revenue, expenses, cash flow and
cumulative cash flow for each month.

    revenue[1]   = avg_monthly_revenue
    revenue[m]   = revenue[m-1] * (1 + growth_rate_monthly)      (m >= 2)
    cashflow[m]  = revenue[m] - monthly_expenses
    cumulative   = -initial_investment + Σ cashflow

The break-even month is the first month whose cumulative cash flow is
>= 0, or ``None`` when that never happens inside the timeframe. Total
expenses include the initial investment; ROI = profit / initial investment
(0 when nothing was invested).
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class ProjectionParams(BaseModel):
    """Inputs for ``calculate_projection``."""

    model_config = ConfigDict(frozen=True)

    initial_investment: float = Field(ge=0)
    monthly_expenses: float = Field(ge=0)
    avg_monthly_revenue: float = Field(ge=0)
    growth_rate_monthly: float = Field(default=0.0, gt=-1.0)
    timeframe_months: int = Field(ge=0, le=600)


class MonthlyData(BaseModel):
    """One projected month."""

    model_config = ConfigDict(frozen=True)

    month: int
    revenue: float
    expenses: float
    cashflow: float
    cumulative_cashflow: float


class ProjectionSummary(BaseModel):
    """Totals over the whole timeframe."""

    model_config = ConfigDict(frozen=True)

    total_revenue: float
    total_expenses: float
    profit: float
    roi: float
    break_even_month: Optional[int] = None


class ProjectionResult(BaseModel):
    """Per-month rows plus the summary."""

    model_config = ConfigDict(frozen=True)

    monthly_data: list[MonthlyData]
    summary: ProjectionSummary


def calculate_projection(params: ProjectionParams) -> ProjectionResult:
    """Project cash flow month by month.

    Args:
        params: Validated projection inputs.

    Returns:
        ``ProjectionResult`` with ``timeframe_months`` rows.
    """
    rows: list[MonthlyData] = []
    total_revenue = 0.0
    total_expenses = params.initial_investment
    break_even_month: Optional[int] = None

    revenue = params.avg_monthly_revenue
    cumulative = -params.initial_investment

    for month in range(1, params.timeframe_months + 1):
        if month > 1:
            revenue *= 1 + params.growth_rate_monthly

        cashflow = revenue - params.monthly_expenses
        cumulative += cashflow

        if break_even_month is None and cumulative >= 0:
            break_even_month = month

        rows.append(
            MonthlyData(
                month=month,
                revenue=revenue,
                expenses=params.monthly_expenses,
                cashflow=cashflow,
                cumulative_cashflow=cumulative,
            )
        )
        total_revenue += revenue
        total_expenses += params.monthly_expenses

    profit = total_revenue - total_expenses
    roi = profit / params.initial_investment if params.initial_investment > 0 else 0.0

    logger.debug(
        "Projection: %d months, profit=%.2f, break_even_month=%s",
        params.timeframe_months, profit, break_even_month,
    )
    return ProjectionResult(
        monthly_data=rows,
        summary=ProjectionSummary(
            total_revenue=total_revenue,
            total_expenses=total_expenses,
            profit=profit,
            roi=roi,
            break_even_month=break_even_month,
        ),
    )
