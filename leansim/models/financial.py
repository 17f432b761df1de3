"""
Financial input and result models.

``FinancialInputs`` carries the six user-supplied figures. It is deliberately
lenient: any value that cannot be read as a number becomes ``NaN`` so the
calculator can normalize it to 0 instead of the caller seeing an exception.
Strict bounds for user submissions live in
``leansim.validation.financial_inputs``.

``KPIResults``, ``HealthClassification``, ``Recommendation`` and
``CalculationResult`` are produced by the engine. All models are frozen:
a result is created fresh on every calculation and never mutated.

Field names are snake_case; every field also has its camelCase alias
(``averagePrice``, ``cacLtvRatio``, ...) so callers exchanging JSON with the
web front end can use ``model_dump(by_alias=True)`` and construct models
from camelCase dicts.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from leansim.taxonomy.health_taxonomy import (
    HealthTier,
    RecommendationStatus,
    RecommendationType,
)

CALCULATION_VERSION = "1.0"

INPUT_FIELDS: tuple[str, ...] = (
    "average_price",
    "cost_per_unit",
    "fixed_costs",
    "customer_acquisition_cost",
    "monthly_new_customers",
    "average_customer_lifetime",
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FinancialInputs(_CamelModel):
    """The six figures a unit-economics calculation starts from.

    Attributes:
        average_price:             Selling price per unit.
        cost_per_unit:             Variable cost per unit.
        fixed_costs:               Monthly fixed costs.
        customer_acquisition_cost: Cost to acquire one customer (CAC).
        monthly_new_customers:     New customers per month.
        average_customer_lifetime: Months a customer stays active.
    """

    average_price: float = 0.0
    cost_per_unit: float = 0.0
    fixed_costs: float = 0.0
    customer_acquisition_cost: float = 0.0
    monthly_new_customers: float = 0.0
    average_customer_lifetime: float = 0.0

    @field_validator(*INPUT_FIELDS, mode="before")
    @classmethod
    def coerce_unreadable(cls, v: Any) -> float:
        if v is None or isinstance(v, bool):
            return math.nan
        try:
            return float(v)
        except (TypeError, ValueError):
            return math.nan


class KPIResults(_CamelModel):
    """Derived unit-economics metrics.

    ``cac_ltv_ratio`` is CAC / LTV (lower is better) and is the only field
    that may be ``inf``. ``break_even_units`` and ``break_even_months`` are
    0 both when break-even is genuinely immediate and when it can never be
    reached; ``break_even_reachable`` tells the two apart.
    """

    unit_margin: float
    monthly_revenue: float
    monthly_profit: float
    ltv: float
    cac: float
    cac_ltv_ratio: float
    break_even_units: float
    break_even_months: float
    break_even_reachable: bool = True


class HealthClassification(_CamelModel):
    """Three categorical health tiers derived from ``KPIResults``."""

    profitability_health: HealthTier
    ltv_cac_health: HealthTier
    overall_health: HealthTier


class Recommendation(_CamelModel):
    """One advisory message.

    ``message`` may embed ``<strong>`` and ``<br>`` tags; rendering is the
    presentation layer's job.
    """

    type: RecommendationType
    title: str
    message: str
    status: RecommendationStatus

    @field_validator("title", "message")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("title and message must not be empty.")
        return v


class CalculationResult(_CamelModel):
    """Aggregate returned by ``calculate_financial_metrics``."""

    kpis: KPIResults
    health: HealthClassification
    recommendations: list[Recommendation] = Field(default_factory=list)
    calculated_at: datetime
    calculation_version: str = CALCULATION_VERSION
