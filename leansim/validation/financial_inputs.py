"""
Validation of user-submitted financial inputs.

The engine itself accepts anything (see ``leansim.financial.kpi``); this
module is for the edges that take input from people (the CLI and batch
import) and mirrors the web front end's rules.

Two layers:

1. ``FinancialInputsSubmission`` — hard limits. Every field must be a finite
   number inside its range, otherwise ``pydantic.ValidationError`` is raised
   with a Spanish message. Ranges come from ``ValidationConfig`` passed as
   validation context, falling back to the defaults::

       FinancialInputsSubmission.model_validate(data, context={"limits": cfg.validation})

2. ``check_business_rules()`` — soft warnings that never block a
   calculation:
     - cost per unit >= average price
     - unit margin below 5% of price
     - CAC/LTV above 0.5
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from leansim.config import ValidationConfig
from leansim.models.financial import FinancialInputs

_MIN_MARGIN_PCT = 5.0
_MAX_CAC_LTV_RATIO = 0.5

# field → (limit attribute on ValidationConfig, Spanish label, unit)
_FIELD_LIMITS: dict[str, tuple[str, str, str]] = {
    "average_price":             ("max_price",       "El precio medio",                   "euros"),
    "cost_per_unit":             ("max_price",       "El coste por unidad",               "euros"),
    "fixed_costs":               ("max_fixed_costs", "Los costes fijos",                  "euros"),
    "customer_acquisition_cost": ("max_cac",         "El CAC",                            "euros"),
    "monthly_new_customers":     ("max_customers",   "Los nuevos clientes mensuales",     ""),
    "average_customer_lifetime": ("max_lifetime",    "La duración media del cliente",     "meses"),
}


@dataclass(frozen=True)
class ValidationIssue:
    """A non-blocking business-rule warning attached to one input field."""

    field: str
    message: str


class FinancialInputsSubmission(BaseModel):
    """Strictly validated inputs as submitted by a user."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    average_price: float = Field(allow_inf_nan=False)
    cost_per_unit: float = Field(allow_inf_nan=False)
    fixed_costs: float = Field(allow_inf_nan=False)
    customer_acquisition_cost: float = Field(allow_inf_nan=False)
    monthly_new_customers: float = Field(allow_inf_nan=False)
    average_customer_lifetime: float = Field(allow_inf_nan=False)

    @field_validator(*_FIELD_LIMITS)
    @classmethod
    def validate_range(cls, v: float, info: ValidationInfo) -> float:
        limits = _limits_from(info)
        limit_attr, label, unit = _FIELD_LIMITS[info.field_name]
        upper = getattr(limits, limit_attr)

        if info.field_name == "average_customer_lifetime":
            if v < limits.min_lifetime:
                raise ValueError(f"{label} debe ser mayor a 0.")
        elif v < 0:
            raise ValueError(f"{label} debe ser mayor o igual a 0.")

        if v > upper:
            suffix = f" {unit}" if unit else ""
            raise ValueError(f"{label} no puede exceder {upper:.0f}{suffix}.")
        return v

    def to_financial_inputs(self) -> FinancialInputs:
        """Convert to the engine's input model."""
        return FinancialInputs(**self.model_dump())


def check_business_rules(inputs: FinancialInputs | FinancialInputsSubmission) -> list[ValidationIssue]:
    """Return soft warnings for inputs that are valid but look unrealistic."""
    issues: list[ValidationIssue] = []
    price = inputs.average_price
    cost = inputs.cost_per_unit
    cac = inputs.customer_acquisition_cost
    lifetime = inputs.average_customer_lifetime

    if price > 0 and cost >= price:
        issues.append(ValidationIssue(
            field="cost_per_unit",
            message="El coste por unidad no puede ser mayor o igual al precio medio.",
        ))

    if price > 0 and cost > 0:
        margin_pct = (price - cost) / price * 100
        if margin_pct < _MIN_MARGIN_PCT:
            issues.append(ValidationIssue(
                field="cost_per_unit",
                message=(
                    "El margen unitario parece muy bajo (menos del 5%). "
                    "Revisa tus precios y costes."
                ),
            ))

    if price > 0 and cost > 0 and cac > 0 and lifetime > 0:
        ltv = (price - cost) * lifetime
        if ltv <= 0 or cac / ltv > _MAX_CAC_LTV_RATIO:
            issues.append(ValidationIssue(
                field="customer_acquisition_cost",
                message=(
                    "El CAC parece muy alto comparado con el LTV. Considera reducir "
                    "costes de adquisición o aumentar el valor del cliente."
                ),
            ))

    return issues


def validate_submission(
    data: Mapping[str, Any],
    limits: ValidationConfig | None = None,
) -> tuple[FinancialInputsSubmission, list[ValidationIssue]]:
    """Validate raw user data and collect business-rule warnings.

    Raises:
        pydantic.ValidationError: If any hard limit is violated.
    """
    submission = FinancialInputsSubmission.model_validate(
        dict(data), context={"limits": limits or ValidationConfig()}
    )
    return submission, check_business_rules(submission)


# ── Helper ────────────────────────────────────────────────────────────────────

def _limits_from(info: ValidationInfo) -> ValidationConfig:
    context = info.context or {}
    limits = context.get("limits")
    return limits if isinstance(limits, ValidationConfig) else ValidationConfig()
