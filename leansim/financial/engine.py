"""
Calculation entry point: calculator → classifier → recommender.

``calculate_financial_metrics`` is the only function collaborators need.
It is pure apart from ``calculated_at``, which comes from an injectable
clock so tests can pin it::

    from datetime import datetime, timezone
    from leansim.financial.engine import calculate_financial_metrics

    fixed = datetime(2025, 1, 1, tzinfo=timezone.utc)
    result = calculate_financial_metrics(inputs, clock=lambda: fixed)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from leansim.financial.health import classify_health
from leansim.financial.kpi import calculate_kpis
from leansim.financial.recommendations import generate_recommendations
from leansim.models.financial import (
    CALCULATION_VERSION,
    CalculationResult,
    FinancialInputs,
)
from leansim.utils.time_utils import ensure_utc, utcnow

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def calculate_financial_metrics(
    inputs: FinancialInputs | Mapping[str, Any],
    clock: Clock = utcnow,
) -> CalculationResult:
    """Run the full unit-economics calculation for one set of inputs.

    Args:
        inputs: ``FinancialInputs`` or a mapping with the same keys
                (snake_case or camelCase).
        clock:  Zero-argument callable supplying ``calculated_at``.

    Returns:
        A fresh, frozen ``CalculationResult``.
    """
    kpis = calculate_kpis(inputs)
    health = classify_health(kpis)
    recommendations = generate_recommendations(kpis, health, inputs)

    result = CalculationResult(
        kpis=kpis,
        health=health,
        recommendations=recommendations,
        calculated_at=ensure_utc(clock()),
        calculation_version=CALCULATION_VERSION,
    )
    logger.debug(
        "Calculated metrics: overall=%s profit=%.2f recommendations=%d",
        health.overall_health, kpis.monthly_profit, len(recommendations),
    )
    return result
