"""
Health classifier: KPIResults → three good/medium/bad tiers.

Profitability
-------------
    GOOD   : monthly_profit > 0 and unit_margin > 0
    MEDIUM : unit_margin > 0 and |monthly_profit| <= min(10% of revenue, 500)
    BAD    : any other loss with positive margin, or unit_margin <= 0

LTV / CAC (uses the conventional LTV/CAC = 1 / cac_ltv_ratio)
--------------------------------------------------------------
    GOOD   : cac == 0 (free acquisition), or ratio >= 3
    BAD    : ltv <= 0 or cac_ltv_ratio not finite
    MEDIUM : ratio >= 2
    BAD    : ratio < 2

Overall (first match wins)
--------------------------
    1. BAD    : cac > ltv > 0
    2. GOOD   : both tiers GOOD
    3. BAD    : either tier BAD
    4. MEDIUM : everything else
"""

from __future__ import annotations

import logging
import math

from leansim.models.financial import HealthClassification, KPIResults
from leansim.taxonomy.health_taxonomy import HealthTier

logger = logging.getLogger(__name__)

LOSS_REVENUE_SHARE = 0.10
LOSS_ABSOLUTE_CAP = 500.0
LTV_CAC_GOOD = 3.0
LTV_CAC_MEDIUM = 2.0


def classify_profitability(kpis: KPIResults) -> HealthTier:
    """Tier from monthly profit and unit margin."""
    if kpis.monthly_profit > 0 and kpis.unit_margin > 0:
        return HealthTier.GOOD
    if kpis.unit_margin > 0:
        loss_threshold = min(kpis.monthly_revenue * LOSS_REVENUE_SHARE, LOSS_ABSOLUTE_CAP)
        if abs(kpis.monthly_profit) <= loss_threshold:
            return HealthTier.MEDIUM
        return HealthTier.BAD
    return HealthTier.BAD


def ltv_cac_ratio(kpis: KPIResults) -> float:
    """Conventional LTV/CAC from the stored CAC/LTV; 0 when undefined."""
    ratio = kpis.cac_ltv_ratio
    if ratio > 0 and math.isfinite(ratio):
        return 1.0 / ratio
    return 0.0


def classify_ltv_cac(kpis: KPIResults) -> HealthTier:
    """Tier from the LTV/CAC ratio, with free acquisition always GOOD."""
    if kpis.cac == 0:
        return HealthTier.GOOD
    if not math.isfinite(kpis.cac_ltv_ratio) or kpis.ltv <= 0:
        return HealthTier.BAD

    ratio = ltv_cac_ratio(kpis)
    if ratio >= LTV_CAC_GOOD:
        return HealthTier.GOOD
    if ratio >= LTV_CAC_MEDIUM:
        return HealthTier.MEDIUM
    return HealthTier.BAD


def classify_overall(
    kpis: KPIResults,
    profitability: HealthTier,
    ltv_cac: HealthTier,
) -> HealthTier:
    """Combine the two tiers; negative per-customer economics override both."""
    if kpis.cac > kpis.ltv > 0:
        return HealthTier.BAD
    if profitability is HealthTier.GOOD and ltv_cac is HealthTier.GOOD:
        return HealthTier.GOOD
    if profitability is HealthTier.BAD or ltv_cac is HealthTier.BAD:
        return HealthTier.BAD
    return HealthTier.MEDIUM


def classify_health(kpis: KPIResults) -> HealthClassification:
    """Classify profitability, LTV/CAC and overall health for ``kpis``."""
    profitability = classify_profitability(kpis)
    ltv_cac = classify_ltv_cac(kpis)
    overall = classify_overall(kpis, profitability, ltv_cac)

    logger.debug(
        "Health: profitability=%s ltv_cac=%s overall=%s",
        profitability, ltv_cac, overall,
    )
    return HealthClassification(
        profitability_health=profitability,
        ltv_cac_health=ltv_cac,
        overall_health=overall,
    )
