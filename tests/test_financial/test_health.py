"""
Tests for leansim/financial/health.py.

What we test
------------
classify_profitability():
  - Profit with positive margin → GOOD.
  - Small loss inside min(10% of revenue, 500) → MEDIUM, boundary inclusive.
  - Larger loss, or margin <= 0 → BAD.
classify_ltv_cac():
  - LTV/CAC exactly 3 → GOOD, exactly 2 → MEDIUM, below 2 → BAD.
  - Free acquisition (cac == 0) → GOOD.
  - ltv <= 0 or infinite ratio → BAD.
classify_overall():
  - cac > ltv > 0 forces BAD.
  - GOOD + GOOD → GOOD, any BAD → BAD, otherwise MEDIUM.
"""

from __future__ import annotations

import math

import pytest

from leansim.financial.health import (
    classify_health,
    classify_ltv_cac,
    classify_overall,
    classify_profitability,
    ltv_cac_ratio,
)
from leansim.taxonomy.health_taxonomy import HealthTier


# ── Profitability ─────────────────────────────────────────────────────────────

class TestProfitability:
    def test_profit_is_good(self, make_kpis):
        assert classify_profitability(make_kpis()) is HealthTier.GOOD

    def test_small_loss_is_medium(self, make_kpis):
        kpis = make_kpis(monthly_profit=-100.0, monthly_revenue=5000.0)
        assert classify_profitability(kpis) is HealthTier.MEDIUM

    def test_loss_at_absolute_cap_is_medium(self, make_kpis):
        kpis = make_kpis(monthly_profit=-500.0, monthly_revenue=10000.0)
        assert classify_profitability(kpis) is HealthTier.MEDIUM

    def test_loss_above_absolute_cap_is_bad(self, make_kpis):
        kpis = make_kpis(monthly_profit=-501.0, monthly_revenue=10000.0)
        assert classify_profitability(kpis) is HealthTier.BAD

    def test_loss_above_revenue_share_is_bad(self, make_kpis):
        kpis = make_kpis(monthly_profit=-101.0, monthly_revenue=1000.0)
        assert classify_profitability(kpis) is HealthTier.BAD

    def test_break_even_profit_is_medium(self, make_kpis):
        kpis = make_kpis(monthly_profit=0.0)
        assert classify_profitability(kpis) is HealthTier.MEDIUM

    @pytest.mark.parametrize("margin", [0.0, -10.0])
    def test_non_positive_margin_is_bad(self, make_kpis, margin):
        kpis = make_kpis(unit_margin=margin, monthly_profit=100.0)
        assert classify_profitability(kpis) is HealthTier.BAD


# ── LTV / CAC ─────────────────────────────────────────────────────────────────

class TestLtvCac:
    def test_ratio_exactly_three_is_good(self, make_kpis):
        kpis = make_kpis(ltv=300.0, cac=100.0, cac_ltv_ratio=100.0 / 300.0)
        assert ltv_cac_ratio(kpis) == pytest.approx(3.0)
        assert classify_ltv_cac(kpis) is HealthTier.GOOD

    def test_ratio_exactly_two_is_medium(self, make_kpis):
        kpis = make_kpis(ltv=200.0, cac=100.0, cac_ltv_ratio=0.5)
        assert classify_ltv_cac(kpis) is HealthTier.MEDIUM

    def test_ratio_below_two_is_bad(self, make_kpis):
        kpis = make_kpis(ltv=199.0, cac=100.0, cac_ltv_ratio=100.0 / 199.0)
        assert classify_ltv_cac(kpis) is HealthTier.BAD

    def test_free_acquisition_is_good(self, make_kpis):
        kpis = make_kpis(cac=0.0, cac_ltv_ratio=0.0)
        assert ltv_cac_ratio(kpis) == 0.0
        assert classify_ltv_cac(kpis) is HealthTier.GOOD

    def test_infinite_ratio_is_bad(self, make_kpis):
        kpis = make_kpis(ltv=0.0, cac_ltv_ratio=math.inf)
        assert ltv_cac_ratio(kpis) == 0.0
        assert classify_ltv_cac(kpis) is HealthTier.BAD

    def test_negative_ltv_is_bad(self, make_kpis):
        kpis = make_kpis(ltv=-100.0, cac_ltv_ratio=math.inf)
        assert classify_ltv_cac(kpis) is HealthTier.BAD


# ── Overall ───────────────────────────────────────────────────────────────────

class TestOverall:
    G, M, B = HealthTier.GOOD, HealthTier.MEDIUM, HealthTier.BAD

    @pytest.mark.parametrize("profitability,ltv_cac,expected", [
        (G, G, G),
        (G, M, M),
        (M, G, M),
        (M, M, M),
        (B, G, B),
        (G, B, B),
        (M, B, B),
    ])
    def test_combination(self, make_kpis, profitability, ltv_cac, expected):
        assert classify_overall(make_kpis(), profitability, ltv_cac) is expected

    def test_cac_above_ltv_overrides(self, make_kpis):
        kpis = make_kpis(ltv=100.0, cac=150.0)
        assert classify_overall(kpis, HealthTier.GOOD, HealthTier.GOOD) is HealthTier.BAD

    def test_override_needs_positive_ltv(self, make_kpis):
        kpis = make_kpis(ltv=0.0, cac=0.0, cac_ltv_ratio=0.0)
        assert classify_overall(kpis, HealthTier.GOOD, HealthTier.GOOD) is HealthTier.GOOD


# ── classify_health ───────────────────────────────────────────────────────────

class TestClassifyHealth:
    def test_healthy_model(self, make_kpis):
        health = classify_health(make_kpis())
        assert health.profitability_health == "good"
        assert health.ltv_cac_health == "good"
        assert health.overall_health == "good"

    def test_serializes_as_plain_strings(self, make_kpis):
        dumped = classify_health(make_kpis()).model_dump(mode="json", by_alias=True)
        assert dumped == {
            "profitabilityHealth": "good",
            "ltvCacHealth": "good",
            "overallHealth": "good",
        }
