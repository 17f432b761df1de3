"""
Recommendation generator: KPIs + health tiers + inputs → advisory messages.

Output order is fixed and every call yields three or four entries:

    1. VIABILITY     (always)      branches on profitability_health
    2. ACQUISITION   (always)      branches on ltv_cac_health
    3. OPTIMIZATION  (optional)    healthy model → reinvest 70% of profit;
                                   otherwise only when break-even is further
                                   away than max(24, 2 × customer lifetime)
    4. NEXT_STEPS    (optional)    prioritized action items joined with
                                   ``<br><br>``; omitted when none apply

Messages are Spanish, may embed ``<strong>`` emphasis, and interpolate
amounts through ``format_amount`` (no currency symbol; the presentation
layer decides how money is displayed).

Every division is guarded, so the generator never raises, whatever the
inputs look like.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

from leansim.financial.kpi import normalize_inputs
from leansim.models.financial import (
    FinancialInputs,
    HealthClassification,
    KPIResults,
    Recommendation,
)
from leansim.taxonomy.health_taxonomy import (
    HealthTier,
    RecommendationStatus,
    RecommendationType,
)
from leansim.utils.number_format import (
    format_amount,
    format_fixed,
    format_quantity,
    round_half_up,
)

logger = logging.getLogger(__name__)

TITLE_VIABILITY = "Viabilidad económica"
TITLE_ACQUISITION = "Eficiencia de adquisición de clientes"
TITLE_OPTIMIZATION = "Optimización del modelo"
TITLE_BREAK_EVEN = "Aceleración del punto de equilibrio"
TITLE_NEXT_STEPS = "Próximos pasos prioritarios"

REINVESTMENT_SHARE = 0.7
BREAK_EVEN_MIN_MONTHS = 24.0
FIXED_COST_CUT_SHARE = 0.3
RETENTION_TARGET_MONTHS = 12.0
RETENTION_GROWTH = 1.5
NEXT_STEPS_SEPARATOR = "<br><br>"


# ── Recovery time ─────────────────────────────────────────────────────────────

def format_recovery_time(months: float) -> str:
    """Render a CAC payback period in months as a short Spanish phrase.

    Rules:
        - ``inf``, NaN or <= 0          → "∞"
        - exactly 1                      → "1 mes"
        - whole number of months         → "<n> meses"
        - under a month, <= 7 days       → "<n> día(s)"
        - under a month, longer          → "<n> semana(s)"
        - otherwise                      → "<n.n> meses", or "<n> meses" when
                                           within 0.1 of a whole number
    """
    if not math.isfinite(months) or months <= 0:
        return "∞"

    if months == 1:
        return "1 mes"

    nearest = round_half_up(months)
    if nearest >= 1 and abs(months - nearest) < 0.01:
        return _months_label(nearest)

    if months < 1:
        days = max(1, round_half_up(months * 30))
        if days <= 7:
            return "1 día" if days == 1 else f"{days} días"
        weeks = max(1, round_half_up(days / 7))
        return "1 semana" if weeks == 1 else f"{weeks} semanas"

    if abs(months - nearest) < 0.1:
        return _months_label(nearest)
    return f"{format_fixed(months, 1)} meses"


def _months_label(months: int) -> str:
    return "1 mes" if months == 1 else f"{months} meses"


def format_ltv_cac_ratio(ltv: float, cac: float) -> str:
    """LTV/CAC with one decimal; "0" when either side is not positive."""
    if cac <= 0 or ltv <= 0:
        return "0"
    return format_fixed(ltv / cac, 1)


# ── Viability ─────────────────────────────────────────────────────────────────

def _viability(
    kpis: KPIResults,
    health: HealthClassification,
    inputs: FinancialInputs,
) -> Recommendation:
    margin = kpis.unit_margin
    cac = kpis.cac
    loss = abs(kpis.monthly_profit)

    if health.profitability_health is HealthTier.GOOD:
        revenue = kpis.monthly_revenue
        profit_pct = kpis.monthly_profit / revenue * 100 if revenue > 0 else 0.0
        message = (
            f"Tu modelo genera un <strong>beneficio del "
            f"{format_fixed(profit_pct, 1)}%</strong> "
            f"sobre ventas ({format_amount(kpis.monthly_profit)} de "
            f"{format_amount(revenue)} mensuales). Esto indica viabilidad si "
            f"mantienes las previsiones de ventas."
        )
        return _rec(RecommendationType.VIABILITY, TITLE_VIABILITY, message,
                    RecommendationStatus.POSITIVE)

    if health.profitability_health is HealthTier.MEDIUM:
        net_contribution = margin - cac
        if net_contribution > 0:
            extra_sales = math.ceil(loss / net_contribution)
            message = (
                f"Tienes margen unitario positivo ({format_amount(margin)}) pero "
                f"<strong>pérdidas de {format_amount(loss)}/mes</strong>. Necesitas "
                f"<strong>{extra_sales} ventas más al mes</strong> para ser rentable."
            )
        else:
            max_cac = math.floor(margin * 0.9)
            message = (
                f"Tienes margen unitario positivo ({format_amount(margin)}) pero "
                f"<strong>CAC demasiado alto ({format_amount(cac)})</strong>. Cada "
                f"cliente nuevo genera pérdidas. Reduce el CAC por debajo de "
                f"{format_amount(max_cac)} antes de aumentar ventas."
            )
        return _rec(RecommendationType.VIABILITY, TITLE_VIABILITY, message,
                    RecommendationStatus.WARNING)

    return _rec(RecommendationType.VIABILITY, TITLE_VIABILITY,
                _bad_viability_message(kpis, inputs, loss),
                RecommendationStatus.NEGATIVE)


def _bad_viability_message(kpis: KPIResults, inputs: FinancialInputs, loss: float) -> str:
    margin = kpis.unit_margin
    cac = kpis.cac
    fixed = inputs.fixed_costs
    customers = inputs.monthly_new_customers

    # More volume only deepens the loss when CAC exceeds the unit margin.
    if cac > margin:
        loss_per_customer = cac - margin
        message = (
            f"<strong>Modelo inviable:</strong> cada cliente genera "
            f"{format_amount(loss_per_customer)} de pérdida neta (CAC "
            f"{format_amount(cac)} > margen {format_amount(margin)}). "
            f"<strong>AUMENTAR VENTAS EMPEORA LAS PÉRDIDAS</strong>. "
        )
        if margin > 0:
            max_cac = math.floor(margin * 0.8)
            return message + (
                f"Urgente: reduce el CAC por debajo de {format_amount(max_cac)} "
                f"antes de adquirir más clientes."
            )
        return message + (
            f"Urgente: sube el precio por encima del coste unitario "
            f"({format_amount(inputs.cost_per_unit)}) antes de adquirir más clientes."
        )

    net_contribution = margin - cac
    if net_contribution <= 0:
        if margin > 0:
            return (
                f"CAC ({format_amount(cac)}) igual al margen unitario "
                f"({format_amount(margin)}). Cada cliente nuevo no aporta nada. "
                f"Reduce el CAC por debajo de {format_amount(math.floor(margin * 0.9))}."
            )
        return (
            f"<strong>Sin margen unitario:</strong> el precio no cubre el coste por "
            f"unidad ({format_amount(inputs.cost_per_unit)}). Ninguna venta "
            f"contribuye a cubrir costes; revisa precio o costes variables."
        )

    extra_sales = math.ceil(loss / net_contribution)
    growth = format_fixed(extra_sales / customers * 100) if customers > 0 else "∞"

    if fixed > 0 and loss <= fixed:
        cut_pct = loss / fixed * 100
        return (
            f"Pérdidas importantes de <strong>{format_amount(loss)}/mes</strong>. "
            f"Para ser viable necesitas: <strong>reducir costes fijos un "
            f"{format_fixed(cut_pct)}%</strong> (de {format_amount(fixed)} a "
            f"{format_amount(fixed - loss)}) o <strong>aumentar ventas un "
            f"{growth}%</strong> ({extra_sales} unidades más/mes)."
        )
    if fixed > 0:
        return (
            f"Pérdidas críticas de <strong>{format_amount(loss)}/mes</strong>. "
            f"Incluso <strong>eliminando TODOS los costes fijos</strong> "
            f"({format_amount(fixed)}) aún tendrías {format_amount(loss - fixed)}/mes "
            f"de pérdidas. Necesitas <strong>aumentar ventas {extra_sales} unidades "
            f"más/mes</strong> ({growth}% de crecimiento)."
        )
    return (
        f"Pérdidas de <strong>{format_amount(loss)}/mes</strong> sin costes fijos. "
        f"El problema está en los costes variables o CAC. Necesitas "
        f"<strong>{extra_sales} ventas más/mes</strong> (crecimiento del {growth}%) "
        f"para compensar con mayor volumen."
    )


# ── Acquisition ───────────────────────────────────────────────────────────────

def _acquisition(kpis: KPIResults, health: HealthClassification) -> Recommendation:
    ltv = kpis.ltv
    cac = kpis.cac
    ratio = format_ltv_cac_ratio(ltv, cac)

    if health.ltv_cac_health is HealthTier.GOOD:
        if cac == 0:
            message = (
                "<strong>Ratio perfecto (CAC gratuito)</strong>. Adquieres clientes "
                "sin coste (marketing orgánico, referencias, etc.). Puedes acelerar "
                "el crecimiento maximizando estos canales."
            )
        else:
            payback = cac / kpis.unit_margin if kpis.unit_margin > 0 else math.inf
            message = (
                f"Ratio excelente de <strong>{ratio}:1</strong>. Recuperas los "
                f"{format_amount(cac)} de CAC en solo {format_recovery_time(payback)}. "
                f"Puedes invertir más en marketing para acelerar el crecimiento."
            )
        return _rec(RecommendationType.ACQUISITION, TITLE_ACQUISITION, message,
                    RecommendationStatus.POSITIVE)

    if health.ltv_cac_health is HealthTier.MEDIUM:
        ltv_gap = math.ceil(cac * 3 - ltv)
        target_cac = math.ceil(ltv / 3)
        message = (
            f"Ratio de <strong>{ratio}:1</strong> es aceptable pero mejorable. Para "
            f"llegar al ideal (3:1) necesitas aumentar el LTV en "
            f"{format_amount(ltv_gap)} o reducir el CAC a {format_amount(target_cac)}."
        )
        return _rec(RecommendationType.ACQUISITION, TITLE_ACQUISITION, message,
                    RecommendationStatus.WARNING)

    if cac > ltv:
        max_cac = max(0, math.floor(ltv * 0.8))
        message = (
            f"<strong>Ratio crítico ({ratio}:1)</strong>. Pierdes "
            f"{format_amount(cac - ltv)} por cliente adquirido. URGENTE: reduce el "
            f"CAC a máximo {format_amount(max_cac)} o para temporalmente la "
            f"adquisición hasta optimizar el modelo."
        )
    else:
        message = (
            f"Ratio insuficiente ({ratio}:1). La adquisición apenas es rentable. "
            f"Reduce el CAC por debajo de {format_amount(math.floor(ltv / 2))} o "
            f"aumenta el LTV mejorando retención."
        )
    return _rec(RecommendationType.ACQUISITION, TITLE_ACQUISITION, message,
                RecommendationStatus.NEGATIVE)


# ── Optimization ──────────────────────────────────────────────────────────────

def _optimization(
    kpis: KPIResults,
    health: HealthClassification,
    inputs: FinancialInputs,
) -> Recommendation | None:
    if health.overall_health is HealthTier.GOOD:
        reinvestment = kpis.monthly_profit * REINVESTMENT_SHARE
        if kpis.cac > 0:
            new_customers = math.floor(reinvestment / kpis.cac)
            tail = (
                f"para adquirir {new_customers} clientes adicionales mensuales y "
                f"acelerar el crecimiento."
            )
        else:
            tail = "en escalar tus canales de adquisición gratuitos."
        message = (
            f"Negocio saludable. Puedes reinvertir {format_amount(reinvestment)}/mes "
            f"(70% del beneficio) {tail}"
        )
        return _rec(RecommendationType.OPTIMIZATION, TITLE_OPTIMIZATION, message,
                    RecommendationStatus.POSITIVE)

    months = kpis.break_even_months
    customers = inputs.monthly_new_customers
    if not (math.isfinite(months) and months > 0 and customers > 0):
        return None

    threshold = max(BREAK_EVEN_MIN_MONTHS, inputs.average_customer_lifetime * 2)
    if months <= threshold:
        return None

    gap = kpis.break_even_units - customers
    growth = gap / customers * 100
    message = (
        f"Break-even en {math.ceil(months)} meses es demasiado lejano. Necesitas "
        f"aumentar ventas en {format_fixed(growth)}% "
        f"({math.ceil(gap)} unidades más/mes) o "
        f"reducir costes fijos en "
        f"{format_amount(math.ceil(inputs.fixed_costs * FIXED_COST_CUT_SHARE))}."
    )
    return _rec(RecommendationType.OPTIMIZATION, TITLE_BREAK_EVEN, message,
                RecommendationStatus.WARNING)


# ── Next steps ────────────────────────────────────────────────────────────────

def _next_steps(
    kpis: KPIResults,
    health: HealthClassification,
    inputs: FinancialInputs,
) -> Recommendation | None:
    margin = kpis.unit_margin
    ltv = kpis.ltv
    cac = kpis.cac
    steps: list[str] = []

    if health.ltv_cac_health is HealthTier.BAD:
        if ltv <= 0 and margin <= 0:
            steps.append(
                f"<strong>Prioridad 1:</strong> Modelo insostenible. Margen unitario "
                f"negativo o nulo ({format_amount(margin)}). Aumenta precio por encima "
                f"de {format_amount(inputs.cost_per_unit)} o reduce costes variables"
            )
        elif ltv <= 0:
            steps.append(
                f"<strong>Prioridad 1:</strong> Aumenta la retención de clientes por "
                f"encima de {math.ceil(cac / margin)} meses para que el LTV cubra el CAC"
            )
        elif cac > ltv:
            target = max(1, math.floor(ltv * 0.8))
            steps.append(
                f"<strong>Prioridad 1:</strong> Reduce CAC de {format_amount(cac)} a "
                f"máximo {format_amount(target)} mediante marketing orgánico o mejores "
                f"conversiones"
            )
        elif cac > margin:
            target = max(1, math.floor(margin * 0.9))
            steps.append(
                f"<strong>Prioridad 1:</strong> Reduce CAC de {format_amount(cac)} a "
                f"máximo {format_amount(target)} para que cada cliente sea rentable "
                f"(CAC debe ser < margen {format_amount(margin)})"
            )
        else:
            target = max(1, math.floor(ltv / 3))
            steps.append(
                f"<strong>Prioridad 1:</strong> Reduce CAC de {format_amount(cac)} a "
                f"máximo {format_amount(target)} para lograr ratio LTV/CAC saludable (3:1)"
            )

    if kpis.monthly_profit < 0:
        if cac <= margin:
            net_contribution = margin - cac
            if net_contribution > 0:
                sales = math.ceil(abs(kpis.monthly_profit) / net_contribution)
                steps.append(
                    f"<strong>Prioridad 2:</strong> Alcanza {sales} ventas "
                    f"adicionales/mes para ser rentable"
                )
            else:
                steps.append(
                    f"<strong>Prioridad 2:</strong> CAC igual al margen unitario. "
                    f"Reduce el CAC por debajo de "
                    f"{format_amount(math.floor(margin * 0.9))} para que las ventas "
                    f"sean rentables"
                )
        else:
            steps.append(
                f"<strong>Prioridad 2:</strong> Para la adquisición de clientes hasta "
                f"reducir el CAC. Cada cliente nuevo aumenta las pérdidas en "
                f"{format_amount(cac - margin)}/mes"
            )

    lifetime = inputs.average_customer_lifetime
    if lifetime < RETENTION_TARGET_MONTHS:
        target_lifetime = max(1, math.ceil(lifetime * RETENTION_GROWTH))
        ltv_gain = margin * (target_lifetime - lifetime)
        steps.append(
            f"<strong>Mejora retención:</strong> Aumentar duración del cliente de "
            f"{format_quantity(lifetime)} a {target_lifetime} meses sumaría "
            f"{format_amount(ltv_gain)} al LTV"
        )

    if not steps:
        return None
    return _rec(RecommendationType.NEXT_STEPS, TITLE_NEXT_STEPS,
                NEXT_STEPS_SEPARATOR.join(steps), RecommendationStatus.NEUTRAL)


# ── Public API ────────────────────────────────────────────────────────────────

def generate_recommendations(
    kpis: KPIResults,
    health: HealthClassification,
    inputs: FinancialInputs | Mapping[str, Any],
) -> list[Recommendation]:
    """Build the ordered advisory list for one calculation.

    Args:
        kpis:   Output of ``calculate_kpis``.
        health: Output of ``classify_health``.
        inputs: The raw inputs; normalized the same way the calculator does.

    Returns:
        Three or four ``Recommendation`` objects in fixed type order.
    """
    clean = normalize_inputs(inputs)
    kpis = _sanitize_kpis(kpis)

    recommendations = [
        _viability(kpis, health, clean),
        _acquisition(kpis, health),
    ]
    optimization = _optimization(kpis, health, clean)
    if optimization is not None:
        recommendations.append(optimization)
    next_steps = _next_steps(kpis, health, clean)
    if next_steps is not None:
        recommendations.append(next_steps)

    logger.debug(
        "Generated %d recommendations: %s",
        len(recommendations), ", ".join(r.type for r in recommendations),
    )
    return recommendations


# ── Helper ────────────────────────────────────────────────────────────────────

def _rec(
    rec_type: RecommendationType,
    title: str,
    message: str,
    status: RecommendationStatus,
) -> Recommendation:
    return Recommendation(type=rec_type, title=title, message=message, status=status)


def _sanitize_kpis(kpis: KPIResults) -> KPIResults:
    """Replace NaN/inf with 0 in every field the messages do arithmetic on.

    ``cac_ltv_ratio`` is only displayed indirectly and is left alone. An
    infinite ``break_even_months`` is kept because the optimization rule
    checks for it explicitly.
    """
    updates: dict[str, float] = {}
    for name in (
        "unit_margin", "monthly_revenue", "monthly_profit",
        "ltv", "cac", "break_even_units",
    ):
        if not math.isfinite(getattr(kpis, name)):
            updates[name] = 0.0
    if math.isnan(kpis.break_even_months):
        updates["break_even_months"] = 0.0
    return kpis.model_copy(update=updates) if updates else kpis
