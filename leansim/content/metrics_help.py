"""
Plain-language help for each headline metric.

Static Spanish content shown next to results: a label, what the metric
means, a worked example, practical tips, and how to read a good / warning /
bad value. Keys match the camelCase names used by the web front end.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MetricInterpretation:
    good: str
    warning: str
    bad: str


@dataclass(frozen=True)
class MetricHelp:
    """Help entry for one metric."""

    label: str
    description: str
    example: str
    tips: tuple[str, ...]
    interpretation: MetricInterpretation


FINANCIAL_METRICS_HELP: dict[str, MetricHelp] = {
    "unitMargin": MetricHelp(
        label="Margen unitario",
        description=(
            "Es la ganancia que obtienes por cada producto o servicio vendido. Se "
            "calcula restando los costes variables del precio de venta. Un margen "
            "positivo significa que cada venta te da beneficio directo."
        ),
        example=(
            "Vendes un curso por 50€ y te cuesta 15€ producir y entregarlo. Tu "
            "margen unitario es 35€: por cada curso vendido ganas 35€ antes de "
            "pagar costes fijos."
        ),
        tips=(
            "Un margen alto te da más flexibilidad para crecer",
            "Si es negativo, pierdes dinero con cada venta",
            "Considera subir precios o reducir costes variables",
            "Compara con competidores de tu sector",
        ),
        interpretation=MetricInterpretation(
            good="Margen alto permite reinvertir en crecimiento",
            warning="Margen justo, optimiza costes o precios",
            bad="Margen insuficiente o negativo, revisa modelo de negocio",
        ),
    ),
    "monthlyProfit": MetricHelp(
        label="Beneficio mensual",
        description=(
            "Es el dinero que realmente te queda cada mes después de pagar todos "
            "los gastos: materiales, costes fijos, marketing y salarios. Si es "
            "positivo, tu negocio es rentable."
        ),
        example=(
            "Vendes 5.000€ al mes, gastas 2.000€ en materiales y marketing, y "
            "2.500€ en costes fijos. Tu beneficio mensual es 500€."
        ),
        tips=(
            "Si es negativo, necesitas vender más o reducir gastos",
            "Un beneficio constante indica un negocio sostenible",
            "Reinvierte parte del beneficio para crecer más rápido",
            "Guarda una reserva para meses más difíciles",
        ),
        interpretation=MetricInterpretation(
            good="Negocio rentable y sostenible",
            warning="Rentabilidad ajustada, optimiza operaciones",
            bad="Pérdidas mensuales, necesitas cambios urgentes",
        ),
    ),
    "ltv": MetricHelp(
        label="LTV - Valor del cliente",
        description=(
            "Es el margen total que un cliente te deja durante todo el tiempo que "
            "está contigo. Se calcula multiplicando el margen por cliente por los "
            "meses que suele durar como cliente."
        ),
        example=(
            "Un cliente te deja un margen de 20€/mes y suele estar contigo 8 meses. "
            "Su LTV es 160€."
        ),
        tips=(
            "Un LTV alto justifica invertir más en conseguir clientes",
            "Mejora la experiencia para que los clientes duren más",
            "Ofrece productos adicionales para aumentar el valor",
            "Mide la duración real de tus clientes regularmente",
        ),
        interpretation=MetricInterpretation(
            good="Alto valor por cliente permite crecer de forma sostenible",
            warning="Valor moderado, busca formas de aumentar la retención",
            bad="Valor bajo, mejora la propuesta de valor o la retención",
        ),
    ),
    "ltvCacRatio": MetricHelp(
        label="Ratio LTV/CAC",
        description=(
            "Compara cuánto vale un cliente (LTV) con cuánto cuesta conseguirlo "
            "(CAC). Un ratio de 3:1 significa que cada euro invertido en conseguir "
            "clientes te devuelve 3 euros."
        ),
        example=(
            "Si tu LTV es 150€ y gastas 30€ en conseguir cada cliente, tu ratio es "
            "5:1, una excelente inversión."
        ),
        tips=(
            "Ratio ideal: mayor a 3:1 para negocio sostenible",
            "Ratio 1:1 significa que no ganas dinero con nuevos clientes",
            "Si es menor a 1:1, pierdes dinero con cada cliente nuevo",
            "Mejora el ratio reduciendo CAC o aumentando LTV",
        ),
        interpretation=MetricInterpretation(
            good="Excelente retorno de la inversión en marketing",
            warning="Retorno justo, optimiza marketing o retención",
            bad="Inversión en marketing no es rentable",
        ),
    ),
    "breakEven": MetricHelp(
        label="Punto de equilibrio",
        description=(
            "Es la cantidad de ventas que necesitas para cubrir todos tus costes "
            "fijos mensuales. A partir de ese punto, cada venta adicional es "
            "beneficio."
        ),
        example=(
            "Tus costes fijos son 2.000€/mes y tu margen por venta es 25€. "
            "Necesitas vender 80 unidades para llegar al punto de equilibrio."
        ),
        tips=(
            "Un punto de equilibrio bajo te da más seguridad",
            "Si tardas muchos meses en alcanzarlo, revisa tus costes",
            "Reduce costes fijos o aumenta márgenes para mejorarlo",
            "Es tu objetivo mínimo de ventas cada mes",
        ),
        interpretation=MetricInterpretation(
            good="Punto de equilibrio alcanzable, negocio viable",
            warning="Punto de equilibrio alto, requiere esfuerzo sostenido",
            bad="Punto de equilibrio muy alto, revisa estructura de costes",
        ),
    ),
}


def list_metric_keys() -> list[str]:
    """Return the metric keys with help content, in display order."""
    return list(FINANCIAL_METRICS_HELP)


def get_metric_help(key: str) -> MetricHelp:
    """Look up help for ``key``.

    Raises:
        KeyError: If ``key`` has no help entry; the message lists valid keys.
    """
    try:
        return FINANCIAL_METRICS_HELP[key]
    except KeyError:
        raise KeyError(
            f"Unknown metric '{key}'. Valid: {', '.join(list_metric_keys())}"
        ) from None
