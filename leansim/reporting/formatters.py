"""
ASCII terminal formatters for CLI commands.

All formatters accept engine results (or plain records) and return plain
multi-line strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Display conventions
-------------------
- Money goes through ``format_euro`` (``1.250€``, symbol after the number).
- The engine stores CAC/LTV; readers expect LTV/CAC, so
  ``format_ltv_cac_display()`` inverts it. A stored ratio of 0 means free
  acquisition and a non-finite one means LTV <= 0.
- Break-even figures of 0 are shown as "not reachable" when the KPIs say
  break-even cannot be reached.
- Recommendation messages carry ``<strong>`` / ``<br>`` markup; it is
  stripped here and paragraphs become separate wrapped blocks.
"""

from __future__ import annotations

import math
import re
import textwrap

from leansim.content.inputs_help import InputFieldHelp
from leansim.content.metrics_help import MetricHelp
from leansim.financial.projection import ProjectionResult
from leansim.models.financial import CalculationResult, KPIResults
from leansim.utils.number_format import format_euro, format_fixed, format_quantity
from leansim.validation.financial_inputs import ValidationIssue

_BREAK_RE = re.compile(r"(?:<br\s*/?>)+", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_WRAP_WIDTH = 88


# ── Small helpers ─────────────────────────────────────────────────────────────


def format_ltv_cac_display(cac_ltv_ratio: float) -> str:
    """Return the conventional LTV/CAC ratio for display.

    >>> format_ltv_cac_display(0.25)
    '4.0:1'
    """
    if cac_ltv_ratio == 0:
        return "Perfecto (CAC gratuito)"
    if not math.isfinite(cac_ltv_ratio) or cac_ltv_ratio < 0:
        return "Insostenible"
    return f"{format_fixed(1 / cac_ltv_ratio, 1)}:1"


def strip_markup(message: str) -> list[str]:
    """Split a recommendation message into plain-text paragraphs."""
    paragraphs = _BREAK_RE.split(message)
    return [_TAG_RE.sub("", p).strip() for p in paragraphs if p.strip()]


def _break_even_text(value: float, reachable: bool, unit: str) -> str:
    if not reachable:
        return "no alcanzable"
    return f"{format_quantity(round(value, 1))} {unit}"


# ── Calculation report ────────────────────────────────────────────────────────


def format_kpi_table(kpis: KPIResults) -> str:
    """Two-column KPI listing."""
    rows = [
        ("Unit margin",        format_euro(kpis.unit_margin)),
        ("Monthly revenue",    format_euro(kpis.monthly_revenue)),
        ("Monthly profit",     format_euro(kpis.monthly_profit)),
        ("LTV",                format_euro(kpis.ltv)),
        ("CAC",                format_euro(kpis.cac)),
        ("LTV/CAC",            format_ltv_cac_display(kpis.cac_ltv_ratio)),
        ("Break-even units",   _break_even_text(
            kpis.break_even_units, kpis.break_even_reachable, "units/month")),
        ("Break-even time",    _break_even_text(
            kpis.break_even_months, kpis.break_even_reachable, "months")),
    ]
    width = max(len(label) for label, _ in rows)
    return "\n".join(f"  {label:<{width}}  {value}" for label, value in rows)


def format_calculation_report(result: CalculationResult) -> str:
    """Render a full calculation result for the terminal.

    Layout::

        === Unit Economics ===
          Calculated at: 2025-01-01T00:00:00+00:00 (v1.0)

          Unit margin       50€
          ...

        === Health ===
          Profitability  GOOD
          ...

        === Recommendations ===
          [POSITIVE] Viabilidad económica
            Tu modelo genera un beneficio del 5.0% ...
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Unit Economics ===")
    lines.append(
        f"  Calculated at: {result.calculated_at.isoformat()} "
        f"(v{result.calculation_version})"
    )
    lines.append("")
    lines.append(format_kpi_table(result.kpis))

    health = result.health
    lines.append("")
    lines.append("=== Health ===")
    lines.append(f"  Profitability  {health.profitability_health.upper()}")
    lines.append(f"  LTV/CAC        {health.ltv_cac_health.upper()}")
    lines.append(f"  Overall        {health.overall_health.upper()}")

    lines.append("")
    lines.append("=== Recommendations ===")
    for rec in result.recommendations:
        lines.append(f"  [{rec.status.upper()}] {rec.title}")
        for paragraph in strip_markup(rec.message):
            lines.append(textwrap.fill(
                paragraph,
                width=_WRAP_WIDTH,
                initial_indent="    ",
                subsequent_indent="    ",
            ))
        lines.append("")

    return "\n".join(lines)


def format_validation_issues(issues: list[ValidationIssue]) -> str:
    """One ``[WARN]`` line per business-rule issue; empty string when none."""
    return "\n".join(f"  [WARN] {issue.field}: {issue.message}" for issue in issues)


# ── Projection ────────────────────────────────────────────────────────────────


def format_projection_table(projection: ProjectionResult) -> str:
    """Month-by-month projection followed by the summary block."""
    lines: list[str] = []
    lines.append("")
    lines.append("=== Cash-flow Projection ===")
    header = (
        f"  {'Month':>5}  {'Revenue':>12}  {'Expenses':>12}  "
        f"{'Cash flow':>12}  {'Cumulative':>12}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for row in projection.monthly_data:
        lines.append(
            f"  {row.month:>5}  {format_euro(row.revenue):>12}  "
            f"{format_euro(row.expenses):>12}  {format_euro(row.cashflow):>12}  "
            f"{format_euro(row.cumulative_cashflow):>12}"
        )

    summary = projection.summary
    break_even = (
        f"month {summary.break_even_month}"
        if summary.break_even_month is not None
        else "not within timeframe"
    )
    lines.append("")
    lines.append(f"  Total revenue:   {format_euro(summary.total_revenue)}")
    lines.append(f"  Total expenses:  {format_euro(summary.total_expenses)}")
    lines.append(f"  Profit:          {format_euro(summary.profit)}")
    lines.append(f"  ROI:             {summary.roi:.1%}")
    lines.append(f"  Break-even:      {break_even}")
    return "\n".join(lines)


# ── Metric help ───────────────────────────────────────────────────────────────


def format_metric_help(key: str, entry: MetricHelp) -> str:
    """Render one help entry."""
    lines = [
        "",
        f"=== {entry.label} ({key}) ===",
        textwrap.fill(entry.description, width=_WRAP_WIDTH,
                      initial_indent="  ", subsequent_indent="  "),
        "",
        "  Ejemplo:",
        textwrap.fill(entry.example, width=_WRAP_WIDTH,
                      initial_indent="    ", subsequent_indent="    "),
        "",
        "  Consejos:",
    ]
    lines.extend(f"    - {tip}" for tip in entry.tips)
    lines.append("")
    lines.append(f"  [GOOD]    {entry.interpretation.good}")
    lines.append(f"  [WARNING] {entry.interpretation.warning}")
    lines.append(f"  [BAD]     {entry.interpretation.bad}")
    return "\n".join(lines)


def format_input_help(key: str, entry: InputFieldHelp) -> str:
    """Render help for one input field."""
    lines = [
        "",
        f"=== {entry.label} ({key}) ===",
        textwrap.fill(entry.description, width=_WRAP_WIDTH,
                      initial_indent="  ", subsequent_indent="  "),
        f"  Valor de referencia: {entry.placeholder}",
        "",
        "  Ejemplo:",
        textwrap.fill(entry.example, width=_WRAP_WIDTH,
                      initial_indent="    ", subsequent_indent="    "),
        "",
        "  Consejos:",
    ]
    lines.extend(f"    - {tip}" for tip in entry.tips)
    return "\n".join(lines)
