"""
LeanSim — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Run the calculation.
  5. Report result to stdout.

Install and run::

    pip install -e .
    leansim --help
    leansim calculate --average-price 100 --cost-per-unit 50 --fixed-costs 1000 \\
        --cac 25 --monthly-new-customers 50 --customer-lifetime 12
    leansim project --initial-investment 5000 --monthly-expenses 1000 \\
        --monthly-revenue 800 --growth-rate 0.05 --months 24
    leansim explain ltvCacRatio
    leansim explain --inputs costPerUnit
    leansim batch --input scenarios.csv --output results.parquet
    leansim validate-config
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="leansim",
    help="LeanSim — unit economics and advisory recommendations for a Lean Canvas.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from pydantic import ValidationError

    from leansim.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except (ValidationError, ValueError) as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from leansim.utils.logging import configure_logging
    configure_logging(config.logging)


def _echo_validation_errors(exc) -> None:
    typer.echo(f"[ERROR] {exc.error_count()} input(s) failed validation:", err=True)
    for err in exc.errors():
        field = ".".join(str(p) for p in err["loc"])
        typer.echo(f"  {field}: {err['msg']}", err=True)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("calculate")
def calculate(
    average_price: float = typer.Option(..., "--average-price", help="Selling price per unit."),
    cost_per_unit: float = typer.Option(..., "--cost-per-unit", help="Variable cost per unit."),
    fixed_costs: float = typer.Option(..., "--fixed-costs", help="Monthly fixed costs."),
    cac: float = typer.Option(..., "--cac", help="Customer acquisition cost."),
    monthly_new_customers: float = typer.Option(
        ..., "--monthly-new-customers", help="New customers per month."
    ),
    customer_lifetime: float = typer.Option(
        ..., "--customer-lifetime", help="Average customer lifetime in months."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Reject inputs outside the configured limits instead of warning.",
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Also write the result as JSON to this path."
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file."
    ),
) -> None:
    """Calculate KPIs, health tiers and recommendations for one business model."""
    from pydantic import ValidationError

    from leansim.financial.engine import calculate_financial_metrics
    from leansim.models.financial import FinancialInputs
    from leansim.reporting.export import export_result_json, result_to_json_dict
    from leansim.reporting.formatters import (
        format_calculation_report,
        format_validation_issues,
    )
    from leansim.validation.financial_inputs import check_business_rules, validate_submission

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    raw = {
        "average_price": average_price,
        "cost_per_unit": cost_per_unit,
        "fixed_costs": fixed_costs,
        "customer_acquisition_cost": cac,
        "monthly_new_customers": monthly_new_customers,
        "average_customer_lifetime": customer_lifetime,
    }

    if strict:
        try:
            submission, issues = validate_submission(raw, config.validation)
        except ValidationError as exc:
            _echo_validation_errors(exc)
            raise typer.Exit(code=1)
        inputs = submission.to_financial_inputs()
    else:
        inputs = FinancialInputs(**raw)
        issues = check_business_rules(inputs)

    result = calculate_financial_metrics(inputs)
    sentinel = config.engine.storage_sentinel

    if as_json:
        typer.echo(json.dumps(
            result_to_json_dict(result, sentinel), indent=2, ensure_ascii=False
        ))
    else:
        if issues:
            typer.echo(format_validation_issues(issues))
        typer.echo(format_calculation_report(result))

    if output:
        written = export_result_json(result, Path(output), sentinel)
        typer.echo(f"[OK] Result written to {written}", err=as_json)


@app.command("project")
def project(
    initial_investment: float = typer.Option(..., "--initial-investment"),
    monthly_expenses: float = typer.Option(..., "--monthly-expenses"),
    monthly_revenue: float = typer.Option(
        ..., "--monthly-revenue", help="Average revenue in the first month."
    ),
    growth_rate: float = typer.Option(
        0.0, "--growth-rate", help="Monthly revenue growth, e.g. 0.05 for 5%."
    ),
    months: int = typer.Option(12, "--months", help="Timeframe in months."),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file."
    ),
) -> None:
    """Project monthly cash flow and find the break-even month."""
    from pydantic import ValidationError

    from leansim.financial.projection import ProjectionParams, calculate_projection
    from leansim.reporting.formatters import format_projection_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        params = ProjectionParams(
            initial_investment=initial_investment,
            monthly_expenses=monthly_expenses,
            avg_monthly_revenue=monthly_revenue,
            growth_rate_monthly=growth_rate,
            timeframe_months=months,
        )
    except ValidationError as exc:
        _echo_validation_errors(exc)
        raise typer.Exit(code=1)

    typer.echo(format_projection_table(calculate_projection(params)))


@app.command("explain")
def explain(
    key: Optional[str] = typer.Argument(
        None,
        help="Metric key (unitMargin, ltvCacRatio, ...) or input field (costPerUnit, ...).",
    ),
    inputs: bool = typer.Option(
        False, "--inputs", help="Explain input fields instead of result metrics."
    ),
) -> None:
    """Show plain-language help for a metric or input field, or list the keys."""
    from leansim.content.inputs_help import get_input_help, list_input_keys
    from leansim.content.metrics_help import get_metric_help, list_metric_keys
    from leansim.reporting.formatters import format_input_help, format_metric_help

    if key is None:
        typer.echo("Available input fields:" if inputs else "Available metrics:")
        for name in (list_input_keys() if inputs else list_metric_keys()):
            typer.echo(f"  {name}")
        return

    # Input field names never collide with metric keys.
    if not inputs and key in list_metric_keys():
        typer.echo(format_metric_help(key, get_metric_help(key)))
        return

    try:
        entry = get_input_help(key)
    except KeyError as exc:
        if inputs:
            typer.echo(f"[ERROR] {exc.args[0]}", err=True)
        else:
            typer.echo(
                f"[ERROR] Unknown metric '{key}'. Valid: {', '.join(list_metric_keys())}"
                f" (or an input field: {', '.join(list_input_keys())})",
                err=True,
            )
        raise typer.Exit(code=1)

    typer.echo(format_input_help(key, entry))


@app.command("batch")
def batch(
    input_file: str = typer.Option(
        ..., "--input", "-i", help="CSV file with one scenario per row."
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help=(
            "Output file (.csv, .json or .parquet). "
            "Defaults to <export.output_dir>/<input stem>_results.csv."
        ),
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file."
    ),
) -> None:
    """Evaluate every scenario in a CSV file and export the results."""
    from leansim.batch import evaluate_scenarios_csv
    from leansim.reporting.export import export_records

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    input_path = Path(input_file)
    try:
        rows = evaluate_scenarios_csv(input_path, sentinel=config.engine.storage_sentinel)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    out_path = (
        Path(output)
        if output
        else Path(config.export.output_dir) / f"{input_path.stem}_results.csv"
    )
    try:
        written = export_records(rows, out_path)
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    counts: dict[str, int] = {}
    for row in rows:
        counts[row["overall_health"]] = counts.get(row["overall_health"], 0) + 1
    summary = ", ".join(f"{tier}={n}" for tier, n in sorted(counts.items()))

    typer.echo(f"  Evaluated {len(rows)} scenario(s). Overall health: {summary or 'n/a'}")
    typer.echo(f"[OK] Results written to {written}")


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Storage sentinel: {config.engine.storage_sentinel}")
    typer.echo(f"  Max price:        {config.validation.max_price:.0f}")
    typer.echo(f"  Max lifetime:     {config.validation.max_lifetime:.0f} months")
    typer.echo(f"  Export dir:       {config.export.output_dir}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
