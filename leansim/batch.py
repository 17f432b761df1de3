"""
Batch evaluation of many input scenarios from a CSV file.

Format: comma delimited, with a header row. Required columns (either
spelling is accepted):

  average_price              / averagePrice
  cost_per_unit              / costPerUnit
  fixed_costs                / fixedCosts
  customer_acquisition_cost  / customerAcquisitionCost
  monthly_new_customers      / monthlyNewCustomers
  average_customer_lifetime  / averageCustomerLifetime

Optional column: ``name`` (defaults to ``scenario-<row number>``).

Cells are not validated: anything unreadable or negative is treated as 0
by the engine, exactly as for a single calculation. Use
``leansim.validation`` first when input comes from people.

Each output row is the scenario name, its six inputs as given, and the
storage columns from ``to_storage_row``.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Any

from pydantic.alias_generators import to_camel

from leansim.financial.engine import Clock, calculate_financial_metrics
from leansim.models.financial import INPUT_FIELDS
from leansim.reporting.export import DEFAULT_SENTINEL, to_storage_row
from leansim.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

_CAMEL_TO_SNAKE: dict[str, str] = {to_camel(name): name for name in INPUT_FIELDS}


def _canonical_column(column: str) -> str:
    column = column.strip()
    return _CAMEL_TO_SNAKE.get(column, column)


def read_scenarios_csv(path: Path) -> list[dict[str, Any]]:
    """Read scenario rows keyed by snake_case input names plus ``name``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the header is missing or lacks a required column.
    """
    if not path.exists():
        raise FileNotFoundError(f"Scenario CSV file not found: {path}")

    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise ValueError(f"CSV file is empty or has no header row: {path}")

        actual_cols = {_canonical_column(c) for c in reader.fieldnames}
        missing = set(INPUT_FIELDS) - actual_cols
        if missing:
            raise ValueError(
                f"CSV missing required columns: {sorted(missing)}\n"
                f"Found columns: {sorted(actual_cols)}"
            )

        scenarios: list[dict[str, Any]] = []
        for row_num, row in enumerate(reader, start=1):
            scenario = {_canonical_column(k): v for k, v in row.items() if k is not None}
            scenario["name"] = (scenario.get("name") or "").strip() or f"scenario-{row_num}"
            scenarios.append(scenario)

    logger.info("Read %d scenario(s) from %s", len(scenarios), path)
    return scenarios


def evaluate_scenarios(
    scenarios: list[dict[str, Any]],
    sentinel: float = DEFAULT_SENTINEL,
    clock: Clock = utcnow,
) -> list[dict[str, Any]]:
    """Run the engine on every scenario and return flat output rows."""
    rows: list[dict[str, Any]] = []
    for scenario in scenarios:
        inputs = {name: scenario.get(name) for name in INPUT_FIELDS}
        result = calculate_financial_metrics(inputs, clock=clock)
        row: dict[str, Any] = {"name": scenario.get("name", "")}
        row.update(inputs)
        row.update(to_storage_row(result, sentinel))
        rows.append(row)
        logger.debug(
            "Scenario %s: %s",
            row["name"], result.health.overall_health,
            extra={"scenario": row["name"], "overall_health": str(result.health.overall_health)},
        )
    return rows


def evaluate_scenarios_csv(
    path: Path,
    sentinel: float = DEFAULT_SENTINEL,
    clock: Clock = utcnow,
) -> list[dict[str, Any]]:
    """Read ``path`` and evaluate every scenario in it."""
    return evaluate_scenarios(read_scenarios_csv(path), sentinel=sentinel, clock=clock)
