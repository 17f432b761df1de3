"""
Persistence and file-export adapters for calculation results.

Storage rows
------------
Most storage engines cannot hold ``inf`` or ``NaN``. ``to_storage_row()``
flattens a ``CalculationResult`` into one dict of scalar columns and writes
``sentinel`` (default ``-1.0``) in place of every non-finite float. The
engine itself never does this; it is the caller's convention.

Files
-----
All ``export_*`` functions write to disk and return the written ``Path``.
They accept generic ``list[dict]`` data to stay decoupled from specific
result shapes.
"""

from __future__ import annotations

import csv
import json
import math
from pathlib import Path
from typing import Any

import pyarrow as pa
import pyarrow.parquet as pq

from leansim.models.financial import CalculationResult

DEFAULT_SENTINEL = -1.0

KPI_COLUMNS: tuple[str, ...] = (
    "unit_margin",
    "monthly_revenue",
    "monthly_profit",
    "ltv",
    "cac",
    "cac_ltv_ratio",
    "break_even_units",
    "break_even_months",
)


def storage_safe(value: float, sentinel: float = DEFAULT_SENTINEL) -> float:
    """Return ``value`` unchanged if finite, otherwise ``sentinel``."""
    return value if math.isfinite(value) else sentinel


def to_storage_row(
    result: CalculationResult,
    sentinel: float = DEFAULT_SENTINEL,
) -> dict[str, Any]:
    """Flatten ``result`` into storage columns with non-finite floats replaced.

    Columns: the eight KPI values, ``break_even_reachable``, the three health
    tiers (plain strings), ``recommendation_count``, ``calculated_at``
    (ISO-8601) and ``calculation_version``.
    """
    kpis = result.kpis
    row: dict[str, Any] = {
        name: storage_safe(getattr(kpis, name), sentinel) for name in KPI_COLUMNS
    }
    row["break_even_reachable"] = kpis.break_even_reachable
    row["profitability_health"] = str(result.health.profitability_health)
    row["ltv_cac_health"] = str(result.health.ltv_cac_health)
    row["overall_health"] = str(result.health.overall_health)
    row["recommendation_count"] = len(result.recommendations)
    row["calculated_at"] = result.calculated_at.isoformat()
    row["calculation_version"] = result.calculation_version
    return row


def result_to_json_dict(
    result: CalculationResult,
    sentinel: float = DEFAULT_SENTINEL,
) -> dict[str, Any]:
    """camelCase JSON-ready dict of ``result`` with non-finite KPIs replaced."""
    data = result.model_dump(mode="json", by_alias=True)
    data["kpis"] = {
        key: storage_safe(value, sentinel) if isinstance(value, float) else value
        for key, value in result.kpis.model_dump(by_alias=True).items()
    }
    return data


def export_result_json(
    result: CalculationResult,
    path: Path,
    sentinel: float = DEFAULT_SENTINEL,
) -> Path:
    """Write one result as pretty-printed camelCase JSON."""
    return export_to_json(result_to_json_dict(result, sentinel), path)


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` to a pretty-printed UTF-8 JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(data, indent=2, ensure_ascii=False, default=str),
        encoding="utf-8",
    )
    return path


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_parquet(records: list[dict], path: Path) -> Path:
    """Write ``records`` to a Parquet file (schema inferred from the rows)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    table = pa.Table.from_pylist(records)
    pq.write_table(table, path)
    return path


def export_records(records: list[dict], path: Path) -> Path:
    """Dispatch on ``path`` suffix: ``.csv``, ``.json`` or ``.parquet``.

    Raises:
        ValueError: For any other suffix.
    """
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return export_to_csv(records, path)
    if suffix == ".json":
        return export_to_json(records, path)
    if suffix == ".parquet":
        return export_to_parquet(records, path)
    raise ValueError(f"Unsupported export format '{suffix}'. Use .csv, .json or .parquet.")
