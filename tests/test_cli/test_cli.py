"""
Tests for leansim/cli.py via typer's CliRunner.

What we test
------------
  - calculate: text report, --json output, --strict rejection, warnings,
    --output file.
  - project: table and invalid parameters.
  - explain: key listing, one metric, unknown metric, input field help.
  - batch: CSV in, Parquet out, summary line; missing input file.
  - validate-config: default file and a missing explicit path.
"""

from __future__ import annotations

import json
import logging

import pyarrow.parquet as pq
import pytest
from typer.testing import CliRunner

from leansim.cli import app

runner = CliRunner()

BASE_ARGS = [
    "calculate",
    "--average-price", "100",
    "--cost-per-unit", "50",
    "--fixed-costs", "1000",
    "--cac", "25",
    "--monthly-new-customers", "50",
    "--customer-lifetime", "12",
]


@pytest.fixture(autouse=True)
def _restore_logging(monkeypatch):
    """configure_logging replaces root handlers; put pytest's back afterwards."""
    for var in ("LEANSIM_LOG_LEVEL", "LEANSIM_STORAGE_SENTINEL", "LEANSIM_DEBUG"):
        monkeypatch.delenv(var, raising=False)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _args(**overrides) -> list[str]:
    args = list(BASE_ARGS)
    for flag, value in overrides.items():
        args[args.index(f"--{flag.replace('_', '-')}") + 1] = value
    return args


class TestCalculate:
    def test_text_report(self):
        result = runner.invoke(app, BASE_ARGS)
        assert result.exit_code == 0, result.output
        assert "=== Unit Economics ===" in result.output
        assert "Overall        GOOD" in result.output
        assert "[POSITIVE] Optimización del modelo" in result.output

    def test_json_output(self):
        result = runner.invoke(app, BASE_ARGS + ["--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["kpis"]["monthlyProfit"] == 250
        assert data["health"]["overallHealth"] == "good"
        assert len(data["recommendations"]) == 3

    def test_infinite_ratio_uses_sentinel_in_json(self):
        result = runner.invoke(app, _args(customer_lifetime="0") + ["--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["kpis"]["cacLtvRatio"] == -1.0

    def test_business_rule_warning(self):
        result = runner.invoke(app, _args(cost_per_unit="100"))
        assert result.exit_code == 0, result.output
        assert "[WARN] cost_per_unit" in result.output

    def test_strict_rejects_out_of_range(self):
        result = runner.invoke(app, _args(customer_lifetime="0") + ["--strict"])
        assert result.exit_code == 1
        assert "failed validation" in result.output
        assert "mayor a 0" in result.output

    def test_strict_accepts_valid(self):
        result = runner.invoke(app, BASE_ARGS + ["--strict"])
        assert result.exit_code == 0, result.output

    def test_output_file(self, tmp_path):
        out = tmp_path / "result.json"
        result = runner.invoke(app, BASE_ARGS + ["--output", str(out)])
        assert result.exit_code == 0, result.output
        assert "[OK] Result written to" in result.output
        assert json.loads(out.read_text(encoding="utf-8"))["calculationVersion"] == "1.0"


class TestProject:
    def test_table(self):
        result = runner.invoke(app, [
            "project", "--initial-investment", "3000", "--monthly-expenses", "1000",
            "--monthly-revenue", "2000", "--months", "6",
        ])
        assert result.exit_code == 0, result.output
        assert "Break-even:      month 3" in result.output

    def test_invalid_timeframe(self):
        result = runner.invoke(app, [
            "project", "--initial-investment", "0", "--monthly-expenses", "0",
            "--monthly-revenue", "0", "--months", "700",
        ])
        assert result.exit_code == 1
        assert "[ERROR]" in result.output


class TestExplain:
    def test_lists_keys(self):
        result = runner.invoke(app, ["explain"])
        assert result.exit_code == 0
        assert "ltvCacRatio" in result.output

    def test_one_metric(self):
        result = runner.invoke(app, ["explain", "breakEven"])
        assert result.exit_code == 0
        assert "(breakEven) ===" in result.output

    def test_unknown_metric(self):
        result = runner.invoke(app, ["explain", "churn"])
        assert result.exit_code == 1
        assert "Unknown metric 'churn'" in result.output

    def test_lists_input_fields(self):
        result = runner.invoke(app, ["explain", "--inputs"])
        assert result.exit_code == 0
        assert "Available input fields:" in result.output
        assert "averageCustomerLifetime" in result.output

    @pytest.mark.parametrize("args", [
        ["explain", "costPerUnit"],
        ["explain", "--inputs", "cost_per_unit"],
    ])
    def test_one_input_field(self, args):
        result = runner.invoke(app, args)
        assert result.exit_code == 0
        assert "=== Coste variable por cliente (€)" in result.output
        assert "Valor de referencia: ej: 12.50" in result.output

    def test_inputs_flag_rejects_metric_key(self):
        result = runner.invoke(app, ["explain", "--inputs", "ltv"])
        assert result.exit_code == 1
        assert "Unknown input field .ltv." in result.output


class TestBatch:
    def test_csv_to_parquet(self, tmp_path):
        src = tmp_path / "scenarios.csv"
        src.write_text(
            "name,averagePrice,costPerUnit,fixedCosts,customerAcquisitionCost,"
            "monthlyNewCustomers,averageCustomerLifetime\n"
            "healthy,100,50,1000,25,50,12\n"
            "critical,7,5,570,50,20,6\n",
            encoding="utf-8",
        )
        out = tmp_path / "results.parquet"
        result = runner.invoke(app, ["batch", "--input", str(src), "--output", str(out)])
        assert result.exit_code == 0, result.output
        assert "Evaluated 2 scenario(s). Overall health: bad=1, good=1" in result.output
        table = pq.read_table(out)
        assert table.column("name").to_pylist() == ["healthy", "critical"]

    def test_unsupported_output(self, tmp_path):
        src = tmp_path / "s.csv"
        src.write_text(
            "average_price,cost_per_unit,fixed_costs,customer_acquisition_cost,"
            "monthly_new_customers,average_customer_lifetime\n1,1,1,1,1,1\n",
            encoding="utf-8",
        )
        result = runner.invoke(app, ["batch", "-i", str(src), "-o", str(tmp_path / "r.xlsx")])
        assert result.exit_code == 1
        assert "Unsupported export format" in result.output

    def test_missing_input(self, tmp_path):
        result = runner.invoke(app, ["batch", "--input", str(tmp_path / "missing.csv")])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestValidateConfig:
    def test_default(self):
        result = runner.invoke(app, ["validate-config"])
        assert result.exit_code == 0, result.output
        assert "[OK] Config valid." in result.output

    def test_full(self):
        result = runner.invoke(app, ["validate-config", "--full"])
        assert result.exit_code == 0, result.output
        assert '"storage_sentinel": -1.0' in result.output

    def test_missing_explicit_path(self, tmp_path):
        result = runner.invoke(app, ["validate-config", "--config", str(tmp_path / "x.toml")])
        assert result.exit_code == 1
        assert "Config file not found" in result.output
