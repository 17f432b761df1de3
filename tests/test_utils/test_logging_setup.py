"""
Tests for leansim/utils/logging.py.

What we test
------------
  - configure_logging() sets the root level and adds a file handler.
  - Text lines carry a UTC timestamp, level, logger and message.
  - JSON format emits one object per line, keeping ``extra=`` fields such as
    the per-scenario fields logged by the batch runner.
"""

from __future__ import annotations

import json
import logging
import re

import pytest

from leansim.batch import evaluate_scenarios
from leansim.config import LoggingConfig
from leansim.utils.logging import _JsonFormatter, configure_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def _log_lines(path) -> list[str]:
    for handler in logging.getLogger().handlers:
        handler.flush()
    return path.read_text(encoding="utf-8").strip().splitlines()


class TestConfigureLogging:
    def test_level_and_file(self, tmp_path):
        log_file = tmp_path / "logs" / "leansim.log"
        configure_logging(LoggingConfig(level="WARNING", log_file=str(log_file)))
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert any(isinstance(h, logging.FileHandler) for h in root.handlers)

        logging.getLogger("leansim.test").info("skipped")
        logging.getLogger("leansim.test").warning("disk check")
        lines = _log_lines(log_file)
        assert len(lines) == 1
        assert re.fullmatch(
            r"\d{4}-\d\d-\d\dT\d\d:\d\d:\d\dZ WARNING leansim.test \| disk check", lines[0]
        )

    def test_json_lines(self, tmp_path):
        log_file = tmp_path / "leansim.jsonl"
        configure_logging(LoggingConfig(level="INFO", log_file=str(log_file), json_format=True))
        logging.getLogger("leansim.test").info("scenario done", extra={"scenario": "base"})
        payload = json.loads(_log_lines(log_file)[-1])
        assert payload["level"] == "INFO"
        assert payload["logger"] == "leansim.test"
        assert payload["msg"] == "scenario done"
        assert payload["scenario"] == "base"
        assert payload["ts"].endswith("Z")

    def test_batch_scenario_fields(self, tmp_path, base_inputs, fixed_clock):
        log_file = tmp_path / "batch.jsonl"
        configure_logging(LoggingConfig(level="DEBUG", log_file=str(log_file), json_format=True))
        scenario = base_inputs.model_dump()
        scenario["name"] = "base"
        evaluate_scenarios([scenario], clock=fixed_clock)

        payloads = [json.loads(line) for line in _log_lines(log_file)]
        batch = [p for p in payloads if p["logger"] == "leansim.batch"]
        assert batch[-1]["scenario"] == "base"
        assert batch[-1]["overall_health"] == "good"


class TestJsonFormatter:
    def test_plain_record(self):
        record = logging.LogRecord("leansim.x", logging.ERROR, __file__, 1, "failed %s", ("twice",), None)
        payload = json.loads(_JsonFormatter().format(record))
        assert payload["msg"] == "failed twice"
        assert payload["level"] == "ERROR"
        assert "exc" not in payload
