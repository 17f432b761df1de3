"""
Root logger setup for the ``leansim`` CLI.

``configure_logging`` runs once per command, after the config is loaded.
Library modules only call ``logging.getLogger(__name__)``.

Timestamps are UTC in both formats. With ``json_format = true`` each record
becomes one line such as::

    {"ts": "2025-03-01T12:00:00Z", "level": "DEBUG", "logger": "leansim.batch",
     "msg": "Scenario base: good", "scenario": "base", "overall_health": "good"}
"""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from leansim.config import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"
UTC_TIMESTAMP = "%Y-%m-%dT%H:%M:%SZ"

_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"message", "asctime"}


class _UtcFormatter(logging.Formatter):
    converter = time.gmtime


class _JsonFormatter(_UtcFormatter):
    """One JSON object per record; ``extra=`` fields sit beside ``msg``."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, UTC_TIMESTAMP),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(
            (key, value) for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


def _handlers(config: "LoggingConfig") -> Iterator[logging.Handler]:
    yield logging.StreamHandler(sys.stdout)
    if config.log_file:
        path = Path(config.log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        yield logging.FileHandler(path, encoding="utf-8")


def configure_logging(config: "LoggingConfig") -> None:
    """Point the root logger at stdout and, when configured, a log file."""
    level = logging.getLevelName(config.level.upper())
    if config.json_format:
        formatter: logging.Formatter = _JsonFormatter()
    else:
        formatter = _UtcFormatter(TEXT_FORMAT, datefmt=UTC_TIMESTAMP)

    handlers = list(_handlers(config))
    for handler in handlers:
        handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=handlers, force=True)

    logging.getLogger("pyarrow").setLevel(logging.WARNING)
