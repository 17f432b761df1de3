"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local overrides (gitignored)
  4. Environment variables        — ``LEANSIM_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The calculation engine does not read configuration; its thresholds are
fixed. Config covers the edges around it: input limits, storage sentinel,
export location and logging.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class EngineConfig(BaseModel):
    """Conventions for persisting calculation results."""

    model_config = ConfigDict(frozen=True)

    storage_sentinel: float = -1.0


class ValidationConfig(BaseModel):
    """Hard limits applied to user-submitted financial inputs."""

    model_config = ConfigDict(frozen=True)

    max_price: float = 1_000_000
    max_fixed_costs: float = 10_000_000
    max_cac: float = 100_000
    max_customers: float = 1_000_000
    min_lifetime: float = 0.1
    max_lifetime: float = 120

    @model_validator(mode="after")
    def validate_limits(self) -> "ValidationConfig":
        for name in ("max_price", "max_fixed_costs", "max_cac", "max_customers", "max_lifetime"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}.")
        if not 0 < self.min_lifetime <= self.max_lifetime:
            raise ValueError(
                f"min_lifetime must be in (0, max_lifetime], got {self.min_lifetime}."
            )
        return self


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class ExportConfig(BaseModel):
    """Where CLI exports are written when no explicit path is given."""

    model_config = ConfigDict(frozen=True)

    output_dir: str = "data/outputs"


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    engine: EngineConfig = EngineConfig()
    validation: ValidationConfig = ValidationConfig()
    logging: LoggingConfig = LoggingConfig()
    export: ExportConfig = ExportConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``; when that default file is
            absent (e.g. an installed wheel) built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicitly given ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    load_dotenv(dotenv_path=root / ".env", override=False)

    explicit = config_path is not None
    if config_path is None:
        config_path = root / "config" / "default.toml"
    config_path = Path(config_path)

    raw: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)

        local_config_path = config_path.parent / "local.toml"
        if local_config_path.exists():
            with open(local_config_path, "rb") as f:
                raw = _deep_merge(raw, tomllib.load(f))
    elif explicit:
        raise FileNotFoundError(f"Config file not found: {config_path}")

    raw = _apply_env_overrides(raw)
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply LEANSIM_* env vars to the raw config dict.

    Supported overrides:
      LEANSIM_LOG_LEVEL         → raw["logging"]["level"]
      LEANSIM_STORAGE_SENTINEL  → raw["engine"]["storage_sentinel"]
      LEANSIM_DEBUG             → raw["debug"]
    """
    if log_level := os.environ.get("LEANSIM_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if sentinel := os.environ.get("LEANSIM_STORAGE_SENTINEL"):
        raw.setdefault("engine", {})["storage_sentinel"] = sentinel

    if debug := os.environ.get("LEANSIM_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        engine=EngineConfig(**raw.get("engine", {})),
        validation=ValidationConfig(**raw.get("validation", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        export=ExportConfig(**raw.get("export", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
