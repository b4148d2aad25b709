"""
Configuration Module

Architectural Intent:
- Centralized configuration loading from a JSON file
- Provides typed access to all Ferry settings
- Falls back to sensible defaults when config file is absent
- Environment variables override file-based config; CLI flags override both

Design Decisions:
- Config is a frozen dataclass for immutability after load
- Nested config sections map to sub-dataclasses
- String values from the environment are coerced by field type
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
import dataclasses
from pathlib import Path
from typing import Optional
import json
import logging
import math
import os

from ferry.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_TRUE = ("true", "1", "yes")
_FALSE = ("false", "0", "no")


def _require_positive(section_config, section: str, *names: str) -> None:
    for name in names:
        value = getattr(section_config, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            valid = False
        else:
            valid = math.isfinite(value) and value > 0
        if not valid:
            raise ConfigurationError(
                f"{section}.{name} must be a positive number, got {value!r}"
            )


@dataclass(frozen=True)
class MarathonConfig:
    """Orchestrator endpoint configuration."""
    url: str = "http://localhost:8080"
    username: str = ""
    password: str = ""
    request_timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        _require_positive(self, "marathon", "request_timeout_seconds")


@dataclass(frozen=True)
class WaitConfig:
    """Deployment waiter configuration."""
    poll_interval_seconds: float = 2.0
    default_timeout_seconds: float = 80.0

    def __post_init__(self) -> None:
        _require_positive(self, "wait", "poll_interval_seconds", "default_timeout_seconds")


@dataclass(frozen=True)
class TemplateConfig:
    """Descriptor templating configuration."""
    context_path: str = "template-context.json"


@dataclass(frozen=True)
class TelemetryConfig:
    """OpenTelemetry configuration."""
    endpoint: str = ""
    insecure: bool = False


@dataclass(frozen=True)
class FerryConfig:
    """Root configuration for the Ferry application."""
    marathon: MarathonConfig = field(default_factory=MarathonConfig)
    wait: WaitConfig = field(default_factory=WaitConfig)
    template: TemplateConfig = field(default_factory=TemplateConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)
    log_level: str = "WARNING"

    def with_marathon_url(self, url: Optional[str]) -> "FerryConfig":
        if not url:
            return self
        return replace(self, marathon=replace(self.marathon, url=url))


def _env_override(data: dict, prefix: str = "FERRY") -> dict:
    """Override config values with environment variables.

    Environment variables follow the pattern FERRY_SECTION_KEY.
    For example: FERRY_MARATHON_URL=http://marathon:8080, FERRY_LOG_LEVEL=DEBUG
    """
    sections = {f.name for f in dataclasses.fields(FerryConfig)}
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}_"):
            continue
        name = key[len(prefix) + 1:].lower()
        parts = name.split("_", 1)
        if len(parts) == 2 and parts[0] in sections:
            section, field_name = parts
            if not isinstance(data.get(section), dict):
                data[section] = {}
            data[section][field_name] = value
        else:
            data[name] = value
    return data


def _parse_config_file(path: Path) -> dict:
    """Parse a JSON config file. Returns empty dict on failure."""
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.debug("Config file not found: %s", path)
        return {}
    except json.JSONDecodeError as e:
        logger.warning("Invalid config file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Invalid config file %s: expected a JSON object", path)
        return {}
    return data


def _build_sub_config(cls, data: dict):
    """Build a sub-config dataclass from a dict, ignoring unknown keys.

    String values are converted to the declared field type; a value that does
    not convert raises ConfigurationError.
    """
    if not isinstance(data, dict):
        return cls()
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}
    section = cls.__name__.removesuffix("Config").lower()

    for f in dataclasses.fields(cls):
        if f.name not in filtered or not isinstance(filtered[f.name], str):
            continue
        val = filtered[f.name]
        if f.type == "float":
            try:
                filtered[f.name] = float(val)
            except ValueError:
                raise ConfigurationError(
                    f"{section}.{f.name} expects a number, got {val!r}"
                ) from None
        elif f.type == "bool":
            if val.lower() not in _TRUE + _FALSE:
                raise ConfigurationError(
                    f"{section}.{f.name} expects true or false, got {val!r}"
                )
            filtered[f.name] = val.lower() in _TRUE

    return cls(**filtered)


def load_config(
    path: Optional[str] = None,
    env_prefix: str = "FERRY",
) -> FerryConfig:
    """Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (FERRY_SECTION_KEY)
    2. Config file values
    3. Defaults

    Args:
        path: Path to config file (JSON). Defaults to ferry.json in CWD.
        env_prefix: Environment variable prefix. Defaults to FERRY.
    """
    config_path = Path(path) if path else Path("ferry.json")
    data = _parse_config_file(config_path)
    data = _env_override(data, env_prefix)

    return FerryConfig(
        marathon=_build_sub_config(MarathonConfig, data.get("marathon", {})),
        wait=_build_sub_config(WaitConfig, data.get("wait", {})),
        template=_build_sub_config(TemplateConfig, data.get("template", {})),
        telemetry=_build_sub_config(TelemetryConfig, data.get("telemetry", {})),
        log_level=str(data.get("log_level", "WARNING")).upper(),
    )
