"""
Centralized Logging

Architectural Intent:
- Diagnostics go to stderr; command results stay on stdout
- Deployment context travels on records through ``extra=`` and is rendered
  by both formatters, so a JSON consumer can filter on app id or outcome
- Level comes from --verbose/--debug or the configured log_level
"""

import json
import logging
import sys
from datetime import datetime, UTC

# Record attributes set by the orchestration layer, in rendering order
CONTEXT_FIELDS = ("app_id", "deployment", "outcome", "elapsed_seconds")

HUMAN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def deployment_context(record: logging.LogRecord) -> dict:
    """Return the context fields present on ``record``."""
    return {
        name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record, context fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **deployment_context(record),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ContextFormatter(logging.Formatter):
    """Human-readable lines with context appended as key=value pairs."""

    def __init__(self, fmt: str = HUMAN_FORMAT) -> None:
        super().__init__(fmt)

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        pairs = [
            f"{name}={_render(value)}"
            for name, value in deployment_context(record).items()
        ]
        return " ".join([line, *pairs]) if pairs else line


def _render(value) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def resolve_level(name: str, default: int = logging.WARNING) -> int:
    """Map a level name such as 'debug' to its logging constant."""
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else default


def configure_logging(
    level: int = logging.INFO,
    json_format: bool = False,
) -> None:
    """Route the "ferry" logger hierarchy to a single stderr handler.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, etc.)
        json_format: If True, use JSON structured output. Otherwise human-readable.
    """
    root = logging.getLogger("ferry")
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if json_format else ContextFormatter())
    root.addHandler(handler)
