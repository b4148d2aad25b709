"""
Argument Types

Architectural Intent:
- Typed conversions for command-line values
- Conversion failures become argparse errors (exit status 2) before any
  use case runs
"""

import argparse
import math
import re
from typing import Optional

from ferry.domain.exceptions import UsageError

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_UNIT_SECONDS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: str) -> Optional[float]:
    """Parse '90s', '2m', '1h30m' or bare seconds. Zero means 'use the default'."""
    text = value.strip().lower()
    if not text:
        raise UsageError("Duration cannot be empty")

    try:
        seconds = float(text)
    except ValueError:
        seconds = 0.0
        pos = 0
        for match in _DURATION_PART_RE.finditer(text):
            if match.start() != pos:
                break
            seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
            pos = match.end()
        if pos == 0 or pos != len(text):
            raise UsageError(f"Invalid duration '{value}' (eg. 90s, 2m, 1h30m)")

    if not math.isfinite(seconds) or seconds < 0:
        raise UsageError(f"Invalid duration '{value}'")
    return seconds or None


def duration_arg(value: str) -> Optional[float]:
    try:
        return parse_duration(value)
    except UsageError as e:
        raise argparse.ArgumentTypeError(e.message)


def param_arg(value: str) -> str:
    """A -p token must look like KEY=VALUE."""
    if "=" not in value:
        raise argparse.ArgumentTypeError(
            f"invalid parameter '{value}', expected KEY=VALUE"
        )
    return value
