"""
Parameter Resolver Service

Architectural Intent:
- Builds the ParameterSet used for descriptor substitution
- Merges sources in increasing precedence: base values (template context),
  parameter file entries, explicit key=value flags
- Resolution completes before any template substitution is attempted

Domain Logic:
- Parameter files are newline separated KEY=VALUE entries
- Lines without '=' are skipped; the value is everything after the first '='
- Duplicate keys: the last assignment wins
"""

from __future__ import annotations
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Optional

from ferry.domain.exceptions import FileReadError
from ferry.domain.value_objects.parameter_set import ParameterSet

logger = logging.getLogger(__name__)


def parse_params(lines: Iterable[str]) -> dict[str, str]:
    """Parse KEY=VALUE entries, ignoring anything without an '='."""
    params: dict[str, str] = {}
    for line in lines:
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        params[key] = value
    return params


def parse_params_file(path: str) -> dict[str, str]:
    try:
        data = Path(path).read_text()
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(path, getattr(e, "strerror", None) or str(e)) from e
    return parse_params(data.splitlines())


class ParameterResolver:
    def resolve(
        self,
        params_file: Optional[str] = None,
        explicit_params: Iterable[str] = (),
        base: Optional[Mapping[str, str]] = None,
    ) -> ParameterSet:
        parameters = ParameterSet(base)

        if params_file:
            file_params = parse_params_file(params_file)
            logger.debug("Loaded %d parameter(s) from %s", len(file_params), params_file)
            parameters = parameters.merged(file_params)

        explicit = parse_params(explicit_params)
        if explicit:
            parameters = parameters.merged(explicit)

        return parameters
