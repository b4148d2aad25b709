"""
Template Transformer Service

Architectural Intent:
- Substitutes ${NAME} placeholders in a descriptor with resolved parameters
- Strict mode fails on the first unresolved placeholder; lenient mode leaves
  it verbatim and reports it so the caller can warn
- Produces a ResolvedDescriptor only; routing to submission or to a dry-run
  preview is decided by the caller
"""

from __future__ import annotations
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from ferry.domain.exceptions import FileReadError, MissingParameterError

PLACEHOLDER_RE = re.compile(r"\$\{([^${}\s]+)\}")


@dataclass(frozen=True)
class ResolvedDescriptor:
    source: str
    text: str
    unresolved: tuple[str, ...] = ()


def find_placeholders(text: str) -> tuple[str, ...]:
    """Placeholder names in document order, without duplicates."""
    return tuple(dict.fromkeys(PLACEHOLDER_RE.findall(text)))


def substitute(
    text: str, parameters: Mapping[str, str], error_on_missing_params: bool = True
) -> tuple[str, tuple[str, ...]]:
    missing = tuple(n for n in find_placeholders(text) if n not in parameters)
    if missing and error_on_missing_params:
        raise MissingParameterError(missing[0], missing)

    def _replace(match: re.Match) -> str:
        return parameters.get(match.group(1), match.group(0))

    return PLACEHOLDER_RE.sub(_replace, text), missing


class TemplateTransformer:
    def transform_text(
        self,
        text: str,
        parameters: Mapping[str, str],
        error_on_missing_params: bool = True,
        source: str = "<string>",
    ) -> ResolvedDescriptor:
        resolved, missing = substitute(text, parameters, error_on_missing_params)
        return ResolvedDescriptor(source=source, text=resolved, unresolved=missing)

    def transform(
        self,
        descriptor_path: str,
        parameters: Mapping[str, str],
        error_on_missing_params: bool = True,
    ) -> ResolvedDescriptor:
        try:
            text = Path(descriptor_path).read_text()
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(
                descriptor_path, getattr(e, "strerror", None) or str(e)
            ) from e
        return self.transform_text(
            text, parameters, error_on_missing_params, source=descriptor_path
        )
