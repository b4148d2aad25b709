"""
Domain Services Package

Architectural Intent:
- Contains the pure decision logic of the deployment workflow
- Parameter resolution, descriptor templating, rollback target selection
"""

from ferry.domain.services.parameter_resolver import (
    ParameterResolver,
    parse_params,
    parse_params_file,
)
from ferry.domain.services.template_transformer import (
    TemplateTransformer,
    ResolvedDescriptor,
    find_placeholders,
    substitute,
)
from ferry.domain.services.rollback_resolver import RollbackResolver

__all__ = [
    "ParameterResolver",
    "parse_params",
    "parse_params_file",
    "TemplateTransformer",
    "ResolvedDescriptor",
    "find_placeholders",
    "substitute",
    "RollbackResolver",
]
