"""
Deployment DTOs

Architectural Intent:
- Data Transfer Objects for deployment use case boundaries
- Input validation at the application boundary
- Numeric arguments are parsed here so bad input fails before any network call
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from ferry.domain.entities.application import Application
from ferry.domain.exceptions import InvalidArgumentError
from ferry.domain.value_objects.deployment_handle import DeploymentHandle
from ferry.domain.value_objects.submission_options import SubmissionOptions
from ferry.domain.value_objects.wait_result import WaitResult


class ResourceField(Enum):
    CPU = "cpu"
    MEMORY = "mem"
    INSTANCES = "instances"


def parse_float_value(value: Union[str, float], what: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Invalid {what} value '{value}': expected a number")
    if not math.isfinite(number) or number < 0:
        raise InvalidArgumentError(
            f"Invalid {what} value '{value}': expected a non-negative number"
        )
    return number


def parse_instance_count(value: Union[str, int]) -> int:
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Invalid instance count '{value}'")
    try:
        count = int(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(
            f"Invalid instance count '{value}': expected a whole number"
        )
    if count < 0:
        raise InvalidArgumentError(
            f"Invalid instance count '{value}': cannot be negative"
        )
    return count


@dataclass(frozen=True)
class CreateApplicationRequest:
    descriptor_path: str
    options: SubmissionOptions = field(default_factory=SubmissionOptions)
    params_file: Optional[str] = None
    params: tuple[str, ...] = ()
    template_context_path: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.descriptor_path:
            raise ValueError("descriptor_path cannot be empty")


@dataclass(frozen=True)
class CreateApplicationResponse:
    application: Optional[Application] = None
    descriptor_text: str = ""
    dry_run: bool = False
    unresolved_params: tuple[str, ...] = ()
    wait: Optional[WaitResult] = None


@dataclass(frozen=True)
class UpdateResourceRequest:
    app_id: str
    field: ResourceField
    value: Union[str, int, float]
    wait: bool = False
    timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if not self.app_id:
            raise ValueError("app_id cannot be empty")

    def parsed_value(self) -> Union[int, float]:
        if self.field is ResourceField.INSTANCES:
            return parse_instance_count(self.value)
        what = "CPU shares" if self.field is ResourceField.CPU else "memory (MB)"
        return parse_float_value(self.value, what)


@dataclass(frozen=True)
class RollbackRequest:
    app_id: str
    version: Optional[str] = None
    wait: bool = False
    timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if not self.app_id:
            raise ValueError("app_id cannot be empty")


@dataclass(frozen=True)
class ApplicationResponse:
    application: Application
    wait: Optional[WaitResult] = None


@dataclass(frozen=True)
class DeploymentResponse:
    handle: DeploymentHandle
    wait: Optional[WaitResult] = None
