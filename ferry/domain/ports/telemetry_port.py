"""
Telemetry Port

Architectural Intent:
- Protocol for recording workflow metrics and spans
- Implemented by OTELExporter; use cases accept None to skip telemetry
"""

from __future__ import annotations
from contextlib import AbstractContextManager
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class TelemetryPort(Protocol):
    """Port for deployment workflow telemetry."""

    def record_submission(self, action: str, app_id: str, outcome: str) -> None:
        ...

    def record_wait(self, outcome: str, duration_ms: float, handles: int) -> None:
        ...

    def span(
        self, name: str, attributes: Optional[dict[str, str]] = None
    ) -> AbstractContextManager[Any]:
        ...
