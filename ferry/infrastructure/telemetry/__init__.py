"""
Ferry Telemetry Infrastructure

Architectural Intent:
- OpenTelemetry integration for deployment workflow observability
- Metrics and traces export over OTLP
"""

from ferry.infrastructure.telemetry.otel_exporter import (
    OTELExporter,
    OTELConfig,
    create_exporter,
)

__all__ = [
    "OTELExporter",
    "OTELConfig",
    "create_exporter",
]
