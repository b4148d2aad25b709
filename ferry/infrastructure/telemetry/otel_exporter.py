"""
OpenTelemetry Exporter for Ferry

Architectural Intent:
- Exports deployment workflow telemetry to OTLP-compatible backends
- Records submissions and wait durations, wraps submissions in spans
- Telemetry is off unless an endpoint is configured

Security:
- Endpoint defaults to empty string (must be explicitly configured)
- Non-localhost http:// endpoints rejected unless insecure=True
"""

from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional, Any, Iterator
from urllib.parse import urlparse
import logging
from datetime import datetime, UTC

logger = logging.getLogger(__name__)


@dataclass
class OTELConfig:
    endpoint: str = ""
    service_name: str = "ferry"
    environment: str = "development"
    enable_traces: bool = True
    enable_metrics: bool = True
    insecure: bool = False

    def __post_init__(self) -> None:
        if self.endpoint:
            parsed = urlparse(self.endpoint)
            is_localhost = parsed.hostname in ("localhost", "127.0.0.1", "::1")
            if parsed.scheme == "http" and not is_localhost and not self.insecure:
                raise ValueError(
                    f"Non-localhost HTTP endpoint '{self.endpoint}' requires "
                    "insecure=True or use https://. "
                    "Set insecure=True to explicitly allow plaintext export."
                )


class OTELExporter:
    """
    OpenTelemetry exporter for Ferry workflows.

    Metrics are buffered locally as well, so callers and tests can inspect
    what was recorded when no collector is configured.
    """

    def __init__(self, config: OTELConfig):
        self.config = config
        self._initialized = False
        self._metrics_buffer: list[dict[str, Any]] = []
        self._meter: Any = None
        self._tracer: Any = None
        self._instruments: dict[str, Any] = {}

    @property
    def enabled(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """Initialize OpenTelemetry SDK and exporters."""
        if not self.config.endpoint:
            logger.debug("OTEL endpoint not configured, telemetry disabled")
            return

        try:
            from opentelemetry import trace, metrics
            from opentelemetry.sdk.trace import TracerProvider
            from opentelemetry.sdk.trace.export import BatchSpanProcessor
            from opentelemetry.sdk.resources import Resource, SERVICE_NAME
            from opentelemetry.sdk.metrics import MeterProvider
            from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
                OTLPSpanExporter,
            )
            from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import (
                OTLPMetricExporter,
            )
        except ImportError:
            logger.warning("OpenTelemetry SDK not installed, telemetry disabled")
            return

        resource = Resource(
            attributes={
                SERVICE_NAME: self.config.service_name,
                "environment": self.config.environment,
            }
        )

        if self.config.enable_traces:
            provider = TracerProvider(resource=resource)
            provider.add_span_processor(
                BatchSpanProcessor(
                    OTLPSpanExporter(
                        endpoint=self.config.endpoint, insecure=self.config.insecure
                    )
                )
            )
            trace.set_tracer_provider(provider)
            self._tracer = trace.get_tracer(__name__)

        if self.config.enable_metrics:
            reader = PeriodicExportingMetricReader(
                OTLPMetricExporter(
                    endpoint=self.config.endpoint, insecure=self.config.insecure
                )
            )
            metrics.set_meter_provider(
                MeterProvider(resource=resource, metric_readers=[reader])
            )
            self._meter = metrics.get_meter(__name__)

        self._initialized = True

    def _counter(self, name: str, unit: str = "") -> Any:
        if name not in self._instruments and self._meter:
            self._instruments[name] = self._meter.create_counter(name, unit=unit)
        return self._instruments.get(name)

    def _histogram(self, name: str, unit: str = "") -> Any:
        if name not in self._instruments and self._meter:
            self._instruments[name] = self._meter.create_histogram(name, unit=unit)
        return self._instruments.get(name)

    def _buffer(self, name: str, value: float, unit: str, attributes: dict) -> None:
        self._metrics_buffer.append(
            {
                "name": name,
                "value": value,
                "unit": unit,
                "attributes": attributes,
                "timestamp": datetime.now(UTC).isoformat(),
            }
        )

    def record_submission(self, action: str, app_id: str, outcome: str) -> None:
        attributes = {"action": action, "app_id": app_id, "outcome": outcome}
        self._buffer("ferry.submission", 1.0, "", attributes)
        counter = self._counter("ferry.submission")
        if counter:
            counter.add(1, attributes=attributes)

    def record_wait(self, outcome: str, duration_ms: float, handles: int) -> None:
        attributes = {"outcome": outcome, "handles": str(handles)}
        self._buffer("ferry.wait.duration_ms", duration_ms, "ms", attributes)
        histogram = self._histogram("ferry.wait.duration_ms", "ms")
        if histogram:
            histogram.record(duration_ms, attributes=attributes)

    @contextmanager
    def span(
        self, name: str, attributes: Optional[dict[str, str]] = None
    ) -> Iterator[Any]:
        """Trace a block; yields None when tracing is disabled."""
        if not self._tracer:
            yield None
            return
        with self._tracer.start_as_current_span(
            name, attributes=attributes or {}
        ) as span:
            yield span


def create_exporter(
    endpoint: Optional[str] = None,
    service_name: str = "ferry",
    insecure: bool = False,
) -> OTELExporter:
    """Factory function to create and initialize an OTEL exporter."""
    config = OTELConfig(
        endpoint=endpoint or "",
        service_name=service_name,
        insecure=insecure,
    )
    exporter = OTELExporter(config)
    exporter.initialize()
    return exporter
