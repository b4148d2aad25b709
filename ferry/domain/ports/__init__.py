"""
Domain Ports Package

Architectural Intent:
- Contains port interfaces (abstract contracts) for external dependencies
- Ports define what the domain needs, adapters implement how
- Follows Hexagonal Architecture principles
"""

from ferry.domain.ports.descriptor_port import DescriptorPort
from ferry.domain.ports.orchestrator_port import OrchestratorPort
from ferry.domain.ports.telemetry_port import TelemetryPort

__all__ = [
    "DescriptorPort",
    "OrchestratorPort",
    "TelemetryPort",
]
