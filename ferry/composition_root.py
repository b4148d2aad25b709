"""
Composition Root

Architectural Intent:
- Dependency injection composition root for the Ferry application
- Single place where all adapters and use cases are wired together
- No adapter instantiation should occur outside this module

Design Decisions:
- Uses a simple dataclass container instead of a DI framework
- Factory function creates and wires all dependencies from a FerryConfig
"""

from dataclasses import dataclass
from typing import Optional

from ferry.application.orchestration.deployment_submitter import DeploymentSubmitter
from ferry.application.orchestration.deployment_waiter import DeploymentWaiter
from ferry.application.use_cases.deploy_application import DeployApplication
from ferry.application.use_cases.manage_application import (
    DestroyApplication,
    RestartApplication,
    ScaleApplication,
)
from ferry.application.use_cases.query_applications import QueryApplications
from ferry.application.use_cases.rollback_application import RollbackApplication
from ferry.application.use_cases.update_application_resource import (
    UpdateApplicationResource,
)
from ferry.domain.exceptions import ConfigurationError
from ferry.domain.services.rollback_resolver import RollbackResolver
from ferry.infrastructure.adapters.file_descriptor_adapter import FileDescriptorAdapter
from ferry.infrastructure.adapters.marathon_adapter import MarathonAdapter
from ferry.infrastructure.config import FerryConfig
from ferry.infrastructure.telemetry.otel_exporter import OTELExporter, create_exporter


@dataclass
class FerryContainer:
    """DI container holding all wired dependencies."""

    config: FerryConfig
    marathon_adapter: MarathonAdapter
    descriptor_adapter: FileDescriptorAdapter
    telemetry: OTELExporter
    submitter: DeploymentSubmitter
    waiter: DeploymentWaiter
    deploy_application: DeployApplication
    update_resource: UpdateApplicationResource
    rollback: RollbackApplication
    scale: ScaleApplication
    restart: RestartApplication
    destroy: DestroyApplication
    queries: QueryApplications


def create_container(config: Optional[FerryConfig] = None) -> FerryContainer:
    """Create and wire all dependencies."""
    config = config or FerryConfig()

    marathon_adapter = MarathonAdapter(
        url=config.marathon.url,
        username=config.marathon.username,
        password=config.marathon.password,
        timeout=config.marathon.request_timeout_seconds,
    )
    descriptor_adapter = FileDescriptorAdapter()
    try:
        telemetry = create_exporter(
            endpoint=config.telemetry.endpoint, insecure=config.telemetry.insecure
        )
    except ValueError as e:
        raise ConfigurationError(f"telemetry.endpoint: {e}") from e

    submitter = DeploymentSubmitter(marathon_adapter, telemetry)
    waiter = DeploymentWaiter(
        marathon_adapter,
        poll_interval=config.wait.poll_interval_seconds,
        default_timeout=config.wait.default_timeout_seconds,
        telemetry=telemetry,
    )

    return FerryContainer(
        config=config,
        marathon_adapter=marathon_adapter,
        descriptor_adapter=descriptor_adapter,
        telemetry=telemetry,
        submitter=submitter,
        waiter=waiter,
        deploy_application=DeployApplication(descriptor_adapter, submitter, waiter),
        update_resource=UpdateApplicationResource(submitter, waiter),
        rollback=RollbackApplication(
            RollbackResolver(marathon_adapter), submitter, waiter
        ),
        scale=ScaleApplication(marathon_adapter, waiter),
        restart=RestartApplication(marathon_adapter, waiter),
        destroy=DestroyApplication(marathon_adapter, waiter),
        queries=QueryApplications(marathon_adapter),
    )
