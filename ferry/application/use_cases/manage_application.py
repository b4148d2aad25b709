"""
Application Lifecycle Use Cases

Architectural Intent:
- Scale, restart and destroy an application
- Each call returns the DeploymentHandle the orchestrator started and only
  waits on it when explicitly asked
"""

from typing import Optional, Union

from ferry.application.dtos.deployment_dtos import (
    DeploymentResponse,
    parse_instance_count,
)
from ferry.application.orchestration.deployment_waiter import DeploymentWaiter
from ferry.domain.entities.application import normalize_app_id
from ferry.domain.ports.orchestrator_port import OrchestratorPort
from ferry.domain.value_objects.deployment_handle import DeploymentHandle


class _LifecycleUseCase:
    def __init__(self, orchestrator: OrchestratorPort, waiter: DeploymentWaiter):
        self.orchestrator = orchestrator
        self.waiter = waiter

    async def _respond(
        self, handle: DeploymentHandle, wait: bool, timeout: Optional[float]
    ) -> DeploymentResponse:
        result = None
        if wait:
            result = await self.waiter.wait_for_completion(handle, timeout)
        return DeploymentResponse(handle=handle, wait=result)


class ScaleApplication(_LifecycleUseCase):
    async def execute(
        self,
        app_id: str,
        instances: Union[str, int],
        wait: bool = False,
        timeout: Optional[float] = None,
    ) -> DeploymentResponse:
        count = parse_instance_count(instances)
        handle = await self.orchestrator.scale_application(
            normalize_app_id(app_id), count
        )
        return await self._respond(handle, wait, timeout)


class RestartApplication(_LifecycleUseCase):
    async def execute(
        self,
        app_id: str,
        force: bool = False,
        wait: bool = False,
        timeout: Optional[float] = None,
    ) -> DeploymentResponse:
        handle = await self.orchestrator.restart_application(
            normalize_app_id(app_id), force=force
        )
        return await self._respond(handle, wait, timeout)


class DestroyApplication(_LifecycleUseCase):
    async def execute(
        self,
        app_id: str,
        wait: bool = False,
        timeout: Optional[float] = None,
    ) -> DeploymentResponse:
        handle = await self.orchestrator.destroy_application(normalize_app_id(app_id))
        return await self._respond(handle, wait, timeout)
