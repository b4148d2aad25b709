"""
Orchestrator Port

Architectural Intent:
- Port interface for the cluster orchestrator's application API
- The workflow engine depends only on this contract
- Implemented by MarathonAdapter; tests use an in-memory fake
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional
from ferry.domain.entities.application import Application
from ferry.domain.value_objects.deployment_handle import DeploymentHandle
from ferry.domain.value_objects.version_history import VersionHistory


class OrchestratorPort(ABC):
    """
    Port interface for the cluster orchestrator.
    """

    @abstractmethod
    async def create_application(self, payload: dict[str, Any]) -> Application:
        """
        Creates an application from a descriptor payload.
        Raises AlreadyExistsError if the id is taken.
        """
        pass

    @abstractmethod
    async def update_application(
        self, app_id: str, payload: dict[str, Any], force: bool = False
    ) -> Application:
        """
        Applies a full descriptor or a partial patch to an existing application.
        ``force`` overrides a deployment currently locking the application.
        """
        pass

    @abstractmethod
    async def get_application(self, app_id: str) -> Application:
        pass

    @abstractmethod
    async def list_applications(
        self, filter_expr: Optional[str] = None
    ) -> List[Application]:
        pass

    @abstractmethod
    async def list_versions(self, app_id: str) -> VersionHistory:
        """
        Lists deployed versions, most recent first.
        """
        pass

    @abstractmethod
    async def scale_application(
        self, app_id: str, instances: int
    ) -> DeploymentHandle:
        pass

    @abstractmethod
    async def restart_application(
        self, app_id: str, force: bool = False
    ) -> DeploymentHandle:
        pass

    @abstractmethod
    async def destroy_application(self, app_id: str) -> DeploymentHandle:
        pass

    @abstractmethod
    async def list_deployments(self) -> dict[DeploymentHandle, tuple[str, ...]]:
        """
        Returns the active deployments mapped to the application ids they affect.
        """
        pass

    @abstractmethod
    async def cancel_deployment(self, handle: DeploymentHandle) -> None:
        pass
