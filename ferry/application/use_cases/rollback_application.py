"""
Rollback Application Use Case

Architectural Intent:
- Reverts an application to an explicit or the previous version
- Applied as an update patch on the version field; force and stop-deploy
  policies never apply to a rollback
"""

from ferry.application.dtos.deployment_dtos import ApplicationResponse, RollbackRequest
from ferry.application.orchestration.deployment_submitter import DeploymentSubmitter
from ferry.application.orchestration.deployment_waiter import DeploymentWaiter
from ferry.domain.entities.application import Application
from ferry.domain.services.rollback_resolver import RollbackResolver


class RollbackApplication:
    def __init__(
        self,
        resolver: RollbackResolver,
        submitter: DeploymentSubmitter,
        waiter: DeploymentWaiter,
    ):
        self.resolver = resolver
        self.submitter = submitter
        self.waiter = waiter

    async def execute(self, request: RollbackRequest) -> ApplicationResponse:
        patch = Application.patch(request.app_id)
        version = await self.resolver.resolve_rollback_target(patch.id, request.version)
        patch = patch.with_version(version)

        application = await self.submitter.update(patch.id, patch.to_payload())

        wait = None
        if request.wait:
            wait = await self.waiter.wait_for_all(
                application.deployments, request.timeout
            )
        return ApplicationResponse(application=application, wait=wait)
