"""
Update Application Resource Use Case

Architectural Intent:
- Sets CPU shares, memory or instance count on a running application
- The value is validated before any orchestrator call is made
- Always an update, never a create
"""

from ferry.application.dtos.deployment_dtos import (
    ApplicationResponse,
    ResourceField,
    UpdateResourceRequest,
)
from ferry.application.orchestration.deployment_submitter import DeploymentSubmitter
from ferry.application.orchestration.deployment_waiter import DeploymentWaiter
from ferry.domain.entities.application import Application


class UpdateApplicationResource:
    def __init__(self, submitter: DeploymentSubmitter, waiter: DeploymentWaiter):
        self.submitter = submitter
        self.waiter = waiter

    async def execute(self, request: UpdateResourceRequest) -> ApplicationResponse:
        value = request.parsed_value()

        patch = Application.patch(request.app_id)
        if request.field is ResourceField.CPU:
            patch = patch.with_cpus(value)
        elif request.field is ResourceField.MEMORY:
            patch = patch.with_memory(value)
        else:
            patch = patch.with_instances(value)

        application = await self.submitter.update(patch.id, patch.to_payload())

        wait = None
        if request.wait:
            wait = await self.waiter.wait_for_all(
                application.deployments, request.timeout
            )
        return ApplicationResponse(application=application, wait=wait)
