"""
Deployment Submitter

Architectural Intent:
- Decides between create and update for a resolved descriptor
- Always attempts a create first; an "already exists" collision is resolved
  by an ordered policy derived from the submission options
- One orchestrator call per policy step, no local retries

Conflict Policy (evaluated in order):
- force unset              -> FAIL (AlreadyExistsError with remediation hint)
- force + stop-deploys     -> STOP_EXISTING, then UPDATE (forced past the lock)
- force                    -> UPDATE
"""

from __future__ import annotations
import logging
from contextlib import nullcontext
from enum import Enum, auto
from typing import Any, Optional

from ferry.domain.entities.application import Application, normalize_app_id
from ferry.domain.exceptions import AlreadyExistsError, DescriptorFormatError
from ferry.domain.ports.orchestrator_port import OrchestratorPort
from ferry.domain.ports.telemetry_port import TelemetryPort
from ferry.domain.value_objects.deployment_handle import DeploymentHandle
from ferry.domain.value_objects.submission_options import SubmissionOptions

logger = logging.getLogger(__name__)


class ConflictStep(Enum):
    FAIL = auto()
    STOP_EXISTING = auto()
    UPDATE = auto()


def plan_conflict_resolution(options: SubmissionOptions) -> tuple[ConflictStep, ...]:
    if not options.force:
        return (ConflictStep.FAIL,)
    if options.stop_existing_deploy:
        return (ConflictStep.STOP_EXISTING, ConflictStep.UPDATE)
    return (ConflictStep.UPDATE,)


class DeploymentSubmitter:
    def __init__(
        self,
        orchestrator: OrchestratorPort,
        telemetry: Optional[TelemetryPort] = None,
    ):
        self.orchestrator = orchestrator
        self.telemetry = telemetry

    async def submit(
        self, payload: dict[str, Any], options: SubmissionOptions
    ) -> Application:
        app_id = self._app_id(payload)

        with self._span("ferry.submit", app_id):
            try:
                application = await self.orchestrator.create_application(payload)
            except AlreadyExistsError as e:
                logger.info(
                    "Application %s already exists",
                    app_id,
                    extra={"app_id": app_id, "outcome": "conflict"},
                )
                application = await self._resolve_conflict(app_id, payload, options, e)
            else:
                logger.info(
                    "Created application %s",
                    application.id,
                    extra={"app_id": application.id, "outcome": "created"},
                )
                self._record("create", app_id, "success")
        return application

    async def update(
        self, app_id: str, payload: dict[str, Any], force: bool = False
    ) -> Application:
        """Route a descriptor or patch straight to the update path."""
        application = await self.orchestrator.update_application(
            app_id, payload, force=force
        )
        logger.info(
            "Updated application %s",
            application.id,
            extra={"app_id": application.id, "outcome": "updated"},
        )
        self._record("update", app_id, "success")
        return application

    async def stop_existing_deployments(
        self, app_id: str
    ) -> tuple[DeploymentHandle, ...]:
        app_id = normalize_app_id(app_id)
        active = await self.orchestrator.list_deployments()
        stopped = []
        for handle, affected in active.items():
            if app_id in affected:
                logger.warning(
                    "Cancelling in-flight deployment %s for %s",
                    handle,
                    app_id,
                    extra={
                        "app_id": app_id,
                        "deployment": str(handle),
                        "outcome": "cancelled",
                    },
                )
                await self.orchestrator.cancel_deployment(handle)
                stopped.append(handle)
        return tuple(stopped)

    async def _resolve_conflict(
        self,
        app_id: str,
        payload: dict[str, Any],
        options: SubmissionOptions,
        conflict: AlreadyExistsError,
    ) -> Application:
        application = None
        stopped = False
        for step in plan_conflict_resolution(options):
            if step is ConflictStep.FAIL:
                self._record("create", app_id, "exists")
                raise conflict
            if step is ConflictStep.STOP_EXISTING:
                await self.stop_existing_deployments(app_id)
                stopped = True
            elif step is ConflictStep.UPDATE:
                application = await self.update(app_id, payload, force=stopped)
        return application

    def _span(self, name: str, app_id: str):
        if self.telemetry:
            return self.telemetry.span(name, {"app_id": app_id})
        return nullcontext()

    def _record(self, action: str, app_id: str, outcome: str) -> None:
        if self.telemetry:
            self.telemetry.record_submission(action, app_id, outcome)

    @staticmethod
    def _app_id(payload: dict[str, Any]) -> str:
        app_id = payload.get("id") if isinstance(payload, dict) else None
        if not isinstance(app_id, str) or not app_id.strip():
            raise DescriptorFormatError("payload", "missing application 'id'")
        return normalize_app_id(app_id)
