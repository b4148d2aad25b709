"""Global test configuration.

Provides an in-memory orchestrator and a fake clock so workflow tests can
run without a Marathon cluster or real time passing.
"""

from typing import Any, List, Optional

import pytest

from ferry.domain.entities.application import Application, normalize_app_id
from ferry.domain.exceptions import AlreadyExistsError, SubmissionError
from ferry.domain.ports.orchestrator_port import OrchestratorPort
from ferry.domain.value_objects.deployment_handle import DeploymentHandle
from ferry.domain.value_objects.version_history import VersionHistory


class FakeOrchestrator(OrchestratorPort):
    """Stateful stand-in for Marathon.

    Deployments stay active for ``polls_until_complete`` calls to
    list_deployments; None keeps them active forever.
    """

    def __init__(self, polls_until_complete: Optional[int] = 0) -> None:
        self.apps: dict[str, dict[str, Any]] = {}
        self.versions: dict[str, list[str]] = {}
        self.active: dict[DeploymentHandle, tuple[str, ...]] = {}
        self.calls: list[tuple[str, tuple]] = []
        self.polls_until_complete = polls_until_complete
        self._counter = 0

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def seed(self, payload: dict[str, Any], versions: tuple[str, ...] = ()) -> None:
        app_id = normalize_app_id(payload["id"])
        self.apps[app_id] = {**payload, "id": app_id}
        self.versions[app_id] = list(versions)

    def _deploy(self, app_id: str) -> DeploymentHandle:
        self._counter += 1
        handle = DeploymentHandle(f"dep-{self._counter}")
        self.active[handle] = (app_id,)
        return handle

    def _new_version(self, app_id: str) -> str:
        self._counter += 1
        version = f"2024-01-01T00:00:{self._counter:02d}.000Z"
        self.versions.setdefault(app_id, []).insert(0, version)
        self.apps[app_id]["version"] = version
        return version

    def _require(self, app_id: str) -> dict[str, Any]:
        if app_id not in self.apps:
            raise SubmissionError(f"App '{app_id}' does not exist", status=404)
        return self.apps[app_id]

    def _with_deployments(self, app_id: str) -> Application:
        handles = [{"id": str(h)} for h, apps in self.active.items() if app_id in apps]
        return Application.from_dict({**self.apps[app_id], "deployments": handles})

    async def create_application(self, payload: dict[str, Any]) -> Application:
        app_id = normalize_app_id(payload["id"])
        self.calls.append(("create_application", (app_id,)))
        if app_id in self.apps:
            raise AlreadyExistsError(app_id)
        self.apps[app_id] = {**payload, "id": app_id}
        self._new_version(app_id)
        self._deploy(app_id)
        return self._with_deployments(app_id)

    async def update_application(
        self, app_id: str, payload: dict[str, Any], force: bool = False
    ) -> Application:
        app_id = normalize_app_id(app_id)
        self.calls.append(("update_application", (app_id, dict(payload), force)))
        app = self._require(app_id)
        changes = {k: v for k, v in payload.items() if k not in ("id", "version")}
        if "version" in payload:
            if payload["version"] not in self.versions.get(app_id, []):
                raise SubmissionError(
                    f"Version {payload['version']} of {app_id} not found", status=404
                )
        app.update(changes)
        self._new_version(app_id)
        handle = self._deploy(app_id)
        return self._with_deployments(app_id).with_deployment(handle)

    async def get_application(self, app_id: str) -> Application:
        self.calls.append(("get_application", (app_id,)))
        self._require(app_id)
        return self._with_deployments(app_id)

    async def list_applications(
        self, filter_expr: Optional[str] = None
    ) -> List[Application]:
        self.calls.append(("list_applications", (filter_expr,)))
        return [self._with_deployments(app_id) for app_id in sorted(self.apps)]

    async def list_versions(self, app_id: str) -> VersionHistory:
        self.calls.append(("list_versions", (app_id,)))
        return VersionHistory(app_id, tuple(self.versions.get(app_id, [])))

    async def scale_application(self, app_id: str, instances: int) -> DeploymentHandle:
        self.calls.append(("scale_application", (app_id, instances)))
        self._require(app_id)["instances"] = instances
        return self._deploy(app_id)

    async def restart_application(
        self, app_id: str, force: bool = False
    ) -> DeploymentHandle:
        self.calls.append(("restart_application", (app_id, force)))
        self._require(app_id)
        return self._deploy(app_id)

    async def destroy_application(self, app_id: str) -> DeploymentHandle:
        self.calls.append(("destroy_application", (app_id,)))
        self._require(app_id)
        del self.apps[app_id]
        return self._deploy(app_id)

    async def list_deployments(self) -> dict[DeploymentHandle, tuple[str, ...]]:
        self.calls.append(("list_deployments", ()))
        if self.polls_until_complete is not None:
            if self.polls_until_complete <= 0:
                self.active.clear()
            else:
                self.polls_until_complete -= 1
        return dict(self.active)

    async def cancel_deployment(self, handle: DeploymentHandle) -> None:
        self.calls.append(("cancel_deployment", (handle,)))
        self.active.pop(handle, None)


class FakeClock:
    """Monotonic clock advanced only by the injected sleep."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_orchestrator():
    return FakeOrchestrator()


@pytest.fixture
def fake_clock():
    return FakeClock()
