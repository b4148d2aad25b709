"""
Marathon Adapter

Architectural Intent:
- Infrastructure adapter implementing OrchestratorPort against Marathon's REST API
- Uses stdlib urllib for the HTTP layer, run in the default executor so the
  event loop is never blocked
- Maps HTTP failures onto the domain error taxonomy

REST Mapping:
- create   POST   /v2/apps                  (409 -> AlreadyExistsError)
- update   PUT    /v2/apps/{id}?force=
- get      GET    /v2/apps/{id}
- list     GET    /v2/apps?label=&id=&cmd=
- versions GET    /v2/apps/{id}/versions
- scale    PUT    /v2/apps/{id}             {"instances": n}
- restart  POST   /v2/apps/{id}/restart?force=
- destroy  DELETE /v2/apps/{id}
- active   GET    /v2/deployments
- cancel   DELETE /v2/deployments/{id}
"""

import asyncio
import base64
import json
import logging
import urllib.error
import urllib.request
from typing import Any, List, Optional
from urllib.parse import parse_qsl, quote, urlencode

from ferry.domain.entities.application import Application, normalize_app_id
from ferry.domain.exceptions import (
    AlreadyExistsError,
    OrchestratorUnavailableError,
    SubmissionError,
)
from ferry.domain.ports.orchestrator_port import OrchestratorPort
from ferry.domain.value_objects.deployment_handle import DeploymentHandle
from ferry.domain.value_objects.version_history import VersionHistory

logger = logging.getLogger(__name__)


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


class MarathonAdapter(OrchestratorPort):
    """Adapter implementing OrchestratorPort via the Marathon REST API."""

    def __init__(
        self,
        url: str = "http://localhost:8080",
        username: str = "",
        password: str = "",
        timeout: float = 30.0,
    ) -> None:
        self.url = url.rstrip("/")
        self._username = username
        self._password = password
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._username:
            token = base64.b64encode(
                f"{self._username}:{self._password}".encode()
            ).decode()
            headers["Authorization"] = f"Basic {token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        query: Optional[dict[str, str]] = None,
    ) -> Any:
        url = f"{self.url}{path}"
        if query:
            url = f"{url}?{urlencode(query)}"
        data = json.dumps(body).encode() if body is not None else None
        request = urllib.request.Request(
            url, data=data, method=method, headers=self._headers()
        )
        logger.debug("%s %s", method, url)

        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                raw = response.read()
        except urllib.error.HTTPError as e:
            raise self._http_error(e) from e
        except urllib.error.URLError as e:
            raise OrchestratorUnavailableError(
                f"Cannot reach Marathon at {self.url}: {e.reason}"
            ) from e
        except TimeoutError as e:
            raise OrchestratorUnavailableError(
                f"Marathon at {self.url} did not respond within {self.timeout}s"
            ) from e

        if not raw:
            return {}
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise SubmissionError(f"Marathon returned invalid JSON: {e}") from e

    @staticmethod
    def _http_error(error: urllib.error.HTTPError) -> SubmissionError:
        detail = ""
        try:
            body = error.read().decode(errors="replace")
        except OSError:
            body = ""
        if body:
            try:
                parsed = json.loads(body)
                detail = parsed.get("message", "") if isinstance(parsed, dict) else ""
            except json.JSONDecodeError:
                detail = body.strip()
        message = detail or str(error.reason)
        return SubmissionError(
            f"Marathon returned {error.code}: {message}", status=error.code
        )

    async def _call(self, method: str, path: str, body=None, query=None) -> Any:
        def _run():
            return self._request(method, path, body, query)

        return await asyncio.get_event_loop().run_in_executor(None, _run)

    @staticmethod
    def _app_path(app_id: str, suffix: str = "") -> str:
        return f"/v2/apps{quote(normalize_app_id(app_id), safe='/')}{suffix}"

    @staticmethod
    def _handle(response: Any) -> DeploymentHandle:
        deployment_id = response.get("deploymentId") if isinstance(response, dict) else None
        if not deployment_id:
            raise SubmissionError("Marathon response did not include a deployment id")
        return DeploymentHandle(deployment_id)

    async def create_application(self, payload: dict[str, Any]) -> Application:
        try:
            response = await self._call("POST", "/v2/apps", body=payload)
        except SubmissionError as e:
            if e.status == 409:
                raise AlreadyExistsError(normalize_app_id(payload["id"])) from e
            raise
        return Application.from_dict(response)

    async def update_application(
        self, app_id: str, payload: dict[str, Any], force: bool = False
    ) -> Application:
        response = await self._call(
            "PUT",
            self._app_path(app_id),
            body=payload,
            query={"force": _bool_param(force)},
        )
        handle = self._handle(response)
        application = await self.get_application(app_id)
        return application.with_deployment(handle)

    async def get_application(self, app_id: str) -> Application:
        response = await self._call("GET", self._app_path(app_id))
        return Application.from_dict(response["app"])

    async def list_applications(
        self, filter_expr: Optional[str] = None
    ) -> List[Application]:
        query = dict(parse_qsl(filter_expr, keep_blank_values=True)) if filter_expr else None
        response = await self._call("GET", "/v2/apps", query=query)
        return [Application.from_dict(app) for app in response.get("apps", [])]

    async def list_versions(self, app_id: str) -> VersionHistory:
        response = await self._call("GET", self._app_path(app_id, "/versions"))
        return VersionHistory(
            app_id=normalize_app_id(app_id),
            versions=tuple(response.get("versions", [])),
        )

    async def scale_application(self, app_id: str, instances: int) -> DeploymentHandle:
        response = await self._call(
            "PUT", self._app_path(app_id), body={"instances": instances}
        )
        return self._handle(response)

    async def restart_application(
        self, app_id: str, force: bool = False
    ) -> DeploymentHandle:
        response = await self._call(
            "POST",
            self._app_path(app_id, "/restart"),
            query={"force": _bool_param(force)},
        )
        return self._handle(response)

    async def destroy_application(self, app_id: str) -> DeploymentHandle:
        response = await self._call("DELETE", self._app_path(app_id))
        return self._handle(response)

    async def list_deployments(self) -> dict[DeploymentHandle, tuple[str, ...]]:
        response = await self._call("GET", "/v2/deployments")
        return {
            DeploymentHandle(d["id"]): tuple(d.get("affectedApps", ()))
            for d in response or ()
            if d.get("id")
        }

    async def cancel_deployment(self, handle: DeploymentHandle) -> None:
        await self._call("DELETE", f"/v2/deployments/{quote(str(handle), safe='')}")
