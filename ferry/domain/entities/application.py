"""
Application Module

Architectural Intent:
- Application is the unit the orchestrator deploys and scales
- Instances are immutable; update helpers return new instances
- A locally built Application doubles as an update patch: only the fields
  that were set are sent to the orchestrator
- Parsing from and serialising to the orchestrator's JSON shape lives here so
  adapters stay thin
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from ferry.domain.value_objects.deployment_handle import DeploymentHandle


def normalize_app_id(app_id: str) -> str:
    """Marathon ids are absolute paths; accept 'web' as '/web'."""
    app_id = app_id.strip()
    if not app_id:
        raise ValueError("Application id cannot be empty")
    return app_id if app_id.startswith("/") else f"/{app_id}"


@dataclass(frozen=True)
class Application:
    id: str
    cpus: Optional[float] = None
    mem: Optional[float] = None
    instances: Optional[int] = None
    version: Optional[str] = None
    image: Optional[str] = None
    cmd: Optional[str] = None
    labels: dict[str, str] = field(default_factory=dict)
    deployments: tuple[DeploymentHandle, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", normalize_app_id(self.id))
        if self.instances is not None and self.instances < 0:
            raise ValueError("Instance count cannot be negative")

    @classmethod
    def patch(cls, app_id: str) -> "Application":
        """Start an update patch for ``app_id`` with no fields set."""
        return cls(id=app_id)

    def with_cpus(self, cpus: float) -> "Application":
        return replace(self, cpus=cpus)

    def with_memory(self, mem: float) -> "Application":
        return replace(self, mem=mem)

    def with_instances(self, instances: int) -> "Application":
        return replace(self, instances=instances)

    def with_version(self, version: str) -> "Application":
        return replace(self, version=version)

    def to_payload(self) -> dict[str, Any]:
        """Serialise the fields that are set, in orchestrator JSON shape."""
        payload: dict[str, Any] = {"id": self.id}
        if self.cpus is not None:
            payload["cpus"] = self.cpus
        if self.mem is not None:
            payload["mem"] = self.mem
        if self.instances is not None:
            payload["instances"] = self.instances
        if self.version is not None:
            payload["version"] = self.version
        if self.cmd is not None:
            payload["cmd"] = self.cmd
        if self.labels:
            payload["labels"] = dict(self.labels)
        if self.image is not None:
            payload["container"] = {"type": "DOCKER", "docker": {"image": self.image}}
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Application":
        docker = (data.get("container") or {}).get("docker") or {}
        deployments = tuple(
            DeploymentHandle(d["id"])
            for d in data.get("deployments") or ()
            if isinstance(d, dict) and d.get("id")
        )
        return cls(
            id=data["id"],
            cpus=data.get("cpus"),
            mem=data.get("mem"),
            instances=data.get("instances"),
            version=data.get("version"),
            image=docker.get("image"),
            cmd=data.get("cmd"),
            labels=dict(data.get("labels") or {}),
            deployments=deployments,
        )

    def with_deployment(self, handle: Optional[DeploymentHandle]) -> "Application":
        if handle is None or handle in self.deployments:
            return self
        return replace(self, deployments=self.deployments + (handle,))
