"""
Query Use Cases

Architectural Intent:
- Read-only lookups: list, get, and version history
"""

from typing import List, Optional

from ferry.domain.entities.application import Application, normalize_app_id
from ferry.domain.exceptions import UsageError
from ferry.domain.ports.orchestrator_port import OrchestratorPort
from ferry.domain.value_objects.version_history import VersionHistory


class QueryApplications:
    def __init__(self, orchestrator: OrchestratorPort):
        self.orchestrator = orchestrator

    async def list(self, filter_expr: Optional[str] = None) -> List[Application]:
        if filter_expr and "=" not in filter_expr:
            raise UsageError(
                f"Invalid filter '{filter_expr}': expected key=value, eg. label=web"
            )
        return await self.orchestrator.list_applications(filter_expr)

    async def get(self, app_id: str) -> Application:
        return await self.orchestrator.get_application(normalize_app_id(app_id))

    async def versions(self, app_id: str) -> VersionHistory:
        return await self.orchestrator.list_versions(normalize_app_id(app_id))
