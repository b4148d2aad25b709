"""
Rollback Resolver Service

Architectural Intent:
- Chooses the version an application is rolled back to
- An explicit version is used verbatim; the orchestrator validates it
- Otherwise the version immediately prior to the current one is chosen,
  and a history too short to have one is reported instead of guessed
"""

import logging
from typing import Optional

from ferry.domain.exceptions import InsufficientHistoryError
from ferry.domain.ports.orchestrator_port import OrchestratorPort

logger = logging.getLogger(__name__)


class RollbackResolver:
    def __init__(self, orchestrator: OrchestratorPort):
        self.orchestrator = orchestrator

    async def resolve_rollback_target(
        self, app_id: str, explicit_version: Optional[str] = None
    ) -> str:
        if explicit_version:
            return explicit_version

        history = await self.orchestrator.list_versions(app_id)
        target = history.previous
        if target is None:
            raise InsufficientHistoryError(app_id, len(history))

        logger.info("Rollback target for %s resolved to %s", app_id, target)
        return target
