"""
Deployment Waiter

Architectural Intent:
- Blocks the calling command until deployments converge or a bound elapses
- Polls the orchestrator's active-deployment set at a fixed interval
- A timeout is an outcome, never a failure of the change already submitted
- Cancellation (token or process interrupt) abandons waiting only; the
  deployment continues server-side

Design Decisions:
- Clock and sleep are injected so the loop is testable without real time
- Several handles share one deadline
"""

from __future__ import annotations
import asyncio
import logging
import time
from collections.abc import Iterable
from typing import Awaitable, Callable, Optional

from ferry.domain.ports.orchestrator_port import OrchestratorPort
from ferry.domain.ports.telemetry_port import TelemetryPort
from ferry.domain.value_objects.deployment_handle import DeploymentHandle
from ferry.domain.value_objects.wait_result import WaitResult

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_TIMEOUT = 80.0


class DeploymentWaiter:
    def __init__(
        self,
        orchestrator: OrchestratorPort,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        default_timeout: float = DEFAULT_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        telemetry: Optional[TelemetryPort] = None,
    ):
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if default_timeout <= 0:
            raise ValueError("default_timeout must be positive")
        self.orchestrator = orchestrator
        self.poll_interval = poll_interval
        self.default_timeout = default_timeout
        self._clock = clock
        self._sleep = sleep
        self.telemetry = telemetry

    async def wait_for_completion(
        self,
        handle: DeploymentHandle,
        max_duration: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> WaitResult:
        return await self.wait_for_all((handle,), max_duration, cancel_event)

    async def wait_for_all(
        self,
        handles: Iterable[DeploymentHandle],
        max_duration: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> WaitResult:
        handles = tuple(dict.fromkeys(handles))
        bound = max_duration if max_duration else self.default_timeout
        start = self._clock()
        deadline = start + bound

        if not handles:
            return WaitResult.done(handles, 0.0)

        deployment_ids = [str(h) for h in handles]
        logger.info(
            "Waiting up to %.0fs for deployment(s) %s",
            bound,
            ", ".join(deployment_ids),
            extra={"deployment": deployment_ids},
        )

        pending = handles
        while True:
            if cancel_event is not None and cancel_event.is_set():
                result = WaitResult.cancelled(handles, self._clock() - start, pending)
                break

            active = await self.orchestrator.list_deployments()
            pending = tuple(h for h in handles if h in active)
            if not pending:
                result = WaitResult.done(handles, self._clock() - start)
                break

            remaining = deadline - self._clock()
            if remaining <= 0:
                result = WaitResult.timed_out(handles, self._clock() - start, pending)
                break

            logger.debug(
                "%d deployment(s) still active",
                len(pending),
                extra={"deployment": [str(h) for h in pending]},
            )
            await self._sleep(min(self.poll_interval, remaining))

        logger.info(
            "Wait finished: %s after %.1fs",
            result.outcome.name,
            result.elapsed_seconds,
            extra={
                "deployment": deployment_ids,
                "outcome": result.outcome.name,
                "elapsed_seconds": round(result.elapsed_seconds, 3),
            },
        )
        if self.telemetry:
            self.telemetry.record_wait(
                result.outcome.name, result.elapsed_seconds * 1000, len(handles)
            )
        return result
