from dataclasses import dataclass
from enum import Enum, auto

from ferry.domain.value_objects.deployment_handle import DeploymentHandle


class WaitOutcome(Enum):
    COMPLETED = auto()
    TIMED_OUT = auto()
    CANCELLED = auto()


@dataclass(frozen=True)
class WaitResult:
    """
    Value Object describing how waiting on one or more deployments ended.
    A timeout is an outcome, not a failure of the change that was submitted.
    """
    outcome: WaitOutcome
    handles: tuple[DeploymentHandle, ...] = ()
    elapsed_seconds: float = 0.0
    pending: tuple[DeploymentHandle, ...] = ()

    @property
    def completed(self) -> bool:
        return self.outcome is WaitOutcome.COMPLETED

    @staticmethod
    def done(handles, elapsed: float) -> "WaitResult":
        return WaitResult(WaitOutcome.COMPLETED, tuple(handles), elapsed)

    @staticmethod
    def timed_out(handles, elapsed: float, pending) -> "WaitResult":
        return WaitResult(WaitOutcome.TIMED_OUT, tuple(handles), elapsed, tuple(pending))

    @staticmethod
    def cancelled(handles, elapsed: float, pending) -> "WaitResult":
        return WaitResult(WaitOutcome.CANCELLED, tuple(handles), elapsed, tuple(pending))
