from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SubmissionOptions:
    """
    Value Object with the per-invocation policy flags for submitting a descriptor.

    ``timeout`` is the wait bound in seconds; None means the configured default.
    """
    wait: bool = False
    force: bool = False
    error_on_missing_params: bool = True
    stop_existing_deploy: bool = False
    dry_run: bool = False
    timeout: Optional[float] = None

    def __post_init__(self):
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("Wait timeout must be positive")
