"""
Application Orchestration Package

Architectural Intent:
- Contains the deployment workflow components shared by use cases
- Submission policy (create, or forced update) and completion waiting
"""

from ferry.application.orchestration.deployment_submitter import (
    DeploymentSubmitter,
    ConflictStep,
    plan_conflict_resolution,
)
from ferry.application.orchestration.deployment_waiter import DeploymentWaiter

__all__ = [
    "DeploymentSubmitter",
    "ConflictStep",
    "plan_conflict_resolution",
    "DeploymentWaiter",
]
