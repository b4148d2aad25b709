from dataclasses import dataclass


@dataclass(frozen=True)
class DeploymentHandle:
    """
    Value Object identifying one in-flight orchestrator deployment.
    """
    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError("Deployment handle cannot be empty")

    def __str__(self):
        return self.value
