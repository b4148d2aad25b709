"""
Domain Errors

Architectural Intent:
- Single error taxonomy shared by every layer of Ferry
- Each error carries the process exit status the CLI maps it to
- Optional remediation hint is rendered alongside the message
"""

from typing import Optional, Sequence


class FerryError(Exception):
    """Base class for all errors surfaced to the operator."""

    exit_code = 1

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class UsageError(FerryError):
    exit_code = 2


class ConfigurationError(UsageError):
    """A ferry.json entry, FERRY_* variable or --host value is unusable."""

    exit_code = 1

    def __init__(self, message: str) -> None:
        super().__init__(
            f"Invalid configuration: {message}",
            hint="check ferry.json (or --config) and FERRY_* environment variables",
        )


class FileReadError(FerryError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Unable to read file '{path}': {reason}")
        self.path = path


class DescriptorFormatError(FerryError):
    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Invalid application descriptor '{source}': {reason}")
        self.source = source


class MissingParameterError(FerryError):
    def __init__(self, name: str, all_missing: Sequence[str] = ()) -> None:
        missing = tuple(all_missing) or (name,)
        super().__init__(
            f"Unresolved parameter ${{{name}}} in application descriptor",
            hint="supply it with -p NAME=value, an --env-file entry, "
            "or pass --ignore-missing to leave it in place",
        )
        self.name = name
        self.missing = missing


class AlreadyExistsError(FerryError):
    def __init__(self, app_id: str) -> None:
        super().__init__(
            f"Application '{app_id}' already exists",
            hint="consider using the --force flag to update when an application exists",
        )
        self.app_id = app_id


class InvalidArgumentError(FerryError):
    pass


class InsufficientHistoryError(FerryError):
    def __init__(self, app_id: str, available: int) -> None:
        super().__init__(
            f"Application '{app_id}' has {available} recorded version(s); "
            "a rollback needs at least 2",
            hint="pass an explicit version, see 'ferry app versions'",
        )
        self.app_id = app_id
        self.available = available


class SubmissionError(FerryError):
    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class OrchestratorUnavailableError(SubmissionError):
    pass
