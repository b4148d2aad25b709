from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class VersionHistory:
    """
    Value Object with the deployed versions of an application, most recent first.
    """
    app_id: str
    versions: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.versions)

    @property
    def current(self) -> Optional[str]:
        return self.versions[0] if self.versions else None

    @property
    def previous(self) -> Optional[str]:
        return self.versions[1] if len(self.versions) > 1 else None
