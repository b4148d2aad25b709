"""
Descriptor Port

Architectural Intent:
- Port interface for reading descriptor files and template contexts
- Keeps file formats (JSON, YAML) out of the use cases
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class DescriptorPort(ABC):
    @abstractmethod
    def read_text(self, path: str) -> str:
        """Read a descriptor verbatim. Raises FileReadError."""
        pass

    @abstractmethod
    def parse(self, text: str, source: str) -> dict[str, Any]:
        """Parse descriptor text into a payload. Raises DescriptorFormatError."""
        pass

    @abstractmethod
    def context_exists(self, path: Optional[str]) -> bool:
        """Whether a template-context artifact is present at ``path``."""
        pass

    @abstractmethod
    def load_context(self, path: str) -> dict[str, str]:
        """Load template-context values as strings."""
        pass
