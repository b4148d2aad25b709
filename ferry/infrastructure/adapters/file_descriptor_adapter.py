"""
File Descriptor Adapter

Architectural Intent:
- Implements DescriptorPort for descriptors and template contexts on disk
- JSON descriptors by default, YAML for .yaml/.yml files (PyYAML)
- Template contexts are flat JSON objects; values are stringified
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from ferry.domain.exceptions import DescriptorFormatError, FileReadError
from ferry.domain.ports.descriptor_port import DescriptorPort

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def _read(path: str) -> str:
    try:
        return Path(path).read_text()
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(path, getattr(e, "strerror", None) or str(e)) from e


class FileDescriptorAdapter(DescriptorPort):
    def read_text(self, path: str) -> str:
        return _read(path)

    def parse(self, text: str, source: str) -> dict[str, Any]:
        try:
            if source.lower().endswith(YAML_SUFFIXES):
                data = yaml.safe_load(text)
            else:
                data = json.loads(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise DescriptorFormatError(source, str(e)) from e

        if not isinstance(data, dict):
            raise DescriptorFormatError(source, "expected an object at the top level")
        if not isinstance(data.get("id"), str) or not data["id"].strip():
            raise DescriptorFormatError(source, "missing application 'id'")
        return data

    def context_exists(self, path: Optional[str]) -> bool:
        return bool(path) and Path(path).is_file()

    def load_context(self, path: str) -> dict[str, str]:
        text = _read(path)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DescriptorFormatError(path, str(e)) from e
        if not isinstance(data, dict):
            raise DescriptorFormatError(path, "template context must be a JSON object")

        context = {}
        for key, value in data.items():
            if isinstance(value, (dict, list)):
                logger.debug("Skipping non-scalar template context entry %s", key)
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            context[str(key)] = "" if value is None else str(value)
        logger.debug("Loaded %d template context value(s) from %s", len(context), path)
        return context
