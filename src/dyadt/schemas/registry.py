"""Schema registry backed by the ``dyadt_schemas`` package data.

Schemas are read through importlib.resources so that lookups do not depend on
the current working directory or a source checkout.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from importlib.resources import files
from typing import Any

SCHEMA_PACKAGE = "dyadt_schemas"
SCHEMA_SUFFIX = ".schema.json"


@dataclass(frozen=True)
class SchemaRegistry:
    """Registry of available schemas from package data.

    Attributes:
        available: Sorted tuple of canonical schema names (without .schema.json suffix)
    """

    available: tuple[str, ...] = ()

    def __init__(self) -> None:
        object.__setattr__(self, "available", tuple(sorted(self._discover_schemas())))

    def _discover_schemas(self) -> list[str]:
        try:
            schema_files = files(SCHEMA_PACKAGE)
            return [
                item.name.removesuffix(SCHEMA_SUFFIX)
                for item in schema_files.iterdir()
                if item.name.endswith(SCHEMA_SUFFIX)
            ]
        except (ModuleNotFoundError, FileNotFoundError):
            # Broken install; get_text() reports the missing schema by name
            return []

    def get_text(self, name: str) -> str:
        """Load schema as text.

        Raises:
            KeyError: If schema not found (includes available schemas in message)
        """
        canonical_name = name.removesuffix(SCHEMA_SUFFIX)
        if canonical_name not in self.available:
            available_list = ", ".join(self.available) or "none"
            raise KeyError(
                f"Schema '{canonical_name}' not found in dyadt package data. "
                f"Available schemas: {available_list}"
            )

        schema_file = files(SCHEMA_PACKAGE) / f"{canonical_name}{SCHEMA_SUFFIX}"
        return schema_file.read_text(encoding="utf-8")

    def get_json(self, name: str) -> dict[str, Any]:
        """Load schema as a parsed dictionary.

        Raises:
            KeyError: If schema not found
            ValueError: If schema JSON is malformed
        """
        text = self.get_text(name)
        try:
            res: dict[str, Any] = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Schema '{name}' contains invalid JSON: {e}") from e
        return res


@lru_cache(maxsize=1)
def get_registry() -> SchemaRegistry:
    """Shared read-only registry of packaged schemas."""
    return SchemaRegistry()
