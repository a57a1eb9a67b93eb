"""Packaged JSON Schemas and validation helpers."""

from dyadt.schemas.registry import SchemaRegistry, get_registry
from dyadt.schemas.validator import validate_data

__all__ = ["SchemaRegistry", "get_registry", "validate_data"]
