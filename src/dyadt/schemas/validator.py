"""JSON Schema validation for dyadt input documents."""

from __future__ import annotations

from typing import Any

from jsonschema.validators import Draft202012Validator

from dyadt.schemas.registry import get_registry


def validate_data(data: Any, schema_name: str) -> tuple[bool, list[str]]:
    """Validate data against a packaged schema.

    Args:
        data: Decoded JSON document
        schema_name: Name of schema to validate against

    Returns:
        Tuple of (is_valid, error_messages); messages are prefixed with the
        dotted path of the offending value

    Raises:
        KeyError: If schema not found in package data
    """
    schema = get_registry().get_json(schema_name)

    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])

    if not errors:
        return True, []

    error_messages = [
        f"{'.'.join(str(p) for p in e.absolute_path)}: {e.message}"
        if e.absolute_path
        else e.message
        for e in errors
    ]
    return False, error_messages
