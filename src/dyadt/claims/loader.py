"""Claim input format: JSON documents to Claim objects and back.

A claim document looks like::

    {
        "id": "optional, generated when absent",
        "timestamp": "optional ISO-8601, defaults to now",
        "description": "Created the configuration file",
        "source": "setup-agent",
        "evidence": [
            {"type": "FileExists", "spec": {"path": "/etc/myapp/config.toml"}},
            {"type": "FileContains", "spec": {"path": "/etc/myapp/config.toml", "substring": "version = "}}
        ]
    }

Serialization always writes canonical type tags and keys together with ``id``
and ``timestamp``, so a serialized claim parses back to an equal Claim.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from dyadt.claims.types import Claim, generate_claim_id, utc_now
from dyadt.errors import MalformedClaimError, MalformedEvidenceError
from dyadt.evidence.types import (
    CommandSucceeds,
    Custom,
    DirExists,
    Evidence,
    FileContains,
    FileExists,
    FileHash,
)
from dyadt.schemas.validator import validate_data

CLAIM_SCHEMA = "claim"

# Older documents use these tags; they parse to the canonical types.
TAG_ALIASES: dict[str, str] = {
    "FileWithHash": FileHash.TAG,
    "DirectoryExists": DirExists.TAG,
}


def _first_present(spec: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in spec:
            return spec[key]
    return None


def evidence_from_dict(data: Mapping[str, Any]) -> Evidence:
    """Build an Evidence item from its ``{"type": ..., "spec": {...}}`` form.

    Raises:
        MalformedEvidenceError: If the tag is unknown or required fields are missing
    """
    if not isinstance(data, Mapping):
        raise MalformedEvidenceError("evidence entry must be an object")

    raw_tag = data.get("type")
    spec = data.get("spec", {})
    if not isinstance(spec, Mapping):
        raise MalformedEvidenceError(f"{raw_tag}: 'spec' must be an object")

    tag = TAG_ALIASES.get(raw_tag, raw_tag)

    if tag == FileExists.TAG:
        return FileExists(path=spec.get("path"))
    if tag == FileHash.TAG:
        return FileHash(
            path=spec.get("path"),
            expected=_first_present(spec, "sha256", "expected"),
            algorithm=spec.get("algorithm", "sha256"),
        )
    if tag == FileContains.TAG:
        return FileContains(path=spec.get("path"), substring=spec.get("substring"))
    if tag == DirExists.TAG:
        return DirExists(path=spec.get("path"))
    if tag == CommandSucceeds.TAG:
        return CommandSucceeds(
            command=spec.get("command"),
            args=spec.get("args", []),
            expected_exit_code=spec.get("expected_exit_code", 0),
        )
    if tag == Custom.TAG:
        return Custom(
            name=_first_present(spec, "name", "checker"),
            params=spec.get("params", {}),
        )

    raise MalformedEvidenceError(f"unknown evidence type: {raw_tag!r}")


def evidence_to_dict(evidence: Evidence) -> dict[str, Any]:
    """Serialize an Evidence item with its canonical tag and keys."""
    spec: dict[str, Any]
    if isinstance(evidence, FileExists | DirExists):
        spec = {"path": evidence.path}
    elif isinstance(evidence, FileHash):
        spec = {"path": evidence.path, "sha256": evidence.expected, "algorithm": evidence.algorithm}
    elif isinstance(evidence, FileContains):
        spec = {"path": evidence.path, "substring": evidence.substring}
    elif isinstance(evidence, CommandSucceeds):
        spec = {
            "command": evidence.command,
            "args": list(evidence.args),
            "expected_exit_code": evidence.expected_exit_code,
        }
    elif isinstance(evidence, Custom):
        spec = {"name": evidence.name, "params": dict(evidence.params)}
    else:
        raise TypeError(f"Unsupported evidence type: {type(evidence).__name__}")

    return {"type": evidence.TAG, "spec": spec}


def _parse_timestamp(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise MalformedClaimError(f"invalid timestamp {value!r}: {e}") from e
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


def claim_from_dict(data: Any) -> Claim:
    """Build a Claim from its JSON object form.

    Raises:
        MalformedClaimError: If the document fails schema validation or any
            evidence item is malformed
    """
    ok, errors = validate_data(data, CLAIM_SCHEMA)
    if not ok:
        raise MalformedClaimError(
            "Invalid claim:\n" + "\n".join(f"  - {msg}" for msg in errors)
        )

    evidence: list[Evidence] = []
    for index, item in enumerate(data["evidence"]):
        try:
            evidence.append(evidence_from_dict(item))
        except MalformedEvidenceError as e:
            raise MalformedClaimError(f"evidence[{index}]: {e}") from e

    raw_timestamp = data.get("timestamp")
    timestamp = _parse_timestamp(raw_timestamp) if raw_timestamp else utc_now()
    description = data["description"]

    return Claim(
        id=data.get("id") or generate_claim_id(description, timestamp),
        description=description,
        timestamp=timestamp,
        evidence=tuple(evidence),
        source=data.get("source"),
    )


def claim_to_dict(claim: Claim) -> dict[str, Any]:
    """Serialize a Claim to its JSON object form."""
    data: dict[str, Any] = {
        "id": claim.id,
        "timestamp": claim.timestamp.isoformat(),
        "description": claim.description,
        "evidence": [evidence_to_dict(item) for item in claim.evidence],
    }
    if claim.source is not None:
        data["source"] = claim.source
    return data


def parse_claims(data: Any) -> list[Claim]:
    """Parse a single claim object or an array of claim objects."""
    if isinstance(data, Mapping):
        return [claim_from_dict(data)]
    if isinstance(data, list):
        claims: list[Claim] = []
        for index, item in enumerate(data):
            try:
                claims.append(claim_from_dict(item))
            except MalformedClaimError as e:
                raise MalformedClaimError(f"claims[{index}]: {e}") from e
        return claims
    raise MalformedClaimError(
        f"claim document must be an object or an array, got {type(data).__name__}"
    )


def load_claims(path: Path) -> list[Claim]:
    """Read and parse a claim file.

    Raises:
        OSError: If the file cannot be read
        MalformedClaimError: If the file is not UTF-8 JSON or not a valid claim document
    """
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MalformedClaimError(f"Claim file {path} is not UTF-8 text: {e}") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedClaimError(f"Error parsing claim JSON in {path}: {e}") from e
    return parse_claims(data)
