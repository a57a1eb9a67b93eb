"""Tests for reading and writing claim documents."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from dyadt.claims.loader import (
    claim_from_dict,
    claim_to_dict,
    evidence_from_dict,
    evidence_to_dict,
    load_claims,
    parse_claims,
)
from dyadt.claims.types import Claim
from dyadt.errors import MalformedClaimError, MalformedEvidenceError
from dyadt.evidence.types import (
    CommandSucceeds,
    Custom,
    DirExists,
    FileContains,
    FileExists,
    FileHash,
)

EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def _claim_doc(**overrides) -> dict:
    doc = {
        "description": "Created the configuration file",
        "evidence": [{"type": "FileExists", "spec": {"path": "/etc/myapp/config.toml"}}],
    }
    doc.update(overrides)
    return doc


def test_claim_round_trip_preserves_everything() -> None:
    claim = Claim(
        id="abc123",
        description="Deployed release",
        timestamp=datetime(2026, 3, 1, 12, 30, tzinfo=UTC),
        evidence=(
            FileExists(path="/srv/app/current"),
            FileHash(path="/srv/app/app.tar", expected=EMPTY_SHA256),
            FileContains(path="/srv/app/VERSION", substring="1.4.0"),
            DirExists(path="/srv/app/releases"),
            CommandSucceeds(command="systemctl", args=("is-active", "app")),
            Custom(name="http_ok", params={"url": "http://localhost:8080/health"}),
        ),
        source="deploy-agent",
    )

    data = json.loads(json.dumps(claim_to_dict(claim)))
    assert claim_from_dict(data) == claim


def test_claim_without_id_or_timestamp_gets_both() -> None:
    claim = claim_from_dict(_claim_doc())

    assert len(claim.id) == 16
    assert claim.timestamp.tzinfo is not None
    assert claim.source is None
    assert claim.evidence == (FileExists(path="/etc/myapp/config.toml"),)


def test_naive_timestamp_is_treated_as_utc() -> None:
    claim = claim_from_dict(_claim_doc(timestamp="2026-01-02T03:04:05"))
    assert claim.timestamp == datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)


def test_invalid_timestamp_is_malformed() -> None:
    with pytest.raises(MalformedClaimError, match="invalid timestamp"):
        claim_from_dict(_claim_doc(timestamp="last tuesday"))


def test_source_is_omitted_when_absent() -> None:
    data = claim_to_dict(Claim.new("No source"))
    assert "source" not in data
    assert data["evidence"] == []


@pytest.mark.parametrize(
    "doc, fragment",
    [
        ({"evidence": []}, "'description' is a required property"),
        ({"description": "x"}, "'evidence' is a required property"),
        (_claim_doc(evidence=[{"type": "Teleported", "spec": {}}]), "evidence.0.type"),
        (_claim_doc(evidence=[{"type": "FileExists"}]), "'spec' is a required property"),
    ],
)
def test_schema_violations_are_malformed(doc: dict, fragment: str) -> None:
    with pytest.raises(MalformedClaimError) as exc_info:
        claim_from_dict(doc)
    assert "Invalid claim" in str(exc_info.value)
    assert fragment in str(exc_info.value)


def test_evidence_field_errors_report_index() -> None:
    doc = _claim_doc(
        evidence=[
            {"type": "DirExists", "spec": {"path": "/tmp"}},
            {"type": "FileHash", "spec": {"path": "/tmp/a", "sha256": "abc"}},
        ]
    )
    with pytest.raises(MalformedClaimError, match=r"evidence\[1\]: FileHash"):
        claim_from_dict(doc)


def test_legacy_tags_are_accepted() -> None:
    hashed = evidence_from_dict({"type": "FileWithHash", "spec": {"path": "a", "sha256": EMPTY_SHA256}})
    directory = evidence_from_dict({"type": "DirectoryExists", "spec": {"path": "d"}})

    assert hashed == FileHash(path="a", expected=EMPTY_SHA256)
    assert directory == DirExists(path="d")
    assert evidence_to_dict(hashed)["type"] == "FileHash"
    assert evidence_to_dict(directory)["type"] == "DirExists"


def test_file_hash_accepts_expected_key() -> None:
    evidence = evidence_from_dict({"type": "FileHash", "spec": {"path": "a", "expected": EMPTY_SHA256}})
    assert evidence == FileHash(path="a", expected=EMPTY_SHA256)


def test_custom_accepts_checker_key_and_defaults_params() -> None:
    evidence = evidence_from_dict({"type": "Custom", "spec": {"checker": "port_open"}})
    assert evidence == Custom(name="port_open", params={})


def test_command_defaults() -> None:
    evidence = evidence_from_dict({"type": "CommandSucceeds", "spec": {"command": "true"}})
    assert evidence == CommandSucceeds(command="true")
    assert evidence_to_dict(evidence)["spec"] == {
        "command": "true",
        "args": [],
        "expected_exit_code": 0,
    }


def test_unknown_tag_direct_is_malformed_evidence() -> None:
    with pytest.raises(MalformedEvidenceError, match="unknown evidence type"):
        evidence_from_dict({"type": "Teleported", "spec": {}})


def test_parse_claims_accepts_object_or_array() -> None:
    assert len(parse_claims(_claim_doc())) == 1
    assert len(parse_claims([_claim_doc(), _claim_doc(description="second")])) == 2
    assert parse_claims([]) == []


def test_parse_claims_reports_array_index() -> None:
    with pytest.raises(MalformedClaimError, match=r"claims\[1\]"):
        parse_claims([_claim_doc(), {"description": "no evidence"}])


def test_parse_claims_rejects_scalars() -> None:
    with pytest.raises(MalformedClaimError, match="object or an array"):
        parse_claims("claim")


def test_load_claims_from_file(tmp_path: Path) -> None:
    path = tmp_path / "claims.json"
    path.write_text(json.dumps([_claim_doc(source="agent-7")]), encoding="utf-8")

    claims = load_claims(path)
    assert [c.source for c in claims] == ["agent-7"]


def test_load_claims_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(MalformedClaimError, match="Error parsing claim JSON"):
        load_claims(path)


def test_load_claims_missing_file_raises_os_error(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_claims(tmp_path / "absent.json")


def test_load_claims_non_utf8_is_malformed(tmp_path: Path) -> None:
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"description": "caf\xe9", "evidence": []}')

    with pytest.raises(MalformedClaimError, match="not UTF-8"):
        load_claims(path)


def test_round_trip_of_document_without_id_or_timestamp() -> None:
    doc = _claim_doc(
        evidence=[
            {"type": "DirectoryExists", "spec": {"path": "/srv/out"}},
            {"type": "Custom", "spec": {"checker": "port_open", "params": {"port": "80"}}},
        ]
    )

    first = claim_from_dict(doc)
    second = claim_from_dict(json.loads(json.dumps(claim_to_dict(first))))
    assert second == first
