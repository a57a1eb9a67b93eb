"""Tests for Claim and VerificationReport."""

from __future__ import annotations

import dataclasses
from datetime import UTC, datetime

import pytest

from dyadt.claims.types import Claim, VerificationReport, generate_claim_id
from dyadt.evidence.types import DirExists, FileExists, Verdict


def test_new_claim_has_id_and_utc_timestamp() -> None:
    claim = Claim.new("Created output directory", [DirExists(path="/tmp/out")], source="agent")

    assert len(claim.id) == 16
    int(claim.id, 16)
    assert claim.timestamp.tzinfo is not None
    assert claim.evidence == (DirExists(path="/tmp/out"),)
    assert claim.source == "agent"


def test_generated_ids_differ_for_identical_input() -> None:
    moment = datetime(2026, 1, 1, tzinfo=UTC)
    ids = {generate_claim_id("same description", moment) for _ in range(20)}
    assert len(ids) == 20


def test_with_evidence_returns_new_claim() -> None:
    claim = Claim.new("Wrote files")
    extended = claim.with_evidence(FileExists(path="a")).with_evidence(FileExists(path="b"))

    assert claim.evidence == ()
    assert extended.evidence == (FileExists(path="a"), FileExists(path="b"))
    assert extended.id == claim.id


def test_with_source() -> None:
    claim = Claim.new("Ran migration").with_source("ci")
    assert claim.source == "ci"


def test_list_evidence_is_stored_as_tuple() -> None:
    claim = Claim(
        id="x",
        description="d",
        timestamp=datetime(2026, 1, 1, tzinfo=UTC),
        evidence=[FileExists(path="a")],  # type: ignore[arg-type]
    )
    assert isinstance(claim.evidence, tuple)


def test_claim_is_frozen() -> None:
    claim = Claim.new("Immutable")
    with pytest.raises(dataclasses.FrozenInstanceError):
        claim.description = "changed"  # type: ignore[misc]


@pytest.mark.parametrize(
    "verdict, expected",
    [
        (Verdict.CONFIRMED, "[✓] Built the wheel - Confirmed"),
        (Verdict.REFUTED, "[✗] Built the wheel - Refuted"),
        (Verdict.INCONCLUSIVE, "[?] Built the wheel - Inconclusive"),
        (Verdict.ERROR, "[!] Built the wheel - Error"),
    ],
)
def test_report_summary(verdict: Verdict, expected: str) -> None:
    report = VerificationReport(claim=Claim.new("Built the wheel"), results=(), verdict=verdict)
    assert report.summary() == expected
