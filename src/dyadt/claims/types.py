"""Claim and verification report types."""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from dyadt.evidence.types import Evidence, EvidenceResult, Verdict


def utc_now() -> datetime:
    """Current wallclock time, timezone-aware UTC."""
    return datetime.now(UTC)


def generate_claim_id(description: str, timestamp: datetime | None = None) -> str:
    """Generate a fresh 16-hex-character claim identifier."""
    moment = timestamp or utc_now()
    hasher = hashlib.sha256()
    hasher.update(description.encode("utf-8"))
    hasher.update(moment.isoformat().encode("utf-8"))
    hasher.update(secrets.token_bytes(8))
    return hasher.hexdigest()[:16]


@dataclass(frozen=True)
class Claim:
    """An assertion that some action was performed, with the evidence it should have left."""

    id: str
    description: str
    timestamp: datetime
    evidence: tuple[Evidence, ...] = ()
    source: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "evidence", tuple(self.evidence))

    @classmethod
    def new(
        cls,
        description: str,
        evidence: tuple[Evidence, ...] | list[Evidence] = (),
        *,
        source: str | None = None,
    ) -> Claim:
        """Create a claim stamped now with a generated identifier."""
        timestamp = utc_now()
        return cls(
            id=generate_claim_id(description, timestamp),
            description=description,
            timestamp=timestamp,
            evidence=tuple(evidence),
            source=source,
        )

    def with_evidence(self, evidence: Evidence) -> Claim:
        """Return a copy of this claim with ``evidence`` appended."""
        return replace(self, evidence=(*self.evidence, evidence))

    def with_source(self, source: str) -> Claim:
        return replace(self, source=source)


@dataclass(frozen=True)
class VerificationReport:
    """Outcome of verifying one claim."""

    claim: Claim
    results: tuple[EvidenceResult, ...]
    verdict: Verdict
    detail: str | None = None
    verified_at: datetime = field(default_factory=utc_now)

    def summary(self) -> str:
        """One-line summary suitable for display."""
        return f"[{self.verdict.icon}] {self.claim.description} - {self.verdict.value}"
