"""Claims: the entity under verification and its JSON input format."""

from dyadt.claims.types import Claim, VerificationReport, generate_claim_id
from dyadt.claims.loader import (
    claim_from_dict,
    claim_to_dict,
    evidence_from_dict,
    evidence_to_dict,
    load_claims,
    parse_claims,
)

__all__ = [
    "Claim",
    "VerificationReport",
    "claim_from_dict",
    "claim_to_dict",
    "evidence_from_dict",
    "evidence_to_dict",
    "generate_claim_id",
    "load_claims",
    "parse_claims",
]
