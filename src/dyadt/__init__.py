"""Did You Actually Do That? Verify claimed actions against observable evidence.

A Claim names evidence that should exist if an action was really performed:
files, digests, directories, command outcomes, or domain checks supplied as
custom checkers. Verification evaluates each item and reduces the results to
one verdict: Confirmed, Refuted, Inconclusive or Error.
"""

__version__ = "0.1.0"

from dyadt.errors import (
    ConfigError,
    DyadtError,
    EvaluationError,
    MalformedClaimError,
    MalformedEvidenceError,
)
from dyadt.evidence import (
    CheckResult,
    Checker,
    CheckerRegistry,
    CommandSucceeds,
    Custom,
    DirExists,
    Evidence,
    EvidenceResult,
    FileContains,
    FileExists,
    FileHash,
    Verdict,
    aggregate_results,
    combine_verdicts,
)
from dyadt.claims import (
    Claim,
    VerificationReport,
    claim_from_dict,
    claim_to_dict,
    load_claims,
    parse_claims,
)
from dyadt.evidence.evaluator import evaluate_evidence, verify_claim

__all__ = [
    "CheckResult",
    "Checker",
    "CheckerRegistry",
    "Claim",
    "CommandSucceeds",
    "ConfigError",
    "Custom",
    "DirExists",
    "DyadtError",
    "EvaluationError",
    "Evidence",
    "EvidenceResult",
    "FileContains",
    "FileExists",
    "FileHash",
    "MalformedClaimError",
    "MalformedEvidenceError",
    "VerificationReport",
    "Verdict",
    "__version__",
    "aggregate_results",
    "claim_from_dict",
    "claim_to_dict",
    "combine_verdicts",
    "evaluate_evidence",
    "load_claims",
    "parse_claims",
    "verify_claim",
]
