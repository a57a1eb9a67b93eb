"""Evidence model, custom checker registry and verdict aggregation.

Evaluation lives in ``dyadt.evidence.evaluator``; it is not re-exported here
because it depends on ``dyadt.claims``, which in turn depends on this package.
"""

from dyadt.evidence.types import (
    EVIDENCE_TYPES,
    CheckResult,
    CommandSucceeds,
    Custom,
    DirExists,
    Evidence,
    EvidenceResult,
    FileContains,
    FileExists,
    FileHash,
    Verdict,
)
from dyadt.evidence.registry import Checker, CheckerRegistry, FunctionChecker
from dyadt.evidence.aggregate import AggregateVerdict, aggregate_results, combine_verdicts

__all__ = [
    "AggregateVerdict",
    "CheckResult",
    "Checker",
    "CheckerRegistry",
    "CommandSucceeds",
    "Custom",
    "DirExists",
    "EVIDENCE_TYPES",
    "Evidence",
    "EvidenceResult",
    "FileContains",
    "FileExists",
    "FileHash",
    "FunctionChecker",
    "Verdict",
    "aggregate_results",
    "combine_verdicts",
]
