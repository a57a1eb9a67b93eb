"""Reduce per-evidence results to a single claim verdict.

Precedence, highest first and independent of position:

1. any Error            -> Error (carrying the first error detail)
2. any Refuted          -> Refuted
3. any Unverifiable or
   Inconclusive         -> Inconclusive
4. all Confirmed        -> Confirmed

An empty sequence is Inconclusive.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from dyadt.evidence.types import EvidenceResult, Verdict


@dataclass(frozen=True)
class AggregateVerdict:
    """Claim-level verdict plus the detail of the first error, if any."""

    verdict: Verdict
    detail: str | None = None


def combine_verdicts(verdicts: Iterable[Verdict]) -> Verdict:
    """Combine verdicts under the fixed precedence; never returns UNVERIFIABLE."""
    seen = set(verdicts)
    if not seen:
        return Verdict.INCONCLUSIVE
    if Verdict.ERROR in seen:
        return Verdict.ERROR
    if Verdict.REFUTED in seen:
        return Verdict.REFUTED
    if Verdict.UNVERIFIABLE in seen or Verdict.INCONCLUSIVE in seen:
        return Verdict.INCONCLUSIVE
    return Verdict.CONFIRMED


def aggregate_results(results: Sequence[EvidenceResult]) -> AggregateVerdict:
    """Aggregate evaluated evidence into one verdict for the claim."""
    verdict = combine_verdicts(result.verdict for result in results)
    if verdict is not Verdict.ERROR:
        return AggregateVerdict(verdict)

    first_error = next(result for result in results if result.verdict is Verdict.ERROR)
    return AggregateVerdict(verdict, first_error.detail)
