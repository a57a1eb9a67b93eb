"""Render verification reports for people (rich) and machines (JSON)."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.text import Text

from dyadt.claims.loader import claim_to_dict, evidence_to_dict
from dyadt.claims.types import VerificationReport
from dyadt.evidence.aggregate import combine_verdicts
from dyadt.evidence.types import (
    CommandSucceeds,
    Custom,
    DirExists,
    Evidence,
    FileContains,
    FileExists,
    FileHash,
    Verdict,
)
from dyadt.ui import VERDICT_STYLES, verdict_text

REPORT_SCHEMA_VERSION = "1.0"


def describe_evidence(evidence: Evidence) -> str:
    """Short human-readable description of an evidence item."""
    if isinstance(evidence, FileExists):
        return f"File exists: {evidence.path}"
    if isinstance(evidence, FileHash):
        return f"File hash: {evidence.path}"
    if isinstance(evidence, FileContains):
        return f"File contains '{evidence.substring}': {evidence.path}"
    if isinstance(evidence, DirExists):
        return f"Directory exists: {evidence.path}"
    if isinstance(evidence, CommandSucceeds):
        rendered = " ".join([evidence.command, *evidence.args])
        if evidence.expected_exit_code:
            return f"Command exits {evidence.expected_exit_code}: {rendered}"
        return f"Command succeeds: {rendered}"
    if isinstance(evidence, Custom):
        return f"Custom check: {evidence.name}"
    raise TypeError(f"Unsupported evidence type: {type(evidence).__name__}")


def overall_verdict(reports: Sequence[VerificationReport]) -> Verdict:
    """Worst verdict across claims; no claims at all is Inconclusive."""
    return combine_verdicts(report.verdict for report in reports)


def render_report(report: VerificationReport, console: Console) -> None:
    """Print one claim's summary line followed by each evidence result."""
    console.print(Text(report.summary(), style=VERDICT_STYLES[report.verdict]))

    if report.claim.source:
        console.print(Text(f"  Source: {report.claim.source}"))
    if not report.results:
        console.print("  [dim](no evidence supplied)[/dim]")

    for result in report.results:
        line = Text("  ")
        line.append_text(verdict_text(result.verdict, describe_evidence(result.evidence)))
        console.print(line)
        if result.detail:
            console.print(Text(f"      {result.detail}", style="dim"))


def render_reports(reports: Sequence[VerificationReport], console: Console) -> Verdict:
    """Print a multi-claim report and return the overall verdict."""
    console.print("[bold]Verification Report[/bold]")
    console.print("===================")
    console.print()

    for report in reports:
        render_report(report, console)
        console.print()

    overall = overall_verdict(reports)
    console.print("-------------------")
    line = Text("Overall: ")
    line.append_text(verdict_text(overall))
    console.print(line)
    return overall


def report_to_dict(report: VerificationReport) -> dict[str, Any]:
    """JSON-compatible form of a single claim report."""
    return {
        "claim": claim_to_dict(report.claim),
        "verdict": report.verdict.value,
        "detail": report.detail,
        "verified_at": report.verified_at.isoformat(),
        "evidence_results": [
            {
                "evidence": evidence_to_dict(result.evidence),
                "verdict": result.verdict.value,
                "detail": result.detail,
            }
            for result in report.results
        ],
    }


def reports_to_dict(reports: Sequence[VerificationReport]) -> dict[str, Any]:
    """JSON-compatible form of a multi-claim report."""
    return {
        "schema_version": REPORT_SCHEMA_VERSION,
        "overall_verdict": overall_verdict(reports).value,
        "claims": [report_to_dict(report) for report in reports],
    }


def write_report_json(data: dict[str, Any], output_path: Path) -> None:
    """Write a report document as indented UTF-8 JSON."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
