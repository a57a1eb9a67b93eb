"""Evaluate evidence against the local filesystem and process environment.

Each evidence item is evaluated independently and in order. Evaluation only
reads: it stats and reads files, hashes them, and spawns the commands named
by CommandSucceeds evidence.

Outcome rules shared by all kinds:

- an observation that contradicts the claim (missing file, digest mismatch,
  wrong exit code) is REFUTED
- being unable to observe at all (permission denied, missing binary,
  unregistered checker, unreadable content) is UNVERIFIABLE
- any other failure is ERROR
"""

from __future__ import annotations

import logging
import os
import stat
import subprocess
from collections.abc import Sequence

from dyadt.claims.types import Claim, VerificationReport, utc_now
from dyadt.evidence.aggregate import aggregate_results
from dyadt.evidence.registry import CheckerRegistry
from dyadt.evidence.types import (
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
from dyadt.hashing import sha256_file

logger = logging.getLogger(__name__)

DEFAULT_MAX_READ_BYTES = 10 * 1024 * 1024


def _describe_os_error(exc: OSError) -> str:
    return exc.strerror or str(exc)


def _check_file_exists(evidence: FileExists) -> CheckResult:
    path = evidence.path
    try:
        os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return CheckResult(Verdict.REFUTED, f"File not found: {path}")
    except PermissionError as exc:
        return CheckResult(Verdict.UNVERIFIABLE, f"Cannot access {path}: {_describe_os_error(exc)}")
    except (OSError, ValueError) as exc:
        return CheckResult(Verdict.ERROR, f"Cannot stat {path}: {exc}")
    return CheckResult(Verdict.CONFIRMED, f"File exists: {path}")


def _check_dir_exists(evidence: DirExists) -> CheckResult:
    path = evidence.path
    try:
        mode = os.stat(path).st_mode
    except (FileNotFoundError, NotADirectoryError):
        return CheckResult(Verdict.REFUTED, f"Directory not found: {path}")
    except PermissionError as exc:
        return CheckResult(Verdict.UNVERIFIABLE, f"Cannot access {path}: {_describe_os_error(exc)}")
    except (OSError, ValueError) as exc:
        return CheckResult(Verdict.ERROR, f"Cannot stat {path}: {exc}")

    if not stat.S_ISDIR(mode):
        return CheckResult(Verdict.REFUTED, f"Not a directory: {path}")
    return CheckResult(Verdict.CONFIRMED, f"Directory exists: {path}")


def _check_file_hash(evidence: FileHash) -> CheckResult:
    path = evidence.path
    try:
        actual = sha256_file(path)
    except (FileNotFoundError, NotADirectoryError):
        return CheckResult(Verdict.REFUTED, f"File not found: {path}")
    except IsADirectoryError:
        return CheckResult(Verdict.REFUTED, f"Not a regular file: {path}")
    except PermissionError as exc:
        return CheckResult(Verdict.UNVERIFIABLE, f"Cannot read {path}: {_describe_os_error(exc)}")
    except (OSError, ValueError) as exc:
        return CheckResult(Verdict.ERROR, f"Digest computation failed for {path}: {exc}")

    if actual == evidence.expected:
        return CheckResult(Verdict.CONFIRMED, "Hash matches")
    return CheckResult(
        Verdict.REFUTED,
        f"Hash mismatch: expected {evidence.expected}, got {actual}",
    )


def _check_file_contains(evidence: FileContains, max_read_bytes: int) -> CheckResult:
    path = evidence.path
    try:
        with open(path, "rb") as handle:
            data = handle.read(max_read_bytes + 1)
    except (FileNotFoundError, NotADirectoryError):
        return CheckResult(Verdict.REFUTED, f"File not found: {path}")
    except IsADirectoryError:
        return CheckResult(Verdict.REFUTED, f"Not a regular file: {path}")
    except PermissionError as exc:
        return CheckResult(Verdict.UNVERIFIABLE, f"Cannot read {path}: {_describe_os_error(exc)}")
    except (OSError, ValueError) as exc:
        return CheckResult(Verdict.ERROR, f"Cannot read {path}: {exc}")

    if len(data) > max_read_bytes:
        return CheckResult(
            Verdict.UNVERIFIABLE,
            f"File too large to inspect: {path} (limit {max_read_bytes} bytes)",
        )

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return CheckResult(Verdict.UNVERIFIABLE, f"File is not UTF-8 text: {path}")

    if evidence.substring in text:
        return CheckResult(Verdict.CONFIRMED, "Substring found")
    return CheckResult(Verdict.REFUTED, "Substring not found")


def _last_line(text: str) -> str:
    lines = [line for line in text.strip().splitlines() if line.strip()]
    return lines[-1] if lines else ""


def _check_command(evidence: CommandSucceeds) -> CheckResult:
    argv = [evidence.command, *evidence.args]
    try:
        completed = subprocess.run(
            argv,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            errors="replace",
            check=False,
        )
    except FileNotFoundError:
        return CheckResult(Verdict.UNVERIFIABLE, f"Command not found: {evidence.command}")
    except (OSError, ValueError, subprocess.SubprocessError) as exc:
        return CheckResult(Verdict.ERROR, f"Could not start {evidence.command}: {exc}")

    code = completed.returncode
    if code == evidence.expected_exit_code:
        return CheckResult(Verdict.CONFIRMED, f"Command exited with {code}")

    detail = f"Command exited with {code} (expected {evidence.expected_exit_code})"
    stderr_tail = _last_line(completed.stderr or "")
    if stderr_tail:
        detail = f"{detail}: {stderr_tail}"
    return CheckResult(Verdict.REFUTED, detail)


def _check_custom(evidence: Custom, registry: CheckerRegistry) -> CheckResult:
    checker = registry.resolve(evidence.name)
    if checker is None:
        return CheckResult(Verdict.UNVERIFIABLE, f"No checker registered for: {evidence.name}")

    try:
        output = checker.evaluate(dict(evidence.params))
    except Exception as exc:  # any checker fault is reported as an ERROR result
        return CheckResult(
            Verdict.ERROR,
            f"Checker '{evidence.name}' failed: {type(exc).__name__}: {exc}",
        )

    if isinstance(output, Verdict):
        output = CheckResult(output)
    elif not isinstance(output, CheckResult):
        return CheckResult(
            Verdict.ERROR,
            f"Checker '{evidence.name}' returned unsupported value of type {type(output).__name__}",
        )

    if output.verdict is Verdict.ERROR and not output.detail:
        return CheckResult(Verdict.ERROR, f"Checker '{evidence.name}' reported an error")
    return output


def evaluate_evidence(
    evidence: Evidence,
    registry: CheckerRegistry,
    *,
    max_read_bytes: int = DEFAULT_MAX_READ_BYTES,
) -> EvidenceResult:
    """
    Evaluate a single evidence item.

    Args:
        evidence: The evidence item to check
        registry: Registry used to resolve Custom evidence
        max_read_bytes: FileContains reads beyond this size are Unverifiable

    Returns:
        EvidenceResult pairing the evidence with its verdict and detail

    Raises:
        TypeError: If ``evidence`` is not one of the evidence types
    """
    if isinstance(evidence, FileExists):
        outcome = _check_file_exists(evidence)
    elif isinstance(evidence, FileHash):
        outcome = _check_file_hash(evidence)
    elif isinstance(evidence, FileContains):
        outcome = _check_file_contains(evidence, max_read_bytes)
    elif isinstance(evidence, DirExists):
        outcome = _check_dir_exists(evidence)
    elif isinstance(evidence, CommandSucceeds):
        outcome = _check_command(evidence)
    elif isinstance(evidence, Custom):
        outcome = _check_custom(evidence, registry)
    else:
        raise TypeError(f"Unsupported evidence type: {type(evidence).__name__}")

    if outcome.verdict is Verdict.ERROR:
        logger.warning("%s evaluation error: %s", evidence.TAG, outcome.detail)
    else:
        logger.debug("%s -> %s (%s)", evidence.TAG, outcome.verdict.value, outcome.detail)

    return EvidenceResult(evidence=evidence, verdict=outcome.verdict, detail=outcome.detail)


def evaluate_all(
    evidence: Sequence[Evidence],
    registry: CheckerRegistry,
    *,
    max_read_bytes: int = DEFAULT_MAX_READ_BYTES,
) -> tuple[EvidenceResult, ...]:
    """Evaluate every item in order; an error on one item never stops the rest."""
    return tuple(
        evaluate_evidence(item, registry, max_read_bytes=max_read_bytes) for item in evidence
    )


def verify_claim(
    claim: Claim,
    registry: CheckerRegistry | None = None,
    *,
    max_read_bytes: int = DEFAULT_MAX_READ_BYTES,
) -> VerificationReport:
    """
    Verify a claim against its evidence.

    Args:
        claim: Claim to verify
        registry: Custom checker registry; None means no custom checkers
        max_read_bytes: FileContains size limit

    Returns:
        VerificationReport with per-item results and the aggregate verdict
    """
    checkers = registry if registry is not None else CheckerRegistry()
    logger.debug("Verifying claim %s (%d evidence items)", claim.id, len(claim.evidence))

    results = evaluate_all(claim.evidence, checkers, max_read_bytes=max_read_bytes)
    aggregate = aggregate_results(results)

    return VerificationReport(
        claim=claim,
        results=results,
        verdict=aggregate.verdict,
        detail=aggregate.detail,
        verified_at=utc_now(),
    )
