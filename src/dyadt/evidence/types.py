"""Evidence model and verification result types.

Evidence is a closed set of frozen dataclasses, one per kind of observable
artifact. ``Evidence`` is the union of all of them; the evaluator dispatches
on the concrete type and rejects anything outside the union.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union

from dyadt.errors import MalformedEvidenceError

SHA256 = "sha256"

# Spellings accepted for the only supported digest algorithm.
_ALGORITHM_ALIASES: dict[str, str] = {
    "sha256": SHA256,
    "sha-256": SHA256,
}

_HEX_DIGEST_RE = re.compile(r"^[0-9a-fA-F]{64}$")


class Verdict(str, Enum):
    """Outcome of checking one evidence item, or a whole claim."""

    CONFIRMED = "Confirmed"
    REFUTED = "Refuted"
    INCONCLUSIVE = "Inconclusive"
    UNVERIFIABLE = "Unverifiable"
    ERROR = "Error"

    @property
    def icon(self) -> str:
        """Single-character marker used in summaries and reports."""
        return _VERDICT_ICONS[self]

    @property
    def is_trustworthy(self) -> bool:
        """Only a confirmed verdict can be relied upon."""
        return self is Verdict.CONFIRMED


_VERDICT_ICONS: dict[Verdict, str] = {
    Verdict.CONFIRMED: "✓",
    Verdict.REFUTED: "✗",
    Verdict.INCONCLUSIVE: "?",
    Verdict.UNVERIFIABLE: "⊘",
    Verdict.ERROR: "!",
}


def _require_text(value: Any, field_name: str, tag: str, *, allow_empty: bool = False) -> str:
    if value is None:
        raise MalformedEvidenceError(f"{tag}: missing required field '{field_name}'")
    if not isinstance(value, str):
        raise MalformedEvidenceError(
            f"{tag}: field '{field_name}' must be a string, got {type(value).__name__}"
        )
    if not allow_empty and not value:
        raise MalformedEvidenceError(f"{tag}: field '{field_name}' must not be empty")
    return value


@dataclass(frozen=True)
class FileExists:
    """A filesystem entry should exist at ``path``."""

    TAG: ClassVar[str] = "FileExists"

    path: str

    def __post_init__(self) -> None:
        _require_text(self.path, "path", self.TAG)


@dataclass(frozen=True)
class FileHash:
    """A file should exist at ``path`` with the given SHA-256 digest."""

    TAG: ClassVar[str] = "FileHash"

    path: str
    expected: str
    algorithm: str = SHA256

    def __post_init__(self) -> None:
        _require_text(self.path, "path", self.TAG)
        expected = _require_text(self.expected, "expected", self.TAG)
        algorithm = _require_text(self.algorithm, "algorithm", self.TAG)

        normalized = _ALGORITHM_ALIASES.get(algorithm.lower())
        if normalized is None:
            raise MalformedEvidenceError(
                f"{self.TAG}: unsupported algorithm '{algorithm}' (only sha256 is supported)"
            )
        if not _HEX_DIGEST_RE.match(expected):
            raise MalformedEvidenceError(
                f"{self.TAG}: expected digest must be 64 hex characters, got '{expected}'"
            )

        object.__setattr__(self, "expected", expected.lower())
        object.__setattr__(self, "algorithm", normalized)


@dataclass(frozen=True)
class FileContains:
    """The text of the file at ``path`` should contain ``substring`` verbatim."""

    TAG: ClassVar[str] = "FileContains"

    path: str
    substring: str

    def __post_init__(self) -> None:
        _require_text(self.path, "path", self.TAG)
        _require_text(self.substring, "substring", self.TAG, allow_empty=True)


@dataclass(frozen=True)
class DirExists:
    """A directory should exist at ``path``."""

    TAG: ClassVar[str] = "DirExists"

    path: str

    def __post_init__(self) -> None:
        _require_text(self.path, "path", self.TAG)


@dataclass(frozen=True)
class CommandSucceeds:
    """Running ``command`` with ``args`` should exit with ``expected_exit_code``."""

    TAG: ClassVar[str] = "CommandSucceeds"

    command: str
    args: tuple[str, ...] = ()
    expected_exit_code: int = 0

    def __post_init__(self) -> None:
        _require_text(self.command, "command", self.TAG)

        if self.args is None or isinstance(self.args, str | bytes):
            raise MalformedEvidenceError(f"{self.TAG}: field 'args' must be a list of strings")
        args = tuple(self.args)
        for index, arg in enumerate(args):
            if not isinstance(arg, str):
                raise MalformedEvidenceError(
                    f"{self.TAG}: args[{index}] must be a string, got {type(arg).__name__}"
                )

        # bool is an int subclass; reject it explicitly
        if isinstance(self.expected_exit_code, bool) or not isinstance(self.expected_exit_code, int):
            raise MalformedEvidenceError(f"{self.TAG}: field 'expected_exit_code' must be an integer")

        object.__setattr__(self, "args", args)


@dataclass(frozen=True)
class Custom:
    """Evidence checked by a checker registered under ``name``."""

    TAG: ClassVar[str] = "Custom"

    name: str
    # Read-only view; not part of the hash.
    params: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        _require_text(self.name, "name", self.TAG)

        if not isinstance(self.params, Mapping):
            raise MalformedEvidenceError(f"{self.TAG}: field 'params' must be a mapping")
        params: dict[str, str] = {}
        for key, value in self.params.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise MalformedEvidenceError(
                    f"{self.TAG}: params must map strings to strings (bad entry: {key!r})"
                )
            params[key] = value

        object.__setattr__(self, "params", MappingProxyType(params))


Evidence = Union[FileExists, FileHash, FileContains, DirExists, CommandSucceeds, Custom]

EVIDENCE_TYPES: tuple[type, ...] = (
    FileExists,
    FileHash,
    FileContains,
    DirExists,
    CommandSucceeds,
    Custom,
)


@dataclass(frozen=True)
class CheckResult:
    """What a checker reports: a verdict plus an optional human-readable reason."""

    verdict: Verdict
    detail: str | None = None


@dataclass(frozen=True)
class EvidenceResult:
    """Result of evaluating a single evidence item."""

    evidence: Evidence
    verdict: Verdict
    detail: str | None = None
