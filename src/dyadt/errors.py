"""Exception taxonomy for dyadt."""

from __future__ import annotations


class DyadtError(Exception):
    """Base class for all dyadt errors."""


class MalformedEvidenceError(DyadtError, ValueError):
    """Raised when an evidence item is constructed with missing or invalid parameters."""


class MalformedClaimError(DyadtError, ValueError):
    """Raised when claim input cannot be parsed into a Claim."""


class ConfigError(DyadtError, RuntimeError):
    """Raised when a configuration file or environment override is invalid."""


class EvaluationError(DyadtError, RuntimeError):
    """Raised by checkers to report an unexpected failure during evaluation.

    The evaluator turns it into an ``ERROR`` result for the evidence item; it
    never aborts evaluation of the remaining items.
    """
