"""Registry of custom evidence checkers.

Built-in evidence kinds are evaluated directly by the evaluator; only
``Custom`` evidence is resolved through a registry. A registry is an explicit
object owned by the caller and passed into evaluation. There is no module
level instance.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Protocol, Union, runtime_checkable

from dyadt.evidence.types import CheckResult, Verdict

logger = logging.getLogger(__name__)

CheckOutput = Union[CheckResult, Verdict]
CheckFunction = Callable[[Mapping[str, str]], CheckOutput]


@runtime_checkable
class Checker(Protocol):
    """Evaluation logic for one kind of custom evidence."""

    def evaluate(self, params: Mapping[str, str]) -> CheckOutput:
        """
        Check the evidence described by ``params``.

        Args:
            params: String parameters copied from the Custom evidence item

        Returns:
            A CheckResult, or a bare Verdict when there is nothing to explain.
            Raising, or returning ``Verdict.ERROR``, marks the item as Error.
        """
        ...


@dataclass(frozen=True)
class FunctionChecker:
    """Adapts a plain callable (often a closure) to the Checker protocol."""

    func: CheckFunction

    def evaluate(self, params: Mapping[str, str]) -> CheckOutput:
        return self.func(params)


class CheckerRegistry:
    """Maps checker names to custom checker logic."""

    def __init__(self) -> None:
        self._checkers: dict[str, Checker] = {}

    def register(self, name: str, checker: Checker | CheckFunction) -> None:
        """Bind ``name`` to ``checker``; a later registration replaces an earlier one."""
        if not isinstance(name, str) or not name:
            raise ValueError("checker name must be a non-empty string")

        if inspect.isclass(checker):
            # Checker classes are instantiated so evaluate() is bound.
            if not issubclass(checker, Checker):
                raise TypeError(f"checker class for '{name}' must define evaluate(params)")
            bound: Checker = checker()
        elif isinstance(checker, Checker):
            bound = checker
        elif callable(checker):
            bound = FunctionChecker(checker)
        else:
            raise TypeError(
                f"checker for '{name}' must define evaluate(params) or be callable, "
                f"got {type(checker).__name__}"
            )

        if name in self._checkers:
            logger.info("Replacing custom checker '%s'", name)
        else:
            logger.debug("Registered custom checker '%s'", name)
        self._checkers[name] = bound

    def resolve(self, name: str) -> Checker | None:
        """Return the checker bound to ``name``, or None when nothing is registered."""
        return self._checkers.get(name)

    def unregister(self, name: str) -> bool:
        """Drop the binding for ``name``. Returns True if one existed."""
        return self._checkers.pop(name, None) is not None

    def names(self) -> list[str]:
        """Registered checker names, sorted."""
        return sorted(self._checkers)

    def __contains__(self, name: object) -> bool:
        return name in self._checkers

    def __len__(self) -> int:
        return len(self._checkers)
