"""Tests for the custom checker registry."""

from __future__ import annotations

from collections.abc import Mapping

import pytest

from dyadt.evidence.registry import Checker, CheckerRegistry, FunctionChecker
from dyadt.evidence.types import CheckResult, Verdict


class _AlwaysRefuted:
    def evaluate(self, params: Mapping[str, str]) -> CheckResult:
        return CheckResult(Verdict.REFUTED, f"refuted {params.get('target', '')}")


def test_resolve_unknown_name_returns_none() -> None:
    registry = CheckerRegistry()
    assert registry.resolve("missing") is None


def test_register_checker_object() -> None:
    registry = CheckerRegistry()
    checker = _AlwaysRefuted()
    registry.register("refuter", checker)

    assert registry.resolve("refuter") is checker
    assert "refuter" in registry
    assert len(registry) == 1


def test_register_plain_callable_is_wrapped() -> None:
    registry = CheckerRegistry()
    registry.register("confirm", lambda params: Verdict.CONFIRMED)

    checker = registry.resolve("confirm")
    assert isinstance(checker, FunctionChecker)
    assert isinstance(checker, Checker)
    assert checker.evaluate({}) is Verdict.CONFIRMED


def test_closure_captures_state() -> None:
    expected_hosts = {"db01", "db02"}

    def host_known(params: Mapping[str, str]) -> Verdict:
        return Verdict.CONFIRMED if params["host"] in expected_hosts else Verdict.REFUTED

    registry = CheckerRegistry()
    registry.register("host_known", host_known)

    checker = registry.resolve("host_known")
    assert checker is not None
    assert checker.evaluate({"host": "db01"}) is Verdict.CONFIRMED
    assert checker.evaluate({"host": "web01"}) is Verdict.REFUTED


def test_last_registration_wins() -> None:
    registry = CheckerRegistry()
    registry.register("check", lambda params: Verdict.CONFIRMED)
    registry.register("check", lambda params: Verdict.REFUTED)

    checker = registry.resolve("check")
    assert checker is not None
    assert checker.evaluate({}) is Verdict.REFUTED
    assert registry.names() == ["check"]


def test_registries_are_independent() -> None:
    first = CheckerRegistry()
    second = CheckerRegistry()
    first.register("only_here", lambda params: Verdict.CONFIRMED)

    assert second.resolve("only_here") is None


def test_names_are_sorted() -> None:
    registry = CheckerRegistry()
    for name in ("zeta", "alpha", "mid"):
        registry.register(name, lambda params: Verdict.CONFIRMED)
    assert registry.names() == ["alpha", "mid", "zeta"]


def test_unregister() -> None:
    registry = CheckerRegistry()
    registry.register("gone", lambda params: Verdict.CONFIRMED)

    assert registry.unregister("gone") is True
    assert registry.unregister("gone") is False
    assert registry.resolve("gone") is None


def test_rejects_empty_name() -> None:
    with pytest.raises(ValueError, match="non-empty"):
        CheckerRegistry().register("", lambda params: Verdict.CONFIRMED)


def test_rejects_non_callable_checker() -> None:
    with pytest.raises(TypeError, match="must define evaluate"):
        CheckerRegistry().register("bad", 42)  # type: ignore[arg-type]


def test_checker_class_is_instantiated() -> None:
    registry = CheckerRegistry()
    registry.register("refuter", _AlwaysRefuted)

    checker = registry.resolve("refuter")
    assert isinstance(checker, _AlwaysRefuted)
    assert checker.evaluate({"target": "db"}) == CheckResult(Verdict.REFUTED, "refuted db")


def test_rejects_class_without_evaluate() -> None:
    class NotAChecker:
        pass

    with pytest.raises(TypeError, match="checker class for 'bad'"):
        CheckerRegistry().register("bad", NotAChecker)  # type: ignore[arg-type]
