"""Discovery of custom checkers published by installed packages.

Third-party packages register checkers under the ``dyadt.checkers``
entry-point group. The entry-point name is the checker name used by Custom
evidence; the object it loads is a Checker instance, a Checker class, or a
plain callable taking the params mapping::

    [project.entry-points."dyadt.checkers"]
    port_open = "mypkg.checks:port_open"
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from importlib.metadata import EntryPoint, entry_points

from dyadt.evidence.registry import CheckerRegistry

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "dyadt.checkers"


@dataclass
class PluginLoadReport:
    """Which entry points were registered, skipped or failed."""

    loaded: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


def _discover() -> Iterable[EntryPoint]:
    return entry_points(group=ENTRY_POINT_GROUP)


def load_entry_point_checkers(
    registry: CheckerRegistry,
    *,
    disabled: Iterable[str] = (),
) -> PluginLoadReport:
    """Register every ``dyadt.checkers`` entry point into ``registry``.

    An entry point that fails to import or is not usable as a checker is
    logged and left unregistered, so evidence naming it evaluates as
    Unverifiable rather than breaking the whole run.
    """
    report = PluginLoadReport()
    disabled_names = set(disabled)

    for ep in _discover():
        if ep.name in disabled_names:
            report.skipped.append(ep.name)
            continue
        try:
            registry.register(ep.name, ep.load())
        except Exception as exc:  # plugin import/registration faults stay contained
            logger.warning("Could not load checker plugin '%s' (%s): %s", ep.name, ep.value, exc)
            report.failed[ep.name] = f"{type(exc).__name__}: {exc}"
            continue
        report.loaded.append(ep.name)

    return report
