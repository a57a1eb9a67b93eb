"""Shared rich console factory and verdict styling for terminal output."""

from __future__ import annotations

import os

from rich.console import Console
from rich.text import Text

from dyadt.evidence.types import Verdict

VERDICT_STYLES: dict[Verdict, str] = {
    Verdict.CONFIRMED: "bold green",
    Verdict.REFUTED: "bold red",
    Verdict.INCONCLUSIVE: "bold yellow",
    Verdict.UNVERIFIABLE: "yellow",
    Verdict.ERROR: "bold bright_white on red",
}


def color_enabled() -> bool:
    return "NO_COLOR" not in os.environ and os.getenv("DYADT_COLOR", "1") == "1"


def make_console(stderr: bool = False) -> Console:
    return Console(stderr=stderr, no_color=not color_enabled(), highlight=False, soft_wrap=True)


def verdict_text(verdict: Verdict, label: str | None = None) -> Text:
    """Icon plus label styled for the verdict."""
    return Text(f"{verdict.icon} {label or verdict.value}", style=VERDICT_STYLES[verdict])
