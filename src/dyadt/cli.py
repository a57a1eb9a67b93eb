"""dyadt CLI - verify claimed actions against observable evidence.

Exit codes:
    0 - Confirmed
    1 - Refuted
    2 - Inconclusive or Unverifiable
    3 - Error (evaluation error, invalid input, bad configuration)
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click
import typer
from rich.text import Text

from dyadt import __version__
from dyadt.claims.loader import evidence_to_dict, load_claims
from dyadt.claims.types import Claim, VerificationReport
from dyadt.config import DyadtConfig, load_config
from dyadt.errors import DyadtError
from dyadt.evidence.evaluator import verify_claim
from dyadt.evidence.registry import CheckerRegistry
from dyadt.evidence.types import DirExists, FileExists, FileHash, Verdict
from dyadt.hashing import canonical_dumps, sha256_file
from dyadt.logging_setup import configure_logging
from dyadt.plugins import load_entry_point_checkers
from dyadt.report import (
    render_report,
    render_reports,
    report_to_dict,
    reports_to_dict,
    write_report_json,
)
from dyadt.ui import make_console

EXIT_CONFIRMED = 0
EXIT_REFUTED = 1
EXIT_INCONCLUSIVE = 2
EXIT_ERROR = 3

EXIT_CODES: dict[Verdict, int] = {
    Verdict.CONFIRMED: EXIT_CONFIRMED,
    Verdict.REFUTED: EXIT_REFUTED,
    Verdict.INCONCLUSIVE: EXIT_INCONCLUSIVE,
    Verdict.UNVERIFIABLE: EXIT_INCONCLUSIVE,
    Verdict.ERROR: EXIT_ERROR,
}

CLI_SOURCE = "dyadt-cli"

cli = typer.Typer(
    name="dyadt",
    help="Did You Actually Do That? Verify claimed actions against observable evidence.",
    no_args_is_help=True,
)
console = make_console()
err_console = make_console(stderr=True)


@dataclass
class CliState:
    """Per-invocation configuration and checker registry."""

    config: DyadtConfig
    registry: CheckerRegistry


def verdict_to_exit_code(verdict: Verdict) -> int:
    """Map a verdict to the process exit code."""
    return EXIT_CODES[verdict]


def _fail(message: str) -> typer.Exit:
    err_console.print(Text.assemble(("Error:", "bold red"), " ", message))
    return typer.Exit(EXIT_ERROR)


def _state(ctx: typer.Context) -> CliState:
    state: CliState = ctx.obj
    return state


def _version_option_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    ctx: typer.Context,
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (.toml, .yaml or .json). Default: .dyadt/config.* in the working directory",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Log level: DEBUG, INFO, WARNING, ERROR",
    ),
    no_plugins: bool = typer.Option(
        False,
        "--no-plugins",
        help="Do not load custom checkers from installed plugins",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show dyadt version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    """Did You Actually Do That? Verify claimed actions against observable evidence."""
    try:
        config = load_config(config_path)
    except DyadtError as e:
        raise _fail(str(e)) from e

    configure_logging(log_level or config.log_level, console=err_console)

    registry = CheckerRegistry()
    if config.load_plugins and not no_plugins:
        load_entry_point_checkers(registry, disabled=config.disabled_checkers)

    ctx.obj = CliState(config=config, registry=registry)


def _verify(state: CliState, claim: Claim) -> VerificationReport:
    return verify_claim(claim, state.registry, max_read_bytes=state.config.max_read_bytes)


def _write_out(data: dict[str, Any], out: Path | None) -> None:
    if out is None:
        return
    try:
        write_report_json(data, out)
    except OSError as e:
        raise _fail(f"Error writing {out}: {e.strerror or e}") from e


def _emit_json(data: dict[str, Any], out: Path | None) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
    _write_out(data, out)


def _load(path: Path) -> list[Claim]:
    try:
        return load_claims(path)
    except OSError as e:
        raise _fail(f"Error reading {path}: {e.strerror or e}") from e
    except DyadtError as e:
        raise _fail(str(e)) from e


@cli.command()
def check(
    ctx: typer.Context,
    claim_file: Path = typer.Argument(..., help="Claim JSON file"),
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    out: Path | None = typer.Option(None, "--out", help="Also write the JSON report to this path"),
) -> None:
    """Verify a claim from a JSON file."""
    state = _state(ctx)
    claims = _load(claim_file)
    if len(claims) != 1:
        raise _fail(
            f"{claim_file} holds {len(claims)} claims; 'check' takes exactly one "
            "(use 'dyadt report' for several)"
        )

    report = _verify(state, claims[0])
    if json_output:
        _emit_json(report_to_dict(report), out)
    else:
        render_report(report, console)
        _write_out(report_to_dict(report), out)

    raise typer.Exit(verdict_to_exit_code(report.verdict))


@cli.command()
def verify(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File or directory that should exist"),
    directory: bool = typer.Option(False, "--dir", help="Require the path to be a directory"),
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON"),
) -> None:
    """Quick check that a file or directory exists."""
    state = _state(ctx)
    try:
        if directory:
            claim = Claim.new(f"Directory exists: {path}", [DirExists(path=path)], source=CLI_SOURCE)
        else:
            claim = Claim.new(f"Path exists: {path}", [FileExists(path=path)], source=CLI_SOURCE)
    except DyadtError as e:
        raise _fail(str(e)) from e

    report = _verify(state, claim)
    if json_output:
        _emit_json(report_to_dict(report), None)
    else:
        render_report(report, console)

    raise typer.Exit(verdict_to_exit_code(report.verdict))


@cli.command(name="hash")
def hash_cmd(
    file: Path = typer.Argument(..., help="File to hash"),
    json_output: bool = typer.Option(False, "--json", help="Print digest and evidence as JSON"),
) -> None:
    """Compute the SHA-256 of a file, for use in FileHash evidence."""
    try:
        digest = sha256_file(file)
    except OSError as e:
        raise _fail(f"Error reading {file}: {e.strerror or e}") from e

    evidence = evidence_to_dict(FileHash(path=str(file), expected=digest))
    if json_output:
        typer.echo(json.dumps({"path": str(file), "sha256": digest, "evidence": evidence}, indent=2))
        return

    typer.echo(digest)
    typer.echo("")
    typer.echo("Evidence spec:")
    typer.echo(canonical_dumps(evidence))


@cli.command()
def report(
    ctx: typer.Context,
    claims_file: Path = typer.Argument(..., help="JSON file holding a claim or an array of claims"),
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    out: Path | None = typer.Option(None, "--out", help="Also write the JSON report to this path"),
) -> None:
    """Verify multiple claims and generate a report."""
    state = _state(ctx)
    claims = _load(claims_file)

    reports = [_verify(state, claim) for claim in claims]
    data = reports_to_dict(reports)
    if json_output:
        _emit_json(data, out)
        overall = Verdict(data["overall_verdict"])
    else:
        overall = render_reports(reports, console)
        _write_out(data, out)

    raise typer.Exit(verdict_to_exit_code(overall))


@cli.command()
def checkers(ctx: typer.Context) -> None:
    """List registered custom checkers."""
    state = _state(ctx)
    names = state.registry.names()
    if not names:
        console.print("[dim]No custom checkers registered.[/dim]")
        return
    for name in names:
        typer.echo(name)


@cli.command()
def version() -> None:
    """Show dyadt version."""
    typer.echo(__version__)


def main(argv: list[str] | None = None) -> None:
    """Console-script entry point.

    Click reports usage errors with exit code 2, which dyadt reserves for
    Inconclusive; they are mapped to 3 here.
    """
    command = typer.main.get_command(cli)
    try:
        code = command.main(args=argv, prog_name="dyadt", standalone_mode=False)
    except click.ClickException as e:
        e.show()
        code = EXIT_ERROR
    except click.Abort:
        err_console.print("Aborted!")
        code = EXIT_ERROR
    except DyadtError as e:
        err_console.print(Text.assemble(("Error:", "bold red"), " ", str(e)))
        code = EXIT_ERROR
    sys.exit(code if isinstance(code, int) else 0)


if __name__ == "__main__":
    main()
