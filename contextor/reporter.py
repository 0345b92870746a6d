"""Human and machine-readable rendering of a CheckResult."""

from __future__ import annotations

import json

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from contextor.freshness.cache import CheckState
from contextor.freshness.checker import CheckResult


def render_json(result: CheckResult, *, errors_only: bool = False) -> str:
    findings = result.error_findings if errors_only else result.findings
    data = {
        "errors": result.errors,
        "warnings": result.warnings,
        "needsUpdate": result.needs_update,
        "skipped": result.skipped,
        "findings": [f.model_dump(mode="json") for f in findings],
    }
    return json.dumps(data, indent=2)


def render_console(
    result: CheckResult,
    console: Console,
    *,
    quiet: bool = False,
    errors_only: bool = False,
    state: CheckState | None = None,
) -> None:
    """Print findings for a developer running the check before a commit.

    *state* is the check state recorded before this run; on a skipped run it
    is shown so the last real counts stay visible.
    """
    if quiet:
        return

    if result.skipped:
        console.print("[dim]Documentation check: no code changes since last check, skipping.[/dim]")
        if state is not None and state.last_check is not None:
            console.print(
                f"[dim]Last check {state.last_check.isoformat()}: "
                f"{state.last_errors} error(s), {state.last_warnings} warning(s)[/dim]"
            )
        return

    if result.error_findings:
        console.print("\n[bold red]DOCUMENTATION UPDATES NEEDED:[/bold red]\n")
        for finding in result.error_findings:
            console.print(f"  [red]error:[/red] {escape(finding.message)}")
        console.print("\n[yellow]Consider updating documentation before committing.[/yellow]")

    if result.warning_findings and not errors_only:
        console.print("\n[bold yellow]WARNINGS:[/bold yellow]\n")
        for finding in result.warning_findings:
            console.print(f"  [yellow]warn:[/yellow] {escape(finding.message)}")

    if not result.errors and not result.warnings:
        console.print("[green]All documentation checks passed![/green]")
        return

    table = Table(title="Documentation Check")
    table.add_column("Severity", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("[red]errors[/red]", str(result.errors))
    table.add_row("[yellow]warnings[/yellow]", str(result.warnings))
    console.print()
    console.print(table)
