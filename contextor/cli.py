"""CLI entry point for Contextor."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from contextor.analyzer import ProjectAnalyzer
from contextor.config import ConfigError, ProjectConfig, load_config, render_config_template
from contextor.freshness import DocChecker
from contextor.reporter import render_console, render_json

app = typer.Typer(
    name="contextor",
    help="Keep project documentation in sync with its source code.",
)

config_app = typer.Typer(help="Manage Contextor configuration.")
app.add_typer(config_app, name="config")

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def _setup_logging(cfg: ProjectConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else _LOG_LEVELS[cfg.log_level]
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _load(root: Path, config: str | None, overrides: dict | None = None) -> ProjectConfig:
    try:
        return load_config(root, config_path=config, overrides=overrides)
    except ConfigError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)


@app.command()
def check(
    path: Annotated[str, typer.Argument(help="Path to project root")] = ".",
    force: Annotated[bool, typer.Option("--force", "-f", help="Check even if nothing changed")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only set the exit code")] = False,
    format: Annotated[
        str | None, typer.Option("--format", help="Output format: console or json")
    ] = None,
    errors_only: Annotated[bool, typer.Option("--errors-only", help="Hide warnings")] = False,
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to contextor.yaml")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Check documentation freshness, structure and links."""
    root = Path(path).resolve()
    if not root.is_dir():
        rprint(f"[red]Error:[/red] directory not found: {root}")
        raise typer.Exit(2)

    overrides: dict = {}
    if format is not None:
        if format not in ("console", "json"):
            rprint(f"[red]Error:[/red] Invalid format '{format}'. Choose console or json.")
            raise typer.Exit(2)
        overrides["reporter"] = {"format": format}
    if errors_only:
        overrides.setdefault("reporter", {})["errors_only"] = True

    cfg = _load(root, config, overrides)
    _setup_logging(cfg, verbose)

    checker = DocChecker(root, cfg, force=force, quiet=quiet)
    try:
        result = checker.run()
    except Exception as e:
        rprint(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(2)

    if cfg.reporter.format == "json":
        typer.echo(render_json(result, errors_only=cfg.reporter.errors_only))
    else:
        render_console(
            result,
            Console(),
            quiet=quiet,
            errors_only=cfg.reporter.errors_only,
            state=checker.previous_state,
        )

    if result.errors > 0:
        raise typer.Exit(1)


@app.command()
def analyze(
    path: Annotated[str, typer.Argument(help="Path to project root")] = ".",
    format: Annotated[str, typer.Option("--format", "-f", help="Output format: table or json")] = "table",
) -> None:
    """Detect the project's type, frameworks and layout."""
    root = Path(path).resolve()
    if not root.is_dir():
        rprint(f"[red]Error:[/red] directory not found: {root}")
        raise typer.Exit(2)

    analysis = ProjectAnalyzer(root).analyze()

    if format == "json":
        typer.echo(json.dumps(analysis.model_dump(), indent=2))
        return

    table = Table(title=f"Project Analysis: {root.name}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Type", analysis.type)
    table.add_row("Frameworks", ", ".join(analysis.frameworks) or "-")
    table.add_row("Languages", ", ".join(analysis.languages) or "-")
    table.add_row("Build tools", ", ".join(analysis.build_tools) or "-")
    table.add_row("Test frameworks", ", ".join(analysis.test_frameworks) or "-")
    table.add_row("Key dirs", ", ".join(analysis.key_dirs) or "-")
    table.add_row("Git", "yes" if analysis.has_git else "no")
    table.add_row("Tests", "yes" if analysis.has_tests else "no")
    rprint(table)


@config_app.command("show")
def config_show(
    path: Annotated[str, typer.Argument(help="Path to project root")] = ".",
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to contextor.yaml")
    ] = None,
) -> None:
    """Show the resolved configuration."""
    cfg = _load(Path(path).resolve(), config)
    dumped = yaml.safe_dump(cfg.model_dump(mode="json", by_alias=True), default_flow_style=False, sort_keys=False)
    rprint(Syntax(dumped, "yaml"))


@config_app.command("init")
def config_init(
    path: Annotated[str, typer.Argument(help="Path to project root")] = ".",
    force: Annotated[bool, typer.Option("--force", help="Overwrite existing config")] = False,
) -> None:
    """Create contextor.yaml in the project root."""
    root = Path(path).resolve()
    target = root / "contextor.yaml"
    if target.exists() and not force:
        rprint("[yellow]contextor.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)

    analysis = ProjectAnalyzer(root).analyze()
    source_dirs = [d for d in analysis.key_dirs if d in ("src", "lib", "app", "api", "server", "client")]
    target.write_text(render_config_template(source_dirs or None), encoding="utf-8")
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
