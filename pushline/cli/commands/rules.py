"""
Rule table commands for Pushline CLI.
"""

from __future__ import annotations

from pathlib import Path

import typer

from pushline.cli.ui.console import console

app = typer.Typer(help="Inspect and validate push rules")


def _loader(config_file: str | None):
    from pushline.goals.maven import maven_goals
    from pushline.models.config import PushlineConfig
    from pushline.rules.loader import RuleLoader

    try:
        config = PushlineConfig.load(config_file)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(1)
    return RuleLoader(maven_goals(config)), config


@app.command("list")
def rules_list(
    name: str = typer.Argument(None, help="Rule table name (default: configured table)"),
    config_file: str = typer.Option(None, "--config", "-c", help="Configuration file"),
):
    """List the rules of a rule table."""
    from pushline.cli.ui.panels import create_rules_table
    from pushline.errors import ConfigurationError

    loader, config = _loader(config_file)

    try:
        if name:
            table = loader.load(name)
        elif config.rules_file:
            table = loader.load_file(config.rules_file)
        else:
            table = loader.load("maven")
    except (FileNotFoundError, ConfigurationError) as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(1)

    console.print(create_rules_table(table))
    console.print(f"\n[dim]Available tables: {', '.join(loader.list_available())}[/]")


@app.command("validate")
def rules_validate(
    rules_file: Path = typer.Argument(..., help="Rule file to validate"),
    config_file: str = typer.Option(None, "--config", "-c", help="Configuration file"),
):
    """Validate a rule file."""
    if not rules_file.exists():
        console.print(f"[red]Rule file not found: {rules_file}[/]")
        raise typer.Exit(1)

    loader, _ = _loader(config_file)
    errors = loader.validate(rules_file.read_text(encoding="utf-8"))

    if errors:
        console.print("[bold red]Errors:[/]")
        for error in errors:
            console.print(f"  [red]- {error}[/]")
        raise typer.Exit(1)

    console.print("[bold green]Rule file is valid![/]")


@app.command("resolve")
def rules_resolve(
    directory: Path = typer.Argument(..., help="Checkout to resolve goals for"),
    repo: str = typer.Option("local/project", "--repo", "-r", help="Repository slug"),
    sha: str = typer.Option("0000000", "--sha", help="Commit sha"),
    branch: str = typer.Option("master", "--branch", "-b", help="Branch name"),
    config_file: str = typer.Option(None, "--config", "-c", help="Configuration file"),
):
    """Show which goals a push of a checkout would run."""
    from pushline.cli.commands.push import build_machine, build_push
    from pushline.cli.ui.panels import create_resolution_table
    from pushline.errors import ConfigurationError
    from pushline.models.config import PushlineConfig

    try:
        config = PushlineConfig.load(config_file)
        machine = build_machine(config)
        push = build_push(directory, repo, sha, branch)
    except (ConfigurationError, FileNotFoundError, NotADirectoryError, ValueError) as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(1)

    console.print(create_resolution_table(machine.plan(push)))
