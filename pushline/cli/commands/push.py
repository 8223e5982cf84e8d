"""
The ``push`` command and the helpers behind it.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from pushline.cli.ui.console import console, print_error
from pushline.cli.ui.panels import (
    ConsoleNotifier,
    create_push_panel,
    create_resolution_table,
    create_result_table,
)
from pushline.core.machine import DeliveryMachine
from pushline.errors import ConfigurationError
from pushline.goals.maven import configure_maven_machine
from pushline.models.config import PushlineConfig
from pushline.models.goals import PushResult
from pushline.models.push import ProjectSnapshot, PushEvent, RepoRef
from pushline.utils.logger import setup_logging


def build_push(directory: str | Path, repo: str, sha: str, branch: str) -> PushEvent:
    """Create a push event for a local checkout."""
    return PushEvent(
        repo=RepoRef.from_slug(repo, branch=branch),
        sha=sha,
        snapshot=ProjectSnapshot.from_directory(directory),
    )


def build_machine(config: PushlineConfig) -> DeliveryMachine:
    """Assemble the delivery machine for the CLI."""
    channel = ConsoleNotifier(console) if config.notifications.channel == "console" else None
    return configure_maven_machine(config, channel=channel)


async def run_push(
    directory: str,
    repo: str,
    sha: str,
    branch: str,
    config: PushlineConfig,
    dry_run: bool = False,
) -> PushResult | None:
    """
    Resolve and execute the goals for a local checkout.

    Args:
        directory: Checkout directory
        repo: Repository slug (owner/name)
        sha: Commit sha
        branch: Branch name
        config: Pushline configuration
        dry_run: Only show the planned goals

    Returns:
        The push result, or None for a dry run
    """
    push = build_push(directory, repo, sha, branch)
    machine = build_machine(config)

    console.print(create_push_panel(push))
    console.print(create_resolution_table(machine.plan(push)))

    if dry_run:
        return None

    result = await machine.handle_push(push)
    console.print(create_result_table(result))

    if result.success:
        console.print("[success]All scheduled goals succeeded[/]")
    else:
        print_error("One or more goals failed")
        for execution in result.executions:
            if execution.log and execution.result and not execution.result.is_success:
                console.print(f"\n[goal]{execution.display_name}[/] progress log:")
                console.print(execution.log, markup=False, highlight=False)

    return result


def push_command(
    ctx: typer.Context,
    directory: str = typer.Argument(..., help="Checkout of the pushed commit"),
    repo: str = typer.Option("local/project", "--repo", "-r", help="Repository slug (owner/name)"),
    sha: str = typer.Option(..., "--sha", "-s", help="Commit sha"),
    branch: str = typer.Option("master", "--branch", "-b", help="Branch name"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Only show the planned goals"),
    config_file: str = typer.Option(None, "--config", "-c", help="Configuration file"),
):
    """
    Run the goals for a push of a local checkout.

    Example:
        pushline push ./spring-rest --sha 4f1c2e9 --repo acme/spring-rest
    """
    try:
        config = PushlineConfig.load(config_file)
    except (FileNotFoundError, ValueError) as e:
        print_error(f"Could not load configuration: {e}")
        raise typer.Exit(1)

    level = config.logging.level
    if ctx.obj is not None:
        level = ctx.obj.log_level(level)
    setup_logging(level, config.logging.file, config.logging.json_format)

    try:
        result = asyncio.run(run_push(directory, repo, sha, branch, config, dry_run=dry_run))
    except (ConfigurationError, FileNotFoundError, NotADirectoryError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    if result is not None and not result.success:
        raise typer.Exit(1)
