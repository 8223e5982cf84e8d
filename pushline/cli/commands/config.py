"""
Configuration commands for Pushline CLI.
"""

from __future__ import annotations

import os

import typer
from rich.panel import Panel
from rich.table import Table

from pushline.cli.ui.console import console

app = typer.Typer(help="Configuration management")


@app.command("show")
def config_show(
    config_file: str = typer.Option(None, "--config", "-c", help="Configuration file"),
):
    """Show current configuration."""
    from pushline.models.config import PushlineConfig

    try:
        config = PushlineConfig.load(config_file)
    except Exception as e:
        console.print(f"[red]Error loading config: {e}[/]")
        raise typer.Exit(1)

    console.print(
        Panel.fit(
            f"[bold]Rules:[/]\n"
            f"  Rule File: {config.rules_file or 'built-in maven'}\n"
            f"\n[bold]Maven:[/]\n"
            f"  Executable: {config.maven.executable}\n"
            f"  Build: {' '.join(config.maven.build_args)}\n"
            f"  Run: {' '.join(config.maven.run_args)}\n"
            f"  Version: {' '.join(config.maven.version_args)}\n"
            f"  Timeout: {config.maven.timeout or 'none'}\n"
            f"\n[bold]Run:[/]\n"
            f"  Ports: {config.run.port_low}-{config.run.port_high}\n"
            f"  URL Host: {config.run.url_host}\n"
            f"\n[bold]Notifications:[/]\n"
            f"  Enabled: {config.notifications.enabled}\n"
            f"  Channel: {config.notifications.channel}\n"
            f"\n[bold]Logging:[/]\n"
            f"  Level: {config.logging.level}\n"
            f"  File: {config.logging.file or 'console only'}",
            title="[bold blue]Pushline Configuration[/]",
        )
    )


@app.command("init")
def config_init(
    config_file: str = typer.Argument("pushline.yaml", help="File to write"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
):
    """Write a configuration file with default values."""
    from pathlib import Path

    from pushline.models.config import PushlineConfig

    path = Path(config_file)
    if path.exists() and not force:
        console.print(f"[yellow]{path} already exists (use --force to overwrite)[/]")
        raise typer.Exit(1)

    PushlineConfig().save(path)
    console.print(f"[green]Wrote {path}[/]")


@app.command("env")
def config_env():
    """Show environment variables read by Pushline."""
    table = Table(title="Environment Variables", show_header=True)
    table.add_column("Variable", style="bold")
    table.add_column("Status")
    table.add_column("Description")

    variables = [
        ("DOCKER_HOST", "Docker daemon address for container goals"),
        ("PUSHLINE_RULES_FILE", "Rule table to load instead of the built-in one"),
        ("PUSHLINE_MAVEN__EXECUTABLE", "Maven executable"),
        ("PUSHLINE_RUN__PORT_LOW", "First port tried for started applications"),
        ("PUSHLINE_RUN__PORT_HIGH", "Last port tried for started applications"),
        ("PUSHLINE_NOTIFICATIONS__CHANNEL", "Notification channel (log, console)"),
        ("PUSHLINE_LOGGING__LEVEL", "Log level"),
    ]

    for name, description in variables:
        status = "[green]Set[/]" if os.environ.get(name) else "[dim]Not set[/]"
        table.add_row(name, status, description)

    console.print(table)


@app.command("docker-host")
def config_docker_host():
    """Show the Docker daemon host taken from DOCKER_HOST."""
    from pushline.errors import ConfigurationError
    from pushline.utils.environment import read_docker_host

    try:
        console.print(read_docker_host())
    except ConfigurationError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(1)
