"""
Command intent listing for Pushline CLI.
"""

from __future__ import annotations

import typer
from rich.table import Table

from pushline.cli.ui.console import console

app = typer.Typer(help="Registered command intents")


@app.command("list")
def commands_list():
    """List the command intents the machine registers."""
    from pushline.goals.maven import configure_maven_machine

    machine = configure_maven_machine()

    table = Table(title="Commands", show_header=True)
    table.add_column("Name", style="bold")
    table.add_column("Intent")
    table.add_column("Starting Point")
    table.add_column("Description")

    for registration in machine.commands.get_all():
        seed = registration.starting_point
        table.add_row(
            registration.name,
            registration.intent,
            f"{seed.slug}@{seed.branch}" if seed else "",
            registration.description,
        )

    console.print(table)
