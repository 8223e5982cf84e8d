"""
Pushline command line.

``pushline push`` runs the goals for a local checkout; the sub-apps
inspect rule tables, configuration and registered commands.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

import typer

from pushline import __version__
from pushline.cli.commands import config, intents, push, rules
from pushline.cli.ui.console import console

app = typer.Typer(
    name="pushline",
    help="Goal scheduling for continuous delivery",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.add_typer(rules.app, name="rules", help="Inspect and validate push rules")
app.add_typer(config.app, name="config", help="Configuration management")
app.add_typer(intents.app, name="commands", help="Registered command intents")
app.command("push")(push.push_command)


@dataclass
class CLIOptions:
    """Global options shared with sub-commands through ``ctx.obj``."""

    quiet: bool = False
    debug: bool = False

    def log_level(self, configured: str) -> str:
        if self.debug:
            return "DEBUG"
        if self.quiet:
            return "WARNING"
        return configured


def _print_version(value: bool):
    if value:
        console.print(f"[bold blue]Pushline[/] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-v",
        help="Show version and exit",
        callback=_print_version,
        is_eager=True,
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
    debug: bool = typer.Option(False, "--debug", help="Log everything, including progress logs"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
):
    """
    Pushline - goal scheduling for continuous delivery

    Matches pushes against push rules, runs the resulting goals in
    dependency order and reports how each goal ended.
    """
    ctx.obj = CLIOptions(quiet=quiet, debug=debug)
    if no_color:
        os.environ["NO_COLOR"] = "1"


def main():
    app()


if __name__ == "__main__":
    main()
