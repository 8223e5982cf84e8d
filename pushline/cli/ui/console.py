"""
Console utilities for Pushline CLI.

Provides the styled console and a few formatting helpers.
"""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

from pushline.models.goals import GoalSetStatus, GoalState


# Custom theme for Pushline
PUSHLINE_THEME = Theme({
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
    "skipped": "dim",
    "sha": "bold cyan",
    "goal": "bold magenta",
    "rule": "bold blue",
})

# Global console instance
console = Console(theme=PUSHLINE_THEME)


STATE_STYLES = {
    GoalState.REQUESTED: "dim",
    GoalState.IN_PROCESS: "yellow",
    GoalState.SUCCESS: "success",
    GoalState.FAILURE: "error",
}

STATUS_STYLES = {
    GoalSetStatus.SUCCESS: "success",
    GoalSetStatus.FAILURE: "error",
    GoalSetStatus.SKIPPED: "skipped",
}


def format_state(state: GoalState) -> str:
    """Format a goal state with its color."""
    style = STATE_STYLES.get(state, "white")
    return f"[{style}]{state.value}[/]"


def format_status(status: GoalSetStatus) -> str:
    """Format a goal set status with its color."""
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status.value}[/]"


def print_error(message: str) -> None:
    console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    console.print(f"[success]{message}[/]")
