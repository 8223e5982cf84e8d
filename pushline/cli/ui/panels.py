"""
Rich panels for Pushline CLI.

Provides styled panels and tables for pushes, resolutions and results,
and a notification channel that prints to the console.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pushline.cli.ui.console import console as default_console
from pushline.cli.ui.console import format_state, format_status
from pushline.core.predicates import describe

if TYPE_CHECKING:
    from pushline.core.reporter import Notification
    from pushline.core.resolver import Resolution, RuleTable
    from pushline.models.goals import PushResult
    from pushline.models.push import PushEvent


class ConsoleNotifier:
    """Notification channel that prints a panel per notification."""

    def __init__(self, console: Console | None = None):
        self.console = console or default_console

    async def send(self, notification: Notification, options: dict[str, Any]) -> None:
        self.console.print(Panel(
            Text.from_markup(notification.text.replace("`", "")),
            title=f"[success]{notification.title}[/]",
            subtitle=notification.repo or None,
            border_style="green",
        ))


def create_push_panel(push: PushEvent) -> Panel:
    """
    Create a panel describing a push.

    Args:
        push: The push

    Returns:
        Rich Panel with repository, branch, sha and file count
    """
    content = [
        Text.from_markup(f"[bold]Repository:[/] {push.repo.slug}"),
        Text.from_markup(f"[bold]Branch:[/] {push.branch}"),
        Text.from_markup(f"[bold]Commit:[/] [sha]{push.short_sha}[/]"),
        Text.from_markup(f"[bold]Files:[/] {len(push.snapshot.paths)}"),
    ]
    return Panel(Group(*content), title="[bold blue]Push[/]", border_style="blue")


def create_rules_table(rules: RuleTable) -> Table:
    """Create a table listing the rules of a rule table."""
    table = Table(title="Push Rules", show_header=True)
    table.add_column("Rule", style="rule")
    table.add_column("Test")
    table.add_column("Goals")
    table.add_column("Depends On")
    table.add_column("Lock")

    for rule in rules:
        table.add_row(
            rule.name,
            describe(rule.test),
            ", ".join(g.name for g in rule.goals) or "[dim]none[/]",
            rule.depends_on or "",
            "[yellow]yes[/]" if rule.lock else "",
        )

    return table


def create_resolution_table(resolution: Resolution) -> Table:
    """Create a table of the planned goal sets for a push."""
    title = "Planned Goals (locked)" if resolution.locked else "Planned Goals"
    table = Table(title=title, show_header=True)
    table.add_column("#", justify="right")
    table.add_column("Rule", style="rule")
    table.add_column("Goal", style="goal")
    table.add_column("Listeners", justify="right")

    index = 0
    for entry in resolution.entries:
        if not entry.goal_set.goals:
            table.add_row("", entry.rule.name, "[dim]no goals[/]", "")
        for goal in entry.goal_set.goals:
            index += 1
            table.add_row(str(index), entry.rule.name, goal.display_name, str(len(goal.listeners)))

    return table


def create_result_table(result: PushResult) -> Table:
    """Create a table of goal outcomes for a push."""
    table = Table(title=f"Goals for {result.push.short_sha}", show_header=True)
    table.add_column("Rule", style="rule")
    table.add_column("Status")
    table.add_column("Goal", style="goal")
    table.add_column("State")
    table.add_column("Duration", justify="right")
    table.add_column("Details")

    for set_result in result.goal_set_results:
        if not set_result.executions:
            table.add_row(
                set_result.rule,
                format_status(set_result.status),
                "",
                "",
                "",
                set_result.reason or "",
            )
        for execution in set_result.executions:
            details = ""
            if execution.result is not None:
                urls = ", ".join(u.url for u in execution.result.external_urls)
                details = urls or execution.result.message or ""
            table.add_row(
                set_result.rule,
                format_status(set_result.status),
                execution.display_name,
                format_state(execution.state),
                f"{execution.duration:.1f}s" if execution.duration else "",
                details,
            )

    return table
