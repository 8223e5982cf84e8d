"""
Delivery machine.

Entry point for pushes. Each push is resolved and executed in its own
asyncio task; the rule table is the only thing pushes share.
"""

from __future__ import annotations

import asyncio
from typing import Iterable

from pushline.core.commands import CommandRegistry
from pushline.core.executor import GoalExecutor
from pushline.core.resolver import Resolution, RuleTable, resolve
from pushline.models.goals import PushResult
from pushline.models.push import PushEvent
from pushline.utils.logger import get_logger, push_logger

logger = get_logger("pushline.machine")


class DeliveryMachine:
    """
    Schedules goals for incoming pushes.

    Example:
        >>> machine = DeliveryMachine("maven", rules, GoalExecutor())
        >>> result = await machine.handle_push(push)
    """

    def __init__(
        self,
        name: str,
        rules: RuleTable,
        executor: GoalExecutor | None = None,
        commands: CommandRegistry | None = None,
    ):
        self.name = name
        self.rules = rules
        self.executor = executor or GoalExecutor()
        self.commands = commands or CommandRegistry()

    def plan(self, push: PushEvent) -> Resolution:
        """Resolve the goal sets for a push without running them."""
        return resolve(self.rules, push)

    async def handle_push(self, push: PushEvent) -> PushResult:
        """
        Resolve and execute the goals for one push.

        Args:
            push: Incoming push

        Returns:
            Result of every goal set for the push
        """
        resolution = self.plan(push)
        log = push_logger(logger, push.short_sha)
        if resolution.locked:
            log.info(
                f"Push {push.to_summary()} locked by rule "
                f"[bold]{resolution.rule_names[0]}[/] with {len(resolution.goals)} goal(s)"
            )
        else:
            log.info(
                f"Push {push.to_summary()} matched {resolution.rule_names or 'no rules'}"
            )
        return await self.executor.execute(resolution, push)

    async def handle_pushes(self, pushes: Iterable[PushEvent]) -> list[PushResult]:
        """Handle several pushes concurrently, one task per push."""
        return list(await asyncio.gather(*(self.handle_push(p) for p in pushes)))
