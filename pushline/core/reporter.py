"""
Goal state reporting.

Turns a GoalResult into the state that is reported for the goal, and
sends a notification when a goal succeeds.
"""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

from pushline.models.goals import (
    GoalInvocation,
    GoalResult,
    GoalState,
    GoalStateUpdate,
)
from pushline.utils.logger import get_logger

logger = get_logger("pushline.reporter")


class Notification(BaseModel):
    """A rendered success message."""

    model_config = ConfigDict(frozen=True)

    title: str
    text: str
    repo: str = ""
    sha: str = ""
    urls: tuple[str, ...] = Field(default=())


class NotificationChannel(Protocol):
    """Delivers notifications somewhere people will see them."""

    async def send(self, notification: Notification, options: dict[str, Any]) -> None:
        ...


class LogNotifier:
    """Notification channel that writes to the Pushline log."""

    async def send(self, notification: Notification, options: dict[str, Any]) -> None:
        logger.info(f"[green]{notification.title}[/]: {notification.text}")


def render_success(invocation: GoalInvocation, result: GoalResult) -> Notification:
    """Render the success notification for a goal."""
    push = invocation.push
    text = f"Successfully completed `{push.short_sha}`"
    urls = tuple(u.url for u in result.external_urls)
    if urls:
        text += " at " + ", ".join(f"<{u}>" for u in urls)

    return Notification(
        title=invocation.goal.display_name,
        text=text,
        repo=push.repo.slug,
        sha=push.short_sha,
        urls=urls,
    )


class GoalStateReporter:
    """
    Maps goal results to reportable states.

    Successful goals are announced on the notification channel; failed
    goals have their failure written to the goal's progress log. Nothing
    is ever retried here.
    """

    def __init__(
        self,
        channel: NotificationChannel | None = None,
        notify: bool = True,
    ):
        self.channel = channel or LogNotifier()
        self.notify = notify

    async def report(self, invocation: GoalInvocation, result: GoalResult) -> GoalStateUpdate:
        """
        Report the result of one goal.

        Args:
            invocation: The goal invocation that produced the result
            result: Terminal result of the goal action

        Returns:
            The reportable goal state
        """
        if result.state == GoalState.SUCCESS:
            if self.notify:
                try:
                    await self.channel.send(render_success(invocation, result), {})
                except Exception as e:
                    # A lost notification does not change the goal outcome
                    logger.error(f"Failed to send notification for {invocation.goal.name}: {e}")
            return GoalStateUpdate(
                state=GoalState.SUCCESS,
                external_urls=result.external_urls,
            )

        invocation.progress_log.write(
            "Goal '%s' failed: %s",
            invocation.goal.display_name,
            result.message or "no details",
        )
        return GoalStateUpdate(state=GoalState.FAILURE, code=result.code)
