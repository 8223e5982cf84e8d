"""
Goal executor.

Runs the goal sets of one push in resolved order. Goals inside a set run
one after another; a set only starts once every rule it depends on has
succeeded. Nothing a goal does can escape as an exception.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from pushline.core.reporter import GoalStateReporter
from pushline.core.resolver import Resolution, ResolvedGoalSet
from pushline.models.goals import (
    Goal,
    GoalExecution,
    GoalInvocation,
    GoalResult,
    GoalSetResult,
    GoalSetStatus,
    GoalState,
    ProgressLog,
    PushResult,
)
from pushline.models.push import PushEvent
from pushline.utils.logger import get_logger, log_goal_execution

logger = get_logger("pushline.executor")


class GoalExecutor:
    """
    Executes resolved goal sets for a push.

    Example:
        >>> executor = GoalExecutor(GoalStateReporter())
        >>> result = await executor.execute(resolve(table, push), push)
    """

    def __init__(
        self,
        reporter: GoalStateReporter | None = None,
        on_goal_start: Callable[[PushEvent, Goal], None] | None = None,
        on_goal_complete: Callable[[PushEvent, GoalExecution], None] | None = None,
        on_goal_set_skipped: Callable[[PushEvent, GoalSetResult], None] | None = None,
    ):
        """
        Initialize the executor.

        Args:
            reporter: Goal state reporter
            on_goal_start: Callback when a goal moves to in_process
            on_goal_complete: Callback when a goal reaches a terminal state
            on_goal_set_skipped: Callback when a goal set is not scheduled
        """
        self.reporter = reporter or GoalStateReporter()
        self.on_goal_start = on_goal_start
        self.on_goal_complete = on_goal_complete
        self.on_goal_set_skipped = on_goal_set_skipped

    async def execute(self, resolution: Resolution, push: PushEvent) -> PushResult:
        """
        Execute every goal set of a resolution.

        Args:
            resolution: Ordered goal sets for the push
            push: The push being processed

        Returns:
            Results for every goal set, including skipped ones
        """
        result = PushResult(push=push, locked=resolution.locked)
        outcomes: dict[str, GoalSetStatus] = {}

        for entry in resolution.entries:
            dependency = entry.rule.depends_on
            if dependency is not None and outcomes.get(dependency) != GoalSetStatus.SUCCESS:
                skipped = GoalSetResult(
                    rule=entry.rule.name,
                    status=GoalSetStatus.SKIPPED,
                    reason=f"Dependency '{dependency}' did not succeed",
                )
                logger.info(
                    f"Skipping [bold]{entry.rule.name}[/] for {push.short_sha}: {skipped.reason}"
                )
                outcomes[entry.rule.name] = GoalSetStatus.SKIPPED
                result.goal_set_results.append(skipped)
                if self.on_goal_set_skipped:
                    self.on_goal_set_skipped(push, skipped)
                continue

            set_result = await self._execute_goal_set(entry, push)
            outcomes[entry.rule.name] = set_result.status
            result.goal_set_results.append(set_result)

        result.completed_at = datetime.now()
        return result

    async def _execute_goal_set(self, entry: ResolvedGoalSet, push: PushEvent) -> GoalSetResult:
        """Run the goals of one set in order, stopping at the first failure."""
        executions = [
            GoalExecution(goal=g.name, display_name=g.display_name)
            for g in entry.goal_set.goals
        ]
        set_result = GoalSetResult(
            rule=entry.rule.name,
            status=GoalSetStatus.SUCCESS,
            executions=executions,
        )

        for goal, execution in zip(entry.goal_set.goals, executions):
            await self._execute_goal(goal, execution, push)
            if execution.state == GoalState.FAILURE:
                set_result.status = GoalSetStatus.FAILURE
                set_result.reason = f"Goal '{goal.name}' failed"
                break

        return set_result

    async def _execute_goal(self, goal: Goal, execution: GoalExecution, push: PushEvent) -> None:
        """Run one goal through the state machine."""
        progress_log = ProgressLog(goal.name)
        invocation = GoalInvocation(push=push, goal=goal, progress_log=progress_log)

        execution.transition_to(GoalState.IN_PROCESS)
        if self.on_goal_start:
            self.on_goal_start(push, goal)

        result = await self._invoke(goal, invocation)
        update = await self.reporter.report(invocation, result)
        execution.complete(result, update, progress_log)

        log_goal_execution(
            logger,
            goal=goal.name,
            sha=push.short_sha,
            success=result.is_success,
            duration=execution.duration,
            error=result.message,
        )

        if self.on_goal_complete:
            self.on_goal_complete(push, execution)

    async def _invoke(self, goal: Goal, invocation: GoalInvocation) -> GoalResult:
        """Run listeners and the action, converting any exception to a failure."""
        try:
            for listener in goal.listeners:
                await listener(invocation)
            result = await goal.action(invocation)
        except Exception as e:
            invocation.progress_log.write("Goal '%s' raised: %s", goal.name, e)
            logger.exception(f"Unhandled error in goal {goal.name}")
            return GoalResult.failure(str(e) or type(e).__name__, code=1)

        if not isinstance(result, GoalResult):
            return GoalResult.failure(
                f"Goal '{goal.name}' returned {type(result).__name__}, expected GoalResult"
            )
        return result
