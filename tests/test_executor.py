"""
Tests for the goal executor and delivery machine.
"""

import asyncio

import pytest

from pushline.core.executor import GoalExecutor
from pushline.core.machine import DeliveryMachine
from pushline.core.reporter import GoalStateReporter
from pushline.core.resolver import PushRule, RuleTable, resolve
from pushline.models.goals import (
    Goal,
    GoalResult,
    GoalSetStatus,
    GoalState,
)


class Recorder:
    """Creates goals that record when they run."""

    def __init__(self):
        self.calls: list[str] = []

    def goal(self, name: str, result: GoalResult | None = None, error: Exception | None = None) -> Goal:
        async def action(invocation):
            self.calls.append(name)
            invocation.progress_log.write("running %s", name)
            if error is not None:
                raise error
            return result or GoalResult.success()

        return Goal(name=name, display_name=name, action=action)

    def listener(self, name: str, error: Exception | None = None):
        async def listen(invocation):
            self.calls.append(name)
            if error is not None:
                raise error

        return listen


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def executor(channel):
    return GoalExecutor(GoalStateReporter(channel))


async def run(executor, rules, push):
    return await executor.execute(resolve(RuleTable(rules), push), push)


class TestGoalExecutor:
    """Tests for GoalExecutor."""

    @pytest.mark.asyncio
    async def test_goals_run_sequentially_with_listeners_first(self, executor, recorder, maven_push):
        build = recorder.goal("build").with_listener(recorder.listener("version"))
        rules = [PushRule(name="build", goals=(build, recorder.goal("test")))]

        result = await run(executor, rules, maven_push)

        assert recorder.calls == ["version", "build", "test"]
        assert result.success
        assert [e.state for e in result.executions] == [GoalState.SUCCESS, GoalState.SUCCESS]
        assert all(e.started_at and e.completed_at for e in result.executions)

    @pytest.mark.asyncio
    async def test_failure_halts_rest_of_goal_set(self, executor, recorder, maven_push):
        rules = [PushRule(name="build", goals=(
            recorder.goal("compile", GoalResult.failure("does not compile")),
            recorder.goal("package"),
        ))]

        result = await run(executor, rules, maven_push)

        assert recorder.calls == ["compile"]
        build = result.get("build")
        assert build.status == GoalSetStatus.FAILURE
        assert build.executions[0].state == GoalState.FAILURE
        assert build.executions[1].state == GoalState.REQUESTED
        assert not result.success

    @pytest.mark.asyncio
    async def test_failed_dependency_skips_dependent(self, executor, recorder, maven_push):
        rules = [
            PushRule(name="build", goals=(recorder.goal("build", GoalResult.failure("boom")),)),
            PushRule(name="run", depends_on="build", goals=(recorder.goal("run"),)),
            PushRule(name="smoke", depends_on="run", goals=(recorder.goal("smoke"),)),
            PushRule(name="lint", goals=(recorder.goal("lint"),)),
        ]

        result = await run(executor, rules, maven_push)

        assert "run" not in recorder.calls
        assert "smoke" not in recorder.calls
        assert "lint" in recorder.calls
        assert result.get("run").status == GoalSetStatus.SKIPPED
        assert result.get("run").executions == []
        assert result.get("smoke").status == GoalSetStatus.SKIPPED
        assert result.get("lint").status == GoalSetStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_dependent_runs_after_success(self, executor, recorder, maven_push):
        rules = [
            PushRule(name="run", depends_on="build", goals=(recorder.goal("run"),)),
            PushRule(name="build", goals=(recorder.goal("build"),)),
        ]

        result = await run(executor, rules, maven_push)

        assert recorder.calls == ["build", "run"]
        assert result.get("run").success

    @pytest.mark.asyncio
    async def test_action_exception_becomes_failure(self, executor, recorder, maven_push):
        rules = [PushRule(name="build", goals=(recorder.goal("build", error=RuntimeError("kaput")),))]

        result = await run(executor, rules, maven_push)

        execution = result.executions[0]
        assert execution.state == GoalState.FAILURE
        assert execution.result.code == 1
        assert "kaput" in execution.log
        assert execution.update.code == 1

    @pytest.mark.asyncio
    async def test_listener_exception_skips_action(self, executor, recorder, maven_push):
        build = recorder.goal("build").with_listener(
            recorder.listener("version", error=OSError("no pom"))
        )

        result = await run(executor, [PushRule(name="build", goals=(build,))], maven_push)

        assert recorder.calls == ["version"]
        assert result.executions[0].result.message == "no pom"

    @pytest.mark.asyncio
    async def test_non_result_return_is_failure(self, executor, maven_push):
        async def sloppy(invocation):
            return {"code": 0}

        goal = Goal(name="sloppy", display_name="sloppy", action=sloppy)
        result = await run(executor, [PushRule(name="x", goals=(goal,))], maven_push)

        assert result.executions[0].state == GoalState.FAILURE

    @pytest.mark.asyncio
    async def test_empty_locked_goal_set(self, executor, plain_push):
        result = await run(executor, [PushRule(name="no_goals", lock=True)], plain_push)

        assert result.locked
        assert result.executions == []
        assert result.get("no_goals").status == GoalSetStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_callbacks(self, channel, recorder, maven_push):
        started, completed, skipped = [], [], []
        executor = GoalExecutor(
            GoalStateReporter(channel),
            on_goal_start=lambda push, goal: started.append(goal.name),
            on_goal_complete=lambda push, execution: completed.append(execution.state),
            on_goal_set_skipped=lambda push, result: skipped.append(result.rule),
        )
        rules = [
            PushRule(name="build", goals=(recorder.goal("build", GoalResult.failure("x")),)),
            PushRule(name="run", depends_on="build", goals=(recorder.goal("run"),)),
        ]

        await run(executor, rules, maven_push)

        assert started == ["build"]
        assert completed == [GoalState.FAILURE]
        assert skipped == ["run"]

    @pytest.mark.asyncio
    async def test_success_is_notified(self, executor, channel, recorder, maven_push):
        await run(executor, [PushRule(name="build", goals=(recorder.goal("build"),))], maven_push)

        assert len(channel.sent) == 1
        notification, _ = channel.sent[0]
        assert maven_push.short_sha in notification.text


class TestDeliveryMachine:
    """Tests for DeliveryMachine."""

    @pytest.mark.asyncio
    async def test_pushes_run_concurrently(self, maven_push, plain_push):
        released = asyncio.Event()

        async def wait_for_other(invocation):
            await asyncio.wait_for(released.wait(), timeout=5)
            return GoalResult.success()

        async def release(invocation):
            released.set()
            return GoalResult.success()

        from pushline.core.predicates import has_file, not_

        table = RuleTable([
            PushRule(
                name="maven",
                test=has_file("pom.xml"),
                goals=(Goal(name="wait", display_name="wait", action=wait_for_other),),
            ),
            PushRule(
                name="other",
                test=not_(has_file("pom.xml")),
                goals=(Goal(name="release", display_name="release", action=release),),
            ),
        ])
        machine = DeliveryMachine("test", table)

        results = await machine.handle_pushes([maven_push, plain_push])

        assert [r.push.sha for r in results] == [maven_push.sha, plain_push.sha]
        assert all(r.success for r in results)

    @pytest.mark.asyncio
    async def test_plan_does_not_execute(self, recorder, maven_push):
        machine = DeliveryMachine("test", RuleTable([
            PushRule(name="build", goals=(recorder.goal("build"),)),
        ]))

        resolution = machine.plan(maven_push)

        assert resolution.rule_names == ["build"]
        assert recorder.calls == []
