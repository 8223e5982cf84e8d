"""
Goal models.

Goals and goal sets hold behavior (async actions), so they are plain
frozen dataclasses. Results, state updates and execution records are
pydantic models like the rest of the package.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pushline.errors import GoalStateError
from pushline.models.push import PushEvent


class GoalState(str, Enum):
    """Lifecycle states of a single goal execution."""

    REQUESTED = "requested"
    IN_PROCESS = "in_process"
    SUCCESS = "success"
    FAILURE = "failure"

    @property
    def is_terminal(self) -> bool:
        return self in (GoalState.SUCCESS, GoalState.FAILURE)


# Legal transitions of the goal state machine
GOAL_TRANSITIONS: dict[GoalState, set[GoalState]] = {
    GoalState.REQUESTED: {GoalState.IN_PROCESS},
    GoalState.IN_PROCESS: {GoalState.SUCCESS, GoalState.FAILURE},
    GoalState.SUCCESS: set(),
    GoalState.FAILURE: set(),
}


class ExternalUrl(BaseModel):
    """A labelled link produced by a goal, e.g. a running application."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(description="Short label")
    url: str = Field(description="Target URL")


class GoalResult(BaseModel):
    """Terminal outcome of a goal action."""

    model_config = ConfigDict(frozen=True)

    state: GoalState = Field(description="success or failure")
    code: int | None = Field(default=None, description="Numeric result code")
    external_urls: tuple[ExternalUrl, ...] = Field(default=(), description="Links to report")
    message: str | None = Field(default=None, description="Human readable detail")

    @field_validator("state")
    @classmethod
    def check_terminal(cls, v: GoalState) -> GoalState:
        """A result is only ever produced for a finished goal."""
        if not v.is_terminal:
            raise ValueError(f"GoalResult state must be terminal, got {v.value}")
        return v

    @classmethod
    def success(
        cls,
        external_urls: list[ExternalUrl] | None = None,
        message: str | None = None,
    ) -> "GoalResult":
        return cls(
            state=GoalState.SUCCESS,
            code=0,
            external_urls=tuple(external_urls or ()),
            message=message,
        )

    @classmethod
    def failure(cls, message: str, code: int = 1) -> "GoalResult":
        return cls(state=GoalState.FAILURE, code=code, message=message)

    @property
    def is_success(self) -> bool:
        return self.state == GoalState.SUCCESS


class GoalStateUpdate(BaseModel):
    """The reportable state produced by the GoalStateReporter."""

    model_config = ConfigDict(frozen=True)

    state: GoalState
    external_urls: tuple[ExternalUrl, ...] = ()
    code: int | None = None


class ProgressLog:
    """
    Append-only log attached to one goal execution.

    Lines are %-formatted like the logging module and mirrored to the
    ``pushline.progress`` logger at debug level.

    Example:
        >>> log = ProgressLog("maven-build")
        >>> log.write("Running %s", "mvn package")
        >>> log.lines
        ('Running mvn package',)
    """

    def __init__(self, name: str):
        self.name = name
        self._lines: list[str] = []
        self._logger = logging.getLogger(f"pushline.progress.{name}")

    def write(self, message: str, *args: Any) -> None:
        """Append a line to the log."""
        line = message % args if args else message
        self._lines.append(line)
        self._logger.debug(line)

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)

    @property
    def log(self) -> str:
        return "\n".join(self._lines)

    def __contains__(self, text: str) -> bool:
        return text in self.log

    def __len__(self) -> int:
        return len(self._lines)


@dataclass
class GoalInvocation:
    """Everything a goal action can see while it runs."""

    push: PushEvent
    goal: Goal
    progress_log: ProgressLog
    context: dict[str, Any] = field(default_factory=dict)


GoalAction = Callable[[GoalInvocation], Awaitable[GoalResult]]
GoalListener = Callable[[GoalInvocation], Awaitable[None]]


@dataclass(frozen=True)
class Goal:
    """
    A named unit of pipeline work.

    Listeners run in order before the action, e.g. to version the
    project before it is built.
    """

    name: str
    display_name: str
    action: GoalAction
    listeners: tuple[GoalListener, ...] = ()

    def with_listener(self, listener: GoalListener) -> "Goal":
        """Return a copy of this goal with an additional pre-action listener."""
        return Goal(
            name=self.name,
            display_name=self.display_name,
            action=self.action,
            listeners=self.listeners + (listener,),
        )


@dataclass(frozen=True, eq=False)
class GoalSet:
    """Ordered goals triggered together by one matched rule for one push."""

    rule: str
    goals: tuple[Goal, ...] = ()

    def __len__(self) -> int:
        return len(self.goals)

    @property
    def goal_names(self) -> list[str]:
        return [g.name for g in self.goals]


class GoalExecution(BaseModel):
    """Record of one goal execution, moving through the goal state machine."""

    goal: str = Field(description="Goal name")
    display_name: str = Field(default="")
    state: GoalState = Field(default=GoalState.REQUESTED)

    started_at: datetime | None = Field(default=None)
    completed_at: datetime | None = Field(default=None)

    result: GoalResult | None = Field(default=None)
    update: GoalStateUpdate | None = Field(default=None)
    log: str = Field(default="")

    def transition_to(self, state: GoalState) -> None:
        """
        Move to a new state.

        Raises:
            GoalStateError: If the transition is not allowed
        """
        if state not in GOAL_TRANSITIONS[self.state]:
            raise GoalStateError(
                f"Goal '{self.goal}' cannot move from {self.state.value} to {state.value}"
            )
        self.state = state
        if state == GoalState.IN_PROCESS:
            self.started_at = datetime.now()
        elif state.is_terminal:
            self.completed_at = datetime.now()

    def complete(self, result: GoalResult, update: GoalStateUpdate, log: ProgressLog) -> None:
        """Record the terminal result of the execution."""
        self.transition_to(result.state)
        self.result = result
        self.update = update
        self.log = log.log

    @property
    def duration(self) -> float:
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return 0.0


class GoalSetStatus(str, Enum):
    """Overall outcome of a goal set within a push."""

    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


class GoalSetResult(BaseModel):
    """Result of running (or skipping) one goal set."""

    rule: str
    status: GoalSetStatus
    executions: list[GoalExecution] = Field(default_factory=list)
    reason: str | None = None

    @property
    def success(self) -> bool:
        return self.status == GoalSetStatus.SUCCESS


class PushResult(BaseModel):
    """Everything that happened for one push."""

    push: PushEvent
    locked: bool = False
    goal_set_results: list[GoalSetResult] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: datetime | None = None

    @property
    def success(self) -> bool:
        return all(r.status != GoalSetStatus.FAILURE for r in self.goal_set_results)

    @property
    def executions(self) -> list[GoalExecution]:
        return [e for r in self.goal_set_results for e in r.executions]

    def get(self, rule: str) -> GoalSetResult | None:
        """Get the result for a rule by name."""
        for result in self.goal_set_results:
            if result.rule == rule:
                return result
        return None
