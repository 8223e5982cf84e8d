"""Pushline models package."""

from pushline.models.config import (
    PushlineConfig,
    MavenConfig,
    RunConfig,
    NotificationConfig,
    LoggingConfig,
)
from pushline.models.push import PushEvent, ProjectSnapshot, RepoRef
from pushline.models.goals import (
    ExternalUrl,
    Goal,
    GoalExecution,
    GoalInvocation,
    GoalResult,
    GoalSet,
    GoalSetResult,
    GoalSetStatus,
    GoalState,
    GoalStateUpdate,
    ProgressLog,
    PushResult,
)

__all__ = [
    # Config
    "PushlineConfig",
    "MavenConfig",
    "RunConfig",
    "NotificationConfig",
    "LoggingConfig",
    # Push
    "PushEvent",
    "ProjectSnapshot",
    "RepoRef",
    # Goals
    "ExternalUrl",
    "Goal",
    "GoalExecution",
    "GoalInvocation",
    "GoalResult",
    "GoalSet",
    "GoalSetResult",
    "GoalSetStatus",
    "GoalState",
    "GoalStateUpdate",
    "ProgressLog",
    "PushResult",
]
