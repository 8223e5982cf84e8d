"""
Core package.

This package contains the scheduling engine: predicate evaluation, rule
resolution, goal execution and goal state reporting.
"""

from pushline.core.predicates import evaluate, parse_predicate
from pushline.core.resolver import PushRule, Resolution, RuleMatch, RuleTable, resolve
from pushline.core.reporter import GoalStateReporter, Notification, NotificationChannel
from pushline.core.executor import GoalExecutor
from pushline.core.machine import DeliveryMachine
from pushline.core.commands import CommandRegistry, GeneratorRegistration

__all__ = [
    "evaluate",
    "parse_predicate",
    "PushRule",
    "Resolution",
    "RuleMatch",
    "RuleTable",
    "resolve",
    "GoalStateReporter",
    "Notification",
    "NotificationChannel",
    "GoalExecutor",
    "DeliveryMachine",
    "CommandRegistry",
    "GeneratorRegistration",
]
