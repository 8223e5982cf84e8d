"""
Error types for Pushline.

Configuration problems are raised early and loudly. Everything that goes
wrong inside a single goal is converted to a failed GoalResult by the
executor and never reaches the caller.
"""

from __future__ import annotations


class PushlineError(Exception):
    """Base class for all Pushline errors."""


class ConfigurationError(PushlineError):
    """Raised when rules, goals or the environment are misconfigured."""

    def __init__(self, message: str, field: str | None = None):
        """Initialize with message and optional offending field name."""
        super().__init__(message)
        self.field = field
        self.message = message


class GoalStateError(PushlineError):
    """Raised on an illegal goal state transition."""


class ProcessError(PushlineError):
    """
    Raised when an external command fails to spawn or exits nonzero.

    Attributes:
        command: The full command line that was run
        output: Combined stdout/stderr captured before the failure
        exit_code: Process exit code, or None if the process never started
    """

    def __init__(
        self,
        message: str,
        command: list[str],
        output: str = "",
        exit_code: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.command = command
        self.output = output
        self.exit_code = exit_code


class PortUnavailable(PushlineError):
    """Raised when no port in the requested range can be bound."""

    def __init__(self, low: int, high: int):
        super().__init__(f"No free port in range {low}-{high}")
        self.low = low
        self.high = high
