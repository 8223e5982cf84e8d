"""
Logging for Pushline.

Every module logs through a child of the ``pushline`` logger. The CLI
calls :func:`setup_logging` once to attach a Rich console handler and,
optionally, a plain or JSON file handler. Library users who never call
it get standard ``logging`` behavior.

Records about a push or goal carry ``push``, ``goal`` and ``state``
attributes so the JSON file output can be filtered per push.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, MutableMapping

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "pushline"

# Attributes copied from log records into JSON output
STRUCTURED_FIELDS = ("push", "goal", "state")

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class LogLevel(str, Enum):
    """Log levels accepted by the CLI and configuration."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def numeric(self) -> int:
        return getattr(logging, self.name)


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """
    Get a Pushline logger.

    Names outside the ``pushline`` hierarchy are nested under it so
    their records reach the handlers installed by :func:`setup_logging`.
    """
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


class PushLogAdapter(logging.LoggerAdapter):
    """Tags every record with the short sha of the push being handled."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def push_logger(logger: logging.Logger, sha: str) -> PushLogAdapter:
    """Wrap a logger so its records carry ``push=<sha>``."""
    return PushLogAdapter(logger, {"push": sha})


def setup_logging(
    level: LogLevel | str = LogLevel.INFO,
    log_file: str | Path | None = None,
    json_format: bool = False,
    console: bool = True,
) -> None:
    """
    Configure the ``pushline`` logger.

    Safe to call more than once; existing handlers are replaced.

    Args:
        level: Minimum level for every handler
        log_file: Also write records to this file
        json_format: Write the file as one JSON object per line
        console: Attach the Rich console handler (stderr)
    """
    if isinstance(level, str):
        level = LogLevel(level.lower())

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level.numeric)
    root.handlers.clear()

    handlers: list[logging.Handler] = []
    if console:
        handlers.append(_console_handler())
    if log_file:
        handlers.append(_file_handler(Path(log_file), json_format))

    for handler in handlers:
        handler.setLevel(level.numeric)
        root.addHandler(handler)


def _console_handler() -> RichHandler:
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        markup=True,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _file_handler(path: Path, json_format: bool) -> logging.FileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(JsonFormatter() if json_format else logging.Formatter(FILE_FORMAT))
    return handler


class JsonFormatter(logging.Formatter):
    """One JSON object per record, including the push/goal/state fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key)) for key in STRUCTURED_FIELDS if hasattr(record, key)
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def log_goal_execution(
    logger: logging.Logger | logging.LoggerAdapter,
    goal: str,
    sha: str,
    success: bool,
    duration: float,
    error: str | None = None,
) -> None:
    """
    Log the terminal state of one goal execution.

    Args:
        logger: Logger to use
        goal: Goal name
        sha: Short commit sha
        success: Whether the goal succeeded
        duration: Duration in seconds
        error: Failure message
    """
    state = "success" if success else "failure"
    extra = {"push": sha, "goal": goal, "state": state}
    if success:
        logger.info(f"[magenta]{goal}[/] on [cyan]{sha}[/] succeeded in {duration:.1f}s", extra=extra)
    else:
        logger.error(
            f"[magenta]{goal}[/] on [cyan]{sha}[/] failed: {error or 'no details'}",
            extra=extra,
        )
