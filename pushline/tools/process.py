"""
External process runner.

Runs build and run commands for goal actions. Output is captured with
stderr merged into stdout so the progress log shows what the tool
printed in order.
"""

from __future__ import annotations

import asyncio
import os
import signal
from pathlib import Path

from pushline.errors import ProcessError
from pushline.utils.logger import get_logger

logger = get_logger("pushline.process")

# How long to wait for output after killing a timed-out command
KILL_GRACE_SECONDS = 5.0

_POSIX = hasattr(os, "killpg")


def _kill_process_group(proc: asyncio.subprocess.Process) -> None:
    """
    Kill a command together with everything it started.

    Commands run in their own session, so on POSIX the whole group is
    killed. ``mvn spring-boot:run`` forks the application JVM, which
    would otherwise keep the output pipe open.
    """
    try:
        if _POSIX:
            os.killpg(proc.pid, signal.SIGKILL)
        else:
            proc.kill()
    except ProcessLookupError:
        pass


class ProcessRunner:
    """
    Runs external commands asynchronously.

    Example:
        >>> runner = ProcessRunner()
        >>> output = await runner.run("mvn", ["package"], cwd="/checkout")
    """

    def __init__(self, timeout: float | None = None):
        """
        Initialize the runner.

        Args:
            timeout: Default timeout in seconds (None waits forever)
        """
        self.timeout = timeout

    async def run(
        self,
        command: str,
        args: list[str] | None = None,
        cwd: str | Path | None = None,
        timeout: float | None = None,
    ) -> str:
        """
        Run a command to completion.

        Args:
            command: Executable to run
            args: Command-line arguments
            cwd: Working directory
            timeout: Overrides the runner's default timeout

        Returns:
            Combined stdout/stderr output

        Raises:
            ProcessError: On spawn failure, timeout or nonzero exit
        """
        argv = [command, *(args or [])]
        command_str = " ".join(argv)
        timeout = self.timeout if timeout is None else timeout

        logger.debug(f"Running [bold]{command_str}[/] in {cwd or '.'}")

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                cwd=str(cwd) if cwd is not None else None,
                start_new_session=_POSIX,
            )
        except OSError as e:
            raise ProcessError(
                f"Failed to start '{command}': {e}", command=argv, exit_code=None
            ) from e

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError as e:
            _kill_process_group(proc)
            try:
                stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=KILL_GRACE_SECONDS)
            except asyncio.TimeoutError:
                # Something outside the process group still holds the pipe
                logger.warning(f"Output of [bold]{command_str}[/] not drained after kill")
                stdout = b""
            raise ProcessError(
                f"'{command_str}' timed out after {timeout} seconds",
                command=argv,
                output=stdout.decode("utf-8", errors="replace"),
                exit_code=proc.returncode,
            ) from e

        output = stdout.decode("utf-8", errors="replace")

        if proc.returncode != 0:
            raise ProcessError(
                f"'{command_str}' exited with code {proc.returncode}",
                command=argv,
                output=output,
                exit_code=proc.returncode,
            )

        return output
