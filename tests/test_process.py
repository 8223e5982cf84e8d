"""
Tests for the external process runner.
"""

import os
import sys
import time

import pytest

from pushline.errors import ProcessError
from pushline.tools.process import ProcessRunner


@pytest.fixture
def process_runner():
    return ProcessRunner()


class TestProcessRunner:
    """Tests for ProcessRunner."""

    @pytest.mark.asyncio
    async def test_returns_output(self, process_runner):
        output = await process_runner.run(sys.executable, ["-c", "print('BUILD SUCCESS')"])
        assert "BUILD SUCCESS" in output

    @pytest.mark.asyncio
    async def test_merges_stderr(self, process_runner):
        output = await process_runner.run(
            sys.executable, ["-c", "import sys; sys.stderr.write('warning\\n')"]
        )
        assert "warning" in output

    @pytest.mark.asyncio
    async def test_nonzero_exit(self, process_runner):
        with pytest.raises(ProcessError) as exc:
            await process_runner.run(
                sys.executable, ["-c", "print('BUILD FAILURE'); raise SystemExit(3)"]
            )
        assert exc.value.exit_code == 3
        assert "BUILD FAILURE" in exc.value.output
        assert "exited with code 3" in exc.value.message
        assert exc.value.command[0] == sys.executable

    @pytest.mark.asyncio
    async def test_spawn_failure(self, process_runner):
        with pytest.raises(ProcessError) as exc:
            await process_runner.run("/nonexistent/pushline-no-such-tool", ["package"])
        assert exc.value.exit_code is None

    @pytest.mark.asyncio
    async def test_timeout(self):
        runner = ProcessRunner(timeout=0.5)
        with pytest.raises(ProcessError) as exc:
            await runner.run(sys.executable, ["-c", "import time; time.sleep(30)"])
        assert "timed out" in exc.value.message

    @pytest.mark.asyncio
    @pytest.mark.skipif(not hasattr(os, "killpg"), reason="process groups are POSIX only")
    async def test_timeout_kills_forked_children(self):
        # The child forks a long-lived grandchild that inherits the output pipe
        script = (
            "import subprocess, sys, time; "
            "subprocess.Popen([sys.executable, '-c', 'import time; time.sleep(30)']); "
            "time.sleep(30)"
        )
        runner = ProcessRunner(timeout=0.5)

        started = time.monotonic()
        with pytest.raises(ProcessError) as exc:
            await runner.run(sys.executable, ["-c", script])
        elapsed = time.monotonic() - started

        assert "timed out" in exc.value.message
        assert elapsed < 5

    @pytest.mark.asyncio
    async def test_cwd(self, process_runner, tmp_path):
        output = await process_runner.run(
            sys.executable, ["-c", "import os; print(os.getcwd())"], cwd=tmp_path
        )
        assert tmp_path.name in output
