"""
Test configuration and fixtures.
"""

from typing import Any

import pytest

from pushline.errors import PortUnavailable, ProcessError
from pushline.models.push import ProjectSnapshot, PushEvent, RepoRef


POM = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <parent>
        <groupId>org.springframework.boot</groupId>
        <artifactId>spring-boot-starter-parent</artifactId>
        <version>3.2.0</version>
    </parent>
    <groupId>com.example</groupId>
    <artifactId>spring-rest</artifactId>
    <version>1.2.0-SNAPSHOT</version>
</project>
"""


class FakeRunner:
    """Records commands instead of running them."""

    def __init__(self, fail_on: str | None = None, output: str = "ok"):
        self.calls: list[tuple[str, list[str]]] = []
        self.fail_on = fail_on
        self.output = output

    async def run(self, command, args=None, cwd=None, timeout=None) -> str:
        args = list(args or [])
        self.calls.append((command, args))
        if self.fail_on is not None and any(self.fail_on in a for a in args):
            raise ProcessError(
                f"'{command} {' '.join(args)}' exited with code 1",
                command=[command, *args],
                output="[ERROR] BUILD FAILURE",
                exit_code=1,
            )
        return self.output

    @property
    def commands(self) -> list[str]:
        return [" ".join(args) for _, args in self.calls]


class FakeAllocator:
    """Hands out a fixed port, or fails."""

    def __init__(self, port: int = 8042, fail: bool = False):
        self.port = port
        self.fail = fail
        self.requests: list[tuple[int, int]] = []

    async def allocate(self, low: int, high: int) -> int:
        self.requests.append((low, high))
        if self.fail:
            raise PortUnavailable(low, high)
        return self.port


class RecordingChannel:
    """Notification channel that keeps everything it is sent."""

    def __init__(self):
        self.sent: list[tuple[Any, dict]] = []

    async def send(self, notification, options) -> None:
        self.sent.append((notification, options))


@pytest.fixture
def repo():
    """Sample repository reference."""
    return RepoRef(owner="acme", name="spring-rest")


@pytest.fixture
def maven_push(repo):
    """Push of a Maven project."""
    return PushEvent(
        repo=repo,
        sha="4f1c2e9b8a7d6c5e4f3a2b1c0d9e8f7a6b5c4d3e",
        snapshot=ProjectSnapshot.from_paths(
            {"README.md", "src/main/java/App.java"},
            contents={"pom.xml": POM},
        ),
    )


@pytest.fixture
def plain_push(repo):
    """Push without a build marker file."""
    return PushEvent(
        repo=repo,
        sha="a1b2c3d4e5f6a7b8c9d0",
        snapshot=ProjectSnapshot.from_paths({"README.md", "docs/index.md"}),
    )


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def allocator():
    return FakeAllocator()


@pytest.fixture
def channel():
    return RecordingChannel()
