"""
Maven project versioning.

Every build gets a unique version derived from the version in pom.xml,
the branch and a UTC timestamp, applied to the checkout before the
build goal's action runs.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import Callable

from pushline.errors import ConfigurationError, ProcessError
from pushline.models.config import MavenConfig
from pushline.models.goals import GoalInvocation
from pushline.models.push import PushEvent
from pushline.tools.process import ProcessRunner

POM_FILE = "pom.xml"
POM_NAMESPACE = "{http://maven.apache.org/POM/4.0.0}"
DEFAULT_VERSION = "0.1.0"
DEFAULT_BRANCHES = {"master", "main"}

# Key under which the computed version is handed to the goal action
VERSION_CONTEXT_KEY = "version"


def read_pom_version(pom: str) -> str | None:
    """
    Read the project version from pom.xml content.

    Only the project's own <version> counts; a version inherited from
    <parent> is used when the project does not declare one.
    """
    try:
        root = ET.fromstring(pom)
    except ET.ParseError as e:
        raise ConfigurationError(f"Invalid {POM_FILE}: {e}", POM_FILE) from e

    ns = POM_NAMESPACE if root.tag.startswith(POM_NAMESPACE) else ""
    version = root.find(f"{ns}version")
    if version is None:
        version = root.find(f"{ns}parent/{ns}version")
    if version is None or not (version.text or "").strip():
        return None
    return version.text.strip()


class MavenProjectVersioner:
    """
    Computes a unique build version for a push.

    Example:
        >>> MavenProjectVersioner().version(push)
        '1.2.0-20261017181500'
    """

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def version(self, push: PushEvent) -> str:
        """Compute the version for a push."""
        base = DEFAULT_VERSION
        if push.snapshot.has_file(POM_FILE):
            base = read_pom_version(push.snapshot.read_text(POM_FILE)) or DEFAULT_VERSION

        # Drop qualifiers such as -SNAPSHOT
        base = base.split("-", 1)[0]

        branch = "" if push.branch in DEFAULT_BRANCHES else f"{_safe_branch(push.branch)}."
        timestamp = self.clock().strftime("%Y%m%d%H%M%S")
        return f"{base}-{branch}{timestamp}"


def _safe_branch(branch: str) -> str:
    return "".join(c if c.isalnum() or c in "._" else "_" for c in branch)


class MavenVersionListener:
    """
    Pre-build listener that sets the computed version on the checkout.

    The version is stored in the invocation context under
    ``VERSION_CONTEXT_KEY`` for the build action to report.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        config: MavenConfig | None = None,
        versioner: MavenProjectVersioner | None = None,
    ):
        self.runner = runner
        self.config = config or MavenConfig()
        self.versioner = versioner or MavenProjectVersioner()

    async def __call__(self, invocation: GoalInvocation) -> None:
        version = self.versioner.version(invocation.push)
        invocation.context[VERSION_CONTEXT_KEY] = version
        invocation.progress_log.write("Setting project version to %s", version)

        args = [a.replace("{version}", version) for a in self.config.version_args]
        try:
            output = await self.runner.run(
                self.config.executable,
                args,
                cwd=invocation.push.snapshot.base_dir,
                timeout=self.config.timeout,
            )
        except ProcessError as e:
            if e.output:
                invocation.progress_log.write(e.output)
            invocation.progress_log.write("Setting project version failed: %s", e.message)
            raise
        if output:
            invocation.progress_log.write(output)
