"""
Goal packs.

Ready-made goals and the machines that use them.
"""

from pushline.goals.maven import (
    BUILD_GOAL,
    MAVEN_GENERATOR,
    RUN_GOAL,
    configure_maven_machine,
    maven_goals,
)
from pushline.goals.versioning import MavenProjectVersioner, MavenVersionListener

__all__ = [
    "BUILD_GOAL",
    "MAVEN_GENERATOR",
    "RUN_GOAL",
    "configure_maven_machine",
    "maven_goals",
    "MavenProjectVersioner",
    "MavenVersionListener",
]
