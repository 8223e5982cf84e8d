"""
Push event models.

A push carries the repository reference, the commit sha and a read-only
snapshot of the files at that commit.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


# Directories never included in a snapshot taken from disk
IGNORED_DIRECTORIES = {".git", ".hg", ".svn"}


class RepoRef(BaseModel):
    """Reference to a repository and branch."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(description="Repository owner or organization")
    name: str = Field(description="Repository name")
    branch: str = Field(default="master", description="Branch name")

    @property
    def slug(self) -> str:
        """Get the owner/name slug."""
        return f"{self.owner}/{self.name}"

    @classmethod
    def from_slug(cls, slug: str, branch: str = "master") -> "RepoRef":
        """
        Create a reference from an ``owner/name`` slug.

        Raises:
            ValueError: If the slug is not of the form owner/name
        """
        owner, sep, name = slug.strip().partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ValueError(f"Invalid repository slug: {slug!r}")
        return cls(owner=owner, name=name, branch=branch)


class ProjectSnapshot(BaseModel):
    """
    Files of a repository at one commit.

    Paths are relative and use forward slashes. Contents are read lazily
    from ``base_dir`` unless supplied up front in ``contents``.
    """

    model_config = ConfigDict(frozen=True)

    paths: frozenset[str] = Field(default_factory=frozenset, description="Relative file paths")
    base_dir: Path | None = Field(default=None, description="Checkout directory, if on disk")
    contents: dict[str, str] = Field(default_factory=dict, description="In-memory file contents")

    @classmethod
    def from_paths(
        cls,
        paths: list[str] | set[str] | frozenset[str],
        contents: dict[str, str] | None = None,
    ) -> "ProjectSnapshot":
        """Create an in-memory snapshot."""
        contents = contents or {}
        return cls(paths=frozenset(paths) | frozenset(contents), contents=contents)

    @classmethod
    def from_directory(cls, directory: str | Path) -> "ProjectSnapshot":
        """
        Snapshot a checkout on disk.

        Args:
            directory: Root of the checkout

        Returns:
            Snapshot listing every file below the directory
        """
        root = Path(directory).resolve()
        if not root.is_dir():
            raise NotADirectoryError(f"Not a directory: {root}")

        paths = set()
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = [d for d in dirnames if d not in IGNORED_DIRECTORIES]
            for filename in filenames:
                relative = Path(dirpath, filename).relative_to(root)
                paths.add(relative.as_posix())

        return cls(paths=frozenset(paths), base_dir=root)

    def has_file(self, name: str) -> bool:
        """Check whether a file with exactly this path exists."""
        return name in self.paths

    def has_file_with_extension(self, extension: str) -> bool:
        """Check whether any file name ends with the extension."""
        suffix = extension if extension.startswith(".") else f".{extension}"
        return any(path.endswith(suffix) for path in self.paths)

    def read_text(self, path: str) -> str:
        """
        Read a file from the snapshot.

        Raises:
            FileNotFoundError: If the file is not part of the snapshot
        """
        if path in self.contents:
            return self.contents[path]
        if path not in self.paths or self.base_dir is None:
            raise FileNotFoundError(f"File not in snapshot: {path}")
        return (self.base_dir / path).read_text(encoding="utf-8")


class PushEvent(BaseModel):
    """An incoming code change."""

    model_config = ConfigDict(frozen=True)

    repo: RepoRef = Field(description="Repository the push landed in")
    sha: str = Field(min_length=1, description="Commit identifier")
    snapshot: ProjectSnapshot = Field(default_factory=ProjectSnapshot)

    @property
    def short_sha(self) -> str:
        """First seven characters of the commit sha."""
        return self.sha[:7]

    @property
    def branch(self) -> str:
        return self.repo.branch

    def to_summary(self) -> str:
        """Get a one-line summary."""
        return f"{self.repo.slug}@{self.branch} {self.short_sha} ({len(self.snapshot.paths)} files)"
