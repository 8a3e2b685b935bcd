"""Exceptions raised by lazy-changesets.

Everything raised on purpose derives from LazyChangesetsError so the CLI
can turn it into a clean error message. An empty release plan is not an
error and has no exception here.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class LazyChangesetsError(Exception):
    """Base class for all lazy-changesets errors."""


class ConfigurationError(LazyChangesetsError):
    """The workspace or [tool.lazy-changesets] configuration is invalid."""


class UnknownPackage(LazyChangesetsError):
    """A changeset names a package that is not in the workspace.

    Raised before any intent is computed, so a bad changeset never
    partially applies.
    """

    def __init__(self, changeset_id: str, package: str) -> None:
        self.changeset_id = changeset_id
        self.package = package
        super().__init__(
            f"Changeset {changeset_id!r} references unknown package {package!r}"
        )


class InvariantViolation(LazyChangesetsError):
    """Internal consistency check failed. This is a bug, not a user error."""


class ChangesetParseError(LazyChangesetsError):
    """A changeset file could not be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class GitError(LazyChangesetsError):
    """A git command failed."""

    def __init__(self, args: Sequence[str], stderr: str) -> None:
        self.command = ["git", *args]
        self.stderr = stderr
        super().__init__(f"`{' '.join(self.command)}` failed: {stderr or 'no output'}")
