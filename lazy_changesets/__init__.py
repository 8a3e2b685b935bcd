"""lazy-changesets: changeset-driven versioning for uv workspaces."""

from lazy_changesets.bumps import BumpType, max_bump
from lazy_changesets.errors import (
    ChangesetParseError,
    ConfigurationError,
    GitError,
    InvariantViolation,
    LazyChangesetsError,
    UnknownPackage,
)
from lazy_changesets.graph import WorkspaceGraph, build_graph
from lazy_changesets.models import (
    Changeset,
    DependencyEntry,
    DirectEntry,
    LinkedEntry,
    PackageInfo,
    PackageRelease,
    Release,
    ReleasePlan,
)
from lazy_changesets.plan import resolve_release_plan

__all__ = [
    "BumpType",
    "max_bump",
    "Changeset",
    "Release",
    "PackageInfo",
    "WorkspaceGraph",
    "build_graph",
    "resolve_release_plan",
    "ReleasePlan",
    "PackageRelease",
    "DirectEntry",
    "DependencyEntry",
    "LinkedEntry",
    "LazyChangesetsError",
    "ConfigurationError",
    "UnknownPackage",
    "InvariantViolation",
    "ChangesetParseError",
    "GitError",
]
