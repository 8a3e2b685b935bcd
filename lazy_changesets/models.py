"""Data models for lazy-changesets.

These Pydantic models represent the core data structures that flow
through release resolution: the changesets going in and the release
plan coming out.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .bumps import BumpType


class PackageInfo(BaseModel):
    """Metadata for a single package in the monorepo workspace.

    Attributes:
        path: Relative path from workspace root to the package directory.
        version: Current version string from pyproject.toml.
        deps: Internal (workspace) dependency name → declared specifier,
              e.g. {"pkg-a": ">=1.0"}. External deps are not tracked and
              the specifier is never evaluated during resolution; only
              the edge matters.
    """

    path: str
    version: str
    deps: dict[str, str] = Field(default_factory=dict)


class Release(BaseModel):
    """One (package, bump) entry of a changeset."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: BumpType


class Changeset(BaseModel):
    """A human-authored record of intended bumps.

    Attributes:
        id: Unique identifier; the changeset file's stem.
        summary: Free text that ends up in the changelog.
        releases: Ordered (package, bump) entries.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    summary: str
    releases: list[Release] = Field(default_factory=list)


class DirectEntry(BaseModel):
    """Changelog entry written by a human in a changeset."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["direct"] = "direct"
    summary: str
    changeset: str
    type: BumpType


class DependencyEntry(BaseModel):
    """Synthetic entry: an internal dependency was released."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["dependency"] = "dependency"
    name: str
    version: str


class LinkedEntry(BaseModel):
    """Synthetic entry: released because a linked sibling was released."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["linked"] = "linked"
    name: str
    version: str


ChangelogEntry = Annotated[
    Union[DirectEntry, DependencyEntry, LinkedEntry], Field(discriminator="kind")
]


class PackageRelease(BaseModel):
    """The planned release of one package.

    Attributes:
        name: Package name.
        old_version: Version currently in pyproject.toml.
        new_version: Version after applying the bump.
        type: Final bump strength (never NONE).
        direct: True if a changeset asked for an actual bump (not "none") of
                this package; False when the release is propagated or linked.
        changelog: Ordered entries; direct, then dependency, then linked.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    old_version: str
    new_version: str
    type: BumpType
    direct: bool
    changelog: list[ChangelogEntry] = Field(default_factory=list)


class ReleasePlan(BaseModel):
    """Everything one `version` run will apply.

    Attributes:
        releases: Package name → planned release, sorted by name. Packages
                  that are not released are absent.
        changesets: Ids of the consumed changesets, in processing order.
    """

    model_config = ConfigDict(frozen=True)

    releases: dict[str, PackageRelease] = Field(default_factory=dict)
    changesets: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to release and no changeset to consume."""
        return not self.releases and not self.changesets
