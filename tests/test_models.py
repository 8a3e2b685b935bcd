"""Tests for lazy_changesets.models."""

from __future__ import annotations

import pytest
from pydantic import TypeAdapter, ValidationError

from lazy_changesets.bumps import BumpType
from lazy_changesets.models import (
    Changeset,
    ChangelogEntry,
    DependencyEntry,
    DirectEntry,
    PackageInfo,
    PackageRelease,
    Release,
    ReleasePlan,
)


class TestPackageInfo:
    def test_create_with_required_fields(self) -> None:
        pkg = PackageInfo(path="packages/foo", version="1.0.0")
        assert pkg.path == "packages/foo"
        assert pkg.version == "1.0.0"
        assert pkg.deps == {}

    def test_create_with_deps(self) -> None:
        pkg = PackageInfo(path="libs/bar", version="2.1.0", deps={"foo": ">=1.0"})
        assert pkg.deps == {"foo": ">=1.0"}


class TestChangeset:
    def test_is_frozen(self) -> None:
        changeset = Changeset(id="c1", summary="Fix", releases=[])
        with pytest.raises(ValidationError):
            changeset.summary = "Other"  # type: ignore[misc]

    def test_release_type_accepts_int(self) -> None:
        release = Release(name="pkg-a", type=2)
        assert release.type is BumpType.MINOR


class TestChangelogEntry:
    def test_discriminated_by_kind(self) -> None:
        adapter = TypeAdapter(ChangelogEntry)
        entry = adapter.validate_python(
            {"kind": "dependency", "name": "pkg-a", "version": "2.0.0"}
        )
        assert isinstance(entry, DependencyEntry)

    def test_direct_entry_defaults_kind(self) -> None:
        entry = DirectEntry(summary="Fix", changeset="c1", type=BumpType.PATCH)
        assert entry.kind == "direct"


class TestReleasePlan:
    def test_empty(self) -> None:
        assert ReleasePlan().is_empty

    def test_not_empty(self) -> None:
        release = PackageRelease(
            name="pkg-a",
            old_version="1.0.0",
            new_version="1.0.1",
            type=BumpType.PATCH,
            direct=True,
        )
        plan = ReleasePlan(releases={"pkg-a": release}, changesets=["c1"])
        assert not plan.is_empty
