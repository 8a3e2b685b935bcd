"""Release plan resolution.

resolve_release_plan() is the whole engine: a pure function from a
workspace graph and changesets to an immutable ReleasePlan. It performs
no I/O, so the plan is complete before anything touches the filesystem.
"""

from __future__ import annotations

from collections.abc import Sequence

from .bumps import BumpType
from .entries import build_changelog
from .graph import WorkspaceGraph
from .intents import aggregate_intents, propagate
from .models import Changeset, PackageRelease, ReleasePlan
from .versions import bump_version


def resolve_release_plan(
    graph: WorkspaceGraph, changesets: Sequence[Changeset]
) -> ReleasePlan:
    """Compute versions and changelog entries for every package to release.

    Args:
        graph: Validated workspace graph (see build_graph()).
        changesets: Changesets in processing order.

    Returns:
        The release plan. It is empty (plan.is_empty) when there were no
        changesets at all; callers treat that as "nothing to release". A
        plan can consume changesets yet release no package, when every
        changeset is empty or only names "none" bumps.

    Raises:
        UnknownPackage: If a changeset names a package not in the graph.
        InvariantViolation: If propagation fails to converge.
    """
    intents, direct = aggregate_intents(graph, changesets)
    intents = propagate(intents, graph)

    released = sorted(name for name, bump in intents.items() if bump > BumpType.NONE)
    versions = {
        name: bump_version(graph.packages[name].version, intents[name])
        for name in released
    }

    releases = {
        name: PackageRelease(
            name=name,
            old_version=graph.packages[name].version,
            new_version=versions[name],
            type=intents[name],
            direct=any(entry.type > BumpType.NONE for entry in direct.get(name, [])),
            changelog=build_changelog(name, graph, intents, versions, direct),
        )
        for name in released
    }
    return ReleasePlan(
        releases=releases,
        changesets=[changeset.id for changeset in changesets],
    )
