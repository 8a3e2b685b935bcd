"""Changelog entry building.

Runs after propagation and version calculation, because dependency and
linked entries reference the *final* versions of other packages.
"""

from __future__ import annotations

from collections.abc import Mapping

from .bumps import BumpType, max_bump
from .graph import WorkspaceGraph
from .models import ChangelogEntry, DependencyEntry, DirectEntry, LinkedEntry


def build_changelog(
    name: str,
    graph: WorkspaceGraph,
    intents: Mapping[str, BumpType],
    versions: Mapping[str, str],
    direct: Mapping[str, list[DirectEntry]],
) -> list[ChangelogEntry]:
    """Build the ordered changelog entries for one released package.

    Order is: direct entries in changeset order, then one dependency entry
    per released internal dependency (sorted by name), then linked entries
    when the package was raised only because of its linked group.

    A released dependency is skipped when every changeset that named it
    also named this package: the direct entry already covers the change.

    Args:
        name: The released package.
        graph: Workspace graph.
        intents: Final bump per package.
        versions: Final version per released package.
        direct: Direct entries per package, from aggregate_intents().
    """
    own_direct = direct.get(name, [])
    own_changesets = {entry.changeset for entry in own_direct}
    entries: list[ChangelogEntry] = list(own_direct)

    released_deps: list[str] = []
    for dep in sorted(graph.packages[name].deps):
        if intents[dep] == BumpType.NONE:
            continue
        released_deps.append(dep)
        dep_changesets = {entry.changeset for entry in direct.get(dep, [])}
        if dep_changesets and dep_changesets <= own_changesets:
            continue
        entries.append(DependencyEntry(name=dep, version=versions[dep]))

    # What this package would get without its linked group
    own_bump = max_bump(*(entry.type for entry in own_direct))
    if released_deps:
        own_bump = max_bump(own_bump, BumpType.PATCH)
    if own_bump < intents[name]:
        for sibling in sorted(graph.group_of(name) - {name}):
            if intents[sibling] > BumpType.NONE:
                entries.append(LinkedEntry(name=sibling, version=versions[sibling]))

    return entries
