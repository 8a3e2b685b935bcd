"""Bump intent resolution.

Turns changesets into a per-package bump intent and raises it until the
workspace is consistent:

1. aggregate_intents: the strongest bump each package was asked for
2. normalize_linked: linked packages share their group's strongest bump
3. propagate: packages depending on a released package get at least a
   patch release, re-normalizing linked groups after each round

Intents only ever go up and are bounded by MAJOR, so propagation reaches
a fixed point; dependency cycles converge like any other edge.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .bumps import BumpType, max_bump
from .errors import InvariantViolation, UnknownPackage
from .graph import WorkspaceGraph
from .models import Changeset, DirectEntry

Intents = dict[str, BumpType]


def aggregate_intents(
    graph: WorkspaceGraph, changesets: Sequence[Changeset]
) -> tuple[Intents, dict[str, list[DirectEntry]]]:
    """Fold changesets into a bump intent per package.

    Every package in the graph gets an intent (NONE when no changeset
    mentions it). Along the way, each release entry is recorded as a
    DirectEntry for its package, in changeset order, for the changelog.

    Raises:
        UnknownPackage: If any changeset names a package not in the graph.
            All changesets are checked before anything is computed.
    """
    for changeset in changesets:
        for release in changeset.releases:
            if release.name not in graph.packages:
                raise UnknownPackage(changeset.id, release.name)

    intents: Intents = {name: BumpType.NONE for name in graph.packages}
    direct: dict[str, list[DirectEntry]] = {}
    for changeset in changesets:
        for release in changeset.releases:
            intents[release.name] = max_bump(intents[release.name], release.type)
            direct.setdefault(release.name, []).append(
                DirectEntry(
                    summary=changeset.summary,
                    changeset=changeset.id,
                    type=release.type,
                )
            )
    return intents, direct


def normalize_linked(intents: Intents, linked: Iterable[frozenset[str]]) -> Intents:
    """Raise every member of a linked group to the group's strongest bump.

    A group where nobody is released stays untouched.
    """
    result = dict(intents)
    for group in linked:
        group_max = max_bump(*(result[m] for m in group))
        if group_max > BumpType.NONE:
            for member in group:
                result[member] = group_max
    return result


def propagate_once(intents: Intents, graph: WorkspaceGraph) -> Intents:
    """Give every dependent of a released package at least a patch bump.

    Only the fact that a dependency is released matters, not how strongly:
    a major upstream bump still only forces a patch downstream.
    """
    result = dict(intents)
    for name, dependents in graph.dependents().items():
        if intents[name] == BumpType.NONE:
            continue
        for dependent in dependents:
            result[dependent] = max_bump(result[dependent], BumpType.PATCH)
    return result


def propagate(intents: Intents, graph: WorkspaceGraph) -> Intents:
    """Alternate dependency propagation and linked normalization to a fixed point.

    Raises:
        InvariantViolation: If no fixed point is reached within
            len(packages) * len(BumpType) + 1 rounds, which monotonicity
            makes impossible.
    """
    max_rounds = len(graph.packages) * len(BumpType) + 1
    current = normalize_linked(intents, graph.linked)
    for _ in range(max_rounds):
        updated = normalize_linked(propagate_once(current, graph), graph.linked)
        if updated == current:
            return current
        current = updated
    raise InvariantViolation(
        f"Bump propagation did not converge after {max_rounds} rounds"
    )
