"""Workspace dependency graph.

The graph is the immutable input to release resolution: every package,
its current version, its internal dependency edges, and the groups of
packages that are linked together and always released with the same bump.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError
from .models import PackageInfo
from .versions import parse_version


class WorkspaceGraph(BaseModel):
    """Packages plus linked groups. Build it with build_graph()."""

    model_config = ConfigDict(frozen=True)

    packages: dict[str, PackageInfo]
    linked: list[frozenset[str]] = Field(default_factory=list)

    def dependents(self) -> dict[str, list[str]]:
        """Map each package to the packages that depend on it (sorted)."""
        reverse_deps: dict[str, list[str]] = {n: [] for n in self.packages}
        for name in sorted(self.packages):
            for dep in self.packages[name].deps:
                reverse_deps[dep].append(name)
        return reverse_deps

    def group_of(self, name: str) -> frozenset[str]:
        """Return the linked group containing name, or an empty set."""
        for group in self.linked:
            if name in group:
                return group
        return frozenset()


def build_graph(
    packages: Mapping[str, PackageInfo],
    linked: Iterable[Iterable[str]] = (),
) -> WorkspaceGraph:
    """Validate packages and linked groups and build a WorkspaceGraph.

    Args:
        packages: Map of package name → PackageInfo.
        linked: Groups of package names that must share a bump.

    Raises:
        ConfigurationError: If a dependency or linked-group member names
            an unknown package, a group has fewer than two members, a
            package is in more than one group, or a version is not semver.
    """
    for name, info in packages.items():
        try:
            parse_version(info.version)
        except ValueError:
            raise ConfigurationError(
                f"Package {name!r} has invalid version {info.version!r}"
            ) from None
        for dep in info.deps:
            if dep not in packages:
                raise ConfigurationError(
                    f"Package {name!r} depends on {dep!r}, which is not in the workspace"
                )

    groups: list[frozenset[str]] = []
    seen: dict[str, int] = {}
    for i, members in enumerate(linked):
        group = frozenset(members)
        if len(group) < 2:
            raise ConfigurationError(
                f"Linked group {sorted(group)} must contain at least two packages"
            )
        for member in sorted(group):
            if member not in packages:
                raise ConfigurationError(
                    f"Linked group {sorted(group)} references unknown package {member!r}"
                )
            if member in seen:
                raise ConfigurationError(
                    f"Package {member!r} appears in more than one linked group"
                )
            seen[member] = i
        groups.append(group)

    return WorkspaceGraph(packages=dict(packages), linked=groups)
