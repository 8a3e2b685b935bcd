"""Dependency handling utilities.

Provides functions for parsing PEP 508 dependency strings and rewriting
pyproject.toml files with a new version and updated internal dependency
ranges.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, cast

from packaging.requirements import Requirement
from packaging.utils import canonicalize_name

from .toml import load_pyproject, save_pyproject


def dep_canonical_name(dep_str: str) -> str:
    """Extract the canonical package name from a PEP 508 dependency string.

    Examples:
        "requests>=2.0" → "requests"
        "My_Package[extra]~=1.0" → "my-package"
    """
    return canonicalize_name(Requirement(dep_str).name)


def widen_dep(dep_str: str, version: str) -> str:
    """Make a dependency accept a newly released version.

    Returns the string unchanged when its specifier already admits the
    version; otherwise replaces the specifier with ">=version". Extras
    and environment markers are preserved.

    Examples:
        widen_dep("pkg>=1.0", "1.1.0") → "pkg>=1.0"
        widen_dep("pkg[b,a]~=1.0", "2.0.0") → "pkg[a,b]>=2.0.0"
        widen_dep("pkg==1.0.0; python_version>'3.9'", "1.0.1")
            → 'pkg>=1.0.1; python_version > "3.9"'
    """
    req = Requirement(dep_str)
    if req.specifier.contains(version, prereleases=True):
        return dep_str
    # Sort extras alphabetically for consistent output
    extras = f"[{','.join(sorted(req.extras))}]" if req.extras else ""
    marker = f"; {req.marker}" if req.marker else ""
    return f"{req.name}{extras}>={version}{marker}"


def rewrite_pyproject(
    pyproject_path: Path,
    new_version: str,
    internal_dep_versions: dict[str, str],
) -> None:
    """Update a package's version and widen ranges on released internal deps.

    This function:
    1. Updates [project].version to new_version
    2. Rewrites every internal dep whose range excludes its new version

    Internal deps are updated in all locations:
    - [project].dependencies
    - [project].optional-dependencies.*
    - [dependency-groups].*

    Uses tomlkit to preserve formatting and comments.

    Args:
        pyproject_path: Path to the pyproject.toml file.
        new_version: New version string to set.
        internal_dep_versions: Map of released package name → new version.
    """
    doc = load_pyproject(pyproject_path)
    # Cast needed because tomlkit types are complex unions
    project = cast(dict[str, Any], doc["project"])
    project["version"] = new_version

    if internal_dep_versions:
        deps = project.get("dependencies")
        if isinstance(deps, list):
            _widen_dep_list(deps, internal_dep_versions)

        opt_deps = project.get("optional-dependencies")
        if isinstance(opt_deps, dict):
            for group in opt_deps.values():
                if isinstance(group, list):
                    _widen_dep_list(group, internal_dep_versions)

        dep_groups = doc.get("dependency-groups")
        if isinstance(dep_groups, dict):
            for group in dep_groups.values():
                if isinstance(group, list):
                    _widen_dep_list(group, internal_dep_versions)

    save_pyproject(pyproject_path, doc)


def _widen_dep_list(deps: list, versions: dict[str, str]) -> None:
    """Widen internal dependencies in a list, modifying in place.

    Args:
        deps: List of dependency strings (modified in place).
        versions: Map of canonical package name → new version.
    """
    for i, dep_str in enumerate(deps):
        if not isinstance(dep_str, str):
            continue
        name = dep_canonical_name(dep_str)
        if name in versions:
            widened = widen_dep(dep_str, versions[name])
            if widened != dep_str:
                deps[i] = widened
