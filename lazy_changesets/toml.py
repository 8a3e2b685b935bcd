"""pyproject.toml access for workspace discovery and configuration.

Documents are parsed with tomlkit so that files written back after a
version bump keep their comments and layout. Only load_pyproject() and
save_pyproject() touch the disk; every getter works on a parsed document.
"""

from __future__ import annotations

from collections.abc import Iterator, Set
from pathlib import Path
from typing import Any

import tomlkit
from packaging.requirements import InvalidRequirement, Requirement
from packaging.utils import canonicalize_name
from tomlkit.exceptions import ParseError

from .errors import ConfigurationError

TOOL_NAME = "lazy-changesets"


def load_pyproject(path: Path) -> tomlkit.TOMLDocument:
    """Parse a pyproject.toml into a format-preserving document.

    Raises:
        ConfigurationError: If the file is not valid TOML.
    """
    try:
        return tomlkit.parse(path.read_text(encoding="utf-8"))
    except ParseError as e:
        raise ConfigurationError(f"{path}: {e}") from None


def save_pyproject(path: Path, doc: tomlkit.TOMLDocument) -> None:
    path.write_text(tomlkit.dumps(doc), encoding="utf-8")


def get_project_name(doc: tomlkit.TOMLDocument, fallback: str) -> str:
    """Return [project].name normalized per PEP 503, or fallback when unset.

    Changesets may spell a package "My_Pkg" or "my-pkg"; both resolve to
    the same name here.
    """
    return canonicalize_name(str(doc.get("project", {}).get("name", fallback)))


def get_project_version(doc: tomlkit.TOMLDocument) -> str:
    """Return [project].version, or "0.0.0" when the key is missing.

    Raises:
        ConfigurationError: If the version is listed in [project].dynamic.
            A release cannot bump a version that a build backend computes.
    """
    project = doc.get("project", {})
    if "version" in project.get("dynamic", []):
        name = get_project_name(doc, "<unnamed>")
        raise ConfigurationError(f"Package {name!r} has a dynamic version")
    return str(project.get("version", "0.0.0"))


def iter_dependency_strings(doc: tomlkit.TOMLDocument) -> Iterator[str]:
    """Yield every PEP 508 string the document declares.

    Order: [project].dependencies, then each optional-dependencies extra,
    then each PEP 735 [dependency-groups] group. {include-group = ...}
    tables inside a group are not requirements and are skipped.
    """
    project = doc.get("project", {})
    sources = [project.get("dependencies", [])]
    sources.extend(project.get("optional-dependencies", {}).values())
    sources.extend(doc.get("dependency-groups", {}).values())
    for source in sources:
        for item in source:
            if isinstance(item, str):
                yield str(item)


def get_internal_deps(
    doc: tomlkit.TOMLDocument, workspace: Set[str], self_name: str
) -> dict[str, str]:
    """Map each workspace package this document depends on to its specifier.

    External requirements and self-references are dropped. When the same
    package is required in several places the first declaration wins.

    Args:
        doc: The package's parsed pyproject.toml.
        workspace: Canonical names of all workspace packages.
        self_name: Canonical name of the package being read.

    Raises:
        ConfigurationError: If a dependency string is not valid PEP 508.
    """
    deps: dict[str, str] = {}
    for dep_str in iter_dependency_strings(doc):
        try:
            req = Requirement(dep_str)
        except InvalidRequirement as e:
            raise ConfigurationError(f"Package {self_name!r}: {e}") from None
        name = canonicalize_name(req.name)
        if name in workspace and name != self_name:
            deps.setdefault(name, str(req.specifier))
    return deps


def get_workspace_member_globs(doc: tomlkit.TOMLDocument) -> list[str]:
    """Return the [tool.uv.workspace].members patterns, e.g. "packages/*".

    Raises:
        ConfigurationError: If the root pyproject.toml defines no members.
    """
    members = doc.get("tool", {}).get("uv", {}).get("workspace", {}).get("members")
    if not members:
        raise ConfigurationError(
            "No [tool.uv.workspace] members defined in root pyproject.toml"
        )
    return [str(m) for m in members]


def get_tool_config(doc: tomlkit.TOMLDocument) -> dict[str, Any]:
    """Return [tool.lazy-changesets] as plain Python values ({} when absent)."""
    table = doc.get("tool", {}).get(TOOL_NAME)
    if table is None:
        return {}
    return table.unwrap()
