"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
import tomlkit

from lazy_changesets.bumps import BumpType
from lazy_changesets.models import Changeset, Release


@pytest.fixture
def tmp_pyproject(tmp_path: Path) -> Path:
    """Create a temporary pyproject.toml file."""
    content = """\
[project]
name = "test-package"
version = "1.0.0"
dependencies = [
    "requests>=2.0",
    "internal-dep>=1.0,<2",
]

[project.optional-dependencies]
dev = ["pytest>=8.0", "another-internal==0.5.0"]

[dependency-groups]
test = ["pytest>=8.0", "group-internal~=0.1.0"]
"""
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject


@pytest.fixture
def sample_toml_doc() -> tomlkit.TOMLDocument:
    """Create a sample TOML document."""
    content = """\
[project]
name = "my-package"
version = "2.0.0"
dependencies = ["click>=8.0", "pydantic>=2.0"]

[project.optional-dependencies]
dev = ["pytest>=8.0"]
docs = ["sphinx>=7.0"]

[dependency-groups]
test = ["hypothesis>=6.0"]

[tool.uv.workspace]
members = ["packages/*", "libs/*"]

[tool.lazy-changesets]
commit = true
linked = [["pkg-a", "pkg-b"]]
"""
    return tomlkit.parse(content)


ChangesetFactory = Callable[..., Changeset]


@pytest.fixture
def make_changeset() -> ChangesetFactory:
    """Return a factory building changesets from keyword bumps.

    Keyword names use underscores for hyphens: make_changeset("c1", "Fix", pkg_a="minor").
    """

    def _make(changeset_id: str, summary: str, **bumps: str) -> Changeset:
        return Changeset(
            id=changeset_id,
            summary=summary,
            releases=[
                Release(name=name.replace("_", "-"), type=BumpType.parse(bump))
                for name, bump in bumps.items()
            ],
        )

    return _make


WorkspaceFactory = Callable[..., Path]


@pytest.fixture
def make_workspace(tmp_path: Path) -> WorkspaceFactory:
    """Return a factory that writes a uv workspace under tmp_path.

    Usage: make_workspace({"pkg-a": ("1.0.0", []), "pkg-c": ("1.0.0", ["pkg-a>=1.0"])},
    tool="commit = true")
    """

    def _make(packages: dict[str, tuple[str, list[str]]], tool: str = "") -> Path:
        root = tmp_path / "repo"
        root.mkdir()
        text = '[tool.uv.workspace]\nmembers = ["packages/*"]\n'
        if tool:
            text += f"\n[tool.lazy-changesets]\n{tool}\n"
        (root / "pyproject.toml").write_text(text)
        for name, (version, deps) in packages.items():
            pkg_dir = root / "packages" / name
            pkg_dir.mkdir(parents=True)
            doc = tomlkit.document()
            project = tomlkit.table()
            project["name"] = name
            project["version"] = version
            project["dependencies"] = deps
            doc["project"] = project
            (pkg_dir / "pyproject.toml").write_text(tomlkit.dumps(doc))
        (root / ".changeset").mkdir()
        return root

    return _make
