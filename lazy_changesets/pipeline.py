"""Version pipeline: discover → read changesets → resolve → write → commit → tag.

This module applies a release plan to the workspace:
1. Discover all packages in the uv workspace
2. Read pending changesets from .changeset/
3. Resolve the release plan (pure, nothing is written yet)
4. Rewrite pyproject.toml versions and internal dependency ranges
5. Prepend CHANGELOG.md sections
6. Delete the consumed changesets
7. Optionally commit and tag

The plan is computed in full before the first write, so a bad changeset
or configuration never leaves the workspace half-versioned.
"""

from __future__ import annotations

import glob
from pathlib import Path

import tomlkit

from .changelog import CHANGELOG_FILE, ChangelogGenerator, load_generator, write_changelog
from .changesets import CHANGESET_DIR, delete_changesets, read_changesets
from .config import Config, load_config
from .deps import rewrite_pyproject
from .errors import ConfigurationError
from .graph import build_graph
from .models import PackageInfo, ReleasePlan
from .plan import resolve_release_plan
from .shell import git, step, warn
from .toml import (
    get_internal_deps,
    get_project_name,
    get_project_version,
    get_workspace_member_globs,
    load_pyproject,
)

NOTHING_TO_RELEASE = "No unreleased changesets found, exiting."


def discover_packages(root: Path) -> dict[str, PackageInfo]:
    """Scan the workspace and discover all packages.

    Reads [tool.uv.workspace].members from root pyproject.toml to find
    package directories, then extracts name, version, and internal deps
    from each package's pyproject.toml.

    Returns:
        Map of package name to PackageInfo.

    Raises:
        ConfigurationError: If no member directory holds a pyproject.toml,
            or two members share a canonical package name.
    """
    step("Discovering workspace packages")

    root_doc = load_pyproject(root / "pyproject.toml")
    member_globs = get_workspace_member_globs(root_doc)

    # Expand globs to find all package directories
    member_dirs: list[Path] = []
    for pattern in member_globs:
        for match in sorted(glob.glob(str(root / pattern))):
            p = Path(match)
            if (p / "pyproject.toml").exists():
                member_dirs.append(p)

    if not member_dirs:
        raise ConfigurationError("No packages found matching workspace members")

    # First pass: names and versions; internal deps need every name first
    docs: dict[str, tomlkit.TOMLDocument] = {}
    packages: dict[str, PackageInfo] = {}
    for d in member_dirs:
        doc = load_pyproject(d / "pyproject.toml")
        name = get_project_name(doc, d.name)
        path = d.relative_to(root).as_posix()
        if name in packages:
            raise ConfigurationError(
                f"Package name {name!r} is used by both "
                f"{packages[name].path} and {path}"
            )
        packages[name] = PackageInfo(path=path, version=get_project_version(doc))
        docs[name] = doc

    for name, doc in docs.items():
        packages[name].deps.update(get_internal_deps(doc, packages.keys(), name))

    for name in sorted(packages):
        info = packages[name]
        deps = f" → [{', '.join(info.deps)}]" if info.deps else ""
        print(f"  {name} {info.version} ({info.path}){deps}")

    return packages


def plan_release(root: Path, config: Config) -> tuple[dict[str, PackageInfo], ReleasePlan]:
    """Discover the workspace, read changesets and resolve the release plan.

    Nothing is written.

    Raises:
        ConfigurationError: If linked groups or package versions are invalid.
        ChangesetParseError: If a changeset file is malformed.
        UnknownPackage: If a changeset names a package not in the workspace.
    """
    packages = discover_packages(root)
    graph = build_graph(packages, config.linked)

    step("Reading changesets")
    changesets = read_changesets(root / CHANGESET_DIR)
    for changeset in changesets:
        names = ", ".join(f"{r.name}@{str(r.type)}" for r in changeset.releases)
        print(f"  {changeset.id}: {names or '<empty>'}")

    return packages, resolve_release_plan(graph, changesets)


def print_plan(plan: ReleasePlan) -> None:
    """Print the packages a plan releases."""
    step("Release plan")
    if not plan.releases:
        print("  No packages to release; changesets will still be consumed")
    for name, release in plan.releases.items():
        how = "" if release.direct else " (dependencies/linked only)"
        print(
            f"  {name}: {release.old_version} → {release.new_version} "
            f"[{str(release.type)}]{how}"
        )


def write_manifests(
    root: Path, packages: dict[str, PackageInfo], plan: ReleasePlan
) -> list[Path]:
    """Write new versions and widened internal dep ranges to pyproject.toml files."""
    step("Updating package versions")

    new_versions = {name: r.new_version for name, r in plan.releases.items()}
    written: list[Path] = []
    for name, release in plan.releases.items():
        info = packages[name]
        internal_dep_versions = {
            dep: new_versions[dep] for dep in info.deps if dep in new_versions
        }
        pyproject = root / info.path / "pyproject.toml"
        rewrite_pyproject(pyproject, release.new_version, internal_dep_versions)
        written.append(pyproject)
        print(f"  {name}: {release.old_version} → {release.new_version}")
    return written


def write_changelogs(
    root: Path,
    packages: dict[str, PackageInfo],
    plan: ReleasePlan,
    generator: ChangelogGenerator,
) -> list[Path]:
    """Prepend a generated section to each released package's CHANGELOG.md."""
    step("Writing changelogs")

    written: list[Path] = []
    for name, release in plan.releases.items():
        path = root / packages[name].path / CHANGELOG_FILE
        write_changelog(path, name, generator(release))
        written.append(path)
        print(f"  {path.relative_to(root).as_posix()}")
    return written


def commit_release(root: Path, paths: list[Path], plan: ReleasePlan) -> None:
    """Stage written files and consumed changesets, then commit."""
    step("Committing")

    for path in paths:
        git("add", path.relative_to(root).as_posix(), cwd=root)
    if (root / CHANGESET_DIR).exists():
        git("add", CHANGESET_DIR, cwd=root)

    # Check if there are actually changes to commit
    staged = git("diff", "--cached", "--name-only", cwd=root, check=False)
    if not staged:
        print("  No changes to commit")
        return

    summary = "\n".join(
        f"  {n}: {r.old_version} → {r.new_version}" for n, r in plan.releases.items()
    )
    message = ["-m", "chore: version packages"]
    if summary:
        message += ["-m", summary]
    git("commit", *message, cwd=root)
    print("  Committed")


def tag_releases(root: Path, plan: ReleasePlan) -> list[str]:
    """Create per-package git tags with format {package-name}/v{version}."""
    step("Creating package tags")

    tags: list[str] = []
    for name, release in plan.releases.items():
        tag = f"{name}/v{release.new_version}"
        git("tag", tag, cwd=root)
        tags.append(tag)
        print(f"  {tag}")
    return tags


def run_version(root: Path | None = None) -> ReleasePlan:
    """Execute the full version pipeline.

    Args:
        root: Workspace root; defaults to the current directory.

    Returns:
        The applied plan. An empty plan means nothing was written. A plan
        with changesets but no releases only deletes those changesets.
    """
    root = root or Path.cwd()
    config = load_config(root)
    # Resolve the generator up front so a bad reference fails before any write
    generator = load_generator(config.changelog) if config.changelog else None

    packages, plan = plan_release(root, config)
    if plan.is_empty:
        warn(NOTHING_TO_RELEASE)
        return plan
    print_plan(plan)

    written: list[Path] = []
    if plan.releases:
        written += write_manifests(root, packages, plan)
        if generator is not None:
            written += write_changelogs(root, packages, plan, generator)

    step("Removing consumed changesets")
    for path in delete_changesets(root / CHANGESET_DIR, plan.changesets):
        print(f"  {path.name}")

    if config.commit:
        commit_release(root, written, plan)
        if config.tag:
            tag_releases(root, plan)
    elif config.tag:
        warn("tag = true has no effect without commit = true")

    step("Done!")
    return plan
