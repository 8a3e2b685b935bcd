"""Changelog generation and writing.

The release plan carries structured entries. A generator turns one
PackageRelease into a Markdown section; the section is then prepended
to the package's CHANGELOG.md. The generator is configurable through
[tool.lazy-changesets].changelog as a "module:attribute" reference.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable
from pathlib import Path

from .bumps import BumpType
from .errors import ConfigurationError
from .models import DependencyEntry, DirectEntry, LinkedEntry, PackageRelease

ChangelogGenerator = Callable[[PackageRelease], str]

CHANGELOG_FILE = "CHANGELOG.md"

_HEADINGS = {
    BumpType.MAJOR: "Major Changes",
    BumpType.MINOR: "Minor Changes",
    BumpType.PATCH: "Patch Changes",
}


def load_generator(ref: str) -> ChangelogGenerator:
    """Import a generator from a "module:attribute" reference.

    Raises:
        ConfigurationError: If the reference is malformed or can't be imported.
    """
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(
            f"Changelog generator must look like 'module:attribute', got {ref!r}"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import changelog generator {ref!r}: {exc}") from exc
    generator = getattr(module, attr, None)
    if not callable(generator):
        raise ConfigurationError(f"Changelog generator {ref!r} is not callable")
    return generator


def default_generator(release: PackageRelease) -> str:
    """Render a release as a "## <version>" Markdown section.

    Direct entries are grouped under the bump their changeset asked for.
    Dependency and linked entries go under the package's own bump.
    """
    groups: dict[BumpType, list[str]] = {bump: [] for bump in _HEADINGS}
    updated: list[str] = []
    linked: list[str] = []

    for entry in release.changelog:
        if isinstance(entry, DirectEntry):
            text = entry.summary.replace("\n", "\n  ")
            # A "none" release only adds a note; file it under patch
            bump = max(entry.type, BumpType.PATCH)
            groups[bump].append(f"- {entry.changeset}: {text}")
        elif isinstance(entry, DependencyEntry):
            updated.append(f"  - {entry.name}@{entry.version}")
        elif isinstance(entry, LinkedEntry):
            linked.append(f"  - {entry.name}@{entry.version}")

    if updated:
        groups[release.type].append("- Updated dependencies:\n" + "\n".join(updated))
    if linked:
        groups[release.type].append(
            "- Released with linked packages:\n" + "\n".join(linked)
        )

    lines = [f"## {release.new_version}"]
    for bump in (BumpType.MAJOR, BumpType.MINOR, BumpType.PATCH):
        if groups[bump]:
            lines.append("")
            lines.append(f"### {_HEADINGS[bump]}")
            lines.append("")
            lines.extend(groups[bump])
    return "\n".join(lines) + "\n"


def write_changelog(path: Path, name: str, section: str) -> None:
    """Prepend a release section to a changelog file.

    The file starts with a "# <name>" heading; new sections go right
    below it so the newest release is on top. The file is created if
    it doesn't exist.
    """
    heading = f"# {name}"
    body = path.read_text() if path.exists() else ""
    if body.startswith(heading + "\n"):
        body = body[len(heading) + 1 :]
    body = body.lstrip("\n")
    parts = [heading, "", section.rstrip("\n")]
    if body:
        parts.extend(["", body.rstrip("\n")])
    path.write_text("\n".join(parts) + "\n")
