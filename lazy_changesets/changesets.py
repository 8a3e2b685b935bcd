"""Changeset files.

Changesets live in .changeset/ at the workspace root, one Markdown file
per change. The file stem is the changeset id. TOML front matter maps
package names to bumps, and the body is the changelog summary:

    ---
    "pkg-a" = "minor"
    "pkg-b" = "patch"
    ---

    Add a frobnicate() helper.
"""

from __future__ import annotations

import random
import re
from collections.abc import Iterable
from pathlib import Path

import tomlkit
from packaging.utils import canonicalize_name
from tomlkit.exceptions import ParseError

from .bumps import BumpType
from .errors import ChangesetParseError
from .models import Changeset, Release

CHANGESET_DIR = ".changeset"
FENCE = "---"
README = "README.md"

# A file stem that stays inside .changeset/ on every platform
_ID_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")

_ADJECTIVES = [
    "brave", "calm", "eager", "fancy", "gentle", "happy", "jolly", "kind",
    "lively", "merry", "nice", "proud", "quiet", "silly", "swift", "witty",
]
_NOUNS = [
    "apples", "bears", "clouds", "dingos", "eagles", "forks", "geese", "hats",
    "islands", "jars", "kiwis", "lamps", "moons", "needles", "owls", "pens",
]
_VERBS = [
    "bake", "climb", "dance", "dream", "fly", "glow", "hide", "jump",
    "laugh", "march", "play", "relax", "shout", "sing", "smile", "wave",
]


def validate_changeset_id(changeset_id: str) -> str:
    """Return changeset_id if it is usable as a file stem in .changeset/.

    Ids start with a letter or digit and contain only letters, digits,
    ".", "_" and "-". "README" is reserved for the directory's own README.

    Raises:
        ValueError: If the id is not usable.
    """
    if not _ID_PATTERN.fullmatch(changeset_id) or changeset_id == Path(README).stem:
        raise ValueError(f"Invalid changeset id {changeset_id!r}")
    return changeset_id


def parse_changeset(text: str, changeset_id: str, path: Path) -> Changeset:
    """Parse the contents of one changeset file.

    Args:
        text: File contents.
        changeset_id: Id to give the changeset (the file stem).
        path: File path, used in error messages only.

    Raises:
        ChangesetParseError: If the front matter is missing or invalid.
    """
    lines = text.splitlines()
    if not lines or lines[0].strip() != FENCE:
        raise ChangesetParseError(path, f"missing opening {FENCE!r} fence")
    end = next((i for i in range(1, len(lines)) if lines[i].strip() == FENCE), None)
    if end is None:
        raise ChangesetParseError(path, f"missing closing {FENCE!r} fence")

    try:
        front = tomlkit.parse("\n".join(lines[1:end])).unwrap()
    except ParseError as exc:
        raise ChangesetParseError(path, f"invalid front matter: {exc}") from exc

    releases: list[Release] = []
    for name, bump in front.items():
        if not isinstance(bump, str):
            raise ChangesetParseError(path, f"bump for {name!r} must be a string")
        try:
            bump_type = BumpType.parse(bump)
        except ValueError as exc:
            raise ChangesetParseError(path, str(exc)) from exc
        releases.append(Release(name=canonicalize_name(name), type=bump_type))

    summary = "\n".join(lines[end + 1 :]).strip()
    return Changeset(id=changeset_id, summary=summary, releases=releases)


def read_changesets(directory: Path) -> list[Changeset]:
    """Read every changeset in a directory, sorted by id.

    Returns an empty list when the directory does not exist.
    """
    if not directory.is_dir():
        return []
    changesets: list[Changeset] = []
    for path in sorted(directory.glob("*.md")):
        if path.name == README:
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ChangesetParseError(path, f"not valid UTF-8: {exc.reason}") from exc
        changesets.append(parse_changeset(text, path.stem, path))
    return changesets


def render_changeset(changeset: Changeset) -> str:
    """Render a changeset in the on-disk format read by parse_changeset()."""
    front = tomlkit.document()
    for release in changeset.releases:
        front[release.name] = str(release.type)
    return f"{FENCE}\n{tomlkit.dumps(front)}{FENCE}\n\n{changeset.summary.strip()}\n"


def write_changeset(directory: Path, changeset: Changeset) -> Path:
    """Write a new changeset file into directory and return its path.

    Raises:
        ValueError: If the changeset id is not a valid file stem.
        FileExistsError: If a changeset with the same id already exists.
    """
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{validate_changeset_id(changeset.id)}.md"
    with path.open("x", encoding="utf-8") as f:
        f.write(render_changeset(changeset))
    return path


def new_changeset_id(directory: Path) -> str:
    """Generate a readable id not yet used in directory, e.g. "brave-owls-sing"."""
    while True:
        candidate = "-".join(
            [random.choice(_ADJECTIVES), random.choice(_NOUNS), random.choice(_VERBS)]
        )
        if not (directory / f"{candidate}.md").exists():
            return candidate


def delete_changesets(directory: Path, ids: Iterable[str]) -> list[Path]:
    """Delete consumed changeset files and return the deleted paths."""
    deleted: list[Path] = []
    for changeset_id in ids:
        path = directory / f"{changeset_id}.md"
        if path.exists():
            path.unlink()
            deleted.append(path)
    return deleted
