"""CLI entry point for lazy-changesets."""

from __future__ import annotations

from pathlib import Path

import click
from packaging.utils import canonicalize_name

from lazy_changesets.bumps import BumpType
from lazy_changesets.changesets import (
    CHANGESET_DIR,
    README,
    new_changeset_id,
    validate_changeset_id,
    write_changeset,
)
from lazy_changesets.config import load_config
from lazy_changesets.errors import LazyChangesetsError
from lazy_changesets.models import Changeset, Release
from lazy_changesets.pipeline import NOTHING_TO_RELEASE, plan_release, print_plan, run_version
from lazy_changesets.shell import warn

README_TEXT = """\
# Changesets

Each Markdown file in this directory is a changeset: a description of a
change plus the version bump it needs per package.

    ---
    "my-package" = "minor"
    ---

    Describe the change for the changelog.

Create one with `lazy-changesets add`, then run `lazy-changesets version`
to bump versions, write changelogs and consume the changesets.
"""


def _parse_release(value: str) -> Release:
    name, sep, bump = value.rpartition(":")
    if not sep or not name:
        raise click.BadParameter(f"expected NAME:BUMP, got {value!r}")
    try:
        return Release(name=canonicalize_name(name), type=BumpType.parse(bump))
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


def _validate_id(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> str | None:
    if value is None:
        return None
    try:
        return validate_changeset_id(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


@click.group()
@click.version_option(package_name="lazy-changesets")
def cli() -> None:
    """Changeset-driven versioning for uv workspaces."""


@cli.command()
def init() -> None:
    """Create the .changeset directory in your workspace."""
    root = Path.cwd()

    pyproject = root / "pyproject.toml"
    if not pyproject.exists():
        raise click.ClickException("No pyproject.toml found in current directory.")

    import tomlkit

    doc = tomlkit.parse(pyproject.read_text())
    members = doc.get("tool", {}).get("uv", {}).get("workspace", {}).get("members")
    if not members:
        raise click.ClickException(
            "No [tool.uv.workspace] members defined in pyproject.toml.\n"
            "lazy-changesets requires a uv workspace. Example:\n\n"
            "  [tool.uv.workspace]\n"
            '  members = ["packages/*"]'
        )

    dest_dir = root / CHANGESET_DIR
    dest_dir.mkdir(parents=True, exist_ok=True)
    readme = dest_dir / README
    if not readme.exists():
        readme.write_text(README_TEXT)

    click.echo(f"✓ Created {CHANGESET_DIR}/")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Record a change:")
    click.echo('       lazy-changesets add -r my-package:minor -m "Add a feature"')
    click.echo("  2. Apply pending changesets:")
    click.echo("       lazy-changesets version")


@cli.command()
@click.option(
    "-r",
    "--release",
    "releases",
    multiple=True,
    metavar="NAME:BUMP",
    help="Package and bump (patch, minor, major or none). Repeatable.",
)
@click.option("-m", "--message", required=True, help="Summary for the changelog.")
@click.option(
    "--id",
    "changeset_id",
    default=None,
    callback=_validate_id,
    help="Changeset id (file stem).",
)
def add(releases: tuple[str, ...], message: str, changeset_id: str | None) -> None:
    """Write a new changeset."""
    directory = Path.cwd() / CHANGESET_DIR
    parsed = [_parse_release(value) for value in releases]
    changeset = Changeset(
        id=changeset_id or new_changeset_id(directory),
        summary=message,
        releases=parsed,
    )
    try:
        path = write_changeset(directory, changeset)
    except FileExistsError:
        raise click.ClickException(
            f"Changeset {changeset.id!r} already exists in {CHANGESET_DIR}/"
        ) from None
    if not parsed:
        warn("Created an empty changeset; it releases nothing.")
    click.echo(f"✓ Wrote {CHANGESET_DIR}/{path.name}")


@cli.command()
def status() -> None:
    """Show what `version` would release, without writing anything."""
    root = Path.cwd()
    try:
        _, plan = plan_release(root, load_config(root))
    except LazyChangesetsError as exc:
        raise click.ClickException(str(exc)) from exc
    if plan.is_empty:
        warn(NOTHING_TO_RELEASE)
        return
    print_plan(plan)


@cli.command()
def version() -> None:
    """Bump versions, write changelogs and consume changesets."""
    try:
        run_version(Path.cwd())
    except LazyChangesetsError as exc:
        raise click.ClickException(str(exc)) from exc
