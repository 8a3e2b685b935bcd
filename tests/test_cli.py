"""Tests for lazy_changesets.cli."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from lazy_changesets.bumps import BumpType
from lazy_changesets.changesets import read_changesets
from lazy_changesets.cli import cli

WorkspaceFactory = Callable[..., Path]

SIMPLE = {
    "pkg-a": ("1.0.0", []),
    "pkg-b": ("1.0.0", ["pkg-a"]),
}


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestInit:
    def test_creates_changeset_dir(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[tool.uv.workspace]\nmembers = ["packages/*"]\n'
        )
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(cli, ["init"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / ".changeset" / "README.md").exists()
        assert "Created .changeset/" in result.output

    def test_requires_pyproject(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(cli, ["init"])

        assert result.exit_code == 1
        assert "No pyproject.toml" in result.output

    def test_requires_workspace(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n')
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(cli, ["init"])

        assert result.exit_code == 1
        assert "[tool.uv.workspace]" in result.output


class TestAdd:
    def test_writes_changeset(
        self,
        runner: CliRunner,
        make_workspace: WorkspaceFactory,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        root = make_workspace(SIMPLE)
        monkeypatch.chdir(root)

        result = runner.invoke(
            cli,
            ["add", "-r", "pkg-a:minor", "-r", "Pkg_B:patch", "-m", "Summary", "--id", "c1"],
        )

        assert result.exit_code == 0, result.output
        [changeset] = read_changesets(root / ".changeset")
        assert changeset.id == "c1"
        assert changeset.summary == "Summary"
        assert [(r.name, r.type) for r in changeset.releases] == [
            ("pkg-a", BumpType.MINOR),
            ("pkg-b", BumpType.PATCH),
        ]

    def test_rejects_bad_release(
        self,
        runner: CliRunner,
        make_workspace: WorkspaceFactory,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(make_workspace(SIMPLE))

        result = runner.invoke(cli, ["add", "-r", "pkg-a", "-m", "Summary"])

        assert result.exit_code == 2
        assert "NAME:BUMP" in result.output

    def test_rejects_unknown_bump(
        self,
        runner: CliRunner,
        make_workspace: WorkspaceFactory,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(make_workspace(SIMPLE))

        result = runner.invoke(cli, ["add", "-r", "pkg-a:huge", "-m", "Summary"])

        assert result.exit_code == 2
        assert "Unknown bump type" in result.output

    @pytest.mark.parametrize("changeset_id", ["../escape", "sub/dir", ".hidden", "README"])
    def test_rejects_unsafe_id(
        self,
        runner: CliRunner,
        make_workspace: WorkspaceFactory,
        monkeypatch: pytest.MonkeyPatch,
        changeset_id: str,
    ) -> None:
        root = make_workspace(SIMPLE)
        monkeypatch.chdir(root)

        result = runner.invoke(
            cli, ["add", "-r", "pkg-a:patch", "-m", "Summary", "--id", changeset_id]
        )

        assert result.exit_code == 2
        assert "Invalid changeset id" in result.output
        assert not (root / "escape.md").exists()
        assert list((root / ".changeset").iterdir()) == []

    def test_refuses_to_overwrite(
        self,
        runner: CliRunner,
        make_workspace: WorkspaceFactory,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        root = make_workspace(SIMPLE)
        monkeypatch.chdir(root)
        runner.invoke(cli, ["add", "-r", "pkg-a:minor", "-m", "First", "--id", "c1"])

        result = runner.invoke(
            cli, ["add", "-r", "pkg-b:major", "-m", "Second", "--id", "c1"]
        )

        assert result.exit_code == 1
        assert "already exists" in result.output
        [changeset] = read_changesets(root / ".changeset")
        assert changeset.summary == "First"


class TestStatusAndVersion:
    def test_status_does_not_write(
        self,
        runner: CliRunner,
        make_workspace: WorkspaceFactory,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        root = make_workspace(SIMPLE)
        monkeypatch.chdir(root)
        runner.invoke(cli, ["add", "-r", "pkg-a:major", "-m", "Break", "--id", "c1"])

        result = runner.invoke(cli, ["status"])

        assert result.exit_code == 0, result.output
        assert "pkg-a: 1.0.0 → 2.0.0 [major]" in result.output
        assert "pkg-b: 1.0.0 → 1.0.1 [patch] (dependencies/linked only)" in result.output
        assert (root / ".changeset" / "c1.md").exists()

    def test_version_applies(
        self,
        runner: CliRunner,
        make_workspace: WorkspaceFactory,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        root = make_workspace(SIMPLE)
        monkeypatch.chdir(root)
        runner.invoke(cli, ["add", "-r", "pkg-a:minor", "-m", "Feature", "--id", "c1"])

        result = runner.invoke(cli, ["version"])

        assert result.exit_code == 0, result.output
        assert 'version = "1.1.0"' in (root / "packages/pkg-a/pyproject.toml").read_text()
        assert not (root / ".changeset" / "c1.md").exists()

    def test_version_unknown_package_is_click_error(
        self,
        runner: CliRunner,
        make_workspace: WorkspaceFactory,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        root = make_workspace(SIMPLE)
        monkeypatch.chdir(root)
        runner.invoke(cli, ["add", "-r", "ghost:minor", "-m", "Boo", "--id", "c1"])

        result = runner.invoke(cli, ["version"])

        assert result.exit_code == 1
        assert "unknown package 'ghost'" in result.output
