"""Configuration from [tool.lazy-changesets].

Example root pyproject.toml:

    [tool.lazy-changesets]
    commit = true
    tag = true
    linked = [["pkg-a", "pkg-b"]]
    changelog = "lazy_changesets.changelog:default_generator"  # or false
"""

from __future__ import annotations

from pathlib import Path

from packaging.utils import canonicalize_name
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .toml import get_tool_config, load_pyproject

DEFAULT_CHANGELOG = "lazy_changesets.changelog:default_generator"


class Config(BaseModel):
    """Settings for the version command.

    Attributes:
        commit: Stage and commit written files after applying the plan.
        tag: Tag each released package as {name}/v{version} after committing.
        linked: Groups of packages that are always released with the same bump.
        changelog: "module:attribute" reference to a changelog generator, or
                   None when changelogs are disabled.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    commit: bool = False
    tag: bool = False
    linked: list[list[str]] = Field(default_factory=list)
    changelog: str | None = DEFAULT_CHANGELOG

    @field_validator("linked")
    @classmethod
    def _canonical_names(cls, groups: list[list[str]]) -> list[list[str]]:
        return [[canonicalize_name(name) for name in group] for group in groups]

    @field_validator("changelog", mode="before")
    @classmethod
    def _changelog_switch(cls, value: object) -> object:
        # TOML has no null; `changelog = false` turns changelogs off
        if value is False:
            return None
        if value is True:
            return DEFAULT_CHANGELOG
        return value


def load_config(root: Path) -> Config:
    """Load the configuration from root/pyproject.toml.

    A missing pyproject.toml or a missing [tool.lazy-changesets] table
    gives the defaults.

    Raises:
        ConfigurationError: If the table has unknown keys or bad values.
    """
    pyproject = root / "pyproject.toml"
    raw = get_tool_config(load_pyproject(pyproject)) if pyproject.exists() else {}
    try:
        return Config.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid [tool.lazy-changesets] table:\n{exc}") from exc
