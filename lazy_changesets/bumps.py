"""Bump strengths.

Bumps form a total order ``none < patch < minor < major``. Combining
several intents for the same package is just taking the maximum.
"""

from __future__ import annotations

from enum import IntEnum


class BumpType(IntEnum):
    """Semver bump strength, ordered from weakest to strongest."""

    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, text: str) -> BumpType:
        """Parse a bump word as written in changeset files.

        Examples:
            "minor" → BumpType.MINOR
            "Patch" → BumpType.PATCH

        Raises:
            ValueError: If the word is not a known bump.
        """
        try:
            return cls[text.strip().upper()]
        except KeyError:
            choices = ", ".join(str(b) for b in cls)
            raise ValueError(f"Unknown bump type {text!r} (expected {choices})") from None


def max_bump(*bumps: BumpType) -> BumpType:
    """Return the strongest of the given bumps (NONE if there are none)."""
    return max(bumps, default=BumpType.NONE)
