"""Version parsing and bumping utilities.

Handles conversion between version strings and semver objects, with
special handling for incomplete version strings (e.g., "1.0" → "1.0.0").
"""

from __future__ import annotations

import semver

from .bumps import BumpType
from .errors import InvariantViolation


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Handles incomplete versions by padding with zeros:
    - "1" → "1.0.0"
    - "1.2" → "1.2.0"
    - "1.2.3-rc.1" → "1.2.3-rc.1"

    Raises:
        ValueError: If the string is not a semantic version.
    """
    return semver.Version.parse(version_str.strip(), optional_minor_and_patch=True)


def bump_version(version_str: str, bump: BumpType) -> str:
    """Apply a bump to a version and return the new version string.

    Pre-release and build metadata are dropped: a release always produces
    a plain major.minor.patch version.

    Examples:
        ("1.0.0", PATCH) → "1.0.1"
        ("1.2.3", MINOR) → "1.3.0"
        ("1.0.9", MAJOR) → "2.0.0"
        ("2.0.0-rc.1", PATCH) → "2.0.1"

    Raises:
        InvariantViolation: If bump is NONE or not a BumpType. Callers only
            ask for versions of packages that are actually released.
    """
    v = parse_version(version_str)
    if bump is BumpType.MAJOR:
        new = v.bump_major()
    elif bump is BumpType.MINOR:
        new = v.bump_minor()
    elif bump is BumpType.PATCH:
        new = v.bump_patch()
    else:
        raise InvariantViolation(f"Cannot bump {version_str} with {bump!r}")
    return str(semver.Version(new.major, new.minor, new.patch))
