"""Tests for lazy_changesets.bumps."""

from __future__ import annotations

import pytest

from lazy_changesets.bumps import BumpType, max_bump


class TestBumpType:
    def test_total_order(self) -> None:
        assert BumpType.NONE < BumpType.PATCH < BumpType.MINOR < BumpType.MAJOR

    def test_str_is_lowercase_name(self) -> None:
        assert str(BumpType.MINOR) == "minor"
        assert str(BumpType.NONE) == "none"

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("none", BumpType.NONE),
            ("patch", BumpType.PATCH),
            ("minor", BumpType.MINOR),
            ("major", BumpType.MAJOR),
            ("Major", BumpType.MAJOR),
            (" patch ", BumpType.PATCH),
        ],
    )
    def test_parse(self, text: str, expected: BumpType) -> None:
        assert BumpType.parse(text) is expected

    def test_parse_unknown_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown bump type 'prerelease'"):
            BumpType.parse("prerelease")


class TestMaxBump:
    def test_empty_is_none(self) -> None:
        assert max_bump() is BumpType.NONE

    def test_picks_strongest(self) -> None:
        assert max_bump(BumpType.PATCH, BumpType.MAJOR, BumpType.MINOR) is BumpType.MAJOR

    def test_commutative(self) -> None:
        assert max_bump(BumpType.MINOR, BumpType.PATCH) == max_bump(
            BumpType.PATCH, BumpType.MINOR
        )
