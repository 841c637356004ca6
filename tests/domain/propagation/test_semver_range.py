from __future__ import annotations

import pytest

from subhub.domain.errors import FilterEvaluationError
from subhub.domain.propagation import SemverRange, parse_version


@pytest.mark.parametrize("version", ["1.2.0", "1.2.9", "v1.2.3"])
def test_wildcard_patch_matches_same_minor(version: str) -> None:
    assert SemverRange.parse("1.2.x").contains(version)


@pytest.mark.parametrize("version", ["1.1.9", "2.0.0", "1.3.0"])
def test_wildcard_patch_rejects_other_minors(version: str) -> None:
    assert not SemverRange.parse("1.2.x").contains(version)


@pytest.mark.parametrize(
    ("expression", "version", "expected"),
    [
        (">=1.0.0 <2.0.0", "1.5.3", True),
        (">=1.0.0 <2.0.0", "2.0.0", False),
        ("1.x || >=3.0.0", "3.1.0", True),
        ("1.x || >=3.0.0", "2.4.0", False),
        (">1.2.x", "1.2.9", False),
        (">1.2.x", "1.3.0", True),
        ("<=1.2.x", "1.2.7", True),
        ("<1.2.x", "1.1.99", True),
        ("<1.2.x", "1.2.0", False),
        ("!=1.2.x", "1.2.4", False),
        ("!=1.2.x", "1.4.0", True),
        (">= 1.0.0", "1.0.0", True),
        ("*", "0.0.1", True),
        ("=1.2.3", "1.2.3", True),
        ("1.2.3", "1.2.4", False),
        (">=1.0.0", "1.2.3-SNAPSHOT", True),
        ("1.2.x", "1.2.5-rc.1", True),
        ("=1.2.3", "1.2.3+build.7", True),
    ],
)
def test_range_expressions(expression: str, version: str, expected: bool) -> None:
    assert SemverRange.parse(expression).contains(version) is expected


def test_missing_or_unparsable_version_never_matches() -> None:
    version_range = SemverRange.parse("1.x")

    assert not version_range.contains(None)
    assert not version_range.contains("")
    assert not version_range.contains("not-a-version")


@pytest.mark.parametrize("expression", ["", "   ", "1.2.x ||", ">=", "1.a.0", "~~1"])
def test_malformed_ranges_raise(expression: str) -> None:
    with pytest.raises(FilterEvaluationError):
        SemverRange.parse(expression)


def test_parse_version_strips_leading_v() -> None:
    assert parse_version("v2.0.1") == parse_version("2.0.1")
    assert parse_version("garbage") is None


def test_membership_operator() -> None:
    version_range = SemverRange.parse("2.x")

    assert "2.3.4" in version_range
    assert 2 not in version_range


def test_prerelease_sorts_below_its_release() -> None:
    assert not SemverRange.parse(">1.2.3").contains("1.2.3-1")
    assert SemverRange.parse("<1.2.3").contains("1.2.3-1")
    assert SemverRange.parse(">=1.2.3-alpha <1.2.3").contains("1.2.3-beta")


@pytest.mark.parametrize("version", ["1.2", "1.2.3.4", "01.2.3", "1.2.3-"])
def test_non_semver_artifact_versions_never_match(version: str) -> None:
    assert not SemverRange.parse("1.2.x").contains(version)
    assert parse_version(version) is None


@pytest.mark.parametrize("expression", ["1.x-beta", "1.2.3.4", "1..2"])
def test_malformed_comparator_versions_raise(expression: str) -> None:
    with pytest.raises(FilterEvaluationError):
        SemverRange.parse(expression)
