"""Semantic-version range expressions used by package filters.

Grammar: alternatives separated by ``||``; each alternative is a whitespace
separated list of comparators that must all hold. A comparator is an optional
operator (``=``, ``==``, ``!=``, ``<``, ``<=``, ``>``, ``>=``) followed by a
version whose trailing components may be ``x``, ``X``, ``*`` or omitted, e.g.
``1.2.x``, ``>=1.0.0 <2.0.0 || 3.x``.

Artifact versions must be full ``MAJOR.MINOR.PATCH`` semantic versions and are
ordered by semver precedence, so ``1.2.3-rc.1`` sorts below ``1.2.3``.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Final

from semver import Version

from subhub.domain.errors import FilterEvaluationError

_OPERATORS: Final[tuple[str, ...]] = ("<=", ">=", "==", "!=", "<", ">", "=")
_WILDCARDS: Final[frozenset[str]] = frozenset({"x", "X", "*"})
_COMPARATOR_RE = re.compile(r"^(?P<op><=|>=|==|!=|<|>|=)?v?(?P<version>\S+)$")
_SUFFIX_RE = re.compile(r"[-+]")

type _Predicate = Callable[[Version], bool]


def parse_version(text: str | None) -> Version | None:
    """Parse an artifact version, returning ``None`` when absent or not semver."""

    if not text:
        return None
    try:
        return Version.parse(text.strip().removeprefix("v"))
    except ValueError:
        return None


def _wildcard_bounds(text: str) -> tuple[Version, Version | None] | None:
    """Return ``[low, high)`` for a partial version, or ``None`` if it is exact."""

    core, *suffix = _SUFFIX_RE.split(text, maxsplit=1)
    parts = core.split(".")
    if len(parts) > 3 or not all(part.isdigit() or part in _WILDCARDS for part in parts):
        raise FilterEvaluationError(f"invalid version in range: {text!r}")

    numbers: list[int] = []
    for part in parts:
        if part in _WILDCARDS:
            break
        numbers.append(int(part))

    if len(numbers) == 3:
        return None
    if suffix:
        raise FilterEvaluationError(f"prerelease on a partial version: {text!r}")
    if not numbers:
        return Version(0, 0, 0), None

    low = Version(*[*numbers, 0, 0][:3])
    bumped = [*numbers[:-1], numbers[-1] + 1]
    high = Version(*[*bumped, 0, 0][:3])
    return low, high


def _wildcard_predicate(operator: str, low: Version, high: Version | None) -> _Predicate:
    def within(version: Version) -> bool:
        return version >= low and (high is None or version < high)

    match operator:
        case "==":
            return within
        case "!=":
            return lambda version: not within(version)
        case ">":
            return lambda version: high is not None and version >= high
        case ">=":
            return lambda version: version >= low
        case "<":
            return lambda version: version < low
        case "<=":
            return lambda version: high is None or version < high
    raise FilterEvaluationError(f"unknown operator {operator!r}")


def _parse_comparator(token: str) -> _Predicate:
    found = _COMPARATOR_RE.match(token)
    if found is None:
        raise FilterEvaluationError(f"invalid comparator: {token!r}")
    operator = found.group("op") or "=="
    if operator == "=":
        operator = "=="
    text = found.group("version")

    bounds = _wildcard_bounds(text)
    if bounds is not None:
        return _wildcard_predicate(operator, *bounds)

    target = parse_version(text)
    if target is None:
        raise FilterEvaluationError(f"invalid version in range: {text!r}")
    expression = f"{operator}{target}"
    return lambda version: version.match(expression)


def _tokenize(alternative: str) -> list[str]:
    """Split on whitespace, re-attaching operators written apart from their version."""

    tokens: list[str] = []
    pending = ""
    for raw in alternative.split():
        if raw in _OPERATORS:
            if pending:
                raise FilterEvaluationError(f"dangling operator {pending!r}")
            pending = raw
            continue
        tokens.append(pending + raw)
        pending = ""
    if pending:
        raise FilterEvaluationError(f"dangling operator {pending!r}")
    return tokens


@dataclass(frozen=True, slots=True)
class SemverRange:
    expression: str
    _alternatives: tuple[tuple[_Predicate, ...], ...] = field(repr=False, compare=False)

    @classmethod
    def parse(cls, expression: str) -> SemverRange:
        if not expression or not expression.strip():
            raise FilterEvaluationError("empty version range")
        alternatives: list[tuple[_Predicate, ...]] = []
        for alternative in expression.split("||"):
            tokens = _tokenize(alternative)
            if not tokens:
                raise FilterEvaluationError(f"empty alternative in range {expression!r}")
            alternatives.append(tuple(_parse_comparator(token) for token in tokens))
        return cls(expression=expression, _alternatives=tuple(alternatives))

    def contains(self, version: str | Version | None) -> bool:
        parsed = version if isinstance(version, Version) else parse_version(version)
        if parsed is None:
            return False
        return any(
            all(predicate(parsed) for predicate in alternative)
            for alternative in self._alternatives
        )

    def __contains__(self, version: object) -> bool:
        if not isinstance(version, str | Version):
            return False
        return self.contains(version)
