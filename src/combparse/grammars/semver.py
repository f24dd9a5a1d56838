"""
Semantic versions: `major.minor.patch[-release][+metadata]`.

```
v = parse_semver("1.0.0-alpha.1+build.5")
v.release       # (NumberOrString("alpha"), NumberOrString(1))
v < parse_semver("1.0.0")   # True, pre-releases come before the final release
```

Ordering follows semantic versioning precedence. Metadata is kept but never compared.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from collections.abc import Sequence

import logging

from combparse.main import Parser, char, some, sep_by1, optional, parse_all
from combparse.general import decimal_integer, letter


logger = logging.getLogger(__name__)



@dataclass(frozen=True)
class NumberOrString:
    """
    A single dot-separated release or metadata identifier.

    Numeric identifiers sort before textual ones. Within a kind, the natural order is used.
    """
    value: int | str

    @property
    def is_numeric(self) -> bool:
        return isinstance(self.value, int)

    def sort_key(self) -> tuple[int, int | str]:
        return (0, self.value) if self.is_numeric else (1, self.value)

    def __lt__(self, other: NumberOrString) -> bool:
        return self.sort_key() < other.sort_key()

    def __le__(self, other: NumberOrString) -> bool:
        return self.sort_key() <= other.sort_key()

    def __gt__(self, other: NumberOrString) -> bool:
        return self.sort_key() > other.sort_key()

    def __ge__(self, other: NumberOrString) -> bool:
        return self.sort_key() >= other.sort_key()

    def __str__(self) -> str:
        return str(self.value)


def _compare(a: object, b: object) -> int:
    return (a > b) - (a < b) # type: ignore[operator]

def compare_release(a: Sequence[NumberOrString], b: Sequence[NumberOrString]) -> int:
    """
    Compares two release sequences. Returns a negative number, zero or a positive number.

    - No release is greater than any release. (`1.2.3` > `1.2.3-beta`)
    - Otherwise identifiers are compared in order.
    - If one is a prefix of the other, the longer one is greater. (`1.2.3-alpha.5.1` > `1.2.3-alpha.5`)
    """
    if not a or not b:
        return _compare(not a, not b)
    for x, y in zip(a, b):
        if (result := _compare(x, y)) != 0:
            return result
    return _compare(len(a), len(b))


@dataclass(frozen=True)
class SemVer:
    """
    Equality compares every field. Ordering ignores `metadata`.
    """
    major: int
    minor: int
    patch: int
    release: tuple[NumberOrString, ...] = field(default=())
    metadata: tuple[NumberOrString, ...] = field(default=())

    def __post_init__(self) -> None:
        if self.major < 0 or self.minor < 0 or self.patch < 0:
            raise ValueError("Version numbers must be non-negative.")
        # accept lists
        object.__setattr__(self, "release", tuple(self.release))
        object.__setattr__(self, "metadata", tuple(self.metadata))

    def compare(self, other: SemVer) -> int:
        """Returns a negative number, zero or a positive number, by precedence."""
        for mine, theirs in ((self.major, other.major), (self.minor, other.minor), (self.patch, other.patch)):
            if (result := _compare(mine, theirs)) != 0:
                return result
        return compare_release(self.release, other.release)

    def __lt__(self, other: SemVer) -> bool:
        return self.compare(other) < 0

    def __le__(self, other: SemVer) -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: SemVer) -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: SemVer) -> bool:
        return self.compare(other) >= 0

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.release:
            text += "-" + ".".join(str(tag) for tag in self.release)
        if self.metadata:
            text += "+" + ".".join(str(tag) for tag in self.metadata)
        return text



tag: Parser[NumberOrString] = (
    decimal_integer.map(NumberOrString)
    | some(letter).map(lambda letters: NumberOrString("".join(letters)))
)
"""A numeric identifier, or a run of letters."""

tags: Parser[list[NumberOrString]] = sep_by1(tag, char("."))

def _prefixed_tags(prefix: str) -> Parser[tuple[NumberOrString, ...]]:
    return optional((char(prefix) >> tags).map(tuple), ())

semver: Parser[SemVer] = decimal_integer.bind(
    lambda major: char(".") >> decimal_integer.bind(
        lambda minor: char(".") >> decimal_integer.bind(
            lambda patch: _prefixed_tags("-").bind(
                lambda release: _prefixed_tags("+").map(
                    lambda metadata: SemVer(major, minor, patch, release, metadata)
                )
            )
        )
    )
)
"""Doesn't check for the end of the input. See `parse_semver()`."""


def parse_semver(text: str) -> SemVer:
    """
    Parses a complete version string.

    Raises `ParseError` if the string isn't a valid version.
    """
    r = parse_all(semver, text)
    if not r:
        raise r.error()
    logger.debug("Parsed version %s", r.value)
    return r.value
