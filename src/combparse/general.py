"""
General purpose parsers built from the core combinators.

Parsers without parameters are pre-defined values (`digit`, `letter`, `decimal_integer`, `float_number`, `skip_eol`).
Parsers with configurable character sets are factories that have to be called, even with the defaults:
`skip_whitespace()`, `comment()`, `skip_comments()`, `skip_trivia()`.
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import reduce

import combparse.const as const
from combparse.main import (
    Parser,
    match,
    char,
    one_of,
    none_of,
    optional,
    some,
    skip_many,
)

# characters

digit: Parser[str] = match(const.DECIMAL.__contains__, "digit")
letter: Parser[str] = match(const.ALPHABETIC.__contains__, "letter")

# numbers

def _fold_digits(digits: list[str]) -> int:
    return reduce(lambda acc, d: acc * 10 + int(d), digits, 0)

decimal_integer: Parser[int] = some(digit).map(_fold_digits).label("decimal integer")
"""One or more digits. No sign."""

_digits: Parser[str] = some(digit).map("".join)
_fraction_part: Parser[str] = (char(".") >> _digits).map(lambda d: "." + d)
_exponent: Parser[str] = (
    one_of(const.EXPONENT_MARKERS)
    >> optional(one_of(const.SIGNS), "").bind(lambda sign: _digits.map(lambda d: "e" + sign + d))
)

def _concat(*parts: Parser[str]) -> Parser[str]:
    result = parts[0]
    for part in parts[1:]:
        result = result.bind(lambda left, part=part: part.map(lambda right: left + right))
    return result

float_number: Parser[float] = _concat(
    optional(char("-"), ""),
    (
        _concat(_digits, (_concat(_fraction_part, optional(_exponent, "")) | _exponent))
        | _concat(_fraction_part, optional(_exponent, ""))
    ),
).map(float).label("floating point number")
"""
Requires a fraction part or an exponent, so plain integers don't match.

Fails after consuming input for things like `1/2`. Wrap with `attempt()` when it's one of several alternatives.
"""

# skipping

skip_eol: Parser[None] = skip_many(char(const.NEWLINE))
"""Skips any number of newlines."""

def skip_whitespace(chars: Iterable[str] = const.BLANKS) -> Parser[None]:
    """Skips any number of spaces and newlines."""
    return skip_many(one_of(chars))

def comment(markers: Iterable[str] = const.COMMENT_MARKERS) -> Parser[None]:
    """
    A single comment line.

    Starts with one of `markers` and runs to the end of the line. The newlines after it are skipped too.
    """
    return (one_of(markers) >> skip_many(none_of(const.NEWLINE)) >> skip_eol).label("comment")

def skip_comments(markers: Iterable[str] = const.COMMENT_MARKERS) -> Parser[None]:
    """Skips any number of comment lines."""
    return skip_many(comment(markers))

def skip_trivia(
    chars: Iterable[str] = const.BLANKS,
    markers: Iterable[str] = const.COMMENT_MARKERS,
) -> Parser[None]:
    """Skips blank lines and comment lines, in any order."""
    return skip_many(one_of(chars) | comment(markers))
