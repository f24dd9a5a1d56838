"""
Numeric literal grammars.
"""

from __future__ import annotations

from fractions import Fraction

from combparse.main import Parser, FailureKind, char, fail, pure, attempt, optional
from combparse.general import decimal_integer, float_number


def _check_denominator(numerator: int, denominator: int) -> Parser[Fraction]:
    if denominator == 0:
        return fail("Denominator cannot be zero.", FailureKind.SEMANTIC)
    return pure(Fraction(numerator, denominator))

fraction: Parser[Fraction] = decimal_integer.bind(
    lambda numerator: char("/") >> decimal_integer.bind(
        lambda denominator: _check_denominator(numerator, denominator)
    )
)
"""`numerator/denominator`. A zero denominator is a semantic failure."""

signed_integer: Parser[int] = optional(char("-")).bind(
    lambda sign: decimal_integer.map(lambda n: -n if sign is not None else n)
)

number_or_fraction: Parser[float | Fraction] = attempt(float_number) | fraction
"""
A float such as `1.5` or `2e3`, or a fraction such as `1/2`.

The float is attempted first. Its partial matches are backtracked over.
"""
