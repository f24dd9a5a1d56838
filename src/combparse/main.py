"""
The implementations of the main classes and the core combinators.
"""

from __future__ import annotations
from typing import Any, Self, Literal, TypeVar, Generic, Final, Callable
from collections.abc import Iterable

import enum
import logging


logger = logging.getLogger(__name__)

_T = TypeVar("_T")
_U = TypeVar("_U")
_DataCovT = TypeVar("_DataCovT", covariant=True)



def line_and_column(src: str, pos: int) -> tuple[int, int]:
    """1-based line and column of `pos` in `src`."""
    pos = min(pos, len(src))
    line = src.count("\n", 0, pos) + 1
    column = pos - src.rfind("\n", 0, pos) # magically works even when it returns -1
    return line, column

def describe_char(char: str | None) -> str:
    if char is None:
        return "end of input"
    return repr(char)


class Cursor:
    """
    An immutable position within the string that's being parsed.

    Every successful match returns a new cursor. Existing cursors are never modified.
    """
    __slots__ = ("src", "pos")

    def __init__(self, src: str, pos: int = 0) -> None:
        self.src: Final[str] = src
        """The string that's being parsed."""
        self.pos: Final[int] = pos
        """The current offset."""

    @property
    def remaining(self) -> str:
        return self.src[self.pos:]

    def __len__(self) -> int:
        """The amount of characters left."""
        return max(len(self.src) - self.pos, 0)

    def is_eof(self) -> bool:
        """Whether the end of the input has been reached."""
        return self.pos >= len(self.src)

    def peek(self) -> str | None:
        """
        Retrieves the next character without advancing.

        If there aren't any characters left, returns `None`.
        """
        if self.is_eof():
            return None
        return self.src[self.pos]

    def advance(self) -> tuple[str, Cursor]:
        """
        Returns the next character and a cursor positioned after it.

        Raises `EndOfInputError` if there aren't any characters left. Check `peek()` first.
        """
        if self.is_eof():
            raise EndOfInputError(self.src, self.pos)
        return self.src[self.pos], Cursor(self.src, self.pos + 1)

    def line_and_column(self) -> tuple[int, int]:
        return line_and_column(self.src, self.pos)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cursor):
            return NotImplemented
        return self.pos == other.pos and self.src == other.src

    def __hash__(self) -> int:
        return hash((self.src, self.pos))

    def __repr__(self) -> str:
        return f"<Cursor {self.pos}/{len(self.src)} {self.remaining[:20]!r}>"



class FailureKind(enum.Enum):
    SYNTAX = "syntax"
    """A character didn't match what was expected."""
    END_OF_INPUT = "end_of_input"
    """More characters were required than remained."""
    SEMANTIC = "semantic"
    """Structurally valid input that breaks a domain rule."""
    TRAILING_INPUT = "trailing_input"
    """Input remained where the end was expected."""


class Success(Generic[_DataCovT]):
    """
    When returned from a parser, indicates that it has succeeded.

    ```
    r = parser(cursor)
    if r:
        r.value     # the parsed data
        r.rest      # the cursor after the match
    else:
        ... # `r` is a `Failure` object
    ```
    """
    __slots__ = ("value", "rest")

    def __init__(self, value: _DataCovT, rest: Cursor) -> None:
        self.value: Final[_DataCovT] = value
        self.rest: Final[Cursor] = rest

    def __bool__(self) -> Literal[True]:
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Success):
            return NotImplemented
        return self.value == other.value and self.rest == other.rest

    def __repr__(self) -> str:
        return f"<Success {self.value!r} at {self.rest.pos}>"


class Failure:
    """
    When returned from a parser, indicates that it has failed. Can be converted into a `ParseError`.

    `consumed` tells whether the parser advanced before failing. Alternatives are only tried for failures that didn't consume anything.
    """
    __slots__ = ("src", "pos", "msg", "expected", "consumed", "kind")

    def __init__(
        self,
        src: str,
        pos: int,
        msg: str | None = None,
        *,
        expected: tuple[str, ...] = (),
        consumed: bool = False,
        kind: FailureKind = FailureKind.SYNTAX,
    ) -> None:
        """
        `src`: The string that was being parsed.
        `pos`: The position of the failure.
        `msg`: The reason for the failure. If `None`, the message is built from `expected`.
        `expected`: Descriptions of what would have matched at `pos`.
        """
        self.src: Final[str] = src
        self.pos: Final[int] = pos
        self.msg: Final[str | None] = msg
        self.expected: Final[tuple[str, ...]] = expected
        self.consumed: Final[bool] = consumed
        self.kind: Final[FailureKind] = kind

    @property
    def found(self) -> str | None:
        """The character at the failure position, if any."""
        return self.src[self.pos] if self.pos < len(self.src) else None

    @property
    def message(self) -> str:
        if self.msg is not None:
            return self.msg
        if self.expected:
            return f"Expected {' or '.join(self.expected)}, found {describe_char(self.found)}."
        return f"Unexpected {describe_char(self.found)}."

    def _replace(self, **changes: Any) -> Failure:
        fields: dict[str, Any] = {
            "msg": self.msg,
            "expected": self.expected,
            "consumed": self.consumed,
            "kind": self.kind,
        }
        fields.update(changes)
        return Failure(self.src, self.pos, **fields)

    def with_consumed(self, consumed: bool) -> Failure:
        """Creates a copy of this failure with the provided `consumed` flag."""
        if consumed == self.consumed:
            return self
        return self._replace(consumed=consumed)

    def with_expected(self, *expected: str) -> Failure:
        """Creates a copy of this failure that only lists the provided expectations."""
        return self._replace(expected=expected, msg=None)

    def merge(self, other: Failure) -> Failure:
        """
        Combines the expectations of two failures that happened at the same position without consuming.

        Otherwise returns `other`, which is the most recent failure.
        """
        if self.consumed or other.consumed or self.pos != other.pos or self.msg is not None or other.msg is not None:
            return other
        expected = self.expected + tuple(e for e in other.expected if e not in self.expected)
        return other._replace(expected=expected)

    def describe(self) -> str:
        """One-line diagnostic."""
        line, column = line_and_column(self.src, self.pos)
        return f"{self.kind.value} error at line {line}, column {column}: {self.message}"

    def error(self) -> ParseError:
        """Converts this to a ParseError."""
        return ParseError(self.src, self.pos, self.message, kind=self.kind)

    def __bool__(self) -> Literal[False]:
        return False

    def __repr__(self) -> str:
        return f"<Failure {self.kind.value} at {self.pos}{' (consumed)' if self.consumed else ''}: {self.message}>"


ParseResult = Success[_T] | Failure


class ParseError(Exception):
    """
    The exception that's raised when a failed parse has to be reported as an error.

    Created by `Failure.error()`.
    """

    def __init__(self, src: str, pos: int, msg: str | None = None, *, kind: FailureKind = FailureKind.SYNTAX) -> None:
        """
        `src`: The string that was being parsed.
        `pos`: The position of the error.
        `msg`: The reason for the error.
        """
        if msg is None:
            super().__init__()
        else:
            super().__init__(msg)
        self.src: str = src
        self.pos: int = pos
        self.kind: FailureKind = kind
        self.append_pos_note(pos)

    def append_pos_note(self, pos: int, msg: str | None = None) -> Self:
        note: list[str] = [] if msg is None else [msg]

        line, column = line_and_column(self.src, pos)
        note.append(f"At position {min(pos, len(self.src))} (line {line}, column {column})")

        lines = self.src.splitlines()
        if len(lines) > line-1:
            line_str = lines[line-1]
            if len(line_str) >= column:
                if column <= 20:
                    note.append(f"{line_str[:40]}\n{' '*(column-1)}^")
                else:
                    note.append(f"{line_str[(column-20):(column+20)]}\n{' '*20}^")
        self.add_note("\n".join(note))
        return self

class EndOfInputError(ParseError):
    """Raised by `Cursor.advance()` when there aren't any characters left."""

    def __init__(self, src: str, pos: int) -> None:
        super().__init__(src, pos, "Unexpected end of input.", kind=FailureKind.END_OF_INPUT)

class RepetitionError(Exception):
    """
    Raised when a parser given to `many()` or `some()` succeeds without consuming anything.

    Such a parser would repeat forever. Passing one is a programming error, not a parse failure.
    """



class Parser(Generic[_T]):
    """
    Wraps a function from a `Cursor` to a `Success` or a `Failure`.

    Parsers are immutable and can be reused across parses.

    ```
    digits = some(one_of("0123456789")).map("".join)
    pair = digits.skip(char(",")).bind(lambda a: digits.map(lambda b: (a, b)))
    parse(pair, "12,34")    # Success(("12", "34"), ...)
    ```

    Operators:
    - `p | q`: `alternative(p, q)`
    - `p >> q`: `p.then(q)`, keeps the value of `q`
    - `p << q`: `p.skip(q)`, keeps the value of `p`
    """
    __slots__ = ("fn", "name")

    def __init__(self, fn: Callable[[Cursor], ParseResult[_T]], name: str | None = None) -> None:
        self.fn: Final[Callable[[Cursor], ParseResult[_T]]] = fn
        self.name: Final[str | None] = name
        """Used in the "expected" part of failure messages."""

    def __call__(self, cursor: Cursor) -> ParseResult[_T]:
        return self.fn(cursor)

    def bind(self, f: Callable[[_T], Parser[_U]]) -> Parser[_U]:
        """Same as `sequence(self, f)`."""
        return sequence(self, f)

    def map(self, f: Callable[[_T], _U]) -> Parser[_U]:
        """Transforms the value of a successful match."""
        def inner(cursor: Cursor) -> ParseResult[_U]:
            r = self(cursor)
            if not r:
                return r
            return Success(f(r.value), r.rest)
        return Parser(inner, self.name)

    def then(self, other: Parser[_U]) -> Parser[_U]:
        """Matches both in sequence, keeps the value of `other`."""
        return sequence(self, lambda _: other)

    def skip(self, other: Parser[Any]) -> Parser[_T]:
        """Matches both in sequence, keeps the value of `self`."""
        return sequence(self, lambda value: other.map(lambda _: value))

    def label(self, name: str) -> Parser[_T]:
        """
        Names the parser. Failures that didn't consume anything and have no custom message will only list `name` as expected.
        """
        def inner(cursor: Cursor) -> ParseResult[_T]:
            r = self(cursor)
            if not r and not r.consumed and r.pos == cursor.pos and r.msg is None:
                return r.with_expected(name)
            return r
        return Parser(inner, name)

    def __or__(self, other: Parser[_U]) -> Parser[_T | _U]:
        return alternative(self, other)

    def __rshift__(self, other: Parser[_U]) -> Parser[_U]:
        return self.then(other)

    def __lshift__(self, other: Parser[Any]) -> Parser[_T]:
        return self.skip(other)

    def __repr__(self) -> str:
        return f"<Parser {self.name}>" if self.name is not None else "<Parser>"



def parse(grammar: Parser[_T], text: str) -> ParseResult[_T]:
    """
    Runs `grammar` against the start of `text`.

    Doesn't require the whole input to be consumed. Use `parse_all()` for that.
    """
    logger.debug("Parsing %d characters with %r", len(text), grammar)
    r = grammar(Cursor(text))
    if not r:
        logger.debug("Parse failed: %s", r.describe())
    return r

def parse_all(grammar: Parser[_T], text: str) -> ParseResult[_T]:
    """Same as `parse()`, but fails with a `TRAILING_INPUT` failure if any input is left over."""
    return parse(grammar << eof(), text)



def match(predicate: Callable[[str], bool], expected: str) -> Parser[str]:
    """
    Matches a single character if `predicate` holds for it.

    `expected` describes the accepted characters in failure messages.
    """
    def inner(cursor: Cursor) -> ParseResult[str]:
        char = cursor.peek()
        if char is None:
            return Failure(cursor.src, cursor.pos, expected=(expected,), kind=FailureKind.END_OF_INPUT)
        if not predicate(char):
            return Failure(cursor.src, cursor.pos, expected=(expected,))
        _, rest = cursor.advance()
        return Success(char, rest)
    return Parser(inner, expected)

def char(value: str) -> Parser[str]:
    """Matches the given character. Case sensitive."""
    if len(value) != 1:
        raise ValueError("Exactly one character required.")
    return match(lambda c: c == value, repr(value))

def one_of(chars: Iterable[str]) -> Parser[str]:
    """Matches any of the given characters."""
    options = frozenset(chars)
    if not options:
        raise ValueError("At least one character required.")
    return match(options.__contains__, "one of " + repr("".join(sorted(options))))

def none_of(chars: Iterable[str]) -> Parser[str]:
    """Matches any character except the given ones."""
    options = frozenset(chars)
    return match(lambda c: c not in options, "none of " + repr("".join(sorted(options))))

def literal(value: str) -> Parser[str]:
    """
    Matches the given string. Case sensitive.

    Commits once the first character matched. Wrap with `attempt()` to backtrack over a partial match.
    """
    if len(value) <= 0:
        raise ValueError("At least one character required.")
    def inner(cursor: Cursor) -> ParseResult[str]:
        current = cursor
        for expected_char in value:
            if current.peek() != expected_char:
                kind = FailureKind.END_OF_INPUT if current.is_eof() else FailureKind.SYNTAX
                return Failure(cursor.src, current.pos, expected=(repr(value),), consumed=current.pos > cursor.pos, kind=kind)
            _, current = current.advance()
        return Success(value, current)
    return Parser(inner, repr(value))

def pure(value: _T) -> Parser[_T]:
    """Always succeeds with `value` without consuming anything."""
    return Parser(lambda cursor: Success(value, cursor))

def fail(msg: str, kind: FailureKind = FailureKind.SEMANTIC) -> Parser[Any]:
    """Always fails with `msg` without consuming anything."""
    return Parser(lambda cursor: Failure(cursor.src, cursor.pos, msg, kind=kind))

def eof() -> Parser[None]:
    """Succeeds with `None` if there aren't any characters left."""
    def inner(cursor: Cursor) -> ParseResult[None]:
        if cursor.is_eof():
            return Success(None, cursor)
        return Failure(cursor.src, cursor.pos, expected=("end of input",), kind=FailureKind.TRAILING_INPUT)
    return Parser(inner, "end of input")



def sequence(parser: Parser[_T], f: Callable[[_T], Parser[_U]]) -> Parser[_U]:
    """
    Runs `parser`, then runs the parser returned by `f(value)` on the rest of the input.

    If `parser` consumed input, a failure of the second parser is reported as consumed.
    """
    def inner(cursor: Cursor) -> ParseResult[_U]:
        r = parser(cursor)
        if not r:
            return r
        r2 = f(r.value)(r.rest)
        if not r2 and r.rest.pos > cursor.pos:
            return r2.with_consumed(True)
        return r2
    return Parser(inner, parser.name)

def alternative(first: Parser[_T], second: Parser[_U]) -> Parser[_T | _U]:
    """
    Runs `first`. If it fails without consuming anything, runs `second` from the same position.

    A failure of `first` after it consumed input is returned as-is. `second` isn't tried.
    """
    def inner(cursor: Cursor) -> ParseResult[_T | _U]:
        r = first(cursor)
        if r or r.consumed:
            return r
        r2 = second(cursor)
        if r2:
            return r2
        return r.merge(r2)
    name = None if first.name is None or second.name is None else f"{first.name} or {second.name}"
    return Parser(inner, name)

def choice(*parsers: Parser[Any]) -> Parser[Any]:
    """
    Attempts the parsers in order with `alternative()` semantics.
    """
    if len(parsers) < 2:
        raise ValueError("At least two parsers required.")
    result = parsers[0]
    for parser in parsers[1:]:
        result = alternative(result, parser)
    return result

def attempt(parser: Parser[_T]) -> Parser[_T]:
    """
    Runs `parser`. If it fails, reports the failure as if no input was consumed.

    Allows `alternative()` to backtrack over a partial match.
    """
    def inner(cursor: Cursor) -> ParseResult[_T]:
        r = parser(cursor)
        if r:
            return r
        return r.with_consumed(False)
    return Parser(inner, parser.name)

def lookahead(parser: Parser[_T]) -> Parser[_T]:
    """
    Matches without advancing.

    Failures are passed through unchanged.
    """
    def inner(cursor: Cursor) -> ParseResult[_T]:
        r = parser(cursor)
        if not r:
            return r
        return Success(r.value, cursor)
    return Parser(inner, parser.name)

def optional(parser: Parser[_T], default: _U = None) -> Parser[_T | _U]:
    """
    Never fails. Returns `default` if `parser` fails, backtracking over any partial match.
    """
    def inner(cursor: Cursor) -> ParseResult[_T | _U]:
        r = parser(cursor)
        if r:
            return r
        return Success(default, cursor)
    return Parser(inner, parser.name)



def _repeat(parser: Parser[_T], cursor: Cursor, values: list[_T]) -> ParseResult[list[_T]]:
    while True:
        r = parser(cursor)
        if not r:
            if r.consumed:
                return r
            return Success(values, cursor)
        if r.rest.pos <= cursor.pos:
            raise RepetitionError(f"{parser!r} succeeded without consuming input at position {cursor.pos}.")
        values.append(r.value)
        cursor = r.rest

def many(parser: Parser[_T]) -> Parser[list[_T]]:
    """
    Repeatedly matches `parser` until it fails without consuming anything. Collects the values.

    A failure after consuming input is propagated.

    `parser` must consume at least one character whenever it succeeds. Otherwise `RepetitionError` is raised.
    """
    return Parser(lambda cursor: _repeat(parser, cursor, []), parser.name)

def some(parser: Parser[_T]) -> Parser[list[_T]]:
    """
    Same as `many()`, but fails if there isn't at least one match.
    """
    def inner(cursor: Cursor) -> ParseResult[list[_T]]:
        first = parser(cursor)
        if not first:
            return first
        if first.rest.pos <= cursor.pos:
            raise RepetitionError(f"{parser!r} succeeded without consuming input at position {cursor.pos}.")
        return _repeat(parser, first.rest, [first.value])
    return Parser(inner, parser.name)

def skip_many(parser: Parser[Any]) -> Parser[None]:
    """Same as `many()`, but discards the values."""
    return many(parser).map(lambda _: None)

def sep_by1(parser: Parser[_T], separator: Parser[Any]) -> Parser[list[_T]]:
    """
    One or more `parser` matches separated by `separator`. Collects the values of `parser`.

    A separator that isn't followed by a match is an error.
    """
    return parser.bind(lambda first: many(separator >> parser).map(lambda others: [first, *others]))

def between(open: Parser[Any], close: Parser[Any], parser: Parser[_T]) -> Parser[_T]:
    """Matches `open`, `parser` and `close` in sequence. Keeps the value of `parser`."""
    return open >> parser << close
