"""
A parser combinator library.

Parsers are immutable values built from smaller parsers. Parsing never mutates anything, every match returns a new `Cursor`.

See the `combparse.general` module for general purpose parsers, and `combparse.grammars` for complete grammars you can use as examples.

Defining parsers:
```
pair = digit.bind(lambda a: char(",") >> digit.map(lambda b: (a, b)))
word = some(letter).map("".join)
token = pair | word
```

Using parsers:
```
result = parse_all(token, "1,2")
if result:
    ... # `result` is a `Success` object, see `result.value`
else:
    ... # `result` is a `Failure` object
    raise result.error()
```

Alternatives only backtrack when the failed branch didn't consume any input. Use `attempt()` to backtrack over a partial match.
"""

import combparse.const as const
import combparse.main
from combparse.main import (
    Cursor,
    FailureKind,
    Success,
    Failure,
    ParseResult,
    ParseError,
    EndOfInputError,
    RepetitionError,
    Parser,
    parse,
    parse_all,
    match,
    char,
    one_of,
    none_of,
    literal,
    pure,
    fail,
    eof,
    sequence,
    alternative,
    choice,
    attempt,
    lookahead,
    optional,
    many,
    some,
    skip_many,
    sep_by1,
    between,
)
import combparse.general as general
from combparse.general import (
    digit,
    letter,
    decimal_integer,
    float_number,
    skip_whitespace,
    comment,
    skip_comments,
    skip_trivia,
    skip_eol,
)
import combparse.grammars as grammars
from combparse.grammars.numeric import fraction, signed_integer, number_or_fraction
from combparse.grammars.semver import NumberOrString, SemVer, compare_release, semver, parse_semver
from combparse.grammars.ini import Header, Section, Config, header, assignment, section, document, parse_ini
