"""
INI style configuration documents.

```
[section]
host=wikipedia.org
alias=claw

; comments start with `;` or `#`
[whatisit]
red=intoothandclaw
```

Names and headers are runs of ASCII letters. Values run to the end of the line.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from collections.abc import Iterator, Iterable, Mapping

import logging

import combparse.const as const
from combparse.main import (
    Parser,
    char,
    none_of,
    some,
    attempt,
    lookahead,
    between,
    parse_all,
)
from combparse.general import letter, skip_eol, skip_trivia


logger = logging.getLogger(__name__)

Name = str
Val = str
Assignments = dict[Name, Val]


@dataclass(frozen=True, order=True)
class Header:
    name: str

@dataclass(frozen=True)
class Section:
    header: Header
    assignments: Assignments = field(default_factory=dict)

    # holds a dict
    __hash__ = None  # type: ignore[assignment]

@dataclass(frozen=True)
class Config(Mapping[Header, Assignments]):
    """
    Maps headers to their assignments.

    Sections can be looked up by `Header` or by name:
    ```
    config["section"]["host"]
    config[Header("section")]["host"]
    ```
    """
    sections: dict[Header, Assignments] = field(default_factory=dict)

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def from_sections(cls, sections: Iterable[Section]) -> Config:
        """Later sections replace earlier ones with the same header."""
        rolled_up: dict[Header, Assignments] = {}
        for section in sections:
            rolled_up[section.header] = section.assignments
        return cls(rolled_up)

    @staticmethod
    def _key(key: Header | str) -> Header:
        return key if isinstance(key, Header) else Header(key)

    def __getitem__(self, key: Header | str) -> Assignments:
        return self.sections[self._key(key)]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (Header, str)):
            return False
        return self._key(key) in self.sections

    def __iter__(self) -> Iterator[Header]:
        return iter(self.sections)

    def __len__(self) -> int:
        return len(self.sections)



def _joined(parser: Parser[list[str]]) -> Parser[str]:
    return parser.map("".join)

name: Parser[Name] = _joined(some(letter)).label("name")

header: Parser[Header] = between(char("["), char("]"), name).map(Header).label("section header")

assignment: Parser[tuple[Name, Val]] = name.bind(
    lambda key: char("=") >> _joined(some(none_of(const.NEWLINE))).map(lambda value: (key, value))
) << skip_eol
"""`name=value`, then any newlines."""

_trivia: Parser[None] = skip_trivia()

section: Parser[Section] = (
    attempt(_trivia >> lookahead(char("[")))
    >> header.bind(
        lambda h: skip_eol >> some(assignment).map(lambda pairs: Section(h, dict(pairs)))
    )
)
"""
Blank lines and comment lines, a header, then at least one assignment.

The blank and comment lines only count as part of the section if a header follows them.
"""

document: Parser[Config] = (some(section) << _trivia).map(Config.from_sections)
"""One or more sections. Doesn't check for the end of the input. See `parse_ini()`."""


def parse_ini(text: str) -> Config:
    """
    Parses a complete document.

    Raises `ParseError` if the document isn't valid.
    """
    r = parse_all(document, text)
    if not r:
        raise r.error()
    logger.debug("Parsed %d sections", len(r.value))
    return r.value
