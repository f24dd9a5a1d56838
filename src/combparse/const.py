"""
General use constants.
"""

from __future__ import annotations
from typing import Final

NEWLINE: Final[str] = "\n"
BLANKS: Final[frozenset[str]] = frozenset({" ", "\n"})
COMMENT_MARKERS: Final[frozenset[str]] = frozenset({";", "#"})
DECIMAL: Final[frozenset[str]] = frozenset({"0", "1", "2", "3", "4", "5", "6", "7", "8", "9"})
ALPHABETIC: Final[frozenset[str]] = frozenset({"a", "b", "c", "d", "e", "f", "g", "h", "i", "j", "k", "l", "m", "n", "o", "p", "q", "r", "s", "t", "u", "v", "w", "x", "y", "z", "A", "B", "C", "D", "E", "F", "G", "H", "I", "J", "K", "L", "M", "N", "O", "P", "Q", "R", "S", "T", "U", "V", "W", "X", "Y", "Z"})
EXPONENT_MARKERS: Final[frozenset[str]] = frozenset({"e", "E"})
SIGNS: Final[frozenset[str]] = frozenset({"+", "-"})
