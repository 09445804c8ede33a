"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType


class TokenType(Enum):
    # Compound operators
    ASSIGNMENT = auto()  # ::=
    RANGE_SEPARATOR = auto()  # ..

    # Names and literals
    TYPEREFERENCE = auto()  # Upper-led name
    IDENTIFIER = auto()  # lower-led name
    NUMBER = auto()  # unsigned integer
    RESERVED_WORD = auto()  # type reference found in RESERVED_WORDS

    # Single-character punctuation
    LCURLY = auto()  # {
    RCURLY = auto()  # }
    COMMA = auto()  # ,
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    BAR = auto()  # |


@dataclass(frozen=True, slots=True)
class Position:
    """Source position: 1-based line number, 0-based index within the line."""

    line: int
    index: int


@dataclass(frozen=True, slots=True)
class Token:
    """A single scanned token with its exact source text."""

    type: TokenType
    lexeme: str
    position: Position

    @property
    def end(self) -> int:
        """Index one past the last character of the lexeme."""
        return self.position.index + len(self.lexeme)


RESERVED_WORDS = frozenset({"TAGS", "BEGIN", "SEQUENCE", "INTEGER", "DATE", "END"})

PUNCTUATION = MappingProxyType(
    {
        "{": TokenType.LCURLY,
        "}": TokenType.RCURLY,
        ",": TokenType.COMMA,
        "(": TokenType.LPAREN,
        ")": TokenType.RPAREN,
        "|": TokenType.BAR,
    }
)

ASSIGNMENT = "::="
RANGE_SEPARATOR = ".."


def is_upper(ch: str) -> bool:
    """Return True if ch is an uppercase ASCII letter."""
    return "A" <= ch <= "Z"


def is_lower(ch: str) -> bool:
    """Return True if ch is a lowercase ASCII letter."""
    return "a" <= ch <= "z"


def is_digit(ch: str) -> bool:
    """Return True if ch is an ASCII digit."""
    return "0" <= ch <= "9"


def is_name_char(ch: str) -> bool:
    """Return True if ch may continue a name (hyphens are handled separately)."""
    return is_upper(ch) or is_lower(ch) or is_digit(ch)
