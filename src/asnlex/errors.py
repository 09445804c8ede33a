"""Scan error events and the fatal read-failure exception."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from asnlex.tokens import Position


class ErrorKind(Enum):
    # Categories: which kind of token was being read
    INVALID_CHARACTER = auto()
    INVALID_TYPE_REFERENCE = auto()
    INVALID_IDENTIFIER = auto()
    INVALID_NUMBER = auto()

    # Specific defects inside a malformed token
    CONSECUTIVE_HYPHENS = auto()
    TRAILING_HYPHEN = auto()
    LEADING_ZERO = auto()


_DESCRIPTIONS = {
    ErrorKind.INVALID_CHARACTER: "Invalid token",
    ErrorKind.INVALID_TYPE_REFERENCE: "Invalid type reference",
    ErrorKind.INVALID_IDENTIFIER: "Invalid identifier",
    ErrorKind.INVALID_NUMBER: "Invalid number",
    ErrorKind.CONSECUTIVE_HYPHENS: "consecutive hyphens",
    ErrorKind.TRAILING_HYPHEN: "trailing hyphen",
    ErrorKind.LEADING_ZERO: "leading zero",
}


def describe(kind: ErrorKind) -> str:
    """Return the human-readable description of an error kind."""
    return _DESCRIPTIONS[kind]


@dataclass(frozen=True, slots=True)
class ScanError:
    """A recovered lexical error, emitted in the event stream beside tokens.

    ``position`` points at the offending character, ``start`` at the first
    character of the discarded region and ``text`` holds that region.
    """

    kind: ErrorKind
    category: ErrorKind
    position: Position
    start: int
    text: str
    source_line: str = ""

    @property
    def index(self) -> int:
        return self.position.index

    @property
    def end(self) -> int:
        """Index one past the last discarded character."""
        return self.start + len(self.text)

    @property
    def message(self) -> str:
        if self.category is ErrorKind.INVALID_CHARACTER:
            return f"{describe(self.category)} '{self.text}'"
        return f"{describe(self.category)} '{self.text}': {describe(self.kind)}"

    def format(self, filename: str = "input.asn") -> str:
        line_no = self.position.line
        col = self.position.index + 1
        source_line = self.source_line.rstrip("\r\n")

        # Underline from the offending character to the end of the discarded text
        underline_len = max(1, self.end - self.position.index)

        pad = " " * self.position.index
        carets = "^" * underline_len

        line_num = str(line_no)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{line_no}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )


class SourceReadError(Exception):
    """Raised when the line source fails; aborts the whole run."""

    def __init__(self, message: str, line_number: int, filename: str = "input.asn") -> None:
        self.message = message
        self.line_number = line_number
        self.filename = filename
        super().__init__(self.format())

    def format(self) -> str:
        return f"error: cannot read {self.filename} after line {self.line_number}: {self.message}"
