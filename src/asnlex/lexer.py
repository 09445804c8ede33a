"""asnlex scanner: converts source lines into a stream of tokens and scan errors."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

from asnlex.errors import ErrorKind, ScanError, SourceReadError
from asnlex.tokens import (
    ASSIGNMENT,
    PUNCTUATION,
    RANGE_SEPARATOR,
    RESERVED_WORDS,
    Position,
    Token,
    TokenType,
    is_digit,
    is_lower,
    is_name_char,
    is_upper,
)

logger = logging.getLogger(__name__)

Event = Token | ScanError


class NameKind(Enum):
    """The two name variants. They share one grammar and differ in the first letter."""

    TYPE_REFERENCE = (TokenType.TYPEREFERENCE, ErrorKind.INVALID_TYPE_REFERENCE)
    IDENTIFIER = (TokenType.IDENTIFIER, ErrorKind.INVALID_IDENTIFIER)

    def __init__(self, token_type: TokenType, category: ErrorKind) -> None:
        self.token_type = token_type
        self.category = category

    def accepts(self, ch: str) -> bool:
        """Return True if ch may start a name of this kind."""
        if self is NameKind.TYPE_REFERENCE:
            return is_upper(ch)
        return is_lower(ch)

    @classmethod
    def for_char(cls, ch: str) -> NameKind | None:
        for kind in cls:
            if kind.accepts(ch):
                return kind
        return None


@dataclass(frozen=True, slots=True)
class ReadFailure:
    """Why a reader rejected a lexeme, and where."""

    kind: ErrorKind
    index: int


ReadResult = tuple[str | ReadFailure, int]


# ------------------------------------------------------------------
# Compound operators
# ------------------------------------------------------------------


def is_assignment(line: str, i: int) -> bool:
    """Return True if ``::=`` starts at index i."""
    return i + 2 < len(line) and line[i : i + 3] == ASSIGNMENT


def is_range_separator(line: str, i: int) -> bool:
    """Return True if ``..`` starts at index i."""
    return i + 1 < len(line) and line[i : i + 2] == RANGE_SEPARATOR


# ------------------------------------------------------------------
# Readers
# ------------------------------------------------------------------


def read_name(line: str, start: int, kind: NameKind) -> ReadResult:
    """Read a type reference or identifier starting at ``start``.

    The first character must already satisfy ``kind``. Letters and digits
    continue the name, as does a single hyphen; any other character ends
    it and is left for the caller. Returns the lexeme (or a ReadFailure)
    and the index where reading stopped.
    """
    if not kind.accepts(line[start]):
        raise ValueError(f"{line[start]!r} cannot start a {kind.name.lower()}")

    pos = start + 1
    prev_hyphen = False
    while pos < len(line):
        ch = line[pos]
        if is_name_char(ch):
            prev_hyphen = False
        elif ch == "-":
            if prev_hyphen:
                return ReadFailure(ErrorKind.CONSECUTIVE_HYPHENS, pos), pos
            prev_hyphen = True
        else:
            break
        pos += 1

    if line[pos - 1] == "-":
        return ReadFailure(ErrorKind.TRAILING_HYPHEN, pos - 1), pos
    return line[start:pos], pos


def read_type_reference(line: str, start: int) -> ReadResult:
    return read_name(line, start, NameKind.TYPE_REFERENCE)


def read_identifier(line: str, start: int) -> ReadResult:
    return read_name(line, start, NameKind.IDENTIFIER)


def read_number(line: str, start: int) -> ReadResult:
    """Read an unsigned integer. Multi-digit numbers may not start with 0."""
    if not is_digit(line[start]):
        raise ValueError(f"{line[start]!r} cannot start a number")

    pos = start
    while pos < len(line) and is_digit(line[pos]):
        pos += 1

    if line[start] == "0" and pos - start > 1:
        return ReadFailure(ErrorKind.LEADING_ZERO, start), pos
    return line[start:pos], pos


def skip_to_whitespace(line: str, i: int) -> int:
    """Return the index of the next whitespace character at or after i, or len(line)."""
    while i < len(line) and not line[i].isspace():
        i += 1
    return i


# ------------------------------------------------------------------
# Line scanner
# ------------------------------------------------------------------


class LineScanner:
    """Scan one line into tokens and scan errors."""

    def __init__(self, line: str, line_number: int = 1) -> None:
        self._line = line
        self._line_number = line_number
        self._pos = 0

    def scan(self) -> Iterator[Event]:
        """Yield one event per dispatch step until the line is consumed."""
        line = self._line
        while self._pos < len(line):
            ch = line[self._pos]

            if ch.isspace():
                self._pos += 1
                continue

            if is_assignment(line, self._pos):
                yield self._token(TokenType.ASSIGNMENT, ASSIGNMENT)
                continue

            if is_range_separator(line, self._pos):
                yield self._token(TokenType.RANGE_SEPARATOR, RANGE_SEPARATOR)
                continue

            kind = NameKind.for_char(ch)
            if kind is not None:
                yield self._scan_name(kind)
                continue

            if is_digit(ch):
                yield self._scan_number()
                continue

            tt = PUNCTUATION.get(ch)
            if tt is not None:
                yield self._token(tt, ch)
                continue

            # Unrecognised character: report it and skip exactly one
            yield self._error(
                ErrorKind.INVALID_CHARACTER, ErrorKind.INVALID_CHARACTER, self._pos, self._pos + 1
            )

    def _scan_name(self, kind: NameKind) -> Event:
        result, _ = read_name(self._line, self._pos, kind)
        if isinstance(result, ReadFailure):
            return self._recover(result, kind.category)
        if kind is NameKind.TYPE_REFERENCE and result in RESERVED_WORDS:
            return self._token(TokenType.RESERVED_WORD, result)
        return self._token(kind.token_type, result)

    def _scan_number(self) -> Event:
        result, _ = read_number(self._line, self._pos)
        if isinstance(result, ReadFailure):
            return self._recover(result, ErrorKind.INVALID_NUMBER)
        return self._token(TokenType.NUMBER, result)

    def _recover(self, failure: ReadFailure, category: ErrorKind) -> ScanError:
        # The whole malformed run up to the next whitespace is discarded
        end = skip_to_whitespace(self._line, self._pos)
        return self._error(failure.kind, category, failure.index, end)

    def _token(self, tt: TokenType, lexeme: str) -> Token:
        tok = Token(tt, lexeme, Position(self._line_number, self._pos))
        self._pos += len(lexeme)
        return tok

    def _error(self, kind: ErrorKind, category: ErrorKind, index: int, end: int) -> ScanError:
        err = ScanError(
            kind=kind,
            category=category,
            position=Position(self._line_number, index),
            start=self._pos,
            text=self._line[self._pos : end],
            source_line=self._line,
        )
        self._pos = end
        return err


def scan_line(line: str, line_number: int = 1) -> Iterator[Event]:
    """Lazily scan a single line into tokens and scan errors."""
    return LineScanner(line.rstrip("\r\n"), line_number).scan()


# ------------------------------------------------------------------
# Whole-source driver
# ------------------------------------------------------------------


class ScanState:
    """Run-wide verdict accumulator. Once failed, it stays failed."""

    __slots__ = ("_failed", "error_count", "line_count")

    def __init__(self) -> None:
        self._failed = False
        self.error_count = 0
        self.line_count = 0

    @property
    def success(self) -> bool:
        return not self._failed

    def fail(self) -> None:
        self._failed = True

    def record(self, event: Event) -> None:
        if isinstance(event, ScanError):
            self.error_count += 1
            self.fail()


@dataclass(frozen=True, slots=True)
class ScanResult:
    """All events of a completed run and its verdict."""

    events: tuple[Event, ...]
    success: bool

    @property
    def tokens(self) -> list[Token]:
        return [e for e in self.events if isinstance(e, Token)]

    @property
    def errors(self) -> list[ScanError]:
        return [e for e in self.events if isinstance(e, ScanError)]


def iter_source(
    lines: Iterable[str], state: ScanState, filename: str = "input.asn"
) -> Iterator[Event]:
    """Scan each line in order, recording every event in ``state``.

    A read failure from ``lines`` marks the state failed and is re-raised
    as SourceReadError; lexical errors never stop the scan.
    """
    it = iter(lines)
    while True:
        try:
            line = next(it)
        except StopIteration:
            return
        except (OSError, UnicodeDecodeError) as exc:
            state.fail()
            logger.debug("read failure in %s after line %d", filename, state.line_count)
            raise SourceReadError(str(exc), state.line_count, filename) from exc

        state.line_count += 1
        errors_before = state.error_count
        for event in scan_line(line, state.line_count):
            state.record(event)
            yield event
        if state.error_count > errors_before:
            logger.debug(
                "%s:%d: %d scan error(s)",
                filename,
                state.line_count,
                state.error_count - errors_before,
            )


def scan_source(lines: Iterable[str], filename: str = "input.asn") -> ScanResult:
    """Scan every line of a source and return the events with the verdict."""
    state = ScanState()
    events = tuple(iter_source(lines, state, filename))
    return ScanResult(events, state.success)


def scan_text(source: str, filename: str = "input.asn") -> ScanResult:
    """Scan a whole source string, one line at a time.

    Lines break only at LF, CR and CRLF, exactly as when reading a file.
    """
    return scan_source(io.StringIO(source, newline=None), filename)
