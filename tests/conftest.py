"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from asnlex.errors import ScanError
from asnlex.lexer import Event, scan_line
from asnlex.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that scans one line and returns its events as a list."""

    def _lex(line: str) -> list[Event]:
        return list(scan_line(line))

    return _lex


def tokens_only(events: list[Event]) -> list[Token]:
    return [e for e in events if isinstance(e, Token)]


def errors_only(events: list[Event]) -> list[ScanError]:
    return [e for e in events if isinstance(e, ScanError)]


def assert_types(events: list[Event], expected: list[TokenType]) -> None:
    """Assert that the events are tokens whose types match the expected list."""
    actual = [e.type if isinstance(e, Token) else e for e in events]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_lexemes(events: list[Event], expected: list[str]) -> None:
    """Assert that the token lexemes match the expected list."""
    actual = [e.lexeme for e in tokens_only(events)]
    assert actual == expected, f"Expected {expected}, got {actual}"


def kinds(events: list[Event]) -> list[object]:
    """Token types and error kinds in event order."""
    return [e.type if isinstance(e, Token) else e.kind for e in events]
