"""--debug event dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from asnlex.errors import ScanError
from asnlex.lexer import Event
from asnlex.tokens import Token


def dump_event(event: Event, *, file: TextIO | None = None) -> None:
    """Print one event with its line:index position to *file* (default stderr)."""
    if file is None:
        file = sys.stderr
    if isinstance(event, Token):
        _dump_token(event, file)
    elif isinstance(event, ScanError):
        _dump_error(event, file)


def _dump_token(tok: Token, f: TextIO) -> None:
    pos = tok.position
    f.write(f"{pos.line}:{pos.index}-{tok.end} {tok.type.name} {tok.lexeme!r}\n")


def _dump_error(err: ScanError, f: TextIO) -> None:
    pos = err.position
    f.write(f"{pos.line}:{err.start}-{err.end} ERROR {err.category.name}/{err.kind.name}")
    f.write(f" at {pos.index} skipped {err.text!r}\n")
