"""Render scan events and the final verdict as text or JSON lines."""

from __future__ import annotations

import json
from collections.abc import Callable

from asnlex.errors import ErrorKind, ScanError, describe
from asnlex.lexer import Event
from asnlex.tokens import Token, TokenType

FORMATS = ("text", "json")


def render_token(tok: Token) -> str:
    """Render a token in the reference text format."""
    if tok.type is TokenType.RESERVED_WORD:
        return f'RESERVED_WORD("{tok.lexeme}")'
    if tok.type is TokenType.NUMBER:
        return f"TOKEN: NUMBER({tok.lexeme})"
    return f'TOKEN: {tok.type.name}("{tok.lexeme}")'


def render_error(err: ScanError) -> str:
    if err.category is ErrorKind.INVALID_CHARACTER:
        return f"Error: {describe(err.category)} '{err.text}' at index {err.index}"
    return f"Error: {describe(err.category)} at index {err.index}: {describe(err.kind)}"


def render_event(event: Event) -> str:
    if isinstance(event, Token):
        return render_token(event)
    return render_error(event)


def render_verdict(success: bool) -> str:
    """The verdict is preceded by a blank line."""
    return "\nSUCCESS" if success else "\nFAIL"


def event_to_dict(event: Event) -> dict[str, object]:
    if isinstance(event, Token):
        return {
            "event": "token",
            "kind": event.type.name,
            "lexeme": event.lexeme,
            "line": event.position.line,
            "index": event.position.index,
        }
    return {
        "event": "error",
        "kind": event.kind.name,
        "category": event.category.name,
        "text": event.text,
        "line": event.position.line,
        "index": event.position.index,
        "message": event.message,
    }


def render_event_json(event: Event) -> str:
    return json.dumps(event_to_dict(event), ensure_ascii=False)


def render_verdict_json(success: bool) -> str:
    return json.dumps({"event": "verdict", "success": success})


def renderers(fmt: str) -> tuple[Callable[[Event], str], Callable[[bool], str]]:
    """Return the (event, verdict) render functions for an output format."""
    if fmt == "json":
        return render_event_json, render_verdict_json
    if fmt == "text":
        return render_event, render_verdict
    raise ValueError(f"unknown output format: {fmt}")
