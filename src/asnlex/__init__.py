"""Lexical analyzer for ASN.1-style schema modules."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from asnlex.lexer import ScanResult

__version__ = "0.1.0"


def scan(source: str, filename: str = "input.asn") -> ScanResult:
    """Scan ASN.1-style source text and return its events and verdict."""
    from asnlex.lexer import scan_text

    return scan_text(source, filename)
