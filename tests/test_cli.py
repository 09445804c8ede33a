"""Tests for the CLI module: arg parsing, exit codes, streaming output, end-to-end."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from asnlex.cli import CliOptions, build_parser, lex_file, main
from asnlex.errors import SourceReadError


def _options(path: Path, **overrides) -> CliOptions:
    values = dict(
        input_file=path,
        output_file=None,
        fmt="text",
        quiet=False,
        debug=False,
        verbose=False,
    )
    values.update(overrides)
    return CliOptions(**values)


# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        ns = build_parser().parse_args(["schema.asn"])
        assert ns.input == "schema.asn"
        assert ns.output is None
        assert ns.format is None
        assert ns.quiet is None

    def test_flags(self) -> None:
        ns = build_parser().parse_args(
            ["schema.asn", "-o", "out.txt", "--format", "json", "-q", "--debug", "-v"]
        )
        assert ns.output == "out.txt"
        assert ns.format == "json"
        assert ns.quiet is True
        assert ns.debug is True
        assert ns.verbose is True

    def test_missing_input_exits_1(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1
        assert "usage:" in capsys.readouterr().err

    def test_extra_argument_exits_1(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["a.asn", "b.asn"])
        assert exc_info.value.code == 1

    def test_bad_format_exits_1(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["a.asn", "--format", "xml"])
        assert exc_info.value.code == 1


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "ok.asn"
        doc.write_text("MyType ::= INTEGER\n")
        assert main([str(doc)]) == 0
        out = capsys.readouterr().out
        assert out == (
            'TOKEN: TYPEREFERENCE("MyType")\n'
            'TOKEN: ASSIGNMENT("::=")\n'
            'RESERVED_WORD("INTEGER")\n'
            "\nSUCCESS\n"
        )

    def test_lexical_errors_return_2(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "bad.asn"
        doc.write_text("#bad\n")
        assert main([str(doc)]) == 2
        out = capsys.readouterr().out
        assert out.endswith("\nFAIL\n")
        assert "Error: Invalid token '#' at index 0" in out
        assert 'TOKEN: IDENTIFIER("bad")' in out

    def test_missing_file_returns_1(self, tmp_path: Path, capsys) -> None:
        assert main([str(tmp_path / "nope.asn")]) == 1
        captured = capsys.readouterr()
        assert captured.out == "\nFAIL\n"
        assert "cannot read" in captured.err

    def test_undecodable_file_returns_1(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "binary.asn"
        doc.write_bytes(b"A ::= B\n\xff\xfe\n")
        assert main([str(doc)]) == 1
        captured = capsys.readouterr()
        assert captured.out.endswith("\nFAIL\n")
        assert captured.out.count("FAIL") == 1


# ---------------------------------------------------------------------------
# Output options
# ---------------------------------------------------------------------------


class TestOutput:
    def test_output_file(self, tmp_path: Path) -> None:
        doc = tmp_path / "doc.asn"
        doc.write_text("a(1..10)\n")
        out = tmp_path / "tokens.txt"
        assert main([str(doc), "-o", str(out)]) == 0
        lines = out.read_text().splitlines()
        assert lines[2] == "TOKEN: NUMBER(1)"
        assert lines[-1] == "SUCCESS"

    def test_quiet_prints_only_verdict(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "doc.asn"
        doc.write_text("Foo-\n")
        assert main([str(doc), "--quiet"]) == 2
        assert capsys.readouterr().out == "\nFAIL\n"

    def test_json_format(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "doc.asn"
        doc.write_text("x-- y\n")
        assert main([str(doc), "--format", "json"]) == 2
        records = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert records[0]["kind"] == "CONSECUTIVE_HYPHENS"
        assert records[1]["lexeme"] == "y"
        assert records[-1] == {"event": "verdict", "success": False}

    def test_debug_dump_to_stderr(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "doc.asn"
        doc.write_text("A 007\n")
        main([str(doc), "--debug"])
        err = capsys.readouterr().err
        assert "1:0-1 TYPEREFERENCE 'A'" in err
        assert "ERROR INVALID_NUMBER/LEADING_ZERO" in err

    def test_verbose_logs_summary(self, tmp_path: Path, caplog) -> None:
        doc = tmp_path / "doc.asn"
        doc.write_text("A\n#\n")
        with caplog.at_level("DEBUG", logger="asnlex"):
            main([str(doc), "-v"])
        assert "scanned 2 line(s)" in caplog.text
        assert "1 scan error(s)" in caplog.text


# ---------------------------------------------------------------------------
# lex_file
# ---------------------------------------------------------------------------


class TestLexFile:
    def test_returns_verdict(self, tmp_path: Path) -> None:
        doc = tmp_path / "doc.asn"
        doc.write_text("A ::= B\n")
        out = io.StringIO()
        assert lex_file(_options(doc), out) is True
        assert out.getvalue().endswith("\nSUCCESS\n")

    def test_missing_input_raises(self, tmp_path: Path) -> None:
        out = io.StringIO()
        with pytest.raises(SourceReadError):
            lex_file(_options(tmp_path / "missing.asn"), out)
        assert out.getvalue() == "\nFAIL\n"

    def test_streams_events_before_read_failure(self, tmp_path: Path) -> None:
        doc = tmp_path / "doc.asn"
        # enough valid lines that the decoder reaches the bad byte on a later chunk
        doc.write_bytes(b"A B\n" * 4000 + b"\xff\n")
        out = io.StringIO()
        with pytest.raises(SourceReadError):
            lex_file(_options(doc), out)
        text = out.getvalue()
        assert text.startswith('TOKEN: TYPEREFERENCE("A")\nTOKEN: TYPEREFERENCE("B")\n')
        assert text.endswith("\nFAIL\n")
        assert text.count("FAIL") == 1
