"""Command-line interface for asnlex."""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from asnlex.errors import SourceReadError

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_FAIL = 2


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    fmt: str
    quiet: bool
    debug: bool
    verbose: bool


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(EXIT_ERROR, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    from asnlex.render import FORMATS

    p = _ArgumentParser(
        prog="asnlex",
        description="Lexical analyzer for ASN.1-style schema modules",
    )
    p.add_argument("input", help="Input schema file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: text)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover asnlex.toml)",
    )
    p.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=None,
        help="Print only the final verdict",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Dump events with positions to stderr",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "asnlex.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def _config_bool(config: dict[str, Any], key: str) -> bool:
    value = config.get(key, False)
    if not isinstance(value, bool):
        raise argparse.ArgumentTypeError(f"config key '{key}' must be true or false")
    return value


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    from asnlex.render import FORMATS

    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    fmt = config.get("format", "text")
    if fmt not in FORMATS:
        raise argparse.ArgumentTypeError(
            f"config key 'format' must be one of {', '.join(FORMATS)}: {fmt}"
        )
    if args.format is not None:
        fmt = args.format

    quiet = _config_bool(config, "quiet")
    if args.quiet is not None:
        quiet = args.quiet

    debug = _config_bool(config, "debug")
    if args.debug is not None:
        debug = args.debug

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        fmt=fmt,
        quiet=quiet,
        debug=debug,
        verbose=args.verbose,
    )


def lex_file(options: CliOptions, out: TextIO) -> bool:
    """Scan the input file line by line, streaming events and the verdict to *out*.

    Returns the verdict. Raises SourceReadError after writing FAIL if the
    input cannot be opened or read.
    """
    from asnlex.debug import dump_event
    from asnlex.lexer import ScanState, iter_source
    from asnlex.render import renderers

    render_event, render_verdict = renderers(options.fmt)
    filename = str(options.input_file)
    state = ScanState()

    try:
        f = open(options.input_file, encoding="utf-8")
    except OSError as exc:
        state.fail()
        out.write(render_verdict(state.success) + "\n")
        raise SourceReadError(exc.strerror or str(exc), 0, filename) from exc

    with f:
        try:
            for event in iter_source(f, state, filename):
                if options.debug:
                    dump_event(event)
                if not options.quiet:
                    out.write(render_event(event) + "\n")
        except SourceReadError:
            out.write(render_verdict(state.success) + "\n")
            raise

    logger.debug(
        "scanned %d line(s) of %s with %d error(s)",
        state.line_count,
        filename,
        state.error_count,
    )
    out.write(render_verdict(state.success) + "\n")
    return state.success


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit().

    A lexical FAIL verdict exits 2 rather than 0, so callers can tell it from
    SUCCESS without reading the output. Exit 1 covers usage errors, config
    errors and read failures.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(name)s: %(message)s",
        )

    try:
        options = resolve_options(args)
    except (argparse.ArgumentTypeError, tomllib.TOMLDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    try:
        if options.output_file:
            with open(options.output_file, "w", encoding="utf-8") as out:
                success = lex_file(options, out)
        else:
            success = lex_file(options, sys.stdout)
    except SourceReadError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_ERROR
    except OSError as exc:
        print(f"error: cannot write {options.output_file}: {exc}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_SUCCESS if success else EXIT_FAIL


def cli() -> None:
    """Console-script wrapper around main()."""
    raise SystemExit(main())
