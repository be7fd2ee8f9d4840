"""Command-line interface for minicalc."""

from __future__ import annotations

import argparse
import io
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from minicalc.errors import EvalError, ScriptError


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_files: list[Path]
    output_file: Path | None
    tokens: bool
    table: bool
    trace: bool
    fresh: bool
    keep_comments: bool
    stop_on_error: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="minicalc",
        description="Tokenize and run minicalc programs",
    )
    p.add_argument("inputs", nargs="+", metavar="FILE", help="Program file(s), run in order")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--tokens",
        action="store_true",
        help="List tokens (KIND<TAB>lexeme) instead of running",
    )
    p.add_argument("--table", action="store_true", help="Dump the compiled DFA table to stderr")
    p.add_argument(
        "--trace",
        action="store_true",
        default=None,
        help="Trace prints, conditions, and assignments to stderr",
    )
    p.add_argument(
        "--fresh",
        action="store_true",
        default=None,
        help="Start every file from an empty environment",
    )
    p.add_argument(
        "--keep-comments",
        action="store_true",
        default=None,
        help="Include COMMENT tokens in --tokens output",
    )
    p.add_argument(
        "--stop-on-error",
        action="store_true",
        default=None,
        help="Stop listing tokens at the first lexical error",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover minicalc.toml)",
    )
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "minicalc.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def _flag(cli_value: bool | None, section: Any, key: str) -> bool:
    """CLI flag if given, else a boolean from a config section, else False."""
    if cli_value is not None:
        return cli_value
    if isinstance(section, dict) and isinstance(section.get(key), bool):
        return section[key]
    return False


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_files = [Path(p) for p in args.inputs]
    input_dir = input_files[0].parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)
    run_cfg = config.get("run")
    scanner_cfg = config.get("scanner")

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_files=input_files,
        output_file=output_file,
        tokens=args.tokens,
        table=args.table,
        trace=_flag(args.trace, run_cfg, "trace"),
        fresh=_flag(args.fresh, run_cfg, "fresh"),
        keep_comments=_flag(args.keep_comments, scanner_cfg, "keep_comments"),
        stop_on_error=_flag(args.stop_on_error, scanner_cfg, "stop_on_error"),
    )


def list_tokens(options: CliOptions) -> str:
    """Tokenize every input file and return the KIND<TAB>lexeme listing."""
    from minicalc.debug import dump_tokens
    from minicalc.scanner import Scanner

    out = io.StringIO()
    for path in options.input_files:
        scanner = Scanner(path.read_text(encoding="utf-8"), stop_on_error=options.stop_on_error)
        tokens = []
        while scanner.has_next_token():
            tokens.append(scanner.next_token())
        dump_tokens(tokens, file=out, keep_comments=options.keep_comments)
    return out.getvalue()


def run_files(options: CliOptions) -> tuple[str, list[tuple[Path, str, ScriptError]]]:
    """Run every input file in one session; return printed output and located errors."""
    from minicalc.debug import TraceSink
    from minicalc.interpreter import Interpreter

    sink = TraceSink(file=sys.stderr) if options.trace else None
    interpreter = Interpreter(sink=sink)
    failures: list[tuple[Path, str, ScriptError]] = []

    for path in options.input_files:
        source = path.read_text(encoding="utf-8")
        seen = len(interpreter.errors)
        interpreter.compile(source, keep_bindings=not options.fresh)
        failures.extend((path, source, err) for err in interpreter.errors[seen:])

    return interpreter.output, failures


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config: {exc}", file=sys.stderr)
        return 2

    if options.table:
        from minicalc.debug import dump_table
        from minicalc.lexicon import get_table

        dump_table(get_table(), file=sys.stderr)

    try:
        if options.tokens:
            text = list_tokens(options)
            failures = []
        else:
            text, failures = run_files(options)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    for path, source, err in failures:
        print(err.format(source, str(path)), file=sys.stderr)

    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)

    if any(not isinstance(err, EvalError) for _, _, err in failures):
        return 1
    if failures:
        return 2
    return 0
