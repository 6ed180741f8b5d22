from __future__ import annotations

import argparse
import sys
import traceback
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from prompt_toolkit import print_formatted_text

from .diagnostics import report
from .errors import ErrorRecovery, ParseError
from .formatter import format_program
from .highlight import highlight_text
from .parser_rd import parse_source
from .resolved_ast import Program
from .resolver import resolve
from .tree import dump
from .utils import COLOR_MODES, color_flag, debug_py_trace_enabled, stream_color


def resolve_source(src: str) -> Tuple[Program, List[ErrorRecovery]]:
    """Parse and resolve ``src``.  Terminal parse errors propagate."""
    raw, errors = parse_source(src)
    return resolve(raw), errors


def format_source(src: str, color: Optional[bool] = False) -> Tuple[str, List[ErrorRecovery]]:
    """Canonical text for ``src`` plus the errors the parser recovered from."""
    program, errors = resolve_source(src)
    return format_program(program, color), errors


def print_report(error: ParseError, src: str, color: Optional[bool] = None) -> None:
    print(report(error, src, stream_color(sys.stderr, color)), file=sys.stderr)


def _load_source(arg: str) -> str:
    """
    Resolve CLI input into source text.
    - "-" => read stdin.
    - Otherwise read the file at that path.
    """
    if arg == "-":
        return sys.stdin.read()

    return Path(arg).read_text(encoding="utf-8")


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="wryneck",
        description="Print Wryneck source in its canonical form.",
    )
    ap.add_argument("input", help="source file, or - for stdin")
    ap.add_argument("-a", "--ast", action="store_true", help="print the resolved tree instead")
    ap.add_argument(
        "--color",
        choices=COLOR_MODES,
        default="auto",
        help="color error markers and diagnostics (default: auto)",
    )
    ap.add_argument(
        "--highlight",
        action="store_true",
        help="syntax-highlight the formatted output",
    )
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    color = color_flag(args.color)

    try:
        source = _load_source(args.input)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    try:
        program, errors = resolve_source(source)
    except ParseError as exc:
        print_report(exc, source, color)
        return 1
    except Exception as exc:
        if debug_py_trace_enabled():
            traceback.print_exc()
        else:
            print(f"Unexpected error: {exc}", file=sys.stderr)
        return 1

    for recovery in errors:
        print_report(recovery.error, source, color)

    out_color = stream_color(sys.stdout, color)
    if args.ast:
        print(dump(program), end="")
    elif args.highlight and sys.stdout.isatty():
        print_formatted_text(highlight_text(format_program(program, False)), end="", file=sys.stdout)
    else:
        print(format_program(program, out_color), end="")

    return 0


if __name__ == "__main__":
    sys.exit(main())
