"""Run にほんご scripts from the command line."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Final, Sequence

from .errors import NihongoError
from .evaluator import run
from .values import format_value

_DEFAULT_LOG_LEVEL: Final[str] = os.environ.get("NIHONGO_LOG_LEVEL", "WARNING").upper()


def _read_script(args: argparse.Namespace) -> str:
    if args.command is not None:
        return args.command
    if args.script is None or args.script == "-":
        return sys.stdin.read()
    return Path(args.script).read_text(encoding="utf-8")


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="nihongo", description=__doc__)
    parser.add_argument(
        "script",
        nargs="?",
        help="script file to run ('-' or omitted reads stdin)",
    )
    parser.add_argument(
        "-c",
        "--command",
        help="run the given script text instead of a file",
    )
    parser.add_argument(
        "--print-result",
        action="store_true",
        help="print the value of the last statement after the run",
    )
    parser.add_argument(
        "--log-level",
        default=_DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level for interpreter tracing",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level, logging.WARNING), format="%(levelname)s %(name)s: %(message)s")

    try:
        script = _read_script(args)
    except OSError as exc:
        print(f"cannot read {args.script}: {exc}", file=sys.stderr)
        return 2

    try:
        result = run(script)
    except NihongoError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if args.print_result:
        print(format_value(result))
    return 0
