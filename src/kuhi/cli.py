"""Run kuhi expressions from the command line or standard input."""

from __future__ import annotations

import argparse
import logging
import sys

from .errors import KuhiError, KuhiSyntaxError
from .evaluator import Session
from .formatter import format_source
from .parser import parse
from .render import render_stack

logger = logging.getLogger(__name__)


def _report(err: KuhiError) -> None:
    label = "syntax error" if isinstance(err, KuhiSyntaxError) else "runtime error"
    print(f"{label}: {err}", file=sys.stderr)
    if err.note:
        print(f"  note: {err.note}", file=sys.stderr)


def _lines(args: argparse.Namespace):
    if args.expression:
        yield from args.expression
        return
    for line in sys.stdin:
        yield line.rstrip("\n")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="kuhi", description=__doc__)
    parser.add_argument(
        "-e",
        "--expression",
        action="append",
        help="expression to run; repeat for several lines (default: read lines from stdin)",
    )
    parser.add_argument(
        "--no-format",
        action="store_true",
        help="run the input as written instead of rewriting ASCII mnemonics to glyphs",
    )
    parser.add_argument(
        "--tokens",
        action="store_true",
        help="print the parsed token stream instead of running it",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    session = Session()
    for line in _lines(args):
        source = line if args.no_format else format_source(line)
        logger.debug("line %r -> %r", line, source)
        try:
            if args.tokens:
                for token, span in parse(source):
                    print(f"{span.start}:{span.end}\t{token}")
                continue
            stack = session(source)
        except KuhiError as err:
            _report(err)
            return 1
        print(render_stack(stack))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
