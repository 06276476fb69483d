#!/usr/bin/env python3
"""Read, validate, and summarize an Intel HEX file.

Usage:
    python3 scripts/hex_file_info.py firmware.hex
    python3 scripts/hex_file_info.py < firmware.hex
    python3 scripts/hex_file_info.py firmware.hex --json --report-out artifacts/summary.json

Exit codes: 0 success, 1 usage error, 2 invalid hex data or I/O failure.
The report goes to stdout; errors and log messages go to stderr.
"""

from __future__ import annotations

import argparse
import io
import logging
import sys
from pathlib import Path
from typing import NoReturn

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from hexinfo.report import dump_json, format_report, save_json, summary_to_dict
from hexinfo.session import analyze_lines, analyze_path
from hexinfo.types import Err, Ok

PROG = "hex_file_info"
EXIT_USAGE = 1
EXIT_ERROR = 2

log = logging.getLogger(PROG)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        print(f"{self.prog}: {message}", file=sys.stderr)
        raise SystemExit(EXIT_USAGE)


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog=PROG, description="Validate and summarize an Intel HEX file")
    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        help="Hex file to read (default: standard input)",
    )
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON")
    parser.add_argument("--report-out", type=Path, help="Also write the JSON summary here")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args, extra = parser.parse_known_args(argv)
    if extra:
        parser.print_usage(sys.stderr)
        return EXIT_USAGE

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    if args.input is None:
        if isinstance(sys.stdin, io.TextIOWrapper):
            sys.stdin.reconfigure(errors="replace")
        result = analyze_lines(sys.stdin, source="stdin")
    else:
        result = analyze_path(args.input)

    match result:
        case Err(error=error):
            print(f"{PROG}: Error: {error}", file=sys.stderr)
            return EXIT_ERROR
        case Ok(value=summary):
            pass

    payload = summary_to_dict(summary)
    if args.report_out is not None:
        try:
            save_json(payload, args.report_out)
        except OSError as exc:
            print(f"{PROG}: Error: Failed to write {args.report_out}: {exc}", file=sys.stderr)
            return EXIT_ERROR
        log.debug("wrote summary to %s", args.report_out)

    if args.json:
        dump_json(payload)
    else:
        sys.stdout.write(format_report(summary))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
