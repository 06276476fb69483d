"""Session driver: feeds lines through parser, dispatcher and merge engine.

Public API:

* ``analyze_lines(lines, source=...)`` — analyze any iterable of text lines.
* ``analyze_path(path)`` — open and analyze a file.
* ``load_summary(path)`` — like ``analyze_path`` but raises ``HexFileError``.
* ``sanitize_line(text)`` — printable, length-capped copy of a line.

The first failure aborts processing; it is returned as an ``Err`` holding a
``LineError`` with the 1-based line number and sanitized line text.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from hexinfo.dispatcher import SessionState, dispatch
from hexinfo.record_parser import parse_record
from hexinfo.types import (
    Chunk,
    Err,
    ErrorKind,
    HexFileError,
    LineError,
    Ok,
    RecordError,
    Result,
)

log = logging.getLogger(__name__)

MAX_DISPLAY_LENGTH = 64
TRUNCATION_MARK = "[etc]"


@dataclass(frozen=True, slots=True)
class HexFileSummary:
    """Final, read-only result of analyzing one hex file."""

    source: str
    eof_found: bool
    start_address_count: int
    start_address: int | None     # set only when exactly one was declared
    data_record_count: int
    max_data_size: int
    chunks: tuple[Chunk, ...]     # ascending address order
    overlap_count: int

    @property
    def missing_eof(self) -> bool:
        return not self.eof_found

    @property
    def has_multiple_start_addresses(self) -> bool:
        return self.start_address_count > 1

    @classmethod
    def from_state(cls, state: SessionState, source: str) -> HexFileSummary:
        return cls(
            source=source,
            eof_found=state.eof_seen,
            start_address_count=state.start_address_count,
            start_address=state.start_address if state.start_address_count == 1 else None,
            data_record_count=state.data_record_count,
            max_data_size=state.max_data_size,
            chunks=tuple(state.chunks),
            overlap_count=state.chunks.overlap_count,
        )


def sanitize_line(text: str, max_length: int = MAX_DISPLAY_LENGTH) -> str:
    """Replace non-printable characters with '?' and cap the length."""
    if len(text) > max_length:
        text = text[:max_length] + TRUNCATION_MARK
    return "".join(ch if " " <= ch <= "~" else "?" for ch in text)


def _strip_newline(raw: str) -> str:
    if raw.endswith("\n"):
        raw = raw[:-1]
        if raw.endswith("\r"):
            raw = raw[:-1]
    return raw


def _process_line(state: SessionState, line: str) -> Result[None, RecordError]:
    if state.eof_seen:
        return Err(RecordError(ErrorKind.SEQUENCE))
    match parse_record(line, state.base_address):
        case Ok(value=record):
            return dispatch(state, record)
        case err:
            return err


def analyze_lines(
    lines: Iterable[str],
    *,
    source: str = "stdin",
) -> Result[HexFileSummary, LineError]:
    """Analyze hex records one line at a time.

    ``lines`` may be a list or an open text stream; a trailing ``\\n`` or
    ``\\r\\n`` is removed from each line. An ``OSError`` or
    ``UnicodeDecodeError`` raised while reading is reported as a file error.
    """
    state = SessionState()
    iterator = iter(lines)
    line_number = 0
    line = ""
    while True:
        line_number += 1
        try:
            raw = next(iterator)
        except StopIteration:
            break
        except (OSError, UnicodeDecodeError) as exc:
            log.debug("read failure on %s: %s", source, exc)
            error = RecordError(ErrorKind.FILE, f"Error reading file {source}")
            return Err(LineError(error, line_number, sanitize_line(line)))

        line = _strip_newline(raw)
        match _process_line(state, line):
            case Err(error=error):
                return Err(LineError(error, line_number, sanitize_line(line)))
            case _:
                pass

    summary = HexFileSummary.from_state(state, source)
    if summary.missing_eof:
        log.warning("%s: missing EOF record", source)
    if summary.overlap_count:
        log.info("%s: %d overlapping data records", source, summary.overlap_count)
    return Ok(summary)


def analyze_path(path: Path | str) -> Result[HexFileSummary, LineError]:
    """Open ``path`` and analyze it.

    Undecodable bytes are replaced rather than raised, so they surface as
    format errors on the offending line.
    """
    source = str(path)
    try:
        handle = open(path, encoding="utf-8", errors="replace")
    except OSError as exc:
        log.debug("open failure on %s: %s", source, exc)
        return Err(LineError(RecordError(ErrorKind.FILE, f"Failed to open file {source}")))
    with handle:
        return analyze_lines(handle, source=source)


def load_summary(path: Path | str) -> HexFileSummary:
    """Analyze ``path``, raising ``HexFileError`` on the first failure."""
    match analyze_path(path):
        case Ok(value=summary):
            return summary
        case Err(error=error):
            raise HexFileError(error)
