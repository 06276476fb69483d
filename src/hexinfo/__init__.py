"""Intel HEX file validation and memory-chunk summary."""

from hexinfo.chunks import ChunkList
from hexinfo.dispatcher import SessionState, dispatch
from hexinfo.record_parser import compute_checksum, decode_hex, parse_record
from hexinfo.report import format_report, summary_to_dict
from hexinfo.session import (
    HexFileSummary,
    analyze_lines,
    analyze_path,
    load_summary,
    sanitize_line,
)
from hexinfo.types import (
    Chunk,
    Err,
    ErrorKind,
    HexFileError,
    LineError,
    Ok,
    ParsedRecord,
    RecordError,
    RecordType,
    Result,
)

__version__ = "0.1.0"

__all__ = [
    "Chunk",
    "ChunkList",
    "Err",
    "ErrorKind",
    "HexFileError",
    "HexFileSummary",
    "LineError",
    "Ok",
    "ParsedRecord",
    "RecordError",
    "RecordType",
    "Result",
    "SessionState",
    "analyze_lines",
    "analyze_path",
    "compute_checksum",
    "decode_hex",
    "dispatch",
    "format_report",
    "load_summary",
    "parse_record",
    "sanitize_line",
    "summary_to_dict",
]
