"""Text and JSON rendering of a ``HexFileSummary``."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import orjson

from hexinfo.session import HexFileSummary


def format_report(summary: HexFileSummary) -> str:
    """Human-readable summary, one fact per line."""
    lines = [f"HEX file: {summary.source}"]
    if summary.missing_eof:
        lines.append("Missing EOF record")
    if summary.has_multiple_start_addresses:
        lines.append("Multiple start addresses found")
    elif summary.start_address is not None:
        lines.append(f"Start address: 0x{summary.start_address:X}")
    lines.append(f"{summary.data_record_count} data records, max size {summary.max_data_size}")

    header = f"{len(summary.chunks)} data segments"
    if summary.overlap_count > 0:
        header += f", {summary.overlap_count} overlaps found"
    lines.append(header + ":")
    for chunk in summary.chunks:
        lines.append(f"start 0x{chunk.address:X} size 0x{chunk.size:X}")
    return "\n".join(lines) + "\n"


def summary_to_dict(summary: HexFileSummary) -> dict[str, Any]:
    """Serialize summary for JSON output."""
    return {
        "source": summary.source,
        "eof_found": summary.eof_found,
        "start_address_count": summary.start_address_count,
        "start_address": summary.start_address,
        "multiple_start_addresses": summary.has_multiple_start_addresses,
        "data_record_count": summary.data_record_count,
        "max_data_size": summary.max_data_size,
        "overlap_count": summary.overlap_count,
        "chunks": [
            {"address": chunk.address, "size": chunk.size}
            for chunk in summary.chunks
        ],
    }


_JSON_OPTIONS = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS


def dump_json(obj: Any) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=_JSON_OPTIONS))
    sys.stdout.buffer.write(b"\n")
    sys.stdout.buffer.flush()


def save_json(obj: Any, path: Path) -> None:
    """Write ``obj`` as sorted, indented JSON, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(obj, option=_JSON_OPTIONS) + b"\n")
