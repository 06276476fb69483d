"""Intel HEX record parser.

A record line looks like ``:CCAAAATTDD...DDKK``:

* ``CC``   payload byte count (0-255)
* ``AAAA`` 16-bit address, added to the current base address
* ``TT``   record type (see ``RecordType``)
* ``DD``   ``2 * CC`` payload hex digits
* ``KK``   checksum; all decoded bytes from ``CC`` through ``KK`` sum to 0 mod 256

Public API:

* ``decode_hex(text)`` — fixed-width hex slice to unsigned int.
* ``parse_record(line, base_address)`` — validate one line into a ``ParsedRecord``.
* ``compute_checksum(data)`` — checksum byte for a record's header + payload.
"""
from __future__ import annotations

import string

from hexinfo.types import (
    ADDRESS_MASK,
    Err,
    ErrorKind,
    Ok,
    ParsedRecord,
    RecordError,
    RecordType,
    Result,
    format_error,
)

RECORD_MARK = ":"
DATA_OFFSET = 1 + 2 + 4 + 2     # ':' + count + address + type
MIN_LINE_LENGTH = DATA_OFFSET + 2
MAX_DATA_SIZE = 255
MAX_LINE_LENGTH = MIN_LINE_LENGTH + 2 * MAX_DATA_SIZE

# 32-bit native integer width
MAX_HEX_DIGITS = 8

_HEX_DIGITS = frozenset(string.hexdigits)


def decode_hex(text: str, *, max_digits: int = MAX_HEX_DIGITS) -> Result[int, RecordError]:
    """Decode a hex slice, most significant digit first.

    Case-insensitive. An empty slice decodes to 0.
    """
    if len(text) > max_digits:
        return Err(RecordError(ErrorKind.SIZE))
    value = 0
    for digit in text:
        if digit not in _HEX_DIGITS:
            return format_error()
        value = value * 16 + int(digit, 16)
    return Ok(value)


def _decode_field(line: str, start: int, width: int) -> Result[int, RecordError]:
    return decode_hex(line[start:start + width])


def _line_checksum(line: str) -> Result[int, RecordError]:
    total = 0
    for i in range(1, len(line) - 1, 2):
        match _decode_field(line, i, 2):
            case Ok(value=byte):
                total += byte
            case err:
                return err
    return Ok(total & 0xFF)


def parse_record(line: str, base_address: int = 0) -> Result[ParsedRecord, RecordError]:
    """Validate one record line (without its newline).

    Checks run in a fixed order so the reported error is deterministic:
    length bounds, marker, byte count, exact length, address, type field,
    checksum, and only then whether the type is one of the six known kinds.
    """
    if len(line) < MIN_LINE_LENGTH or len(line) > MAX_LINE_LENGTH:
        return format_error()
    if line[0] != RECORD_MARK:
        return format_error()

    match _decode_field(line, 1, 2):
        case Ok(value=data_size):
            pass
        case err:
            return err
    if len(line) != MIN_LINE_LENGTH + 2 * data_size:
        return format_error()

    match _decode_field(line, 3, 4):
        case Ok(value=offset):
            address = (base_address + offset) & ADDRESS_MASK
        case err:
            return err

    match _decode_field(line, 7, 2):
        case Ok(value=type_code):
            pass
        case err:
            return err

    match _line_checksum(line):
        case Ok(value=0):
            pass
        case Ok():
            return Err(RecordError(ErrorKind.CHECKSUM))
        case err:
            return err

    record_type = RecordType.from_code(type_code)
    if record_type is None:
        return format_error()

    return Ok(
        ParsedRecord(
            payload_size=data_size,
            address=address,
            record_type=record_type,
            payload=line[DATA_OFFSET:DATA_OFFSET + 2 * data_size],
        ),
    )


def compute_checksum(data: bytes) -> int:
    """Two's-complement checksum byte for count + address + type + payload."""
    return (-sum(data)) & 0xFF
