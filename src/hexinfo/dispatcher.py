"""Record dispatcher: applies one parsed record to the session state."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from hexinfo.chunks import ChunkList
from hexinfo.record_parser import decode_hex
from hexinfo.types import (
    ADDRESS_MASK,
    Chunk,
    Ok,
    ParsedRecord,
    RecordError,
    RecordType,
    Result,
    format_error,
)

log = logging.getLogger(__name__)


@dataclass(slots=True)
class SessionState:
    """Everything accumulated while reading one hex file."""

    base_address: int = 0
    start_address: int = 0
    start_address_count: int = 0
    eof_seen: bool = False
    data_record_count: int = 0
    max_data_size: int = 0
    chunks: ChunkList = field(default_factory=ChunkList)


def _handle_data(state: SessionState, record: ParsedRecord) -> Result[None, RecordError]:
    state.chunks.insert(Chunk(record.address, record.payload_size))
    state.data_record_count += 1
    state.max_data_size = max(state.max_data_size, record.payload_size)
    return Ok(None)


def _handle_eof(state: SessionState, record: ParsedRecord) -> Result[None, RecordError]:
    state.eof_seen = True
    return Ok(None)


def _handle_extended_segment(state: SessionState, record: ParsedRecord) -> Result[None, RecordError]:
    match decode_hex(record.payload):
        case Ok(value=segment):
            state.base_address = segment << 4
        case err:
            return err
    log.debug("segment base address 0x%X", state.base_address)
    return Ok(None)


def _handle_extended_linear(state: SessionState, record: ParsedRecord) -> Result[None, RecordError]:
    match decode_hex(record.payload):
        case Ok(value=upper):
            state.base_address = upper << 16
        case err:
            return err
    log.debug("linear base address 0x%X", state.base_address)
    return Ok(None)


def _handle_start_segment(state: SessionState, record: ParsedRecord) -> Result[None, RecordError]:
    # CS:IP, each 16 bits
    match (decode_hex(record.payload[:4]), decode_hex(record.payload[4:8])):
        case (Ok(value=cs), Ok(value=ip)):
            state.start_address = ((cs << 4) + ip) & ADDRESS_MASK
        case (Ok(), err) | (err, _):
            return err
    state.start_address_count += 1
    log.debug("start segment address 0x%X", state.start_address)
    return Ok(None)


def _handle_start_linear(state: SessionState, record: ParsedRecord) -> Result[None, RecordError]:
    match decode_hex(record.payload):
        case Ok(value=start):
            state.start_address = start
        case err:
            return err
    state.start_address_count += 1
    log.debug("start linear address 0x%X", state.start_address)
    return Ok(None)


def dispatch(state: SessionState, record: ParsedRecord) -> Result[None, RecordError]:
    """Apply ``record`` to ``state``.

    Non-data records must carry exactly the payload size their type
    requires; anything else is a format error and leaves ``state`` as is.
    """
    required = record.record_type.payload_size
    if required is not None and record.payload_size != required:
        return format_error()
    match record.record_type:
        case RecordType.DATA:
            return _handle_data(state, record)
        case RecordType.EOF:
            return _handle_eof(state, record)
        case RecordType.EXTENDED_SEGMENT_ADDRESS:
            return _handle_extended_segment(state, record)
        case RecordType.START_SEGMENT_ADDRESS:
            return _handle_start_segment(state, record)
        case RecordType.EXTENDED_LINEAR_ADDRESS:
            return _handle_extended_linear(state, record)
        case RecordType.START_LINEAR_ADDRESS:
            return _handle_start_linear(state, record)
