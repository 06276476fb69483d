"""Core types shared by every stage of the hex file analyzer.

Type hierarchy:
  Ok[T] / Err[E]   — Strict algebraic Result type threaded through the core
  ErrorKind        — Closed set of failure categories
  RecordError      — One failure from decoder, parser, dispatcher or driver
  LineError        — RecordError plus the line that triggered it
  HexFileError     — Exception wrapper for callers that prefer raising
  RecordType       — The six Intel HEX record kinds
  ParsedRecord     — One structurally valid line
  Chunk            — Half-open address range summarizing data records
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")

ADDRESS_MASK = 0xFFFFFFFF


# ---------------------------------------------------------------------------
# Result ADT
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success case of Result[T, E].

    Usage::

        result: Result[ParsedRecord, RecordError] = parse_record(line, 0)
        match result:
            case Ok(value=record): ...
            case Err(error=e): print(e.message)
    """
    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure case of Result[T, E]."""
    error: E


Result: TypeAlias = "Ok[T] | Err[E]"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ErrorKind(Enum):
    FORMAT = "format"
    CHECKSUM = "checksum"
    SIZE = "size"
    FILE = "file"
    SEQUENCE = "sequence"


_DEFAULT_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.FORMAT: "Invalid data in hex file",
    ErrorKind.CHECKSUM: "Incorrect checksum",
    ErrorKind.SIZE: "Number too large",
    ErrorKind.FILE: "Error reading file",
    ErrorKind.SEQUENCE: "EOF record before end of file",
}


@dataclass(frozen=True, slots=True)
class RecordError:
    """A single failure, before line context is attached."""

    kind: ErrorKind
    message: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            object.__setattr__(self, "message", _DEFAULT_MESSAGES[self.kind])

    def __str__(self) -> str:
        return self.message


def format_error(message: str = "") -> Err[RecordError]:
    return Err(RecordError(ErrorKind.FORMAT, message))


@dataclass(frozen=True, slots=True)
class LineError:
    """A RecordError re-wrapped by the session driver with line context.

    ``line_number`` is 1-based; 0 means the failure happened before any
    line was read (e.g. the source could not be opened).
    """

    error: RecordError
    line_number: int = 0
    line_text: str = ""

    def __post_init__(self) -> None:
        if self.line_number < 0:
            raise ValueError(f"line_number must be >= 0, got {self.line_number}")

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    def __str__(self) -> str:
        if self.line_number == 0:
            return self.error.message
        return f"{self.error.message}\nLine {self.line_number}: {self.line_text}"


class HexFileError(RuntimeError):
    """Raised by convenience wrappers when analysis fails."""

    def __init__(self, line_error: LineError) -> None:
        super().__init__(str(line_error))
        self.line_error = line_error

    @property
    def kind(self) -> ErrorKind:
        return self.line_error.kind


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class RecordType(IntEnum):
    """Intel HEX record types.

    ``payload_size`` is the exact payload byte count a record of this type
    must carry, or None when any size (0-255) is allowed.
    """

    DATA = 0
    EOF = 1
    EXTENDED_SEGMENT_ADDRESS = 2
    START_SEGMENT_ADDRESS = 3
    EXTENDED_LINEAR_ADDRESS = 4
    START_LINEAR_ADDRESS = 5

    @property
    def payload_size(self) -> int | None:
        return _PAYLOAD_SIZES[self]

    @classmethod
    def from_code(cls, code: int) -> RecordType | None:
        try:
            return cls(code)
        except ValueError:
            return None


_PAYLOAD_SIZES: dict[RecordType, int | None] = {
    RecordType.DATA: None,
    RecordType.EOF: 0,
    RecordType.EXTENDED_SEGMENT_ADDRESS: 2,
    RecordType.START_SEGMENT_ADDRESS: 4,
    RecordType.EXTENDED_LINEAR_ADDRESS: 2,
    RecordType.START_LINEAR_ADDRESS: 4,
}


@dataclass(frozen=True, slots=True)
class ParsedRecord:
    """One line that passed length, marker and checksum validation."""

    payload_size: int
    address: int        # effective address (record address + base, mod 2^32)
    record_type: RecordType
    payload: str        # raw hex digits of the data field

    def __post_init__(self) -> None:
        if not 0 <= self.payload_size <= 255:
            raise ValueError(f"payload_size must be in [0, 255], got {self.payload_size}")
        if len(self.payload) != 2 * self.payload_size:
            raise ValueError(
                f"payload must hold {2 * self.payload_size} hex digits, got {len(self.payload)}",
            )


@dataclass(frozen=True, slots=True)
class Chunk:
    """Half-open byte range ``[address, address + size)``.

    ``end`` is not masked to 32 bits, so a chunk near the top of the address
    space never appears to wrap around onto low addresses.
    """

    address: int
    size: int

    def __post_init__(self) -> None:
        if self.address < 0:
            raise ValueError(f"Chunk.address must be >= 0, got {self.address}")
        if self.size < 0:
            raise ValueError(f"Chunk.size must be >= 0, got {self.size}")

    @property
    def end(self) -> int:
        return self.address + self.size

    def overlaps(self, other: Chunk) -> bool:
        return self.address < other.end and other.address < self.end

    def is_adjacent(self, other: Chunk) -> bool:
        return self.end == other.address or other.end == self.address
