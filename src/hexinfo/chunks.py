"""Chunk merge engine: an address-ordered list of data ranges.

Adjacent ranges are always coalesced, so no two stored chunks touch.
Overlapping ranges are not rejected or merged; each overlap with an
already-stored chunk is counted and the new range is stored on its own,
keeping every chunk's size equal to the sum of the records it came from.
"""

from __future__ import annotations

import bisect
import logging
from collections.abc import Iterator

from hexinfo.types import Chunk

log = logging.getLogger(__name__)


def _address(chunk: Chunk) -> int:
    return chunk.address


class ChunkList:
    """Merged, overlap-counted collection of ``Chunk`` values.

    Entries are kept in ascending address order at all times, so the list
    can be reported as-is.
    """

    def __init__(self) -> None:
        self._chunks: list[Chunk] = []
        self.overlap_count = 0

    def __len__(self) -> int:
        return len(self._chunks)

    def __iter__(self) -> Iterator[Chunk]:
        return iter(self._chunks)

    def as_list(self) -> list[Chunk]:
        return list(self._chunks)

    def insert(self, chunk: Chunk) -> None:
        """Add a range, merging it with the entries it touches end-to-end.

        Every stored entry that overlaps ``chunk`` adds one to
        ``overlap_count``. If an entry ends where ``chunk`` starts, ``chunk``
        extends it; if an entry starts where ``chunk`` ends, that entry is
        folded in as well. Since stored entries never touch each other,
        at most one entry on each side can take part.
        """
        self.overlap_count += sum(1 for existing in self._chunks if existing.overlaps(chunk))

        pred = self._find_predecessor(chunk)
        succ = self._find_successor(chunk, exclude=pred)
        if pred is None and succ is None:
            self._insert_sorted(chunk)
            return

        neighbours = sorted((i for i in (pred, succ) if i is not None), reverse=True)
        address = self._chunks[pred].address if pred is not None else chunk.address
        size = chunk.size + sum(self._chunks[i].size for i in neighbours)
        for idx in neighbours:
            del self._chunks[idx]

        merged = Chunk(address, size)
        self._insert_sorted(merged)
        log.debug(
            "merged 0x%X+0x%X into chunk 0x%X size 0x%X",
            chunk.address, chunk.size, merged.address, merged.size,
        )

    def _insert_sorted(self, chunk: Chunk) -> None:
        idx = bisect.bisect_right(self._chunks, chunk.address, key=_address)
        self._chunks.insert(idx, chunk)

    def _find_predecessor(self, chunk: Chunk) -> int | None:
        """Index of the nearest stored entry ending exactly where ``chunk`` starts."""
        hi = bisect.bisect_right(self._chunks, chunk.address, key=_address)
        for idx in range(hi - 1, -1, -1):
            if self._chunks[idx].end == chunk.address:
                return idx
        return None

    def _find_successor(self, chunk: Chunk, *, exclude: int | None = None) -> int | None:
        """Index of the first stored entry starting exactly where ``chunk`` ends."""
        idx = bisect.bisect_left(self._chunks, chunk.end, key=_address)
        while idx < len(self._chunks) and self._chunks[idx].address == chunk.end:
            if idx != exclude:
                return idx
            idx += 1
        return None
