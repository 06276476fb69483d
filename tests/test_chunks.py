"""Tests for the chunk merge engine."""
from __future__ import annotations

import itertools

import pytest

from hexinfo.chunks import ChunkList
from hexinfo.types import Chunk


def _build(*chunks: Chunk) -> ChunkList:
    chunk_list = ChunkList()
    for chunk in chunks:
        chunk_list.insert(chunk)
    return chunk_list


def _covered(chunks: ChunkList) -> set[int]:
    addresses: set[int] = set()
    for chunk in chunks:
        addresses.update(range(chunk.address, chunk.end))
    return addresses


class TestChunkType:
    def test_end_and_predicates(self) -> None:
        a = Chunk(0x100, 0x10)
        assert a.end == 0x110
        assert a.is_adjacent(Chunk(0x110, 4))
        assert a.is_adjacent(Chunk(0xF0, 0x10))
        assert not a.is_adjacent(Chunk(0x111, 4))
        assert a.overlaps(Chunk(0x10F, 1))
        assert not a.overlaps(Chunk(0x110, 1))

    def test_zero_size_never_overlaps(self) -> None:
        assert not Chunk(0x100, 0).overlaps(Chunk(0x100, 0x10))
        assert not Chunk(0x100, 0x10).overlaps(Chunk(0x108, 0))

    def test_negative_values_rejected(self) -> None:
        with pytest.raises(ValueError, match="address"):
            Chunk(-1, 1)
        with pytest.raises(ValueError, match="size"):
            Chunk(0, -1)


class TestDisjointInsertion:
    @pytest.mark.parametrize(
        "order",
        list(itertools.permutations([Chunk(0x000, 0x10), Chunk(0x100, 0x20), Chunk(0x80, 0x8)])),
    )
    def test_one_entry_per_range_in_ascending_order(self, order: tuple[Chunk, ...]) -> None:
        chunks = _build(*order)
        assert chunks.as_list() == [Chunk(0x000, 0x10), Chunk(0x80, 0x8), Chunk(0x100, 0x20)]
        assert chunks.overlap_count == 0

    def test_empty(self) -> None:
        chunks = ChunkList()
        assert len(chunks) == 0
        assert chunks.as_list() == []


class TestAdjacentMerge:
    def test_append_after(self) -> None:
        chunks = _build(Chunk(0x1000, 0x10), Chunk(0x1010, 0x20))
        assert chunks.as_list() == [Chunk(0x1000, 0x30)]

    def test_prepend_before(self) -> None:
        chunks = _build(Chunk(0x1010, 0x20), Chunk(0x1000, 0x10))
        assert chunks.as_list() == [Chunk(0x1000, 0x30)]
        assert chunks.overlap_count == 0

    def test_bridge_joins_both_neighbours(self) -> None:
        chunks = _build(Chunk(0x00, 0x10), Chunk(0x20, 0x10), Chunk(0x10, 0x10))
        assert chunks.as_list() == [Chunk(0x00, 0x30)]

    def test_bridge_leaves_other_entries_alone(self) -> None:
        chunks = _build(
            Chunk(0x00, 0x10),
            Chunk(0x100, 0x10),
            Chunk(0x20, 0x10),
            Chunk(0x10, 0x10),
        )
        assert chunks.as_list() == [Chunk(0x00, 0x30), Chunk(0x100, 0x10)]

    def test_reverse_order_records_collapse(self) -> None:
        chunks = _build(*(Chunk(addr, 0x10) for addr in range(0x1F0, -1, -0x10)))
        assert chunks.as_list() == [Chunk(0x000, 0x200)]

    def test_shuffled_records_collapse(self) -> None:
        addresses = [0x30, 0x00, 0x50, 0x10, 0x40, 0x20]
        chunks = _build(*(Chunk(addr, 0x10) for addr in addresses))
        assert chunks.as_list() == [Chunk(0x00, 0x60)]
        assert chunks.overlap_count == 0

    def test_zero_size_record_merges_without_changing_size(self) -> None:
        chunks = _build(Chunk(0x00, 0x10), Chunk(0x10, 0))
        assert chunks.as_list() == [Chunk(0x00, 0x10)]

    def test_no_stored_entries_touch(self) -> None:
        addresses = [0x40, 0x00, 0x80, 0x20, 0x60, 0xA0, 0x10, 0x90]
        chunks = _build(*(Chunk(addr, 0x10) for addr in addresses)).as_list()
        for left, right in zip(chunks, chunks[1:]):
            assert left.end < right.address


class TestOverlaps:
    @pytest.mark.parametrize("swap", [False, True])
    def test_pair_counted_once(self, swap: bool) -> None:
        a, b = Chunk(0x00, 0x10), Chunk(0x08, 0x10)
        chunks = _build(*((b, a) if swap else (a, b)))
        assert chunks.overlap_count == 1
        assert _covered(chunks) == set(range(0x00, 0x18))

    def test_spanning_two_entries_counts_each(self) -> None:
        chunks = _build(Chunk(0x00, 0x10), Chunk(0x20, 0x10), Chunk(0x08, 0x20))
        assert chunks.overlap_count == 2
        assert _covered(chunks) == set(range(0x00, 0x30))

    def test_same_chunk_twice(self) -> None:
        chunks = _build(Chunk(0x100, 0x10), Chunk(0x100, 0x10))
        assert chunks.overlap_count == 1
        assert all(chunk == Chunk(0x100, 0x10) for chunk in chunks)
        assert _covered(chunks) == set(range(0x100, 0x110))

    def test_overlap_then_adjacent_still_merges(self) -> None:
        chunks = _build(Chunk(0x00, 0x10), Chunk(0x04, 0x04), Chunk(0x10, 0x10))
        assert chunks.overlap_count == 1
        assert Chunk(0x00, 0x20) in chunks.as_list()

    def test_ordering_holds_with_overlaps(self) -> None:
        chunks = _build(Chunk(0x40, 0x10), Chunk(0x00, 0x80), Chunk(0x20, 0x4))
        addresses = [chunk.address for chunk in chunks]
        assert addresses == sorted(addresses)
        assert chunks.overlap_count == 2
