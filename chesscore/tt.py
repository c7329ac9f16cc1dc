"""Transposition table: clustered entries with an age-aware replacement scheme."""

from __future__ import annotations

import enum
from dataclasses import dataclass

DEPTH_OFFSET = -7

CLUSTER_SIZE = 3
CLUSTER_BYTES = 32

GENERATION_BITS = 3
GENERATION_DELTA = 1 << GENERATION_BITS
GENERATION_CYCLE = 255 + (1 << GENERATION_BITS)
GENERATION_MASK = (0xFF << GENERATION_BITS) & 0xFF

_MASK64 = (1 << 64) - 1


def _int16(v: int) -> int:
    return ((int(v) + 0x8000) & 0xFFFF) - 0x8000


def mul_hi64(a: int, b: int) -> int:
    """High 64 bits of the 128-bit product of two unsigned 64-bit numbers."""
    return ((a & _MASK64) * (b & _MASK64)) >> 64


class Bound(enum.IntEnum):
    """Kind of bound stored with a search value."""

    NONE = 0
    UPPER = 1
    LOWER = 2
    EXACT = UPPER | LOWER


@dataclass
class TTEntry:
    """One packed table entry: key, depth, generation/pv/bound, move and values."""

    key16: int = 0
    depth8: int = 0
    gen_bound8: int = 0
    move16: int = 0
    value16: int = 0
    eval16: int = 0

    @property
    def move(self) -> int:
        return self.move16

    @property
    def value(self) -> int:
        return self.value16

    @property
    def eval_value(self) -> int:
        return self.eval16

    @property
    def depth(self) -> int:
        return self.depth8 + DEPTH_OFFSET

    @property
    def is_pv(self) -> bool:
        return bool(self.gen_bound8 & 0x4)

    @property
    def bound(self) -> Bound:
        return Bound(self.gen_bound8 & 0x3)

    def save(self, key, value, pv, bound, depth, move, ev, generation) -> None:
        """Store a node's data, keeping more valuable existing data where possible."""
        key16 = key & 0xFFFF
        bound = int(bound)
        pv = bool(pv)

        # Preserve any existing move for the same position
        if move or key16 != self.key16:
            self.move16 = move & 0xFFFF

        if (
            bound == Bound.EXACT
            or key16 != self.key16
            or depth - DEPTH_OFFSET + 2 * pv > self.depth8 - 4
        ):
            if not DEPTH_OFFSET < depth < 256 + DEPTH_OFFSET:
                raise ValueError(f"depth out of range: {depth}")
            self.key16 = key16
            self.depth8 = (depth - DEPTH_OFFSET) & 0xFF
            self.gen_bound8 = (generation | (int(pv) << 2) | bound) & 0xFF
            self.value16 = _int16(value)
            self.eval16 = _int16(ev)


class TranspositionTable:
    """A power-free array of clusters of entries, sized in megabytes.

    Clusters are materialised on first access, so an untouched cluster reads
    as all-empty entries.
    """

    def __init__(self, mb_size: int | None = None) -> None:
        self.cluster_count = 0
        self.generation = 0
        self._clusters: dict[int, list[TTEntry]] = {}
        if mb_size is not None:
            self.resize(mb_size)

    def resize(self, mb_size: int) -> None:
        """Set the table size in megabytes and clear it."""
        if mb_size < 1:
            raise ValueError(f"hash size must be at least 1 MB, got {mb_size}")
        self.cluster_count = mb_size * 1024 * 1024 // CLUSTER_BYTES
        self.clear()

    def clear(self) -> None:
        """Reset every entry to zero."""
        self._clusters = {}

    def new_search(self) -> None:
        """Advance the generation; the low bits are reserved for pv and bound."""
        self.generation = (self.generation + GENERATION_DELTA) & 0xFF

    def _cluster(self, index: int) -> list[TTEntry]:
        cluster = self._clusters.get(index)
        if cluster is None:
            cluster = [TTEntry() for _ in range(CLUSTER_SIZE)]
            self._clusters[index] = cluster
        return cluster

    def first_entry(self, key: int) -> list[TTEntry]:
        """The cluster of entries that ``key`` maps to."""
        if not self.cluster_count:
            raise RuntimeError("transposition table has not been sized")
        return self._cluster(mul_hi64(key, self.cluster_count))

    def probe(self, key: int) -> tuple[bool, TTEntry]:
        """Look up ``key``; return whether it was found and the entry to use."""
        cluster = self.first_entry(key)
        key16 = key & 0xFFFF

        for entry in cluster:
            if entry.key16 == key16 or not entry.depth8:
                entry.gen_bound8 = (
                    self.generation | (entry.gen_bound8 & (GENERATION_DELTA - 1))
                ) & 0xFF
                return bool(entry.depth8), entry

        def worth(entry: TTEntry) -> int:
            age = (GENERATION_CYCLE + self.generation - entry.gen_bound8) & GENERATION_MASK
            return entry.depth8 - age

        replace = cluster[0]
        for entry in cluster[1:]:
            if worth(replace) > worth(entry):
                replace = entry
        return False, replace

    def hashfull(self) -> int:
        """Approximate occupation in permill, sampled from the first clusters."""
        count = 0
        for index in range(min(1000, self.cluster_count)):
            cluster = self._clusters.get(index)
            if cluster is None:
                continue
            count += sum(
                1
                for entry in cluster
                if entry.depth8 and (entry.gen_bound8 & GENERATION_MASK) == self.generation
            )
        return count // CLUSTER_SIZE