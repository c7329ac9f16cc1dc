"""Index tables and position encoding for endgame tablebases.

Squares are numbered 0 (a1) to 63 (h8). Pieces are numbered as in the
tablebase files: white pawn 1 to white king 6, black pawn 9 to black king 14.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

_FILE_D = 3
_RANK_4 = 3
_SQ_B1 = 1
_SQ_D4 = 27

# Number of ways to place the leading group without pawns
_UNIQUE_LEAD_SIZE = 31332
_KK_LEAD_SIZE = 462


def _file_of(sq: int) -> int:
    return sq & 7


def _rank_of(sq: int) -> int:
    return sq >> 3


def off_a1h8(sq: int) -> int:
    """Signed distance of ``sq`` from the a1-h8 diagonal: positive above it."""
    return _rank_of(sq) - _file_of(sq)


def _king_distance(a: int, b: int) -> int:
    return max(abs(_file_of(a) - _file_of(b)), abs(_rank_of(a) - _rank_of(b)))


@dataclass(frozen=True)
class IndexTables:
    """Lookup tables used to turn piece placements into table indices."""

    map_pawns: tuple[int, ...]
    map_b1h1h7: tuple[int, ...]
    map_a1d1d4: tuple[int, ...]
    map_kk: tuple[tuple[int, ...], ...]
    binomial: tuple[tuple[int, ...], ...]
    lead_pawn_idx: tuple[tuple[int, ...], ...]
    lead_pawns_size: tuple[tuple[int, ...], ...]


def build_tables() -> IndexTables:
    """Compute all the index lookup tables."""
    # Squares below the a1-h8 diagonal mapped to 0..27
    map_b1h1h7 = [0] * 64
    code = 0
    for s in range(64):
        if off_a1h8(s) < 0:
            map_b1h1h7[s] = code
            code += 1

    # Squares of the a1-d1-d4 triangle mapped to 0..9, diagonal ones last
    map_a1d1d4 = [0] * 64
    diagonal = []
    code = 0
    for s in range(_SQ_D4 + 1):
        if off_a1h8(s) < 0 and _file_of(s) <= _FILE_D:
            map_a1d1d4[s] = code
            code += 1
        elif off_a1h8(s) == 0 and _file_of(s) <= _FILE_D:
            diagonal.append(s)
    for s in diagonal:
        map_a1d1d4[s] = code
        code += 1

    # The 462 legal placements of two kings with the first in the triangle
    map_kk = [[0] * 64 for _ in range(10)]
    both_on_diagonal = []
    code = 0
    for idx in range(10):
        for s1 in range(_SQ_D4 + 1):
            if map_a1d1d4[s1] != idx or not (idx or s1 == _SQ_B1):
                continue
            for s2 in range(64):
                if _king_distance(s1, s2) <= 1:
                    continue
                if off_a1h8(s1) == 0 and off_a1h8(s2) > 0:
                    continue
                if off_a1h8(s1) == 0 and off_a1h8(s2) == 0:
                    both_on_diagonal.append((idx, s2))
                else:
                    map_kk[idx][s2] = code
                    code += 1
    for idx, s2 in both_on_diagonal:
        map_kk[idx][s2] = code
        code += 1

    binomial = tuple(tuple(math.comb(n, k) for n in range(64)) for k in range(6))

    map_pawns = [0] * 64
    lead_pawn_idx = [[0] * 64 for _ in range(6)]
    lead_pawns_size = [[0] * 4 for _ in range(6)]
    available = 47  # Available squares when the lead pawn is on a2
    for lead_count in range(1, 6):
        for f in range(_FILE_D + 1):
            idx = 0
            for r in range(1, 7):
                sq = r * 8 + f
                if lead_count == 1:
                    map_pawns[sq] = available
                    map_pawns[sq ^ 7] = available - 1
                    available -= 2
                lead_pawn_idx[lead_count][sq] = idx
                idx += binomial[lead_count - 1][map_pawns[sq]]
            lead_pawns_size[lead_count][f] = idx

    return IndexTables(
        map_pawns=tuple(map_pawns),
        map_b1h1h7=tuple(map_b1h1h7),
        map_a1d1d4=tuple(map_a1d1d4),
        map_kk=tuple(tuple(row) for row in map_kk),
        binomial=binomial,
        lead_pawn_idx=tuple(tuple(row) for row in lead_pawn_idx),
        lead_pawns_size=tuple(tuple(row) for row in lead_pawns_size),
    )


def set_groups(
    tables: IndexTables,
    pieces: Sequence[int],
    piece_count: int,
    has_pawns: bool,
    has_unique_pieces: bool,
    pawn_count: Sequence[int],
    order: Sequence[int],
    file: int,
) -> tuple[list[int], list[int]]:
    """Split the table's piece sequence into groups and compute their strides.

    Returns the group lengths and the per-group index multipliers; the
    multipliers list has one more element, the size of the table.
    """
    if piece_count < 1 or len(pieces) < piece_count:
        raise ValueError(f"expected {piece_count} pieces, got {len(pieces)}")

    first_len = 0 if has_pawns else 3 if has_unique_pieces else 2
    group_len = [1]
    for i in range(1, piece_count):
        first_len -= 1
        if first_len > 0 or pieces[i] == pieces[i - 1]:
            group_len[-1] += 1
        else:
            group_len.append(1)

    n = len(group_len)
    pp = bool(has_pawns and pawn_count[1])  # Pawns on both sides
    nxt = 2 if pp else 1
    free_squares = 64 - group_len[0] - (group_len[1] if pp else 0)
    group_idx = [0] * (n + 1)
    idx = 1
    k = 0
    while nxt < n or k == order[0] or k == order[1]:
        if k == order[0]:
            group_idx[0] = idx
            if has_pawns:
                idx *= tables.lead_pawns_size[group_len[0]][file]
            else:
                idx *= _UNIQUE_LEAD_SIZE if has_unique_pieces else _KK_LEAD_SIZE
        elif k == order[1]:
            group_idx[1] = idx
            idx *= tables.binomial[group_len[1]][48 - group_len[0]]
        else:
            if nxt >= n:
                raise ValueError(f"invalid group order: {tuple(order)}")
            group_idx[nxt] = idx
            idx *= tables.binomial[group_len[nxt]][free_squares]
            free_squares -= group_len[nxt]
            nxt += 1
        k += 1

    group_idx[n] = idx
    return group_len, group_idx


def _binomial(tables: IndexTables, k: int, n: int) -> int:
    if n < 0 or k >= len(tables.binomial):
        raise ValueError(f"no binomial coefficient for k={k}, n={n}")
    return tables.binomial[k][n]


def encode_pieces(
    tables: IndexTables,
    squares: Sequence[int],
    group_len: Sequence[int],
    group_idx: Sequence[int],
    lead_pawns_count: int,
    has_pawns: bool,
    has_unique_pieces: bool,
    remaining_pawns: bool,
) -> int:
    """Compute the table index of a placement.

    ``squares`` are already ordered like the table's pieces, with the lead
    pawn (the one with the highest pawn map value) first when there are pawns.
    """
    sq = list(squares)
    if any(not 0 <= s < 64 for s in sq):
        raise ValueError(f"square out of range in {sq}")
    size = len(sq)
    if size < 2:
        raise ValueError("a placement needs at least two pieces")

    # Map the lead piece to files a-d
    if _file_of(sq[0]) > _FILE_D:
        sq = [s ^ 7 for s in sq]

    if has_pawns:
        idx = tables.lead_pawn_idx[lead_pawns_count][sq[0]]
        sq[1:lead_pawns_count] = sorted(
            sq[1:lead_pawns_count], key=lambda s: tables.map_pawns[s]
        )
        for i in range(1, lead_pawns_count):
            idx += _binomial(tables, i, tables.map_pawns[sq[i]])
    else:
        # Lead piece below rank 5
        if _rank_of(sq[0]) > _RANK_4:
            sq = [s ^ 56 for s in sq]

        # First leading piece off the diagonal goes below it
        for i in range(group_len[0]):
            off = off_a1h8(sq[i])
            if not off:
                continue
            if off > 0:
                sq[i:] = [((s >> 3) | (s << 3)) & 63 for s in sq[i:]]
            break

        if has_unique_pieces:
            adjust1 = int(sq[1] > sq[0])
            adjust2 = int(sq[2] > sq[0]) + int(sq[2] > sq[1])
            if off_a1h8(sq[0]):
                idx = (tables.map_a1d1d4[sq[0]] * 63 + (sq[1] - adjust1)) * 62 + sq[2] - adjust2
            elif off_a1h8(sq[1]):
                idx = (
                    6 * 63 + _rank_of(sq[0]) * 28 + tables.map_b1h1h7[sq[1]]
                ) * 62 + sq[2] - adjust2
            elif off_a1h8(sq[2]):
                idx = (
                    6 * 63 * 62 + 4 * 28 * 62
                    + _rank_of(sq[0]) * 7 * 28
                    + (_rank_of(sq[1]) - adjust1) * 28
                    + tables.map_b1h1h7[sq[2]]
                )
            else:
                idx = (
                    6 * 63 * 62 + 4 * 28 * 62 + 4 * 7 * 28
                    + _rank_of(sq[0]) * 7 * 6
                    + (_rank_of(sq[1]) - adjust1) * 6
                    + (_rank_of(sq[2]) - adjust2)
                )
        else:
            idx = tables.map_kk[tables.map_a1d1d4[sq[0]]][sq[1]]

    idx *= group_idx[0]
    pos = group_len[0]
    pawns_pending = bool(has_pawns and remaining_pawns)

    for nxt in range(1, len(group_len)):
        length = group_len[nxt]
        if not length:
            break
        group = sorted(sq[pos:pos + length])
        sq[pos:pos + length] = group
        n = 0
        for i, s in enumerate(group):
            adjust = sum(1 for earlier in sq[:pos] if s > earlier)
            n += _binomial(tables, i + 1, s - adjust - 8 * pawns_pending)
        pawns_pending = False
        idx += n * group_idx[nxt]
        pos += length

    return idx