"""UCI protocol helpers: score and move formatting and command parsing."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# Internal value reported as 100 centipawns (50% win rate at ply 64).
NORMALIZE_TO_PAWN_VALUE = 361

VALUE_MATE = 32000
VALUE_INFINITE = 32001
MAX_PLY = 246
VALUE_MATE_IN_MAX_PLY = VALUE_MATE - MAX_PLY

WHITE = 0
BLACK = 1

_WIN_RATE_AS = (-0.58270499, 2.68512549, 15.24638015, 344.49745382)
_WIN_RATE_BS = (-2.65734562, 15.96509799, -20.69040836, 73.61029937)

_PROMOTION_CHARS = " pnbrqk"
_FILE_C = 2
_FILE_G = 6

Args = Union[str, Iterable[str]]


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def _now_ms() -> int:
    return int(time.monotonic() * 1000)


def _tokens(args: Args) -> list[str]:
    return args.split() if isinstance(args, str) else list(args)


def _normalise_move_text(text: str) -> str:
    if len(text) == 5:
        return text[:4] + text[4].lower()
    return text


def win_rate_model(v: int, ply: int) -> int:
    """Win probability in per mille for eval ``v`` at game ply ``ply``."""
    m = min(240, ply) / 64.0
    as_ = _WIN_RATE_AS
    bs = _WIN_RATE_BS
    a = ((as_[0] * m + as_[1]) * m + as_[2]) * m + as_[3]
    b = ((bs[0] * m + bs[1]) * m + bs[2]) * m + bs[3]
    x = min(max(float(v), -4000.0), 4000.0)
    return int(0.5 + 1000 / (1 + math.exp((a - x) / b)))


def value(v: int) -> str:
    """Format an internal value as ``cp <x>`` or ``mate <y>``."""
    if not -VALUE_INFINITE < v < VALUE_INFINITE:
        raise ValueError(f"value out of range: {v}")
    if abs(v) < VALUE_MATE_IN_MAX_PLY:
        return f"cp {_trunc_div(v * 100, NORMALIZE_TO_PAWN_VALUE)}"
    plies = VALUE_MATE - v + 1 if v > 0 else -VALUE_MATE - v
    return f"mate {_trunc_div(plies, 2)}"


def wdl(v: int, ply: int) -> str:
    """Format win/draw/loss statistics in per mille."""
    wins = win_rate_model(v, ply)
    losses = win_rate_model(-v, ply)
    draws = 1000 - wins - losses
    return f" wdl {wins} {draws} {losses}"


def square(s: int) -> str:
    """Algebraic name of square index ``s`` (0 is a1, 63 is h8)."""
    if not 0 <= s < 64:
        raise ValueError(f"square out of range: {s}")
    return chr(ord("a") + s % 8) + chr(ord("1") + s // 8)


def move_to_uci(
    from_sq: Optional[int],
    to_sq: Optional[int],
    promotion: Optional[int] = None,
    castling: bool = False,
    chess960: bool = False,
) -> str:
    """Format a move in coordinate notation.

    ``from_sq`` of None stands for no move, equal squares for the null move.
    Castling moves are given as king-takes-rook and printed as king moves
    unless ``chess960`` is set. ``promotion`` is a piece type, knight 2 to
    queen 5.
    """
    if from_sq is None or to_sq is None:
        return "(none)"
    if from_sq == to_sq:
        return "0000"
    if castling and not chess960:
        to_sq = (from_sq // 8) * 8 + (_FILE_G if to_sq > from_sq else _FILE_C)
    text = square(from_sq) + square(to_sq)
    if promotion is not None:
        if not 0 < promotion < len(_PROMOTION_CHARS):
            raise ValueError(f"invalid promotion piece: {promotion}")
        text += _PROMOTION_CHARS[promotion]
    return text


@dataclass
class SearchLimits:
    """Limits given to a search by the ``go`` command."""

    time: list[int] = field(default_factory=lambda: [0, 0])
    inc: list[int] = field(default_factory=lambda: [0, 0])
    npmsec: int = 0
    movestogo: int = 0
    depth: int = 0
    movetime: int = 0
    mate: int = 0
    perft: int = 0
    infinite: bool = False
    nodes: int = 0
    start_time: int = 0
    searchmoves: list[str] = field(default_factory=list)


_INDEXED_LIMITS = {
    "wtime": ("time", WHITE),
    "btime": ("time", BLACK),
    "winc": ("inc", WHITE),
    "binc": ("inc", BLACK),
}

_SCALAR_LIMITS = {
    "movestogo": "movestogo",
    "depth": "depth",
    "nodes": "nodes",
    "movetime": "movetime",
    "mate": "mate",
    "perft": "perft",
}


def parse_go(args: Args) -> tuple[SearchLimits, bool]:
    """Parse the arguments of ``go`` into limits and the ponder flag.

    Parsing stops at the first number that cannot be read. ``searchmoves``
    takes every remaining token.
    """
    limits = SearchLimits(start_time=_now_ms())
    ponder = False
    stream = iter(_tokens(args))

    for token in stream:
        if token == "searchmoves":
            limits.searchmoves.extend(_normalise_move_text(t) for t in stream)
        elif token in _INDEXED_LIMITS or token in _SCALAR_LIMITS:
            raw = next(stream, None)
            try:
                number = int(raw) if raw is not None else None
            except ValueError:
                number = None
            if number is None:
                break
            if token in _INDEXED_LIMITS:
                attr, side = _INDEXED_LIMITS[token]
                getattr(limits, attr)[side] = number
            else:
                setattr(limits, _SCALAR_LIMITS[token], number)
        elif token == "infinite":
            limits.infinite = True
        elif token == "ponder":
            ponder = True

    return limits, ponder


def parse_setoption(args: Args) -> tuple[str, str]:
    """Parse ``name <name> value <value>``; both parts may contain spaces."""
    stream = iter(_tokens(args))
    next(stream, None)
    name_parts = []
    for token in stream:
        if token == "value":
            break
        name_parts.append(token)
    return " ".join(name_parts), " ".join(stream)


def parse_position(args: Args) -> Optional[tuple[str, list[str]]]:
    """Parse ``startpos|fen <fen> [moves ...]`` into a FEN and move list.

    Returns None when the command names neither ``startpos`` nor ``fen``.
    """
    stream = iter(_tokens(args))
    token = next(stream, None)
    if token == "startpos":
        fen = START_FEN
        next(stream, None)
    elif token == "fen":
        fen_parts = []
        for part in stream:
            if part == "moves":
                break
            fen_parts.append(part)
        fen = " ".join(fen_parts)
    else:
        return None
    return fen, [_normalise_move_text(t) for t in stream]