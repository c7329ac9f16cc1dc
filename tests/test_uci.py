import time

import pytest

from chesscore.uci import (
    NORMALIZE_TO_PAWN_VALUE,
    START_FEN,
    VALUE_INFINITE,
    VALUE_MATE,
    VALUE_MATE_IN_MAX_PLY,
    move_to_uci,
    parse_go,
    parse_position,
    parse_setoption,
    square,
    value,
    wdl,
    win_rate_model,
)


def test_square_names():
    assert square(6) == "g1"
    assert square(48) == "a7"


def test_square_out_of_range():
    with pytest.raises(ValueError):
        square(64)


def test_plain_move():
    assert move_to_uci(6, 21) == "g1f3"


def test_castling_standard_and_chess960():
    assert move_to_uci(4, 7, castling=True) == "e1g1"
    assert move_to_uci(4, 7, castling=True, chess960=True) == "e1h1"
    assert move_to_uci(4, 0, castling=True) == "e1c1"


def test_promotion():
    assert move_to_uci(48, 56, promotion=5) == "a7a8q"


def test_none_and_null_moves():
    assert move_to_uci(None, None) == "(none)"
    assert move_to_uci(1, 1) == "0000"


def test_value_centipawns():
    assert value(NORMALIZE_TO_PAWN_VALUE) == "cp 100"
    assert value(-NORMALIZE_TO_PAWN_VALUE) == "cp -100"


def test_value_mate():
    assert value(VALUE_MATE - 1) == "mate 1"
    assert value(-VALUE_MATE + 2).startswith("mate -")
    assert value(VALUE_MATE_IN_MAX_PLY - 1).startswith("cp ")


def test_value_out_of_range():
    with pytest.raises(ValueError):
        value(VALUE_INFINITE)


@pytest.mark.parametrize("v", [-5000, -361, 0, 100, 361, 2000])
@pytest.mark.parametrize("ply", [0, 30, 64, 200])
def test_wdl_sums_to_thousand(v, ply):
    parts = wdl(v, ply).split()
    assert parts[0] == "wdl"
    assert sum(int(p) for p in parts[1:]) == 1000


def test_win_rate_monotonic_and_bounded():
    rates = [win_rate_model(v, 40) for v in range(-4000, 4001, 250)]
    assert rates == sorted(rates)
    assert all(0 <= r <= 1000 for r in rates)


def test_win_rate_clamps_inputs():
    assert win_rate_model(5000, 30) == win_rate_model(4000, 30)
    assert win_rate_model(200, 300) == win_rate_model(200, 240)


def test_parse_go_fields():
    before = int(time.monotonic() * 1000)
    limits, ponder = parse_go(
        "wtime 1000 btime 2000 winc 10 binc 20 movestogo 40 depth 7 nodes 500 "
        "movetime 300 mate 3 perft 2 infinite ponder"
    )
    assert limits.time == [1000, 2000]
    assert limits.inc == [10, 20]
    assert limits.movestogo == 40
    assert limits.depth == 7
    assert limits.nodes == 500
    assert limits.movetime == 300
    assert limits.mate == 3
    assert limits.perft == 2
    assert limits.infinite is True
    assert ponder is True
    assert limits.start_time >= before


def test_parse_go_searchmoves_takes_rest():
    limits, ponder = parse_go("searchmoves e2e4 a7a8Q depth 5")
    assert limits.searchmoves == ["e2e4", "a7a8q", "depth", "5"]
    assert limits.depth == 0
    assert ponder is False


def test_parse_go_stops_at_bad_number():
    limits, _ = parse_go("wtime abc btime 5")
    assert limits.time == [0, 0]


def test_parse_setoption():
    assert parse_setoption("name Move Overhead value 30") == ("Move Overhead", "30")
    assert parse_setoption("name Clear Hash") == ("Clear Hash", "")
    assert parse_setoption(["name", "SyzygyPath", "value", "a", "b"]) == ("SyzygyPath", "a b")


def test_parse_position_startpos():
    assert parse_position("startpos moves e2e4 e7e5") == (START_FEN, ["e2e4", "e7e5"])
    assert parse_position("startpos") == (START_FEN, [])


def test_parse_position_fen_round_trip():
    assert parse_position(f"fen {START_FEN} moves e2e4") == (START_FEN, ["e2e4"])
    assert parse_position(f"fen {START_FEN}") == (START_FEN, [])


def test_parse_position_unknown():
    assert parse_position("somewhere e2e4") is None