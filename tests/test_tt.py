import pytest

from chesscore.tt import (
    CLUSTER_SIZE,
    DEPTH_OFFSET,
    Bound,
    TranspositionTable,
    TTEntry,
    mul_hi64,
)


def _key_for_cluster(index, count):
    return -(-(index << 64) // count)


@pytest.fixture
def table():
    return TranspositionTable(1)


def test_mul_hi64_high_bits():
    assert mul_hi64(1 << 63, 4) == 2
    assert mul_hi64(5, 7) == 0


def test_mul_hi64_stays_below_count():
    for key in (0, 1, 12345678901234567, (1 << 64) - 1):
        assert 0 <= mul_hi64(key, 1000) < 1000


def test_resize_cluster_count(table):
    assert table.cluster_count == 32768


def test_resize_rejects_zero():
    with pytest.raises(ValueError):
        TranspositionTable(0)


def test_unsized_table_cannot_probe():
    with pytest.raises(RuntimeError):
        TranspositionTable().probe(1)


def test_probe_empty_not_found(table):
    found, entry = table.probe(0xABCDEF)
    assert found is False
    assert entry.depth8 == 0


def test_save_then_probe_round_trip(table):
    key = 0x123456789ABCDEF0
    _, entry = table.probe(key)
    entry.save(key, -250, True, Bound.LOWER, 12, 0x1234, -300, table.generation)
    found, again = table.probe(key)
    assert found is True
    assert again is entry
    assert again.value == -250
    assert again.eval_value == -300
    assert again.depth == 12
    assert again.move == 0x1234
    assert again.is_pv is True
    assert again.bound is Bound.LOWER


def test_save_keeps_move_when_none_given():
    entry = TTEntry()
    entry.save(77, 10, False, Bound.EXACT, 5, 999, 0, 0)
    entry.save(77, 20, False, Bound.EXACT, 6, 0, 0, 0)
    assert entry.move == 999
    assert entry.value == 20


def test_save_does_not_overwrite_deeper_entry():
    entry = TTEntry()
    entry.save(77, 10, False, Bound.LOWER, 20, 1, 0, 0)
    entry.save(77, 50, False, Bound.UPPER, 2, 0, 0, 0)
    assert entry.value == 10
    assert entry.depth == 20
    assert entry.bound is Bound.LOWER


def test_save_exact_always_overwrites():
    entry = TTEntry()
    entry.save(77, 10, False, Bound.LOWER, 20, 1, 0, 0)
    entry.save(77, 50, False, Bound.EXACT, 2, 0, 0, 0)
    assert entry.value == 50
    assert entry.depth == 2


def test_save_rejects_depth_out_of_range():
    with pytest.raises(ValueError):
        TTEntry().save(1, 0, False, Bound.EXACT, DEPTH_OFFSET, 0, 0, 0)
    with pytest.raises(ValueError):
        TTEntry().save(1, 0, False, Bound.EXACT, 256 + DEPTH_OFFSET, 0, 0, 0)


def test_new_search_cycles_generation(table):
    seen = set()
    for _ in range(32):
        table.new_search()
        seen.add(table.generation)
        assert table.generation & 0x7 == 0
    assert table.generation == 0
    assert len(seen) == 32


def test_replacement_picks_shallowest(table):
    for key, depth in ((1, 10), (2, 5), (3, 8)):
        found, entry = table.probe(key)
        assert not found
        entry.save(key, 0, False, Bound.LOWER, depth, 0, 0, table.generation)
    found, victim = table.probe(4)
    assert found is False
    assert victim.key16 == 2


def test_replacement_prefers_old_entries(table):
    for key, depth in ((1, 10), (2, 5), (3, 8)):
        _, entry = table.probe(key)
        entry.save(key, 0, False, Bound.LOWER, depth, 0, 0, table.generation)
    table.new_search()
    _, entry = table.probe(1)
    entry.save(1, 0, False, Bound.EXACT, 10, 0, 0, table.generation)
    _, entry = table.probe(3)
    entry.save(3, 0, False, Bound.EXACT, 8, 0, 0, table.generation)
    _, victim = table.probe(4)
    assert victim.key16 == 2


def test_probe_refreshes_generation_keeping_flags(table):
    _, entry = table.probe(9)
    entry.save(9, 0, True, Bound.UPPER, 3, 0, 0, table.generation)
    table.new_search()
    found, entry = table.probe(9)
    assert found
    assert entry.gen_bound8 & 0xF8 == table.generation
    assert entry.is_pv and entry.bound is Bound.UPPER


def test_hashfull_full_then_stale(table):
    assert table.hashfull() == 0
    for index in range(1000):
        cluster = table.first_entry(_key_for_cluster(index, table.cluster_count))
        for n, entry in enumerate(cluster):
            entry.save(n + 1, 0, False, Bound.EXACT, 1, 0, 0, table.generation)
    assert table.hashfull() == 1000
    table.new_search()
    assert table.hashfull() == 0


def test_clear_empties_table(table):
    _, entry = table.probe(42)
    entry.save(42, 1, False, Bound.EXACT, 4, 0, 0, table.generation)
    table.clear()
    found, entry = table.probe(42)
    assert found is False
    assert len(table.first_entry(42)) == CLUSTER_SIZE