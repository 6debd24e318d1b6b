import pytest

from mvcore.keytable import KeyTable


def test_insert_then_search():
    table = KeyTable(16)
    table.insert(65, 1)
    table.insert(66, 2)
    assert table.search(65) == 1
    assert table.search(66) == 2
    assert len(table) == 2


def test_missing_key_returns_none():
    table = KeyTable(16)
    table.insert(5, 50)
    assert table.search(6) is None
    assert 6 not in table
    with pytest.raises(KeyError):
        table[6]


def test_colliding_keys_are_probed():
    table = KeyTable(4)
    table.insert(1, 10)
    table.insert(5, 50)
    table.insert(9, 90)
    assert table[1] == 10
    assert table[5] == 50
    assert table[9] == 90


def test_wraps_around_end():
    table = KeyTable(4)
    table.insert(3, 30)
    table.insert(7, 70)
    assert table.search(7) == 70
    assert table.search(3) == 30


def test_full_table_raises():
    table = KeyTable(2)
    table.insert(0, 0)
    table.insert(1, 1)
    with pytest.raises(OverflowError):
        table.insert(2, 2)


def test_negative_key_rejected():
    table = KeyTable(8)
    with pytest.raises(ValueError):
        table.insert(-1, 3)
    assert table.search(-1) is None


def test_duplicate_key_returns_first_value():
    table = KeyTable(8)
    table.insert(4, 100)
    table.insert(4, 200)
    assert table.search(4) == 100
    assert len(table) == 2


def test_bad_size():
    with pytest.raises(ValueError):
        KeyTable(0)