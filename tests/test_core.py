import random

import pytest

from mvcore.core import (
    TypeInfo,
    elf_hash,
    random_chance,
    random_f64,
    random_int,
    str_id,
    type_info,
)


def test_elf_hash_empty_is_zero():
    assert elf_hash(b"") == 0


def test_elf_hash_single_byte_is_its_value():
    assert elf_hash(b"a") == ord("a")


def test_elf_hash_str_matches_utf8_bytes():
    assert elf_hash("transform") == elf_hash("transform".encode("utf-8"))


@pytest.mark.parametrize(
    "data", [b"x" * 100, b"struct animated_sprite", bytes(range(256)), b"\xff" * 50]
)
def test_elf_hash_stays_within_39_bits(data):
    assert 0 <= elf_hash(data) <= 0x7FFFFFFFFF


def test_elf_hash_is_deterministic_and_order_sensitive():
    assert elf_hash(b"abcdef") == elf_hash(bytearray(b"abcdef"))
    assert elf_hash(b"ab") != elf_hash(b"ba")


def test_str_id_empty_is_zero():
    assert str_id("") == 0


def test_str_id_single_char():
    assert str_id("A") == ord("A")


def test_str_id_ignores_order():
    assert str_id("struct sprite") == str_id("etirps tcurts")


def test_str_id_is_additive():
    assert str_id("hello world") == str_id("hello ") + str_id("world")


def test_str_id_wraps_for_high_bytes():
    value = str_id(b"\xff")
    assert 0 <= value <= 0xFFFFFFFF
    assert (value + str_id(b"\x01")) % 2**32 == 0


def test_type_info_from_class():
    class Transform:
        pass

    info = type_info(Transform)
    assert info.name == Transform.__qualname__
    assert info.id == str_id(Transform.__qualname__)


def test_type_info_from_name_and_identity():
    info = type_info("struct light")
    assert info == TypeInfo(str_id("struct light"), "struct light")
    assert type_info(info) is info


def test_type_info_rejects_other_values():
    with pytest.raises(TypeError):
        type_info(42)


def test_random_int_within_bounds():
    random.seed(1)
    values = {random_int(3, 7) for _ in range(500)}
    assert values <= set(range(3, 8))
    assert len(values) > 1


def test_random_int_single_value():
    assert random_int(5, 5) == 5


def test_random_int_bad_range():
    with pytest.raises(ValueError):
        random_int(10, 1)


def test_random_f64_within_bounds():
    random.seed(2)
    for _ in range(500):
        assert 1.5 <= random_f64(1.5, 2.5) <= 2.5


def test_random_chance_extremes():
    random.seed(3)
    assert all(random_chance(100.0) for _ in range(200))
    assert not any(random_chance(-1.0) for _ in range(200))