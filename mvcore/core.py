"""Hashing, type identification and random helpers shared by the engine."""

from __future__ import annotations

import random
from dataclasses import dataclass

_U64_MASK = 0xFFFF_FFFF_FFFF_FFFF
_U32_MASK = 0xFFFF_FFFF
_ELF_HIGH_BITS = 0xF000000000
_ELF_RESULT_MASK = 0x7FFFFFFFFF


def _as_bytes(data: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def elf_hash(data: bytes | bytearray | memoryview | str) -> int:
    """Return the ELF-style hash of ``data`` (strings are hashed as UTF-8)."""
    value = 0
    for byte in _as_bytes(data):
        value = ((value << 4) + byte) & _U64_MASK
        high = value & _ELF_HIGH_BITS
        if high:
            value ^= high >> 24
            value &= ~high & _U64_MASK
    return value & _ELF_RESULT_MASK


def str_id(text: str | bytes) -> int:
    """Sum the characters of ``text`` into a 32-bit identifier.

    Bytes above 127 count as signed chars, so the sum wraps like an
    unsigned 32-bit integer. This is an identifier, not a hash.
    """
    total = 0
    for byte in _as_bytes(text):
        signed = byte - 256 if byte > 127 else byte
        total = (total + signed) & _U32_MASK
    return total


@dataclass(frozen=True)
class TypeInfo:
    """Identity of a component type: its name and the id derived from it."""

    id: int
    name: str


def type_info(component_type: type | str | TypeInfo) -> TypeInfo:
    """Describe a component type, given as a class, a name or a TypeInfo."""
    if isinstance(component_type, TypeInfo):
        return component_type
    if isinstance(component_type, str):
        name = component_type
    elif isinstance(component_type, type):
        name = component_type.__qualname__
    else:
        raise TypeError(f"cannot describe {component_type!r} as a component type")
    return TypeInfo(str_id(name), name)


def random_int(minimum: int, maximum: int) -> int:
    """Return a random integer in the inclusive range [minimum, maximum]."""
    if maximum < minimum:
        raise ValueError("maximum must not be less than minimum")
    return random.randint(minimum, maximum)


def random_f64(minimum: float, maximum: float) -> float:
    """Return a random float between ``minimum`` and ``maximum``."""
    return minimum + random.random() * (maximum - minimum)


def random_chance(chance: float) -> bool:
    """Return True with roughly ``chance`` percent probability."""
    return random.random() * 100.0 <= chance