"""Deterministic benchmark accounts derived from a name, an index and a seed."""
from __future__ import annotations

import hashlib
import struct


def _compact_len(n: int) -> bytes:
    if n < 1 << 6:
        return struct.pack("<B", n << 2)
    if n < 1 << 14:
        return struct.pack("<H", (n << 2) | 0b01)
    if n < 1 << 30:
        return struct.pack("<I", (n << 2) | 0b10)
    raise ValueError(f"Account name too long: {n} bytes")


def encode_seed(name: str, index: int, seed: int) -> bytes:
    """Length-prefixed UTF-8 name followed by ``index`` and ``seed`` as little-endian u32."""
    raw = name.encode("utf-8")
    return _compact_len(len(raw)) + raw + struct.pack("<II", index, seed)


def account(name: str, index: int, seed: int) -> str:
    """Return the hex account id ``0x<blake2b-256(encode(name, index, seed))>``."""
    digest = hashlib.blake2b(encode_seed(name, index, seed), digest_size=32).hexdigest()
    return f"0x{digest}"
