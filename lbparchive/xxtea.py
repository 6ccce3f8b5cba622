"""XXTEA block encryption over big-endian 32-bit words."""

import struct
from collections.abc import Sequence

_DELTA = 0x9E3779B9
_MASK = 0xFFFFFFFF


def encrypt(key: Sequence[int], block: bytes) -> bytes:
    """Encrypt a block whose length is a non-zero multiple of four bytes."""
    if len(key) != 4:
        raise ValueError("XXTEA key must hold exactly four words")
    if len(block) % 4 != 0:
        raise ValueError("XXTEA block length must be a multiple of four")
    if not block:
        raise ValueError("XXTEA block must not be empty")

    count = len(block) // 4
    words = list(struct.unpack(f">{count}I", block))
    rounds = 6 + 52 // count

    total = 0
    z = words[-1]
    for _ in range(rounds):
        total = (total + _DELTA) & _MASK
        e = total >> 2
        for r in range(count):
            y = words[(r + 1) % count]
            left = ((z >> 5) ^ ((y << 2) & _MASK)) + ((y >> 3) ^ ((z << 4) & _MASK))
            right = (total ^ y) + (key[(r ^ e) & 3] ^ z)
            mix = (left & _MASK) ^ (right & _MASK)
            words[r] = (words[r] + mix) & _MASK
            z = words[r]

    return struct.pack(f">{count}I", *words)