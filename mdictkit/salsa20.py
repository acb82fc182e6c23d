"""Salsa20 stream cipher (8-round variant, 64-bit nonce)."""

from __future__ import annotations

import struct

from .errors import InvalidParameterError

_MASK = 0xFFFFFFFF
_SIGMA = b"expand 32-byte k"
_TAU = b"expand 16-byte k"

# (target, addend a, addend b, rotation): x[t] ^= rotl(x[a] + x[b], r)
_DOUBLE_ROUND = (
    (4, 0, 12, 7), (8, 4, 0, 9), (12, 8, 4, 13), (0, 12, 8, 18),
    (9, 5, 1, 7), (13, 9, 5, 9), (1, 13, 9, 13), (5, 1, 13, 18),
    (14, 10, 6, 7), (2, 14, 10, 9), (6, 2, 14, 13), (10, 6, 2, 18),
    (3, 15, 11, 7), (7, 3, 15, 9), (11, 7, 3, 13), (15, 11, 7, 18),
    (1, 0, 3, 7), (2, 1, 0, 9), (3, 2, 1, 13), (0, 3, 2, 18),
    (6, 5, 4, 7), (7, 6, 5, 9), (4, 7, 6, 13), (5, 4, 7, 18),
    (11, 10, 9, 7), (8, 11, 10, 9), (9, 8, 11, 13), (10, 9, 8, 18),
    (12, 15, 14, 7), (13, 12, 15, 9), (14, 13, 12, 13), (15, 14, 13, 18),
)


def _words(data: bytes) -> tuple[int, int, int, int]:
    return struct.unpack("<4I", data[:16])


def _keystream_block(state: list[int]) -> bytes:
    x = list(state)
    for _ in range(4):
        for target, a, b, rot in _DOUBLE_ROUND:
            v = (x[a] + x[b]) & _MASK
            x[target] ^= ((v << rot) | (v >> (32 - rot))) & _MASK
    return struct.pack("<16I", *((xi + si) & _MASK for xi, si in zip(x, state)))


class Salsa20:
    """A Salsa20/8 cipher whose block counter advances with every call."""

    def __init__(self, key: bytes, iv: bytes, key_bits: int = 128) -> None:
        if key_bits not in (128, 256):
            raise InvalidParameterError("Key size must be 128 or 256 bits")
        key = bytes(key)
        iv = bytes(iv)
        if len(key) < key_bits // 8:
            raise InvalidParameterError("Key buffer too small")
        if len(iv) < 8:
            raise InvalidParameterError("IV must be at least 8 bytes")

        constants = _SIGMA if key_bits == 256 else _TAU
        second = key[16:32] if key_bits == 256 else key[0:16]
        c = _words(constants)
        k1 = _words(key)
        k2 = _words(second)
        n0, n1 = struct.unpack("<2I", iv[:8])
        self._state = [
            c[0], k1[0], k1[1], k1[2],
            k1[3], c[1], n0, n1,
            0, 0, c[2], k2[0],
            k2[1], k2[2], k2[3], c[3],
        ]

    def _advance(self) -> None:
        self._state[8] = (self._state[8] + 1) & _MASK
        if self._state[8] == 0:
            self._state[9] = (self._state[9] + 1) & _MASK

    def process(self, data: bytes) -> bytes:
        """XOR data with the keystream; a trailing partial block discards the rest of its keystream."""
        data = bytes(data)
        out = bytearray()
        for offset in range(0, len(data), 64):
            stream = _keystream_block(self._state)
            self._advance()
            chunk = data[offset:offset + 64]
            n = len(chunk)
            mixed = int.from_bytes(chunk, "little") ^ int.from_bytes(stream[:n], "little")
            out += mixed.to_bytes(n, "little")
        return bytes(out)

    def encrypt(self, data: bytes) -> bytes:
        """Encrypt data."""
        return self.process(data)

    def decrypt(self, data: bytes) -> bytes:
        """Decrypt data; identical to encryption."""
        return self.process(data)