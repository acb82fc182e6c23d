"""Hash digests: XXH64, RIPEMD-128 and the split fast-hash digest."""

from __future__ import annotations

import struct

from .errors import InvalidParameterError

_M64 = (1 << 64) - 1
_M32 = 0xFFFFFFFF

_P1 = 11400714785074694791
_P2 = 14029467366897019727
_P3 = 1609587929392839161
_P4 = 9650029242287828579
_P5 = 2870177450012600261


def _rotl64(v: int, r: int) -> int:
    return ((v << r) | (v >> (64 - r))) & _M64


def _xxh_round(acc: int, lane: int) -> int:
    acc = (acc + lane * _P2) & _M64
    return (_rotl64(acc, 31) * _P1) & _M64


def _xxh_merge(h: int, v: int) -> int:
    h ^= _xxh_round(0, v)
    return (h * _P1 + _P4) & _M64


def xxh64(data: bytes, seed: int = 0) -> int:
    """Return the 64-bit XXH64 hash of data."""
    data = bytes(data)
    length = len(data)
    pos = 0
    if length >= 32:
        v1 = (seed + _P1 + _P2) & _M64
        v2 = (seed + _P2) & _M64
        v3 = seed & _M64
        v4 = (seed - _P1) & _M64
        stripes_end = length - length % 32
        for lane1, lane2, lane3, lane4 in struct.iter_unpack("<4Q", data[:stripes_end]):
            v1 = _xxh_round(v1, lane1)
            v2 = _xxh_round(v2, lane2)
            v3 = _xxh_round(v3, lane3)
            v4 = _xxh_round(v4, lane4)
        pos = stripes_end
        h = (_rotl64(v1, 1) + _rotl64(v2, 7) + _rotl64(v3, 12) + _rotl64(v4, 18)) & _M64
        for v in (v1, v2, v3, v4):
            h = _xxh_merge(h, v)
    else:
        h = (seed + _P5) & _M64

    h = (h + length) & _M64

    while pos + 8 <= length:
        (lane,) = struct.unpack_from("<Q", data, pos)
        h ^= _xxh_round(0, lane)
        h = (_rotl64(h, 27) * _P1 + _P4) & _M64
        pos += 8
    if pos + 4 <= length:
        (word,) = struct.unpack_from("<I", data, pos)
        h ^= (word * _P1) & _M64
        h = (_rotl64(h, 23) * _P2 + _P3) & _M64
        pos += 4
    for byte in data[pos:]:
        h ^= (byte * _P5) & _M64
        h = (_rotl64(h, 11) * _P1) & _M64

    h ^= h >> 33
    h = (h * _P2) & _M64
    h ^= h >> 29
    h = (h * _P3) & _M64
    h ^= h >> 32
    return h


_R_LEFT = (
    0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15,
    7, 4, 13, 1, 10, 6, 15, 3, 12, 0, 9, 5, 2, 14, 11, 8,
    3, 10, 14, 4, 9, 15, 8, 1, 2, 7, 0, 6, 13, 11, 5, 12,
    1, 9, 11, 10, 0, 8, 12, 4, 13, 3, 7, 15, 14, 5, 6, 2,
)
_R_RIGHT = (
    5, 14, 7, 0, 9, 2, 11, 4, 13, 6, 15, 8, 1, 10, 3, 12,
    6, 11, 3, 7, 0, 13, 5, 10, 14, 15, 8, 12, 4, 9, 1, 2,
    15, 5, 1, 3, 7, 14, 6, 9, 11, 8, 12, 2, 10, 0, 4, 13,
    8, 6, 4, 1, 3, 11, 15, 0, 5, 12, 2, 13, 9, 7, 10, 14,
)
_S_LEFT = (
    11, 14, 15, 12, 5, 8, 7, 9, 11, 13, 14, 15, 6, 7, 9, 8,
    7, 6, 8, 13, 11, 9, 7, 15, 7, 12, 15, 9, 11, 7, 13, 12,
    11, 13, 6, 7, 14, 9, 13, 15, 14, 8, 13, 6, 5, 12, 7, 5,
    11, 12, 14, 15, 14, 15, 9, 8, 9, 14, 5, 6, 8, 6, 5, 12,
)
_S_RIGHT = (
    8, 9, 9, 11, 13, 15, 15, 5, 7, 7, 8, 11, 14, 14, 12, 6,
    9, 13, 15, 7, 12, 8, 9, 11, 7, 7, 12, 7, 6, 15, 13, 11,
    9, 7, 15, 11, 8, 6, 6, 14, 12, 13, 5, 14, 13, 13, 7, 5,
    15, 5, 8, 11, 14, 14, 6, 14, 6, 9, 12, 9, 12, 5, 15, 8,
)
_K_LEFT = (0x00000000, 0x5A827999, 0x6ED9EBA1, 0x8F1BBCDC)
_K_RIGHT = (0x50A28BE6, 0x5C4DD124, 0x6D703EF3, 0x00000000)


def _f(x: int, y: int, z: int) -> int:
    return x ^ y ^ z


def _g(x: int, y: int, z: int) -> int:
    return (x & y) | (~x & z)


def _h(x: int, y: int, z: int) -> int:
    return ((x | (~y & _M32)) ^ z) & _M32


def _i(x: int, y: int, z: int) -> int:
    return (x & z) | (y & ~z & _M32)


_F_LEFT = (_f, _g, _h, _i)
_F_RIGHT = (_i, _h, _g, _f)


def _rotl32(v: int, r: int) -> int:
    return ((v << r) | (v >> (32 - r))) & _M32


def _ripemd128_compress(state: tuple[int, int, int, int], block: bytes) -> tuple[int, int, int, int]:
    words = struct.unpack("<16I", block)
    al, bl, cl, dl = state
    ar, br, cr, dr = state
    for step in range(64):
        rnd = step // 16
        t = _rotl32(
            (al + (_F_LEFT[rnd](bl, cl, dl) & _M32) + words[_R_LEFT[step]] + _K_LEFT[rnd]) & _M32,
            _S_LEFT[step],
        )
        al, dl, cl, bl = dl, cl, bl, t
        t = _rotl32(
            (ar + (_F_RIGHT[rnd](br, cr, dr) & _M32) + words[_R_RIGHT[step]] + _K_RIGHT[rnd]) & _M32,
            _S_RIGHT[step],
        )
        ar, dr, cr, br = dr, cr, br, t
    h0, h1, h2, h3 = state
    return (
        (h1 + cl + dr) & _M32,
        (h2 + dl + ar) & _M32,
        (h3 + al + br) & _M32,
        (h0 + bl + cr) & _M32,
    )


def ripemd128(data: bytes) -> bytes:
    """Return the 16-byte RIPEMD-128 digest of data."""
    data = bytes(data)
    padded = data + b"\x80" + bytes((55 - len(data)) % 64) + struct.pack("<Q", (len(data) * 8) & _M64)
    state = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476)
    for offset in range(0, len(padded), 64):
        state = _ripemd128_compress(state, padded[offset:offset + 64])
    return struct.pack("<4I", *state)


def fast_hash_digest(data: bytes) -> bytes:
    """Hash each half of data with XXH64 and join the big-endian results.

    The first half holds the extra byte of an odd length; a one-byte input
    yields only eight bytes.
    """
    data = bytes(data)
    if not data:
        raise InvalidParameterError("Input is empty")
    first_len = (len(data) + 1) // 2
    digest = xxh64(data[:first_len], 0).to_bytes(8, "big")
    if len(data) > 1:
        digest += xxh64(data[first_len:], 0).to_bytes(8, "big")
    return digest


def ripemd_digest(data: bytes) -> bytes:
    """Return the RIPEMD-128 digest of data."""
    return ripemd128(data)