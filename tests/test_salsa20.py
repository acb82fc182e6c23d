import pytest

from mdictkit.errors import InvalidParameterError
from mdictkit.salsa20 import Salsa20

KEY16 = bytes(range(16))
KEY32 = bytes(range(32))
IV = bytes(8)


def test_round_trip_128():
    plain = b"The quick brown fox jumps over the lazy dog" * 5
    cipher = Salsa20(KEY16, IV).encrypt(plain)
    assert len(cipher) == len(plain)
    assert cipher != plain
    assert Salsa20(KEY16, IV).decrypt(cipher) == plain


def test_round_trip_256():
    plain = bytes(range(200))
    cipher = Salsa20(KEY32, IV, 256).encrypt(plain)
    assert Salsa20(KEY32, IV, 256).decrypt(cipher) == plain


def test_empty_input_does_not_advance():
    s = Salsa20(KEY16, IV)
    assert s.process(b"") == b""
    assert s.process(b"abc") == Salsa20(KEY16, IV).process(b"abc")


def test_keystream_xor_property():
    data = bytes(range(100))
    stream = Salsa20(KEY16, IV).process(bytes(100))
    expected = bytes(a ^ b for a, b in zip(data, stream))
    assert Salsa20(KEY16, IV).process(data) == expected


def test_block_aligned_chunks_match_whole():
    data = bytes(range(256)) * 2
    whole = Salsa20(KEY16, IV).process(data)
    s = Salsa20(KEY16, IV)
    parts = s.process(data[:64]) + s.process(data[64:192]) + s.process(data[192:])
    assert parts == whole


def test_partial_block_discards_remaining_keystream():
    a = b"0123456789"
    b = b"abcdefghij"
    s = Salsa20(KEY16, IV)
    first = s.process(a)
    second = s.process(b)
    whole = Salsa20(KEY16, IV).process(a + b)
    assert first == whole[:10]
    skip = Salsa20(KEY16, IV)
    skip.process(bytes(64))
    assert second == skip.process(b)


def test_nonce_and_key_change_output():
    data = bytes(64)
    base = Salsa20(KEY16, IV).process(data)
    assert Salsa20(KEY16, b"\x01" + bytes(7)).process(data) != base
    assert Salsa20(bytes(16), IV).process(data) != base


def test_128_bit_ignores_bytes_beyond_16():
    data = bytes(70)
    assert Salsa20(KEY32, IV).process(data) == Salsa20(KEY16, IV).process(data)


@pytest.mark.parametrize(
    "key, iv, bits",
    [(KEY16, IV, 192), (bytes(8), IV, 128), (KEY16, IV, 256), (KEY16, bytes(4), 128)],
)
def test_invalid_setup_raises(key, iv, bits):
    with pytest.raises(InvalidParameterError):
        Salsa20(key, iv, bits)