"""Block encryption methods used inside dictionary files."""

from __future__ import annotations

import abc
import enum

from .errors import InvalidParameterError
from .salsa20 import Salsa20


class EncryptionMethod(enum.IntEnum):
    """Encryption methods a storage block may use."""

    NONE = 0
    SIMPLE = 1
    SALSA20 = 2


DEFAULT_ENCRYPTION_METHOD = EncryptionMethod.SALSA20


def parse_encryption_method(value: int) -> EncryptionMethod:
    """Return the method for a stored method code."""
    try:
        return EncryptionMethod(value)
    except ValueError:
        raise InvalidParameterError(f"Invalid encryption method:{value}") from None


class Encryptor(abc.ABC):
    """Common interface of all encryptors."""

    @abc.abstractmethod
    def encrypt(self, data: bytes) -> bytes:
        """Return data encrypted."""

    @abc.abstractmethod
    def decrypt(self, data: bytes) -> bytes:
        """Return data decrypted."""


class NoEncryption(Encryptor):
    """Passes data through unchanged."""

    def encrypt(self, data: bytes) -> bytes:
        return bytes(data)

    def decrypt(self, data: bytes) -> bytes:
        return bytes(data)


def _swap_nibbles(b: int) -> int:
    return ((b & 0x0F) << 4) | ((b & 0xF0) >> 4)


class SimpleEncryptor(Encryptor):
    """XOR cipher chained through the previous output byte; the nonce is ignored."""

    def __init__(self, key: bytes, nonce: bytes = b"") -> None:
        self._key = bytes(key)

    def _check(self, data: bytes) -> None:
        if data and not self._key:
            raise InvalidParameterError("Encryption key is empty")

    def encrypt(self, data: bytes) -> bytes:
        data = bytes(data)
        self._check(data)
        key = self._key
        out = bytearray(len(data))
        last = 0x36
        for i, byte in enumerate(data):
            mixed = byte ^ key[i % len(key)] ^ (i & 0xFF) ^ last
            last = _swap_nibbles(mixed)
            out[i] = last
        return bytes(out)

    def decrypt(self, data: bytes) -> bytes:
        buffer = bytearray(data)
        self.decrypt_inplace(buffer)
        return bytes(buffer)

    def decrypt_inplace(self, buffer: bytearray) -> None:
        """Decrypt a mutable buffer in place."""
        self._check(buffer)
        key = self._key
        last = 0x36
        for i, byte in enumerate(buffer):
            buffer[i] = _swap_nibbles(byte) ^ key[i % len(key)] ^ (i & 0xFF) ^ last
            last = byte


class Salsa20Encryptor(Encryptor):
    """Salsa20 with a 128-bit key; the keystream position carries over between calls."""

    def __init__(self, key: bytes, nonce: bytes) -> None:
        self._cipher = Salsa20(key, nonce, 128)

    def encrypt(self, data: bytes) -> bytes:
        return self._cipher.encrypt(data)

    def decrypt(self, data: bytes) -> bytes:
        return self._cipher.decrypt(data)


def get_encryptor(method: EncryptionMethod, key: bytes, nonce: bytes) -> Encryptor:
    """Create the encryptor for a method."""
    method = parse_encryption_method(int(method))
    if method is EncryptionMethod.NONE:
        return NoEncryption()
    if method is EncryptionMethod.SIMPLE:
        return SimpleEncryptor(key, nonce)
    return Salsa20Encryptor(key, nonce)


_ZERO_NONCE = bytes(8)


def encrypt_salsa20(data: bytes, key: bytes) -> bytes:
    """Encrypt data with Salsa20 and an all-zero nonce."""
    return get_encryptor(EncryptionMethod.SALSA20, key, _ZERO_NONCE).encrypt(data)


def decrypt_salsa20(data: bytes, key: bytes) -> bytes:
    """Decrypt data with Salsa20 and an all-zero nonce."""
    return get_encryptor(EncryptionMethod.SALSA20, key, _ZERO_NONCE).decrypt(data)