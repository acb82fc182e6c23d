"""Key block layout and header writing for building dictionary files."""

from __future__ import annotations

import dataclasses
import io
import struct
import uuid
import zlib
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import BinaryIO

from .digest import fast_hash_digest
from .errors import InvalidParameterError, UserInterruptedError
from .records import ZdbRecord
from .zdb_config import BuilderConfig, ZdbHeader, header_from_config

ProgressCallback = Callable[[int, int], bool]

# Each key in a key block also carries a terminating zero and an 8-byte offset.
_KEY_EXTRA_SIZE = 1 + 8
_U16_MAX = 0xFFFF


@dataclass
class KeyBlockIndex:
    """Describes one block of keys: its bounds, entries and sizes."""

    first_key: str = ""
    last_key: str = ""
    first_entry_no_in_block: int = 0
    entry_count_in_block: int = 0
    block_length: int = 0
    raw_data_length: int = 0


def _key_bytes(key: str | bytes) -> bytes:
    return key.encode("utf-8") if isinstance(key, str) else bytes(key)


def write_key(writer: BinaryIO, key: str | bytes) -> None:
    """Write a key as a big-endian u16 length, the key bytes and a zero byte.

    The length does not count the terminating zero.
    """
    data = _key_bytes(key)
    if len(data) > _U16_MAX:
        raise InvalidParameterError(f"Key too long: {len(data)} bytes")
    writer.write(struct.pack(">H", len(data)))
    writer.write(data)
    writer.write(b"\x00")


def write_key_block_index(writer: BinaryIO, key_block_index: KeyBlockIndex) -> None:
    """Write one key block index record in its stored form."""
    writer.write(struct.pack(">I", key_block_index.entry_count_in_block))
    write_key(writer, key_block_index.first_key)
    write_key(writer, key_block_index.last_key)
    writer.write(struct.pack(">I", key_block_index.block_length))
    writer.write(struct.pack(">I", key_block_index.raw_data_length))


@dataclass
class ZdbBuilder:
    """Holds the entries of a dictionary being built and lays out its key blocks."""

    config: BuilderConfig
    entries: list[ZdbRecord] = field(default_factory=list)
    db_header: ZdbHeader = field(init=False)
    key_block_indexes: list[KeyBlockIndex] = field(init=False, default_factory=list)
    total_key_index_data_size: int = field(init=False, default=0)

    def __init__(self, config: BuilderConfig, entries: Iterable[ZdbRecord] | None = None) -> None:
        self.config = dataclasses.replace(config)
        self.entries = list(entries) if entries is not None else []
        self.db_header = header_from_config(self.config)
        self.key_block_indexes = []
        self.total_key_index_data_size = 0

    def prepare_key_block_index_unit(
        self, preferred_block_size: int, progress: ProgressCallback | None = None
    ) -> None:
        """Split the entries into key blocks of about ``preferred_block_size`` bytes.

        A block always takes at least one key, even one larger than the
        preferred size. ``progress`` gets the number of entries placed and the
        total after each block; a true result cancels.
        """
        total = len(self.entries)
        sizes = [len(_key_bytes(entry.key)) + _KEY_EXTRA_SIZE for entry in self.entries]
        indexes: list[KeyBlockIndex] = []
        total_size = 0
        i = 0
        while i < total:
            start = i
            block_size = 0
            while i < total:
                if i > start and block_size + sizes[i] > preferred_block_size:
                    break
                block_size += sizes[i]
                i += 1
            indexes.append(
                KeyBlockIndex(
                    first_key=self.entries[start].key,
                    last_key=self.entries[i - 1].key,
                    first_entry_no_in_block=start,
                    entry_count_in_block=i - start,
                    block_length=block_size,
                )
            )
            total_size += block_size
            if progress is not None and progress(i, total):
                raise UserInterruptedError()
        self.key_block_indexes = indexes
        self.total_key_index_data_size = total_size

    def build_db_header(self, writer: BinaryIO) -> None:
        """Stamp the header with today's date and a new UUID, derive the key, and write it.

        The stored form is a big-endian u32 length (including a terminating
        zero), the XML text with that zero, and a little-endian Adler-32 of
        both.
        """
        self.db_header.creation_date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.db_header.uuid = str(uuid.uuid4())
        secret_source = self.config.password or self.db_header.uuid
        self.config.crypto_key = fast_hash_digest(secret_source.encode("utf-8"))
        header_bytes = self.db_header.to_xml().encode("utf-8") + b"\x00"
        writer.write(struct.pack(">I", len(header_bytes)))
        writer.write(header_bytes)
        writer.write(struct.pack("<I", zlib.adler32(header_bytes)))

    def key_block_data(self, key_block_index: KeyBlockIndex) -> bytes:
        """Return the raw bytes of a key block: per entry a u64 offset, the key and a zero."""
        start = key_block_index.first_entry_no_in_block
        end = start + key_block_index.entry_count_in_block
        if start < 0 or end > len(self.entries):
            raise InvalidParameterError("Key block lies outside the entries")
        out = io.BytesIO()
        for entry in self.entries[start:end]:
            out.write(struct.pack(">Q", entry.content_offset_in_source))
            out.write(_key_bytes(entry.key))
            out.write(b"\x00")
        return out.getvalue()

    def key_block_index_data(self) -> bytes:
        """Return all key block index records joined in their stored form."""
        if not self.entries:
            raise InvalidParameterError("No entries")
        out = io.BytesIO()
        for key_block_index in self.key_block_indexes:
            write_key_block_index(out, key_block_index)
        return out.getvalue()