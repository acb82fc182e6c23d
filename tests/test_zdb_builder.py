import io
import re
import struct
import zlib

import pytest

from mdictkit.digest import fast_hash_digest
from mdictkit.errors import InvalidParameterError, UserInterruptedError
from mdictkit.records import ZdbRecord
from mdictkit.zdb_builder import (
    KeyBlockIndex,
    ZdbBuilder,
    write_key,
    write_key_block_index,
)
from mdictkit.zdb_config import BuilderConfig


def _records(keys, offsets=None):
    offsets = offsets or [0] * len(keys)
    return [ZdbRecord(key=k, content_offset_in_source=o) for k, o in zip(keys, offsets)]


def test_write_key_layout():
    buf = io.BytesIO()
    write_key(buf, "abc")
    assert buf.getvalue() == b"\x00\x03abc\x00"


def test_write_key_counts_utf8_bytes():
    buf = io.BytesIO()
    write_key(buf, "é")
    assert buf.getvalue() == b"\x00\x02\xc3\xa9\x00"


def test_write_key_too_long():
    with pytest.raises(InvalidParameterError):
        write_key(io.BytesIO(), b"x" * 70000)


def test_write_key_block_index_layout():
    buf = io.BytesIO()
    index = KeyBlockIndex(first_key="a", last_key="b", entry_count_in_block=2,
                          block_length=20, raw_data_length=22)
    write_key_block_index(buf, index)
    assert buf.getvalue() == (
        b"\x00\x00\x00\x02" + b"\x00\x01a\x00" + b"\x00\x01b\x00"
        + b"\x00\x00\x00\x14" + b"\x00\x00\x00\x16"
    )


def test_prepare_splits_blocks():
    builder = ZdbBuilder(BuilderConfig(), _records(["a", "b", "c"]))
    builder.prepare_key_block_index_unit(20)
    blocks = builder.key_block_indexes
    assert [b.entry_count_in_block for b in blocks] == [2, 1]
    assert [(b.first_key, b.last_key) for b in blocks] == [("a", "b"), ("c", "c")]
    assert builder.total_key_index_data_size == sum(b.block_length for b in blocks)


def test_prepare_invariants():
    keys = [f"key{n}" for n in range(50)]
    builder = ZdbBuilder(BuilderConfig(), _records(keys))
    builder.prepare_key_block_index_unit(64)
    blocks = builder.key_block_indexes
    assert sum(b.entry_count_in_block for b in blocks) == len(keys)
    expected_start = 0
    for b in blocks:
        assert b.first_entry_no_in_block == expected_start
        assert b.block_length <= 64
        expected_start += b.entry_count_in_block


def test_oversized_key_gets_own_block():
    builder = ZdbBuilder(BuilderConfig(), _records(["x" * 100, "y"]))
    builder.prepare_key_block_index_unit(16)
    assert [b.entry_count_in_block for b in builder.key_block_indexes] == [1, 1]


def test_prepare_empty():
    builder = ZdbBuilder(BuilderConfig())
    builder.prepare_key_block_index_unit(16)
    assert builder.key_block_indexes == []
    assert builder.total_key_index_data_size == 0


def test_prepare_cancelled():
    builder = ZdbBuilder(BuilderConfig(), _records(["a", "b"]))
    with pytest.raises(UserInterruptedError):
        builder.prepare_key_block_index_unit(16, lambda current, total: True)


def test_prepare_progress_reports_total():
    calls = []
    builder = ZdbBuilder(BuilderConfig(), _records(["a", "b", "c"]))
    builder.prepare_key_block_index_unit(10, lambda c, t: calls.append((c, t)) or False)
    assert calls[-1] == (3, 3)


def test_key_block_data():
    builder = ZdbBuilder(BuilderConfig(), _records(["a", "bc"], [0, 5]))
    builder.prepare_key_block_index_unit(1024)
    data = builder.key_block_data(builder.key_block_indexes[0])
    assert data == b"\x00" * 8 + b"a\x00" + b"\x00" * 7 + b"\x05" + b"bc\x00"


def test_key_block_data_out_of_range():
    builder = ZdbBuilder(BuilderConfig(), _records(["a"]))
    with pytest.raises(InvalidParameterError):
        builder.key_block_data(KeyBlockIndex(first_entry_no_in_block=0, entry_count_in_block=3))


def test_key_block_index_data_round_trip():
    builder = ZdbBuilder(BuilderConfig(), _records(["a", "b", "c"]))
    builder.prepare_key_block_index_unit(20)
    expected = io.BytesIO()
    for b in builder.key_block_indexes:
        write_key_block_index(expected, b)
    assert builder.key_block_index_data() == expected.getvalue()


def test_key_block_index_data_requires_entries():
    with pytest.raises(InvalidParameterError):
        ZdbBuilder(BuilderConfig()).key_block_index_data()


def _parse_header(raw):
    (length,) = struct.unpack(">I", raw[:4])
    header = raw[4:4 + length]
    (checksum,) = struct.unpack("<I", raw[4 + length:8 + length])
    return length, header, checksum, raw[8 + length:]


def test_build_db_header_layout():
    builder = ZdbBuilder(BuilderConfig())
    buf = io.BytesIO()
    builder.build_db_header(buf)
    length, header, checksum, rest = _parse_header(buf.getvalue())
    assert rest == b""
    assert header.endswith(b"\x00")
    assert checksum == zlib.adler32(header)
    text = header[:-1].decode("utf-8")
    assert text == builder.db_header.to_xml()
    assert text.startswith("<ZDB ")
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", builder.db_header.creation_date)


def test_crypto_key_from_uuid():
    builder = ZdbBuilder(BuilderConfig())
    builder.build_db_header(io.BytesIO())
    assert builder.config.crypto_key == fast_hash_digest(builder.db_header.uuid.encode())
    assert f'UUID="{builder.db_header.uuid}"' in builder.db_header.to_xml()


def test_crypto_key_from_password_and_config_untouched():
    password = "password"
    config = BuilderConfig(password=password)
    builder = ZdbBuilder(config)
    builder.build_db_header(io.BytesIO())
    assert builder.config.crypto_key == fast_hash_digest(b"password")
    assert config.crypto_key == b""


def test_header_from_config_settings():
    builder = ZdbBuilder(BuilderConfig(register_by_email=False, content_type="Text"))
    assert builder.db_header.register_by == "No"
    assert builder.db_header.content_type == "Text"
    assert builder.db_header.generated_by_engine_version == "3.0"