# mdictkit

Pure-Python building blocks for MDict-style dictionary databases: the
ciphers and digests the format relies on, a loader for MDict text sources,
the build configuration and header, and the pieces of a builder that lay
out and serialise key blocks and the key block index. It has no
third-party dependencies.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## What is inside

| Module | Contents |
| --- | --- |
| `mdictkit.errors` | `ZdbError` and its subclasses: `CrcMismatchError`, `ParserError`, `InvalidDataFormatError`, `InvalidParameterError`, `KeyNotFoundError`, `ProfileNotFoundError`, `CompressionError`, `UserInterruptedError`, `GeneralError` |
| `mdictkit.salsa20` | `Salsa20`, the 8-round Salsa20 stream cipher with a 64-bit nonce and 128- or 256-bit keys |
| `mdictkit.digest` | `xxh64`, `ripemd128`, `fast_hash_digest`, `ripemd_digest` |
| `mdictkit.encryption` | `EncryptionMethod`, `parse_encryption_method`, `Encryptor`, `NoEncryption`, `SimpleEncryptor`, `Salsa20Encryptor`, `get_encryptor`, `encrypt_salsa20`, `decrypt_salsa20` |
| `mdictkit.records` | `ZdbRecord`, the `DataLoader` interface, `ZDB_MAX_KEYWORD_LENGTH`, `MAX_ENTRY_LEN` |
| `mdictkit.mdict_source` | `MDictSourceLoader`, which scans an MDict text source |
| `mdictkit.zdb_config` | `SourceType`, `BuilderConfig`, `ZdbHeader`, `config_from_json`, `header_from_config` |
| `mdictkit.zdb_builder` | `ZdbBuilder`, `KeyBlockIndex`, `write_key`, `write_key_block_index` |

The errors the package detects are raised as subclasses of
`mdictkit.errors.ZdbError`, so `except ZdbError` catches them.
`InvalidParameterError` and `InvalidDataFormatError` are also `ValueError`s;
`KeyNotFoundError` and `ProfileNotFoundError` are also `LookupError`s.
Errors from the operating system, such as a missing file, come through as
the usual `OSError`.

## Digests

`xxh64(data, seed)` returns the 64-bit XXH64 hash as an integer and
`ripemd128(data)` (also available as `ripemd_digest`) the 16-byte RIPEMD-128
digest.

`fast_hash_digest` splits its input in two halves, the first taking the
extra byte of an odd length, and joins the big-endian XXH64 (seed 0) of
each half. The result is 16 bytes, except for one-byte input, which yields
only the first 8. Empty input raises `InvalidParameterError`.

```python
from mdictkit.digest import fast_hash_digest, ripemd_digest, xxh64

digest = fast_hash_digest(b"some text")
assert len(digest) == 16

checksum = ripemd_digest(b"block data")   # 16 bytes
value = xxh64(b"block data", 0)           # int
```

## Encryption

Three methods are selected by `EncryptionMethod`: `NONE`, `SIMPLE` (a
nibble-swapping XOR scheme chained through the previous output byte; the
nonce is ignored) and `SALSA20`, the default. Every encryptor has
`encrypt(data)` and `decrypt(data)`, both returning new `bytes`;
`SimpleEncryptor` also has `decrypt_inplace(buffer)` for a `bytearray`.

```python
from mdictkit.encryption import EncryptionMethod, decrypt_salsa20, encrypt_salsa20, get_encryptor

key = bytes(range(16))

cipher_text = encrypt_salsa20(b"hello world", key)
assert decrypt_salsa20(cipher_text, key) == b"hello world"

encryptor = get_encryptor(EncryptionMethod.SIMPLE, key, b"")
scrambled = encryptor.encrypt(b"hello world")
assert encryptor.decrypt(scrambled) == b"hello world"
```

`encrypt_salsa20` and `decrypt_salsa20` use a 128-bit key and an all-zero
nonce. `parse_encryption_method` turns the numeric code stored in a file
into an `EncryptionMethod` and raises `InvalidParameterError` for unknown
codes.

The raw cipher is available too:

```python
from mdictkit.salsa20 import Salsa20

stream = Salsa20(bytes(16), bytes(8), 128)
data = stream.encrypt(b"payload")
```

A `Salsa20` object (and so a `Salsa20Encryptor`) advances its block counter
with every 64-byte block it uses, and a call that ends in a partial block
discards the rest of that block's keystream. Create a new object to start
over from the beginning of the keystream.

## Reading an MDict text source

An MDict source file holds one entry after another: a line with the
headword, the entry's content lines, and a line holding `</>` (a blank
line also ends an entry).

```
apple
<b>apple</b> a round fruit
</>
banana
<b>banana</b> a long fruit
</>
```

`MDictSourceLoader` scans such a file as UTF-8 (a leading byte-order mark is
skipped). It raises `InvalidDataFormatError` for an empty headword before the
end of the file, a headword longer than 255 bytes, an entry longer than
64 MiB or text that is not UTF-8. The scanned entries are in its `records`
list as `ZdbRecord` objects, each holding the key, the byte position and
length of its content (including the closing `</>` line) and a line number.
`load_data(record)` reads that content back as bytes. The loader is a
context manager and closes its file on exit.

```python
from mdictkit.mdict_source import MDictSourceLoader

with MDictSourceLoader("words.txt", None) as loader:
    for record in loader.records:
        print(record.key, loader.load_data(record))
```

The second argument is an optional progress callback, called after each
entry with the current file position and the file size; when it returns a
true value the scan raises `UserInterruptedError`.

## Builder configuration

`BuilderConfig` carries the build settings: input and output paths,
whether registration is by e-mail, a password, the source format
(`SourceType`), content type (default `"Html"`), sorting locale (default
`"root"`) and preferred block sizes (64 KiB for content, 16 KiB for keys).
`to_json()` writes those settings; `config_from_json` reads them back and
requires every one of them, raising `ParserError` otherwise. The fields
`device_id`, `crypto_key`, `encryption_method` and `build_mdd` are runtime
settings and are not part of the JSON form.

`header_from_config` builds a `ZdbHeader` (engine versions `3.0`,
`RegisterBy` `Yes` or `No`, the source format code, content type and
locale); `ZdbHeader.to_xml()` renders it as a single `<ZDB .../>` element.

```python
from mdictkit.zdb_config import config_from_json, header_from_config

with open("build.json", encoding="utf-8") as f:
    config = config_from_json(f.read())
header = header_from_config(config)
print(header.to_xml())
```

## Building key structures

`ZdbBuilder` takes a configuration and a list of `ZdbRecord` entries, in the
order they are to be stored.

- `build_db_header(writer)` stamps the header with today's UTC date and a
  new UUID, sets `config.crypto_key` to `fast_hash_digest` of the password
  (or of the UUID when there is no password), and writes a big-endian
  length, the XML text with a terminating zero, and a little-endian
  Adler-32 of that text.
- `prepare_key_block_index_unit(preferred_block_size, progress)` splits the
  keys into `KeyBlockIndex` blocks of about that many bytes (each key counts
  its length plus 9); a block always takes at least one key.
- `key_block_data(key_block_index)` returns a block's raw bytes: for each
  entry a big-endian u64 content offset, the key and a zero byte.
- `key_block_index_data()` returns every index record joined, as written by
  `write_key_block_index`; it raises `InvalidParameterError` when there are
  no entries.

```python
import io

from mdictkit.records import ZdbRecord
from mdictkit.zdb_builder import ZdbBuilder
from mdictkit.zdb_config import BuilderConfig

entries = [ZdbRecord(key="apple"), ZdbRecord(key="banana")]
builder = ZdbBuilder(BuilderConfig(), entries)

header = io.BytesIO()
builder.build_db_header(header)

builder.prepare_key_block_index_unit(16 * 1024, None)
first_block = builder.key_block_data(builder.key_block_indexes[0])
index_bytes = builder.key_block_index_data()
```

## What this package does not do

- It does not read `.mdx`, `.mdd` or other dictionary database files, look
  up words or extract resources.
- It does not compress blocks, write content blocks or units, or assemble a
  complete dictionary file; it provides the header, key block and key block
  index pieces only.
- It does not sort entries by locale; `ZdbBuilder` keeps the order it is
  given.
- It has no command-line program.