"""Loader for MDict text sources: key line, content lines, then a ``</>`` line."""

from __future__ import annotations

import os
from collections.abc import Callable

from .errors import InvalidDataFormatError, UserInterruptedError
from .records import MAX_ENTRY_LEN, ZDB_MAX_KEYWORD_LENGTH, DataLoader, ZdbRecord

ProgressCallback = Callable[[int, int], bool]

_BOM = b"\xef\xbb\xbf"


def _decode(line: bytes, line_no: int) -> str:
    try:
        return line.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidDataFormatError(f"Invalid UTF-8 at line {line_no}: {exc}") from exc


def _is_text_end(line: str) -> bool:
    trimmed = line.strip()
    return trimmed == "</>" or not trimmed


class MDictSourceLoader(DataLoader):
    """Scans an MDict source file into records and loads their content on demand.

    ``progress`` is called with the current file position and the file size
    after each entry; a true result cancels the scan.
    """

    def __init__(self, source_file: str | os.PathLike, progress: ProgressCallback | None = None) -> None:
        self.source_file = os.fspath(source_file)
        self._file = open(self.source_file, "rb")
        try:
            self.records = self._scan(progress)
        except BaseException:
            self._file.close()
            raise

    def _scan(self, progress: ProgressCallback | None) -> list[ZdbRecord]:
        f = self._file
        total_size = os.fstat(f.fileno()).st_size
        records: list[ZdbRecord] = []
        line_count = 0
        while True:
            line = f.readline()
            if not line:
                break
            line_count += 1
            if line_count == 1 and line.startswith(_BOM):
                line = line[len(_BOM):]
            key_bytes = line.rstrip(b"\r\n")
            key = _decode(key_bytes, line_count)
            if not key_bytes:
                if f.tell() >= total_size:
                    break
                raise InvalidDataFormatError("Invalid key")
            if len(key_bytes) > ZDB_MAX_KEYWORD_LENGTH:
                raise InvalidDataFormatError("Key too long")

            content_start = f.tell()
            while True:
                content_line = f.readline()
                line_count += 1
                if not content_line or _is_text_end(_decode(content_line, line_count)):
                    break
            content_len = f.tell() - content_start
            if content_len > MAX_ENTRY_LEN:
                raise InvalidDataFormatError("Record too long")

            records.append(
                ZdbRecord(
                    key=key,
                    position=content_start,
                    content_len=content_len,
                    line_no=line_count,
                )
            )
            if progress is not None and progress(f.tell(), total_size):
                raise UserInterruptedError()
        return records

    def load_data(self, entry: ZdbRecord) -> bytes:
        """Read the content bytes of entry from the source file."""
        self._file.seek(entry.position)
        data = self._file.read(entry.content_len)
        if len(data) != entry.content_len:
            raise InvalidDataFormatError("Unexpected end of source file")
        return data

    def close(self) -> None:
        """Close the source file."""
        self._file.close()

    def __enter__(self) -> MDictSourceLoader:
        return self

    def __exit__(self, *args) -> None:
        self.close()