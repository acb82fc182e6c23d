"""Records collected while building a dictionary, and the loader interface."""

from __future__ import annotations

import abc
from dataclasses import dataclass

ZDB_MAX_KEYWORD_LENGTH = 255
"""Longest keyword, in bytes."""

MAX_ENTRY_LEN = 64 * 1024 * 1024
"""Longest single entry, in bytes."""


@dataclass
class ZdbRecord:
    """One dictionary entry during a build."""

    key: str = ""
    content_offset_in_source: int = 0
    position: int = 0
    content: str = ""
    content_len: int = 0
    line_no: int = 0


class DataLoader(abc.ABC):
    """Loads the content bytes of entries from some source."""

    @abc.abstractmethod
    def load_data(self, entry: ZdbRecord) -> bytes:
        """Return the raw content of entry."""