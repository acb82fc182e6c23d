"""Build configuration and the header that describes a built dictionary."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import Any
from xml.sax.saxutils import quoteattr

from .encryption import DEFAULT_ENCRYPTION_METHOD, EncryptionMethod
from .errors import ParserError

_U32_MAX = 0xFFFFFFFF


class SourceType(enum.IntEnum):
    """Format of the data a dictionary is built from."""

    SGD = 105
    MDICT_COMPACT = 106
    MDICT_HTML = 107
    SUGAR_DICT_WITH_PHONETIC = 110
    STAR_DICT = 111
    KDIC = 112
    ZDB = 113
    DIRECTORY = 114

    @property
    def serialized_name(self) -> str:
        """The name this source type has in JSON configuration."""
        return _SOURCE_NAMES[self]

    @classmethod
    def from_serialized_name(cls, name: str) -> SourceType:
        """Return the source type with the given JSON name."""
        for member, member_name in _SOURCE_NAMES.items():
            if member_name == name:
                return member
        raise ParserError(f"unknown variant `{name}`")


_SOURCE_NAMES = {
    SourceType.SGD: "Sgd",
    SourceType.MDICT_COMPACT: "MdictCompact",
    SourceType.MDICT_HTML: "MdictHtml",
    SourceType.SUGAR_DICT_WITH_PHONETIC: "SugarDictWithPhonetic",
    SourceType.STAR_DICT: "StarDict",
    SourceType.KDIC: "Kdic",
    SourceType.ZDB: "Zdb",
    SourceType.DIRECTORY: "Directory",
}


@dataclass
class BuilderConfig:
    """Everything needed to build a dictionary file.

    ``device_id``, ``crypto_key``, ``encryption_method`` and ``build_mdd``
    are runtime settings and are not part of the JSON form.
    """

    input_path: str = ""
    output_file: str = ""
    register_by_email: bool = True
    password: str = ""
    data_source_format: SourceType = SourceType.MDICT_HTML
    content_type: str = "Html"
    default_sorting_locale: str = "root"
    preferred_content_block_size: int = 64 * 1024
    preferred_key_block_size: int = 16 * 1024
    device_id: str = ""
    crypto_key: bytes = b""
    encryption_method: EncryptionMethod = DEFAULT_ENCRYPTION_METHOD
    build_mdd: bool = False

    def to_json(self) -> str:
        """Serialise the persistent settings as compact JSON."""
        document = {
            "input_path": self.input_path,
            "output_file": self.output_file,
            "register_by_email": self.register_by_email,
            "password": self.password,
            "data_source_format": SourceType(self.data_source_format).serialized_name,
            "content_type": self.content_type,
            "default_sorting_locale": self.default_sorting_locale,
            "preferred_content_block_size": self.preferred_content_block_size,
            "preferred_key_block_size": self.preferred_key_block_size,
        }
        return json.dumps(document, ensure_ascii=False, separators=(",", ":"))


def _require(document: dict[str, Any], name: str, kind: type) -> Any:
    if name not in document:
        raise ParserError(f"missing field `{name}`")
    value = document[name]
    # bool is an int subclass; keep the two apart as a strict parser would.
    if kind is int and isinstance(value, bool):
        raise ParserError(f"invalid type for `{name}`: expected u32")
    if not isinstance(value, kind):
        raise ParserError(f"invalid type for `{name}`: expected {kind.__name__}")
    if kind is int and not 0 <= value <= _U32_MAX:
        raise ParserError(f"invalid value for `{name}`: expected u32")
    return value


def config_from_json(text: str) -> BuilderConfig:
    """Parse a configuration from JSON; every persistent field is required."""
    try:
        document = json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        raise ParserError(exc) from exc
    if not isinstance(document, dict):
        raise ParserError("invalid type: expected struct BuilderConfig")
    source_name = _require(document, "data_source_format", str)
    return BuilderConfig(
        input_path=_require(document, "input_path", str),
        output_file=_require(document, "output_file", str),
        register_by_email=_require(document, "register_by_email", bool),
        password=_require(document, "password", str),
        data_source_format=SourceType.from_serialized_name(source_name),
        content_type=_require(document, "content_type", str),
        default_sorting_locale=_require(document, "default_sorting_locale", str),
        preferred_content_block_size=_require(document, "preferred_content_block_size", int),
        preferred_key_block_size=_require(document, "preferred_key_block_size", int),
    )


@dataclass
class ZdbHeader:
    """Metadata stored in the header of a dictionary file."""

    generated_by_engine_version: str = ""
    required_engine_version: str = ""
    compact: bool = False
    register_by: str = ""
    creation_date: str = ""
    data_source_format: int = 0
    style_sheet: str = ""
    uuid: str = ""
    content_type: str = ""
    default_sorting_locale: str = ""

    _ATTRIBUTES = (
        ("GeneratedByEngineVersion", "generated_by_engine_version"),
        ("RequiredEngineVersion", "required_engine_version"),
        ("Compact", "compact"),
        ("RegisterBy", "register_by"),
        ("CreationDate", "creation_date"),
        ("DataSourceFormat", "data_source_format"),
        ("StyleSheet", "style_sheet"),
        ("UUID", "uuid"),
        ("ContentType", "content_type"),
        ("DefaultSortingLocale", "default_sorting_locale"),
    )

    def to_xml(self) -> str:
        """Render the header as a single ``ZDB`` element without an XML declaration."""
        parts = []
        for name, attr in self._ATTRIBUTES:
            value = getattr(self, attr)
            if isinstance(value, bool):
                text = "true" if value else "false"
            else:
                text = str(value)
            parts.append(f"{name}={quoteattr(text)}")
        return "<ZDB " + " ".join(parts) + "/>"


def header_from_config(config: BuilderConfig) -> ZdbHeader:
    """Create a header from build settings; date and UUID are filled in at build time."""
    return ZdbHeader(
        generated_by_engine_version="3.0",
        required_engine_version="3.0",
        compact=False,
        register_by="Yes" if config.register_by_email else "No",
        creation_date="",
        data_source_format=int(config.data_source_format),
        style_sheet="",
        uuid="",
        content_type=config.content_type,
        default_sorting_locale=config.default_sorting_locale,
    )