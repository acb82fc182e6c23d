"""Exception hierarchy for dictionary reading and building."""

from __future__ import annotations


class ZdbError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class CrcMismatchError(ZdbError):
    """A checksum did not match, so the data is corrupt."""

    def __init__(self, expected: int, got: int) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"expected {expected:#x}, got {got:#x}")

    def __str__(self) -> str:
        return f"CRC mismatch: {self.message}"


class ParserError(ZdbError):
    """Structured data (XML, JSON, numbers, URLs) could not be parsed."""

    def __init__(self, source: BaseException | str) -> None:
        self.source = source
        super().__init__(str(source))
        if isinstance(source, BaseException):
            self.__cause__ = source

    def __str__(self) -> str:
        return f"Parser error: {self.message}"


class InvalidDataFormatError(ZdbError, ValueError):
    """Dictionary data is malformed."""

    def __str__(self) -> str:
        return f"Invalid data format: {self.message}"


class InvalidParameterError(ZdbError, ValueError):
    """A function was called with an unusable argument."""

    def __str__(self) -> str:
        return f"Invalid parameter: {self.message}"


class KeyNotFoundError(ZdbError, LookupError):
    """A dictionary key lookup found nothing."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Key not found: {self.key}"


class ProfileNotFoundError(ZdbError, LookupError):
    """A dictionary profile id is unknown."""

    def __init__(self, profile_id: int) -> None:
        self.profile_id = profile_id
        super().__init__(str(profile_id))

    def __str__(self) -> str:
        return f"Profile not found: {self.profile_id}"


class CompressionError(ZdbError):
    """Compression or decompression failed."""

    def __str__(self) -> str:
        return f"Compression error: {self.message}"


class UserInterruptedError(ZdbError):
    """The operation was cancelled by a progress callback."""

    def __init__(self) -> None:
        super().__init__("User interrupted")


class GeneralError(ZdbError):
    """An error that fits no other category."""

    def __str__(self) -> str:
        return f"General error: {self.message}"