"""
Error taxonomy shared by the package reader and the repository database
"""

from typing import Optional


class RepoDBError(RuntimeError):
    """Base class for every error raised by repodb"""


class RepoIOError(RepoDBError):
    """Open/read/write/rename failure on a filesystem path"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class FormatError(RepoDBError):
    """Malformed control record, desc/files record or archive layout"""


class CodecError(FormatError):
    """Integer field that does not parse as an unsigned 64-bit value"""

    def __init__(self, key: str, value: str):
        super().__init__(f"Invalid integer for '{key}': {value!r}")
        self.key = key
        self.value = value


class MissingControlRecordError(FormatError):
    """Package archive without a control record member"""


class UnsupportedFormatError(FormatError):
    """Archive compression that cannot be read"""


class SigningError(RepoDBError):
    """Detached signature could not be produced"""


U64_MAX = 2 ** 64 - 1


def parse_u64(key: str, value: str) -> int:
    """Parse an unsigned 64-bit decimal integer, raising CodecError on failure"""
    if not value.isascii() or not value.isdigit():
        raise CodecError(key, value)
    number = int(value)
    if number > U64_MAX:
        raise CodecError(key, value)
    return number
