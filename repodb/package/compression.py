"""
Compression detection for package archives and repository databases
"""

import lzma
import tarfile
from contextlib import contextmanager
from enum import Enum
from pathlib import Path

import zstandard

from repodb.common.errors import UnsupportedFormatError


class Compression(Enum):
    XZ = "xz"
    ZSTD = "zst"
    GZIP = "gz"
    UNSUPPORTED = ""

    @classmethod
    def from_filename(cls, filename) -> "Compression":
        """Select the compression from the final filename extension"""
        suffix = Path(filename).suffix
        for compression in cls:
            if compression is not cls.UNSUPPORTED and suffix == f".{compression.value}":
                return compression
        return cls.UNSUPPORTED


PACKAGE_COMPRESSIONS = (Compression.XZ, Compression.ZSTD)


@contextmanager
def open_package_tar(path):
    """
    Open a package archive as a streaming tarfile.

    Only XZ and Zstandard package archives are accepted.

    Raises:
        UnsupportedFormatError: for any other extension
        OSError: if the file cannot be opened
    """
    compression = Compression.from_filename(path)
    if compression not in PACKAGE_COMPRESSIONS:
        raise UnsupportedFormatError(f"Unsupported package compression: {Path(path).name}")

    with open(path, "rb") as fh:
        if compression is Compression.XZ:
            with lzma.open(fh) as reader, tarfile.open(fileobj=reader, mode="r|") as tar:
                yield tar
        else:
            dctx = zstandard.ZstdDecompressor()
            with dctx.stream_reader(fh) as reader, tarfile.open(fileobj=reader, mode="r|") as tar:
                yield tar
