"""
Files Codec Module - Reads and writes the per-package files record of a repository database
"""

from typing import List, Sequence

from repodb.common.errors import FormatError
from repodb.common.text_utils import split_lines

FILES_HEADER = "%FILES%"


class FilesCodec:
    """Encodes and decodes files records"""

    @staticmethod
    def decode(body: str) -> List[str]:
        """
        Parse a files record.

        The first non-blank line must be %FILES%. Every following line is
        kept verbatim as one path, in order.

        Raises:
            FormatError: if the %FILES% header is missing
        """
        lines = split_lines(body)
        index = 0
        while index < len(lines) and not lines[index].strip():
            index += 1
        if index == len(lines) or lines[index] != FILES_HEADER:
            raise FormatError("files record does not start with %FILES%")
        return lines[index + 1:]

    @staticmethod
    def encode(files: Sequence[str]) -> bytes:
        lines = [FILES_HEADER]
        lines.extend(files)
        return ("\n".join(lines) + "\n").encode('utf-8')
