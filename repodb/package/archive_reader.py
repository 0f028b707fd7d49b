"""
Package Archive Reader Module - Extracts metadata, file list and checksums from built package archives
"""

import base64
import hashlib
import lzma
import logging
import os
import tarfile
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

import zstandard

from repodb import config as defaults
from repodb.common.errors import (
    FormatError,
    MissingControlRecordError,
    RepoIOError,
    SigningError,
)
from repodb.package.compression import open_package_tar
from repodb.package.control_record import ControlRecord, ControlRecordParser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Package:
    """A built package archive: its control record plus facts about the archive file"""

    control: ControlRecord
    archive_size: int
    md5: str
    sha256: str
    signature_base64: str
    archive_filename: str
    member_files: Tuple[str, ...]

    @property
    def name(self) -> str:
        return self.control.name

    @property
    def version(self) -> str:
        return self.control.version


class PackageArchiveReader:
    """Loads Package values from package archives on disk"""

    def __init__(self, signer=None):
        """
        Args:
            signer: Optional object with sign_file(input_path, sig_path). When set,
                    archives without a detached signature are signed before loading.
        """
        self.signer = signer

    def load(self, path) -> Package:
        """
        Load a package archive.

        Raises:
            RepoIOError: if the archive or its signature cannot be read
            FormatError: if the archive or its control record is malformed
            SigningError: if a configured signer fails
        """
        path = Path(path)
        logger.debug(f"Loading package archive {path}")

        control, member_files = self._read_members(path)

        sig_path = Path(str(path) + defaults.SIG_SUFFIX)
        if self.signer is not None and not sig_path.exists():
            self._sign(path, sig_path)

        try:
            md5, sha256 = self._digest(path)
            signature_base64 = self._read_signature(sig_path)
            archive_size = os.stat(path).st_size
        except OSError as e:
            raise RepoIOError(f"Unable to read {path}: {e}", str(path)) from e

        return Package(
            control=control,
            archive_size=archive_size,
            md5=md5,
            sha256=sha256,
            signature_base64=signature_base64,
            archive_filename=path.name,
            member_files=member_files,
        )

    def _sign(self, path: Path, sig_path: Path):
        try:
            self.signer.sign_file(path, sig_path)
        except SigningError:
            raise
        except OSError as e:
            raise SigningError(f"Unable to sign {path}: {e}") from e

    @staticmethod
    def _read_members(path: Path) -> Tuple[ControlRecord, Tuple[str, ...]]:
        """Scan the archive once for the control record and the member file list"""
        control = None
        member_files = []

        try:
            with open_package_tar(path) as tar:
                for member in tar:
                    name = member.name
                    if name == defaults.CONTROL_RECORD_NAME and member.isreg():
                        body = tar.extractfile(member).read()
                        try:
                            text = body.decode('utf-8')
                        except UnicodeDecodeError as e:
                            raise FormatError(f"{defaults.CONTROL_RECORD_NAME} in {path} is not UTF-8") from e
                        control = ControlRecordParser.parse(text)
                    if not name.startswith('.'):
                        member_files.append(name + '/' if member.isdir() else name)
        except (tarfile.TarError, lzma.LZMAError, zstandard.ZstdError, EOFError) as e:
            raise FormatError(f"Corrupt package archive {path}: {e}") from e
        except OSError as e:
            raise RepoIOError(f"Unable to read {path}: {e}", str(path)) from e

        if control is None:
            raise MissingControlRecordError(f"{defaults.CONTROL_RECORD_NAME} not found in {path}")

        return control, tuple(member_files)

    @staticmethod
    def _digest(path: Path) -> Tuple[str, str]:
        """MD5 and SHA256 over the raw archive bytes"""
        md5 = hashlib.md5()
        sha256 = hashlib.sha256()
        with open(path, 'rb') as f:
            for chunk in iter(lambda: f.read(defaults.HASH_CHUNK_SIZE), b''):
                md5.update(chunk)
                sha256.update(chunk)
        return md5.hexdigest(), sha256.hexdigest()

    @staticmethod
    def _read_signature(sig_path: Path) -> str:
        try:
            with open(sig_path, 'rb') as f:
                return base64.b64encode(f.read()).decode('ascii')
        except FileNotFoundError:
            return ""


def load_package(path, signer=None) -> Package:
    """Convenience wrapper around PackageArchiveReader(signer).load(path)"""
    return PackageArchiveReader(signer=signer).load(path)
