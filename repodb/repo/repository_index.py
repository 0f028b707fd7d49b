"""
Repository Index Module - Loads, mutates and atomically saves a repository database archive
"""

import gzip
import io
import logging
import os
import tarfile
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from repodb import config as defaults
from repodb.common.errors import FormatError, RepoIOError, SigningError
from repodb.repo.desc_codec import Desc, DescCodec
from repodb.repo.files_codec import FilesCodec

logger = logging.getLogger(__name__)


@dataclass
class PackageEntry:
    desc: Desc
    files: List[str] = field(default_factory=list)


class RepositoryIndex:
    """
    In-memory, name-keyed view of one repository database archive.

    The same type serves the lightweight db (save(include_files=False)) and
    the files database (save(include_files=True)). Instances are not safe
    for concurrent use; callers serialize load/add/remove/save per path.
    """

    def __init__(self, path, signer=None):
        """
        Args:
            path: Database archive path (e.g. repo/os/x86_64/repo.db)
            signer: Optional object with sign_file(input_path, sig_path)
        """
        self.path = Path(path)
        self.signer = signer
        self._entries: Dict[str, PackageEntry] = {}

    @property
    def progress_path(self) -> Path:
        return Path(str(self.path) + defaults.PROGRESS_SUFFIX)

    @property
    def sig_path(self) -> Path:
        return Path(str(self.path) + defaults.SIG_SUFFIX)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[PackageEntry]:
        return iter(self._entries.values())

    def names(self) -> List[str]:
        return sorted(self._entries)

    def get(self, name: str) -> Optional[PackageEntry]:
        return self._entries.get(name)

    def load(self):
        """
        Read the archive at self.path into the index.

        A missing file is an empty repository and not an error. Nothing is
        merged into the index unless the whole archive decodes.

        Raises:
            RepoIOError: if the archive cannot be read
            FormatError: on an unexpected member or a malformed record
        """
        try:
            tar = tarfile.open(self.path, "r:gz")
        except FileNotFoundError:
            logger.info(f"Repository database {self.path} does not exist yet, starting empty")
            return
        except tarfile.TarError as e:
            raise FormatError(f"Corrupt repository database {self.path}: {e}") from e
        except OSError as e:
            raise RepoIOError(f"Unable to open {self.path}: {e}", str(self.path)) from e

        try:
            with tar:
                descs, files = self._scan(tar)
        except (tarfile.TarError, gzip.BadGzipFile, zlib.error, EOFError) as e:
            raise FormatError(f"Corrupt repository database {self.path}: {e}") from e
        except OSError as e:
            raise RepoIOError(f"Unable to read {self.path}: {e}", str(self.path)) from e

        for package_dir, desc in descs.items():
            entry = PackageEntry(desc=desc, files=files.get(package_dir, []))
            self._entries[desc.name] = entry

        logger.info(f"Loaded {len(descs)} packages from {self.path}")

    def _scan(self, tar):
        """Decode desc and files members, keyed by their package directory"""
        descs: Dict[str, Desc] = {}
        files: Dict[str, List[str]] = {}

        for member in tar:
            if member.isdir():
                continue
            if not member.isreg():
                raise FormatError(f"Unknown file type in {self.path}: {member.name}")

            parts = member.name.split('/', 1)
            if len(parts) != 2:
                raise FormatError(f"Invalid pathname entry in {self.path}: {member.name}")
            package_dir, member_name = parts

            try:
                body = tar.extractfile(member).read().decode('utf-8')
            except UnicodeDecodeError as e:
                raise FormatError(f"{member.name} in {self.path} is not UTF-8") from e
            if member_name == "desc":
                descs[package_dir] = DescCodec.decode(body)
            elif member_name == "files":
                files[package_dir] = FilesCodec.decode(body)
            elif member_name == "depends":
                logger.debug(f"Ignoring legacy depends member {member.name}")
            else:
                raise FormatError(f"Unknown pathname in {self.path}: {member.name}")

        return descs, files

    def add(self, package):
        """Insert or replace the entry for package.name"""
        desc = Desc.from_package(package)
        self._entries[desc.name] = PackageEntry(desc=desc, files=list(package.member_files))
        logger.debug(f"Added {desc.name} {desc.version} to {self.path.name}")

    def remove(self, name: str):
        """Drop the entry for name; unknown names are ignored"""
        if self._entries.pop(name, None) is not None:
            logger.debug(f"Removed {name} from {self.path.name}")

    def save(self, include_files: bool = False):
        """
        Write the index to a temporary archive, sign it, then rename it over self.path.

        The rename is the only commit point: on any earlier failure the
        previous database is left untouched and the .progress file may remain.

        Raises:
            RepoIOError: on write or rename failure
            SigningError: if the configured signer fails
        """
        tmp_path = self.progress_path
        try:
            with tarfile.open(tmp_path, "w:gz", format=tarfile.GNU_FORMAT) as tar:
                for name in sorted(self._entries):
                    self._write_entry(tar, self._entries[name], include_files)
        except OSError as e:
            raise RepoIOError(f"Unable to write {tmp_path}: {e}", str(tmp_path)) from e

        if self.signer is not None:
            try:
                self.signer.sign_file(tmp_path, self.sig_path)
            except SigningError:
                raise
            except OSError as e:
                raise SigningError(f"Unable to sign {tmp_path}: {e}") from e

        try:
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise RepoIOError(f"Unable to rename {tmp_path} to {self.path}: {e}", str(self.path)) from e

        logger.info(f"✅ Saved {len(self._entries)} packages to {self.path}")

    @staticmethod
    def _write_entry(tar, entry: PackageEntry, include_files: bool):
        package_dir = f"{entry.desc.name}-{entry.desc.version}"

        dir_info = tarfile.TarInfo(package_dir + "/")
        dir_info.type = tarfile.DIRTYPE
        dir_info.mode = 0o755
        tar.addfile(dir_info)

        RepositoryIndex._add_file(tar, f"{package_dir}/desc", DescCodec.encode(entry.desc))
        if include_files:
            RepositoryIndex._add_file(tar, f"{package_dir}/files", FilesCodec.encode(entry.files))

    @staticmethod
    def _add_file(tar, name: str, data: bytes):
        info = tarfile.TarInfo(name)
        info.type = tarfile.REGTYPE
        info.mode = 0o644
        info.size = len(data)
        tar.addfile(info, io.BytesIO(data))


class RepositoryPair:
    """The db and files databases of one repository architecture, updated together"""

    def __init__(self, db_path, files_path, signer=None):
        self.db = RepositoryIndex(db_path, signer=signer)
        self.files = RepositoryIndex(files_path, signer=signer)

    def load(self):
        self.db.load()
        self.files.load()

    def add(self, package):
        self.db.add(package)
        self.files.add(package)

    def remove(self, name: str):
        self.db.remove(name)
        self.files.remove(name)

    def save(self):
        self.db.save(include_files=False)
        self.files.save(include_files=True)
