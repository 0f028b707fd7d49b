"""
repodb - pacman repository database tooling
"""

# Common modules
from .common.config_loader import ConfigLoader, RepoConfig
from .common.errors import (
    CodecError,
    FormatError,
    MissingControlRecordError,
    RepoDBError,
    RepoIOError,
    SigningError,
    UnsupportedFormatError,
)
from .common.logging_utils import setup_logging

# Package archive modules
from .package.archive_reader import Package, PackageArchiveReader, load_package
from .package.compression import Compression
from .package.control_record import ControlRecord, ControlRecordParser

# Repository modules
from .repo.desc_codec import Desc, DescCodec
from .repo.files_codec import FilesCodec
from .repo.repository_index import PackageEntry, RepositoryIndex, RepositoryPair

# GPG module
from .gpg.gpg_handler import GPGSigner

__version__ = "0.1.0"

__all__ = [
    # Common
    'ConfigLoader',
    'RepoConfig',
    'CodecError',
    'FormatError',
    'MissingControlRecordError',
    'RepoDBError',
    'RepoIOError',
    'SigningError',
    'UnsupportedFormatError',
    'setup_logging',

    # Package
    'Package',
    'PackageArchiveReader',
    'load_package',
    'Compression',
    'ControlRecord',
    'ControlRecordParser',

    # Repository
    'Desc',
    'DescCodec',
    'FilesCodec',
    'PackageEntry',
    'RepositoryIndex',
    'RepositoryPair',

    # GPG
    'GPGSigner',
]
