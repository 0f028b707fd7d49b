"""
Repository database modules package
"""

from .desc_codec import Desc, DescCodec
from .files_codec import FilesCodec
from .repository_index import PackageEntry, RepositoryIndex, RepositoryPair

__all__ = [
    'Desc',
    'DescCodec',
    'FilesCodec',
    'PackageEntry',
    'RepositoryIndex',
    'RepositoryPair',
]
