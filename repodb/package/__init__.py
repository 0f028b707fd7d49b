"""
Package archive modules package
"""

from .archive_reader import Package, PackageArchiveReader
from .control_record import ControlRecord, ControlRecordParser

__all__ = [
    'Package',
    'PackageArchiveReader',
    'ControlRecord',
    'ControlRecordParser',
]
