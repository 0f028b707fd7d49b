"""
Control Record Module - Parses the .PKGINFO member of a package archive
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from repodb.common.errors import FormatError, parse_u64
from repodb.common.text_utils import split_lines


@dataclass(frozen=True)
class ControlRecord:
    """Parsed package control record"""

    name: str = ""
    base: str = ""
    version: str = ""
    description: str = ""
    url: str = ""
    packager: str = ""
    arch: str = ""
    build_date: int = 0
    installed_size: int = 0
    license: Tuple[str, ...] = ()
    groups: Tuple[str, ...] = ()
    depends: Tuple[str, ...] = ()
    makedepends: Tuple[str, ...] = ()
    checkdepends: Tuple[str, ...] = ()
    optdepends: Tuple[str, ...] = ()
    conflicts: Tuple[str, ...] = ()
    provides: Tuple[str, ...] = ()
    backups: Tuple[str, ...] = ()
    replaces: Tuple[str, ...] = ()


class ControlRecordParser:
    """Parses control record text into a ControlRecord"""

    # key in the control record -> ControlRecord field
    SCALAR_KEYS: Dict[str, str] = {
        'pkgname': 'name',
        'pkgbase': 'base',
        'pkgver': 'version',
        'pkgdesc': 'description',
        'url': 'url',
        'packager': 'packager',
        'arch': 'arch',
    }

    INTEGER_KEYS: Dict[str, str] = {
        'builddate': 'build_date',
        'size': 'installed_size',
    }

    REPEATED_KEYS: Dict[str, str] = {
        'license': 'license',
        'group': 'groups',
        'depend': 'depends',
        'makedepend': 'makedepends',
        'checkdepend': 'checkdepends',
        'optdepend': 'optdepends',
        'conflict': 'conflicts',
        'provides': 'provides',
        'backup': 'backups',
        'replaces': 'replaces',
    }

    @staticmethod
    def parse(body: str) -> ControlRecord:
        """
        Parse control record text.

        Lines starting with '#' are comments and blank lines are skipped.
        Every other line is split on the first '=' into a trimmed key and
        value. Keys outside the known vocabulary are rejected.

        Args:
            body: Full text of the control record member

        Returns:
            ControlRecord

        Raises:
            FormatError: on a line without '=' or an unknown key
            CodecError: on an integer field that does not parse
        """
        fields = {}
        repeated: Dict[str, List[str]] = {
            attr: [] for attr in ControlRecordParser.REPEATED_KEYS.values()
        }

        for line in split_lines(body):
            if line.startswith('#') or not line.strip():
                continue
            if '=' not in line:
                raise FormatError(f"Invalid line in control record: {line}")

            key, value = line.split('=', 1)
            key = key.strip()
            value = value.strip()

            if key in ControlRecordParser.SCALAR_KEYS:
                fields[ControlRecordParser.SCALAR_KEYS[key]] = value
            elif key in ControlRecordParser.INTEGER_KEYS:
                fields[ControlRecordParser.INTEGER_KEYS[key]] = parse_u64(key, value)
            elif key in ControlRecordParser.REPEATED_KEYS:
                repeated[ControlRecordParser.REPEATED_KEYS[key]].append(value)
            else:
                raise FormatError(f"Unknown control record entry '{key}': {line}")

        if not fields.get('name'):
            raise FormatError("Control record has no pkgname entry")

        for attr, values in repeated.items():
            fields[attr] = tuple(values)

        return ControlRecord(**fields)
