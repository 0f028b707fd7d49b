"""
Desc Codec Module - Reads and writes the per-package desc record of a repository database
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

from repodb.common.errors import FormatError, parse_u64
from repodb.common.text_utils import split_lines


@dataclass
class Desc:
    """Persisted projection of a package, identified by name"""

    groups: List[str] = field(default_factory=list)
    replaces: List[str] = field(default_factory=list)
    filename: str = ""
    name: str = ""
    base: str = ""
    version: str = ""
    desc: str = ""
    csize: int = 0
    isize: int = 0
    md5sum: str = ""
    sha256sum: str = ""
    pgpsig: str = ""
    url: str = ""
    license: List[str] = field(default_factory=list)
    arch: str = ""
    builddate: int = 0
    packager: str = ""
    conflicts: List[str] = field(default_factory=list)
    provides: List[str] = field(default_factory=list)
    depends: List[str] = field(default_factory=list)
    makedepends: List[str] = field(default_factory=list)
    checkdepends: List[str] = field(default_factory=list)
    optdepends: List[str] = field(default_factory=list)

    @classmethod
    def from_package(cls, package) -> "Desc":
        """Copy every persisted field out of a Package"""
        control = package.control
        return cls(
            groups=list(control.groups),
            replaces=list(control.replaces),
            filename=package.archive_filename,
            name=control.name,
            base=control.base,
            version=control.version,
            desc=control.description,
            csize=package.archive_size,
            isize=control.installed_size,
            md5sum=package.md5,
            sha256sum=package.sha256,
            pgpsig=package.signature_base64,
            url=control.url,
            license=list(control.license),
            arch=control.arch,
            builddate=control.build_date,
            packager=control.packager,
            conflicts=list(control.conflicts),
            provides=list(control.provides),
            depends=list(control.depends),
            makedepends=list(control.makedepends),
            checkdepends=list(control.checkdepends),
            optdepends=list(control.optdepends),
        )


ARRAY, SCALAR, INTEGER = "array", "scalar", "integer"

# Block order on encode. Each block maps a %KEY% marker to a Desc attribute.
DESC_BLOCKS: Tuple[Tuple[str, str, str], ...] = (
    ("GROUPS", "groups", ARRAY),
    ("REPLACES", "replaces", ARRAY),
    ("FILENAME", "filename", SCALAR),
    ("NAME", "name", SCALAR),
    ("BASE", "base", SCALAR),
    ("VERSION", "version", SCALAR),
    ("DESC", "desc", SCALAR),
    ("CSIZE", "csize", INTEGER),
    ("ISIZE", "isize", INTEGER),
    ("MD5SUM", "md5sum", SCALAR),
    ("SHA256SUM", "sha256sum", SCALAR),
    ("PGPSIG", "pgpsig", SCALAR),
    ("URL", "url", SCALAR),
    ("LICENSE", "license", ARRAY),
    ("ARCH", "arch", SCALAR),
    ("BUILDDATE", "builddate", INTEGER),
    ("PACKAGER", "packager", SCALAR),
    ("CONFLICTS", "conflicts", ARRAY),
    ("PROVIDES", "provides", ARRAY),
    ("DEPENDS", "depends", ARRAY),
    ("MAKEDEPENDS", "makedepends", ARRAY),
    ("CHECKDEPENDS", "checkdepends", ARRAY),
    ("OPTDEPENDS", "optdepends", ARRAY),
)

_BLOCKS_BY_KEY = {key: (attr, kind) for key, attr, kind in DESC_BLOCKS}


def iter_entries(body: str) -> Iterator[Tuple[str, str]]:
    """
    Yield (key, value) pairs from a percent-delimited record.

    A %KEY% line sets the active key and a blank line clears it. Lines
    seen while no key is active are skipped.
    """
    key = ""
    for line in split_lines(body):
        line = line.strip()
        if len(line) > 2 and line.startswith('%') and line.endswith('%'):
            key = line[1:-1]
        elif not line:
            key = ""
        elif key:
            yield key, line


class DescCodec:
    """Encodes and decodes desc records"""

    @staticmethod
    def decode(body: str) -> Desc:
        """
        Parse a desc record.

        Raises:
            FormatError: on an unknown %KEY%
            CodecError: on an integer field that does not parse
        """
        desc = Desc()
        for key, value in iter_entries(body):
            if key not in _BLOCKS_BY_KEY:
                raise FormatError(f"Unknown desc entry: {key}")
            attr, kind = _BLOCKS_BY_KEY[key]
            if kind == ARRAY:
                getattr(desc, attr).append(value)
            elif kind == INTEGER:
                setattr(desc, attr, parse_u64(key, value))
            else:
                setattr(desc, attr, value)
        return desc

    @staticmethod
    def encode(desc: Desc) -> bytes:
        """
        Serialize a desc record.

        Empty strings, empty lists and zero integers are left out entirely,
        so a zero value cannot be told apart from an absent one.
        """
        lines = []
        for key, attr, kind in DESC_BLOCKS:
            value = getattr(desc, attr)
            if not value:
                continue
            lines.append(f"%{key}%")
            if kind == ARRAY:
                lines.extend(value)
            else:
                lines.append(str(value))
            lines.append("")
        if not lines:
            return b""
        return ("\n".join(lines) + "\n").encode('utf-8')
