import io
import lzma
import tarfile
from pathlib import Path

import pytest
import zstandard

from repodb.common.errors import SigningError

BASIC_PKGINFO = """\
# Generated by makepkg 6.0.2
pkgname = foo
pkgbase = foo
pkgver = 1.0-1
pkgdesc = A test package
url = https://example.org/foo
builddate = 1700000000
packager = Test Packager <test@example.org>
size = 100
arch = x86_64
license = MIT
depend = glibc
depend = bash
optdepend = python: scripts
provides = foo-bin
"""


def _tar_bytes(pkginfo, files, dirs):
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w", format=tarfile.GNU_FORMAT) as tar:
        members = []
        if pkginfo is not None:
            members.append((".PKGINFO", pkginfo.encode("utf-8")))
        members.append((".MTREE", b"mtree"))
        for directory in dirs:
            info = tarfile.TarInfo(directory)
            info.type = tarfile.DIRTYPE
            info.mode = 0o755
            tar.addfile(info)
        for name in files:
            members.append((name, b"content of " + name.encode("utf-8")))
        for name, data in members:
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


@pytest.fixture
def make_package(tmp_path):
    """Build a package archive in tmp_path and return its path"""

    def _make(pkginfo=BASIC_PKGINFO, files=("usr/bin/foo",), dirs=("usr", "usr/bin"),
              filename="foo-1.0-1-x86_64.pkg.tar.zst", signature=None):
        path = Path(tmp_path) / filename
        data = _tar_bytes(pkginfo, files, dirs)
        if filename.endswith(".zst"):
            path.write_bytes(zstandard.ZstdCompressor().compress(data))
        elif filename.endswith(".xz"):
            path.write_bytes(lzma.compress(data))
        else:
            path.write_bytes(data)
        if signature is not None:
            Path(str(path) + ".sig").write_bytes(signature)
        return path

    return _make


class FakeSigner:
    """Records sign_file calls and writes a fixed signature"""

    def __init__(self, signature=b"fake-signature"):
        self.signature = signature
        self.calls = []

    def sign_file(self, file_path, sig_path):
        self.calls.append((Path(file_path), Path(sig_path)))
        Path(sig_path).write_bytes(self.signature)
        return Path(sig_path)


class FailingSigner:
    def __init__(self):
        self.calls = 0

    def sign_file(self, file_path, sig_path):
        self.calls += 1
        raise SigningError("gpg exploded")


@pytest.fixture
def fake_signer():
    return FakeSigner()


@pytest.fixture
def failing_signer():
    return FailingSigner()


def read_db_members(path):
    """Return {member name: bytes or None for directories} of a database archive"""
    members = {}
    with tarfile.open(path, "r:gz") as tar:
        for member in tar.getmembers():
            if member.isdir():
                members[member.name + "/"] = None
            else:
                members[member.name] = tar.extractfile(member).read()
    return members


def write_db(path, members):
    """Write a gzip tar database from {name: bytes or None for directories}"""
    with tarfile.open(path, "w:gz", format=tarfile.GNU_FORMAT) as tar:
        for name, data in members.items():
            info = tarfile.TarInfo(name)
            if data is None:
                info.type = tarfile.DIRTYPE
                tar.addfile(info)
            else:
                info.size = len(data)
                tar.addfile(info, io.BytesIO(data))
