import base64
import hashlib

import pytest

from repodb.common.errors import (
    FormatError,
    MissingControlRecordError,
    RepoIOError,
    SigningError,
    UnsupportedFormatError,
)
from repodb.package.archive_reader import PackageArchiveReader, load_package
from repodb.package.compression import Compression


@pytest.mark.parametrize("filename, expected", [
    ("foo-1.0-1-x86_64.pkg.tar.xz", Compression.XZ),
    ("foo-1.0-1-x86_64.pkg.tar.zst", Compression.ZSTD),
    ("repo.db.tar.gz", Compression.GZIP),
    ("foo-1.0-1-x86_64.pkg.tar", Compression.UNSUPPORTED),
    ("repo.db", Compression.UNSUPPORTED),
])
def test_compression_from_filename(filename, expected):
    assert Compression.from_filename(filename) is expected


@pytest.mark.parametrize("filename", [
    "foo-1.0-1-x86_64.pkg.tar.zst",
    "foo-1.0-1-x86_64.pkg.tar.xz",
])
def test_load_package(make_package, filename):
    path = make_package(filename=filename)
    package = PackageArchiveReader().load(path)

    raw = path.read_bytes()
    assert package.name == "foo"
    assert package.version == "1.0-1"
    assert package.control.installed_size == 100
    assert package.archive_filename == filename
    assert package.archive_size == len(raw)
    assert package.md5 == hashlib.md5(raw).hexdigest()
    assert package.sha256 == hashlib.sha256(raw).hexdigest()
    assert package.signature_base64 == ""


def test_member_files_exclude_dotfiles_and_mark_directories(make_package):
    path = make_package(files=("usr/bin/foo", "usr/share/foo/data"), dirs=("usr", "usr/bin"))
    package = load_package(path)

    assert package.member_files == ("usr/", "usr/bin/", "usr/bin/foo", "usr/share/foo/data")


def test_signature_is_base64_encoded(make_package):
    path = make_package(signature=b"\x89PGP-SIGNATURE")
    package = load_package(path)

    assert package.signature_base64 == base64.b64encode(b"\x89PGP-SIGNATURE").decode()


def test_package_is_immutable(make_package):
    package = load_package(make_package())

    with pytest.raises(AttributeError):
        package.md5 = "x"


def test_unsupported_extension(make_package):
    path = make_package(filename="foo-1.0-1-x86_64.pkg.tar")

    with pytest.raises(UnsupportedFormatError):
        load_package(path)


def test_missing_control_record(make_package):
    path = make_package(pkginfo=None)

    with pytest.raises(MissingControlRecordError):
        load_package(path)


def test_bad_control_record_propagates(make_package):
    path = make_package(pkginfo="pkgname = foo\nfoo = bar\n")

    with pytest.raises(FormatError, match="foo"):
        load_package(path)


def test_corrupt_archive_is_format_error(tmp_path):
    path = tmp_path / "broken-1.0-1-x86_64.pkg.tar.zst"
    path.write_bytes(b"definitely not zstd")

    with pytest.raises(FormatError):
        load_package(path)


def test_missing_archive_is_io_error(tmp_path):
    with pytest.raises(RepoIOError):
        load_package(tmp_path / "absent-1.0-1-x86_64.pkg.tar.zst")


def test_signer_signs_unsigned_package(make_package, fake_signer):
    path = make_package()
    package = PackageArchiveReader(signer=fake_signer).load(path)

    assert fake_signer.calls == [(path, path.with_name(path.name + ".sig"))]
    assert package.signature_base64 == base64.b64encode(b"fake-signature").decode()


def test_signer_not_used_when_signature_exists(make_package, fake_signer):
    path = make_package(signature=b"existing")
    package = PackageArchiveReader(signer=fake_signer).load(path)

    assert fake_signer.calls == []
    assert package.signature_base64 == base64.b64encode(b"existing").decode()


def test_signer_failure_propagates(make_package, failing_signer):
    with pytest.raises(SigningError):
        PackageArchiveReader(signer=failing_signer).load(make_package())
