#!/usr/bin/env python3
"""
Main Entry Point for repodb
Thin command-line front end over PackageArchiveReader and RepositoryIndex
"""

import argparse
import logging
import sys

from repodb import __version__
from repodb import config as defaults
from repodb.common.config_loader import ConfigLoader
from repodb.common.errors import RepoDBError
from repodb.common.logging_utils import setup_logging
from repodb.gpg.gpg_handler import make_signer
from repodb.package.archive_reader import PackageArchiveReader
from repodb.repo.repository_index import RepositoryIndex, RepositoryPair

logger = logging.getLogger(__name__)


def _add_packages(args, include_files: bool):
    reader = PackageArchiveReader(signer=make_signer(args.package_key))
    packages = [reader.load(path) for path in args.package_paths]

    repository = RepositoryIndex(args.db_path, signer=make_signer(args.repo_key))
    repository.load()
    for package in packages:
        repository.add(package)
        logger.info(f"Adding {package.name} {package.version} to {repository.path}")
    repository.save(include_files=include_files)


def _remove_packages(args, include_files: bool):
    repository = RepositoryIndex(args.db_path, signer=make_signer(args.repo_key))
    repository.load()
    for name in args.package_names:
        if name not in repository:
            logger.warning(f"⚠️ {name} is not in {repository.path}")
        repository.remove(name)
    repository.save(include_files=include_files)


def repo_add(args):
    _add_packages(args, include_files=False)


def repo_remove(args):
    _remove_packages(args, include_files=False)


def files_add(args):
    _add_packages(args, include_files=True)


def files_remove(args):
    _remove_packages(args, include_files=True)


def _pairs(args):
    """Yield (config, arch, RepositoryPair) for each selected architecture of the configured repository"""
    config = ConfigLoader.load(args.config)
    arches = [args.arch] if args.arch else config.arches
    repo_signer = make_signer(config.repo_key)
    for arch in arches:
        config.repo_dir(arch).mkdir(parents=True, exist_ok=True)
        yield config, arch, RepositoryPair(config.db_path(arch), config.files_path(arch), signer=repo_signer)


def publish(args):
    packages = None
    for config, arch, pair in _pairs(args):
        if packages is None:
            reader = PackageArchiveReader(signer=make_signer(config.package_key))
            packages = [reader.load(path) for path in args.package_paths]

        selected = []
        for package in packages:
            if package.control.arch in (arch, defaults.ANY_ARCH):
                selected.append(package)
            else:
                logger.info(f"Skipping {package.name} ({package.control.arch}) for {config.name}/{arch}")

        pair.load()
        for package in selected:
            pair.add(package)
        pair.save()
        logger.info(f"✅ Published {len(selected)} packages to {config.name}/{arch}")


def unpublish(args):
    for config, arch, pair in _pairs(args):
        pair.load()
        for name in args.package_names:
            pair.remove(name)
        pair.save()
        logger.info(f"✅ Removed {len(args.package_names)} packages from {config.name}/{arch}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repodb",
        description="Custom repository manager for pacman repository databases",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", help="Also write log output to this file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, handler, db_help in (
        ("repo-add", repo_add, "Path to repository database"),
        ("files-add", files_add, "Path to files database"),
    ):
        sub = subparsers.add_parser(command, help=f"Add PACKAGE_PATH to {db_help.split()[-2]} database")
        sub.add_argument("--repo-key", help="GPG key to sign repository database")
        sub.add_argument("--package-key", help="GPG key to sign packages without a .sig")
        sub.add_argument("package_paths", nargs="+", metavar="PACKAGE_PATH", help="Path to package to be added")
        sub.add_argument("db_path", metavar="DB_PATH", help=db_help)
        sub.set_defaults(func=handler)

    for command, handler, db_help in (
        ("repo-remove", repo_remove, "Path to repository database"),
        ("files-remove", files_remove, "Path to files database"),
    ):
        sub = subparsers.add_parser(command, help=f"Remove PACKAGE_NAME from {db_help.split()[-2]} database")
        sub.add_argument("--repo-key", help="GPG key to sign repository database")
        sub.add_argument("package_names", nargs="+", metavar="PACKAGE_NAME", help="Name of package to be removed")
        sub.add_argument("db_path", metavar="DB_PATH", help=db_help)
        sub.set_defaults(func=handler)

    sub = subparsers.add_parser("publish", help="Add packages to the db and files databases of a configured repository")
    sub.add_argument("--config", help="YAML config file (default: .repodb.yml)")
    sub.add_argument("--arch", help="Only update this architecture")
    sub.add_argument("package_paths", nargs="+", metavar="PACKAGE_PATH")
    sub.set_defaults(func=publish)

    sub = subparsers.add_parser("unpublish", help="Remove packages from the db and files databases of a configured repository")
    sub.add_argument("--config", help="YAML config file (default: .repodb.yml)")
    sub.add_argument("--arch", help="Only update this architecture")
    sub.add_argument("package_names", nargs="+", metavar="PACKAGE_NAME")
    sub.set_defaults(func=unpublish)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(debug_mode=args.debug, log_file=args.log_file)

    try:
        args.func(args)
    except RepoDBError as e:
        path = getattr(e, "path", None) or getattr(args, "db_path", None)
        if path:
            logger.error(f"❌ {args.command} failed for {path}: {e}")
        else:
            logger.error(f"❌ {args.command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
