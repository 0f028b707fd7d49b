"""
Default configuration for repodb
=================================================================================
PURPOSE: Centralized defaults for repository layout and signing.
         Values here are used when no YAML config file is given.

USAGE: Imported by common/config_loader.py.
       Environment variables and the YAML file override these defaults.
"""

# ==============================================================================
# 1. REPOSITORY CONFIGURATION
# ==============================================================================

# CONFIG_FILE: YAML file looked up in the current directory
CONFIG_FILE = ".repodb.yml"

# REPO_ROOT: Directory containing <name>/os/<arch>/
REPO_ROOT = "."

# ARCHES: Architectures published when the config file does not list any
ARCHES = ["x86_64"]

# ==============================================================================
# 2. DATABASE FILES
# ==============================================================================

# Lightweight database (desc only) and file-manifest database suffixes
DB_SUFFIX = ".db"
FILES_SUFFIX = ".files"

# Temporary suffix used while a database is being written
PROGRESS_SUFFIX = ".progress"

# Detached signature suffix for packages and databases
SIG_SUFFIX = ".sig"

# ==============================================================================
# 3. PACKAGE ARCHIVES
# ==============================================================================

# Control record member at the root of every package archive
CONTROL_RECORD_NAME = ".PKGINFO"

# Read size when hashing package archives
HASH_CHUNK_SIZE = 64 * 1024

# Architecture of packages that are published to every architecture
ANY_ARCH = "any"
