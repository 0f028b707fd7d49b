"""
Config Loader Module - Handles configuration loading and validation
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from repodb import config as defaults
from repodb.common.errors import FormatError, RepoIOError


logger = logging.getLogger(__name__)


@dataclass
class RepoConfig:
    """Repository layout and signing keys for one published repository"""

    name: str
    repo_root: Path = Path(defaults.REPO_ROOT)
    arches: List[str] = field(default_factory=lambda: list(defaults.ARCHES))
    package_key: Optional[str] = None
    repo_key: Optional[str] = None
    debug_mode: bool = False

    def repo_dir(self, arch: str) -> Path:
        return self.repo_root / self.name / "os" / arch

    def db_path(self, arch: str) -> Path:
        return self.repo_dir(arch) / f"{self.name}{defaults.DB_SUFFIX}"

    def files_path(self, arch: str) -> Path:
        return self.repo_dir(arch) / f"{self.name}{defaults.FILES_SUFFIX}"


class ConfigLoader:
    """Handles configuration loading and validation"""

    @staticmethod
    def load_environment_config():
        """Load configuration overrides from environment variables"""
        return {
            'name': os.getenv('REPO_NAME'),
            'repo_key': os.getenv('GPG_KEY_ID'),
            'package_key': os.getenv('PACKAGE_KEY_ID'),
            'repo_root': os.getenv('REPO_ROOT'),
            'debug_mode': os.getenv('DEBUG', '').lower() in ('1', 'true', 'yes', 'on'),
        }

    @staticmethod
    def load_yaml_config(config_path) -> dict:
        """
        Read the YAML config file.

        A missing file is not an error and yields an empty dict.

        Raises:
            FormatError: if the file is not valid YAML or not a mapping.
            RepoIOError: if the file exists but cannot be read.
        """
        config_path = Path(config_path)
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            logger.debug(f"Config file not found: {config_path}")
            return {}
        except yaml.YAMLError as e:
            raise FormatError(f"Invalid YAML in {config_path}: {e}") from e
        except OSError as e:
            raise RepoIOError(f"Unable to read {config_path}: {e}", str(config_path)) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise FormatError(f"Config file {config_path} must contain a mapping")
        return data

    @staticmethod
    def load(config_path=None) -> RepoConfig:
        """
        Build a RepoConfig from defaults, the YAML file and the environment.

        Precedence (highest to lowest):
        1. Environment variables (REPO_NAME, GPG_KEY_ID, PACKAGE_KEY_ID, REPO_ROOT, DEBUG)
        2. YAML config file
        3. repodb.config defaults

        Raises:
            FormatError: if no repository name can be determined.
        """
        if config_path is None:
            config_path = defaults.CONFIG_FILE

        file_config = ConfigLoader.load_yaml_config(config_path)
        env_config = ConfigLoader.load_environment_config()

        name = env_config['name'] or file_config.get('name')
        if not name:
            raise FormatError(
                f"Repository name missing: set 'name' in {config_path} or the REPO_NAME environment variable"
            )

        arches = file_config.get('arches') or list(defaults.ARCHES)
        if isinstance(arches, str):
            arches = [arches]

        repo_config = RepoConfig(
            name=str(name),
            repo_root=Path(env_config['repo_root'] or file_config.get('repo_root') or defaults.REPO_ROOT),
            arches=[str(arch) for arch in arches],
            package_key=env_config['package_key'] or file_config.get('package_key'),
            repo_key=env_config['repo_key'] or file_config.get('repo_key'),
            debug_mode=env_config['debug_mode'] or bool(file_config.get('debug_mode', False)),
        )

        logger.info(f"CONFIG_LOADED name={repo_config.name} arches={','.join(repo_config.arches)}")
        return repo_config
