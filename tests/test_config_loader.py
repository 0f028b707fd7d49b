from pathlib import Path

import pytest

from repodb.common.config_loader import ConfigLoader, RepoConfig
from repodb.common.errors import FormatError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("REPO_NAME", "GPG_KEY_ID", "PACKAGE_KEY_ID", "REPO_ROOT", "DEBUG"):
        monkeypatch.delenv(var, raising=False)


def test_repo_config_paths():
    config = RepoConfig(name="awesome", repo_root=Path("public"))

    assert config.repo_dir("x86_64") == Path("public/awesome/os/x86_64")
    assert config.db_path("x86_64") == Path("public/awesome/os/x86_64/awesome.db")
    assert config.files_path("aarch64") == Path("public/awesome/os/aarch64/awesome.files")


def test_load_yaml_file(tmp_path):
    config_file = tmp_path / "repodb.yml"
    config_file.write_text(
        "name: awesome\n"
        "repo_root: public\n"
        "arches: [x86_64, aarch64]\n"
        "repo_key: ABCDEF\n"
    )

    config = ConfigLoader.load(config_file)

    assert config.name == "awesome"
    assert config.repo_root == Path("public")
    assert config.arches == ["x86_64", "aarch64"]
    assert config.repo_key == "ABCDEF"
    assert config.package_key is None


def test_environment_overrides_file(tmp_path, monkeypatch):
    config_file = tmp_path / "repodb.yml"
    config_file.write_text("name: awesome\nrepo_key: ABCDEF\n")
    monkeypatch.setenv("REPO_NAME", "other")
    monkeypatch.setenv("GPG_KEY_ID", "123456")
    monkeypatch.setenv("DEBUG", "true")

    config = ConfigLoader.load(config_file)

    assert config.name == "other"
    assert config.repo_key == "123456"
    assert config.debug_mode is True


def test_missing_file_uses_defaults_with_env_name(tmp_path, monkeypatch):
    monkeypatch.setenv("REPO_NAME", "awesome")

    config = ConfigLoader.load(tmp_path / "absent.yml")

    assert config.name == "awesome"
    assert config.arches == ["x86_64"]
    assert config.repo_root == Path(".")


def test_missing_name_is_rejected(tmp_path):
    with pytest.raises(FormatError, match="name"):
        ConfigLoader.load(tmp_path / "absent.yml")


def test_invalid_yaml_is_rejected(tmp_path):
    config_file = tmp_path / "repodb.yml"
    config_file.write_text("name: [unterminated\n")

    with pytest.raises(FormatError):
        ConfigLoader.load(config_file)


def test_non_mapping_is_rejected(tmp_path):
    config_file = tmp_path / "repodb.yml"
    config_file.write_text("- just\n- a list\n")

    with pytest.raises(FormatError, match="mapping"):
        ConfigLoader.load(config_file)
