from pathlib import Path

import pytest

from pydefaults import paths
from pydefaults.config import Settings, load_settings, read_env


def test_defaults_without_file(tmp_path: Path):
    settings = load_settings(tmp_path / "missing.ini", environ={})
    assert settings == Settings()
    assert settings.command == "defaults"
    assert settings.log_level == "WARNING"


def test_file_then_env(tmp_path: Path):
    ini = tmp_path / "settings.ini"
    ini.write_text("[pydefaults]\ncommand = /opt/bin/defaults\nlog_level = info\n")
    settings = load_settings(ini, environ={})
    assert settings.command == "/opt/bin/defaults"
    assert settings.log_level == "INFO"
    settings = load_settings(ini, environ={"PYDEFAULTS_COMMAND": "fake-defaults"})
    assert settings.command == "fake-defaults"
    assert settings.log_level == "INFO"


def test_invalid_values_are_ignored(tmp_path: Path):
    ini = tmp_path / "settings.ini"
    ini.write_text("[pydefaults]\nlog_level = loud\n")
    assert load_settings(ini, environ={}).log_level == "WARNING"


def test_malformed_file_is_ignored(tmp_path: Path):
    ini = tmp_path / "settings.ini"
    ini.write_text("no section header\n")
    assert load_settings(ini, environ={}) == Settings()


def test_read_env_prefix():
    env = {"PYDEFAULTS_LOG_LEVEL": "DEBUG", "OTHER": "x", "PYDEFAULTS_COMMAND": ""}
    assert read_env(env) == {"log_level": "DEBUG"}


def test_settings_validation():
    with pytest.raises(ValueError):
        Settings(command="")
    with pytest.raises(ValueError):
        Settings(log_level="chatty")


def test_config_dir_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PYDEFAULTS_CONFIG_DIR", str(tmp_path))
    assert paths.user_config_dir() == tmp_path.resolve()
    assert paths.settings_file() == tmp_path.resolve() / "settings.ini"
    ini = tmp_path / "settings.ini"
    ini.write_text("[pydefaults]\ncommand = from-dir\n")
    monkeypatch.delenv("PYDEFAULTS_COMMAND", raising=False)
    assert load_settings().command == "from-dir"
