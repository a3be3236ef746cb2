"""Settings for the ``pydefaults`` command.

Settings are read from ``settings.ini`` in the user configuration directory
(section ``[pydefaults]``) and then overridden by ``PYDEFAULTS_*``
environment variables.
"""

from __future__ import annotations

import configparser
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from .paths import APP_NAME, settings_file

logger = logging.getLogger(__name__)

ENV_PREFIX = "PYDEFAULTS_"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    command: str = "defaults"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if not self.command:
            raise ValueError("command must not be empty")
        level = self.log_level.upper()
        if level not in _LEVELS:
            raise ValueError(f"invalid log level: {self.log_level!r}")
        object.__setattr__(self, "log_level", level)


def read_file(path: Path) -> dict[str, str]:
    parser = configparser.ConfigParser()
    if not path.exists():
        return {}
    try:
        parser.read(path)
    except configparser.Error as exc:
        logger.warning("Failed to read config %s: %s", path, exc)
        return {}
    if not parser.has_section(APP_NAME):
        return {}
    return dict(parser.items(APP_NAME))


def read_env(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    env = os.environ if environ is None else environ
    result: dict[str, str] = {}
    for key, value in env.items():
        if key.startswith(ENV_PREFIX) and value:
            result[key[len(ENV_PREFIX):].lower()] = value
    return result


def load_settings(
    path: Path | None = None, environ: Mapping[str, str] | None = None
) -> Settings:
    """Return :class:`Settings` merged from *path* and the environment."""

    path = settings_file() if path is None else path
    settings = Settings()
    for source in (read_file(path), read_env(environ)):
        known = {k: v for k, v in source.items() if k in ("command", "log_level")}
        if known:
            try:
                settings = replace(settings, **known)
            except ValueError as exc:
                logger.warning("Ignoring invalid settings %s: %s", known, exc)
    return settings
