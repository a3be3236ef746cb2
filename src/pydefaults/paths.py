from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir as _uc

APP_NAME = "pydefaults"
CONFIG_DIR_ENV = "PYDEFAULTS_CONFIG_DIR"


def user_config_dir(app_name: str = APP_NAME) -> Path:
    env = os.getenv(CONFIG_DIR_ENV)
    if env:
        return Path(env).expanduser().resolve()
    return Path(_uc(appname=app_name)).resolve()


def settings_file(filename: str = "settings.ini") -> Path:
    return user_config_dir() / filename
