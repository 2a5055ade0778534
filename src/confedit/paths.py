from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir as _uc, user_data_dir as _ud

APP_NAME = "confedit"


def _app_name(default: str) -> str:
    return os.getenv("CONFEDIT_APP_NAME", default)


def user_config_dir(app_name: str = APP_NAME) -> Path:
    app = _app_name(app_name)
    return Path(_uc(appname=app)).resolve()


def user_data_dir(app_name: str = APP_NAME) -> Path:
    app = _app_name(app_name)
    return Path(_ud(appname=app)).resolve()


def settings_file() -> Path:
    return user_config_dir() / "settings.ini"


def state_file() -> Path:
    """Return the path storing per-user editor state."""
    return user_data_dir() / "editor-state.json"


__all__ = ["APP_NAME", "settings_file", "state_file", "user_config_dir", "user_data_dir"]
