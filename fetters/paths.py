"""Per-user application directories.

The database lives in the platform's user data directory and the config
file in the user config directory. Both can be redirected with
environment variables, which is how the tests keep out of $HOME.
"""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir, user_log_dir

from .db.errors import ApplicationDirError

APP_NAME = "fetters"
DB_FILENAME = "fetters.db"
CONFIG_FILENAME = "fetters.toml"


def _ensure_dir(path: Path) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ApplicationDirError(exc) from exc
    return path


def data_dir() -> Path:
    """Return (and create) the directory holding the SQLite database."""
    override = os.environ.get("FETTERS_DATA_DIR")
    return _ensure_dir(Path(override) if override else Path(user_data_dir(APP_NAME)))


def config_dir() -> Path:
    """Return (and create) the directory holding the TOML config."""
    override = os.environ.get("FETTERS_CONFIG_DIR")
    return _ensure_dir(Path(override) if override else Path(user_config_dir(APP_NAME)))


def log_dir() -> Path:
    """Logs go beside the database when FETTERS_DATA_DIR is set."""
    override = os.environ.get("FETTERS_DATA_DIR")
    return _ensure_dir(Path(override) / "logs" if override else Path(user_log_dir(APP_NAME)))


def database_path() -> Path:
    return data_dir() / DB_FILENAME


def config_path() -> Path:
    return config_dir() / CONFIG_FILENAME
