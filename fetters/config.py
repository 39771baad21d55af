"""Load and save the TOML config, and resolve the current sprint from it."""

from __future__ import annotations

import sqlite3
import tomllib
from dataclasses import asdict, dataclass, fields
from pathlib import Path

import tomli_w

from .db.errors import (
    ConfigDeserializeError,
    ConfigSerializeError,
    FettersIOError,
    UnknownError,
)
from .db.models import Sprint
from .db.sprints import get_or_create_sprint
from .log import get_logger
from .paths import config_path

log = get_logger(__name__)


@dataclass
class Config:
    current_sprint_name: str = ""


class NoCurrentSprint(UnknownError):
    message = (
        "No current sprint is set. Run `fetters sprint new` to start one "
        "or `fetters sprint set` to pick an existing sprint."
    )

    def __init__(self):
        super().__init__(None)


def load_config(path: Path | None = None) -> Config:
    """Read the config file, writing defaults first if it does not exist."""
    path = path or config_path()
    if not path.exists():
        log.info("No config at %s, writing defaults", path)
        config = Config()
        save_config(config, path)
        return config

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise ConfigDeserializeError(exc) from exc
    except OSError as exc:
        raise FettersIOError(exc) from exc

    known = {f.name for f in fields(Config)}
    config = Config(**{k: v for k, v in data.items() if k in known})
    if not isinstance(config.current_sprint_name, str):
        raise ConfigDeserializeError(
            f"current_sprint_name must be a string, got {config.current_sprint_name!r}"
        )
    return config


def save_config(config: Config, path: Path | None = None) -> None:
    path = path or config_path()
    try:
        text = tomli_w.dumps(asdict(config))
    except TypeError as exc:
        raise ConfigSerializeError(exc) from exc
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise FettersIOError(exc) from exc
    log.debug("Wrote config to %s", path)


def resolve_current_sprint(
    config: Config, *, db: sqlite3.Connection | None = None
) -> Sprint | None:
    """Return the configured current sprint, creating it if needed.

    Returns None when no sprint name is configured.
    """
    name = config.current_sprint_name.strip()
    if not name:
        return None
    return get_or_create_sprint(name, db=db)


def require_current_sprint(
    config: Config, *, db: sqlite3.Connection | None = None
) -> Sprint:
    sprint = resolve_current_sprint(config, db=db)
    if sprint is None:
        raise NoCurrentSprint()
    return sprint
