"""Commands for the config file."""

from __future__ import annotations

import os
import shlex
import subprocess
from dataclasses import asdict
from pathlib import Path

from ..config import load_config
from ..db.errors import FettersIOError
from ..display import bold
from ..log import get_logger
from ..paths import config_path
from .common import open_in_default_app

log = get_logger(__name__)


def edit(path: Path | None = None) -> None:
    """Open the config in $EDITOR, or the platform's default application."""
    path = path or config_path()
    load_config(path)  # make sure the file exists
    editor = os.environ.get("EDITOR")
    if not editor:
        open_in_default_app(path)
        return
    log.debug("Opening %s with %s", path, editor)
    try:
        subprocess.run([*shlex.split(editor), str(path)], check=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise FettersIOError(exc) from exc


def show(path: Path | None = None) -> None:
    path = path or config_path()
    config = load_config(path)
    print(f"\n{bold('Config file:')} {path}\n")
    for key, value in asdict(config).items():
        print(f"  {key} = {value!r}")
    print()
