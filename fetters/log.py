"""Centralized logging configuration, stdlib only.

Modules call get_logger(__name__) at import time; nothing is emitted until
the CLI calls setup_logging(), so library use and tests stay quiet.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime

_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a named logger."""
    return logging.getLogger(name)


def setup_logging() -> None:
    """Attach console and file handlers to the ``fetters`` logger once."""
    global _configured
    if _configured:
        return
    _configured = True

    level_name = os.environ.get("FETTERS_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)

    root = logging.getLogger("fetters")
    root.setLevel(logging.DEBUG)
    root.propagate = False

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
    root.addHandler(console)

    from .db.errors import ApplicationDirError
    from .paths import log_dir

    try:
        log_file = log_dir() / f"fetters_{datetime.now().strftime('%Y-%m-%d')}.log"
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
        root.addHandler(fh)
    except (OSError, ApplicationDirError) as exc:
        root.debug("File logging disabled: %s", exc)
