"""Logging setup that never writes to the terminal the TUI owns."""

from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_ENV_VAR = "JJVIEW_LOG"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_log_file(cli_value: str | None) -> Path | None:
    """``--log-file`` wins over ``JJVIEW_LOG``; neither means no log file."""
    value = cli_value or os.environ.get(LOG_ENV_VAR)
    return Path(value).expanduser() if value else None


def configure_logging(log_file: Path | None, level: int = logging.INFO) -> logging.Handler:
    """Attach one handler to the ``jjview`` logger and return it.

    A ``FileHandler`` when ``log_file`` is given, a ``NullHandler``
    otherwise. Records never propagate to the root logger.
    """
    root = logging.getLogger("jjview")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    handler: logging.Handler
    if log_file is None:
        handler = logging.NullHandler()
    else:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
    return handler
