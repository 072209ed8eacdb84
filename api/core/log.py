"""
Logging setup for the API process.
"""

from __future__ import annotations

import logging

from . import config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str | None = None) -> None:
    """
    Configure the root logger once. uvicorn installs its own handlers for its
    loggers; ours only touch the root.
    """
    root = logging.getLogger()
    root.setLevel(level or config.log_level())
    if root.handlers:
        return None

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
