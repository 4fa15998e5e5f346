"""Logging setup for the proxy process."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a stream handler on the root logger.

    Repeated calls only adjust the level, so application restarts inside one
    process (tests, reloaders) do not stack handlers.
    """
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(level.upper())
