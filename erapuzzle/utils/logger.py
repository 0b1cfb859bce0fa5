"""Logging setup shared by the CLI and the session engine."""

from __future__ import annotations

import logging
from typing import Optional, Union

# Connection chatter from remote catalog fetches stays out of INFO output.
QUIET_LOGGERS = ("urllib3",)


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Install one stream handler on the root logger.

    ``level`` may be a number or a name such as ``"debug"``; unknown names
    fall back to INFO. Failed placements and missing sentences are logged
    as warnings, so the default level already shows them.
    """

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``erapuzzle`` namespace; sets up defaults on first use."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "erapuzzle")
