"""Central logging configuration for the statement analyzer.

Entrypoints (``cli.py``, ``app.py``) call ``configure_logging`` once at
startup. Library modules only call ``get_logger("statement_analyzer.<module>")``
and never attach handlers themselves.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

ROOT_LOGGER_NAME = "statement_analyzer"
LOG_LEVEL_ENV = "STATEMENT_ANALYZER_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_CONFIGURED = False


def resolve_level(level: int | str | None, *, use_env: bool = True) -> int:
    """Return a numeric level from an int, a level name or the environment."""
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    env_val = os.getenv(LOG_LEVEL_ENV) if use_env else None
    if env_val:
        return resolve_level(env_val, use_env=False)
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Attach a single stream handler to the project root logger.

    Repeated calls are no-ops so hosts can call this unconditionally
    (Streamlit re-executes ``app.py`` on every interaction).
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    numeric = resolve_level(level)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    logger.setLevel(numeric)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger, keeping the root quiet until a host configures it."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not _CONFIGURED and not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)
