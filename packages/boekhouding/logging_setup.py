"""Logging for ``boekhouding``: one handler on the package root, silence elsewhere.

The CLI calls :func:`configure_logging` once; library modules only call
:func:`get_logger` and emit ``event:key=value`` lines such as
``categorize:batch_done batch_index=0 count=100``.

The OpenAI SDK logs every HTTP request through ``httpx`` at INFO. Those
loggers are held at WARNING unless the package itself runs at DEBUG, so a
categorization run does not print one line per batch request.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "boekhouding"
_LEVEL_ENV = "BOEKHOUDING_LOG_LEVEL"
_DEFAULT_FMT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CHATTY_LIBRARIES: tuple[str, ...] = ("httpx", "httpcore", "openai")
_CONFIGURED = False


def resolve_level(level: int | str | None = None) -> int:
    """Turn ``20``, ``"20"``, ``"info"`` or ``None`` (env, then INFO) into a level."""

    if level is None:
        level = os.getenv(_LEVEL_ENV) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    mapping = logging.getLevelNamesMapping()
    return mapping.get(name, logging.INFO)


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> bool:
    """Attach the package handler; return ``False`` when already configured.

    ``stream`` defaults to the ``sys.stderr`` current at call time.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return False

    resolved = resolve_level(level)
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(pkg_logger.handlers):
        if isinstance(h, logging.NullHandler):
            pkg_logger.removeHandler(h)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FMT))
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(resolved)
    pkg_logger.propagate = False

    library_level = logging.DEBUG if resolved <= logging.DEBUG else logging.WARNING
    for name in _CHATTY_LIBRARIES:
        logging.getLogger(name).setLevel(library_level)

    _CONFIGURED = True
    return True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "resolve_level"]
