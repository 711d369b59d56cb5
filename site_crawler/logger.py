# === FILE: site_crawler/logger.py ===
"""Logging setup shared by the crawler, the engine and the CLI.

Every module writes to the ``SiteCrawler`` logger (or a child of it, see
:func:`get_logger`). The CLI calls :func:`init_logging` once ``--log-level``
and ``--log-file`` are known; until then the logger prints INFO to stdout.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

_DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_LOGGER_NAME: Final[str] = "SiteCrawler"

# library loggers that flood DEBUG output during a crawl
_CHATTY_LOGGERS: Final[tuple[str, ...]] = ("aiohttp.client", "aiohttp.internal", "asyncio")

_LevelT = Union[int, str]


def _resolve_level(level: _LevelT) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def _build_handlers(fmt: str, log_file: str | Path | None) -> list[logging.Handler]:
    formatter = logging.Formatter(fmt)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=5 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Re)configure the ``SiteCrawler`` logger.

    Parameters
    ----------
    level
        Numeric or textual level; names are case-insensitive.
    log_file
        Rotating logfile (5 MiB x 3). *None* means stdout only.
    log_format
        Format string for :class:`logging.Formatter`.
    replace_handlers
        Close and drop the handlers installed by a previous call.
    """
    numeric = _resolve_level(level)
    lg = get_logger()
    lg.setLevel(numeric)

    if replace_handlers:
        for handler in list(lg.handlers):
            lg.removeHandler(handler)
            handler.close()

    for handler in _build_handlers(log_format, log_file):
        lg.addHandler(handler)
    lg.propagate = False

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric, logging.WARNING))
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
) -> logging.Logger:
    return configure(level=level, log_file=log_file, log_format=log_format)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the project logger or its child ``SiteCrawler.<name>``."""
    if not name:
        return logging.getLogger(_LOGGER_NAME)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "get_logger"]
