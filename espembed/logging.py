"""Logger setup shared by the espembed CLI and its library modules.

Library code only asks for named loggers via :func:`get_logger`; handlers are
attached once, by the CLI, through :func:`configure_logging`. The console shows
INFO by default (DEBUG with ``verbose``, WARNING with ``quiet``) while an
optional log file always receives the full DEBUG trace of a run.
"""

from __future__ import annotations

import logging
from pathlib import Path

ROOT_LOGGER = "espembed"
CONSOLE_FORMAT = "[espembed] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``espembed.<name>``, or the package logger itself."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def console_level(*, verbose: bool = False, quiet: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def _attach(logger: logging.Logger, handler: logging.Handler, level: int, fmt: str) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Route espembed records to stderr and, when given, to ``log_file``."""
    logger = get_logger()
    logger.propagate = False

    # main() may run several times in one process (tests, embedding scripts)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = console_level(verbose=verbose, quiet=quiet)
    _attach(logger, logging.StreamHandler(), level, CONSOLE_FORMAT)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _attach(logger, logging.FileHandler(log_file, mode="w", encoding="utf-8"), logging.DEBUG, FILE_FORMAT)
        level = logging.DEBUG

    logger.setLevel(level)
    return logger


__all__ = ["configure_logging", "console_level", "get_logger"]
