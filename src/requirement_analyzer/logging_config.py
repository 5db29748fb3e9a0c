"""
Logging for Requirement Analyzer.

All package loggers live under ``requirement_analyzer``. ``setup_logging``
owns the handlers of that logger: a RichHandler on stderr, plus a plain
file handler when a log file is configured. Calling it again replaces
the handlers instead of stacking them, so repeated CLI invocations in
one process log each record once.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "requirement_analyzer"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _level(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        verbose: DEBUG level, with source paths and traceback locals
        quiet: ERROR level only (wins over ``verbose``)
        log_file: Append records to this file as well; its parent
            directory is created if missing

    Returns:
        The ``requirement_analyzer`` logger
    """
    level = _level(verbose, quiet)
    logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_path=verbose,
        )
    )

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATEFMT))
        logger.addHandler(file_handler)

    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Logger for a module, namespaced under ``requirement_analyzer``.

    ``get_logger(__name__)`` inside the package returns the module logger
    unchanged; foreign names are prefixed.
    """
    if name is None:
        return logging.getLogger(PACKAGE_LOGGER)
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
