"""Logging utilities for TechMatrix.

Every component logger is a child of the ``techmatrix`` logger, which owns
the single rich handler. ``setup_logging`` changes the level of that parent,
so loggers created at import time follow ``--verbose`` as well.
"""

import logging
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

ROOT_LOGGER_NAME = "techmatrix"

_THEME = Theme({
    "logging.level.info": "cyan",
    "logging.level.warning": "yellow",
    "logging.level.error": "red",
    "logging.level.debug": "dim",
})


def _rich_handler() -> RichHandler:
    # stderr keeps stdout clean for --json and `patterns` output
    handler = RichHandler(
        console=Console(stderr=True, theme=_THEME),
        show_time=True,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(fmt="%(component)s: %(message)s", datefmt="[%X]"))
    return handler


def _root_logger() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        root.addHandler(_rich_handler())
        root.setLevel(logging.WARNING)
        root.propagate = False
    return root


class TechMatrixLogger:
    """Component logger; keyword arguments are appended as ``key=value`` context."""

    def __init__(self, name: str) -> None:
        _root_logger()
        self.name = name
        self.logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

    def _log(self, level: int, msg: str, context: dict) -> None:
        if not self.logger.isEnabledFor(level):
            return
        if context:
            msg = f"{msg} ({', '.join(f'{key}={value}' for key, value in context.items())})"
        self.logger.log(level, msg, extra={"component": self.name})

    def debug(self, msg: str, **context: Any) -> None:
        self._log(logging.DEBUG, msg, context)

    def info(self, msg: str, **context: Any) -> None:
        self._log(logging.INFO, msg, context)

    def warning(self, msg: str, **context: Any) -> None:
        self._log(logging.WARNING, msg, context)

    def error(self, msg: str, **context: Any) -> None:
        self._log(logging.ERROR, msg, context)


def setup_logging(
    level: int = logging.WARNING,
    log_file: Optional[Path] = None,
    verbose: bool = False
) -> None:
    """Set the level of all TechMatrix loggers.

    Args:
        level: Logging level when not verbose
        log_file: Also write records to this file
        verbose: Log everything down to DEBUG
    """
    root = _root_logger()
    root.setLevel(logging.DEBUG if verbose else level)

    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(component)s - %(levelname)s - %(message)s")
        )
        root.addHandler(file_handler)


def get_logger(name: str) -> TechMatrixLogger:
    """Get a TechMatrix logger instance.

    Args:
        name: Component name shown in front of each message

    Returns:
        Logger instance
    """
    return TechMatrixLogger(name)
