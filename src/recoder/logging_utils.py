"""Logging helpers for the recoder command line tool."""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER_NAME = "recoder"

_PLAIN_FORMAT = "%(levelname)s: %(message)s"
_TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(recipe)s%(message)s"
_TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def sanitize_for_log(value: object) -> str:
    """Render a user supplied value on a single log line."""
    return str(value).replace("\n", "\\n").replace("\r", "\\r")


class RecipeContextFilter(logging.Filter):
    """Attach the recipe being run to every record as ``record.recipe``.

    The trace format prints it in front of the message, so interleaved
    output of several invocations sharing a log file can be told apart.
    """

    def __init__(self, recipe: Optional[str] = None) -> None:
        super().__init__()
        self.recipe = recipe

    def filter(self, record: logging.LogRecord) -> bool:
        record.recipe = f"<{sanitize_for_log(self.recipe)}> " if self.recipe else ""
        return True


def _resolve_level(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    resolved = logging.getLevelName(str(log_level).upper())
    return resolved if isinstance(resolved, int) else logging.WARNING


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    recipe: Optional[str] = None,
) -> logging.Logger:
    """Configure root logging handlers for the command line tool.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name such as ``"DEBUG"``. Unknown
        names fall back to ``WARNING``.
    log_file : str, optional
        Path of a file that receives a copy of every record
    trace_mode : bool, default False
        Emit timestamps, logger names and the active recipe
    recipe : str, optional
        Recipe being run, shown in trace output

    Returns
    -------
    logging.Logger
        The configured root logger

    """
    level = _resolve_level(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if trace_mode:
        formatter = logging.Formatter(_TRACE_FORMAT, datefmt=_TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(_PLAIN_FORMAT)
    context = RecipeContextFilter(recipe)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error: Optional[OSError] = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as exc:
            file_error = exc

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context)
        root_logger.addHandler(handler)

    logging.getLogger(PACKAGE_LOGGER_NAME).setLevel(level)

    if file_error is not None:
        root_logger.warning(f"Could not create log file {log_file}: {file_error}")
    elif log_file:
        root_logger.info(f"Logging to file: {log_file}")

    return root_logger


__all__ = ["PACKAGE_LOGGER_NAME", "RecipeContextFilter", "sanitize_for_log", "configure_logging"]
