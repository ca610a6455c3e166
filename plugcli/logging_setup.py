"""Logging setup.

Every module and plugin logs through a child of the `plugcli` logger
(`plugcli.runner`, `plugcli.core`, ...) and the handlers are installed on
`plugcli` only. Records logged while a command runs or a hook fires carry its
name in `%(context)s`, shown in debug mode and in the log file.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from .ansi import LEVEL_STYLES, colorize, should_colorize
from .debug import is_debug, set_debug

__all__ = [
    "ROOT_LOGGER",
    "ContextFilter",
    "ScreenLogFormatter",
    "get_logger",
    "init_logger",
    "log_context",
]

ROOT_LOGGER = "plugcli"

FILE_FORMAT = r"%(asctime)s [%(levelname)s] %(name)s%(context)s :: %(message)s :: %(filename)s:%(lineno)d"

_context: ContextVar[str] = ContextVar("plugcli_log_context", default="")


@contextmanager
def log_context(label: str) -> Iterator[None]:
    """Tag the records logged inside the block (and the tasks it starts) with `label`.

    Nested blocks are joined: `build > build:before`.
    """
    current = _context.get()
    token = _context.set(f"{current} > {label}" if current else label)
    try:
        yield
    finally:
        _context.reset(token)


class ContextFilter(logging.Filter):
    """Set `record.context` from the running command or hook."""

    def filter(self, record: logging.LogRecord) -> bool:
        label = _context.get()
        record.context = f" [{label}]" if label else ""
        return True


class ScreenLogFormatter(logging.Formatter):
    """Terminal formatter: colors by level, logger name and context in debug mode."""

    def __init__(self, debug: bool = False, colored: bool = False) -> None:
        super().__init__(r"%(name)s%(context)s: %(message)s" if debug else r"%(message)s")
        self.colored = colored

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        style = LEVEL_STYLES.get(record.levelno)
        return colorize(text, *style) if self.colored and style else text


def init_logger(filename: str | None = None, force_debug: bool = False) -> None:
    """Install the handlers of the `plugcli` logger, replacing previous ones.

    Args:
        filename: Optional filename to log to
        force_debug: If True, force debug level
    """
    if force_debug:
        set_debug(True)

    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    context = ContextFilter()
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(ScreenLogFormatter(is_debug(), should_colorize()))
    stream_handler.addFilter(context)
    root.addHandler(stream_handler)
    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        file_handler.addFilter(context)
        root.addHandler(file_handler)

    root.setLevel(logging.DEBUG if is_debug() else logging.WARNING)
    root.propagate = False


def get_logger(name: str | None = None, level: int | None = None) -> logging.Logger:
    """Return the `plugcli` logger, or its child `plugcli.<name>`.

    Args:
        name (str): logger's name, relative to `plugcli`
        level (int): logger's level (inherited from `plugcli` if not set)
    """
    logger = logging.getLogger(f"{ROOT_LOGGER}.{name}" if name and name != ROOT_LOGGER else ROOT_LOGGER)
    if level is not None:
        logger.setLevel(level)
    return logger
