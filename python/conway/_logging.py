import inspect
import os

from taichi._lib import core as ti_python_core


def _get_logging(name):
    """Generates a logger function bound to a specific logging level.

    Messages are routed through Taichi's core logger so that they share its
    level, format and sinks with the runtime's own output.

    Args:
        name (str): The string represents logging level.
            Effective levels include: 'trace', 'debug', 'info', 'warn', 'error', 'critical'.

    Returns:
        Callable: The logger function.
    """

    def logger(msg, *args, **kwargs):
        # Skip frame inspection when the level is off
        if ti_python_core.logging_effective(name):
            msg_formatted = msg.format(*args, **kwargs) if args or kwargs else msg
            func = getattr(ti_python_core, name)
            frame = inspect.currentframe().f_back
            file_name, lineno, func_name, _, _ = inspect.getframeinfo(frame)
            file_name = os.path.basename(file_name)
            msg = f"[conway] [{file_name}:{func_name}@{lineno}] {msg_formatted}"
            func(msg)

    return logger


def set_logging_level(level):
    """Setting the logging level to a specified value.
    Available levels are: 'trace', 'debug', 'info', 'warn', 'error', 'critical'.

    The level is shared with the Taichi runtime.

    Args:
        level (str): Logging level.

    Example::

        >>> set_logging_level('debug')
    """
    ti_python_core.set_logging_level(level)


def is_logging_effective(level):
    """Check if the specified logging level is effective.
    All levels below current level will be effective.
    The default level is 'info'.

    Args:
        level (str): The string represents logging level.

    Returns:
        Bool: Indicate whether the logging level is effective.
    """
    return ti_python_core.logging_effective(level)


DEBUG = "debug"
TRACE = "trace"
INFO = "info"
WARN = "warn"
ERROR = "error"
CRITICAL = "critical"

supported_log_levels = [DEBUG, TRACE, INFO, WARN, ERROR, CRITICAL]

debug = _get_logging(DEBUG)
trace = _get_logging(TRACE)
info = _get_logging(INFO)
warn = _get_logging(WARN)
error = _get_logging(ERROR)
critical = _get_logging(CRITICAL)

__all__ = [
    "DEBUG",
    "TRACE",
    "INFO",
    "WARN",
    "ERROR",
    "CRITICAL",
    "set_logging_level",
    "is_logging_effective",
]
