"""Centralized logging utilities."""

import logging
import os
import sys
from typing import Optional


DEFAULT_FORMAT = '[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s'

# Workflow command prefixes understood by the GitHub Actions runner
_WORKFLOW_COMMANDS = {
    logging.DEBUG: '::debug::',
    logging.WARNING: '::warning::',
    logging.ERROR: '::error::',
    logging.CRITICAL: '::error::',
}


def running_in_actions() -> bool:
    """Check whether the process runs inside a GitHub Actions job."""
    return os.getenv('GITHUB_ACTIONS', '').lower() == 'true'


def escape_command_data(message: str) -> str:
    """Escape a message for use as workflow command data."""
    return (
        message.replace('%', '%25')
        .replace('\r', '%0D')
        .replace('\n', '%0A')
    )


class ActionsFormatter(logging.Formatter):
    """
    Render records as GitHub Actions workflow commands.

    INFO records are printed as-is, other levels become ``::debug::``,
    ``::warning::`` or ``::error::`` annotations.
    """

    def __init__(self):
        super().__init__('%(message)s')

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        prefix = _WORKFLOW_COMMANDS.get(record.levelno)
        if prefix is None:
            return message
        return f"{prefix}{escape_command_data(message)}"


def setup_logger(
    name: str,
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    actions: Optional[bool] = None
) -> logging.Logger:
    """
    Set up a logger writing to stdout.

    Args:
        name: Logger name
        level: Logging level
        format_string: Custom format string
        actions: Emit workflow commands (default: detect GITHUB_ACTIONS)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if actions is None:
        actions = running_in_actions()

    # The runner hides ::debug:: lines unless step debugging is enabled
    if actions:
        level = logging.DEBUG

    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    if format_string is None:
        format_string = DEFAULT_FORMAT

    formatter = logging.Formatter(format_string, datefmt='%H:%M:%S')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ActionsFormatter() if actions else formatter)
    logger.addHandler(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name.

    Loggers below the ``signdispatch`` namespace propagate to the package
    logger configured by :func:`setup_logger`.
    """
    return logging.getLogger(name)


class LoggerAdapter:
    """Adapter to make standard logger compatible with ILogger protocol."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message."""
        self._logger.debug(message, extra=kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message."""
        self._logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message."""
        self._logger.warning(message, extra=kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log error message."""
        self._logger.error(message, extra=kwargs)
