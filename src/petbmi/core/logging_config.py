# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""
Logging setup for petbmi.

Library modules only create loggers (``logging.getLogger(__name__)``);
handlers are attached by :func:`setup_logging`, which the command-line
runner calls. The ``verbose`` configuration key is mapped onto the level of
the package logger by :func:`apply_verbosity`.
"""

import logging
from typing import Union

PACKAGE_LOGGER_NAME = 'petbmi'

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'

# verbose >= 5 additionally echoes every forcing record while it is ingested
RECORD_ECHO_VERBOSITY = 5


def setup_logging(level: Union[str, int] = 'INFO') -> None:
    """Configure the root logger once.

    Args:
        level: Logging level name (e.g. 'DEBUG') or numeric level
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    # basicConfig is a no-op if the root logger already has handlers
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)


def verbosity_to_level(verbose: int) -> int:
    """Translate the configuration ``verbose`` value to a logging level.

    Returns ``logging.NOTSET`` for 0, meaning "leave the level alone".
    """
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.NOTSET


def apply_verbosity(verbose: int) -> None:
    """Set the package logger level from the configuration ``verbose`` value."""
    level = verbosity_to_level(verbose)
    if level != logging.NOTSET:
        logging.getLogger(PACKAGE_LOGGER_NAME).setLevel(level)


class LoggingMixin:
    """
    Mixin providing standardized logger access.

    Ensures a logger is always available, defaulting to one named after the
    class (and therefore a child of the ``petbmi`` package logger) if none
    is explicitly set.
    """

    @property
    def logger(self) -> logging.Logger:
        """Get the logger instance."""
        _logger = getattr(self, '_logger', None)
        if _logger is None:
            self._logger = logging.getLogger(
                f"{self.__class__.__module__}.{self.__class__.__name__}"
            )
        return self._logger

    @logger.setter
    def logger(self, value: logging.Logger) -> None:
        """Set the logger instance (e.g. a host framework's logger)."""
        self._logger = value


__all__ = [
    'PACKAGE_LOGGER_NAME',
    'RECORD_ECHO_VERBOSITY',
    'setup_logging',
    'verbosity_to_level',
    'apply_verbosity',
    'LoggingMixin',
]
