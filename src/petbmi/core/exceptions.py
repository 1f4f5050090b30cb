# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""
Custom exception hierarchy for petbmi.

This module defines a hierarchy of exceptions that provide clear, specific
error types for the failure modes of the PET model and its BMI surface.
Several classes also derive from a built-in exception so that callers
speaking plain Python (``except FileNotFoundError``, ``except KeyError``)
keep working.
"""

import logging
from contextlib import contextmanager
from typing import Optional


class PETBMIError(Exception):
    """
    Base exception for all petbmi-specific errors.

    All custom exceptions in petbmi should inherit from this class.
    This allows catching all petbmi errors with a single except clause.
    """
    pass


# =============================================================================
# Configuration
# =============================================================================

class ConfigurationError(PETBMIError):
    """
    Configuration-related errors.

    Raised when:
    - Configuration file cannot be opened
    - Configuration values are invalid
    """
    pass


class ConfigOpenError(ConfigurationError, FileNotFoundError):
    """Configuration file could not be opened for reading."""
    pass


class ConfigValidationError(ConfigurationError):
    """
    Configuration validation failures.

    Raised when:
    - A parsed value violates a field constraint (e.g. non-positive time step)
    - An unsupported PET method is selected
    """
    pass


# =============================================================================
# Forcing ingestion
# =============================================================================

class ForcingError(PETBMIError):
    """
    Forcing file ingestion failures.

    Raised when:
    - The configured forcing file cannot be opened
    - The forcing file holds no data records
    - A forcing record cannot be parsed
    """
    pass


class ForcingOpenError(ForcingError, FileNotFoundError):
    """Configured forcing file could not be opened for reading."""
    pass


class ForcingHeaderOnlyError(ForcingError):
    """Forcing file contains at most a header line."""
    pass


class ForcingDisappearedError(ForcingError, FileNotFoundError):
    """Forcing file vanished between the prescan and the read pass."""
    pass


class ForcingTooShortError(ForcingError):
    """Forcing file holds fewer data records than ``num_timesteps``."""
    pass


class ForcingRecordError(ForcingError, ValueError):
    """A forcing record does not match the AORC column schema."""
    pass


class PrescanError(PETBMIError, FileNotFoundError):
    """File handed to the prescanner could not be opened."""
    pass


# =============================================================================
# BMI surface
# =============================================================================

class UnrecognizedVariableError(PETBMIError, KeyError):
    """
    Variable name is not part of the model's input or output namespace.

    Recoverable per call: the lookup never mutates model state.
    """

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ''


class UnsupportedGridQueryError(PETBMIError, NotImplementedError):
    """
    Grid query that this single-point model does not answer.

    Only grid 0 (rank 1, size 1, type ``scalar``) is defined; every other
    grid id and every geometry query fails permanently.
    """
    pass


class ModelStateError(PETBMIError):
    """Operation invoked in a lifecycle state that does not allow it."""
    pass


# =============================================================================
# Validation Helpers
# =============================================================================

def require(condition: bool, message: str, error_type: type = None) -> None:
    """
    Validate a condition, raising an exception if it fails.

    Args:
        condition: The condition that must be True
        message: Error message if condition is False
        error_type: Exception type to raise (default: ConfigValidationError)

    Raises:
        ConfigValidationError (or specified error_type) if condition is False
    """
    if error_type is None:
        error_type = ConfigValidationError
    if not condition:
        raise error_type(message)


@contextmanager
def petbmi_error_handler(
    operation: str,
    logger: Optional[logging.Logger] = None,
    reraise: bool = True,
    error_type: type = PETBMIError
):
    """
    Context manager for standardized error handling.

    petbmi errors pass through unchanged; any other exception is logged
    and converted to ``error_type``.

    Args:
        operation: Description of the operation being performed (for logging)
        logger: Logger instance for error messages. If None, errors are not logged.
        reraise: Whether to re-raise the exception after handling (default: True)
        error_type: petbmi exception type to convert generic exceptions to

    Example:
        >>> with petbmi_error_handler("forcing ingestion", logger, error_type=ForcingError):
        ...     series = load_forcing_file(path, n, dt)
    """
    try:
        yield
    except PETBMIError:
        if logger:
            logger.error(f"Error during {operation}", exc_info=True)
        if reraise:
            raise
    except Exception as e:
        if logger:
            logger.error(f"Error during {operation}: {e}", exc_info=True)
        if reraise:
            raise error_type(f"Failed during {operation}: {e}") from e


# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Base
    'PETBMIError',
    # Configuration
    'ConfigurationError',
    'ConfigOpenError',
    'ConfigValidationError',
    # Forcing
    'ForcingError',
    'ForcingOpenError',
    'ForcingHeaderOnlyError',
    'ForcingDisappearedError',
    'ForcingTooShortError',
    'ForcingRecordError',
    'PrescanError',
    # BMI
    'UnrecognizedVariableError',
    'UnsupportedGridQueryError',
    'ModelStateError',
    # Helpers
    'require',
    'petbmi_error_handler',
]
