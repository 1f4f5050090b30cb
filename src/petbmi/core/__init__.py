# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""Shared constants, exceptions and logging helpers."""

from .constants import BMIConstants, PETDefaults, PhysicalConstants, UnitConversion
from .exceptions import (
    ConfigOpenError,
    ConfigurationError,
    ConfigValidationError,
    ForcingDisappearedError,
    ForcingError,
    ForcingHeaderOnlyError,
    ForcingOpenError,
    ForcingRecordError,
    ForcingTooShortError,
    ModelStateError,
    PETBMIError,
    PrescanError,
    UnrecognizedVariableError,
    UnsupportedGridQueryError,
    petbmi_error_handler,
    require,
)
from .logging_config import LoggingMixin, apply_verbosity, setup_logging

__all__ = [
    'BMIConstants',
    'PETDefaults',
    'PhysicalConstants',
    'UnitConversion',
    'PETBMIError',
    'ConfigurationError',
    'ConfigOpenError',
    'ConfigValidationError',
    'ForcingError',
    'ForcingOpenError',
    'ForcingHeaderOnlyError',
    'ForcingDisappearedError',
    'ForcingTooShortError',
    'ForcingRecordError',
    'PrescanError',
    'UnrecognizedVariableError',
    'UnsupportedGridQueryError',
    'ModelStateError',
    'petbmi_error_handler',
    'require',
    'LoggingMixin',
    'apply_verbosity',
    'setup_logging',
]
