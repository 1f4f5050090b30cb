# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""Configuration loading for the PET BMI component."""

from .loader import lex_float, parse_config_lines, read_init_config
from .parameters import FROZEN_CONFIG, PET_METHOD_CHOICES, PETParameters

__all__ = [
    'FROZEN_CONFIG',
    'PET_METHOD_CHOICES',
    'PETParameters',
    'lex_float',
    'parse_config_lines',
    'read_init_config',
]
