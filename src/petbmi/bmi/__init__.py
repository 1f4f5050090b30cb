# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""BMI driver, model clock and variable registry."""

from .bmi_pet import BmiPET
from .clock import ModelClock, ModelState
from .registry import (
    INPUT_VARIABLES,
    OUTPUT_VARIABLES,
    VariableDescriptor,
    VariableRegistry,
)
from .state import ForcingSnapshot

__all__ = [
    'BmiPET',
    'ModelClock',
    'ModelState',
    'VariableDescriptor',
    'VariableRegistry',
    'INPUT_VARIABLES',
    'OUTPUT_VARIABLES',
    'ForcingSnapshot',
]
