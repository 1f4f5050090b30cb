# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""
Potential evapotranspiration (PET) model behind the Basic Model Interface.

Drives a single-point PET computation one time step at a time so that a host
hydrological framework can couple to it through BMI.

Usage:
    from petbmi import BmiPET

    model = BmiPET()
    model.initialize("pet_config.txt")
    for _ in range(model.parameters.num_timesteps):
        model.update()
    pet = model.get_value("water_potential_evaporation_flux", np.empty(1))
    model.finalize()
"""

from typing import TYPE_CHECKING

try:
    from .petbmi_version import __version__
except ImportError:
    try:
        from importlib.metadata import version, PackageNotFoundError
        __version__ = version("petbmi")
    except (ImportError, PackageNotFoundError):
        __version__ = "0.0.0"

_LAZY_IMPORTS = {
    # BMI interface
    'BmiPET': ('.bmi.bmi_pet', 'BmiPET'),
    'ModelClock': ('.bmi.clock', 'ModelClock'),
    'ModelState': ('.bmi.clock', 'ModelState'),
    'VariableRegistry': ('.bmi.registry', 'VariableRegistry'),

    # Configuration
    'PETParameters': ('.config.parameters', 'PETParameters'),
    'read_init_config': ('.config.loader', 'read_init_config'),

    # Forcing
    'ForcingTimeSeries': ('.io.forcing', 'ForcingTimeSeries'),
    'load_forcing_file': ('.io.forcing', 'load_forcing_file'),
    'read_file_line_counts': ('.io.prescan', 'read_file_line_counts'),
    'parse_aorc_line': ('.io.aorc', 'parse_aorc_line'),

    # Physics
    'PETEngine': ('.physics.pet', 'PETEngine'),
    'PETMethod': ('.physics.pet', 'PETMethod'),
}


def __getattr__(name: str):
    """Lazy import handler for petbmi components."""
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        from importlib import import_module
        module = import_module(module_path, package=__name__)
        return getattr(module, attr_name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__():
    return list(_LAZY_IMPORTS.keys()) + ['__version__']


if TYPE_CHECKING:
    from .bmi.bmi_pet import BmiPET
    from .bmi.clock import ModelClock, ModelState
    from .bmi.registry import VariableRegistry
    from .config.loader import read_init_config
    from .config.parameters import PETParameters
    from .io.aorc import parse_aorc_line
    from .io.forcing import ForcingTimeSeries, load_forcing_file
    from .io.prescan import read_file_line_counts
    from .physics.pet import PETEngine, PETMethod


__all__ = [
    '__version__',
    'BmiPET', 'ModelClock', 'ModelState', 'VariableRegistry',
    'PETParameters', 'read_init_config',
    'ForcingTimeSeries', 'load_forcing_file', 'read_file_line_counts', 'parse_aorc_line',
    'PETEngine', 'PETMethod',
]
