# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""Reference PET physics called once per model step."""

from .pet import (
    AtmosphericState,
    MeteorologicalInputs,
    PETEngine,
    PETMethod,
    atmospheric_state,
    moist_air_density,
    psychrometric_constant,
    saturation_slope,
    saturation_vapor_pressure,
    vapor_pressure_from_specific_humidity,
)
from .radiation import clear_sky_shortwave, cos_solar_zenith, net_radiation

__all__ = [
    'AtmosphericState',
    'MeteorologicalInputs',
    'PETEngine',
    'PETMethod',
    'atmospheric_state',
    'moist_air_density',
    'psychrometric_constant',
    'saturation_slope',
    'saturation_vapor_pressure',
    'vapor_pressure_from_specific_humidity',
    'clear_sky_shortwave',
    'cos_solar_zenith',
    'net_radiation',
]
