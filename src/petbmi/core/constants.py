# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""
Physical constants and unit conversion factors for petbmi.

Centralizes all hardcoded constants used by the PET engine and the
BMI driver.
"""

import numpy as np


class UnitConversion:
    """Unit conversion factors used by the PET engine."""

    SECONDS_PER_HOUR = 3600
    """Seconds in one hour."""

    DAYS_PER_YEAR = 365.0
    """Days per year used in the solar declination formulas."""

    M_PER_S_TO_MM_PER_HOUR = 1000.0 * SECONDS_PER_HOUR
    """Convert a water flux in m/s to mm/hour."""


class PhysicalConstants:
    """
    Physical constants for meteorological and evaporation calculations.

    Values are from standard reference sources (FAO-56, Brutsaert 1982)
    and widely accepted approximations used in hydrological modeling.
    """

    KELVIN_OFFSET = 273.15
    """Offset to convert Celsius to Kelvin (T_K = T_C + 273.15)."""

    WATER_DENSITY = 1000.0
    """Water density in kg/m³."""

    LATENT_HEAT_VAPORIZATION = 2.45e6
    """Latent heat of vaporization of water in J/kg at 20°C."""

    SPECIFIC_HEAT_AIR = 1005.0
    """Specific heat of dry air at constant pressure in J/(kg·K)."""

    STEFAN_BOLTZMANN = 5.67e-8
    """Stefan-Boltzmann constant in W/(m²·K⁴)."""

    GAS_CONSTANT_DRY_AIR = 287.05
    """Specific gas constant for dry air in J/(kg·K)."""

    VON_KARMAN = 0.41
    """von Kármán constant (dimensionless)."""

    WATER_VAPOR_MOLECULAR_RATIO = 0.622
    """Ratio of molecular weights of water vapor and dry air."""

    SOLAR_CONSTANT = 1367.0
    """Solar constant in W/m²."""


class PETDefaults:
    """Method-level defaults of the reference PET engine."""

    PRIESTLEY_TAYLOR_ALPHA = 1.26
    """Priestley-Taylor coefficient for a well-watered surface."""

    BULK_SURFACE_RESISTANCE_S_PER_M = 70.0
    """Bulk surface resistance of the FAO-56 reference surface (s/m)."""

    MIN_WIND_SPEED_M_PER_S = 0.01
    """Floor on wind speed to keep aerodynamic resistance finite."""

    ROUGHNESS_TO_VEGETATION_RATIO = 0.123
    """Momentum roughness length as a fraction of vegetation height."""

    DISPLACEMENT_TO_VEGETATION_RATIO = 2.0 / 3.0
    """Zero-plane displacement as a fraction of vegetation height."""

    HEAT_TO_MOMENTUM_ROUGHNESS_RATIO = 0.1
    """Heat/vapor roughness length as a fraction of the momentum roughness."""


class BMIConstants:
    """Constants of the BMI surface."""

    TIME_UNITS = "s"
    """Model time units."""

    COMPONENT_NAME = "Potential Evapotranspiration"
    """Component name reported to the host framework."""

    FORCING_FROM_BMI_SENTINEL = "BMI"
    """``forcing_file`` value meaning forcing arrives through ``set_value``."""

    SCALAR_GRID_ID = 0
    """Identifier of the single supported grid."""

    UNSET_END_TIME_OFFSET = float(np.finfo(np.float32).max)
    """Offset added to the start time when ``num_timesteps`` is unset (FLT_MAX)."""


__all__ = [
    'UnitConversion',
    'PhysicalConstants',
    'PETDefaults',
    'BMIConstants',
]
