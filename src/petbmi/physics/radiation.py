# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""
Radiation terms for the PET engine.

Clear-sky shortwave follows FAO-56 (Allen et al., 1998), eqs. 21-37,
evaluated at the middle of the model step; net radiation combines the
absorbed shortwave with the longwave balance of a surface at air
temperature.
"""

import math
from datetime import datetime, timezone

from petbmi.core.constants import PhysicalConstants, UnitConversion


def solar_declination(day_of_year: int) -> float:
    """Solar declination in radians (FAO-56 eq. 24)."""
    return 0.409 * math.sin(2.0 * math.pi * day_of_year / UnitConversion.DAYS_PER_YEAR - 1.39)


def inverse_relative_distance(day_of_year: int) -> float:
    """Inverse relative Earth-Sun distance (FAO-56 eq. 23)."""
    return 1.0 + 0.033 * math.cos(2.0 * math.pi * day_of_year / UnitConversion.DAYS_PER_YEAR)


def equation_of_time_hours(day_of_year: int) -> float:
    """Seasonal correction for solar time in hours (FAO-56 eq. 32)."""
    b = 2.0 * math.pi * (day_of_year - 81) / 364.0
    return 0.1645 * math.sin(2.0 * b) - 0.1255 * math.cos(b) - 0.025 * math.sin(b)


def cos_solar_zenith(
    epoch_seconds: float,
    latitude_degrees: float,
    longitude_degrees: float,
) -> float:
    """Cosine of the solar zenith angle at a UTC instant."""
    stamp = datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)
    doy = stamp.timetuple().tm_yday
    utc_hours = stamp.hour + stamp.minute / 60.0 + stamp.second / 3600.0

    solar_time = utc_hours + longitude_degrees / 15.0 + equation_of_time_hours(doy)
    hour_angle = math.pi / 12.0 * (solar_time - 12.0)

    lat = math.radians(latitude_degrees)
    decl = solar_declination(doy)
    return (math.sin(lat) * math.sin(decl)
            + math.cos(lat) * math.cos(decl) * math.cos(hour_angle))


def clear_sky_shortwave(
    epoch_seconds: float,
    time_step_size_s: float,
    latitude_degrees: float,
    longitude_degrees: float,
    site_elevation_m: float,
) -> float:
    """Clear-sky incoming shortwave (W m-2) averaged at the middle of the step."""
    midpoint = epoch_seconds + 0.5 * time_step_size_s
    stamp = datetime.fromtimestamp(midpoint, tz=timezone.utc)
    doy = stamp.timetuple().tm_yday

    cos_zenith = cos_solar_zenith(midpoint, latitude_degrees, longitude_degrees)
    extraterrestrial = (PhysicalConstants.SOLAR_CONSTANT
                        * inverse_relative_distance(doy)
                        * max(cos_zenith, 0.0))
    return (0.75 + 2.0e-5 * site_elevation_m) * extraterrestrial


def net_radiation(
    incoming_shortwave_W_per_m2: float,
    incoming_longwave_W_per_m2: float,
    air_temperature_K: float,
    albedo: float,
    emissivity: float,
) -> float:
    """Net all-wave radiation at the surface (W m-2)."""
    absorbed_shortwave = (1.0 - albedo) * incoming_shortwave_W_per_m2
    emitted_longwave = PhysicalConstants.STEFAN_BOLTZMANN * air_temperature_K ** 4
    return absorbed_shortwave + emissivity * (incoming_longwave_W_per_m2 - emitted_longwave)
