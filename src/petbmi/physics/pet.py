# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""
Reference potential evapotranspiration engine.

Five methods, selected by the ``pet_method`` configuration key:

1. Energy balance: all available net radiation evaporates
2. Aerodynamic: bulk vapor transfer driven by the vapor pressure deficit
3. Combination (Penman): radiation and aerodynamic terms weighted by
   Δ/(Δ+γ) and γ/(Δ+γ)
4. Priestley-Taylor: α·Δ/(Δ+γ) times the energy-balance rate
5. Penman-Monteith: combination form with a bulk surface resistance

All rates are in m s-1 of liquid water and clipped at zero.

References:
    Allen, R.G. et al. (1998). Crop evapotranspiration, FAO Irrigation and
    Drainage Paper 56.
    Brutsaert, W. (1982). Evaporation into the Atmosphere.
    Priestley, C.H.B. and Taylor, R.J. (1972). Mon. Weather Rev. 100, 81-92.
"""

import logging
import math
from enum import IntEnum
from typing import NamedTuple

import numpy as np

from petbmi.config.parameters import PETParameters
from petbmi.core.constants import PETDefaults, PhysicalConstants
from petbmi.core.exceptions import require
from .radiation import clear_sky_shortwave, net_radiation

logger = logging.getLogger(__name__)


class PETMethod(IntEnum):
    """PET method selector (``pet_method`` configuration key)."""
    ENERGY_BALANCE = 1
    AERODYNAMIC = 2
    COMBINATION = 3
    PRIESTLEY_TAYLOR = 4
    PENMAN_MONTEITH = 5


class MeteorologicalInputs(NamedTuple):
    """Forcing values of one step, in the units the BMI exposes."""
    incoming_longwave_W_per_m2: float
    incoming_shortwave_W_per_m2: float
    surface_pressure_Pa: float
    specific_humidity_2m_kg_per_kg: float
    air_temperature_2m_K: float
    u_wind_speed_10m_m_per_s: float
    v_wind_speed_10m_m_per_s: float


class AtmosphericState(NamedTuple):
    """Derived near-surface quantities used by every method."""
    saturation_vapor_pressure_Pa: float
    vapor_pressure_Pa: float
    slope_Pa_per_K: float           # Δ
    psychrometric_Pa_per_K: float   # γ
    air_density_kg_per_m3: float
    wind_speed_m_per_s: float


# =============================================================================
# THERMODYNAMICS
# =============================================================================

def saturation_vapor_pressure(temp_c: float) -> float:
    """Saturation vapor pressure over water (Pa), Bolton (1980)."""
    return float(611.2 * np.exp(np.divide(17.67 * temp_c, temp_c + 243.5)))


def vapor_pressure_from_specific_humidity(q: float, pressure_Pa: float) -> float:
    """Actual vapor pressure (Pa) from specific humidity and air pressure."""
    eps = PhysicalConstants.WATER_VAPOR_MOLECULAR_RATIO
    return float(np.divide(q * pressure_Pa, eps + (1.0 - eps) * q))


def saturation_slope(temp_c: float, es_Pa: float) -> float:
    """Slope of the saturation vapor pressure curve (Pa K-1), FAO-56 eq. 13."""
    return float(np.divide(4098.0 * es_Pa, (temp_c + 237.3) ** 2))


def psychrometric_constant(pressure_Pa: float) -> float:
    """Psychrometric constant γ (Pa K-1), FAO-56 eq. 8."""
    return (PhysicalConstants.SPECIFIC_HEAT_AIR * pressure_Pa
            / (PhysicalConstants.WATER_VAPOR_MOLECULAR_RATIO
               * PhysicalConstants.LATENT_HEAT_VAPORIZATION))


def moist_air_density(pressure_Pa: float, temp_K: float, q: float) -> float:
    """Density of moist air (kg m-3) from the virtual temperature."""
    virtual_temp = temp_K * (1.0 + 0.608 * q)
    return float(np.divide(pressure_Pa, PhysicalConstants.GAS_CONSTANT_DRY_AIR * virtual_temp))


def atmospheric_state(inputs: MeteorologicalInputs) -> AtmosphericState:
    temp_c = inputs.air_temperature_2m_K - PhysicalConstants.KELVIN_OFFSET
    es = saturation_vapor_pressure(temp_c)
    wind = math.hypot(inputs.u_wind_speed_10m_m_per_s, inputs.v_wind_speed_10m_m_per_s)
    return AtmosphericState(
        saturation_vapor_pressure_Pa=es,
        vapor_pressure_Pa=vapor_pressure_from_specific_humidity(
            inputs.specific_humidity_2m_kg_per_kg, inputs.surface_pressure_Pa),
        slope_Pa_per_K=saturation_slope(temp_c, es),
        psychrometric_Pa_per_K=psychrometric_constant(inputs.surface_pressure_Pa),
        air_density_kg_per_m3=moist_air_density(
            inputs.surface_pressure_Pa, inputs.air_temperature_2m_K,
            inputs.specific_humidity_2m_kg_per_kg),
        wind_speed_m_per_s=max(wind, PETDefaults.MIN_WIND_SPEED_M_PER_S),
    )


# =============================================================================
# ENGINE
# =============================================================================

class PETEngine:
    """Per-step PET computation for one site.

    Built once from the model parameters; :meth:`compute` is called by the
    BMI driver at every step with that step's forcing.
    """

    def __init__(self, params: PETParameters):
        self.params = params
        self.method = PETMethod(params.pet_method)

        veg_h = params.vegetation_height_m
        self.displacement_m = (params.zero_plane_displacement_height_m
                               or PETDefaults.DISPLACEMENT_TO_VEGETATION_RATIO * veg_h)
        self.momentum_roughness_m = (params.momentum_transfer_roughness_length_m
                                     or PETDefaults.ROUGHNESS_TO_VEGETATION_RATIO * veg_h)
        require(
            self.momentum_roughness_m > 0.0,
            "momentum_transfer_roughness_length_m and vegetation_height_m are both 0; "
            "one of them must be positive",
        )
        self.heat_roughness_m = (PETDefaults.HEAT_TO_MOMENTUM_ROUGHNESS_RATIO
                                 * self.momentum_roughness_m)

        for key in ('wind_speed_measurement_height_m', 'humidity_measurement_height_m'):
            height = getattr(params, key)
            require(
                height - self.displacement_m > self.momentum_roughness_m,
                f"{key}={height} must exceed zero-plane displacement "
                f"({self.displacement_m:.3f} m) plus roughness length "
                f"({self.momentum_roughness_m:.3f} m)",
            )

        # Wind-speed independent part of the aerodynamic resistance
        self._log_profile = (
            math.log((params.wind_speed_measurement_height_m - self.displacement_m)
                     / self.momentum_roughness_m)
            * math.log((params.humidity_measurement_height_m - self.displacement_m)
                       / self.heat_roughness_m)
        )
        logger.debug(
            f"PET engine: method={self.method.name}, d={self.displacement_m:.3f} m, "
            f"z0m={self.momentum_roughness_m:.4f} m"
        )

    def aerodynamic_resistance(self, wind_speed_m_per_s: float) -> float:
        """Aerodynamic resistance to vapor transfer (s m-1), FAO-56 eq. 4."""
        return self._log_profile / (PhysicalConstants.VON_KARMAN ** 2 * wind_speed_m_per_s)

    def available_energy(
        self,
        inputs: MeteorologicalInputs,
        current_time: float,
        time_step_size_s: float,
    ) -> float:
        """Net radiation (W m-2) for the step starting at ``current_time``."""
        p = self.params
        if p.shortwave_radiation_provided:
            shortwave = inputs.incoming_shortwave_W_per_m2
        else:
            shortwave = clear_sky_shortwave(
                current_time, time_step_size_s,
                p.latitude_degrees, p.longitude_degrees, p.site_elevation_m,
            )
        return net_radiation(
            shortwave,
            inputs.incoming_longwave_W_per_m2,
            inputs.air_temperature_2m_K,
            p.surface_shortwave_albedo,
            p.surface_longwave_emissivity,
        )

    def compute(
        self,
        inputs: MeteorologicalInputs,
        time_step_size_s: float,
        current_time: float,
    ) -> float:
        """Potential evapotranspiration rate (m s-1) for one step.

        Forcing the formulas cannot use (zero pressure or temperature, as
        before a host's first ``set_value``) gives NaN or inf, not an
        exception; the NaN is not clipped.
        """
        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            return self._compute(inputs, time_step_size_s, current_time)

    def _compute(self, inputs, time_step_size_s, current_time):
        atm = atmospheric_state(inputs)
        rn = self.available_energy(inputs, current_time, time_step_size_s)
        ra = self.aerodynamic_resistance(atm.wind_speed_m_per_s)

        lam_rho = PhysicalConstants.LATENT_HEAT_VAPORIZATION * PhysicalConstants.WATER_DENSITY
        delta = atm.slope_Pa_per_K
        gamma = atm.psychrometric_Pa_per_K
        deficit = max(atm.saturation_vapor_pressure_Pa - atm.vapor_pressure_Pa, 0.0)

        radiation_rate = rn / lam_rho
        aerodynamic_rate = np.divide(
            atm.air_density_kg_per_m3 * PhysicalConstants.SPECIFIC_HEAT_AIR * deficit,
            ra * gamma * lam_rho,
        )

        if self.method is PETMethod.ENERGY_BALANCE:
            pet = radiation_rate
        elif self.method is PETMethod.AERODYNAMIC:
            pet = aerodynamic_rate
        elif self.method is PETMethod.COMBINATION:
            pet = np.divide(delta * radiation_rate + gamma * aerodynamic_rate, delta + gamma)
        elif self.method is PETMethod.PRIESTLEY_TAYLOR:
            pet = (PETDefaults.PRIESTLEY_TAYLOR_ALPHA * np.divide(delta, delta + gamma)
                   * radiation_rate)
        else:
            rs = PETDefaults.BULK_SURFACE_RESISTANCE_S_PER_M
            pet = np.divide(
                delta * rn
                + np.divide(atm.air_density_kg_per_m3 * PhysicalConstants.SPECIFIC_HEAT_AIR
                            * deficit, ra),
                lam_rho * (delta + gamma * (1.0 + np.divide(rs, ra))),
            )

        return float(np.maximum(pet, 0.0))
