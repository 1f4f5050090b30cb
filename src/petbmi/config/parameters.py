# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""
Model parameters of the PET BMI component.

All values come from the ``key=value`` configuration file read by
:func:`petbmi.config.loader.read_init_config`. The model is frozen: it is
built once during ``initialize`` and only read afterwards.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from petbmi.core.constants import BMIConstants

# Standard ConfigDict for all config models
FROZEN_CONFIG = ConfigDict(extra='ignore', frozen=True)

# pet_method selector values
PET_METHOD_CHOICES = (1, 2, 3, 4, 5)


class PETParameters(BaseModel):
    """Scalar configuration of a single-point PET run."""
    model_config = FROZEN_CONFIG

    # Run control
    verbose: int = Field(default=0, description='Diagnostic output level')
    pet_method: int = Field(
        default=5,
        description='1=energy balance, 2=aerodynamic, 3=combination, '
                    '4=Priestley-Taylor, 5=Penman-Monteith'
    )
    yes_aorc: bool = Field(default=True, description='Forcing follows the AORC schema')
    forcing_file: Optional[str] = Field(
        default=None,
        description="AORC CSV path, or 'BMI' to receive forcing through set_value"
    )
    run_unit_tests: bool = Field(default=False)

    # Site geometry and measurement heights
    wind_speed_measurement_height_m: float = Field(default=10.0, gt=0)
    humidity_measurement_height_m: float = Field(default=2.0, gt=0)
    vegetation_height_m: float = Field(default=0.12, ge=0)
    zero_plane_displacement_height_m: float = Field(default=0.0, ge=0)
    momentum_transfer_roughness_length_m: float = Field(default=0.0, ge=0)

    # Radiation
    shortwave_radiation_provided: bool = Field(default=True)
    surface_longwave_emissivity: float = Field(default=1.0, ge=0, le=1)
    surface_shortwave_albedo: float = Field(default=0.23, ge=0, le=1)

    # Solar geometry
    latitude_degrees: float = Field(default=0.0, ge=-90, le=90)
    longitude_degrees: float = Field(default=0.0, ge=-180, le=360)
    site_elevation_m: float = Field(default=0.0)

    # Time stepping
    time_step_size_s: float = Field(default=3600.0, gt=0)
    num_timesteps: int = Field(default=1, ge=1)

    @field_validator('pet_method')
    @classmethod
    def _check_pet_method(cls, value: int) -> int:
        if value not in PET_METHOD_CHOICES:
            raise ValueError(
                f"pet_method must be one of {PET_METHOD_CHOICES}, got {value}"
            )
        return value

    @property
    def is_forcing_from_bmi(self) -> bool:
        """True when forcing is supplied by the caller rather than read from disk."""
        return self.forcing_file == BMIConstants.FORCING_FROM_BMI_SENTINEL
