# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""
Current-step working values exposed through BMI get/set.

Each field is a one-element float64 array. The arrays are created once and
afterwards only written into, never rebound, so a view returned by
``get_value_ptr`` keeps tracking the model until the instance is discarded.
"""

from dataclasses import dataclass, field, fields

import numpy as np

from petbmi.io.forcing import ForcingTimeSeries
from petbmi.physics.pet import MeteorologicalInputs


def _scalar() -> np.ndarray:
    return np.zeros(1, dtype=np.float64)


@dataclass
class ForcingSnapshot:
    """This step's forcing plus the PET output."""
    precip_kg_per_m2: np.ndarray = field(default_factory=_scalar)
    surface_pressure_Pa: np.ndarray = field(default_factory=_scalar)
    incoming_longwave_W_per_m2: np.ndarray = field(default_factory=_scalar)
    incoming_shortwave_W_per_m2: np.ndarray = field(default_factory=_scalar)
    specific_humidity_2m_kg_per_kg: np.ndarray = field(default_factory=_scalar)
    air_temperature_2m_K: np.ndarray = field(default_factory=_scalar)
    u_wind_speed_10m_m_per_s: np.ndarray = field(default_factory=_scalar)
    v_wind_speed_10m_m_per_s: np.ndarray = field(default_factory=_scalar)
    pet_m_per_s: np.ndarray = field(default_factory=_scalar)

    def load_step(self, series: ForcingTimeSeries, index: int) -> None:
        """Copy record ``index`` of a forcing time series into the snapshot."""
        for name in ForcingTimeSeries.variable_names():
            getattr(self, name)[0] = getattr(series, name)[index]

    def as_inputs(self) -> MeteorologicalInputs:
        return MeteorologicalInputs(
            **{name: float(getattr(self, name)[0]) for name in MeteorologicalInputs._fields}
        )

    def reset(self) -> None:
        """Zero every value in place."""
        for f in fields(self):
            getattr(self, f.name).fill(0.0)
