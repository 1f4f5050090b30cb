# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""
Name-keyed registry of the BMI input and output variables.

Each registered name is bound to one field of the current-step
:class:`~petbmi.bmi.state.ForcingSnapshot`. The registry answers the
metadata queries (type, units, grid, location, sizes) and performs the
get/set dispatch, including indexed gather/scatter.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Tuple

import numpy as np

from petbmi.core.exceptions import UnrecognizedVariableError
from .state import ForcingSnapshot

logger = logging.getLogger(__name__)

# BMI type strings and their C storage types
_TYPE_DTYPES: Dict[str, np.dtype] = {
    'double': np.dtype(np.float64),
    'float': np.dtype(np.float32),
    'int': np.dtype(np.intc),
    'short': np.dtype(np.short),
    'long': np.dtype('l'),
}


@dataclass(frozen=True)
class VariableDescriptor:
    """Static metadata of one exchange item."""
    name: str
    type: str
    units: str
    item_count: int
    grid: int
    location: str
    attribute: str    # ForcingSnapshot field the name is bound to

    @property
    def dtype(self) -> np.dtype:
        return _TYPE_DTYPES[self.type]

    @property
    def itemsize(self) -> int:
        return self.dtype.itemsize

    @property
    def nbytes(self) -> int:
        return self.itemsize * self.item_count


def _scalar_node(name: str, units: str, attribute: str) -> VariableDescriptor:
    return VariableDescriptor(
        name=name, type='double', units=units, item_count=1,
        grid=0, location='node', attribute=attribute,
    )


INPUT_VARIABLES: Tuple[VariableDescriptor, ...] = (
    _scalar_node('land_surface_radiation~incoming~longwave__energy_flux',
                 'W m-2', 'incoming_longwave_W_per_m2'),
    _scalar_node('land_surface_air__pressure', 'Pa', 'surface_pressure_Pa'),
    # Carries specific humidity despite the standard name
    _scalar_node('atmosphere_air_water~vapor__relative_saturation',
                 'kg kg-1', 'specific_humidity_2m_kg_per_kg'),
    _scalar_node('land_surface_radiation~incoming~shortwave__energy_flux',
                 'W m-2', 'incoming_shortwave_W_per_m2'),
    _scalar_node('land_surface_air__temperature', 'K', 'air_temperature_2m_K'),
    _scalar_node('land_surface_wind__x_component_of_velocity',
                 'm s-1', 'u_wind_speed_10m_m_per_s'),
    _scalar_node('land_surface_wind__y_component_of_velocity',
                 'm s-1', 'v_wind_speed_10m_m_per_s'),
)

OUTPUT_VARIABLES: Tuple[VariableDescriptor, ...] = (
    _scalar_node('water_potential_evaporation_flux', 'm s-1', 'pet_m_per_s'),
)


class VariableRegistry:
    """Descriptor lookup and value dispatch for one model instance.

    Args:
        snapshot: Current-step storage the names are bound to
        inputs: Input descriptor table
        outputs: Output descriptor table

    Raises:
        ValueError: If a name appears twice across both tables
    """

    def __init__(
        self,
        snapshot: ForcingSnapshot,
        inputs: Iterable[VariableDescriptor] = INPUT_VARIABLES,
        outputs: Iterable[VariableDescriptor] = OUTPUT_VARIABLES,
    ):
        self.snapshot = snapshot
        self.inputs = tuple(inputs)
        self.outputs = tuple(outputs)

        # Outputs first so that lookup order follows the output table
        self._descriptors: Dict[str, VariableDescriptor] = {}
        for descriptor in self.outputs + self.inputs:
            if descriptor.name in self._descriptors:
                raise ValueError(f"Duplicate BMI variable name: {descriptor.name}")
            self._descriptors[descriptor.name] = descriptor

    def __contains__(self, name: str) -> bool:
        return name in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    @property
    def input_names(self) -> Tuple[str, ...]:
        return tuple(d.name for d in self.inputs)

    @property
    def output_names(self) -> Tuple[str, ...]:
        return tuple(d.name for d in self.outputs)

    def descriptor(self, name: str) -> VariableDescriptor:
        """Look up the descriptor of ``name``.

        Raises:
            UnrecognizedVariableError: If ``name`` is not registered
        """
        try:
            return self._descriptors[name]
        except KeyError:
            raise UnrecognizedVariableError(
                f"Variable '{name}' is not an input or output of this model"
            ) from None

    # -------------------------------------------------------------------------
    # Value dispatch
    # -------------------------------------------------------------------------

    def get_value_ptr(self, name: str) -> np.ndarray:
        """Live storage of ``name``; writes through it change the model."""
        return getattr(self.snapshot, self.descriptor(name).attribute)

    def get_value(self, name: str, dest: np.ndarray) -> np.ndarray:
        descriptor = self.descriptor(name)
        src = getattr(self.snapshot, descriptor.attribute)
        dest[:descriptor.item_count] = src[:descriptor.item_count]
        return dest

    def set_value(self, name: str, src) -> None:
        descriptor = self.descriptor(name)
        dest = getattr(self.snapshot, descriptor.attribute)
        dest[:] = np.ravel(src)[:descriptor.item_count]
        logger.debug(f"set {name} = {dest[0]!r}")

    def get_value_at_indices(self, name: str, dest: np.ndarray, inds) -> np.ndarray:
        """Gather ``ptr[inds[i]]`` into ``dest[i]``.

        Raises:
            UnrecognizedVariableError: If ``name`` is not registered
            IndexError: If an index is out of range for the variable
        """
        src = self.get_value_ptr(name)
        inds = np.asarray(inds, dtype=np.intp).ravel()
        dest[:len(inds)] = src[inds]
        return dest

    def set_value_at_indices(self, name: str, inds, src) -> None:
        """Scatter ``src[i]`` into ``ptr[inds[i]]``."""
        dest = self.get_value_ptr(name)
        inds = np.asarray(inds, dtype=np.intp).ravel()
        dest[inds] = np.ravel(src)[:len(inds)]
