# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""
Basic Model Interface for the potential evapotranspiration model.

:class:`BmiPET` owns the model clock, the current-step snapshot and, when
forcing is read from disk, the forcing time series. Each :meth:`BmiPET.update`
loads the step's forcing (file mode), runs the PET engine and advances the
clock. In ``forcing_file=BMI`` mode the host writes the inputs with
``set_value`` before every step instead.

The model is a single point: every variable lives on grid 0, a scalar grid
of rank 1 and size 1. Grid geometry queries are not answered.
"""

from pathlib import Path
from typing import Callable, Optional, Tuple, Union

import numpy as np
from bmipy import Bmi

from petbmi.config.loader import read_init_config
from petbmi.config.parameters import PETParameters
from petbmi.core.constants import BMIConstants
from petbmi.core.exceptions import (
    ConfigurationError,
    ForcingOpenError,
    ModelStateError,
    UnsupportedGridQueryError,
    petbmi_error_handler,
)
from petbmi.core.logging_config import LoggingMixin, apply_verbosity
from petbmi.io.forcing import ForcingTimeSeries, load_forcing_file
from petbmi.physics.pet import PETEngine
from .clock import ModelClock, ModelState
from .registry import VariableRegistry
from .state import ForcingSnapshot

EngineFactory = Callable[[PETParameters], PETEngine]


class BmiPET(LoggingMixin, Bmi):
    """BMI driver of a single-point PET model.

    Args:
        engine_factory: Builds the per-step PET engine from the parameters.
            Defaults to the reference :class:`~petbmi.physics.pet.PETEngine`;
            any object with a ``compute(inputs, time_step_size_s,
            current_time) -> float`` method can be substituted.

    Example:
        >>> model = BmiPET()
        >>> model.initialize("pet_config.txt")
        >>> model.update_until(model.get_start_time() + 24 * model.get_time_step())
        >>> model.get_value("water_potential_evaporation_flux", np.empty(1))
    """

    def __init__(self, engine_factory: EngineFactory = PETEngine):
        self._engine_factory = engine_factory
        self._snapshot = ForcingSnapshot()
        self._registry = VariableRegistry(self._snapshot)
        self._clock = ModelClock()
        self._params: Optional[PETParameters] = None
        self._engine = None
        self._forcing: Optional[ForcingTimeSeries] = None
        self._state = ModelState.UNINITIALIZED

    # -------------------------------------------------------------------------
    # Introspection outside the BMI method set
    # -------------------------------------------------------------------------

    @property
    def state(self) -> ModelState:
        return self._state

    @property
    def parameters(self) -> Optional[PETParameters]:
        """Parameters read at initialization (None before ``initialize``)."""
        return self._params

    @property
    def clock(self) -> ModelClock:
        return self._clock

    @property
    def forcing(self) -> Optional[ForcingTimeSeries]:
        """Forcing time series in file mode, None otherwise."""
        return self._forcing

    @property
    def registry(self) -> VariableRegistry:
        return self._registry

    def _require_state(self, operation: str, *allowed: ModelState) -> None:
        if self._state not in allowed:
            raise ModelStateError(
                f"Cannot {operation} a model in state '{self._state.value}'"
            )

    # -------------------------------------------------------------------------
    # Model control
    # -------------------------------------------------------------------------

    def initialize(self, config_file: Union[str, Path]) -> None:
        """Read the configuration, load file forcing and reset the clock.

        Nothing is committed to the instance until every step succeeded, so
        a failure leaves the model in its previous state.

        Raises:
            ModelStateError: If the model is already initialized
            ConfigurationError: If the configuration cannot be read or is invalid
            ForcingError: If the configured forcing file cannot be ingested
        """
        self._require_state('initialize', ModelState.UNINITIALIZED, ModelState.FINALIZED)

        with petbmi_error_handler('initialization', self.logger, error_type=ConfigurationError):
            params = read_init_config(config_file)
            apply_verbosity(params.verbose)
            engine = self._engine_factory(params)

            if params.is_forcing_from_bmi:
                forcing = None
                start_time = 0.0
            elif params.forcing_file is None:
                raise ForcingOpenError(
                    f"No forcing_file in '{config_file}'; set a path or 'BMI'"
                )
            else:
                forcing = load_forcing_file(
                    params.forcing_file,
                    params.num_timesteps,
                    params.time_step_size_s,
                    verbose=params.verbose,
                )
                start_time = forcing.start_time

        if params.run_unit_tests:
            self.logger.info("run_unit_tests is set but no in-model test suite is built in")

        self._params = params
        self._engine = engine
        self._forcing = forcing
        self._snapshot.reset()
        self._clock = ModelClock.starting_at(
            start_time, params.time_step_size_s, params.num_timesteps
        )
        self._state = ModelState.READY
        self.logger.info(
            f"Initialized PET model from '{config_file}' "
            f"(pet_method={params.pet_method}, num_timesteps={params.num_timesteps}, "
            f"forcing={'BMI' if forcing is None else params.forcing_file})"
        )

    def update(self) -> None:
        """Advance the model by one time step.

        There is no end-of-run check. Stepping past ``num_timesteps`` with
        file forcing first reads the spare NaN record and then raises
        ``IndexError``.
        """
        self._require_state('update', ModelState.READY, ModelState.STEPPING)
        clock = self._clock

        if self._forcing is not None:
            self._snapshot.load_step(self._forcing, clock.current_step)

        pet = self._engine.compute(
            self._snapshot.as_inputs(), clock.time_step_size_s, clock.current_time
        )
        self._snapshot.pet_m_per_s[0] = pet

        clock.advance()
        self._state = ModelState.STEPPING
        self.logger.debug(
            f"step {clock.current_step}: t={clock.current_time:.0f} s, PET={pet:.6e} m s-1"
        )

    def update_until(self, time: float) -> None:
        """Advance the model to ``time``.

        Whole steps are taken first. A remaining fraction of a step is run as
        one shortened step, after which the configured step length is
        restored.
        """
        dt = self.get_time_step()
        now = self.get_current_time()
        n_steps = (time - now) / dt

        whole_steps = int(n_steps)
        for _ in range(whole_steps):
            self.update()

        fraction = n_steps - whole_steps
        if fraction > 0:
            self.logger.warning(
                f"Updating a fraction ({fraction:.3f}) of a time step to reach t={time}"
            )
            with self._clock.override_time_step(fraction * dt):
                self.update()

    def finalize(self) -> None:
        """Release the forcing and reset every value to its pre-initialize state.

        Arrays handed out by :meth:`get_value_ptr` stay valid and read zero.
        """
        self._forcing = None
        self._engine = None
        self._params = None
        self._snapshot.reset()
        self._clock = ModelClock()
        self._state = ModelState.FINALIZED
        self.logger.debug("PET model finalized")

    # -------------------------------------------------------------------------
    # Model information
    # -------------------------------------------------------------------------

    def get_component_name(self) -> str:
        return BMIConstants.COMPONENT_NAME

    def get_input_item_count(self) -> int:
        return len(self._registry.inputs)

    def get_output_item_count(self) -> int:
        return len(self._registry.outputs)

    def get_input_var_names(self) -> Tuple[str, ...]:
        return self._registry.input_names

    def get_output_var_names(self) -> Tuple[str, ...]:
        return self._registry.output_names

    # -------------------------------------------------------------------------
    # Variable information
    # -------------------------------------------------------------------------

    def get_var_grid(self, name: str) -> int:
        return self._registry.descriptor(name).grid

    def get_var_type(self, name: str) -> str:
        return self._registry.descriptor(name).type

    def get_var_units(self, name: str) -> str:
        return self._registry.descriptor(name).units

    def get_var_itemsize(self, name: str) -> int:
        return self._registry.descriptor(name).itemsize

    def get_var_nbytes(self, name: str) -> int:
        return self._registry.descriptor(name).nbytes

    def get_var_location(self, name: str) -> str:
        return self._registry.descriptor(name).location

    # -------------------------------------------------------------------------
    # Time information
    # -------------------------------------------------------------------------

    def get_current_time(self) -> float:
        return self._clock.current_time

    def get_start_time(self) -> float:
        return self._clock.start_time

    def get_end_time(self) -> float:
        return self._clock.end_time

    def get_time_units(self) -> str:
        return BMIConstants.TIME_UNITS

    def get_time_step(self) -> float:
        return self._clock.time_step_size_s

    # -------------------------------------------------------------------------
    # Getters and setters
    # -------------------------------------------------------------------------

    def get_value(self, name: str, dest: np.ndarray) -> np.ndarray:
        return self._registry.get_value(name, dest)

    def get_value_ptr(self, name: str) -> np.ndarray:
        return self._registry.get_value_ptr(name)

    def get_value_at_indices(self, name: str, dest: np.ndarray, inds: np.ndarray) -> np.ndarray:
        return self._registry.get_value_at_indices(name, dest, inds)

    def set_value(self, name: str, src: np.ndarray) -> None:
        self._registry.set_value(name, src)

    def set_value_at_indices(self, name: str, inds: np.ndarray, src: np.ndarray) -> None:
        self._registry.set_value_at_indices(name, inds, src)

    # -------------------------------------------------------------------------
    # Grid information
    # -------------------------------------------------------------------------

    def _check_scalar_grid(self, grid: int) -> None:
        if grid != BMIConstants.SCALAR_GRID_ID:
            raise UnsupportedGridQueryError(f"Grid {grid} is not defined for this model")

    def get_grid_rank(self, grid: int) -> int:
        self._check_scalar_grid(grid)
        return 1

    def get_grid_size(self, grid: int) -> int:
        self._check_scalar_grid(grid)
        return 1

    def get_grid_type(self, grid: int) -> str:
        self._check_scalar_grid(grid)
        return 'scalar'

    def _no_geometry(self, query: str, grid: int):
        raise UnsupportedGridQueryError(
            f"{query} is not available for grid {grid}: the model is a single point"
        )

    def get_grid_shape(self, grid: int, shape: np.ndarray) -> np.ndarray:
        self._no_geometry('get_grid_shape', grid)

    def get_grid_spacing(self, grid: int, spacing: np.ndarray) -> np.ndarray:
        self._no_geometry('get_grid_spacing', grid)

    def get_grid_origin(self, grid: int, origin: np.ndarray) -> np.ndarray:
        self._no_geometry('get_grid_origin', grid)

    def get_grid_x(self, grid: int, x: np.ndarray) -> np.ndarray:
        self._no_geometry('get_grid_x', grid)

    def get_grid_y(self, grid: int, y: np.ndarray) -> np.ndarray:
        self._no_geometry('get_grid_y', grid)

    def get_grid_z(self, grid: int, z: np.ndarray) -> np.ndarray:
        self._no_geometry('get_grid_z', grid)

    def get_grid_node_count(self, grid: int) -> int:
        self._no_geometry('get_grid_node_count', grid)

    def get_grid_edge_count(self, grid: int) -> int:
        self._no_geometry('get_grid_edge_count', grid)

    def get_grid_face_count(self, grid: int) -> int:
        self._no_geometry('get_grid_face_count', grid)

    def get_grid_edge_nodes(self, grid: int, edge_nodes: np.ndarray) -> np.ndarray:
        self._no_geometry('get_grid_edge_nodes', grid)

    def get_grid_face_edges(self, grid: int, face_edges: np.ndarray) -> np.ndarray:
        self._no_geometry('get_grid_face_edges', grid)

    def get_grid_face_nodes(self, grid: int, face_nodes: np.ndarray) -> np.ndarray:
        self._no_geometry('get_grid_face_nodes', grid)

    def get_grid_nodes_per_face(self, grid: int, nodes_per_face: np.ndarray) -> np.ndarray:
        self._no_geometry('get_grid_nodes_per_face', grid)
