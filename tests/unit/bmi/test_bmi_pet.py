"""Tests for the BmiPET driver: lifecycle, stepping and value exchange."""

import logging

import numpy as np
import pandas as pd
import pytest

from petbmi.bmi.bmi_pet import BmiPET
from petbmi.bmi.clock import ModelState
from petbmi.core.exceptions import (
    ConfigOpenError,
    ConfigurationError,
    ConfigValidationError,
    ForcingOpenError,
    ForcingTooShortError,
    ModelStateError,
    UnrecognizedVariableError,
)
from petbmi.physics.pet import MeteorologicalInputs, PETEngine

pytestmark = [pytest.mark.unit, pytest.mark.bmi]

PET = "water_potential_evaporation_flux"

FORCING_VALUES = {
    "land_surface_radiation~incoming~longwave__energy_flux": 350.0,
    "land_surface_air__pressure": 101325.0,
    "atmosphere_air_water~vapor__relative_saturation": 0.008,
    "land_surface_radiation~incoming~shortwave__energy_flux": 500.0,
    "land_surface_air__temperature": 293.15,
    "land_surface_wind__x_component_of_velocity": 2.0,
    "land_surface_wind__y_component_of_velocity": 0.0,
}


class RecordingEngine:
    """Engine stand-in recording the step length and time of each call."""

    def __init__(self, params):
        self.params = params
        self.calls = []

    def compute(self, inputs, time_step_size_s, current_time):
        self.calls.append((time_step_size_s, current_time, inputs))
        return 1e-7


@pytest.fixture
def engines():
    return []


@pytest.fixture
def recording_model(engines):
    def factory(params):
        engine = RecordingEngine(params)
        engines.append(engine)
        return engine
    return BmiPET(engine_factory=factory)


@pytest.fixture
def file_model(file_config):
    model = BmiPET()
    model.initialize(file_config)
    yield model
    model.finalize()


@pytest.fixture
def bmi_model(bmi_config):
    model = BmiPET()
    model.initialize(bmi_config)
    yield model
    model.finalize()


def _get(model, name):
    return model.get_value(name, np.empty(1))[0]


def _set_forcing(model):
    for name, value in FORCING_VALUES.items():
        model.set_value(name, np.array([value]))


class TestInitialize:

    def test_file_mode(self, file_model, sample_records):
        assert file_model.state is ModelState.READY
        first = pd.Timestamp(sample_records[0][0], tz="UTC").timestamp()
        assert file_model.get_current_time() == first
        assert file_model.get_start_time() == first
        assert file_model.get_time_step() == 3600.0
        assert file_model.clock.current_step == 0
        assert file_model.forcing is not None

    def test_bmi_mode(self, bmi_model):
        assert bmi_model.state is ModelState.READY
        assert bmi_model.forcing is None
        assert bmi_model.get_start_time() == 0.0
        assert bmi_model.parameters.is_forcing_from_bmi

    def test_missing_config_leaves_model_uninitialized(self, tmp_path):
        model = BmiPET()
        with pytest.raises(ConfigOpenError):
            model.initialize(tmp_path / "absent.txt")
        assert model.state is ModelState.UNINITIALIZED
        assert model.parameters is None

    def test_missing_forcing_key(self, write_config):
        model = BmiPET()
        with pytest.raises(ForcingOpenError):
            model.initialize(write_config(num_timesteps=2))
        assert model.state is ModelState.UNINITIALIZED

    def test_missing_forcing_file(self, write_config, tmp_path):
        model = BmiPET()
        with pytest.raises(ForcingOpenError):
            model.initialize(write_config(forcing_file=tmp_path / "absent.csv"))

    def test_forcing_too_short(self, write_config, forcing_file):
        model = BmiPET()
        with pytest.raises(ForcingTooShortError):
            model.initialize(write_config(forcing_file=forcing_file, num_timesteps=50))
        assert model.state is ModelState.UNINITIALIZED

    def test_invalid_geometry(self, write_config):
        model = BmiPET()
        with pytest.raises(ConfigValidationError):
            model.initialize(write_config(forcing_file="BMI", vegetation_height_m=0))

    def test_engine_failures_are_converted(self, bmi_config):
        def broken(params):
            raise RuntimeError("no engine")
        model = BmiPET(engine_factory=broken)
        with pytest.raises(ConfigurationError, match="no engine"):
            model.initialize(bmi_config)
        assert model.state is ModelState.UNINITIALIZED

    def test_initialize_twice_is_rejected(self, bmi_model, bmi_config):
        with pytest.raises(ModelStateError):
            bmi_model.initialize(bmi_config)

    def test_reinitialize_after_finalize(self, bmi_config, file_config):
        model = BmiPET()
        model.initialize(bmi_config)
        _set_forcing(model)
        model.update()
        model.finalize()
        model.initialize(file_config)
        assert model.state is ModelState.READY
        assert model.clock.current_step == 0
        model.finalize()

    def test_verbose_sets_package_log_level(self, write_config):
        logger = logging.getLogger("petbmi")
        saved = logger.level
        try:
            model = BmiPET()
            model.initialize(write_config(forcing_file="BMI", verbose=2))
            assert logger.level == logging.DEBUG
        finally:
            logger.setLevel(saved)


class TestUpdate:

    def test_update_before_initialize(self):
        with pytest.raises(ModelStateError):
            BmiPET().update()

    def test_update_after_finalize(self, bmi_config):
        model = BmiPET()
        model.initialize(bmi_config)
        model.finalize()
        with pytest.raises(ModelStateError):
            model.update()

    def test_advances_clock(self, file_model):
        t0 = file_model.get_current_time()
        file_model.update()
        clock = file_model.clock
        assert file_model.state is ModelState.STEPPING
        assert clock.current_step == 1
        assert clock.current_time == t0 + 3600.0
        assert clock.current_time_step == 3600.0

    def test_loads_forcing_record(self, file_model, sample_records):
        file_model.update()
        file_model.update()
        record = sample_records[1]
        assert _get(file_model, "land_surface_radiation~incoming~longwave__energy_flux") == record[2]
        assert _get(file_model, "land_surface_air__temperature") == record[6]
        assert _get(file_model, "land_surface_wind__y_component_of_velocity") == record[8]
        assert file_model.get_value_ptr(PET)[0] >= 0.0

    def test_bmi_forcing_drives_engine(self, bmi_model):
        _set_forcing(bmi_model)
        bmi_model.update()

        inputs = MeteorologicalInputs(350.0, 500.0, 101325.0, 0.008, 293.15, 2.0, 0.0)
        expected = PETEngine(bmi_model.parameters).compute(inputs, 3600.0, 0.0)
        assert _get(bmi_model, PET) == pytest.approx(expected)
        assert expected > 0.0

    def test_update_before_any_set_value(self, bmi_model):
        # Zeroed pressure and temperature give NaN rather than an exception
        bmi_model.update()
        assert bmi_model.state is ModelState.STEPPING
        assert bmi_model.clock.current_step == 1
        assert np.isnan(_get(bmi_model, PET))

        _set_forcing(bmi_model)
        bmi_model.update()
        assert np.isfinite(_get(bmi_model, PET))

    def test_value_ptr_tracks_updates(self, file_model):
        ptr = file_model.get_value_ptr(PET)
        file_model.update()
        file_model.update()
        assert ptr[0] == _get(file_model, PET)

    def test_stepping_past_the_forcing_end(self, file_model):
        n = file_model.parameters.num_timesteps
        for _ in range(n):
            file_model.update()
        assert np.isfinite(file_model.get_value_ptr(PET)[0])

        # The spare record is NaN; one step further runs off the arrays
        file_model.update()
        assert np.isnan(_get(file_model, "land_surface_air__temperature"))
        with pytest.raises(IndexError):
            file_model.update()


class TestUpdateUntil:

    def test_whole_steps_match_repeated_update(self, file_config):
        stepped = BmiPET()
        stepped.initialize(file_config)
        for _ in range(3):
            stepped.update()

        jumped = BmiPET()
        jumped.initialize(file_config)
        jumped.update_until(jumped.get_current_time() + 3 * jumped.get_time_step())

        assert jumped.clock == stepped.clock
        assert _get(jumped, PET) == _get(stepped, PET)

    def test_fractional_step(self, recording_model, engines, bmi_config, caplog):
        model = recording_model
        model.initialize(bmi_config)
        now = model.get_current_time()

        with caplog.at_level(logging.WARNING):
            model.update_until(now + 1.5 * 3600.0)

        assert [call[0] for call in engines[0].calls] == [3600.0, 1800.0]
        assert [call[1] for call in engines[0].calls] == [now, now + 3600.0]
        assert model.get_current_time() == now + 5400.0
        assert model.clock.current_step == 2
        assert model.get_time_step() == 3600.0
        assert "fraction" in caplog.text

    def test_target_in_the_past_does_nothing(self, recording_model, engines, bmi_config):
        recording_model.initialize(bmi_config)
        recording_model.update_until(recording_model.get_current_time() - 3600.0)
        assert engines[0].calls == []

    def test_target_equal_to_now_does_nothing(self, recording_model, engines, bmi_config):
        recording_model.initialize(bmi_config)
        recording_model.update_until(recording_model.get_current_time())
        assert engines[0].calls == []


class TestValueExchange:

    @pytest.mark.parametrize("name", list(FORCING_VALUES) + [PET])
    def test_set_then_get(self, bmi_model, name):
        bmi_model.set_value(name, np.array([12.5]))
        assert _get(bmi_model, name) == 12.5

    @pytest.mark.parametrize("name", list(FORCING_VALUES) + [PET])
    def test_indexed_get_equals_get(self, bmi_model, name):
        bmi_model.set_value(name, np.array([7.0]))
        np.testing.assert_array_equal(
            bmi_model.get_value_at_indices(name, np.empty(1), np.array([0])),
            bmi_model.get_value(name, np.empty(1)),
        )

    def test_set_value_at_indices(self, bmi_model):
        bmi_model.set_value_at_indices("land_surface_air__pressure", np.array([0]), np.array([9.0e4]))
        assert _get(bmi_model, "land_surface_air__pressure") == 9.0e4

    def test_unrecognized_name_leaves_state(self, bmi_model):
        bmi_model.set_value("land_surface_air__temperature", np.array([280.0]))
        with pytest.raises(UnrecognizedVariableError):
            bmi_model.set_value("land_surface_air__humidity", np.array([1.0]))
        assert _get(bmi_model, "land_surface_air__temperature") == 280.0
        assert bmi_model.state is ModelState.READY

    def test_get_before_initialize(self):
        model = BmiPET()
        assert _get(model, PET) == 0.0


class TestFinalize:

    def test_resets_values_and_releases_forcing(self, file_config):
        model = BmiPET()
        model.initialize(file_config)
        ptr = model.get_value_ptr("land_surface_air__temperature")
        model.update()
        assert ptr[0] > 0.0

        model.finalize()
        assert model.state is ModelState.FINALIZED
        assert model.forcing is None
        assert model.parameters is None
        assert ptr[0] == 0.0
        assert model.clock.current_step == 0

    def test_finalize_without_initialize(self):
        model = BmiPET()
        model.finalize()
        assert model.state is ModelState.FINALIZED
