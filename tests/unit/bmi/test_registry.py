"""Tests for the BMI variable registry."""

import numpy as np
import pytest

from petbmi.bmi.registry import (
    INPUT_VARIABLES,
    OUTPUT_VARIABLES,
    VariableDescriptor,
    VariableRegistry,
)
from petbmi.bmi.state import ForcingSnapshot
from petbmi.core.exceptions import UnrecognizedVariableError

pytestmark = [pytest.mark.unit, pytest.mark.bmi]

ALL_NAMES = [d.name for d in INPUT_VARIABLES + OUTPUT_VARIABLES]


@pytest.fixture
def registry():
    return VariableRegistry(ForcingSnapshot())


def _snapshot_values(snapshot):
    return {name: getattr(snapshot, name)[0] for name in vars(snapshot)}


class TestTables:

    def test_seven_inputs_one_output(self):
        assert len(INPUT_VARIABLES) == 7
        assert len(OUTPUT_VARIABLES) == 1

    def test_names_are_unique(self):
        assert len(set(ALL_NAMES)) == len(ALL_NAMES)

    def test_every_descriptor_binds_a_snapshot_field(self):
        snapshot = ForcingSnapshot()
        for descriptor in INPUT_VARIABLES + OUTPUT_VARIABLES:
            assert hasattr(snapshot, descriptor.attribute)

    def test_humidity_name_carries_specific_humidity(self, registry):
        descriptor = registry.descriptor("atmosphere_air_water~vapor__relative_saturation")
        assert descriptor.units == "kg kg-1"
        assert descriptor.attribute == "specific_humidity_2m_kg_per_kg"

    def test_output_descriptor(self, registry):
        descriptor = registry.descriptor("water_potential_evaporation_flux")
        assert (descriptor.type, descriptor.units, descriptor.grid, descriptor.location) == (
            "double", "m s-1", 0, "node")

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            VariableRegistry(ForcingSnapshot(), inputs=INPUT_VARIABLES,
                             outputs=OUTPUT_VARIABLES + INPUT_VARIABLES[:1])


class TestSizes:

    @pytest.mark.parametrize("type_name,size", [
        ("double", 8),
        ("float", 4),
        ("int", np.dtype(np.intc).itemsize),
        ("short", 2),
        ("long", np.dtype("l").itemsize),
    ])
    def test_itemsize_by_type(self, type_name, size):
        descriptor = VariableDescriptor("x", type_name, "1", 3, 0, "node", "pet_m_per_s")
        assert descriptor.itemsize == size
        assert descriptor.nbytes == 3 * size


class TestDispatch:

    @pytest.mark.parametrize("name", ALL_NAMES)
    def test_set_then_get_round_trips(self, registry, name):
        registry.set_value(name, np.array([42.5]))
        assert registry.get_value(name, np.empty(1))[0] == 42.5

    @pytest.mark.parametrize("name", ALL_NAMES)
    def test_indexed_get_matches_get(self, registry, name):
        registry.set_value(name, np.array([3.25]))
        plain = registry.get_value(name, np.empty(1))
        indexed = registry.get_value_at_indices(name, np.empty(1), np.array([0]))
        np.testing.assert_array_equal(indexed, plain)

    def test_set_value_accepts_scalar(self, registry):
        registry.set_value("land_surface_air__temperature", 290.0)
        assert registry.get_value_ptr("land_surface_air__temperature")[0] == 290.0

    def test_set_value_at_indices(self, registry):
        registry.set_value_at_indices("land_surface_air__pressure", np.array([0]), np.array([9.9e4]))
        assert registry.snapshot.surface_pressure_Pa[0] == 9.9e4

    def test_index_out_of_range(self, registry):
        with pytest.raises(IndexError):
            registry.get_value_at_indices("land_surface_air__pressure", np.empty(1), np.array([1]))
        with pytest.raises(IndexError):
            registry.set_value_at_indices("land_surface_air__pressure", np.array([2]), np.array([1.0]))

    def test_value_ptr_is_live_view(self, registry):
        ptr = registry.get_value_ptr("water_potential_evaporation_flux")
        registry.snapshot.pet_m_per_s[0] = 1e-7
        assert ptr[0] == 1e-7
        ptr[0] = 2e-7
        assert registry.get_value("water_potential_evaporation_flux", np.empty(1))[0] == 2e-7

    def test_get_value_returns_dest(self, registry):
        dest = np.empty(1)
        assert registry.get_value("land_surface_air__pressure", dest) is dest


class TestUnrecognizedNames:

    @pytest.mark.parametrize("call", [
        lambda r: r.descriptor("nope"),
        lambda r: r.get_value_ptr("nope"),
        lambda r: r.get_value("nope", np.empty(1)),
        lambda r: r.set_value("nope", np.array([1.0])),
        lambda r: r.get_value_at_indices("nope", np.empty(1), np.array([0])),
        lambda r: r.set_value_at_indices("nope", np.array([0]), np.array([1.0])),
    ])
    def test_raises_without_mutating(self, registry, call):
        registry.set_value("land_surface_air__temperature", np.array([285.0]))
        before = _snapshot_values(registry.snapshot)
        with pytest.raises(UnrecognizedVariableError):
            call(registry)
        assert _snapshot_values(registry.snapshot) == before

    def test_is_key_error(self, registry):
        with pytest.raises(KeyError):
            registry.descriptor("nope")

    def test_contains(self, registry):
        assert "land_surface_air__pressure" in registry
        assert "nope" not in registry
        assert len(registry) == 8
