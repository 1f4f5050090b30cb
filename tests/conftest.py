"""
Root conftest.py - fixtures shared across all tests.

Provides factories that write ``key=value`` configuration files and AORC
forcing files into ``tmp_path``.
"""

from pathlib import Path

import pytest

AORC_HEADER = (
    "time,APCP_surface,DLWRF_surface,DSWRF_surface,PRES_surface,"
    "SPFH_2maboveground,TMP_2maboveground,UGRD_10maboveground,VGRD_10maboveground"
)

# time, APCP (kg m-2 s-1), DLWRF, DSWRF, PRES, SPFH, TMP, UGRD, VGRD
SAMPLE_RECORDS = [
    ("2015-12-01 00:00:00", 0.0, 361.30, 0.0, 101300.0, 0.0071, 285.9, -0.50, 1.20),
    ("2015-12-01 01:00:00", 1.5e-4, 360.10, 0.0, 101290.0, 0.0072, 285.6, -0.40, 1.10),
    ("2015-12-01 02:00:00", 2.0e-4, 358.70, 120.5, 101280.0, 0.0074, 286.2, 0.30, 2.40),
    ("2015-12-01 03:00:00", 0.0, 355.00, 450.0, 101270.0, 0.0070, 288.4, 1.10, 3.00),
]


def format_record(record) -> str:
    return ",".join(str(v) for v in record)


@pytest.fixture
def write_forcing(tmp_path):
    """Factory writing an AORC forcing file; returns its path."""
    def _write(records=SAMPLE_RECORDS, name="forcing.csv", header=AORC_HEADER) -> Path:
        path = tmp_path / name
        lines = [header] + [format_record(r) for r in records]
        path.write_text("\n".join(lines) + "\n")
        return path
    return _write


@pytest.fixture
def write_config(tmp_path):
    """Factory writing a ``key=value`` config file; returns its path."""
    def _write(name="pet_config.txt", **values) -> Path:
        path = tmp_path / name
        path.write_text("".join(f"{key}={value}\n" for key, value in values.items()))
        return path
    return _write


@pytest.fixture
def sample_records():
    return list(SAMPLE_RECORDS)


@pytest.fixture
def forcing_file(write_forcing):
    return write_forcing()


@pytest.fixture
def file_config(write_config, forcing_file):
    """Config reading three hourly steps from the sample forcing file."""
    return write_config(
        forcing_file=forcing_file,
        num_timesteps=3,
        time_step_size_s=3600,
        pet_method=5,
    )


@pytest.fixture
def bmi_config(write_config):
    """Config receiving forcing through set_value."""
    return write_config(
        forcing_file="BMI",
        num_timesteps=24,
        time_step_size_s=3600,
        pet_method=5,
    )
