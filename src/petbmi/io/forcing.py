# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""
Forcing ingestion from AORC CSV files.

The loader works in two passes: :func:`read_file_line_counts` first sizes
the line buffer and validates the record count, then the file is re-opened
and ``num_timesteps`` records after the header are parsed into per-variable
arrays of length ``num_timesteps + 1``.

Precipitation arrives as a rate and is stored as a depth over one model
step (rate × ``time_step_size_s``); all other variables are stored as read.
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Union

import numpy as np
import pandas as pd

from petbmi.core.exceptions import (
    ForcingDisappearedError,
    ForcingHeaderOnlyError,
    ForcingOpenError,
    ForcingRecordError,
    ForcingTooShortError,
    PrescanError,
)
from petbmi.core.logging_config import RECORD_ECHO_VERBOSITY
from .aorc import parse_aorc_line
from .prescan import read_file_line_counts

logger = logging.getLogger(__name__)


@dataclass
class ForcingTimeSeries:
    """Per-variable forcing arrays, one slot per time step plus one spare.

    The spare trailing slot is never written during ingestion; it holds NaN
    (and 0 in ``time``).
    """
    precip_kg_per_m2: np.ndarray                 # depth per step
    surface_pressure_Pa: np.ndarray
    incoming_longwave_W_per_m2: np.ndarray
    incoming_shortwave_W_per_m2: np.ndarray
    specific_humidity_2m_kg_per_kg: np.ndarray
    air_temperature_2m_K: np.ndarray
    u_wind_speed_10m_m_per_s: np.ndarray
    v_wind_speed_10m_m_per_s: np.ndarray
    time: np.ndarray                             # epoch seconds, int64

    @classmethod
    def allocate(cls, num_timesteps: int) -> 'ForcingTimeSeries':
        """Allocate empty arrays sized ``num_timesteps + 1``."""
        size = num_timesteps + 1
        arrays = {
            f.name: np.full(size, np.nan, dtype=np.float64)
            for f in fields(cls) if f.name != 'time'
        }
        arrays['time'] = np.zeros(size, dtype=np.int64)
        return cls(**arrays)

    @classmethod
    def variable_names(cls):
        """Names of the meteorological arrays (everything except ``time``)."""
        return [f.name for f in fields(cls) if f.name != 'time']

    def __len__(self) -> int:
        return len(self.time)

    @property
    def start_time(self) -> float:
        """Timestamp of the first record (seconds since epoch)."""
        return float(self.time[0])

    def to_dataframe(self) -> pd.DataFrame:
        """Return the ingested records as a DataFrame indexed by UTC time.

        The spare trailing slot is dropped.
        """
        data = {name: getattr(self, name)[:-1] for name in self.variable_names()}
        index = pd.to_datetime(self.time[:-1], unit='s', utc=True)
        return pd.DataFrame(data, index=pd.Index(index, name='time'))


def load_forcing_file(
    forcing_file: Union[str, Path],
    num_timesteps: int,
    time_step_size_s: float,
    verbose: int = 0,
) -> ForcingTimeSeries:
    """Read ``num_timesteps`` AORC records from a forcing file.

    Args:
        forcing_file: Path of the AORC CSV file (one header line)
        num_timesteps: Number of records to ingest after the header
        time_step_size_s: Model step, used to turn the precipitation rate
            into a depth per step
        verbose: Configuration verbosity; at 5 and above every ingested
            value is echoed to the debug log

    Returns:
        The populated :class:`ForcingTimeSeries`

    Raises:
        ForcingOpenError: If the file cannot be opened for the counting pass
        ForcingHeaderOnlyError: If the file holds at most a header line
        ForcingTooShortError: If fewer than ``num_timesteps`` records follow the header
        ForcingDisappearedError: If the file vanished before the reading pass
        ForcingRecordError: If a record cannot be parsed
    """
    try:
        line_count, max_line_length = read_file_line_counts(forcing_file)
    except PrescanError as e:
        raise ForcingOpenError(
            f"Configured forcing file '{forcing_file}' could not be opened for reading"
        ) from e

    if line_count <= 1:
        raise ForcingHeaderOnlyError(f"Invalid header-only forcing file '{forcing_file}'")

    if line_count - 1 < num_timesteps:
        raise ForcingTooShortError(
            f"Forcing file '{forcing_file}' holds {line_count - 1} records, "
            f"but num_timesteps is {num_timesteps}"
        )

    series = ForcingTimeSeries.allocate(num_timesteps)

    try:
        fp = open(forcing_file, 'r', encoding='utf-8')
    except OSError as e:
        raise ForcingDisappearedError(f"Forcing file '{forcing_file}' disappeared!") from e

    echo = verbose >= RECORD_ECHO_VERBOSITY
    with fp:
        fp.readline(max_line_length)  # header
        logger.debug(f"Number of time steps to read from the forcing file: {num_timesteps}")

        for i in range(num_timesteps):
            line = fp.readline(max_line_length)
            try:
                record = parse_aorc_line(line)
            except ForcingRecordError as e:
                raise ForcingRecordError(
                    f"{forcing_file}, line {i + 2}: {e}"
                ) from e

            series.precip_kg_per_m2[i] = record.precip_kg_per_m2 * time_step_size_s
            series.surface_pressure_Pa[i] = record.surface_pressure_Pa
            series.incoming_longwave_W_per_m2[i] = record.incoming_longwave_W_per_m2
            series.incoming_shortwave_W_per_m2[i] = record.incoming_shortwave_W_per_m2
            series.specific_humidity_2m_kg_per_kg[i] = record.specific_humidity_2m_kg_per_kg
            series.air_temperature_2m_K[i] = record.air_temperature_2m_K
            series.u_wind_speed_10m_m_per_s[i] = record.u_wind_speed_10m_m_per_s
            series.v_wind_speed_10m_m_per_s[i] = record.v_wind_speed_10m_m_per_s
            series.time[i] = record.time

            if echo:
                logger.debug(
                    f"record {i}: " + ", ".join(
                        f"{name}={getattr(series, name)[i]:f}"
                        for name in ForcingTimeSeries.variable_names()
                    )
                )

    logger.info(
        f"Loaded {num_timesteps} forcing records from '{forcing_file}' "
        f"starting at {pd.Timestamp(series.start_time, unit='s', tz='UTC')}"
    )
    return series
