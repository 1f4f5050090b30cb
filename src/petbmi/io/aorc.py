# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""
AORC forcing record parser.

One record per line, comma separated, in the column order written by the
NextGen AORC CSV extractions::

    time,APCP_surface,DLWRF_surface,DSWRF_surface,PRES_surface,
    SPFH_2maboveground,TMP_2maboveground,UGRD_10maboveground,VGRD_10maboveground

``time`` is ``YYYY-MM-DD hh:mm:ss`` (UTC, fractional seconds and a ``T``
separator accepted). ``APCP_surface`` is a rate in kg m-2 s-1. Columns after
the ninth are ignored.
"""

import re
from datetime import datetime, timezone
from typing import NamedTuple, Tuple

from petbmi.core.exceptions import ForcingRecordError

AORC_COLUMNS: Tuple[str, ...] = (
    'time',
    'APCP_surface',
    'DLWRF_surface',
    'DSWRF_surface',
    'PRES_surface',
    'SPFH_2maboveground',
    'TMP_2maboveground',
    'UGRD_10maboveground',
    'VGRD_10maboveground',
)

_TIMESTAMP_RE = re.compile(
    r'^\s*(\d{4})-(\d{1,2})-(\d{1,2})[ T](\d{1,2}):(\d{1,2})'
    r'(?::(\d{1,2}(?:\.\d*)?))?\s*$'
)


class AORCRecord(NamedTuple):
    """One parsed forcing record."""
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: float
    time: int                                # seconds since 1970-01-01 UTC
    precip_kg_per_m2: float                  # rate, kg m-2 s-1
    incoming_longwave_W_per_m2: float
    incoming_shortwave_W_per_m2: float
    surface_pressure_Pa: float
    specific_humidity_2m_kg_per_kg: float
    air_temperature_2m_K: float
    u_wind_speed_10m_m_per_s: float
    v_wind_speed_10m_m_per_s: float


def parse_aorc_timestamp(text: str) -> Tuple[int, int, int, int, int, float, int]:
    """Split an AORC timestamp into its parts plus whole epoch seconds.

    Raises:
        ForcingRecordError: If the text is not a ``YYYY-MM-DD hh:mm[:ss]`` stamp
    """
    match = _TIMESTAMP_RE.match(text)
    if match is None:
        raise ForcingRecordError(f"Unrecognized AORC timestamp: {text!r}")

    year, month, day, hour, minute = (int(g) for g in match.groups()[:5])
    second = float(match.group(6)) if match.group(6) else 0.0
    try:
        stamp = datetime(year, month, day, hour, minute, int(second), tzinfo=timezone.utc)
    except ValueError as e:
        raise ForcingRecordError(f"Invalid AORC timestamp {text!r}: {e}") from e

    return year, month, day, hour, minute, second, int(stamp.timestamp())


def parse_aorc_line(line: str) -> AORCRecord:
    """Parse one AORC CSV line into an :class:`AORCRecord`.

    Args:
        line: Raw line, with or without its terminator

    Returns:
        The parsed record

    Raises:
        ForcingRecordError: On a missing column or a non-numeric value
    """
    tokens = line.rstrip('\r\n').split(',')
    if len(tokens) < len(AORC_COLUMNS):
        raise ForcingRecordError(
            f"AORC record has {len(tokens)} columns, expected at least "
            f"{len(AORC_COLUMNS)}: {line.strip()!r}"
        )

    year, month, day, hour, minute, second, epoch = parse_aorc_timestamp(tokens[0])

    values = []
    for column, token in zip(AORC_COLUMNS[1:], tokens[1:len(AORC_COLUMNS)]):
        try:
            values.append(float(token))
        except ValueError as e:
            raise ForcingRecordError(
                f"Column {column} is not numeric: {token.strip()!r}"
            ) from e

    apcp, dlwrf, dswrf, pres, spfh, tmp, ugrd, vgrd = values
    return AORCRecord(
        year=year,
        month=month,
        day=day,
        hour=hour,
        minute=minute,
        second=second,
        time=epoch,
        precip_kg_per_m2=apcp,
        incoming_longwave_W_per_m2=dlwrf,
        incoming_shortwave_W_per_m2=dswrf,
        surface_pressure_Pa=pres,
        specific_humidity_2m_kg_per_kg=spfh,
        air_temperature_2m_K=tmp,
        u_wind_speed_10m_m_per_s=ugrd,
        v_wind_speed_10m_m_per_s=vgrd,
    )
