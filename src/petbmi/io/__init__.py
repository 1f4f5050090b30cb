# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""Forcing file input: prescanning, AORC record parsing and ingestion."""

from .aorc import AORC_COLUMNS, AORCRecord, parse_aorc_line, parse_aorc_timestamp
from .forcing import ForcingTimeSeries, load_forcing_file
from .prescan import read_file_line_counts

__all__ = [
    'AORC_COLUMNS',
    'AORCRecord',
    'parse_aorc_line',
    'parse_aorc_timestamp',
    'ForcingTimeSeries',
    'load_forcing_file',
    'read_file_line_counts',
]
