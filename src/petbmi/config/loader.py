# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""
Reader for the ``key=value`` PET configuration file.

Format: one ``key=value`` pair per line, no escaping, no sections. Lines
are split on the first ``=``. Unknown keys are ignored. Every numeric value
is lexed as a floating point number (``strtod`` rules: the longest leading
numeric prefix, 0.0 when there is none) and then narrowed to the field
type by truncation, so ``num_timesteps=24.9`` yields 24 and
``run_unit_tests=0.5`` yields False.
"""

import logging
import math
import re
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from petbmi.core.exceptions import ConfigOpenError, ConfigValidationError, PrescanError
from petbmi.io.prescan import read_file_line_counts
from .parameters import PETParameters

logger = logging.getLogger(__name__)

_FLOAT_PREFIX_RE = re.compile(
    r'\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))',
    re.IGNORECASE,
)


def lex_float(text: str) -> float:
    """Lex the leading floating point number of ``text`` the way ``strtod`` does."""
    match = _FLOAT_PREFIX_RE.match(text)
    if match is None:
        return 0.0
    return float(match.group(1))


def _to_int(key: str, text: str) -> int:
    value = lex_float(text)
    if not math.isfinite(value):
        raise ConfigValidationError(f"{key}={text!r} is not a finite number")
    return int(value)


def _to_bool(key: str, text: str) -> bool:
    # Flags are integers read through strtod: 0.5 truncates to 0
    return _to_int(key, text) != 0


def _to_float(key: str, text: str) -> float:
    return lex_float(text)


def _to_str(key: str, text: str) -> str:
    return text


_COERCERS = {int: _to_int, bool: _to_bool, float: _to_float}


def _coercer_for(key: str):
    annotation = PETParameters.model_fields[key].annotation
    return _COERCERS.get(annotation, _to_str)


def parse_config_lines(lines) -> Dict[str, Any]:
    """Collect recognized ``key=value`` pairs into a dict of coerced values.

    Later occurrences of a key override earlier ones.
    """
    values: Dict[str, Any] = {}
    for raw in lines:
        line = raw.rstrip('\r\n')
        key, sep, value = line.partition('=')
        if key not in PETParameters.model_fields:
            if key.strip():
                logger.debug(f"Ignoring unrecognized config key '{key}'")
            continue
        if not sep:
            logger.warning(f"Config key '{key}' has no '=value', skipping")
            continue

        values[key] = _coercer_for(key)(key, value)
        logger.debug(f"set {key} from config file: {values[key]!r}")
    return values


def read_init_config(config_file: Union[str, Path]) -> PETParameters:
    """Read a PET configuration file into :class:`PETParameters`.

    Args:
        config_file: Path of the ``key=value`` configuration file

    Returns:
        Frozen model parameters; fields absent from the file keep their defaults

    Raises:
        ConfigOpenError: If the file cannot be opened
        ConfigValidationError: If a value violates a field constraint
    """
    try:
        line_count, max_line_length = read_file_line_counts(config_file)
    except PrescanError as e:
        raise ConfigOpenError(f"Config file '{config_file}' could not be opened") from e

    try:
        with open(config_file, 'r', encoding='utf-8') as fp:
            lines = [fp.readline(max_line_length) for _ in range(line_count)]
    except OSError as e:
        raise ConfigOpenError(f"Config file '{config_file}' could not be opened") from e

    values = parse_config_lines(lines)

    try:
        params = PETParameters(**values)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in '{config_file}': {e}") from e

    if params.is_forcing_from_bmi:
        logger.debug("Getting forcing values from BMI, not reading forcing from file")
    return params
