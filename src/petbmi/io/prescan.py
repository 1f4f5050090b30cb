# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""
Two-pass text file support: the counting pass.

:func:`read_file_line_counts` scans a file once to learn how many lines it
holds and how long the longest one is, so the reading pass can bound its
line buffer to the true maximum instead of an arbitrary constant.
"""

import logging
from pathlib import Path
from typing import Tuple, Union

import numpy as np

from petbmi.core.exceptions import PrescanError

logger = logging.getLogger(__name__)

_NEWLINE = ord('\n')
_SPACE = ord(' ')
_TAB = ord('\t')


def read_file_line_counts(file_name: Union[str, Path]) -> Tuple[int, int]:
    """Count lines and measure the longest line of a text file.

    Lines are terminated by ``\\n``. A final line without its own terminator
    still counts when it holds anything other than spaces or tabs.

    Args:
        file_name: Path of the file to scan

    Returns:
        ``(line_count, max_line_length + 1)``; the extra byte leaves room
        for the terminator when the value is used as a read bound.

    Raises:
        PrescanError: If the file cannot be opened
    """
    try:
        with open(file_name, 'rb') as fp:
            raw = fp.read()
    except OSError as e:
        raise PrescanError(
            f"File '{file_name}' does not exist or cannot be read"
        ) from e

    buf = np.frombuffer(raw, dtype=np.uint8)
    newlines = np.flatnonzero(buf == _NEWLINE)

    line_count = int(newlines.size)
    max_line_length = 0
    if line_count:
        # Length of each terminated line, excluding the terminator itself
        lengths = np.diff(np.concatenate(([-1], newlines))) - 1
        max_line_length = int(lengths.max())
        tail = buf[newlines[-1] + 1:]
    else:
        tail = buf

    if tail.size:
        max_line_length = max(max_line_length, int(tail.size))
        if np.any((tail != _SPACE) & (tail != _TAB)):
            line_count += 1

    logger.debug(
        f"Prescanned '{file_name}': {line_count} lines, "
        f"longest {max_line_length} bytes"
    )
    return line_count, max_line_length + 1
