# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""
Model clock and lifecycle states of the BMI driver.

The clock is mutated only by the driver. ``current_step`` is the counter
used to index forcing arrays; ``current_time`` is the epoch time of the
start of the step about to be computed.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from petbmi.core.constants import BMIConstants


class ModelState(Enum):
    """Lifecycle of a :class:`~petbmi.bmi.bmi_pet.BmiPET` instance."""
    UNINITIALIZED = 'uninitialized'
    READY = 'ready'
    STEPPING = 'stepping'
    FINALIZED = 'finalized'


@dataclass
class ModelClock:
    """Time bookkeeping of a run.

    Attributes:
        time_step_size_s: Length of one step (s); temporarily overridden
            during a fractional ``update_until`` step
        num_timesteps: Configured number of steps
        start_time: Epoch time of the first step (s)
        current_time: Epoch time of the current step (s)
        current_time_step: Seconds elapsed since the start of the run
        current_step: Steps taken since the start of the run
    """
    time_step_size_s: float = 3600.0
    num_timesteps: int = 1
    start_time: float = 0.0
    current_time: float = 0.0
    current_time_step: float = 0.0
    current_step: int = 0

    @classmethod
    def starting_at(cls, start_time: float, time_step_size_s: float,
                    num_timesteps: int) -> 'ModelClock':
        return cls(
            time_step_size_s=time_step_size_s,
            num_timesteps=num_timesteps,
            start_time=start_time,
            current_time=start_time,
        )

    def advance(self) -> None:
        """Move forward by the current ``time_step_size_s``."""
        self.current_time_step += self.time_step_size_s
        self.current_step += 1
        self.current_time += self.time_step_size_s

    @property
    def end_time(self) -> float:
        """Start time plus the configured run length.

        ``num_timesteps == 1`` means the run length was not configured; the
        end is then reported as far in the future (FLT_MAX seconds).
        """
        if self.num_timesteps == 1:
            return self.start_time + BMIConstants.UNSET_END_TIME_OFFSET
        return self.start_time + self.num_timesteps * self.time_step_size_s

    @contextmanager
    def override_time_step(self, time_step_size_s: float) -> Iterator['ModelClock']:
        """Run a block with a different step length, restoring it afterwards."""
        saved = self.time_step_size_s
        self.time_step_size_s = time_step_size_s
        try:
            yield self
        finally:
            self.time_step_size_s = saved
