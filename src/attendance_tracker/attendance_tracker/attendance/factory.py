from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from ..core.constants import LATE_THRESHOLD
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the status strategy from the check-in instant."""

    late_threshold: time = LATE_THRESHOLD

    def for_check_in(self, check_in: Optional[datetime]) -> AttendanceStrategy:
        if check_in is None:
            return AbsentStrategy()

        # Strictly after the threshold is late; the threshold itself is on time.
        if check_in.time() > self.late_threshold:
            return LateStrategy()
        return OnTimeStrategy()
