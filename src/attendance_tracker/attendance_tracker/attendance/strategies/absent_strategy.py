from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class AbsentStrategy(AttendanceStrategy):
    """No check-in: the day counts as absent whatever else is recorded."""

    def decide_checkin(self, *, check_in: Optional[datetime]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ABSENT)

    def decide_checkout(self, *, check_in: Optional[datetime], check_out: datetime) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ABSENT)
