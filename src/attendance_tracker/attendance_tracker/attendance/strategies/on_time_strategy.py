from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision, is_half_day, rounded_hours


class OnTimeStrategy(AttendanceStrategy):
    """Check-in at or before the late threshold."""

    def decide_checkin(self, *, check_in: datetime) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(self, *, check_in: datetime, check_out: datetime) -> StatusDecision:
        status = AttendanceStatus.HALF_DAY if is_half_day(check_in, check_out) else AttendanceStatus.PRESENT
        return StatusDecision(status=status, total_hours=rounded_hours(check_in, check_out))
