"""Attendance status rule.

``determine_status`` is a pure function of the two instants:

* no check-in -> ``absent``
* check-in after 09:30:00 -> ``late``, otherwise ``present``
* once checked out, fewer than 4 worked hours -> ``half-day``
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus
from .factory import AttendanceStrategyFactory
from .strategies.base import rounded_hours

_default_factory = AttendanceStrategyFactory()


def determine_status(
    check_in: Optional[datetime],
    check_out: Optional[datetime] = None,
    *,
    factory: Optional[AttendanceStrategyFactory] = None,
) -> AttendanceStatus:
    strategy = (factory or _default_factory).for_check_in(check_in)
    if check_out is None:
        return strategy.decide_checkin(check_in=check_in).status
    return strategy.decide_checkout(check_in=check_in, check_out=check_out).status


def total_hours(check_in: Optional[datetime], check_out: Optional[datetime]) -> Optional[Decimal]:
    """Worked hours rounded to 2 decimals, or None until both instants exist."""
    if check_in is None or check_out is None:
        return None
    return rounded_hours(check_in, check_out)
