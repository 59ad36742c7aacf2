from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ...core.constants import HALF_DAY_HOURS
from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    total_hours: Optional[Decimal] = None


def worked_hours(check_in: datetime, check_out: datetime) -> float:
    return (check_out - check_in).total_seconds() / 3600


def rounded_hours(check_in: datetime, check_out: datetime) -> Decimal:
    seconds = Decimal(str((check_out - check_in).total_seconds()))
    return (seconds / Decimal(3600)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def is_half_day(check_in: datetime, check_out: datetime) -> bool:
    return worked_hours(check_in, check_out) < HALF_DAY_HOURS


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_checkin(self, *, check_in: Optional[datetime]) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_checkout(self, *, check_in: Optional[datetime], check_out: datetime) -> StatusDecision:
        raise NotImplementedError
