from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import format_hhmm
from ...core.enums import AttendanceStatus
from ...settings.model import AttendanceWindowConfig
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Check-in outside the check-in window."""

    def decide_checkin(self, *, check_in_time: datetime, config: AttendanceWindowConfig) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.LATE,
            note=f"Checked in outside {format_hhmm(config.check_in_start)}-{format_hhmm(config.check_in_end)}",
        )
