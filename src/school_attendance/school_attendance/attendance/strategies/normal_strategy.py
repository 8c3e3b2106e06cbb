from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...settings.model import AttendanceWindowConfig
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in; display keeps the stored status."""

    def decide_checkin(self, *, check_in_time: datetime, config: AttendanceWindowConfig) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
