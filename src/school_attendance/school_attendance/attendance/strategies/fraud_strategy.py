from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...settings.model import AttendanceWindowConfig
from ..model import AttendanceRecord
from .base import AttendanceStrategy, StatusDecision


class FraudStrategy(AttendanceStrategy):
    """Flagged check-in: never Present/Late, waits for manual verification."""

    def decide_checkin(self, *, check_in_time: datetime, config: AttendanceWindowConfig) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.FRAUD, note="Requires manual verification")

    def decide_display(self, *, record: AttendanceRecord, config: AttendanceWindowConfig, now: datetime) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.FRAUD)
