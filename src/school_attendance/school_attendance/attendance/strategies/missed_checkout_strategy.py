from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import format_hhmm
from ...core.enums import AttendanceStatus
from ...settings.model import AttendanceWindowConfig
from ..model import AttendanceRecord
from .base import StatusDecision
from .late_strategy import LateStrategy


class MissedCheckoutStrategy(LateStrategy):
    """Present record whose check-out window closed without a check-out.

    Read-time only: the stored record keeps PRESENT.
    """

    def decide_display(self, *, record: AttendanceRecord, config: AttendanceWindowConfig, now: datetime) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.LATE,
            note=f"No check-out before {format_hhmm(config.check_out_end)}",
        )
