from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import AttendanceStatus
from ..settings.model import AttendanceWindowConfig
from .model import AttendanceRecord
from .strategies.base import AttendanceStrategy
from .strategies.fraud_strategy import FraudStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.missed_checkout_strategy import MissedCheckoutStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(
        self,
        *,
        check_in_time: datetime,
        config: AttendanceWindowConfig,
        is_fraudulent: bool = False,
    ) -> AttendanceStrategy:
        if is_fraudulent:
            return FraudStrategy()

        # Second resolution; both bounds inclusive.
        t = check_in_time.time().replace(microsecond=0)
        if config.check_in_start <= t <= config.check_in_end:
            return NormalStrategy()
        return LateStrategy()

    def for_display(self, *, record: AttendanceRecord, config: AttendanceWindowConfig, now: datetime) -> AttendanceStrategy:
        if record.status == AttendanceStatus.FRAUD:
            return FraudStrategy()

        if record.status == AttendanceStatus.PRESENT and record.check_out_time is None:
            checkout_closes = datetime.combine(record.work_date, config.check_out_end)
            if now > checkout_closes:
                return MissedCheckoutStrategy()
        return NormalStrategy()
