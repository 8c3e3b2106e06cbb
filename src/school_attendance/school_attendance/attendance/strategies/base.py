from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...settings.model import AttendanceWindowConfig
from ..model import AttendanceRecord


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_checkin(self, *, check_in_time: datetime, config: AttendanceWindowConfig) -> StatusDecision:
        raise NotImplementedError

    def decide_display(self, *, record: AttendanceRecord, config: AttendanceWindowConfig, now: datetime) -> StatusDecision:
        return StatusDecision(status=record.status)
