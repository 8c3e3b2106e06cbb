from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus
from ..users.model import User


@dataclass(frozen=True)
class RosterEntry:
    user: User
    # None: no record yet and the check-in deadline has not passed.
    status: Optional[AttendanceStatus]
    is_fraudulent: bool = False


@dataclass(frozen=True)
class DailySummary:
    day: date
    is_off_day: bool
    total: int
    present: int = 0
    late: int = 0
    absent: int = 0
    fraud: int = 0
    rate: int = 0
    roster: list[RosterEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "day": self.day.strftime("%Y-%m-%d"),
            "is_off_day": self.is_off_day,
            "total": self.total,
            "present": self.present,
            "late": self.late,
            "absent": self.absent,
            "fraud": self.fraud,
            "rate": self.rate,
            "roster": [
                {
                    "user_id": e.user.user_id,
                    "name": e.user.name,
                    "status": e.status.value if e.status else None,
                    "is_fraudulent": e.is_fraudulent,
                }
                for e in self.roster
            ],
        }


@dataclass(frozen=True)
class PeriodReport:
    start: date
    end: date
    total: int
    attended: int
    late: int
    absent: int
    rate: int

    def to_dict(self) -> dict:
        return {
            "start": self.start.strftime("%Y-%m-%d"),
            "end": self.end.strftime("%Y-%m-%d"),
            "total": self.total,
            "attended": self.attended,
            "late": self.late,
            "absent": self.absent,
            "rate": self.rate,
        }
