"""Pure status functions.

Every function takes the window config (and ``now`` where relevant) as an
explicit argument; nothing here reads a clock or touches storage.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import weekday_name
from ..core.enums import AttendanceStatus
from ..settings.model import AttendanceWindowConfig
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord

_default_factory = AttendanceStrategyFactory()


def classify(
    check_in_time: datetime,
    config: AttendanceWindowConfig,
    *,
    factory: Optional[AttendanceStrategyFactory] = None,
) -> AttendanceStatus:
    """PRESENT inside ``[check_in_start, check_in_end]``, LATE otherwise."""

    factory = factory or _default_factory
    strategy = factory.for_checkin(check_in_time=check_in_time, config=config)
    return strategy.decide_checkin(check_in_time=check_in_time, config=config).status


def resolve_for_display(
    record: AttendanceRecord,
    config: AttendanceWindowConfig,
    now: datetime,
    *,
    factory: Optional[AttendanceStrategyFactory] = None,
) -> AttendanceStatus:
    """Status to show for ``record`` at ``now``.

    A PRESENT record without a check-out is shown as LATE once ``now`` is
    past the check-out window of its day. The stored record is not changed.
    """

    factory = factory or _default_factory
    strategy = factory.for_display(record=record, config=config, now=now)
    return strategy.decide_display(record=record, config=config, now=now).status


def is_off_day(day: date, config: AttendanceWindowConfig) -> bool:
    return weekday_name(day) in config.off_days
