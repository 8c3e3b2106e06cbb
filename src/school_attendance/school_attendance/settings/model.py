from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time

from ..core.constants import (
    DEFAULT_CHECK_IN_END,
    DEFAULT_CHECK_IN_START,
    DEFAULT_CHECK_OUT_END,
    DEFAULT_CHECK_OUT_START,
    DEFAULT_GRACE_MINUTES,
    DEFAULT_OFF_DAYS,
)


@dataclass(frozen=True)
class AttendanceWindowConfig:
    """Check-in/check-out windows and off-days, as currently configured.

    Always passed explicitly into status computations; there is no history,
    the current value applies to today's records retroactively.
    """

    check_in_start: time = DEFAULT_CHECK_IN_START
    check_in_end: time = DEFAULT_CHECK_IN_END
    check_out_start: time = DEFAULT_CHECK_OUT_START
    check_out_end: time = DEFAULT_CHECK_OUT_END
    off_days: frozenset[str] = field(default=DEFAULT_OFF_DAYS)
    # Minutes after check_in_end before a missing check-in counts as absent.
    grace_minutes: int = DEFAULT_GRACE_MINUTES


@dataclass(frozen=True)
class ExpectedLocation:
    latitude: float
    longitude: float
    radius_meters: float
