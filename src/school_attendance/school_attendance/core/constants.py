"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

SETTINGS_DOCUMENT_ID = "attendance"

DEFAULT_CHECK_IN_START = time(7, 0)
DEFAULT_CHECK_IN_END = time(9, 0)
DEFAULT_CHECK_OUT_START = time(15, 0)
DEFAULT_CHECK_OUT_END = time(17, 0)
DEFAULT_OFF_DAYS = frozenset({"Saturday", "Sunday"})
DEFAULT_GRACE_MINUTES = 60

DEFAULT_SCHOOL_LATITUDE = -6.241169
DEFAULT_SCHOOL_LONGITUDE = 107.0378
DEFAULT_SCHOOL_RADIUS_METERS = 100.0

DEFAULT_HISTORY_LIMIT = 30

# Locale independent, indexed by date.weekday().
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

ABSENT_ID_PREFIX = "absent-"
