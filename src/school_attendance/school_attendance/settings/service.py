from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Any, Mapping, Optional

from ..common.datetime_utils import format_hhmm, parse_hhmm
from ..common.validators import require_coordinate
from ..core.constants import WEEKDAY_NAMES
from ..core.exceptions import ValidationError
from .model import AttendanceWindowConfig, ExpectedLocation
from .repository import SettingsRepository

logger = logging.getLogger(__name__)

_TIME_FIELDS = ("check_in_start", "check_in_end", "check_out_start", "check_out_end")


class SettingsService:
    """Reads and updates the attendance settings document.

    A missing document (or missing field) is never an error: the documented
    defaults apply.
    """

    def __init__(self, settings: SettingsRepository, *, default_location: ExpectedLocation):
        self._settings = settings
        self._default_location = default_location

    def _document(self) -> dict[str, Any]:
        doc = self._settings.get()
        if doc is None:
            logger.info("Attendance settings not configured, using defaults")
            return {}
        return doc

    def get_window_config(self) -> AttendanceWindowConfig:
        return self._window_from(self._document())

    def get_expected_location(self) -> ExpectedLocation:
        return self._location_from(self._document())

    def get_view(self) -> dict:
        doc = self._document()
        cfg = self._window_from(doc)
        loc = self._location_from(doc)
        return {
            "check_in_start": format_hhmm(cfg.check_in_start),
            "check_in_end": format_hhmm(cfg.check_in_end),
            "check_out_start": format_hhmm(cfg.check_out_start),
            "check_out_end": format_hhmm(cfg.check_out_end),
            "off_days": [d for d in WEEKDAY_NAMES if d in cfg.off_days],
            "grace_minutes": cfg.grace_minutes,
            "school_latitude": loc.latitude,
            "school_longitude": loc.longitude,
            "school_radius_meters": loc.radius_meters,
        }

    def update(self, values: Mapping[str, Any]) -> AttendanceWindowConfig:
        """Validate the provided fields and merge them into the document."""

        fields: dict[str, Any] = {}
        for name in _TIME_FIELDS:
            if name in values:
                try:
                    fields[name] = parse_hhmm(str(values[name]))
                except ValueError:
                    raise ValidationError(f"{name} must be HH:MM") from None

        if "off_days" in values:
            off_days = values["off_days"] or []
            if isinstance(off_days, str):
                off_days = [off_days]
            unknown = [d for d in off_days if d not in WEEKDAY_NAMES]
            if unknown:
                raise ValidationError(f"Unknown off day: {', '.join(unknown)}")
            fields["off_days"] = sorted(set(off_days))

        if "grace_minutes" in values:
            try:
                grace = int(values["grace_minutes"])
            except (TypeError, ValueError):
                raise ValidationError("grace_minutes must be a whole number") from None
            if grace < 0:
                raise ValidationError("grace_minutes cannot be negative")
            fields["grace_minutes"] = grace

        if "school_latitude" in values:
            fields["school_latitude"] = require_coordinate(values["school_latitude"], "school_latitude", limit=90)
        if "school_longitude" in values:
            fields["school_longitude"] = require_coordinate(values["school_longitude"], "school_longitude", limit=180)
        if "school_radius_meters" in values:
            try:
                radius = float(values["school_radius_meters"])
            except (TypeError, ValueError):
                raise ValidationError("school_radius_meters must be a number") from None
            if not math.isfinite(radius) or radius <= 0:
                raise ValidationError("school_radius_meters must be a positive number")
            fields["school_radius_meters"] = radius

        if not fields:
            raise ValidationError("No settings to update")

        merged = self._window_from({**self._document(), **fields})
        if merged.check_in_start > merged.check_in_end:
            raise ValidationError("Check-in start must not be after check-in end")
        if merged.check_out_start > merged.check_out_end:
            raise ValidationError("Check-out start must not be after check-out end")

        self._settings.merge(fields)
        logger.info("Attendance settings updated: %s", sorted(fields))
        return merged

    @staticmethod
    def _window_from(doc: Mapping[str, Any]) -> AttendanceWindowConfig:
        cfg = AttendanceWindowConfig()
        overrides: dict[str, Any] = {k: doc[k] for k in _TIME_FIELDS if doc.get(k) is not None}
        if doc.get("off_days") is not None:
            overrides["off_days"] = frozenset(doc["off_days"])
        if doc.get("grace_minutes") is not None:
            overrides["grace_minutes"] = int(doc["grace_minutes"])
        return replace(cfg, **overrides) if overrides else cfg

    def _location_from(self, doc: Mapping[str, Any]) -> ExpectedLocation:
        default = self._default_location

        def pick(key: str, fallback: float) -> float:
            value: Optional[float] = doc.get(key)
            return float(value) if value is not None else fallback

        return ExpectedLocation(
            latitude=pick("school_latitude", default.latitude),
            longitude=pick("school_longitude", default.longitude),
            radius_meters=pick("school_radius_meters", default.radius_meters),
        )
