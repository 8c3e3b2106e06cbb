from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol


class SettingsRepository(Protocol):
    """The single attendance settings document.

    ``get`` returns the stored fields (any of them may be missing) or None
    when the document was never written. ``merge`` upserts the given fields.
    Field names: check_in_start, check_in_end, check_out_start, check_out_end
    (``datetime.time``), off_days (list of weekday names), grace_minutes,
    school_latitude, school_longitude, school_radius_meters.
    """

    def get(self) -> Optional[dict[str, Any]]:
        raise NotImplementedError

    def merge(self, fields: Mapping[str, Any]) -> None:
        raise NotImplementedError
