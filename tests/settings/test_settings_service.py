from datetime import time

import pytest

from school_attendance.core.exceptions import ValidationError


def test_missing_document_falls_back_to_defaults(container):
    cfg = container.settings_service.get_window_config()
    loc = container.settings_service.get_expected_location()

    assert (cfg.check_in_start, cfg.check_in_end) == (time(7, 0), time(9, 0))
    assert (cfg.check_out_start, cfg.check_out_end) == (time(15, 0), time(17, 0))
    assert cfg.off_days == frozenset({"Saturday", "Sunday"})
    assert cfg.grace_minutes == 60
    assert (loc.latitude, loc.longitude, loc.radius_meters) == (-6.241169, 107.0378, 100.0)


def test_partial_document_keeps_defaults_for_missing_fields(container, settings_repo):
    settings_repo.doc = {"check_in_end": time(8, 30), "off_days": ["Sunday"], "school_radius_meters": 250}

    cfg = container.settings_service.get_window_config()

    assert cfg.check_in_end == time(8, 30)
    assert cfg.check_in_start == time(7, 0)
    assert cfg.off_days == frozenset({"Sunday"})
    assert container.settings_service.get_expected_location().radius_meters == 250.0


def test_update_merges_into_document(container, settings_repo):
    cfg = container.settings_service.update(
        {"check_in_start": "06:45", "off_days": ["Sunday", "Friday"], "grace_minutes": "30"}
    )

    assert cfg.check_in_start == time(6, 45)
    assert cfg.grace_minutes == 30
    assert settings_repo.doc["off_days"] == ["Friday", "Sunday"]

    view = container.settings_service.get_view()
    assert view["check_in_start"] == "06:45"
    assert view["check_in_end"] == "09:00"
    assert view["off_days"] == ["Friday", "Sunday"]


def test_update_single_off_day_string(container):
    cfg = container.settings_service.update({"off_days": "Saturday"})

    assert cfg.off_days == frozenset({"Saturday"})


def test_update_location(container):
    container.settings_service.update({"school_latitude": "-6.3", "school_longitude": 107.1, "school_radius_meters": 150})

    loc = container.settings_service.get_expected_location()
    assert (loc.latitude, loc.longitude, loc.radius_meters) == (-6.3, 107.1, 150.0)


@pytest.mark.parametrize(
    "values",
    [
        {},
        {"check_in_start": "7am"},
        {"check_in_start": "25:00"},
        {"check_in_start": "10:00"},
        {"check_out_end": "14:00"},
        {"off_days": ["Funday"]},
        {"grace_minutes": -5},
        {"grace_minutes": "soon"},
        {"school_latitude": 120},
        {"school_radius_meters": 0},
        {"school_radius_meters": "nan"},
        {"school_radius_meters": "inf"},
    ],
)
def test_update_rejects_invalid_values(container, settings_repo, values):
    with pytest.raises(ValidationError):
        container.settings_service.update(values)

    assert settings_repo.doc is None


def test_window_order_is_checked_against_the_stored_document(container, settings_repo):
    settings_repo.doc = {"check_in_end": time(8, 0)}

    with pytest.raises(ValidationError, match="Check-in start"):
        container.settings_service.update({"check_in_start": "08:15"})
