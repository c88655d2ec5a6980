from datetime import UTC, datetime, timedelta, timezone

from grouproster.app.core.time import class_start_at, ensure_utc, utc_now


def test_utc_now_is_timezone_aware_utc():
    value = utc_now()
    assert value.tzinfo is UTC


def test_ensure_utc_attaches_utc_to_naive_values():
    assert ensure_utc(None) is None
    assert ensure_utc(datetime(2026, 1, 1, 12, 0)) == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
    kst = datetime(2026, 1, 1, 21, 0, tzinfo=timezone(timedelta(hours=9)))
    assert ensure_utc(kst) == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def test_class_start_at_converts_local_wall_clock_to_utc():
    assert class_start_at("2026-11-02", "10:00", 9) == datetime(2026, 11, 2, 1, 0, tzinfo=UTC)
    assert class_start_at("2026-11-02", "08:30", 9) == datetime(2026, 11, 1, 23, 30, tzinfo=UTC)


def test_class_start_at_rejects_impossible_dates():
    assert class_start_at("2026-02-30", "10:00", 9) is None
    assert class_start_at("2026-11-02", "25:00", 9) is None
