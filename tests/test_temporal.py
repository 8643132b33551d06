from datetime import date

from core.services.common.temporal import (
    clamp_range,
    contains,
    iter_months,
    iter_weeks,
    month_bounds,
    overlaps,
    week_key,
    week_start,
    working_days_between,
)


def test_contains_is_inclusive_and_open_ended():
    assert contains(date(2026, 3, 1), date(2026, 3, 31), date(2026, 3, 1))
    assert contains(date(2026, 3, 1), date(2026, 3, 31), date(2026, 3, 31))
    assert not contains(date(2026, 3, 1), date(2026, 3, 31), date(2026, 4, 1))
    assert contains(None, None, date(1999, 1, 1))
    assert contains(date(2026, 3, 1), None, date(2030, 1, 1))


def test_overlaps_touching_ranges_count():
    assert overlaps(date(2026, 1, 1), date(2026, 1, 10), date(2026, 1, 10), date(2026, 1, 20))
    assert not overlaps(date(2026, 1, 1), date(2026, 1, 9), date(2026, 1, 10), date(2026, 1, 20))


def test_clamp_range_intersects_or_returns_none():
    assert clamp_range(date(2026, 1, 1), date(2026, 6, 30), date(2026, 3, 1), date(2026, 4, 30)) == (
        date(2026, 3, 1),
        date(2026, 4, 30),
    )
    assert clamp_range(date(2026, 1, 1), date(2026, 1, 31), date(2026, 3, 1), date(2026, 4, 30)) is None
    assert clamp_range(date(2026, 1, 1), date(2026, 1, 31), None, None) == (date(2026, 1, 1), date(2026, 1, 31))


def test_weeks_start_on_monday():
    # 2026-03-05 is a Thursday
    assert week_start(date(2026, 3, 5)) == date(2026, 3, 2)
    assert list(iter_weeks(date(2026, 3, 5), 3)) == [date(2026, 3, 2), date(2026, 3, 9), date(2026, 3, 16)]
    assert list(iter_weeks(date(2026, 3, 5), 0)) == []
    assert week_key(date(2026, 3, 5)) == "2026-W10"


def test_month_buckets_roll_over_the_year():
    assert month_bounds(date(2024, 2, 10)) == ("2024-02", date(2024, 2, 1), date(2024, 2, 29))
    keys = [key for key, _s, _e in iter_months(date(2026, 11, 20), 3)]
    assert keys == ["2026-11", "2026-12", "2027-01"]


def test_working_days_between_counts_weekdays_inclusive():
    # Mon 2026-03-02 .. Sun 2026-03-15 holds two working weeks
    assert working_days_between(date(2026, 3, 2), date(2026, 3, 15)) == 10
    assert working_days_between(date(2026, 3, 7), date(2026, 3, 8)) == 0
    assert working_days_between(date(2026, 3, 6), date(2026, 3, 6)) == 1
    assert working_days_between(date(2026, 3, 6), date(2026, 3, 5)) == 0
