from __future__ import annotations

from datetime import datetime

import pytest

from pager_hours.buckets import Bucket, bucket_for
from pager_hours.config import Config
from pager_hours.errors import CalendarDataGapError
from pager_hours.holidays import Region

LEGACY = Config(HOLIDAY_BEFORE_SUNDAY=False)


def test_bucket_values_are_csv_labels() -> None:
    assert [str(b) for b in Bucket] == [
        "holiday",
        "sunday",
        "saturday",
        "officehours",
        "weekday",
    ]


@pytest.mark.parametrize(
    "hour, expected",
    [
        (0, Bucket.WEEKDAY),
        (9, Bucket.WEEKDAY),
        (10, Bucket.OFFICE),
        (13, Bucket.OFFICE),
        (17, Bucket.OFFICE),
        (18, Bucket.WEEKDAY),
        (23, Bucket.WEEKDAY),
    ],
)
def test_office_hours_boundaries(hour: int, expected: Bucket) -> None:
    # Tuesday
    assert bucket_for(datetime(2024, 3, 5, hour), Region.BERLIN) is expected


def test_custom_office_window() -> None:
    config = Config(OFFICE_START=9, OFFICE_END=17)
    assert bucket_for(datetime(2024, 3, 5, 9), Region.BERLIN, config) is Bucket.OFFICE
    assert bucket_for(datetime(2024, 3, 5, 17), Region.BERLIN, config) is Bucket.WEEKDAY


def test_weekend() -> None:
    assert bucket_for(datetime(2024, 3, 2, 12), Region.BERLIN) is Bucket.SATURDAY
    assert bucket_for(datetime(2024, 3, 3, 12), Region.BERLIN) is Bucket.SUNDAY
    assert bucket_for(datetime(2024, 3, 3, 12), Region.BERLIN, LEGACY) is Bucket.SUNDAY


def test_weekday_holiday_beats_office_hours() -> None:
    assert bucket_for(datetime(2024, 10, 3, 11), Region.BERLIN) is Bucket.HOLIDAY
    assert bucket_for(datetime(2024, 10, 3, 11), Region.BERLIN, LEGACY) is Bucket.HOLIDAY
    assert bucket_for(datetime(2024, 10, 3, 11), Region.CALIFORNIA) is Bucket.OFFICE


def test_saturday_holiday_is_holiday_in_both_orders() -> None:
    # Christmas 2021 was a Saturday
    for config in (Config(), LEGACY):
        assert bucket_for(datetime(2021, 12, 25, 8), Region.BERLIN, config) is Bucket.HOLIDAY


@pytest.mark.parametrize(
    "when, region",
    [
        (datetime(2022, 12, 25, 12), Region.BERLIN),
        (datetime(2016, 5, 1, 12), Region.BULGARIA),
        (datetime(2024, 3, 31, 12), Region.BERLIN),
    ],
)
def test_sunday_holiday_order(when: datetime, region: Region) -> None:
    assert bucket_for(when, region) is Bucket.HOLIDAY
    assert bucket_for(when, region, LEGACY) is Bucket.SUNDAY


def test_same_input_same_bucket() -> None:
    when = datetime(2024, 11, 29, 15)
    first = bucket_for(when, Region.NEW_YORK)
    assert all(bucket_for(when, Region.NEW_YORK) is first for _ in range(10))
    assert first is Bucket.HOLIDAY


def test_calendar_gap_propagates() -> None:
    with pytest.raises(CalendarDataGapError):
        bucket_for(datetime(2031, 3, 4, 12), Region.BULGARIA)


@pytest.mark.parametrize("holiday_first", [True, False])
def test_one_calendar_lookup_per_hour(monkeypatch, holiday_first: bool) -> None:
    calls = []

    def counting_holiday(when, region):
        calls.append(when)
        return None

    monkeypatch.setattr("pager_hours.buckets.holiday", counting_holiday)
    config = Config(HOLIDAY_BEFORE_SUNDAY=holiday_first)
    assert bucket_for(datetime(2024, 3, 5, 11), Region.BERLIN, config) is Bucket.OFFICE
    assert len(calls) == 1
