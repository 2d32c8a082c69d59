import logging
from datetime import datetime, timezone

import pytest

from helpers import place_visit, semantic_segment, write_json
from office_days.days import DaySet
from office_days.models import GeoPoint, TimeRange, VisitedPlace
from office_days.matching import match_places, process_file

UTC = timezone.utc
OFFICE = GeoPoint(48.1794935, 11.5858037)
TWO_KM_NORTH = GeoPoint(OFFICE.latitude + 0.018, OFFICE.longitude)


def _dt(day: int, hour: int = 0) -> datetime:
    return datetime(2022, 1, day, hour, 0, tzinfo=UTC)


def _place(point: GeoPoint, start: datetime, end: datetime) -> VisitedPlace:
    return VisitedPlace(latitude=point.latitude, longitude=point.longitude, start=start, end=end)


@pytest.mark.parametrize(
    "range_start, range_end, expected",
    [
        (_dt(2), _dt(2), 1),
        (_dt(1), _dt(1), 1),
        (_dt(3), _dt(5), 1),
        (_dt(4), _dt(5), 0),
        (datetime(2021, 12, 1, tzinfo=UTC), datetime(2021, 12, 31, 23, 59, tzinfo=UTC), 0),
    ],
    ids=["inside", "start-boundary", "end-boundary", "after", "before"],
)
def test_partial_overlap_with_time_range_counts(range_start, range_end, expected):
    days = DaySet(tz=UTC)
    place = _place(OFFICE, _dt(1), _dt(3))

    stats = match_places([place], TimeRange(range_start, range_end), OFFICE, 100.0, days)

    assert stats.candidates == expected
    assert days.size() == expected


def test_only_places_within_tolerance_match():
    days = DaySet(tz=UTC)
    places = [
        _place(OFFICE, _dt(3, 8), _dt(3, 17)),
        _place(TWO_KM_NORTH, _dt(4, 8), _dt(4, 17)),
    ]

    stats = match_places(places, TimeRange(_dt(1), _dt(31)), OFFICE, 100.0, days)

    assert stats.places == 2
    assert stats.candidates == 2
    assert stats.matches == 1
    assert days.to_sorted_list() == ["2022-01-03"]


def test_day_comes_from_visit_start():
    days = DaySet(tz=UTC)
    overnight = _place(OFFICE, _dt(7, 22), _dt(8, 6))

    match_places([overnight], TimeRange(_dt(8), _dt(8, 23)), OFFICE, 100.0, days)

    assert days.to_sorted_list() == ["2022-01-07"]


def test_unsorted_input_is_scanned_completely():
    days = DaySet(tz=UTC)
    places = [
        _place(OFFICE, _dt(20), _dt(20, 8)),
        _place(OFFICE, _dt(3), _dt(3, 8)),
        _place(OFFICE, _dt(25), _dt(25, 8)),
        _place(OFFICE, _dt(10), _dt(10, 8)),
    ]

    stats = match_places(places, TimeRange(_dt(1), _dt(15)), OFFICE, 100.0, days)

    assert stats.candidates == 2
    assert days.to_sorted_list() == ["2022-01-03", "2022-01-10"]


def test_process_file_matches_semantic_segments(tmp_path, caplog):
    caplog.set_level(logging.DEBUG)
    path = write_json(
        tmp_path / "device.json",
        {
            "semanticSegments": [
                semantic_segment("2022-01-03T08:00:00Z", "2022-01-03T09:00:00Z", "48.1794935°, 11.5858037°"),
                semantic_segment("2022-02-03T08:00:00Z", "2022-02-03T09:00:00Z", "48.1794935°, 11.5858037°"),
            ]
        },
    )
    days = DaySet(tz=UTC)

    stats = process_file(path, TimeRange(_dt(1), _dt(31)), OFFICE, 100.0, days)

    assert stats.ok
    assert stats.variant == "semanticSegments"
    assert (stats.places, stats.candidates, stats.matches) == (2, 1, 1)
    assert days.to_sorted_list() == ["2022-01-03"]
    assert "Found 2 visits to places in file of which 1 have been (partially) within the given time range" in caplog.text
    assert str(path) in caplog.text


def test_process_file_logs_and_skips_broken_files(tmp_path, caplog):
    broken = tmp_path / "broken.json"
    broken.write_text('{"timelineObjects": [', encoding="utf-8")
    days = DaySet(tz=UTC)
    days.insert(_dt(3))

    stats = process_file(broken, TimeRange(_dt(1), _dt(31)), OFFICE, 100.0, days)

    assert not stats.ok
    assert stats.places == 0
    assert days.size() == 1
    assert "Could not parse file" in caplog.text
    assert "broken.json" in caplog.text


def test_process_file_logs_missing_files(tmp_path, caplog):
    stats = process_file(tmp_path / "gone.json", TimeRange(_dt(1), _dt(31)), OFFICE, 100.0, DaySet(tz=UTC))

    assert not stats.ok
    assert "Could not open file" in caplog.text


def test_process_file_uses_given_logger(tmp_path, caplog):
    path = write_json(
        tmp_path / "2022_JANUARY.json",
        {"timelineObjects": [place_visit("2022-01-03T08:00:00Z", "2022-01-03T16:00:00Z", 481794935, 115858037)]},
    )
    caplog.set_level(logging.DEBUG, logger="office_days.test")

    process_file(
        path,
        TimeRange(_dt(1), _dt(31)),
        OFFICE,
        100.0,
        DaySet(tz=UTC),
        log=logging.getLogger("office_days.test"),
    )

    assert any(r.name == "office_days.test" for r in caplog.records)


def test_process_file_skips_deeply_nested_files(tmp_path, caplog):
    depth = 200_000
    nested = tmp_path / "nested.json"
    nested.write_text('{"timelineObjects": ' + "[" * depth + "]" * depth + "}", encoding="utf-8")

    stats = process_file(nested, TimeRange(_dt(1), _dt(31)), OFFICE, 100.0, DaySet(tz=UTC))

    assert not stats.ok
    assert "Could not parse file" in caplog.text
