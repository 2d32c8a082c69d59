import json
from datetime import datetime, timezone

import pytest

from helpers import place_visit, semantic_segment, write_json
from office_days.errors import DirectoryListError
from office_days.models import GeoPoint, TimeRange
from office_days.report import date_lines, result_payload, summary_line, write_days_csv
from office_days.run import RunConfig, list_files_recursively, run

UTC = timezone.utc
OFFICE = GeoPoint(48.1794935, 11.5858037)
JANUARY_2024 = TimeRange(datetime(2024, 1, 1, tzinfo=UTC), datetime(2024, 1, 31, 23, 59, 59, tzinfo=UTC))


def _export_dir(tmp_path):
    root = tmp_path / "Takeout"
    # Friday, Variant A (device export)
    write_json(
        root / "device" / "Timeline.json",
        {
            "semanticSegments": [
                semantic_segment("2024-01-05T08:00:00Z", "2024-01-05T12:00:00Z", "48.1794935°, 11.5858037°"),
                semantic_segment("2024-01-05T13:00:00Z", "2024-01-05T17:00:00Z", "48.1795000°, 11.5858000°"),
            ]
        },
    )
    # Saturday, Variant B (Takeout)
    write_json(
        root / "Semantic Location History" / "2024" / "2024_JANUARY.json",
        {
            "timelineObjects": [
                {"activitySegment": {}},
                place_visit(
                    "2024-01-06T10:00:00Z",
                    "2024-01-06T11:00:00Z",
                    None,
                    None,
                    latitudeE7=481794935,
                    longitudeE7=115858037,
                ),
                place_visit("2024-01-08T10:00:00Z", "2024-01-08T11:00:00Z", 525200000, 134050000),
            ]
        },
    )
    return root


def test_list_files_recursively_walks_nested_directories(tmp_path):
    (tmp_path / "a" / "b").mkdir(parents=True)
    (tmp_path / "a" / "b" / "deep.json").write_text("{}", encoding="utf-8")
    (tmp_path / "a" / "mid.json").write_text("{}", encoding="utf-8")
    (tmp_path / "top.json").write_text("{}", encoding="utf-8")
    (tmp_path / "empty").mkdir()

    files = list_files_recursively(tmp_path)

    assert sorted(p.relative_to(tmp_path).as_posix() for p in files) == ["a/b/deep.json", "a/mid.json", "top.json"]


def test_list_files_recursively_missing_root(tmp_path):
    with pytest.raises(DirectoryListError):
        list_files_recursively(tmp_path / "missing")


def test_run_combines_both_export_formats(tmp_path):
    config = RunConfig(
        input_dir=_export_dir(tmp_path), time_range=JANUARY_2024, reference=OFFICE, tolerance_m=100.0, tz=UTC
    )

    result = run(config)

    assert result.days.to_sorted_list() == ["2024-01-05", "2024-01-06"]
    assert result.days.size() == 2
    assert result.days.working_day_count() == 1
    assert result.files_failed == 0
    assert result.places == 4
    assert summary_line(result.days) == "You have been in the office on 2 day(s) of which 1 have been working days."
    assert date_lines(result.days) == ["2024-01-05", "2024-01-06 (weekend)"]


def test_run_skips_broken_files_and_continues(tmp_path, caplog):
    root = _export_dir(tmp_path)
    (root / "notes.txt").write_text("not json at all", encoding="utf-8")

    result = run(RunConfig(input_dir=root, time_range=JANUARY_2024, reference=OFFICE, tolerance_m=100.0, tz=UTC))

    assert result.days.size() == 2
    assert result.files_failed == 1
    assert "notes.txt" in caplog.text


def test_run_with_unreadable_directory_reports_zero(tmp_path, caplog):
    result = run(RunConfig(input_dir=tmp_path / "missing", time_range=JANUARY_2024, reference=OFFICE, tz=UTC))

    assert result.days.size() == 0
    assert result.files == []
    assert "Could not list files" in caplog.text
    assert summary_line(result.days) == "You have been in the office on 0 day(s) of which 0 have been working days."


def test_result_payload_and_csv(tmp_path):
    result = run(
        RunConfig(input_dir=_export_dir(tmp_path), time_range=JANUARY_2024, reference=OFFICE, tolerance_m=100.0, tz=UTC)
    )

    payload = json.loads(json.dumps(result_payload(result)))
    assert payload["days"] == 2
    assert payload["weekend_days"] == 1
    assert payload["dates"] == [
        {"date": "2024-01-05", "working_day": True},
        {"date": "2024-01-06", "working_day": False},
    ]
    assert {f["variant"] for f in payload["files"]} == {"semanticSegments", "timelineObjects"}

    out = tmp_path / "days.csv"
    write_days_csv(result.days, out)
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "date,weekday,working_day"
    assert lines[1].startswith("2024-01-05,")
    assert lines[2].endswith(",0")


def test_run_skips_files_with_non_finite_coordinates(tmp_path, caplog):
    root = tmp_path / "Takeout"
    write_json(
        root / "2024_JANUARY.json",
        {"timelineObjects": [place_visit("2024-01-05T08:00:00Z", "2024-01-05T16:00:00Z", 481794935, 115858037)]},
    )
    duration = '"duration": {"startTimestamp": "2024-01-08T08:00:00Z", "endTimestamp": "2024-01-08T16:00:00Z"}'
    for name, value in [("nan.json", "NaN"), ("inf.json", "Infinity")]:
        (root / name).write_text(
            '{"timelineObjects": [{"placeVisit": {"centerLatE7": ' + value + ', "centerLngE7": 115858037, '
            + duration + "}}]}",
            encoding="utf-8",
        )

    result = run(RunConfig(input_dir=root, time_range=JANUARY_2024, reference=OFFICE, tolerance_m=100.0, tz=UTC))

    assert result.days.to_sorted_list() == ["2024-01-05"]
    assert result.files_failed == 2
    assert "nan.json" in caplog.text
    assert "inf.json" in caplog.text
