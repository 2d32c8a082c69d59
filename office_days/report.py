"""Summary output: text listing, JSON payload and CSV export."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

from office_days.days import DaySet
from office_days.run import RunResult


def summary_line(days: DaySet) -> str:
    return (
        f"You have been in the office on {days.size()} day(s) "
        f"of which {days.working_day_count()} have been working days."
    )


def date_lines(days: DaySet) -> list[str]:
    """One line per day, ascending, with " (weekend)" for non-working days."""

    return [e.iso if e.is_working_day else f"{e.iso} (weekend)" for e in days.entries()]


def result_payload(result: RunResult) -> dict[str, Any]:
    """JSON-serializable view of a run."""

    days = result.days
    return {
        "days": days.size(),
        "working_days": days.working_day_count(),
        "weekend_days": days.weekend_day_count(),
        "dates": [{"date": e.iso, "working_day": e.is_working_day} for e in days.entries()],
        "files": [
            {
                "path": str(f.path),
                "variant": f.variant,
                "places": f.places,
                "candidates": f.candidates,
                "matches": f.matches,
                "error": f.error,
            }
            for f in result.files
        ],
    }


def result_json(result: RunResult) -> str:
    return json.dumps(result_payload(result), ensure_ascii=False, indent=2)


def write_days_csv(days: DaySet, out_path: str | Path) -> None:
    """Write matched days to CSV (date, weekday, working_day)."""

    p = Path(out_path)
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=["date", "weekday", "working_day"])
        w.writeheader()
        for e in days.entries():
            w.writerow(
                {
                    "date": e.iso,
                    "weekday": e.day.strftime("%A"),
                    "working_day": int(e.is_working_day),
                }
            )
