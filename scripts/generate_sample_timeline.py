from __future__ import annotations

import argparse
import json
import random
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Final

from zoneinfo import ZoneInfo


TZ: Final[str] = "Europe/Berlin"


@dataclass(frozen=True, slots=True)
class Cluster:
    name: str
    lat: float
    lon: float


def _ts(dt: datetime) -> str:
    return dt.isoformat(timespec="milliseconds")


def _jitter(rng: random.Random, cluster: Cluster) -> tuple[float, float]:
    return (
        cluster.lat + rng.uniform(-0.0015, 0.0015),
        cluster.lon + rng.uniform(-0.0015, 0.0015),
    )


def generate_days(
    *,
    days: int,
    seed: int,
    start: date,
    office: Cluster,
    others: list[Cluster],
    office_probability: float,
) -> list[tuple[datetime, datetime, Cluster]]:
    """Generate one (start, end, cluster) stay per day, realistic-ish."""

    rng = random.Random(seed)
    tz = ZoneInfo(TZ)
    stays: list[tuple[datetime, datetime, Cluster]] = []
    for i in range(days):
        d = start + timedelta(days=i)
        weekday = d.weekday() < 5
        # Mostly office on weekdays, occasionally on weekends
        at_office = rng.random() < (office_probability if weekday else office_probability / 10)
        cluster = office if at_office else rng.choice(others)
        begin = datetime(d.year, d.month, d.day, 8, 0, tzinfo=tz) + timedelta(minutes=rng.uniform(0, 120))
        end = begin + timedelta(hours=rng.uniform(1, 9))
        stays.append((begin, end, cluster))
    return stays


def semantic_segments_doc(stays: list[tuple[datetime, datetime, Cluster]], rng: random.Random) -> dict[str, Any]:
    segments = []
    for begin, end, cluster in stays:
        path = []
        for k in range(rng.randint(1, 4)):
            lat, lon = _jitter(rng, cluster)
            path.append({"point": f"{lat:.7f}°, {lon:.7f}°", "time": _ts(begin + timedelta(minutes=10 * k))})
        segments.append({"startTime": _ts(begin), "endTime": _ts(end), "timelinePath": path})
        # visit segments without a path are skipped by the reader
        segments.append({"startTime": _ts(begin), "endTime": _ts(end), "visit": {"probability": 0.9}})
    return {"semanticSegments": segments}


def timeline_objects_doc(stays: list[tuple[datetime, datetime, Cluster]], rng: random.Random) -> dict[str, Any]:
    objects: list[dict[str, Any]] = []
    for begin, end, cluster in stays:
        lat, lon = _jitter(rng, cluster)
        visit: dict[str, Any] = {
            "location": {
                "latitudeE7": round(lat * 1e7),
                "longitudeE7": round(lon * 1e7),
                "name": cluster.name,
            },
            "duration": {"startTimestamp": _ts(begin), "endTimestamp": _ts(end)},
            "visitConfidence": rng.randint(50, 100),
        }
        # newer Takeouts dropped the center fields
        if rng.random() < 0.5:
            visit["centerLatE7"] = round(lat * 1e7)
            visit["centerLngE7"] = round(lon * 1e7)
        objects.append({"activitySegment": {"duration": {"startTimestamp": _ts(begin - timedelta(minutes=30))}}})
        objects.append({"placeVisit": visit})
    return {"timelineObjects": objects}


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake location-history export for demo/testing (privacy-safe).")
    p.add_argument("--out-dir", type=str, default="sample_data/Takeout", help="Output directory")
    p.add_argument("--days", type=int, default=90, help="Number of days")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--start", type=str, default="2024-01-01", help="First day, e.g. '2024-01-01'")
    p.add_argument(
        "--format",
        type=str,
        default="both",
        choices=["semantic", "legacy", "both"],
        help="semantic=semanticSegments, legacy=timelineObjects, both=alternate per month",
    )
    p.add_argument("--office-probability", type=float, default=0.6, help="Chance of an office day on weekdays")
    args = p.parse_args()

    office = Cluster("office", 48.1794935, 11.5858037)
    others = [
        Cluster("home", 48.1351000, 11.5820000),
        Cluster("gym", 48.1500000, 11.5400000),
        Cluster("berlin_trip", 52.5200000, 13.4050000),
    ]
    stays = generate_days(
        days=args.days,
        seed=args.seed,
        start=date.fromisoformat(args.start),
        office=office,
        others=others,
        office_probability=args.office_probability,
    )

    by_month: dict[tuple[int, int], list[tuple[datetime, datetime, Cluster]]] = {}
    for stay in stays:
        by_month.setdefault((stay[0].year, stay[0].month), []).append(stay)

    rng = random.Random(args.seed + 1)
    out_dir = Path(args.out_dir)
    for i, ((year, month), month_stays) in enumerate(sorted(by_month.items())):
        semantic = args.format == "semantic" or (args.format == "both" and i % 2 == 0)
        doc = semantic_segments_doc(month_stays, rng) if semantic else timeline_objects_doc(month_stays, rng)
        out_path = out_dir / str(year) / f"{year}_{month:02d}.json"
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")

    print(f"Generated: {out_dir} (days={len(stays)}, files={len(by_month)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
