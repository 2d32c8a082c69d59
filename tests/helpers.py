"""Builders for export documents used across tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def semantic_segment(start: str, end: str, *points: str) -> dict[str, Any]:
    return {
        "startTime": start,
        "endTime": end,
        "timelinePath": [{"point": p, "time": start} for p in points],
    }

def place_visit(start: str, end: str, lat_e7: int | None, lng_e7: int | None, **location: int) -> dict[str, Any]:
    visit: dict[str, Any] = {
        "location": dict(location),
        "duration": {"startTimestamp": start, "endTimestamp": end},
        "visitConfidence": 90,
    }
    if lat_e7 is not None:
        visit["centerLatE7"] = lat_e7
    if lng_e7 is not None:
        visit["centerLngE7"] = lng_e7
    return {"placeVisit": visit}

def write_json(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path
