from __future__ import annotations

from datetime import date, datetime, time, timedelta
from pathlib import Path

import streamlit as st

from office_days.models import DEFAULT_TOLERANCE_M, GeoPoint, TimeRange
from office_days.report import result_payload
from office_days.run import RunConfig, RunResult, run
from office_days.timeutils import tzinfo_from_name


def _range_from_dates(start_d: date, end_d: date, tz_name: str) -> TimeRange:
    """Convert a date range to the inclusive range [start 00:00, end 23:59:59.999999]."""

    tz = tzinfo_from_name(tz_name) if tz_name else None
    start_dt = datetime.combine(start_d, time.min)
    end_dt = datetime.combine(end_d + timedelta(days=1), time.min) - timedelta(microseconds=1)
    if tz is None:
        return TimeRange(start=start_dt.astimezone(), end=end_dt.astimezone())
    return TimeRange(start=start_dt.replace(tzinfo=tz), end=end_dt.replace(tzinfo=tz))


def _dir_signature(input_dir: Path) -> float:
    """Latest mtime below input_dir, used as part of the cache key."""

    latest = 0.0
    for p in input_dir.rglob("*"):
        try:
            latest = max(latest, p.stat().st_mtime)
        except OSError:
            continue
    return latest


@st.cache_data(show_spinner=False)
def _run_cached(
    input_dir: str,
    start_d: date,
    end_d: date,
    lat: float,
    lon: float,
    tolerance_m: float,
    tz_name: str,
    signature: float,
) -> dict[str, object]:
    _ = signature  # part of cache key so updated exports reload automatically
    config = RunConfig(
        input_dir=Path(input_dir),
        time_range=_range_from_dates(start_d, end_d, tz_name),
        reference=GeoPoint(lat, lon),
        tolerance_m=tolerance_m,
        tz=tzinfo_from_name(tz_name) if tz_name else None,
    )
    result: RunResult = run(config)
    return result_payload(result)


def main() -> None:
    st.set_page_config(page_title="Office days", layout="wide")
    st.title("Office days from location history")

    with st.sidebar:
        st.subheader("Data")
        input_dir = st.text_input("Export directory", value="Takeout")
        tz_name = st.text_input("Timezone (IANA, empty = system local)", value="")

        st.subheader("Location")
        lat = st.number_input("Latitude", value=48.1794935, format="%.7f")
        lon = st.number_input("Longitude", value=11.5858037, format="%.7f")
        tolerance_m = st.number_input("Tolerance (meters)", value=DEFAULT_TOLERANCE_M, step=50.0, min_value=0.0)

        st.subheader("Time range")
        today = date.today()
        start_d = st.date_input("Start date", value=today.replace(month=1, day=1))
        end_d = st.date_input("End date", value=today)

    p = Path(input_dir)
    if not p.is_dir():
        st.error(f"Directory not found: {input_dir!r}")
        return

    if start_d > end_d:
        st.error("Start date must not be after end date.")
        return

    try:
        if tz_name:
            tzinfo_from_name(tz_name)
    except ValueError as exc:
        st.error(str(exc))
        return

    with st.spinner("Reading exports ..."):
        payload = _run_cached(
            input_dir,
            start_d,
            end_d,
            float(lat),
            float(lon),
            float(tolerance_m),
            tz_name,
            _dir_signature(p),
        )

    st.subheader("Summary")
    c1, c2, c3 = st.columns(3)
    c1.metric("Days at location", str(payload["days"]))
    c2.metric("Working days", str(payload["working_days"]))
    c3.metric("Weekend days", str(payload["weekend_days"]))

    st.subheader("Days")
    st.dataframe(payload["dates"], use_container_width=True, height=360)

    files = payload["files"]
    failed = [f for f in files if f["error"]]
    with st.expander(f"Files ({len(files)}, failed {len(failed)})", expanded=bool(failed)):
        st.dataframe(files, use_container_width=True, height=360)

    st.caption(
        "A day counts when a visited place starting on that day lies within the tolerance radius "
        "and its visit overlaps the selected range."
    )


if __name__ == "__main__":
    main()
