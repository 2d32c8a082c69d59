"""Command-line interface for office_days.

Run:
    python -m office_days -input-dir Takeout/ -start-date 2024-01-01T00:00:00 \
        -end-date 2024-12-31T23:59:59 -latitude 48.1794935 -longitude 11.5858037
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from office_days.logging_config import setup_logging
from office_days.models import DEFAULT_TOLERANCE_M, GeoPoint, TimeRange
from office_days.report import date_lines, result_json, summary_line, write_days_csv
from office_days.run import RunConfig, run
from office_days.timeutils import parse_dt, tzinfo_from_name


def _float_arg(text: str) -> float:
    try:
        return float(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(
        prog="office_days",
        description="Count the days a location-history export puts you near a given place.",
    )
    p.add_argument(
        "-input-dir",
        "--input-dir",
        dest="input_dir",
        type=str,
        required=True,
        help="Directory containing the input JSON files (searched recursively)",
    )
    p.add_argument(
        "-start-date",
        "--start-date",
        dest="start_date",
        type=str,
        required=True,
        help="Start of time range to consider, example: 2020-01-01T00:00:00",
    )
    p.add_argument(
        "-end-date",
        "--end-date",
        dest="end_date",
        type=str,
        required=True,
        help="End of time range to consider",
    )
    p.add_argument(
        "-latitude", "--latitude", dest="latitude", type=_float_arg, required=True, help="Latitude of the location"
    )
    p.add_argument(
        "-longitude", "--longitude", dest="longitude", type=_float_arg, required=True, help="Longitude of the location"
    )
    p.add_argument(
        "-tolerance",
        "--tolerance",
        dest="tolerance",
        type=_float_arg,
        default=DEFAULT_TOLERANCE_M,
        help="Radius around location in meters, contained places are considered as the location",
    )
    p.add_argument(
        "-tz",
        "--tz",
        dest="tz",
        type=str,
        default=None,
        help="IANA timezone for dates without offset and for calendar days (default: system local time)",
    )
    p.add_argument("-verbose", "--verbose", dest="verbose", action="store_true", help="Verbose output")
    p.add_argument("-print-dates", "--print-dates", dest="print_dates", action="store_true", help="Print dates")
    p.add_argument("-json", "--json", dest="json", action="store_true", help="Also print a JSON summary")
    p.add_argument("-out", "--out", dest="out", type=str, default=None, help="Write matched days to this CSV file")
    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    log = setup_logging(args.verbose)

    # Invalid values stop the run here with exit code 2, instead of silently
    # continuing with zeros.
    try:
        tz = tzinfo_from_name(args.tz) if args.tz else None
        start = parse_dt(args.start_date, tz)
        end = parse_dt(args.end_date, tz)
    except ValueError as exc:  # ArgumentParseError or an unknown timezone
        parser.error(str(exc))

    if end < start:
        log.warning("End date %s is before start date %s, nothing can match", end.isoformat(), start.isoformat())

    config = RunConfig(
        input_dir=Path(args.input_dir),
        time_range=TimeRange(start=start, end=end),
        reference=GeoPoint(args.latitude, args.longitude),
        tolerance_m=args.tolerance,
        tz=tz,
    )
    result = run(config, log=log)

    if result.files_failed:
        log.warning("%d of %d files could not be read", result.files_failed, len(result.files))

    print(summary_line(result.days))
    if args.print_dates:
        for line in date_lines(result.days):
            print(line)
    if args.json:
        print(result_json(result))
    if args.out:
        write_days_csv(result.days, args.out)
        print(f"Exported: {args.out}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
