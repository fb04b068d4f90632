#!/usr/bin/env python3
"""
Fetch the parks of one state, their hourly weather for one day, and write:
  - <out-dir>/<date>_<state>_hourly.csv  (one row per park per hour)
  - <out-dir>/<date>_<state>_daily.csv   (one row per park per day)
"""

from __future__ import annotations

import argparse
import logging
from datetime import date, timedelta
from pathlib import Path

from dotenv import load_dotenv, find_dotenv

from nps_parks.config import Settings
from nps_parks.nps_client import NpsClient
from nps_parks.park_catalog import STATE_CODES, fetch_park_locations
from weather.aggregate import ForecastAggregator, write_table
from weather.daily_summary import summarize_daily
from weather.open_meteo import ForecastClient


def main() -> None:
    load_dotenv(find_dotenv(usecwd=True), override=True)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    ap = argparse.ArgumentParser(description="Hourly Open-Meteo forecast for the national parks of a state.")
    ap.add_argument("--state", default="NJ", choices=STATE_CODES, help="Two-letter state code.")
    ap.add_argument("--date", default=None, help="Trip date YYYY-MM-DD. Default: yesterday.")
    ap.add_argument("--out-dir", default=None, help="Output directory. Default: PARK_WEATHER_OUT_DIR or data/park_weather.")
    ap.add_argument("--parks", nargs="*", default=None, help="Only these park names (full names).")
    ap.add_argument("--workers", type=int, default=1, help="Concurrent forecast requests.")
    ap.add_argument("--skip-failed", action="store_true", help="Skip parks whose forecast fails instead of aborting.")
    args = ap.parse_args()

    settings = Settings.from_env()
    trip_date = args.date or (date.today() - timedelta(days=1)).isoformat()
    out_dir = Path(args.out_dir) if args.out_dir else settings.out_dir

    nps = NpsClient(api_key=settings.nps_api_key, base_url=settings.nps_parks_url, timeout_s=settings.http_timeout_s)
    locations = fetch_park_locations(nps, args.state)

    aggregator = ForecastAggregator(
        client=ForecastClient(base_url=settings.open_meteo_url, timeout_s=settings.http_timeout_s),
        workers=int(args.workers),
        skip_failed=bool(args.skip_failed),
    )
    report = aggregator.aggregate_with_report(locations, trip_date, names=args.parks)

    hourly_path = write_table(report.table, out_dir / f"{trip_date}_{args.state}_hourly.csv")
    daily_path = write_table(summarize_daily(report.table), out_dir / f"{trip_date}_{args.state}_daily.csv")

    print(f"Wrote: {hourly_path} ({len(report.table):,} rows)")
    print(f"Wrote: {daily_path}")
    for s in report.skipped:
        print(f"Skipped: {s.name} [{s.kind}] {s.message}")


if __name__ == "__main__":
    main()
