from __future__ import annotations

import argparse
from pathlib import Path

from weather.aggregate import read_table, write_table
from weather.daily_summary import summarize_daily


def main() -> None:
    ap = argparse.ArgumentParser(description="Collapse a saved hourly park forecast to one row per park per day.")
    ap.add_argument("--hourly-csv", required=True, help="Hourly table written by park_forecast.py.")
    ap.add_argument("--out", required=True, help="Output CSV path.")
    args = ap.parse_args()

    daily = summarize_daily(read_table(Path(args.hourly_csv)))
    out = write_table(daily, Path(args.out))
    print(str(out))


if __name__ == "__main__":
    main()
