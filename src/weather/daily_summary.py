from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd


SUMMARY_COLUMNS = [
    "name", "lat", "lon", "date",
    "min_temp_f", "max_temp_f", "temp_f",
    "max_precipitation", "max_precipitation_probability", "precip_prob",
    "description",
]


def _require_columns(df: pd.DataFrame, cols: Sequence[str], ctx: str) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"{ctx}: missing required columns: {missing}")


def celsius_to_fahrenheit(c):
    return c * 9.0 / 5.0 + 32.0


def _range_label(lo: float, hi: float) -> str:
    if not (np.isfinite(lo) and np.isfinite(hi)):
        return ""
    return f"{int(lo)}-{int(hi)}"


def _percent_label(p: float) -> str:
    return f"{int(round(p))}%" if np.isfinite(p) else ""


def summarize_daily(table: pd.DataFrame) -> pd.DataFrame:
    """
    Collapse an hourly forecast table to one row per (location, day).

    Temperatures are converted from °C to °F and rounded; precipitation and
    precipitation probability keep the daily maximum. Locations stay in the
    order they first appear in `table`.
    """
    _require_columns(
        table,
        ["name", "description", "lat", "lon", "time", "temperature_2m", "precipitation", "precipitation_probability"],
        "hourly forecast table",
    )

    if table.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    df = table.copy()
    df["timestamp"] = pd.to_datetime(df["time"], format="%Y-%m-%dT%H:%M", errors="coerce")
    df = df.dropna(subset=["timestamp"]).copy()
    df["date"] = df["timestamp"].dt.date
    df["temp_f"] = celsius_to_fahrenheit(pd.to_numeric(df["temperature_2m"], errors="coerce"))
    df["precipitation"] = pd.to_numeric(df["precipitation"], errors="coerce")
    df["precipitation_probability"] = pd.to_numeric(df["precipitation_probability"], errors="coerce")

    g = df.groupby(["name", "description", "lat", "lon", "date"], sort=False, dropna=False).agg(
        min_temp_f=("temp_f", "min"),
        max_temp_f=("temp_f", "max"),
        max_precipitation=("precipitation", "max"),
        max_precipitation_probability=("precipitation_probability", "max"),
    ).reset_index()

    g["min_temp_f"] = g["min_temp_f"].round(0)
    g["max_temp_f"] = g["max_temp_f"].round(0)
    g["temp_f"] = [_range_label(lo, hi) for lo, hi in zip(g["min_temp_f"], g["max_temp_f"])]
    g["precip_prob"] = [_percent_label(p) for p in g["max_precipitation_probability"]]

    return g[SUMMARY_COLUMNS]
