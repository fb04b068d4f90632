from __future__ import annotations

import logging
from typing import Any, Dict, List

import pandas as pd

from weather.models import Location

from .nps_client import NpsClient, ParkDataError


STATE_CODES = (
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
    "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
    "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
    "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
    "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
)

PARK_COLUMNS = ["name", "description", "lat", "lon"]

logger = logging.getLogger(__name__)


def flatten_parks(payload: Dict[str, Any]) -> pd.DataFrame:
    """
    Flatten an NPS /parks payload into one row per park.

    Output columns: name (fullName), description, lat, lon.
    Parks without usable coordinates (the API sends "" for some sites) are dropped.
    """
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, list):
        raise ParkDataError("NPS payload has no 'data' array")

    rows = []
    for p in data:
        if not isinstance(p, dict):
            continue
        rows.append(
            {
                "name": str(p.get("fullName") or p.get("name") or "").strip(),
                "description": str(p.get("description") or "").strip(),
                "lat": p.get("latitude"),
                "lon": p.get("longitude"),
            }
        )

    df = pd.DataFrame(rows, columns=PARK_COLUMNS)
    df["lat"] = pd.to_numeric(df["lat"], errors="coerce")
    df["lon"] = pd.to_numeric(df["lon"], errors="coerce")

    bad = df["lat"].isna() | df["lon"].isna() | (df["name"] == "")
    if bad.any():
        logger.warning("Dropping %d parks without name or coordinates: %s", int(bad.sum()), df.loc[bad, "name"].tolist())
    df = df.loc[~bad]

    dup = df.duplicated(subset=["name"], keep="first")
    if dup.any():
        logger.warning("Dropping %d duplicate parks: %s", int(dup.sum()), df.loc[dup, "name"].tolist())
    df = df.loc[~dup].reset_index(drop=True)
    return df


def parks_to_locations(df: pd.DataFrame) -> List[Location]:
    missing = [c for c in PARK_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"parks dataframe: missing required columns: {missing}")
    return [
        Location(name=str(r.name), description=str(r.description), latitude=float(r.lat), longitude=float(r.lon))
        for r in df[PARK_COLUMNS].itertuples(index=False)
    ]


def fetch_park_locations(client: NpsClient, state_code: str) -> List[Location]:
    code = str(state_code).strip().upper()
    if code not in STATE_CODES:
        raise ValueError(f"Unknown state code: {state_code!r}")

    parks = flatten_parks(client.get_parks(code))
    logger.info("Fetched %d parks for %s", len(parks), code)
    return parks_to_locations(parks)
