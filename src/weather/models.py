"""
Typed records shared by the Open-Meteo client and the forecast aggregator.

- Location: one point of interest (name, description, coordinates).
- ForecastRequest: validated (latitude, longitude, day) sent to the provider.
- HourlyBlock: the provider's column-major hourly series, shape-checked right
  after decoding.
"""

from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .errors import InvalidInput, MalformedResponse


HOURLY_FIELDS: Tuple[str, ...] = (
    "temperature_2m",
    "precipitation_probability",
    "precipitation",
    "cloud_cover",
)
CURRENT_FIELDS: Tuple[str, ...] = HOURLY_FIELDS
LOCATION_COLUMNS: Tuple[str, ...] = ("name", "description", "lat", "lon")
FORECAST_COLUMNS: Tuple[str, ...] = (*LOCATION_COLUMNS, "time", *HOURLY_FIELDS)

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateLike = Union[str, dt.date]


def parse_target_date(value: DateLike) -> str:
    """Return `value` as an ISO `YYYY-MM-DD` string or raise InvalidInput."""
    if isinstance(value, dt.datetime):
        return value.date().isoformat()
    if isinstance(value, dt.date):
        return value.isoformat()
    if not isinstance(value, str) or not _ISO_DATE_RE.match(value.strip()):
        raise InvalidInput(f"target date must be YYYY-MM-DD, got {value!r}")
    try:
        return dt.date.fromisoformat(value.strip()).isoformat()
    except ValueError:
        raise InvalidInput(f"not a calendar date: {value!r}") from None


def _coordinate(value: Any, name: str, limit: float, location: Optional[str]) -> float:
    try:
        x = float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{name} is not a number: {value!r}", location=location) from None
    if not np.isfinite(x) or not -limit <= x <= limit:
        raise InvalidInput(f"{name} out of range [-{limit:g}, {limit:g}]: {value!r}", location=location)
    return x


@dataclass(frozen=True)
class Location:
    name: str
    description: str
    latitude: float
    longitude: float

    def metadata(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "lat": self.latitude,
            "lon": self.longitude,
        }


@dataclass(frozen=True)
class ForecastRequest:
    latitude: float
    longitude: float
    target_date: str
    hourly_fields: Tuple[str, ...] = HOURLY_FIELDS
    current_fields: Tuple[str, ...] = CURRENT_FIELDS

    @classmethod
    def build(
        cls,
        latitude: Any,
        longitude: Any,
        target_date: DateLike,
        location: Optional[str] = None,
    ) -> "ForecastRequest":
        return cls(
            latitude=_coordinate(latitude, "latitude", 90.0, location),
            longitude=_coordinate(longitude, "longitude", 180.0, location),
            target_date=parse_target_date(target_date),
        )

    @classmethod
    def for_location(cls, location: Location, target_date: DateLike) -> "ForecastRequest":
        return cls.build(location.latitude, location.longitude, target_date, location=location.name)

    def params(self) -> Dict[str, Any]:
        # one calendar day per request
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "current": ",".join(self.current_fields),
            "hourly": ",".join(self.hourly_fields),
            "start_date": self.target_date,
            "end_date": self.target_date,
        }


@dataclass(frozen=True)
class HourlyBlock:
    time: Tuple[str, ...]
    values: Dict[str, Tuple[Any, ...]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.time)

    @classmethod
    def from_payload(
        cls,
        payload: Any,
        fields: Sequence[str] = HOURLY_FIELDS,
        location: Optional[str] = None,
    ) -> "HourlyBlock":
        """
        Validate the `hourly` block of a decoded Open-Meteo response.

        `time` is mandatory and every entry must be a non-empty string. A
        requested field absent from the block is kept as an all-missing
        column, the same way a variable the provider does not know is
        reported, but at least one requested field must be present. Every
        array present must have the length of `time` and hold only numbers
        or nulls; anything else is a MalformedResponse.
        """
        if not isinstance(payload, Mapping):
            raise MalformedResponse(f"response body is {type(payload).__name__}, expected an object", location)

        hourly = payload.get("hourly")
        if hourly is None:
            raise MalformedResponse("response has no 'hourly' block", location)
        if not isinstance(hourly, Mapping):
            raise MalformedResponse("'hourly' block is not an object", location)

        times = hourly.get("time")
        if not isinstance(times, (list, tuple)):
            raise MalformedResponse("'hourly.time' is missing or not an array", location)
        for i, t in enumerate(times):
            if not isinstance(t, str) or not t.strip():
                raise MalformedResponse(f"'hourly.time[{i}]' is not a timestamp: {t!r}", location)
        n = len(times)

        if not any(hourly.get(name) is not None for name in fields):
            raise MalformedResponse(f"'hourly' block has none of the requested fields {list(fields)}", location)

        values: Dict[str, Tuple[Any, ...]] = {}
        for name in fields:
            series = hourly.get(name)
            if series is None:
                values[name] = (None,) * n
                continue
            if not isinstance(series, (list, tuple)):
                raise MalformedResponse(f"'hourly.{name}' is not an array", location)
            if len(series) != n:
                raise MalformedResponse(
                    f"'hourly.{name}' has {len(series)} values but 'hourly.time' has {n}", location
                )
            for i, v in enumerate(series):
                if v is not None and (isinstance(v, bool) or not isinstance(v, (int, float))):
                    raise MalformedResponse(f"'hourly.{name}[{i}]' is not a number: {v!r}", location)
            values[name] = tuple(series)

        return cls(time=tuple(times), values=values)

    def to_frame(self) -> pd.DataFrame:
        """Row i holds the i-th entry of every field; nulls become NaN."""
        out = pd.DataFrame({"time": pd.Series(self.time, dtype=object)})
        for name, series in self.values.items():
            out[name] = pd.to_numeric(pd.Series(series, dtype=object), errors="coerce")
        return out
