"""
Join per-location hourly forecasts into one long table.

For each location (in input order) the Open-Meteo hourly block is fetched,
transposed into one row per hour, tagged with the location's name,
description and coordinates, and the per-location frames are concatenated.

Output columns:
- name, description, lat, lon
- time (provider's local ISO hour, e.g. 2024-05-24T13:00)
- temperature_2m, precipitation_probability, precipitation, cloud_cover
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from .errors import AggregationError, ForecastError, InvalidInput
from .models import FORECAST_COLUMNS, DateLike, ForecastRequest, HourlyBlock, Location, parse_target_date
from .open_meteo import ForecastClient


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedLocation:
    name: str
    kind: str
    message: str


@dataclass(frozen=True)
class AggregationReport:
    table: pd.DataFrame
    skipped: List[SkippedLocation] = field(default_factory=list)


def empty_forecast_table() -> pd.DataFrame:
    return pd.DataFrame(columns=list(FORECAST_COLUMNS))


def _select(locations: Sequence[Location], names: Optional[Iterable[str]]) -> List[Location]:
    seen = set()
    for loc in locations:
        if loc.name in seen:
            raise InvalidInput(f"duplicate location name: {loc.name!r}", location=loc.name)
        seen.add(loc.name)

    if names is None:
        return list(locations)

    wanted = list(names)
    unknown = [n for n in wanted if n not in seen]
    if unknown:
        raise InvalidInput(f"unknown location names in filter: {unknown}")
    keep = set(wanted)
    return [loc for loc in locations if loc.name in keep]


def location_frame(location: Location, block: HourlyBlock) -> pd.DataFrame:
    """Hourly rows for one location with its metadata broadcast onto every row."""
    out = block.to_frame()
    for pos, (col, value) in enumerate(location.metadata().items()):
        out.insert(pos, col, value)
    return out[list(FORECAST_COLUMNS)]


@dataclass
class ForecastAggregator:
    """
    Fetch and flatten hourly forecasts for an ordered list of locations.

    workers > 1 fans the requests out over a thread pool; results are put
    back in input order before concatenation, so the output does not depend
    on completion order.

    skip_failed=False (default) aborts the whole call on the first failing
    location in input order and returns nothing. skip_failed=True drops the
    failing locations and lists them in AggregationReport.skipped.
    """

    client: Optional[ForecastClient] = None
    workers: int = 1
    skip_failed: bool = False

    def __post_init__(self) -> None:
        self.client = self.client or ForecastClient()
        if int(self.workers) < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

    def _fetch_one(self, location: Location, target_date: str) -> pd.DataFrame:
        request = ForecastRequest.for_location(location, target_date)
        payload = self.client.fetch(request, location=location.name)
        block = HourlyBlock.from_payload(payload, fields=request.hourly_fields, location=location.name)
        return location_frame(location, block)

    def _attempt(self, location: Location, target_date: str) -> Tuple[Optional[pd.DataFrame], Optional[ForecastError]]:
        try:
            return self._fetch_one(location, target_date), None
        except ForecastError as e:
            if e.location is None:
                e.location = location.name
            return None, e

    def _run(self, locations: List[Location], target_date: str) -> List[Tuple[Optional[pd.DataFrame], Optional[ForecastError]]]:
        if self.workers == 1 or len(locations) <= 1:
            results = []
            for i, loc in enumerate(locations):
                res = self._attempt(loc, target_date)
                results.append(res)
                if res[1] is not None:
                    logger.info("[aggregate] location %d/%d (%s) failed: %s", i + 1, len(locations), loc.name, res[1].kind)
                    if not self.skip_failed:
                        break
                    continue
                logger.info("[aggregate] fetched %d/%d locations (%s)", i + 1, len(locations), loc.name)
            return results

        with ThreadPoolExecutor(max_workers=int(self.workers)) as ex:
            futs = [ex.submit(self._attempt, loc, target_date) for loc in locations]
            # collected by index, not completion order
            results = [fu.result() for fu in futs]
        failed = sum(1 for _, err in results if err is not None)
        logger.info(
            "[aggregate] fetched %d/%d locations with %d workers (%d failed)",
            len(locations) - failed, len(locations), self.workers, failed,
        )
        return results

    def aggregate_with_report(
        self,
        locations: Sequence[Location],
        target_date: DateLike,
        names: Optional[Iterable[str]] = None,
    ) -> AggregationReport:
        day = parse_target_date(target_date)
        selected = _select(locations, names)

        frames: List[pd.DataFrame] = []
        skipped: List[SkippedLocation] = []

        for loc, (frame, err) in zip(selected, self._run(selected, day)):
            if err is not None:
                if not self.skip_failed:
                    raise AggregationError(err, location=loc.name) from err
                logger.warning("[aggregate] skipping %s (%s): %s", loc.name, err.kind, err.message)
                skipped.append(SkippedLocation(name=loc.name, kind=err.kind, message=err.message))
                continue
            frames.append(frame)

        if frames:
            table = pd.concat(frames, ignore_index=True)
        else:
            table = empty_forecast_table()

        logger.info(
            "[aggregate] %d rows for %d locations on %s (%d skipped)",
            len(table), len(selected) - len(skipped), day, len(skipped),
        )
        return AggregationReport(table=table, skipped=skipped)

    def aggregate(
        self,
        locations: Sequence[Location],
        target_date: DateLike,
        names: Optional[Iterable[str]] = None,
    ) -> pd.DataFrame:
        return self.aggregate_with_report(locations, target_date, names=names).table


def aggregate_forecasts(
    locations: Sequence[Location],
    target_date: DateLike,
    *,
    names: Optional[Iterable[str]] = None,
    client: Optional[ForecastClient] = None,
    workers: int = 1,
    skip_failed: bool = False,
) -> pd.DataFrame:
    agg = ForecastAggregator(client=client, workers=workers, skip_failed=skip_failed)
    return agg.aggregate(locations, target_date, names=names)


def write_table(df: pd.DataFrame, path: Union[str, Path]) -> Path:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False)
    return out_path


def read_table(path: Union[str, Path]) -> pd.DataFrame:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"File not found: {p}")
    return pd.read_csv(p, dtype={"name": str, "description": str, "time": str})
