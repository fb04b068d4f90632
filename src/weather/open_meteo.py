"""
Open-Meteo forecast client.

Fetches one calendar day of hourly weather (plus current conditions) for a
single latitude/longitude.

Default endpoint: https://api.open-meteo.com/v1/forecast
No API key is required for the public Open-Meteo API.

Requested hourly variables:
- temperature_2m
- precipitation_probability
- precipitation
- cloud_cover
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .errors import MalformedResponse, TransportFailure
from .models import DateLike, ForecastRequest, HourlyBlock


DEFAULT_BASE_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_USER_AGENT = "park-weather/0.1 (+github; educational)"

logger = logging.getLogger(__name__)


@dataclass
class ForecastClient:
    """
    One GET per call, no retries, no caching.

    Pass `http` to share a connection pool across calls (and to inject a
    mocked transport in tests); otherwise a short-lived client is opened for
    each request.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    http: Optional[httpx.Client] = None

    def _get(self, params: Dict[str, Any], location: Optional[str]) -> Any:
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        try:
            if self.http is not None:
                r = self.http.get(self.base_url, params=params, headers=headers, timeout=self.timeout_s)
            else:
                with httpx.Client(timeout=httpx.Timeout(self.timeout_s), headers=headers) as client:
                    r = client.get(self.base_url, params=params)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportFailure(
                f"Open-Meteo returned HTTP {e.response.status_code}", location=location
            ) from e
        except httpx.HTTPError as e:
            raise TransportFailure(f"Open-Meteo request failed: {e!r}", location=location) from e

        try:
            return r.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise TransportFailure("Open-Meteo response body is not valid JSON", location=location) from e

    def fetch(self, request: ForecastRequest, location: Optional[str] = None) -> Dict[str, Any]:
        logger.debug(
            "[open_meteo] GET lat=%s lon=%s date=%s",
            request.latitude, request.longitude, request.target_date,
        )
        data = self._get(request.params(), location)
        if not isinstance(data, dict):
            raise MalformedResponse(
                f"response body is {type(data).__name__}, expected an object", location=location
            )
        return data

    def fetch_forecast(self, latitude: float, longitude: float, target_date: DateLike) -> Dict[str, Any]:
        """
        Fetch the raw forecast payload for a single point and a single day.

        Parameters
        ----------
        latitude, longitude : float
            Coordinates, within [-90, 90] and [-180, 180].
        target_date : str or datetime.date
            YYYY-MM-DD. The request uses start_date=end_date=target_date.

        Returns
        -------
        dict
            Decoded response body; the caller extracts the `hourly` block.
        """
        return self.fetch(ForecastRequest.build(latitude, longitude, target_date))

    def fetch_hourly(self, latitude: float, longitude: float, target_date: DateLike) -> HourlyBlock:
        request = ForecastRequest.build(latitude, longitude, target_date)
        return HourlyBlock.from_payload(self.fetch(request), fields=request.hourly_fields)
