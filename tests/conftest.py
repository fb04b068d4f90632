"""Shared test fixtures."""

from typing import Callable, Dict, List, Optional

import pytest

from weather.errors import ForecastError
from weather.models import ForecastRequest, Location
from weather.open_meteo import ForecastClient

FORECAST_URL = "https://test-meteo.example.com/v1/forecast"


def hourly_payload(day: str, hours: int = 24, base_temp: float = 10.0) -> Dict:
    """Open-Meteo style body with `hours` aligned hourly entries for `day`."""
    return {
        "latitude": 44.35,
        "longitude": -68.21,
        "current": {"time": f"{day}T12:00", "temperature_2m": base_temp},
        "hourly": {
            "time": [f"{day}T{h:02d}:00" for h in range(hours)],
            "temperature_2m": [base_temp + h * 0.5 for h in range(hours)],
            "precipitation_probability": [h % 10 * 10 for h in range(hours)],
            "precipitation": [0.1 * (h % 3) for h in range(hours)],
            "cloud_cover": [h * 4 for h in range(hours)],
        },
    }


class FakeClient(ForecastClient):
    """ForecastClient that answers from a dict keyed by location name."""

    def __init__(self, responses: Dict[str, object]):
        super().__init__(base_url=FORECAST_URL)
        self.responses = responses
        self.requests: List[ForecastRequest] = []

    def fetch(self, request: ForecastRequest, location: Optional[str] = None):
        self.requests.append(request)
        answer = self.responses[location]
        if isinstance(answer, ForecastError):
            raise answer
        if callable(answer):
            return answer(request)
        return answer


@pytest.fixture
def payload_factory() -> Callable[..., Dict]:
    return hourly_payload


@pytest.fixture
def acadia() -> Location:
    return Location(name="Acadia", description="Coastal park", latitude=44.35, longitude=-68.21)


@pytest.fixture
def three_parks() -> List[Location]:
    return [
        Location("Acadia", "Coastal park", 44.35, -68.21),
        Location("Zion", "Canyon park", 37.30, -113.03),
        Location("Denali", "Subarctic park", 63.33, -150.50),
    ]


@pytest.fixture
def client() -> ForecastClient:
    return ForecastClient(base_url=FORECAST_URL, timeout_s=5.0)
