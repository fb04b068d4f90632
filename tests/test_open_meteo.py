"""Tests for the Open-Meteo client with mocked httpx."""

import httpx
import pytest
import respx

from conftest import FORECAST_URL, hourly_payload
from weather.errors import InvalidInput, MalformedResponse, TransportFailure
from weather.open_meteo import ForecastClient


class TestFetchForecast:
    @respx.mock
    def test_success(self, client: ForecastClient):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=hourly_payload("2024-05-24")))

        data = client.fetch_forecast(44.35, -68.21, "2024-05-24")
        assert len(data["hourly"]["time"]) == 24
        assert "current" in data

    @respx.mock
    def test_query_parameters(self, client: ForecastClient):
        route = respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=hourly_payload("2024-05-24")))

        client.fetch_forecast(44.35, -68.21, "2024-05-24")
        assert route.call_count == 1
        params = route.calls[0].request.url.params
        assert params["latitude"] == "44.35"
        assert params["longitude"] == "-68.21"
        assert params["start_date"] == "2024-05-24"
        assert params["end_date"] == "2024-05-24"
        assert params["hourly"] == "temperature_2m,precipitation_probability,precipitation,cloud_cover"
        assert params["current"] == params["hourly"]

    @respx.mock
    def test_user_agent_header(self, client: ForecastClient):
        route = respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=hourly_payload("2024-05-24")))

        client.fetch_forecast(44.35, -68.21, "2024-05-24")
        assert "park-weather" in route.calls[0].request.headers["user-agent"]

    @respx.mock
    def test_http_error_is_not_retried(self, client: ForecastClient):
        route = respx.get(FORECAST_URL).mock(return_value=httpx.Response(503))

        with pytest.raises(TransportFailure, match="503"):
            client.fetch_forecast(44.35, -68.21, "2024-05-24")
        assert route.call_count == 1

    @respx.mock
    def test_connection_error(self, client: ForecastClient):
        respx.get(FORECAST_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(TransportFailure) as exc:
            client.fetch_forecast(44.35, -68.21, "2024-05-24")
        assert isinstance(exc.value.__cause__, httpx.ConnectError)

    @respx.mock
    def test_timeout(self, client: ForecastClient):
        respx.get(FORECAST_URL).mock(side_effect=httpx.ReadTimeout("slow"))

        with pytest.raises(TransportFailure):
            client.fetch_forecast(44.35, -68.21, "2024-05-24")

    @respx.mock
    def test_non_json_body(self, client: ForecastClient):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(TransportFailure, match="JSON"):
            client.fetch_forecast(44.35, -68.21, "2024-05-24")

    @respx.mock
    def test_json_array_body(self, client: ForecastClient):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=[1, 2, 3]))

        with pytest.raises(MalformedResponse):
            client.fetch_forecast(44.35, -68.21, "2024-05-24")

    @respx.mock
    def test_invalid_input_makes_no_request(self, client: ForecastClient):
        route = respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json={}))

        with pytest.raises(InvalidInput):
            client.fetch_forecast(95.0, 0.0, "2024-05-24")
        with pytest.raises(InvalidInput):
            client.fetch_forecast(44.35, -68.21, "2024-13-01")
        assert not route.called


class TestFetchHourly:
    @respx.mock
    def test_returns_validated_block(self, client: ForecastClient):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=hourly_payload("2024-05-24", hours=3)))

        block = client.fetch_hourly(44.35, -68.21, "2024-05-24")
        assert len(block) == 3
        assert block.time[0] == "2024-05-24T00:00"
        assert block.values["temperature_2m"] == (10.0, 10.5, 11.0)

    @respx.mock
    def test_missing_hourly_block(self, client: ForecastClient):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json={"current": {}}))

        with pytest.raises(MalformedResponse):
            client.fetch_hourly(44.35, -68.21, "2024-05-24")

    @respx.mock
    def test_shared_http_client(self):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=hourly_payload("2024-05-24")))

        with httpx.Client() as http:
            client = ForecastClient(base_url=FORECAST_URL, http=http)
            block = client.fetch_hourly(44.35, -68.21, "2024-05-24")
        assert len(block) == 24
