from dataclasses import dataclass
from pathlib import Path
import os


@dataclass(frozen=True)
class Settings:
    nps_api_key: str
    nps_parks_url: str = "https://developer.nps.gov/api/v1/parks"
    open_meteo_url: str = "https://api.open-meteo.com/v1/forecast"

    http_timeout_s: float = 30.0
    out_dir: Path = Path("data/park_weather")

    @staticmethod
    def from_env() -> "Settings":
        api_key = os.getenv("NPS_API_KEY", "").strip()
        if not api_key:
            raise RuntimeError("Missing NPS_API_KEY (set it in .env).")

        kwargs = {}
        url = os.getenv("NPS_PARKS_URL", "").strip()
        if url:
            kwargs["nps_parks_url"] = url
        url = os.getenv("OPEN_METEO_URL", "").strip()
        if url:
            kwargs["open_meteo_url"] = url

        timeout = os.getenv("HTTP_TIMEOUT_S", "").strip()
        if timeout:
            try:
                kwargs["http_timeout_s"] = float(timeout)
            except ValueError:
                raise RuntimeError(f"HTTP_TIMEOUT_S must be a number, got {timeout!r}.") from None

        out_dir = os.getenv("PARK_WEATHER_OUT_DIR", "").strip()
        if out_dir:
            kwargs["out_dir"] = Path(out_dir)

        return Settings(nps_api_key=api_key, **kwargs)
