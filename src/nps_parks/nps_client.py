from typing import Any, Dict, Optional
import logging
import time

import httpx


DEFAULT_PARKS_URL = "https://developer.nps.gov/api/v1/parks"

logger = logging.getLogger(__name__)


class ParkDataError(RuntimeError):
    pass


class NpsClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_PARKS_URL,
        timeout_s: float = 30.0,
        max_retries: int = 3,
        backoff_s: Optional[list] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = httpx.Timeout(timeout_s)
        self._max_retries = max_retries
        self._backoff = backoff_s or [0.0, 1.0, 2.0, 4.0]

    def get_parks(self, state_code: str, limit: int = 50) -> Dict[str, Any]:
        """Raw NPS /parks payload for one state (the `data` array holds the parks)."""
        params = {"stateCode": state_code, "limit": int(limit), "api_key": self._api_key}
        headers = {"accept": "application/json"}

        last_err: Optional[Exception] = None
        for k in range(min(self._max_retries, len(self._backoff))):
            delay = self._backoff[k]
            if delay > 0:
                time.sleep(delay)

            try:
                with httpx.Client(timeout=self._timeout) as client:
                    r = client.get(self._base_url, params=params, headers=headers)
                    r.raise_for_status()
                    payload = r.json()
            except (httpx.HTTPError, ValueError) as e:  # network, status and decoding
                last_err = e
                logger.warning(
                    "NPS request for %s failed (attempt %d): %s", state_code, k + 1, self._redact(e)
                )
                continue

            if not isinstance(payload, dict):
                raise ParkDataError(f"NPS response for {state_code} is not an object")
            return payload

        raise ParkDataError(f"NPS request failed after retries: {self._redact(last_err)}")

    def _redact(self, err: Optional[Exception]) -> str:
        # httpx errors embed the request URL, which carries the key
        if err is None:
            return "unknown error"
        msg = str(err)
        return msg.replace(self._api_key, "***") if self._api_key else msg
