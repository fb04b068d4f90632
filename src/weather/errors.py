from __future__ import annotations

from typing import Optional


class ForecastError(Exception):
    """Base class for forecast retrieval and reshaping failures."""

    kind = "forecast"

    def __init__(self, message: str, location: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message


class TransportFailure(ForecastError):
    """Provider unreachable, timed out, answered non-2xx, or sent a non-JSON body."""

    kind = "transport"


class MalformedResponse(ForecastError):
    """Decoded body lacks a usable `hourly` block or its field arrays are misaligned."""

    kind = "malformed"


class InvalidInput(ForecastError, ValueError):
    """Out-of-range coordinates, bad calendar date or an inconsistent location list."""

    kind = "invalid_input"


class AggregationError(ForecastError):
    """
    Raised by the aggregator when one location fails and the batch is aborted.

    `kind` mirrors the kind of the underlying error, and the original error is
    available both as `cause` and through normal exception chaining.
    """

    def __init__(self, cause: ForecastError, location: str) -> None:
        super().__init__(f"{cause.kind} error: {cause.message}", location=location)
        self.kind = cause.kind
        self.cause = cause
