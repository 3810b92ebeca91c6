"""Batched elevation lookups against the Google Elevation API."""

import logging
import math
import time
from collections.abc import Callable, Sequence
from decimal import Decimal
from typing import TypeVar

import requests
from pydantic import ValidationError

from gpx_altitude.config import Settings
from gpx_altitude.enrichment.collector import TrackpointRef
from gpx_altitude.enrichment.schemas import ElevationApiResponse, ElevationApiResult
from gpx_altitude.exceptions import LookupFailure, MissingCredentialError, ResultCardinalityMismatch

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ServiceStatusError(Exception):
    """The elevation service answered, but with a non-OK status."""

    def __init__(self, status: str, error_message: str | None) -> None:
        detail = f"API status: {status}"
        if error_message:
            detail += f" - {error_message}"
        super().__init__(detail)
        self.status = status


_TRANSIENT_ERRORS = (requests.RequestException, ValidationError, ServiceStatusError)


def partition(items: Sequence[T], size: int) -> list[Sequence[T]]:
    """Split ``items`` into consecutive batches of at most ``size`` elements."""
    if size < 1:
        raise ValueError(f"Batch size must be positive, got {size}")
    return [items[start:start + size] for start in range(0, len(items), size)]


def format_coordinate(value: float) -> str:
    """Render a coordinate in plain decimal notation: 5e-05 -> '0.00005'."""
    return format(Decimal(repr(value)), "f")


def round_altitude(value: float | None) -> float | None:
    """Round to the nearest 0.1 m, halves up. Missing or non-finite becomes None."""
    if value is None or not math.isfinite(value):
        return None
    return math.floor(value * 10 + 0.5) / 10


class ElevationFetcher:
    """Resolve altitudes for trackpoints, one sequential request per batch.

    Each batch is retried on transport errors, non-success HTTP statuses,
    unreadable payloads and non-OK service statuses, waiting
    ``attempt * retry_base_delay`` seconds between attempts. A batch that
    exhausts its attempts aborts the whole lookup.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()
        self._sleep = sleep

    def fetch_all(self, points: Sequence[TrackpointRef]) -> list[float | None]:
        """Look up altitudes for ``points``.

        Returns:
            Altitudes rounded to 0.1 m, same length and order as ``points``.
            None marks a point the service has no elevation for.

        Raises:
            MissingCredentialError: If no API key is configured.
            LookupFailure: If any batch exhausts its retry attempts.
            ResultCardinalityMismatch: If a response size differs from its batch.
        """
        if not self._settings.api_key:
            raise MissingCredentialError()

        batches = partition(points, self._settings.batch_size)
        altitudes: list[float | None] = []
        for batch_index, batch in enumerate(batches):
            results = self._fetch_batch(batch_index, batch)
            if len(results) != len(batch):
                raise ResultCardinalityMismatch(batch_index, len(batch), len(results))
            altitudes.extend(round_altitude(result.elevation) for result in results)
            logger.info(
                "Fetched elevation batch",
                extra={"batch": batch_index + 1, "batches": len(batches), "points": len(batch)},
            )
            if batch_index + 1 < len(batches):
                self._sleep(self._settings.batch_pause)
        return altitudes

    def _fetch_batch(
        self, batch_index: int, batch: Sequence[TrackpointRef]
    ) -> list[ElevationApiResult]:
        max_attempts = self._settings.max_attempts
        last_error: Exception | None = None
        for attempt in range(1, max_attempts + 1):
            try:
                return self._request(batch)
            except _TRANSIENT_ERRORS as exc:
                last_error = exc
                logger.warning(
                    "Elevation request failed",
                    extra={"batch": batch_index, "attempt": attempt, "error": str(exc)},
                )
                if attempt < max_attempts:
                    self._sleep(attempt * self._settings.retry_base_delay)

        raise LookupFailure(batch_index, max_attempts, str(last_error)) from last_error

    def _request(self, batch: Sequence[TrackpointRef]) -> list[ElevationApiResult]:
        locations = "|".join(
            f"{format_coordinate(point.lat)},{format_coordinate(point.lon)}" for point in batch
        )
        response = self._session.get(
            self._settings.elevation_url,
            params={"locations": locations, "key": self._settings.api_key},
            timeout=self._settings.request_timeout,
        )
        response.raise_for_status()
        payload = ElevationApiResponse.model_validate(response.json())
        if payload.status != "OK":
            raise ServiceStatusError(payload.status, payload.error_message)
        return payload.results
