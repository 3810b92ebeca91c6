"""Pydantic schemas for the elevation API payload and the JSON point list."""

from pydantic import BaseModel


class ElevationApiResult(BaseModel):
    """One entry of the elevation service's ``results`` array."""

    elevation: float | None = None


class ElevationApiResponse(BaseModel):
    """Response body of the elevation service."""

    status: str
    results: list[ElevationApiResult] = []
    error_message: str | None = None


class EnrichedPoint(BaseModel):
    """A trackpoint with its looked-up altitude, as written to the JSON output."""

    lat: float
    lon: float
    alt: float | None
