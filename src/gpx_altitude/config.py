"""Application configuration loaded from environment variables."""

import os
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import TypeVar

from gpx_altitude.exceptions import ConfigurationError

DEFAULT_ELEVATION_URL = "https://maps.googleapis.com/maps/api/elevation/json"

N = TypeVar("N", int, float)


def _env_number(name: str, default: str, cast: Callable[[str], N]) -> N:
    value = os.getenv(name, default)
    try:
        return cast(value)
    except ValueError as exc:
        raise ConfigurationError(name, value, cast.__name__) from exc


@dataclass(frozen=True, slots=True)
class Settings:
    """Elevation lookup settings populated from environment variables."""

    api_key: str | None
    elevation_url: str = DEFAULT_ELEVATION_URL
    batch_size: int = 100
    max_attempts: int = 3
    retry_base_delay: float = 0.25
    batch_pause: float = 0.15
    request_timeout: float = 30.0
    max_workers: int = 4

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be positive, got {self.max_attempts}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables.

        Returns:
            A frozen Settings instance with values from the environment.
        """
        return cls(
            api_key=os.getenv("GOOGLE_MAPS_API_KEY") or None,
            elevation_url=os.getenv("ELEVATION_API_URL", DEFAULT_ELEVATION_URL),
            batch_size=_env_number("ELEVATION_BATCH_SIZE", "100", int),
            max_attempts=_env_number("ELEVATION_MAX_ATTEMPTS", "3", int),
            retry_base_delay=_env_number("ELEVATION_RETRY_BASE_DELAY", "0.25", float),
            batch_pause=_env_number("ELEVATION_BATCH_PAUSE", "0.15", float),
            request_timeout=_env_number("ELEVATION_REQUEST_TIMEOUT", "30", float),
            max_workers=_env_number("MAX_WORKERS", "4", int),
        )

    def with_api_key(self, api_key: str | None) -> "Settings":
        """Return a copy using an explicitly supplied credential, if any."""
        if not api_key:
            return self
        return replace(self, api_key=api_key)
