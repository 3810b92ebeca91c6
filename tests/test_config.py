"""Tests for settings loading."""

import pytest

from gpx_altitude.config import DEFAULT_ELEVATION_URL, Settings
from gpx_altitude.exceptions import ConfigurationError

ENV_VARS = (
    "GOOGLE_MAPS_API_KEY",
    "ELEVATION_API_URL",
    "ELEVATION_BATCH_SIZE",
    "ELEVATION_MAX_ATTEMPTS",
    "ELEVATION_RETRY_BASE_DELAY",
    "ELEVATION_BATCH_PAUSE",
    "ELEVATION_REQUEST_TIMEOUT",
    "MAX_WORKERS",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env: pytest.MonkeyPatch) -> None:
        settings = Settings.from_env()

        assert settings.api_key is None
        assert settings.elevation_url == DEFAULT_ELEVATION_URL
        assert settings.batch_size == 100
        assert settings.max_attempts == 3
        assert settings.retry_base_delay == 0.25
        assert settings.batch_pause == 0.15

    def test_reads_environment(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("GOOGLE_MAPS_API_KEY", "secret")
        clean_env.setenv("ELEVATION_BATCH_SIZE", "50")
        clean_env.setenv("ELEVATION_MAX_ATTEMPTS", "5")
        clean_env.setenv("ELEVATION_REQUEST_TIMEOUT", "12.5")

        settings = Settings.from_env()

        assert settings.api_key == "secret"
        assert settings.batch_size == 50
        assert settings.max_attempts == 5
        assert settings.request_timeout == 12.5

    def test_empty_key_counts_as_missing(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("GOOGLE_MAPS_API_KEY", "")

        assert Settings.from_env().api_key is None

    def test_explicit_key_overrides_environment(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("GOOGLE_MAPS_API_KEY", "env")

        assert Settings.from_env().with_api_key("cli").api_key == "cli"
        assert Settings.from_env().with_api_key(None).api_key == "env"

    @pytest.mark.parametrize("field", ["batch_size", "max_attempts", "max_workers"])
    def test_rejects_non_positive_counts(self, field: str) -> None:
        with pytest.raises(ValueError, match=field):
            Settings(api_key="k", **{field: 0})

    @pytest.mark.parametrize(
        ("name", "value"),
        [("ELEVATION_BATCH_SIZE", "lots"), ("ELEVATION_REQUEST_TIMEOUT", "30s")],
    )
    def test_rejects_non_numeric_values(
        self, clean_env: pytest.MonkeyPatch, name: str, value: str
    ) -> None:
        clean_env.setenv(name, value)

        with pytest.raises(ConfigurationError) as exc_info:
            Settings.from_env()

        assert exc_info.value.code == "CONFIGURATION_ERROR"
        assert name in str(exc_info.value)
