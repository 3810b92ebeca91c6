"""Shared test fixtures."""

from collections.abc import Iterable
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from gpx_altitude.config import Settings
from gpx_altitude.markup.parser import parse
from gpx_altitude.markup.tree import MarkupTree

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_GPX = FIXTURES_DIR / "sample.gpx"


@pytest.fixture
def settings() -> Settings:
    """Create test settings with a credential and small batches."""
    return Settings(
        api_key="test-key",
        elevation_url="https://elevation.example/json",
        batch_size=2,
        max_attempts=3,
        retry_base_delay=0.25,
        batch_pause=0.15,
        request_timeout=5.0,
        max_workers=2,
    )


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_GPX.read_text(encoding="utf-8")


@pytest.fixture
def sample_tree(sample_text: str) -> MarkupTree:
    return parse(sample_text)


def make_response(payload: object, status_code: int = 200) -> MagicMock:
    """Build a mock requests.Response returning ``payload`` as JSON."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"HTTP {status_code}")
    return response


def ok_payload(elevations: Iterable[float | None]) -> dict[str, object]:
    results = [{} if value is None else {"elevation": value} for value in elevations]
    return {"status": "OK", "results": results}


def make_session(*responses: object) -> MagicMock:
    """Mock requests.Session whose ``get`` yields ``responses`` in order."""
    session = MagicMock(spec=requests.Session)
    session.get.side_effect = list(responses)
    return session
