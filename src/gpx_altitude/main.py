"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from gpx_altitude.config import Settings
from gpx_altitude.enrichment.routes import router
from gpx_altitude.enrichment.service import AltitudeService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown.

    Creates the altitude service on startup and shuts down its thread pool
    executor on teardown.
    """
    settings = Settings.from_env()
    if not settings.api_key:
        logger.warning("GOOGLE_MAPS_API_KEY is not set; enrichment requests will fail")
    service = AltitudeService(settings)
    app.state.altitude_service = service
    logger.info("Altitude service initialized")
    yield
    service.shutdown()
    logger.info("Altitude service shut down")


app = FastAPI(title="GPX Altitude API", lifespan=lifespan)
app.include_router(router)
