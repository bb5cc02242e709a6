"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from map_elevation.config import Settings
from map_elevation.elevation.buffer import ElevationBuffer
from map_elevation.elevation.client import ElevationClient
from map_elevation.elevation.service import ElevationFetcher
from map_elevation.geometry.reprojection import Reprojector
from map_elevation.geometry.schemas import GeoPoint
from map_elevation.http import build_http_client
from map_elevation.mapview.routes import router
from map_elevation.mapview.session import MapSession, Viewport
from map_elevation.search.client import GeocodingClient
from map_elevation.search.session import SuggestionSession

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_map_session(settings: Settings, http: httpx.AsyncClient) -> MapSession:
    """Assemble a MapSession backed by the remote ArcGIS services."""
    return MapSession(
        settings=settings,
        reprojector=Reprojector(settings),
        fetcher=ElevationFetcher(ElevationClient(http, settings), settings),
        buffer=ElevationBuffer(settings.ad_hoc_capacity),
        search=SuggestionSession(GeocodingClient(http, settings)),
        viewport=Viewport(
            center=GeoPoint(
                longitude=settings.suggest_bias_longitude,
                latitude=settings.suggest_bias_latitude,
            ),
            zoom=settings.initial_zoom,
        ),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown.

    Opens the shared HTTP client and map session on startup and closes the
    client on teardown.
    """
    settings = Settings.from_env()
    if not settings.api_key:
        logger.warning("ARCGIS_API_KEY is not set, remote services may reject requests")
    http = build_http_client(settings)
    app.state.map_session = create_map_session(settings, http)
    logger.info("Map session initialized")
    yield
    await http.aclose()
    logger.info("Map session shut down")


app = FastAPI(title="Map Elevation API", lifespan=lifespan)
app.include_router(router)
