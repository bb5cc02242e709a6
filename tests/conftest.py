"""Shared test fixtures."""

import pytest
from fakes import FakeElevationSource, FakeGeocoder, SleepRecorder, candidates

from map_elevation.config import Settings
from map_elevation.elevation.buffer import ElevationBuffer
from map_elevation.elevation.service import ElevationFetcher
from map_elevation.geometry.reprojection import Reprojector
from map_elevation.geometry.schemas import GeoPoint
from map_elevation.mapview.session import MapSession, Viewport
from map_elevation.search.schemas import GeocodeMatch
from map_elevation.search.session import SuggestionSession


@pytest.fixture
def settings() -> Settings:
    """Test settings with pacing disabled and a dummy key."""
    return Settings(
        api_key="test-key",
        elevation_url="https://elevation.test/at-many-points",
        geocode_url="https://geocode.test/GeocodeServer",
        batch_pacing_seconds=0.0,
    )


@pytest.fixture
def elevation_source() -> FakeElevationSource:
    return FakeElevationSource()


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder(
        suggestions={"Monas": candidates("Monas, Jakarta", "Monas Park")},
        matches={
            "key-Monas, Jakarta": [
                GeocodeMatch(
                    address="Monumen Nasional, Jakarta",
                    location=GeoPoint(longitude=106.8272, latitude=-6.1754),
                    score=100.0,
                )
            ]
        },
    )


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def map_session(
    settings: Settings,
    elevation_source: FakeElevationSource,
    geocoder: FakeGeocoder,
    sleep_recorder: SleepRecorder,
) -> MapSession:
    """A MapSession wired to in-process fakes."""
    return MapSession(
        settings=settings,
        reprojector=Reprojector(settings),
        fetcher=ElevationFetcher(elevation_source, settings, sleep=sleep_recorder),
        buffer=ElevationBuffer(settings.ad_hoc_capacity),
        search=SuggestionSession(geocoder),
        viewport=Viewport(
            center=GeoPoint(
                longitude=settings.suggest_bias_longitude,
                latitude=settings.suggest_bias_latitude,
            ),
            zoom=settings.initial_zoom,
        ),
    )
