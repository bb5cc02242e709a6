"""Tests for the map session flows."""

import asyncio

import pytest
from fakes import FakeElevationSource, FakeGeocoder

from map_elevation.elevation.schemas import BufferMode
from map_elevation.exceptions import ErrorKind
from map_elevation.geometry.schemas import GeoPoint, Path
from map_elevation.mapview.session import MapSession
from map_elevation.search.session import ARROW_DOWN, ENTER

MERCATOR_X_10_DEG = 1113194.9079327357


class GatedSource(FakeElevationSource):
    """Elevation source that can be held mid-request."""

    def __init__(self) -> None:
        super().__init__()
        self.gate: asyncio.Event | None = None
        self.started = False

    async def at_many_points(self, points):
        self.started = True
        if self.gate is not None:
            await self.gate.wait()
        return await super().at_many_points(points)


@pytest.fixture
def elevation_source() -> GatedSource:
    return GatedSource()


def polyline(count: int, spatial_reference_id: int | None = 4326) -> Path:
    return Path.from_paths(
        [[[106.0 + i / 100, -6.0 - i / 100] for i in range(count)]],
        spatial_reference_id=spatial_reference_id,
    )


class TestSketchProfile:
    def test_five_point_polyline_is_profiled_in_one_request(
        self, map_session: MapSession, elevation_source: FakeElevationSource
    ) -> None:
        path = polyline(5)

        result = asyncio.run(map_session.on_sketch_complete("polyline", path))

        assert result.ok
        assert len(elevation_source.calls) == 1
        assert elevation_source.calls[0] == [
            GeoPoint(longitude=p.x, latitude=p.y) for p in path.segments[0]
        ]
        assert map_session.buffer.mode is BufferMode.PROFILE
        assert [o.label for o in map_session.buffer.snapshot()] == [
            f"Point {n}" for n in range(1, 6)
        ]
        assert map_session.has_profile

    def test_dense_polyline_is_sampled(
        self, map_session: MapSession, elevation_source: FakeElevationSource
    ) -> None:
        asyncio.run(map_session.on_sketch_complete("polyline", polyline(300)))

        assert len(elevation_source.calls[0]) == 20
        assert len(map_session.buffer) == 20

    def test_projected_polyline_is_reprojected(
        self, map_session: MapSession, elevation_source: FakeElevationSource
    ) -> None:
        path = Path.from_paths([[[0.0, 0.0], [MERCATOR_X_10_DEG, 0.0]]], spatial_reference_id=3857)

        asyncio.run(map_session.on_sketch_complete("polyline", path))

        longitudes = [point.longitude for point in elevation_source.calls[0]]
        assert longitudes == pytest.approx([0.0, 10.0], abs=1e-6)

    def test_profile_replaces_ad_hoc_points(self, map_session: MapSession) -> None:
        async def scenario() -> None:
            await map_session.on_map_click(GeoPoint(longitude=1.0, latitude=1.0))
            await map_session.on_sketch_complete("polyline", polyline(3))

        asyncio.run(scenario())

        assert [o.label for o in map_session.buffer.snapshot()] == ["Point 1", "Point 2", "Point 3"]

    def test_non_polyline_is_ignored(
        self, map_session: MapSession, elevation_source: FakeElevationSource
    ) -> None:
        result = asyncio.run(map_session.on_sketch_complete("point", polyline(1)))

        assert result.error is ErrorKind.INVALID_INPUT
        assert elevation_source.calls == []
        assert map_session.buffer.mode is BufferMode.AD_HOC

    def test_empty_polyline_reports_no_data(self, map_session: MapSession) -> None:
        result = asyncio.run(map_session.on_sketch_complete("polyline", Path(segments=[[]])))

        assert result.error is ErrorKind.NO_DATA

    def test_failed_redraw_keeps_previous_profile(
        self, map_session: MapSession, elevation_source: FakeElevationSource
    ) -> None:
        asyncio.run(map_session.on_sketch_complete("polyline", polyline(5)))
        previous = map_session.buffer.snapshot()
        elevation_source.failing_calls = {1}

        result = asyncio.run(map_session.on_sketch_complete("polyline", polyline(3)))

        assert result.error is ErrorKind.NO_DATA
        assert map_session.buffer.mode is BufferMode.PROFILE
        assert map_session.buffer.snapshot() == previous

    def test_previous_profile_stays_visible_while_redraw_is_pending(
        self, map_session: MapSession, elevation_source: GatedSource
    ) -> None:
        async def scenario() -> int:
            await map_session.on_sketch_complete("polyline", polyline(5))
            elevation_source.gate = asyncio.Event()
            elevation_source.started = False
            run = asyncio.create_task(map_session.on_sketch_complete("polyline", polyline(3)))
            while not elevation_source.started:
                await asyncio.sleep(0)
            pending_count = len(map_session.buffer)
            elevation_source.gate.set()
            await run
            return pending_count

        pending_count = asyncio.run(scenario())

        assert pending_count == 5
        assert [o.label for o in map_session.buffer.snapshot()] == ["Point 1", "Point 2", "Point 3"]

    def test_first_profile_failing_leaves_empty_profile(
        self, map_session: MapSession, elevation_source: FakeElevationSource
    ) -> None:
        elevation_source.failing_calls = {0}

        result = asyncio.run(map_session.on_sketch_complete("polyline", polyline(5)))

        assert result.error is ErrorKind.NO_DATA
        assert map_session.buffer.mode is BufferMode.PROFILE
        assert len(map_session.buffer) == 0

    def test_profile_finishing_after_delete_is_discarded(
        self, map_session: MapSession, elevation_source: GatedSource
    ) -> None:
        async def scenario():
            elevation_source.gate = asyncio.Event()
            run = asyncio.create_task(map_session.on_sketch_complete("polyline", polyline(4)))
            while not elevation_source.started:
                await asyncio.sleep(0)
            map_session.on_sketch_delete()
            elevation_source.gate.set()
            return await run

        result = asyncio.run(scenario())

        assert result.error is ErrorKind.CONFLICT
        assert map_session.buffer.mode is BufferMode.AD_HOC
        assert len(map_session.buffer) == 0

    def test_delete_clears_buffer(self, map_session: MapSession) -> None:
        asyncio.run(map_session.on_sketch_complete("polyline", polyline(5)))

        map_session.on_sketch_delete()

        assert map_session.buffer.mode is BufferMode.AD_HOC
        assert map_session.buffer.snapshot() == ()
        assert not map_session.has_profile


class TestAdHocEnrichment:
    def test_click_appends_observation(self, map_session: MapSession) -> None:
        observation = asyncio.run(map_session.on_map_click(GeoPoint(longitude=106.8, latitude=-6.2)))

        assert observation is not None
        assert observation.elevation_meters == -62.0
        assert observation.label == "-6.2000, 106.8000"
        assert map_session.buffer.snapshot() == (observation,)

    def test_click_while_profile_exists_is_not_charted(self, map_session: MapSession) -> None:
        async def scenario():
            await map_session.on_sketch_complete("polyline", polyline(3))
            return await map_session.on_map_click(GeoPoint(longitude=1.0, latitude=1.0))

        observation = asyncio.run(scenario())

        assert observation is not None
        assert len(map_session.buffer) == 3
        assert map_session.buffer.mode is BufferMode.PROFILE

    def test_failed_click_lookup_returns_none(
        self, map_session: MapSession, elevation_source: FakeElevationSource
    ) -> None:
        elevation_source.failing_calls = {0}

        observation = asyncio.run(map_session.on_map_click(GeoPoint(longitude=1.0, latitude=1.0)))

        assert observation is None
        assert len(map_session.buffer) == 0

    def test_not_loading_when_idle(self, map_session: MapSession) -> None:
        asyncio.run(map_session.on_map_click(GeoPoint(longitude=1.0, latitude=1.0)))

        assert not map_session.is_loading


class TestSearchCommit:
    def test_commit_recentres_and_enriches(
        self,
        map_session: MapSession,
        geocoder: FakeGeocoder,
        elevation_source: FakeElevationSource,
    ) -> None:
        async def scenario():
            await map_session.update_query("Monas")
            await map_session.press_key(ARROW_DOWN)
            return await map_session.press_key(ENTER)

        match = asyncio.run(scenario())

        assert match is not None
        assert map_session.viewport.center == match.location
        assert map_session.viewport.zoom == 15
        assert elevation_source.calls == [[match.location]]
        (observation,) = map_session.buffer.snapshot()
        assert observation.label == "Monumen Nasional, Jakarta"
        assert map_session.search.query_text == "Monumen Nasional, Jakarta"

    def test_failed_geocode_leaves_viewport(
        self, map_session: MapSession, geocoder: FakeGeocoder
    ) -> None:
        geocoder.fail_geocode = True

        async def scenario() -> None:
            await map_session.update_query("Monas")
            await map_session.select_suggestion(0)

        asyncio.run(scenario())

        assert map_session.viewport.zoom == 10
        assert len(map_session.buffer) == 0
