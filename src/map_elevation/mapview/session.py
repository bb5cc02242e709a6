"""Map session: wires drawing, clicks and search into elevation enrichment."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from map_elevation.config import Settings
from map_elevation.elevation.buffer import ElevationBuffer
from map_elevation.elevation.schemas import BufferMode, ElevationObservation
from map_elevation.elevation.service import ElevationFetcher
from map_elevation.exceptions import BufferModeConflictError, ErrorKind
from map_elevation.geometry.reprojection import Reprojector
from map_elevation.geometry.sampling import sample_path
from map_elevation.geometry.schemas import GeoPoint, Path
from map_elevation.results import Result
from map_elevation.search.schemas import GeocodeMatch
from map_elevation.search.session import SuggestionSession

logger = logging.getLogger(__name__)

POLYLINE = "polyline"


class Viewport:
    """Where the map is looking."""

    def __init__(self, center: GeoPoint, zoom: int) -> None:
        self.center = center
        self.zoom = zoom

    def go_to(self, center: GeoPoint, zoom: int) -> None:
        """Recentre the map on ``center`` at ``zoom``."""
        self.center = center
        self.zoom = zoom
        logger.info(
            "Viewport recentred",
            extra={"longitude": center.longitude, "latitude": center.latitude, "zoom": zoom},
        )


class MapSession:
    """One user's map: the elevation buffer, the search box and the viewport.

    Drawn polylines are sampled, reprojected and profiled into the buffer.
    Map clicks and committed searches are enriched one point at a time.
    Both flows share the buffer; it is owned by the drawn feature while one
    exists, and ad-hoc results are then only logged.
    """

    def __init__(
        self,
        settings: Settings,
        reprojector: Reprojector,
        fetcher: ElevationFetcher,
        buffer: ElevationBuffer,
        search: SuggestionSession,
        viewport: Viewport,
    ) -> None:
        self._settings = settings
        self._reprojector = reprojector
        self._fetcher = fetcher
        self._buffer = buffer
        self._search = search
        self._viewport = viewport
        self._pending_lookups = 0

    @property
    def buffer(self) -> ElevationBuffer:
        return self._buffer

    @property
    def search(self) -> SuggestionSession:
        return self._search

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def is_loading(self) -> bool:
        return self._pending_lookups > 0

    @property
    def has_profile(self) -> bool:
        return self._buffer.mode is BufferMode.PROFILE

    @asynccontextmanager
    async def _loading(self) -> AsyncIterator[None]:
        self._pending_lookups += 1
        try:
            yield
        finally:
            self._pending_lookups -= 1

    async def on_sketch_complete(
        self, geometry_type: str, path: Path
    ) -> Result[list[ElevationObservation]]:
        """Build an elevation profile for a finished drawing.

        Only polylines are profiled. The drawn feature takes ownership of the
        buffer immediately; the profile replaces its contents once all
        elevation chunks have been attempted.
        """
        if geometry_type != POLYLINE:
            logger.info("Ignoring non-polyline sketch", extra={"geometry_type": geometry_type})
            return Result.failure(ErrorKind.INVALID_INPUT, f"Cannot profile a {geometry_type}")

        run_id = self._buffer.begin_profile()
        samples = sample_path(path, self._settings.max_samples)
        logger.info(
            "Profiling polyline",
            extra={"vertices": path.point_count, "samples": len(samples), "run_id": run_id},
        )
        if not samples:
            return Result.failure(ErrorKind.NO_DATA, "Polyline has no vertices")

        async with self._loading():
            points = await self._reprojector.reproject_all(samples)
            result = await self._fetcher.fetch_elevations(points)

        if not result.ok:
            return result

        try:
            self._buffer.replace_profile(result.unwrap_or([]), run_id=run_id)
        except BufferModeConflictError as exc:
            logger.warning("Discarding superseded profile", extra={"run_id": run_id, "error": str(exc)})
            return Result.failure(exc.kind, str(exc))
        return result

    def on_sketch_delete(self) -> None:
        """Drop the drawn feature's profile and hand the buffer back to clicks."""
        self._buffer.clear()
        logger.info("Sketch deleted, elevation buffer cleared")

    async def on_map_click(self, point: GeoPoint) -> ElevationObservation | None:
        """Look up and chart the elevation at a clicked point."""
        return await self._enrich(point)

    async def update_query(self, text: str) -> None:
        """Forward a search text change to the suggestion session."""
        await self._search.update_query(text)

    async def press_key(self, key: str) -> GeocodeMatch | None:
        """Apply a navigation key, recentring and enriching on a commit."""
        match = await self._search.handle_key(key)
        await self._apply_match(match)
        return match

    async def select_suggestion(self, index: int) -> GeocodeMatch | None:
        """Commit a clicked suggestion, recentring and enriching on success."""
        match = await self._search.select(index)
        await self._apply_match(match)
        return match

    async def _apply_match(self, match: GeocodeMatch | None) -> None:
        if match is None:
            return
        self._viewport.go_to(match.location, self._settings.search_zoom)
        await self._enrich(match.location, match.address)

    async def _enrich(self, point: GeoPoint, label: str = "") -> ElevationObservation | None:
        async with self._loading():
            observation = await self._fetcher.fetch_elevation(point, label)
        if observation is None:
            return None

        try:
            self._buffer.append_ad_hoc(observation)
        except BufferModeConflictError:
            logger.info(
                "Drawn feature owns the elevation buffer, not charting point",
                extra={"location": observation.label},
            )
        return observation
