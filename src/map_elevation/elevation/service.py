"""Elevation enrichment for sampled paths and single points."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from map_elevation.config import Settings
from map_elevation.elevation.client import ElevationSource
from map_elevation.elevation.schemas import ElevationObservation
from map_elevation.exceptions import ErrorKind
from map_elevation.geometry.schemas import GeoPoint
from map_elevation.results import Result, capture

logger = logging.getLogger(__name__)


def default_label(point: GeoPoint) -> str:
    """Label a point by its coordinates, latitude first, to four decimals."""
    return f"{point.latitude:.4f}, {point.longitude:.4f}"


class ElevationFetcher:
    """Fetches elevations from a rate-limited service.

    Batch lookups are split into chunks no larger than the service limit,
    issued one after another with a fixed pause between chunks. A failed
    chunk is logged and skipped; the remaining chunks still run.
    """

    def __init__(
        self,
        source: ElevationSource,
        settings: Settings,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._source = source
        self._batch_size = settings.batch_size
        self._pacing = settings.batch_pacing_seconds
        self._sleep = sleep

    async def fetch_elevations(
        self, points: Sequence[GeoPoint]
    ) -> Result[list[ElevationObservation]]:
        """Look up elevation for every point, labelled "Point 1".."Point N".

        Args:
            points: WGS84 points in profile order.

        Returns:
            The observations of every chunk that succeeded, in input order, or
            a ``NO_DATA`` failure when no chunk produced anything.
        """
        observations: list[ElevationObservation] = []
        total = len(points)

        for start in range(0, total, self._batch_size):
            chunk = points[start : start + self._batch_size]
            result = await capture(self._source.at_many_points(chunk))

            if result.ok:
                observations.extend(
                    ElevationObservation.create(
                        GeoPoint(longitude=service_point.x, latitude=service_point.y),
                        service_point.z,
                        f"Point {start + offset + 1}",
                    )
                    for offset, service_point in enumerate(result.unwrap_or([]))
                )
            else:
                logger.error(
                    "Elevation chunk failed",
                    extra={
                        "chunk_start": start,
                        "chunk_size": len(chunk),
                        "error_kind": result.error,
                        "error": result.detail,
                    },
                )

            if start + self._batch_size < total:
                await self._sleep(self._pacing)

        if not observations:
            logger.error("No elevation data retrieved", extra={"requested": total})
            return Result.failure(ErrorKind.NO_DATA, f"No elevation data for {total} point(s)")
        return Result.success(observations)

    async def fetch_elevation(self, point: GeoPoint, label: str = "") -> ElevationObservation | None:
        """Look up elevation for a single point.

        Never raises; returns ``None`` when the lookup fails or the service
        has no value for the point.
        """
        label = label or default_label(point)
        result = await capture(self._source.at_many_points([point]))

        if not result.ok:
            logger.error(
                "Elevation lookup failed",
                extra={"location": label, "error_kind": result.error, "error": result.detail},
            )
            return None

        service_points = result.unwrap_or([])
        if not service_points:
            logger.info("No elevation returned", extra={"location": label})
            return None

        observation = ElevationObservation.create(point, service_points[0].z, label)
        logger.info("Elevation at %s: %sm", label, observation.elevation_meters)
        return observation
