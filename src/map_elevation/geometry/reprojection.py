"""Reprojection of drawn coordinates into WGS84 longitude/latitude."""

import asyncio
import logging
import math
from collections.abc import Sequence

from cachetools import LRUCache
from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError, DataDirError, ProjError

from map_elevation.config import Settings
from map_elevation.exceptions import ProjectionError
from map_elevation.geometry.schemas import GeoPoint, ProjectedPoint
from map_elevation.init_guard import InitializationGuard

logger = logging.getLogger(__name__)

WGS84_WKID = 4326
GEOGRAPHIC_WKIDS = frozenset({WGS84_WKID})


class Reprojector:
    """Converts points from any spatial reference into WGS84.

    Points already tagged WGS84 pass through untouched. Everything else is
    transformed with pyproj; transformers are cached per reference id. The
    PROJ engine is set up lazily, once, on the first point that needs it.

    When a transform cannot be performed the raw coordinates are returned as
    if they were already geographic. Such results may be geometrically wrong.
    """

    def __init__(
        self,
        settings: Settings,
        guard: InitializationGuard | None = None,
    ) -> None:
        self._default_wkid = settings.default_spatial_reference
        self._transformers: LRUCache[int, Transformer] = LRUCache(
            maxsize=settings.transformer_cache_size,
        )
        self._wgs84: CRS | None = None
        self._guard = guard or InitializationGuard(self._load_engine, name="projection engine")

    async def _load_engine(self) -> None:
        self._wgs84 = await asyncio.to_thread(CRS.from_epsg, WGS84_WKID)

    async def reproject(self, point: ProjectedPoint) -> GeoPoint:
        """Return ``point`` as a WGS84 GeoPoint, falling back to its raw values."""
        if point.spatial_reference_id in GEOGRAPHIC_WKIDS:
            return GeoPoint(longitude=point.x, latitude=point.y)

        wkid = point.spatial_reference_id
        if wkid is None:
            wkid = self._default_wkid

        try:
            await self._guard.ensure_initialized()
            longitude, latitude = self._transformer_for(wkid).transform(
                point.x, point.y, errcheck=True
            )
            if not (math.isfinite(longitude) and math.isfinite(latitude)):
                raise ProjectionError(wkid, "transform produced non-finite coordinates")
        except (CRSError, DataDirError, ProjError, ProjectionError) as exc:
            logger.warning(
                "Reprojection failed, using raw coordinates",
                extra={"spatial_reference_id": wkid, "error": str(exc)},
            )
            return GeoPoint(longitude=point.x, latitude=point.y)

        return GeoPoint(longitude=longitude, latitude=latitude)

    async def reproject_all(self, points: Sequence[ProjectedPoint]) -> list[GeoPoint]:
        """Reproject ``points`` concurrently, preserving their order."""
        return list(await asyncio.gather(*(self.reproject(point) for point in points)))

    def _transformer_for(self, wkid: int) -> Transformer:
        transformer = self._transformers.get(wkid)
        if transformer is None:
            if self._wgs84 is None:
                raise ProjectionError(wkid, "projection engine is not initialized")
            transformer = Transformer.from_crs(_resolve_crs(wkid), self._wgs84, always_xy=True)
            self._transformers[wkid] = transformer
            logger.debug("Created transformer", extra={"spatial_reference_id": wkid})
        return transformer


def _resolve_crs(wkid: int) -> CRS:
    """Resolve a WKID as an EPSG code, then as an Esri code (e.g. 102100)."""
    try:
        return CRS.from_epsg(wkid)
    except CRSError:
        return CRS.from_authority("ESRI", str(wkid))
