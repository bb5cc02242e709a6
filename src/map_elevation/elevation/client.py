"""Client for the remote at-many-points elevation service."""

import json
import logging
from collections.abc import Sequence
from typing import Protocol

import httpx
from pydantic import ValidationError

from map_elevation.config import Settings
from map_elevation.exceptions import ServiceResponseError
from map_elevation.elevation.schemas import ServicePoint, ServiceResponse
from map_elevation.geometry.schemas import GeoPoint
from map_elevation.http import auth_params, send

logger = logging.getLogger(__name__)

SERVICE_NAME = "elevation"


class ElevationSource(Protocol):
    """Anything that can look up elevations for a batch of WGS84 points."""

    async def at_many_points(self, points: Sequence[GeoPoint]) -> list[ServicePoint]: ...


class ElevationClient:
    """Posts coordinate batches to the ArcGIS elevation service."""

    def __init__(self, http: httpx.AsyncClient, settings: Settings) -> None:
        self._http = http
        self._settings = settings

    async def at_many_points(self, points: Sequence[GeoPoint]) -> list[ServicePoint]:
        """Look up elevation for up to ``batch_size`` points in one request.

        Args:
            points: WGS84 points, at most ``settings.batch_size`` of them.

        Returns:
            Service points in request order, each with an elevation ``z``.

        Raises:
            ValueError: If more points are passed than one request accepts.
            ServiceRequestError: If the request fails or the service reports an error.
            ServiceResponseError: If the response body cannot be parsed or does
                not hold exactly one point per requested point.
        """
        if len(points) > self._settings.batch_size:
            raise ValueError(
                f"At most {self._settings.batch_size} points per request, got {len(points)}"
            )

        data = {
            **auth_params(self._settings),
            "coordinates": json.dumps([[point.longitude, point.latitude] for point in points]),
        }
        body = await send(self._http, SERVICE_NAME, "POST", self._settings.elevation_url, data=data)

        try:
            response = ServiceResponse.model_validate(body)
        except ValidationError as exc:
            raise ServiceResponseError(SERVICE_NAME, str(exc)) from exc

        logger.debug(
            "Elevation service answered",
            extra={"requested": len(points), "returned": len(response.result.points)},
        )
        if len(response.result.points) != len(points):
            raise ServiceResponseError(
                SERVICE_NAME,
                f"expected {len(points)} point(s), got {len(response.result.points)}",
            )
        return response.result.points
