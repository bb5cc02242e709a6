"""Pydantic schemas for elevation observations and service responses."""

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict

from map_elevation.geometry.schemas import GeoPoint


def round_elevation(value: float) -> float:
    """Round half-up to 2 decimal places."""
    return math.floor(value * 100 + 0.5) / 100


class ElevationObservation(BaseModel):
    """One enriched point, as plotted by the elevation charts."""

    model_config = ConfigDict(frozen=True)

    point: GeoPoint
    elevation_meters: float
    label: str

    @classmethod
    def create(cls, point: GeoPoint, elevation: float, label: str) -> "ElevationObservation":
        """Build an observation from a raw service value, rounding it once."""
        return cls(point=point, elevation_meters=round_elevation(elevation), label=label)


class BufferMode(str, Enum):
    """Which flow currently owns the elevation buffer."""

    AD_HOC = "ad_hoc"
    PROFILE = "profile"


class ServicePoint(BaseModel):
    """A point returned by the at-many-points elevation service."""

    x: float
    y: float
    z: float


class ServiceResult(BaseModel):
    points: list[ServicePoint] = []


class ServiceResponse(BaseModel):
    """Body of an at-many-points elevation response."""

    result: ServiceResult = ServiceResult()
