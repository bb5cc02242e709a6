"""Pydantic schemas for the map session API."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from map_elevation.elevation.schemas import BufferMode, ElevationObservation
from map_elevation.geometry.schemas import GeoPoint, Path
from map_elevation.search.schemas import GeocodeMatch, SearchSessionView


class SketchCreateRequest(BaseModel):
    """A finished drawing, as reported by the sketch tool."""

    geometry_type: str = "polyline"
    paths: list[list[list[float]]]
    spatial_reference_id: int | None = None

    @field_validator("paths")
    @classmethod
    def vertices_have_two_ordinates(cls, paths: list[list[list[float]]]) -> list[list[list[float]]]:
        for segment in paths:
            for vertex in segment:
                if len(vertex) < 2:
                    raise ValueError("each vertex needs at least x and y")
        return paths

    def to_path(self) -> Path:
        """Convert the drawn paths into a sampling path."""
        return Path.from_paths(self.paths, self.spatial_reference_id)


class ProfileResponse(BaseModel):
    """Outcome of profiling a drawn polyline."""

    status: Literal["ok", "no_data", "ignored", "superseded"]
    observations: list[ElevationObservation]


class ClickRequest(BaseModel):
    longitude: float = Field(ge=-180, le=180)
    latitude: float = Field(ge=-90, le=90)


class ClickResponse(BaseModel):
    observation: ElevationObservation | None


class BufferSnapshot(BaseModel):
    """What the elevation charts plot."""

    mode: BufferMode
    loading: bool
    has_profile: bool
    observations: list[ElevationObservation]


class QueryRequest(BaseModel):
    text: str


class KeyRequest(BaseModel):
    key: Literal["ArrowDown", "ArrowUp", "Enter"]


class SelectRequest(BaseModel):
    index: int = Field(ge=0)


class SearchResponse(BaseModel):
    session: SearchSessionView
    resolved: GeocodeMatch | None = None


class ViewportResponse(BaseModel):
    center: GeoPoint
    zoom: int
