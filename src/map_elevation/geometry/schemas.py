"""Pydantic schemas for points and drawn paths."""

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict


class GeoPoint(BaseModel):
    """A longitude/latitude coordinate in WGS84."""

    model_config = ConfigDict(frozen=True)

    longitude: float
    latitude: float


class ProjectedPoint(BaseModel):
    """A point in an arbitrary spatial reference, as emitted by drawing tools.

    ``spatial_reference_id`` is a WKID; ``None`` means the reference was not
    declared.
    """

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    spatial_reference_id: int | None = None


class Path(BaseModel):
    """A drawn feature made of one or more disconnected segments."""

    segments: list[list[ProjectedPoint]]

    @classmethod
    def from_paths(
        cls,
        paths: Sequence[Sequence[Sequence[float]]],
        spatial_reference_id: int | None = None,
    ) -> "Path":
        """Build a Path from raw ``[[x, y], ...]`` arrays sharing one reference."""
        return cls(
            segments=[
                [
                    ProjectedPoint(x=vertex[0], y=vertex[1], spatial_reference_id=spatial_reference_id)
                    for vertex in segment
                ]
                for segment in paths
            ]
        )

    @property
    def point_count(self) -> int:
        return sum(len(segment) for segment in self.segments)
