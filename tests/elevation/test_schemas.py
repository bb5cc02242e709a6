"""Tests for elevation schemas."""

import pytest
from pydantic import ValidationError

from map_elevation.elevation.schemas import ElevationObservation, ServiceResponse, round_elevation
from map_elevation.geometry.schemas import GeoPoint

JAKARTA = GeoPoint(longitude=106.8451, latitude=-6.2088)


class TestElevationObservation:
    def test_create_rounds_to_two_decimals(self) -> None:
        observation = ElevationObservation.create(JAKARTA, 7.126, "Point 1")

        assert observation.elevation_meters == 7.13
        assert observation.point == JAKARTA
        assert observation.label == "Point 1"

    def test_negative_elevation(self) -> None:
        observation = ElevationObservation.create(JAKARTA, -430.5, "Dead Sea")

        assert observation.elevation_meters == -430.5

    def test_is_immutable(self) -> None:
        observation = ElevationObservation.create(JAKARTA, 1.0, "Point 1")

        with pytest.raises(ValidationError):
            observation.elevation_meters = 2.0  # type: ignore[misc]

    def test_rejects_missing_fields(self) -> None:
        with pytest.raises(ValidationError):
            ElevationObservation(point=JAKARTA, elevation_meters=1.0)  # type: ignore[call-arg]


class TestRoundElevation:
    def test_rounds_half_up(self) -> None:
        assert round_elevation(0.125) == 0.13
        assert round_elevation(2.5) == 2.5
        assert round_elevation(-1.004) == -1.0


class TestServiceResponse:
    def test_parses_points(self) -> None:
        response = ServiceResponse.model_validate(
            {"result": {"points": [{"x": 1.0, "y": 2.0, "z": 3.0}]}}
        )

        assert response.result.points[0].z == 3.0

    def test_missing_result_is_empty(self) -> None:
        assert ServiceResponse.model_validate({}).result.points == []
