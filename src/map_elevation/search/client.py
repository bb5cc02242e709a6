"""Client for the ArcGIS suggest and geocode endpoints."""

import logging
from typing import Protocol

import httpx
from pydantic import ValidationError

from map_elevation.config import Settings
from map_elevation.exceptions import ServiceResponseError
from map_elevation.geometry.schemas import GeoPoint
from map_elevation.http import auth_params, send
from map_elevation.search.schemas import (
    GeocodeMatch,
    GeocodeResponse,
    SuggestionCandidate,
    SuggestResponse,
)

logger = logging.getLogger(__name__)

SUGGEST_SERVICE = "suggest"
GEOCODE_SERVICE = "geocode"


class Geocoder(Protocol):
    """Address suggestion and resolution, as used by the search session."""

    async def suggest(self, text: str) -> list[SuggestionCandidate]: ...

    async def geocode(self, resolution_key: str) -> list[GeocodeMatch]: ...


class GeocodingClient:
    """Talks to the World GeocodeServer ``suggest`` and ``findAddressCandidates`` endpoints."""

    def __init__(self, http: httpx.AsyncClient, settings: Settings) -> None:
        self._http = http
        self._settings = settings
        self._base_url = settings.geocode_url.rstrip("/")

    async def suggest(self, text: str) -> list[SuggestionCandidate]:
        """Return address suggestions for ``text``, biased towards the configured location.

        Raises:
            ServiceRequestError: If the request fails or the service reports an error.
            ServiceResponseError: If the response body cannot be parsed.
        """
        settings = self._settings
        params = {
            **auth_params(settings),
            "text": text,
            "location": f"{settings.suggest_bias_longitude},{settings.suggest_bias_latitude}",
            "maxSuggestions": str(settings.max_suggestions),
        }
        body = await send(self._http, SUGGEST_SERVICE, "GET", f"{self._base_url}/suggest", params=params)

        try:
            response = SuggestResponse.model_validate(body)
        except ValidationError as exc:
            raise ServiceResponseError(SUGGEST_SERVICE, str(exc)) from exc

        return [
            SuggestionCandidate(display_text=suggestion.text, resolution_key=suggestion.magic_key)
            for suggestion in response.suggestions
        ]

    async def geocode(self, resolution_key: str) -> list[GeocodeMatch]:
        """Resolve a suggestion key into ranked matches, best first.

        Raises:
            ServiceRequestError: If the request fails or the service reports an error.
            ServiceResponseError: If the response body cannot be parsed.
        """
        params = {
            **auth_params(self._settings),
            "magicKey": resolution_key,
            "maxLocations": "1",
        }
        body = await send(
            self._http,
            GEOCODE_SERVICE,
            "GET",
            f"{self._base_url}/findAddressCandidates",
            params=params,
        )

        try:
            response = GeocodeResponse.model_validate(body)
        except ValidationError as exc:
            raise ServiceResponseError(GEOCODE_SERVICE, str(exc)) from exc

        return [
            GeocodeMatch(
                address=candidate.address,
                location=GeoPoint(longitude=candidate.location.x, latitude=candidate.location.y),
                score=candidate.score,
            )
            for candidate in response.candidates
        ]
