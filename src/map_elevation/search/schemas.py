"""Pydantic schemas for address suggestions and geocode results."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from map_elevation.geometry.schemas import GeoPoint


class SuggestionCandidate(BaseModel):
    """A suggested address and the single-use key that resolves it."""

    model_config = ConfigDict(frozen=True)

    display_text: str
    resolution_key: str


class GeocodeMatch(BaseModel):
    """A resolved location with its formatted address."""

    address: str
    location: GeoPoint
    score: float | None = None


class SessionState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    SHOWING = "showing"
    DISMISSED = "dismissed"
    COMMITTED = "committed"


class SearchSessionView(BaseModel):
    """Snapshot of the search box and its suggestion list."""

    query_text: str
    candidates: list[SuggestionCandidate]
    highlighted_index: int
    visible: bool
    state: SessionState


class ServiceSuggestion(BaseModel):
    text: str
    magic_key: str = Field(alias="magicKey")


class SuggestResponse(BaseModel):
    """Body of a geocoder ``suggest`` response."""

    suggestions: list[ServiceSuggestion] = []


class ServiceLocation(BaseModel):
    x: float
    y: float


class ServiceCandidate(BaseModel):
    address: str = ""
    location: ServiceLocation
    score: float | None = None


class GeocodeResponse(BaseModel):
    """Body of a geocoder ``findAddressCandidates`` response."""

    candidates: list[ServiceCandidate] = []
