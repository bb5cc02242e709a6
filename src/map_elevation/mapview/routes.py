"""API routes for the map session."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from map_elevation.exceptions import ErrorKind, InvalidSelectionError
from map_elevation.geometry.schemas import GeoPoint
from map_elevation.mapview.schemas import (
    BufferSnapshot,
    ClickRequest,
    ClickResponse,
    KeyRequest,
    ProfileResponse,
    QueryRequest,
    SearchResponse,
    SelectRequest,
    SketchCreateRequest,
    ViewportResponse,
)
from map_elevation.mapview.session import MapSession
from map_elevation.search.schemas import GeocodeMatch

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["map"])

_PROFILE_STATUS = {
    ErrorKind.NO_DATA: "no_data",
    ErrorKind.INVALID_INPUT: "ignored",
    ErrorKind.CONFLICT: "superseded",
}


def get_map_session(request: Request) -> MapSession:
    """FastAPI dependency that retrieves the MapSession from app state."""
    session: MapSession = request.app.state.map_session
    return session


Session = Annotated[MapSession, Depends(get_map_session)]


def _search_response(
    session: MapSession, resolved: GeocodeMatch | None = None
) -> SearchResponse:
    return SearchResponse(session=session.search.view(), resolved=resolved)


@router.post("/sketch", response_model=ProfileResponse, summary="Profile a drawn polyline")
async def create_sketch(body: SketchCreateRequest, session: Session) -> ProfileResponse:
    """Sample, reproject and look up elevation along a finished drawing."""
    result = await session.on_sketch_complete(body.geometry_type, body.to_path())
    if result.ok:
        return ProfileResponse(status="ok", observations=result.unwrap_or([]))
    return ProfileResponse(status=_PROFILE_STATUS.get(result.error, "no_data"), observations=[])


@router.delete("/sketch", status_code=status.HTTP_204_NO_CONTENT, summary="Remove the drawing")
async def delete_sketch(session: Session) -> Response:
    """Remove the drawn feature and empty the elevation buffer."""
    session.on_sketch_delete()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/click", response_model=ClickResponse, summary="Look up elevation at a map click")
async def click(body: ClickRequest, session: Session) -> ClickResponse:
    """Look up elevation at a clicked point and chart it when the buffer allows."""
    point = GeoPoint(longitude=body.longitude, latitude=body.latitude)
    return ClickResponse(observation=await session.on_map_click(point))


@router.get("/buffer", response_model=BufferSnapshot, summary="Observations for the charts")
async def buffer(session: Session) -> BufferSnapshot:
    """Return the observations the elevation charts plot."""
    return BufferSnapshot(
        mode=session.buffer.mode,
        loading=session.is_loading,
        has_profile=session.has_profile,
        observations=list(session.buffer.snapshot()),
    )


@router.get("/search", response_model=SearchResponse)
async def search(session: Session) -> SearchResponse:
    """Return the current search box state."""
    return _search_response(session)


@router.put("/search/query", response_model=SearchResponse, summary="Change the search text")
async def update_query(body: QueryRequest, session: Session) -> SearchResponse:
    """Change the query text and fetch suggestions for it."""
    await session.update_query(body.text)
    return _search_response(session)


@router.post("/search/keys", response_model=SearchResponse, summary="Press a navigation key")
async def press_key(body: KeyRequest, session: Session) -> SearchResponse:
    """Apply an arrow or Enter key to the suggestion list."""
    resolved = await session.press_key(body.key)
    return _search_response(session, resolved)


@router.post("/search/select", response_model=SearchResponse, summary="Pick a suggestion")
async def select(body: SelectRequest, session: Session) -> SearchResponse:
    """Commit the suggestion at the given index."""
    try:
        resolved = await session.select_suggestion(body.index)
    except InvalidSelectionError as exc:
        logger.info("Rejected suggestion selection", extra={"error": str(exc)})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return _search_response(session, resolved)


@router.post("/search/dismiss", response_model=SearchResponse)
async def dismiss(session: Session) -> SearchResponse:
    """Hide the suggestion list."""
    session.search.dismiss()
    return _search_response(session)


@router.post("/search/focus", response_model=SearchResponse)
async def focus(session: Session) -> SearchResponse:
    """Show retained suggestions again."""
    session.search.focus()
    return _search_response(session)


@router.delete("/search", response_model=SearchResponse, summary="Clear the search box")
async def clear_search(session: Session) -> SearchResponse:
    """Reset the search text and suggestions."""
    session.search.clear()
    return _search_response(session)


@router.get("/viewport", response_model=ViewportResponse)
async def viewport(session: Session) -> ViewportResponse:
    """Return where the map is centred and its zoom."""
    return ViewportResponse(center=session.viewport.center, zoom=session.viewport.zoom)
