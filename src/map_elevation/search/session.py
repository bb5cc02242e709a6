"""State machine behind the address search box."""

import logging

from map_elevation.exceptions import InvalidSelectionError
from map_elevation.results import capture
from map_elevation.search.client import Geocoder
from map_elevation.search.schemas import (
    GeocodeMatch,
    SearchSessionView,
    SessionState,
    SuggestionCandidate,
)

logger = logging.getLogger(__name__)

ARROW_DOWN = "ArrowDown"
ARROW_UP = "ArrowUp"
ENTER = "Enter"


class SuggestionSession:
    """Coordinates the query text, suggestion requests and keyboard selection.

    Every keystroke fires a suggestion request and nothing is cancelled.
    Each request records the session's generation when it starts; its
    response is applied only if no text change, commit, dismiss or clear has
    happened since. Responses therefore never land on the wrong query,
    whatever order they complete in.
    """

    def __init__(self, geocoder: Geocoder) -> None:
        self._geocoder = geocoder
        self._query_text = ""
        self._candidates: list[SuggestionCandidate] = []
        self._highlighted_index = -1
        self._visible = False
        self._state = SessionState.IDLE
        self._generation = 0

    @property
    def query_text(self) -> str:
        return self._query_text

    @property
    def candidates(self) -> tuple[SuggestionCandidate, ...]:
        return tuple(self._candidates)

    @property
    def highlighted_index(self) -> int:
        return self._highlighted_index

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def state(self) -> SessionState:
        return self._state

    def view(self) -> SearchSessionView:
        """Snapshot of the session for rendering."""
        return SearchSessionView(
            query_text=self._query_text,
            candidates=list(self._candidates),
            highlighted_index=self._highlighted_index,
            visible=self._visible,
            state=self._state,
        )

    async def update_query(self, text: str) -> None:
        """Handle a change of the query text.

        Empty text resets the session without a request. Otherwise one
        suggestion request is issued and applied if it is still current when
        it completes.
        """
        generation = self._advance()
        self._query_text = text
        self._highlighted_index = -1

        if not text:
            self._drop_candidates()
            self._state = SessionState.IDLE
            return

        self._state = SessionState.FETCHING
        result = await capture(self._geocoder.suggest(text))

        if generation != self._generation:
            logger.debug("Discarding stale suggestions", extra={"query": text})
            return

        if not result.ok:
            logger.warning(
                "Suggestion request failed",
                extra={"query": text, "error_kind": result.error, "error": result.detail},
            )

        candidates = result.unwrap_or([])
        if candidates:
            self._candidates = list(candidates)
            self._highlighted_index = -1
            self._visible = True
            self._state = SessionState.SHOWING
        else:
            self._drop_candidates()
            self._state = SessionState.IDLE

    def highlight_next(self) -> None:
        """Move the highlight down one candidate, stopping at the last."""
        if self._navigable():
            self._highlighted_index = min(self._highlighted_index + 1, len(self._candidates) - 1)

    def highlight_previous(self) -> None:
        """Move the highlight up one candidate, stopping at no highlight."""
        if self._navigable():
            self._highlighted_index = max(self._highlighted_index - 1, -1)

    async def handle_key(self, key: str) -> GeocodeMatch | None:
        """Apply a navigation key; ``Enter`` commits the highlighted candidate.

        Keys are ignored while the list is hidden or empty.

        Returns:
            The resolved match when ``Enter`` committed successfully.
        """
        if not self._navigable():
            return None

        if key == ARROW_DOWN:
            self.highlight_next()
        elif key == ARROW_UP:
            self.highlight_previous()
        elif key == ENTER and self._highlighted_index >= 0:
            return await self._commit(self._candidates[self._highlighted_index])
        return None

    async def select(self, index: int) -> GeocodeMatch | None:
        """Commit the candidate at ``index``, as a click on it does.

        Raises:
            InvalidSelectionError: If ``index`` is not a displayed candidate.
        """
        if not 0 <= index < len(self._candidates):
            raise InvalidSelectionError(index, len(self._candidates))
        return await self._commit(self._candidates[index])

    def dismiss(self) -> None:
        """Hide the list after an outside click, voiding in-flight responses.

        Candidates are kept so that focusing the box shows them again.
        """
        self._advance()
        self._visible = False
        if self._candidates:
            self._state = SessionState.DISMISSED
        elif self._state is SessionState.FETCHING:
            self._state = SessionState.IDLE

    def focus(self) -> None:
        """Show the retained candidates again after a dismiss."""
        if self._candidates and self._state is SessionState.DISMISSED:
            self._visible = True
            self._state = SessionState.SHOWING

    def clear(self) -> None:
        """Reset the text and suggestions, voiding in-flight responses."""
        self._advance()
        self._query_text = ""
        self._highlighted_index = -1
        self._drop_candidates()
        self._state = SessionState.IDLE

    async def _commit(self, candidate: SuggestionCandidate) -> GeocodeMatch | None:
        generation = self._advance()
        self._query_text = candidate.display_text
        self._highlighted_index = -1
        self._drop_candidates()
        self._state = SessionState.COMMITTED

        result = await capture(self._geocoder.geocode(candidate.resolution_key))

        if generation != self._generation:
            logger.debug("Discarding stale geocode", extra={"query": candidate.display_text})
            return None

        if not result.ok:
            logger.error(
                "Geocode failed",
                extra={
                    "query": candidate.display_text,
                    "error_kind": result.error,
                    "error": result.detail,
                },
            )
            return None

        matches = result.unwrap_or([])
        if not matches:
            logger.info("Geocode returned no candidates", extra={"query": candidate.display_text})
            return None

        best = matches[0]
        if best.address:
            self._query_text = best.address
        return best

    def _navigable(self) -> bool:
        return self._visible and bool(self._candidates)

    def _drop_candidates(self) -> None:
        self._candidates = []
        self._highlighted_index = -1
        self._visible = False

    def _advance(self) -> int:
        self._generation += 1
        return self._generation
