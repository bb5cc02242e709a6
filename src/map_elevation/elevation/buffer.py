"""Bounded display buffer of elevation observations."""

import logging
from collections.abc import Iterable

from map_elevation.elevation.schemas import BufferMode, ElevationObservation
from map_elevation.exceptions import BufferModeConflictError

logger = logging.getLogger(__name__)

DEFAULT_AD_HOC_CAPACITY = 10


class ElevationBuffer:
    """Observations read by the elevation charts.

    The buffer is owned by one flow at a time. In ad-hoc mode single-point
    lookups are appended and the oldest are evicted past the capacity. In
    profile mode a drawn feature owns the buffer and replaces its contents
    wholesale; ad-hoc appends are rejected until ``clear`` hands the buffer
    back. Switching mode empties the buffer.
    """

    def __init__(self, ad_hoc_capacity: int = DEFAULT_AD_HOC_CAPACITY) -> None:
        if ad_hoc_capacity < 1:
            raise ValueError(f"ad_hoc_capacity must be at least 1, got {ad_hoc_capacity}")
        self._capacity = ad_hoc_capacity
        self._observations: list[ElevationObservation] = []
        self._mode = BufferMode.AD_HOC
        self._runs_started = 0
        self._active_run: int | None = None

    @property
    def mode(self) -> BufferMode:
        return self._mode

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._observations)

    def snapshot(self) -> tuple[ElevationObservation, ...]:
        """Read-only view of the current observations, oldest first."""
        return tuple(self._observations)

    def begin_profile(self) -> int:
        """Hand the buffer to a new profile run and return its run id.

        Any earlier run is superseded; its results will be rejected. A profile
        already in the buffer stays visible until the new run replaces it.
        """
        self._switch_mode(BufferMode.PROFILE)
        self._runs_started += 1
        self._active_run = self._runs_started
        return self._active_run

    def append_ad_hoc(self, observation: ElevationObservation) -> None:
        """Append a single-point observation, evicting the oldest past capacity.

        Raises:
            BufferModeConflictError: If a drawn feature owns the buffer.
        """
        if self._mode is BufferMode.PROFILE:
            raise BufferModeConflictError("Buffer is owned by a path profile")
        self._observations.append(observation)
        if len(self._observations) > self._capacity:
            del self._observations[: -self._capacity]

    def replace_profile(
        self,
        observations: Iterable[ElevationObservation],
        run_id: int | None = None,
    ) -> None:
        """Replace the whole buffer with a completed profile.

        Args:
            observations: The profile, in plotting order. Any length.
            run_id: Id returned by ``begin_profile``. When given, the
                replacement is accepted only if that run is still current.

        Raises:
            BufferModeConflictError: If ``run_id`` was superseded or cleared.
        """
        if run_id is not None and run_id != self._active_run:
            raise BufferModeConflictError(f"Profile run {run_id} is no longer current")
        self._switch_mode(BufferMode.PROFILE)
        self._observations = list(observations)

    def clear(self) -> None:
        """Empty the buffer and return it to ad-hoc mode."""
        self._observations = []
        self._mode = BufferMode.AD_HOC
        self._active_run = None

    def _switch_mode(self, mode: BufferMode) -> None:
        if self._mode is not mode:
            logger.debug("Buffer mode switched", extra={"from_mode": self._mode, "to_mode": mode})
            self._observations = []
            self._mode = mode
