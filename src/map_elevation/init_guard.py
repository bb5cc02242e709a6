"""One-time asynchronous initialization."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class InitializationGuard:
    """Runs an async setup step exactly once, however often it is awaited.

    Concurrent callers wait on the same lock, so the setup never runs twice.
    A setup that raises is not recorded as done; the next call retries it.
    """

    def __init__(self, setup: Callable[[], Awaitable[None]], *, name: str) -> None:
        self._setup = setup
        self._name = name
        self._lock = asyncio.Lock()
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def ensure_initialized(self) -> None:
        """Run setup if it has not yet succeeded; concurrent callers wait for one run."""
        if self._initialized:
            return
        async with self._lock:
            if self._initialized:
                return
            await self._setup()
            self._initialized = True
            logger.info("Initialized %s", self._name)
