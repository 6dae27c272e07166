"""In-memory access token cache with one in-flight refresh per key."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessToken:
    """A cached access token."""

    token: str
    scope: str
    expires_at: float  # Unix timestamp in seconds

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now


def build_access_token_key(resource: str | None = None, scopes: list[str] | None = None) -> str:
    """Cache key for a resource and scope set."""
    return f"{' '.join(sorted(scopes or []))}@{resource or ''}"


class AccessTokenCache:
    """Access tokens keyed by resource, plus the refreshes currently running.

    Expired entries are evicted lazily, on the next read of their key.
    ``clear()`` starts a new generation: refreshes begun before it still
    settle for their callers but are not stored.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock
        self.generation = 0
        self._entries: dict[str, AccessToken] = {}
        self._in_flight: dict[str, asyncio.Task[AccessToken]] = {}

    def get(self, key: str) -> str | None:
        """Return the cached token for ``key`` if it has not expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.is_expired(self.clock()):
            logger.debug(f"Evicting expired access token for {key!r}")
            del self._entries[key]
            return None

        return entry.token

    def set(self, key: str, entry: AccessToken) -> None:
        self._entries[key] = entry

    def clear(self) -> None:
        self.generation += 1
        self._entries.clear()
        self._in_flight.clear()

    async def get_or_refresh(
        self,
        key: str,
        refresh: Callable[[], Awaitable[AccessToken]],
    ) -> str:
        """Return a valid token for ``key``, refreshing at most once concurrently.

        Callers arriving while a refresh for the same key is running await
        that refresh instead of starting another. A failed refresh leaves
        the cache untouched and the error reaches every waiting caller.
        """
        token = self.get(key)
        if token is not None:
            return token

        task = self._in_flight.get(key)
        if task is None:
            logger.debug(f"Refreshing access token for {key!r}")
            task = asyncio.ensure_future(self._run_refresh(key, refresh, self.generation))
            self._in_flight[key] = task
        else:
            logger.debug(f"Joining in-flight refresh for {key!r}")

        # Shield so one cancelled caller does not cancel the shared refresh
        entry = await asyncio.shield(task)
        return entry.token

    async def _run_refresh(
        self,
        key: str,
        refresh: Callable[[], Awaitable[AccessToken]],
        generation: int,
    ) -> AccessToken:
        try:
            entry = await refresh()
            if generation == self.generation:
                self._entries[key] = entry
            else:
                logger.debug(f"Cache cleared during refresh for {key!r}, not storing")
            return entry
        finally:
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]
