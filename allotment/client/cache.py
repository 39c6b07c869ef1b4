"""Keyed cache of server data owned by the workspace.

Each key has one fetcher. `invalidate(key)` re-fetches and replaces the cached value, then
notifies subscribers; if the fetch fails the previous value is kept and the error propagates.
"""

import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Any]]
Listener = Callable[[str, Any], None]


class QueryCache:
    def __init__(self) -> None:
        self._fetchers: Dict[str, Fetcher] = {}
        self._data: Dict[str, Any] = {}
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def register(self, key: str, fetcher: Fetcher) -> None:
        self._fetchers[key] = fetcher

    def subscribe(self, key: str, listener: Listener) -> None:
        self._listeners[key].append(listener)

    def peek(self, key: str, default: Any = None) -> Any:
        """Cached value without fetching."""
        return self._data.get(key, default)

    async def get(self, key: str) -> Any:
        if key not in self._data:
            return await self._fetch(key)
        return self._data[key]

    async def invalidate(self, key: str) -> Any:
        return await self._fetch(key)

    async def _fetch(self, key: str) -> Any:
        try:
            fetcher = self._fetchers[key]
        except KeyError:
            raise KeyError(f"No fetcher registered for cache key {key!r}") from None
        value = await fetcher()
        self._data[key] = value
        logger.debug(f"Cache key {key!r} refreshed")
        for listener in self._listeners[key]:
            listener(key, value)
        return value
