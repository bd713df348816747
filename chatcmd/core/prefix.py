"""Per-guild command prefix resolution."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from config.settings import settings

logger = logging.getLogger(__name__)

PrefixReader = Callable[[int], Awaitable[str | None]]
PrefixWriter = Callable[[int, str], Awaitable[None]]


class PrefixResolver:
    """Write-through prefix cache in front of optional persistence callbacks.

    Once a guild's prefix has been read (or set) the cache is authoritative for
    that guild. Without a reader every lookup returns the default prefix and
    nothing is cached.
    """

    def __init__(
        self,
        default_prefix: str | None = None,
        reader: PrefixReader | None = None,
        writer: PrefixWriter | None = None,
    ) -> None:
        self.default_prefix = default_prefix or settings.bot_prefix
        self._reader = reader
        self._writer = writer
        self._cache: dict[int, str] = {}
        self._pending: dict[int, asyncio.Future[str]] = {}

    def set_callbacks(self, reader: PrefixReader | None, writer: PrefixWriter | None) -> None:
        self._reader = reader
        self._writer = writer

    async def get_prefix(self, scope_id: int) -> str:
        """Cached prefix for ``scope_id``. Concurrent misses for one scope share a single read."""
        if scope_id in self._cache:
            return self._cache[scope_id]

        if self._reader is None:
            return self.default_prefix

        task = self._pending.get(scope_id)
        if task is None or task.done():
            task = asyncio.ensure_future(self._load(scope_id))
            self._pending[scope_id] = task
            task.add_done_callback(lambda done: self._forget(scope_id, done))
        return await asyncio.shield(task)

    def _forget(self, scope_id: int, task: asyncio.Future[str]) -> None:
        if self._pending.get(scope_id) is task:
            del self._pending[scope_id]

    async def _load(self, scope_id: int) -> str:
        prefix = await self._reader(scope_id)
        if not prefix:
            logger.debug(f"No stored prefix for {scope_id}, storing default '{self.default_prefix}'")
            prefix = self.default_prefix
            if self._writer is not None:
                await self._writer(scope_id, prefix)

        # set_prefix may have run while the read was in flight
        return self._cache.setdefault(scope_id, prefix)

    async def set_prefix(self, scope_id: int, prefix: str) -> None:
        if not prefix or any(char.isspace() for char in prefix):
            raise ValueError("Prefix must be non-empty and must not contain whitespace")

        self._cache[scope_id] = prefix
        logger.info(f"Prefix for {scope_id} set to '{prefix}'")

        if self._writer is not None:
            await self._writer(scope_id, prefix)

    def invalidate(self, scope_id: int | None = None) -> None:
        """Drop one cached prefix, or all of them."""
        if scope_id is None:
            self._cache.clear()
        else:
            self._cache.pop(scope_id, None)
