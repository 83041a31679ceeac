"""CacheStore protocol - one serialized snapshot on disk."""

from __future__ import annotations

from typing import Protocol


class CacheStore(Protocol):
    """Holds exactly one serialized snapshot."""

    async def read(self) -> bytes:
        """Return the raw cache content. Raises CacheNotFound."""
        ...

    async def write(self, data: str) -> None:
        """Atomically replace the cache content. Raises CacheWriteFailed."""
        ...

    async def delete(self) -> None:
        """Remove the cache. Raises CacheNotFound."""
        ...
