"""HistorySource protocol - paginated MEV-Share event history."""

from __future__ import annotations

from typing import Protocol

from hindsight_scraper.models.events import EventHistoryEntry, EventHistoryInfo


class HistorySource(Protocol):
    """Remote source of historical event hints with a capped page size."""

    async def get_event_history_info(self) -> EventHistoryInfo:
        """Describe the history feed, including the page-size cap."""
        ...

    async def get_event_history(
        self, block_start: int, limit: int, offset: int,
    ) -> list[EventHistoryEntry]:
        """Fetch one page of events starting at ``block_start``."""
        ...
