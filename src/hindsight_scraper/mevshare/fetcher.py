"""History fetcher - pages through the event history for a recent-block window."""

from __future__ import annotations

import logging

from hindsight_scraper.errors import FetchFailed
from hindsight_scraper.interfaces.history import HistorySource
from hindsight_scraper.interfaces.node import NodeConnection
from hindsight_scraper.models.events import EventHistoryEntry

log = logging.getLogger(__name__)


class HistoryFetcher:
    """Collects every history entry in the last ``window_size`` blocks.

    Pages are requested strictly one after another with
    ``offset = page_index * max_limit`` until a page comes back shorter than
    ``max_limit``. Entries that land in the feed while a scan is running can
    shift page boundaries and show up twice or not at all; that is accepted.

    Any failure aborts the whole fetch with :class:`FetchFailed`.
    """

    def __init__(
        self,
        source: HistorySource,
        node: NodeConnection,
        window_size: int,
    ) -> None:
        if window_size < 0:
            raise ValueError("window_size must be >= 0")
        self._source = source
        self._node = node
        self._window_size = window_size

    @property
    def window_size(self) -> int:
        return self._window_size

    async def fetch(self) -> list[EventHistoryEntry]:
        try:
            info = await self._source.get_event_history_info()
            latest_block = await self._node.get_block_number()
        except Exception as exc:
            raise FetchFailed(f"could not start history fetch: {exc}") from exc

        max_limit = info.max_limit
        if max_limit <= 0:
            raise FetchFailed(f"history source reported invalid maxLimit {max_limit}")

        window_start = max(latest_block - self._window_size, 0)
        log.info(
            "Fetching event history from block %d (latest %d, page size %d)",
            window_start, latest_block, max_limit,
        )

        events: list[EventHistoryEntry] = []
        page_index = 0
        while True:
            offset = page_index * max_limit
            try:
                page = await self._source.get_event_history(
                    block_start=window_start, limit=max_limit, offset=offset,
                )
            except Exception as exc:
                raise FetchFailed(
                    f"history page {page_index} (offset {offset}) failed: {exc}"
                ) from exc
            page_index += 1
            events.extend(page)
            log.info("Fetched %d events (%d events total)", len(page), len(events))
            if len(page) < max_limit:
                break

        log.info("History fetch complete: %d events in %d pages", len(events), page_index)
        return events
