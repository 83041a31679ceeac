"""MEV-Share history API client - GET /api/v1/history[/info] over httpx."""

from __future__ import annotations

import logging

import httpx

from hindsight_scraper.models.config import MEV_SHARE_URLS
from hindsight_scraper.models.events import EventHistoryEntry, EventHistoryInfo

log = logging.getLogger(__name__)


def mev_share_url_for_chain(chain_id: int) -> str:
    """Return the MEV-Share API base URL for a chain id."""
    try:
        return MEV_SHARE_URLS[chain_id]
    except KeyError:
        raise ValueError(f"MEV-Share is not available on chain {chain_id}") from None


class MevShareHistoryClient:
    """Read-only client for the MEV-Share event history endpoints.

    Errors are not caught here: httpx errors and malformed payloads
    propagate to the caller.
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=10))

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, endpoint: str) -> str:
        return f"{self._base_url}/api/v1/{endpoint}"

    async def get_event_history_info(self) -> EventHistoryInfo:
        resp = await self._client.get(self._url("history/info"))
        resp.raise_for_status()
        info = EventHistoryInfo.from_dict(resp.json())
        log.debug(
            "History info: %d events, blocks %d-%d, maxLimit %d",
            info.count, info.min_block, info.max_block, info.max_limit,
        )
        return info

    async def get_event_history(
        self, block_start: int, limit: int, offset: int,
    ) -> list[EventHistoryEntry]:
        resp = await self._client.get(
            self._url("history"),
            params={"blockStart": block_start, "limit": limit, "offset": offset},
        )
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, list):
            raise ValueError(f"expected a list of events, got {type(data).__name__}")
        return [EventHistoryEntry.from_dict(d) for d in data]

    async def close(self) -> None:
        await self._client.aclose()
