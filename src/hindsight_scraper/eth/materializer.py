"""Transaction materializer - resolves matched events to full transactions."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from hindsight_scraper.errors import ResolutionFailed
from hindsight_scraper.interfaces.node import TransactionResolver
from hindsight_scraper.models.events import EventHistoryEntry
from hindsight_scraper.models.records import Materialization, ResolvedTransaction

log = logging.getLogger(__name__)


class TransactionMaterializer:
    """Looks up the transaction behind each event hint.

    Returns one :class:`Materialization` per input event, in input order.
    A failed lookup is recorded on its marker and never aborts the batch;
    the event itself stays eligible.

    With ``max_concurrent == 1`` lookups run one at a time in event order.
    Higher values run lookups concurrently under a semaphore.
    """

    def __init__(self, resolver: TransactionResolver, max_concurrent: int = 1) -> None:
        self._resolver = resolver
        self._max_concurrent = max(1, max_concurrent)

    async def materialize(
        self, events: Sequence[EventHistoryEntry],
    ) -> list[Materialization]:
        if self._max_concurrent == 1:
            results = [await self._resolve_one(e) for e in events]
        else:
            semaphore = asyncio.Semaphore(self._max_concurrent)

            async def _bounded(event: EventHistoryEntry) -> Materialization:
                async with semaphore:
                    return await self._resolve_one(event)

            results = list(await asyncio.gather(*(_bounded(e) for e in events)))

        failed = sum(1 for r in results if not r.success)
        log.info(
            "Resolved %d/%d transactions (%d failed)",
            len(results) - failed, len(results), failed,
        )
        return results

    async def _resolve_one(self, event: EventHistoryEntry) -> Materialization:
        try:
            tx = await self._lookup(event.hash)
        except ResolutionFailed as exc:
            log.warning("Could not resolve transaction %s: %s", exc.tx_hash, exc.reason)
            return Materialization(event_hash=event.hash, error=exc.reason)
        log.debug("tx found onchain\t%s", event.hash)
        return Materialization(event_hash=event.hash, transaction=tx)

    async def _lookup(self, tx_hash: str | None) -> ResolvedTransaction:
        if not tx_hash:
            raise ResolutionFailed(tx_hash, "event has no transaction hash")
        try:
            tx = await self._resolver.get_transaction(tx_hash)
        except Exception as exc:
            raise ResolutionFailed(tx_hash, f"lookup error: {exc}") from exc
        if tx is None:
            raise ResolutionFailed(tx_hash, "not found onchain")
        return tx


def resolved(materializations: Sequence[Materialization]) -> list[ResolvedTransaction]:
    """The successfully resolved transactions, in event order."""
    return [m.transaction for m in materializations if m.transaction is not None]
