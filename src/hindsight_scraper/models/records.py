"""Pipeline result records and the persisted cache snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from hindsight_scraper.models.events import EventHistoryEntry

# Full transaction as returned by the node, converted to plain JSON types.
ResolvedTransaction = dict[str, Any]


class PipelineState(str, Enum):
    """Where a normal-mode run got its data from."""

    CACHED = "cached"
    LIVE = "live"


@dataclass
class TopicFilterResult:
    """Events with at least one allow-listed topic, plus the topic tally."""

    matched: list[EventHistoryEntry]
    tally: dict[str, int]

    def top(self, n: int = 10) -> list[tuple[str, int]]:
        """Most frequently seen topics, highest count first."""
        ranked = sorted(self.tally.items(), key=lambda kv: kv[1], reverse=True)
        return ranked[:n]


@dataclass
class Materialization:
    """Outcome of resolving one event's transaction.

    Exactly one of ``transaction`` / ``error`` is set.
    """

    event_hash: str | None
    transaction: ResolvedTransaction | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.transaction is not None


@dataclass
class CacheSnapshot:
    """The unit persisted to the cache file.

    ``transactions`` holds only successful resolutions, so it is not
    index-aligned with ``events``. Use :meth:`transactions_by_event`.
    """

    events: list[EventHistoryEntry]
    transactions: list[ResolvedTransaction]

    def transactions_by_event(self) -> dict[str, ResolvedTransaction]:
        by_hash = {}
        for tx in self.transactions:
            tx_hash = tx.get("hash")
            if isinstance(tx_hash, str):
                by_hash[tx_hash.lower()] = tx
        return {
            e.hash: by_hash[e.hash]
            for e in self.events
            if e.hash is not None and e.hash in by_hash
        }


@dataclass
class PipelineResult:
    """What a normal-mode run produced (or replayed from cache)."""

    state: PipelineState
    events: list[EventHistoryEntry]
    transactions: list[ResolvedTransaction]
    materializations: list[Materialization] = field(default_factory=list)
    tally: dict[str, int] = field(default_factory=dict)
    total_fetched: int = 0

    @property
    def failed_resolutions(self) -> int:
        return sum(1 for m in self.materializations if not m.success)
