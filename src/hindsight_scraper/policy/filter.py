"""Topic filter - selects events whose logs carry an allow-listed event signature."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from hindsight_scraper.models.events import EventHistoryEntry
from hindsight_scraper.models.records import TopicFilterResult

log = logging.getLogger(__name__)

UNISWAP_TOPICS: tuple[str, ...] = (
    # univ3 Swap(address,address,int256,int256,uint160,uint128,int24)
    "0xc42079f94a6350d7e6235f29174924f928cc2ac818eb64fed8004e115fbcca67",
    # univ2 Sync(uint112,uint112)
    "0x1c411e9a96e071241c2f21f7726b17ae89e3cab4c78be50e062b03a9fffbbad1",
    # univ2 Swap(address,uint256,uint256,uint256,uint256,address)
    "0xd78ad95fa46c994b6551d0da85fc275fe613ce37657fb8d5e3d130840159d822",
)


class TopicFilter:
    """Matches events on the first topic of each of their logs.

    Only ``topics[0]`` is inspected. An event is selected once even when
    several of its logs match, and an entry identical to one already scanned
    is skipped. Every first topic seen is tallied, matched or not, and
    allow-listed topics start at zero.
    """

    def __init__(self, topics: Iterable[str] = UNISWAP_TOPICS) -> None:
        self._topics: tuple[str, ...] = tuple(t.lower() for t in topics)
        self._topic_set = frozenset(self._topics)

    @property
    def topics(self) -> tuple[str, ...]:
        return self._topics

    def filter(self, events: Sequence[EventHistoryEntry]) -> TopicFilterResult:
        tally: dict[str, int] = {t: 0 for t in self._topics}
        matched: list[EventHistoryEntry] = []
        seen: set[EventHistoryEntry] = set()

        for event in events:
            # Identical entries repeat when the feed shifts across a page boundary
            if event in seen:
                log.debug("Skipping repeated event %s at block %d", event.hash, event.block)
                continue
            seen.add(event)

            is_match = False
            for entry in event.logs:
                signature = entry.signature
                if signature is None:
                    continue
                signature = signature.lower()
                tally[signature] = tally.get(signature, 0) + 1
                if signature in self._topic_set:
                    is_match = True
            if is_match:
                matched.append(event)

        log.info("Matched %d of %d events on %d topics", len(matched), len(events), len(self._topics))
        return TopicFilterResult(matched=matched, tally=tally)
