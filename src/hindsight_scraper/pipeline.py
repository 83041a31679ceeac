"""Pipeline orchestrator - wires the cache, fetcher, filter and materializer together."""

from __future__ import annotations

import logging

from hindsight_scraper.environment import Environment
from hindsight_scraper.errors import (
    CacheCorrupt,
    CacheNotFound,
    CacheWriteFailed,
    ConfigMissing,
    FetchFailed,
)
from hindsight_scraper.eth.materializer import TransactionMaterializer, resolved
from hindsight_scraper.eth.node import Web3Node
from hindsight_scraper.interfaces.cache import CacheStore
from hindsight_scraper.mevshare.client import MevShareHistoryClient, mev_share_url_for_chain
from hindsight_scraper.mevshare.fetcher import HistoryFetcher
from hindsight_scraper.models.config import ScraperConfig
from hindsight_scraper.models.records import CacheSnapshot, PipelineResult, PipelineState
from hindsight_scraper.policy.filter import TopicFilter
from hindsight_scraper.storage.cache import FileEventCache, decode_snapshot, encode_snapshot

log = logging.getLogger(__name__)

CLEAN_MODES = frozenset({"clean", "delete"})


def is_clean_mode(mode: str | None) -> bool:
    return mode is not None and mode.lower() in CLEAN_MODES


async def delete_cache(cache: CacheStore) -> bool:
    """Delete the cache. Returns False if there was nothing to delete."""
    log.info("Deleting cache data")
    try:
        await cache.delete()
    except CacheNotFound as exc:
        log.warning("Nothing to delete: %s", exc)
        return False
    return True


async def load_snapshot(cache: CacheStore) -> CacheSnapshot | None:
    """Read and decode the cache. A missing or corrupt cache counts as a miss."""
    try:
        raw = await cache.read()
    except CacheNotFound:
        log.info("No cache file")
        return None
    try:
        return decode_snapshot(raw)
    except CacheCorrupt as exc:
        log.warning("Ignoring corrupt cache: %s", exc)
        return None


def cached_result(snapshot: CacheSnapshot) -> PipelineResult:
    log.info(
        "Loaded cached data: %d events, %d transactions",
        len(snapshot.events), len(snapshot.transactions),
    )
    return PipelineResult(
        state=PipelineState.CACHED,
        events=snapshot.events,
        transactions=snapshot.transactions,
    )


class HindsightPipeline:
    """Event history retrieval with a read-through snapshot cache.

    Normal mode replays the cached snapshot when one can be read. Otherwise
    it fetches the history window, filters it by topic, resolves the matched
    transactions and writes a new snapshot. Nothing is written unless every
    live step succeeded.
    """

    def __init__(
        self,
        cache: CacheStore,
        fetcher: HistoryFetcher,
        topic_filter: TopicFilter,
        materializer: TransactionMaterializer,
    ) -> None:
        self.cache = cache
        self.fetcher = fetcher
        self.topic_filter = topic_filter
        self.materializer = materializer

    async def clean(self) -> bool:
        return await delete_cache(self.cache)

    async def run(self) -> PipelineResult:
        snapshot = await load_snapshot(self.cache)
        if snapshot is not None:
            return cached_result(snapshot)
        return await self.run_live()

    async def run_live(self) -> PipelineResult:
        """Fetch, filter and resolve, then replace the cache. Skips the cache read."""
        result = await self._collect()

        try:
            await self.cache.write(
                encode_snapshot(CacheSnapshot(events=result.events, transactions=result.transactions))
            )
        except CacheWriteFailed as exc:
            exc.result = result
            raise
        return result

    async def _collect(self) -> PipelineResult:
        events = await self.fetcher.fetch()
        log.info("Total events: %d", len(events))

        filtered = self.topic_filter.filter(events)
        for topic, count in filtered.top(10):
            log.debug("topic %s seen %d times", topic, count)

        materializations = await self.materializer.materialize(filtered.matched)
        return PipelineResult(
            state=PipelineState.LIVE,
            events=filtered.matched,
            transactions=resolved(materializations),
            materializations=materializations,
            tally=filtered.tally,
            total_fetched=len(events),
        )


async def clean_cache(cfg: ScraperConfig) -> bool:
    """Entry point for clean mode. Touches no network collaborator."""
    return await delete_cache(FileEventCache(cfg.cache_path))


async def _connect_node(cfg: ScraperConfig, env: Environment) -> Web3Node:
    try:
        return await Web3Node.connect(env.rpc_url_http, env.rpc_url_ws, cfg.request_timeout)
    except Exception as exc:
        raise FetchFailed(f"could not connect to node: {exc}") from exc


async def _resolve_mev_share_url(node: Web3Node) -> str:
    try:
        chain_id = await node.get_chain_id()
    except Exception as exc:
        raise FetchFailed(f"could not read chain id from node: {exc}") from exc
    try:
        return mev_share_url_for_chain(chain_id)
    except ValueError as exc:
        raise ConfigMissing(["MEV_SHARE_URL"], str(exc)) from exc


async def run_scraper(cfg: ScraperConfig, env: Environment) -> PipelineResult:
    """Entry point for normal mode.

    A readable cache is returned without opening any connection. On a miss
    the node and history client are built, the live run executes, and both
    are released again.
    """
    log.info("Starting hindsight scraper")
    log.info("  Deployment: %s", cfg.deployment.value)
    log.info("  Window: %d blocks", cfg.effective_window_size)
    log.info("  Auth signer: %s", env.signer_address)
    log.info("  Cache: %s", cfg.cache_path)

    cache = FileEventCache(cfg.cache_path)
    snapshot = await load_snapshot(cache)
    if snapshot is not None:
        return cached_result(snapshot)

    node: Web3Node | None = None
    history: MevShareHistoryClient | None = None
    try:
        node = await _connect_node(cfg, env)
        api_url = cfg.mev_share_url or await _resolve_mev_share_url(node)
        log.info("  MEV-Share: %s", api_url)
        history = MevShareHistoryClient(api_url, cfg.mev_share_timeout)

        pipeline = HindsightPipeline(
            cache=cache,
            fetcher=HistoryFetcher(history, node, cfg.effective_window_size),
            topic_filter=TopicFilter(),
            materializer=TransactionMaterializer(node, cfg.resolve_concurrency),
        )
        return await pipeline.run_live()
    finally:
        if history is not None:
            await history.close()
        if node is not None:
            await node.destroy()
