"""Pipeline orchestrator: cache hit vs live run, clean mode, failure paths."""

from __future__ import annotations

import json

import pytest

from hindsight_scraper import pipeline as pipeline_module
from hindsight_scraper.environment import Environment
from hindsight_scraper.errors import CacheNotFound, CacheWriteFailed, ConfigMissing, FetchFailed
from hindsight_scraper.eth.materializer import TransactionMaterializer
from hindsight_scraper.eth.node import Web3Node
from hindsight_scraper.models.records import CacheSnapshot, PipelineState
from hindsight_scraper.mevshare.fetcher import HistoryFetcher
from hindsight_scraper.pipeline import HindsightPipeline, clean_cache, is_clean_mode, run_scraper
from hindsight_scraper.policy.filter import TopicFilter
from hindsight_scraper.storage.cache import FileEventCache, decode_snapshot, encode_snapshot

from tests.conftest import make_test_config
from tests.factories import UNIV2_SYNC, make_event, make_transaction, tx_hash
from tests.mocks import MemoryCache, MockHistorySource, MockNode


# ── Live run ──────────────────────────────────────────────────────


async def test_live_run_filters_resolves_and_writes(pipeline, mock_cache, spies):
    result = await pipeline.run()

    assert result.state == PipelineState.LIVE
    assert result.total_fetched == 7
    assert [e.hash for e in result.events] == [tx_hash(n) for n in (1, 3, 4, 6)]
    assert [tx["hash"] for tx in result.transactions] == [tx_hash(n) for n in (1, 3, 4, 6)]
    assert result.tally[UNIV2_SYNC] == 2

    # Snapshot written once with the same content
    assert len(mock_cache.writes) == 1
    written = decode_snapshot(mock_cache.writes[0].encode())
    assert written.events == result.events
    assert written.transactions == result.transactions

    assert [s.calls for s in spies] == [1, 1, 1]


async def test_unresolved_transaction_keeps_event(mock_cache, mock_source, spies):
    node = MockNode(
        transactions={tx_hash(n): make_transaction(tx_hash(n)) for n in (1, 4, 6)},
        failing={tx_hash(4)},
    )
    fetcher, topic_filter, _ = spies
    pipeline = HindsightPipeline(
        cache=mock_cache,
        fetcher=fetcher,
        topic_filter=topic_filter,
        materializer=TransactionMaterializer(node),
    )

    result = await pipeline.run()

    assert len(result.events) == 4
    assert [tx["hash"] for tx in result.transactions] == [tx_hash(1), tx_hash(6)]
    assert result.failed_resolutions == 2

    written = json.loads(mock_cache.writes[0])
    assert len(written["events"]) == 4
    assert len(written["transactions"]) == 2


# ── Cache hit ─────────────────────────────────────────────────────


async def test_cached_snapshot_skips_network(spies):
    snapshot = CacheSnapshot(
        events=[make_event(42)],
        transactions=[make_transaction(tx_hash(42), value=2**64 + 7)],
    )
    cache = MemoryCache(encode_snapshot(snapshot))
    fetcher, topic_filter, materializer = spies
    pipeline = HindsightPipeline(cache, fetcher, topic_filter, materializer)

    result = await pipeline.run()

    assert result.state == PipelineState.CACHED
    assert result.events == snapshot.events
    assert result.transactions == snapshot.transactions
    assert [s.calls for s in spies] == [0, 0, 0]
    assert cache.writes == []


async def test_corrupt_cache_falls_through_to_live(spies):
    cache = MemoryCache("{truncated")
    fetcher, topic_filter, materializer = spies
    pipeline = HindsightPipeline(cache, fetcher, topic_filter, materializer)

    result = await pipeline.run()

    assert result.state == PipelineState.LIVE
    assert len(cache.writes) == 1
    assert decode_snapshot(cache.content).events == result.events


async def test_run_live_ignores_existing_cache(spies):
    cache = MemoryCache(encode_snapshot(CacheSnapshot(events=[make_event(42)], transactions=[])))
    fetcher, topic_filter, materializer = spies
    pipeline = HindsightPipeline(cache, fetcher, topic_filter, materializer)

    result = await pipeline.run_live()

    assert result.state == PipelineState.LIVE
    assert cache.reads == 0
    assert decode_snapshot(cache.content).events == result.events


async def test_second_run_replays_first(tmp_path, mock_source, mock_node):
    cache = FileEventCache(tmp_path / "cache.json")

    def _pipeline() -> HindsightPipeline:
        return HindsightPipeline(
            cache=cache,
            fetcher=HistoryFetcher(mock_source, mock_node, window_size=100),
            topic_filter=TopicFilter(),
            materializer=TransactionMaterializer(mock_node),
        )

    first = await _pipeline().run()
    calls_after_first = len(mock_source.page_calls)
    second = await _pipeline().run()

    assert first.state == PipelineState.LIVE
    assert second.state == PipelineState.CACHED
    assert second.events == first.events
    assert second.transactions == first.transactions
    assert len(mock_source.page_calls) == calls_after_first


# ── Failures ──────────────────────────────────────────────────────


async def test_fetch_failure_writes_nothing(mock_cache, mock_node, history_events):
    source = MockHistorySource(history_events, max_limit=3, fail_on_call=2)
    pipeline = HindsightPipeline(
        cache=mock_cache,
        fetcher=HistoryFetcher(source, mock_node, window_size=100),
        topic_filter=TopicFilter(),
        materializer=TransactionMaterializer(mock_node),
    )

    with pytest.raises(FetchFailed):
        await pipeline.run()
    assert mock_cache.writes == []
    assert mock_node.tx_calls == []


async def test_cache_write_failure_carries_result(mock_source, mock_node):
    cache = MemoryCache(fail_write=True)
    pipeline = HindsightPipeline(
        cache=cache,
        fetcher=HistoryFetcher(mock_source, mock_node, window_size=100),
        topic_filter=TopicFilter(),
        materializer=TransactionMaterializer(mock_node),
    )

    with pytest.raises(CacheWriteFailed) as exc_info:
        await pipeline.run()

    result = exc_info.value.result
    assert result is not None
    assert result.state == PipelineState.LIVE
    assert len(result.events) == 4


# ── Clean mode ────────────────────────────────────────────────────


@pytest.mark.parametrize("mode,expected", [
    ("clean", True), ("delete", True), ("DELETE", True),
    ("run", False), ("", False), (None, False),
])
def test_is_clean_mode(mode, expected):
    assert is_clean_mode(mode) is expected


async def test_clean_without_cache_touches_nothing(pipeline, mock_cache, spies, mock_source):
    assert await pipeline.clean() is False

    assert mock_cache.deletes == 1
    assert [s.calls for s in spies] == [0, 0, 0]
    assert mock_source.info_calls == 0


async def test_clean_removes_cache_so_next_read_misses(pipeline, mock_cache):
    await pipeline.run()
    assert mock_cache.content is not None

    assert await pipeline.clean() is True
    with pytest.raises(CacheNotFound):
        await mock_cache.read()


async def test_clean_cache_entry_point(test_config):
    cache = FileEventCache(test_config.cache_path)

    assert await clean_cache(test_config) is False

    await cache.write(encode_snapshot(CacheSnapshot(events=[], transactions=[])))
    assert await clean_cache(test_config) is True
    assert not await cache.exists()


# ── Normal-mode entry point ───────────────────────────────────────


def _wire(monkeypatch, node, source, connect_error=None):
    """Route run_scraper's node and history client to mocks. Returns call logs."""
    connects: list[str] = []
    urls: list[str] = []

    async def _connect(rpc_url_http, rpc_url_ws="", request_timeout=30):
        connects.append(rpc_url_http)
        if connect_error is not None:
            raise connect_error
        return node

    def _client(base_url, timeout=30):
        urls.append(base_url)
        return source

    monkeypatch.setattr(Web3Node, "connect", _connect)
    monkeypatch.setattr(pipeline_module, "MevShareHistoryClient", _client)
    return connects, urls


async def test_run_scraper_replays_cache_with_node_down(tmp_path, monkeypatch, mock_source):
    cfg = make_test_config(data_dir=str(tmp_path / "data"), mev_share_url="")
    snapshot = CacheSnapshot(events=[make_event(9)], transactions=[make_transaction(tx_hash(9))])
    await FileEventCache(cfg.cache_path).write(encode_snapshot(snapshot))
    connects, urls = _wire(
        monkeypatch, MockNode(), mock_source, connect_error=ConnectionError("node down"),
    )

    result = await run_scraper(cfg, Environment.from_config(cfg))

    assert result.state == PipelineState.CACHED
    assert result.events == snapshot.events
    assert connects == []
    assert urls == []
    assert mock_source.info_calls == 0


async def test_run_scraper_live_derives_url_and_releases(tmp_path, monkeypatch, mock_source, mock_node):
    cfg = make_test_config(data_dir=str(tmp_path / "data"), mev_share_url="")
    connects, urls = _wire(monkeypatch, mock_node, mock_source)

    result = await run_scraper(cfg, Environment.from_config(cfg))

    assert result.state == PipelineState.LIVE
    assert [e.hash for e in result.events] == [tx_hash(n) for n in (1, 3, 4, 6)]
    assert connects == ["http://127.0.0.1:8545"]
    assert urls == ["https://mev-share.flashbots.net"]
    assert mock_source.closed
    assert mock_node.destroyed
    assert cfg.cache_path.exists()


async def test_run_scraper_releases_on_fetch_failure(tmp_path, monkeypatch, mock_node):
    cfg = make_test_config(data_dir=str(tmp_path / "data"))
    source = MockHistorySource(fail_info=True)
    _, urls = _wire(monkeypatch, mock_node, source)

    with pytest.raises(FetchFailed):
        await run_scraper(cfg, Environment.from_config(cfg))

    assert urls == ["https://mev-share.example"]
    assert source.closed
    assert mock_node.destroyed
    assert not cfg.cache_path.exists()


async def test_run_scraper_unknown_chain(tmp_path, monkeypatch, mock_source):
    cfg = make_test_config(data_dir=str(tmp_path / "data"), mev_share_url="")
    node = MockNode(chain_id=137)
    _, urls = _wire(monkeypatch, node, mock_source)

    with pytest.raises(ConfigMissing) as exc_info:
        await run_scraper(cfg, Environment.from_config(cfg))

    assert exc_info.value.names == ["MEV_SHARE_URL"]
    assert urls == []
    assert node.destroyed


async def test_run_scraper_connect_failure_is_fetch_failed(tmp_path, monkeypatch, mock_source):
    cfg = make_test_config(data_dir=str(tmp_path / "data"))
    _wire(monkeypatch, MockNode(), mock_source, connect_error=OSError("connection refused"))

    with pytest.raises(FetchFailed, match="could not connect to node"):
        await run_scraper(cfg, Environment.from_config(cfg))

    assert mock_source.info_calls == 0
    assert not cfg.cache_path.exists()
