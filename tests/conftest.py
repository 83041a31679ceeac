"""Shared fixtures for hindsight_scraper tests."""

from __future__ import annotations

import pytest

from hindsight_scraper.eth.materializer import TransactionMaterializer
from hindsight_scraper.models.config import Deployment, ScraperConfig
from hindsight_scraper.mevshare.fetcher import HistoryFetcher
from hindsight_scraper.pipeline import HindsightPipeline
from hindsight_scraper.policy.filter import TopicFilter

from tests.factories import (
    TRANSFER,
    UNIV2_SWAP,
    UNIV2_SYNC,
    UNIV3_SWAP,
    make_event,
    make_transaction,
    tx_hash,
)
from tests.mocks import (
    MemoryCache,
    MockHistorySource,
    MockNode,
    SpyFetcher,
    SpyFilter,
    SpyMaterializer,
)

# Well-known development key (hardhat/anvil account #0)
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_SIGNER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

ENV_VARS = (
    "RPC_URL_HTTP", "RPC_URL_WS", "AUTH_SIGNER_PRIVATE_KEY", "DEPLOYMENT",
    "WINDOW_SIZE", "MEV_SHARE_URL", "DATA_DIR",
)


def make_test_config(**overrides) -> ScraperConfig:
    """Build a ScraperConfig suitable for testing."""
    defaults = dict(
        deployment=Deployment.DEVELOPMENT,
        window_size=100,
        resolve_concurrency=1,
        rpc_url_http="http://127.0.0.1:8545",
        auth_signer_private_key=TEST_PRIVATE_KEY,
        mev_share_url="https://mev-share.example",
        data_dir="/tmp/hindsight-test",
    )
    defaults.update(overrides)
    return ScraperConfig(**defaults)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep developer env vars out of config tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(f"HINDSIGHT_{name}", raising=False)


@pytest.fixture
def test_config(tmp_path):
    return make_test_config(data_dir=str(tmp_path / "data"))


@pytest.fixture
def history_events():
    """Seven events: 1, 3, 4, 6 touch Uniswap, 4 twice."""
    return [
        make_event(1, signatures=(UNIV3_SWAP,)),
        make_event(2, signatures=(TRANSFER,)),
        make_event(3, signatures=(TRANSFER, UNIV2_SYNC)),
        make_event(4, signatures=(UNIV2_SYNC, UNIV2_SWAP)),
        make_event(5, signatures=()),
        make_event(6, signatures=(UNIV3_SWAP,)),
        make_event(7, signatures=(TRANSFER, TRANSFER)),
    ]


@pytest.fixture
def mock_source(history_events):
    return MockHistorySource(history_events, max_limit=3)


@pytest.fixture
def mock_node():
    return MockNode(
        block_number=17_000_000,
        transactions={tx_hash(n): make_transaction(tx_hash(n)) for n in range(1, 8)},
    )


@pytest.fixture
def mock_cache():
    return MemoryCache()


@pytest.fixture
def spies(mock_source, mock_node):
    return (
        SpyFetcher(HistoryFetcher(mock_source, mock_node, window_size=100)),
        SpyFilter(TopicFilter()),
        SpyMaterializer(TransactionMaterializer(mock_node)),
    )


@pytest.fixture
def pipeline(mock_cache, spies):
    """HindsightPipeline wired to mocks, with call-counting spies."""
    fetcher, topic_filter, materializer = spies
    return HindsightPipeline(
        cache=mock_cache,
        fetcher=fetcher,
        topic_filter=topic_filter,
        materializer=materializer,
    )
