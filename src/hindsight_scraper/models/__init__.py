"""Data models for the hindsight scraper."""

from hindsight_scraper.models.events import (
    EventHistoryEntry,
    EventHistoryInfo,
    EventLog,
    HintTransaction,
)
from hindsight_scraper.models.records import (
    CacheSnapshot,
    Materialization,
    PipelineResult,
    PipelineState,
    ResolvedTransaction,
    TopicFilterResult,
)
from hindsight_scraper.models.config import (
    DEFAULT_WINDOW_SIZES,
    MEV_SHARE_URLS,
    Deployment,
    ScraperConfig,
)

__all__ = [
    "EventHistoryEntry", "EventHistoryInfo", "EventLog", "HintTransaction",
    "CacheSnapshot", "Materialization", "PipelineResult", "PipelineState",
    "ResolvedTransaction", "TopicFilterResult",
    "DEFAULT_WINDOW_SIZES", "MEV_SHARE_URLS", "Deployment", "ScraperConfig",
]
