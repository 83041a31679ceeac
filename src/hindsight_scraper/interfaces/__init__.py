"""Protocol interfaces for all hindsight_scraper components."""

from hindsight_scraper.interfaces.history import HistorySource
from hindsight_scraper.interfaces.node import NodeConnection, TransactionResolver
from hindsight_scraper.interfaces.cache import CacheStore

__all__ = [
    "HistorySource",
    "NodeConnection", "TransactionResolver",
    "CacheStore",
]
