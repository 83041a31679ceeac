"""MEV-Share history API access and pagination."""

from hindsight_scraper.mevshare.client import MevShareHistoryClient, mev_share_url_for_chain
from hindsight_scraper.mevshare.fetcher import HistoryFetcher

__all__ = ["MevShareHistoryClient", "mev_share_url_for_chain", "HistoryFetcher"]
