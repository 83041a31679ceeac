"""Configuration models for the scraper."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Deployment(str, Enum):
    """Deployment mode. Controls the default history window."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"


# Default number of recent blocks scanned per deployment
DEFAULT_WINDOW_SIZES = {
    Deployment.PRODUCTION: 10_000,
    Deployment.DEVELOPMENT: 1_000,
}

# MEV-Share API base URLs by chain id
MEV_SHARE_URLS = {
    1: "https://mev-share.flashbots.net",
    5: "https://mev-share-goerli.flashbots.net",
    11155111: "https://mev-share-sepolia.flashbots.net",
}


@dataclass
class ScraperConfig:
    """Complete scraper configuration."""

    # Scraper
    deployment: Deployment = Deployment.DEVELOPMENT
    window_size: int | None = None  # overrides the deployment default
    resolve_concurrency: int = 1
    log_level: str = "info"

    # Ethereum
    rpc_url_http: str = ""
    rpc_url_ws: str = ""
    auth_signer_private_key: str = ""  # loaded from env var HINDSIGHT_AUTH_SIGNER_PRIVATE_KEY
    request_timeout: int = 30  # seconds

    # MEV-Share
    mev_share_url: str = ""  # resolved from chain id when empty
    mev_share_timeout: int = 30  # seconds

    # Storage
    data_dir: str = "~/.hindsight_scraper/data"

    @property
    def effective_window_size(self) -> int:
        if self.window_size is not None:
            return self.window_size
        return DEFAULT_WINDOW_SIZES[self.deployment]

    @property
    def cache_path(self) -> Path:
        return Path(self.data_dir).expanduser() / "cache.json"
