"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from hindsight_scraper.models.config import Deployment, ScraperConfig


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "HINDSIGHT_",
) -> ScraperConfig:
    """Load scraper configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (HINDSIGHT_RPC_URL_HTTP, etc.)
        2. TOML config file
        3. Defaults from ScraperConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cfg = ScraperConfig()

    # ── Scraper section ────────────────────────────────────
    scraper = raw.get("scraper", {})
    if v := scraper.get("deployment"):
        cfg.deployment = Deployment(v)
    if (v := scraper.get("window_size")) is not None:
        cfg.window_size = int(v)
    if v := scraper.get("resolve_concurrency"):
        cfg.resolve_concurrency = int(v)
    if v := scraper.get("log_level"):
        cfg.log_level = str(v)

    # ── Ethereum section ───────────────────────────────────
    ethereum = raw.get("ethereum", {})
    if v := ethereum.get("rpc_url_http"):
        cfg.rpc_url_http = str(v)
    if v := ethereum.get("rpc_url_ws"):
        cfg.rpc_url_ws = str(v)
    if v := ethereum.get("auth_signer_private_key"):
        cfg.auth_signer_private_key = str(v)
    if v := ethereum.get("request_timeout"):
        cfg.request_timeout = int(v)

    # ── MEV-Share section ──────────────────────────────────
    mev_share = raw.get("mev_share", {})
    if v := mev_share.get("api_url"):
        cfg.mev_share_url = str(v)
    if v := mev_share.get("timeout"):
        cfg.mev_share_timeout = int(v)

    # ── Storage section ────────────────────────────────────
    storage = raw.get("storage", {})
    if v := storage.get("data_dir"):
        cfg.data_dir = str(v)

    # ── Environment variable overrides (highest priority) ──
    if url := os.environ.get(f"{env_prefix}RPC_URL_HTTP"):
        cfg.rpc_url_http = url
    if url := os.environ.get(f"{env_prefix}RPC_URL_WS"):
        cfg.rpc_url_ws = url
    if key := os.environ.get(f"{env_prefix}AUTH_SIGNER_PRIVATE_KEY"):
        cfg.auth_signer_private_key = key
    if deployment := os.environ.get(f"{env_prefix}DEPLOYMENT"):
        cfg.deployment = Deployment(deployment)
    if window := os.environ.get(f"{env_prefix}WINDOW_SIZE"):
        cfg.window_size = int(window)
    if url := os.environ.get(f"{env_prefix}MEV_SHARE_URL"):
        cfg.mev_share_url = url
    if data_dir := os.environ.get(f"{env_prefix}DATA_DIR"):
        cfg.data_dir = data_dir

    # Expand ~ in paths
    cfg.data_dir = str(Path(cfg.data_dir).expanduser())

    return cfg
