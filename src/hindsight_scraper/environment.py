"""Connection and credential capability, resolved once before any network call."""

from __future__ import annotations

from dataclasses import dataclass

from eth_account import Account
from eth_account.signers.local import LocalAccount

from hindsight_scraper.errors import ConfigMissing
from hindsight_scraper.models.config import ScraperConfig


@dataclass(frozen=True)
class Environment:
    """Validated node endpoints and the Flashbots auth signer."""

    rpc_url_http: str
    rpc_url_ws: str
    auth_signer: LocalAccount

    @property
    def signer_address(self) -> str:
        return self.auth_signer.address

    @classmethod
    def from_config(cls, cfg: ScraperConfig) -> Environment:
        """Raises ConfigMissing if an endpoint or the signer key is absent."""
        missing = []
        if not cfg.rpc_url_http:
            missing.append("RPC_URL_HTTP")
        if not cfg.auth_signer_private_key:
            missing.append("AUTH_SIGNER_PRIVATE_KEY")
        if missing:
            raise ConfigMissing(missing)

        try:
            signer = Account.from_key(cfg.auth_signer_private_key)
        except Exception as exc:
            raise ConfigMissing(
                ["AUTH_SIGNER_PRIVATE_KEY"], "not a valid private key",
            ) from exc

        return cls(
            rpc_url_http=cfg.rpc_url_http,
            rpc_url_ws=cfg.rpc_url_ws,
            auth_signer=signer,
        )
