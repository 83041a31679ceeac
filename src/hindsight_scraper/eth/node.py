"""Ethereum node connection over web3.py (HTTP, or WebSocket when configured)."""

from __future__ import annotations

import logging

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3, WebSocketProvider
from web3.exceptions import TransactionNotFound

from hindsight_scraper.eth.encoding import to_json_dict
from hindsight_scraper.models.records import ResolvedTransaction

log = logging.getLogger(__name__)


class Web3Node:
    """Implements NodeConnection and TransactionResolver on ``AsyncWeb3``.

    Use :meth:`connect` to build one; a WebSocket provider needs an explicit
    connect before the first request.
    """

    def __init__(self, w3: AsyncWeb3) -> None:
        self._w3 = w3

    @classmethod
    async def connect(
        cls,
        rpc_url_http: str,
        rpc_url_ws: str = "",
        request_timeout: int = 30,
    ) -> Web3Node:
        if rpc_url_ws:
            w3 = AsyncWeb3(WebSocketProvider(rpc_url_ws))
            await w3.provider.connect()
            log.info("Connected to node over WebSocket: %s", rpc_url_ws)
        else:
            w3 = AsyncWeb3(
                AsyncHTTPProvider(
                    rpc_url_http,
                    request_kwargs={"timeout": aiohttp.ClientTimeout(total=request_timeout)},
                )
            )
            log.info("Using node over HTTP: %s", rpc_url_http)
        return cls(w3)

    @property
    def w3(self) -> AsyncWeb3:
        return self._w3

    async def get_block_number(self) -> int:
        return await self._w3.eth.block_number

    async def get_chain_id(self) -> int:
        return await self._w3.eth.chain_id

    async def get_transaction(self, tx_hash: str) -> ResolvedTransaction | None:
        try:
            tx = await self._w3.eth.get_transaction(tx_hash)
        except TransactionNotFound:
            return None
        return to_json_dict(tx)

    async def destroy(self) -> None:
        disconnect = getattr(self._w3.provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()
        log.debug("Node connection closed")
