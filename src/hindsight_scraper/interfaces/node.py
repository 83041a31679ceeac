"""Node protocols - Ethereum connection and transaction lookups."""

from __future__ import annotations

from typing import Protocol

from hindsight_scraper.models.records import ResolvedTransaction


class TransactionResolver(Protocol):
    """Resolves a transaction hash to the full transaction."""

    async def get_transaction(self, tx_hash: str) -> ResolvedTransaction | None:
        """Return the transaction, or None if the node does not know it."""
        ...


class NodeConnection(Protocol):
    """Connection to an Ethereum node."""

    async def get_block_number(self) -> int:
        ...

    async def get_chain_id(self) -> int:
        ...

    async def destroy(self) -> None:
        """Release the underlying connection resources."""
        ...
