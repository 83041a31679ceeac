"""Ethereum node access and transaction materialization."""

from hindsight_scraper.eth.materializer import TransactionMaterializer, resolved
from hindsight_scraper.eth.node import Web3Node

__all__ = ["TransactionMaterializer", "resolved", "Web3Node"]
